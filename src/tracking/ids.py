"""
Task identifier allocation
"""

import random
from typing import Iterable, Optional

# Five to nine digit identifiers stay short enough to read in a note
ID_MIN = 10000
ID_MAX = 999999999


def allocate_identifier(existing: Iterable[int], rng: Optional[random.Random] = None) -> int:
    """
    Pick a new task identifier

    Uniqueness only holds against the identifiers passed in, so callers must
    hand over the full key set of the session store.

    Args:
        existing: Identifiers already in use
        rng: Random source (default: module-level random)

    Returns:
        Positive integer not present in existing
    """
    taken = set(existing)
    if len(taken) >= ID_MAX - ID_MIN + 1:
        raise RuntimeError("Task identifier space exhausted")

    rng = rng or random
    while True:
        candidate = rng.randint(ID_MIN, ID_MAX)
        if candidate not in taken:
            return candidate
