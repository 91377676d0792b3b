"""Fan-out schedule for one-to-many dependencies."""

import math
from typing import List
from seedgraph.config.logging import get_logger

logger = get_logger(__name__)


def fanout_schedule(count: int) -> List[int]:
    """
    Halving batch sizes for a requested row count.

    Each batch shares one set of dependency values, so a few parents own most
    children. The loop halves (rounding up) the remaining quota and stops after
    the batch produced from a remaining quota of 1. The sizes always sum to at
    least ``count``.

    Args:
        count: Requested number of rows (must be positive)

    Returns:
        Batch sizes, e.g. 10 -> [5, 3, 2, 1, 1]
    """
    if count < 1:
        raise ValueError(f"count must be positive, got {count}")

    schedule = []
    remaining = count
    while True:
        batch = math.ceil(remaining / 2)
        schedule.append(batch)
        if remaining == 1:
            break
        remaining = batch

    logger.debug(f"Fan-out schedule for {count} rows: {schedule} (total {sum(schedule)})")
    return schedule
