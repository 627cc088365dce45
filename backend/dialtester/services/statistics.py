"""
Summary statistics over recorded dial values.
"""
import math
from collections import Counter
from typing import Iterable

from dialtester.models.schemas.sessions import SessionStats


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round halves towards positive infinity, like a browser's ``Math.round``.

    Python's ``round`` uses banker's rounding, which would turn an average
    of 0.25 into 0.2 instead of 0.3.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_stats(values: Iterable[int]) -> SessionStats:
    """
    Compute highest, lowest, average and mode of a value sequence.

    An empty sequence yields zero for every field. The mode is the most
    frequent value; among equally frequent values the one seen first in
    input order wins.

    Args:
        values: Recorded values in capture order

    Returns:
        SessionStats
    """
    values = list(values)
    if not values:
        return SessionStats()

    # Counter preserves first-insertion order and max() keeps the first maximum
    frequency = Counter(values)
    mode = max(frequency, key=frequency.__getitem__)

    return SessionStats(
        highest=max(values),
        lowest=min(values),
        average=round_half_up(sum(values) / len(values), 1),
        mode=mode,
    )
