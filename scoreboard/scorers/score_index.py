"""Score Index Builder - groups raw score records by contestant.

Also home of the permissive numeric read used for score values: judges' writes
arrive as whatever the store returned (numbers, numeric strings, occasionally
junk), and a best-effort snapshot must still produce standings.
"""

import math
import re
from collections import defaultdict
from typing import Any, Iterable

from scoreboard.schemas.snapshot import ScoreRecord

# Leading decimal number, the part a lenient parser would keep from "12.5pts"
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_score_value(value: Any) -> tuple[float, bool]:
    """Read a score value as a float.

    Returns:
        (number, coerced) where ``coerced`` is True when the input was not a
        clean finite number and had to be read leniently or replaced by 0.

    Examples:
        coerce_score_value(7)        -> (7.0, False)
        coerce_score_value(" 8.5 ")  -> (8.5, False)
        coerce_score_value("9/10")   -> (9.0, True)
        coerce_score_value("n/a")    -> (0.0, True)
        coerce_score_value(None)     -> (0.0, True)
    """
    if isinstance(value, bool) or value is None:
        return 0.0, True
    if isinstance(value, (int, float)):
        number = float(value)
        if math.isfinite(number):
            return number, False
        return 0.0, True
    if isinstance(value, str):
        text = value.strip()
        try:
            number = float(text)
        except ValueError:
            match = _LEADING_NUMBER.match(text)
            if not match:
                return 0.0, True
            return float(match.group(0)), True
        if math.isfinite(number):
            return number, False
        return 0.0, True
    return 0.0, True


def build_score_index(scores: Iterable[ScoreRecord]) -> dict[str, list[ScoreRecord]]:
    """Group score records by contestant id, preserving input order.

    Records without a contestant id are dropped.
    """
    index: dict[str, list[ScoreRecord]] = defaultdict(list)
    for record in scores:
        if not record.contestant_id:
            continue
        index[record.contestant_id].append(record)
    return dict(index)
