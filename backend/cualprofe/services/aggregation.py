"""Rating aggregation shared by every place that shows a professor summary.

A rating record may be a mapping (JSON payloads, exported documents) or an
object with attributes (ORM rows). Malformed fields never raise: a record
whose ``quality`` is unusable still contributes its ``difficulty``, its
would-take-again answer and its tags.
"""
from __future__ import annotations

import math
import numbers
from collections import Counter
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable, List, Mapping, Optional

from ..config import MAX_SCORE, MIN_SCORE, PROFILE_TOP_TAGS

_MISSING = object()

_WOULD_TAKE_AGAIN_KEYS = ("would_take_again", "wouldTakeAgain")


@dataclass
class AggregateStats:
    average_quality: float = 0
    average_difficulty: float = 0
    would_take_again_percent: int = 0
    distribution: List[int] = field(default_factory=lambda: [0] * 5)
    top_tags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "averageQuality": self.average_quality,
            "averageDifficulty": self.average_difficulty,
            "wouldTakeAgainPercent": self.would_take_again_percent,
            "distribution": list(self.distribution),
            "topTags": list(self.top_tags),
        }


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` to ``digits`` decimals with ties going up.

    Matches ``Number.prototype.toFixed`` / ``Math.round`` on positive values,
    which the displayed numbers have always used; Python's ``round`` would
    turn 62.5% into 62. Non-finite values are returned unchanged.
    """

    if not math.isfinite(value):
        return value
    number = Decimal(value)
    exponent = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        # quantize needs room for every integer digit of large scores
        ctx.prec = max(ctx.prec, number.adjusted() + digits + 2)
        return float(number.quantize(exponent, rounding=ROUND_HALF_UP))


def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name, _MISSING)
        else:
            value = getattr(record, name, _MISSING)
        if value is not _MISSING:
            return value
    return None


def _score(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _tags(record: Any) -> list:
    raw = _field(record, "tags")
    if isinstance(raw, (list, tuple)):
        return [tag for tag in raw if isinstance(tag, str)]
    return []


def _mean(values: List[float]) -> float:
    if not values:
        return 0
    mean = sum(values) / len(values)
    if not math.isfinite(mean):
        # the running sum overflowed; scale each value first
        mean = math.fsum(value / len(values) for value in values)
    return round_half_up(mean, 1)


def count_tags(records: Iterable[Any]) -> Counter:
    """Count tag occurrences across ``records``, keyed by exact string.

    The counter keeps first-seen insertion order, which ``rank_tags`` relies on
    to break ties.
    """

    counts: Counter = Counter()
    for record in records:
        for tag in _tags(record):
            counts[tag] += 1
    return counts


def rank_tags(counts: Mapping[str, int], limit: int = PROFILE_TOP_TAGS) -> List[str]:
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [tag for tag, _ in ranked[:limit]]


def distribution_index(quality: float) -> int:
    bucket = int(round_half_up(max(MIN_SCORE, min(MAX_SCORE, quality))))
    return MAX_SCORE - bucket


def aggregate(records: Iterable[Any]) -> AggregateStats:
    """Reduce a professor's rating records into display statistics."""

    qualities: List[float] = []
    difficulties: List[float] = []
    distribution = [0] * 5
    total = 0
    would_take_again = 0
    tag_counts: Counter = Counter()

    for record in records:
        total += 1

        quality = _score(_field(record, "quality"))
        if quality is not None:
            qualities.append(quality)
            distribution[distribution_index(quality)] += 1

        difficulty = _score(_field(record, "difficulty"))
        if difficulty is not None:
            difficulties.append(difficulty)

        if _field(record, *_WOULD_TAKE_AGAIN_KEYS) is True:
            would_take_again += 1

        for tag in _tags(record):
            tag_counts[tag] += 1

    percent = int(round_half_up(100 * would_take_again / total)) if total else 0

    return AggregateStats(
        average_quality=_mean(qualities),
        average_difficulty=_mean(difficulties),
        would_take_again_percent=percent,
        distribution=distribution,
        top_tags=rank_tags(tag_counts),
    )
