"""Accuracy statistics computed from the history log."""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from theory_tutor.models import HistoryEntry, clamp

logger = logging.getLogger(__name__)


@dataclass
class Tally:
    attempts: int = 0
    correct: int = 0
    incorrect: int = 0

    def add(self, correct: bool) -> None:
        self.attempts += 1
        if correct:
            self.correct += 1
        else:
            self.incorrect += 1


@dataclass
class Stats:
    total: int = 0
    correct: int = 0
    incorrect: int = 0
    accuracy: int = 0
    by_question: dict[str, Tally] = field(default_factory=dict)
    by_tag: dict[str, Tally] = field(default_factory=dict)


def percent(part: int, whole: int) -> int:
    """Percentage rounded half-up; 0 when whole is 0."""
    if not whole:
        return 0
    return math.floor(part / whole * 100 + 0.5)


def aggregate(history: list[HistoryEntry]) -> Stats:
    stats = Stats()
    for h in history:
        stats.total += 1
        if h.correct:
            stats.correct += 1
        stats.by_question.setdefault(h.qid, Tally()).add(h.correct)
        # An entry counts once in each of its tags
        for tag in h.tags:
            stats.by_tag.setdefault(tag, Tally()).add(h.correct)
    stats.incorrect = stats.total - stats.correct
    stats.accuracy = percent(stats.correct, stats.total)
    return stats


def _local_date(value: str) -> Optional[date]:
    try:
        at = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        logger.debug("Unparseable attempt timestamp: %r", value)
        return None
    if at.tzinfo is not None:
        at = at.astimezone()
    return at.date()


def today_count(history: list[HistoryEntry], now: Optional[datetime] = None) -> int:
    """Number of attempts made on the same local calendar day as now."""
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone()
    today = now.date()
    return sum(1 for h in history if _local_date(h.at) == today)


def goal_pct(today: int, daily_goal: int) -> int:
    if not daily_goal:
        return 0
    return clamp(percent(today, daily_goal), 0, 100)
