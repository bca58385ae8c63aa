"""Append-only, capped log of graded attempts."""
import logging
import uuid
from datetime import datetime
from typing import Optional

from theory_tutor.models import HistoryEntry, Question

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 5000


def make_entry(question: Question, correct: bool, at: Optional[datetime] = None) -> HistoryEntry:
    """Record an attempt, snapshotting the question's tags as they are now."""
    at = at or datetime.now().astimezone()
    return HistoryEntry(
        id=uuid.uuid4().hex,
        qid=question.id,
        correct=bool(correct),
        at=at.isoformat(),
        tags=list(question.tags),
    )


def append_entry(history: list[HistoryEntry], entry: HistoryEntry) -> list[HistoryEntry]:
    """Return a new log with entry first, dropping the oldest entries past the limit."""
    return [entry, *history][:HISTORY_LIMIT]


def history_from_json(raw) -> list[HistoryEntry]:
    if not isinstance(raw, list):
        return []
    entries = []
    for item in raw:
        try:
            entries.append(HistoryEntry.from_dict(item))
        except (KeyError, TypeError, AttributeError):
            logger.warning("Dropping malformed history entry: %r", item)
    return entries[:HISTORY_LIMIT]


def history_to_json(history: list[HistoryEntry]) -> list[dict]:
    return [h.to_dict() for h in history]
