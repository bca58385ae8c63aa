"""Data classes for the tutor domain model."""
import logging
from dataclasses import asdict, dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

PRACTICE = "practice"
EXAM = "exam"
EXAM_RESULT = "exam_result"

MIN_TEST_LENGTH = 5
MAX_TEST_LENGTH = 50
MIN_DAILY_GOAL = 1
MAX_DAILY_GOAL = 200

THEMES = ["dark", "light"]


def clamp(n: int, low: int, high: int) -> int:
    return max(low, min(high, n))


@dataclass
class Question:
    id: str
    prompt: str
    model_answer: str
    tags: list[str] = field(default_factory=list)
    source_note: str = ""

    @classmethod
    def from_dict(cls, raw: dict) -> "Question":
        """Build a question from a bank element, tolerating missing fields.

        Both the camelCase keys of exported banks and snake_case keys are accepted.
        """
        tags = raw.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]
        elif not isinstance(tags, list):
            logger.warning("Ignoring tags of question %r: expected a list, got %s", raw.get("id"), type(tags).__name__)
            tags = []
        return cls(
            id=str(raw.get("id", "")),
            prompt=str(raw.get("prompt", "")),
            model_answer=str(raw.get("modelAnswer", raw.get("model_answer", ""))),
            tags=[str(t) for t in tags],
            source_note=str(raw.get("sourceNote", raw.get("source_note", "")) or ""),
        )


@dataclass
class HistoryEntry:
    id: str
    qid: str
    correct: bool
    at: str
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict) -> "HistoryEntry":
        return cls(
            id=str(raw["id"]),
            qid=str(raw["qid"]),
            correct=bool(raw["correct"]),
            at=str(raw["at"]),
            tags=[str(t) for t in raw.get("tags") or []],
        )


@dataclass
class Filter:
    tags: set[str] = field(default_factory=set)


@dataclass
class ExamAnswer:
    qid: str
    correct: bool


@dataclass
class ExamScore:
    correct: int
    total: int
    pct: int


@dataclass
class Settings:
    reminder_enabled: bool = False
    reminder_time: str = "19:30"
    reminder_days: list[int] = field(default_factory=lambda: [1, 2, 3, 4, 5, 6, 0])
    reminder_message: str = "It's time for your theory mock test."
    daily_goal: int = 10
    test_length: int = 10
    theme: str = "dark"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "Settings":
        """Merge a stored settings blob over the defaults.

        Unknown keys are ignored and values of the wrong type fall back to the
        default, so a partially corrupt blob still yields usable settings.
        """
        settings = cls()
        if not isinstance(raw, dict):
            return settings
        if isinstance(raw.get("reminder_enabled"), bool):
            settings.reminder_enabled = raw["reminder_enabled"]
        if isinstance(raw.get("reminder_time"), str):
            settings.reminder_time = raw["reminder_time"]
        days = raw.get("reminder_days")
        if isinstance(days, list):
            settings.reminder_days = sorted(
                {d for d in days if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6}
            )
        if isinstance(raw.get("reminder_message"), str):
            settings.reminder_message = raw["reminder_message"]
        if isinstance(raw.get("daily_goal"), int):
            settings.daily_goal = clamp(raw["daily_goal"], MIN_DAILY_GOAL, MAX_DAILY_GOAL)
        if isinstance(raw.get("test_length"), int):
            settings.test_length = clamp(raw["test_length"], MIN_TEST_LENGTH, MAX_TEST_LENGTH)
        if isinstance(raw.get("theme"), str):
            settings.theme = raw["theme"]
        return settings


DEFAULT_SETTINGS = Settings()
