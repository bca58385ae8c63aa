import pytest

from theory_tutor.context import StudyContext
from theory_tutor.models import Settings


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


def make_bank(n: int, tags_for=lambda i: ["basics"]) -> list[dict]:
    return [
        {"id": f"q{i}", "prompt": f"Prompt {i}?", "modelAnswer": f"Answer {i}", "tags": tags_for(i)}
        for i in range(n)
    ]


@pytest.fixture
def saved():
    """Records every (key, value) the context persists."""
    return []


@pytest.fixture
def context(saved):
    bank = make_bank(3, lambda i: ["patterns"] if i == 0 else ["history", "basics"])
    return StudyContext(bank, [], Settings(), persist=lambda key, value: saved.append((key, value)))


class FakeTimer:
    """Stands in for threading.Timer; fire() runs the callback by hand."""

    created = []

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.started = False
        self.cancelled = False
        self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


@pytest.fixture
def fake_timer():
    FakeTimer.created = []
    return FakeTimer
