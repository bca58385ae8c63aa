from datetime import datetime

from theory_tutor.history import (
    HISTORY_LIMIT, append_entry, history_from_json, history_to_json, make_entry,
)
from theory_tutor.models import HistoryEntry, Question


def entry(i, correct=True):
    return HistoryEntry(id=f"h{i}", qid="q", correct=correct, at="2024-01-01T00:00:00")


def test_make_entry_snapshots_tags():
    q = Question(id="q1", prompt="P", model_answer="A", tags=["x", "y"])
    e = make_entry(q, True, at=datetime(2024, 3, 1, 12, 0))
    assert e.qid == "q1"
    assert e.correct is True
    assert e.tags == ["x", "y"]
    assert e.at == "2024-03-01T12:00:00"
    # later edits to the question don't change the recorded tags
    q.tags.append("z")
    assert e.tags == ["x", "y"]


def test_make_entry_ids_are_unique():
    q = Question(id="q1", prompt="P", model_answer="A")
    assert make_entry(q, True).id != make_entry(q, True).id


def test_append_entry_puts_newest_first():
    history = append_entry([entry(1)], entry(2))
    assert [h.id for h in history] == ["h2", "h1"]


def test_append_entry_does_not_mutate_input():
    history = [entry(1)]
    append_entry(history, entry(2))
    assert len(history) == 1


def test_append_entry_caps_log():
    history = [entry(i) for i in range(HISTORY_LIMIT)]
    new = entry("new")
    result = append_entry(history, new)
    assert len(result) == HISTORY_LIMIT
    assert result[0] is new
    # oldest (last) entry evicted, the 4999 most recent kept
    assert result[1:] == history[:HISTORY_LIMIT - 1]


def test_append_many_never_exceeds_limit():
    history = []
    for i in range(HISTORY_LIMIT + 25):
        history = append_entry(history, entry(i))
    assert len(history) == HISTORY_LIMIT
    assert history[0].id == f"h{HISTORY_LIMIT + 24}"


def test_history_json_round_trip():
    history = [entry(1), entry(2, correct=False)]
    assert history_from_json(history_to_json(history)) == history


def test_history_from_json_drops_malformed_rows():
    raw = [{"id": "h1", "qid": "q", "correct": True, "at": "x"}, {"qid": "q"}, "junk"]
    assert [h.id for h in history_from_json(raw)] == ["h1"]


def test_history_from_json_non_list():
    assert history_from_json({"a": 1}) == []
    assert history_from_json(None) == []
