# tests/test_review.py
from theory_tutor.models import HistoryEntry
from theory_tutor.review import (
    QUESTION_MIN_ATTEMPTS, TAG_MIN_ATTEMPTS, accuracy, get_weak_questions, get_weak_tags, rank_weak,
)
from theory_tutor.stats import Tally, aggregate


def tally(attempts, correct):
    return Tally(attempts=attempts, correct=correct, incorrect=attempts - correct)


def test_accuracy():
    assert accuracy(0, 0) == 0
    assert accuracy(4, 3) == 75


def test_rank_weak_empty():
    assert rank_weak({}, 1) == []


def test_rank_weak_sorts_by_accuracy_ascending():
    ranked = rank_weak({"a": tally(4, 3), "b": tally(4, 1), "c": tally(4, 2)}, 1)
    assert [r["key"] for r in ranked] == ["b", "c", "a"]


def test_rank_weak_ties_prefer_more_attempts():
    ranked = rank_weak({"few": tally(3, 0), "many": tally(9, 0)}, 1)
    assert [r["key"] for r in ranked] == ["many", "few"]


def test_rank_weak_truncates_to_five():
    tallies = {f"t{i}": tally(10, i) for i in range(8)}
    ranked = rank_weak(tallies, 1)
    assert [r["key"] for r in ranked] == ["t0", "t1", "t2", "t3", "t4"]


def test_rank_weak_excludes_below_threshold():
    ranked = rank_weak({"a": tally(2, 0), "b": tally(3, 3)}, 3)
    assert [r["key"] for r in ranked] == ["b"]


def test_weak_tags_threshold():
    history = [HistoryEntry(id=str(i), qid="q", correct=False, at="", tags=["two"]) for i in range(2)]
    history += [HistoryEntry(id=f"x{i}", qid="r", correct=False, at="", tags=["three"]) for i in range(3)]
    weak = get_weak_tags(aggregate(history))
    assert [w["key"] for w in weak] == ["three"]
    assert all(w["attempts"] >= TAG_MIN_ATTEMPTS for w in weak)


def test_weak_questions_threshold():
    history = [
        HistoryEntry(id="1", qid="once", correct=False, at=""),
        HistoryEntry(id="2", qid="twice", correct=False, at=""),
        HistoryEntry(id="3", qid="twice", correct=True, at=""),
    ]
    weak = get_weak_questions(aggregate(history))
    assert [w["key"] for w in weak] == ["twice"]
    assert weak[0]["accuracy"] == 50
    assert all(w["attempts"] >= QUESTION_MIN_ATTEMPTS for w in weak)
