# tests/test_stats.py
from datetime import datetime, timedelta, timezone

from theory_tutor.models import HistoryEntry
from theory_tutor.stats import aggregate, goal_pct, percent, today_count


def h(qid, correct, tags=(), at="2024-05-01T10:00:00"):
    return HistoryEntry(id=f"{qid}-{correct}-{at}", qid=qid, correct=correct, at=at, tags=list(tags))


def test_aggregate_empty_history():
    stats = aggregate([])
    assert stats.total == 0
    assert stats.accuracy == 0
    assert stats.by_question == {}
    assert stats.by_tag == {}


def test_aggregate_totals():
    history = [h("a", True), h("a", False), h("b", True), h("c", True)]
    stats = aggregate(history)
    assert stats.total == len(history)
    assert stats.correct == 3
    assert stats.incorrect == 1
    assert stats.correct + stats.incorrect == stats.total
    assert stats.accuracy == 75


def test_aggregate_by_question():
    stats = aggregate([h("a", True), h("a", False), h("a", False), h("b", True)])
    a = stats.by_question["a"]
    assert (a.attempts, a.correct, a.incorrect) == (3, 1, 2)
    assert stats.by_question["b"].attempts == 1


def test_aggregate_counts_entry_in_every_tag():
    stats = aggregate([h("a", True, ["x", "y"]), h("b", False, ["y"])])
    assert stats.by_tag["x"].attempts == 1
    assert stats.by_tag["y"].attempts == 2
    assert stats.by_tag["y"].incorrect == 1
    assert stats.total == 2


def test_aggregate_uses_snapshot_tags_not_bank():
    stats = aggregate([h("deleted", True, ["old-tag"])])
    assert "old-tag" in stats.by_tag


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13  # 12.5
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(0, 0) == 0


def test_accuracy_rounding():
    history = [h("a", True)] + [h("b", False)] * 7
    assert aggregate(history).accuracy == 13


def test_today_count_same_calendar_day():
    now = datetime(2024, 5, 1, 20, 0)
    history = [
        h("a", True, at="2024-05-01T00:05:00"),
        h("b", True, at="2024-05-01T19:59:59"),
        h("c", True, at="2024-04-30T23:59:59"),
        h("d", True, at="2023-05-01T10:00:00"),
    ]
    assert today_count(history, now) == 2


def test_today_count_converts_offsets_to_local_time():
    now = datetime.now().astimezone()
    stamp = now.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    assert today_count([h("a", True, at=stamp)], now) == 1


def test_today_count_ignores_unparseable_timestamps():
    now = datetime(2024, 5, 1, 12, 0)
    assert today_count([h("a", True, at="yesterday")], now) == 0


def test_today_count_excludes_other_days():
    now = datetime(2024, 5, 1, 12, 0)
    tomorrow = (now + timedelta(days=1)).isoformat()
    assert today_count([h("a", True, at=tomorrow)], now) == 0


def test_goal_pct():
    assert goal_pct(5, 10) == 50
    assert goal_pct(15, 10) == 100
    assert goal_pct(0, 10) == 0
    assert goal_pct(3, 0) == 0
