# tests/test_integration.py
"""End-to-end test of the core workflow."""
import random

from theory_tutor.context import load_context
from theory_tutor.models import EXAM_RESULT
from theory_tutor.review import get_weak_questions, get_weak_tags
from theory_tutor.session import QuizSession
from theory_tutor.stats import aggregate, today_count


def test_full_practice_and_exam_workflow(tmp_db):
    context = load_context(tmp_db)
    session = QuizSession(context, rng=random.Random(5))

    # Practice on patterns only, all wrong
    session.toggle_tag("patterns")
    for _ in range(6):
        question = session.new_question()
        assert "patterns" in question.tags
        session.grade(False)

    # Exam over the whole bank
    session.set_filter([])
    context.update_settings(test_length=5)
    session.start_exam()
    assert len(session.exam_order) == 5
    for i in range(5):
        session.answer(i < 3)
    assert session.mode == EXAM_RESULT
    result = session.exam_result()
    assert result["score"].correct == 3
    assert len(result["missed"]) == 2
    session.back_to_practice()

    stats = aggregate(context.history)
    assert stats.total == 11
    assert stats.correct == 3
    assert today_count(context.history) == 11
    weak_tags = get_weak_tags(stats)
    assert weak_tags
    assert weak_tags[0]["accuracy"] <= weak_tags[-1]["accuracy"]
    assert "patterns" in {w["key"] for w in weak_tags}
    assert all(w["attempts"] >= 2 for w in get_weak_questions(stats))

    # Everything survives a restart
    reloaded = load_context(tmp_db)
    assert len(reloaded.history) == 11
    assert reloaded.settings.test_length == 5
