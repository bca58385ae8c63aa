"""Weak area identification."""
from theory_tutor.stats import Stats, Tally, percent

TAG_MIN_ATTEMPTS = 3
QUESTION_MIN_ATTEMPTS = 2
WEAK_LIMIT = 5


def accuracy(attempts: int, correct: int) -> int:
    return percent(correct, attempts)


def rank_weak(tallies: dict[str, Tally], min_attempts: int, limit: int = WEAK_LIMIT) -> list[dict]:
    """Lowest-accuracy keys first; ties go to the key with more attempts.

    Keys with fewer than min_attempts attempts are left out entirely.
    """
    rows = [
        {
            "key": key,
            "attempts": t.attempts,
            "correct": t.correct,
            "incorrect": t.incorrect,
            "accuracy": accuracy(t.attempts, t.correct),
        }
        for key, t in tallies.items()
        if t.attempts >= min_attempts
    ]
    rows.sort(key=lambda r: (r["accuracy"], -r["attempts"]))
    return rows[:limit]


def get_weak_tags(stats: Stats, limit: int = WEAK_LIMIT) -> list[dict]:
    return rank_weak(stats.by_tag, TAG_MIN_ATTEMPTS, limit)


def get_weak_questions(stats: Stats, limit: int = WEAK_LIMIT) -> list[dict]:
    return rank_weak(stats.by_question, QUESTION_MIN_ATTEMPTS, limit)
