"""Question bank access: filtering, random selection and lookup."""
import logging
import random
from typing import Optional

from theory_tutor.models import Filter, Question

logger = logging.getLogger(__name__)


def bank_questions(bank: list) -> list[Question]:
    """Convert raw bank elements to questions, skipping anything that isn't an object."""
    questions = []
    for i, item in enumerate(bank):
        if not isinstance(item, dict):
            logger.warning("Skipping bank entry %d: expected an object, got %s", i, type(item).__name__)
            continue
        questions.append(Question.from_dict(item))
    return questions


def select_pool(bank: list, flt: Optional[Filter] = None) -> list[Question]:
    """All questions sharing a tag with the filter, or the whole bank if no tags are selected."""
    questions = bank_questions(bank)
    if flt is None or not flt.tags:
        return questions
    return [q for q in questions if any(t in flt.tags for t in q.tags)]


def pick_random(pool: list[Question], rng: Optional[random.Random] = None) -> Optional[Question]:
    if not pool:
        return None
    rng = rng or random
    return pool[int(rng.random() * len(pool))]


def shuffle_questions(pool: list[Question], rng: Optional[random.Random] = None) -> list[Question]:
    """Return a Fisher-Yates shuffled copy of pool."""
    rng = rng or random
    order = list(pool)
    for i in range(len(order) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        order[i], order[j] = order[j], order[i]
    return order


def all_tags(bank: list) -> list[str]:
    tags = set()
    for q in bank_questions(bank):
        tags.update(q.tags)
    return sorted(tags)


def find_question(bank: list, qid: str) -> Optional[Question]:
    for q in bank_questions(bank):
        if q.id == qid:
            return q
    return None


def question_label(bank: list, qid: str) -> str:
    """Prompt text for qid, or the raw id when the question is no longer in the bank."""
    q = find_question(bank, qid)
    return q.prompt if q and q.prompt else qid
