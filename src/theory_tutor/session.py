"""Practice and exam session state machine."""
import logging
import random
from typing import Iterable, Optional

from theory_tutor.bank import pick_random, select_pool, shuffle_questions
from theory_tutor.context import StudyContext
from theory_tutor.models import (
    EXAM, EXAM_RESULT, MAX_TEST_LENGTH, MIN_TEST_LENGTH, PRACTICE,
    ExamAnswer, ExamScore, Filter, Question, clamp,
)
from theory_tutor.stats import percent

logger = logging.getLogger(__name__)


class QuizSession:
    """Drives practice and exam modes over a study context.

    Starts in practice mode with no current question. All history writes go
    through ``context.record_attempt``.
    """

    def __init__(self, context: StudyContext, rng: Optional[random.Random] = None):
        self.context = context
        self.rng = rng or random.Random()
        self.filter = Filter()
        self.mode = PRACTICE
        self.current: Optional[Question] = None
        self.show_answer = False
        self.exam_order: list[Question] = []
        self.exam_index = 0
        self.exam_answers: list[ExamAnswer] = []

    # Filter

    def pool(self) -> list[Question]:
        return select_pool(self.context.bank, self.filter)

    def set_filter(self, tags: Iterable[str]) -> None:
        self.filter = Filter(tags=set(tags))

    def toggle_tag(self, tag: str) -> None:
        tags = set(self.filter.tags)
        if tag in tags:
            tags.remove(tag)
        else:
            tags.add(tag)
        self.filter = Filter(tags=tags)

    # Practice

    def new_question(self) -> Optional[Question]:
        self.current = pick_random(self.pool(), self.rng)
        self.show_answer = False
        return self.current

    def grade(self, correct: bool) -> None:
        if self.mode != PRACTICE or self.current is None:
            return
        self.context.record_attempt(self.current, correct)
        self.new_question()

    def toggle_show_answer(self) -> bool:
        if self.mode in (PRACTICE, EXAM):
            self.show_answer = not self.show_answer
        return self.show_answer

    # Exam

    def start_exam(self) -> None:
        length = clamp(self.context.settings.test_length, MIN_TEST_LENGTH, MAX_TEST_LENGTH)
        self.exam_order = shuffle_questions(self.pool(), self.rng)[:length]
        self.exam_index = 0
        self.exam_answers = []
        self.show_answer = False
        self.current = None
        if self.exam_order:
            self.mode = EXAM
        else:
            logger.info("Exam started with an empty pool")
            self.mode = EXAM_RESULT
        logger.debug("Exam started with %d questions", len(self.exam_order))

    def exam_question(self) -> Optional[Question]:
        if self.mode != EXAM or self.exam_index >= len(self.exam_order):
            return None
        return self.exam_order[self.exam_index]

    def answer(self, correct: bool) -> None:
        question = self.exam_question()
        if question is None:
            return
        self.context.record_attempt(question, correct)
        self.exam_answers.append(ExamAnswer(qid=question.id, correct=bool(correct)))
        self.exam_index += 1
        if self.exam_index == len(self.exam_order):
            self.mode = EXAM_RESULT
        else:
            self.show_answer = False

    def score(self) -> ExamScore:
        correct = sum(1 for a in self.exam_answers if a.correct)
        total = len(self.exam_order)
        return ExamScore(correct=correct, total=total, pct=percent(correct, total))

    def missed(self) -> list[Question]:
        """Questions answered incorrectly, in exam order, each listed once."""
        wrong = {a.qid for a in self.exam_answers if not a.correct}
        missed, seen = [], set()
        for q in self.exam_order:
            if q.id in wrong and q.id not in seen:
                seen.add(q.id)
                missed.append(q)
        return missed

    def exam_result(self) -> Optional[dict]:
        if self.mode != EXAM_RESULT:
            return None
        return {"score": self.score(), "missed": self.missed()}

    def back_to_practice(self) -> None:
        self.mode = PRACTICE
        self.exam_order = []
        self.exam_index = 0
        self.exam_answers = []
        self.current = None
        self.show_answer = False

    def snapshot(self) -> dict:
        """Plain view of the session for rendering."""
        snap = {
            "mode": self.mode,
            "show_answer": self.show_answer,
            "filter_tags": sorted(self.filter.tags),
            "pool_size": len(self.pool()),
        }
        if self.mode == PRACTICE:
            snap["current"] = self.current
        elif self.mode == EXAM:
            snap["current"] = self.exam_question()
            snap["exam_index"] = self.exam_index
            snap["exam_total"] = len(self.exam_order)
        else:
            snap.update(self.exam_result())
        return snap
