"""Quiz scoring and result feedback."""
from __future__ import annotations

from typing import Iterable, Mapping

from models import Question, Results

FEEDBACK_EXCELLENT = "excellent"
FEEDBACK_GOOD = "good"
FEEDBACK_KEEP_STUDYING = "keep_studying"

FEEDBACK_MESSAGES = {
    FEEDBACK_EXCELLENT: "Congratulations! You did very well!",
    FEEDBACK_GOOD: "Good job! Keep practicing!",
    FEEDBACK_KEEP_STUDYING: "Keep studying! You will improve!",
}


def score_answers(
    questions: Iterable[Question], answers: Mapping[str, str]
) -> Results:
    """
    Score recorded answers against the questions' correct alternatives.
    A missing answer, or one naming an unknown alternative, counts as incorrect.
    """
    correct = 0
    incorrect = 0
    for question in questions:
        if question.is_correct_choice(answers.get(question.id)):
            correct += 1
        else:
            incorrect += 1
    return Results(correct=correct, incorrect=incorrect)


def feedback_tier(results: Results) -> str:
    # thresholds are absolute correct counts, not percentages
    if results.correct >= 7:
        return FEEDBACK_EXCELLENT
    if results.correct >= 5:
        return FEEDBACK_GOOD
    return FEEDBACK_KEEP_STUDYING


def feedback_message(results: Results) -> str:
    return FEEDBACK_MESSAGES[feedback_tier(results)]
