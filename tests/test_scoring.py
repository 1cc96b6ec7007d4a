import itertools
import random

from models import Alternative, Question, Results
from question_bank import STATIC_BANK, load_static_questions
from scoring import feedback_message, feedback_tier, score_answers


def _question(question_id: str, correct: str = "a") -> Question:
    return Question(
        id=question_id,
        statement=f"Question {question_id}",
        alternatives=tuple(
            Alternative(alt_id, alt_id.upper(), is_correct=alt_id == correct, order=i)
            for i, alt_id in enumerate("abcd")
        ),
    )


def test_all_correct_static_bank() -> None:
    questions = load_static_questions()
    answers = {
        question.id: str(entry.correct_index)
        for entry, question in zip(STATIC_BANK, questions)
    }
    assert score_answers(questions, answers) == Results(correct=10, incorrect=0)


def test_three_correct_two_incorrect() -> None:
    questions = [_question(str(i)) for i in range(1, 6)]
    answers = {"1": "a", "2": "a", "3": "a", "4": "b", "5": "c"}
    assert score_answers(questions, answers) == Results(correct=3, incorrect=2)


def test_missing_and_unknown_answers_count_as_incorrect() -> None:
    questions = [_question("1"), _question("2"), _question("3")]
    results = score_answers(questions, {"1": "a", "2": "zzz"})
    assert results == Results(correct=1, incorrect=2)
    assert results.total == 3


def test_scoring_is_order_independent_and_idempotent() -> None:
    questions = [_question(str(i), correct="abcd"[i % 4]) for i in range(6)]
    rng = random.Random(7)
    answers = {q.id: rng.choice("abcd") for q in questions}
    expected = score_answers(questions, answers)
    assert expected.total == len(questions)
    for permutation in itertools.islice(itertools.permutations(questions), 50):
        assert score_answers(permutation, answers) == expected
    assert score_answers(questions, answers) == expected


def test_feedback_tiers() -> None:
    assert feedback_tier(Results(correct=7, incorrect=3)) == "excellent"
    assert feedback_tier(Results(correct=5, incorrect=0)) == "good"
    assert feedback_tier(Results(correct=4, incorrect=0)) == "keep_studying"
    assert "Keep studying" in feedback_message(Results(correct=0, incorrect=2))


def test_percent() -> None:
    assert Results(correct=3, incorrect=1).percent == 75.0
    assert Results(correct=0, incorrect=0).percent == 0.0
