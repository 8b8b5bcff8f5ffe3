"""
Quiz Scoring

Pure grading helpers: answer-key parsing, percentage scoring, and the pass/fail
decision. Nothing here touches the database.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


DEFAULT_PASSING_SCORE = 70


class EmptyQuizError(ValueError):
    """Raised when a quiz with no questions is scored."""


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of grading one submission."""
    score: int
    correct_count: int
    total_questions: int


def _is_valid_question(question: Any) -> bool:
    return (
        isinstance(question, dict)
        and isinstance(question.get("question"), str)
        and isinstance(question.get("options"), list)
        and isinstance(question.get("correct"), int)
        and not isinstance(question.get("correct"), bool)
    )


def parse_questions(raw: Any) -> List[Dict[str, Any]]:
    """
    Keep only well-formed questions from a stored quiz payload.

    A question needs a string prompt, a list of options and an integer
    correct-option index. Anything that is not a list yields no questions.
    """
    if not isinstance(raw, list):
        return []
    return [q for q in raw if _is_valid_question(q)]


def round_percentage(correct: int, total: int) -> int:
    """
    Integer percentage of correct/total, rounding halves up.

    Computed in integers so 1/8 (12.5%) always becomes 13.
    """
    return (200 * correct + total) // (2 * total)


def score_answers(
    questions: List[Dict[str, Any]],
    answers: Mapping[int, int],
) -> ScoreResult:
    """
    Grade a submission.

    Args:
        questions: Ordered questions, each with a "correct" option index.
        answers: Question index -> selected option index. Missing entries
            count as incorrect.

    Returns:
        ScoreResult with the rounded percentage in [0, 100].

    Raises:
        EmptyQuizError: If there are no questions to grade.
    """
    total = len(questions)
    if total == 0:
        raise EmptyQuizError("Quiz has no questions")

    correct = sum(
        1
        for index, question in enumerate(questions)
        if index in answers and answers[index] == question["correct"]
    )

    return ScoreResult(
        score=round_percentage(correct, total),
        correct_count=correct,
        total_questions=total,
    )


def resolve_passing_score(
    passing_score: Optional[int],
    default: int = DEFAULT_PASSING_SCORE,
) -> int:
    """Quiz threshold, falling back to the platform default when unset."""
    return default if passing_score is None else passing_score


def is_passing(score: int, threshold: int) -> bool:
    return score >= threshold
