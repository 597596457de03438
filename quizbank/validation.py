"""Validation of the question submission form."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, NamedTuple

from .records import DatabaseCategory

TEXT_MIN_LENGTH = 10
TEXT_MAX_LENGTH = 500
ANSWER_COUNT = 4


class QuestionForm(NamedTuple):
    question: str
    category: str
    answers: List[str]
    correct: str

    @property
    def correct_index(self) -> int:
        return int(self.correct)


def read_question_form(form) -> QuestionForm:
    """Pull the submitted fields out of ``request.form``, trimmed."""
    return QuestionForm(
        question=(form.get("question") or "").strip(),
        category=(form.get("category") or "").strip(),
        answers=[(answer or "").strip() for answer in form.getlist("answers")],
        correct=(form.get("correct") or "").strip(),
    )


def _length_ok(value: str) -> bool:
    return TEXT_MIN_LENGTH <= len(value) <= TEXT_MAX_LENGTH


def validate_question_form(
    form: QuestionForm, categories: Iterable[DatabaseCategory]
) -> Dict[str, str]:
    """Return a field name -> message mapping, empty when the form is valid."""
    errors: Dict[str, str] = {}

    if not _length_ok(form.question):
        errors["question"] = (
            f"Question must be between {TEXT_MIN_LENGTH} and {TEXT_MAX_LENGTH} characters"
        )

    if not any(str(category["id"]) == form.category for category in categories):
        errors["category"] = "Category must be valid"

    if len(form.answers) != ANSWER_COUNT:
        errors["answers"] = f"Exactly {ANSWER_COUNT} answers must be given"
    for index, answer in enumerate(form.answers):
        if not _length_ok(answer):
            errors[f"answers-{index}"] = (
                f"Answer must be between {TEXT_MIN_LENGTH} and {TEXT_MAX_LENGTH} characters"
            )

    if form.correct not in {str(i) for i in range(ANSWER_COUNT)}:
        errors["correct"] = "A correct answer must be chosen"

    return errors


def is_invalid(field: str, errors: Mapping[str, str]) -> bool:
    """Template helper: does ``field`` have an error?"""
    return field in errors


__all__ = [
    "ANSWER_COUNT",
    "QuestionForm",
    "read_question_form",
    "validate_question_form",
    "is_invalid",
]
