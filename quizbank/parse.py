"""Parse untrusted JSON into quiz records.

None of these functions raise. Invalid items are dropped at the smallest
granularity possible (one answer, one question, one index entry) and the
reason is reported to ``logger``.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Mapping, Optional, TypeVar

from .records import Answer, FileItem, Question, QuestionCategory

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of validating one item: a value or the reason it was rejected."""

    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value, None)

    @classmethod
    def failure(cls, reason: str) -> "ParseResult[T]":
        return cls(None, reason)

    @property
    def ok(self) -> bool:
        return self.error is None


def _load_json(data: str, what: str, logger: logging.Logger) -> ParseResult[Any]:
    try:
        return ParseResult.success(json.loads(data))
    except (TypeError, ValueError, RecursionError) as exc:
        logger.error("unable to parse %s: %s", what, exc)
        return ParseResult.failure(f"invalid JSON: {exc}")


def _is_text(value: Any) -> bool:
    """A string that can be stored: lone surrogates from JSON escapes are not."""
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _filter_valid(
    items: List[Any],
    validate: Callable[[Any], ParseResult[T]],
    what: str,
    logger: logging.Logger,
) -> List[T]:
    valid: List[T] = []
    for index, item in enumerate(items):
        result = validate(item)
        if result.ok:
            valid.append(result.value)  # type: ignore[arg-type]
        else:
            logger.warning("dropping invalid %s at index %d: %s", what, index, result.error)
    return valid


def validate_index_file_item(item: Any) -> ParseResult[FileItem]:
    if not isinstance(item, Mapping):
        return ParseResult.failure("not an object")
    if "title" not in item or "file" not in item:
        return ParseResult.failure("missing title or file")

    title, file = item["title"], item["file"]
    if not _is_text(title) or not _is_text(file):
        return ParseResult.failure("title and file must be strings")

    return ParseResult.success(FileItem(title=title, file=file))


def validate_answer(item: Any) -> ParseResult[Answer]:
    if not isinstance(item, Mapping):
        return ParseResult.failure("not an object")
    if "answer" not in item or "correct" not in item:
        return ParseResult.failure("missing answer or correct")

    answer, correct = item["answer"], item["correct"]
    if not _is_text(answer) or not isinstance(correct, bool):
        return ParseResult.failure("answer must be a string and correct a boolean")

    return ParseResult.success(Answer(answer=answer, correct=correct))


def validate_question(item: Any, logger: Optional[logging.Logger] = None) -> ParseResult[Question]:
    if not isinstance(item, Mapping):
        return ParseResult.failure("not an object")
    if "question" not in item or "answers" not in item:
        return ParseResult.failure("missing question or answers")

    text, answers = item["question"], item["answers"]
    if not _is_text(text) or not isinstance(answers, list):
        return ParseResult.failure("question must be a string and answers a list")

    parsed_answers = parse_answers(answers, logger=logger)
    if not parsed_answers:
        return ParseResult.failure("no valid answers")

    return ParseResult.success(Question(question=text, answers=parsed_answers))


def parse_index_file_item(item: Any) -> Optional[FileItem]:
    """Parse a potential index entry, ``None`` if invalid."""
    return validate_index_file_item(item).value


def parse_index_file(data: str, logger: Optional[logging.Logger] = None) -> List[FileItem]:
    """Parse the index file into file items, skipping invalid entries."""
    logger = logger or log
    loaded = _load_json(data, "index file", logger)
    if not loaded.ok:
        return []

    if not isinstance(loaded.value, list):
        logger.error("index file is not an array")
        return []

    return _filter_valid(loaded.value, validate_index_file_item, "index item", logger)


def parse_answers(data: Any, logger: Optional[logging.Logger] = None) -> List[Answer]:
    """Parse a list of answers, dropping invalid ones. Non-lists give ``[]``."""
    if not isinstance(data, list):
        return []
    return _filter_valid(data, validate_answer, "answer", logger or log)


def parse_questions(data: Any, logger: Optional[logging.Logger] = None) -> List[Question]:
    """Parse a list of questions. Questions left without answers are dropped."""
    if not isinstance(data, list):
        return []
    logger = logger or log
    return _filter_valid(
        data, lambda item: validate_question(item, logger), "question", logger
    )


def parse_question_category(
    data: str, logger: Optional[logging.Logger] = None
) -> Optional[QuestionCategory]:
    """Parse a category file. ``None`` if invalid or without any valid question."""
    logger = logger or log
    loaded = _load_json(data, "question category", logger)
    if not loaded.ok:
        return None

    json_data = loaded.value
    if not isinstance(json_data, Mapping):
        logger.error("question category is not an object")
        return None

    if not _is_text(json_data.get("title")) or "questions" not in json_data:
        logger.error("question category is missing a title or questions")
        return None

    questions = parse_questions(json_data["questions"], logger=logger)
    if not questions:
        logger.error("question category %r has no valid questions", json_data["title"])
        return None

    return QuestionCategory(title=json_data["title"], questions=questions)


__all__ = [
    "ParseResult",
    "validate_index_file_item",
    "validate_answer",
    "validate_question",
    "parse_index_file_item",
    "parse_index_file",
    "parse_answers",
    "parse_questions",
    "parse_question_category",
]
