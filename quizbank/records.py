"""Shapes of the records that flow through parsing, storage and rendering."""
from __future__ import annotations

from typing import List, TypedDict


class FileItem(TypedDict):
    title: str
    file: str


class Answer(TypedDict):
    answer: str
    correct: bool


class Question(TypedDict):
    question: str
    answers: List[Answer]


class _QuestionCategoryBase(TypedDict):
    title: str
    questions: List[Question]


class QuestionCategory(_QuestionCategoryBase, total=False):
    # Only set when the category was read from a source file.
    file: str


class DatabaseCategory(TypedDict):
    id: int
    name: str
    slug: str


class _DatabaseQuestionBase(TypedDict):
    id: int
    text: str
    category_id: int


class DatabaseQuestion(_DatabaseQuestionBase, total=False):
    category_name: str


class DatabaseAnswer(TypedDict):
    id: int
    text: str
    question_id: int
    correct: bool


__all__ = [
    "FileItem",
    "Answer",
    "Question",
    "QuestionCategory",
    "DatabaseCategory",
    "DatabaseQuestion",
    "DatabaseAnswer",
]
