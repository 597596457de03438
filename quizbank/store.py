"""Persistence of categories, questions and answers.

All text is sanitized on the way in, so anything read back out of the store
is safe to render as HTML as-is.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .database import Database
from .html import PARAGRAPH_TAGS, replace_html_entities, string_to_html, xss
from .records import (
    Answer,
    DatabaseAnswer,
    DatabaseCategory,
    DatabaseQuestion,
    Question,
    QuestionCategory,
)

MAX_SLUG_LENGTH = 100

log = logging.getLogger(__name__)


def slugify(text: Any) -> str:
    """Lowercase, hyphen separated, ASCII word characters only."""
    slug = str(text).lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w-]+", "", slug, flags=re.ASCII)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def _category_from_row(row) -> DatabaseCategory:
    return DatabaseCategory(id=row["id"], name=row["name"], slug=row["slug"])


class QuestionDatabase:
    def __init__(self, db: Database, logger: Optional[logging.Logger] = None) -> None:
        self.db = db
        self.logger = logger or log

    slugify = staticmethod(slugify)

    def _sanitize(self, value: str, html: bool = False) -> Optional[str]:
        """Escape and clean ``value``; ``None`` if it cannot be encoded."""
        try:
            if html:
                return xss(string_to_html(value), tags=PARAGRAPH_TAGS)
            return xss(replace_html_entities(value))
        except UnicodeEncodeError as exc:
            self.logger.error("unable to sanitize %r: %s", value, exc)
            return None

    def category_slug(self, name: str) -> Optional[str]:
        """The slug a category named ``name`` is stored under."""
        safe_name = self._sanitize(name)
        if safe_name is None:
            return None
        return self.slugify(safe_name)

    def insert_category(self, name: str) -> Optional[DatabaseCategory]:
        """Insert a category.

        Returns ``None`` if the category could not be inserted, which includes
        the case where a category with the same slug already exists.
        """
        safe_name = self._sanitize(name)
        if safe_name is None:
            return None
        slug = self.slugify(safe_name)
        result = self.db.query(
            """
            INSERT INTO categories (name, slug) VALUES (?, ?)
            ON CONFLICT (slug) DO NOTHING
            RETURNING id, name, slug
            """,
            (safe_name, slug),
        )
        if result and len(result.rows) == 1:
            return _category_from_row(result.rows[0])
        return None

    def insert_categories(self, names: Iterable[str]) -> List[DatabaseCategory]:
        inserted: List[DatabaseCategory] = []
        for name in names:
            category = self.insert_category(name)
            if category:
                inserted.append(category)
            else:
                self.logger.warning("unable to insert category %r", name)
        return inserted

    def find_category(self, name: str) -> Optional[DatabaseCategory]:
        """Look up the category ``name`` would be stored as."""
        return self.get_category_by_slug(self.category_slug(name))

    def insert_question(self, question: Question, category_id: int) -> Optional[DatabaseQuestion]:
        safe_text = self._sanitize(question["question"], html=True)
        if safe_text is None:
            return None
        result = self.db.query(
            "INSERT INTO questions (text, category_id) VALUES (?, ?) RETURNING id, text, category_id",
            (safe_text, category_id),
        )
        if result and len(result.rows) == 1:
            row = result.rows[0]
            return DatabaseQuestion(id=row["id"], text=row["text"], category_id=row["category_id"])
        return None

    def insert_answer(self, answer: Answer, question_id: int) -> Optional[DatabaseAnswer]:
        safe_text = self._sanitize(answer["answer"])
        if safe_text is None:
            return None
        result = self.db.query(
            """
            INSERT INTO answers (text, question_id, correct) VALUES (?, ?, ?)
            RETURNING id, text, question_id, correct
            """,
            (safe_text, question_id, 1 if answer["correct"] else 0),
        )
        if result and len(result.rows) == 1:
            row = result.rows[0]
            return DatabaseAnswer(
                id=row["id"],
                text=row["text"],
                question_id=row["question_id"],
                correct=bool(row["correct"]),
            )
        return None

    def insert_answers(self, answers: Iterable[Answer], question_id: int) -> List[DatabaseAnswer]:
        inserted: List[DatabaseAnswer] = []
        for answer in answers:
            result = self.insert_answer(answer, question_id)
            if result:
                inserted.append(result)
            else:
                self.logger.warning("unable to insert answer %r", answer)
        return inserted

    def get_categories(self) -> List[DatabaseCategory]:
        result = self.db.query("SELECT id, name, slug FROM categories ORDER BY id")
        if result is None:
            return []
        return [_category_from_row(row) for row in result.rows]

    def get_category_by_slug(self, slug: Any) -> Optional[DatabaseCategory]:
        if not slug or not isinstance(slug, str) or len(slug) > MAX_SLUG_LENGTH:
            return None

        result = self.db.query("SELECT id, name, slug FROM categories WHERE slug = ?", (slug,))
        if result and len(result.rows) == 1:
            return _category_from_row(result.rows[0])
        return None

    @staticmethod
    def zip_questions_and_answers(
        questions: Sequence[DatabaseQuestion], answers: Iterable[DatabaseAnswer]
    ) -> QuestionCategory:
        """Nest flat answer rows under the question rows they belong to.

        All question rows are assumed to share one category; the title is
        taken from the first. Answers pointing at an unknown question are
        dropped.
        """
        by_id: Dict[int, Question] = {}
        for question in questions:
            by_id[question["id"]] = Question(question=question["text"], answers=[])

        for answer in answers:
            target = by_id.get(answer["question_id"])
            if target is not None:
                target["answers"].append(Answer(answer=answer["text"], correct=answer["correct"]))

        title = (questions[0].get("category_name") if questions else None) or ""
        return QuestionCategory(title=title, questions=list(by_id.values()))

    def get_questions_and_answers_by_category(self, category_slug: str) -> Optional[QuestionCategory]:
        """Fetch a category's questions and answers with two queries."""
        questions_result = self.db.query(
            """
            SELECT q.id, q.text, q.category_id, c.name AS category_name
            FROM questions AS q
            JOIN categories AS c ON q.category_id = c.id
            WHERE c.slug = ?
            ORDER BY q.id
            """,
            (category_slug,),
        )
        if not questions_result or not questions_result.rows:
            return None

        questions = [
            DatabaseQuestion(
                id=row["id"],
                text=row["text"],
                category_id=row["category_id"],
                category_name=row["category_name"],
            )
            for row in questions_result.rows
        ]

        answers_result = self.db.query(
            """
            SELECT a.id, a.text, a.correct, a.question_id
            FROM answers AS a
            JOIN questions AS q ON a.question_id = q.id
            JOIN categories AS c ON q.category_id = c.id
            WHERE c.slug = ?
            ORDER BY a.id
            """,
            (category_slug,),
        )
        if answers_result is None:
            return None

        answers = [
            DatabaseAnswer(
                id=row["id"],
                text=row["text"],
                question_id=row["question_id"],
                correct=bool(row["correct"]),
            )
            for row in answers_result.rows
        ]
        return self.zip_questions_and_answers(questions, answers)

    def create_question(
        self,
        question_text: str,
        category_id: int,
        answer_texts: Sequence[str],
        correct_index: int,
    ) -> bool:
        """Store a submitted question with its answers.

        Only a failed question insert fails the call; answers that cannot be
        stored are logged and skipped.
        """
        if self.db.connect() is None:
            return False

        question = self.insert_question(Question(question=question_text, answers=[]), category_id)
        if not question:
            self.logger.error("unable to insert question for category %s", category_id)
            return False

        answers = [
            Answer(answer=text, correct=index == correct_index)
            for index, text in enumerate(answer_texts)
        ]
        inserted = self.insert_answers(answers, question["id"])
        if len(inserted) != len(answers):
            self.logger.error(
                "question %s stored with %d of %d answers",
                question["id"],
                len(inserted),
                len(answers),
            )
        return True


__all__ = ["MAX_SLUG_LENGTH", "QuestionDatabase", "slugify"]
