"""Test configuration and fixtures."""

import logging
import sys
from pathlib import Path

import pytest

PACKAGE_DIR = Path(__file__).resolve().parent.parent
REPO_ROOT = PACKAGE_DIR.parent

# Make the package importable without installing it
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from quizbank.app import app
from quizbank.database import Database
from quizbank.db_utils import SQL_DIR
from quizbank.store import QuestionDatabase


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "quiz.db"


@pytest.fixture
def database(db_path):
    """Database with the schema applied."""
    db = Database(db_path, logging.getLogger("quizbank.tests"))
    assert db.query_script((SQL_DIR / "schema.sql").read_text(encoding="utf-8"))
    yield db
    db.close()


@pytest.fixture
def qdb(database):
    return QuestionDatabase(database, logging.getLogger("quizbank.tests"))


@pytest.fixture
def seeded_qdb(qdb):
    """Two categories, one with two questions and answers."""
    html = qdb.insert_category("HTML")
    qdb.insert_category("CSS")
    for text, answers in [
        ("Which element is the largest heading?", [("<h1>", True), ("<h6>", False)]),
        ("What does alt do?", [("Text alternative", True), ("Nothing", False)]),
    ]:
        question = qdb.insert_question({"question": text, "answers": []}, html["id"])
        qdb.insert_answers(
            [{"answer": answer, "correct": correct} for answer, correct in answers],
            question["id"],
        )
    return qdb


@pytest.fixture
def client(db_path, seeded_qdb):
    """Test client pointed at the seeded database."""
    app.config["TESTING"] = True
    app.config["DATABASE"] = str(db_path)
    with app.test_client() as client:
        with client.session_transaction() as sess:
            sess["csrf_token"] = "test-token"
        yield client


@pytest.fixture
def write_data(tmp_path):
    """Write a data directory from a mapping of file name -> content."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()

    def _write(files):
        for name, content in files.items():
            (data_dir / name).write_text(content, encoding="utf-8")
        return data_dir

    return _write
