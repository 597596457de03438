"""Create the schema and load the question corpus into the database.

Usage: quizbank-setup [--data-dir data] [--database path/to/quiz.db] [--keep-schema]

Unreadable or invalid files, categories and questions are logged and skipped;
the rest of the corpus is still loaded. Nothing wraps the whole load in a
transaction, and rerunning with ``--keep-schema`` duplicates questions.
"""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dotenv import load_dotenv

from .database import Database
from .db_utils import SQL_DIR, resolve_db_path
from .environment import environment
from .files import read_file
from .parse import parse_index_file, parse_question_category
from .records import DatabaseCategory, FileItem, QuestionCategory
from .store import QuestionDatabase

DEFAULT_INPUT_DIR = Path("data")
INDEX_FILE = "index.json"
DROP_SCHEMA_FILE = "drop.sql"
SCHEMA_FILE = "schema.sql"
INSERT_FILE = "insert.sql"

log = logging.getLogger(__name__)


def setup_db_from_files(
    qdb: QuestionDatabase, sql_dir: Path = SQL_DIR, logger: Optional[logging.Logger] = None
) -> bool:
    """Drop and recreate the schema, then run the optional insert script."""
    logger = logger or log
    drop_script = read_file(sql_dir / DROP_SCHEMA_FILE)
    create_script = read_file(sql_dir / SCHEMA_FILE)
    if drop_script is None or create_script is None:
        logger.error("unable to read sql files from %s", sql_dir)
        return False

    if not qdb.db.query_script(drop_script):
        logger.error("schema not dropped")
        return False
    logger.info("schema dropped")

    if not qdb.db.query_script(create_script):
        logger.error("schema not created")
        return False
    logger.info("schema created")

    insert_path = sql_dir / INSERT_FILE
    if insert_path.exists():
        insert_script = read_file(insert_path)
        if insert_script is None or not qdb.db.query_script(insert_script):
            logger.error("data from %s not inserted", insert_path)
            return False
        logger.info("data inserted from %s", insert_path)

    return True


def read_and_parse_file(
    item: FileItem, input_dir: Path = DEFAULT_INPUT_DIR, logger: Optional[logging.Logger] = None
) -> Optional[QuestionCategory]:
    logger = logger or log
    content = read_file(Path(input_dir) / item["file"])
    if content is None:
        logger.error("unable to read file %s", item["file"])
        return None

    parsed = parse_question_category(content, logger=logger)
    if parsed is None:
        logger.error("unable to parse file %s", item["file"])
        return None

    parsed["file"] = item["file"]
    return parsed


def read_categories(
    input_dir: Path = DEFAULT_INPUT_DIR, logger: Optional[logging.Logger] = None
) -> Optional[List[QuestionCategory]]:
    """Read the index and every valid category file it lists.

    ``None`` when the index itself cannot be read.
    """
    logger = logger or log
    index_data = read_file(Path(input_dir) / INDEX_FILE)
    if index_data is None:
        logger.error("unable to read index file in %s", input_dir)
        return None

    index = parse_index_file(index_data, logger=logger)
    logger.info("index file length: %d", len(index))

    categories: List[QuestionCategory] = []
    for item in index:
        logger.info("processing file %s", item["file"])
        category = read_and_parse_file(item, input_dir, logger=logger)
        if category:
            categories.append(category)
    return categories


def setup_data(
    qdb: QuestionDatabase, input_dir: Path = DEFAULT_INPUT_DIR, logger: Optional[logging.Logger] = None
) -> bool:
    logger = logger or log
    categories = read_categories(input_dir, logger=logger)
    if categories is None:
        return False

    inserted = qdb.insert_categories(
        category["title"] for category in categories if category["questions"]
    )
    by_slug: Dict[str, DatabaseCategory] = {c["slug"]: c for c in inserted}

    for category in categories:
        if not category["questions"]:
            logger.error("no questions found for category %r", category["title"])
            continue

        # Categories that already existed are not returned by the insert.
        db_category = by_slug.get(qdb.category_slug(category["title"])) or qdb.find_category(
            category["title"]
        )
        if not db_category:
            logger.error("unable to find category %r", category["title"])
            continue

        for question in category["questions"]:
            db_question = qdb.insert_question(question, db_category["id"])
            if not db_question:
                logger.error("unable to insert question %r", question["question"])
                continue

            answers = qdb.insert_answers(question["answers"], db_question["id"])
            if len(answers) != len(question["answers"]):
                logger.error("unable to insert all answers for question %r", question["question"])

        logger.info("inserted questions and answers for category %r", category["title"])

    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create the quiz database and load questions.")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_INPUT_DIR,
                        help="directory holding index.json and the category files")
    parser.add_argument("--database", help="SQLite path, overrides DATABASE_URL")
    parser.add_argument("--keep-schema", action="store_true",
                        help="do not drop and recreate the tables first")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    args = build_parser().parse_args(argv)

    if args.database:
        database_path = resolve_db_path(args.database)
    else:
        env = environment(os.environ, log)
        if env is None:
            return 1
        database_path = env.database_path

    log.info("starting setup with database %s", database_path)
    db = Database(database_path, log)
    if not db.open():
        return 1
    qdb = QuestionDatabase(db, log)

    try:
        if not args.keep_schema and not setup_db_from_files(qdb):
            log.error("error setting up database from files")
            return 1

        if not setup_data(qdb, args.data_dir):
            log.error("error reading data from files")
            return 1
    finally:
        db.close()

    log.info("setup complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
