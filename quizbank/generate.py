"""Build a static version of the quiz straight from the JSON files.

1. Creates the output directory if needed
2. Reads and parses ``index.json`` from the input directory
3. Reads and parses every category file listed in the index
4. Writes one HTML page per category and an index page
5. Copies the stylesheet and grading script next to the pages
"""
from __future__ import annotations

import argparse
import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from flask import render_template

from .app import app, shuffled_answers
from .files import create_dir_if_not_exists, write_file
from .html import replace_html_entities, string_to_html
from .loader import DEFAULT_INPUT_DIR, read_categories
from .records import QuestionCategory

DEFAULT_OUTPUT_DIR = Path("dist")
INDEX_PAGE = "index.html"

log = logging.getLogger(__name__)


def page_name(category: QuestionCategory) -> Optional[str]:
    if not category.get("file"):
        return None
    return str(Path(category["file"]).with_suffix(".html"))


def _asset_url(filename: str) -> str:
    return f"static/{filename}"


def escape_category(category: QuestionCategory) -> QuestionCategory:
    """Make a parsed category safe to drop into the templates unescaped."""
    return {
        "title": replace_html_entities(category["title"]),
        "questions": [
            {
                "question": string_to_html(question["question"]),
                "answers": [
                    {"answer": replace_html_entities(a["answer"]), "correct": a["correct"]}
                    for a in question["answers"]
                ],
            }
            for question in category["questions"]
        ],
    }


def render_index_page(categories: List[QuestionCategory]) -> str:
    links = [
        {"title": replace_html_entities(category["title"]), "href": page_name(category)}
        for category in categories
        if page_name(category)
    ]
    with app.test_request_context():
        return render_template(
            "index.html",
            title="Quiz categories",
            categories=links,
            show_create_link=False,
            asset_url=_asset_url,
        )


def render_category_page(category: QuestionCategory) -> str:
    safe = escape_category(category)
    with app.test_request_context():
        return render_template(
            "category.html",
            title=safe["title"],
            category=shuffled_answers(safe),
            back_href=INDEX_PAGE,
            asset_url=_asset_url,
        )


def generate(
    input_dir: Path = DEFAULT_INPUT_DIR,
    output_dir: Path = DEFAULT_OUTPUT_DIR,
    logger: Optional[logging.Logger] = None,
) -> bool:
    logger = logger or log
    if not create_dir_if_not_exists(output_dir):
        return False

    categories = read_categories(input_dir, logger=logger)
    if categories is None:
        return False

    for category in categories:
        name = page_name(category)
        if not name:
            logger.error("missing file for category %r", category["title"])
            continue
        target = Path(output_dir) / name
        if write_file(target, render_category_page(category)):
            logger.info("category file written to %s", target)

    index_target = Path(output_dir) / INDEX_PAGE
    if not write_file(index_target, render_index_page(categories)):
        return False
    logger.info("index file written to %s", index_target)

    try:
        shutil.copytree(app.static_folder, Path(output_dir) / "static", dirs_exist_ok=True)
    except OSError as exc:
        logger.error("unable to copy static files: %s", exc)
        return False
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Generate static quiz pages from JSON files.")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_INPUT_DIR)
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR)
    args = parser.parse_args(argv)

    log.info("starting to generate")
    if not generate(args.data_dir, args.output_dir):
        log.error("error generating")
        return 1
    log.info("finished generating")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
