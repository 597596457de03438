"""Tests for the static site generator."""

import json

from quizbank.generate import escape_category, generate, page_name


def test_page_name():
    assert page_name({"title": "T", "questions": [], "file": "html.json"}) == "html.html"
    assert page_name({"title": "T", "questions": []}) is None


def test_escape_category():
    category = {
        "title": "A & B",
        "questions": [{"question": "x < y\n\nz", "answers": [{"answer": "<b>", "correct": True}]}],
    }
    assert escape_category(category) == {
        "title": "A &amp; B",
        "questions": [
            {"question": "<p>x &lt; y</p><p>z</p>", "answers": [{"answer": "&lt;b&gt;", "correct": True}]}
        ],
    }


def test_generate_writes_pages(write_data, tmp_path):
    data_dir = write_data(
        {
            "index.json": json.dumps(
                [{"title": "HTML", "file": "html.json"}, {"title": "Gone", "file": "gone.json"}]
            ),
            "html.json": json.dumps(
                {
                    "title": "HTML",
                    "questions": [
                        {"question": "Largest heading?", "answers": [{"answer": "<h1>", "correct": True}]}
                    ],
                }
            ),
        }
    )
    output_dir = tmp_path / "dist"

    assert generate(data_dir, output_dir) is True

    index = (output_dir / "index.html").read_text(encoding="utf-8")
    assert 'href="html.html"' in index
    assert "gone" not in index
    page = (output_dir / "html.html").read_text(encoding="utf-8")
    assert "<p>Largest heading?</p>" in page
    assert "&lt;h1&gt;" in page
    assert 'href="static/styles.css"' in page
    assert (output_dir / "static" / "main.js").exists()


def test_generate_without_index(write_data, tmp_path):
    assert generate(write_data({}), tmp_path / "dist") is False
