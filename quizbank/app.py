import logging
import os
import random
import secrets
from typing import Any, Dict, List

from flask import (
    Flask,
    abort,
    flash,
    g,
    redirect,
    render_template,
    request,
    session,
    url_for,
)
from dotenv import load_dotenv

from .database import Database
from .db_utils import SQL_DIR, resolve_db_path
from .environment import environment
from .records import DatabaseCategory, QuestionCategory
from .store import QuestionDatabase
from .validation import is_invalid, read_question_form, validate_question_form


# Load environment
load_dotenv()

app = Flask(__name__, static_folder="static", template_folder="templates")
app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret")
app.config["DATABASE"] = os.environ.get("DATABASE_URL")


# --- Database helpers ---

def _ensure_schema(db: Database) -> None:
    """Create the tables on a brand new database; existing data is left alone."""
    result = db.query("SELECT 1 FROM sqlite_master WHERE type='table' AND name='categories'")
    if result is None or result.rows:
        return
    schema = (SQL_DIR / "schema.sql").read_text(encoding="utf-8")
    if db.query_script(schema):
        app.logger.info("created schema in %s", db.path)


def get_question_database() -> QuestionDatabase:
    if "qdb" not in g:
        db = Database(resolve_db_path(app.config.get("DATABASE")), app.logger)
        if db.open():
            _ensure_schema(db)
        g.qdb = QuestionDatabase(db, app.logger)
    return g.qdb


@app.teardown_appcontext
def close_db(_: Any) -> None:
    qdb = g.pop("qdb", None)
    if qdb is not None and not qdb.db.close():
        app.logger.error("error closing database connection")


# --- Security ---

def ensure_csrf_token() -> None:
    if not session.get("csrf_token"):
        session["csrf_token"] = secrets.token_hex(16)


@app.before_request
def before_request() -> None:
    ensure_csrf_token()


@app.context_processor
def template_helpers() -> Dict[str, Any]:
    return {
        "asset_url": lambda filename: url_for("static", filename=filename),
        "is_invalid": is_invalid,
    }


# --- View helpers ---

def category_links(categories: List[DatabaseCategory]) -> List[Dict[str, str]]:
    return [
        {"title": category["name"], "href": url_for("category", slug=category["slug"])}
        for category in categories
    ]


def shuffled_answers(category: QuestionCategory) -> QuestionCategory:
    """Copy of ``category`` with each question's answers in random order."""
    questions = []
    for question in category["questions"]:
        answers = list(question["answers"])
        random.shuffle(answers)
        questions.append({"question": question["question"], "answers": answers})
    return {"title": category["title"], "questions": questions}


def render_question_form(form=None, errors=None, status: int = 200):
    categories = get_question_database().get_categories()
    return (
        render_template(
            "form.html",
            title="Create a question",
            categories=categories,
            form=form,
            errors=errors or {},
        ),
        status,
    )


# --- Routes ---

@app.route("/")
def index():
    categories = get_question_database().get_categories()
    return render_template(
        "index.html", title="Quiz categories", categories=category_links(categories)
    )


@app.route("/questions/")
def category_index():
    return redirect(url_for("index"))


@app.route("/questions/<slug>")
def category(slug: str):
    category = get_question_database().get_questions_and_answers_by_category(slug)
    if not category:
        abort(404)

    return render_template(
        "category.html",
        title=category["title"],
        category=shuffled_answers(category),
        back_href=url_for("index"),
    )


@app.route("/new-question", methods=["GET", "POST"])
def create_question():
    if request.method == "GET":
        return render_question_form()

    token = request.form.get("csrf_token", "")
    if token != session.get("csrf_token"):
        flash("Invalid CSRF token.")
        return redirect(url_for("create_question"))

    form = read_question_form(request.form)
    qdb = get_question_database()
    categories = qdb.get_categories()
    errors = validate_question_form(form, categories)
    if errors:
        return render_question_form(form, errors, status=400)

    created = qdb.create_question(
        form.question, int(form.category), form.answers, form.correct_index
    )
    if not created:
        flash("Unable to save the question, please try again.")
        return render_question_form(form, status=500)

    slug = next(c["slug"] for c in categories if str(c["id"]) == form.category)
    flash("Question created.")
    return redirect(url_for("category", slug=slug))


@app.errorhandler(404)
def page_not_found(_: Exception):
    return render_template("error.html", title="Page not found", status=404), 404


@app.errorhandler(500)
def server_error(error: Exception):
    app.logger.error("unhandled error: %r", error)
    return render_template("error.html", title="Something went wrong", status=500), 500


def main() -> None:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    env = environment(os.environ, app.logger)
    if env is None:
        raise SystemExit(1)

    app.secret_key = env.session_secret
    app.config["DATABASE"] = str(env.database_path)
    app.logger.info("server running at http://localhost:%s/", env.port)
    app.run(port=env.port)


if __name__ == "__main__":
    main()
