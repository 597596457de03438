"""Tests for the web routes."""

from quizbank.app import app

ANSWERS = ["the first answer", "the second answer", "the third answer", "the fourth answer"]


def question_form(**overrides):
    data = {
        "csrf_token": "test-token",
        "question": "Which tag makes a paragraph?",
        "category": "1",
        "answers": list(ANSWERS),
        "correct": "1",
    }
    data.update(overrides)
    return data


def test_index_lists_categories(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert 'href="/questions/html"' in body
    assert 'href="/questions/css"' in body


def test_category_index_redirects(client):
    response = client.get("/questions/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")


def test_category_page(client):
    response = client.get("/questions/html")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "<h1>HTML</h1>" in body
    assert "<p>Which element is the largest heading?</p>" in body
    assert "&lt;h1&gt;" in body
    assert 'data-correct="true"' in body
    assert body.count('class="question"') == 2


def test_category_without_questions_is_404(client):
    assert client.get("/questions/css").status_code == 404


def test_unknown_category_is_404(client):
    response = client.get("/questions/does-not-exist")
    assert response.status_code == 404
    assert "Page not found" in response.get_data(as_text=True)


def test_create_question_form(client):
    response = client.get("/new-question")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert 'name="csrf_token" value="test-token"' in body
    assert '<option value="1">HTML</option>' in body


def test_create_question(client, seeded_qdb):
    response = client.post("/new-question", data=question_form())
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/questions/html")

    category = seeded_qdb.get_questions_and_answers_by_category("html")
    created = category["questions"][-1]
    assert created["question"] == "<p>Which tag makes a paragraph?</p>"
    assert [a["correct"] for a in created["answers"]] == [False, True, False, False]


def test_create_question_shows_errors(client, seeded_qdb):
    response = client.post(
        "/new-question",
        data=question_form(question="short", answers=ANSWERS[:3], correct="7"),
    )
    assert response.status_code == 400
    body = response.get_data(as_text=True)
    assert "Question must be between 10 and 500 characters" in body
    assert "Exactly 4 answers must be given" in body
    assert "A correct answer must be chosen" in body
    assert ">short</textarea>" in body
    assert len(seeded_qdb.get_questions_and_answers_by_category("html")["questions"]) == 2


def test_create_question_rejects_bad_csrf_token(client, seeded_qdb):
    response = client.post("/new-question", data=question_form(csrf_token="wrong"))
    assert response.status_code == 302
    assert len(seeded_qdb.get_questions_and_answers_by_category("html")["questions"]) == 2


def test_create_question_escapes_script(client, seeded_qdb):
    client.post(
        "/new-question",
        data=question_form(question='<script>alert("x")</script> is this safe?'),
    )
    response = client.get("/questions/html")
    body = response.get_data(as_text=True)
    assert "<script>alert" not in body
    assert "&lt;script&gt;" in body


def test_empty_database_gets_schema(tmp_path):
    app.config["TESTING"] = True
    app.config["DATABASE"] = str(tmp_path / "fresh.db")
    with app.test_client() as client:
        response = client.get("/")
    assert response.status_code == 200
    assert "No categories yet." in response.get_data(as_text=True)


def test_category_named_new_is_reachable(client, seeded_qdb):
    category = seeded_qdb.insert_category("New")
    seeded_qdb.insert_question({"question": "Is this new?", "answers": []}, category["id"])

    response = client.get("/questions/new")
    assert response.status_code == 200
    assert "<h1>New</h1>" in response.get_data(as_text=True)
    assert client.get("/new-question").status_code == 200
