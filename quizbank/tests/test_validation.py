"""Tests for the question submission form validation."""

from werkzeug.datastructures import MultiDict

from quizbank.validation import QuestionForm, read_question_form, validate_question_form

CATEGORIES = [{"id": 1, "name": "HTML", "slug": "html"}, {"id": 2, "name": "CSS", "slug": "css"}]
ANSWERS = ["the first answer", "the second answer", "the third answer", "the fourth answer"]


def make_form(**overrides):
    values = {
        "question": "What is a valid question?",
        "category": "1",
        "answers": list(ANSWERS),
        "correct": "0",
    }
    values.update(overrides)
    return QuestionForm(**values)


def test_read_question_form_trims_values():
    form = read_question_form(
        MultiDict(
            [
                ("question", "  What is a valid question?  "),
                ("category", " 2 "),
                ("answers", " a "),
                ("answers", "b"),
                ("correct", "3"),
            ]
        )
    )
    assert form == QuestionForm("What is a valid question?", "2", ["a", "b"], "3")
    assert form.correct_index == 3


def test_valid_form_has_no_errors():
    assert validate_question_form(make_form(), CATEGORIES) == {}


def test_question_length():
    assert "question" in validate_question_form(make_form(question="short"), CATEGORIES)
    assert "question" in validate_question_form(make_form(question="x" * 501), CATEGORIES)


def test_unknown_category():
    assert "category" in validate_question_form(make_form(category="9"), CATEGORIES)
    assert "category" in validate_question_form(make_form(category=""), CATEGORIES)


def test_exactly_four_answers():
    errors = validate_question_form(make_form(answers=ANSWERS[:3]), CATEGORIES)
    assert "answers" in errors


def test_each_answer_length():
    answers = list(ANSWERS)
    answers[2] = "short"
    errors = validate_question_form(make_form(answers=answers), CATEGORIES)
    assert list(errors) == ["answers-2"]


def test_correct_must_be_an_answer_index():
    for value in ["", "4", "-1", "one"]:
        assert "correct" in validate_question_form(make_form(correct=value), CATEGORIES)
