from datetime import date

import pytest

from locallibrary.forms import AuthorForm, BookForm, BookInstanceForm, GenreForm, error_messages


def _form(app, form_class, data, **choices):
    with app.test_request_context(method="POST", data=data):
        form = form_class()
        for name, values in choices.items():
            getattr(form, name).choices = values
        form.validate()
        return form


@pytest.mark.parametrize("name", ["ab", "", "  a  ", "Sci-Fi", "Science Fiction", "Poetry!"])
def test_genre_name_rejected(app, name):
    form = _form(app, GenreForm, {"name": name})
    assert "name" in form.errors


@pytest.mark.parametrize("name", ["Fantasy", "Poetry", "SF2", "Фантастика"])
def test_genre_name_accepted(app, name):
    form = _form(app, GenreForm, {"name": name})
    assert form.errors == {}


def test_genre_name_is_trimmed(app):
    form = _form(app, GenreForm, {"name": "  Fantasy  "})
    assert form.name.data == "Fantasy"


def test_author_form_collects_errors_from_every_field(app):
    form = _form(app, AuthorForm, {
        "first_name": "   ",
        "family_name": "x" * 101,
        "date_of_birth": "not a date",
        "date_of_death": "2020-13-45",
    })
    assert set(form.errors) == {"first_name", "family_name", "date_of_birth", "date_of_death"}
    assert error_messages(form) == [
        "First name must not be empty.",
        "Family name is too long (max 100 characters).",
        "Invalid date of birth",
        "Invalid date of death",
    ]


def test_author_form_optional_dates(app):
    form = _form(app, AuthorForm, {"first_name": "Isaac", "family_name": "Asimov",
                                   "date_of_birth": "", "date_of_death": ""})
    assert form.errors == {}
    assert form.date_of_birth.data is None
    assert form.date_of_death.data is None


@pytest.mark.parametrize("raw", ["1920-01-02", "1920-01-02T10:30:00", "19200102"])
def test_author_form_accepts_iso_dates(app, raw):
    form = _form(app, AuthorForm, {"first_name": "Isaac", "family_name": "Asimov", "date_of_birth": raw})
    assert form.errors == {}
    assert form.date_of_birth.data == date(1920, 1, 2)


def test_author_form_rejects_non_iso_date(app):
    form = _form(app, AuthorForm, {"first_name": "Isaac", "family_name": "Asimov", "date_of_birth": "02/01/1920"})
    assert form.errors == {"date_of_birth": ["Invalid date of birth"]}


def test_author_form_ignores_unknown_fields(app):
    form = _form(app, AuthorForm, {"first_name": "Isaac", "family_name": "Asimov", "nickname": "Doc"})
    assert form.errors == {}


def test_bookinstance_status_must_be_known(app):
    form = _form(app, BookInstanceForm, {"book": "1", "imprint": "Gnome Press", "status": "Unknown"},
                 book=[(1, "Foundation")])
    assert list(form.errors) == ["status"]
    assert "Available, Maintenance, Loaned, Reserved" in form.errors["status"][0]


def test_bookinstance_status_defaults_to_maintenance(app):
    form = _form(app, BookInstanceForm, {"book": "1", "imprint": "Gnome Press"}, book=[(1, "Foundation")])
    assert form.errors == {}
    assert form.status.data == "Maintenance"


def test_bookinstance_requires_book_and_imprint(app):
    form = _form(app, BookInstanceForm, {"book": "", "imprint": " ", "status": "Loaned"}, book=[])
    assert set(form.errors) == {"book", "imprint"}


def test_book_form_sanitizes_summary(app):
    form = _form(app, BookForm, {
        "title": "Foundation", "author": "1", "isbn": "9780553293357",
        "summary": "<b>bold</b><img src=x onerror=alert(1)>",
    }, author=[(1, "Asimov, Isaac")], genre=[])
    assert form.errors == {}
    assert form.summary.data == "<b>bold</b>"
    assert form.genre.data == []


def test_book_form_requires_fields(app):
    form = _form(app, BookForm, {}, author=[], genre=[])
    assert set(form.errors) == {"title", "author", "summary", "isbn"}
