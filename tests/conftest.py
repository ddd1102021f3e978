import pytest

from locallibrary import create_app
from locallibrary.config import TestingConfig
from locallibrary.models import Author, Book, BookInstance, Genre, db


@pytest.fixture
def app(tmp_path):
    app = create_app({"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'library.db'}"}, config_class=TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def _add(app, record):
    with app.app_context():
        db.session.add(record)
        db.session.commit()
        return record.id


@pytest.fixture
def make_author(app):
    def make(first_name="Isaac", family_name="Asimov", **kwargs):
        return _add(app, Author(first_name=first_name, family_name=family_name, **kwargs))
    return make


@pytest.fixture
def make_genre(app):
    def make(name="Fantasy"):
        return _add(app, Genre(name=name))
    return make


@pytest.fixture
def make_book(app):
    def make(author_id, title="Foundation", genre_ids=(), summary="A summary.", isbn="9780553293357"):
        with app.app_context():
            genres = Genre.query.filter(Genre.id.in_(genre_ids)).all() if genre_ids else []
            book = Book(title=title, author_id=author_id, summary=summary, isbn=isbn, genres=genres)
            db.session.add(book)
            db.session.commit()
            return book.id
    return make


@pytest.fixture
def make_copy(app):
    def make(book_id, imprint="Gnome Press, 1951.", status="Available", **kwargs):
        return _add(app, BookInstance(book_id=book_id, imprint=imprint, status=status, **kwargs))
    return make


@pytest.fixture
def fetch(app):
    """Load a record by id in a fresh app context and return its column values."""
    def fetch(model, pk):
        with app.app_context():
            record = db.session.get(model, pk)
            if record is None:
                return None
            return {column.name: getattr(record, column.name) for column in model.__table__.columns}
    return fetch


@pytest.fixture
def count(app):
    def count(model):
        with app.app_context():
            return model.query.count()
    return count
