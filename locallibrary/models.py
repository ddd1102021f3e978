from datetime import date
from typing import Optional

import bleach
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import validates

db = SQLAlchemy()

STATUS_CHOICES = ("Available", "Maintenance", "Loaned", "Reserved")
DEFAULT_STATUS = "Maintenance"

# Inline markup a book summary may keep; everything else is stripped
SUMMARY_ALLOWED_TAGS = ['b', 'i', 'u', 'em', 'strong', 'p', 'br', 'ul', 'ol', 'li']


def clean_summary(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return bleach.clean(value, tags=SUMMARY_ALLOWED_TAGS, strip=True)


book_genres = db.Table(
    'book_genres',
    db.Column('book_id', db.Integer, db.ForeignKey('books.id'), primary_key=True),
    db.Column('genre_id', db.Integer, db.ForeignKey('genres.id'), primary_key=True),
)


# --- Models ---
class Author(db.Model):
    __tablename__ = 'authors'
    url_segment = 'author'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False, index=True)
    date_of_birth = db.Column(db.Date)
    date_of_death = db.Column(db.Date)

    books = db.relationship('Book', back_populates='author')

    def __repr__(self):
        return f"<Author {self.id} {self.family_name!r}>"


class Genre(db.Model):
    __tablename__ = 'genres'
    url_segment = 'genre'

    # uniqueness is checked by the controller, not by an index
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)

    books = db.relationship('Book', secondary=book_genres, back_populates='genres')

    def __repr__(self):
        return f"<Genre {self.id} {self.name!r}>"


class Book(db.Model):
    __tablename__ = 'books'
    url_segment = 'book'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('authors.id'), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(20), nullable=False)

    author = db.relationship('Author', back_populates='books')
    genres = db.relationship('Genre', secondary=book_genres, back_populates='books', order_by='Genre.name')
    instances = db.relationship('BookInstance', back_populates='book')

    @validates('summary')
    def validate_summary(self, key, value):
        # templates render the summary unescaped
        return clean_summary(value)

    def __repr__(self):
        return f"<Book {self.id} {self.title!r}>"


class BookInstance(db.Model):
    __tablename__ = 'book_instances'
    url_segment = 'bookinstance'

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey('books.id'), nullable=False)
    imprint = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=DEFAULT_STATUS)
    due_back = db.Column(db.Date, default=date.today)

    book = db.relationship('Book', back_populates='instances')

    def __repr__(self):
        return f"<BookInstance {self.id} {self.status}>"
