from sqlalchemy import func, select

from .models import Author, Book, BookInstance, Genre, db


def _count(model, *criteria):
    return select(func.count(model.id)).where(*criteria).scalar_subquery()


def library_counts():
    """Record counts for the catalog home page.

    The five counts are independent scalar subqueries of a single SELECT,
    so they come back as one snapshot in one round trip.
    """
    row = db.session.execute(select(
        _count(Book).label('book_count'),
        _count(BookInstance).label('book_instance_count'),
        _count(BookInstance, BookInstance.status == 'Available').label('book_instance_available_count'),
        _count(Author).label('author_count'),
        _count(Genre).label('genre_count'),
    )).one()
    return dict(row._mapping)
