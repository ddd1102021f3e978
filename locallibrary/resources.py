"""
CRUD controllers of the catalog.

``EntityResource`` implements list, detail, create, update and delete once;
each entity subclass only names its model, form and ordering and
overrides the hooks it needs:

* ``find_duplicate`` with ``duplicate_policy`` -- what an already existing
  record does to a submission (``REDIRECT`` to it or ``REJECT`` with an error)
* ``check_references`` -- raise ``ConstraintError`` for a dangling reference
* ``dependents`` -- records that block deletion
* ``prepare_form`` / ``initial_form`` / ``apply`` -- form <-> record mapping

Updates are full replace: ``apply`` writes every field from the submitted
form, so a field left out of the form is cleared.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from flask import flash, redirect, render_template, request, url_for
from sqlalchemy.orm import contains_eager, joinedload

from .derived import author_name, record_url
from .errors import ConstraintError, NotFoundError
from .forms import AuthorForm, BookForm, BookInstanceForm, GenreForm, error_messages
from .models import Author, Book, BookInstance, Genre, db

logger = logging.getLogger(__name__)

REDIRECT = 'redirect'
REJECT = 'reject'

# Largest value a signed 64-bit INTEGER column can hold
MAX_ID = 2 ** 63 - 1


def valid_id(pk: Optional[int]) -> bool:
    return pk is not None and 1 <= pk <= MAX_ID


def get_record(model, pk: Optional[int]):
    """Record with primary key ``pk`` or None. Ids outside the column range are never looked up."""
    if not valid_id(pk):
        return None
    return db.session.get(model, pk)


def casefold_match(records: Iterable, **values: str):
    """First record whose attributes equal ``values`` ignoring case."""
    wanted = {key: value.casefold() for key, value in values.items()}
    for record in records:
        if all((getattr(record, key) or "").casefold() == value for key, value in wanted.items()):
            return record
    return None


class EntityResource:
    name = None
    plural = None
    label = None
    model = None
    form_class = None
    order_by = ()

    duplicate_policy = REJECT
    duplicate_message = None
    # a missing record on delete goes back to the list instead of a 404
    redirect_missing_on_delete = True

    def __init__(self):
        if self.plural is None:
            self.plural = f"{self.name}s"

    # --- Hooks ---
    def list_query(self):
        return self.model.query.order_by(*self.order_by)

    def detail_context(self, record):
        return {}

    def prepare_form(self, form):
        pass

    def initial_form(self, record):
        return self.form_class(obj=record)

    def find_duplicate(self, form, exclude_id=None):
        return None

    def check_references(self, form):
        pass

    def dependents(self, record):
        return []

    def apply(self, form, record):
        raise NotImplementedError

    # --- Helpers ---
    def others(self, exclude_id):
        query = self.model.query
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query

    def get_or_404(self, pk):
        record = get_record(self.model, pk)
        if record is None:
            logger.info("%s %s not found", self.label, pk)
            raise NotFoundError(f"{self.label} not found")
        return record

    def list_url(self):
        return url_for(f'catalog.{self.name}_list')

    def render(self, page, **context):
        return render_template(f'{self.name}_{page}.html', **context)

    def render_form(self, form, title, record=None, errors=None):
        if errors is None:
            errors = error_messages(form)
        return self.render('form', title=title, form=form, record=record, errors=errors)

    def save(self, form, record, title):
        """Check constraints, then write ``form`` into ``record`` and commit."""
        try:
            duplicate = self.find_duplicate(form, exclude_id=record.id)
            if duplicate is not None:
                if self.duplicate_policy == REDIRECT:
                    logger.info("%s already exists as %s", self.label, record_url(duplicate))
                    return redirect(record_url(duplicate))
                raise ConstraintError(self.duplicate_message)
            self.check_references(form)
        except ConstraintError as exc:
            logger.info("%s rejected: %s", self.label, exc.message)
            return self.render_form(form, title, record=record if record.id else None, errors=[exc.message])

        creating = record.id is None
        self.apply(form, record)
        if creating:
            db.session.add(record)
        db.session.commit()
        logger.info("%s %s with id %s", self.label, "created" if creating else "updated", record.id)
        flash(f"{self.label} {'created' if creating else 'updated'}.", "success")
        return redirect(record_url(record))

    # --- Views ---
    def list_view(self):
        records = self.list_query().all()
        logger.info("Found %d %s", len(records), self.plural)
        return self.render('list', title=f"{self.label} list", records=records)

    def detail_view(self, pk):
        record = self.get_or_404(pk)
        return self.render('detail', title=f"{self.label} detail", record=record, **self.detail_context(record))

    def create_view(self):
        title = f"Create {self.label.lower()}"
        form = self.form_class()
        self.prepare_form(form)
        if form.validate_on_submit():
            return self.save(form, self.model(), title)
        if form.is_submitted():
            logger.info("%s form errors: %s", self.label, form.errors)
        return self.render_form(form, title)

    def update_view(self, pk):
        title = f"Update {self.label.lower()}"
        record = self.get_or_404(pk)
        form = self.form_class() if request.method == 'POST' else self.initial_form(record)
        self.prepare_form(form)
        if form.validate_on_submit():
            return self.save(form, record, title)
        if form.is_submitted():
            logger.info("%s form errors: %s", self.label, form.errors)
        return self.render_form(form, title, record=record)

    def delete_view(self, pk):
        record = get_record(self.model, pk)
        if record is None:
            logger.info("%s %s not found for delete", self.label, pk)
            if self.redirect_missing_on_delete:
                return redirect(self.list_url())
            raise NotFoundError(f"{self.label} not found")

        dependents = self.dependents(record)
        if request.method == 'POST':
            if dependents:
                logger.info("Refusing to delete %s %s: %d dependent records", self.label, pk, len(dependents))
            else:
                db.session.delete(record)
                db.session.commit()
                logger.info("%s deleted with id %s", self.label, pk)
                flash(f"{self.label} deleted.", "success")
                return redirect(self.list_url())
        return self.render('delete', title=f"Delete {self.label.lower()}", record=record, dependents=dependents)

    def register(self, bp):
        name = self.name
        bp.add_url_rule(f'/{self.plural}', f'{name}_list', self.list_view)
        bp.add_url_rule(f'/{name}/create', f'{name}_create', self.create_view, methods=['GET', 'POST'])
        bp.add_url_rule(f'/{name}/<int:pk>', f'{name}_detail', self.detail_view)
        bp.add_url_rule(f'/{name}/<int:pk>/update', f'{name}_update', self.update_view, methods=['GET', 'POST'])
        bp.add_url_rule(f'/{name}/<int:pk>/delete', f'{name}_delete', self.delete_view, methods=['GET', 'POST'])


# --- Entities ---
class AuthorResource(EntityResource):
    name = 'author'
    label = 'Author'
    model = Author
    form_class = AuthorForm
    order_by = (Author.family_name, Author.first_name)
    duplicate_message = "Author with this first and family name already exists."

    def books_of(self, record):
        return Book.query.filter_by(author_id=record.id).order_by(Book.title).all()

    def detail_context(self, record):
        return {'books': self.books_of(record)}

    def find_duplicate(self, form, exclude_id=None):
        # SQLite's lower() only folds ASCII, so compare in Python
        return casefold_match(
            self.others(exclude_id).all(),
            first_name=form.first_name.data,
            family_name=form.family_name.data,
        )

    def dependents(self, record):
        return self.books_of(record)

    def apply(self, form, record):
        record.first_name = form.first_name.data
        record.family_name = form.family_name.data
        record.date_of_birth = form.date_of_birth.data
        record.date_of_death = form.date_of_death.data


class GenreResource(EntityResource):
    name = 'genre'
    label = 'Genre'
    model = Genre
    form_class = GenreForm
    order_by = (Genre.name,)
    duplicate_policy = REDIRECT
    redirect_missing_on_delete = False

    def detail_context(self, record):
        books = Book.query.filter(Book.genres.any(Genre.id == record.id)).order_by(Book.title).all()
        return {'books': books}

    def find_duplicate(self, form, exclude_id=None):
        return casefold_match(self.others(exclude_id).all(), name=form.name.data)

    def apply(self, form, record):
        record.name = form.name.data


class BookResource(EntityResource):
    name = 'book'
    label = 'Book'
    model = Book
    form_class = BookForm
    order_by = (Book.title,)

    def list_query(self):
        return Book.query.options(joinedload(Book.author)).order_by(*self.order_by)

    def copies_of(self, record):
        return BookInstance.query.filter_by(book_id=record.id).order_by(BookInstance.id).all()

    def detail_context(self, record):
        return {'copies': self.copies_of(record)}

    def prepare_form(self, form):
        authors = Author.query.order_by(Author.family_name, Author.first_name).all()
        form.author.choices = [("", "--Please select an author--")] + [(a.id, author_name(a)) for a in authors]
        form.genre.choices = [(g.id, g.name) for g in Genre.query.order_by(Genre.name).all()]

    def initial_form(self, record):
        return self.form_class(data={
            'title': record.title,
            'author': record.author_id,
            'summary': record.summary,
            'isbn': record.isbn,
            'genre': [g.id for g in record.genres],
        })

    def check_references(self, form):
        if get_record(Author, form.author.data) is None:
            raise ConstraintError("Author not found.")
        genre_ids = set(form.genre.data or [])
        if not all(valid_id(pk) for pk in genre_ids):
            raise ConstraintError("Genre not found.")
        if genre_ids and Genre.query.filter(Genre.id.in_(genre_ids)).count() != len(genre_ids):
            raise ConstraintError("Genre not found.")

    def dependents(self, record):
        return self.copies_of(record)

    def apply(self, form, record):
        genre_ids = set(form.genre.data or [])
        genres = Genre.query.filter(Genre.id.in_(genre_ids)).all() if genre_ids else []
        record.title = form.title.data
        record.author_id = form.author.data
        record.summary = form.summary.data
        record.isbn = form.isbn.data
        record.genres = genres


class BookInstanceResource(EntityResource):
    name = 'bookinstance'
    label = 'Book instance'
    model = BookInstance
    form_class = BookInstanceForm
    order_by = (Book.title, BookInstance.id)

    def list_query(self):
        return (BookInstance.query
                .join(BookInstance.book)
                .options(contains_eager(BookInstance.book))
                .order_by(*self.order_by))

    def prepare_form(self, form):
        books = Book.query.order_by(Book.title).all()
        form.book.choices = [("", "--Please select a book--")] + [(b.id, b.title) for b in books]

    def initial_form(self, record):
        return self.form_class(data={
            'book': record.book_id,
            'imprint': record.imprint,
            'status': record.status,
            'due_back': record.due_back,
        })

    def check_references(self, form):
        if get_record(Book, form.book.data) is None:
            raise ConstraintError("Book not found.")

    def apply(self, form, record):
        due_back = form.due_back.data
        if due_back is None and record.id is None:
            due_back = date.today()
        record.book_id = form.book.data
        record.imprint = form.imprint.data
        record.status = form.status.data
        record.due_back = due_back


RESOURCES = (AuthorResource(), GenreResource(), BookResource(), BookInstanceResource())
