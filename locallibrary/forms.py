from typing import Optional

from dateutil.parser import isoparse
from flask_wtf import FlaskForm
from wtforms import DateField, SelectField, SelectMultipleField, StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, Optional as OptionalValidator, ValidationError

from .models import DEFAULT_STATUS, STATUS_CHOICES, clean_summary


# --- Filters ---
def strip_whitespace(value):
    return value.strip() if isinstance(value, str) else value


def optional_int(value) -> Optional[int]:
    """Coerce a select value to an int, treating an empty choice as no value."""
    if value is None or value == "":
        return None
    return int(value)


# --- Fields / validators ---
class IsoDateField(DateField):
    """Date field accepting ISO-8601 input only.

    Empty input leaves ``data`` as ``None``; pair it with ``OptionalValidator()``
    so that an empty value is not reported as an error.
    """

    def __init__(self, label=None, validators=None, message="Invalid date", **kwargs):
        super().__init__(label, validators, **kwargs)
        self.invalid_message = message

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        raw = " ".join(valuelist).strip()
        if not raw:
            self.data = None
            return
        try:
            self.data = isoparse(raw).date()
        except (ValueError, OverflowError):
            self.data = None
            raise ValueError(self.invalid_message)


class Alphanumeric:
    def __init__(self, message=None):
        self.message = message or "Field must contain only letters and digits."

    def __call__(self, form, field):
        if field.data and not field.data.isalnum():
            raise ValidationError(self.message)


# --- Forms ---
class AuthorForm(FlaskForm):
    first_name = StringField("First name", filters=[strip_whitespace], validators=[
        DataRequired("First name must not be empty."),
        Length(max=100, message="First name is too long (max 100 characters)."),
    ])
    family_name = StringField("Family name", filters=[strip_whitespace], validators=[
        DataRequired("Family name must not be empty."),
        Length(max=100, message="Family name is too long (max 100 characters)."),
    ])
    date_of_birth = IsoDateField("Date of birth", validators=[OptionalValidator()], message="Invalid date of birth")
    date_of_death = IsoDateField("Date of death", validators=[OptionalValidator()], message="Invalid date of death")


class GenreForm(FlaskForm):
    name = StringField("Name", filters=[strip_whitespace], validators=[
        Length(min=3, max=100, message="Genre name must contain between 3 and 100 characters."),
        Alphanumeric("Genre name contains non-alphanumeric characters."),
    ])


class BookForm(FlaskForm):
    title = StringField("Title", filters=[strip_whitespace], validators=[
        DataRequired("Title must not be empty."),
        Length(max=200, message="Title is too long (max 200 characters)."),
    ])
    # choices are filled by the resource; existence is a constraint check
    author = SelectField("Author", coerce=optional_int, validate_choice=False, validators=[
        DataRequired("Author must not be empty."),
    ])
    summary = TextAreaField("Summary", filters=[strip_whitespace, clean_summary], validators=[
        DataRequired("Summary must not be empty."),
        Length(max=2000, message="Summary is too long (max 2000 characters)."),
    ])
    isbn = StringField("ISBN", filters=[strip_whitespace], validators=[
        DataRequired("ISBN must not be empty."),
        Length(max=20, message="ISBN is too long (max 20 characters)."),
    ])
    genre = SelectMultipleField("Genre", coerce=int, validate_choice=False)


class BookInstanceForm(FlaskForm):
    book = SelectField("Book", coerce=optional_int, validate_choice=False, validators=[
        DataRequired("Book must not be empty."),
    ])
    imprint = StringField("Imprint", filters=[strip_whitespace], validators=[
        DataRequired("Imprint must not be empty."),
        Length(max=200, message="Imprint is too long (max 200 characters)."),
    ])
    status = SelectField(
        "Status",
        choices=[(s, s) for s in STATUS_CHOICES],
        default=DEFAULT_STATUS,
        validate_choice=False,
        filters=[strip_whitespace],
        validators=[AnyOf(STATUS_CHOICES, message="Status must be one of: " + ", ".join(STATUS_CHOICES) + ".")],
    )
    due_back = IsoDateField("Date when book available", validators=[OptionalValidator()], message="Invalid due back date")


def error_messages(form):
    """All field errors of a validated form, in field order."""
    return [message for field in form for message in field.errors]
