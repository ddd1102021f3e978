"""
Derived (virtual) fields of catalog records.

Nothing here is persisted. Each helper takes a record and returns a
display value; templates use them as filters, e.g.
``{{ author|author_name }}`` or ``{{ copy|record_url }}``.
"""

CATALOG_PREFIX = "/catalog"

# Placeholder shown for a missing date
MISSING_DATE = "н/д"

# Ukrainian month names in the genitive case ("5 березня")
UK_MONTHS = (
    "січня", "лютого", "березня", "квітня", "травня", "червня",
    "липня", "серпня", "вересня", "жовтня", "листопада", "грудня",
)


def format_date_uk(value):
    """Format a date as ``d MMMM yyyy року``, e.g. ``5 березня 1990 року``."""
    return f"{value.day} {UK_MONTHS[value.month - 1]} {value.year:04d} року"


def author_name(author) -> str:
    if author.first_name and author.family_name:
        return f"{author.family_name}, {author.first_name}"
    return ""


def author_lifespan(author):
    dob = format_date_uk(author.date_of_birth) if author.date_of_birth else MISSING_DATE
    dod = format_date_uk(author.date_of_death) if author.date_of_death else MISSING_DATE
    return f"{dob} - {dod}"


def due_back_formatted(instance):
    if instance.due_back is None:
        return ""
    return format_date_uk(instance.due_back)


def record_url(record) -> str:
    """Canonical path of a record, e.g. ``/catalog/author/3``."""
    return f"{CATALOG_PREFIX}/{record.url_segment}/{record.id}"


TEMPLATE_FILTERS = {
    "author_name": author_name,
    "author_lifespan": author_lifespan,
    "due_back_formatted": due_back_formatted,
    "record_url": record_url,
}
