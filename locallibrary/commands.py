from datetime import date

import click
from flask.cli import with_appcontext

from .models import Author, Book, BookInstance, Genre, db


def seed_sample_data():
    """Load a small sample catalog. Returns False when data already exists."""
    if Author.query.first() is not None:
        return False

    rothfuss = Author(first_name="Patrick", family_name="Rothfuss", date_of_birth=date(1973, 6, 6))
    bova = Author(first_name="Ben", family_name="Bova", date_of_birth=date(1932, 11, 8))
    asimov = Author(first_name="Isaac", family_name="Asimov",
                    date_of_birth=date(1920, 1, 2), date_of_death=date(1992, 4, 6))
    billings = Author(first_name="Bob", family_name="Billings")
    jones = Author(first_name="Jim", family_name="Jones", date_of_birth=date(1971, 12, 16))

    fantasy = Genre(name="Fantasy")
    scifi = Genre(name="ScienceFiction")
    poetry = Genre(name="Poetry")

    wind = Book(title="The Name of the Wind (The Kingkiller Chronicle, #1)", author=rothfuss,
                summary="I have stolen princesses back from sleeping barrow kings.",
                isbn="9781473211896", genres=[fantasy])
    fear = Book(title="The Wise Man's Fear (The Kingkiller Chronicle, #2)", author=rothfuss,
                summary="Picking up the tale of Kvothe Kingkiller once again.",
                isbn="9788401352836", genres=[fantasy])
    apes = Book(title="Apes and Angels", author=bova,
                summary="Humankind headed out to the stars not for conquest, nor exploration.",
                isbn="9780765379528", genres=[scifi])
    death_wave = Book(title="Death Wave", author=bova,
                      summary="In Ben Bova's previous novel New Earth, Jordan Kell led the first human mission.",
                      isbn="9780765379504", genres=[scifi])
    test_one = Book(title="Test Book 1", author=jones, summary="Summary of test book 1",
                    isbn="ISBN111111", genres=[fantasy, scifi])
    test_two = Book(title="Test Book 2", author=jones, summary="Summary of test book 2",
                    isbn="ISBN222222", genres=[poetry])

    copies = [
        BookInstance(book=wind, imprint="London Gollancz, 2014.", status="Available", due_back=date(2020, 6, 6)),
        BookInstance(book=fear, imprint="Gollancz, 2011.", status="Loaned", due_back=date(2020, 6, 6)),
        BookInstance(book=apes, imprint="Gollancz, 2015.", status="Available"),
        BookInstance(book=death_wave, imprint="New York Tom Doherty Associates, 2016.", status="Available"),
        BookInstance(book=death_wave, imprint="New York Tom Doherty Associates, 2016.", status="Maintenance"),
        BookInstance(book=test_one, imprint="Imprint XXX2", status="Loaned"),
        BookInstance(book=test_two, imprint="Imprint XXX3", status="Reserved"),
    ]

    db.session.add_all([rothfuss, bova, asimov, billings, jones, fantasy, scifi, poetry])
    db.session.add_all([wind, fear, apes, death_wave, test_one, test_two] + copies)
    db.session.commit()
    return True


# --- CLI helpers ---
@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the catalog tables."""
    db.create_all()
    click.echo("Initialized the database.")


@click.command("seed-db")
@with_appcontext
def seed_db_command():
    """Create the tables and add sample data (for dev only)."""
    db.create_all()
    if seed_sample_data():
        click.echo("Initialized DB with sample data.")
    else:
        click.echo("DB already initialized.")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_db_command)
