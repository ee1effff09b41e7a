from unittest import TestCase

from recordkit.core_services.Sqlite3Database import Sqlite3Database
from recordkit.database.ActiveRecord import ActiveRecord, State
from recordkit.database.Exceptions import NotLoaded, RecordNotFound
from recordkit.database.QueryBuilder import Query
from recordkit.database.active_record.utils.ModelCollection import ModelCollection

SCHEMA = """
CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT);
CREATE TABLE books (id INTEGER PRIMARY KEY, person_id INTEGER, title TEXT, pages INTEGER);
CREATE TABLE profiles (id INTEGER PRIMARY KEY, bio TEXT);
"""


class Person(ActiveRecord):
    __table__ = "people"


class Book(ActiveRecord):
    __table__ = "books"


class Profile(ActiveRecord):
    __table__ = "profiles"


class AssociationTestCase(TestCase):
    def setUp(self):
        self.db = Sqlite3Database(":memory:")
        self.db.script(SCHEMA)
        for model in (Person, Book, Profile):
            model.setup(self.db)

        self.alice = Person.create(name="Alice")
        self.bob = Person.create(name="Bob")
        Book.create(person_id=self.alice.id(), title="Dune", pages=412)
        Book.create(person_id=self.alice.id(), title="Emma", pages=474)
        Book.create(person_id=self.bob.id(), title="Ulysses", pages=730)
        Profile.create(bio="Reads a lot")

    def tearDown(self):
        self.db.close()


class TestHasMany(AssociationTestCase):
    def test_returns_every_matching_record(self):
        books = self.alice.has_many(Book)

        assert isinstance(books, ModelCollection)
        assert books.pluck("title") == ["Dune", "Emma"]
        assert all(book.state == State.LOADED for book in books)
        assert all(not book.new_record() for book in books)

    def test_works_on_a_record_loaded_by_id(self):
        alice = Person.find(self.alice.id())
        assert len(alice.has_many(Book)) == 2

    def test_no_matches_is_an_empty_collection(self):
        carol = Person.create(name="Carol")
        assert carol.has_many(Book) == []

    def test_custom_foreign_key(self):
        books = self.bob.has_many(Book, foreign_key="person_id")
        assert books.pluck("title") == ["Ulysses"]

    def test_requires_a_loaded_owner(self):
        with self.assertRaises(NotLoaded):
            Person(name="Unsaved").has_many(Book)
        with self.assertRaises(NotLoaded):
            Person(self.alice.id()).has_many(Book)

    def test_requeries_every_call(self):
        assert len(self.alice.has_many(Book)) == 2
        Book.create(person_id=self.alice.id(), title="Persuasion", pages=249)
        assert len(self.alice.has_many(Book)) == 3


class TestBelongsTo(AssociationTestCase):
    def test_owner_id_addresses_the_target_key(self):
        profile = self.alice.belongs_to(Profile)
        assert profile.text("bio") == "Reads a lot"
        assert profile.id() == self.alice.id()

    def test_following_a_foreign_key_column(self):
        book = Book.where("title", "Ulysses").first()
        owner = book.belongs_to(Person, foreign_key="person_id")
        assert owner == Person.find(self.bob.id())

    def test_no_match_raises(self):
        with self.assertRaises(RecordNotFound):
            self.bob.belongs_to(Profile)

    def test_absent_foreign_key_raises(self):
        orphan = Book.create(title="Anonymous")
        with self.assertRaises(RecordNotFound):
            Book.find(orphan.id()).belongs_to(Person, foreign_key="person_id")

    def test_requires_a_loaded_owner(self):
        with self.assertRaises(NotLoaded):
            Person(self.alice.id()).belongs_to(Profile)


class TestQuery(AssociationTestCase):
    def test_to_sql(self):
        query = Query(Book).where("pages", ">", 400).where("title", "Dune").order_by("title", "desc").limit(2)
        sql, params = query.get()
        assert sql == "SELECT * FROM books WHERE pages > ? AND title = ? ORDER BY title DESC LIMIT 2"
        assert [p.value for p in params] == [400, "Dune"]

    def test_raw_clause_with_parameters(self):
        books = Book.where("pages BETWEEN ? AND ?", 400, 500).all()
        assert sorted(books.pluck("title")) == ["Dune", "Emma"]

    def test_raw_clause_parameter_count_is_checked(self):
        with self.assertRaises(ValueError):
            Book.where("pages BETWEEN ? AND ?", 400)

    def test_raw_clause_binds_none(self):
        Book.create(title="Anonymous")
        assert Book.where("person_id IS ?", None).all().pluck("title") == ["Anonymous"]

    def test_single_value_is_compared_with_equals(self):
        sql, params = Query(Book).where("title", "=").get()
        assert sql == "SELECT * FROM books WHERE title = ?"
        assert [p.value for p in params] == ["="]

        Book.create(title="=")
        assert Book.where("title", "=").all().pluck("title") == ["="]

    def test_unknown_operator_is_rejected(self):
        with self.assertRaises(ValueError):
            Book.where("pages", "~", 400)
        with self.assertRaises(ValueError):
            Book.where("pages", ">", 400, 500)

    def test_null_comparison(self):
        Book.create(title="Anonymous")
        assert Book.where("person_id", None).all().pluck("title") == ["Anonymous"]

    def test_first_orders_by_primary_key(self):
        assert Book.query().first().text("title") == "Dune"
        assert Book.where("title", "Nope").first() is None
        with self.assertRaises(RecordNotFound):
            Book.where("title", "Nope").first_strict()

    def test_all(self):
        books = Book.all()
        assert len(books) == 3
        assert books.first().text("title") == "Dune"
        assert books.last().text("title") == "Ulysses"
        assert books.where(lambda b: b.integer("pages") > 500).pluck("title") == ["Ulysses"]
        assert books.take(2).pluck("title") == ["Dune", "Emma"]

    def test_to_list_dict(self):
        rows = Person.all().to_list_dict()
        assert rows == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
