"""
Tests for the book query builder and ``search_books``.
"""

import itertools

import pytest
from sqlalchemy.dialects import postgresql

from database.helpers import build_books_query, search_books
from utils.schemas import BookFilters


def _pg_sql(filters):
    compiled = build_books_query(filters).compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


class TestBuildBooksQuery:
    def test_no_filters_has_no_where_clause(self):
        sql, params = _pg_sql(None)
        assert "FROM books" in sql
        assert "WHERE" not in sql
        assert params == {}

    def test_empty_filter_object_has_no_where_clause(self):
        sql, _ = _pg_sql(BookFilters())
        assert "WHERE" not in sql

    def test_conditions_follow_fixed_order(self):
        sql, _ = _pg_sql(BookFilters(author="orwell", title="1984", book_id=2))
        where = sql.split("WHERE", 1)[1]
        id_pos = where.index("books.book_id =")
        title_pos = where.index("books.title ILIKE")
        author_pos = where.index("books.author ILIKE")
        assert id_pos < title_pos < author_pos
        assert where.count(" AND ") == 2

    def test_absent_fields_are_skipped(self):
        sql, _ = _pg_sql(BookFilters(author="lee"))
        where = sql.split("WHERE", 1)[1].split("ORDER BY", 1)[0]
        assert "books.author ILIKE" in where
        assert "books.title" not in where
        assert "books.book_id" not in where

    def test_values_are_bound_not_interpolated(self):
        payload = "'; DROP TABLE books; --"
        sql, params = _pg_sql(BookFilters(title=payload, book_id=7))
        assert "DROP TABLE" not in sql
        assert "7" not in sql.split("WHERE", 1)[1]
        assert f"%{payload}%" in params.values()
        assert 7 in params.values()

    def test_like_wildcards_are_escaped(self):
        _, params = _pg_sql(BookFilters(title="50%_\\"))
        assert "%50\\%\\_\\\\%" in params.values()


class TestSearchBooks:
    @pytest.mark.asyncio
    async def test_title_example(self, session, books):
        found = await search_books(session, BookFilters(title="1984"))
        assert [(b.title, b.author) for b in found] == [("1984", "George Orwell")]

    @pytest.mark.asyncio
    async def test_no_match_is_empty_list(self, session, books):
        assert await search_books(session, BookFilters(title="Ulysses")) == []

    @pytest.mark.asyncio
    async def test_matching_is_case_insensitive(self, session, books):
        found = await search_books(session, BookFilters(author="gEoRgE oRwElL"))
        assert {b.title for b in found} == {"1984", "Animal Farm"}

    @pytest.mark.asyncio
    async def test_percent_matches_literally(self, session, books):
        found = await search_books(session, BookFilters(title="50%"))
        assert [b.title for b in found] == ["50% Off"]

    @pytest.mark.asyncio
    async def test_underscore_matches_literally(self, session, books):
        found = await search_books(session, BookFilters(title="1_3"))
        assert [b.title for b in found] == ["Vol 1_3"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        ["' OR '1'='1", "%' OR 1=1 --", "'; DELETE FROM books; --"],
    )
    async def test_injection_payloads_match_nothing(self, session, books, payload):
        assert await search_books(session, BookFilters(title=payload)) == []
        assert await search_books(session, BookFilters(author=payload)) == []
        assert len(await search_books(session)) == len(books)

    @pytest.mark.asyncio
    async def test_every_filter_combination(self, session, books):
        rows = await search_books(session)
        candidates = {
            "book_id": [rows[1].book_id, 999],
            "title": ["o", "ANIMAL", "zzz"],
            "author": ["orwell", "a", "nobody"],
        }

        def expected(filters):
            keep = []
            for row in rows:
                if filters.book_id is not None and row.book_id != filters.book_id:
                    continue
                if filters.title is not None and filters.title.lower() not in row.title.lower():
                    continue
                if filters.author is not None and filters.author.lower() not in row.author.lower():
                    continue
                keep.append(row.book_id)
            return keep

        for book_id, title, author in itertools.product(
            [None] + candidates["book_id"],
            [None] + candidates["title"],
            [None] + candidates["author"],
        ):
            filters = BookFilters(book_id=book_id, title=title, author=author)
            found = await search_books(session, filters)
            assert [b.book_id for b in found] == expected(filters), filters
