"""Tests for free-text filtering helpers."""

from sqlalchemy import column, false, true

from stockroom.core.filtering import (
    MAX_FILTER_LENGTH,
    normalize_search_term,
    text_search_clause,
)


class TestNormalizeSearchTerm:
    """Tests for normalize_search_term()."""

    def test_strips_whitespace(self):
        assert normalize_search_term("  john ") == "john"

    def test_blank_means_no_filter(self):
        assert normalize_search_term("   ") is None
        assert normalize_search_term("") is None
        assert normalize_search_term(None) is None

    def test_truncates_long_input(self):
        """Overlong filters are cut to MAX_FILTER_LENGTH characters."""
        assert len(normalize_search_term("x" * 1000)) == MAX_FILTER_LENGTH


class TestTextSearchClause:
    """Tests for text_search_clause()."""

    def test_no_term_matches_everything(self):
        clause = text_search_clause(None, [column("name")])
        assert clause.compare(true())

    def test_no_columns_matches_nothing(self):
        clause = text_search_clause("john", [])
        assert clause.compare(false())

    def test_ors_across_columns(self):
        """Each column gets a case-insensitive LIKE, joined with OR."""
        sql = str(text_search_clause("john", [column("email"), column("nif")]))
        assert sql.count("LIKE") == 2
        assert " OR " in sql
        assert "lower(email)" in sql
