"""Tests for search and sort in backend/query.py."""

from __future__ import annotations

import pytest

from analyzer import Account
from query import apply_view, filter_accounts, sort_accounts


@pytest.fixture
def accounts() -> list[Account]:
    return [Account(h, "") for h in ("mike", "Alice", "bob_99", "zoe", "Bobby")]


def handles(accounts):
    return [a.handle for a in accounts]


class TestFilterAccounts:
    """Tests for filter_accounts()."""

    def test_empty_term_returns_everything(self, accounts):
        """An empty term keeps the list as is."""
        assert filter_accounts(accounts, "") == accounts
        assert filter_accounts(accounts, None) == accounts

    def test_case_insensitive_substring(self, accounts):
        """Matching ignores case and matches anywhere in the handle."""
        assert handles(filter_accounts(accounts, "BOB")) == ["bob_99", "Bobby"]
        assert handles(filter_accounts(accounts, "ic")) == ["Alice"]

    def test_no_match(self, accounts):
        """A term contained in no handle gives an empty list."""
        assert filter_accounts(accounts, "XYZ") == []

    def test_blank_term_is_matched_literally(self, accounts):
        """A whitespace term is a real search; no handle contains a space."""
        assert filter_accounts(accounts, " ") == []

    def test_idempotent(self, accounts):
        """Filtering twice with the same term changes nothing."""
        once = filter_accounts(accounts, "b")
        assert filter_accounts(once, "b") == once


class TestSortAccounts:
    """Tests for sort_accounts()."""

    def test_ascending_ignores_case(self, accounts):
        """Ascending order compares handles without regard to case."""
        assert handles(sort_accounts(accounts, "asc")) == ["Alice", "bob_99", "Bobby", "mike", "zoe"]

    def test_descending_is_reverse_of_ascending(self, accounts):
        """sort(sort(asc), desc) is the ascending list reversed."""
        ascending = sort_accounts(accounts, "asc")
        assert sort_accounts(ascending, "desc") == list(reversed(ascending))

    def test_idempotent(self, accounts):
        """Sorting twice in the same direction is stable."""
        once = sort_accounts(accounts, "desc")
        assert sort_accounts(once, "desc") == once

    def test_does_not_mutate(self, accounts):
        """The input list keeps its order."""
        before = list(accounts)
        sort_accounts(accounts, "asc")
        assert accounts == before

    def test_unknown_direction(self, accounts):
        """Only asc and desc are accepted."""
        with pytest.raises(ValueError, match="Unknown sort direction"):
            sort_accounts(accounts, "up")

    def test_punctuation_order(self):
        """Handles differing only in punctuation sort by code point."""
        mixed = [Account(h, "") for h in ("a_b", "A.c", "a.b")]
        assert handles(sort_accounts(mixed, "asc")) == ["a.b", "A.c", "a_b"]


def test_apply_view_filters_then_sorts(accounts):
    """apply_view composes filter and sort."""
    assert handles(apply_view(accounts, "o", "desc")) == ["zoe", "Bobby", "bob_99"]
