"""
query.py
--------
Search and sort for the not-following-back table. Pure functions; inputs are never mutated.
"""

import locale

ASC = "asc"
DESC = "desc"
DIRECTIONS = (ASC, DESC)


def filter_accounts(accounts: list, term: str | None) -> list:
    """Accounts whose handle contains `term`, ignoring case. Empty term keeps everything."""
    needle = (term or "").casefold()
    if not needle:
        return list(accounts)
    return [a for a in accounts if needle in a.handle.casefold()]


def _sort_key(account) -> tuple:
    # strxfrm follows LC_COLLATE, which is never set here: under the default C locale
    # this is casefolded code-point order ("a.b" before "a_b")
    return (locale.strxfrm(account.handle.casefold()), account.handle)


def sort_accounts(accounts: list, direction: str = ASC) -> list:
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown sort direction: {direction!r} (use 'asc' or 'desc')")
    return sorted(accounts, key=_sort_key, reverse=direction == DESC)


def apply_view(accounts: list, term: str | None = "", direction: str = ASC) -> list:
    return sort_accounts(filter_accounts(accounts, term), direction)
