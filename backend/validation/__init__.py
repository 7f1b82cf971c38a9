"""
validation
----------
Tells followers-shaped JSON (a list) from following-shaped JSON (an object with
'relationships_following'), and pre-checks uploaded ZIP bundles.
Predicates and validate_zip never raise; check_schema raises SchemaMismatch.
"""

from .validator import (
    FOLLOWERS,
    FOLLOWING,
    check_schema,
    guess_role,
    looks_like_followers,
    looks_like_following,
    validate_zip,
)

__all__ = [
    "FOLLOWERS",
    "FOLLOWING",
    "check_schema",
    "guess_role",
    "looks_like_followers",
    "looks_like_following",
    "validate_zip",
]
