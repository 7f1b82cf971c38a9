"""
validator.py
-----------
Shape checks for decoded export JSON, plus the upload pre-check for ZIP bundles.

The shape predicates never raise: they only tell a list-shaped followers file apart
from an object-shaped following file. check_schema() turns a mismatch into an error
that says which file the user seems to have picked instead.
"""

import io
import zipfile

from errors import SchemaMismatch

FOLLOWERS = "followers"
FOLLOWING = "following"
FOLLOWING_KEY = "relationships_following"


# ── Shape predicates ──────────────────────────────────────────────

def looks_like_followers(data) -> bool:
    return isinstance(data, list)


def looks_like_following(data) -> bool:
    return isinstance(data, dict) and FOLLOWING_KEY in data


def guess_role(data) -> str | None:
    if looks_like_followers(data):
        return FOLLOWERS
    if looks_like_following(data):
        return FOLLOWING
    return None


_CHECKS = {
    FOLLOWERS: looks_like_followers,
    FOLLOWING: looks_like_following,
}


def check_schema(data, expected: str) -> None:
    """Raise SchemaMismatch unless `data` looks like the `expected` role."""
    if _CHECKS[expected](data):
        return
    actual = guess_role(data)
    what = f"a {actual}" if actual else "a different"
    hint = "a JSON list" if expected == FOLLOWERS else f"an object with '{FOLLOWING_KEY}'"
    raise SchemaMismatch(
        f"Invalid {expected.capitalize()} file (expected {hint}). "
        f"It looks like you uploaded {what} file.",
        expected=expected,
        actual=actual,
    )


# ── ZIP upload pre-check ──────────────────────────────────────────

def _normalize(name: str) -> str:
    return name.lstrip("/").replace("\\", "/").lower()


def _html_only_export(names: list[str]) -> bool:
    """True if the follower lists exist only as HTML (export made in the wrong format)."""
    json_lists = html_lists = False
    for n in names:
        base = n.split("/")[-1]
        if "follower" not in base and "following" not in base:
            continue
        if base.endswith(".json"):
            json_lists = True
        elif base.endswith(".html"):
            html_lists = True
    return html_lists and not json_lists


def validate_zip(raw: bytes, max_bytes: int) -> tuple[bool, list[str] | None]:
    """
    Validate uploaded ZIP bytes. Returns (True, None) if usable, else (False, list of error strings).
    Does not raise.
    """
    size = len(raw)
    if size > max_bytes:
        mb = max_bytes / (1024 * 1024)
        return False, [
            f"File size ({size / (1024*1024):.1f} MB) exceeds the maximum allowed ({mb:.0f} MB). "
            "Export only 'Followers and following' to keep the file small."
        ]

    try:
        with zipfile.ZipFile(io.BytesIO(raw), "r") as z:
            names = [_normalize(n) for n in z.namelist()]
    except zipfile.BadZipFile:
        return False, ["File is not a valid ZIP archive."]
    except Exception as e:
        return False, [f"Could not read file: {e!s}"]

    if not any(not n.endswith("/") for n in names):
        return False, ["ZIP archive is empty."]

    if _html_only_export(names):
        return False, [
            "The tool reads JSON only. Your export has HTML.",
            "→ What to do: request the export again and choose JSON as the format.",
        ]
    return True, None
