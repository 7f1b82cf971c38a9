"""
analyzer.py
-----------
Parsing, normalization and the follow-back diff. No network or server dependencies.

Public API:
    load_json(raw, name)                          -> decoded JSON
    normalize_followers(data)                     -> list[Account]
    normalize_following(data)                     -> list[Account]
    parse_followers(raw) / parse_following(raw)   -> list[Account]
    compute_not_following_back(followers, following) -> list[Account]
    analyze(followers_raw, following_raw)         -> AnalysisResult
    AnalysisSession                               -> per-session accepted inputs
    ts_to_date(ts)                                -> str
"""

import json
from dataclasses import dataclass, field
from datetime import datetime

import archive
from errors import JsonDecodeError, MalformedInput, MissingInput
from validation import FOLLOWING, FOLLOWERS, check_schema, looks_like_followers
from validation.validator import FOLLOWING_KEY

PROFILE_BASE_URL = "https://www.instagram.com/"


@dataclass(frozen=True)
class Account:
    handle: str
    profile_url: str
    followed_at: int = 0

    def to_dict(self) -> dict:
        return {
            "handle": self.handle,
            "profile_url": self.profile_url,
            "followed_at": self.followed_at,
            "followed_on": ts_to_date(self.followed_at),
        }


@dataclass
class AnalysisResult:
    followers: list[Account]
    following: list[Account]
    not_following_back: list[Account] = field(default_factory=list)

    @property
    def followers_count(self) -> int:
        return len(self.followers)

    @property
    def following_count(self) -> int:
        return len(self.following)

    @property
    def not_following_back_count(self) -> int:
        return len(self.not_following_back)


# ── Field access ──────────────────────────────────────────────────

def profile_url_for(handle: str) -> str:
    return PROFILE_BASE_URL + handle


def _first_string_item(entry) -> dict | None:
    """First element of an entry's string_list_data, or None if it has none."""
    if not isinstance(entry, dict):
        return None
    items = entry.get("string_list_data")
    if not isinstance(items, list) or not items:
        return None
    first = items[0]
    return first if isinstance(first, dict) else None


def _text(value) -> str | None:
    return value if isinstance(value, str) and value else None


def _timestamp(value) -> int:
    # bool is an int subclass; JSON true/false is not a timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


# ── JSON decoding ─────────────────────────────────────────────────

def load_json(raw: bytes, name: str | None = None):
    label = f" ({name})" if name else ""
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise JsonDecodeError(f"Failed to read file{label}: it is not UTF-8 text.") from None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonDecodeError(
            f"Failed to parse JSON{label}. Please check the file content "
            f"(line {e.lineno}, column {e.colno})."
        ) from None
    except RecursionError:
        raise JsonDecodeError(f"Failed to parse JSON{label}: the file is nested too deeply.") from None


# ── Normalization ─────────────────────────────────────────────────

def normalize_followers(data) -> list[Account]:
    if not looks_like_followers(data):
        raise MalformedInput(
            "Invalid Followers file format. Expected an array.",
            expected=FOLLOWERS,
        )
    accounts = []
    for entry in data:
        item = _first_string_item(entry)
        if item is None:
            continue
        handle = _text(item.get("value"))
        if handle is None:
            continue
        accounts.append(Account(
            handle=handle,
            profile_url=_text(item.get("href")) or profile_url_for(handle),
            followed_at=_timestamp(item.get("timestamp")),
        ))
    return accounts


def normalize_following(data) -> list[Account]:
    entries = data.get(FOLLOWING_KEY) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise MalformedInput(
            f"Invalid Following file format. Expected key '{FOLLOWING_KEY}'.",
            expected=FOLLOWING,
        )
    accounts = []
    for entry in entries:
        handle = _text(entry.get("title")) if isinstance(entry, dict) else None
        if handle is None:
            continue
        item = _first_string_item(entry) or {}
        accounts.append(Account(
            handle=handle,
            profile_url=_text(item.get("href")) or profile_url_for(handle),
            followed_at=_timestamp(item.get("timestamp")),
        ))
    return accounts


def parse_followers(raw: bytes, name: str | None = None) -> list[Account]:
    data = load_json(raw, name)
    check_schema(data, FOLLOWERS)
    return normalize_followers(data)


def parse_following(raw: bytes, name: str | None = None) -> list[Account]:
    data = load_json(raw, name)
    check_schema(data, FOLLOWING)
    return normalize_following(data)


# ── Diff ──────────────────────────────────────────────────────────

def compute_not_following_back(followers: list[Account], following: list[Account]) -> list[Account]:
    """Accounts in `following` whose handle is not among the followers, in following order."""
    follower_handles = {a.handle for a in followers}
    return [a for a in following if a.handle not in follower_handles]


def analyze(followers_raw: bytes, following_raw: bytes) -> AnalysisResult:
    followers = parse_followers(followers_raw)
    following = parse_following(following_raw)
    return AnalysisResult(
        followers=followers,
        following=following,
        not_following_back=compute_not_following_back(followers, following),
    )


# ── Session ───────────────────────────────────────────────────────

class AnalysisSession:
    """
    Inputs accepted during one analysis session. A failed accept_* call raises
    and leaves whatever was accepted before untouched.
    """

    def __init__(self):
        self.followers: list[Account] | None = None
        self.following: list[Account] | None = None
        self.followers_name: str | None = None
        self.following_name: str | None = None

    @property
    def ready(self) -> bool:
        return self.followers is not None and self.following is not None

    def accepted(self) -> dict:
        return {"followers": self.followers_name, "following": self.following_name}

    def accept_followers(self, raw: bytes, name: str = "followers.json") -> list[Account]:
        accounts = parse_followers(raw, name)
        self.followers, self.followers_name = accounts, name
        return accounts

    def accept_following(self, raw: bytes, name: str = "following.json") -> list[Account]:
        accounts = parse_following(raw, name)
        self.following, self.following_name = accounts, name
        return accounts

    def accept_archive(self, raw: bytes, max_workers: int | None = None) -> None:
        """Accept whichever lists the bundle holds; raise ArchiveIncomplete if one is missing."""
        found = archive.resolve_archive(raw, max_workers=max_workers)
        # Parse both before storing either so a bad entry keeps the old state
        followers = following = None
        if found.followers:
            followers = parse_followers(found.followers.data, found.followers.name)
        if found.following:
            following = parse_following(found.following.data, found.following.name)
        if followers is not None:
            self.followers, self.followers_name = followers, found.followers.name
        if following is not None:
            self.following, self.following_name = following, found.following.name
        found.require_complete()

    def result(self) -> AnalysisResult:
        if not self.ready:
            missing = [role for role, accounts in ((FOLLOWERS, self.followers), (FOLLOWING, self.following))
                       if accounts is None]
            raise MissingInput(f"Please upload both JSON files to continue (missing: {', '.join(missing)}).")
        return AnalysisResult(
            followers=self.followers,
            following=self.following,
            not_following_back=compute_not_following_back(self.followers, self.following),
        )

    def reset(self) -> None:
        self.followers = self.following = None
        self.followers_name = self.following_name = None


# ── Helpers ───────────────────────────────────────────────────────

def ts_to_date(ts) -> str:
    """Format timestamp for display."""
    if not ts:
        return "-"
    try:
        return datetime.fromtimestamp(ts).strftime("%d/%m/%Y")
    except (OverflowError, OSError, ValueError):
        # Outside the platform's time_t range
        return "-"
