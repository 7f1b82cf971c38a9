"""
archive.py
----------
Finds the followers and following JSON files inside an Instagram export ZIP.
Entries are picked by name ("follower" / "following") and then checked by content;
each candidate is decoded and validated on its own worker thread.

Public API:
    resolve_archive(raw, max_workers) -> ArchiveCandidates
"""

import io
import json
import zipfile
import zlib
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from errors import ArchiveIncomplete, ArchiveReadError
from validation import FOLLOWERS, FOLLOWING, looks_like_followers, looks_like_following

_MAX_WORKERS = 4

_CHECKS = {
    FOLLOWERS: looks_like_followers,
    FOLLOWING: looks_like_following,
}


@dataclass(frozen=True)
class ArchiveEntry:
    name: str
    data: bytes


@dataclass
class ArchiveCandidates:
    followers: ArchiveEntry | None = None
    following: ArchiveEntry | None = None

    @property
    def outcome(self) -> str:
        if self.followers and self.following:
            return "both"
        if self.followers:
            return "followers_only"
        if self.following:
            return "following_only"
        return "neither"

    def require_complete(self) -> "ArchiveCandidates":
        outcome = self.outcome
        if outcome == "both":
            return self
        if outcome == "followers_only":
            raise ArchiveIncomplete(
                f"Found 'Followers' file in ZIP ({self.followers.name}) but missing 'Following' file.",
                followers_name=self.followers.name,
            )
        if outcome == "following_only":
            raise ArchiveIncomplete(
                f"Found 'Following' file in ZIP ({self.following.name}) but missing 'Followers' file.",
                following_name=self.following.name,
            )
        raise ArchiveIncomplete("Could not find valid 'followers' or 'following' JSON files in this ZIP.")


# ── Entry classification ──────────────────────────────────────────

def role_for_name(name: str) -> str | None:
    """Role suggested by an entry's file name, or None if it is not a candidate."""
    # Base name only: exports nest both lists under "followers_and_following/"
    lower = name.replace("\\", "/").rsplit("/", 1)[-1].lower()
    if not lower.endswith(".json"):
        return None
    if "follower" in lower:
        return FOLLOWERS
    if "following" in lower:
        return FOLLOWING
    return None


def _entry_is_valid(role: str, data: bytes) -> bool:
    try:
        decoded = json.loads(data.decode("utf-8-sig"))
    except (ValueError, RecursionError):
        # Not JSON, not UTF-8, or nested too deeply: an unrelated file that happens to match by name
        return False
    return _CHECKS[role](decoded)


def _read_candidates(raw: bytes) -> list[tuple[int, str, str, bytes]]:
    try:
        with zipfile.ZipFile(io.BytesIO(raw), "r") as z:
            out = []
            for index, info in enumerate(z.infolist()):
                if info.is_dir():
                    continue
                role = role_for_name(info.filename)
                if role is None:
                    continue
                out.append((index, info.filename, role, z.read(info)))
            return out
    except (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError, EOFError, OSError, RuntimeError, zlib.error) as e:
        # RuntimeError: encrypted entry, no password
        raise ArchiveReadError(f"Error reading ZIP file: {e!s}") from e


# ── Public entry point ────────────────────────────────────────────

def resolve_archive(raw: bytes, max_workers: int | None = None) -> ArchiveCandidates:
    candidates = _read_candidates(raw)
    workers = max(1, min(max_workers or _MAX_WORKERS, len(candidates) or 1))

    # Slot per role holding (enumeration index, entry); highest index wins
    chosen: dict[str, tuple[int, ArchiveEntry]] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_entry_is_valid, role, data): (index, name, role, data)
            for index, name, role, data in candidates
        }
        for future in as_completed(futures):
            index, name, role, data = futures[future]
            if not future.result():
                continue
            if role not in chosen or chosen[role][0] < index:
                chosen[role] = (index, ArchiveEntry(name=name, data=data))

    found = ArchiveCandidates(
        followers=chosen[FOLLOWERS][1] if FOLLOWERS in chosen else None,
        following=chosen[FOLLOWING][1] if FOLLOWING in chosen else None,
    )
    print(f"📦 ZIP scanned: {len(candidates)} candidate file(s) — "
          f"followers={found.followers.name if found.followers else '-'}, "
          f"following={found.following.name if found.following else '-'}")
    return found
