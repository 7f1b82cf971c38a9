"""Pytest configuration and shared fixtures for the follow-back analyzer tests."""

from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Callable

import pytest


def followers_entry(handle: str, timestamp: int | None = 1000) -> dict[str, Any]:
    item: dict[str, Any] = {"value": handle, "href": f"https://instagram.com/{handle}"}
    if timestamp is not None:
        item["timestamp"] = timestamp
    return {"title": "", "media_list_data": [], "string_list_data": [item]}


def following_entry(handle: str, timestamp: int | None = 2000, nested: bool = True) -> dict[str, Any]:
    entry: dict[str, Any] = {"title": handle, "media_list_data": []}
    if nested:
        item: dict[str, Any] = {"href": f"https://www.instagram.com/_u/{handle}"}
        if timestamp is not None:
            item["timestamp"] = timestamp
        entry["string_list_data"] = [item]
    return entry


@pytest.fixture
def followers_data() -> list[dict[str, Any]]:
    """Followers export: alice, carol, dave."""
    return [followers_entry("alice"), followers_entry("carol", 1200), followers_entry("dave", 1300)]


@pytest.fixture
def following_data() -> dict[str, Any]:
    """Following export: alice, bob, carol, erin, Frank."""
    return {
        "relationships_following": [
            following_entry("alice"),
            following_entry("bob", 2100),
            following_entry("carol", 2200),
            following_entry("erin", nested=False),
            following_entry("Frank", 2400),
        ]
    }


@pytest.fixture
def followers_bytes(followers_data) -> bytes:
    return json.dumps(followers_data).encode("utf-8")


@pytest.fixture
def following_bytes(following_data) -> bytes:
    return json.dumps(following_data).encode("utf-8")


@pytest.fixture
def make_zip() -> Callable[..., bytes]:
    """Build an in-memory ZIP. Values may be bytes, str, or JSON-serializable objects."""

    def _make(entries: dict[str, Any], dirs: tuple[str, ...] = ()) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as z:
            for d in dirs:
                z.writestr(d.rstrip("/") + "/", "")
            for name, content in entries.items():
                if isinstance(content, bytes):
                    z.writestr(name, content)
                elif isinstance(content, str):
                    z.writestr(name, content.encode("utf-8"))
                else:
                    z.writestr(name, json.dumps(content).encode("utf-8"))
        return buf.getvalue()

    return _make


def mark_encrypted(raw: bytes) -> bytes:
    """Set the 'encrypted' flag bit on every entry of a ZIP, without encrypting the data."""
    buf = bytearray(raw)
    for signature, flag_offset in ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8)):
        start = buf.find(signature)
        while start != -1:
            buf[start + flag_offset] |= 0x01
            start = buf.find(signature, start + 4)
    return bytes(buf)


DEEPLY_NESTED = b"[" * 100000 + b"]" * 100000
