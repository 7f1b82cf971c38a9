#!/usr/bin/env python3
"""
app.py
------
Flask entry point for the Follow-Back Analyzer.
Run with:  python3 backend/app.py

Routes:
    GET  /healthz    → health check
    POST /analyze    → followers + following JSON files, or one export ZIP → JSON results

Form fields for /analyze:
    zipfile                 Instagram export bundle, or
    followers, following    the two JSON files
    search, sort            optional table filter and direction (asc / desc)
"""

import os
import re
import socket
import sys
import threading
import time
from datetime import datetime

from flask import Flask, jsonify, request

_BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, _BACKEND_DIR)

import analyzer
import query
from errors import AnalyzerError
from validation import validate_zip

app = Flask(__name__)

# Port from env (e.g. Gunicorn); upload size limit in MB
app.config["PORT"] = int(os.environ.get("PORT", 5000))
app.config["MAX_CONTENT_LENGTH"] = int(os.environ.get("MAX_UPLOAD_MB", 5)) * 1024 * 1024


# ── Helpers ───────────────────────────────────────────────────────

def _error(reasons: list[str], status: int, **extra):
    body = {"error": True, "reasons": reasons}
    body.update(extra)
    return jsonify(body), status


def _username_from_filename(filename: str) -> str:
    m = re.search(r"instagram[-_]([a-zA-Z0-9_.]+)[-_]", filename or "")
    return m.group(1) if m else "user"


def _load_into(session: analyzer.AnalysisSession):
    """Feed the uploaded files into the session. Returns an error response or None."""
    zip_file = request.files.get("zipfile")
    if zip_file:
        if not (zip_file.filename or "").lower().endswith(".zip"):
            return _error(["Please upload a .zip file in this area."], 400)
        raw = zip_file.read()
        ok, validation_errors = validate_zip(raw, app.config["MAX_CONTENT_LENGTH"])
        if not ok:
            return _error(validation_errors or ["Invalid file."], 400)
        print("📦 ZIP file received — looking for followers and following...")
        session.accept_archive(raw)
        return None

    followers_file = request.files.get("followers")
    following_file = request.files.get("following")
    for f in (followers_file, following_file):
        if f and not (f.filename or "").lower().endswith(".json"):
            return _error(["Please upload a valid JSON file."], 400)

    # Each file is accepted on its own; a bad following file keeps the followers
    errors = []
    if followers_file:
        try:
            session.accept_followers(followers_file.read(), followers_file.filename)
        except AnalyzerError as e:
            errors.append(e)
    if following_file:
        try:
            session.accept_following(following_file.read(), following_file.filename)
        except AnalyzerError as e:
            errors.append(e)
    if errors:
        return _error(
            [e.message for e in errors],
            400,
            kind=errors[0].kind,
            accepted=session.accepted(),
        )
    return None


# ── Routes ────────────────────────────────────────────────────────

@app.route("/healthz")
def healthz():
    """Health check for load balancers."""
    return "", 200


@app.route("/analyze", methods=["POST"])
def analyze():
    direction = (request.form.get("sort") or query.ASC).lower()
    if direction not in query.DIRECTIONS:
        return _error([f"Unknown sort order: {direction}. Use 'asc' or 'desc'."], 400)
    if not request.files:
        return _error(["No files uploaded. Upload your export ZIP or both JSON files."], 400)

    session = analyzer.AnalysisSession()
    try:
        failed = _load_into(session)
        if failed is not None:
            return failed
        result = session.result()
        rows = query.apply_view(result.not_following_back, request.form.get("search", ""), direction)
        table = [a.to_dict() for a in rows]
    except AnalyzerError as e:
        body = e.to_dict()
        body["accepted"] = session.accepted()
        print(f"⚠️  {e.kind}: {e.message}")
        return jsonify(body), 400
    except Exception as e:
        import traceback
        print(f"❌ Error: {e}")
        traceback.print_exc()
        return _error(["Something went wrong. Please try again or use a valid Instagram data export."], 500)

    print(f"📊 Followers: {result.followers_count} | Following: {result.following_count} "
          f"| Not following back: {result.not_following_back_count}")
    zip_file = request.files.get("zipfile")
    return jsonify({
        "error": False,
        "username": _username_from_filename(zip_file.filename if zip_file else ""),
        "generated_at": datetime.now().strftime("%d/%m/%Y %H:%M"),
        "followers_count": result.followers_count,
        "following_count": result.following_count,
        "not_following_back_count": result.not_following_back_count,
        "shown_count": len(rows),
        "sort": direction,
        "not_following_back": table,
    })


@app.errorhandler(413)
def _too_large(_e):
    mb = app.config["MAX_CONTENT_LENGTH"] / (1024 * 1024)
    return _error([f"File too large (maximum {mb:.0f} MB)."], 413)


# ── Main ──────────────────────────────────────────────────────────

def main():
    port = app.config["PORT"]
    bind_all = os.environ.get("BIND_ALL", "").strip().lower() in ("1", "true", "yes")
    host = "0.0.0.0" if bind_all else "localhost"

    threading.Thread(
        target=lambda: app.run(host=host, port=port, debug=False,
                               use_reloader=False, threaded=True),
        daemon=True,
    ).start()

    for _ in range(30):
        try:
            with socket.create_connection(("127.0.0.1", port), timeout=0.3):
                break
        except OSError:
            time.sleep(0.1)

    print(f"🌐 Follow-Back Analyzer running at http://127.0.0.1:{port}")
    print("⌨️  Press Ctrl+C to stop")

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        print("\n👋 Server stopped")


if __name__ == "__main__":
    main()
