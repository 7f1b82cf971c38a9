"""
errors.py
---------
Error kinds raised by the analyzer core. Each carries a short user-facing message
and a stable `kind` string so the web layer can branch on it.

    JsonDecodeError    file is not valid JSON text
    MalformedInput     valid JSON, wrong export shape (SchemaMismatch is the same)
    ArchiveReadError   ZIP cannot be opened
    ArchiveIncomplete  ZIP opened but one or both lists are missing
    MissingInput       analysis requested before both lists were accepted
"""


class AnalyzerError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": True, "kind": self.kind, "reasons": [self.message]}


class JsonDecodeError(AnalyzerError):
    kind = "json_decode"


class MalformedInput(AnalyzerError):
    kind = "malformed_input"

    def __init__(self, message: str, expected: str | None = None, actual: str | None = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


# Raised by the validator; same class so callers need a single except clause
SchemaMismatch = MalformedInput


class ArchiveReadError(AnalyzerError):
    kind = "archive_read"


class ArchiveIncomplete(AnalyzerError):
    kind = "archive_incomplete"

    def __init__(self, message: str, followers_name: str | None = None, following_name: str | None = None):
        super().__init__(message)
        self.followers_name = followers_name
        self.following_name = following_name

    @property
    def outcome(self) -> str:
        if self.followers_name:
            return "followers_only"
        if self.following_name:
            return "following_only"
        return "neither"

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["outcome"] = self.outcome
        out["found"] = {"followers": self.followers_name, "following": self.following_name}
        return out


class MissingInput(AnalyzerError):
    kind = "missing_input"
