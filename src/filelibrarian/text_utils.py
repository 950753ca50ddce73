from __future__ import annotations

import unicodedata


def normalize_text(value: str) -> str:
    """Return UTF-8 safe text by collapsing surrogate-escaped bytes.

    Paths read from the filesystem may carry undecodable bytes as lone
    surrogates, which SQLite text binding rejects. Canonicalize to NFC so the
    same name typed on macOS and Linux maps to one stored path.
    """
    safe = value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
    return unicodedata.normalize("NFC", safe)
