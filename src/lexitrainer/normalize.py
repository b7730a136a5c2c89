"""Unicode and surface-form normalization utilities.

Policy:
- Answer matching: lowercase, trim, collapse whitespace; optionally strip
  accents (combining marks).
- Duplicate matching: additionally drop one leading article and punctuation.
"""

from __future__ import annotations

import re
import unicodedata as ud
from typing import Optional

from .languages import articles_for

_WS_RE = re.compile(r"\s+")
_DUPLICATE_PUNCT_RE = re.compile(r"[.,;:!?'\"()\[\]{}]")


def normalize_text_nfc(text: str) -> str:
    """Apply Unicode NFC to input text (safe for None-like inputs)."""
    if text is None:
        return ""
    return ud.normalize("NFC", str(text))


def strip_accents(text: str) -> str:
    """Remove combining marks by NFD decomposition then recompose without marks."""
    text = normalize_text_nfc(text)
    decomposed = ud.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if ud.category(ch) != "Mn")
    return ud.normalize("NFC", stripped)


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def normalize(text: str, strip_diacritics: bool = False) -> str:
    """Normalize an answer for comparison.

    Steps: NFC -> lowercase -> collapse whitespace and trim -> (optionally)
    strip accents.
    """
    if not text:
        return ""
    t = normalize_text_nfc(text).lower()
    t = collapse_whitespace(t)
    if strip_diacritics:
        t = strip_accents(t)
    return t


def strip_leading_article(text: str, language: Optional[str] = None) -> str:
    """Drop a single leading article ("der ", "la ", "l'") from lowercased text."""
    for article in articles_for(language):
        if article.endswith("'"):
            if text.startswith(article):
                return text[len(article):].lstrip()
        elif text.startswith(article + " "):
            return text[len(article) + 1:].lstrip()
    return text


def normalize_for_duplicate(text: str, language: Optional[str] = None) -> str:
    """Normalize an import field for duplicate matching.

    Steps: NFC -> lowercase -> trim -> strip leading article -> strip
    punctuation -> collapse whitespace. Accents are kept.
    """
    if not text:
        return ""
    t = normalize_text_nfc(text).lower().strip()
    t = strip_leading_article(t, language)
    t = _DUPLICATE_PUNCT_RE.sub("", t)
    return collapse_whitespace(t)
