import re
import unicodedata

DISALLOWED_CHARS = "<>'\";&"
DEFAULT_MAX_CHARS = 100

_DISALLOWED_RE = re.compile("[" + re.escape(DISALLOWED_CHARS) + "]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Strip markup/control characters from user input.

    Removes ``< > ' " ; &``, trims surrounding whitespace and truncates the
    result to ``max_chars`` characters.

    Args:
        text: Raw input field.
        max_chars: Maximum length kept.

    Returns:
        str: Sanitized text (possibly empty).
    """
    return _DISALLOWED_RE.sub("", text).strip()[:max_chars]


def normalize(text: str) -> str:
    """Normalize text for comparison only.

    Lower-cases, composes accents (NFC) so that precomposed and combining
    Vietnamese forms compare equal, collapses whitespace runs and trims.

    Args:
        text: Display text.

    Returns:
        str: Comparison form, never shown to users.
    """
    text = unicodedata.normalize("NFC", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def fold_diacritics(text: str) -> str:
    """Remove tone and vowel marks: ``"nguyễn văn"`` becomes ``"nguyen van"``."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    # đ is a distinct letter, not a base letter plus a combining mark
    stripped = stripped.replace("đ", "d").replace("Đ", "D")
    return unicodedata.normalize("NFC", stripped)


def match_key(text: str, *, ignore_diacritics: bool = True) -> str:
    """Comparison form used by the matcher on both query and cell values."""
    key = normalize(text)
    if ignore_diacritics:
        key = fold_diacritics(key)
    return key
