import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lowercase, drop accents and collapse whitespace so "  DOROTHÉE  Ancel" matches "Dorothee Ancel"."""
    decomposed = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return _WHITESPACE_RE.sub(" ", stripped).strip()
