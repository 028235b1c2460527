import re

_EXTENSION_RE = re.compile(r"\.[^/.]+$")

MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 200


def strip_extension(file_name: str) -> str:
    """'report.final.pdf' -> 'report.final'."""
    return _EXTENSION_RE.sub("", file_name)


def clean_title(file_name: str) -> str:
    """Turn a filename into a readable title.

    Strips the extension, replaces ``_``/``-`` with spaces and title-cases each
    word, keeping all-caps acronyms of 2-5 letters as they are.
    """
    return _title_case(strip_extension(file_name))


def _title_case(text: str) -> str:
    words = [word for word in re.split(r"\s+", re.sub(r"[_-]", " ", text)) if word]
    return " ".join(_title_word(word) for word in words)


def _title_word(word: str) -> str:
    if 2 <= len(word) <= 5 and word == word.upper() and any(c.isalpha() for c in word):
        return word
    return word[:1].upper() + word[1:].lower()


def meaningful_title(candidate: str | None) -> str | None:
    """Cleaned embedded title, or None if it is too short or too long to trust."""
    if not candidate:
        return None
    stripped = candidate.strip()
    if MIN_TITLE_LENGTH < len(stripped) < MAX_TITLE_LENGTH:
        return _title_case(stripped)
    return None
