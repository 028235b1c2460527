"""Representative text sampling for AI input budgets."""

MIDDLE_MARKER = "[...middle section...]"
END_MARKER = "[...end section...]"


def sample_text(text: str, max_chars: int = 2500) -> str:
    """Return ``text`` if it fits, otherwise head + centred middle + tail.

    Each part is a third of ``max_chars``; the middle window is centred on the
    document midpoint so long documents are represented throughout.
    """
    if len(text) <= max_chars:
        return text

    chunk = max_chars // 3
    midpoint = len(text) // 2
    head = text[:chunk]
    middle = text[midpoint - chunk // 2 : midpoint + chunk // 2]
    tail = text[len(text) - chunk :]
    return f"{head}\n\n{MIDDLE_MARKER}\n\n{middle}\n\n{END_MARKER}\n\n{tail}"


def sample_for_ai(
    text: str,
    *,
    long_text_threshold: int,
    max_ai_input_chars: int,
    short_sample_chars: int,
) -> str:
    """Pick the sampling budget by document length."""
    if len(text) > long_text_threshold:
        return sample_text(text, max_ai_input_chars)
    return sample_text(text, short_sample_chars)
