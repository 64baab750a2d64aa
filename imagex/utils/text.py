"""String helpers for presenting model labels."""

from __future__ import annotations

DEFAULT_SEPARATOR = "_"


def humanize_label(label: str, *, separator: str = DEFAULT_SEPARATOR) -> str:
    """Return ``label`` with every ``separator`` replaced by a single space.

    The mapping is character-for-character, so spacing is preserved and
    applying it twice gives the same result as applying it once.
    """
    if not separator:
        return label
    return label.replace(separator, " ")


def format_result_text(label: str) -> str:
    """Text shown to the user for a successful classification."""
    return f"Result: {label}"
