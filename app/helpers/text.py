# app/helpers/text.py
from typing import Iterable, Optional


def is_blank(value: Optional[str]) -> bool:
    """None, empty or whitespace-only."""
    return value is None or not str(value).strip()


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    lowered = (text or "").lower()
    return any(keyword.lower() in lowered for keyword in keywords)
