"""Shared utility functions for service layer."""


def escape_ilike(value: str) -> str:
    r"""
    Escape ``%``, ``_`` and ``\`` so they match literally in LIKE/ILIKE.

    Backslash is PostgreSQL's default LIKE escape character.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(keyword: str) -> str:
    """ILIKE pattern matching ``keyword`` anywhere in a column, wildcards escaped."""
    return f"%{escape_ilike(keyword)}%"
