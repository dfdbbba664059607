"""
Shared validation functions for Pydantic schemas.

This module contains validators used across multiple entity schemas (bookmarks, categories,
tags). Tag names keep their case: storage is case-sensitive and only resolution compares
names case-insensitively.
"""
from core.config import get_settings

MAX_TAG_NAME_LENGTH = 100


def validate_tag_name(tag: str) -> str:
    """
    Trim and validate a single tag name.

    Args:
        tag: The tag string to validate.

    Returns:
        The trimmed tag name, case preserved.

    Raises:
        ValueError: If the tag is empty or too long.
    """
    trimmed = tag.strip()
    if not trimmed:
        raise ValueError("Tag name cannot be empty")
    if len(trimmed) > MAX_TAG_NAME_LENGTH:
        raise ValueError(
            f"Tag name exceeds maximum length of {MAX_TAG_NAME_LENGTH} characters: '{trimmed}'",
        )
    return trimmed


def validate_tag_names(tags: list[str]) -> list[str]:
    """
    Trim and validate a list of tag names.

    Args:
        tags: List of tag strings to validate.

    Returns:
        List of trimmed names with blank entries dropped and exact duplicates
        removed (preserving first occurrence order). Names differing only in
        case are kept as separate entries.

    Raises:
        ValueError: If ``tags`` is not a list, an entry is not a string, or any
            tag is too long.
    """
    # A bare string is iterable and would otherwise become one tag per character
    if not isinstance(tags, list):
        raise ValueError("Tags must be a list of strings")
    normalized = []
    seen: set[str] = set()
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError("Tags must be a list of strings")
        if not tag.strip():
            continue  # Skip empty tags silently
        validated = validate_tag_name(tag)
        if validated not in seen:
            seen.add(validated)
            normalized.append(validated)
    return normalized


def validate_title_length(title: str | None) -> str | None:
    """Validate that title doesn't exceed maximum length."""
    settings = get_settings()
    if title is not None and len(title) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(title):,} characters).",
        )
    return title


def validate_description_length(description: str | None) -> str | None:
    """Validate that description doesn't exceed maximum length."""
    settings = get_settings()
    if description is not None and len(description) > settings.max_description_length:
        max_len = settings.max_description_length
        raise ValueError(
            f"Description exceeds maximum length of {max_len:,} characters "
            f"(got {len(description):,} characters).",
        )
    return description
