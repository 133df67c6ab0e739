"""Publication status lifecycle shared by books and chapters.

Status moves forward through editorial review to publication, and an
archived item can be brought back as a draft.
"""

from __future__ import annotations

from enum import StrEnum


class PublicationStatus(StrEnum):
    """Workflow status for books and chapters."""

    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"
    ARCHIVED = "archived"


PUBLICATION_TRANSITIONS: dict[str, list[str]] = {
    "draft": ["review", "archived"],
    "review": ["draft", "published", "archived"],
    "published": ["archived"],
    "archived": ["draft"],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = PUBLICATION_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
