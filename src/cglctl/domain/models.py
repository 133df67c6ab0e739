"""Input models for books, chapters, records, and annotations.

Each ``*Create`` model validates the caller-supplied fields of a new
entity.  Visible numbers are never part of these models: they are
assigned by the numbering engine at persistence time.  Annotation models
reference locations by visible number and normalize them to ``MMM.mm``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from cglctl.domain.lifecycle import PublicationStatus
from cglctl.domain.numbering import VisibleNumber

TITLE_MAX_LENGTH = 220


class ContentOption(StrEnum):
    """What a chapter's content area holds."""

    AQ_ONLY = "AQ_ONLY"
    TEXT_ONLY = "TEXT_ONLY"
    TABLE_ONLY = "TABLE_ONLY"
    MIXED = "MIXED"


class DisplayOption(StrEnum):
    """How a chapter is presented in the book."""

    NORMAL = "NORMAL"
    HIGHLIGHT = "HIGHLIGHT"
    APPENDIX = "APPENDIX"
    HIDDEN = "HIDDEN"


@dataclass
class ValidationResult:
    """Result of an input validation check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def slugify(text: str) -> str:
    """Lowercase *text* and reduce it to ``[a-z0-9-]``.

    Examples:
        >>> slugify("  The Big Book!  ")
        'the-big-book'
        >>> slugify("a -- b")
        'a-b'
    """
    slug = text.strip().lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def _canonical_visible(value: Any) -> str:
    number = VisibleNumber.parse(value, strict=True) if value is not None else None
    if number is None:
        msg = f"{value!r} is not a visible number (expected MMM.mm)"
        raise ValueError(msg)
    return str(number)


class _InputModel(BaseModel):
    model_config = {"frozen": True, "extra": "forbid", "str_strip_whitespace": True}


class _SluggedInput(_InputModel):
    """Shared title/slug handling: slug defaults to the slugified title."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    slug: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_slug(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        source = data.get("slug") or data.get("title") or ""
        slug = slugify(str(source))
        if not slug and data.get("title"):
            msg = "title or slug must contain at least one letter or digit"
            raise ValueError(msg)
        return {**data, "slug": slug}


class BookCreate(_SluggedInput):
    """Fields accepted when creating a book."""

    intro: str = ""
    status: PublicationStatus = PublicationStatus.DRAFT
    group_no: int | None = Field(default=None, ge=0)


class ChapterCreate(_SluggedInput):
    """Fields accepted when adding a chapter to a book."""

    header: str = ""
    page_head_note: str = ""
    show_in_contents: bool = True
    special_numbering: str = ""
    intro: str = ""
    content_option: ContentOption = ContentOption.MIXED
    display_option: DisplayOption = DisplayOption.NORMAL
    content_html: str = ""
    notes: str = ""
    status: PublicationStatus = PublicationStatus.DRAFT
    created_by: str = "system"


class RecordCreate(_InputModel):
    """Fields accepted when adding a record to a book."""

    content: str = ""
    chapter_id: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class DocInsertCreate(_InputModel):
    """A request to insert material after a given book/chapter/record."""

    after_book: str
    after_chapter: str
    after_record: str
    reason: str = Field(min_length=1)

    @field_validator("after_book", "after_chapter", "after_record", mode="before")
    @classmethod
    def _normalize_number(cls, value: Any) -> str:
        return _canonical_visible(value)


class AuthorNoteCreate(_InputModel):
    """An author's private note pinned to a book/chapter/record location."""

    book_no: str
    chapter_no: str
    record_no: str
    contents: str = Field(min_length=1)

    @field_validator("book_no", "chapter_no", "record_no", mode="before")
    @classmethod
    def _normalize_number(cls, value: Any) -> str:
        return _canonical_visible(value)


M = TypeVar("M", bound=BaseModel)


def validate_create(model_cls: type[M], data: dict[str, Any]) -> tuple[M | None, ValidationResult]:
    """Validate *data* against *model_cls*.

    Returns the model (or None) and a ValidationResult whose errors are
    flattened to ``"field: message"`` strings.
    """
    try:
        model = model_cls.model_validate(data)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
            for err in exc.errors()
        ]
        return None, ValidationResult(valid=False, errors=errors)
    return model, ValidationResult(valid=True)
