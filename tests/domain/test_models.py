"""Tests for entity input models and validation helpers."""

import pytest
from pydantic import ValidationError

from cglctl.domain.lifecycle import PublicationStatus
from cglctl.domain.models import (
    TITLE_MAX_LENGTH,
    AuthorNoteCreate,
    BookCreate,
    ChapterCreate,
    ContentOption,
    DisplayOption,
    DocInsertCreate,
    RecordCreate,
    slugify,
    validate_create,
)


class TestSlugify:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("  The Big Book!  ", "the-big-book"),
            ("a -- b", "a-b"),
            ("Psalm 23", "psalm-23"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, text: str, expected: str) -> None:
        assert slugify(text) == expected


class TestBookCreate:
    def test_defaults(self) -> None:
        book = BookCreate(title="Genesis")
        assert book.slug == "genesis"
        assert book.status is PublicationStatus.DRAFT
        assert book.intro == ""
        assert book.group_no is None

    def test_explicit_slug_is_normalized(self) -> None:
        assert BookCreate(title="Genesis", slug="My Slug").slug == "my-slug"

    def test_title_stripped(self) -> None:
        assert BookCreate(title="  Exodus ").title == "Exodus"

    def test_title_required(self) -> None:
        with pytest.raises(ValidationError):
            BookCreate(title="")

    def test_title_too_long(self) -> None:
        with pytest.raises(ValidationError):
            BookCreate(title="x" * (TITLE_MAX_LENGTH + 1))

    def test_title_without_alphanumerics(self) -> None:
        with pytest.raises(ValidationError, match="letter or digit"):
            BookCreate(title="???")

    def test_negative_group(self) -> None:
        with pytest.raises(ValidationError):
            BookCreate(title="Numbers", group_no=-1)

    def test_unknown_field(self) -> None:
        with pytest.raises(ValidationError):
            BookCreate(title="Numbers", visible="005.00")

    def test_frozen(self) -> None:
        book = BookCreate(title="Ruth")
        with pytest.raises(ValidationError):
            book.title = "Esther"  # type: ignore[misc]


class TestChapterCreate:
    def test_defaults(self) -> None:
        chapter = ChapterCreate(title="In the Beginning")
        assert chapter.slug == "in-the-beginning"
        assert chapter.show_in_contents is True
        assert chapter.content_option is ContentOption.MIXED
        assert chapter.display_option is DisplayOption.NORMAL
        assert chapter.created_by == "system"

    def test_invalid_option(self) -> None:
        with pytest.raises(ValidationError):
            ChapterCreate(title="Tables", content_option="CHARTS_ONLY")


class TestRecordCreate:
    def test_defaults(self) -> None:
        record = RecordCreate()
        assert record.content == ""
        assert record.chapter_id is None
        assert record.meta == {}

    def test_meta_kept(self) -> None:
        assert RecordCreate(meta={"source": "scan"}).meta == {"source": "scan"}


class TestAnnotationModels:
    def test_doc_insert_normalizes_numbers(self) -> None:
        req = DocInsertCreate(
            after_book="5", after_chapter="10.5", after_record="020.00", reason="x"
        )
        assert (req.after_book, req.after_chapter, req.after_record) == (
            "005.00",
            "010.50",
            "020.00",
        )

    def test_doc_insert_rejects_malformed_number(self) -> None:
        with pytest.raises(ValidationError, match="MMM.mm"):
            DocInsertCreate(after_book="12.345", after_chapter="0", after_record="0", reason="x")

    def test_doc_insert_requires_reason(self) -> None:
        with pytest.raises(ValidationError):
            DocInsertCreate(after_book="1", after_chapter="1", after_record="1", reason="")

    def test_author_note_normalizes_numbers(self) -> None:
        note = AuthorNoteCreate(book_no="1", chapter_no="2", record_no="3.25", contents="hm")
        assert (note.book_no, note.chapter_no, note.record_no) == ("001.00", "002.00", "003.25")


class TestValidateCreate:
    def test_valid(self) -> None:
        model, result = validate_create(BookCreate, {"title": "Judges"})
        assert result.valid
        assert result.errors == []
        assert isinstance(model, BookCreate)

    def test_invalid_flattens_errors(self) -> None:
        model, result = validate_create(BookCreate, {"title": "Judges", "group_no": -2})
        assert model is None
        assert not result.valid
        assert any(err.startswith("group_no:") for err in result.errors)
