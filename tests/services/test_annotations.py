"""Tests for AnnotationService: insertion requests and author notes."""

from cglctl.infrastructure.library import Library
from cglctl.services.annotations import AnnotationService


class TestDocInserts:
    def test_add_normalizes_location(self, library: Library) -> None:
        result = AnnotationService(library).add_doc_insert("5", "10", "20.5", "Missing verse")
        assert result.ok
        assert result.data["id"].startswith("ins_")
        assert (
            result.data["after_book"],
            result.data["after_chapter"],
            result.data["after_record"],
        ) == ("005.00", "010.00", "020.50")

    def test_add_rejects_malformed_number(self, library: Library) -> None:
        result = AnnotationService(library).add_doc_insert("abc", "0", "0", "why")
        assert result.error.code == "VALIDATION_FAILED"
        assert "after_book" in result.error.message

    def test_add_requires_reason(self, library: Library) -> None:
        result = AnnotationService(library).add_doc_insert("1", "1", "1", "   ")
        assert result.error.code == "VALIDATION_FAILED"

    def test_list_ordered_by_location(self, library: Library) -> None:
        svc = AnnotationService(library)
        svc.add_doc_insert("010.00", "000.00", "000.00", "later")
        svc.add_doc_insert("005.00", "005.00", "010.00", "second")
        svc.add_doc_insert("005.00", "000.00", "020.00", "first")
        result = svc.list_doc_inserts()
        assert result.data["count"] == 3
        assert [item["reason"] for item in result.data["items"]] == ["first", "second", "later"]

    def test_list_filtered_by_book(self, library: Library) -> None:
        svc = AnnotationService(library)
        svc.add_doc_insert("005.00", "0", "0", "in five")
        svc.add_doc_insert("010.00", "0", "0", "in ten")
        result = svc.list_doc_inserts(after_book="5")
        assert [item["reason"] for item in result.data["items"]] == ["in five"]

    def test_list_malformed_filter(self, library: Library) -> None:
        result = AnnotationService(library).list_doc_inserts(after_book="five")
        assert result.error.code == "INVALID_NUMBER"


class TestAuthorNotes:
    def test_add(self, library: Library) -> None:
        result = AnnotationService(library).add_author_note("5", "10", "20", "Check Hebrew")
        assert result.ok
        assert result.data["id"].startswith("pvt_")
        assert result.data["record_no"] == "020.00"
        assert result.data["contents"] == "Check Hebrew"

    def test_one_note_per_location(self, library: Library) -> None:
        svc = AnnotationService(library)
        svc.add_author_note("005.00", "010.00", "020.00", "first")
        result = svc.add_author_note("5", "10", "20", "second")
        assert result.error.code == "DUPLICATE_NOTE"
        assert result.error.detail == {"location": "005.00/010.00/020.00"}

    def test_empty_contents(self, library: Library) -> None:
        result = AnnotationService(library).add_author_note("1", "1", "1", "")
        assert result.error.code == "VALIDATION_FAILED"

    def test_list(self, library: Library) -> None:
        svc = AnnotationService(library)
        svc.add_author_note("010.00", "0", "0", "b")
        svc.add_author_note("005.00", "0", "0", "a")
        result = svc.list_author_notes()
        assert [item["contents"] for item in result.data["items"]] == ["a", "b"]
        assert svc.list_author_notes(book_no="010.00").data["count"] == 1

    def test_list_malformed_filter(self, library: Library) -> None:
        result = AnnotationService(library).list_author_notes(book_no="12.345")
        assert result.error.code == "INVALID_NUMBER"
