"""Tests for the document record."""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

import pytest
import tomlkit

from docchrono.document import Document, read_field
from docchrono.errors import MetadataParseError, NoMetadataBlockFound, UnchangedWriteError
from docchrono.models import ABSENT, CalendarDate, DateValue, InvalidType

TODAY = CalendarDate(2024, 6, 15)
D2002 = CalendarDate(2002, 1, 1)


def make_document(text: str) -> Document:
    return Document.from_text(Path("page.md"), text)


class TestReadField:
    """Test read_field classification."""

    def test_missing_key(self) -> None:
        assert read_field(tomlkit.parse("a = 1\n"), "date") == ABSENT

    def test_local_date(self) -> None:
        doc = tomlkit.parse("date = 2002-01-01\n")

        assert read_field(doc, "date") == DateValue(D2002)

    def test_offset_datetime(self) -> None:
        doc = tomlkit.parse("date = 2002-01-01T10:30:00+02:00\n")

        assert read_field(doc, "date") == DateValue(D2002)

    def test_string_is_invalid(self) -> None:
        field = read_field(tomlkit.parse('date = "2002-01-01"\n'), "date")

        assert isinstance(field, InvalidType)
        assert field.raw == "2002-01-01"

    def test_time_only_is_invalid(self) -> None:
        field = read_field(tomlkit.parse("date = 10:30:00\n"), "date")

        assert isinstance(field, InvalidType)


class TestUpdateDates:
    """Test Document.update_dates."""

    def test_correct_document_is_untouched(self) -> None:
        """Should not change anything when the dates are already right."""
        text = '+++\ntitle = "Hello"\ndate = 2002-01-01\n+++\n\nBody\n'
        document = make_document(text)

        result = document.update_dates(D2002, TODAY)

        assert not result.changed
        assert not document.changed
        assert document.render() == text

    def test_missing_date_is_added(self) -> None:
        document = make_document('+++\ntitle = "Hello"\n+++\n\nBody\n')

        document.update_dates(None, TODAY)

        assert document.changed
        parsed = tomlkit.parse(document.front_matter)
        assert parsed["date"] == dt.date(2024, 6, 15)
        assert parsed["title"] == "Hello"
        assert "updated" not in parsed
        assert document.content == "Body\n"

    def test_updated_is_added(self) -> None:
        document = make_document("+++\ndate = 2001-01-01\n+++\n")

        document.update_dates(D2002, TODAY)

        parsed = tomlkit.parse(document.front_matter)
        assert parsed["date"] == dt.date(2001, 1, 1)
        assert parsed["updated"] == dt.date(2024, 6, 15)

    def test_redundant_updated_is_removed(self) -> None:
        document = make_document("+++\ndate = 2024-06-15\nupdated = 2024-06-15\n+++\n")

        document.update_dates(CalendarDate(2024, 6, 1), TODAY)

        assert document.changed
        assert "updated" not in document.front_matter
        assert "date = 2024-06-15" in document.front_matter

    def test_other_content_is_preserved(self) -> None:
        """Should keep comments, other keys and tables as they were."""
        text = (
            "+++\n"
            "# Page settings\n"
            'title = "Hello"   # shown in the header\n'
            "\n"
            "[extra]\n"
            "toc = true\n"
            "+++\n"
        )
        document = make_document(text)

        document.update_dates(D2002, TODAY)

        assert "# Page settings\n" in document.front_matter
        assert 'title = "Hello"   # shown in the header\n' in document.front_matter
        parsed = tomlkit.parse(document.front_matter)
        assert parsed["date"] == dt.date(2002, 1, 1)
        assert parsed["updated"] == dt.date(2024, 6, 15)
        assert parsed.unwrap()["extra"] == {"toc": True}

    def test_datetime_with_matching_day_is_kept(self) -> None:
        """Should keep the time of day of a date that is already right."""
        text = "+++\ndate = 2002-01-01T10:30:00Z\n+++\n"
        document = make_document(text)

        document.update_dates(CalendarDate(2003, 3, 3), TODAY)

        assert document.changed
        assert "date = 2002-01-01T10:30:00Z" in document.front_matter
        assert tomlkit.parse(document.front_matter)["updated"] == dt.date(2024, 6, 15)

    def test_string_date_is_replaced(self, caplog: pytest.LogCaptureFixture) -> None:
        document = make_document('+++\ndate = "yesterday"\n+++\n')

        with caplog.at_level(logging.WARNING):
            document.update_dates(None, TODAY)

        assert tomlkit.parse(document.front_matter)["date"] == dt.date(2024, 6, 15)
        assert "Non date value found for `date`" in caplog.text
        assert "page.md" in caplog.text

    def test_malformed_toml(self) -> None:
        document = make_document("+++\ntitle = \n+++\n")

        with pytest.raises(MetadataParseError):
            document.update_dates(None, TODAY)

    @pytest.mark.parametrize(
        "text, body",
        [("+++\n+++\n", ""), ("+++\n\n+++\n\nBody\n", "Body\n")],
    )
    def test_empty_block_stays_readable(self, text: str, body: str) -> None:
        """Should keep the line break after the opening marker when adding keys."""
        document = make_document(text)
        document.update_dates(None, TODAY)

        rendered = document.render()

        assert rendered.startswith("+++\n")
        reread = make_document(rendered)
        assert reread.content == body
        assert tomlkit.parse(reread.front_matter)["date"] == dt.date(2024, 6, 15)
        assert not reread.update_dates(None, TODAY).changed

    def test_crlf_line_endings_are_kept(self) -> None:
        text = '+++\r\ntitle = "Hello"\r\n+++\r\n\r\nBody\r\n'
        document = make_document(text)

        document.update_dates(D2002, TODAY)
        rendered = document.render()

        assert "\n" not in rendered.replace("\r\n", "")
        assert rendered.startswith('+++\r\ntitle = "Hello"\r\n')
        assert rendered.endswith("+++\r\n\r\nBody\r\n")
        reread = make_document(rendered)
        assert not reread.update_dates(D2002, TODAY).changed


class TestReadWrite:
    """Test reading documents from disk and writing them back."""

    def test_from_path_missing_block(self, tmp_path: Path) -> None:
        path = tmp_path / "page.md"
        path.write_text("Just text\n", encoding="utf-8")

        with pytest.raises(NoMetadataBlockFound):
            Document.from_path(path)

    def test_write_unchanged_fails(self, tmp_path: Path) -> None:
        """Should refuse to write a document that has no changes."""
        path = tmp_path / "page.md"
        path.write_text("+++\ndate = 2002-01-01\n+++\n", encoding="utf-8")
        document = Document.from_path(path)
        document.update_dates(D2002, TODAY)

        with pytest.raises(UnchangedWriteError):
            document.write()

    def test_write_changed(self, tmp_path: Path) -> None:
        path = tmp_path / "page.md"
        path.write_text('+++\ntitle = "Hello"\n+++\nBody\n', encoding="utf-8")
        document = Document.from_path(path)
        document.update_dates(D2002, TODAY)

        document.write()

        written = path.read_text(encoding="utf-8")
        assert written.startswith("+++\n")
        assert written.endswith("+++\n\nBody\n")
        reread = Document.from_path(path)
        parsed = tomlkit.parse(reread.front_matter)
        assert parsed["date"] == dt.date(2002, 1, 1)
        assert parsed["updated"] == dt.date(2024, 6, 15)
        assert not reread.update_dates(D2002, TODAY).changed
