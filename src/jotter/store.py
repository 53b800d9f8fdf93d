"""
File-backed note store for JotterXpress.

One JSON file per calendar day (a "bucket"), holding a pretty-printed
array of notes:

    ~/.jotterxpress/notes/2025-10-14.json

Buckets are always rewritten whole. Legacy <date>.txt files are migrated
to JSON the first time their day is read.
"""

import logging
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from jotter.config import get_notes_dir
from jotter.dates import format_date, iter_days, month_bounds, parse_date
from jotter.errors import DecodeError, StorageError, UnsupportedOperationError
from jotter.legacy import read_legacy_file
from jotter.models import BaseNote, dump_bucket, load_bucket, today

logger = logging.getLogger(__name__)


def sort_notes(notes: list[BaseNote]) -> list[BaseNote]:
    """
    Order notes for display.

    Pending reminders come first. Within each group the most recently
    updated note comes first. Both sorts are stable.
    """
    by_recency = sorted(notes, key=lambda n: n.updated_at, reverse=True)
    return sorted(by_recency, key=lambda n: not n.is_pending_reminder())


class NoteStore:
    """JSON file storage for notes, keyed by day."""

    def __init__(self, notes_dir: Path | None = None):
        self.notes_dir = Path(notes_dir) if notes_dir else get_notes_dir()

    def bucket_path(self, day: str) -> Path:
        """Path of the JSON bucket for a YYYY-MM-DD day."""
        return self.notes_dir / f"{day}.json"

    def legacy_path(self, day: str) -> Path:
        """Path of the legacy text file for a YYYY-MM-DD day."""
        return self.notes_dir / f"{day}.txt"

    def save(self, note: BaseNote) -> None:
        """Insert or replace a note (matched by id) in its day's bucket."""
        self._ensure_dir()

        notes = self._read_bucket(note.date, strict=True)
        for i, existing in enumerate(notes):
            if existing.id == note.id:
                notes[i] = note
                break
        else:
            notes.append(note)

        self._write_bucket(note.date, notes)
        logger.debug("Saved note %s to %s (%d in bucket)", note.id, note.date, len(notes))

    def notes_by_date(self, day: str | date) -> list[BaseNote]:
        """All notes of one day, sorted. Missing buckets are empty."""
        return self._read_bucket(format_date(parse_date(day)))

    def notes_by_date_range(self, start: str | date, end: str | date) -> list[BaseNote]:
        """All notes from start to end inclusive, sorted."""
        first = parse_date(start)
        last = parse_date(end)

        notes: list[BaseNote] = []
        for day in iter_days(first, last):
            notes.extend(self._read_bucket(format_date(day)))

        return sort_notes(notes)

    def notes_by_month(self, year_month: str) -> list[BaseNote]:
        """All notes of a YYYY-MM month, sorted."""
        first, last = month_bounds(year_month)
        return self.notes_by_date_range(first, last)

    def today_notes(self) -> list[BaseNote]:
        return self.notes_by_date(today())

    def delete_note(self, note_id: str) -> None:
        """Not supported: a bare id does not say which bucket to rewrite."""
        raise UnsupportedOperationError(
            f"cannot delete note {note_id} by id alone; use remove_note(note)"
        )

    def remove_note(self, note: BaseNote) -> bool:
        """
        Remove a note from its day's bucket.

        Sibling notes are rewritten untouched. Returns False if the note
        was not in the bucket.
        """
        if not self.bucket_path(note.date).exists():
            return False

        notes = self._read_bucket(note.date, strict=True)
        kept = [n for n in notes if n.id != note.id]
        if len(kept) == len(notes):
            return False

        self._write_bucket(note.date, kept)
        logger.info("Removed note %s from %s", note.id, note.date)
        return True

    def _ensure_dir(self) -> None:
        try:
            self.notes_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"failed to create notes directory {self.notes_dir}: {e}") from e

    def _read_bucket(self, day: str, strict: bool = False) -> list[BaseNote]:
        """
        Load and sort one bucket, migrating the legacy file if needed.

        An undecodable bucket reads as empty, unless strict is set: writers
        pass strict so a bucket they cannot read is never overwritten.
        """
        path = self.bucket_path(day)

        if not path.exists():
            if self.legacy_path(day).exists():
                return self._migrate(day)
            return []

        try:
            raw = path.read_bytes()
        except OSError as e:
            raise StorageError(f"failed to read {path}: {e}") from e

        try:
            notes = self._decode(path, raw)
        except DecodeError as e:
            if self.legacy_path(day).exists():
                logger.info("%s; migrating from legacy text file", e)
                migrated = self._migrate(day)
                if migrated or not strict:
                    return migrated
            if strict:
                raise
            logger.warning("%s; treating bucket as empty", e)
            return []

        logger.debug("Loaded %d notes from %s", len(notes), path)
        return sort_notes(notes)

    def _decode(self, path: Path, raw: bytes) -> list[BaseNote]:
        try:
            return load_bucket(raw)
        except (ValidationError, ValueError) as e:
            raise DecodeError(path, str(e).splitlines()[0]) from e

    def _write_bucket(self, day: str, notes: list[BaseNote]) -> None:
        path = self.bucket_path(day)

        try:
            data = dump_bucket(notes)
        except ValueError as e:
            raise StorageError(f"failed to encode notes for {day}: {e}") from e

        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise StorageError(f"failed to write {path}: {e}") from e

    def _migrate(self, day: str) -> list[BaseNote]:
        """Convert <day>.txt into the JSON bucket and delete the text file."""
        legacy = self.legacy_path(day)

        try:
            notes = read_legacy_file(legacy, day)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"failed to read legacy file {legacy}: {e}") from e

        if notes:
            self._ensure_dir()
            self._write_bucket(day, notes)
            try:
                legacy.unlink()
            except OSError as e:
                logger.warning("Migrated %s but could not remove it: %s", legacy, e)
            logger.info("Migrated %d legacy notes from %s", len(notes), legacy)

        return sort_notes(notes)
