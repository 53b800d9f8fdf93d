"""
Note service for JotterXpress.

Validates input and stamps timestamps before handing notes to the store.
"""

import logging

from jotter.dates import parse_date, parse_month
from jotter.errors import EmptyContentError, UnsupportedOperationError
from jotter.models import STATUS_COMPLETED, BaseNote, new_note
from jotter.store import NoteStore

logger = logging.getLogger(__name__)


def _require_content(content: str, kind: str = "note") -> None:
    if not content or not content.strip():
        raise EmptyContentError(kind)


class NoteService:
    """Business rules in front of a NoteStore."""

    def __init__(self, store: NoteStore | None = None):
        self.store = store or NoteStore()

    def create_note(self, content: str) -> BaseNote:
        """Create and persist a text note for today."""
        _require_content(content)

        note = new_note(content)
        self.store.save(note)
        logger.info("Created note %s", note.id)
        return note

    def save_note(self, note: BaseNote) -> None:
        """Persist a new or edited note of any kind, refreshing updated_at."""
        _require_content(note.content, note.type)

        note.touch()
        self.store.save(note)

    def complete_note(self, note: BaseNote) -> None:
        """Mark a task or reminder as completed and persist it."""
        if not note.is_completable():
            raise UnsupportedOperationError(f"{note.type} notes cannot be completed")

        note.metadata.status = STATUS_COMPLETED
        self.save_note(note)

    def delete_note(self, note: BaseNote) -> bool:
        """Remove a note from its bucket. Returns False if it was not stored."""
        return self.store.remove_note(note)

    def today_notes(self) -> list[BaseNote]:
        return self.store.today_notes()

    def notes_by_date(self, day: str) -> list[BaseNote]:
        """Notes for a YYYY-MM-DD day. Raises InvalidDateFormatError."""
        parse_date(day)
        return self.store.notes_by_date(day)

    def notes_by_month(self, year_month: str) -> list[BaseNote]:
        """Notes for a YYYY-MM month. Raises InvalidMonthFormatError."""
        parse_month(year_month)
        return self.store.notes_by_month(year_month)

    def list_notes(self, notes: list[BaseNote]) -> str:
        """Format notes as a numbered plain-text listing."""
        if not notes:
            return "No notes found."

        lines = [f"📝 Notes ({len(notes)} found):", ""]
        for i, note in enumerate(notes, 1):
            lines.append(f"{i}. {note.summary()}")

        return "\n".join(lines) + "\n"
