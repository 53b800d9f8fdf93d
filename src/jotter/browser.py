"""
Interactive note browser state machine.

The browser holds the notes on screen and an explicit UI state. Key
events arrive one at a time as names ("up", "enter", "e", "esc", ...);
each one either moves the cursor, switches state, or runs an action
through the NoteService. Drawing and key decoding live in jotter.tui.

    LIST --enter--> PREVIEW --esc/q--> LIST
    LIST --m------> MENU    --1------> EDITING
                            --2------> LIST (completed)
                            --esc/q--> LIST
    LIST --e------> EDITING --done---> LIST
    LIST --/------> FILTER  --enter--> LIST (filter kept)
                            --esc----> LIST (filter cleared)

Edits and completions work on a copy of the note. The copy replaces the
on-screen note only once it has been saved.
"""

import logging
from enum import Enum

from jotter.errors import JotterError
from jotter.forms import Form, form_for
from jotter.models import BaseNote
from jotter.service import NoteService
from jotter.store import sort_notes

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q", "ctrl+c")
CLOSE_KEYS = ("q", "esc", "ctrl+c")
UP_KEYS = ("up", "k")
DOWN_KEYS = ("down", "j")
DELETE_KEYS = ("x", "backspace")
FILTER_KEY = "/"


class State(Enum):
    LIST = "list"
    PREVIEW = "preview"
    MENU = "menu"
    EDITING = "editing"
    FILTER = "filter"


def matches(note: BaseNote, query: str) -> bool:
    """Case-insensitive substring match on the note's content."""
    return query.lower() in note.content.lower()


class Browser:
    """Notes list with filter, preview, options menu, edit, complete and delete."""

    def __init__(self, notes: list[BaseNote], title: str, service: NoteService):
        self.all_notes = list(notes)
        self.notes = list(notes)
        self.title = title
        self.service = service
        self.state = State.LIST
        self.index = 0
        self.query = ""
        self.selected: BaseNote | None = None
        self.form: Form | None = None
        self.message = ""
        self.running = True

    @property
    def current(self) -> BaseNote | None:
        if 0 <= self.index < len(self.notes):
            return self.notes[self.index]
        return None

    def menu_options(self) -> list[str]:
        """Options offered in the menu for the selected note."""
        options = ["1. Update"]
        if self.selected is not None and self.selected.is_completable():
            options.append(f"2. Complete {self.selected.type.title()}")
        return options

    def handle_key(self, key: str) -> None:
        """Apply one key event to the current state."""
        if self.state is State.PREVIEW:
            self._preview_key(key)
        elif self.state is State.MENU:
            self._menu_key(key)
        elif self.state is State.FILTER:
            self._filter_key(key)
        elif self.state is State.LIST:
            self._list_key(key)
        # EDITING is driven by finish_edit()

    def _list_key(self, key: str) -> None:
        note = self.current
        self.message = ""

        if key in QUIT_KEYS:
            self.running = False
        elif key == FILTER_KEY:
            self.state = State.FILTER
        elif key == "esc" and self.query:
            self.set_query("")
        elif key in UP_KEYS:
            self.move(-1)
        elif key in DOWN_KEYS:
            self.move(1)
        elif key == "home":
            self.index = 0
        elif key == "end":
            self.index = max(0, len(self.notes) - 1)
        elif note is None:
            return
        elif key == "enter":
            self.selected = note
            self.state = State.PREVIEW
        elif key == "m":
            self.selected = note
            self.state = State.MENU
        elif key == "e":
            self.start_edit(note)
        elif key == "c":
            self.complete(note)
        elif key in DELETE_KEYS:
            self.delete(note)

    def _filter_key(self, key: str) -> None:
        if key in ("esc", "ctrl+c"):
            self.state = State.LIST
            self.set_query("")
        elif key == "enter":
            self.state = State.LIST
        elif key == "backspace":
            self.set_query(self.query[:-1])
        elif key in ("up", "down"):
            self.move(-1 if key == "up" else 1)
        elif len(key) == 1 and key.isprintable():
            self.set_query(self.query + key)

    def _preview_key(self, key: str) -> None:
        if key in CLOSE_KEYS:
            self.state = State.LIST
            self.selected = None

    def _menu_key(self, key: str) -> None:
        note = self.selected
        if key in ("esc", "q"):
            self.state = State.LIST
            self.selected = None
        elif key == "1" and note is not None:
            self.start_edit(note)
        elif key == "2" and note is not None and note.is_completable():
            self.state = State.LIST
            self.selected = None
            self.complete(note)

    def move(self, delta: int) -> None:
        if self.notes:
            self.index = max(0, min(len(self.notes) - 1, self.index + delta))

    def set_query(self, query: str) -> None:
        """Narrow the visible notes to those whose content contains query."""
        self.query = query
        self.index = 0
        self._refresh()

    def start_edit(self, note: BaseNote) -> None:
        """Open the form matching the note's kind, on a copy of the note."""
        self.selected = note
        self.form = form_for(note.model_copy(deep=True))
        self.state = State.EDITING

    def finish_edit(self, note: BaseNote | None) -> None:
        """Save the edited note (None means the form was cancelled)."""
        self.form = None
        self.selected = None
        self.state = State.LIST

        if note is None:
            self.message = "Edit cancelled"
            return

        try:
            self.service.save_note(note)
        except JotterError as e:
            logger.warning("Saving note %s failed: %s", note.id, e)
            self.message = f"Error updating {note.type}: {e}"
            return

        self._replace(note)
        self.message = f"{note.type.title()} updated successfully!"

    def complete(self, note: BaseNote) -> None:
        if not note.is_completable():
            self.message = f"{note.type.title()} notes cannot be completed"
            return

        done = note.model_copy(deep=True)
        try:
            self.service.complete_note(done)
        except JotterError as e:
            self.message = f"Error completing {note.type}: {e}"
            return

        self._replace(done)
        self.message = f"{note.type.title()} completed successfully!"

    def delete(self, note: BaseNote) -> None:
        try:
            removed = self.service.delete_note(note)
        except JotterError as e:
            self.message = f"Error deleting note: {e}"
            return

        self.all_notes = [n for n in self.all_notes if n.id != note.id]
        self._refresh()
        if removed:
            self.message = "Note deleted"
        else:
            logger.warning("Note %s was not in its bucket", note.id)
            self.message = "Note not found; removed from the list"

    def _replace(self, note: BaseNote) -> None:
        """Swap in the saved note, re-sort, and keep the cursor on it."""
        self.all_notes = sort_notes([note if n.id == note.id else n for n in self.all_notes])
        self._refresh()
        for i, n in enumerate(self.notes):
            if n.id == note.id:
                self.index = i
                break

    def _refresh(self) -> None:
        if self.query:
            self.notes = [n for n in self.all_notes if matches(n, self.query)]
        else:
            self.notes = list(self.all_notes)
        self.index = min(self.index, max(0, len(self.notes) - 1))
