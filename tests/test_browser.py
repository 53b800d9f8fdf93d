"""Tests for the interactive browser state machine (no terminal needed)."""

import pytest

from jotter.browser import Browser, State
from jotter.errors import StorageError
from jotter.forms import ReminderForm, TextForm
from jotter.models import STATUS_COMPLETED, STATUS_TODO, BaseNote, new_contact, new_note, new_reminder, new_task
from jotter.service import NoteService


@pytest.fixture()
def browser(service: NoteService, clock) -> Browser:
    """Browser over [reminder, task, text] in display order."""
    notes = [new_note("thought"), new_task("ship"), new_reminder("call mum")]
    for minutes, note in enumerate(notes):
        note.updated_at = clock(minutes)
        service.store.save(note)
    return Browser(service.today_notes(), "Today's Notes", service)


def find(service: NoteService, note_id: str) -> BaseNote:
    return next(n for n in service.today_notes() if n.id == note_id)


def failing_save(note: BaseNote) -> None:
    raise StorageError("disk full")


class TestNavigation:
    def test_starts_in_list(self, browser: Browser) -> None:
        assert browser.state is State.LIST
        assert browser.index == 0
        assert browser.running

    def test_move_clamps(self, browser: Browser) -> None:
        browser.handle_key("up")
        assert browser.index == 0
        for _ in range(10):
            browser.handle_key("j")
        assert browser.index == 2
        browser.handle_key("k")
        assert browser.index == 1

    def test_home_end(self, browser: Browser) -> None:
        browser.handle_key("end")
        assert browser.index == 2
        browser.handle_key("home")
        assert browser.index == 0

    @pytest.mark.parametrize("key", ["q", "ctrl+c"])
    def test_quit(self, browser: Browser, key: str) -> None:
        browser.handle_key(key)
        assert not browser.running


class TestPreviewAndMenu:
    def test_enter_opens_preview(self, browser: Browser) -> None:
        browser.handle_key("enter")
        assert browser.state is State.PREVIEW
        assert browser.selected is browser.notes[0]

    @pytest.mark.parametrize("key", ["q", "esc", "ctrl+c"])
    def test_preview_closes(self, browser: Browser, key: str) -> None:
        browser.handle_key("enter")
        browser.handle_key(key)
        assert browser.state is State.LIST
        assert browser.running

    def test_menu_options_for_reminder(self, browser: Browser) -> None:
        browser.handle_key("m")
        assert browser.state is State.MENU
        assert browser.menu_options() == ["1. Update", "2. Complete Reminder"]

    def test_menu_options_for_text(self, service: NoteService) -> None:
        browser = Browser([new_note("x")], "t", service)
        browser.handle_key("m")
        assert browser.menu_options() == ["1. Update"]
        browser.handle_key("2")
        assert browser.state is State.MENU

    def test_menu_escape(self, browser: Browser) -> None:
        browser.handle_key("m")
        browser.handle_key("esc")
        assert browser.state is State.LIST
        assert browser.selected is None

    def test_menu_update_opens_form(self, browser: Browser) -> None:
        browser.handle_key("m")
        browser.handle_key("1")
        assert browser.state is State.EDITING
        assert isinstance(browser.form, ReminderForm)

    def test_menu_complete(self, browser: Browser, service: NoteService) -> None:
        reminder = browser.notes[0]
        browser.handle_key("m")
        browser.handle_key("2")

        assert browser.state is State.LIST
        assert browser.current.id == reminder.id
        assert browser.current.metadata.status == STATUS_COMPLETED
        assert find(service, reminder.id).metadata.status == STATUS_COMPLETED
        assert browser.message == "Reminder completed successfully!"


class TestEditing:
    def test_edit_and_save(self, browser: Browser, service: NoteService) -> None:
        browser.handle_key("end")
        browser.handle_key("e")
        assert isinstance(browser.form, TextForm)

        browser.form.set("content", "better thought")
        browser.finish_edit(browser.form.submit())

        assert browser.state is State.LIST
        assert browser.form is None
        assert browser.message == "Text updated successfully!"
        assert "better thought" in [n.content for n in service.today_notes()]

    def test_edit_cancel(self, browser: Browser) -> None:
        browser.handle_key("e")
        browser.finish_edit(None)
        assert browser.state is State.LIST
        assert browser.message == "Edit cancelled"

    def test_keys_ignored_while_editing(self, browser: Browser) -> None:
        browser.handle_key("e")
        browser.handle_key("q")
        assert browser.state is State.EDITING
        assert browser.running

    def test_cursor_follows_edited_note(self, browser: Browser) -> None:
        browser.handle_key("down")
        task = browser.current
        browser.handle_key("e")
        browser.finish_edit(browser.form.submit())
        assert browser.current.id == task.id

    def test_form_edits_a_copy(self, browser: Browser) -> None:
        browser.handle_key("end")
        shown = browser.current
        browser.handle_key("e")
        browser.form.set("content", "not saved yet")
        browser.form.submit()

        assert shown.content == "thought"
        assert browser.current.content == "thought"

    def test_failed_save_leaves_note_unchanged(self, browser: Browser, monkeypatch: pytest.MonkeyPatch) -> None:
        browser.handle_key("end")
        browser.handle_key("e")
        browser.form.set("content", "lost edit")
        edited = browser.form.submit()

        monkeypatch.setattr(browser.service.store, "save", failing_save)
        browser.finish_edit(edited)

        assert browser.current.content == "thought"
        assert browser.message == "Error updating text: disk full"


class TestCompleteAndDelete:
    def test_complete_task(self, browser: Browser, service: NoteService) -> None:
        browser.handle_key("down")
        task = browser.current
        browser.handle_key("c")

        assert browser.current.id == task.id
        assert browser.current.metadata.status == STATUS_COMPLETED
        assert find(service, task.id).metadata.status == STATUS_COMPLETED
        assert browser.message == "Task completed successfully!"

    def test_failed_complete_leaves_task_pending(self, browser: Browser, monkeypatch: pytest.MonkeyPatch) -> None:
        browser.handle_key("down")
        task = browser.current
        monkeypatch.setattr(browser.service.store, "save", failing_save)

        browser.handle_key("c")

        assert task.metadata.status == STATUS_TODO
        assert browser.current is task
        assert browser.message == "Error completing task: disk full"

    def test_complete_text_refused(self, browser: Browser) -> None:
        browser.handle_key("end")
        browser.handle_key("c")
        assert browser.message == "Text notes cannot be completed"

    @pytest.mark.parametrize("key", ["x", "backspace"])
    def test_delete(self, browser: Browser, service: NoteService, key: str) -> None:
        browser.handle_key("end")
        doomed = browser.current
        browser.handle_key(key)

        assert doomed.id not in [n.id for n in browser.notes]
        assert doomed.id not in [n.id for n in service.today_notes()]
        assert len(service.today_notes()) == 2
        assert browser.index == 1
        assert browser.message == "Note deleted"

    def test_delete_last_note(self, service: NoteService) -> None:
        contact = new_contact("Ana")
        service.save_note(contact)
        browser = Browser([contact], "t", service)

        browser.handle_key("x")
        assert browser.notes == []
        assert browser.current is None
        browser.handle_key("enter")
        assert browser.state is State.LIST

    def test_delete_note_missing_from_disk(self, service: NoteService) -> None:
        kept = new_note("kept")
        service.save_note(kept)
        unsaved = new_note("never saved")
        browser = Browser([unsaved, kept], "t", service)

        browser.handle_key("x")

        assert [n.id for n in browser.notes] == [kept.id]
        assert browser.message == "Note not found; removed from the list"
        assert [n.id for n in service.today_notes()] == [kept.id]


class TestFilter:
    def type_query(self, browser: Browser, text: str) -> None:
        browser.handle_key("/")
        for ch in text:
            browser.handle_key(ch)

    def test_slash_enters_filter(self, browser: Browser) -> None:
        browser.handle_key("/")
        assert browser.state is State.FILTER
        assert browser.query == ""
        assert len(browser.notes) == 3

    def test_typing_narrows_by_content(self, browser: Browser) -> None:
        self.type_query(browser, "SHI")
        assert browser.query == "SHI"
        assert [n.content for n in browser.notes] == ["ship"]
        assert browser.index == 0

    def test_letters_are_query_not_commands(self, browser: Browser) -> None:
        self.type_query(browser, "xq")
        assert browser.running
        assert browser.state is State.FILTER
        assert len(browser.all_notes) == 3
        assert browser.notes == []

    def test_backspace_widens(self, browser: Browser) -> None:
        self.type_query(browser, "shipx")
        assert browser.notes == []
        browser.handle_key("backspace")
        assert [n.content for n in browser.notes] == ["ship"]

    def test_enter_keeps_filter(self, browser: Browser) -> None:
        self.type_query(browser, "call")
        browser.handle_key("enter")
        assert browser.state is State.LIST
        assert [n.content for n in browser.notes] == ["call mum"]

        browser.handle_key("enter")
        assert browser.state is State.PREVIEW
        assert browser.selected.content == "call mum"

    def test_esc_clears_filter(self, browser: Browser) -> None:
        self.type_query(browser, "call")
        browser.handle_key("esc")
        assert browser.state is State.LIST
        assert browser.query == ""
        assert len(browser.notes) == 3

    def test_esc_in_list_clears_kept_filter(self, browser: Browser) -> None:
        self.type_query(browser, "call")
        browser.handle_key("enter")
        browser.handle_key("esc")
        assert browser.query == ""
        assert len(browser.notes) == 3
        assert browser.running

    def test_delete_while_filtered(self, browser: Browser, service: NoteService) -> None:
        self.type_query(browser, "ship")
        browser.handle_key("enter")
        browser.handle_key("x")

        assert browser.notes == []
        browser.handle_key("esc")
        assert [n.content for n in browser.notes] == ["call mum", "thought"]
        assert len(service.today_notes()) == 2

    def test_complete_while_filtered(self, browser: Browser) -> None:
        self.type_query(browser, "ship")
        browser.handle_key("enter")
        browser.handle_key("c")

        assert [n.content for n in browser.notes] == ["ship"]
        assert browser.current.metadata.status == STATUS_COMPLETED
