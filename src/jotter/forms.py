"""
Create/edit forms for each kind of note.

A form is a list of fields plus a builder. It knows nothing about the
terminal: the curses driver in jotter.tui fills field values and calls
submit(). Editing an existing note pre-fills the fields, and a successful
submit updates that note in place.
"""

from dataclasses import dataclass
from typing import Callable

from jotter.models import (
    DEFAULT_REMINDER_TIME,
    PRIORITIES,
    PRIORITY_LOW,
    STATUS_TODO,
    BaseNote,
    new_contact,
    new_idea,
    new_note,
    new_reminder,
    new_task,
)

PHONE_CHARS = set("0123456789+-() ")


class FormError(ValueError):
    """Raised by submit() when one or more fields are invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def priority_validator(value: str) -> None:
    if value and value.strip().lower() not in PRIORITIES:
        raise ValueError("priority must be: low or high")


def time_validator(value: str) -> None:
    """Accept HH:MM on a 24-hour clock."""
    if not value:
        return
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError("time must be in HH:MM format")
    hours, minutes = parts
    if len(hours) != 2 or not hours.isdigit():
        raise ValueError("hours must be 2 digits")
    if len(minutes) != 2 or not minutes.isdigit():
        raise ValueError("minutes must be 2 digits")
    if int(hours) > 23 or int(minutes) > 59:
        raise ValueError("invalid time format")


def phone_validator(value: str) -> None:
    if value and not set(value) <= PHONE_CHARS:
        raise ValueError("phone number contains invalid characters")


def email_validator(value: str) -> None:
    if value and ("@" not in value or "." not in value):
        raise ValueError("invalid email format")


@dataclass
class FormField:
    name: str
    label: str
    placeholder: str = ""
    required: bool = False
    multiline: bool = False
    char_limit: int = 200
    validator: Callable[[str], None] | None = None
    value: str = ""

    def error(self) -> str | None:
        """Validation message for the current value, or None."""
        value = self.value.strip()
        if self.required and not value:
            return f"{self.label.lower()} is required"
        if len(value) > self.char_limit:
            return f"{self.label.lower()} is limited to {self.char_limit} characters"
        if self.validator:
            try:
                self.validator(value)
            except ValueError as e:
                return str(e)
        return None


class Form:
    """Base form. Subclasses define fields(), prefill() and build()."""

    kind = "note"
    title = "New Note"

    def __init__(self, note: BaseNote | None = None):
        self.existing = note
        self.fields = self.make_fields()
        if note is not None:
            self.title = self.title.replace("New", "Edit")
            self.prefill(note)

    def make_fields(self) -> list[FormField]:
        raise NotImplementedError

    def prefill(self, note: BaseNote) -> None:
        raise NotImplementedError

    def build(self, values: dict[str, str]) -> BaseNote:
        raise NotImplementedError

    @property
    def is_edit(self) -> bool:
        return self.existing is not None

    def field(self, name: str) -> FormField:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def set(self, name: str, value: str) -> None:
        self.field(name).value = value

    def values(self) -> dict[str, str]:
        return {f.name: f.value.strip() for f in self.fields}

    def errors(self) -> list[str]:
        return [msg for f in self.fields if (msg := f.error())]

    def submit(self) -> BaseNote:
        """Validate and return the new note, or the updated existing note."""
        errors = self.errors()
        if errors:
            raise FormError(errors)
        return self.build(self.values())


class TextForm(Form):
    kind = "text"
    title = "New Note"

    def make_fields(self) -> list[FormField]:
        return [
            FormField(
                "content",
                "Note",
                placeholder="Write your note here...",
                required=True,
                multiline=True,
                char_limit=2000,
            ),
        ]

    def prefill(self, note: BaseNote) -> None:
        self.set("content", note.content)

    def create(self, content: str) -> BaseNote:
        return new_note(content)

    def build(self, values: dict[str, str]) -> BaseNote:
        if self.existing is not None:
            self.existing.content = values["content"]
            return self.existing
        return self.create(values["content"])


class IdeaForm(TextForm):
    kind = "idea"
    title = "New Idea"

    def create(self, content: str) -> BaseNote:
        return new_idea(content)


class TaskForm(Form):
    kind = "task"
    title = "New Task"

    def make_fields(self) -> list[FormField]:
        return [
            FormField("content", "Description", "Enter task description...", required=True),
            FormField("priority", "Priority", "low, high", char_limit=10, validator=priority_validator),
            FormField("assignee", "Assignee", "Enter assignee name (optional)", char_limit=50),
        ]

    def prefill(self, note: BaseNote) -> None:
        self.set("content", note.content)
        self.set("priority", note.metadata.priority or "")
        self.set("assignee", note.metadata.assignee or "")

    def build(self, values: dict[str, str]) -> BaseNote:
        priority = values["priority"].lower() or PRIORITY_LOW
        assignee = values["assignee"] or None

        if self.existing is not None:
            self.existing.content = values["content"]
            self.existing.metadata.priority = priority
            self.existing.metadata.assignee = assignee
            if not self.existing.metadata.status:
                self.existing.metadata.status = STATUS_TODO
            return self.existing
        return new_task(values["content"], priority, assignee)


class ContactForm(Form):
    kind = "contact"
    title = "New Contact"

    def make_fields(self) -> list[FormField]:
        return [
            FormField("content", "Name", "Enter contact name...", required=True, char_limit=100),
            FormField("phone", "Phone", "Enter phone number (optional)", char_limit=20, validator=phone_validator),
            FormField("email", "Email", "Enter email address (optional)", char_limit=100, validator=email_validator),
        ]

    def prefill(self, note: BaseNote) -> None:
        self.set("content", note.content)
        self.set("phone", note.metadata.phone or "")
        self.set("email", note.metadata.email or "")

    def build(self, values: dict[str, str]) -> BaseNote:
        phone = values["phone"] or None
        email = values["email"] or None

        if self.existing is not None:
            self.existing.content = values["content"]
            self.existing.metadata.phone = phone
            self.existing.metadata.email = email
            return self.existing
        return new_contact(values["content"], phone, email)


class ReminderForm(Form):
    kind = "reminder"
    title = "New Reminder"

    def make_fields(self) -> list[FormField]:
        return [
            FormField("content", "Description", "Enter reminder description...", required=True),
            FormField("reminder_time", "Time", DEFAULT_REMINDER_TIME, char_limit=5, validator=time_validator),
        ]

    def prefill(self, note: BaseNote) -> None:
        self.set("content", note.content)
        self.set("reminder_time", note.metadata.reminder_time or "")

    def build(self, values: dict[str, str]) -> BaseNote:
        reminder_time = values["reminder_time"] or DEFAULT_REMINDER_TIME

        if self.existing is not None:
            # Status is left as is when editing
            self.existing.content = values["content"]
            self.existing.metadata.reminder_time = reminder_time
            return self.existing
        return new_reminder(values["content"], reminder_time, STATUS_TODO)


FORMS: dict[str, type[Form]] = {
    "text": TextForm,
    "idea": IdeaForm,
    "task": TaskForm,
    "contact": ContactForm,
    "reminder": ReminderForm,
}


def form_for(note: BaseNote) -> Form:
    """Edit form matching a note's kind, pre-filled with its values."""
    return FORMS[note.type](note)
