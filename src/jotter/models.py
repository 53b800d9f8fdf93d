"""
Note records for JotterXpress.

A note is one of five kinds (text, task, contact, idea, reminder). The
`type` field is the discriminator: each kind carries only the metadata
fields that make sense for it, plus the general tags/category.
"""

import time
from datetime import date as date_type
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, TypeAdapter, model_validator

from jotter.dates import DATE_FORMAT

NOTE_TYPES = ("text", "task", "contact", "idea", "reminder")

PRIORITY_LOW = "low"
PRIORITY_HIGH = "high"
PRIORITIES = (PRIORITY_LOW, PRIORITY_HIGH)

STATUS_TODO = "to-do"
STATUS_COMPLETED = "completed"

# Spellings written by earlier releases; all mean "not done yet"
LEGACY_TODO_STATUSES = ("por_hacer", "pending", "todo")

DEFAULT_REMINDER_TIME = "09:00"

# Time-only timestamps written by older migrations
UNDATED_PREFIX = "0000-"
MIN_DAY = "0001-01-01"

_last_id = 0


def generate_id() -> str:
    """Generate a note ID from a nanosecond timestamp, strictly increasing."""
    global _last_id
    candidate = time.time_ns()
    if candidate <= _last_id:
        candidate = _last_id + 1
    _last_id = candidate
    return str(candidate)


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


def today() -> str:
    """Today's bucket key (YYYY-MM-DD)."""
    return date_type.today().strftime(DATE_FORMAT)


def normalize_status(value: Any) -> Any:
    """Map legacy to-do spellings onto STATUS_TODO; blank means unset."""
    if isinstance(value, str):
        value = value.strip().lower()
        if not value:
            return None
        if value in LEGACY_TODO_STATUSES:
            return STATUS_TODO
    return value


Status = Annotated[str | None, BeforeValidator(normalize_status)]


def _aware(value: datetime) -> datetime:
    # Naive timestamps are taken as local time
    return value if value.tzinfo else value.astimezone()


Timestamp = Annotated[datetime, AfterValidator(_aware)]


class NoteMetadata(BaseModel):
    """General-purpose metadata shared by every kind of note."""

    tags: list[str] | None = None
    category: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _blank_is_unset(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: (None if v == "" else v) for k, v in data.items()}
        return data


class TaskMetadata(NoteMetadata):
    priority: str | None = None
    status: Status = None
    due_date: datetime | None = None
    assignee: str | None = None
    estimated_hours: int | None = None


class ContactMetadata(NoteMetadata):
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class ReminderMetadata(NoteMetadata):
    reminder_time: str | None = None
    status: Status = None


class BaseNote(BaseModel):
    """Fields common to every note. Use the per-kind subclasses."""

    id: str = Field(default_factory=generate_id)
    type: str
    content: str
    created_at: Timestamp = Field(default_factory=now)
    updated_at: Timestamp = Field(default_factory=now)
    date: str = Field(default_factory=today, description="Bucket key, YYYY-MM-DD")
    metadata: NoteMetadata = Field(default_factory=NoteMetadata)

    @model_validator(mode="before")
    @classmethod
    def _date_undated_timestamps(cls, data: Any) -> Any:
        """
        Place year-0 timestamps on the note's own day.

        Older migrations stored only a time of day, serialized as
        0000-01-01T<time>. Year 0 is outside datetime's range.
        """
        if not isinstance(data, dict):
            return data

        day = data.get("date") if isinstance(data.get("date"), str) else None
        fixed = {}
        for key in ("created_at", "updated_at"):
            value = data.get(key)
            if isinstance(value, str) and value.startswith(UNDATED_PREFIX):
                fixed[key] = f"{day or MIN_DAY}{value[len(MIN_DAY):]}"

        return {**data, **fixed} if fixed else data

    def touch(self) -> None:
        """Refresh updated_at."""
        self.updated_at = now()

    def is_pending_reminder(self) -> bool:
        return False

    def is_completable(self) -> bool:
        """Whether the note has a status that can be set to completed."""
        return False

    def summary(self) -> str:
        """One-line representation used by plain listings."""
        return f"[{self.created_at:%H:%M:%S}] {self.content}"

    def to_json(self) -> str:
        """Pretty-printed JSON for this note (two-space indent)."""
        return self.model_dump_json(indent=2, exclude_none=True)


class TextNote(BaseNote):
    type: Literal["text"] = "text"


class IdeaNote(BaseNote):
    type: Literal["idea"] = "idea"


class TaskNote(BaseNote):
    type: Literal["task"] = "task"
    metadata: TaskMetadata = Field(default_factory=TaskMetadata)

    def is_completable(self) -> bool:
        return True

    def summary(self) -> str:
        meta = self.metadata
        return f"{super().summary()} [{meta.priority or ''}, {meta.status or ''}]"


class ContactNote(BaseNote):
    type: Literal["contact"] = "contact"
    metadata: ContactMetadata = Field(default_factory=ContactMetadata)

    def summary(self) -> str:
        base = super().summary()
        if self.metadata.phone:
            return f"{base} [{self.metadata.phone}]"
        if self.metadata.email:
            return f"{base} [{self.metadata.email}]"
        return base


class ReminderNote(BaseNote):
    type: Literal["reminder"] = "reminder"
    metadata: ReminderMetadata = Field(default_factory=ReminderMetadata)

    def is_pending_reminder(self) -> bool:
        return self.metadata.status in (None, STATUS_TODO)

    def is_completable(self) -> bool:
        return True

    def summary(self) -> str:
        time_str = self.metadata.reminder_time or DEFAULT_REMINDER_TIME
        return f"{super().summary()} [{time_str}, {self.metadata.status or ''}]"


Note = Annotated[
    Union[TextNote, TaskNote, ContactNote, IdeaNote, ReminderNote],
    Field(discriminator="type"),
]

NOTE_ADAPTER: TypeAdapter = TypeAdapter(Note)
BUCKET_ADAPTER: TypeAdapter = TypeAdapter(list[Note])


def load_note(data: dict[str, Any]) -> BaseNote:
    """Build the right note subclass from a decoded JSON object."""
    return NOTE_ADAPTER.validate_python(data)


def load_bucket(raw: str | bytes) -> list[BaseNote]:
    """Decode a bucket file's contents (a JSON array of notes)."""
    return BUCKET_ADAPTER.validate_json(raw)


def dump_bucket(notes: list[BaseNote]) -> bytes:
    """Encode a bucket as a pretty-printed JSON array."""
    return BUCKET_ADAPTER.dump_json(notes, indent=2, exclude_none=True) + b"\n"


def _stamp(on: date_type | None = None) -> dict[str, Any]:
    moment = now()
    day = on or moment.date()
    return {
        "created_at": moment,
        "updated_at": moment,
        "date": day.strftime(DATE_FORMAT),
    }


def new_note(content: str, on: date_type | None = None) -> TextNote:
    """Create a text note for today, or for the given day."""
    return TextNote(content=content, **_stamp(on))


def new_idea(content: str) -> IdeaNote:
    return IdeaNote(content=content, **_stamp())


def new_task(
    content: str,
    priority: str = PRIORITY_LOW,
    assignee: str | None = None,
) -> TaskNote:
    """Create a task, always starting in the to-do state."""
    return TaskNote(
        content=content,
        metadata=TaskMetadata(priority=priority, status=STATUS_TODO, assignee=assignee),
        **_stamp(),
    )


def new_contact(
    content: str,
    phone: str | None = None,
    email: str | None = None,
    address: str | None = None,
) -> ContactNote:
    return ContactNote(
        content=content,
        metadata=ContactMetadata(phone=phone, email=email, address=address),
        **_stamp(),
    )


def new_reminder(
    content: str,
    reminder_time: str = DEFAULT_REMINDER_TIME,
    status: str = STATUS_TODO,
) -> ReminderNote:
    return ReminderNote(
        content=content,
        metadata=ReminderMetadata(reminder_time=reminder_time, status=status),
        **_stamp(),
    )
