"""
Text rendering for JotterXpress.

Everything here is a pure function of a note (or notes) and a Theme. The
Theme is built once from config by the CLI and passed down explicitly.
"""

import os
import sys
from dataclasses import dataclass
from typing import Any, TextIO

from jotter.models import BaseNote


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Foreground colors
    MAGENTA = "\033[35m"
    WHITE = "\033[37m"

    # Bright foreground colors
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_MAGENTA = "\033[95m"

    # Background
    BG_MAGENTA = "\033[45m"


ELLIPSIS = "..."
SEPARATOR = " • "


@dataclass(frozen=True)
class Theme:
    """Styling options for terminal output."""

    color: bool = True
    truncate: int = 20

    @classmethod
    def from_config(cls, config: dict[str, Any], stream: TextIO | None = None) -> "Theme":
        """
        Build a theme from the [display] config section.

        Color is off when NO_COLOR is set or the stream is not a terminal.
        """
        display = config.get("display", {})
        stream = stream or sys.stdout

        color = bool(display.get("color", True))
        if os.environ.get("NO_COLOR") or not stream.isatty():
            color = False

        return cls(color=color, truncate=int(display.get("truncate", 20)))

    def paint(self, text: str, *codes: str) -> str:
        """Apply color codes to text if colors are enabled."""
        if not self.color or not codes:
            return text
        return "".join(codes) + text + Colors.RESET

    def title(self, text: str) -> str:
        return self.paint(f" {text} ", Colors.BOLD, Colors.WHITE, Colors.BG_MAGENTA)

    def success(self, text: str) -> str:
        return self.paint(text, Colors.BOLD, Colors.BRIGHT_GREEN)

    def error(self, text: str) -> str:
        return self.paint(text, Colors.BOLD, Colors.BRIGHT_RED)

    def info(self, text: str) -> str:
        return self.paint(text, Colors.BOLD, Colors.BRIGHT_MAGENTA)

    def label(self, text: str) -> str:
        return self.paint(text, Colors.BOLD, Colors.MAGENTA)

    def dim(self, text: str) -> str:
        return self.paint(text, Colors.DIM)


def truncate(text: str, width: int) -> str:
    """Cut text to width characters, marking the cut with '...'."""
    if width > 0 and len(text) > width:
        return text[:width] + ELLIPSIS
    return text


def item_title(note: BaseNote, width: int = 20) -> str:
    """Main line of a list item: the note's content, on one line."""
    return truncate(" ".join(note.content.split()), width)


def item_description(note: BaseNote, width: int = 20) -> str:
    """Second line of a list item: creation time plus type-specific fields."""
    parts = [f"{note.created_at:%H:%M:%S}"]
    meta = note.metadata

    if note.type == "task":
        values = [meta.priority, meta.status, meta.assignee]
    elif note.type == "contact":
        values = [meta.phone, meta.email]
    elif note.type == "reminder":
        values = [meta.reminder_time, meta.status]
    else:
        values = []

    parts.extend(truncate(v, width) for v in values if v)
    return SEPARATOR.join(parts)


def preview_fields(note: BaseNote) -> list[tuple[str, str]]:
    """Label/value pairs shown when previewing a note."""
    fields = [
        ("Type", note.type),
        ("Content", note.content),
        ("Created", f"{note.created_at:%Y-%m-%d %H:%M:%S}"),
        ("Updated", f"{note.updated_at:%Y-%m-%d %H:%M:%S}"),
        ("Date", note.date),
    ]

    meta = note.metadata
    if note.type == "task":
        optional = [
            ("Priority", meta.priority),
            ("Status", meta.status),
            ("Assignee", meta.assignee),
            ("Due Date", meta.due_date and f"{meta.due_date:%Y-%m-%d}"),
        ]
    elif note.type == "contact":
        optional = [("Phone", meta.phone), ("Email", meta.email), ("Address", meta.address)]
    elif note.type == "reminder":
        optional = [("Time", meta.reminder_time), ("Status", meta.status)]
    else:
        optional = []

    if meta.tags:
        optional.append(("Tags", ", ".join(meta.tags)))
    if meta.category:
        optional.append(("Category", meta.category))

    fields.extend((label, value) for label, value in optional if value)
    return fields


def format_preview(note: BaseNote, theme: Theme) -> str:
    """Preview of a single note for text output."""
    lines = []
    for label, value in preview_fields(note):
        lines.append(f"{theme.label(label + ':')} {value}")
    return "\n".join(lines)


def format_text_list(title: str, listing: str, theme: Theme) -> str:
    """Non-interactive list output: a title bar followed by a listing."""
    return f"{theme.title(title)}\n\n{listing}"


def format_help(theme: Theme) -> str:
    """Help screen for jtx."""
    section = theme.label
    return f"""{theme.title("JotterXpress - Quick Note Taking CLI")}

{section("Usage:")}
  jtx "your note"               Quick note
  jtx --list                    List today's notes
  jtx --list-date YYYY-MM-DD    List notes for a specific date
  jtx --list-month MM           List notes for a month (YYYY-MM also accepted)

{section("Interactive Commands:")}
  jtx --note (-n)               Create note
  jtx --task (-t)               Create task
  jtx --reminder (-r)           Create reminder
  jtx --contact (-c)            Create contact
  jtx --interactive (-i)        Open interactive view

{section("Options:")}
  -h, --help                    Show this help
  -v, --version                 Show version

{section("Interactive Shortcuts:")}
  Enter  Preview note
  /      Filter notes (Esc clears)
  m      Options menu
  e      Edit note
  c      Complete (tasks/reminders)
  x      Delete note
  q      Quit

Only one command flag can be used at a time. Single words must be
quoted so they aren't mistaken for commands."""
