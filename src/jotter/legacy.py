"""
Reader for the legacy plain-text note format.

Earlier releases appended one line per note to <date>.txt:

    [HH:MM:SS] content

These files are read once, converted to text notes and replaced by the
JSON bucket. Lines that don't match the format are skipped.
"""

import re
from datetime import datetime
from pathlib import Path

from jotter.dates import DATE_FORMAT
from jotter.models import TextNote

LINE_RE = re.compile(r"^\[(\d{2}:\d{2}:\d{2})\] (.*)$")


def parse_line(line: str, date: str) -> TextNote | None:
    """Parse one legacy line into a text note, or None if it is malformed."""
    line = line.strip()
    if not line:
        return None

    match = LINE_RE.match(line)
    if not match:
        return None

    time_str, content = match.groups()
    if not content.strip():
        return None
    try:
        created_at = datetime.strptime(f"{date} {time_str}", f"{DATE_FORMAT} %H:%M:%S")
    except ValueError:
        return None

    created_at = created_at.astimezone()
    return TextNote(
        id=f"{date}-{time_str}",
        content=content,
        created_at=created_at,
        updated_at=created_at,
        date=date,
    )


def read_legacy_file(path: Path, date: str) -> list[TextNote]:
    """
    Read every well-formed note from a legacy text file.

    Lines stamped with the same second get -2, -3, ... appended to their
    ids so every id stays unique within the day.
    """
    notes = []
    seen: dict[str, int] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            note = parse_line(line, date)
            if note is None:
                continue
            count = seen.get(note.id, 0) + 1
            seen[note.id] = count
            if count > 1:
                note.id = f"{note.id}-{count}"
            notes.append(note)
    return notes
