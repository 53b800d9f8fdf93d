"""
Curses front-end for JotterXpress.

Draws the Browser state machine and runs forms. All decisions live in
jotter.browser and jotter.forms; this module only paints the screen and
turns key codes into key names.
"""

import curses
import os
import textwrap

from jotter.browser import Browser, State
from jotter.forms import Form, FormError
from jotter.models import BaseNote
from jotter.render import Theme, item_description, item_title, preview_fields

# Color pair ids
TITLE, ACCENT, MUTED, STATUS = 1, 2, 3, 4

KEY_NAMES = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_BTAB: "shift+tab",
    curses.KEY_RESIZE: "resize",
}

CHAR_NAMES = {
    "\n": "enter",
    "\r": "enter",
    "\t": "tab",
    "\x1b": "esc",
    "\x03": "ctrl+c",
    "\x04": "ctrl+d",
    "\x13": "ctrl+s",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def key_name(key: int | str) -> str:
    """Name of a key returned by get_wch()."""
    if isinstance(key, int):
        return KEY_NAMES.get(key, "")
    return CHAR_NAMES.get(key, key)


class EditBuffer:
    """Editable text with a cursor, used for form fields."""

    def __init__(self, text: str = "", multiline: bool = False, limit: int = 200):
        self.text = text
        self.multiline = multiline
        self.limit = limit
        self.cursor = len(text)

    def insert(self, ch: str) -> None:
        if ch == "\n" and not self.multiline:
            return
        if len(self.text) >= self.limit:
            return
        self.text = self.text[: self.cursor] + ch + self.text[self.cursor:]
        self.cursor += 1

    def backspace(self) -> None:
        if self.cursor > 0:
            self.text = self.text[: self.cursor - 1] + self.text[self.cursor:]
            self.cursor -= 1

    def delete(self) -> None:
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1:]

    def left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def home(self) -> None:
        self.cursor = self.text.rfind("\n", 0, self.cursor) + 1

    def end(self) -> None:
        nl = self.text.find("\n", self.cursor)
        self.cursor = len(self.text) if nl == -1 else nl

    def position(self) -> tuple[int, int]:
        """(row, column) of the cursor."""
        before = self.text[: self.cursor]
        row = before.count("\n")
        return row, len(before) - (before.rfind("\n") + 1)

    def vertical(self, delta: int) -> None:
        """Move the cursor to the same column on the line above/below."""
        lines = self.text.split("\n")
        row, col = self.position()
        target = row + delta
        if not 0 <= target < len(lines):
            return
        self.cursor = sum(len(line) + 1 for line in lines[:target]) + min(col, len(lines[target]))


def _init_colors(theme: Theme) -> None:
    if not theme.color or not curses.has_colors():
        return
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(TITLE, curses.COLOR_WHITE, curses.COLOR_GREEN)
    curses.init_pair(ACCENT, curses.COLOR_MAGENTA, -1)
    curses.init_pair(MUTED, curses.COLOR_BLACK + 8 if curses.COLORS > 8 else curses.COLOR_WHITE, -1)
    curses.init_pair(STATUS, curses.COLOR_GREEN, -1)


def _attr(theme: Theme, pair: int, fallback: int = curses.A_NORMAL) -> int:
    if theme.color and curses.has_colors():
        return curses.color_pair(pair)
    return fallback


def _put(win, y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> None:
    """addstr clipped to the window; never writes the bottom-right cell."""
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x >= width:
        return
    text = text[: max(0, width - x - (1 if y == height - 1 else 0))]
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        pass


def _set_cursor(visible: int) -> None:
    try:
        curses.curs_set(visible)
    except curses.error:
        pass


def _draw_header(win, title: str, theme: Theme) -> int:
    width = win.getmaxyx()[1]
    _put(win, 0, 0, title.center(width), _attr(theme, TITLE, curses.A_REVERSE) | curses.A_BOLD)
    return 2


def draw_list(win, browser: Browser, theme: Theme) -> None:
    height, width = win.getmaxyx()
    top = _draw_header(win, browser.title, theme)

    if browser.state is State.FILTER or browser.query:
        cursor = "_" if browser.state is State.FILTER else ""
        _put(win, top, 2, f"Filter: {browser.query}{cursor}", _attr(theme, ACCENT, curses.A_BOLD))
        top += 2

    rows = max(1, (height - top - 2) // 3)
    first = max(0, browser.index - rows + 1)

    if not browser.notes:
        empty = "No matching notes." if browser.query else "No notes left."
        _put(win, top, 2, empty, _attr(theme, MUTED, curses.A_DIM))

    for offset, note in enumerate(browser.notes[first:first + rows]):
        i = first + offset
        y = top + offset * 3
        selected = i == browser.index
        marker = "│ " if selected else "  "
        title_attr = (_attr(theme, ACCENT) | curses.A_BOLD) if selected else curses.A_NORMAL
        _put(win, y, 1, marker + item_title(note, theme.truncate), title_attr)
        _put(win, y + 1, 1, marker + item_description(note, theme.truncate), _attr(theme, MUTED, curses.A_DIM))

    if browser.state is State.FILTER:
        footer = "type to filter • enter keep • esc clear"
    else:
        footer = "↑/↓ move • enter preview • / filter • m menu • e edit • c complete • x delete • q quit"
    _put(win, height - 2, 1, browser.message, _attr(theme, STATUS, curses.A_BOLD))
    _put(win, height - 1, 1, footer, _attr(theme, MUTED, curses.A_DIM))


def draw_preview(win, browser: Browser, theme: Theme) -> None:
    height, width = win.getmaxyx()
    y = _draw_header(win, "Preview", theme)
    wrap = max(10, width - 16)

    for label, value in preview_fields(browser.selected):
        lines = []
        for part in str(value).split("\n"):
            lines.extend(textwrap.wrap(part, wrap) or [""])
        _put(win, y, 2, f"{label}:", _attr(theme, ACCENT, curses.A_BOLD) | curses.A_BOLD)
        for line in lines:
            _put(win, y, 14, line)
            y += 1

    _put(win, height - 1, 1, "Press Esc or Q to close", _attr(theme, MUTED, curses.A_DIM))


def draw_menu(win, browser: Browser, theme: Theme) -> None:
    height = win.getmaxyx()[0]
    y = _draw_header(win, f"Options for: {browser.selected.content}", theme)
    for option in browser.menu_options():
        _put(win, y, 4, option)
        y += 1
    _put(win, height - 1, 1, "Press Esc to cancel", _attr(theme, MUTED, curses.A_DIM))


def draw_browser(win, browser: Browser, theme: Theme) -> None:
    win.erase()
    if browser.state is State.PREVIEW and browser.selected is not None:
        draw_preview(win, browser, theme)
    elif browser.state is State.MENU and browser.selected is not None:
        draw_menu(win, browser, theme)
    else:
        draw_list(win, browser, theme)
    win.refresh()


def _draw_form(win, form: Form, buffers: list[EditBuffer], focus: int, errors: list[str], theme: Theme):
    """Paint the form; returns the screen position for the cursor."""
    win.erase()
    height, width = win.getmaxyx()
    y = _draw_header(win, form.title, theme)
    cursor_at = (y, 2)

    for i, (field, buf) in enumerate(zip(form.fields, buffers)):
        focused = i == focus
        label_attr = (_attr(theme, ACCENT) | curses.A_BOLD) if focused else curses.A_BOLD
        _put(win, y, 2, f"{field.label}:", label_attr)
        y += 1

        lines = buf.text.split("\n") if buf.text else [""]
        if not buf.text:
            _put(win, y, 4, field.placeholder, _attr(theme, MUTED, curses.A_DIM))
        for line in lines:
            _put(win, y, 4, line)
            y += 1

        if focused:
            row, col = buf.position()
            cursor_at = (y - len(lines) + row, 4 + col)
        y += 1

    for message in errors:
        _put(win, y, 2, f"✗ {message}", curses.A_BOLD)
        y += 1

    if form.fields[0].multiline:
        footer = "ctrl+s save • esc cancel"
    else:
        footer = "enter next • tab/↑↓ move • ctrl+s save • esc cancel"
    _put(win, height - 1, 1, footer, _attr(theme, MUTED, curses.A_DIM))
    win.refresh()
    return cursor_at


def run_form(win, form: Form, theme: Theme | None = None) -> BaseNote | None:
    """
    Let the user fill a form.

    Returns the submitted note, or None when cancelled with Esc.
    """
    theme = theme or Theme()
    buffers = [EditBuffer(f.value, f.multiline, f.char_limit) for f in form.fields]
    focus = 0
    errors: list[str] = []
    _set_cursor(1)

    while True:
        y, x = _draw_form(win, form, buffers, focus, errors, theme)
        try:
            win.move(y, x)
        except curses.error:
            pass

        try:
            key = win.get_wch()
        except KeyboardInterrupt:
            key = "\x1b"

        name = key_name(key)
        buf = buffers[focus]
        last = focus == len(buffers) - 1

        if name == "esc":
            return None

        if name == "ctrl+s" or (name == "ctrl+d" and buf.multiline) or (name == "enter" and last and not buf.multiline):
            for field, b in zip(form.fields, buffers):
                field.value = b.text
            try:
                return form.submit()
            except FormError as e:
                errors = e.errors
            continue

        if name == "enter" and buf.multiline:
            buf.insert("\n")
        elif name in ("enter", "tab") or (name == "down" and not buf.multiline):
            focus = (focus + 1) % len(buffers)
        elif name == "shift+tab" or (name == "up" and not buf.multiline):
            focus = (focus - 1) % len(buffers)
        elif name == "up":
            buf.vertical(-1)
        elif name == "down":
            buf.vertical(1)
        elif name == "backspace":
            buf.backspace()
        elif name == "delete":
            buf.delete()
        elif name == "left":
            buf.left()
        elif name == "right":
            buf.right()
        elif name == "home":
            buf.home()
        elif name == "end":
            buf.end()
        elif isinstance(key, str) and key.isprintable():
            buf.insert(key)


def run_browser(win, browser: Browser, theme: Theme) -> None:
    """Event loop: draw, read one key, hand it to the browser."""
    _init_colors(theme)
    _set_cursor(0)

    while browser.running:
        if browser.state is State.EDITING and browser.form is not None:
            note = run_form(win, browser.form, theme)
            _set_cursor(0)
            browser.finish_edit(note)
            continue

        draw_browser(win, browser, theme)
        try:
            key = win.get_wch()
        except KeyboardInterrupt:
            key = "\x03"
        browser.handle_key(key_name(key))


def _prepare() -> None:
    # Esc should close views without the default one second delay
    os.environ.setdefault("ESCDELAY", "25")


def browse(browser: Browser, theme: Theme) -> None:
    """Run the interactive browser full screen."""
    _prepare()
    curses.wrapper(run_browser, browser, theme)


def fill_form(form: Form, theme: Theme) -> BaseNote | None:
    """Run one form full screen; None if cancelled."""
    _prepare()

    def _run(win):
        _init_colors(theme)
        return run_form(win, form, theme)

    return curses.wrapper(_run)
