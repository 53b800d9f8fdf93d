"""
CLI for JotterXpress.

Minimal CLI using stdlib argument handling for fast startup on the
capture path. Everything past argument parsing is imported lazily.

Usage:
    jtx "your note here"            # Capture (primary interface)
    jtx --list                      # Today's notes
    jtx --task                      # Create a task interactively
    jtx --help                      # Show help
"""

import sys

# Flags that pick what jtx does; at most one per invocation
SELECTORS = {
    "-l": "list",
    "--list": "list",
    "--list-date": "list-date",
    "--list-month": "list-month",
    "-n": "text",
    "--note": "text",
    "-t": "task",
    "--task": "task",
    "-c": "contact",
    "--contact": "contact",
    "-r": "reminder",
    "--reminder": "reminder",
    "-i": "interactive",
    "--interactive": "interactive",
}

# Selectors that take a value
VALUE_SELECTORS = ("list-date", "list-month")

EMPTY_HINT = 'Start taking notes with: jtx "your note content"'


class Context:
    """Config, theme and service shared by the commands of one run."""

    def __init__(self):
        from jotter.config import get_notes_dir, load_config, setup_logging
        from jotter.render import Theme
        from jotter.service import NoteService
        from jotter.store import NoteStore

        self.config = load_config()
        setup_logging(self.config)
        self.theme = Theme.from_config(self.config)
        self.service = NoteService(NoteStore(get_notes_dir(self.config)))

    def error(self, message: str) -> None:
        print(self.theme.error(f"Error: {message}"), file=sys.stderr)


def print_help() -> None:
    """Print help message."""
    from jotter.config import load_config
    from jotter.render import Theme, format_help

    print(format_help(Theme.from_config(load_config())))


def print_version() -> None:
    """Print version."""
    from jotter import __version__
    print(f"jtx {__version__}")


def is_tty() -> bool:
    return sys.stdout.isatty()


def has_terminal() -> bool:
    """Forms need both ends of the terminal."""
    return is_tty() and sys.stdin.isatty()


def capture(ctx: Context, text: str) -> int:
    """Save text as a note for today."""
    ctx.service.create_note(text)
    print(ctx.theme.success("Note saved successfully!"))
    return 0


def show_notes(ctx: Context, notes: list, title: str, empty: str) -> int:
    """
    Show notes in the browser, or as text when not on a terminal.

    Falls back to text if curses cannot start.
    """
    if not notes:
        print(ctx.theme.info(empty))
        return 0

    if is_tty():
        import curses

        from jotter.browser import Browser
        from jotter.tui import browse

        try:
            browse(Browser(notes, title, ctx.service), ctx.theme)
            return 0
        except curses.error as e:
            import logging
            logging.getLogger(__name__).warning("Interactive view failed: %s", e)

    from jotter.render import format_text_list

    print(format_text_list(title, ctx.service.list_notes(notes), ctx.theme))
    return 0


def cmd_list_today(ctx: Context) -> int:
    notes = ctx.service.today_notes()
    return show_notes(ctx, notes, "Today's Notes", f"No notes found for today.\n{EMPTY_HINT}")


def cmd_list_date(ctx: Context, day: str) -> int:
    notes = ctx.service.notes_by_date(day)
    return show_notes(ctx, notes, f"Notes for {day}", f"No notes found for {day}.")


def resolve_month(value: str) -> str:
    """Turn MM into YYYY-MM for the current year; YYYY-MM passes through."""
    from datetime import date

    value = value.strip()
    if len(value) <= 2 and value.isdigit():
        return f"{date.today().year}-{int(value):02d}"
    return value


def cmd_list_month(ctx: Context, value: str) -> int:
    year_month = resolve_month(value)
    notes = ctx.service.notes_by_month(year_month)
    return show_notes(ctx, notes, f"Notes for {year_month}", f"No notes found for {year_month}.")


def cmd_interactive(ctx: Context) -> int:
    notes = ctx.service.today_notes()
    return show_notes(
        ctx, notes, "JotterXpress - Interactive Notes", f"No notes found for today.\n{EMPTY_HINT}"
    )


def cmd_create(ctx: Context, kind: str) -> int:
    """Create a note of the given kind through its form."""
    if not has_terminal():
        ctx.error("Interactive mode requires a TTY environment")
        return 1

    import curses

    from jotter.forms import FORMS
    from jotter.tui import fill_form

    form = FORMS[kind]()
    label = form.title.replace("New ", "")

    try:
        note = fill_form(form, ctx.theme)
    except curses.error as e:
        ctx.error(f"could not start interactive form: {e}")
        return 1

    if note is None:
        print(ctx.theme.info(f"{label} creation was cancelled"))
        return 0

    ctx.service.save_note(note)
    print(ctx.theme.success(f"{label} created successfully!"))
    return 0


def parse_args(args: list[str]) -> tuple[list[tuple[str, str | None]], list[str]]:
    """
    Split args into selectors (with their values) and free words.

    Raises ValueError for unknown options or a missing value.
    """
    selected: list[tuple[str, str | None]] = []
    words: list[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in SELECTORS:
            name = SELECTORS[arg]
            if name in VALUE_SELECTORS:
                if i + 1 >= len(args):
                    raise ValueError(f"{arg} requires a value")
                selected.append((name, args[i + 1]))
                i += 2
                continue
            selected.append((name, None))
        elif arg.startswith("--") and "=" in arg and arg.split("=", 1)[0] in SELECTORS:
            flag, value = arg.split("=", 1)
            selected.append((SELECTORS[flag], value))
        elif arg.startswith("-") and " " not in arg and len(arg) > 1:
            raise ValueError(f"unknown option {arg}")
        else:
            words.append(arg)
        i += 1

    return selected, words


def dispatch(ctx: Context, name: str, value: str | None) -> int:
    if name == "list":
        return cmd_list_today(ctx)
    if name == "list-date":
        return cmd_list_date(ctx, value or "")
    if name == "list-month":
        return cmd_list_month(ctx, value or "")
    if name == "interactive":
        return cmd_interactive(ctx)
    return cmd_create(ctx, name)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns the process exit code.
    """
    args = sys.argv[1:] if argv is None else argv

    # No args - check for piped input
    if not args:
        if not sys.stdin.isatty():
            text = sys.stdin.read().strip()
            if text:
                return run(capture, text)
        print_help()
        return 0

    if args[0] in ("--help", "-h"):
        print_help()
        return 0

    if args[0] in ("--version", "-v"):
        print_version()
        return 0

    try:
        selected, words = parse_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if len(selected) > 1:
        print("Error: Only one command flag can be used at a time", file=sys.stderr)
        return 1

    if selected:
        if words:
            print(f"Error: unexpected argument '{words[0]}'", file=sys.stderr)
            return 1
        name, value = selected[0]
        return run(dispatch, name, value)

    # A lone word is more likely a mistyped command than a note
    if len(words) == 1 and " " not in words[0].strip():
        print(f"Error: '{words[0]}' is not a valid command", file=sys.stderr)
        print('Use quotes for note content: jtx "your note content"', file=sys.stderr)
        print("Or use flags: jtx -l (list), jtx -n (note), jtx -t (task), jtx -r (reminder), etc.",
              file=sys.stderr)
        return 1

    return run(capture, " ".join(words))


def run(command, *args) -> int:
    """Build the context and run a command, reporting JotterError as exit 1."""
    from jotter.errors import JotterError

    ctx = Context()
    try:
        return command(ctx, *args)
    except JotterError as e:
        ctx.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
