"""Copy converted notes to the system clipboard."""

import pyperclip

from .logging import debug


class ClipboardUnavailable(Exception):
    """No clipboard mechanism is available on this system."""


def copy_to_clipboard(text: str) -> None:
    """Copy text to the clipboard.

    Raises:
        ClipboardUnavailable: If pyperclip finds no clipboard backend
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardUnavailable(str(e)) from e
    debug(f"Copied {len(text)} characters to clipboard")
