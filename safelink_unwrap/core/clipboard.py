"""Clipboard access."""

import logging

import pyperclip

from ..exceptions import ClipboardAccessError, ClipboardEmptyError

logger = logging.getLogger(__name__)


class ClipboardManager:
    """Reads and writes the system clipboard as plain text.

    Distinguishes an empty clipboard, which is expected whenever the user
    copies an image or nothing at all, from real access failures.
    """

    def __init__(self, paste=None, copy=None):
        self._paste = paste or pyperclip.paste
        self._copy = copy or pyperclip.copy

    def read(self):
        """Return the clipboard text.

        Raises:
            ClipboardEmptyError: The clipboard holds no text.
            ClipboardAccessError: The clipboard could not be read.
        """
        try:
            content = self._paste()
        except (pyperclip.PyperclipException, OSError, UnicodeError) as e:
            raise ClipboardAccessError("Failed to read clipboard", e) from e

        if content is None or content == "":
            raise ClipboardEmptyError("Clipboard holds no text")
        if not isinstance(content, str):
            raise ClipboardAccessError(f"Clipboard returned {type(content).__name__}, expected text")
        return content

    def write(self, text):
        """Replace the clipboard text.

        Raises:
            ClipboardAccessError: The clipboard could not be written.
        """
        try:
            self._copy(text)
        except (pyperclip.PyperclipException, OSError, UnicodeError) as e:
            raise ClipboardAccessError("Failed to write clipboard", e) from e
        logger.debug(f"Wrote {len(text)} characters to clipboard")
