import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

try:
    import termios
    import tty
except ImportError:  # pragma: no cover; Windows-specific
    # termios and tty are not available on Windows
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

from git_sweep import utils
from git_sweep.exceptions import TerminalException
from git_sweep.utils import debug

# Raw mode also turns off output post-processing, so a bare LF would not return the carriage.
LINE_END = '\r\n'


class Terminal:
    """Reads stdin one byte at a time and writes CRLF-terminated lines to stdout."""

    def _get_stdin_fd(self) -> int:
        # `None` when the process was started with stdin closed
        if sys.stdin is None:
            raise TerminalException("Standard input is closed")
        return sys.stdin.fileno()

    def _read_stdin_byte(self) -> bytes:  # pragma: no cover; always mocked in tests
        return os.read(self._get_stdin_fd(), 1)

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """
        Switch stdin to raw mode (no line buffering, no echo) for the duration of the block.
        The original settings are restored on every way out of the block,
        a failure to restore them is only reported in debug mode.
        """
        if termios is None or tty is None:
            raise TerminalException("Interactive mode is not supported on Windows yet")

        try:
            fd = self._get_stdin_fd()
            old_settings = termios.tcgetattr(fd)
        except (OSError, ValueError, termios.error) as e:
            raise TerminalException(f"Standard input is not a terminal: {e}", apply_fmt=False)

        try:
            try:
                tty.setraw(fd)
            except termios.error as e:
                raise TerminalException(f"Could not switch the terminal to raw mode: {e}", apply_fmt=False)
            utils.raw_terminal_mode = True
            yield
        finally:
            try:
                termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
            except termios.error as e:
                debug(f"could not restore terminal settings: {e}")
            utils.raw_terminal_mode = False

    def read_char(self) -> Optional[str]:
        """Block until a byte is available on stdin. Returns None at the end of input."""
        byte = self._read_stdin_byte()
        if not byte:
            return None
        return chr(byte[0])

    def write(self, s: str) -> None:
        sys.stdout.write(s)

    def write_line(self, s: str = '') -> None:
        sys.stdout.write(s + LINE_END)

    def flush(self) -> None:
        sys.stdout.flush()
