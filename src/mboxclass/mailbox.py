"""Streaming reader that splits concatenated mail archives into email bodies."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterator
from typing import BinaryIO

from .config import DEFAULT_ENCODING
from .types import MailSource

LOGGER = logging.getLogger(__name__)

# "From " envelope line of an mbox archive, e.g. "From alice@example.com Mon Jan 1".
SEPARATOR_PATTERN = re.compile(r"^From \S*@\S*\s+\S")


class MailboxError(OSError):
    """Raised when a mail source cannot be opened, read or closed."""


def is_separator(line: str) -> bool:
    """Return True if ``line`` is an mbox message separator."""

    return SEPARATOR_PATTERN.match(line) is not None


class MailboxReader:
    """Line-oriented cursor over one mail stream.

    Each call to :meth:`read_email` returns the next email body as text, or
    ``None`` once the stream is exhausted. A leading ``From `` separator and
    the header block after it are discarded. A blank line followed by another
    separator ends the current email; any other blank line is kept in the
    body. At most one line is held back between reads.

    The reader owns its handle (unless told otherwise) and closes it when the
    stream runs out or when the reader is used as a context manager and the
    block exits, whichever comes first.
    """

    def __init__(
        self,
        handle: BinaryIO,
        *,
        name: str = "<stream>",
        encoding: str = DEFAULT_ENCODING,
        owns_handle: bool = True,
    ) -> None:
        self.name = name
        self._handle = handle
        self._encoding = encoding
        self._owns_handle = owns_handle
        self._pushback: str | None = None
        self._eof = False
        self._finished = False
        self._closed = False

    def __enter__(self) -> MailboxReader:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        while True:
            email = self.read_email()
            if email is None:
                return
            yield email

    @property
    def closed(self) -> bool:
        return self._closed

    def read_email(self) -> str | None:
        """Return the next email body, or ``None`` at the end of the stream."""

        if self._finished:
            return None

        lines: list[str] = []
        pending_blank = False
        saw_separator = False
        started = False
        line = self._next_line()
        if line is not None and is_separator(line):
            saw_separator = True
            self._skip_header_block()
            line = self._next_line()

        while line is not None:
            started = True
            if pending_blank:
                if is_separator(line):
                    self._unread(line)
                    return "\n".join(lines)
                lines.append("")
                pending_blank = False
            if line:
                lines.append(line)
            else:
                pending_blank = True
            line = self._next_line()

        self._finished = True
        self.close()
        if saw_separator and not started:
            # Headers ran into end of stream: nothing left to yield.
            return None
        return "\n".join(lines)

    def close(self) -> None:
        """Release the underlying handle; safe to call more than once."""

        if self._closed:
            return
        self._closed = True
        self._finished = True
        self._pushback = None
        if not self._owns_handle:
            return
        try:
            self._handle.close()
        except OSError as exc:
            raise MailboxError(f"Cannot close {self.name}: {exc}") from exc

    def _skip_header_block(self) -> None:
        while True:
            line = self._next_line()
            if line is None or not line:
                return

    def _next_line(self) -> str | None:
        if self._pushback is not None:
            line, self._pushback = self._pushback, None
            return line
        if self._eof:
            return None
        try:
            raw = self._handle.readline()
        except OSError as exc:
            raise MailboxError(f"Cannot read {self.name}: {exc}") from exc
        if not raw:
            self._eof = True
            return None
        return raw.decode(self._encoding, errors="replace").rstrip("\r\n")

    def _unread(self, line: str) -> None:
        if self._pushback is not None:
            raise RuntimeError("MailboxReader can only push back a single line.")
        self._pushback = line


def check_source(source: MailSource) -> None:
    """Raise if a file-backed source is missing or not a regular file."""

    if source.path is None:
        return
    if not source.path.exists():
        raise MailboxError(f"Mail source does not exist: {source.path}")
    if not source.path.is_file():
        raise MailboxError(f"Mail source is not a regular file: {source.path}")


def open_mailbox(source: MailSource, *, encoding: str = DEFAULT_ENCODING) -> MailboxReader:
    """Open ``source`` and wrap it in a :class:`MailboxReader`.

    Standard input is read but never closed; files are owned by the reader.
    """

    if source.path is None:
        LOGGER.debug("Reading mail from standard input")
        return MailboxReader(
            sys.stdin.buffer,
            name=source.label,
            encoding=encoding,
            owns_handle=False,
        )

    check_source(source)
    try:
        handle = source.path.open("rb")
    except OSError as exc:
        raise MailboxError(f"Cannot open {source.path}: {exc}") from exc
    LOGGER.debug("Opened mail source %s", source.path)
    return MailboxReader(handle, name=source.label, encoding=encoding)


__all__ = [
    "SEPARATOR_PATTERN",
    "MailboxError",
    "MailboxReader",
    "check_source",
    "is_separator",
    "open_mailbox",
]
