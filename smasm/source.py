"""
Character sources for the tokenizer.

The tokenizer only ever needs three things from its input: the current
character (or None at end of stream), a way to step past it, and the
Position of the current character. CharSource implements the position
bookkeeping once; subclasses only say how to fetch the next character.

    StringSource — in-memory text (tests, editor buffers, stdin slurps)
    FileSource   — a text stream read one character at a time
"""

from __future__ import annotations
import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO, Union

from .position import Position, UNKNOWN_FILE

__all__ = ['CharSource', 'StringSource', 'FileSource']


class CharSource(ABC):
    """Peek/advance cursor over a character stream with line/column tracking."""

    def __init__(self, filename: str = UNKNOWN_FILE):
        self._pos = Position(filename).advance(1)
        self._ch: Optional[str] = None
        self._exhausted = False

    def _prime(self):
        """Load the first character. Subclasses call this once they are ready."""
        self._ch = self._read_char()
        self._exhausted = self._ch is None

    @abstractmethod
    def _read_char(self) -> Optional[str]:
        """Return the next raw character, or None when the input is used up."""

    @property
    def position(self) -> Position:
        return self._pos

    @property
    def filename(self) -> str:
        return self._pos.filename

    def peek(self) -> Optional[str]:
        return self._ch

    def advance(self):
        if self._exhausted:
            return
        if self._ch == "\n":
            self._pos = self._pos.next_line()
        else:
            self._pos = self._pos.advance(1)
        self._ch = self._read_char()
        if self._ch is None:
            self._exhausted = True


class StringSource(CharSource):
    def __init__(self, text: str, filename: str = UNKNOWN_FILE):
        super().__init__(filename)
        self._text = text
        self._index = 0
        self._prime()

    def _read_char(self) -> Optional[str]:
        if self._index >= len(self._text):
            return None
        ch = self._text[self._index]
        self._index += 1
        return ch


class FileSource(CharSource):
    """Reads from an open text stream.

    The stream is not closed unless the source was created with open(),
    in which case use it as a context manager.
    """

    def __init__(self, stream: TextIO, filename: Optional[str] = None,
                 *, owns_stream: bool = False):
        if filename is None:
            filename = getattr(stream, "name", None) or UNKNOWN_FILE
        super().__init__(str(filename))
        self._stream = stream
        self._owns_stream = owns_stream
        self._prime()

    @classmethod
    def open(cls, path: Union[str, Path], encoding: str = "utf-8") -> FileSource:
        # newline="" keeps "\r" so it is skipped as whitespace, not translated
        stream = io.open(path, "r", encoding=encoding, newline="")
        try:
            return cls(stream, str(path), owns_stream=True)
        except BaseException:
            stream.close()
            raise

    def _read_char(self) -> Optional[str]:
        ch = self._stream.read(1)
        return ch if ch else None

    def close(self):
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> FileSource:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
