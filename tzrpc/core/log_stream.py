"""Incremental decoding of the members of a streamed JSON object.

GET /network/log answers with one JSON object that never ends on its own:
every log entry is a new member. ``ObjectMemberDecoder`` is fed the body as it
arrives and hands back each member value as soon as it is complete.
"""

import json
from typing import Any, Iterator

from tzrpc.exceptions import DecodeError

_WHITESPACE = " \t\r\n"
_SCALAR_END = _WHITESPACE + ",]}"

# Decoder states
_OPEN = "open"
_KEY = "key"
_COLON = "colon"
_VALUE = "value"
_SEPARATOR = "separator"
_DONE = "done"


class ObjectMemberDecoder:
    """Decodes ``{"k1": v1, "k2": v2, ...}`` one member at a time.

    Member names are discarded. Values are decoded with :mod:`json` once their
    closing character has arrived, so a value split across chunks is simply
    held back until the next :meth:`feed`.
    """

    def __init__(self):
        self._buffer = ""
        self._pos = 0
        self._state = _OPEN
        self._first = True

    @property
    def finished(self) -> bool:
        """True once the closing brace of the object was read."""
        return self._state == _DONE

    def feed(self, chunk: str) -> Iterator[Any]:
        """Add ``chunk`` to the buffer and iterate over the values it completed.

        Values are produced one by one, so those decoded before an invalid
        one are still delivered before :class:`DecodeError` is raised.
        """
        self._compact()
        self._buffer += chunk
        return self._drain(final=False)

    def close(self) -> Iterator[Any]:
        """Signal end of input and iterate over any value still pending.

        Raises :class:`DecodeError` if the object was never closed.
        """
        return self._finish()

    def _finish(self) -> Iterator[Any]:
        yield from self._drain(final=True)
        if not self.finished:
            raise DecodeError("unexpected end of network log")

    def _compact(self):
        if self._pos:
            self._buffer = self._buffer[self._pos:]
            self._pos = 0

    def _drain(self, final: bool) -> Iterator[Any]:
        while self._state != _DONE:
            if not self._skip_whitespace():
                break
            char = self._buffer[self._pos]

            if self._state == _OPEN:
                if char != "{":
                    raise DecodeError("expected object")
                self._pos += 1
                self._state = _KEY

            elif self._state == _KEY:
                if char == "}" and self._first:
                    self._pos += 1
                    self._state = _DONE
                    break
                if char != '"':
                    raise DecodeError(f"expected member name at {char!r}")
                end = self._scan_string(self._pos)
                if end is None:
                    break
                # Member names are not used, but they must still be valid JSON
                self._loads(self._buffer[self._pos:end])
                self._pos = end
                self._state = _COLON

            elif self._state == _COLON:
                if char != ":":
                    raise DecodeError(f"expected ':' at {char!r}")
                self._pos += 1
                self._state = _VALUE

            elif self._state == _VALUE:
                end = self._scan_value(self._pos, final)
                if end is None:
                    break
                value = self._loads(self._buffer[self._pos:end])
                self._pos = end
                self._first = False
                self._state = _SEPARATOR
                yield value

            elif self._state == _SEPARATOR:
                self._pos += 1
                if char == "}":
                    self._state = _DONE
                elif char == ",":
                    self._state = _KEY
                else:
                    raise DecodeError(f"expected ',' or '}}' at {char!r}")

    def _skip_whitespace(self) -> bool:
        """Move past whitespace; False when the buffer is exhausted."""
        while self._pos < len(self._buffer):
            if self._buffer[self._pos] not in _WHITESPACE:
                return True
            self._pos += 1
        return False

    def _scan_string(self, start: int):
        """Index just past the string starting at ``start``, or None if incomplete."""
        index = start + 1
        while index < len(self._buffer):
            char = self._buffer[index]
            if char == "\\":
                index += 2
                continue
            if char == '"':
                return index + 1
            index += 1
        return None

    def _scan_value(self, start: int, final: bool):
        """Index just past the value starting at ``start``, or None if incomplete."""
        char = self._buffer[start]
        if char == '"':
            return self._scan_string(start)

        if char in "{[":
            depth = 0
            index = start
            while index < len(self._buffer):
                char = self._buffer[index]
                if char == '"':
                    end = self._scan_string(index)
                    if end is None:
                        return None
                    index = end
                    continue
                if char in "{[":
                    depth += 1
                elif char in "}]":
                    depth -= 1
                    if depth == 0:
                        return index + 1
                index += 1
            return None

        # Numbers and literals have no closing character: wait for whatever follows
        index = start
        while index < len(self._buffer):
            if self._buffer[index] in _SCALAR_END:
                return index
            index += 1
        return index if final else None

    @staticmethod
    def _loads(text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"invalid log entry {text[:80]!r}: {e}") from e
