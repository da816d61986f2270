from __future__ import annotations

import re
from typing import Any, Iterable, Iterator

from .errors import make_malformed_input
from .program import CELL_MAX

_DECIMAL = re.compile(r'\+?[0-9]+')

# returned by InputSource.next_value once the source is permanently exhausted
END_OF_INPUT = object()


def parse_cell_value(raw: Any) -> int:
    """
    Turn one raw input value into a cell value.

    Integers are taken as-is; text (or bytes) must be a plain decimal
    number with an optional leading '+'. The result must fit in a cell.

    Raises:
        MalformedInput: the value is not a number in [0, 255].
    """
    if isinstance(raw, bool):
        raise make_malformed_input(raw, 'expected a number, got a bool')
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, (str, bytes, bytearray)):
        if isinstance(raw, (bytes, bytearray)):
            try:
                text = bytes(raw).decode('ascii')
            except UnicodeDecodeError:
                raise make_malformed_input(raw, 'not ASCII text') from None
        else:
            text = raw
        text = text.strip()
        if not _DECIMAL.fullmatch(text):
            raise make_malformed_input(raw, 'not a decimal number')
        value = int(text)
    else:
        raise make_malformed_input(raw, f'unsupported input type {type(raw).__name__}')

    if not 0 <= value <= CELL_MAX:
        raise make_malformed_input(raw, f'number out of range 0..{CELL_MAX}')
    return value


class InputSource:
    """Produces one raw value per Input instruction."""

    def next_value(self) -> Any:
        """Return the next raw value, or END_OF_INPUT once the source is exhausted for good."""
        raise NotImplementedError


class NoInput(InputSource):
    def next_value(self) -> Any:
        return END_OF_INPUT


class IterableInput(InputSource):
    def __init__(self, values: Iterable[Any]):
        self._it: Iterator[Any] = iter(values)

    def next_value(self) -> Any:
        return next(self._it, END_OF_INPUT)


class StreamInput(InputSource):
    """One value per line of a text stream, e.g. ``sys.stdin``."""

    def __init__(self, stream):
        self.stream = stream

    def next_value(self) -> Any:
        if getattr(self.stream, "closed", False):
            return END_OF_INPUT
        try:
            line = self.stream.readline()
        except ValueError:
            # readline on a stream closed underneath us
            return END_OF_INPUT
        if not line:
            return END_OF_INPUT
        return line


def as_input_source(obj: Any) -> InputSource:
    if obj is None:
        return NoInput()
    if isinstance(obj, InputSource):
        return obj
    if hasattr(obj, 'readline'):
        return StreamInput(obj)
    if isinstance(obj, str):
        return IterableInput(obj.splitlines())
    if isinstance(obj, (bytes, bytearray)):
        return IterableInput(bytes(obj))
    return IterableInput(obj)
