
from .api import RunOptions, RunResult, run_file, run_string
from .engine import Engine
from .errors import (
    BFVMError,
    CellOverflow,
    CellUnderflow,
    CursorOverflow,
    CursorUnderflow,
    ExecutionError,
    InputExhausted,
    MalformedInput,
    ParseError,
    UnmatchedCloseBracket,
    UnmatchedOpenBracket,
)
from .inputs import InputSource, IterableInput, NoInput, StreamInput, parse_cell_value
from .parser import filter_source, parse
from .program import TAPE_SIZE, Instruction, Op, Program
from .state import ExecutionState, Status

__all__ = [
    'Engine',
    'parse',
    'filter_source',
    'Program',
    'Instruction',
    'Op',
    'TAPE_SIZE',
    'ExecutionState',
    'Status',
    'InputSource',
    'IterableInput',
    'StreamInput',
    'NoInput',
    'parse_cell_value',
    'RunOptions',
    'RunResult',
    'run_string',
    'run_file',
    'BFVMError',
    'ParseError',
    'UnmatchedOpenBracket',
    'UnmatchedCloseBracket',
    'ExecutionError',
    'CellOverflow',
    'CellUnderflow',
    'CursorOverflow',
    'CursorUnderflow',
    'InputExhausted',
    'MalformedInput',
]
