from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from .engine import Engine
from .errors import MalformedInput
from .parser import parse
from .program import TAPE_SIZE, Program
from .state import ExecutionState, Status


@dataclass(frozen=True)
class RunOptions:
    tape_size: int = TAPE_SIZE


@dataclass(frozen=True)
class RunResult:
    output: bytes
    state: ExecutionState
    program: Program

    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def steps(self) -> int:
        return self.state.steps

    def text(self, encoding: str = "latin-1") -> str:
        return self.output.decode(encoding, errors="replace")


def run_string(source: str, *, inputs: Any = None, options: Optional[RunOptions] = None, output=None,
               on_malformed_input: Optional[Callable[[MalformedInput], None]] = None) -> RunResult:
    """Parse ``source`` and run it on a fresh tape.

    ``RunResult.output`` holds the emitted bytes unless an ``output`` sink
    was supplied, in which case the bytes went there and it is empty.
    """
    tape_size = TAPE_SIZE if options is None else options.tape_size
    program = parse(source)
    engine = Engine(
        program,
        tape_size=tape_size,
        input_source=inputs,
        output=output,
        on_malformed_input=on_malformed_input,
    )
    state = engine.run()
    emitted = bytes(engine.output) if output is None else b""
    return RunResult(output=emitted, state=state, program=program)


def run_file(path: str | Path, *, inputs: Any = None, options: Optional[RunOptions] = None, output=None,
             on_malformed_input: Optional[Callable[[MalformedInput], None]] = None,
             encoding: str = "utf-8") -> RunResult:
    p = Path(path)
    return run_string(
        p.read_text(encoding=encoding, errors="replace"),
        inputs=inputs,
        options=options,
        output=output,
        on_malformed_input=on_malformed_input,
    )
