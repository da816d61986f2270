from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .errors import (
    CellOverflow,
    CellUnderflow,
    CursorOverflow,
    CursorUnderflow,
    ExecutionError,
    InputExhausted,
    MalformedInput,
    make_execution_error,
)
from .inputs import END_OF_INPUT, as_input_source, parse_cell_value
from .program import CELL_MAX, TAPE_SIZE, Op, Program
from .state import ExecutionState, Status

logger = logging.getLogger(__name__)


def _log_malformed(error: MalformedInput) -> None:
    logger.warning("%s; requesting another value", error)


class Engine:
    """
    Execution engine for a parsed Program.

    Owns a fresh ExecutionState (tape, cursor, pc) for exactly one run.
    Cell arithmetic and cursor movement never wrap: leaving the valid
    range raises the matching ExecutionError and the run is over.

    Input values come from ``input_source`` (anything accepted by
    ``bfvm.inputs.as_input_source``). A malformed value is passed to
    ``on_malformed_input`` and another value is requested; an exhausted
    source raises InputExhausted. Output bytes go to ``output.write``, or
    to the ``output`` bytearray when no sink is given.
    """

    def __init__(self, program: Program, *, tape_size: int = TAPE_SIZE, input_source: Any = None,
                 output=None, on_malformed_input: Optional[Callable[[MalformedInput], None]] = None):
        self.program = program
        self.state = ExecutionState.fresh(tape_size)
        self.input = as_input_source(input_source)
        self.output = bytearray() if output is None else output
        self.on_malformed_input = on_malformed_input or _log_malformed

    # ===== Main loop =====

    def run(self) -> ExecutionState:
        """
        Run the program to completion.

        Returns:
            The final ExecutionState, with status COMPLETED.

        Raises:
            ExecutionError: one of the fatal kinds; ``error.state`` is the
            FAILED state at the moment of the fault.
        """
        state = self.state
        if state.status is not Status.RUNNING:
            raise RuntimeError("an Engine can only run once; build a new one for another run")

        program = self.program
        ops = program.instructions
        length = len(ops)
        tape = state.tape
        tape_len = len(tape)
        if isinstance(self.output, bytearray):
            emit = self.output.append
        else:
            sink = self.output.write

            def emit(value: int) -> None:
                sink(bytes((value,)))

        logger.debug("run start: %d instructions, tape size %d", length, tape_len)

        pc = 0
        ptr = 0
        steps = 0
        try:
            while pc < length:
                ins = ops[pc]
                op = ins.op

                if op is Op.INCREMENT:
                    if tape[ptr] == CELL_MAX:
                        raise self._fault(CellOverflow, f"cell already at {CELL_MAX}", pc, ptr)
                    tape[ptr] += 1
                elif op is Op.DECREMENT:
                    if tape[ptr] == 0:
                        raise self._fault(CellUnderflow, "cell already at 0", pc, ptr)
                    tape[ptr] -= 1
                elif op is Op.MOVE_RIGHT:
                    if ptr == tape_len - 1:
                        raise self._fault(CursorOverflow, f"cursor at last cell {tape_len - 1}", pc, ptr)
                    ptr += 1
                elif op is Op.MOVE_LEFT:
                    if ptr == 0:
                        raise self._fault(CursorUnderflow, "cursor at cell 0", pc, ptr)
                    ptr -= 1
                elif op is Op.OUTPUT:
                    emit(tape[ptr])
                elif op is Op.INPUT:
                    # the malformed-input callback may inspect engine.state
                    state.pc, state.cursor, state.steps = pc, ptr, steps
                    tape[ptr] = self._read_value(pc, ptr)
                elif op is Op.LOOP_OPEN:
                    if tape[ptr] == 0:
                        pc = ins.target
                elif op is Op.LOOP_CLOSE:
                    if tape[ptr] != 0:
                        pc = ins.target
                pc += 1
                steps += 1
        except ExecutionError as e:
            state.pc, state.cursor, state.steps = pc, ptr, steps
            state.status = Status.FAILED
            e.state = state
            logger.debug("run failed after %d steps: %s", steps, e)
            raise

        state.pc, state.cursor, state.steps = pc, ptr, steps
        state.status = Status.COMPLETED
        logger.debug("run completed: %d steps, cursor %d", steps, ptr)
        return state

    # ===== Helpers =====

    def _fault(self, cls, what: str, pc: int, ptr: int) -> ExecutionError:
        return make_execution_error(
            cls,
            what=what,
            pc=pc,
            cursor=ptr,
            source=self.program.source,
            position=self.program[pc].pos,
        )

    def _read_value(self, pc: int, ptr: int) -> int:
        while True:
            raw = self.input.next_value()
            if raw is END_OF_INPUT:
                raise self._fault(InputExhausted, "input source has no more values", pc, ptr)
            try:
                return parse_cell_value(raw)
            except MalformedInput as e:
                self.on_malformed_input(e)
