#!/usr/bin/env python3
"""
Execution engine tests: instruction effects, strict bounds, loops and I/O.
"""

import io
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfvm import (
    CellOverflow,
    CellUnderflow,
    CursorOverflow,
    CursorUnderflow,
    Engine,
    InputExhausted,
    Status,
    TAPE_SIZE,
    parse,
)


def execute(code, inputs=None, tape_size=TAPE_SIZE, **kwargs):
    engine = Engine(parse(code), tape_size=tape_size, input_source=inputs, **kwargs)
    state = engine.run()
    return bytes(engine.output), state


def test_fresh_state():
    engine = Engine(parse(""))
    assert len(engine.state.tape) == TAPE_SIZE == 30000
    assert engine.state.cursor == 0
    assert engine.state.pc == 0
    assert engine.state.status is Status.RUNNING
    assert not any(engine.state.tape)


def test_empty_program_completes():
    out, state = execute("")
    assert out == b""
    assert state.status is Status.COMPLETED
    assert state.steps == 0


def test_increment_up_to_255():
    out, state = execute("+" * 255)
    assert state.current == 255
    assert state.status is Status.COMPLETED


def test_increment_overflow():
    with pytest.raises(CellOverflow) as excinfo:
        execute("+" * 256)
    err = excinfo.value
    assert err.pc == 255
    assert err.cursor == 0
    assert err.state.status is Status.FAILED
    assert err.state.tape[0] == 255
    assert "instruction 255" in str(err)


def test_decrement_underflow():
    with pytest.raises(CellUnderflow) as excinfo:
        execute("+-\n-")
    err = excinfo.value
    assert err.pc == 2
    assert err.state.tape[0] == 0
    assert "line 2, column 1" in str(err)


def test_move_left_at_zero():
    with pytest.raises(CursorUnderflow) as excinfo:
        execute("<")
    assert excinfo.value.cursor == 0
    assert excinfo.value.state.cursor == 0


def test_move_right_at_last_cell():
    with pytest.raises(CursorOverflow) as excinfo:
        execute(">>>", tape_size=3)
    assert excinfo.value.pc == 2
    assert excinfo.value.cursor == 2


def test_move_right_to_last_cell_of_default_tape():
    _, state = execute(">" * (TAPE_SIZE - 1))
    assert state.cursor == TAPE_SIZE - 1
    with pytest.raises(CursorOverflow):
        execute(">" * TAPE_SIZE)


def test_invalid_tape_size():
    for bad in (0, -1, 2.5, True):
        with pytest.raises(ValueError):
            Engine(parse(""), tape_size=bad)


def test_clear_loop():
    out, state = execute("+++[-]")
    assert out == b""
    assert state.current == 0
    assert state.status is Status.COMPLETED


def test_loop_skipped_when_cell_is_zero():
    # body would underflow if it ever ran
    out, state = execute("[-]+")
    assert state.current == 1
    assert state.steps == 2


def test_loop_runs_once_when_body_zeroes_cell():
    out, state = execute("+[.-]")
    assert out == b"\x01"


def test_multiply_program():
    out, state = execute("++++++++[>++++++++<-]>.")
    assert out == bytes([64])
    assert state.status is Status.COMPLETED
    assert state.cursor == 1
    assert state.tape[0] == 0


def test_multiply_program_on_two_cell_tape():
    out, _ = execute("++++++++[>++++++++<-]>.", tape_size=2)
    assert out == b"@"


def test_hello_world():
    code = (
        "+++++++++[>++++++++>+++++++++++>+++++<<<-]>.>++.+++++++..+++.>-."
        "------------.<++++++++.--------.+++.------.--------.>+."
    )
    out, state = execute(code)
    assert out == b"Hello, world!"
    assert state.status is Status.COMPLETED


def test_input_then_output():
    out, state = execute(",.", inputs=[65])
    assert out == bytes([65])
    assert state.tape[0] == 65


def test_input_overwrites_cell():
    out, _ = execute("+++,.", inputs=["7"])
    assert out == b"\x07"


def test_input_retries_on_malformed_values():
    reported = []
    out, _ = execute(",.", inputs=["abc", "256", "-1", " 66\n"], on_malformed_input=reported.append)
    assert out == b"B"
    assert [e.value for e in reported] == ["abc", "256", "-1"]


def test_malformed_input_is_logged_by_default(caplog):
    with caplog.at_level("WARNING", logger="bfvm.engine"):
        out, _ = execute(",.", inputs=["x", "1"])
    assert out == b"\x01"
    assert "MalformedInput" in caplog.text


def test_input_exhausted():
    with pytest.raises(InputExhausted) as excinfo:
        execute(",.,.", inputs=[1])
    err = excinfo.value
    assert err.pc == 2
    assert err.state.tape[0] == 1


def test_input_exhausted_without_source():
    with pytest.raises(InputExhausted):
        execute(",")


def test_input_exhausted_after_only_malformed_values():
    reported = []
    with pytest.raises(InputExhausted):
        execute(",", inputs=["nope"], on_malformed_input=reported.append)
    assert len(reported) == 1


def test_input_from_text_stream():
    out, _ = execute(",>,<.>.", inputs=io.StringIO("1\n2\n"))
    assert out == b"\x01\x02"


def test_output_sink_receives_one_write_per_byte():
    sink = io.BytesIO()
    engine = Engine(parse("+.+.+."), output=sink)
    engine.run()
    assert sink.getvalue() == b"\x01\x02\x03"


def test_engine_runs_once():
    engine = Engine(parse("+"))
    engine.run()
    with pytest.raises(RuntimeError):
        engine.run()


def test_runs_do_not_share_state():
    program = parse("+++.")
    first = Engine(program)
    first.run()
    second = Engine(program)
    second.run()
    assert bytes(first.output) == bytes(second.output) == b"\x03"
    assert first.state.tape is not second.state.tape


def test_step_count():
    _, state = execute("++[-]")
    # + + [ - ] - ]
    assert state.steps == 7


def test_bytes_input_is_one_value_per_byte():
    out, state = execute(",.>,.", inputs=b"A\x00")
    assert out == b"A\x00"
    assert state.tape[0] == 65


def test_none_input_value_is_malformed_not_exhausted():
    reported = []
    out, _ = execute(",.", inputs=[None, 5], on_malformed_input=reported.append)
    assert out == b"\x05"
    assert len(reported) == 1
    assert reported[0].value is None


def test_malformed_input_callback_sees_current_position():
    seen = []
    engine = Engine(parse("++>>,"), input_source=["x", "9"])
    engine.on_malformed_input = lambda e: seen.append((engine.state.pc, engine.state.cursor, engine.state.steps))
    engine.run()
    assert seen == [(4, 2, 4)]
    assert engine.state.tape[2] == 9
