import io
import unittest

from tapebf import EofPolicy, ExecutionEngine, InterpreterConfig, Tape, translate

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def run_program(source, stdin=b"", config=None):
    stdout = io.BytesIO()
    engine = ExecutionEngine(
        config=config or InterpreterConfig(),
        stdin=io.BytesIO(stdin),
        stdout=stdout,
    )
    tape = engine.run(translate(source))
    return stdout.getvalue(), tape


class ExecutionEngineTests(unittest.TestCase):
    def test_increment_then_write(self) -> None:
        output, _ = run_program("++.")
        self.assertEqual(output, b"\x02")

    def test_clear_loop_runs_once(self) -> None:
        output, tape = run_program("+[-]")
        self.assertEqual(output, b"")
        self.assertEqual(tape.read(), 0)

    def test_loop_skipped_on_zero_cell(self) -> None:
        output, tape = run_program("[.+]")
        self.assertEqual(output, b"")
        self.assertEqual(tape.read(), 0)

    def test_empty_loop_on_zero_cell_halts(self) -> None:
        output, _ = run_program("[]")
        self.assertEqual(output, b"")

    def test_empty_program(self) -> None:
        output, tape = run_program("")
        self.assertEqual(output, b"")
        self.assertEqual(tape.segment_count, 1)

    def test_hello_world(self) -> None:
        output, _ = run_program(HELLO_WORLD)
        self.assertEqual(output, b"Hello World!\n")

    def test_nul_byte_does_not_stop_program(self) -> None:
        output, _ = run_program(b"+\x00+.")
        self.assertEqual(output, b"\x02")

    def test_increment_wraps(self) -> None:
        output, _ = run_program("-." + "+" * 257 + ".")
        self.assertEqual(output, b"\xff\x00")

    def test_crossing_segments_and_back(self) -> None:
        source = "+" + ">" * 3000 + "<" * 3000 + "."
        output, tape = run_program(source)
        self.assertEqual(output, b"\x01")
        self.assertEqual(tape.position, 0)
        self.assertEqual(tape.segment_count, 4)

    def test_separate_runs_cross_segments(self) -> None:
        source = "+>" + "+>" * 2999 + "<" * 3000 + "[.>]"
        output, _ = run_program(source)
        self.assertEqual(output, b"\x01" * 3000)

    def test_nested_loop_multiplies(self) -> None:
        output, _ = run_program("+++[>++++[>+<-]<-]>>.")
        self.assertEqual(output, b"\x0c")

    def test_echo_input(self) -> None:
        output, _ = run_program(",[.,]", stdin=b"abc", config=InterpreterConfig(eof="zero"))
        self.assertEqual(output, b"abc")

    def test_engine_is_reusable(self) -> None:
        stdout = io.BytesIO()
        engine = ExecutionEngine(stdin=io.BytesIO(), stdout=stdout)
        program = translate("+++.")
        engine.run(program)
        engine.run(program)
        self.assertEqual(stdout.getvalue(), b"\x03\x03")

    def test_execute_translates_source(self) -> None:
        stdout = io.BytesIO()
        engine = ExecutionEngine(stdin=io.BytesIO(), stdout=stdout)
        engine.execute(b"+++++.")
        self.assertEqual(stdout.getvalue(), b"\x05")


class EofPolicyTests(unittest.TestCase):
    def test_default_stores_max(self) -> None:
        output, _ = run_program("+,.")
        self.assertEqual(output, b"\xff")

    def test_zero_policy(self) -> None:
        output, _ = run_program("+,.", config=InterpreterConfig(eof=EofPolicy.ZERO))
        self.assertEqual(output, b"\x00")

    def test_unchanged_policy(self) -> None:
        output, _ = run_program("+++,.", config=InterpreterConfig(eof=EofPolicy.UNCHANGED))
        self.assertEqual(output, b"\x03")

    def test_input_byte_replaces_cell(self) -> None:
        output, _ = run_program("+++,.", stdin=b"A")
        self.assertEqual(output, b"A")


class ExecutionEngineStepTests(unittest.TestCase):
    def test_step_sequence_produces_states(self) -> None:
        engine = ExecutionEngine(stdin=io.BytesIO(), stdout=io.BytesIO())
        program = translate("+++>.")
        states = list(engine.step(program, tape_window=2))
        ops = [state.op.value for state in states[:-1]]  # last state is the halt
        self.assertEqual(ops, ["+", ">", "."])
        self.assertIsNone(states[-1].op)
        self.assertEqual(states[-1].cursor, len(program) - 1)
        self.assertEqual(states[0].tape, [0, 0, 3, 0, 0])
        self.assertEqual(states[1].position, 1)
        self.assertEqual(states[-1].output_count, 1)

    def test_loop_states_follow_jumps(self) -> None:
        engine = ExecutionEngine(stdin=io.BytesIO(), stdout=io.BytesIO())
        states = list(engine.step(translate("++[-]")))
        cursors = [state.cursor for state in states]
        self.assertEqual(cursors, [1, 2, 3, 2, 3, 4, 4])


class TapeTests(unittest.TestCase):
    def test_starts_centered(self) -> None:
        tape = Tape(8)
        self.assertEqual(tape.offset, 4)
        self.assertEqual(tape.position, 0)

    def test_allocates_only_crossed_segments(self) -> None:
        tape = Tape(8)
        tape.shift_right(3)
        self.assertEqual(tape.segment_count, 1)
        tape.shift_right(1)
        self.assertEqual(tape.segment_count, 2)
        self.assertEqual(tape.segment_index, 1)
        self.assertEqual(tape.offset, 0)

    def test_grows_left(self) -> None:
        tape = Tape(8)
        tape.shift_left(21)
        self.assertEqual(tape.segment_index, -3)
        self.assertEqual(tape.offset, 7)
        self.assertEqual(tape.segment_count, 4)
        self.assertEqual(tape.position, -21)

    def test_revisits_existing_segments(self) -> None:
        tape = Tape(8)
        tape.shift_left(10)
        tape.write(42)
        tape.shift_right(30)
        tape.shift_left(30)
        self.assertEqual(tape.read(), 42)
        self.assertEqual(tape.segment_count, 5)

    def test_add_wraps(self) -> None:
        tape = Tape()
        tape.add(-1)
        self.assertEqual(tape.read(), 255)
        tape.add(300)
        self.assertEqual(tape.read(), 43)

    def test_window_reads_unvisited_as_zero(self) -> None:
        tape = Tape(4)
        tape.write(7)
        start, values = tape.window(5)
        self.assertEqual(start, -5)
        self.assertEqual(values, [0] * 5 + [7] + [0] * 5)
        self.assertEqual(tape.segment_count, 1)

    def test_rejects_tiny_segments(self) -> None:
        with self.assertRaises(ValueError):
            Tape(1)


class _RecordingStream(io.BytesIO):
    def __init__(self, events, name, initial=b""):
        super().__init__(initial)
        self.events = events
        self.name = name

    def read(self, size=-1):
        self.events.append(f"{self.name}.read")
        return super().read(size)

    def flush(self):
        self.events.append(f"{self.name}.flush")
        super().flush()


class _InterruptingStdin(io.BytesIO):
    def read(self, size=-1):
        raise KeyboardInterrupt


class OutputFlushTests(unittest.TestCase):
    def test_flushes_before_blocking_read(self) -> None:
        events = []
        stdout = _RecordingStream(events, "stdout")
        stdin = _RecordingStream(events, "stdin", b"x")
        ExecutionEngine(stdin=stdin, stdout=stdout).run(translate("+.,"))
        read_at = events.index("stdin.read")
        self.assertIn("stdout.flush", events[:read_at])
        self.assertEqual(events[-1], "stdout.flush")
        self.assertEqual(stdout.getvalue(), b"\x01")

    def test_no_flush_before_read_when_disabled(self) -> None:
        events = []
        stdout = _RecordingStream(events, "stdout")
        stdin = _RecordingStream(events, "stdin", b"x")
        engine = ExecutionEngine(
            config=InterpreterConfig(flush_output=False),
            stdin=stdin,
            stdout=stdout,
        )
        engine.run(translate(".,"))
        self.assertEqual(events, ["stdin.read"])

    def test_interrupted_read_still_flushes_output(self) -> None:
        events = []
        stdout = _RecordingStream(events, "stdout")
        engine = ExecutionEngine(stdin=_InterruptingStdin(), stdout=stdout)
        with self.assertRaises(KeyboardInterrupt):
            engine.run(translate("++.,"))
        self.assertEqual(stdout.getvalue(), b"\x02")
        self.assertEqual(events[-1], "stdout.flush")


if __name__ == "__main__":
    unittest.main()
