from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union

from .config import EofPolicy, InterpreterConfig
from .instructions import Instruction, Op, Program
from .tape import Tape
from .translator import Source, Translator

logger = logging.getLogger(__name__)


@dataclass
class ExecutionState:
    step: int
    cursor: int
    op: Optional[Op]
    magnitude: int
    position: int
    tape_start: int
    tape: List[int]
    output_count: int
    program_length: int


@dataclass
class ExecutionEngine:
    """Runs translated programs against a lazily grown tape.

    ``stdin`` and ``stdout`` are binary streams; when left as ``None`` the
    process streams are looked up at run time.
    """

    config: InterpreterConfig = field(default_factory=InterpreterConfig)
    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None

    tape: Tape = field(init=False, repr=False)
    cursor: int = field(init=False, repr=False)
    output_count: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.tape = Tape(self.config.segment_size)
        self.cursor = 0
        self.output_count = 0

    def run(self, program: Program) -> Tape:
        steps = 0
        for _ in self._dispatch(program):
            steps += 1
        logger.debug(
            "Halted after %d instructions with %d tape segments",
            steps,
            self.tape.segment_count,
        )
        return self.tape

    def step(self, program: Program, tape_window: int = 10) -> Iterator[ExecutionState]:
        steps = 0
        for instruction in self._dispatch(program):
            steps += 1
            yield self._snapshot(instruction, steps, len(program), tape_window)
        # Final snapshot marks the halt
        yield self._snapshot(None, steps, len(program), tape_window)

    def execute(self, source: Source) -> Tape:
        return self.run(Translator().translate(source))

    def execute_file(self, path: Union[str, Path]) -> Tape:
        return self.run(Translator().translate_file(path))

    def _dispatch(self, program: Program) -> Iterator[Instruction]:
        self.reset()
        stdin = self.stdin if self.stdin is not None else sys.stdin.buffer
        stdout = self.stdout if self.stdout is not None else sys.stdout.buffer
        logger.debug("Running %d instructions", len(program))
        try:
            while True:
                instruction = program[self.cursor]
                if instruction.op is Op.HALT:
                    return
                self.cursor = self._execute_instruction(instruction, stdin, stdout)
                yield instruction
        finally:
            if self.config.flush_output:
                stdout.flush()

    def _execute_instruction(
        self,
        instruction: Instruction,
        stdin: BinaryIO,
        stdout: BinaryIO,
    ) -> int:
        op = instruction.op
        tape = self.tape
        cursor = self.cursor
        if op is Op.INCREMENT:
            tape.add(instruction.magnitude)
        elif op is Op.SHIFT_RIGHT:
            tape.shift_right(instruction.magnitude)
        elif op is Op.SHIFT_LEFT:
            tape.shift_left(instruction.magnitude)
        elif op is Op.JUMP_IF_ZERO:
            if tape.read() == 0:
                cursor += instruction.magnitude
        elif op is Op.JUMP_IF_NONZERO:
            if tape.read() != 0:
                cursor -= instruction.magnitude
        elif op is Op.WRITE_BYTE:
            stdout.write(bytes((tape.read(),)))
            self.output_count += 1
        elif op is Op.READ_BYTE:
            self._read_byte(stdin, stdout)
        return cursor + 1

    def _read_byte(self, stdin: BinaryIO, stdout: BinaryIO) -> None:
        if self.config.flush_output:
            stdout.flush()
        data = stdin.read(1)
        if data:
            self.tape.write(data[0])
            return
        policy = self.config.eof
        if policy is EofPolicy.ZERO:
            self.tape.write(0)
        elif policy is EofPolicy.MAX:
            self.tape.write(0xFF)

    def _snapshot(
        self,
        instruction: Optional[Instruction],
        step: int,
        program_length: int,
        tape_window: int,
    ) -> ExecutionState:
        start, values = self.tape.window(tape_window)
        return ExecutionState(
            step=step,
            cursor=self.cursor,
            op=instruction.op if instruction is not None else None,
            magnitude=instruction.magnitude if instruction is not None else 0,
            position=self.tape.position,
            tape_start=start,
            tape=values,
            output_count=self.output_count,
            program_length=program_length,
        )


__all__ = ["ExecutionEngine", "ExecutionState"]
