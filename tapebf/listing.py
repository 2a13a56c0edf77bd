from __future__ import annotations

from typing import List

from .engine import ExecutionState
from .instructions import Instruction, Program


def format_instruction(instruction: Instruction) -> str:
    line = f"{instruction.position:6}  {instruction.op.value}  {instruction.magnitude:6}"
    if instruction.op.is_jump:
        line += f"  -> {instruction.target}"
    return line


def format_program(program: Program) -> str:
    return "\n".join(format_instruction(instruction) for instruction in program)


def format_state(state: ExecutionState) -> str:
    lines: List[str] = []
    op_display = state.op.value if state.op is not None else "(halt)"
    lines.append(
        f"step={state.step} cursor={state.cursor}/{state.program_length} "
        f"op={op_display!r} magnitude={state.magnitude} head={state.position}"
    )
    if state.output_count:
        lines.append(f"output={state.output_count} bytes")
    tape_parts: List[str] = []
    for idx, value in enumerate(state.tape):
        absolute = state.tape_start + idx
        cell_repr = f"{absolute}:{value:03}"
        if absolute == state.position:
            tape_parts.append(f"[{cell_repr}]")
        else:
            tape_parts.append(f" {cell_repr} ")
    lines.append("tape=" + " ".join(tape_parts))
    return "\n".join(lines)


__all__ = ["format_instruction", "format_program", "format_state"]
