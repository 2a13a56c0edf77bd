from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Op(str, Enum):
    JUMP_IF_ZERO = "["
    JUMP_IF_NONZERO = "]"
    SHIFT_RIGHT = ">"
    SHIFT_LEFT = "<"
    INCREMENT = "+"
    READ_BYTE = ","
    WRITE_BYTE = "."
    HALT = "!"

    @property
    def is_jump(self) -> bool:
        return self in (Op.JUMP_IF_ZERO, Op.JUMP_IF_NONZERO)


@dataclass(frozen=True)
class Instruction:
    """One slot of a translated program.

    ``magnitude`` holds the signed delta for INCREMENT, the unsigned distance
    for the shifts and the slot distance to the matching bracket for jumps.
    """

    op: Op
    position: int
    magnitude: int = 0

    @property
    def target(self) -> int:
        """Slot of the matching bracket; only meaningful for jumps."""
        if self.op is Op.JUMP_IF_ZERO:
            return self.position + self.magnitude
        if self.op is Op.JUMP_IF_NONZERO:
            return self.position - self.magnitude
        raise ValueError(f"{self.op.name} has no jump target")


Program = Tuple[Instruction, ...]


__all__ = ["Instruction", "Op", "Program"]
