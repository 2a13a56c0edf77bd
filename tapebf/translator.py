from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, List, Tuple, Union

from .instructions import Instruction, Op, Program

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, str, BinaryIO]


class TranslationError(Exception):
    pass


class UnmatchedBracketError(TranslationError):
    """Raised when brackets do not pair up.

    ``kind`` is ``"close"`` for a stray ``]`` (reported as soon as it is
    read) and ``"open"`` for ``[`` left pending at end of input. ``offset``
    is the byte offset of the offending bracket in the source.
    """

    def __init__(self, message: str, *, offset: int, kind: str) -> None:
        super().__init__(message)
        self.offset = offset
        self.kind = kind


class _Mode(Enum):
    OTHER = 0
    POSITION = 1
    VALUE = 2


# Operators folded into the previous slot while the mode stays the same.
_RUN_OPERATORS: Dict[int, Tuple[_Mode, Op, int]] = {
    ord(">"): (_Mode.POSITION, Op.SHIFT_RIGHT, 1),
    ord("<"): (_Mode.POSITION, Op.SHIFT_RIGHT, -1),
    ord("+"): (_Mode.VALUE, Op.INCREMENT, 1),
    ord("-"): (_Mode.VALUE, Op.INCREMENT, -1),
}

_SINGLE_OPERATORS: Dict[int, Op] = {
    ord("["): Op.JUMP_IF_ZERO,
    ord("]"): Op.JUMP_IF_NONZERO,
    ord("."): Op.WRITE_BYTE,
    ord(","): Op.READ_BYTE,
}


def _to_bytes(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, str):
        return source.encode("latin-1", errors="replace")
    data = source.read()
    if isinstance(data, str):
        return data.encode("latin-1", errors="replace")
    return data


class Translator:
    def translate(self, source: Source) -> Program:
        data = _to_bytes(source)
        ops: List[Op] = []
        magnitudes: List[int] = []
        pending: List[Tuple[int, int]] = []  # (slot, byte offset) of open brackets
        mode = _Mode.OTHER

        for offset, byte in enumerate(data):
            run = _RUN_OPERATORS.get(byte)
            if run is not None:
                run_mode, op, delta = run
                if mode is run_mode:
                    magnitudes[-1] += delta
                else:
                    ops.append(op)
                    magnitudes.append(delta)
                    mode = run_mode
                continue

            op = _SINGLE_OPERATORS.get(byte)
            if op is None:
                continue
            mode = _Mode.OTHER
            slot = len(ops)
            ops.append(op)
            magnitudes.append(0)

            if op is Op.JUMP_IF_ZERO:
                pending.append((slot, offset))
            elif op is Op.JUMP_IF_NONZERO:
                if not pending:
                    raise UnmatchedBracketError(
                        f"Unexpected closing bracket at offset {offset}",
                        offset=offset,
                        kind="close",
                    )
                open_slot, _ = pending.pop()
                distance = slot - open_slot
                magnitudes[open_slot] = distance
                magnitudes[slot] = distance

        if pending:
            _, offset = pending[-1]
            raise UnmatchedBracketError(
                f"Program doesn't have enough closing brackets "
                f"({len(pending)} unmatched, innermost at offset {offset})",
                offset=offset,
                kind="open",
            )

        program = tuple(
            _normalize(op, slot, magnitude)
            for slot, (op, magnitude) in enumerate(zip(ops, magnitudes))
        ) + (Instruction(Op.HALT, len(ops)),)
        logger.debug("Translated %d source bytes into %d slots", len(data), len(program))
        return program

    def translate_file(self, path: Union[str, Path]) -> Program:
        with open(path, "rb") as handle:
            return self.translate(handle)


def _normalize(op: Op, slot: int, magnitude: int) -> Instruction:
    if op is Op.SHIFT_RIGHT and magnitude < 0:
        return Instruction(Op.SHIFT_LEFT, slot, -magnitude)
    return Instruction(op, slot, magnitude)


def translate(source: Source) -> Program:
    return Translator().translate(source)


__all__ = [
    "Source",
    "TranslationError",
    "Translator",
    "UnmatchedBracketError",
    "translate",
]
