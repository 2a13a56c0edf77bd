from .config import EofPolicy, InterpreterConfig
from .engine import ExecutionEngine, ExecutionState
from .instructions import Instruction, Op, Program
from .tape import Tape
from .translator import TranslationError, Translator, UnmatchedBracketError, translate

__all__ = [
    "EofPolicy",
    "ExecutionEngine",
    "ExecutionState",
    "Instruction",
    "InterpreterConfig",
    "Op",
    "Program",
    "Tape",
    "TranslationError",
    "Translator",
    "UnmatchedBracketError",
    "translate",
]
