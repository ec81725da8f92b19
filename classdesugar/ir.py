"""IR Design — flat instructions for the desugared class form."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class Opcode(str, Enum):
    # Class frame
    LABEL = "LABEL"
    DECLARE_NAME = "DECLARE_NAME"
    INIT_NAME = "INIT_NAME"
    # Definition-time key resolution
    EVAL_KEY = "EVAL_KEY"
    # Method table
    NEW_TABLE = "NEW_TABLE"
    DEFINE_METHOD = "DEFINE_METHOD"
    DEFINE_GENERATOR = "DEFINE_GENERATOR"
    DEFINE_GETTER = "DEFINE_GETTER"
    DEFINE_SETTER = "DEFINE_SETTER"
    FREEZE_TABLE = "FREEZE_TABLE"
    # Constructor and per-instance state
    DEFINE_CONSTRUCTOR = "DEFINE_CONSTRUCTOR"
    FIELD_INIT = "FIELD_INIT"


class SourceLocation(BaseModel):
    """Structured source span from tree-sitter AST nodes."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)


class IRInstruction(BaseModel):
    opcode: Opcode
    result_reg: str | None = None
    operands: list[Any] = []
    label: str | None = None  # for LABEL only
    source_location: SourceLocation = NO_SOURCE_LOCATION

    def __str__(self) -> str:
        if self.label and self.opcode == Opcode.LABEL:
            base = f"{self.label}:"
        else:
            parts: list[str] = []
            if self.result_reg:
                parts.append(f"{self.result_reg} =")
            parts.append(self.opcode.value.lower())
            for op in self.operands:
                parts.append(str(op))
            base = " ".join(parts)
        if not self.source_location.is_unknown():
            return f"{base}  # {self.source_location}"
        return base
