"""Descriptor → flat IR: the desugared class form as instructions.

Lowering never runs user code: computed keys become EVAL_KEY instructions
whose result register is used as the key operand, and bodies are referenced
by display name.  It works on any descriptor, including ones whose bodies
are source text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .descriptor import ClassDescriptor, Member, MemberKind
from .ir import NO_SOURCE_LOCATION, IRInstruction, Opcode, SourceLocation
from . import constants

logger = logging.getLogger(__name__)

_DEFINE_OPCODES: dict[MemberKind, Opcode] = {
    MemberKind.METHOD: Opcode.DEFINE_METHOD,
    MemberKind.GETTER: Opcode.DEFINE_GETTER,
    MemberKind.SETTER: Opcode.DEFINE_SETTER,
}


@dataclass(frozen=True)
class LoweringConfig:
    """Groups lowering options."""

    include_locations: bool = True
    anonymous_label: str = "anonymous"


class ClassLowerer:
    """Emits IR for one or more class descriptors, sharing register/label counters."""

    def __init__(self, config: LoweringConfig = LoweringConfig()):
        self._config = config
        self._reg_counter: int = 0
        self._label_counter: int = 0
        self._instructions: list[IRInstruction] = []

    # ── helpers ──────────────────────────────────────────────────

    def _fresh_reg(self) -> str:
        r = f"{constants.KEY_REG_PREFIX}{self._reg_counter}"
        self._reg_counter += 1
        return r

    def _fresh_label(self, prefix: str) -> str:
        lbl = f"{prefix}_{self._label_counter}"
        self._label_counter += 1
        return lbl

    def _emit(
        self,
        opcode: Opcode,
        *,
        result_reg: str = "",
        operands: list[Any] = [],
        label: str = "",
        source_location: SourceLocation = NO_SOURCE_LOCATION,
    ) -> IRInstruction:
        inst = IRInstruction(
            opcode=opcode,
            result_reg=result_reg or None,
            operands=list(operands),
            label=label or None,
            source_location=(
                source_location if self._config.include_locations else NO_SOURCE_LOCATION
            ),
        )
        self._instructions.append(inst)
        return inst

    @staticmethod
    def _body_ref(class_name: str, key_text: str, member: Member | None) -> str:
        if member is None or member.body is None:
            return "<default>"
        return f"<fn:{class_name}.{key_text}>"

    # ── lowering ─────────────────────────────────────────────────

    def lower(self, descriptor: ClassDescriptor) -> list[IRInstruction]:
        start = len(self._instructions)
        name = descriptor.name or ""
        label_name = name or self._config.anonymous_label
        class_label = self._fresh_label(f"{constants.CLASS_LABEL_PREFIX}{label_name}")
        end_label = self._fresh_label(f"{constants.END_CLASS_LABEL_PREFIX}{label_name}")

        self._emit(Opcode.LABEL, label=class_label, source_location=descriptor.location)
        if name:
            self._emit(Opcode.DECLARE_NAME, operands=[name])

        key_operands = self._lower_keys(descriptor.members)

        table_reg = self._fresh_reg()
        self._emit(Opcode.NEW_TABLE, result_reg=table_reg, operands=[repr(label_name)])
        for i, member in enumerate(descriptor.members):
            if member.kind == MemberKind.FIELD:
                continue
            opcode = (
                Opcode.DEFINE_GENERATOR
                if member.is_generator
                else _DEFINE_OPCODES[member.kind]
            )
            self._emit(
                opcode,
                operands=[
                    table_reg,
                    key_operands[i],
                    self._body_ref(label_name, member.key_text(), member),
                ],
                source_location=member.location,
            )
        self._emit(Opcode.FREEZE_TABLE, operands=[table_reg])

        ctor = descriptor.constructor
        class_reg = self._fresh_reg()
        self._emit(
            Opcode.DEFINE_CONSTRUCTOR,
            result_reg=class_reg,
            operands=[
                repr(label_name),
                table_reg,
                self._body_ref(label_name, constants.CONSTRUCTOR_KEY, ctor),
                "guarded",
            ],
            source_location=ctor.location if ctor is not None else NO_SOURCE_LOCATION,
        )
        for i, member in enumerate(descriptor.members):
            if member.kind != MemberKind.FIELD:
                continue
            init_ref = (
                f"<init:{label_name}.{member.key_text()}>"
                if member.body is not None
                else "None"
            )
            self._emit(
                Opcode.FIELD_INIT,
                operands=[class_reg, key_operands[i], init_ref],
                source_location=member.location,
            )
        if name:
            self._emit(Opcode.INIT_NAME, operands=[name, class_reg])
        self._emit(Opcode.LABEL, label=end_label)

        lowered = self._instructions[start:]
        logger.info("Lowered class %s → %d instructions", label_name, len(lowered))
        return lowered

    def _lower_keys(self, members: list[Member]) -> list[str]:
        """Emit EVAL_KEY for computed keys, in declaration order."""
        operands: list[str] = []
        for member in members:
            key = member.key
            if member.is_computed:
                reg = self._fresh_reg()
                self._emit(
                    Opcode.EVAL_KEY,
                    result_reg=reg,
                    operands=[repr(key.source or "<expr>")],
                    source_location=member.location,
                )
                operands.append(reg)
            else:
                operands.append(repr(key))
        return operands

    @property
    def instructions(self) -> list[IRInstruction]:
        return list(self._instructions)


def lower_descriptors(
    descriptors: list[ClassDescriptor], config: LoweringConfig = LoweringConfig()
) -> list[IRInstruction]:
    lowerer = ClassLowerer(config)
    for descriptor in descriptors:
        lowerer.lower(descriptor)
    return lowerer.instructions


def lower_descriptor(
    descriptor: ClassDescriptor, config: LoweringConfig = LoweringConfig()
) -> list[IRInstruction]:
    return ClassLowerer(config).lower(descriptor)


def dump_ir(instructions: list[IRInstruction]) -> str:
    """Render instructions one per line, labels flush left."""
    return "\n".join(
        str(inst) if inst.opcode == Opcode.LABEL else f"  {inst}"
        for inst in instructions
    )
