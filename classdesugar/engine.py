"""Desugaring Engine — class descriptor → Constructible.

This is the single public entry point for elaboration.  All definition-time
work (key evaluation, table assembly, name binding) happens here, once;
instantiation only ever reads what this produces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .descriptor import ClassDescriptor, Member, MemberKind
from .errors import DescriptorError, InvocationError
from .instantiate import construct
from .keys import KeyToken, evaluate_keys
from .method_table import MethodTable, build_method_table
from .naming import bind_internal_name, class_scope_for, describe, display_name
from .scope import Scope
from . import constants

logger = logging.getLogger(__name__)

FieldInitializer = tuple[KeyToken, Callable[..., Any] | None]


@dataclass(frozen=True, eq=False)
class Constructible:
    """The built class: constructor body, field list and shared method table.

    Calling it directly is always rejected; use ``instantiate``.
    """

    name: str
    constructor_body: Callable[..., Any] | None
    field_initializers: tuple[FieldInitializer, ...]
    method_table: MethodTable
    scope: Scope
    internal_name: str | None = None

    def _invoke(self, args: tuple[Any, ...], *, instantiating: bool) -> Any:
        if not instantiating:
            raise InvocationError(self.name)
        return construct(self, args)

    def __call__(self, *args: Any) -> Any:
        return self._invoke(args, instantiating=False)

    def __repr__(self) -> str:
        return f"<class {describe(self.name)}>"


def _check_runnable(descriptor: ClassDescriptor) -> None:
    members: list[Member] = list(descriptor.members)
    if descriptor.constructor is not None:
        members.append(descriptor.constructor)
    for m in members:
        if m.has_text_body:
            raise DescriptorError(
                f"Member {m.key_text()} of class {descriptor.display_name} has a "
                "source-text body; it can be lowered but not elaborated"
            )


def _field_initializers(
    keyed_fields: list[tuple[KeyToken, Member]], table: MethodTable, class_name: str
) -> tuple[FieldInitializer, ...]:
    result: list[FieldInitializer] = []
    for key, member in keyed_fields:
        if key == constants.CONSTRUCTOR_KEY:
            raise DescriptorError(
                f"Field of class {describe(class_name)} resolves to the reserved key "
                "'constructor'"
            )
        if table.entry(key) is not None:
            raise DescriptorError(
                f"Field {key!r} of class {describe(class_name)} collides with a "
                "method or accessor of the same key"
            )
        if member.body is not None and not callable(member.body):
            raise DescriptorError(f"Field {key!r} initializer is not callable")
        result.append((key, member.body))
    return tuple(result)


def desugar(
    descriptor: ClassDescriptor, *, binding_name: str | None = None
) -> Constructible:
    """Elaborate *descriptor* into an immutable Constructible.

    Args:
        descriptor: The class as handed over by the parser.
        binding_name: The outer name the class is assigned to, if any.  Only
            used as the display name of an anonymous class; it never becomes
            resolvable from member bodies.

    Raises:
        KeyEvaluationError: A computed key expression failed; nothing is built.
        DescriptorError: The descriptor cannot be elaborated.
    """
    name = display_name(descriptor, binding_name)
    logger.info(
        "Elaborating class %s (%d members)", describe(name), len(descriptor.members)
    )
    _check_runnable(descriptor)

    class_scope = class_scope_for(descriptor)
    keyed = evaluate_keys(descriptor.members, class_scope)
    table = build_method_table(keyed, class_scope, class_name=name)
    fields = _field_initializers(
        [(k.key, k.member) for k in keyed if k.member.kind == MemberKind.FIELD],
        table,
        name,
    )
    ctor = descriptor.constructor
    constructible = Constructible(
        name=name,
        constructor_body=ctor.body if ctor is not None else None,
        field_initializers=fields,
        method_table=table,
        scope=class_scope,
        internal_name=descriptor.name or None,
    )
    table._bind_owner(constructible)
    bind_internal_name(class_scope, descriptor.name, constructible)
    logger.info(
        "Built %r: %d table entries, %d fields",
        constructible,
        len(table.own_keys()),
        len(fields),
    )
    return constructible
