"""Instantiation Protocol: the only sanctioned way to produce an Instance."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .descriptor import Symbol
from .errors import NotCallableError, PropertyMissingError, ReadOnlyBindingError
from .keys import KeyToken
from .method_table import AccessorPair, MethodEntry, MethodTable
from .scope import CallFrame
from . import constants

if TYPE_CHECKING:
    from .engine import Constructible

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes, Symbol)


@dataclass(eq=False)
class Instance:
    """Per-instance field storage plus a non-owning link to the class table."""

    method_table: MethodTable
    fields: dict[KeyToken, Any] = field(default_factory=dict)

    def has_own(self, key: KeyToken) -> bool:
        return key in self.fields

    def _define(self, key: KeyToken, value: Any) -> None:
        """Create or overwrite an own field, bypassing accessors."""
        self.fields[key] = value

    def get(self, key: KeyToken) -> Any:
        if key in self.fields:
            return self.fields[key]
        entry = self.method_table.get(key)
        if isinstance(entry, AccessorPair):
            return entry.get(self)
        if isinstance(entry, MethodEntry):
            return functools.partial(entry.invoke, self)
        if entry is not None:
            return entry
        raise PropertyMissingError(
            f"{self.method_table.class_name or 'instance'} has no property {key!r}"
        )

    def set(self, key: KeyToken, value: Any) -> None:
        if key in self.fields:
            self.fields[key] = value
            return
        entry = self.method_table.entry(key)
        if isinstance(entry, AccessorPair):
            entry.set(self, value)
            return
        if entry is not None or key == constants.CONSTRUCTOR_KEY:
            raise ReadOnlyBindingError(
                f"Cannot shadow method {key!r} of {self.method_table.class_name}"
            )
        self.fields[key] = value

    def call(self, key: KeyToken, *args: Any) -> Any:
        if key not in self.fields:
            entry = self.method_table.entry(key)
            if isinstance(entry, MethodEntry):
                return entry.invoke(self, *args)
        target = self.get(key)
        if not callable(target):
            raise NotCallableError(f"{key!r} is not a function")
        return target(*args)

    def __repr__(self) -> str:
        return f"<{self.method_table.class_name or 'instance'} {self.fields!r}>"


def _is_composite(value: Any) -> bool:
    return not isinstance(value, _PRIMITIVE_TYPES)


def construct(constructible: Constructible, args: tuple[Any, ...]) -> Any:
    """Run the construction steps; the invocation guard has already passed.

    1. allocate an Instance linked to the shared method table
    2. run field initializers in declaration order with ``this`` bound
    3. run the constructor body
    4. return the instance, or the composite value the body returned
    """
    name = constructible.name
    instance = Instance(method_table=constructible.method_table)
    for key, initializer in constructible.field_initializers:
        value = None
        if initializer is not None:
            frame = CallFrame(f"{name}.<field {key!r}>", instance, constructible.scope)
            value = initializer(frame)
        instance._define(key, value)

    result = None
    if constructible.constructor_body is not None:
        frame = CallFrame(f"{name}.constructor", instance, constructible.scope)
        result = constructible.constructor_body(frame, *args)

    if _is_composite(result):
        logger.debug("Constructor of %s returned %r in place of the instance", name, result)
        return result
    return instance


def instantiate(constructible: Constructible, *args: Any) -> Any:
    """Create a new instance of *constructible* with constructor *args*."""
    logger.debug("instantiate %s(%s)", constructible.name, ", ".join(map(repr, args)))
    return constructible._invoke(args, instantiating=True)


def is_instance_of(value: Any, constructible: Constructible) -> bool:
    return (
        isinstance(value, Instance)
        and value.method_table is constructible.method_table
    )


def enumerate_keys(value: Any) -> list[str]:
    """Generic enumeration: enumerable string keys only.

    Method-table entries are never listed; instance fields are.
    """
    if isinstance(value, MethodTable):
        return value.enumerable_keys()
    if isinstance(value, Instance):
        return [k for k in value.fields if isinstance(k, str)]
    if isinstance(value, dict):
        return [k for k in value if isinstance(k, str)]
    return []


def copy_properties(target: dict[str, Any], source: Any) -> dict[str, Any]:
    """Copy the enumerable properties of *source* onto *target*."""
    for key in enumerate_keys(source):
        target[key] = source.get(key) if isinstance(source, Instance) else source[key]
    return target
