"""ClassDescriptor model: the parsed, language-agnostic class body.

A descriptor is what the parser hands over: members in declaration order,
an optional designated constructor, and the enclosing scope the member
bodies close over.  Bodies are Python callables, or source text when the
descriptor was produced by the source adapter (text bodies can be lowered
to IR but not elaborated).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import DescriptorError
from .ir import NO_SOURCE_LOCATION, SourceLocation
from .scope import Scope
from . import constants


class Symbol:
    """A unique symbolic property key; two symbols are never equal."""

    __slots__ = ("description",)

    def __init__(self, description: str = ""):
        self.description = description

    def __repr__(self) -> str:
        return f"Symbol({self.description})"


class MemberKind(str, Enum):
    METHOD = "METHOD"
    GETTER = "GETTER"
    SETTER = "SETTER"
    FIELD = "FIELD"
    CONSTRUCTOR = "CONSTRUCTOR"


class ComputedKey(BaseModel):
    """A member key written as an expression, resolved once at elaboration."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    expr: Callable[[Scope], Any] | None = None
    source: str = ""

    def __str__(self) -> str:
        return f"[{self.source or '<expr>'}]"


MemberKey = Union[str, Symbol, ComputedKey]


class Member(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: MemberKind
    key: MemberKey = ""
    is_generator: bool = False
    body: Callable[..., Any] | str | None = None
    location: SourceLocation = NO_SOURCE_LOCATION

    @model_validator(mode="after")
    def _check_generator_flag(self) -> Member:
        if self.is_generator and self.kind != MemberKind.METHOD:
            raise DescriptorError(
                f"Only methods can be generators, got {self.kind.value} {self.key_text()}"
            )
        return self

    @property
    def is_computed(self) -> bool:
        return isinstance(self.key, ComputedKey)

    @property
    def has_text_body(self) -> bool:
        return isinstance(self.body, str)

    def key_text(self) -> str:
        if isinstance(self.key, str):
            return self.key
        return str(self.key) if isinstance(self.key, ComputedKey) else repr(self.key)


class ClassDescriptor(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str | None = None
    members: list[Member] = []
    constructor: Member | None = None
    scope: Scope | None = None
    location: SourceLocation = NO_SOURCE_LOCATION

    @model_validator(mode="after")
    def _hoist_constructor(self) -> ClassDescriptor:
        """Move a constructor listed among the members into ``constructor``."""
        ctors = [m for m in self.members if m.kind == MemberKind.CONSTRUCTOR]
        if self.constructor is not None:
            ctors.insert(0, self.constructor)
        if len(ctors) > 1:
            raise DescriptorError(
                f"Class {self.display_name} declares {len(ctors)} constructors"
            )
        if ctors:
            self.members = [m for m in self.members if m.kind != MemberKind.CONSTRUCTOR]
            self.constructor = ctors[0]
        for m in self.members:
            if m.kind == MemberKind.FIELD and m.key == constants.CONSTRUCTOR_KEY:
                raise DescriptorError(
                    f"Class {self.display_name} cannot declare a field named 'constructor'"
                )
        return self

    @property
    def display_name(self) -> str:
        return self.name or constants.ANONYMOUS_CLASS_NAME


def make_method(
    key: MemberKey, body: Callable[..., Any] | str, *, generator: bool = False
) -> Member:
    return Member(kind=MemberKind.METHOD, key=key, body=body, is_generator=generator)


def make_getter(key: MemberKey, body: Callable[..., Any] | str) -> Member:
    return Member(kind=MemberKind.GETTER, key=key, body=body)


def make_setter(key: MemberKey, body: Callable[..., Any] | str) -> Member:
    return Member(kind=MemberKind.SETTER, key=key, body=body)


def make_field(
    key: MemberKey, initializer: Callable[..., Any] | str | None = None
) -> Member:
    return Member(kind=MemberKind.FIELD, key=key, body=initializer)


def make_constructor(body: Callable[..., Any] | str) -> Member:
    return Member(kind=MemberKind.CONSTRUCTOR, key=constants.CONSTRUCTOR_KEY, body=body)
