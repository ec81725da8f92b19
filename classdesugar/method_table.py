"""Method Table Builder: the shared, frozen behavior table of a class."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterator

from .descriptor import MemberKind
from .errors import AccessorMissingError, DescriptorError
from .keys import KeyedMember, KeyToken
from .scope import CallFrame, Scope
from . import constants

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    METHOD = "METHOD"
    GENERATOR = "GENERATOR"
    ACCESSOR = "ACCESSOR"


@dataclass(frozen=True)
class MethodEntry:
    """A directly invocable method (plain or generator) bound to its scope."""

    key: KeyToken
    kind: EntryKind
    body: Callable[..., Any]
    scope: Scope
    function_name: str

    def invoke(self, this: Any, *args: Any) -> Any:
        return self.body(CallFrame(self.function_name, this, self.scope), *args)


@dataclass(frozen=True)
class AccessorPair:
    """A merged getter/setter entry; either side may be absent."""

    key: KeyToken
    getter: Callable[..., Any] | None
    setter: Callable[..., Any] | None
    scope: Scope
    function_name: str

    kind = EntryKind.ACCESSOR

    def get(self, this: Any) -> Any:
        if self.getter is None:
            raise AccessorMissingError(self.key, constants.GETTER_SIDE)
        return self.getter(CallFrame(f"get {self.function_name}", this, self.scope))

    def set(self, this: Any, value: Any) -> None:
        if self.setter is None:
            raise AccessorMissingError(self.key, constants.SETTER_SIDE)
        self.setter(CallFrame(f"set {self.function_name}", this, self.scope), value)


TableEntry = MethodEntry | AccessorPair


class MethodTable:
    """Read-only key → entry mapping shared by every instance of a class.

    All entries are non-enumerable: iterating the table yields nothing, while
    ``get``/``[]``/``in`` see every key.  ``own_keys`` is the reflection view.
    The ``constructor`` key resolves to the owning Constructible once the
    engine has bound it.
    """

    __slots__ = ("_entries", "_owner", "class_name")

    def __init__(self, entries: dict[KeyToken, TableEntry], class_name: str = ""):
        self._entries = MappingProxyType(dict(entries))
        self._owner: Any = None
        self.class_name = class_name

    def _bind_owner(self, owner: Any) -> None:
        if self._owner is not None:
            raise DescriptorError(f"Method table of {self.class_name} is already bound")
        self._owner = owner

    @property
    def owner(self) -> Any:
        return self._owner

    def get(self, key: KeyToken, default: Any = None) -> Any:
        if key == constants.CONSTRUCTOR_KEY and self._owner is not None:
            return self._owner
        return self._entries.get(key, default)

    def __getitem__(self, key: KeyToken) -> Any:
        if key == constants.CONSTRUCTOR_KEY and self._owner is not None:
            return self._owner
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        if key == constants.CONSTRUCTOR_KEY:
            return self._owner is not None
        return key in self._entries

    def __iter__(self) -> Iterator[KeyToken]:
        return iter(())

    def entry(self, key: KeyToken) -> TableEntry | None:
        return self._entries.get(key)

    def own_keys(self) -> list[KeyToken]:
        head: list[KeyToken] = [constants.CONSTRUCTOR_KEY] if self._owner is not None else []
        return head + list(self._entries)

    def enumerable_keys(self) -> list[KeyToken]:
        return []

    def __repr__(self) -> str:
        return f"MethodTable({self.class_name!r}, {len(self._entries)} entries)"


def _display_key(key: KeyToken) -> str:
    return key if isinstance(key, str) else f"[{key!r}]"


def _merge_accessor(
    existing: TableEntry | None,
    keyed: KeyedMember,
    scope: Scope,
    class_name: str,
) -> AccessorPair:
    body = keyed.member.body
    getter, setter = None, None
    if isinstance(existing, AccessorPair):
        getter, setter = existing.getter, existing.setter
    if keyed.member.kind == MemberKind.GETTER:
        getter = body
    else:
        setter = body
    return AccessorPair(
        key=keyed.key,
        getter=getter,
        setter=setter,
        scope=scope,
        function_name=f"{class_name}.{_display_key(keyed.key)}",
    )


def build_method_table(
    keyed_members: list[KeyedMember], scope: Scope, class_name: str = ""
) -> MethodTable:
    """Assemble the method table from keyed, non-field members.

    Duplicate method keys: last declaration wins.  Getters and setters that
    share a key merge into one AccessorPair regardless of what is declared
    between them; redeclaring one side replaces only that side.  A method
    replaces an accessor of the same key and vice versa.
    """
    entries: dict[KeyToken, TableEntry] = {}
    for keyed in keyed_members:
        member = keyed.member
        if member.kind in (MemberKind.FIELD, MemberKind.CONSTRUCTOR):
            continue
        if keyed.key == constants.CONSTRUCTOR_KEY:
            raise DescriptorError(
                f"Class {class_name or constants.ANONYMOUS_CLASS_NAME} member "
                f"#{keyed.position} resolves to the reserved key 'constructor'"
            )
        if not callable(member.body):
            raise DescriptorError(
                f"Member {member.key_text()} of {class_name} has no callable body"
            )
        if member.kind in (MemberKind.GETTER, MemberKind.SETTER):
            entries[keyed.key] = _merge_accessor(
                entries.get(keyed.key), keyed, scope, class_name
            )
        else:
            entries[keyed.key] = MethodEntry(
                key=keyed.key,
                kind=EntryKind.GENERATOR if member.is_generator else EntryKind.METHOD,
                body=member.body,
                scope=scope,
                function_name=f"{class_name}.{_display_key(keyed.key)}",
            )
        logger.debug(
            "Table %s: %s %s", class_name, member.kind.value, _display_key(keyed.key)
        )
    return MethodTable(entries, class_name=class_name)
