"""Lexical scopes and the call frame handed to member bodies."""

from __future__ import annotations

from typing import Any

from . import constants
from .errors import ReadOnlyBindingError, UnresolvedNameError


class _Uninitialized:
    """Sentinel for a declared binding that has not been initialized yet."""

    def __repr__(self) -> str:
        return "UNINITIALIZED"


UNINITIALIZED = _Uninitialized()


class Scope:
    """A link in a lexical scope chain.

    Bindings are looked up innermost-first.  A binding may be read-only; a
    read-only binding is declared once and initialized once, and reading it
    in between raises ``UnresolvedNameError``.
    """

    def __init__(
        self,
        bindings: dict[str, Any] | None = None,
        parent: Scope | None = None,
    ):
        self.parent = parent
        self._bindings: dict[str, Any] = dict(bindings or {})
        self._read_only: set[str] = set()

    def declare_read_only(self, name: str) -> None:
        self._bindings[name] = UNINITIALIZED
        self._read_only.add(name)

    def initialize(self, name: str, value: Any) -> None:
        if self._bindings.get(name, UNINITIALIZED) is not UNINITIALIZED:
            raise ReadOnlyBindingError(
                constants.READ_ONLY_BINDING_TEMPLATE.format(name=name)
            )
        self._bindings[name] = value

    def owns(self, name: str) -> bool:
        return name in self._bindings

    def resolves(self, name: str) -> bool:
        scope: Scope | None = self
        while scope is not None:
            if scope.owns(name):
                return True
            scope = scope.parent
        return False

    def lookup(self, name: str) -> Any:
        scope: Scope | None = self
        while scope is not None:
            if name in scope._bindings:
                val = scope._bindings[name]
                if val is UNINITIALIZED:
                    raise UnresolvedNameError(
                        constants.TDZ_ERROR_TEMPLATE.format(name=name)
                    )
                return val
            scope = scope.parent
        raise UnresolvedNameError(constants.UNRESOLVED_NAME_TEMPLATE.format(name=name))

    def assign(self, name: str, value: Any) -> None:
        """Rebind the nearest existing *name*, or create it here."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope._bindings:
                if name in scope._read_only:
                    raise ReadOnlyBindingError(
                        constants.READ_ONLY_BINDING_TEMPLATE.format(name=name)
                    )
                scope._bindings[name] = value
                return
            scope = scope.parent
        self._bindings[name] = value

    def __repr__(self) -> str:
        return f"Scope({sorted(self._bindings)!r})"


class CallFrame:
    """What a member body sees: the receiver and its lexical scope."""

    def __init__(self, function_name: str, this: Any, scope: Scope):
        self.function_name = function_name
        self.this = this
        self.scope = scope

    def lookup(self, name: str) -> Any:
        return self.scope.lookup(name)

    def assign(self, name: str, value: Any) -> None:
        self.scope.assign(name, value)

    def __repr__(self) -> str:
        return f"CallFrame({self.function_name!r})"
