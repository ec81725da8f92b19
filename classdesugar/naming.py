"""Name Binding Resolver: the internal name of a class expression.

The internal name lives in a dedicated class scope that sits between the
enclosing scope and the member bodies.  It is declared before any computed
key runs (so a key expression that names it fails rather than seeing an
outer binding of the same name), and initialized only once the Constructible
exists.  The enclosing scope is never written to.
"""

from __future__ import annotations

import logging
from typing import Any

from .descriptor import ClassDescriptor
from .scope import Scope
from . import constants

logger = logging.getLogger(__name__)


def class_scope_for(descriptor: ClassDescriptor) -> Scope:
    scope = Scope(parent=descriptor.scope)
    if descriptor.name:
        scope.declare_read_only(descriptor.name)
    return scope


def bind_internal_name(scope: Scope, name: str | None, constructible: Any) -> None:
    if not name:
        return
    scope.initialize(name, constructible)
    logger.debug("Bound internal name %s", name)


def display_name(descriptor: ClassDescriptor, binding_name: str | None = None) -> str:
    """Internal name first, then the outer binding, else empty."""
    return descriptor.name or binding_name or ""


def describe(name: str) -> str:
    return name or constants.ANONYMOUS_CLASS_NAME
