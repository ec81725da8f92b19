"""Error taxonomy for class elaboration and instantiation."""

from __future__ import annotations

from typing import Any

from . import constants


class DesugarError(Exception):
    """Base class for every error raised by the desugaring engine."""

    pass


class DescriptorError(DesugarError):
    """Raised when a class descriptor cannot be elaborated as given."""

    pass


class KeyEvaluationError(DesugarError):
    """Raised when a computed member key fails during elaboration."""

    def __init__(self, position: int, source: str, cause: BaseException):
        self.position = position
        self.source = source
        self.cause = cause
        super().__init__(
            f"Computed key #{position} [{source or '<expr>'}] failed: {cause}"
        )


class InvocationError(DesugarError, TypeError):
    """Raised when a Constructible is called without instantiation."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(
            constants.INVOCATION_ERROR_TEMPLATE.format(
                name=class_name or constants.ANONYMOUS_CLASS_NAME
            )
        )


class AccessorMissingError(DesugarError, TypeError):
    """Raised when the undeclared side of an accessor pair is used."""

    def __init__(self, key: Any, side: str):
        self.key = key
        self.side = side
        super().__init__(
            constants.ACCESSOR_MISSING_TEMPLATE.format(key=key, side=side)
        )


class PropertyMissingError(DesugarError, KeyError):
    """Raised when a key resolves neither on the instance nor its table."""

    pass


class NotCallableError(DesugarError, TypeError):
    """Raised when a resolved property is not invocable."""

    pass


class UnresolvedNameError(DesugarError, NameError):
    """Raised when a name does not resolve through a scope chain."""

    pass


class ReadOnlyBindingError(DesugarError, TypeError):
    """Raised on assignment to a read-only binding."""

    pass
