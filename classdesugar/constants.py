"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

CONSTRUCTOR_KEY = "constructor"

INVOCATION_ERROR_TEMPLATE = (
    "Class constructor {name} cannot be invoked without instantiation"
)
ACCESSOR_MISSING_TEMPLATE = "Accessor {key} has no {side}"
TDZ_ERROR_TEMPLATE = "Cannot access '{name}' before initialization"
UNRESOLVED_NAME_TEMPLATE = "{name} is not defined"
READ_ONLY_BINDING_TEMPLATE = "Assignment to constant binding '{name}'"

ANONYMOUS_CLASS_NAME = "<anonymous>"

GETTER_SIDE = "getter"
SETTER_SIDE = "setter"

CLASS_LABEL_PREFIX = "class_"
END_CLASS_LABEL_PREFIX = "end_class_"
KEY_REG_PREFIX = "%"

DEFAULT_LANGUAGE = "javascript"
SUPPORTED_SOURCE_LANGUAGES: tuple[str, ...] = ("javascript",)
