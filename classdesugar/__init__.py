"""Class desugaring engine package."""

from .engine import Constructible, desugar  # noqa: F401
from .instantiate import (  # noqa: F401
    Instance,
    instantiate,
    is_instance_of,
    enumerate_keys,
    copy_properties,
)
from .descriptor import (  # noqa: F401
    ClassDescriptor,
    ComputedKey,
    Member,
    MemberKind,
    Symbol,
)
from .api import describe_source, lower_source, dump_source_ir  # noqa: F401
