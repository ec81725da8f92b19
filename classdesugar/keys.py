"""Key Evaluator: resolves every member key once, in declaration order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from .descriptor import ComputedKey, Member, Symbol
from .errors import KeyEvaluationError
from .scope import Scope

logger = logging.getLogger(__name__)

KeyToken = Union[str, Symbol]


@dataclass(frozen=True)
class KeyedMember:
    """A member paired with its resolved key token."""

    member: Member
    key: KeyToken
    position: int


def to_property_key(value: Any) -> KeyToken:
    """Normalize an arbitrary value into a property key token."""
    if isinstance(value, (str, Symbol)):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _evaluate_one(member: Member, position: int, scope: Scope) -> KeyToken:
    key = member.key
    if not isinstance(key, ComputedKey):
        return key
    if key.expr is None:
        raise KeyEvaluationError(
            position, key.source, ValueError("computed key has no evaluable expression")
        )
    try:
        raw = key.expr(scope)
    except Exception as exc:
        raise KeyEvaluationError(position, key.source, exc) from exc
    token = to_property_key(raw)
    logger.debug("Computed key #%d %s → %r", position, key, token)
    return token


def evaluate_keys(members: list[Member], scope: Scope) -> list[KeyedMember]:
    """Resolve the key of every member, left to right.

    Each computed expression runs exactly once, in declaration order, so an
    earlier key's side effects are visible to later ones.  The first failure
    aborts the whole pass with ``KeyEvaluationError``.
    """
    return [
        KeyedMember(member=m, key=_evaluate_one(m, i, scope), position=i)
        for i, m in enumerate(members)
    ]
