"""JavaScript class syntax → ClassDescriptor, via tree-sitter.

This is the adapter on the parser side of the engine: it enumerates class
members, resolves literal keys and records computed keys and bodies as
source text.  The descriptors it produces can be lowered to IR; they are not
runnable because no JavaScript evaluator backs the bodies.
"""

from __future__ import annotations

import codecs
import logging
from typing import Any

from tree_sitter import Node

from .descriptor import ClassDescriptor, ComputedKey, Member, MemberKey, MemberKind
from .ir import SourceLocation
from .keys import to_property_key
from . import constants

logger = logging.getLogger(__name__)


class JavaScriptClassFrontend:
    """Collects every class declaration and class expression in a JS tree."""

    CLASS_NODE_TYPES: frozenset[str] = frozenset({"class_declaration", "class"})
    MODIFIER_TYPES: frozenset[str] = frozenset({"static", "async", "get", "set", "*"})

    NAME_FIELD: str = "name"
    BODY_FIELD: str = "body"
    PROPERTY_FIELD: str = "property"
    VALUE_FIELD: str = "value"

    def __init__(self):
        self._source: bytes = b""
        self._descriptors: list[ClassDescriptor] = []

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _source_loc(self, node) -> SourceLocation:
        s, e = node.start_point, node.end_point
        return SourceLocation(
            start_line=s[0] + 1,
            start_col=s[1],
            end_line=e[0] + 1,
            end_col=e[1],
        )

    def _modifiers(self, node: Node) -> set[str]:
        return {c.type for c in node.children if c.type in self.MODIFIER_TYPES}

    # ── entry point ──────────────────────────────────────────────

    def describe(self, tree, source: bytes) -> list[ClassDescriptor]:
        self._source = source
        self._descriptors = []
        self._visit(tree.root_node)
        return self._descriptors

    def _visit(self, node: Node):
        if node.type in self.CLASS_NODE_TYPES:
            self._descriptors.append(self._describe_class(node))
        for child in node.children:
            self._visit(child)

    # ── classes ──────────────────────────────────────────────────

    def _describe_class(self, node: Node) -> ClassDescriptor:
        name_node = node.child_by_field_name(self.NAME_FIELD)
        body_node = node.child_by_field_name(self.BODY_FIELD)
        name = self._node_text(name_node) if name_node else None
        loc = self._source_loc(node)

        if any(c.type == "class_heritage" for c in node.children):
            logger.warning("Ignoring extends clause of class %s at %s", name, loc)

        members: list[Member] = []
        if body_node:
            for child in body_node.children:
                member = self._describe_member(child)
                if member is not None:
                    members.append(member)

        logger.info(
            "Described class %s (%d members) at %s",
            name or constants.ANONYMOUS_CLASS_NAME,
            len(members),
            loc,
        )
        return ClassDescriptor(name=name, members=members, location=loc)

    def _describe_member(self, node: Node) -> Member | None:
        if node.type == "method_definition":
            return self._describe_method(node)
        if node.type == "field_definition":
            return self._describe_field(node)
        if node.type == "class_static_block":
            logger.warning("Skipping static block at %s", self._source_loc(node))
        return None

    def _describe_method(self, node: Node) -> Member | None:
        modifiers = self._modifiers(node)
        loc = self._source_loc(node)
        if "static" in modifiers:
            logger.warning("Skipping static method at %s", loc)
            return None
        key = self._member_key(node.child_by_field_name(self.NAME_FIELD))
        if key is None:
            logger.warning("Skipping private method at %s", loc)
            return None

        if "get" in modifiers:
            kind = MemberKind.GETTER
        elif "set" in modifiers:
            kind = MemberKind.SETTER
        elif key == constants.CONSTRUCTOR_KEY:
            kind = MemberKind.CONSTRUCTOR
        else:
            kind = MemberKind.METHOD
        return Member(
            kind=kind,
            key=key,
            is_generator="*" in modifiers,
            body=self._node_text(node),
            location=loc,
        )

    def _describe_field(self, node: Node) -> Member | None:
        loc = self._source_loc(node)
        if "static" in self._modifiers(node):
            logger.warning("Skipping static field at %s", loc)
            return None
        key = self._member_key(node.child_by_field_name(self.PROPERTY_FIELD))
        if key is None:
            logger.warning("Skipping private field at %s", loc)
            return None
        value_node = node.child_by_field_name(self.VALUE_FIELD)
        return Member(
            kind=MemberKind.FIELD,
            key=key,
            body=self._node_text(value_node) if value_node else None,
            location=loc,
        )

    # ── keys ─────────────────────────────────────────────────────

    def _member_key(self, node: Node | None) -> MemberKey | None:
        """Literal key text, a ComputedKey, or None for private names."""
        if node is None or node.type == "private_property_identifier":
            return None
        text = self._node_text(node)
        if node.type == "computed_property_name":
            inner = [c for c in node.children if c.is_named]
            source = self._node_text(inner[0]) if inner else text.strip("[]")
            return ComputedKey(source=source)
        if node.type == "string":
            return self._string_key(node)
        if node.type == "number":
            return to_property_key(_parse_number(text))
        return text

    def _string_key(self, node: Node) -> str:
        """String literal value with its escape sequences decoded."""
        parts: list[str] = []
        for child in node.named_children:
            piece = self._node_text(child)
            parts.append(
                _decode_escape(piece) if child.type == "escape_sequence" else piece
            )
        return "".join(parts)


_ESCAPE_LEADS = frozenset("uxnrtbfv0'\"\\")


def _decode_escape(seq: str) -> str:
    body = seq[1:]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("\r", "\n", "\u2028", "\u2029"):
        return ""  # line continuation
    if body[:1] in _ESCAPE_LEADS:
        return codecs.decode(seq, "unicode_escape")
    return body


def _parse_number(text: str) -> Any:
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        return int(cleaned[:-1], 0)
    try:
        return int(cleaned, 0)
    except ValueError:
        return float(cleaned)
