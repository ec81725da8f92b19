"""Tests for JavaScriptClassFrontend — tree-sitter JS classes to descriptors."""

from __future__ import annotations

import logging

from tree_sitter_language_pack import get_parser

from classdesugar.descriptor import ClassDescriptor, ComputedKey, MemberKind
from classdesugar.frontend import JavaScriptClassFrontend

SOURCE = """\
class User {
  constructor(name) { this.name = name; }
  sayHi() { return this.name; }
  get upper() { return this.name.toUpperCase(); }
  set upper(v) { this.name = v; }
  *items() { yield 1; }
  ['say' + 'Bye']() { return 'bye'; }
  'quoted key'() {}
  42() {}
  id = 0;
  label;
}
"""


def _describe(source: str) -> list[ClassDescriptor]:
    parser = get_parser("javascript")
    tree = parser.parse(source.encode("utf-8"))
    return JavaScriptClassFrontend().describe(tree, source.encode("utf-8"))


def _kinds_and_keys(descriptor: ClassDescriptor) -> list[tuple[MemberKind, object]]:
    return [(m.kind, m.key) for m in descriptor.members]


class TestClassDeclaration:
    def test_single_class(self):
        descriptors = _describe(SOURCE)
        assert len(descriptors) == 1
        assert descriptors[0].name == "User"

    def test_constructor_is_hoisted(self):
        user = _describe(SOURCE)[0]
        assert user.constructor is not None
        assert user.constructor.kind == MemberKind.CONSTRUCTOR
        assert "this.name = name" in user.constructor.body

    def test_members_in_declaration_order(self):
        user = _describe(SOURCE)[0]
        kinds_keys = _kinds_and_keys(user)
        assert kinds_keys[:4] == [
            (MemberKind.METHOD, "sayHi"),
            (MemberKind.GETTER, "upper"),
            (MemberKind.SETTER, "upper"),
            (MemberKind.METHOD, "items"),
        ]
        assert kinds_keys[-4:] == [
            (MemberKind.METHOD, "quoted key"),
            (MemberKind.METHOD, "42"),
            (MemberKind.FIELD, "id"),
            (MemberKind.FIELD, "label"),
        ]

    def test_generator_flag(self):
        user = _describe(SOURCE)[0]
        items = next(m for m in user.members if m.key == "items")
        assert items.is_generator
        assert not user.members[0].is_generator

    def test_computed_key_keeps_source(self):
        user = _describe(SOURCE)[0]
        computed = [m for m in user.members if isinstance(m.key, ComputedKey)]
        assert len(computed) == 1
        assert computed[0].key.source == "'say' + 'Bye'"
        assert computed[0].key.expr is None

    def test_field_bodies(self):
        user = _describe(SOURCE)[0]
        fields = {m.key: m.body for m in user.members if m.kind == MemberKind.FIELD}
        assert fields == {"id": "0", "label": None}

    def test_locations(self):
        user = _describe(SOURCE)[0]
        assert user.location.start_line == 1
        assert user.members[0].location.start_line == 3


class TestClassExpressions:
    def test_named_and_anonymous_expressions(self):
        descriptors = _describe(
            "const A = class Inner { m() {} };\nconst B = class { n() {} };\n"
        )
        assert [d.name for d in descriptors] == ["Inner", None]

    def test_nested_class_is_described_after_outer(self):
        descriptors = _describe(
            "class Outer { make() { return class Nested { x = 1; }; } }\n"
        )
        assert [d.name for d in descriptors] == ["Outer", "Nested"]

    def test_no_classes(self):
        assert _describe("let x = 1;\n") == []


class TestSkippedConstructs:
    def test_static_and_private_members_are_skipped(self, caplog):
        source = """\
class Counter {
  static count = 0;
  static make() { return new Counter(); }
  #secret = 1;
  #hidden() {}
  visible() {}
}
"""
        with caplog.at_level(logging.WARNING):
            counter = _describe(source)[0]
        assert _kinds_and_keys(counter) == [(MemberKind.METHOD, "visible")]
        assert "static" in caplog.text
        assert "private" in caplog.text

    def test_extends_is_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            child = _describe("class Child extends Base { m() {} }\n")[0]
        assert child.name == "Child"
        assert "extends" in caplog.text


class TestLiteralKeys:
    def test_string_keys_decode_escapes(self):
        source = r"""class K {
  'a\u0062'() {}
  "tab\tx"() {}
  'q\'s'() {}
  'u\u{63}'() {}
  ''() {}
}
"""
        keys = [m.key for m in _describe(source)[0].members]
        assert keys == ["ab", "tab\tx", "q's", "uc", ""]

    def test_numeric_and_bigint_keys(self):
        source = "class N { 1n() {} 0x10() {} 1.5() {} 2.0() {} 0x1Fn() {} }\n"
        keys = [m.key for m in _describe(source)[0].members]
        assert keys == ["1", "16", "1.5", "2", "31"]
