"""End-to-end tests for desugar() + instantiate()."""

from __future__ import annotations

import pytest

from classdesugar.descriptor import (
    ClassDescriptor,
    ComputedKey,
    make_constructor,
    make_field,
    make_getter,
    make_method,
    make_setter,
)
from classdesugar.engine import Constructible, desugar
from classdesugar.errors import (
    AccessorMissingError,
    DescriptorError,
    InvocationError,
    UnresolvedNameError,
)
from classdesugar.instantiate import enumerate_keys, instantiate
from classdesugar.method_table import MethodTable
from classdesugar.scope import Scope


def _user_descriptor(**kwargs) -> ClassDescriptor:
    def ctor(frame, name):
        frame.this.set("name", name)

    return ClassDescriptor(
        name="User",
        constructor=make_constructor(ctor),
        members=[make_method("DigaOla", lambda frame: frame.this.get("name"))],
        **kwargs,
    )


def _guarded_name_descriptor() -> ClassDescriptor:
    def ctor(frame, name):
        frame.this.set("name", name)

    def get_name(frame):
        return frame.this.get("_name")

    def set_name(frame, value):
        if len(value) < 4:
            return
        frame.this.set("_name", value)

    return ClassDescriptor(
        name="User",
        constructor=make_constructor(ctor),
        members=[make_getter("name", get_name), make_setter("name", set_name)],
    )


class TestScenarios:
    def test_constructor_and_method(self):
        user_cls = desugar(_user_descriptor())
        user = instantiate(user_cls, "John")
        assert user.call("DigaOla") == "John"

    def test_validating_setter_keeps_prior_value(self):
        user_cls = desugar(_guarded_name_descriptor())
        user = instantiate(user_cls, "John")
        assert user.get("name") == "John"
        user.set("name", "")
        assert user.get("name") == "John"

    def test_short_name_in_constructor_is_rejected(self):
        user_cls = desugar(_guarded_name_descriptor())
        user = instantiate(user_cls, "Al")
        assert not user.has_own("_name")

    def test_computed_key_from_external_function(self):
        def make_name(scope):
            return "Diga" + "Ola"

        descriptor = ClassDescriptor(
            name="User",
            members=[
                make_method(ComputedKey(expr=make_name), lambda frame: "Olá"),
            ],
        )
        user_cls = desugar(descriptor)
        assert user_cls.method_table.own_keys() == ["constructor", "DigaOla"]
        assert instantiate(user_cls).call("DigaOla") == "Olá"

    def test_named_class_expression_sees_itself(self):
        outer = Scope({"unrelated": 1})
        descriptor = ClassDescriptor(
            name="MyClass",
            scope=outer,
            members=[make_method("whoAmI", lambda frame: frame.lookup("MyClass"))],
        )
        cls = desugar(descriptor, binding_name="User")
        assert instantiate(cls).call("whoAmI") is cls
        assert not outer.resolves("MyClass")
        with pytest.raises(UnresolvedNameError):
            outer.lookup("MyClass")

    def test_direct_call_names_the_class(self):
        user_cls = desugar(_user_descriptor())
        with pytest.raises(InvocationError, match="Class constructor User cannot be invoked"):
            user_cls("John")


class TestInvariants:
    def test_constructor_key_resolves_to_constructible(self):
        user_cls = desugar(_user_descriptor())
        assert user_cls.method_table.get("constructor") is user_cls
        assert instantiate(user_cls, "a").get("constructor") is user_cls

    def test_computed_field_key_cannot_be_constructor(self):
        descriptor = ClassDescriptor(
            name="C",
            members=[make_field(ComputedKey(expr=lambda s: "constructor"), lambda f: 42)],
        )
        with pytest.raises(DescriptorError, match="reserved key"):
            desugar(descriptor)

    def test_field_keys_stay_off_the_table(self):
        descriptor = ClassDescriptor(
            name="Counter",
            members=[
                make_field("count", lambda frame: 0),
                make_method("inc", lambda frame: frame.this.set("count", frame.this.get("count") + 1)),
            ],
        )
        cls = desugar(descriptor)
        counter = instantiate(cls)
        assert "count" not in cls.method_table
        assert "inc" not in counter.fields
        counter.call("inc")
        assert counter.fields == {"count": 1}

    def test_instances_share_table_not_fields(self):
        user_cls = desugar(_user_descriptor())
        a = instantiate(user_cls, "Ann")
        b = instantiate(user_cls, "Bob")
        assert a.method_table is b.method_table is user_cls.method_table
        assert a.fields is not b.fields
        a.set("name", "Changed")
        assert b.get("name") == "Bob"

    def test_table_is_not_enumerable_but_invocable(self):
        user_cls = desugar(_user_descriptor())
        assert list(user_cls.method_table) == []
        assert enumerate_keys(user_cls.method_table) == []
        assert "DigaOla" in user_cls.method_table

    def test_constructible_is_immutable(self):
        user_cls = desugar(_user_descriptor())
        with pytest.raises(AttributeError):
            user_cls.name = "Other"
        with pytest.raises(TypeError):
            user_cls.method_table["extra"] = lambda frame: None

    def test_result_types(self):
        user_cls = desugar(_user_descriptor())
        assert isinstance(user_cls, Constructible)
        assert isinstance(user_cls.method_table, MethodTable)


class TestElaborationHappensOnce:
    def test_keys_are_not_reevaluated_per_instance(self):
        calls: list[int] = []

        def key(scope):
            calls.append(1)
            return "m"

        cls = desugar(
            ClassDescriptor(members=[make_method(ComputedKey(expr=key), lambda f: 1)])
        )
        instantiate(cls)
        instantiate(cls)
        assert len(calls) == 1

    def test_anonymous_class_without_binding(self):
        cls = desugar(ClassDescriptor())
        assert cls.name == ""
        with pytest.raises(InvocationError, match="<anonymous>"):
            cls()

    def test_binding_name_is_display_only(self):
        cls = desugar(
            ClassDescriptor(members=[make_method("peek", lambda f: f.lookup("User"))]),
            binding_name="User",
        )
        assert cls.name == "User"
        assert cls.internal_name is None
        with pytest.raises(UnresolvedNameError):
            instantiate(cls).call("peek")


class TestAccessorThroughInstances:
    def test_getter_only_rejects_set(self):
        cls = desugar(
            ClassDescriptor(
                name="Circle",
                members=[
                    make_field("r", lambda f: 2),
                    make_getter("area", lambda f: 3 * f.this.get("r") ** 2),
                ],
            )
        )
        circle = instantiate(cls)
        assert circle.get("area") == 12
        with pytest.raises(AccessorMissingError):
            circle.set("area", 1)

    def test_setter_only_rejects_get(self):
        log: list = []
        cls = desugar(
            ClassDescriptor(members=[make_setter("sink", lambda f, v: log.append(v))])
        )
        obj = instantiate(cls)
        obj.set("sink", 5)
        assert log == [5]
        with pytest.raises(AccessorMissingError):
            obj.get("sink")
