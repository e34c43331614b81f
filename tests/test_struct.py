"""
Tests for tern struct types.
"""

from types import MappingProxyType

import pytest
from pydantic import ValidationError

from tern import Int, ListOf, Option, String, Struct, StructDef, StructPolicy


@pytest.fixture
def point() -> StructDef:
    return Struct("point", {"x": Int, "y": Int})


class TestStruct:
    def test_valid(self):
        assert Struct("S", {"x": Int}).verify({"x": 1}) is None

    def test_name(self, point):
        assert point.name == "point"

    def test_not_a_mapping(self, point):
        assert point.verify([1, 2]) == (
            "in struct 'point': Expected type 'point' but value '[1, 2]' "
            "is of type 'list'"
        )

    def test_missing_member(self):
        assert Struct("S", {"x": Int}).verify({}) == "in struct 'S': missing member 'x'"

    def test_member_error(self, point):
        assert point.verify({"x": 1, "y": "2"}) == (
            "in struct 'point': in member 'y': "
            "Expected type 'int' but value '\"2\"' is of type 'str'"
        )

    def test_first_member_in_declaration_order(self):
        s = Struct("S", {"b": Int, "a": Int})
        assert s.verify({"a": "x", "b": "y"}) == (
            "in struct 'S': in member 'b': "
            "Expected type 'int' but value '\"y\"' is of type 'str'"
        )

    def test_missing_before_later_member_error(self, point):
        assert point.verify({"y": "bad"}) == "in struct 'point': missing member 'x'"

    def test_unknown_allowed_by_default(self):
        assert Struct("S", {"x": Int}).verify({"x": 1, "y": 2}) is None

    def test_present_none_is_verified(self):
        s = Struct("S", {"x": Option(Int), "y": Int})
        assert s.verify({"x": None, "y": 1}) is None
        assert s.verify({"x": 1, "y": None}) is not None

    def test_nested(self):
        inner = Struct("inner", {"n": ListOf(Int)})
        outer = Struct("outer", {"inner": inner})
        assert outer.verify({"inner": {"n": [1, None]}}) == (
            "in struct 'outer': in member 'inner': in struct 'inner': "
            "in member 'n': in listOf<int> element: "
            "Expected type 'int' but value 'None' is of type 'NoneType'"
        )

    def test_empty_struct(self):
        s = Struct("empty", {})
        assert s.verify({}) is None
        assert s.verify({"a": 1}) is None

    def test_members_are_read_only(self, point):
        assert isinstance(point.members, MappingProxyType)
        assert list(point.members) == ["x", "y"]

    def test_members_copied(self):
        members = {"x": Int}
        s = Struct("S", members)
        members["y"] = Int
        assert s.verify({"x": 1}) is None

    def test_default_policy(self, point):
        assert point.policy == StructPolicy(total=True, unknown=True, extra=None)

    def test_idempotent(self, point):
        value = {"x": 1}
        assert point.verify(value) == point.verify(value)
        assert value == {"x": 1}


class TestStructConstruction:
    def test_members_not_mapping(self):
        with pytest.raises(TypeError):
            Struct("S", [("x", Int)])

    def test_member_not_typedef(self):
        with pytest.raises(TypeError):
            Struct("S", {"x": int})

    def test_member_name_not_string(self):
        with pytest.raises(TypeError):
            Struct("S", {1: Int})

    def test_empty_name(self):
        with pytest.raises(ValueError):
            Struct("", {"x": Int})

    def test_policy_as_arguments(self):
        s = Struct("S", {"x": Int}, total=False, unknown=False)
        assert s.verify({}) is None
        assert s.verify({"z": 1}) is not None


class TestOverride:
    def test_total_false(self):
        s = Struct("S", {"x": Int}).override(total=False)
        assert s.verify({}) is None
        assert s.verify({"x": "1"}) is not None

    def test_unknown_false(self):
        s = Struct("S", {"x": Int}).override(unknown=False)
        error = s.verify({"x": 1, "y": 2})
        assert error == (
            "in struct 'S': keys ['y'] are unrecognized, expected keys are ['x']"
        )

    def test_unknown_lists_all_keys(self, point):
        s = point.override(unknown=False)
        assert s.verify({"x": 1, "y": 2, "b": 3, "a": 4}) == (
            "in struct 'point': keys ['b', 'a'] are unrecognized, "
            "expected keys are ['x', 'y']"
        )

    def test_member_errors_mask_unknown(self, point):
        s = point.override(unknown=False)
        assert s.verify({"x": "1", "z": 0}) == (
            "in struct 'point': in member 'x': "
            "Expected type 'int' but value '\"1\"' is of type 'str'"
        )

    def test_extra(self, point):
        s = point.override(
            extra=lambda v: "VERBOTEN" if v["x"] + v["y"] == 2 else None
        )
        assert s.verify({"x": 0, "y": 1}) is None
        assert s.verify({"x": 1, "y": 1}) == "in struct 'point': VERBOTEN"

    def test_extra_runs_last(self, point):
        calls = []

        def extra(value):
            calls.append(value)
            return "extra"

        s = point.override(unknown=False, extra=extra)
        assert s.verify({"x": 1, "y": 2, "z": 3}).startswith(
            "in struct 'point': keys"
        )
        assert s.verify({"x": "1", "y": 2}).startswith("in struct 'point': in member")
        assert calls == []
        assert s.verify({"x": 1, "y": 2}) == "in struct 'point': extra"
        assert calls == [{"x": 1, "y": 2}]

    def test_extra_skipped_on_shape_error(self, point):
        s = point.override(extra=lambda v: "never")
        assert "Expected type 'point'" in s.verify("not a struct")

    def test_original_untouched(self, point):
        partial = point.override(total=False)
        assert partial is not point
        assert point.verify({}) is not None
        assert point.policy.total is True
        assert partial.members is point.members

    def test_overrides_compose(self, point):
        s = point.override(total=False).override(unknown=False)
        assert s.policy.total is False
        assert s.policy.unknown is False
        assert s.verify({}) is None
        assert s.verify({"z": 0}) is not None

    def test_override_can_restore(self, point):
        s = point.override(total=False).override(total=True)
        assert s.verify({}) == "in struct 'point': missing member 'x'"

    def test_unknown_knob(self, point):
        with pytest.raises(ValidationError):
            point.override(totl=False)

    def test_knob_must_be_bool(self, point):
        with pytest.raises(ValidationError):
            point.override(total="no")
        with pytest.raises(ValidationError):
            point.override(unknown=0)

    def test_extra_must_be_callable(self, point):
        with pytest.raises(ValidationError):
            point.override(extra="VERBOTEN")

    def test_extra_must_take_one_argument(self, point):
        with pytest.raises(ValidationError):
            point.override(extra=lambda: None)
        with pytest.raises(ValidationError):
            point.override(extra=lambda value, other: None)
        with pytest.raises(ValidationError):
            Struct("S", {"x": Int}, extra=lambda: None)

    def test_extra_with_optional_args(self, point):
        s = point.override(extra=lambda value, strict=False: None)
        assert s.verify({"x": 1, "y": 2}) is None

    def test_nested_struct_policy_independent(self):
        inner = Struct("inner", {"a": String}).override(unknown=False)
        outer = Struct("outer", {"inner": inner}).override(total=False)
        assert outer.verify({}) is None
        assert outer.verify({"inner": {"a": "x", "b": "y"}}) == (
            "in struct 'outer': in member 'inner': in struct 'inner': "
            "keys ['b'] are unrecognized, expected keys are ['a']"
        )
