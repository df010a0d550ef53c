"""
Tests for rule parsing and schema compilation.
"""

import pytest

from fieldguard.core.errors import (
    InvalidFieldNameError,
    InvalidRangeOrder,
    RangeTypeError,
    SchemaError,
    UnknownFilterError,
    UnknownOptionError,
    UnknownTypeError,
)
from fieldguard.validation import FieldRule, Schema


class TestFieldRule:
    """Tests for FieldRule.parse."""

    def test_defaults(self):
        rule = FieldRule.parse({})
        assert rule.type == "string"
        assert rule.required is True
        assert rule.multiple is False
        assert rule.filter == ()
        assert rule.requires == ()

    def test_unknown_key_is_schema_fault(self):
        with pytest.raises(UnknownOptionError, match="Unknown options: requierd"):
            FieldRule.parse({"requierd": True}, field="age")

    def test_scalar_lists_are_wrapped(self):
        rule = FieldRule.parse({"filter": "trim", "requires": "email"})
        assert rule.filter == ("trim",)
        assert rule.requires == ("email",)

    def test_numeric_specs_read_as_text(self):
        rule = FieldRule.parse({"type": "int", "range": 11, "length": 3})
        assert rule.range == "11"
        assert rule.length == "3"

    def test_empty_filter_is_schema_fault(self):
        with pytest.raises(SchemaError, match="Empty filter"):
            FieldRule.parse({"filter": []}, field="name")

    def test_non_mapping_is_schema_fault(self):
        with pytest.raises(SchemaError, match="must be a mapping"):
            FieldRule.parse("int", field="age")

    def test_rule_instance_passes_through(self):
        rule = FieldRule(type="int")
        assert FieldRule.parse(rule) is rule


class TestRuleCheck:
    """Rules are checked against the registries before any input is read."""

    def test_unknown_type(self, types, filters):
        with pytest.raises(UnknownTypeError):
            FieldRule.parse({"type": "nope"}).check(types, filters)

    def test_unknown_filter(self, types, filters):
        with pytest.raises(UnknownFilterError):
            FieldRule.parse({"filter": ["trim", "nope"]}).check(types, filters)

    def test_range_requires_numeric_type(self, types, filters):
        with pytest.raises(RangeTypeError):
            FieldRule.parse({"type": "string", "range": "1-5"}).check(types, filters)

    def test_bad_range(self, types, filters):
        with pytest.raises(InvalidRangeOrder):
            FieldRule.parse({"type": "int", "range": "10-5"}).check(types, filters)


class TestSchemaCompile:
    """Tests for Schema.compile."""

    def test_splits_literals_and_patterns(self, types, filters):
        schema = Schema.compile({
            "age": {"type": "int"},
            "/^tag_\\d+$/": {"type": "int"},
            "#^x#": {},
        }, types, filters)
        assert [name for name, _ in schema.literals] == ["age"]
        assert [entry.key for entry in schema.patterns] == ["/^tag_\\d+$/", "#^x#"]
        assert schema.patterns[0].pattern.search("tag_12")
        assert len(schema) == 3

    def test_disabled_rules_are_dropped_unchecked(self, types, filters):
        schema = Schema.compile({"old": {"type": "nope", "disabled": True}}, types, filters)
        assert len(schema) == 0

    def test_non_text_field_name(self, types, filters):
        with pytest.raises(InvalidFieldNameError):
            Schema.compile({5: {}}, types, filters)

    def test_compiled_schema_passes_through(self, types, filters):
        schema = Schema.compile({"age": {}}, types, filters)
        assert Schema.compile(schema, types, filters) is schema
