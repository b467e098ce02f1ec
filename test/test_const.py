"""Tests for the `const` keyword."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonschemaeval.context import ValidationContext
from jsonschemaeval.errors import UninitializedKeywordError
from jsonschemaeval.keywords_assertion import ConstKeyword
from jsonschemaeval.options import ValidationOptions
from jsonschemaeval.schema import JsonSchema
from jsonschemaeval.serializer import SchemaSerializer


class TestConstValidation(unittest.TestCase):
    """Test `const` against matching and mismatching instances."""

    def test_matching_string(self):
        """Test that an equal string is valid."""
        schema = JsonSchema.from_json({"const": "x"})
        self.assertTrue(schema.validate("x").is_valid)

    def test_mismatching_string_message(self):
        """Test that the message names the expected and actual values."""
        schema = JsonSchema.from_json({"const": "x"})
        result = schema.validate("y")
        self.assertFalse(result.is_valid)
        errors = result.errors()
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].keyword, "const")
        self.assertIn('"x"', errors[0].error_message)
        self.assertIn('"y"', errors[0].error_message)
        self.assertEqual(errors[0].additional_info, {"expected": "x", "value": "y"})

    def test_deep_equality_ignores_key_order(self):
        """Test that object key order and numeric formatting do not matter."""
        schema = JsonSchema.from_json({"const": {"a": [1, 2.0], "b": None}})
        self.assertTrue(schema.validate({"b": None, "a": [1.0, 2]}).is_valid)

    def test_array_order_matters(self):
        """Test that arrays compare element by element."""
        schema = JsonSchema.from_json({"const": [1, 2]})
        self.assertFalse(schema.validate([2, 1]).is_valid)
        self.assertFalse(schema.validate([1, 2, 3]).is_valid)

    def test_boolean_is_not_number(self):
        """Test that true and 1 are different JSON values."""
        self.assertFalse(JsonSchema.from_json({"const": True}).validate(1).is_valid)
        self.assertFalse(JsonSchema.from_json({"const": 0}).validate(False).is_valid)
        self.assertTrue(JsonSchema.from_json({"const": 1}).validate(1.0).is_valid)

    def test_null_value(self):
        """Test that null is a legitimate value."""
        schema = JsonSchema.from_json({"const": None})
        self.assertTrue(schema.validate(None).is_valid)
        self.assertFalse(schema.validate(0).is_valid)
        self.assertFalse(schema.validate("").is_valid)

    def test_template_override(self):
        """Test that callers can replace the message template."""
        options = ValidationOptions(error_templates={"const": "wanted {{expected}}"})
        result = JsonSchema.from_json({"const": "x"}).validate("y", options)
        self.assertEqual(result.errors()[0].error_message, 'wanted "x"')

    def test_skipped_in_draft04(self):
        """Test that `const` is not evaluated under draft-04."""
        schema = JsonSchema.from_json({
            "$schema": "http://json-schema.org/draft-04/schema#",
            "const": "x"
        })
        result = schema.validate("y")
        self.assertTrue(result.is_valid)
        self.assertNotIn("const", [nested.keyword for nested in result.nested_results])


class TestConstKeyword(unittest.TestCase):
    """Test the keyword object itself."""

    def test_equal_values_are_equal(self):
        """Test that deep-equal values give equal keywords with equal hashes."""
        first = ConstKeyword({"a": 1, "b": [1, {"c": None}]})
        second = ConstKeyword({"b": [1.0, {"c": None}], "a": 1})
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))

    def test_unequal_values(self):
        """Test that different values give unequal keywords."""
        self.assertNotEqual(ConstKeyword(1), ConstKeyword(2))
        self.assertNotEqual(ConstKeyword(True), ConstKeyword(1))
        self.assertNotEqual(ConstKeyword("1"), ConstKeyword(1))

    def test_reflexive(self):
        keyword = ConstKeyword([1, 2])
        self.assertEqual(keyword, keyword)

    def test_unset_hash_is_zero(self):
        """Test that an uninitialized keyword hashes to zero."""
        self.assertEqual(hash(ConstKeyword()), 0)

    def test_uninitialized_keyword_raises(self):
        """Test that using a keyword without a value is a programming error."""
        context = ValidationContext("x", JsonSchema.TRUE)
        with self.assertRaises(UninitializedKeywordError):
            ConstKeyword().validate(context)

    def test_no_subschemas(self):
        """Test that `const` offers nothing to `$ref` lookups."""
        self.assertIsNone(ConstKeyword({"a": {}}).resolve_subschema(["a"], None))

    def test_round_trip(self):
        """Test serialization back to the document form."""
        document = {"const": {"nested": [1, "two", None]}}
        serializer = SchemaSerializer()
        self.assertEqual(serializer.serialize(serializer.deserialize(document)), document)


if __name__ == '__main__':
    unittest.main()
