"""Tests for the assertion keywords."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonschemaeval.keywords_assertion import _CountKeyword, _NumberValueKeyword
from jsonschemaeval.schema import JsonSchema

DRAFT04 = "http://json-schema.org/draft-04/schema#"


def is_valid(document, instance):
    return JsonSchema.from_json(document).validate(instance).is_valid


class TestTypeKeyword(unittest.TestCase):

    def test_single_type(self):
        self.assertTrue(is_valid({"type": "string"}, "x"))
        self.assertFalse(is_valid({"type": "string"}, 1))
        self.assertFalse(is_valid({"type": "object"}, []))
        self.assertTrue(is_valid({"type": "null"}, None))

    def test_type_list(self):
        self.assertTrue(is_valid({"type": ["string", "null"]}, None))
        self.assertFalse(is_valid({"type": ["string", "null"]}, 0))

    def test_boolean_is_not_integer(self):
        self.assertFalse(is_valid({"type": "integer"}, True))
        self.assertFalse(is_valid({"type": "number"}, False))
        self.assertTrue(is_valid({"type": "boolean"}, False))

    def test_integer_is_number(self):
        self.assertTrue(is_valid({"type": "number"}, 3))

    def test_integral_float_is_integer(self):
        """Test that 1.0 counts as an integer from draft-06 onwards."""
        self.assertTrue(is_valid({"type": "integer"}, 1.0))
        self.assertFalse(is_valid({"$schema": DRAFT04, "type": "integer"}, 1.0))
        self.assertFalse(is_valid({"type": "integer"}, 1.5))

    def test_message(self):
        result = JsonSchema.from_json({"type": "string"}).validate(1)
        self.assertEqual(result.errors()[0].error_message, 'Value is "integer" but should be "string"')


class TestEnumKeyword(unittest.TestCase):

    def test_members(self):
        schema = {"enum": [1, "a", None, {"k": [1]}]}
        self.assertTrue(is_valid(schema, 1.0))
        self.assertTrue(is_valid(schema, None))
        self.assertTrue(is_valid(schema, {"k": [1]}))
        self.assertFalse(is_valid(schema, True))
        self.assertFalse(is_valid(schema, "b"))


class TestNumericKeywords(unittest.TestCase):

    def test_bounds(self):
        self.assertTrue(is_valid({"maximum": 3}, 3))
        self.assertFalse(is_valid({"maximum": 3}, 3.5))
        self.assertFalse(is_valid({"exclusiveMaximum": 3}, 3))
        self.assertTrue(is_valid({"minimum": 1.5}, 1.5))
        self.assertFalse(is_valid({"exclusiveMinimum": 1.5}, 1.5))

    def test_non_numbers_ignored(self):
        self.assertTrue(is_valid({"maximum": 3}, "12345"))
        self.assertTrue(is_valid({"minimum": 3}, True))

    def test_multiple_of(self):
        self.assertTrue(is_valid({"multipleOf": 2}, 10))
        self.assertFalse(is_valid({"multipleOf": 2}, 7))
        self.assertTrue(is_valid({"multipleOf": 0.01}, 19.99))
        self.assertTrue(is_valid({"multipleOf": 0.0001}, 0.0075))
        self.assertFalse(is_valid({"multipleOf": 0.1}, 0.15))

    def test_bound_message(self):
        result = JsonSchema.from_json({"minimum": 3}).validate(1)
        self.assertEqual(result.errors()[0].error_message, "Value 1 should be at least 3")

    def test_bases_require_a_check(self):
        """Test that a bound keyword without a `check` cannot be created."""
        class NoCheck(_NumberValueKeyword):
            name = "noCheck"

        class NoSizeCheck(_CountKeyword):
            name = "noSizeCheck"

        with self.assertRaises(TypeError):
            NoCheck(1)
        with self.assertRaises(TypeError):
            NoSizeCheck(1)


class TestDraft04ExclusiveBounds(unittest.TestCase):
    """Test the boolean `exclusiveMaximum` and `exclusiveMinimum` of draft-04."""

    def test_exclusive_maximum_modifier(self):
        schema = {"$schema": DRAFT04, "maximum": 5, "exclusiveMaximum": True}
        self.assertFalse(is_valid(schema, 5))
        self.assertTrue(is_valid(schema, 4.9))
        self.assertTrue(is_valid({"$schema": DRAFT04, "maximum": 5, "exclusiveMaximum": False}, 5))
        self.assertTrue(is_valid({"$schema": DRAFT04, "maximum": 5}, 5))

    def test_exclusive_minimum_modifier(self):
        schema = {"$schema": DRAFT04, "minimum": 2, "exclusiveMinimum": True}
        self.assertFalse(is_valid(schema, 2))
        self.assertTrue(is_valid(schema, 2.1))
        self.assertFalse(is_valid(schema, 1))

    def test_modifier_alone_passes(self):
        self.assertTrue(is_valid({"$schema": DRAFT04, "exclusiveMaximum": True}, 100))

    def test_numeric_form_ignored_in_draft04(self):
        self.assertTrue(is_valid({"$schema": DRAFT04, "exclusiveMaximum": 3}, 5))

    def test_boolean_form_ignored_in_later_drafts(self):
        self.assertTrue(is_valid({"exclusiveMaximum": True}, 100))
        self.assertTrue(is_valid({"maximum": 5, "exclusiveMaximum": True}, 5))

    def test_exclusive_message(self):
        schema = JsonSchema.from_json({"$schema": DRAFT04, "maximum": 5, "exclusiveMaximum": True})
        result = schema.validate(5)
        self.assertEqual(result.errors()[0].error_message, "Value 5 should be less than 5")


class TestSizeKeywords(unittest.TestCase):

    def test_string_length_counts_code_points(self):
        self.assertTrue(is_valid({"maxLength": 2}, "éé"))
        self.assertFalse(is_valid({"minLength": 3}, "ab"))
        self.assertTrue(is_valid({"minLength": 3}, 12))

    def test_items_count(self):
        self.assertTrue(is_valid({"maxItems": 2}, [1, 2]))
        self.assertFalse(is_valid({"minItems": 1}, []))
        self.assertTrue(is_valid({"minItems": 1}, "not an array"))

    def test_properties_count(self):
        self.assertFalse(is_valid({"maxProperties": 1}, {"a": 1, "b": 2}))
        self.assertTrue(is_valid({"minProperties": 1}, {"a": 1}))


class TestPatternKeyword(unittest.TestCase):

    def test_search_is_unanchored(self):
        self.assertTrue(is_valid({"pattern": "b"}, "abc"))
        self.assertFalse(is_valid({"pattern": "^b"}, "abc"))
        self.assertTrue(is_valid({"pattern": "^b"}, 7))


class TestUniqueItemsKeyword(unittest.TestCase):

    def test_duplicates(self):
        self.assertFalse(is_valid({"uniqueItems": True}, [1, 1.0]))
        self.assertFalse(is_valid({"uniqueItems": True}, [{"a": 1, "b": 2}, {"b": 2, "a": 1}]))
        self.assertTrue(is_valid({"uniqueItems": True}, [1, True]))
        self.assertTrue(is_valid({"uniqueItems": True}, [[1], [True]]))
        self.assertTrue(is_valid({"uniqueItems": False}, [1, 1]))

    def test_duplicate_indices_reported(self):
        result = JsonSchema.from_json({"uniqueItems": True}).validate(["a", "b", "a"])
        self.assertEqual(result.errors()[0].additional_info, {"duplicates": [[0, 2]]})


class TestRequiredKeyword(unittest.TestCase):

    def test_missing_properties(self):
        schema = JsonSchema.from_json({"required": ["a", "b"]})
        self.assertTrue(schema.validate({"a": 1, "b": None}).is_valid)
        result = schema.validate({"a": 1})
        self.assertFalse(result.is_valid)
        self.assertEqual(result.errors()[0].error_message, 'Required properties ["b"] were not found')
        self.assertTrue(schema.validate(["a"]).is_valid)


if __name__ == '__main__':
    unittest.main()
