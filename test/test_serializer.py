"""Tests for loading schema documents into schema trees and back."""

import json
import os
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonschemaeval.errors import JsonSchemaError, SchemaLoadError
from jsonschemaeval.keywords_core import UnrecognizedKeyword
from jsonschemaeval.schema import JsonSchema, load_schema
from jsonschemaeval.serializer import SchemaSerializer

COMPLEX_DOCUMENT = {
    "$schema": "https://json-schema.org/draft/2019-09/schema",
    "$id": "http://example.com/person.json",
    "title": "Person",
    "type": "object",
    "$defs": {"name": {"type": "string", "minLength": 1}},
    "properties": {
        "name": {"$ref": "#/$defs/name"},
        "tags": {"type": "array", "items": [{"const": "first"}], "unevaluatedItems": {"type": "string"}},
        "age": {"type": "integer", "minimum": 0, "exclusiveMaximum": 200}
    },
    "patternProperties": {"^x-": True},
    "required": ["name"],
    "unevaluatedProperties": False,
    "x-vendor": {"any": ["thing", 1]}
}


class TestDeserialize(unittest.TestCase):
    """Test turning documents into schema trees."""

    def test_round_trip(self):
        serializer = SchemaSerializer()
        self.assertEqual(serializer.serialize(serializer.deserialize(COMPLEX_DOCUMENT)), COMPLEX_DOCUMENT)
        self.assertEqual(JsonSchema.from_json(COMPLEX_DOCUMENT).to_json(), COMPLEX_DOCUMENT)

    def test_complex_document_validates(self):
        schema = JsonSchema.from_json(COMPLEX_DOCUMENT)
        self.assertTrue(schema.validate({"name": "Ada", "tags": ["first", "x"], "x-note": 1}).is_valid)
        self.assertFalse(schema.validate({"name": "Ada", "extra": 1}).is_valid)
        self.assertFalse(schema.validate({"name": ""}).is_valid)

    def test_unrecognized_keywords_are_preserved(self):
        schema = JsonSchema.from_json({"x-custom": {"a": 1}, "type": "string"})
        keyword = schema.get("x-custom")
        self.assertIsInstance(keyword, UnrecognizedKeyword)
        self.assertEqual(keyword.value, {"a": 1})
        self.assertTrue(schema.validate("s").is_valid)

    def test_non_schema_value(self):
        with self.assertRaises(SchemaLoadError) as context:
            JsonSchema.from_json(42)
        self.assertEqual(context.exception.pointer, "#")

    def test_error_location(self):
        """Test that load errors name the offending location."""
        with self.assertRaises(SchemaLoadError) as context:
            JsonSchema.from_json({"properties": {"a": {"minLength": -1}}})
        self.assertEqual(context.exception.pointer, "#/properties/a/minLength")
        self.assertTrue(str(context.exception).endswith(" at #/properties/a/minLength"))

    def test_error_location_in_array(self):
        with self.assertRaises(SchemaLoadError) as context:
            JsonSchema.from_json({"anyOf": [{}, {"type": "strin"}]})
        self.assertEqual(context.exception.pointer, "#/anyOf/1/type")

    def test_invalid_values(self):
        for document in ({"pattern": "("}, {"patternProperties": {"[": {}}}, {"allOf": []},
                         {"required": "a"}, {"multipleOf": 0}, {"uniqueItems": "yes"},
                         {"properties": []}, {"$ref": 1}, {"items": 3}, {"maximum": "1"}):
            with self.assertRaises(JsonSchemaError, msg=json.dumps(document)):
                JsonSchema.from_json(document)

    def test_subschema_must_be_schema(self):
        with self.assertRaises(SchemaLoadError):
            JsonSchema.from_json({"not": "string"})


class TestLoadSchema(unittest.TestCase):

    def test_load_schema_file(self):
        with tempfile.NamedTemporaryFile('w', suffix='.json', delete=False, encoding='utf-8') as f:
            json.dump({"type": "integer"}, f)
            path = f.name
        try:
            schema = load_schema(path)
            self.assertTrue(schema.validate(1).is_valid)
            self.assertFalse(schema.validate("1").is_valid)
        finally:
            os.unlink(path)


if __name__ == '__main__':
    unittest.main()
