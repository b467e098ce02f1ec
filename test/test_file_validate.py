"""Tests for validating instance files."""

import json
import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonschemaeval.options import OutputFormat, ValidationOptions
from jsonschemaeval.validate import (FileValidationResult, read_instances, validate, validate_file,
                                     validate_instance, validate_json_instances)

SCHEMA = {
    "type": "object",
    "properties": {"id": {"type": "integer"}},
    "required": ["id"],
    "unevaluatedProperties": False
}


class FileTestCase(unittest.TestCase):
    """Creates a temporary directory with a schema file."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.schema_file = self.write("schema.json", json.dumps(SCHEMA))

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path


class TestValidateInstance(unittest.TestCase):
    """Test validating in-memory instances."""

    def test_schema_document(self):
        self.assertTrue(validate_instance({"id": 1}, SCHEMA).is_valid)
        self.assertFalse(validate_instance({"id": 1, "x": 2}, SCHEMA).is_valid)

    def test_boolean_schema_document(self):
        self.assertFalse(validate_instance(1, False).is_valid)

    def test_options_are_used(self):
        options = ValidationOptions(output_format=OutputFormat.FLAG)
        result = validate_instance({"id": "x"}, SCHEMA, options)
        self.assertFalse(result.is_valid)
        self.assertEqual(result.nested_results, [])


class TestValidateFile(FileTestCase):
    """Test validating JSON and JSON Lines files."""

    def test_single_document(self):
        instance_file = self.write("one.json", json.dumps({"id": 1}))
        results = validate_file(instance_file, self.schema_file)
        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].is_valid)
        self.assertEqual(results[0].instance_path, instance_file)

    def test_json_lines(self):
        instance_file = self.write("many.jsonl", '{"id": 1}\n\n{"id": "two"}\n{"id": 3}\n')
        results = validate_file(instance_file, self.schema_file)
        self.assertEqual([result.is_valid for result in results], [True, False, True])
        self.assertEqual(results[1].instance_path, f"{instance_file}:3")

    def test_top_level_array_is_one_instance(self):
        instance_file = self.write("array.json", json.dumps([{"id": 1}]))
        results = validate_file(instance_file, self.schema_file)
        self.assertEqual(len(results), 1)
        self.assertFalse(results[0].is_valid)

    def test_malformed_input(self):
        instance_file = self.write("bad.jsonl", '{"id": 1}\n{"id": \n')
        with self.assertRaises(ValueError):
            read_instances(instance_file)

    def test_result_text(self):
        instance_file = self.write("bad.json", json.dumps({"id": "x"}))
        result = validate_file(instance_file, self.schema_file)[0]
        self.assertIsInstance(result, FileValidationResult)
        self.assertTrue(str(result).startswith(f"✗ Invalid: {instance_file}: "))
        self.assertTrue(any(error.startswith("#/id: ") for error in result.errors))

    def test_counts_across_files(self):
        first = self.write("a.jsonl", '{"id": 1}\n{"id": 2}\n')
        second = self.write("b.json", json.dumps({"other": 1}))
        self.assertEqual(validate_json_instances([first, second], self.schema_file), (2, 1))


class TestValidateCommand(FileTestCase):
    """Test the function behind the `validate` command."""

    def test_valid_input_returns(self):
        instance_file = self.write("ok.json", json.dumps({"id": 1}))
        validate([instance_file], self.schema_file, quiet=True)

    def test_invalid_input_exits_with_error(self):
        instance_file = self.write("bad.json", json.dumps({"id": 1, "extra": True}))
        with self.assertRaises(SystemExit) as context:
            validate([instance_file], self.schema_file, quiet=True)
        self.assertEqual(context.exception.code, 1)

    def test_draft_option(self):
        """Test that an older draft disables `unevaluatedProperties`."""
        instance_file = self.write("extra.json", json.dumps({"id": 1, "extra": True}))
        validate([instance_file], self.schema_file, draft="07", quiet=True)

    def test_output_format(self):
        instance_file = self.write("ok.json", json.dumps({"id": 1}))
        validate([instance_file], self.schema_file, output_format="verbose")


if __name__ == '__main__':
    unittest.main()
