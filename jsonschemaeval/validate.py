"""Validates JSON instance files against JSON Schema documents.

This module wraps the engine for whole files: a single JSON document or
JSON Lines, one result per instance, plus the entry point used by the
`validate` command.
"""

import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple, Union

from jsonschemaeval.options import OutputFormat, ValidationOptions
from jsonschemaeval.results import ValidationResult
from jsonschemaeval.schema import JsonSchema, load_schema
from jsonschemaeval.versions import DRAFT_NAMES

logger = logging.getLogger(__name__)


class FileValidationResult:
    """Result of validating one instance read from a file."""

    def __init__(self, result: ValidationResult, instance_path: Optional[str] = None):
        self.result = result
        self.instance_path = instance_path

    @property
    def is_valid(self) -> bool:
        return self.result.is_valid

    @property
    def errors(self) -> List[str]:
        return [f"{error.instance_location}: {error.error_message}" for error in self.result.errors()]

    def __str__(self) -> str:
        if self.is_valid:
            return "✓ Valid" + (f": {self.instance_path}" if self.instance_path else "")
        prefix = f"{self.instance_path}: " if self.instance_path else ""
        return f"✗ Invalid: {prefix}" + "; ".join(self.errors)

    def __repr__(self) -> str:
        return f"FileValidationResult(is_valid={self.is_valid}, errors={self.errors})"


def validate_instance(
    instance: Any,
    schema: Union[JsonSchema, Dict[str, Any], bool],
    options: Optional[ValidationOptions] = None
) -> ValidationResult:
    """Validates a JSON instance against a schema.

    Args:
        instance: The JSON value to validate
        schema: A `JsonSchema` or a schema document
        options: Options for this validation

    Returns:
        The validation result tree
    """
    if not isinstance(schema, JsonSchema):
        schema = JsonSchema.from_json(schema)
    return schema.validate(instance, options)


def read_instances(instance_file: str) -> List[Tuple[Any, str]]:
    """Reads a JSON document, or JSON Lines, as a list of (instance, path) pairs."""
    with open(instance_file, 'r', encoding='utf-8') as f:
        content = f.read().strip()

    try:
        return [(json.loads(content), instance_file)]
    except json.JSONDecodeError:
        pass

    instances = []
    for i, line in enumerate(content.split('\n')):
        line = line.strip()
        if not line:
            continue
        try:
            instances.append((json.loads(line), f"{instance_file}:{i+1}"))
        except json.JSONDecodeError as e:
            raise ValueError(f"{instance_file}:{i+1} is neither JSON nor JSON Lines: {e}") from e
    return instances


def validate_file(
    instance_file: str,
    schema_file: str,
    options: Optional[ValidationOptions] = None
) -> List[FileValidationResult]:
    """Validates JSON instance file(s) against a schema file.

    Args:
        instance_file: Path to JSON file (single document or JSONL)
        schema_file: Path to the JSON Schema document
        options: Options for each validation

    Returns:
        List of FileValidationResult for each instance in the file
    """
    schema = load_schema(schema_file)
    if options is None:
        options = ValidationOptions()
    results = []
    for instance, path in read_instances(instance_file):
        results.append(FileValidationResult(schema.validate(instance, options), path))
    return results


def validate_json_instances(
    input_files: List[str],
    schema_file: str,
    options: Optional[ValidationOptions] = None,
    verbose: bool = False
) -> Tuple[int, int]:
    """Validates multiple JSON instance files against a schema.

    Args:
        input_files: List of JSON file paths to validate
        schema_file: Path to schema file
        options: Options for each validation
        verbose: Whether to print validation results

    Returns:
        Tuple of (valid_count, invalid_count)
    """
    valid_count = 0
    invalid_count = 0

    for input_file in input_files:
        for result in validate_file(input_file, schema_file, options):
            if result.is_valid:
                valid_count += 1
            else:
                invalid_count += 1
            if verbose:
                print(result)
                if options is not None and options.output_format is not OutputFormat.BASIC:
                    print(json.dumps(result.result.to_json(options.output_format), indent=2, ensure_ascii=False))

    return valid_count, invalid_count


def validate(
    input: List[str],
    schema: str,
    output_format: str = 'basic',
    draft: Optional[str] = None,
    quiet: bool = False
) -> None:
    """Validates JSON instances against a JSON Schema document.

    Args:
        input: List of JSON files to validate
        schema: Path to schema file
        output_format: One of flag, basic, detailed, verbose
        draft: Draft to assume when the schema has no `$schema`
        quiet: Suppress output, exit with code 0 if valid, 1 if invalid
    """
    options = ValidationOptions(output_format=OutputFormat(output_format))
    if draft:
        options = replace(options, default_version=DRAFT_NAMES[draft])
    valid_count, invalid_count = validate_json_instances(
        input_files=input,
        schema_file=schema,
        options=options,
        verbose=not quiet
    )

    if not quiet:
        total = valid_count + invalid_count
        print(f"\nValidation summary: {valid_count}/{total} instances valid")

    if invalid_count > 0:
        sys.exit(1)
