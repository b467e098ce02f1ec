"""
Applicator keywords.

Applicators validate part or all of the instance against subschemas they own.
Item and property applicators claim the indices and property names they
validated by returning them as the `evaluated` state of their result; the
orchestrator merges successful claims into the context seen by keywords that
run later, which is how `unevaluatedItems` and `unevaluatedProperties` see
only the leftovers.
"""

import logging
import re
import sys
from typing import Dict, List, Optional

from jsonschemaeval.context import EMPTY_EVALUATED, ValidationContext
from jsonschemaeval.errors import SchemaLoadError
from jsonschemaeval.keyword import SchemaArrayKeyword, SchemaMapKeyword, SchemaValueKeyword, UNSET, aggregate
from jsonschemaeval.results import ValidationResult
from jsonschemaeval.schema import JsonSchema
from jsonschemaeval.versions import SchemaVersion, SchemaVocabularies

logger = logging.getLogger(__name__)

DRAFT06_ON = SchemaVersion.DRAFT06 | SchemaVersion.DRAFT07 | SchemaVersion.DRAFT08 | SchemaVersion.DRAFT2019_09
DRAFT07_ON = SchemaVersion.DRAFT07 | SchemaVersion.DRAFT08 | SchemaVersion.DRAFT2019_09

LAST = sys.maxsize


def _reports_children(keyword, context: ValidationContext) -> bool:
    return not context.options.is_flag and context.options.should_report_child_errors(keyword, context)


class AllOfKeyword(SchemaArrayKeyword):
    """`allOf`: the instance must be valid against every subschema."""

    name = 'allOf'
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        report = _reports_children(self, context)
        nested = []
        evaluated = EMPTY_EVALUATED
        failed = 0
        for index, schema in enumerate(self.value):
            result = schema.evaluate(context.derive(self.name, index))
            if result.is_valid:
                evaluated = evaluated.merge(result.evaluated)
            else:
                failed += 1
                if context.options.is_flag:
                    break
            if report:
                nested.append(result)
        return aggregate(self, context, failed == 0, nested,
                         {'failed': failed, 'total': len(self.value)}, evaluated)


class AnyOfKeyword(SchemaArrayKeyword):
    """
    `anyOf`: the instance must be valid against at least one subschema.

    Every subschema is evaluated, even after a match, so that all passing
    branches contribute their evaluated items and properties.
    """

    name = 'anyOf'
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        results = self.evaluate_each(context)
        evaluated = EMPTY_EVALUATED
        for result in results:
            if result.is_valid:
                evaluated = evaluated.merge(result.evaluated)
        valid = any(result.is_valid for result in results)
        nested = results if _reports_children(self, context) else []
        return aggregate(self, context, valid, nested, None, evaluated)


class OneOfKeyword(SchemaArrayKeyword):
    """`oneOf`: the instance must be valid against exactly one subschema."""

    name = 'oneOf'
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        results = self.evaluate_each(context)
        passing = [result for result in results if result.is_valid]
        valid = len(passing) == 1
        nested = results if _reports_children(self, context) else []
        return aggregate(self, context, valid, nested,
                         {'passed': len(passing), 'total': len(results)},
                         passing[0].evaluated if valid else None)


class NotKeyword(SchemaValueKeyword):
    """`not`: the instance must not be valid against the subschema."""

    name = 'not'
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        result = self.value.evaluate(context.derive(self.name))
        nested = [result] if _reports_children(self, context) else []
        return aggregate(self, context, not result.is_valid, nested)


class IfKeyword(SchemaValueKeyword):
    """
    `if`: selects `then` or `else` from the same schema by validating the
    instance against its own subschema.

    The outcome of `if` itself never fails validation; only the selected
    branch does.
    """

    name = 'if'
    supported_versions = DRAFT07_ON
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        condition = self.value.evaluate(context.derive(self.name))
        branch_name = 'then' if condition.is_valid else 'else'
        branch = context.local_schema.get(branch_name) if context.local_schema is not None else None
        evaluated = condition.evaluated if condition.is_valid else EMPTY_EVALUATED
        if branch is None or not branch.is_active(context):
            return ValidationResult.valid(self.name, context, evaluated=evaluated)

        result = branch.value.evaluate(context.derive(branch_name))
        if result.is_valid:
            evaluated = evaluated.merge(result.evaluated)
        nested = [condition, result] if _reports_children(self, context) else []
        return aggregate(self, context, result.is_valid, nested, {'branch': branch_name}, evaluated)


class _BranchKeyword(SchemaValueKeyword):
    """A branch selected by `if`; on its own it always passes."""

    supported_versions = DRAFT07_ON
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        return ValidationResult.valid(self.name, context)


class ThenKeyword(_BranchKeyword):
    """`then`: applied by `if` when the instance passes the condition."""
    name = 'then'


class ElseKeyword(_BranchKeyword):
    """`else`: applied by `if` when the instance fails the condition."""
    name = 'else'


class ItemsKeyword(SchemaValueKeyword):
    """
    `items`: a single schema applies to every element; an array of schemas
    applies positionally.
    """

    name = 'items'
    vocabulary = SchemaVocabularies.APPLICATOR

    @property
    def is_array(self) -> bool:
        return isinstance(self.value, list)

    @classmethod
    def from_json(cls, value, serializer):
        if isinstance(value, list):
            schemas = []
            for index, item in enumerate(value):
                with serializer.at(index):
                    schemas.append(serializer.deserialize(item))
            return cls(schemas)
        return cls(serializer.deserialize(value))

    def to_json(self, serializer):
        if self.is_array:
            return [serializer.serialize(schema) for schema in self.value]
        return serializer.serialize(self.value)

    def register_subschemas(self, base_uri, registry):
        for schema in (self.value if self.is_array else [self.value]):
            schema.register_subschemas(base_uri, registry)

    def resolve_subschema(self, pointer, base_uri):
        if not self.is_array:
            return self.value.resolve_subschema(pointer, base_uri)
        return SchemaArrayKeyword.resolve_subschema(self, pointer, base_uri)

    def _value_equals(self, other):
        return self._value == other._value

    def _value_hash(self):
        return hash(tuple(self._value)) if self.is_array else hash(self._value)

    def validate(self, context):
        array = context.instance
        if not isinstance(array, list):
            return ValidationResult.valid(self.name, context)
        if self.is_array:
            pairs = [(index, schema, context.derive(self.name, index, instance=array[index], instance_segment=index))
                     for index, schema in enumerate(self.value[:len(array)])]
        else:
            pairs = [(index, self.value, context.derive(self.name, instance=item, instance_segment=index))
                     for index, item in enumerate(array)]
        report = _reports_children(self, context)
        valid = True
        nested = []
        last_index = -1
        for index, schema, child in pairs:
            result = schema.evaluate(child)
            valid = valid and result.is_valid
            last_index = index
            if context.options.is_flag:
                if not valid:
                    logger.debug("Item %s failed; halting validation early", index)
                    break
            elif report:
                nested.append(result)
        return aggregate(self, context, valid, nested, None, EMPTY_EVALUATED.claim_index(last_index))


class AdditionalItemsKeyword(SchemaValueKeyword):
    """`additionalItems`: applies to the elements beyond a positional `items`."""

    name = 'additionalItems'
    validation_sequence = 2
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        array = context.instance
        items = context.local_schema.get('items') if context.local_schema is not None else None
        if not isinstance(array, list) or items is None or not items.is_array:
            return ValidationResult.valid(self.name, context)
        start = len(items.value)
        if start >= len(array):
            return ValidationResult.valid(self.name, context)
        report = _reports_children(self, context)
        valid = True
        nested = []
        for index in range(start, len(array)):
            result = self.value.evaluate(context.derive(self.name, instance=array[index], instance_segment=index))
            valid = valid and result.is_valid
            if context.options.is_flag:
                if not valid:
                    break
            elif report:
                nested.append(result)
        return aggregate(self, context, valid, nested, None, EMPTY_EVALUATED.claim_index(len(array) - 1))


class ContainsKeyword(SchemaValueKeyword):
    """`contains`: at least one element must be valid against the subschema."""

    name = 'contains'
    supported_versions = DRAFT06_ON
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        array = context.instance
        if not isinstance(array, list):
            return ValidationResult.valid(self.name, context)
        report = _reports_children(self, context)
        nested = []
        found = False
        for index, item in enumerate(array):
            result = self.value.evaluate(context.derive(self.name, instance=item, instance_segment=index))
            if report:
                nested.append(result)
            if result.is_valid:
                found = True
                if context.options.is_flag:
                    break
        return aggregate(self, context, found, nested)


class _PropertyApplicator:
    """Shared loop of the keywords that validate object members."""

    def apply_to_properties(self, context: ValidationContext, targets) -> ValidationResult:
        """Validates `(property name, schema, *location segments)` targets in order."""
        instance = context.instance
        report = _reports_children(self, context)
        nested = []
        failed: List[str] = []
        validated = []
        for property_name, schema, *segments in targets:
            child = context.derive(self.name, *segments, instance=instance[property_name],
                                   instance_segment=property_name)
            result = schema.evaluate(child)
            validated.append(property_name)
            if not result.is_valid:
                failed.append(property_name)
                if context.options.is_flag:
                    break
            if report:
                nested.append(result)
        return aggregate(self, context, not failed, nested, {'properties': failed},
                         EMPTY_EVALUATED.claim_names(validated))


class PropertiesKeyword(_PropertyApplicator, SchemaMapKeyword):
    """`properties`: each named member is validated against its subschema."""

    name = 'properties'
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, dict):
            return ValidationResult.valid(self.name, context)
        targets = [(name, schema, name) for name, schema in self.value.items() if name in instance]
        return self.apply_to_properties(context, targets)


class PatternPropertiesKeyword(_PropertyApplicator, SchemaMapKeyword):
    """`patternProperties`: members whose names match a pattern are validated against its subschema."""

    name = 'patternProperties'
    vocabulary = SchemaVocabularies.APPLICATOR

    def __init__(self, value=UNSET):
        super().__init__(value)
        self._patterns: Dict[str, re.Pattern] = {}
        if isinstance(value, dict):
            self._patterns = {pattern: re.compile(pattern) for pattern in value}

    @classmethod
    def from_json(cls, value, serializer):
        if isinstance(value, dict):
            for pattern in value:
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise SchemaLoadError(f"Invalid regular expression {pattern!r}: {e}", serializer.location) from e
        return super().from_json(value, serializer)

    def matches(self, property_name: str) -> bool:
        return any(regex.search(property_name) for regex in self._patterns.values())

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, dict):
            return ValidationResult.valid(self.name, context)
        targets = [(name, schema, pattern)
                   for name in instance
                   for pattern, schema in self.value.items()
                   if self._patterns[pattern].search(name)]
        return self.apply_to_properties(context, targets)


class AdditionalPropertiesKeyword(_PropertyApplicator, SchemaValueKeyword):
    """`additionalProperties`: members not covered by `properties` or `patternProperties`."""

    name = 'additionalProperties'
    validation_sequence = 2
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, dict):
            return ValidationResult.valid(self.name, context)
        local = context.local_schema
        properties = local.get('properties') if local is not None else None
        patterns = local.get('patternProperties') if local is not None else None
        names = [name for name in instance
                 if not (properties is not None and name in properties.value)
                 and not (patterns is not None and patterns.matches(name))]
        return self.apply_to_properties(context, [(name, self.value) for name in names])


class PropertyNamesKeyword(SchemaValueKeyword):
    """`propertyNames`: every member name, as a string instance, must be valid against the subschema."""

    name = 'propertyNames'
    supported_versions = DRAFT06_ON
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, dict):
            return ValidationResult.valid(self.name, context)
        report = _reports_children(self, context)
        nested = []
        failed = []
        for property_name in instance:
            result = self.value.evaluate(context.derive(self.name, instance=property_name,
                                                        instance_segment=property_name))
            if not result.is_valid:
                failed.append(property_name)
                if context.options.is_flag:
                    break
            if report:
                nested.append(result)
        return aggregate(self, context, not failed, nested, {'properties': failed})


class UnevaluatedItemsKeyword(SchemaValueKeyword):
    """
    `unevaluatedItems`: validates the array elements no earlier applicator
    at this schema level has claimed.

    It runs last so that every sibling has had the chance to claim indices.
    """

    name = 'unevaluatedItems'
    supported_versions = SchemaVersion.DRAFT2019_09
    validation_sequence = LAST
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context: ValidationContext) -> ValidationResult:
        if not isinstance(context.instance, list):
            logger.debug("Instance not an array; not applicable")
            return ValidationResult.valid(self.name, context)

        array = context.instance
        start_index = context.last_evaluated_index + 1
        if start_index >= len(array):
            logger.debug("All items have been validated")
            return ValidationResult.valid(self.name, context)

        if start_index == 0:
            logger.debug("No indices have been evaluated; process all")
        else:
            logger.debug("Indices up to %s have been evaluated; skipping these", context.last_evaluated_index)

        if self.value == JsonSchema.FALSE:
            logger.debug("Subschema is `false`; all instances invalid")
            return ValidationResult.invalid(self.name, context, self.error_message(context))

        report_child_errors = context.options.should_report_child_errors(self, context)
        nested_results = []
        valid = True
        evaluated = EMPTY_EVALUATED
        for index in range(start_index, len(array)):
            item_context = context.derive(self.name, instance=array[index], instance_segment=index)
            local_results = self.value.evaluate(item_context)
            valid = valid and local_results.is_valid
            if valid:
                evaluated = evaluated.claim_index(index)

            if context.options.is_flag:
                if not valid:
                    logger.debug("Subschema failed; halting validation early")
                    break
            elif report_child_errors:
                nested_results.append(local_results)

        return aggregate(self, context, valid, nested_results, None, evaluated)


class UnevaluatedPropertiesKeyword(_PropertyApplicator, SchemaValueKeyword):
    """`unevaluatedProperties`: validates the members no earlier applicator has claimed."""

    name = 'unevaluatedProperties'
    supported_versions = SchemaVersion.DRAFT2019_09
    validation_sequence = LAST
    vocabulary = SchemaVocabularies.APPLICATOR

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, dict):
            logger.debug("Instance not an object; not applicable")
            return ValidationResult.valid(self.name, context)
        names = [name for name in instance if name not in context.evaluated_property_names]
        if not names:
            logger.debug("All properties have been validated")
            return ValidationResult.valid(self.name, context)
        if self.value == JsonSchema.FALSE:
            logger.debug("Subschema is `false`; all instances invalid")
            return ValidationResult.invalid(self.name, context, self.error_message(context, {'properties': names}))
        return self.apply_to_properties(context, [(name, self.value) for name in names])
