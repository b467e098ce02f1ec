"""
Core and meta-data keywords.

These keywords identify schemas, hold reusable definitions, reference other
schemas, or carry annotations that never affect validity.
"""

import logging
from typing import Any

from jsonschemaeval.context import ValidationContext
from jsonschemaeval.errors import SchemaLoadError
from jsonschemaeval.keyword import Keyword, SchemaMapKeyword
from jsonschemaeval.messages import get_template, resolve_tokens
from jsonschemaeval.results import ValidationResult
from jsonschemaeval.versions import SchemaVersion, SchemaVocabularies

logger = logging.getLogger(__name__)

DRAFT06_ON = SchemaVersion.DRAFT06 | SchemaVersion.DRAFT07 | SchemaVersion.DRAFT08 | SchemaVersion.DRAFT2019_09
DRAFT07_ON = SchemaVersion.DRAFT07 | SchemaVersion.DRAFT08 | SchemaVersion.DRAFT2019_09


class _StringKeyword(Keyword):
    """A keyword whose value is a string and which always validates."""

    validation_sequence = 0
    vocabulary = SchemaVocabularies.CORE

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, str):
            raise SchemaLoadError(f"`{cls.name}` must be a string", serializer.location)
        return cls(value)

    def validate(self, context: ValidationContext) -> ValidationResult:
        return ValidationResult.valid(self.name, context)


class SchemaKeyword(_StringKeyword):
    """`$schema`: names the metaschema and thereby the draft."""
    name = '$schema'


class IdKeyword(_StringKeyword):
    """`$id`: establishes a new base URI for the subtree."""
    name = '$id'
    supported_versions = DRAFT06_ON


class LegacyIdKeyword(_StringKeyword):
    """`id`: the draft-04 spelling of `$id`."""
    name = 'id'
    supported_versions = SchemaVersion.DRAFT04

    @classmethod
    def from_json(cls, value, serializer):
        # later drafts give `id` no meaning, so any value is allowed there
        if not isinstance(value, str):
            return UnrecognizedKeyword(cls.name, value)
        return cls(value)


class AnchorKeyword(_StringKeyword):
    """`$anchor`: a plain-name fragment for the containing schema."""
    name = '$anchor'
    supported_versions = SchemaVersion.DRAFT2019_09


class CommentKeyword(_StringKeyword):
    name = '$comment'
    supported_versions = DRAFT07_ON


class RefKeyword(_StringKeyword):
    """
    `$ref`: validates the instance against the referenced schema.

    Targets are looked up in the registry built before validation started,
    so a reference may point into any keyword's subschema.
    """
    name = '$ref'

    def validate(self, context: ValidationContext) -> ValidationResult:
        registry = context.registry
        target, target_uri = (None, self.value) if registry is None else registry.resolve(self.value, context.base_uri)
        if target is None:
            logger.debug("Could not resolve %s from %s", self.value, context.base_uri or '<root>')
            return ValidationResult.invalid(self.name, context,
                                            self.error_message(context, {'reference': self.value}))
        if context.enters_reference_cycle(target):
            logger.debug("Reference %s re-enters its target at %s", self.value, context.instance_pointer)
            template = get_template('$ref.cycle', context.options.error_templates)
            return ValidationResult.invalid(self.name, context, resolve_tokens(template, {'reference': self.value}))

        child = context.derive(self.name).with_scope(target_uri or None).with_reference(target)
        result = target.evaluate(child)
        nested = []
        if not context.options.is_flag and context.options.should_report_child_errors(self, context):
            nested.append(result)
        return ValidationResult(self.name, context, is_valid=result.is_valid, nested_results=nested,
                                evaluated=result.evaluated if result.is_valid else None)


class DefsKeyword(SchemaMapKeyword):
    """`$defs`: reusable subschemas, reachable only through `$ref`."""
    name = '$defs'
    supported_versions = SchemaVersion.DRAFT2019_09
    validation_sequence = 0
    vocabulary = SchemaVocabularies.CORE

    def validate(self, context):
        return ValidationResult.valid(self.name, context)


class DefinitionsKeyword(DefsKeyword):
    name = 'definitions'
    supported_versions = SchemaVersion.ALL


class AnnotationKeyword(Keyword):
    """A meta-data keyword; it never affects validity."""

    validation_sequence = 0
    vocabulary = SchemaVocabularies.META_DATA

    def validate(self, context):
        return ValidationResult.valid(self.name, context)


class TitleKeyword(AnnotationKeyword):
    name = 'title'


class DescriptionKeyword(AnnotationKeyword):
    name = 'description'


class DefaultKeyword(AnnotationKeyword):
    name = 'default'


class ExamplesKeyword(AnnotationKeyword):
    name = 'examples'
    supported_versions = DRAFT06_ON


class UnrecognizedKeyword(Keyword):
    """Holds a key the serializer does not know so it survives a round trip."""

    validation_sequence = 0

    def __init__(self, name: str, value: Any = None):
        super().__init__(value)
        self.name = name

    def validate(self, context):
        return ValidationResult.valid(self.name, context)

    def __repr__(self):
        return f"UnrecognizedKeyword({self.name!r}, {self._value!r})"
