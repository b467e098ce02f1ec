"""
Base classes for schema keywords.

Every keyword kind is a subclass of `Keyword`. A keyword declares its name,
the drafts and vocabulary that enable it, and the sequence in which it runs
relative to its siblings. New keyword kinds are added as new subclasses and
registered with the serializer; the orchestrator in `schema.py` never names
individual keywords apart from `$ref`, `$id` and `$anchor`.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from jsonschemaeval.context import EvaluatedState, ValidationContext
from jsonschemaeval.errors import SchemaLoadError, UninitializedKeywordError
from jsonschemaeval.jsonvalues import json_equals, json_hash
from jsonschemaeval.messages import get_template, resolve_tokens
from jsonschemaeval.results import ValidationResult
from jsonschemaeval.versions import SchemaVersion, SchemaVocabulary

if TYPE_CHECKING:
    from jsonschemaeval.registry import SchemaRegistry
    from jsonschemaeval.schema import JsonSchema
    from jsonschemaeval.serializer import SchemaSerializer

logger = logging.getLogger(__name__)

UNSET = object()


class Keyword(ABC):
    """A single named constraint of a schema."""

    name: str = ''
    supported_versions: SchemaVersion = SchemaVersion.ALL
    validation_sequence: int = 1
    vocabulary: Optional[SchemaVocabulary] = None

    def __init__(self, value: Any = UNSET):
        self._value = value

    @property
    def value(self) -> Any:
        if self._value is UNSET:
            raise UninitializedKeywordError(self.name)
        return self._value

    @property
    def is_initialized(self) -> bool:
        return self._value is not UNSET

    def is_active(self, context: ValidationContext) -> bool:
        """True if both the draft and the vocabulary gate are open."""
        if not self.supported_versions & context.version:
            return False
        return self.vocabulary is None or self.vocabulary in context.options.vocabularies

    @abstractmethod
    def validate(self, context: ValidationContext) -> ValidationResult:
        """Validates `context.instance` against this keyword."""

    def register_subschemas(self, base_uri: Optional[str], registry: 'SchemaRegistry') -> None:
        """Advertises nested schemas for `$ref` lookups."""

    def resolve_subschema(self, pointer: Sequence[str], base_uri: Optional[str]) -> Optional['JsonSchema']:
        """Answers a `$ref` lookup whose pointer falls within this keyword."""
        return None

    @classmethod
    def from_json(cls, value: Any, serializer: 'SchemaSerializer') -> 'Keyword':
        return cls(value)

    def to_json(self, serializer: 'SchemaSerializer') -> Any:
        return self.value

    def error_message(self, context: ValidationContext, tokens: Optional[Dict[str, Any]] = None) -> str:
        template = get_template(self.name, context.options.error_templates)
        return resolve_tokens(template, tokens)

    def _value_equals(self, other: 'Keyword') -> bool:
        return json_equals(self._value, other._value)

    def _value_hash(self) -> int:
        return json_hash(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Keyword):
            return NotImplemented
        if self is other:
            return True
        if type(self) is not type(other) or self.name != other.name:
            return False
        if self._value is UNSET or other._value is UNSET:
            return self._value is other._value
        return self._value_equals(other)

    def __hash__(self) -> int:
        if self._value is UNSET:
            return 0
        return self._value_hash()

    def __repr__(self) -> str:
        value = '<unset>' if self._value is UNSET else repr(self._value)
        return f"{type(self).__name__}({value})"


class SchemaValueKeyword(Keyword):
    """A keyword that owns a single subschema."""

    def register_subschemas(self, base_uri, registry):
        self.value.register_subschemas(base_uri, registry)

    def resolve_subschema(self, pointer, base_uri):
        return self.value.resolve_subschema(pointer, base_uri)

    @classmethod
    def from_json(cls, value, serializer):
        return cls(serializer.deserialize(value))

    def to_json(self, serializer):
        return serializer.serialize(self.value)

    def _value_equals(self, other):
        return self._value == other._value

    def _value_hash(self):
        return hash(self._value)


class SchemaArrayKeyword(Keyword):
    """A keyword that owns a non-empty list of subschemas."""

    def register_subschemas(self, base_uri, registry):
        for schema in self.value:
            schema.register_subschemas(base_uri, registry)

    def resolve_subschema(self, pointer, base_uri):
        if not pointer:
            return None
        try:
            index = int(pointer[0])
        except ValueError:
            return None
        if not 0 <= index < len(self.value):
            return None
        return self.value[index].resolve_subschema(pointer[1:], base_uri)

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, list) or not value:
            raise SchemaLoadError(f"`{cls.name}` must be a non-empty array of schemas", serializer.location)
        schemas = []
        for index, item in enumerate(value):
            with serializer.at(index):
                schemas.append(serializer.deserialize(item))
        return cls(schemas)

    def to_json(self, serializer):
        return [serializer.serialize(schema) for schema in self.value]

    def _value_equals(self, other):
        return list(self._value) == list(other._value)

    def _value_hash(self):
        return hash(tuple(self._value))

    def evaluate_each(self, context: ValidationContext) -> List[ValidationResult]:
        """Evaluates every subschema against the current instance."""
        return [schema.evaluate(context.derive(self.name, index))
                for index, schema in enumerate(self.value)]


class SchemaMapKeyword(Keyword):
    """A keyword that owns subschemas keyed by name."""

    def register_subschemas(self, base_uri, registry):
        for schema in self.value.values():
            schema.register_subschemas(base_uri, registry)

    def resolve_subschema(self, pointer, base_uri):
        if not pointer or pointer[0] not in self.value:
            return None
        return self.value[pointer[0]].resolve_subschema(pointer[1:], base_uri)

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, dict):
            raise SchemaLoadError(f"`{cls.name}` must be an object of schemas", serializer.location)
        schemas = {}
        for name, item in value.items():
            with serializer.at(name):
                schemas[name] = serializer.deserialize(item)
        return cls(schemas)

    def to_json(self, serializer):
        return {name: serializer.serialize(schema) for name, schema in self.value.items()}

    def _value_equals(self, other):
        return dict(self._value) == dict(other._value)

    def _value_hash(self):
        return hash(frozenset(self._value.items()))


def aggregate(keyword: Keyword, context: ValidationContext, valid: bool,
              nested: Optional[List[ValidationResult]] = None,
              tokens: Optional[Dict[str, Any]] = None,
              evaluated: Optional[EvaluatedState] = None) -> ValidationResult:
    """Builds an applicator result, attaching the keyword's message on failure."""
    result = ValidationResult(keyword.name, context, is_valid=valid, nested_results=nested,
                              evaluated=evaluated if valid else None, additional_info=tokens)
    if not valid:
        result.error_message = keyword.error_message(context, tokens)
    return result
