"""
Assertion keywords.

Assertions only inspect the instance. They never recurse into subschemas,
never claim evaluated items or properties, and run early in the sequence.
"""

import logging
import re
from abc import abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from jsonschemaeval.context import ValidationContext
from jsonschemaeval.errors import SchemaLoadError
from jsonschemaeval.jsonvalues import is_integral, is_number, json_equals, json_hash, json_type_of
from jsonschemaeval.keyword import UNSET, Keyword
from jsonschemaeval.messages import get_template, resolve_tokens
from jsonschemaeval.results import ValidationResult
from jsonschemaeval.versions import SchemaVersion, SchemaVocabularies

logger = logging.getLogger(__name__)

DRAFT06_ON = SchemaVersion.DRAFT06 | SchemaVersion.DRAFT07 | SchemaVersion.DRAFT08 | SchemaVersion.DRAFT2019_09

JSON_TYPE_NAMES = ('null', 'boolean', 'object', 'array', 'number', 'string', 'integer')


class AssertionKeyword(Keyword):
    """Common settings of the assertion keywords."""

    validation_sequence = 1
    vocabulary = SchemaVocabularies.VALIDATION

    def fail(self, context: ValidationContext, tokens: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult.invalid(self.name, context, self.error_message(context, tokens))
        result.additional_info = tokens
        return result


class ConstKeyword(AssertionKeyword):
    """`const`: the instance must deep-equal a fixed value."""

    name = 'const'
    supported_versions = DRAFT06_ON

    def validate(self, context: ValidationContext) -> ValidationResult:
        if json_equals(context.instance, self.value):
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'expected': self.value, 'value': context.instance})


class EnumKeyword(AssertionKeyword):
    """`enum`: the instance must deep-equal one of a list of values."""

    name = 'enum'

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, list):
            raise SchemaLoadError("`enum` must be an array", serializer.location)
        return cls(value)

    def validate(self, context):
        if any(json_equals(context.instance, candidate) for candidate in self.value):
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'expected': self.value, 'value': context.instance})


class TypeKeyword(AssertionKeyword):
    """`type`: the instance must be of one of the named JSON types."""

    name = 'type'

    @classmethod
    def from_json(cls, value, serializer):
        names = value if isinstance(value, list) else [value]
        for type_name in names:
            if type_name not in JSON_TYPE_NAMES:
                raise SchemaLoadError(f"Unknown type name {type_name!r}", serializer.location)
        return cls(value)

    @property
    def types(self) -> List[str]:
        return self.value if isinstance(self.value, list) else [self.value]

    def validate(self, context):
        instance = context.instance
        actual = json_type_of(instance)
        for expected in self.types:
            if expected == actual:
                return ValidationResult.valid(self.name, context)
            if expected == 'number' and actual == 'integer':
                return ValidationResult.valid(self.name, context)
            # draft-04 counts 1.0 as a number only
            if expected == 'integer' and is_integral(instance) and not context.version & SchemaVersion.DRAFT04:
                return ValidationResult.valid(self.name, context)
        return self.fail(context, {'expected': self.value, 'actual': actual})


class _NumberValueKeyword(AssertionKeyword):
    """Base for keywords whose value is a number and which apply to numbers."""

    token = 'upperBound'

    @classmethod
    def from_json(cls, value, serializer):
        if not is_number(value):
            raise SchemaLoadError(f"`{cls.name}` must be a number", serializer.location)
        return cls(value)

    @abstractmethod
    def check(self, instance, context: ValidationContext) -> bool:
        """True if the number `instance` satisfies this keyword."""

    def validate(self, context):
        instance = context.instance
        if not is_number(instance) or self.check(instance, context):
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'actual': instance, self.token: self.value})


class MultipleOfKeyword(_NumberValueKeyword):
    name = 'multipleOf'
    token = 'divisor'

    @classmethod
    def from_json(cls, value, serializer):
        if not is_number(value) or value <= 0:
            raise SchemaLoadError("`multipleOf` must be a number greater than 0", serializer.location)
        return cls(value)

    def check(self, instance, context):
        if isinstance(instance, int) and isinstance(self.value, int):
            return instance % self.value == 0
        try:
            return Decimal(str(instance)) % Decimal(str(self.value)) == 0
        except InvalidOperation:
            # quotient too large for the decimal context; fall back to floats
            return float(instance / self.value).is_integer()


class _BoundKeyword(_NumberValueKeyword):
    """
    Base of `maximum` and `minimum`.

    Under draft-04 the bound is made exclusive by a boolean
    `exclusiveMaximum` or `exclusiveMinimum` sibling.
    """

    exclusive_name = ''

    def is_exclusive(self, context: ValidationContext) -> bool:
        if not context.version & SchemaVersion.DRAFT04 or context.local_schema is None:
            return False
        sibling = context.local_schema.get(self.exclusive_name)
        return sibling is not None and sibling.is_initialized and sibling.value is True

    def error_message(self, context, tokens=None):
        if self.is_exclusive(context):
            return resolve_tokens(get_template(self.exclusive_name, context.options.error_templates), tokens)
        return super().error_message(context, tokens)


class MaximumKeyword(_BoundKeyword):
    name = 'maximum'
    exclusive_name = 'exclusiveMaximum'

    def check(self, instance, context):
        if self.is_exclusive(context):
            return instance < self.value
        return instance <= self.value


class MinimumKeyword(_BoundKeyword):
    name = 'minimum'
    exclusive_name = 'exclusiveMinimum'
    token = 'lowerBound'

    def check(self, instance, context):
        if self.is_exclusive(context):
            return instance > self.value
        return instance >= self.value


class _ExclusiveBoundKeyword(_NumberValueKeyword):
    """
    Base of `exclusiveMaximum` and `exclusiveMinimum`.

    From draft-06 the value is a number and a bound of its own. Draft-04 uses
    a boolean that only modifies the sibling `maximum` or `minimum`.
    """

    @classmethod
    def from_json(cls, value, serializer):
        if isinstance(value, bool):
            return cls(value)
        return super().from_json(value, serializer)

    @property
    def is_modifier(self) -> bool:
        return isinstance(self._value, bool)

    def is_active(self, context):
        versions = SchemaVersion.DRAFT04 if self.is_modifier else DRAFT06_ON
        return bool(versions & context.version) and super().is_active(context)

    def validate(self, context):
        if self.is_modifier:
            return ValidationResult.valid(self.name, context)
        return super().validate(context)


class ExclusiveMaximumKeyword(_ExclusiveBoundKeyword):
    name = 'exclusiveMaximum'

    def check(self, instance, context):
        return instance < self.value


class ExclusiveMinimumKeyword(_ExclusiveBoundKeyword):
    name = 'exclusiveMinimum'
    token = 'lowerBound'

    def check(self, instance, context):
        return instance > self.value


class _CountKeyword(AssertionKeyword):
    """Base for keywords bounding the size of one kind of instance."""

    applies_to: type = object
    token = 'upperBound'

    @classmethod
    def from_json(cls, value, serializer):
        if not is_integral(value) or value < 0:
            raise SchemaLoadError(f"`{cls.name}` must be a non-negative integer", serializer.location)
        return cls(int(value))

    @abstractmethod
    def check(self, size: int) -> bool:
        """True if an instance of length `size` satisfies this keyword."""

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, self.applies_to):
            return ValidationResult.valid(self.name, context)
        size = len(instance)
        if self.check(size):
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'actual': size, self.token: self.value})


class MaxLengthKeyword(_CountKeyword):
    name = 'maxLength'
    applies_to = str

    def check(self, size):
        return size <= self.value


class MinLengthKeyword(_CountKeyword):
    name = 'minLength'
    applies_to = str
    token = 'lowerBound'

    def check(self, size):
        return size >= self.value


class MaxItemsKeyword(_CountKeyword):
    name = 'maxItems'
    applies_to = list

    def check(self, size):
        return size <= self.value


class MinItemsKeyword(_CountKeyword):
    name = 'minItems'
    applies_to = list
    token = 'lowerBound'

    def check(self, size):
        return size >= self.value


class MaxPropertiesKeyword(_CountKeyword):
    name = 'maxProperties'
    applies_to = dict

    def check(self, size):
        return size <= self.value


class MinPropertiesKeyword(_CountKeyword):
    name = 'minProperties'
    applies_to = dict
    token = 'lowerBound'

    def check(self, size):
        return size >= self.value


class PatternKeyword(AssertionKeyword):
    """`pattern`: strings must contain a match of a regular expression."""

    name = 'pattern'

    def __init__(self, value=UNSET):
        super().__init__(value)
        self._regex = re.compile(value) if isinstance(value, str) else None

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, str):
            raise SchemaLoadError("`pattern` must be a string", serializer.location)
        try:
            return cls(value)
        except re.error as e:
            raise SchemaLoadError(f"Invalid regular expression {value!r}: {e}", serializer.location) from e

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, str) or self._regex_for().search(instance):
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'value': instance, 'pattern': self.value})

    def _regex_for(self):
        if self._regex is None:
            self._regex = re.compile(self.value)
        return self._regex


class UniqueItemsKeyword(AssertionKeyword):
    """`uniqueItems`: when true, no two array items may be deep-equal."""

    name = 'uniqueItems'

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, bool):
            raise SchemaLoadError("`uniqueItems` must be a boolean", serializer.location)
        return cls(value)

    def validate(self, context):
        instance = context.instance
        if not self.value or not isinstance(instance, list):
            return ValidationResult.valid(self.name, context)
        buckets: Dict[int, List[int]] = {}
        duplicates = []
        for index, item in enumerate(instance):
            bucket = buckets.setdefault(json_hash(item), [])
            for earlier in bucket:
                if json_equals(instance[earlier], item):
                    duplicates.append([earlier, index])
                    break
            bucket.append(index)
        if not duplicates:
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'duplicates': duplicates})


class RequiredKeyword(AssertionKeyword):
    """`required`: objects must contain each of the named properties."""

    name = 'required'

    @classmethod
    def from_json(cls, value, serializer):
        if not isinstance(value, list) or not all(isinstance(name, str) for name in value):
            raise SchemaLoadError("`required` must be an array of strings", serializer.location)
        return cls(value)

    def validate(self, context):
        instance = context.instance
        if not isinstance(instance, dict):
            return ValidationResult.valid(self.name, context)
        missing = [name for name in self.value if name not in instance]
        if not missing:
            return ValidationResult.valid(self.name, context)
        return self.fail(context, {'missing': missing})
