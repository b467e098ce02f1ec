"""
Schema nodes and the keyword orchestrator.

A `JsonSchema` is an ordered bag of keywords, or one of the two canonical
boolean schemas `JsonSchema.TRUE` and `JsonSchema.FALSE`. Once constructed it
is treated as read-only, so a single instance may be validated from several
threads as long as each call starts from its own root context.
"""

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence
from urllib.parse import urldefrag, urljoin

from jsonschemaeval.context import ValidationContext
from jsonschemaeval.keyword import Keyword
from jsonschemaeval.messages import get_template, resolve_tokens
from jsonschemaeval.options import ValidationOptions
from jsonschemaeval.registry import SchemaRegistry
from jsonschemaeval.results import ValidationResult
from jsonschemaeval.versions import (REF_OVERRIDES_SIBLINGS, SchemaVersion, id_keyword_name,
                                     version_from_metaschema_uri)

logger = logging.getLogger(__name__)


class JsonSchema:
    """A schema or subschema."""

    TRUE: 'JsonSchema'
    FALSE: 'JsonSchema'

    def __init__(self, keywords: Iterable[Keyword] = (), boolean: Optional[bool] = None):
        self._boolean = boolean
        self._keywords: Dict[str, Keyword] = {}
        for keyword in keywords:
            self.add(keyword)

    def add(self, keyword: Keyword) -> 'JsonSchema':
        """Adds a keyword while the schema is being built."""
        if self._boolean is not None:
            raise ValueError("Boolean schemas cannot hold keywords")
        self._keywords[keyword.name] = keyword
        return self

    @property
    def boolean(self) -> Optional[bool]:
        return self._boolean

    @property
    def keywords(self) -> List[Keyword]:
        return list(self._keywords.values())

    def get(self, name: str) -> Optional[Keyword]:
        return self._keywords.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._keywords

    def __iter__(self) -> Iterator[Keyword]:
        return iter(self._keywords.values())

    def __len__(self) -> int:
        return len(self._keywords)

    @property
    def id(self) -> Optional[str]:
        keyword = self._keywords.get('$id')
        return keyword.value if keyword is not None else None

    @property
    def declared_version(self) -> Optional[SchemaVersion]:
        """The draft named by `$schema`, if recognized."""
        keyword = self._keywords.get('$schema')
        if keyword is None:
            return None
        return version_from_metaschema_uri(keyword.value)

    def validate(self, instance: Any, options: Optional[ValidationOptions] = None) -> ValidationResult:
        """
        Validates an instance against this schema as a root.

        Args:
            instance: The JSON value to validate
            options: Options for this call, defaults if omitted

        Returns:
            The result tree for the whole validation
        """
        options = options or ValidationOptions.default()
        version = self.declared_version or options.default_version
        registry = SchemaRegistry(version)
        registry.register(options.base_uri, self)
        self.register_subschemas(options.base_uri, registry)
        context = ValidationContext(instance, self, options, version, registry, options.base_uri)
        logger.debug("Validating against %s with draft %s", options.base_uri or '<anonymous schema>', version.name)
        return self.evaluate(context)

    def evaluate(self, context: ValidationContext) -> ValidationResult:
        """Evaluates the active keywords in sequence against `context.instance`."""
        if self._boolean is not None:
            if self._boolean:
                return ValidationResult.valid(None, context)
            template = get_template('false', context.options.error_templates)
            return ValidationResult.invalid(None, context, resolve_tokens(template))

        context = context.with_schema(self)
        id_keyword = self._keywords.get(id_keyword_name(context.version))
        if (id_keyword is not None and id_keyword.is_active(context) and isinstance(id_keyword.value, str)
                and not id_keyword.value.startswith('#')):
            scope = urldefrag(urljoin(context.base_uri or '', id_keyword.value)).url
            if scope != context.base_uri:
                context = context.with_scope(scope)

        keywords = [keyword for keyword in self._keywords.values() if keyword.is_active(context)]
        if context.version & REF_OVERRIDES_SIBLINGS and '$ref' in self._keywords:
            keywords = [keyword for keyword in keywords if keyword.name == '$ref']
        keywords.sort(key=lambda keyword: keyword.validation_sequence)

        flag = context.options.is_flag
        valid = True
        nested: List[ValidationResult] = []
        for keyword in keywords:
            result = keyword.validate(context)
            if result.is_valid:
                context = context.with_evaluated(context.evaluated.merge(result.evaluated))
            else:
                valid = False
            if flag:
                if not valid:
                    logger.debug("Keyword %s failed; halting validation early", keyword.name)
                    break
            elif context.options.should_report_child_errors(keyword, context):
                nested.append(result)

        return ValidationResult(None, context, is_valid=valid, nested_results=nested,
                                evaluated=context.evaluated)

    def register_subschemas(self, base_uri: Optional[str], registry: SchemaRegistry) -> None:
        if self._boolean is not None:
            return
        id_keyword = self._keywords.get(id_keyword_name(registry.version))
        if id_keyword is not None and id_keyword.is_initialized and isinstance(id_keyword.value, str):
            uri = urljoin(base_uri or '', id_keyword.value)
            registry.register(uri, self)
            if not id_keyword.value.startswith('#'):
                base_uri = urldefrag(uri).url
        anchor_keyword = self._keywords.get('$anchor')
        if anchor_keyword is not None and anchor_keyword.is_initialized:
            registry.register(f"{urldefrag(base_uri or '').url}#{anchor_keyword.value}", self)
        for keyword in self._keywords.values():
            keyword.register_subschemas(base_uri, registry)

    def resolve_subschema(self, pointer: Sequence[str], base_uri: Optional[str]) -> Optional['JsonSchema']:
        if not pointer:
            return self
        if self._boolean is not None:
            return None
        keyword = self._keywords.get(pointer[0])
        if keyword is None:
            return None
        return keyword.resolve_subschema(list(pointer[1:]), base_uri)

    @classmethod
    def from_json(cls, value: Any, serializer=None) -> 'JsonSchema':
        from jsonschemaeval.serializer import SchemaSerializer
        return (serializer or SchemaSerializer()).deserialize(value)

    def to_json(self, serializer=None) -> Any:
        from jsonschemaeval.serializer import SchemaSerializer
        return (serializer or SchemaSerializer()).serialize(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonSchema):
            return NotImplemented
        if self is other:
            return True
        return self._boolean == other._boolean and self._keywords == other._keywords

    def __hash__(self) -> int:
        if self._boolean is not None:
            return hash(self._boolean)
        return hash(frozenset(hash(keyword) for keyword in self._keywords.values()))

    def __repr__(self) -> str:
        if self._boolean is not None:
            return f"JsonSchema({str(self._boolean).lower()})"
        return f"JsonSchema({json.dumps(self.to_json(), ensure_ascii=False)})"


JsonSchema.TRUE = JsonSchema(boolean=True)
JsonSchema.FALSE = JsonSchema(boolean=False)


def load_schema(schema_file: str) -> JsonSchema:
    """Loads a schema document from a file."""
    with open(schema_file, 'r', encoding='utf-8') as f:
        return JsonSchema.from_json(json.load(f))
