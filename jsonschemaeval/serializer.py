"""
Conversion between schema documents and `JsonSchema` trees.

The serializer owns the table of known keyword kinds. Keys it does not know
are preserved as `UnrecognizedKeyword` annotations.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Type

from jsonschemaeval.context import pointer_path
from jsonschemaeval.errors import SchemaLoadError
from jsonschemaeval.keyword import Keyword
from jsonschemaeval.keywords_applicator import (AdditionalItemsKeyword, AdditionalPropertiesKeyword, AllOfKeyword,
                                                AnyOfKeyword, ContainsKeyword, ElseKeyword, IfKeyword, ItemsKeyword,
                                                NotKeyword, OneOfKeyword, PatternPropertiesKeyword,
                                                PropertiesKeyword, PropertyNamesKeyword, ThenKeyword,
                                                UnevaluatedItemsKeyword, UnevaluatedPropertiesKeyword)
from jsonschemaeval.keywords_assertion import (ConstKeyword, EnumKeyword, ExclusiveMaximumKeyword,
                                               ExclusiveMinimumKeyword, MaxItemsKeyword, MaxLengthKeyword,
                                               MaxPropertiesKeyword, MaximumKeyword, MinItemsKeyword,
                                               MinLengthKeyword, MinPropertiesKeyword, MinimumKeyword,
                                               MultipleOfKeyword, PatternKeyword, RequiredKeyword, TypeKeyword,
                                               UniqueItemsKeyword)
from jsonschemaeval.keywords_core import (AnchorKeyword, CommentKeyword, DefaultKeyword, DefinitionsKeyword,
                                          DefsKeyword, DescriptionKeyword, ExamplesKeyword, IdKeyword,
                                          LegacyIdKeyword, RefKeyword, SchemaKeyword, TitleKeyword,
                                          UnrecognizedKeyword)
from jsonschemaeval.schema import JsonSchema

KEYWORD_TYPES: List[Type[Keyword]] = [
    SchemaKeyword, IdKeyword, LegacyIdKeyword, AnchorKeyword, RefKeyword, DefsKeyword, DefinitionsKeyword,
    CommentKeyword, TitleKeyword, DescriptionKeyword, DefaultKeyword, ExamplesKeyword,
    ConstKeyword, EnumKeyword, TypeKeyword, MultipleOfKeyword, MaximumKeyword, ExclusiveMaximumKeyword,
    MinimumKeyword, ExclusiveMinimumKeyword, MaxLengthKeyword, MinLengthKeyword, PatternKeyword,
    MaxItemsKeyword, MinItemsKeyword, UniqueItemsKeyword, MaxPropertiesKeyword, MinPropertiesKeyword,
    RequiredKeyword,
    AllOfKeyword, AnyOfKeyword, OneOfKeyword, NotKeyword, IfKeyword, ThenKeyword, ElseKeyword,
    ItemsKeyword, AdditionalItemsKeyword, ContainsKeyword, PropertiesKeyword, PatternPropertiesKeyword,
    AdditionalPropertiesKeyword, PropertyNamesKeyword, UnevaluatedItemsKeyword, UnevaluatedPropertiesKeyword,
]


class SchemaSerializer:
    """Deserializes schema documents into `JsonSchema` trees and back."""

    def __init__(self, keyword_types: Optional[Iterable[Type[Keyword]]] = None):
        self.keyword_types: Dict[str, Type[Keyword]] = {
            keyword_type.name: keyword_type for keyword_type in (keyword_types or KEYWORD_TYPES)
        }
        self._location: List[Any] = []

    @property
    def location(self) -> str:
        """The schema location currently being deserialized."""
        return pointer_path(self._location)

    @contextmanager
    def at(self, segment: Any) -> Iterator[None]:
        self._location.append(segment)
        try:
            yield
        finally:
            self._location.pop()

    def deserialize(self, value: Any) -> JsonSchema:
        if value is True:
            return JsonSchema.TRUE
        if value is False:
            return JsonSchema.FALSE
        if not isinstance(value, dict):
            raise SchemaLoadError(f"A schema must be an object or a boolean, got {type(value).__name__}",
                                  self.location)
        schema = JsonSchema()
        for name, keyword_value in value.items():
            with self.at(name):
                keyword_type = self.keyword_types.get(name)
                if keyword_type is None:
                    schema.add(UnrecognizedKeyword(name, keyword_value))
                else:
                    schema.add(keyword_type.from_json(keyword_value, self))
        return schema

    def serialize(self, schema: JsonSchema) -> Any:
        if schema.boolean is not None:
            return schema.boolean
        return {keyword.name: keyword.to_json(self) for keyword in schema.keywords}
