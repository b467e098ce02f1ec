"""
Traversal state threaded through a validation.

A root `ValidationContext` is created per validation call. Keywords derive
child contexts for the subschemas they invoke; a derived context belongs to
the subtree it was created for and is discarded when that subtree returns.
"""

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, FrozenSet, Iterable, Optional, Tuple
from urllib.parse import unquote, urldefrag

from jsonpointer import JsonPointer

from jsonschemaeval.options import ValidationOptions
from jsonschemaeval.versions import SchemaVersion

if TYPE_CHECKING:
    from jsonschemaeval.registry import SchemaRegistry
    from jsonschemaeval.schema import JsonSchema

_UNCHANGED = object()


def pointer_path(parts: Iterable[Any]) -> str:
    """Renders location segments as a URI fragment JSON pointer."""
    return '#' + JsonPointer.from_parts(list(parts)).path


@dataclass(frozen=True)
class EvaluatedState:
    """Array indices and object property names claimed by applicators at one schema level."""
    last_evaluated_index: int = -1
    evaluated_property_names: FrozenSet[str] = field(default_factory=frozenset)

    def merge(self, other: Optional['EvaluatedState']) -> 'EvaluatedState':
        if other is None or other == self:
            return self
        return EvaluatedState(max(self.last_evaluated_index, other.last_evaluated_index),
                              self.evaluated_property_names | other.evaluated_property_names)

    def claim_index(self, index: int) -> 'EvaluatedState':
        if index <= self.last_evaluated_index:
            return self
        return EvaluatedState(index, self.evaluated_property_names)

    def claim_names(self, names: Iterable[str]) -> 'EvaluatedState':
        return EvaluatedState(self.last_evaluated_index, self.evaluated_property_names | frozenset(names))

    @property
    def is_empty(self) -> bool:
        return self.last_evaluated_index < 0 and not self.evaluated_property_names


EMPTY_EVALUATED = EvaluatedState()


class ValidationContext:
    """
    State for validating one instance node against one schema node.

    Attributes:
        instance: The instance node under test.
        root: The schema the validation started from.
        local_schema: The schema node whose keywords are being evaluated.
        options: The options of this validation call.
        version: The active draft.
        registry: The `$ref` target registry for this call.
        base_uri: The base URI of the nearest resolution scope.
        relative_location: Schema location segments from the root.
        base_relative_location: Schema location segments from the nearest
            resolution scope.
        instance_location: Instance location segments.
        evaluated: Indices and property names already claimed at this level.
        reference_trail: `(id(target), instance_location)` pairs of the `$ref`
            targets entered on the way to this context.
    """

    def __init__(self, instance: Any, root: 'JsonSchema', options: Optional[ValidationOptions] = None,
                 version: SchemaVersion = SchemaVersion.DRAFT2019_09,
                 registry: Optional['SchemaRegistry'] = None, base_uri: Optional[str] = None):
        self.instance = instance
        self.root = root
        self.local_schema = root
        self.options = options or ValidationOptions.default()
        self.version = version
        self.registry = registry
        self.base_uri = base_uri
        self.relative_location: Tuple[Any, ...] = ()
        self.base_relative_location: Tuple[Any, ...] = ()
        self.instance_location: Tuple[Any, ...] = ()
        self.evaluated = EMPTY_EVALUATED
        self.reference_trail: FrozenSet[Tuple[int, Tuple[Any, ...]]] = frozenset()

    @property
    def last_evaluated_index(self) -> int:
        return self.evaluated.last_evaluated_index

    @property
    def evaluated_property_names(self) -> FrozenSet[str]:
        return self.evaluated.evaluated_property_names

    @property
    def keyword_location(self) -> str:
        return pointer_path(self.relative_location)

    @property
    def absolute_keyword_location(self) -> Optional[str]:
        if not self.base_uri:
            return None
        return self.base_uri.split('#', 1)[0] + pointer_path(self.base_relative_location)

    @property
    def instance_pointer(self) -> str:
        return pointer_path(self.instance_location)

    def derive(self, *segments: Any, instance: Any = _UNCHANGED, instance_segment: Any = None,
               evaluated: Optional[EvaluatedState] = None) -> 'ValidationContext':
        """
        Creates a child context.

        Args:
            segments: Schema location segments to append.
            instance: The child instance; defaults to the current instance.
            instance_segment: Instance location segment to append when the
                child instance is a member of the current one.
            evaluated: The child's evaluated state; defaults to empty.
        """
        child = copy.copy(self)
        child.relative_location = self.relative_location + segments
        child.base_relative_location = self.base_relative_location + segments
        if instance is not _UNCHANGED:
            child.instance = instance
        if instance_segment is not None:
            child.instance_location = self.instance_location + (instance_segment,)
        child.evaluated = evaluated or EMPTY_EVALUATED
        return child

    def with_scope(self, base_uri: Optional[str]) -> 'ValidationContext':
        """
        Enters a new resolution scope, e.g. for `$id` or a `$ref` target.

        A JSON pointer fragment in `base_uri` becomes the starting
        base-relative location, so absolute keyword locations point at the
        target within its document.
        """
        child = copy.copy(self)
        child.base_uri = base_uri
        child.base_relative_location = ()
        if base_uri and '#' in base_uri:
            document_uri, fragment = urldefrag(base_uri)
            fragment = unquote(fragment)
            if fragment.startswith('/'):
                child.base_uri = document_uri
                child.base_relative_location = tuple(JsonPointer(fragment).parts)
        return child

    def with_schema(self, schema: 'JsonSchema') -> 'ValidationContext':
        child = copy.copy(self)
        child.local_schema = schema
        return child

    def with_evaluated(self, evaluated: EvaluatedState) -> 'ValidationContext':
        if evaluated is self.evaluated:
            return self
        child = copy.copy(self)
        child.evaluated = evaluated
        return child

    def enters_reference_cycle(self, target: 'JsonSchema') -> bool:
        """True if `target` was already entered through `$ref` at this instance location."""
        return (id(target), self.instance_location) in self.reference_trail

    def with_reference(self, target: 'JsonSchema') -> 'ValidationContext':
        child = copy.copy(self)
        child.reference_trail = self.reference_trail | {(id(target), self.instance_location)}
        return child

    def __repr__(self) -> str:
        return (f"ValidationContext(keyword_location={self.keyword_location!r}, "
                f"instance_location={self.instance_pointer!r})")
