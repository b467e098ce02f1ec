"""Per-call validation options."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, FrozenSet, Optional

from jsonschemaeval.versions import SchemaVersion, SchemaVocabularies, SchemaVocabulary

if TYPE_CHECKING:
    from jsonschemaeval.context import ValidationContext
    from jsonschemaeval.keyword import Keyword


class OutputFormat(Enum):
    """How much detail a validation retains and reports."""
    FLAG = 'flag'
    BASIC = 'basic'
    DETAILED = 'detailed'
    VERBOSE = 'verbose'


def _always_report(keyword: 'Keyword', context: 'ValidationContext') -> bool:
    return True


@dataclass(frozen=True)
class ValidationOptions:
    """
    Configuration attached to a single validation call.

    Attributes:
        output_format: FLAG stops at the first failure and keeps no nested
            results; the richer formats evaluate everything and keep the tree.
        report_child_errors: Predicate deciding whether a keyword keeps the
            results of its subschema invocations.
        error_templates: Per-keyword message template overrides.
        vocabularies: The enabled vocabularies.
        default_version: Draft used when the root schema declares none.
        base_uri: Initial base URI for `$ref` resolution.
    """
    output_format: OutputFormat = OutputFormat.BASIC
    report_child_errors: Callable[['Keyword', 'ValidationContext'], bool] = _always_report
    error_templates: Dict[str, str] = field(default_factory=dict)
    vocabularies: FrozenSet[SchemaVocabulary] = field(default_factory=SchemaVocabularies.all)
    default_version: SchemaVersion = SchemaVersion.DRAFT2019_09
    base_uri: Optional[str] = None

    @classmethod
    def default(cls) -> 'ValidationOptions':
        return cls()

    def with_format(self, output_format: OutputFormat) -> 'ValidationOptions':
        return replace(self, output_format=output_format)

    @property
    def is_flag(self) -> bool:
        return self.output_format is OutputFormat.FLAG

    def should_report_child_errors(self, keyword: 'Keyword', context: 'ValidationContext') -> bool:
        return self.report_child_errors(keyword, context)
