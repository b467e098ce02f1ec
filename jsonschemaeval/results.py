"""
The validation result tree.

A `ValidationResult` is produced for each (keyword x subschema) invocation
that was actually performed. Nested results are only retained when the
output format asks for child-level detail.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from jsonschemaeval.context import EMPTY_EVALUATED, EvaluatedState, pointer_path
from jsonschemaeval.options import OutputFormat

if TYPE_CHECKING:
    from jsonschemaeval.context import ValidationContext


class ValidationResult:
    """Outcome of validating one keyword or schema at one location."""

    def __init__(self, keyword: Optional[str] = None, context: Optional['ValidationContext'] = None,
                 is_valid: bool = True, error_message: Optional[str] = None,
                 nested_results: Optional[List['ValidationResult']] = None,
                 evaluated: Optional[EvaluatedState] = None,
                 additional_info: Optional[Dict[str, Any]] = None):
        self.keyword = keyword
        self.is_valid = is_valid
        self.error_message = error_message
        self.nested_results: List['ValidationResult'] = nested_results or []
        self.evaluated: EvaluatedState = evaluated or EMPTY_EVALUATED
        self.additional_info: Dict[str, Any] = additional_info or {}
        self.keyword_location = '#'
        self.absolute_keyword_location: Optional[str] = None
        self.instance_location = '#'
        if context is not None:
            segments = (keyword,) if keyword else ()
            self.keyword_location = pointer_path(context.relative_location + segments)
            self.instance_location = context.instance_pointer
            if context.base_uri:
                self.absolute_keyword_location = (context.base_uri.split('#', 1)[0] +
                                                  pointer_path(context.base_relative_location + segments))

    @classmethod
    def valid(cls, keyword: Optional[str], context: 'ValidationContext',
              evaluated: Optional[EvaluatedState] = None) -> 'ValidationResult':
        return cls(keyword, context, evaluated=evaluated)

    @classmethod
    def invalid(cls, keyword: Optional[str], context: 'ValidationContext', error_message: Optional[str],
                nested_results: Optional[List['ValidationResult']] = None) -> 'ValidationResult':
        return cls(keyword, context, is_valid=False, error_message=error_message, nested_results=nested_results)

    def errors(self) -> List['ValidationResult']:
        """Depth-first list of the failing results that carry a message."""
        found = []
        if not self.is_valid and self.error_message:
            found.append(self)
        for nested in self.nested_results:
            found.extend(nested.errors())
        return found

    def _unit(self) -> Dict[str, Any]:
        unit: Dict[str, Any] = {
            'valid': self.is_valid,
            'keywordLocation': self.keyword_location,
        }
        if self.absolute_keyword_location:
            unit['absoluteKeywordLocation'] = self.absolute_keyword_location
        unit['instanceLocation'] = self.instance_location
        if self.keyword:
            unit['keyword'] = self.keyword
        if self.error_message:
            unit['error'] = self.error_message
        return unit

    def _verbose(self) -> Dict[str, Any]:
        unit = self._unit()
        if self.nested_results:
            unit['nested'] = [nested._verbose() for nested in self.nested_results]
        return unit

    def _condensed(self) -> Dict[str, Any]:
        relevant = [nested for nested in self.nested_results if nested.is_valid == self.is_valid]
        if not self.is_valid:
            relevant = [nested for nested in relevant if nested.errors() or nested.nested_results]
        else:
            relevant = []
        if len(relevant) == 1 and not self.error_message:
            return relevant[0]._condensed()
        unit = self._unit()
        if relevant:
            unit['nested'] = [nested._condensed() for nested in relevant]
        return unit

    def to_json(self, output_format: OutputFormat = OutputFormat.VERBOSE) -> Dict[str, Any]:
        """Renders the tree in one of the standard output formats."""
        if output_format is OutputFormat.FLAG:
            return {'valid': self.is_valid}
        if output_format is OutputFormat.BASIC:
            rendered: Dict[str, Any] = {'valid': self.is_valid}
            if not self.is_valid:
                rendered['errors'] = [error._unit() for error in self.errors()]
            return rendered
        if output_format is OutputFormat.DETAILED:
            return self._condensed()
        return self._verbose()

    def __str__(self) -> str:
        if self.is_valid:
            return "✓ Valid"
        messages = [f"{error.instance_location}: {error.error_message}" for error in self.errors()]
        return "✗ Invalid: " + "; ".join(messages)

    def __repr__(self) -> str:
        return (f"ValidationResult(keyword={self.keyword!r}, is_valid={self.is_valid}, "
                f"error_message={self.error_message!r}, nested={len(self.nested_results)})")
