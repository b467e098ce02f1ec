"""
Error message templates.

Templates use `{{token}}` placeholders that are rendered with Jinja2. Token
values are JSON values and are rendered as JSON text, so the string `x`
appears as `"x"` in a message. Callers override templates per keyword through
`ValidationOptions.error_templates`.
"""

import json
from functools import lru_cache
from typing import Any, Dict, Optional

import jinja2

DEFAULT_TEMPLATES: Dict[str, str] = {
    'false': 'All values fail against the false schema',
    '$ref': 'Could not resolve reference {{reference}}',
    '$ref.cycle': 'Reference {{reference}} forms a cycle',
    'const': 'Expected {{expected}} but found {{value}}',
    'enum': 'Value {{value}} is not one of {{expected}}',
    'type': 'Value is {{actual}} but should be {{expected}}',
    'multipleOf': 'Value {{actual}} should be a multiple of {{divisor}}',
    'maximum': 'Value {{actual}} should be at most {{upperBound}}',
    'exclusiveMaximum': 'Value {{actual}} should be less than {{upperBound}}',
    'minimum': 'Value {{actual}} should be at least {{lowerBound}}',
    'exclusiveMinimum': 'Value {{actual}} should be greater than {{lowerBound}}',
    'maxLength': 'String length {{actual}} exceeds the maximum of {{upperBound}}',
    'minLength': 'String length {{actual}} is below the minimum of {{lowerBound}}',
    'pattern': 'Value {{value}} does not match pattern {{pattern}}',
    'maxItems': 'Array has {{actual}} items but at most {{upperBound}} are allowed',
    'minItems': 'Array has {{actual}} items but at least {{lowerBound}} are required',
    'uniqueItems': 'Array items at indices {{duplicates}} are not unique',
    'maxProperties': 'Object has {{actual}} properties but at most {{upperBound}} are allowed',
    'minProperties': 'Object has {{actual}} properties but at least {{lowerBound}} are required',
    'required': 'Required properties {{missing}} were not found',
    'allOf': '{{failed}} of {{total}} subschemas failed validation',
    'anyOf': 'No subschemas passed validation',
    'oneOf': '{{passed}} of {{total}} subschemas passed validation; exactly one is required',
    'not': 'Value should not validate against the subschema',
    'if': 'Validation of `if` selected a branch that failed',
    'items': 'Items failed validation',
    'additionalItems': 'Items not covered by `items` failed validation',
    'contains': 'Expected an item that matches the subschema but found none',
    'properties': 'Properties {{properties}} failed validation',
    'patternProperties': 'Properties {{properties}} failed validation',
    'additionalProperties': 'Properties {{properties}} not covered by `properties` or `patternProperties` failed validation',
    'propertyNames': 'Property names {{properties}} failed validation',
    'unevaluatedItems': 'Items not covered by `items` or `additionalItems` failed validation.',
    'unevaluatedProperties': 'Properties {{properties}} not covered by other property keywords failed validation',
}

_environment = jinja2.Environment(autoescape=False)


@lru_cache(maxsize=256)
def _compile(template: str) -> jinja2.Template:
    return _environment.from_string(template)


def resolve_tokens(template: str, tokens: Optional[Dict[str, Any]] = None) -> str:
    """Renders a template, substituting each token with its JSON text."""
    rendered_tokens = {name: json.dumps(value, ensure_ascii=False)
                       for name, value in (tokens or {}).items()}
    return _compile(template).render(**rendered_tokens)


def get_template(keyword: str, overrides: Optional[Dict[str, str]] = None) -> str:
    """Looks up the template for a keyword, preferring caller overrides."""
    if overrides and keyword in overrides:
        return overrides[keyword]
    return DEFAULT_TEMPLATES.get(keyword, f'`{keyword}` failed validation')
