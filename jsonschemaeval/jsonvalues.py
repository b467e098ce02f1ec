"""
Helpers over the JSON value model.

Instances are the plain Python values produced by `json.load`: None, bool,
int, float, str, list and dict. These helpers give them JSON semantics,
in particular that `true` is not `1` and that `1` equals `1.0`.
"""

from typing import Any


def is_number(value: Any) -> bool:
    """True for JSON numbers; booleans are excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integral(value: Any) -> bool:
    """True for numbers without a fractional part, e.g. 3 and 3.0."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def json_type_of(value: Any) -> str:
    """Returns the JSON type name of a value."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, int):
        return 'integer'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def json_equals(left: Any, right: Any) -> bool:
    """
    Deep structural equality with JSON semantics.

    Object key order is ignored, array order is significant and numbers
    compare by value regardless of int/float representation.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(json_equals(l, r) for l, r in zip(left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equals(value, right[key]) for key, value in left.items())
    if type(left) is not type(right):
        return False
    return left == right


def json_hash(value: Any) -> int:
    """A hash consistent with `json_equals`."""
    if isinstance(value, bool):
        return hash(('boolean', value))
    if isinstance(value, list):
        return hash(('array', tuple(json_hash(item) for item in value)))
    if isinstance(value, dict):
        return hash(('object', frozenset((key, json_hash(item)) for key, item in value.items())))
    # hash(1) == hash(1.0), matching numeric equality
    return hash(value)
