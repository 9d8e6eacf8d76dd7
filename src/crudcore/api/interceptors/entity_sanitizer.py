"""
Response sanitization.

Each field of every mapping in a result is checked against `RULES` in order and
the first matching rule decides what happens to it:

| # | matches                         | effect                                         |
| - | ------------------------------- | ---------------------------------------------- |
| 1 | key == "password"               | dropped                                        |
| 2 | key == "_id"                    | renamed to "id"; value str() unless str/int    |
| 3 | key starts with "_"             | dropped                                        |
| 4 | callable value                  | dropped                                        |
| 5 | mapping or list value           | sanitized recursively                          |
| 6 | ObjectId value                  | str()                                          |
| - | anything else                   | kept as-is                                     |

Example:
    >>> sanitize({"_id": "abc", "password": "x", "nested": {"_id": "y", "fn": print}})
    {'id': 'abc', 'nested': {'id': 'y'}}

The input is never mutated; a new structure is returned.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from bson import ObjectId

from .base import CallNext, ExecutionContext, Interceptor

# (key, value) pairs a rule emits for a field; empty means the field is dropped
Fields = tuple[tuple[str, Any], ...]
DROP: Fields = ()


@dataclass(frozen=True)
class SanitizerRule:
    name: str
    matches: Callable[[Any, Any], bool]
    transform: Callable[[Any, Any], Fields]


def _public_id(key: Any, value: Any) -> Fields:
    if isinstance(value, (str, int)):
        return (("id", value),)
    return (("id", str(value)),)


def _is_private(key: Any, value: Any) -> bool:
    return isinstance(key, str) and key.startswith("_")


def _is_nested(key: Any, value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


RULES: tuple[SanitizerRule, ...] = (
    SanitizerRule("password", lambda key, value: key == "password", lambda key, value: DROP),
    SanitizerRule("public_id", lambda key, value: key == "_id", _public_id),
    SanitizerRule("private", _is_private, lambda key, value: DROP),
    SanitizerRule("callable", lambda key, value: callable(value), lambda key, value: DROP),
    SanitizerRule("nested", _is_nested, lambda key, value: ((key, sanitize(value)),)),
    SanitizerRule("object_id", lambda key, value: isinstance(value, ObjectId), lambda key, value: ((key, str(value)),)),
)


def _sanitize_field(key: Any, value: Any) -> Fields:
    for rule in RULES:
        if rule.matches(key, value):
            return rule.transform(key, value)
    return ((key, value),)


def sanitize(value: Any) -> Any:
    """Apply `RULES` to every mapping in `value`; lists are handled element-wise."""
    if isinstance(value, Mapping):
        clean: dict[Any, Any] = {}
        for key, item in value.items():
            clean.update(_sanitize_field(key, item))
        return clean
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    return value


class EntitySanitizerInterceptor(Interceptor):
    async def intercept(self, context: ExecutionContext, call_next: CallNext) -> Any:
        result = await call_next()
        if result is None:
            return None
        return sanitize(result)
