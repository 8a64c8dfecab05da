"""
Query DSL helpers.

Predicates are strings shaped ``op(field,value)`` that the server parses and
evaluates; ``field`` may be a dot path into the document data and ``value`` is
a JSON literal. These helpers only build the strings, nothing is evaluated
locally.

    User.where(q=[eq("status", "active"), gt("age", 21)], order=[desc("name")])
"""

import json
from typing import Any

OPERATORS = ("eq", "ne", "gt", "gte", "lt", "lte", "in", "nin", "contains", "exists")


def predicate(op: str, field: str, value: Any) -> str:
    """Build a single ``op(field,value)`` predicate."""
    if op not in OPERATORS:
        raise ValueError(f"Unknown query operator: {op}")
    return f"{op}({field},{json.dumps(value, separators=(',', ':'))})"


def eq(field: str, value: Any) -> str:
    return predicate("eq", field, value)


def ne(field: str, value: Any) -> str:
    return predicate("ne", field, value)


def gt(field: str, value: Any) -> str:
    return predicate("gt", field, value)


def gte(field: str, value: Any) -> str:
    return predicate("gte", field, value)


def lt(field: str, value: Any) -> str:
    return predicate("lt", field, value)


def lte(field: str, value: Any) -> str:
    return predicate("lte", field, value)


def in_(field: str, values: list) -> str:
    return predicate("in", field, list(values))


def nin(field: str, values: list) -> str:
    return predicate("nin", field, list(values))


def contains(field: str, value: Any) -> str:
    return predicate("contains", field, value)


def exists(field: str, value: bool = True) -> str:
    return predicate("exists", field, value)


def asc(field: str) -> str:
    """Ascending order term."""
    return field.lstrip("-")


def desc(field: str) -> str:
    """Descending order term."""
    return f"-{field.lstrip('-')}"
