"""
Dataclass ↔ camelCase dict helpers for wire-shaped data.
"""

from dataclasses import fields, is_dataclass
from typing import Any, Dict, Type, TypeVar

from jobtrail.utils.text_processing import camel_to_snake, snake_to_camel

T = TypeVar("T")


def from_camel_dict(cls: Type[T], data: Dict[str, Any]) -> T:
    """
    Build a dataclass from a dict with camelCase (or snake_case) keys.

    Keys that don't correspond to a field are ignored; missing fields take
    their defaults.

    Example:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Span:
        ...     start_year: int = 0
        >>> from_camel_dict(Span, {"startYear": 2020, "unknown": 1})
        Span(start_year=2020)
    """
    known = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in (data or {}).items():
        name = camel_to_snake(key)
        if name in known:
            kwargs[name] = value
    return cls(**kwargs)


def to_camel_dict(instance: Any, drop_none: bool = True) -> Dict[str, Any]:
    """
    Convert a flat dataclass to a camelCase dict.

    Nested dataclasses and lists of dataclasses are converted recursively.
    None values are dropped unless drop_none is False.
    """
    result = {}
    for f in fields(instance):
        value = getattr(instance, f.name)
        if value is None and drop_none:
            continue
        if is_dataclass(value):
            value = to_camel_dict(value, drop_none)
        elif isinstance(value, list):
            value = [to_camel_dict(item, drop_none) if is_dataclass(item) else item for item in value]
        result[snake_to_camel(f.name)] = value
    return result
