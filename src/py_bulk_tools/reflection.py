# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

import datetime
import decimal
import enum
import inspect
import types
import typing
import uuid
from dataclasses import dataclass
from typing import Any, List, Set, Union

import numpy as np

# Types that can be written to a single table column as-is.
VALUE_TYPES = (
    bool,
    int,
    float,
    complex,
    decimal.Decimal,
    enum.Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    np.generic,
    str,
    bytes,
    bytearray,
)

_UNION_TYPES = tuple(
    t for t in (Union, getattr(types, "UnionType", None)) if t is not None
)


@dataclass(frozen=True)
class PropertyInfo:
    """
    Name and declared type of a single model property.
    """

    name: str
    type: Any


def get_model_properties(model_type: type) -> List[PropertyInfo]:
    """
    Reflect the public properties of a model class, sorted by name.

    Annotated class attributes (dataclass fields, NamedTuple fields and plain
    class annotations) are picked up together with ``@property`` getters that
    carry a return annotation. Private names and ClassVars are skipped.
    """
    if not inspect.isclass(model_type):
        raise TypeError(f"Expected a model class, got {model_type!r}")

    found = {}
    for name, tp in typing.get_type_hints(model_type).items():
        if name.startswith("_") or typing.get_origin(tp) is typing.ClassVar:
            continue
        found[name] = tp

    for name, member in inspect.getmembers(model_type):
        if name.startswith("_") or name in found:
            continue
        if isinstance(member, property) and member.fget is not None:
            hints = typing.get_type_hints(member.fget)
            found[name] = hints.get("return", Any)

    return [PropertyInfo(name, tp) for name, tp in sorted(found.items())]


def _unwrap_optional(tp: Any) -> Any:
    if typing.get_origin(tp) in _UNION_TYPES:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def is_value_type_or_string(tp: Any) -> bool:
    """
    True if a property of this type maps onto a single column value.
    """
    tp = _unwrap_optional(tp)
    return inspect.isclass(tp) and issubclass(tp, VALUE_TYPES)


def get_all_value_type_and_string_columns(
    properties: List[PropertyInfo],
) -> Set[str]:
    return {p.name for p in properties if is_value_type_or_string(p.type)}
