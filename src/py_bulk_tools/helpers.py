# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

import dis
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from .exceptions import InvalidColumnExpressionError

ColumnAccessor = Union[str, Callable[[Any], Any]]

# Interpreter bookkeeping opcodes that carry no part of the expression.
_IGNORED_OPCODES = frozenset({"RESUME", "CACHE", "NOP", "COPY_FREE_VARS", "MAKE_CELL"})


class _PropertyReference:
    """
    Marker returned by the recorder for a single attribute access.
    """

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __bool__(self):
        raise TypeError("a column accessor cannot be truth-tested")


class _PropertyRecorder:
    """
    Stand-in for a model instance that records which properties an accessor reads.
    """

    __slots__ = ("_model_name", "_known", "_reads")

    def __init__(self, model_name: str, known: Iterable[str]):
        object.__setattr__(self, "_model_name", model_name)
        object.__setattr__(self, "_known", frozenset(known))
        object.__setattr__(self, "_reads", [])

    def __getattribute__(self, name: str):
        if name == "__class__":
            return object.__getattribute__(self, name)
        known = object.__getattribute__(self, "_known")
        if name not in known:
            model_name = object.__getattribute__(self, "_model_name")
            raise AttributeError(f"'{model_name}' has no property '{name}'")
        reference = _PropertyReference(name)
        object.__getattribute__(self, "_reads").append(reference)
        return reference

    def __setattr__(self, name, value):
        raise TypeError("a column accessor cannot assign to the model")

    def __bool__(self):
        raise TypeError("a column accessor cannot be truth-tested")


def _recorded_reads(recorder: _PropertyRecorder) -> List[_PropertyReference]:
    return object.__getattribute__(recorder, "_reads")


def _is_direct_attribute_access(accessor: Callable[[Any], Any]) -> bool:
    """
    Check the bytecode of a plain function for ``arg.attr`` and nothing else.

    Callables without bytecode, such as ``operator.attrgetter``, pass.
    """
    code = getattr(accessor, "__code__", None)
    if code is None:
        return True
    if code.co_argcount != 1:
        return False

    ops = [i for i in dis.get_instructions(code) if i.opname not in _IGNORED_OPCODES]
    return (
        len(ops) == 3
        and ops[0].opname.startswith("LOAD_FAST")
        and ops[0].argval == code.co_varnames[0]
        and ops[1].opname == "LOAD_ATTR"
        and ops[2].opname == "RETURN_VALUE"
    )


def get_property_name(
    model_type: type, accessor: Callable[[Any], Any], known: Iterable[str]
) -> str:
    """
    Resolve the property name referenced by a column accessor.

    The accessor is called once with a recording stand-in for an instance of
    ``model_type``. It must read exactly one of the ``known`` properties and
    return that read directly, e.g. ``lambda x: x.name`` or
    ``operator.attrgetter("name")``. For plain functions the bytecode must also
    be a single attribute load, so ``lambda x: [x.name][0]`` is rejected.

    Raises:
        InvalidColumnExpressionError: If the accessor does anything else.
    """
    model_name = getattr(model_type, "__name__", repr(model_type))
    if not callable(accessor):
        raise InvalidColumnExpressionError(
            f"Column accessor must be callable or a property name, got {accessor!r}"
        )

    recorder = _PropertyRecorder(model_name, known)
    try:
        result = accessor(recorder)
    except Exception as e:
        raise InvalidColumnExpressionError(
            f"Column accessor for '{model_name}' must be a simple property access: {e}"
        ) from e

    if not isinstance(result, _PropertyReference):
        raise InvalidColumnExpressionError(
            f"Column accessor for '{model_name}' must return a property of the "
            f"model, got {type(result).__name__}"
        )

    reads = _recorded_reads(recorder)
    if len(reads) != 1 or reads[0] is not result:
        raise InvalidColumnExpressionError(
            f"Column accessor for '{model_name}' must read exactly one property, "
            f"read {[r.name for r in reads]}"
        )
    if not _is_direct_attribute_access(accessor):
        raise InvalidColumnExpressionError(
            f"Column accessor for '{model_name}' must be a simple property access "
            f"such as 'lambda x: x.{result.name}'"
        )
    return result.name


def resolve_column(
    model_type: type, column: ColumnAccessor, known: Iterable[str]
) -> str:
    """
    Return the property name for either a literal name or an accessor.
    """
    if isinstance(column, str):
        if not column:
            raise ValueError("Column name must not be empty.")
        return column
    return get_property_name(model_type, column, known)


def get_table_and_schema(table_name: str) -> Tuple[str, Optional[str]]:
    """
    Split a possibly schema-qualified table name.

    ``"sales.Orders"`` and ``"[sales].[Orders]"`` both give
    ``("Orders", "sales")``; ``"Orders"`` gives ``("Orders", None)``.
    """
    if not table_name or not table_name.strip():
        raise ValueError("Table name must not be empty.")

    parts = [p.strip().strip("[]\"") for p in table_name.split(".")]
    if len(parts) > 2 or not all(parts):
        raise ValueError(f"Invalid table name: {table_name}")
    if len(parts) == 2:
        return parts[1], parts[0]
    return parts[0], None
