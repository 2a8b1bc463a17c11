# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

from .bulk_insert import BulkOperationDefinition
from .exceptions import DuplicateColumnMappingError
from .helpers import ColumnAccessor, resolve_column
from .reflection import PropertyInfo
from .settings import DEFAULT_SCHEMA_NAME, BulkCopySettings

# Distinguishes "no destination given" from an explicit None.
MISSING = object()


class BulkStage:
    """
    State shared by every step of the bulk operation builder chain.

    Each step hands the same column set, custom mapping and reflected property
    list to the next one, so columns added at any step are seen by all of them.
    Schema and settings are copied when a step is created.
    """

    def __init__(
        self,
        source: Iterable[Any],
        model_type: type,
        table_name: str,
        columns: Set[str],
        custom_column_mappings: Dict[str, str],
        schema: Optional[str],
        bulk_copy_settings: BulkCopySettings,
        properties: List[PropertyInfo],
        default_schema: str = DEFAULT_SCHEMA_NAME,
    ):
        self._source = source
        self._model_type = model_type
        self._table_name = table_name
        self._columns = columns
        self._custom_column_mappings = custom_column_mappings
        self._schema = schema
        self._bulk_copy_settings = bulk_copy_settings
        self._properties = properties
        self._default_schema = default_schema

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def schema(self) -> str:
        """
        The schema the operation targets, falling back to the default schema.
        """
        return self._schema or self._default_schema

    @property
    def columns(self) -> FrozenSet[str]:
        return frozenset(self._columns)

    @property
    def custom_column_mappings(self) -> Mapping[str, str]:
        return MappingProxyType(self._custom_column_mappings)

    @property
    def bulk_copy_settings(self) -> BulkCopySettings:
        return self._bulk_copy_settings

    @property
    def properties(self) -> List[PropertyInfo]:
        return list(self._properties)

    def _property_names(self) -> List[str]:
        return [p.name for p in self._properties]

    def _resolve(self, column: ColumnAccessor) -> str:
        return resolve_column(self._model_type, column, self._property_names())

    def _include(self, column: ColumnAccessor) -> str:
        name = self._resolve(column)
        self._columns.add(name)
        return name

    def _include_mapped(self, column: ColumnAccessor, destination: str) -> str:
        if not destination:
            raise ValueError("destination must be a non-empty column name.")
        name = self._include(column)
        self._add_mapping(name, destination)
        return name

    def _add_mapping(self, property_name: str, destination: str):
        if property_name in self._custom_column_mappings:
            raise DuplicateColumnMappingError(
                f"Property '{property_name}' is already mapped to column "
                f"'{self._custom_column_mappings[property_name]}'"
            )
        self._custom_column_mappings[property_name] = destination

    def _advance(self, stage_cls):
        return stage_cls(
            self._source,
            self._model_type,
            self._table_name,
            self._columns,
            self._custom_column_mappings,
            self._schema,
            self._bulk_copy_settings,
            self._properties,
            self._default_schema,
        )

    def _freeze(self) -> BulkOperationDefinition:
        return BulkOperationDefinition(
            table_name=self._table_name,
            schema=self.schema,
            settings=self._bulk_copy_settings,
            columns=frozenset(self._columns),
            custom_column_mappings=MappingProxyType(dict(self._custom_column_mappings)),
            properties=tuple(self._properties),
            source=tuple(self._source),
            model_type=self._model_type,
        )
