# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from typing import Any, Iterable, Optional

from loguru import logger

from .bulk_add_column import BulkAddColumn, BulkAddColumnList
from .bulk_stage import MISSING, BulkStage
from .column_mapping import ColumnMapping
from .exceptions import SchemaAlreadyDefinedError
from .helpers import ColumnAccessor
from .reflection import get_all_value_type_and_string_columns, get_model_properties
from .settings import DEFAULT_SCHEMA_NAME, BulkCopySettings


class BulkTable(BulkStage):
    """
    First step of the builder chain: the destination table and copy settings.

    The model's properties are reflected once here and reused by every later
    step.
    """

    def __init__(
        self,
        source: Iterable[Any],
        model_type: type,
        table_name: str,
        schema: Optional[str] = None,
        default_schema: str = DEFAULT_SCHEMA_NAME,
    ):
        super().__init__(
            source,
            model_type,
            table_name,
            columns=set(),
            custom_column_mappings={},
            schema=schema,
            bulk_copy_settings=BulkCopySettings(),
            properties=get_model_properties(model_type),
            default_schema=default_schema,
        )

    def add_column(
        self, column: ColumnAccessor, destination=MISSING
    ) -> BulkAddColumn:
        """
        Add a column to the operation.

        Args:
            column: A property accessor such as ``lambda x: x.name``, or the
                property name itself.
            destination: The column name in the database table, when it
                differs from the property name.

        Raises:
            ValueError: If destination is given but empty.
            DuplicateColumnMappingError: If the property already has a
                destination.
            InvalidColumnExpressionError: If the accessor does not name a
                property of the model.
        """
        if destination is MISSING:
            self._include(column)
        else:
            self._include_mapped(column, destination)
        return self._advance(BulkAddColumn)

    def add_columns(self, *columns: ColumnAccessor) -> BulkAddColumn:
        for column in columns:
            self._include(column)
        return self._advance(BulkAddColumn)

    def add_column_mappings(self, mappings: Iterable[ColumnMapping]) -> BulkAddColumn:
        for mapping in mappings:
            self._columns.add(mapping.property_name)
            self._add_mapping(mapping.property_name, mapping.column_name)
        return self._advance(BulkAddColumn)

    def add_all_columns(self) -> BulkAddColumnList:
        """
        Select every property that is a value type, string or bytes.

        Any columns added before are discarded. A stage returned by an earlier
        add_column call keeps the column set it was created with.
        """
        self._columns = get_all_value_type_and_string_columns(self._properties)
        logger.debug(
            f"Added all columns of {self._model_type.__name__}: {sorted(self._columns)}"
        )
        return self._advance(BulkAddColumnList)

    def with_schema(self, schema: str) -> "BulkTable":
        """
        Set the schema explicitly. Without one, the default schema is used.

        Call this before adding columns: a column stage copies the schema and
        copy settings when it is returned and does not see later changes.

        Raises:
            SchemaAlreadyDefinedError: If a schema was already given, either
                in the table name or by an earlier call.
        """
        if self._schema is not None:
            raise SchemaAlreadyDefinedError(
                f"Schema has already been defined as '{self._schema}'."
            )
        if not schema:
            raise ValueError("schema must be a non-empty name.")
        self._schema = schema
        return self

    def with_bulk_copy_settings(self, settings: BulkCopySettings) -> "BulkTable":
        """
        Replace the copy settings. Like with_schema, this only affects column
        stages returned afterwards.
        """
        self._bulk_copy_settings = settings
        return self
