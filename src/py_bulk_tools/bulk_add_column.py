# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from .bulk_insert import BulkInsert
from .bulk_stage import MISSING, BulkStage
from .exceptions import BulkToolsError
from .helpers import ColumnAccessor


class BulkAddColumn(BulkStage):
    """
    Builder step reached once at least one column has been picked by hand.
    """

    def add_column(
        self, column: ColumnAccessor, destination=MISSING
    ) -> "BulkAddColumn":
        """
        Add another column, optionally writing it to a differently named
        destination column.
        """
        if destination is MISSING:
            self._include(column)
        else:
            self._include_mapped(column, destination)
        return self

    def add_columns(self, *columns: ColumnAccessor) -> "BulkAddColumn":
        for column in columns:
            self._include(column)
        return self

    def bulk_insert(self) -> BulkInsert:
        return BulkInsert(self._freeze())


class BulkAddColumnList(BulkStage):
    """
    Builder step reached after all eligible columns were added at once.

    Columns can still be dropped or given a custom destination name.
    """

    def remove_column(self, column: ColumnAccessor) -> "BulkAddColumnList":
        name = self._resolve(column)
        if name not in self._columns:
            raise BulkToolsError(
                f"Column '{name}' is not part of the bulk operation and cannot be removed."
            )
        self._columns.discard(name)
        self._custom_column_mappings.pop(name, None)
        return self

    def custom_column_mapping(
        self, column: ColumnAccessor, destination: str
    ) -> "BulkAddColumnList":
        """
        Write an already selected column to a differently named destination.
        """
        if not destination:
            raise ValueError("destination must be a non-empty column name.")
        name = self._resolve(column)
        if name not in self._columns:
            raise BulkToolsError(
                f"Column '{name}' is not part of the bulk operation and cannot be mapped."
            )
        self._add_mapping(name, destination)
        return self

    def bulk_insert(self) -> BulkInsert:
        return BulkInsert(self._freeze())
