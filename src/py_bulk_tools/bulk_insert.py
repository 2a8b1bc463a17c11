# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, FrozenSet, List, Mapping, Tuple

import pandas as pd
from loguru import logger

from .exceptions import BulkToolsError
from .reflection import PropertyInfo
from .settings import BulkCopySettings

if TYPE_CHECKING:
    from .base import BaseLoader


def _column_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


@dataclass(frozen=True)
class BulkOperationDefinition:
    """
    Read-only description of a configured bulk operation.

    This is what a loader receives: the destination table, the selected
    properties and their destination column names, the copy settings and the
    rows to load.
    """

    table_name: str
    schema: str
    settings: BulkCopySettings
    columns: FrozenSet[str]
    custom_column_mappings: Mapping[str, str]
    properties: Tuple[PropertyInfo, ...]
    source: Tuple[Any, ...]
    model_type: type

    def selected_properties(self) -> List[PropertyInfo]:
        """
        The selected properties in reflected (name) order.

        Raises:
            BulkToolsError: If no columns were selected or a selected column
                is not a property of the model.
        """
        if not self.columns:
            raise BulkToolsError("No columns have been added to the bulk operation.")

        known = {p.name for p in self.properties}
        unknown = sorted(self.columns - known)
        if unknown:
            raise BulkToolsError(
                f"Columns {unknown} do not match any property of "
                f"'{self.model_type.__name__}'"
            )
        return [p for p in self.properties if p.name in self.columns]

    def destination_columns(self) -> List[str]:
        names = [
            self.custom_column_mappings.get(p.name, p.name)
            for p in self.selected_properties()
        ]
        if len(set(names)) != len(names):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise BulkToolsError(f"Duplicate destination columns: {duplicates}")
        return names

    def to_dataframe(self) -> pd.DataFrame:
        """
        Extract the selected property values of every source item.
        """
        selected = self.selected_properties()
        rows = [
            [_column_value(getattr(item, p.name)) for p in selected]
            for item in self.source
        ]
        return pd.DataFrame(rows, columns=self.destination_columns())


class BulkInsert:
    """
    A configured bulk insert, ready to be committed through a loader.
    """

    def __init__(self, definition: BulkOperationDefinition):
        self.definition = definition

    def commit(self, loader: "BaseLoader") -> int:
        """
        Load the source rows into the destination table.

        Args:
            loader: A connected loader for the target database.

        Returns:
            The number of rows handed to the loader.
        """
        definition = self.definition
        df = definition.to_dataframe()
        logger.info(
            f"Committing bulk insert of {len(df)} rows into "
            f"{definition.schema}.{definition.table_name}"
        )
        loader.load_dataframe(
            df,
            definition.table_name,
            schema=definition.schema,
            settings=definition.settings,
        )
        return len(df)
