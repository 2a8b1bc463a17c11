# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

"""
A fluent builder for bulk-loading sequences of model objects into SQL tables. It collects the columns, custom column names, schema and copy settings of an operation and hands the result to a loader that uses each database's native bulk-loading method (e.g., `COPY`, `BULK INSERT`).
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .bulk_add_column import BulkAddColumn, BulkAddColumnList
from .bulk_insert import BulkInsert, BulkOperationDefinition
from .bulk_operations import BulkOperations
from .bulk_table import BulkTable
from .column_mapping import ColumnMapping
from .exceptions import (
    BulkToolsError,
    DuplicateColumnMappingError,
    InvalidColumnExpressionError,
    SchemaAlreadyDefinedError,
)
from .main import get_loader
from .settings import DEFAULT_SCHEMA_NAME, BulkCopySettings

__all__ = [
    "BulkAddColumn",
    "BulkAddColumnList",
    "BulkCopySettings",
    "BulkInsert",
    "BulkOperationDefinition",
    "BulkOperations",
    "BulkTable",
    "BulkToolsError",
    "ColumnMapping",
    "DEFAULT_SCHEMA_NAME",
    "DuplicateColumnMappingError",
    "InvalidColumnExpressionError",
    "SchemaAlreadyDefinedError",
    "get_loader",
]
