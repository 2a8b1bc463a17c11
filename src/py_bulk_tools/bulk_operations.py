# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

import inspect
from typing import Any, Iterable

from loguru import logger

from .bulk_table import BulkTable
from .helpers import get_table_and_schema
from .settings import DEFAULT_SCHEMA_NAME


class BulkForCollection:
    """
    Holds the rows to load until the destination table is chosen.
    """

    def __init__(self, model_type: type, source: Iterable[Any], default_schema: str):
        self.model_type = model_type
        self.source = source
        self.default_schema = default_schema

    def with_table(self, table_name: str) -> BulkTable:
        """
        Choose the destination table.

        A schema-qualified name such as ``"sales.Orders"`` also sets the
        schema, after which ``BulkTable.with_schema`` can no longer be used.
        """
        table, schema = get_table_and_schema(table_name)
        logger.debug(
            f"Configuring bulk operation for {self.model_type.__name__} "
            f"into table {table} (schema={schema or self.default_schema})"
        )
        return BulkTable(
            self.source,
            self.model_type,
            table,
            schema=schema,
            default_schema=self.default_schema,
        )


class Setup:
    def __init__(self, model_type: type, default_schema: str):
        self.model_type = model_type
        self.default_schema = default_schema

    def for_collection(self, source: Iterable[Any]) -> BulkForCollection:
        if source is None:
            raise ValueError("source must not be None.")
        return BulkForCollection(self.model_type, source, self.default_schema)


class BulkOperations:
    """
    Entry point of the bulk operation builder.

    Example:
        >>> bulk = BulkOperations()
        >>> insert = (
        ...     bulk.setup(Book)
        ...     .for_collection(books)
        ...     .with_table("Books")
        ...     .add_column(lambda x: x.isbn)
        ...     .add_column(lambda x: x.title, "book_title")
        ...     .bulk_insert()
        ... )
        >>> insert.commit(loader)
    """

    def __init__(self, default_schema: str = DEFAULT_SCHEMA_NAME):
        if not default_schema:
            raise ValueError("default_schema must be a non-empty name.")
        self.default_schema = default_schema

    def setup(self, model_type: type) -> Setup:
        if not inspect.isclass(model_type):
            raise TypeError(f"Expected a model class, got {model_type!r}")
        return Setup(model_type, self.default_schema)
