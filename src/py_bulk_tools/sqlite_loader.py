# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

import sqlite3
from typing import Any, Dict, Optional

import pandas as pd
from loguru import logger

from .base import BaseLoader
from .settings import BulkCopySettings


class SQLiteLoader(BaseLoader):
    """
    Loader for SQLite databases.

    SQLite has a single namespace per connection, so the schema is ignored.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.connection = None

    def connect(self):
        """
        Establish and open the database connection.
        """
        db_path = self.config.get("db_path", ":memory:")
        logger.info(f"Connecting to SQLite database at: {db_path}")
        self.connection = sqlite3.connect(db_path)

    def close(self):
        """
        Terminate the database connection.
        """
        if self.connection:
            logger.info("Closing SQLite connection.")
            self.connection.close()
            self.connection = None

    def load_dataframe(
        self,
        df: pd.DataFrame,
        table_name: str,
        schema: Optional[str] = None,
        settings: Optional[BulkCopySettings] = None,
    ):
        """
        Append a DataFrame to a SQLite table using pandas.to_sql().
        """
        if not self.connection:
            raise ConnectionError("Database connection is not established.")

        if df.empty:
            logger.info("DataFrame is empty. Skipping load.")
            return

        settings = settings or BulkCopySettings()
        logger.info(
            f"Loading {len(df)} rows into table: {table_name} "
            f"(batch_size={settings.batch_size})"
        )

        try:
            df.to_sql(
                table_name,
                self.connection,
                if_exists="append",
                index=False,
                chunksize=settings.batch_size or None,
            )
            self.connection.commit()
            logger.info("Dataframe loaded successfully.")
        except Exception as e:
            logger.error(f"Failed to load dataframe: {e}")
            self.connection.rollback()
            raise
