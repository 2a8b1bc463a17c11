# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

import io
from typing import Any, Dict, Optional

import pandas as pd
import psycopg2
from loguru import logger

from .base import BaseLoader
from .settings import BulkCopySettings


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class PostgresLoader(BaseLoader):
    """
    Loader for PostgreSQL databases.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.connection = None

    def connect(self):
        """
        Establish and open the database connection.
        """
        conn_str = (
            f"dbname='{self.config['db']}' user='{self.config['user']}' "
            f"host='{self.config['host']}' password='{self.config['password']}' "
            f"port='{self.config.get('port', 5432)}'"
        )
        logger.info(f"Connecting to PostgreSQL database at: {self.config['host']}")
        self.connection = psycopg2.connect(conn_str)

    def close(self):
        """
        Terminate the database connection.
        """
        if self.connection:
            logger.info("Closing PostgreSQL connection.")
            self.connection.close()
            self.connection = None

    def _get_copy_sql(
        self, df: pd.DataFrame, table_name: str, schema: Optional[str]
    ) -> str:
        target = _quote(table_name)
        if schema:
            target = f"{_quote(schema)}.{target}"
        columns = ", ".join(_quote(str(c)) for c in df.columns)
        return (
            f"COPY {target} ({columns}) FROM STDIN "
            f"WITH (FORMAT CSV, DELIMITER E'\\t', NULL '\\N')"
        )

    def load_dataframe(
        self,
        df: pd.DataFrame,
        table_name: str,
        schema: Optional[str] = None,
        settings: Optional[BulkCopySettings] = None,
    ):
        """
        Append a DataFrame to a PostgreSQL table using COPY FROM STDIN.

        COPY streams all rows at once, so settings.batch_size does not apply.
        """
        if not self.connection:
            raise ConnectionError("Database connection is not established.")

        if df.empty:
            logger.info("DataFrame is empty. Skipping load.")
            return

        settings = settings or BulkCopySettings()
        logger.info(f"Loading {len(df)} rows into table: {schema}.{table_name}")

        buffer = io.StringIO()
        df.to_csv(buffer, index=False, header=False, sep="\t", na_rep="\\N")
        buffer.seek(0)

        with self.connection.cursor() as cursor:
            try:
                if settings.timeout:
                    cursor.execute(
                        f"SET LOCAL statement_timeout = {settings.timeout * 1000}"
                    )
                cursor.copy_expert(self._get_copy_sql(df, table_name, schema), buffer)
                self.connection.commit()
                logger.info("DataFrame loaded successfully.")
            except Exception as e:
                self.connection.rollback()
                logger.error(f"Failed to load dataframe: {e}")
                raise
