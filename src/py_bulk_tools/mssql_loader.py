# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from typing import Any, Dict, List, Optional

import pandas as pd
from loguru import logger

from .base import BaseLoader
from .settings import BulkCopySettings


class MSSQLLoader(BaseLoader):
    """
    Loader for Microsoft SQL Server databases.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.connection = None

    def connect(self):
        """
        Establish and open the database connection.
        """
        # Imported here so the package works without the unixODBC libraries.
        import pyodbc

        try:
            conn_str = f"DRIVER={{ODBC Driver 17 for SQL Server}};SERVER={self.config['server']};DATABASE={self.config['database']};UID={self.config['username']};PWD={self.config['password']}"
            self.connection = pyodbc.connect(conn_str)
        except Exception as e:
            logger.error(f"Failed to connect to MSSQL: {e}")
            raise

    def close(self):
        """
        Terminate the database connection.
        """
        if self.connection:
            self.connection.close()
            self.connection = None

    def _get_bulk_options(self, settings: BulkCopySettings) -> List[str]:
        """
        Translate copy settings into BULK INSERT WITH options.
        """
        options = [
            "FIRSTROW = 2",
            "FIELDTERMINATOR = '|'",
            "ROWTERMINATOR = '\\n'",
        ]
        if settings.batch_size:
            options.append(f"BATCHSIZE = {settings.batch_size}")
        if settings.keep_identity:
            options.append("KEEPIDENTITY")
        if settings.check_constraints:
            options.append("CHECK_CONSTRAINTS")
        if settings.table_lock:
            options.append("TABLOCK")
        if settings.keep_nulls:
            options.append("KEEPNULLS")
        if settings.fire_triggers:
            options.append("FIRE_TRIGGERS")
        return options

    def _get_bulk_insert_sql(
        self,
        table_name: str,
        schema: Optional[str],
        staging_file_path: str,
        settings: BulkCopySettings,
    ) -> str:
        target = f"[{schema}].[{table_name}]" if schema else f"[{table_name}]"
        options = ",\n    ".join(self._get_bulk_options(settings))
        return f"BULK INSERT {target}\nFROM '{staging_file_path}'\nWITH (\n    {options}\n);"

    def load_dataframe(
        self,
        df: pd.DataFrame,
        table_name: str,
        schema: Optional[str] = None,
        settings: Optional[BulkCopySettings] = None,
    ):
        """
        Append a DataFrame to a SQL Server table with BULK INSERT from a
        staging file.
        """
        if not self.connection:
            raise ConnectionError("Database connection is not established.")

        if df.empty:
            logger.info("DataFrame is empty. Skipping load.")
            return

        staging_file_path = self.config.get("staging_file_path")
        if not staging_file_path:
            raise ValueError(
                "'staging_file_path' must be provided in the configuration for MSSQLLoader."
            )

        settings = settings or BulkCopySettings()
        logger.info(f"Loading {len(df)} rows into table: {schema}.{table_name}")

        # BULK INSERT maps fields by position, so the file header is skipped
        # and the table columns must follow the DataFrame order.
        df.to_csv(staging_file_path, index=False, header=True, sep="|", quotechar='"')

        try:
            self.connection.timeout = settings.timeout
            with self.connection.cursor() as cursor:
                cursor.execute(
                    self._get_bulk_insert_sql(
                        table_name, schema, staging_file_path, settings
                    )
                )
            self.connection.commit()
            logger.info("Successfully loaded data to MSSQL.")
        except Exception as e:
            logger.error(f"Failed to load data to MSSQL: {e}")
            if self.connection:
                self.connection.rollback()
            raise
