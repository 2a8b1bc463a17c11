# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from py_bulk_tools.postgres_loader import PostgresLoader
from py_bulk_tools.settings import BulkCopySettings


@pytest.fixture
def sample_df():
    """
    Fixture for a sample pandas DataFrame.
    """
    return pd.DataFrame({"col_int": [1, 2], "col_str": ["A", None]})


@pytest.fixture
def postgres_config():
    """
    Fixture for a sample PostgreSQL config.
    """
    return {
        "db_type": "postgres",
        "host": "localhost",
        "port": 5432,
        "db": "testdb",
        "user": "testuser",
        "password": "testpassword",
    }


@pytest.fixture
def connected_loader(postgres_config):
    """
    Fixture for a PostgresLoader with a mocked connection and cursor.
    """
    loader = PostgresLoader(postgres_config)
    loader.connection = MagicMock()
    cursor = MagicMock()
    loader.connection.cursor.return_value.__enter__.return_value = cursor
    return loader, cursor


@patch("psycopg2.connect")
def test_postgres_loader_connect(mock_connect, postgres_config):
    """
    Test the connect method establishes a connection.
    """
    mock_conn = MagicMock()
    mock_connect.return_value = mock_conn

    loader = PostgresLoader(postgres_config)
    loader.connect()

    assert loader.connection == mock_conn
    mock_connect.assert_called_once_with(
        "dbname='testdb' user='testuser' host='localhost' "
        "password='testpassword' port='5432'"
    )
    loader.close()


@patch("psycopg2.connect")
def test_postgres_loader_close(mock_connect, postgres_config):
    """
    Test that the close method correctly closes the connection.
    """
    mock_conn = MagicMock()
    mock_connect.return_value = mock_conn

    loader = PostgresLoader(postgres_config)
    loader.connect()
    connection = loader.connection
    loader.close()

    assert loader.connection is None
    connection.close.assert_called_once()


def test_postgres_loader_load_dataframe(connected_loader, sample_df):
    """
    Test that load_dataframe issues a COPY with the column list and schema.
    """
    loader, cursor = connected_loader

    loader.load_dataframe(
        sample_df, "orders", schema="sales", settings=BulkCopySettings(timeout=30)
    )

    cursor.execute.assert_called_once_with("SET LOCAL statement_timeout = 30000")
    cursor.copy_expert.assert_called_once()
    sql, buffer = cursor.copy_expert.call_args[0]
    assert sql.startswith('COPY "sales"."orders" ("col_int", "col_str") FROM STDIN')
    assert buffer.getvalue() == "1\tA\n2\t\\N\n"
    loader.connection.commit.assert_called_once()


def test_postgres_loader_load_dataframe_no_schema_no_timeout(connected_loader, sample_df):
    """
    Test COPY into an unqualified table with the statement timeout disabled.
    """
    loader, cursor = connected_loader

    loader.load_dataframe(sample_df, "orders", settings=BulkCopySettings(timeout=0))

    cursor.execute.assert_not_called()
    sql = cursor.copy_expert.call_args[0][0]
    assert sql.startswith('COPY "orders" (')


def test_postgres_loader_quotes_identifiers(connected_loader):
    """
    Test that embedded double quotes in identifiers are escaped.
    """
    loader, _ = connected_loader
    df = pd.DataFrame({'we"ird': [1]})
    sql = loader._get_copy_sql(df, "t", None)
    assert sql.startswith('COPY "t" ("we""ird")')


def test_postgres_loader_load_dataframe_rollback(connected_loader, sample_df):
    """
    Test that a failed COPY is rolled back and re-raised.
    """
    loader, cursor = connected_loader
    cursor.copy_expert.side_effect = RuntimeError("copy failed")

    with pytest.raises(RuntimeError, match="copy failed"):
        loader.load_dataframe(sample_df, "orders", schema="public")

    loader.connection.rollback.assert_called_once()
    loader.connection.commit.assert_not_called()


def test_postgres_loader_load_dataframe_empty(connected_loader):
    """
    Test that load_dataframe skips execution for an empty DataFrame.
    """
    loader, cursor = connected_loader
    loader.load_dataframe(pd.DataFrame({"col1": []}), "orders")
    cursor.copy_expert.assert_not_called()


def test_postgres_loader_load_dataframe_no_connection(postgres_config, sample_df):
    """
    Test that load_dataframe raises a ConnectionError if connect has not been called.
    """
    loader = PostgresLoader(postgres_config)
    with pytest.raises(
        ConnectionError, match="Database connection is not established."
    ):
        loader.load_dataframe(sample_df, "test_table")
