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
import sqlite3
from dataclasses import dataclass
from typing import Optional
from unittest.mock import MagicMock

import pandas as pd
import pytest

from py_bulk_tools import BulkCopySettings, BulkOperations, BulkToolsError, get_loader


class Color(enum.Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Widget:
    id: int
    name: str
    color: Color
    weight: Optional[float] = None


@pytest.fixture
def widgets():
    """
    Fixture for a list of widgets.
    """
    return [
        Widget(1, "bolt", Color.RED, 1.5),
        Widget(2, "nut", Color.BLUE),
    ]


@pytest.fixture
def bulk():
    return BulkOperations()


def test_to_dataframe_renames_and_orders_columns(bulk, widgets):
    """
    Test that values are extracted in reflected order with custom names.
    """
    definition = (
        bulk.setup(Widget)
        .for_collection(widgets)
        .with_table("widgets")
        .add_column(lambda x: x.name, "widget_name")
        .add_columns(lambda x: x.id, lambda x: x.color)
        .bulk_insert()
        .definition
    )
    expected = pd.DataFrame(
        {"color": ["red", "blue"], "id": [1, 2], "widget_name": ["bolt", "nut"]}
    )
    assert definition.destination_columns() == ["color", "id", "widget_name"]
    pd.testing.assert_frame_equal(definition.to_dataframe(), expected)


def test_to_dataframe_empty_source(bulk):
    """
    Test that an empty source gives an empty frame with the right columns.
    """
    df = (
        bulk.setup(Widget)
        .for_collection([])
        .with_table("widgets")
        .add_all_columns()
        .bulk_insert()
        .definition.to_dataframe()
    )
    assert df.empty
    assert list(df.columns) == ["color", "id", "name", "weight"]


def test_to_dataframe_unknown_column(bulk, widgets):
    """
    Test that a literal column name that is not a property fails at extraction.
    """
    definition = (
        bulk.setup(Widget)
        .for_collection(widgets)
        .with_table("widgets")
        .add_columns("id", "size")
        .bulk_insert()
        .definition
    )
    with pytest.raises(BulkToolsError, match=r"Columns \['size'\] do not match"):
        definition.to_dataframe()


def test_to_dataframe_no_columns(bulk, widgets):
    """
    Test that an operation without columns cannot be extracted.
    """
    definition = (
        bulk.setup(Widget).for_collection(widgets).with_table("widgets").add_columns().bulk_insert().definition
    )
    with pytest.raises(BulkToolsError, match="No columns have been added"):
        definition.to_dataframe()


def test_destination_columns_duplicates(bulk, widgets):
    """
    Test that two properties mapped to the same column are rejected.
    """
    definition = (
        bulk.setup(Widget)
        .for_collection(widgets)
        .with_table("widgets")
        .add_column(lambda x: x.name, "id")
        .add_column(lambda x: x.id)
        .bulk_insert()
        .definition
    )
    with pytest.raises(BulkToolsError, match="Duplicate destination columns"):
        definition.destination_columns()


def test_definition_is_frozen(bulk, widgets):
    """
    Test that the handed-off definition cannot be changed.
    """
    definition = (
        bulk.setup(Widget).for_collection(widgets).with_table("widgets").add_all_columns().bulk_insert().definition
    )
    with pytest.raises(AttributeError):
        definition.table_name = "other"
    with pytest.raises(TypeError):
        definition.custom_column_mappings["id"] = "x"


def test_source_generator_is_materialized(bulk, widgets):
    """
    Test that a generator source is read once at hand-off.
    """
    definition = (
        bulk.setup(Widget)
        .for_collection(w for w in widgets)
        .with_table("widgets")
        .add_column(lambda x: x.id)
        .bulk_insert()
        .definition
    )
    assert len(definition.to_dataframe()) == 2
    assert len(definition.to_dataframe()) == 2


def test_commit_calls_loader(bulk, widgets):
    """
    Test that commit hands the frame, schema and settings to the loader.
    """
    settings = BulkCopySettings(batch_size=100)
    loader = MagicMock()
    table = bulk.setup(Widget).for_collection(widgets).with_table("sales.widgets")
    table.with_bulk_copy_settings(settings)
    rows = table.add_column(lambda x: x.id, "widget_id").bulk_insert().commit(loader)

    assert rows == 2
    loader.load_dataframe.assert_called_once()
    args, kwargs = loader.load_dataframe.call_args
    pd.testing.assert_frame_equal(args[0], pd.DataFrame({"widget_id": [1, 2]}))
    assert args[1] == "widgets"
    assert kwargs == {"schema": "sales", "settings": settings}


def test_commit_sqlite_end_to_end(bulk, widgets):
    """
    Test a full chain committed through the SQLite loader.
    """
    loader = get_loader({"db_type": "sqlite", "db_path": ":memory:"})
    loader.connect()
    loader.connection.execute(
        "CREATE TABLE widgets (widget_id INTEGER, label TEXT, color TEXT, weight REAL)"
    )

    table = bulk.setup(Widget).for_collection(widgets).with_table("widgets")
    (
        table.add_all_columns()
        .custom_column_mapping(lambda x: x.id, "widget_id")
        .custom_column_mapping(lambda x: x.name, "label")
        .bulk_insert()
        .commit(loader)
    )

    result = loader.connection.execute(
        "SELECT widget_id, label, color, weight FROM widgets ORDER BY widget_id"
    ).fetchall()
    assert result == [(1, "bolt", "red", 1.5), (2, "nut", "blue", None)]
    loader.close()


def test_commit_sqlite_error_propagates(bulk, widgets):
    """
    Test that a driver error during commit reaches the caller.
    """
    loader = get_loader({"db_type": "sqlite", "db_path": ":memory:"})
    loader.connect()
    loader.connection.execute("CREATE TABLE widgets (id INTEGER)")

    insert = (
        bulk.setup(Widget)
        .for_collection(widgets)
        .with_table("widgets")
        .add_column(lambda x: x.name, "missing_column")
        .bulk_insert()
    )
    with pytest.raises(sqlite3.OperationalError):
        insert.commit(loader)
    loader.close()
