# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools


class BulkToolsError(Exception):
    """
    Base class for all errors raised while configuring a bulk operation.
    """


class SchemaAlreadyDefinedError(BulkToolsError):
    """
    Raised when a schema is set on a table that already has one.
    """


class DuplicateColumnMappingError(BulkToolsError, ValueError):
    """
    Raised when a property is given a custom destination column twice.
    """


class InvalidColumnExpressionError(BulkToolsError, ValueError):
    """
    Raised when a column accessor does not resolve to a single model property.
    """
