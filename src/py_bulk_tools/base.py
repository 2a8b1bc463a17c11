# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import pandas as pd

from .settings import BulkCopySettings


class BaseLoader(ABC):
    """
    Abstract base class for the loaders that carry out a bulk insert.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    def connect(self):
        """
        Establish and open the database connection.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """
        Terminate the database connection.
        """
        raise NotImplementedError

    @abstractmethod
    def load_dataframe(
        self,
        df: pd.DataFrame,
        table_name: str,
        schema: Optional[str] = None,
        settings: Optional[BulkCopySettings] = None,
    ):
        """
        Append the rows of a DataFrame to an existing table using the
        database's native bulk load facility.
        """
        raise NotImplementedError
