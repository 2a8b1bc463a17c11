# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/py_bulk_tools

from dataclasses import dataclass, fields
from typing import Any, Dict

DEFAULT_SCHEMA_NAME = "dbo"


@dataclass
class BulkCopySettings:
    """
    Options forwarded to the loader that performs the bulk copy.

    A batch_size of 0 sends every row in a single batch. The timeout is in
    seconds. The remaining flags map onto the native bulk copy options of
    the target database where it has them.
    """

    batch_size: int = 0
    timeout: int = 600
    keep_identity: bool = False
    check_constraints: bool = False
    table_lock: bool = True
    keep_nulls: bool = False
    fire_triggers: bool = False

    def __post_init__(self):
        if self.batch_size < 0:
            raise ValueError(f"batch_size must be >= 0, got {self.batch_size}")
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BulkCopySettings":
        """
        Build settings from a configuration dictionary, ignoring unknown keys.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config.items() if k in known})
