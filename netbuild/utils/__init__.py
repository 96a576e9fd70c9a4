"""Utility functions for netbuild."""

from netbuild.utils.identifiers import (
    coerce_device_id,
    coerce_number,
    format_number,
    utc_timestamp,
)

__all__ = [
    "coerce_device_id",
    "coerce_number",
    "format_number",
    "utc_timestamp",
]
