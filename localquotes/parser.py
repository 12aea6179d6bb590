"""
Parser for quote block bodies.

Bodies are `key: value` lines:

    id: morning
    search: Seneca | #stoic
    refresh: 3600
    class: wide muted

Values may contain `#`, so bodies are split line by line rather than read as
YAML. Unknown keys are ignored and bad values decode to None.
"""

import logging
from typing import Dict, Optional

from .models import BlockDescriptor, OneTimeBlockDescriptor


CLASS_KEYS = ("class", "customclass", "custom_class")


def _parse_fields(source: str) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for line in source.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip()
        if key and value:
            fields[key] = value
    return fields


def _parse_refresh(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        refresh = int(value)
    except ValueError:
        logging.warning(f"Ignoring non-numeric refresh interval '{value}'")
        return None
    if refresh < 0:
        logging.warning(f"Ignoring negative refresh interval {refresh}")
        return None
    return refresh


def _custom_class(fields: Dict[str, str]) -> Optional[str]:
    for key in CLASS_KEYS:
        if key in fields:
            return fields[key]
    return None


def parse_code_block(source: str) -> BlockDescriptor:
    """
    Parse the body of a recurring quote block.

    Args:
        source: Raw block body

    Returns:
        Descriptor with absent fields set to None
    """
    fields = _parse_fields(source)
    return BlockDescriptor(
        id=fields.get("id"),
        search=fields.get("search"),
        custom_class=_custom_class(fields),
        refresh=_parse_refresh(fields.get("refresh"))
    )


def parse_one_time_code_block(source: str) -> OneTimeBlockDescriptor:
    """Parse the body of a one-time quote block."""
    fields = _parse_fields(source)
    return OneTimeBlockDescriptor(
        search=fields.get("search"),
        custom_class=_custom_class(fields)
    )
