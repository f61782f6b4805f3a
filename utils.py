#!/usr/bin/env python3
"""Utility functions for ghmir."""

import os
from typing import List, Optional

from security import SecurityValidator


def expand_path(value: Optional[str]) -> Optional[str]:
    """Expand environment variables and a leading ``~`` in a path."""
    if value is None:
        return None
    return os.path.expanduser(os.path.expandvars(value))


def parse_entity_list(value: str) -> List[str]:
    """Split a comma-separated entity list, trimming whitespace.

    Empty names (``"a,,b"`` or a trailing comma) and names that cannot be used
    as a backup directory component raise ``ValueError``.
    """
    if not value or not value.strip():
        raise ValueError("entities list is empty")

    entities: List[str] = []
    for raw in value.split(","):
        name = raw.strip()
        if not name:
            raise ValueError("empty entity name in entities list")
        entities.append(SecurityValidator.validate_entity_name(name))
    return entities


def backup_directory(backup_root: str, entity_name: str) -> str:
    """Return the directory holding the local clones of one entity."""
    return os.path.join(backup_root, f"{entity_name}_backup")
