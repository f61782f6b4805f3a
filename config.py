#!/usr/bin/env python3
"""Configuration dataclasses for ghmir."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

DEFAULT_GITLAB_URL = "https://gitlab.com"
DEFAULT_CONFIG_PATH = "$HOME/.config/ghmir/config.yaml"


class EntityType(Enum):
    """Enumeration for GitHub account kinds, used as the ghorg clone type."""
    USER = "user"
    ORG = "org"


@dataclass(frozen=True)
class DestinationConfig:
    """GitLab credentials and target group for one entity."""
    credential_name: str
    credential_token: str
    group_name: str

    def __repr__(self) -> str:
        return (
            f"DestinationConfig(credential_name={self.credential_name!r}, "
            f"credential_token='***', group_name={self.group_name!r})"
        )


@dataclass(frozen=True)
class EntityConfig:
    """Per-entity configuration: GitHub token, account kind and destination."""
    source_token: str
    entity_type: EntityType
    destination: DestinationConfig

    def __repr__(self) -> str:
        return (
            f"EntityConfig(source_token='***', entity_type={self.entity_type}, "
            f"destination={self.destination!r})"
        )


@dataclass(frozen=True)
class MirrorConfig:
    """Parsed configuration document."""
    entities: Dict[str, EntityConfig]
    webhook_url: Optional[str] = None
    gitlab_url: str = DEFAULT_GITLAB_URL


@dataclass(frozen=True)
class RunConfig:
    """Process-wide settings built once from the command line."""
    config_path: str
    backup_root: str
    entities: Tuple[str, ...]
    push: bool = False
    workers: int = 1
    timeout_s: Optional[float] = None
