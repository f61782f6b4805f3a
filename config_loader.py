#!/usr/bin/env python3
"""Loading and validation of the ghmir YAML configuration document."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

import yaml

from config import (DEFAULT_GITLAB_URL, DestinationConfig, EntityConfig,
                    EntityType, MirrorConfig)
from logging_utils import Logger
from security import SecurityValidator


class ConfigError(Exception):
    """Raised when the configuration document is unreadable or invalid."""


def _text(value: Any) -> str:
    """Return ``value`` stripped if it is a string, otherwise an empty string."""
    if isinstance(value, str):
        return value.strip()
    return ""


def _parse_entity(name: str, raw: Any) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"configuration for {name} must be a mapping")
    gitlab = raw.get("gitlab") or {}
    if not isinstance(gitlab, Mapping):
        raise ConfigError(f"gitlab configuration for {name} must be a mapping")
    return {
        "github_token": _text(raw.get("github_token")),
        "type": _text(raw.get("type")),
        "gitlab": {
            "token_name": _text(gitlab.get("token_name")),
            "token": _text(gitlab.get("token")),
            "group_name": _text(gitlab.get("group_name")),
        },
    }


def validate_requested_entities(
    raw_entities: Mapping[str, Mapping[str, Any]], requested: Iterable[str]
) -> Dict[str, EntityConfig]:
    """Check every requested entity and return their typed configurations.

    Stops at the first invalid entity; the error names the entity and the
    class of field that is missing or invalid. Nothing is executed here.
    """
    validated: Dict[str, EntityConfig] = {}
    for entity in requested:
        if entity not in raw_entities:
            raise ConfigError(f"configuration for {entity} not found")

        entry = raw_entities[entity]
        if not entry.get("github_token"):
            raise ConfigError(f"github_token not set for {entity}")

        gitlab = entry.get("gitlab", {})
        if not (gitlab.get("token") and gitlab.get("token_name") and gitlab.get("group_name")):
            raise ConfigError(f"incomplete gitlab configuration for {entity}")

        try:
            entity_type = EntityType(entry.get("type"))
        except ValueError:
            raise ConfigError(
                f"invalid type for {entity}: must be 'user' or 'org'"
            ) from None

        validated[entity] = EntityConfig(
            source_token=entry["github_token"],
            entity_type=entity_type,
            destination=DestinationConfig(
                credential_name=gitlab["token_name"],
                credential_token=gitlab["token"],
                group_name=gitlab["group_name"],
            ),
        )
    return validated


def _register_secrets(
    entities: Mapping[str, EntityConfig], webhook_url: Optional[str]
) -> None:
    registered = 0
    if webhook_url and SecurityValidator.register_secret(webhook_url):
        registered += 1
    for entity_config in entities.values():
        for secret in (
            entity_config.source_token,
            entity_config.destination.credential_token,
        ):
            if SecurityValidator.register_secret(secret):
                registered += 1
    Logger.security_event(
        "SECRETS_REGISTERED", f"{registered} credential(s) registered for redaction"
    )


def load_config(path: str, requested: Iterable[str]) -> MirrorConfig:
    """Read the YAML document at ``path`` and validate the requested entities.

    Only requested entities are validated and returned; others in the
    document are ignored.
    """
    requested = list(requested)
    try:
        with open(path, "r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigError("failed to parse config file: top level must be a mapping")

    raw_entities = document.get("entities") or {}
    if not isinstance(raw_entities, Mapping):
        raise ConfigError("failed to parse config file: 'entities' must be a mapping")

    parsed = {
        str(name): _parse_entity(str(name), raw)
        for name, raw in raw_entities.items()
    }

    try:
        entities = validate_requested_entities(parsed, requested)
    except ConfigError as e:
        Logger.security_event("CONFIG_VALIDATION_FAILED", str(e))
        raise

    try:
        gitlab_url = SecurityValidator.validate_gitlab_url(
            _text(document.get("gitlab_url")) or DEFAULT_GITLAB_URL
        )
    except ValueError as e:
        raise ConfigError(f"invalid gitlab_url: {e}") from e

    webhook_url = _text(document.get("discord_webhook")) or None

    _register_secrets(entities, webhook_url)
    Logger.security_event(
        "CONFIG_VALIDATION", f"validated configuration for {len(entities)} entities"
    )

    return MirrorConfig(
        entities=entities,
        webhook_url=webhook_url,
        gitlab_url=gitlab_url,
    )
