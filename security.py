#!/usr/bin/env python3
"""Credential hygiene and input validation for ghmir."""

import re
import threading
from typing import Set
from urllib.parse import quote, urlsplit, urlunsplit


class SecurityValidator:
    """Input validation, destination URL construction and log redaction."""

    MAX_ENTITY_NAME_LENGTH = 100
    MIN_SECRET_LENGTH = 4

    SAFE_ENTITY_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

    # Values registered here are redacted verbatim from every log line
    _secrets: Set[str] = set()
    _secrets_lock = threading.Lock()

    @classmethod
    def validate_entity_name(cls, name: str) -> str:
        """Validate a GitHub user/org name, which also names a backup directory."""
        if not name or not isinstance(name, str):
            raise ValueError("Entity name must be a non-empty string")

        if len(name) > cls.MAX_ENTITY_NAME_LENGTH:
            raise ValueError(
                f"Entity name exceeds maximum length of {cls.MAX_ENTITY_NAME_LENGTH}"
            )

        if ".." in name or "/" in name or "\\" in name:
            raise ValueError(f"Entity name '{name}' contains invalid path characters")

        if not cls.SAFE_ENTITY_NAME_PATTERN.match(name):
            raise ValueError(f"Entity name '{name}' contains invalid characters")

        return name

    @classmethod
    def validate_gitlab_url(cls, url: str) -> str:
        """Validate the destination host base URL."""
        if not url or not isinstance(url, str):
            raise ValueError("GitLab URL must be a non-empty string")

        parts = urlsplit(url)
        if parts.scheme not in ("http", "https"):
            raise ValueError("GitLab URL must use http or https scheme")
        if not parts.netloc:
            raise ValueError("GitLab URL has no host")
        if "@" in parts.netloc:
            raise ValueError("GitLab URL must not embed credentials")

        return url.rstrip("/")

    @classmethod
    def build_remote_url(
        cls,
        base_url: str,
        credential_name: str,
        credential_token: str,
        group_name: str,
        repo_name: str,
    ) -> str:
        """Build an authenticated push URL for ``<group>/<repo>.git``.

        Every component is percent-encoded on its own so that names carrying
        URL-special characters cannot change the host or path of the remote.
        Slashes are kept in the group name to address subgroups.
        """
        parts = urlsplit(base_url)
        userinfo = f"{quote(credential_name, safe='')}:{quote(credential_token, safe='')}"
        group_path = "/".join(
            quote(segment, safe="") for segment in group_name.strip("/").split("/")
        )
        prefix = parts.path.rstrip("/")
        path = f"{prefix}/{group_path}/{quote(repo_name, safe='')}.git"
        return urlunsplit((parts.scheme, f"{userinfo}@{parts.netloc}", path, "", ""))

    @classmethod
    def register_secret(cls, value: str) -> bool:
        """Remember a credential so that it is redacted from log output.

        Values too short to redact without mangling ordinary words are ignored.
        """
        if not value or len(value) < cls.MIN_SECRET_LENGTH:
            return False
        with cls._secrets_lock:
            cls._secrets.add(value)
            # percent-encoded form appears inside remote URLs
            cls._secrets.add(quote(value, safe=""))
        return True

    @classmethod
    def clear_secrets(cls) -> None:
        with cls._secrets_lock:
            cls._secrets.clear()

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Sanitize message for safe logging by removing potential credentials."""
        if not message:
            return message

        sanitized = str(message)
        with cls._secrets_lock:
            secrets = sorted(cls._secrets, key=len, reverse=True)
        for secret in secrets:
            sanitized = sanitized.replace(secret, "[REDACTED]")

        patterns = [
            (r"(https?://)[^/\s@]+@", r"\1[REDACTED]@"),  # URLs with credentials
            (r"--token=[^\s]+", "--token=[REDACTED]"),  # ghorg token flag
            (r"token\s*[=:]\s*[^\s]+", "token=[REDACTED]"),  # Token assignments
            (r"password\s*[=:]\s*[^\s]+", "password=[REDACTED]"),  # Password assignments
            (r"glpat-[A-Za-z0-9_-]+", "[GITLAB_TOKEN_REDACTED]"),  # GitLab tokens
            (r"gh[pousr]_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),  # GitHub tokens
            (r"github_pat_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),  # Fine-grained
        ]

        for pattern, replacement in patterns:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        return sanitized
