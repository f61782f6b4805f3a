#!/usr/bin/env python3
"""Invokes ghorg to back up every repository of a GitHub user or org."""

from __future__ import annotations

import subprocess
from typing import List

from config import EntityConfig
from logging_utils import Logger


class GhorgCloner:
    """Runs ``ghorg clone`` for one entity; only the exit status matters.

    ghorg writes ``<path>/<entity>_backup/<repo>/`` which is where the
    batch processor later looks for repositories.
    """

    GHORG_BINARY = "ghorg"

    def build_command(
        self, entity_name: str, entity_config: EntityConfig, backup_root: str
    ) -> List[str]:
        return [
            self.GHORG_BINARY,
            "clone",
            entity_name,
            f"--clone-type={entity_config.entity_type.value}",
            f"--token={entity_config.source_token}",
            "--backup",
            "--include-submodules",
            f"--path={backup_root}",
        ]

    def clone(
        self, entity_name: str, entity_config: EntityConfig, backup_root: str
    ) -> bool:
        """Return True if ghorg exited successfully."""
        cmd = self.build_command(entity_name, entity_config, backup_root)
        Logger.info(f"cloning {entity_name} repositories with ghorg...")
        try:
            # ghorg progress is streamed straight to the operator's terminal
            subprocess.run(cmd, check=True)
        except subprocess.CalledProcessError as e:
            Logger.warn(
                f"failed to clone {entity_name} repositories: exit status {e.returncode}"
            )
            return False
        except (OSError, ValueError) as e:
            # ValueError: arguments subprocess cannot pass, e.g. an embedded NUL
            Logger.warn(f"failed to clone {entity_name} repositories: {e}")
            return False
        return True
