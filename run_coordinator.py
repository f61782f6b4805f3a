#!/usr/bin/env python3
"""Top-level coordinator: clone each entity with ghorg, then mirror it to GitLab."""

from __future__ import annotations

import os
from typing import Dict

from batch_processor import BatchError, BatchProcessor
from cloner import GhorgCloner
from config import MirrorConfig, RunConfig
from config_loader import ConfigError, load_config
from git_client import GitClient
from logging_utils import Logger
from notifier import WebhookNotifier
from results import BatchResult

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_CONFIG_ERROR = 20
EXIT_FILESYSTEM_ERROR = 21


class RunCoordinator:
    """Processes the requested entities one after another.

    Configuration problems and an unusable backup root abort the run before
    any entity is touched. A failed clone or a missing backup directory only
    skips that entity; the exit status stays successful.
    """

    def __init__(self, run_cfg: RunConfig) -> None:
        self.run_cfg = run_cfg
        self.cloner = GhorgCloner()
        self.git = GitClient(timeout_s=run_cfg.timeout_s)
        self.results: Dict[str, BatchResult] = {}

    def run(self) -> int:
        try:
            backup_root = os.path.abspath(self.run_cfg.backup_root)
            try:
                os.makedirs(backup_root, mode=0o755, exist_ok=True)
            except OSError as e:
                Logger.error(f"failed to create backup directory {backup_root}: {e}")
                return EXIT_FILESYSTEM_ERROR

            try:
                mirror_cfg = load_config(self.run_cfg.config_path, self.run_cfg.entities)
            except ConfigError as e:
                Logger.error(f"failed to load config: {e}")
                return EXIT_CONFIG_ERROR

            batch = self._build_batch_processor(mirror_cfg)
            total = len(self.run_cfg.entities)
            for idx, entity in enumerate(self.run_cfg.entities, start=1):
                Logger.info(f"[{idx}/{total}] entity: {entity}")
                try:
                    self._process_entity(entity, mirror_cfg, backup_root, batch)
                except Exception as e:
                    Logger.error(f"unexpected error processing {entity}: {e}")

            Logger.info("run completed")
            return EXIT_SUCCESS
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def _build_batch_processor(self, mirror_cfg: MirrorConfig) -> BatchProcessor:
        notifier = WebhookNotifier(mirror_cfg.webhook_url, timeout_s=self.run_cfg.timeout_s)
        return BatchProcessor(
            self.git,
            notifier,
            mirror_cfg.gitlab_url,
            workers=self.run_cfg.workers,
        )

    def _process_entity(
        self,
        entity: str,
        mirror_cfg: MirrorConfig,
        backup_root: str,
        batch: BatchProcessor,
    ) -> None:
        entity_config = mirror_cfg.entities[entity]

        if not self.cloner.clone(entity, entity_config, backup_root):
            Logger.warn(f"skipping {entity}: clone failed")
            return

        if not self.run_cfg.push:
            Logger.info(f"push disabled, not mirroring {entity}")
            return

        try:
            self.results[entity] = batch.process(entity, entity_config, backup_root)
        except BatchError as e:
            Logger.error(f"error processing {entity} repositories: {e}")
