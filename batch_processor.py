#!/usr/bin/env python3
"""Mirrors every locally cloned repository of one entity."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List

from config import EntityConfig
from git_client import GitClient
from logging_utils import Logger
from mirror_executor import MirrorExecutor
from notifier import WebhookNotifier
from remote_reconciler import RemoteReconciler
from results import BatchResult, RepositoryResult
from utils import backup_directory


class BatchError(Exception):
    """The entity's backup directory is missing or cannot be listed."""


class BatchProcessor:
    def __init__(
        self,
        git: GitClient,
        notifier: WebhookNotifier,
        gitlab_url: str,
        workers: int = 1,
    ) -> None:
        self.git = git
        self.notifier = notifier
        self.gitlab_url = gitlab_url
        self.workers = max(1, workers)

    def discover(self, entity_name: str, backup_root: str) -> List[str]:
        """Return absolute paths of the repository directories, sorted by name."""
        directory = os.path.abspath(backup_directory(backup_root, entity_name))
        if not os.path.isdir(directory):
            raise BatchError(f"directory {directory} not found")
        try:
            with os.scandir(directory) as entries:
                # symlinked directories are not clones of their own
                names = sorted(
                    entry.name
                    for entry in entries
                    if entry.is_dir(follow_symlinks=False)
                )
        except OSError as e:
            raise BatchError(f"failed to read directory {directory}: {e}") from e
        return [os.path.join(directory, name) for name in names]

    def process(
        self, entity_name: str, entity_config: EntityConfig, backup_root: str
    ) -> BatchResult:
        """Mirror all repositories of ``entity_name`` and send the summary.

        Each repository is attempted once; failures are logged and recorded
        without stopping the batch.
        """
        Logger.info(
            f"processing {entity_name} repositories in "
            f"{backup_directory(backup_root, entity_name)}..."
        )
        repo_paths = self.discover(entity_name, backup_root)

        reconciler = RemoteReconciler(self.git, entity_config.destination, self.gitlab_url)
        executor = MirrorExecutor(self.git, reconciler)
        batch = BatchResult(entity_name=entity_name)

        total = len(repo_paths)
        for idx, result in enumerate(self._run(executor, repo_paths), start=1):
            if not result.succeeded:
                Logger.error(
                    f"[{idx}/{total}] error mirroring {result.name}: {result.reason}"
                )
            batch.record(result)

        summary = batch.summary()
        Logger.info(summary)
        self.notifier.send(summary)
        return batch

    def _run(self, executor: MirrorExecutor, repo_paths: List[str]):
        if self.workers == 1 or len(repo_paths) <= 1:
            for path in repo_paths:
                yield executor.mirror(path)
            return

        # map() yields in submission order, keeping failures in discovery order
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            results: List[RepositoryResult] = list(pool.map(executor.mirror, repo_paths))
        yield from results
