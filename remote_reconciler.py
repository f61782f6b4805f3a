#!/usr/bin/env python3
"""Idempotent configuration of the GitLab remote and mirror refspecs."""

from __future__ import annotations

import os
from typing import Tuple

from config import DestinationConfig
from git_client import GitClient, GitCommandError
from logging_utils import Logger
from security import SecurityValidator

DESTINATION_REMOTE = "gitlab"
SOURCE_REMOTE = "origin"

# The first pattern replaces whatever is configured, the rest are appended
MIRROR_REFSPECS: Tuple[str, ...] = (
    "+refs/heads/*:refs/heads/*",
    "+refs/tags/*:refs/tags/*",
    "+refs/change/*:refs/change/*",
)


class ReconcileError(Exception):
    """A reconciliation step failed; ``step`` describes which one."""

    def __init__(self, repo_name: str, step: str, cause: Exception) -> None:
        self.repo_name = repo_name
        self.step = step
        self.cause = cause
        super().__init__(f"{step}: {cause}")


class RemoteReconciler:
    """Brings a local clone's remotes into the mirror-ready state.

    Safe to run any number of times against the same clone: the remote is
    created on the first run and its URL updated on later ones, and the
    refspec lists are reset before supplementary patterns are appended.
    Local directory names are assumed to match the destination project name.
    """

    def __init__(
        self,
        git: GitClient,
        destination: DestinationConfig,
        gitlab_url: str,
    ) -> None:
        self.git = git
        self.destination = destination
        self.gitlab_url = gitlab_url

    def remote_url(self, repo_name: str) -> str:
        return SecurityValidator.build_remote_url(
            self.gitlab_url,
            self.destination.credential_name,
            self.destination.credential_token,
            self.destination.group_name,
            repo_name,
        )

    def reconcile(self, repo_path: str) -> None:
        """Configure the destination remote and refspecs for ``repo_path``.

        Raises ``ReconcileError`` on the first failing step. Nothing is rolled
        back; the next run repairs whatever was left half-configured.
        """
        repo_name = os.path.basename(os.path.normpath(repo_path))
        self._ensure_remote(repo_path, repo_name)
        try:
            self._set_refspecs(repo_path, f"remote.{SOURCE_REMOTE}.fetch")
            self._set_refspecs(repo_path, f"remote.{DESTINATION_REMOTE}.push")
        except GitCommandError as e:
            raise ReconcileError(repo_name, "failed to configure git", e) from e
        Logger.debug(f"remote configuration reconciled for {repo_name}")

    def _ensure_remote(self, repo_path: str, repo_name: str) -> None:
        url = self.remote_url(repo_name)
        try:
            self.git.remote_add(repo_path, DESTINATION_REMOTE, url)
            return
        except GitCommandError:
            # add is the only existence check: failure means the remote is there
            Logger.debug(
                f"remote '{DESTINATION_REMOTE}' exists for {repo_name}, updating url"
            )
        try:
            self.git.remote_set_url(repo_path, DESTINATION_REMOTE, url)
        except GitCommandError as e:
            raise ReconcileError(repo_name, "failed to set remote", e) from e

    def _set_refspecs(self, repo_path: str, key: str) -> None:
        first, *rest = MIRROR_REFSPECS
        self.git.config_replace_all(repo_path, key, first)
        for refspec in rest:
            self.git.config_add(repo_path, key, refspec)
