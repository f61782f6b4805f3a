#!/usr/bin/env python3
"""Mirrors a single local clone to its GitLab destination."""

from __future__ import annotations

import os

from git_client import GitClient, GitCommandError
from logging_utils import Logger
from remote_reconciler import DESTINATION_REMOTE, ReconcileError, RemoteReconciler
from results import RepositoryResult
from security import SecurityValidator


class MirrorExecutor:
    """Reconciles a repository's remotes, then pushes it with ``--mirror``.

    ``mirror`` never raises: every failure is returned as a failed
    ``RepositoryResult`` whose reason names the step that broke.
    """

    def __init__(self, git: GitClient, reconciler: RemoteReconciler) -> None:
        self.git = git
        self.reconciler = reconciler

    def mirror(self, repo_path: str) -> RepositoryResult:
        repo_name = os.path.basename(os.path.normpath(repo_path))
        Logger.info(
            f"mirroring {repo_name} to GitLab under the group "
            f"{self.reconciler.destination.group_name}..."
        )
        try:
            self.reconciler.reconcile(repo_path)
            self.git.push_mirror(repo_path, DESTINATION_REMOTE)
        except ReconcileError as e:
            return RepositoryResult.failure(repo_name, str(e))
        except GitCommandError as e:
            return RepositoryResult.failure(repo_name, f"failed to push to gitlab: {e}")
        except Exception as e:
            safe_error = SecurityValidator.sanitize_for_logging(str(e))
            return RepositoryResult.failure(repo_name, f"unexpected error: {safe_error}")

        Logger.success(f"successfully mirrored {repo_name} to GitLab")
        return RepositoryResult.success(repo_name)
