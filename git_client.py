#!/usr/bin/env python3
"""Thin wrapper around the git executable used to configure and push mirrors."""

from __future__ import annotations

import os
import subprocess
from typing import List, Optional

from logging_utils import Logger
from security import SecurityValidator


class GitCommandError(Exception):
    """A git invocation exited non-zero, timed out or could not be started."""

    def __init__(self, args: List[str], returncode: Optional[int], stderr: str = "") -> None:
        self.command = SecurityValidator.sanitize_for_logging(" ".join(args))
        self.returncode = returncode
        self.stderr = SecurityValidator.sanitize_for_logging(stderr.strip())
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"'{self.command}' failed: {detail}")


class GitClient:
    """Runs git subcommands against a repository given by explicit path.

    The process working directory is never changed; each call passes the
    repository path as ``cwd`` so that several repositories can be handled
    from different threads.
    """

    GIT_BINARY = "git"

    def __init__(self, timeout_s: Optional[float] = None) -> None:
        self.timeout_s = timeout_s

    def _run(self, repo_path: str, *args: str) -> str:
        cmd = [self.GIT_BINARY, *args]
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        Logger.debug(f"git ({os.path.basename(repo_path)}): {' '.join(args)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=repo_path,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                env=env,
            )
        except subprocess.CalledProcessError as e:
            raise GitCommandError(cmd, e.returncode, e.stderr or e.stdout or "") from None
        except subprocess.TimeoutExpired:
            raise GitCommandError(
                cmd, None, f"timed out after {self.timeout_s} seconds"
            ) from None
        except OSError as e:
            raise GitCommandError(cmd, None, str(e)) from None
        return result.stdout

    def remote_add(self, repo_path: str, name: str, url: str) -> None:
        self._run(repo_path, "remote", "add", name, url)

    def remote_set_url(self, repo_path: str, name: str, url: str) -> None:
        self._run(repo_path, "remote", "set-url", name, url)

    def config_replace_all(self, repo_path: str, key: str, value: str) -> None:
        """Replace every existing value of ``key`` with a single ``value``."""
        self._run(repo_path, "config", "--local", "--replace-all", key, value)

    def config_add(self, repo_path: str, key: str, value: str) -> None:
        """Append ``value`` to the multi-valued ``key``."""
        self._run(repo_path, "config", "--local", "--add", key, value)

    def push_mirror(self, repo_path: str, remote: str) -> None:
        self._run(repo_path, "push", "--mirror", remote)
