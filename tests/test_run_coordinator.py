"""Tests for RunCoordinator entity sequencing and exit status."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

from batch_processor import BatchError, BatchProcessor
from cloner import GhorgCloner
from config import RunConfig
from git_client import GitClient
from results import BatchResult
from run_coordinator import (EXIT_CONFIG_ERROR, EXIT_FILESYSTEM_ERROR,
                             EXIT_SUCCESS, RunCoordinator)

DOCUMENT = """
discord_webhook: https://discord.example.com/api/webhooks/1/abc
entities:
  acme:
    github_token: ghp_acme
    type: org
    gitlab: {token_name: bot, token: glpat-acme, group_name: acme-mirror}
  jdoe:
    github_token: ghp_jdoe
    type: user
    gitlab: {token_name: bot, token: glpat-jdoe, group_name: jdoe}
"""


def _make_coordinator(tmp_path: Path, entities, push: bool = True,
                      document: str = DOCUMENT) -> RunCoordinator:
    config_path = tmp_path / 'config.yaml'
    config_path.write_text(document, encoding='utf-8')
    run_cfg = RunConfig(
        config_path=str(config_path),
        backup_root=str(tmp_path / 'backups'),
        entities=tuple(entities),
        push=push,
    )
    coordinator = RunCoordinator(run_cfg)
    coordinator.cloner = MagicMock()
    coordinator.cloner.clone.return_value = True
    return coordinator


@patch.object(BatchProcessor, 'process')
def test_clone_failure_skips_only_that_entity(mock_process: MagicMock, tmp_path: Path) -> None:
    """The second entity is cloned and mirrored after the first one fails to clone."""
    coordinator = _make_coordinator(tmp_path, ['acme', 'jdoe'])
    coordinator.cloner.clone.side_effect = [False, True]
    mock_process.return_value = BatchResult(entity_name='jdoe', total=2)

    assert coordinator.run() == EXIT_SUCCESS

    cloned = [c.args[0] for c in coordinator.cloner.clone.call_args_list]
    assert cloned == ['acme', 'jdoe']
    mock_process.assert_called_once()
    assert mock_process.call_args.args[0] == 'jdoe'
    assert list(coordinator.results) == ['jdoe']


@patch.object(BatchProcessor, 'process')
def test_push_disabled_only_clones(mock_process: MagicMock, tmp_path: Path) -> None:
    coordinator = _make_coordinator(tmp_path, ['acme', 'jdoe'], push=False)

    assert coordinator.run() == EXIT_SUCCESS

    assert coordinator.cloner.clone.call_count == 2
    mock_process.assert_not_called()


def test_invalid_config_runs_no_external_commands(tmp_path: Path) -> None:
    """Validation failures abort before any clone or git command."""
    coordinator = _make_coordinator(tmp_path, ['acme', 'ghost'])
    coordinator.git = MagicMock(spec=GitClient)

    assert coordinator.run() == EXIT_CONFIG_ERROR

    coordinator.cloner.clone.assert_not_called()
    assert coordinator.git.mock_calls == []


def test_invalid_entity_type_is_fatal(tmp_path: Path) -> None:
    document = DOCUMENT.replace('type: user', 'type: team')
    coordinator = _make_coordinator(tmp_path, ['acme', 'jdoe'], document=document)

    assert coordinator.run() == EXIT_CONFIG_ERROR
    coordinator.cloner.clone.assert_not_called()


@patch.object(BatchProcessor, 'process')
def test_missing_backup_directory_is_not_fatal(mock_process: MagicMock, tmp_path: Path) -> None:
    """A batch precondition failure for one entity does not stop the next."""
    coordinator = _make_coordinator(tmp_path, ['acme', 'jdoe'])
    mock_process.side_effect = [BatchError('directory missing'), BatchResult('jdoe')]

    assert coordinator.run() == EXIT_SUCCESS
    assert mock_process.call_count == 2
    assert list(coordinator.results) == ['jdoe']


def test_backup_root_creation_failure_is_fatal(tmp_path: Path) -> None:
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory', encoding='utf-8')
    coordinator = _make_coordinator(tmp_path, ['acme'])
    coordinator.run_cfg = RunConfig(
        config_path=coordinator.run_cfg.config_path,
        backup_root=str(blocker / 'backups'),
        entities=('acme',),
        push=True,
    )

    assert coordinator.run() == EXIT_FILESYSTEM_ERROR
    coordinator.cloner.clone.assert_not_called()


@patch('notifier.requests.post')
@patch('git_client.subprocess.run')
def test_unreachable_webhook_does_not_change_outcome(
    mock_git: MagicMock, mock_post: MagicMock, tmp_path: Path
) -> None:
    """A dead notification endpoint leaves results and exit status intact."""
    (tmp_path / 'backups' / 'acme_backup' / 'widgets').mkdir(parents=True)
    mock_git.return_value = MagicMock(returncode=0, stdout='', stderr='')
    mock_post.side_effect = requests.ConnectionError('unreachable')
    coordinator = _make_coordinator(tmp_path, ['acme'])

    assert coordinator.run() == EXIT_SUCCESS

    assert coordinator.results['acme'].total == 1
    assert coordinator.results['acme'].failed_names == []
    mock_post.assert_called_once()
    pushes = [c for c in mock_git.call_args_list if c.args[0][1] == 'push']
    assert len(pushes) == 1
    assert pushes[0].kwargs['cwd'].endswith('widgets')


@patch('cloner.subprocess.run')
def test_unusable_token_only_skips_that_entity(mock_run: MagicMock, tmp_path: Path) -> None:
    """A token subprocess cannot pass fails that clone; the next entity still runs."""
    document = DOCUMENT.replace('github_token: ghp_acme', 'github_token: "ghp_bad\\0token"')

    def run(cmd, **kwargs):
        if any('\0' in arg for arg in cmd):
            raise ValueError('embedded null byte')
        return subprocess.CompletedProcess(cmd, 0)

    mock_run.side_effect = run
    coordinator = _make_coordinator(
        tmp_path, ['acme', 'jdoe'], push=False, document=document
    )
    coordinator.cloner = GhorgCloner()

    assert coordinator.run() == EXIT_SUCCESS

    cloned = [c.args[0][2] for c in mock_run.call_args_list]
    assert cloned == ['acme', 'jdoe']


@patch.object(BatchProcessor, 'process')
def test_unexpected_entity_error_does_not_stop_run(mock_process: MagicMock, tmp_path: Path) -> None:
    """Any error while handling one entity is logged and the run moves on."""
    coordinator = _make_coordinator(tmp_path, ['acme', 'jdoe'])
    mock_process.side_effect = [RuntimeError('boom'), BatchResult('jdoe', total=1)]

    assert coordinator.run() == EXIT_SUCCESS

    assert mock_process.call_count == 2
    assert list(coordinator.results) == ['jdoe']
