"""Tests for the ghorg invocation."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

from cloner import GhorgCloner
from config import DestinationConfig, EntityConfig, EntityType


def _entity_config(entity_type: EntityType = EntityType.USER) -> EntityConfig:
    return EntityConfig(
        source_token='ghp_sourcetoken',
        entity_type=entity_type,
        destination=DestinationConfig('bot', 'glpat-x', 'grp'),
    )


@patch('cloner.subprocess.run')
def test_clone_command_line(mock_run: MagicMock) -> None:
    """ghorg gets the clone type, token, submodule flag and backup root."""
    assert GhorgCloner().clone('jdoe', _entity_config(), '/srv/mirrors') is True

    assert mock_run.call_args.args[0] == [
        'ghorg', 'clone', 'jdoe',
        '--clone-type=user',
        '--token=ghp_sourcetoken',
        '--backup',
        '--include-submodules',
        '--path=/srv/mirrors',
    ]
    assert mock_run.call_args.kwargs['check'] is True


@patch('cloner.subprocess.run')
def test_clone_failure_returns_false(mock_run: MagicMock, capsys) -> None:
    mock_run.side_effect = subprocess.CalledProcessError(1, ['ghorg'])

    assert GhorgCloner().clone('acme', _entity_config(EntityType.ORG), '/srv') is False
    assert 'failed to clone acme' in capsys.readouterr().out


@patch('cloner.subprocess.run')
def test_missing_ghorg_returns_false(mock_run: MagicMock) -> None:
    mock_run.side_effect = FileNotFoundError('ghorg')
    assert GhorgCloner().clone('acme', _entity_config(), '/srv') is False


@patch('cloner.subprocess.run')
def test_unpassable_argument_returns_false(mock_run: MagicMock) -> None:
    """An argument subprocess rejects counts as a failed clone."""
    mock_run.side_effect = ValueError('embedded null byte')
    assert GhorgCloner().clone('acme', _entity_config(), '/srv') is False
