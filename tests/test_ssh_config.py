import os
import stat

from keybatch.ssh_config import (
    AppendStatus, ConfigStanza, append_host_block, ensure_config_file, has_host_block,
)

EXPECTED_BLOCK = """Host github
    HostName CHANGEME
    User CHANGEME
    IdentityFile ~/.ssh/github
    PreferredAuthentications publickey
    IdentitiesOnly yes
    AddKeysToAgent yes
"""


def test_stanza_render():
    assert ConfigStanza('github').render() == EXPECTED_BLOCK


def test_append_to_empty_config(tmp_path):
    config = tmp_path / 'config'
    config.touch()

    result = append_host_block(config, 'github')

    assert result.status is AppendStatus.ADDED
    assert config.read_text() == '\n' + EXPECTED_BLOCK


def test_append_is_idempotent(tmp_path):
    config = tmp_path / 'config'
    config.touch()

    append_host_block(config, 'github')
    result = append_host_block(config, 'github')

    assert result.status is AppendStatus.PRESENT
    assert result.ok
    assert config.read_text().count('Host github\n') == 1


def test_append_keeps_existing_content(tmp_path):
    config = tmp_path / 'config'
    config.write_text('Host old\n    HostName old.example.com\n')

    append_host_block(config, 'new')

    content = config.read_text()
    assert content.startswith('Host old\n    HostName old.example.com\n\nHost new\n')


def test_has_host_block_matches_whole_tokens(tmp_path):
    config = tmp_path / 'config'
    config.write_text('Host webserver\n    HostName a\nHost db db-replica\n')

    assert has_host_block(config, 'webserver') is True
    assert has_host_block(config, 'web') is False
    assert has_host_block(config, 'db-replica') is True
    assert has_host_block(config, 'HostName') is False


def test_has_host_block_ignores_indentation_and_case(tmp_path):
    config = tmp_path / 'config'
    config.write_text('  host github\n')

    assert has_host_block(config, 'github') is True


def test_has_host_block_missing_file(tmp_path):
    assert has_host_block(tmp_path / 'missing', 'github') is False


def test_append_failure_is_reported(tmp_path):
    config = tmp_path / 'config'
    config.mkdir()

    result = append_host_block(config, 'github')

    assert result.status is AppendStatus.FAILED
    assert result.ok is False
    assert 'Could not write' in result.message


def test_ensure_config_file_creates(tmp_path):
    config = tmp_path / '.ssh' / 'config'

    assert ensure_config_file(config) is True
    assert config.exists()
    assert stat.S_IMODE(os.stat(config).st_mode) == 0o600
    assert ensure_config_file(config) is False
