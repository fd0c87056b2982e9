from pathlib import Path

import pytest

from keybatch.settings import ToolConfig


def test_defaults_when_no_file(tmp_path, monkeypatch):
    """Should use defaults when no keybatch.yml present."""
    monkeypatch.chdir(tmp_path)
    config = ToolConfig.load()
    assert config.algorithm == 'ed25519'
    assert config.comment is None
    assert config.output_dir == Path('.')
    assert config.ssh_config == Path('~/.ssh/config')
    assert config.log_file is None


def test_loads_keybatch_yml_from_cwd(tmp_path, monkeypatch):
    (tmp_path / 'keybatch.yml').write_text(
        'algorithm: rsa\ncomment: ops@bastion\noutput_dir: keys\n'
    )
    monkeypatch.chdir(tmp_path)
    config = ToolConfig.load()
    assert config.algorithm == 'rsa'
    assert config.comment == 'ops@bastion'
    assert config.output_dir == Path('keys')


def test_loads_explicit_path(tmp_path):
    settings = tmp_path / 'custom.yml'
    settings.write_text('ssh_config: ~/alt/config\nlog_file: run.log\n')
    config = ToolConfig.load(settings)
    assert config.ssh_config_path == Path('~/alt/config').expanduser()
    assert config.log_file == Path('run.log')


def test_explicit_path_must_exist(tmp_path):
    with pytest.raises(ValueError, match='not found'):
        ToolConfig.load(tmp_path / 'missing.yml')


def test_rejects_unknown_fields(tmp_path):
    """Should raise ValueError for unrecognised fields."""
    settings = tmp_path / 'keybatch.yml'
    settings.write_text('typo_field: oops\n')
    with pytest.raises(ValueError, match='Unknown'):
        ToolConfig.load(settings)


def test_rejects_non_mapping(tmp_path):
    settings = tmp_path / 'keybatch.yml'
    settings.write_text('- a\n- b\n')
    with pytest.raises(ValueError, match='mapping'):
        ToolConfig.load(settings)
