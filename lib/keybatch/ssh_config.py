"""Append Host stanzas to an SSH client config file."""

import enum
import os
from dataclasses import dataclass
from pathlib import Path

PLACEHOLDER = 'CHANGEME'

AUTH_OPTIONS = [
    ('PreferredAuthentications', 'publickey'),
    ('IdentitiesOnly', 'yes'),
    ('AddKeysToAgent', 'yes'),
]


@dataclass
class ConfigStanza:
    """A Host block pointing at a key under ~/.ssh."""
    host_alias: str
    host_name: str = PLACEHOLDER
    user: str = PLACEHOLDER

    @property
    def identity_file(self) -> str:
        return f'~/.ssh/{self.host_alias}'

    def render(self) -> str:
        lines = [
            f'Host {self.host_alias}',
            f'    HostName {self.host_name}',
            f'    User {self.user}',
            f'    IdentityFile {self.identity_file}',
        ]
        lines += [f'    {key} {value}' for key, value in AUTH_OPTIONS]
        return '\n'.join(lines) + '\n'


class AppendStatus(enum.Enum):
    ADDED = 'added'
    PRESENT = 'present'
    FAILED = 'failed'


@dataclass(frozen=True)
class AppendResult:
    status: AppendStatus
    message: str = ''

    @property
    def ok(self) -> bool:
        return self.status is not AppendStatus.FAILED


def has_host_block(config_file: Path, alias: str) -> bool:
    """Check if config_file already has a Host line naming alias.

    Matches whole tokens only: 'Host web' does not match alias 'we'.

    Args:
        config_file: SSH client config file
        alias: Host alias to look for

    Returns:
        True if found, False otherwise (including when the file is missing)
    """
    if not config_file.exists():
        return False

    with open(config_file, encoding='utf-8', errors='replace') as f:
        for line in f:
            tokens = line.split()
            if len(tokens) >= 2 and tokens[0].lower() == 'host' and alias in tokens[1:]:
                return True

    return False


def append_host_block(config_file: Path, alias: str) -> AppendResult:
    """Append a stanza for alias unless one is already present.

    Never edits existing stanzas; a stale entry stays as it is.
    """
    try:
        if has_host_block(config_file, alias):
            return AppendResult(
                AppendStatus.PRESENT,
                f"Configuration block for Host '{alias}' already exists in {config_file}"
            )
        with open(config_file, 'a', encoding='utf-8') as f:
            f.write('\n' + ConfigStanza(alias).render())
    except (IOError, OSError) as e:
        return AppendResult(AppendStatus.FAILED, f'Could not write config block to {config_file}: {e}')

    return AppendResult(AppendStatus.ADDED, f"Added config block for Host '{alias}'")


def ensure_config_file(config_file: Path) -> bool:
    """Create the config directory and an empty config file if missing.

    Returns:
        True if the config file was created
    """
    config_file.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    if config_file.exists():
        return False

    config_file.touch()
    os.chmod(config_file, 0o600)
    return True
