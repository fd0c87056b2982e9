"""Parse keybatch.yml settings."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from keybatch.ssh_keys import DEFAULT_ALGORITHM

KNOWN_FIELDS = {'algorithm', 'comment', 'output_dir', 'ssh_config', 'log_file'}
SETTINGS_FILE = 'keybatch.yml'


@dataclass
class ToolConfig:
    """keybatch settings, from keybatch.yml or defaults."""
    algorithm: str = DEFAULT_ALGORITHM
    comment: Optional[str] = None
    output_dir: Path = Path('.')
    ssh_config: Path = Path('~/.ssh/config')
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'ToolConfig':
        """Load settings from path, or keybatch.yml in the current directory.

        Returns defaults if no settings file is present.
        """
        config_file = path if path is not None else Path(SETTINGS_FILE)
        if not config_file.exists():
            if path is not None:
                raise ValueError(f"Settings file not found: {config_file}")
            return cls()

        with open(config_file, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{config_file} must contain a mapping")

        unknown = set(data.keys()) - KNOWN_FIELDS
        if unknown:
            raise ValueError(f"Unknown keybatch.yml field(s): {', '.join(sorted(unknown))}")

        log_file = data.get('log_file')
        return cls(
            algorithm=data.get('algorithm') or DEFAULT_ALGORITHM,
            comment=data.get('comment'),
            output_dir=Path(data.get('output_dir') or '.'),
            ssh_config=Path(data.get('ssh_config') or '~/.ssh/config'),
            log_file=Path(log_file) if log_file else None,
        )

    @property
    def ssh_config_path(self) -> Path:
        return self.ssh_config.expanduser()

    @property
    def output_path(self) -> Path:
        return self.output_dir.expanduser()
