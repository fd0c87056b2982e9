"""Status output for a provisioning run."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

COLORS = {
    'OK': 'green',
    'WARN': 'yellow',
    'ERROR': 'red',
}


class EventLog:
    """Echoes status lines and optionally appends them to a log file."""

    def __init__(self, log_file: Optional[Path] = None):
        self.log_file = log_file

    def __call__(self, message: str, level: str = 'INFO') -> None:
        self.log_event(message, level)

    def log_event(self, message: str, level: str = 'INFO') -> None:
        """Print message to the terminal and, if configured, to the log file."""
        color = COLORS.get(level)
        prefix = '' if level in ('INFO', 'OK') else f'{level.capitalize()}: '
        click.secho(f'  -> {prefix}{message}', fg=color)
        self._write(message, level)

    def _write(self, message: str, level: str) -> None:
        if self.log_file is None:
            return
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        entry = f'[{timestamp}] {level}: {message}\n'
        try:
            with open(self.log_file, 'a') as f:
                f.write(entry)
        except (IOError, OSError) as e:
            print(f"Warning: Failed to log event: {e}", file=sys.stderr)
