"""SSH key generation and agent registration."""

import getpass
import os
import socket
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_ALGORITHM = 'ed25519'


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an external ssh tool call."""
    ok: bool
    message: str = ''

    @classmethod
    def from_process(cls, result: subprocess.CompletedProcess) -> 'CommandResult':
        if result.returncode == 0:
            return cls(True)
        stderr = (result.stderr or '').strip()
        return cls(False, stderr or f'exit status {result.returncode}')


def default_comment() -> str:
    """Build the key comment as user@hostname."""
    hostname = socket.gethostname() or 'localhost'
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = 'user'
    return f'{user}@{hostname}'


def agent_available(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether an ssh-agent socket is advertised in the environment."""
    if environ is None:
        environ = os.environ
    return bool(environ.get('SSH_AUTH_SOCK'))


class KeyGenerator:
    """Generates key pairs with ssh-keygen."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM, comment: Optional[str] = None):
        self.algorithm = algorithm
        self.comment = comment if comment is not None else default_comment()

    def generate(self, key_path: Path, passphrase: str = '') -> CommandResult:
        """Generate a keypair at key_path (public key gets .pub suffix).

        Args:
            key_path: Path where private key will be saved
            passphrase: Passphrase for the private key, '' for none

        Returns:
            CommandResult; failures are returned, not raised
        """
        try:
            result = subprocess.run([
                'ssh-keygen',
                '-t', self.algorithm,
                '-f', str(key_path),
                '-N', passphrase,
                '-C', self.comment,
            ], capture_output=True, text=True, stdin=subprocess.DEVNULL)
        except OSError as e:
            return CommandResult(False, str(e))
        return CommandResult.from_process(result)


class AgentRegistrar:
    """Adds private keys to a running ssh-agent with ssh-add."""

    def register(self, key_path: Path, passphrase: Optional[str] = None) -> CommandResult:
        """Add key_path to the agent.

        When passphrase is None stdin is left attached, so ssh-add prompts
        on its own if the key is encrypted.
        """
        kwargs = {}
        if passphrase is not None:
            kwargs['input'] = f'{passphrase}\n'
        try:
            result = subprocess.run(
                ['ssh-add', str(key_path)],
                capture_output=True, text=True, **kwargs
            )
        except OSError as e:
            return CommandResult(False, str(e))
        return CommandResult.from_process(result)

