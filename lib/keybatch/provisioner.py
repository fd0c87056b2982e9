"""Batch key provisioning: generate, register, and configure each key."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from keybatch.ssh_config import AppendResult, AppendStatus, append_host_block
from keybatch.ssh_keys import AgentRegistrar, CommandResult, KeyGenerator

Reporter = Callable[[str, str], None]
Appender = Callable[[Path, str], AppendResult]

EXISTING = 'existing'
INCONSISTENT = 'inconsistent'
GENERATED = 'generated'
FAILED = 'failed'


@dataclass(frozen=True)
class PassphrasePolicy:
    """Passphrase shared by every key in a run."""
    prompted: bool = False
    value: str = ''

    @property
    def should_pipe(self) -> bool:
        """Only an explicitly requested, non-empty passphrase is fed to ssh-add."""
        return self.prompted and bool(self.value)

    @property
    def status(self) -> str:
        if not self.prompted:
            return 'None'
        if not self.value:
            return 'Empty (But requested via -p)'
        return 'Set'


@dataclass(frozen=True)
class KeyPairFiles:
    private_path: Path
    public_path: Path

    @classmethod
    def for_name(cls, output_dir: Path, name: str) -> 'KeyPairFiles':
        private_path = output_dir / name
        return cls(private_path, Path(f'{private_path}.pub'))


@dataclass
class KeyOutcome:
    name: str
    status: str
    success: bool
    config: Optional[AppendResult] = None


def _detail(result: CommandResult) -> str:
    return f' ({result.message})' if result.message else ''


def _print_report(message: str, level: str = 'INFO') -> None:
    print(f'{level}: {message}')


class BatchProvisioner:
    """Provisions a list of key names one after another.

    Example:
        provisioner = BatchProvisioner(KeyGenerator(), AgentRegistrar(),
                                       output_dir=Path('.'),
                                       config_file=Path('~/.ssh/config').expanduser(),
                                       agent_available=True)
        provisioner.provision(['github', 'prod'], PassphrasePolicy())
    """

    def __init__(self, generator: KeyGenerator, registrar: AgentRegistrar,
                 output_dir: Path, config_file: Path, agent_available: bool,
                 appender: Appender = append_host_block,
                 report: Optional[Reporter] = None):
        self.generator = generator
        self.registrar = registrar
        self.appender = appender
        self.output_dir = output_dir
        self.config_file = config_file
        self.agent_available = agent_available
        self.report = report or _print_report

    def provision(self, names: Sequence[str], policy: PassphrasePolicy) -> List[KeyOutcome]:
        """Process every name in order. One failing name never stops the batch."""
        return [self.provision_one(name, policy) for name in names]

    def provision_one(self, name: str, policy: PassphrasePolicy) -> KeyOutcome:
        files = KeyPairFiles.for_name(self.output_dir, name)
        self.report(f'Processing key: {name}', 'INFO')

        if files.private_path.is_file():
            outcome = self._existing(name, files)
        elif files.public_path.is_file():
            self.report(
                f"Public key file '{files.public_path}' exists, but private key is missing. Skipping.",
                'WARN'
            )
            outcome = KeyOutcome(name, INCONSISTENT, False)
        else:
            outcome = self._generate(name, files, policy)

        if outcome.success:
            outcome.config = self._append_config(name)
        return outcome

    def _existing(self, name: str, files: KeyPairFiles) -> KeyOutcome:
        self.report(f"Private key '{files.private_path}' already exists. Skipping generation.", 'WARN')
        if self.agent_available:
            self.report('Attempting to add existing key to agent...', 'INFO')
            registered = self.registrar.register(files.private_path)
            if registered.ok:
                self.report('Added existing key to agent.', 'OK')
            else:
                self.report(
                    f'Could not add existing key{_detail(registered)}. '
                    'It may be loaded or require a passphrase.', 'WARN'
                )
        return KeyOutcome(name, EXISTING, True)

    def _generate(self, name: str, files: KeyPairFiles, policy: PassphrasePolicy) -> KeyOutcome:
        self.report('Generating new key pair (ssh-keygen)...', 'INFO')
        result = self.generator.generate(files.private_path, policy.value)
        if not result.ok:
            self.report(f'Could not generate key for {name}{_detail(result)}.', 'WARN')
            return KeyOutcome(name, FAILED, False)

        self.report(f'Created {files.private_path} and {files.public_path}', 'OK')
        if self.agent_available:
            self.report('Adding key to SSH agent (ssh-add)...', 'INFO')
            passphrase = policy.value if policy.should_pipe else None
            registered = self.registrar.register(files.private_path, passphrase)
            if registered.ok:
                self.report('Added to agent.', 'OK')
            else:
                self.report(
                    f"Failure adding key to agent{_detail(registered)}. "
                    "Check 'ssh-add -l' status manually.", 'WARN'
                )
        return KeyOutcome(name, GENERATED, True)

    def _append_config(self, name: str) -> AppendResult:
        result = self.appender(self.config_file, name)
        if result.status is AppendStatus.ADDED:
            self.report(result.message, 'OK')
        elif result.status is AppendStatus.PRESENT:
            self.report(f'{result.message}. Skipping config update.', 'INFO')
        else:
            self.report(result.message, 'WARN')
        return result
