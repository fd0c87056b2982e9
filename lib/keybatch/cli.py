#!/usr/bin/env python3
"""keybatch CLI - batch SSH key generation with config stanzas."""

import os
import sys
from pathlib import Path
from typing import List, Sequence, Tuple

import click

from keybatch.event_log import EventLog
from keybatch.provisioner import BatchProvisioner, PassphrasePolicy
from keybatch.settings import ToolConfig
from keybatch.ssh_config import ensure_config_file
from keybatch.ssh_keys import AgentRegistrar, KeyGenerator, agent_available

SEPARATOR = '-' * 35


def parse_key_args(tokens: Sequence[str]) -> Tuple[List[str], bool]:
    """Split raw tokens into key names and the passphrase flag.

    '-n' starts collecting names, '-p' requests a passphrase and stops
    collecting. Anything else is a name while collecting, an error otherwise.

    Returns:
        Tuple of (names, prompt_passphrase)

    Raises:
        click.UsageError: on a stray token or an empty name list
    """
    names = []
    prompt = False
    collecting = False
    for token in tokens:
        if token == '-p':
            prompt = True
            collecting = False
        elif token == '-n':
            collecting = True
        elif collecting:
            names.append(token)
        else:
            raise click.UsageError("Key names must be preceded by the '-n' flag.")

    if not names:
        raise click.UsageError("You must provide at least one key name after the '-n' flag.")
    return names, prompt


def _read_passphrase(prompt: bool) -> PassphrasePolicy:
    if not prompt:
        return PassphrasePolicy()

    passphrase = click.prompt('Enter Passphrase for all keys', hide_input=True,
                              default='', show_default=False)
    confirm = click.prompt('Confirm Passphrase', hide_input=True,
                           default='', show_default=False)
    if passphrase != confirm:
        click.secho("❌ Error: Passphrases do not match. Aborting.", fg='red')
        sys.exit(1)
    return PassphrasePolicy(prompted=True, value=passphrase)


@click.command(context_settings={'ignore_unknown_options': True})
@click.version_option()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Settings file (default: ./keybatch.yml if present)')
@click.option('--output-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Directory for generated keys (default: current directory)')
@click.option('--ssh-config', type=click.Path(dir_okay=False, path_type=Path),
              help='SSH client config to update (default: ~/.ssh/config)')
@click.argument('tokens', nargs=-1, type=click.UNPROCESSED, metavar='-n NAME [NAME...] [-p]')
def main(tokens, config_path, output_dir, ssh_config):
    """Generate SSH key pairs and append Host blocks to the SSH config.

    \b
    -n  MANDATORY. Starts the list of key names (e.g. github, server_a).
    -p  OPTIONAL. Prompts for one passphrase used for all generated keys.

    \b
    Example: keybatch -n github_personal prod_eu_access
    Example: keybatch -n test_server_key another_key -p

    \b
    A bare "--" and names spelled like this command's own options
    (--help, --version, --config, --output-dir, --ssh-config) are taken
    by the option parser, not collected as key names.
    """
    names, prompt = parse_key_args(tokens)

    try:
        config = ToolConfig.load(config_path)
    except (ValueError, OSError) as e:
        raise click.UsageError(str(e))
    if output_dir is not None:
        config.output_dir = output_dir
    if ssh_config is not None:
        config.ssh_config = ssh_config

    policy = _read_passphrase(prompt)

    config_file = config.ssh_config_path
    out_dir = config.output_path
    log = EventLog(config.log_file.expanduser() if config.log_file else None)

    try:
        if ensure_config_file(config_file):
            click.echo(f"Created new config file: {config_file}")
    except OSError as e:
        click.secho(f"⚠️  Could not create config file {config_file}: {e}", fg='yellow')
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        click.secho(f"⚠️  Could not create output directory {out_dir}: {e}", fg='yellow')

    generator = KeyGenerator(config.algorithm, config.comment)

    click.echo("--- Starting SSH Key Generation ---")
    click.echo(f"Algorithm: {generator.algorithm}")
    click.echo(f"Comment:   \"{generator.comment}\"")
    click.echo(f"Passphrase Status: {policy.status}")
    click.echo(f"Output Path: {out_dir}")
    click.echo(f"Config File: {config_file}")
    click.echo(SEPARATOR)

    has_agent = agent_available(os.environ)
    if has_agent:
        click.echo("SSH Agent found. Keys will be added automatically.")
    else:
        click.secho("⚠️  SSH agent (ssh-agent) is not running in this session.", fg='yellow')
        click.echo("Keys will be generated but CANNOT be added automatically.")
        click.echo("If you need to start the agent, run: eval $(ssh-agent -s)")
    click.echo(SEPARATOR)

    provisioner = BatchProvisioner(
        generator, AgentRegistrar(),
        output_dir=out_dir,
        config_file=config_file,
        agent_available=has_agent,
        report=log,
    )
    for name in names:
        provisioner.provision_one(name, policy)
        click.echo(SEPARATOR)

    click.echo("\n--- Final Status ---")
    click.echo(f"Total keys requested: {len(names)}")
    click.echo(f"Keys are located in {out_dir}.")
    click.echo(f"Your config file ({config_file}) has been updated.")
    click.echo("Remember to REPLACE 'HostName CHANGEME' and 'User CHANGEME' with the actual server details.")
    click.echo("Use 'ssh-add -l' to check the keys loaded in your agent.")


if __name__ == '__main__':
    main()
