"""Command-line interface for snapshot monitor."""

import logging
import sys
import click
from typing import Optional, Tuple

from .core.models import CheckResult, Verdict
from .core.monitor import run_check
from .utils.formatters import format_result


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration.

    Log records go to stderr; stdout is reserved for the check result.
    """
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


def emit(result: CheckResult) -> int:
    """Print the result line and return the matching exit code."""
    click.echo(format_result(result))
    return int(result.verdict)


@click.command()
@click.option('--warning',
              help='Return WARNING if the latest snapshot is older than this duration (e.g. 24h)')
@click.option('--critical',
              help='Return CRITICAL if the latest snapshot is older than this duration (e.g. 48h)')
@click.option('--repository',
              help='Path to the restic repository on the sftp target')
@click.option('--host',
              help='SSH host to be used for the sftp connection')
@click.option('--user',
              help='SSH user to be used for the sftp connection')
@click.option('--port',
              help='SSH port to be used for the sftp connection [default: 22]')
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--ssh-command',
              help='SSH client executable [default: ssh]')
@click.option('--ssh-option', 'ssh_options', multiple=True,
              help='Extra argument passed to ssh before the host (repeatable)')
@click.option('--timeout',
              help='Give up with UNKNOWN after this duration (default: wait forever)')
@click.option('--log-level', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--log-file',
              help='Log file path')
@click.pass_context
def cli(ctx, warning: Optional[str], critical: Optional[str], repository: Optional[str],
        host: Optional[str], user: Optional[str], port: Optional[str], config_path: Optional[str],
        ssh_command: Optional[str], ssh_options: Tuple[str, ...], timeout: Optional[str],
        log_level: str, log_file: Optional[str]):
    """Check that a restic repository reachable over SFTP has a recent snapshot."""
    setup_logging(log_level, log_file)

    options = {
        'warning': warning,
        'critical': critical,
        'repository': repository,
        'host': host,
        'user': user,
        'port': port,
        'ssh_command': ssh_command,
        'ssh_options': list(ssh_options),
        'timeout': timeout,
    }

    result = run_check(options, config_path)
    ctx.exit(emit(result))


def main(args=None):
    """Main CLI entry point."""
    try:
        rc = cli.main(args=args, prog_name='snapshot-monitor', standalone_mode=False)
    except click.ClickException as e:
        rc = emit(CheckResult(Verdict.UNKNOWN, e.format_message()))
    except click.Abort:
        rc = emit(CheckResult(Verdict.UNKNOWN, "aborted"))
    sys.exit(rc or 0)


if __name__ == '__main__':
    main()
