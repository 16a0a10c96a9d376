"""SFTP sessions tunnelled through the system ssh client.

The ssh program is started with the ``sftp`` subsystem and its stdin/stdout
pipes carry the SFTP protocol. Authentication, host keys and ssh_config are
left entirely to ssh, so passwordless login must already be set up.
"""

import logging
import subprocess
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

import paramiko

from .models import ProbeConfig


class TransportError(Exception):
    """The ssh child process could not be wired up."""


class PipeChannel:
    """Duplex byte channel over a child process's stdin and stdout.

    Provides the ``send``/``recv``/``close``/``get_name`` methods paramiko's
    SFTP client expects from its socket.
    """

    def __init__(self, process: subprocess.Popen):
        if process.stdin is None or process.stdout is None:
            raise TransportError("ssh process has no stdin/stdout pipe")
        self.process = process
        self.closed = False

    def get_name(self) -> str:
        # Used by paramiko as the log prefix
        return f"ssh:{self.process.pid}"

    def send(self, data: bytes) -> int:
        written = self.process.stdin.write(data)
        self.process.stdin.flush()
        return len(data) if written is None else written

    def recv(self, size: int) -> bytes:
        return self.process.stdout.read(size)

    def close(self):
        if self.closed:
            return
        self.closed = True
        for pipe in (self.process.stdin, self.process.stdout):
            try:
                pipe.close()
            except OSError:
                # ssh already went away; nothing left to flush
                pass


class SftpTransport:
    """Opens SFTP sessions to the configured host."""

    SUBSYSTEM = "sftp"

    def __init__(self, config: ProbeConfig,
                 spawn: Optional[Callable[..., subprocess.Popen]] = None,
                 client_factory: Optional[Callable[[PipeChannel], paramiko.SFTPClient]] = None):
        """Initialize transport.

        Args:
            config: Probe configuration with host, user, port and ssh settings.
            spawn: Process spawner, defaults to ``subprocess.Popen``.
            client_factory: Builds the SFTP client from a channel, defaults
                to ``paramiko.SFTPClient``.
        """
        self.config = config
        self.spawn = spawn or subprocess.Popen
        self.client_factory = client_factory or paramiko.SFTPClient
        self.timed_out = False
        self.logger = logging.getLogger(__name__)

    def build_command(self) -> List[str]:
        """Build the ssh command line requesting the sftp subsystem."""
        return [
            self.config.ssh_command,
            *self.config.ssh_options,
            self.config.host,
            "-l", self.config.user,
            "-p", self.config.port,
            "-s", self.SUBSYSTEM,
        ]

    @contextmanager
    def session(self) -> Iterator[paramiko.SFTPClient]:
        """Open an SFTP session for the duration of the block.

        The session is closed and the ssh process reaped on every exit path.

        Raises:
            OSError: If ssh cannot be started.
            TransportError: If the process pipes are unavailable.
            paramiko.SSHException: If the SFTP handshake fails.
        """
        command = self.build_command()
        self.logger.info(f"Starting {' '.join(command)}")

        # stderr is inherited so ssh diagnostics reach the operator
        process = self.spawn(command, stdin=subprocess.PIPE, stdout=subprocess.PIPE,
                             stderr=None, bufsize=0)
        timer = self._start_timer(process)
        channel = None
        try:
            channel = PipeChannel(process)
            client = self.client_factory(channel)
            self.logger.info(f"SFTP session opened to {self.config.host}:{self.config.port}")
            try:
                yield client
            finally:
                client.close()
        finally:
            if timer:
                timer.cancel()
            if channel:
                channel.close()
            returncode = process.wait()
            self.logger.debug(f"ssh exited with status {returncode}")

    def _start_timer(self, process: subprocess.Popen) -> Optional[threading.Timer]:
        """Start the deadline timer if a timeout is configured."""
        if self.config.timeout is None:
            return None

        def expire():
            self.timed_out = True
            self.logger.warning(f"Timed out after {self.config.timeout}, killing ssh")
            try:
                process.kill()
            except OSError as e:
                self.logger.debug(f"Could not kill ssh: {e}")

        timer = threading.Timer(self.config.timeout.total_seconds(), expire)
        timer.daemon = True
        timer.start()
        return timer
