"""cmd.py – Launch commands described by records.

:func:`command` turns a record into a :class:`Cmd`, which wraps
:mod:`subprocess` with the conveniences shellac callers expect:

- standard streams inherit the parent's unless redirected, either to a real
  file or to a line channel (``channel_stdin`` / ``channel_stdout`` /
  ``channel_stderr``);
- ``run()`` echoes the command line to stderr first, bolded on a terminal,
  much like ``make`` or ``sh -x``;
- ``sudo()`` re-targets the command at ``sudo(8)``.

Streams without a usable file descriptor (channel bridges, ``io.BytesIO``)
are connected through pipes pumped by helper threads.
"""

from __future__ import annotations

import contextlib
import queue
import shutil
import subprocess
import threading
from typing import IO, Any

from rich.console import Console

from shellac.chan import ChanReader, ChanWriter
from shellac.compiler import args, command_name
from shellac.config import ShellacConfig, load_config

_CHUNK = 64 * 1024

_err_console = Console(stderr=True, highlight=False)


class Cmd:
    """A command line plus the streams it will be connected to."""

    def __init__(
        self,
        path: str,
        argv: list[str],
        *,
        stdin: IO[Any] | None = None,
        stdout: IO[Any] | None = None,
        stderr: IO[Any] | None = None,
        log_commands: bool = True,
        sudo_program: str = "sudo",
        timeout: float | None = None,
    ) -> None:
        self.path = path
        self.argv = list(argv)
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.log_commands = log_commands
        self.sudo_program = sudo_program
        self.timeout = timeout
        self._started = False

    def __repr__(self) -> str:
        return f"Cmd(path={self.path!r}, argv={self.argv!r})"

    # -- stream wiring -----------------------------------------------------

    def channel_stdin(self, ch: queue.Queue) -> None:
        """Feed standard input from the lines of *ch*."""
        self.stdin = ChanReader(ch)

    def channel_stdout(self, ch: queue.Queue) -> None:
        """Send each line of standard output to *ch*."""
        self.stdout = ChanWriter(ch)

    def channel_stderr(self, ch: queue.Queue) -> None:
        """Send each line of standard error to *ch*."""
        self.stderr = ChanWriter(ch)

    # -- actions -----------------------------------------------------------

    def log(self) -> None:
        """Print the command line to stderr, bold when stderr is a terminal."""
        _err_console.print(
            " ".join(self.argv), style="bold", markup=False, soft_wrap=True
        )

    def sudo(self) -> None:
        """Modify the command to run as root via sudo(8)."""
        if self._started:
            raise RuntimeError("cannot modify a command that has already started")
        sudo_path = shutil.which(self.sudo_program)
        if sudo_path is None:
            raise RuntimeError(f"{self.sudo_program!r} not found on PATH")
        self.argv = [self.sudo_program, *self.argv]
        self.path = sudo_path

    def run(self, *, check: bool = True) -> subprocess.CompletedProcess:
        """Log and run the command, waiting for it to exit.

        Channel writers attached to stdout/stderr are closed afterwards, even
        on failure, so consumers iterating the channel always terminate.

        Raises:
            subprocess.CalledProcessError: non-zero exit status and *check*.
            subprocess.TimeoutExpired: the child outlived ``timeout``.
            OSError: the program could not be started.
        """
        if self._started:
            raise RuntimeError("command has already been run")
        if self.log_commands:
            self.log()
        try:
            return self._run(check)
        finally:
            self._close_channels()

    # -- internals ---------------------------------------------------------

    def _run(self, check: bool) -> subprocess.CompletedProcess:
        argv = tuple(self.argv)
        stdin_arg, pump_in = _stream_arg(self.stdin)
        stdout_arg, pump_out = _stream_arg(self.stdout)
        stderr_arg, pump_err = _stream_arg(self.stderr)

        self._started = True
        proc = subprocess.Popen(
            argv,
            executable=self.path,
            stdin=stdin_arg,
            stdout=stdout_arg,
            stderr=stderr_arg,
        )

        pumps: list[threading.Thread] = []
        if pump_in:
            pumps.append(_start(_pump_stdin, self.stdin, proc.stdin))
        if pump_out:
            pumps.append(_start(_pump_output, proc.stdout, self.stdout))
        if pump_err:
            pumps.append(_start(_pump_output, proc.stderr, self.stderr))

        try:
            returncode = proc.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
            raise
        finally:
            # The child is gone; an unclosed input channel must not block.
            if isinstance(self.stdin, ChanReader):
                self.stdin.stop()
            for t in pumps:
                t.join()

        if check and returncode != 0:
            raise subprocess.CalledProcessError(returncode, list(argv))
        return subprocess.CompletedProcess(list(argv), returncode)

    def _close_channels(self) -> None:
        for stream in (self.stdout, self.stderr):
            if isinstance(stream, ChanWriter):
                stream.close()


def _stream_arg(stream: Any) -> tuple[Any, bool]:
    """Return ``(popen_arg, needs_pump)`` for a configured stream."""
    if stream is None:
        return None, False
    try:
        stream.fileno()
    except (AttributeError, OSError):
        return subprocess.PIPE, True
    return stream, False


def _start(target: Any, src: Any, dst: Any) -> threading.Thread:
    t = threading.Thread(target=target, args=(src, dst), daemon=True)
    t.start()
    return t


def _pump_stdin(src: Any, pipe: IO[bytes]) -> None:
    # The child may exit without reading all of its input.
    with contextlib.suppress(BrokenPipeError), pipe:
        for chunk in iter(lambda: src.read(_CHUNK), b""):
            pipe.write(chunk)
            pipe.flush()


def _pump_output(pipe: IO[bytes], dst: Any) -> None:
    with pipe:
        for chunk in iter(lambda: pipe.read1(_CHUNK), b""):
            dst.write(chunk)


# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------


def command(rec: Any, cfg: ShellacConfig | None = None) -> Cmd:
    """Build a :class:`Cmd` for record *rec*.

    The program name comes from :func:`~shellac.compiler.command_name`,
    mapped through ``[programs]`` in shellac.toml.
    """
    if cfg is None:
        cfg = load_config()
    name = cfg.program_for(command_name(rec))
    path = shutil.which(name) or name
    return Cmd(
        path,
        [name, *args(rec)],
        log_commands=cfg.log_commands,
        sudo_program=cfg.sudo,
        timeout=cfg.timeout,
    )


def run(obj: Any, cfg: ShellacConfig | None = None) -> subprocess.CompletedProcess:
    """Run a :class:`Cmd`, or build one from a record and run it."""
    cmd = obj if isinstance(obj, Cmd) else command(obj, cfg)
    return cmd.run()


def sudo(obj: Any, cfg: ShellacConfig | None = None) -> subprocess.CompletedProcess:
    """Like :func:`run`, but as root via sudo(8)."""
    cmd = obj if isinstance(obj, Cmd) else command(obj, cfg)
    cmd.sudo()
    return cmd.run()
