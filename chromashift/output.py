# output.py

import os
import sys
import fcntl
import signal
import asyncio
import termios
import subprocess
from typing import List, Optional, Sequence, TextIO

from .matcher import RuleMatcher, PathStyler
from .rules import Rule
from .segmenter import SegmentedWriter

READ_SIZE = 1024
RELAYED_SIGNALS = (signal.SIGINT, signal.SIGTERM)

def run_without_color(command: List[str]) -> int:
    """Run the command with inherited descriptors and return its exit code."""
    return subprocess.run(command).returncode

def _acquire_terminal() -> None:
    # runs in the child after setsid(); stdin is the pty slave
    fcntl.ioctl(0, termios.TIOCSCTTY, 0)

class Output:
    """
    Runs a command and colorizes one of its output streams.

    In pipe mode the selected stream (stdout, or stderr when stderr=True) is
    colorized and the other is passed through untouched. In pty mode the
    child gets a pseudo terminal for all three standard streams, so programs
    that only color or column-format their output on a tty behave as usual.
    """

    def __init__(self, command: List[str], rules: Sequence[Rule], stderr: bool = False,
                 pty: bool = False, out: Optional[TextIO] = None,
                 path_style: Optional[PathStyler] = None, logger=None):
        self.command = command
        self.stderr = stderr
        self.pty = pty
        self.out = out or (sys.stderr if stderr else sys.stdout)
        self.logger = logger
        self.matcher = RuleMatcher(rules, path_style=path_style, logger=logger)
        self.writer = SegmentedWriter(self.out, self.matcher.colorize, logger=logger)

    async def run(self) -> int:
        """Run the command to completion and return its exit code."""
        if self.pty:
            return await self._run_pty()
        return await self._run_pipe()

    def _debug(self, msg: str) -> None:
        if self.logger:
            self.logger.debug(msg)

    def _relay_signals(self, process) -> List[int]:
        """Forward interrupt and terminate signals to the child; return the installed signals."""
        loop = asyncio.get_running_loop()
        installed = []
        for sig in RELAYED_SIGNALS:
            try:
                loop.add_signal_handler(sig, self._forward_signal, process, sig)
                installed.append(sig)
            except (RuntimeError, ValueError, NotImplementedError) as e:
                self._debug(f"Cannot relay signal {sig}: {e}")
        return installed

    def _forward_signal(self, process, sig: int) -> None:
        try:
            process.send_signal(sig)
        except ProcessLookupError as e:
            self._debug(f"Error sending signal to process: {e}")

    def _remove_handlers(self, signals: List[int]) -> None:
        loop = asyncio.get_running_loop()
        for sig in signals:
            loop.remove_signal_handler(sig)

    async def _run_pipe(self) -> int:
        if self.stderr:
            streams = {"stdout": None, "stderr": asyncio.subprocess.PIPE}
        else:
            streams = {"stdout": asyncio.subprocess.PIPE, "stderr": None}

        process = await asyncio.create_subprocess_exec(*self.command, **streams)
        reader = process.stderr if self.stderr else process.stdout
        installed = self._relay_signals(process)
        try:
            while True:
                chunk = await reader.read(READ_SIZE)
                if not chunk:
                    break
                self.writer.write(chunk)
        finally:
            self.writer.close()
            self._remove_handlers(installed)

        return await process.wait()

    def _inherit_size(self, fd: int) -> None:
        """Copy our terminal's window size onto the pty."""
        try:
            size = fcntl.ioctl(sys.stdin.fileno(), termios.TIOCGWINSZ, b"\0" * 8)
            fcntl.ioctl(fd, termios.TIOCSWINSZ, size)
        except (OSError, ValueError) as e:
            self._debug(f"Error resizing pty: {e}")

    def _forward_input(self, master: int, stdin_fd: int) -> None:
        try:
            data = os.read(stdin_fd, READ_SIZE)
        except OSError as e:
            self._debug(f"Error reading stdin: {e}")
            data = b""
        if not data:
            asyncio.get_running_loop().remove_reader(stdin_fd)
            return
        os.write(master, data)

    async def _run_pty(self) -> int:
        loop = asyncio.get_running_loop()
        master, slave = os.openpty()
        self._inherit_size(master)

        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=slave, stdout=slave, stderr=slave,
                start_new_session=True,
                preexec_fn=_acquire_terminal,
            )
        except Exception:
            os.close(master)
            raise
        finally:
            os.close(slave)

        chunks: asyncio.Queue = asyncio.Queue()

        def on_output():
            try:
                data = os.read(master, READ_SIZE)
            except OSError:
                # EIO once the child side is closed
                data = b""
            if not data:
                loop.remove_reader(master)
            chunks.put_nowait(data)

        loop.add_reader(master, on_output)

        stdin_fd = None
        try:
            stdin_fd = sys.stdin.fileno()
            loop.add_reader(stdin_fd, self._forward_input, master, stdin_fd)
        except (OSError, ValueError, PermissionError) as e:
            self._debug(f"Not forwarding stdin: {e}")
            stdin_fd = None

        installed = self._relay_signals(process)
        try:
            loop.add_signal_handler(signal.SIGWINCH, self._inherit_size, master)
            installed.append(signal.SIGWINCH)
        except (RuntimeError, ValueError) as e:
            self._debug(f"Cannot watch window size: {e}")

        try:
            while True:
                chunk = await chunks.get()
                if not chunk:
                    break
                self.writer.write(chunk)
        finally:
            loop.remove_reader(master)
            if stdin_fd is not None:
                loop.remove_reader(stdin_fd)
            self._remove_handlers(installed)
            self.writer.close()
            os.close(master)

        return await process.wait()
