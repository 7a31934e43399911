# test_output.py

import io
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from chromashift.output import Output
from chromashift.rules import Rule


def python(code: str):
    return [sys.executable, "-c", code]


class TestPipeMode:
    """Colorizing a child's stdout or stderr through a pipe."""

    @pytest.mark.asyncio
    async def test_stdout_is_colorized(self):
        out = io.StringIO()
        output = Output(python("print('hello 42')"), [Rule(r"\d+", "red")], out=out)
        assert await output.run() == 0
        assert out.getvalue() == "hello \x1b[31m42\x1b[0m\n"

    @pytest.mark.asyncio
    async def test_stderr_mode(self):
        out = io.StringIO()
        code = "import sys; sys.stderr.write('error: disk full\\n')"
        output = Output(python(code), [Rule(r"^error", "bold red")], stderr=True, out=out)
        assert await output.run() == 0
        assert out.getvalue() == "\x1b[1;31merror\x1b[0m: disk full\n"

    @pytest.mark.asyncio
    async def test_exit_code_is_returned(self):
        output = Output(python("import sys; sys.exit(3)"), [], out=io.StringIO())
        assert await output.run() == 3

    @pytest.mark.asyncio
    async def test_redraws_and_lines(self):
        out = io.StringIO()
        code = "import sys; sys.stdout.write('50%\\r100%\\rdone\\n')"
        output = Output(python(code), [Rule(r"\d+%", "yellow")], out=out)
        await output.run()
        assert out.getvalue() == "\x1b[33m50%\x1b[0m\r\x1b[33m100%\x1b[0m\rdone\n"

    @pytest.mark.asyncio
    async def test_multibyte_output(self):
        out = io.StringIO()
        code = "import sys; sys.stdout.buffer.write('café ok\\n'.encode('utf-8'))"
        output = Output(python(code), [Rule("ok", "green")], out=out)
        await output.run()
        assert out.getvalue() == "café \x1b[32mok\x1b[0m\n"

    @pytest.mark.asyncio
    async def test_unterminated_tail_is_dropped(self):
        out = io.StringIO()
        code = "import sys; sys.stdout.write('line\\ntail')"
        output = Output(python(code), [], out=out)
        await output.run()
        assert out.getvalue() == "line\n"

    @pytest.mark.asyncio
    async def test_missing_executable(self):
        output = Output(["definitely-not-a-command-4821"], [], out=io.StringIO())
        with pytest.raises(FileNotFoundError):
            await output.run()


class TestPtyMode:
    """Running the child on a pseudo terminal."""

    @pytest.mark.asyncio
    async def test_child_sees_a_terminal(self):
        out = io.StringIO()
        code = "import sys; print(sys.stdout.isatty())"
        output = Output(python(code), [Rule("True", "green")], pty=True, out=out)
        assert await output.run() == 0
        # the pty translates "\n" into "\r\n"
        assert out.getvalue() == "\x1b[32mTrue\x1b[0m\r\n"

    @pytest.mark.asyncio
    async def test_pty_is_controlling_terminal(self):
        out = io.StringIO()
        code = "import os; os.close(os.open('/dev/tty', os.O_RDWR)); print('tty ok')"
        output = Output(python(code), [Rule("ok", "green")], pty=True, out=out)
        assert await output.run() == 0
        assert out.getvalue() == "tty \x1b[32mok\x1b[0m\r\n"

    @pytest.mark.asyncio
    async def test_missing_executable_closes_pty(self):
        output = Output(["definitely-not-a-command-4821"], [], pty=True, out=io.StringIO())
        before = len(os.listdir("/proc/self/fd"))
        with pytest.raises(FileNotFoundError):
            await output.run()
        assert len(os.listdir("/proc/self/fd")) == before
