# alias.py

from typing import Callable, Dict, Iterable, List

PROG = "chromashift"

# Names that clash with nushell builtins
NU_BANNED = {"ps", "last", "find", "cp", "mv", "rm"}

ZSH_HEADER = f"""#!/bin/zsh
if ! tty -s || [ ! -n "$TERM" ] || [ "$TERM" = dumb ] || (( ! $+commands[{PROG}] )); then
    return
fi

alias csudo="sudo $commands[{PROG}] --"
"""

ZSH_FUNCTION = """
if (( $+commands[{cmd}] )) ; then
    function {cmd} {{
        {prog} -- {cmd} "$@"
    }}
fi
"""

BASH_HEADER = f"""#!/bin/bash

if ! tty -s || [ -z "$TERM" ] || [ "$TERM" = "dumb" ] || ! command -v {PROG} >/dev/null; then
    return 1 2>/dev/null || exit 1
fi

alias csudo="sudo $(command -v {PROG}) --"
"""

BASH_FUNCTION = """if command -v "{cmd}" >/dev/null ; then
    function {cmd} {{
        {prog} -- "{cmd}" "$@"
    }}
fi

"""

FISH_SCRIPT = """#!/bin/fish

set {prog}_cmd_list {cmds}

for executable in ${prog}_cmd_list
    if type -q $executable
        function $executable --inherit-variable executable --wraps=$executable
            if isatty 1
                {prog} -- $executable $argv
            else
                eval command $executable $argv
            end
        end
    end
end
"""

NU_HEADER = f"""#!/bin/nu

if ($env.TERM == "dumb") and (which {PROG} | is-not-empty) {{
    exit 1
}}
"""

def zsh_script(commands: Iterable[str]) -> str:
    return ZSH_HEADER + "".join(ZSH_FUNCTION.format(cmd=c, prog=PROG) for c in commands)

def bash_script(commands: Iterable[str]) -> str:
    return BASH_HEADER + "\n" + "".join(BASH_FUNCTION.format(cmd=c, prog=PROG) for c in commands)

def fish_script(commands: Iterable[str]) -> str:
    return FISH_SCRIPT.format(prog=PROG, cmds=" ".join(commands))

def nu_script(commands: Iterable[str]) -> str:
    lines: List[str] = [NU_HEADER]
    for cmd in commands:
        if cmd in NU_BANNED:
            continue
        lines.append(f"def --wrapped {cmd} [...p] {{ {PROG} -- {cmd} ...$p }}")
    return "\n".join(lines) + "\n"

SHELLS: Dict[str, Callable[[Iterable[str]], str]] = {
    "zsh": zsh_script,
    "bash": bash_script,
    "fish": fish_script,
    "nu": nu_script,
}

def alias_script(shell: str, commands: Iterable[str]) -> str:
    """
    Generate wrapper functions that route each command through chromashift.

    Raises:
        KeyError: If the shell is not supported
    """
    return SHELLS[shell](sorted(commands))
