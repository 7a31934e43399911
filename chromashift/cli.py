# cli.py

import sys
import asyncio
import argparse
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .alias import SHELLS, alias_script
from .config import load_config, get_rule_file_name
from .errors import ChromaShiftError
from .logger import Logger
from .output import Output, run_without_color
from .rules import load_rules

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chromashift",
        description="An output colorizer for your favorite commands",
        usage="chromashift [OPTIONS] -- COMMAND [ARGS...] | chromashift {list,alias}",
    )
    parser.add_argument('--config',
        help='Path to the config file')
    parser.add_argument('--rules-dir',
        help='Path to the rules directory')
    parser.add_argument('--color',
        choices=['never', 'auto', 'always'], default='auto',
        help='Whether to use color')
    parser.add_argument('-d', '--debug',
        action='store_true',
        help='Verbose output on stderr')
    parser.add_argument('--log-file',
        help='Write debug output to this file instead of stderr')
    parser.add_argument('--version',
        action='version', version=f'chromashift {__version__}')
    parser.add_argument('command', nargs=argparse.REMAINDER,
        help='Command to run, or a subcommand: list, alias SHELL')
    return parser

def parse_args(argv: List[str]) -> Tuple[argparse.Namespace, List[str], bool]:
    """
    Split options from the wrapped command.

    Returns the options, the command words and whether the command was
    given after an explicit "--" (which disables subcommand lookup).
    """
    parser = build_parser()
    if "--" in argv:
        idx = argv.index("--")
        args = parser.parse_args(argv[:idx])
        return args, argv[idx + 1:], True
    args = parser.parse_args(argv)
    return args, list(args.command), False

def supports_color(stream) -> bool:
    """True when stream is a terminal rich would print colors to."""
    console = Console(file=stream)
    return console.is_terminal and console.color_system is not None

def use_color(mode: str, stderr: bool = False, pty: bool = False) -> bool:
    if mode == "never":
        return False
    if mode == "always":
        return True
    if pty:
        return supports_color(sys.stdout) and supports_color(sys.stderr)
    return supports_color(sys.stderr if stderr else sys.stdout)

def list_commands(args: argparse.Namespace, logger, console: Console) -> int:
    config = load_config(args.config, logger)
    table = Table(title="Configured commands", header_style="bold yellow")
    table.add_column("Rules file", style="green")
    table.add_column("Command", style="bold")
    table.add_column("Regexp", style="red")
    for name in sorted(config):
        entry = config[name]
        table.add_row(entry.file, name, entry.regexp)
    console.print(table)
    return 0

def print_alias(args: argparse.Namespace, shell_args: List[str], logger,
                err_console: Console) -> int:
    if len(shell_args) != 1 or shell_args[0] not in SHELLS:
        err_console.print(f"[bold red]Usage:[/] chromashift alias {{{','.join(SHELLS)}}}")
        return 2
    shell = shell_args[0]
    config = load_config(args.config, logger)
    if shell == "nu":
        err_console.print("[yellow]The nushell alias script is experimental!!![/]")
    sys.stdout.write(alias_script(shell, config.keys()))
    return 0

def run_command(args: argparse.Namespace, command: List[str], logger) -> int:
    """Colorize command's output when a rules file applies, else run it plainly."""
    if args.color == "never":
        return run_without_color(command)

    try:
        config = load_config(args.config, logger)
        rule_file = get_rule_file_name(config, command, logger)
        logger.debug(f"Rules file name: {rule_file}")
        cmd_rules = load_rules(rule_file, args.rules_dir, logger)
    except ChromaShiftError as e:
        logger.debug(f"No rules for current command: {e}")
        return run_without_color(command)

    if not cmd_rules.rules:
        logger.debug("Rules file has no rules")
        return run_without_color(command)

    if not use_color(args.color, cmd_rules.stderr, cmd_rules.pty):
        return run_without_color(command)

    logger.debug(f"Rules found: {len(cmd_rules.rules)}")
    output = Output(command, cmd_rules.rules, stderr=cmd_rules.stderr,
                    pty=cmd_rules.pty, logger=logger)
    return asyncio.run(output.run())

def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args, command, explicit = parse_args(argv)

    logger = Logger("chromashift", args.debug, args.log_file)
    console = Console()
    err_console = Console(stderr=True)

    if not command:
        build_parser().print_help()
        return 0

    try:
        if not explicit and command[0] == "list":
            return list_commands(args, logger, console)
        if not explicit and command[0] == "alias":
            return print_alias(args, command[1:], logger, err_console)
        return run_command(args, command, logger)
    except ChromaShiftError as e:
        err_console.print(f"[bold red]ChromaShift Error:[/] {escape(str(e))}")
        return 1
    except FileNotFoundError as e:
        err_console.print(f"[bold red]ChromaShift Error:[/] {e.strerror}: {command[0]}")
        return 127
    except KeyboardInterrupt:
        return 130
