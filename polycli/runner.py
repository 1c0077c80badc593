"""
Polycli dispatcher and logging setup.

run(repository, argv, usage) drives one invocation:

    parse ─┬─ ParseError ──────────────► fault + command help    → 1
           ├─ EMPTY ───────────────────► command list            → 0
           ├─ unknown command ─────────► fault + command list    → 0
           ├─ HELP_REQUESTED ──────────► command help            → 0
           └─ PARSED ──────────────────► dispatch(action)        → 0

The returned integer is meant for sys.exit(); run() itself never exits.

configure_logging() installs a rich handler on the "polycli" logger; the level
comes from the argument, else the POLYCLI_LOG_LEVEL environment variable, else
WARNING.
"""
import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

from .faults import *
from .repository import InvocationState
from .utils import *

logger = logging.getLogger(__name__)

LOG_LEVEL_VARIABLE = "POLYCLI_LOG_LEVEL"


def configure_logging(level=Unset, /):
    """
    Route polycli log records to stderr through rich.logging.RichHandler.

    Calling it again replaces the previously installed handler. Records stop at
    the "polycli" logger, so a handler on the root logger does not print them twice.

    Raises
    - ValueError: unknown level name.
    """
    level = coalesce(level, os.environ.get(LOG_LEVEL_VARIABLE) or "WARNING")
    if isinstance(level, str):
        name = level.strip().upper()
        if not isinstance(level := logging.getLevelName(name), int):
            raise ValueError(f"unknown log level {name!r}")

    root = logging.getLogger("polycli")
    for handler in [handler for handler in root.handlers if isinstance(handler, RichHandler)]:
        root.removeHandler(handler)
    root.addHandler(RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True))
    root.propagate = False
    root.setLevel(level)
    return root


def run(repository, argv=None, usage=Unset, /, *, console=None, stderr=None):
    """
    Execute one invocation against a repository and return the exit status.

    Parameters
    - repository: CommandRepository.
    - argv: tokens after the program name (defaults to sys.argv[1:]).
    - usage: usage line of the command list (defaults to "<prog> <command> [options]",
      where prog is __main__.__prog__ when defined).
    - console: rich Console receiving help and command lists (stdout by default).
    - stderr: stream receiving faults (sys.stderr by default).
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    prog = getattr(__import__("__main__"), "__prog__", "polycli")
    usage = coalesce(usage, f"{prog} <command> [options]")
    options = {"shell": True, "colorful": repository.colorful, "prog": prog}
    if stderr is not None:
        options["file"] = stderr

    try:
        invocation = repository.parse(argv)
    except ParseError as fault:
        logger.info("%s: %s", InvocationState.PARSE_FAILED.value, fault)
        trigger(fault, **options)
        repository.print_command_help(fault.command, console=console)
        return 1

    name = invocation.command
    logger.debug("invocation state: %s", invocation.state.value)
    match invocation.state:
        case InvocationState.EMPTY:
            repository.print_command_list(usage, console=console)
        case _ if not repository.has_command(name):
            trigger(UnknownCommandError(
                "the specified command is not available: %r" % name,
                command=name,
                hint="pick one of the commands listed below",
            ), **options)
            repository.print_command_list(usage, console=console)
        case InvocationState.HELP_REQUESTED:
            repository.print_command_help(name, console=console)
        case InvocationState.PARSED:
            repository.dispatch(name, invocation.values)
    return 0


__all__ = (
    "LOG_LEVEL_VARIABLE",
    "configure_logging",
    "run",
)
