"""
Command line entry point: `python -m polycli` or the `polycli` script.
"""
import sys

from rich.console import Console

from polycli.runner import configure_logging, run
from polycli.utilities import build_repository

__prog__ = "polycli"


def main(argv=None):
    configure_logging()
    return run(build_repository(colorful=Console().is_terminal), argv)


if __name__ == "__main__":
    sys.exit(main())
