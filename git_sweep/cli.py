#!/usr/bin/env python3

import argparse
import sys
import textwrap
from typing import List

from git_sweep import __version__, utils

from .client import SweepClient
from .constants import TRUNK_BRANCH
from .exceptions import ExitCode, SweepException
from .git_operations import GitContext
from .terminal import Terminal


def get_description() -> str:
    return textwrap.dedent(f"""
        Review the local branches of the current repository one by one, oldest last commit first,
        and decide for each whether to keep or delete it.
        The {TRUNK_BRANCH} branch is never offered, the currently checked out branch is skipped.

        Commands (a single keystroke each):
          k  keep the branch
          d  delete the branch (an undo command is printed)
          q  quit, leaving the remaining branches untouched
          ?  show help
    """)


def create_cli_parser() -> argparse.ArgumentParser:
    cli_parser = argparse.ArgumentParser(
        prog='git sweep',
        description=get_description(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        argument_default=argparse.SUPPRESS)
    cli_parser.add_argument('--color', choices=['always', 'auto', 'never'],
                            help='when to use colors in the output (default: auto)')
    cli_parser.add_argument('--debug', action='store_true',
                            help='log the executed git commands together with their output')
    cli_parser.add_argument('--version', action='version', version=f'git-sweep version {__version__}')
    cli_parser.add_argument('-v', '--verbose', action='store_true',
                            help='log the executed git commands')
    return cli_parser


def set_utils_global_variables(parsed_args: argparse.Namespace) -> None:
    args = vars(parsed_args)
    utils.ascii_only = args.get("color") == "never" or (args.get("color") in {None, "auto"} and not sys.stdout.isatty())
    utils.debug_mode = "debug" in args
    utils.verbose_mode = "verbose" in args


def launch(orig_args: List[str]) -> None:
    parsed_cli: argparse.Namespace = create_cli_parser().parse_args(orig_args)
    set_utils_global_variables(parsed_cli)

    git = GitContext()
    SweepClient(git, Terminal()).sweep()


def main() -> None:
    try:
        launch(sys.argv[1:])
    except KeyboardInterrupt:  # pragma: no cover
        sys.exit(ExitCode.KEYBOARD_INTERRUPT)
    except SweepException as e:
        print(e, file=sys.stderr)
        sys.exit(ExitCode.SWEEP_EXCEPTION)
    except OSError as e:
        # e.g. stdout closed or unwritable
        print(e, file=sys.stderr)
        sys.exit(ExitCode.SWEEP_EXCEPTION)


if __name__ == "__main__":
    main()
