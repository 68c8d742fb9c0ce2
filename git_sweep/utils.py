import inspect
import os
import re
import subprocess
import sys
from typing import (Callable, Dict, Iterable, List, NamedTuple, Optional,
                    TypeVar)

T = TypeVar('T')

ascii_only: bool = not sys.stdout.isatty()
debug_mode: bool = False
verbose_mode: bool = False
# Set for as long as the terminal is in raw mode, which turns off output post-processing.
raw_terminal_mode: bool = False


def excluding(iterable: Iterable[T], s: Iterable[T]) -> List[T]:
    return list(filter(lambda x: x not in s, iterable))


def get_non_empty_lines(s: str) -> List[str]:
    return list(filter(None, s.splitlines()))


def print_to_stderr(msg: str) -> None:
    if raw_terminal_mode:
        # A bare LF would only move the cursor down, without returning the carriage.
        print(re.sub('(?<!\r)\n', '\r\n', msg), file=sys.stderr, end='\r\n')
    else:
        print(msg, file=sys.stderr)


def debug(msg: str) -> None:
    if debug_mode:
        caller = inspect.stack()[1]
        args, _, _, values = inspect.getargvalues(caller.frame)

        args_and_values = ', '.join(arg + '=' + re.sub('\n +', ' ', str(values[arg])) for arg in excluding(args, {'self'}))
        print_to_stderr(f"{bold(caller.function)}{bold(f'({args_and_values})')}: {dim(msg)}")


class PopenResult(NamedTuple):
    exit_code: int
    stdout: str
    stderr: str


def _popen_cmd(cmd: str, *args: str, env: Optional[Dict[str, str]] = None) -> PopenResult:
    process = subprocess.Popen([cmd] + list(args), stdout=subprocess.PIPE, stderr=subprocess.PIPE, env=env)
    stdout_bytes, stderr_bytes = process.communicate()
    # Undecodable bytes survive as lone surrogates, so that the callers can tell
    # which part of the output (e.g. which branch name) was not valid UTF-8.
    return PopenResult(process.returncode,
                       stdout_bytes.decode('utf-8', errors='surrogateescape'),
                       stderr_bytes.decode('utf-8', errors='replace'))


def popen_cmd(cmd: str, *args: str, env: Optional[Dict[str, str]] = None) -> PopenResult:
    cmd_repr = get_cmd_shell_repr(cmd, *args, env=env)
    if debug_mode:
        print_to_stderr(bold(f">>> {cmd_repr}"))
    elif verbose_mode:
        print_to_stderr(cmd_repr)

    result = _popen_cmd(cmd, *args, env=env)

    if debug_mode:
        if result.exit_code != 0:
            print_to_stderr(colored(f"<exit code: {result.exit_code}>\n", AnsiEscapeCodes.RED))
        if result.stdout:
            print_to_stderr(f"{dim('<stdout>:')}\n{dim(result.stdout)}")
        if result.stderr:
            print_to_stderr(f"{dim('<stderr>:')}\n{colored(result.stderr, AnsiEscapeCodes.RED)}")
    return result


def get_cmd_shell_repr(cmd: str, *args: str, env: Optional[Dict[str, str]]) -> str:
    def shell_escape(arg: str) -> str:
        return arg.replace("(", "\\(") \
            .replace(")", "\\)") \
            .replace(" ", "\\ ") \
            .replace("\t", "$'\\t'") \
            .replace("\n", "$'\\n'")

    # Variables inherited from the environment of git-sweep itself are not worth showing
    env_repr = [k + "=" + shell_escape(v) for k, v in (env or {}).items() if k not in os.environ]
    return " ".join(env_repr + [cmd] + list(map(shell_escape, args)))


def is_terminal_fully_fledged() -> bool:
    try:
        return int(_popen_cmd('tput', 'colors').stdout) >= 256
    except Exception:
        # No `tput` or no answer from it, let's assume a basic 8-color terminal.
        return False


def hex_repr(input: str) -> str:
    # Skip the first two `0x` characters.
    return ':'.join(hex(ord(char))[2:] for char in input)


class AnsiEscapeCodes:

    __is_terminal_fully_fledged = is_terminal_fully_fledged()

    # `[2m`-style dimmed text is invisible in some terminal recorders.
    __dim_as_gray = os.environ.get('GIT_SWEEP_DIM_AS_GRAY') == 'true'

    ENDC = '\033[0m'
    ENDC_UNDERLINE = '\033[24m'
    ENDC_BOLD_DIM = '\033[22m'
    BOLD = '\033[1m'
    DIM = '\033[38;2;128;128;128m' if __dim_as_gray else '\033[2m'
    # Cyan on 8-color terminals
    UNDERLINE = '\033[4m' if __is_terminal_fully_fledged else '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    # Dark red on 8-color terminals
    RED = '\033[91m' if __is_terminal_fully_fledged else '\033[31m'


def bold(s: str) -> str:
    return s if ascii_only or not s else AnsiEscapeCodes.BOLD + s + AnsiEscapeCodes.ENDC_BOLD_DIM


def dim(s: str) -> str:
    return s if ascii_only or not s else AnsiEscapeCodes.DIM + s + AnsiEscapeCodes.ENDC_BOLD_DIM


def underline(s: str) -> str:
    return s if ascii_only or not s else AnsiEscapeCodes.UNDERLINE + s + AnsiEscapeCodes.ENDC_UNDERLINE


def colored(s: str, color: str) -> str:
    return s if ascii_only or not s else color + s + AnsiEscapeCodes.ENDC


# Message markup: `command` is underlined, <b>branch</b> is bold.
fmt_transformations: List[Callable[[str], str]] = [
    lambda x: re.sub('`(.*?)`', underline(r"\1"), x),
    lambda x: re.sub('<b>(.*?)</b>', bold(r"\1"), x, flags=re.DOTALL),
]


def fmt(*parts: str) -> str:
    result = ''.join(parts)
    for f in fmt_transformations:
        result = f(result)
    return result


class CommandResult(NamedTuple):
    stdout: str
    stderr: str
    exit_code: int
