from enum import IntEnum

from git_sweep import utils


class SweepException(Exception):
    def __init__(self, msg: str, apply_fmt: bool = True) -> None:
        self.msg: str = utils.fmt(msg) if apply_fmt else msg

    def __str__(self) -> str:
        return str(self.msg)


class UnderlyingGitException(SweepException):
    pass


class TerminalException(SweepException):
    pass


class BranchNameEncodingException(SweepException):
    pass


class InvalidInputException(SweepException):
    def __init__(self, char: str) -> None:
        self.char: str = char
        # Not applying the formatter, the character might well be a backtick.
        super().__init__(f"Invalid input, don't know what {char!r} means", apply_fmt=False)


class UnexpectedSweepException(SweepException):
    def __init__(self, msg: str, apply_fmt: bool = True) -> None:
        super().__init__(f"{msg}\n\nThis is most likely a bug in git-sweep", apply_fmt=apply_fmt)


class ExitCode(IntEnum):
    SUCCESS = 0
    SWEEP_EXCEPTION = 1
    ARGUMENT_ERROR = 2
    KEYBOARD_INTERRUPT = 3
