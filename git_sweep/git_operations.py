import re
import string
from typing import Dict, List, NamedTuple, Optional

from . import utils
from .exceptions import (BranchNameEncodingException, UnderlyingGitException,
                         UnexpectedSweepException)
from .utils import CommandResult, debug, fmt, hex_repr


class AnyRevision(str):
    pass


class AnyBranchName(AnyRevision):
    pass


class LocalBranchShortName(AnyBranchName):
    @staticmethod
    def of(value: str) -> "LocalBranchShortName":
        if value.startswith('refs/heads/') or value.startswith('refs/remotes/'):
            raise UnexpectedSweepException(
                f'LocalBranchShortName cannot accept `refs/heads` or `refs/remotes`. Provided value: {value}.')
        else:
            return LocalBranchShortName(value)


class LocalBranchFullName(AnyBranchName):
    @staticmethod
    def of(value: str) -> "LocalBranchFullName":
        if value and value.startswith('refs/heads/'):
            return LocalBranchFullName(value)
        else:
            raise UnexpectedSweepException(
                f'LocalBranchFullName needs to have `refs/heads` prefix before branch name. Provided value: {value}.')

    def to_short_name(self) -> "LocalBranchShortName":
        return LocalBranchShortName.of(re.sub("^refs/heads/", "", self))


class FullCommitHash(AnyRevision):
    # SHA-1 and SHA-256 object formats respectively
    VALID_LENGTHS = (40, 64)

    @staticmethod
    def of(value: str) -> "FullCommitHash":
        if FullCommitHash.is_valid(value):
            return FullCommitHash(value)
        else:
            raise UnexpectedSweepException(
                f'FullCommitHash requires a hex string of length 40 or 64. Provided value: "{value}".')

    @staticmethod
    def is_valid(value: str) -> bool:
        return len(value) in FullCommitHash.VALID_LENGTHS and all(c in string.hexdigits for c in value)


class BranchTip(NamedTuple):
    branch: LocalBranchShortName
    commit_hash: FullCommitHash
    committer_unix_timestamp: int
    committer_utc_offset_minutes: int


class GitContext:

    def __init__(self) -> None:
        self.__git_dir: Optional[str] = None
        self.__branch_tips_cached: Optional[List[BranchTip]] = None
        self.__current_branch_cached: Optional[LocalBranchShortName] = None
        self.__is_current_branch_loaded: bool = False

    def flush_caches(self) -> None:
        self.__branch_tips_cached = None
        self.__current_branch_cached = None
        self.__is_current_branch_loaded = False

    def _popen_git(self, git_cmd: str, *args: str,
                   allow_non_zero: bool = False, env: Optional[Dict[str, str]] = None) -> CommandResult:
        exit_code, stdout, stderr = utils.popen_cmd("git", git_cmd, *args, env=env)
        if not allow_non_zero and exit_code != 0:
            exit_code_msg: str = fmt(f"`{utils.get_cmd_shell_repr('git', git_cmd, *args, env=env)}` returned {exit_code}\n")
            stdout_msg: str = f"\n{utils.bold('stdout')}:\n{utils.dim(stdout)}" if stdout else ""
            stderr_msg: str = f"\n{utils.bold('stderr')}:\n{utils.dim(stderr)}" if stderr else ""
            # Not applying the formatter to avoid transforming whatever characters might be in the output of the command.
            raise UnderlyingGitException(exit_code_msg + stdout_msg + stderr_msg, apply_fmt=False)
        return CommandResult(stdout, stderr, exit_code)

    def get_git_dir(self) -> str:
        # Unlike `--show-toplevel`, `--git-dir` also works in bare repositories, which can have branches, too.
        if not self.__git_dir:
            try:
                self.__git_dir = self._popen_git("rev-parse", "--git-dir").stdout.strip()
            except UnderlyingGitException:
                raise UnderlyingGitException("Not a git repository")
        return self.__git_dir

    def get_branch_tips(self) -> List[BranchTip]:
        if self.__branch_tips_cached is None:
            self.__branch_tips_cached = self.__load_branch_tips()
        return self.__branch_tips_cached

    def __load_branch_tips(self) -> List[BranchTip]:
        result: List[BranchTip] = []
        # Using 'committerdate:raw' instead of 'committerdate:unix' since the latter isn't supported by some older versions of git.
        raw_local = utils.get_non_empty_lines(
            self._popen_git("for-each-ref", "--format=%(refname)\t%(objectname)\t%(objecttype)\t%(committerdate:raw)",
                            "refs/heads").stdout)

        for line in raw_local:
            values = line.split("\t")
            if len(values) != 4:
                raise UnexpectedSweepException(
                    "`git for-each-ref` did not return exactly 4 values for `refs/heads`: "
                    f"`{values}` ({hex_repr(line)})")
            branch_full_name, commit_hash, object_type, committer_date_raw = values
            branch = LocalBranchFullName.of(branch_full_name).to_short_name()
            try:
                branch.encode('utf-8')
            except UnicodeEncodeError:
                raw_name = branch.encode('utf-8', errors='surrogateescape')
                raise BranchNameEncodingException(f"Name of branch {raw_name!r} is not valid UTF-8", apply_fmt=False)
            if object_type != "commit":
                raise UnderlyingGitException(
                    f"Branch <b>{branch}</b> points to a {object_type} ({commit_hash}), not to a commit")
            # E.g. `1534789159 +0200`
            match = re.fullmatch(r"(\d+) ([+-])(\d\d)(\d\d)", committer_date_raw)
            if not match:
                raise UnexpectedSweepException(
                    f"Could not parse committer date `{committer_date_raw}` of branch `{branch}`")
            sign = -1 if match.group(2) == '-' else 1
            offset_minutes = sign * (int(match.group(3)) * 60 + int(match.group(4)))
            result += [BranchTip(branch, FullCommitHash.of(commit_hash), int(match.group(1)), offset_minutes)]
        return result

    def get_currently_checked_out_branch_or_none(self) -> Optional[LocalBranchShortName]:
        if not self.__is_current_branch_loaded:
            result = self._popen_git("symbolic-ref", "--quiet", "HEAD", allow_non_zero=True)
            raw = result.stdout.strip()
            if result.exit_code == 0 and raw.startswith("refs/heads/"):
                self.__current_branch_cached = LocalBranchFullName.of(raw).to_short_name()
            else:
                debug("HEAD does not point to a local branch")
                self.__current_branch_cached = None
            self.__is_current_branch_loaded = True
        return self.__current_branch_cached

    def delete_branch(self, branch: LocalBranchShortName) -> None:
        # `-D` rather than `-d`: branches are deleted regardless of whether they've been merged anywhere.
        self._popen_git("branch", "-D", branch)
        self.flush_caches()
