from typing import List, Optional

from git_sweep.actions import BranchAction
from git_sweep.branches import Branch, list_branches
from git_sweep.constants import TRUNK_BRANCH
from git_sweep.git_operations import GitContext
from git_sweep.terminal import Terminal
from git_sweep.utils import AnsiEscapeCodes, bold, colored, debug, dim


class SweepClient:
    def __init__(self, git: GitContext, terminal: Terminal) -> None:
        self._git: GitContext = git
        self._terminal: Terminal = terminal

    def sweep(self) -> None:
        # Fail on a missing repository before the terminal is touched at all.
        self._git.get_git_dir()

        with self._terminal.raw_mode():
            branches: List[Branch] = list_branches(self._git)
            if not branches:
                self._write_info(f"Found no branches ({TRUNK_BRANCH} is ignored)")
                return

            for branch in branches:
                if self._act_on_branch(branch) == BranchAction.QUIT:
                    debug(f"quitting at {branch.name}")
                    return

    def _act_on_branch(self, branch: Branch) -> Optional[BranchAction]:
        if branch.is_head:
            self._write_info(f"Ignoring '{branch.name}' because it is the current branch")
            return None

        action = self._ask_for_action(branch)
        if action == BranchAction.DELETE:
            branch.delete()
            self._write_info(f"Deleted branch '{branch.name}', to undo run `git branch {branch.name} {branch.hash}`")
        return action

    def _ask_for_action(self, branch: Branch) -> BranchAction:
        while True:
            self._write_prompt(branch)
            char = self._terminal.read_char()
            if char is None:
                # End of input, ask again about the same branch
                continue
            self._terminal.write_line(char)

            action = BranchAction.from_key(char)
            if action != BranchAction.SHOW_HELP:
                return action
            self._write_help()

    def _write_prompt(self, branch: Branch) -> None:
        branch_name = colored(f"'{branch.name}'", AnsiEscapeCodes.GREEN)
        commit_hash = dim(f"({branch.short_hash})")
        commit_time = colored(branch.commit_time_repr, AnsiEscapeCodes.GREEN)
        commands = bold(f"({'/'.join(action.value for action in BranchAction)})")
        self._terminal.write(f"{branch_name} {commit_hash} last commit at {commit_time} {commands} > ")
        self._terminal.flush()

    def _write_help(self) -> None:
        self._terminal.write_line()
        self._terminal.write_line(dim("Here are what the commands mean:"))
        for action in BranchAction:
            self._terminal.write_line(f"{bold(action.value)} - {action.description}")
        self._terminal.write_line()
        self._terminal.flush()

    def _write_info(self, msg: str) -> None:
        self._terminal.write_line(colored(dim(msg), AnsiEscapeCodes.YELLOW))
