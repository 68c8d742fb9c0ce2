from enum import Enum

from git_sweep.exceptions import InvalidInputException


class BranchAction(Enum):
    KEEP = "k"
    DELETE = "d"
    QUIT = "q"
    SHOW_HELP = "?"

    @classmethod
    def from_key(cls, key: str) -> "BranchAction":
        try:
            return cls(key)
        except ValueError:
            raise InvalidInputException(key)

    @property
    def description(self) -> str:
        return {
            BranchAction.KEEP: "Keep the branch",
            BranchAction.DELETE: "Delete the branch",
            BranchAction.QUIT: "Quit",
            BranchAction.SHOW_HELP: "Show this help text",
        }[self]
