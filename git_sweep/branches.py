import datetime
from typing import List

from git_sweep.constants import (COMMIT_TIME_FORMAT, DISPLAYED_HASH_LENGTH,
                                 TRUNK_BRANCH)
from git_sweep.exceptions import UnexpectedSweepException
from git_sweep.git_operations import (FullCommitHash, GitContext,
                                      LocalBranchShortName)
from git_sweep.utils import debug

UNIX_EPOCH = datetime.datetime(1970, 1, 1)


def get_commit_local_time(unix_timestamp: int, utc_offset_minutes: int) -> datetime.datetime:
    """
    Wall-clock time of the committer at the moment of committing,
    i.e. the UTC time shifted by the offset recorded in the commit.
    The result is naive and never converted to the time zone of the reader.
    """
    return UNIX_EPOCH + datetime.timedelta(seconds=unix_timestamp, minutes=utc_offset_minutes)


class Branch:
    """A local branch under review, as of the moment the branches were listed.

    Only the name is kept to refer to the branch in the repository;
    deletion resolves the branch by that name again.
    """

    def __init__(self, git: GitContext, *,
                 name: LocalBranchShortName,
                 hash: FullCommitHash,
                 commit_time: datetime.datetime,
                 is_head: bool) -> None:
        self.__git = git
        self.name: LocalBranchShortName = name
        self.hash: FullCommitHash = hash
        self.commit_time: datetime.datetime = commit_time
        self.is_head: bool = is_head
        self.__is_deleted: bool = False

    @property
    def short_hash(self) -> str:
        return self.hash[:DISPLAYED_HASH_LENGTH]

    @property
    def commit_time_repr(self) -> str:
        return self.commit_time.strftime(COMMIT_TIME_FORMAT)

    @property
    def is_deleted(self) -> bool:
        return self.__is_deleted

    def delete(self) -> None:
        if self.is_head:
            raise UnexpectedSweepException(f"Branch <b>{self.name}</b> is currently checked out and cannot be deleted")
        if self.__is_deleted:
            raise UnexpectedSweepException(f"Branch <b>{self.name}</b> has already been deleted")
        self.__git.delete_branch(self.name)
        self.__is_deleted = True

    def __repr__(self) -> str:
        return f"Branch(name={self.name}, hash={self.hash}, commit_time={self.commit_time_repr}, is_head={self.is_head})"


def list_branches(git: GitContext) -> List[Branch]:
    # Every branch is resolved (and validated) before any is discarded,
    # so a broken trunk branch fails the listing just like any other branch.
    tips = git.get_branch_tips()
    current_branch = git.get_currently_checked_out_branch_or_none()

    branches = [
        Branch(git,
               name=tip.branch,
               hash=tip.commit_hash,
               commit_time=get_commit_local_time(tip.committer_unix_timestamp, tip.committer_utc_offset_minutes),
               is_head=tip.branch == current_branch)
        for tip in tips if tip.branch != TRUNK_BRANCH
    ]
    debug(f"{len(branches)} branch(es) to review out of {len(tips)}")
    # `sorted` is stable: branches with equal commit times keep the order of `git for-each-ref`.
    return sorted(branches, key=lambda branch: branch.commit_time)
