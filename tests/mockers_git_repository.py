import os
from os import mkdir
from tempfile import mkdtemp
from typing import List, Optional

from .mockers import execute, popen, write_to_file

def create_repo(name: str = "local", switch_dir_to_new_repo: bool = True) -> str:
    path = os.path.join(mkdtemp(), name)
    mkdir(path)
    previous_dir = os.getcwd()
    os.chdir(path)
    execute(f'git init --quiet "{path}"')
    set_git_config_key("user.email", "tester@test.com")
    set_git_config_key("user.name", "Tester Test")
    set_git_config_key("commit.gpgsign", "false")
    if not switch_dir_to_new_repo:
        os.chdir(previous_dir)
    return path

def new_branch(branch_name: str) -> None:
    execute(f"git checkout -b {branch_name}")

def check_out(branch: str) -> None:
    execute(f"git checkout {branch}")

def detach_head() -> None:
    execute("git checkout --detach")

counter = 0

def next_integer() -> int:
    global counter
    counter += 1
    return counter

def commit(message: Optional[str] = None) -> None:
    if message is None:
        message = f"Some commit message-{next_integer()}"
    f = message.splitlines()[0].replace(' ', '').replace('.', '')
    f += '.txt'
    execute(f"touch {f}")
    execute(f"git add {f}")
    write_to_file(".git/commit-message", message)
    # Not passing the message directly via `-m` so that multiline messages can be handled correctly on Windows.
    execute('git commit --file=.git/commit-message')

def add_worktree(branch: str) -> str:
    path = os.path.join(mkdtemp(), "worktree")
    execute(f'git worktree add "{path}" {branch}')
    return path

def delete_branch(branch: str) -> None:
    execute(f'git branch -D "{branch}"')

def get_local_branches() -> List[str]:
    return popen('git for-each-ref refs/heads/ "--format=%(refname:short)"').splitlines()

def get_commit_hash(revision: str) -> str:
    return popen(f"git rev-parse {revision}")

def set_git_config_key(key: str, value: str) -> None:
    execute(f'git config {key} "{value}"')
