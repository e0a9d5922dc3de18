"""Git operations.

- Repository: git commands on a single working tree
- resolve_repos: which repositories a command operates on
- sync_all / run_foreach: parallel pull and command dispatch

Usage:
    from superrepo.git import resolve_repos, sync_all

    match resolve_repos(Path.cwd()):
        case Ok(repo_set):
            outcomes = sync_all(repo_set.repos, console=console)
        case Err(e):
            console.error(e.message)
"""

from superrepo.git.foreach import CommandResult, run_command
from superrepo.git.multi import run_foreach, run_parallel, sync_all
from superrepo.git.repository import GitError, Repository
from superrepo.git.resolver import (
    NotARepository,
    RepoRef,
    RepoSet,
    ScannedSet,
    Submodule,
    SubmoduleSet,
    SuperRepository,
    find_repo_dirs,
    open_repository,
    resolve_repos,
    scan_for_repos,
)
from superrepo.git.sync import PullStatus, SyncOutcome, sync_repo

__all__ = [
    # Repository
    "GitError",
    "Repository",
    # Resolver
    "NotARepository",
    "RepoRef",
    "RepoSet",
    "ScannedSet",
    "Submodule",
    "SubmoduleSet",
    "SuperRepository",
    "find_repo_dirs",
    "open_repository",
    "resolve_repos",
    "scan_for_repos",
    # Per-repository tasks
    "CommandResult",
    "PullStatus",
    "SyncOutcome",
    "run_command",
    "sync_repo",
    # Multi
    "run_foreach",
    "run_parallel",
    "sync_all",
]
