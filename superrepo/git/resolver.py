"""Repository set resolution.

Decides which repositories a command operates on. Two strategies are tried
in order and the first one that applies wins:

1. The directory is the root of a git work tree: its submodules (from
   ``.gitmodules``) are the members, whether or not they are checked out.
2. Otherwise the directory tree is scanned, a couple of levels deep, for
   directories holding a ``.git`` marker.

The result is a ``RepoSet``, a sum type that records which strategy produced
it. The set of ``RepoRef`` values is a tuple and is fixed before any
per-repository task starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from superrepo.core.config import DEFAULT_BRANCH, DEFAULT_SCAN_DEPTH
from superrepo.core.result import Err, Ok, Result
from superrepo.git.repository import GitError, Repository

__all__ = [
    "GITMODULES",
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
]

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"
GITMODULES = ".gitmodules"

# submodule.<name>.branch = . means "whatever the super repository is on"
_SAME_AS_SUPER = "."


@dataclass(frozen=True, slots=True)
class RepoRef:
    """One member repository and the branch it should track.

    Attributes:
        name: Display name (submodule name, or path relative to the scan root)
        path: Working tree path
        branch: Branch that pull fast-forwards
    """

    name: str
    path: Path
    branch: str


@dataclass(frozen=True, slots=True)
class NotARepository:
    """The directory is not the root of a git work tree."""

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class Submodule:
    """A submodule entry from ``.gitmodules``."""

    name: str
    path: str | None = None
    url: str | None = None
    branch: str | None = None


@dataclass(frozen=True, slots=True)
class SubmoduleSet:
    """Members resolved from the super repository's submodule metadata."""

    root: Path
    repos: tuple[RepoRef, ...]


@dataclass(frozen=True, slots=True)
class ScannedSet:
    """Members found by scanning a directory that is not under version control."""

    root: Path
    repos: tuple[RepoRef, ...]


type RepoSet = SubmoduleSet | ScannedSet


class SuperRepository:
    """Handle on an opened super repository.

    Attributes:
        root: Work tree root
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._repo = Repository(root)

    def __repr__(self) -> str:
        return f"SuperRepository({str(self.root)!r})"

    def submodules(self) -> Result[list[Submodule], GitError]:
        """Submodules configured in ``.gitmodules``, in file order.

        A repository without a ``.gitmodules`` file has no submodules.
        """
        if not (self.root / GITMODULES).is_file():
            return Ok([])

        result = self._repo.config_entries(GITMODULES)
        if isinstance(result, Err):
            return result

        fields: dict[str, dict[str, str]] = {}
        for key, value in result.value:
            if not key.startswith("submodule."):
                continue
            # Names may contain dots; the variable is everything after the last one.
            name, dot, var = key[len("submodule.") :].rpartition(".")
            if not dot or not name:
                continue
            fields.setdefault(name, {})[var] = value

        return Ok(
            [
                Submodule(
                    name=name,
                    path=values.get("path"),
                    url=values.get("url"),
                    branch=values.get("branch") or None,
                )
                for name, values in fields.items()
            ]
        )

    def submodule_refs(
        self, *, default_branch: str = DEFAULT_BRANCH
    ) -> Result[list[RepoRef], GitError]:
        """One RepoRef per submodule.

        The path is the super repository root joined with the submodule name.
        Submodules without a configured branch track ``default_branch``.
        """
        result = self.submodules()
        if isinstance(result, Err):
            return result

        refs: list[RepoRef] = []
        for sub in result.value:
            branch = sub.branch or default_branch
            if branch == _SAME_AS_SUPER:
                branch = self._own_branch() or default_branch
            refs.append(RepoRef(name=sub.name, path=self.root / sub.name, branch=branch))
        return Ok(refs)

    def _own_branch(self) -> str | None:
        match self._repo.current_branch():
            case Ok(branch):
                return branch or None
            case Err(e):
                logger.debug("could not read super repository branch: %s", e.message)
                return None


def open_repository(path: Path) -> Result[SuperRepository, NotARepository]:
    """Open ``path`` as a git repository.

    Only the root of a work tree qualifies; parent directories are not
    searched.
    """
    repo = Repository(path)
    if not repo.exists():
        return Err(NotARepository(path=path, reason=f"no {GIT_MARKER} in {path}"))

    match repo.toplevel():
        case Err(e):
            return Err(NotARepository(path=path, reason=e.message))
        case Ok(toplevel):
            if toplevel.resolve() != path.resolve():
                return Err(
                    NotARepository(path=path, reason=f"{path} is inside work tree {toplevel}")
                )
            return Ok(SuperRepository(path))


def find_repo_dirs(root: Path, *, max_depth: int = DEFAULT_SCAN_DEPTH) -> list[Path]:
    """Directories below ``root`` that contain a ``.git`` marker.

    Looks at most ``max_depth`` levels down. The marker itself is stripped,
    so the returned paths are the repositories' own directories, sorted
    case-insensitively.
    """
    if not root.is_dir():
        return []

    repos: set[Path] = set()
    for depth in range(1, max_depth + 1):
        pattern = "/".join(["*"] * depth + [GIT_MARKER])
        for marker in root.glob(pattern):
            repo_dir = marker.parent
            rel = repo_dir.relative_to(root)
            if GIT_MARKER in rel.parts:
                continue
            repos.add(repo_dir)

    return sorted(repos, key=lambda p: p.relative_to(root).as_posix().lower())


def scan_for_repos(
    root: Path,
    *,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    default_branch: str = DEFAULT_BRANCH,
) -> list[RepoRef]:
    """RepoRefs for every repository found by find_repo_dirs().

    The branch is whatever each repository has checked out; when that can't
    be read (detached HEAD, broken repository) ``default_branch`` is used.
    """
    refs: list[RepoRef] = []
    for path in find_repo_dirs(root, max_depth=max_depth):
        match Repository(path).current_branch():
            case Ok(branch) if branch:
                pass
            case Ok(_):
                branch = default_branch
            case Err(e):
                logger.debug("could not read branch of %s: %s", path, e.message)
                branch = default_branch
        refs.append(RepoRef(name=path.relative_to(root).as_posix(), path=path, branch=branch))
    return refs


def resolve_repos(
    cwd: Path,
    *,
    default_branch: str = DEFAULT_BRANCH,
    max_depth: int = DEFAULT_SCAN_DEPTH,
) -> Result[RepoSet, GitError]:
    """Resolve the member repositories for a command run in ``cwd``.

    Returns Err only when ``cwd`` is a repository whose submodule metadata
    can't be read; a directory that is not a repository is not an error.
    """
    match open_repository(cwd):
        case Ok(super_repo):
            refs = super_repo.submodule_refs(default_branch=default_branch)
            if isinstance(refs, Err):
                return refs
            logger.debug("resolved %d submodules in %s", len(refs.value), cwd)
            return Ok(SubmoduleSet(root=cwd, repos=tuple(refs.value)))
        case Err(not_a_repo):
            logger.debug("%s; scanning for repositories", not_a_repo.reason)
            scanned = scan_for_repos(cwd, max_depth=max_depth, default_branch=default_branch)
            return Ok(ScannedSet(root=cwd, repos=tuple(scanned)))
