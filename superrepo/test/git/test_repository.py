"""Tests for superrepo.git.repository module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

from superrepo.core.result import Err, Ok
from superrepo.git.repository import GitError, Repository
from superrepo.platform.process import ProcessResult

if TYPE_CHECKING:
    from superrepo.test.conftest import FakeGit

SHA = "0123456789abcdef0123456789abcdef01234567"


def _done(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestGitError:
    """GitError.from_process."""

    def test_exit_failure_uses_stderr(self) -> None:
        result = ProcessResult(("git", "fetch"), 128, stderr=b"fatal: no remote\n")
        error = GitError.from_process("fetch", result)

        assert error.kind == "exit_failed"
        assert error.message == "fatal: no remote"
        assert error.returncode == 128

    def test_launch_failure(self) -> None:
        result = ProcessResult(("git",), -1, stderr=b"No such file", launched=False)
        error = GitError.from_process("status", result)

        assert error.kind == "launch_failed"
        assert error.returncode == -1

    def test_empty_output_gets_generic_message(self) -> None:
        error = GitError.from_process("merge", ProcessResult(("git", "merge"), 1))
        assert error.message == "git merge failed"


class TestRepositoryCommands:
    """The exact git invocations."""

    @patch("subprocess.run")
    def test_head_sha(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(SHA.encode())

        assert Repository(tmp_path).head_sha() == Ok(SHA)

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "log", "-1", "--format=format:%H", "HEAD"]
        assert kwargs["cwd"] == str(tmp_path)

    @patch("subprocess.run")
    def test_short_hash_runs_in_repository(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(b"0123456\n")

        assert Repository(tmp_path).short_hash(SHA) == Ok("0123456")
        assert mock_run.call_args[0][0] == ["git", "rev-parse", "--short", SHA]

    @patch("subprocess.run")
    def test_current_branch_detached(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(b"\n")
        assert Repository(tmp_path).current_branch() == Ok("")

    @patch("subprocess.run")
    def test_fetch_and_merge_args(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()
        repo = Repository(tmp_path)

        repo.fetch("upstream", "main")
        repo.merge_ff("upstream", "main")

        argvs = [c[0][0] for c in mock_run.call_args_list]
        assert argvs == [
            ["git", "fetch", "upstream", "main"],
            ["git", "merge", "--ff-only", "upstream/main"],
        ]

    @patch("subprocess.run")
    def test_toplevel(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(f"{tmp_path}\n".encode())
        assert Repository(tmp_path).toplevel() == Ok(tmp_path)

    @patch("subprocess.run")
    def test_init_and_submodule_add(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(b"Initialized empty Git repository\n")
        repo = Repository(tmp_path)

        assert isinstance(repo.init(), Ok)
        assert isinstance(repo.submodule_add("../lib"), Ok)
        argvs = [c[0][0] for c in mock_run.call_args_list]
        assert argvs == [["git", "init"], ["git", "submodule", "add", "../lib"]]

    @patch("subprocess.run")
    def test_failure_is_err(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(stderr=b"fatal: not a git repository", returncode=128)

        result = Repository(tmp_path).fetch("origin", "main")

        assert isinstance(result, Err)
        assert result.error.command == "fetch origin main"
        assert "not a git repository" in result.error.message

    @patch("subprocess.run", side_effect=FileNotFoundError(2, "No such file or directory"))
    def test_git_missing_is_err(self, _mock_run: MagicMock, tmp_path: Path) -> None:
        result = Repository(tmp_path).head_sha()

        assert isinstance(result, Err)
        assert result.error.kind == "launch_failed"


class TestConfigEntries:
    """Parsing of ``git config -z --list`` output."""

    @patch("subprocess.run")
    def test_parses_nul_records(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(
            b"submodule.lib.path\nlib\0submodule.lib.url\n../lib\0core.bare\nfalse\0"
        )

        result = Repository(tmp_path).config_entries(".gitmodules")

        assert result == Ok(
            [
                ("submodule.lib.path", "lib"),
                ("submodule.lib.url", "../lib"),
                ("core.bare", "false"),
            ]
        )
        assert mock_run.call_args[0][0] == [
            "git",
            "config",
            "--file",
            ".gitmodules",
            "-z",
            "--list",
        ]

    @patch("subprocess.run")
    def test_value_with_newline(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(b"alias.x\nline one\nline two\0")

        result = Repository(tmp_path).config_entries("cfg")

        assert result == Ok([("alias.x", "line one\nline two")])

    @patch("subprocess.run")
    def test_empty_file(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(b"")
        assert Repository(tmp_path).config_entries(".gitmodules") == Ok([])


class TestExists:
    """The .git marker check."""

    def test_directory_marker(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        assert Repository(tmp_path).exists()

    def test_gitfile_marker(self, tmp_path: Path) -> None:
        (tmp_path / ".git").write_text("gitdir: ../.git/modules/lib\n")
        assert Repository(tmp_path).exists()

    def test_no_marker(self, tmp_path: Path) -> None:
        assert not Repository(tmp_path).exists()


def test_fake_git_models_fast_forward(fake_git: FakeGit, tmp_path: Path) -> None:
    """Sanity check of the shared fixture against the real call path."""
    fake_git.add(tmp_path, head="a" * 40, remote_tip="b" * 40)
    repo = Repository(tmp_path)

    assert repo.head_sha() == Ok("a" * 40)
    assert isinstance(repo.merge_ff("origin", "main"), Ok)
    assert repo.head_sha() == Ok("b" * 40)
