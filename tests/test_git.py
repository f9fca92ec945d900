import subprocess
from unittest import mock

import pytest

from agentws import git


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("git@example.com:org/foo.git", "foo"),
        ("https://example.com/bar.git", "bar"),
        ("file:///tmp/baz.git", "baz"),
        ("/local/path/qux", "qux"),
        ("plain", "plain"),
        ("with-trailing-slash/", "with-trailing-slash"),
    ],
)
def test_basename_handles_common_url_shapes(url, expected):
    assert git.repo_basename(url) == expected


def test_basename_only_strips_one_git_suffix():
    assert git.repo_basename("https://example.com/a.git.git") == "a.git"


def _completed(returncode, stdout=b""):
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout=stdout)


def test_run_raises_on_nonzero_exit():
    with mock.patch("subprocess.run", return_value=_completed(128)) as fake:
        with pytest.raises(git.GitError) as info:
            git.run(["status"])
    assert info.value.returncode == 128
    assert fake.call_args.args[0] == ["git", "status"]


def test_run_succeeds_on_zero_exit():
    with mock.patch("subprocess.run", return_value=_completed(0)) as fake:
        result = git.run(["fetch", "--all"])
    assert result is None
    assert fake.call_args.args[0] == ["git", "fetch", "--all"]


def test_capture_stdout_trims_output():
    with mock.patch("subprocess.run", return_value=_completed(0, b"  main\n")) as fake:
        out = git.capture_stdout("/tmp", ["branch", "--show-current"])
    assert out == "main"
    assert fake.call_args.kwargs["cwd"] == "/tmp"


def test_capture_stdout_empty_on_failure():
    with mock.patch("subprocess.run", return_value=_completed(1, b"noise")):
        assert git.capture_stdout(None, ["branch"]) == ""


def test_capture_stdout_empty_when_git_missing():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("git")):
        assert git.capture_stdout(None, ["branch"]) == ""