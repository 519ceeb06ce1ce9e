"""Shared fixtures for fitps tests."""

from collections.abc import Callable, Sequence

import pytest

from fitps.ps import query_args

QUERY_OUTPUT = """\
    1 /sbin/init splash
  812 /usr/sbin/sshd -D
  901 nginx: master process /usr/sbin/nginx
  902 nginx: worker process
 1450 -bash
 2210 python3 -m http.server 8000
"""

RENDER_OUTPUT = """\
  PID COMMAND
    1 /sbin/init splash
  812   /usr/sbin/sshd -D
  901   nginx: master process /usr/sbin/nginx
  902     nginx: worker process
 1450 -bash
 2210   python3 -m http.server 8000
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> None:
    """Keep tests away from the user's real config files."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("FITPS_CONFIG_PATH", raising=False)


@pytest.fixture
def fake_ps() -> Callable[[Sequence[str]], str]:
    """A ps runner that answers query and render calls with canned output."""
    calls: list[list[str]] = []

    def runner(args: Sequence[str]) -> str:
        calls.append(list(args))
        if list(args) == query_args():
            return QUERY_OUTPUT
        return RENDER_OUTPUT

    runner.calls = calls  # type: ignore[attr-defined]
    return runner
