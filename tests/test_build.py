"""Tests for the build command runner."""

import logging
import sys

import pytest

from stackfront.build import BuildError, run_build


def test_run_build_streams_output(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="stackfront.build")

    run_build([sys.executable, "-c", "print('compiled 3 files')"], str(tmp_path))

    assert "compiled 3 files" in caplog.messages


def test_run_build_uses_cwd(tmp_path):
    run_build(
        [sys.executable, "-c", "open('marker.txt', 'w').write('x')"],
        str(tmp_path),
    )

    assert (tmp_path / "marker.txt").exists()


def test_run_build_nonzero_exit(tmp_path):
    with pytest.raises(BuildError) as exc_info:
        run_build([sys.executable, "-c", "import sys; sys.exit(3)"], str(tmp_path))

    assert exc_info.value.returncode == 3
    assert "exited with code 3" in str(exc_info.value)


def test_run_build_missing_executable(tmp_path):
    with pytest.raises(BuildError, match="Could not start build command"):
        run_build(["definitely-not-a-real-binary-xyz"], str(tmp_path))


def test_run_build_missing_cwd(tmp_path):
    with pytest.raises(BuildError):
        run_build([sys.executable, "-c", "pass"], str(tmp_path / "missing"))


def test_run_build_empty_command(tmp_path):
    with pytest.raises(BuildError, match="empty"):
        run_build([], str(tmp_path))
