"""
End-to-end tests for the hdfs-wait command against a local directory.
"""

import logging
import os

import pytest

from hdfs_wait.main import (
    EXIT_CONFIG_ERROR,
    EXIT_JOB_FAILED,
    EXIT_SUCCESS,
    build_parser,
    load_settings,
    main,
)

OLD_MTIME_NS = 1_600_000_000_000_000_000


@pytest.fixture(autouse=True)
def isolated_run(tmp_path, monkeypatch):
    """Run in tmp_path without a log file and restore root logging afterwards."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HDFS_WAIT_LOG_FILE_PATH", "")
    monkeypatch.delenv("JOB_PROP_FILE", raising=False)

    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def data_dir(tmp_path):
    root = tmp_path / "data"
    (root / "old").mkdir(parents=True)
    os.utime(root / "old", ns=(OLD_MTIME_NS, OLD_MTIME_NS))
    return root


def local_args(path, *extra):
    return ["--filesystem", "local", "--path", str(path), "--sleep-interval", "1S", *extra]


def test_fresh_folder_exits_zero(data_dir):
    (data_dir / "new").mkdir()

    assert main(local_args(data_dir, "--freshness", "1M", "--timeout", "5S")) == EXIT_SUCCESS


def test_soft_timeout_exits_zero(data_dir):
    assert main(local_args(data_dir, "--freshness", "1M", "--timeout", "0S")) == EXIT_SUCCESS


def test_forced_timeout_exits_one(data_dir):
    args = local_args(data_dir, "--freshness", "1M", "--timeout", "0S", "--fail-on-timeout")

    assert main(args) == EXIT_JOB_FAILED


def test_missing_directory_exits_one(tmp_path):
    args = local_args(tmp_path / "missing", "--freshness", "1M", "--timeout", "1H")

    assert main(args) == EXIT_JOB_FAILED


def test_exact_path_mode(data_dir):
    args = local_args(data_dir / "old", "--freshness", "0S", "--timeout", "0S", "--check-exact-path")

    assert main(args) == EXIT_SUCCESS


def test_invalid_duration_exits_two(data_dir):
    assert main(local_args(data_dir, "--freshness", "1X", "--timeout", "5S")) == EXIT_CONFIG_ERROR


def test_missing_required_setting_exits_two(data_dir):
    assert main(local_args(data_dir, "--freshness", "1M")) == EXIT_CONFIG_ERROR


def test_properties_file(tmp_path, data_dir):
    job_file = tmp_path / "wait.job"
    job_file.write_text(
        f"type=hadoopJava\npathToDirectory={data_dir}\nfreshness=1M\ntimeout=0S\nforceJobToFail=true\n"
    )

    assert main(["--properties", str(job_file), "--filesystem", "local"]) == EXIT_JOB_FAILED


def test_job_prop_file_environment_variable(tmp_path, monkeypatch, data_dir):
    job_file = tmp_path / "wait.job"
    job_file.write_text(f"pathToDirectory={data_dir}\nfreshness=1M\ntimeout=2H\n")
    monkeypatch.setenv("JOB_PROP_FILE", str(job_file))

    settings = load_settings(build_parser().parse_args(["--timeout", "1M"]))

    assert settings.path_to_directory == str(data_dir)
    assert settings.timeout == "1M"
    assert settings.force_job_to_fail is False


def test_lowercase_log_level_is_accepted(data_dir, monkeypatch):
    monkeypatch.setenv("HDFS_WAIT_LOG_LEVEL", "debug")

    assert main(local_args(data_dir, "--freshness", "1M", "--timeout", "0S")) == EXIT_SUCCESS
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_log_level_exits_two(data_dir, monkeypatch):
    monkeypatch.setenv("HDFS_WAIT_LOG_LEVEL", "chatty")

    assert main(local_args(data_dir, "--freshness", "1M", "--timeout", "0S")) == EXIT_CONFIG_ERROR


def test_unknown_timezone_exits_two(data_dir, monkeypatch):
    monkeypatch.setenv("HDFS_WAIT_PATH_TIMEZONE", "Mars/Olympus")
    args = local_args(str(data_dir) + "/%Y", "--freshness", "1M", "--timeout", "0S")

    assert main(args) == EXIT_CONFIG_ERROR


def test_flags_turn_off_properties_booleans(tmp_path, data_dir):
    job_file = tmp_path / "wait.job"
    job_file.write_text(
        f"pathToDirectory={data_dir}\nfreshness=1M\ntimeout=0S\n"
        f"forceJobToFail=true\ncheckExactPath=true\n"
    )
    args = build_parser().parse_args(
        ["--properties", str(job_file), "--no-fail-on-timeout", "--no-check-exact-path"]
    )

    settings = load_settings(args)

    assert settings.force_job_to_fail is False
    assert settings.check_exact_path is False
    assert main(
        ["--properties", str(job_file), "--filesystem", "local", "--no-fail-on-timeout", "--no-check-exact-path"]
    ) == EXIT_SUCCESS


def test_flags_left_out_keep_properties_booleans(tmp_path, data_dir):
    job_file = tmp_path / "wait.job"
    job_file.write_text(f"pathToDirectory={data_dir}\nfreshness=1M\ntimeout=0S\nforceJobToFail=true\n")

    settings = load_settings(build_parser().parse_args(["--properties", str(job_file)]))

    assert settings.force_job_to_fail is True
