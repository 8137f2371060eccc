import os
import sys

import pytest

from credkit.errors import LaunchError, ProvisionError
from credkit.launcher import launch
from credkit.plugins.mysql import mysql_config
from credkit.provision import EnvVars, ProvisionInput, TempFile

PRINT_ENV = "import os; print(os.environ.get('CREDKIT_TEST_TOKEN', '<unset>'))"
READ_FILE = "import sys; print(sys.argv[2]); print(open(sys.argv[2]).read(), end='')"


def test_env_var_reaches_child(monkeypatch):
    monkeypatch.delenv("CREDKIT_TEST_TOKEN", raising=False)
    result = launch(
        [sys.executable, "-c", PRINT_ENV],
        EnvVars({"token": "CREDKIT_TEST_TOKEN"}),
        ProvisionInput({"token": "abc"}),
        capture_output=True,
    )

    assert result.return_code == 0
    assert result.stdout.strip() == "abc"
    assert "CREDKIT_TEST_TOKEN" not in os.environ


def test_temp_file_is_read_by_child_and_removed(temp_root):
    result = launch(
        [sys.executable, "-c", READ_FILE],
        TempFile(mysql_config, filename="my.cnf", flag="--defaults-file"),
        ProvisionInput({"user": "u", "password": "p"}),
        capture_output=True,
    )

    path, *content = result.stdout.splitlines()
    assert result.command[-2:] == ["--defaults-file", path]
    assert content == ["[client]", "host=127.0.0.1", "port=3306", "user=u", "password=p"]
    assert not os.path.exists(path)
    assert list(temp_root.iterdir()) == []


def test_temp_file_removed_after_failing_child(temp_root):
    result = launch(
        [sys.executable, "-c", "import sys; sys.exit(3)"],
        TempFile(mysql_config, filename="my.cnf", flag="--defaults-file"),
        ProvisionInput({"password": "p"}),
        capture_output=True,
    )

    assert result.return_code == 3
    assert list(temp_root.iterdir()) == []


def test_temp_file_removed_when_command_missing(temp_root, tmp_path):
    with pytest.raises(LaunchError):
        launch(
            [str(tmp_path / "does-not-exist")],
            TempFile(mysql_config, filename="my.cnf", flag="--defaults-file"),
            ProvisionInput({"password": "p"}),
        )

    assert list(temp_root.iterdir()) == []


def test_temp_file_removed_after_timeout(temp_root):
    with pytest.raises(LaunchError):
        launch(
            [sys.executable, "-c", "import time; time.sleep(30)"],
            TempFile(mysql_config, filename="my.cnf", flag="--defaults-file"),
            ProvisionInput({"password": "p"}),
            timeout=0.5,
        )

    assert list(temp_root.iterdir()) == []


def test_child_not_started_when_provisioning_fails(tmp_path):
    marker = tmp_path / "started"

    def broken(provision_input):
        raise RuntimeError("cannot render")

    with pytest.raises(ProvisionError):
        launch(
            [sys.executable, "-c", f"open({str(marker)!r}, 'w').close()"],
            TempFile(broken, filename="my.cnf", flag="--defaults-file"),
            ProvisionInput({"password": "p"}),
        )

    assert not marker.exists()


def test_empty_command_rejected():
    with pytest.raises(LaunchError):
        launch([], EnvVars({}), ProvisionInput({}))
