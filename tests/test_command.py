import sys

from circuit_pipeline.constants import (
    COMMAND_NOT_EXECUTABLE_EXIT_CODE,
    COMMAND_NOT_FOUND_EXIT_CODE,
)
from circuit_pipeline.execution_layer.command import CommandRunner, ExternalCommand


def test_captures_output():
    command = ExternalCommand(argv=[sys.executable, "-c", "print('hello')"])

    result = CommandRunner().run(command)

    assert result.ok
    assert result.returncode == 0
    assert result.stdout.strip() == "hello"
    assert result.command is command
    assert result.duration >= 0


def test_non_zero_exit_is_returned_not_raised():
    command = ExternalCommand(
        argv=[
            sys.executable,
            "-c",
            "import sys; sys.stderr.write('boom'); sys.exit(3)",
        ]
    )

    result = CommandRunner().run(command)

    assert not result.ok
    assert result.returncode == 3
    assert "boom" in result.stderr


def test_stdout_redirected_to_file(tmp_path):
    target = tmp_path / "calldata.txt"
    command = ExternalCommand(
        argv=[sys.executable, "-c", "print('0x01,0x02')"],
        stdout_path=str(target),
    )

    result = CommandRunner().run(command)

    assert result.ok
    assert result.stdout == ""
    assert target.read_text().strip() == "0x01,0x02"


def test_missing_executable(tmp_path):
    command = ExternalCommand(argv=[str(tmp_path / "no-such-prover")])

    result = CommandRunner().run(command)

    assert result.returncode == COMMAND_NOT_FOUND_EXIT_CODE
    assert not result.ok
    assert result.stderr


def test_cwd_and_env(tmp_path):
    command = ExternalCommand(
        argv=[
            sys.executable,
            "-c",
            "import os; print(os.getcwd()); print(os.environ['CIRCUIT_SLOT'])",
        ],
        cwd=str(tmp_path),
        env={"CIRCUIT_SLOT": "7"},
    )

    result = CommandRunner().run(command)

    cwd, slot = result.stdout.splitlines()
    assert cwd == str(tmp_path.resolve())
    assert slot == "7"


def test_str_shows_redirect():
    command = ExternalCommand(argv=["node", "cli.js"], stdout_path="out.txt")

    assert str(command) == "node cli.js > out.txt"


def test_corrupt_binary_is_reported_as_not_executable(tmp_path):
    prover = tmp_path / "prover"
    prover.write_bytes(b"\x7fELFjunk")
    prover.chmod(0o755)

    result = CommandRunner().run(ExternalCommand(argv=[str(prover)]))

    assert result.returncode == COMMAND_NOT_EXECUTABLE_EXIT_CODE
    assert not result.ok
    assert result.stderr


def test_file_without_exec_bit_is_reported_as_not_executable(tmp_path):
    prover = tmp_path / "prover"
    prover.write_text("#!/bin/sh\nexit 0\n")
    prover.chmod(0o644)

    result = CommandRunner().run(ExternalCommand(argv=[str(prover)]))

    assert result.returncode == COMMAND_NOT_EXECUTABLE_EXIT_CODE
