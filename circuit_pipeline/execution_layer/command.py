from __future__ import annotations

import os

# trunk-ignore(bandit/B404)
import subprocess
import time
from dataclasses import dataclass, field

import bittensor as bt

from circuit_pipeline.constants import (
    COMMAND_NOT_EXECUTABLE_EXIT_CODE,
    COMMAND_NOT_FOUND_EXIT_CODE,
)


@dataclass
class ExternalCommand:
    """
    A single invocation of an external tool.

    Attributes:
        argv (list[str]): Program followed by its arguments.
        cwd (str | None): Working directory for the process.
        stdout_path (str | None): When set, stdout is written to this file
            instead of being captured.
        env (dict[str, str] | None): Extra environment variables.
    """

    argv: list[str]
    cwd: str | None = None
    stdout_path: str | None = None
    env: dict[str, str] | None = None

    @property
    def program(self) -> str:
        return self.argv[0]

    def __str__(self):
        rendered = " ".join(self.argv)
        if self.stdout_path:
            rendered += f" > {self.stdout_path}"
        return rendered


@dataclass
class CommandResult:
    command: ExternalCommand
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration: float = field(default=0.0)

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Runs external commands one at a time, blocking until each exits.
    """

    def run(self, command: ExternalCommand) -> CommandResult:
        bt.logging.debug(f" Command | {command}")
        env = None
        if command.env:
            env = {**os.environ, **command.env}

        start = time.time()
        try:
            if command.stdout_path:
                with open(command.stdout_path, "w", encoding="utf-8") as out:
                    # trunk-ignore(bandit/B603)
                    process = subprocess.run(
                        command.argv,
                        cwd=command.cwd,
                        env=env,
                        stdout=out,
                        stderr=subprocess.PIPE,
                        text=True,
                        check=False,
                    )
                stdout = ""
            else:
                # trunk-ignore(bandit/B603)
                process = subprocess.run(
                    command.argv,
                    cwd=command.cwd,
                    env=env,
                    capture_output=True,
                    text=True,
                    check=False,
                )
                stdout = process.stdout
        except OSError as e:
            bt.logging.error(f" Command | Unable to start {command.program}: {e}")
            returncode = (
                COMMAND_NOT_FOUND_EXIT_CODE
                if isinstance(e, FileNotFoundError)
                else COMMAND_NOT_EXECUTABLE_EXIT_CODE
            )
            return CommandResult(
                command=command,
                returncode=returncode,
                stderr=str(e),
                duration=time.time() - start,
            )

        result = CommandResult(
            command=command,
            returncode=process.returncode,
            stdout=stdout or "",
            stderr=process.stderr or "",
            duration=time.time() - start,
        )
        self._log_output(result)
        return result

    @staticmethod
    def _log_output(result: CommandResult):
        for line in result.stdout.splitlines():
            bt.logging.info(f"   {line}")
        for line in result.stderr.splitlines():
            if result.ok:
                bt.logging.info(f"   {line}")
            else:
                bt.logging.error(f"   {line}")
        if not result.ok:
            bt.logging.error(
                f" Command | {result.command.program} exited with code {result.returncode}"
            )
