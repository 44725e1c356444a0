"""Runs rendered commands by piping them into a shell."""

import subprocess
from dataclasses import dataclass
from typing import Optional

from .module_registry import module_registry

log = module_registry.register_module(
    name="executor",
    description="Shell execution of rendered commands",
    logger_name="executor",
    debug_flag="--debug-executor",
    category="output",
)


@dataclass
class ExecutionResult:
    """Outcome of one command execution."""

    command: str
    returncode: Optional[int] = None
    error: Optional[str] = None
    skipped: bool = False

    @property
    def success(self) -> bool:
        return self.skipped or (self.error is None and self.returncode == 0)


class CommandExecutor:
    """Feeds a command to an interpreter on stdin and waits for it to finish."""

    def __init__(self, shell: str = "bash", timeout: Optional[float] = None, dry_run: bool = False):
        self.shell = shell
        self.timeout = timeout
        self.dry_run = dry_run

    def execute(self, command: str) -> ExecutionResult:
        """Run command through the shell; failures are logged and reported, not raised."""
        if self.dry_run:
            log.info("dry run, not executing: %s", command)
            return ExecutionResult(command=command, skipped=True)

        log.info("executing: %s", command)
        try:
            completed = subprocess.run(
                [self.shell],
                input=command,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            log.error("Command timed out after %.1fs: %s", self.timeout, command)
            return ExecutionResult(command=command, error="timeout")
        except OSError as e:
            log.error("Failed to start shell %r: %s", self.shell, e)
            return ExecutionResult(command=command, error=str(e))

        if completed.returncode != 0:
            log.warning("Command exited with status %d", completed.returncode)
        else:
            log.debug("Command finished successfully")
        return ExecutionResult(command=command, returncode=completed.returncode)
