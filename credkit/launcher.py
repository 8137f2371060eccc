"""
Child Process Launcher

Runs a command with a credential provisioned for exactly that one launch.
"""

import os
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional
import structlog

from .errors import LaunchError
from .provision.base import LaunchSpec, ProvisionInput, Provisioner, provisioned

logger = structlog.get_logger(__name__)


@dataclass
class LaunchResult:
    """Outcome of one child process launch."""

    command: List[str]
    return_code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    duration: float = 0.0


def launch(command: List[str], provisioner: Provisioner,
           provision_input: ProvisionInput, timeout: Optional[float] = None,
           capture_output: bool = False, cwd: Optional[str] = None) -> LaunchResult:
    """
    Provision a credential and run the command with it.

    The child is only spawned once provisioning succeeded. Whatever was
    provisioned is released after the child exits, times out or fails
    to start.

    Args:
        command: Executable and arguments
        provisioner: Provisioner exposing the credential to the child
        provision_input: Resolved field values
        timeout: Optional timeout in seconds
        capture_output: Capture stdout and stderr instead of inheriting them
        cwd: Optional working directory for the child

    Returns:
        LaunchResult with the child's return code and output

    Raises:
        ProvisionError: If provisioning failed; the child was not started
        LaunchError: If the command could not be run or timed out
    """
    if not command:
        raise LaunchError("No command given")

    spec = LaunchSpec(command)

    with provisioned(provisioner, provision_input, spec):
        env = os.environ.copy()
        env.update(spec.environ)

        # Injected arguments may be file paths holding secrets; log the executable only
        logger.info("Launching command",
                    executable=spec.command[0],
                    argument_count=len(spec.command) - 1,
                    env_vars=sorted(spec.environ),
                    timeout=timeout)

        start_time = time.time()
        try:
            result = subprocess.run(
                spec.command,
                capture_output=capture_output,
                text=True,
                timeout=timeout,
                env=env,
                cwd=cwd,
                check=False  # Don't raise exception on non-zero return code
            )
        except subprocess.TimeoutExpired:
            raise LaunchError(
                f"Command timed out after {timeout} seconds",
                command=spec.command[0],
                timeout_seconds=timeout
            )
        except FileNotFoundError as e:
            raise LaunchError(
                f"Command not found: {e}",
                command=spec.command[0]
            )
        except OSError as e:
            raise LaunchError(
                f"Command execution failed: {e}",
                command=spec.command[0]
            )

        duration = time.time() - start_time

    if result.returncode == 0:
        logger.info("Command completed successfully",
                    return_code=result.returncode,
                    duration=duration)
    else:
        logger.warning("Command completed with non-zero return code",
                       return_code=result.returncode,
                       duration=duration)

    return LaunchResult(
        command=spec.command,
        return_code=result.returncode,
        stdout=result.stdout if capture_output else None,
        stderr=result.stderr if capture_output else None,
        duration=duration
    )
