"""
Base Provisioner

Launch configuration of a child process and the abstract provisioner
that exposes a credential to it.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional
import structlog

from ..errors import ProvisionError
from ..loggingx import log_provision_cleanup, log_provision_start, mask_values


class ProvisionInput(Mapping[str, str]):
    """Resolved field values handed to exactly one provisioning call.

    Behaves as a read-only mapping. Secret values are masked in its repr.
    """

    def __init__(self, values: Mapping[str, str],
                 secret_fields: Iterable[str] = ()):
        self._values = dict(values)
        self.secret_fields = frozenset(secret_fields)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def masked(self) -> Dict[str, str]:
        return mask_values(self._values, self.secret_fields)

    def __repr__(self):
        return f"ProvisionInput({self.masked()!r})"


class LaunchSpec:
    """Mutable launch configuration of a single child process."""

    def __init__(self, command: List[str], environ: Optional[Dict[str, str]] = None):
        self.command = list(command)
        self.environ: Dict[str, str] = dict(environ or {})
        self.cleanups: List[Callable[[], None]] = []

    def add_arg(self, flag: str, value: str) -> None:
        """Append a ``flag value`` pair to the argument vector."""
        self.command.extend([flag, value])

    def set_env(self, name: str, value: str) -> None:
        self.environ[name] = value

    def add_cleanup(self, callback: Callable[[], None]) -> None:
        self.cleanups.append(callback)

    def run_cleanups(self) -> int:
        """
        Run registered cleanups in reverse order of registration.

        Every callback runs even if an earlier one raised.

        Returns:
            Number of cleanup callbacks that raised
        """
        logger = structlog.get_logger(__name__)
        failed = 0
        while self.cleanups:
            callback = self.cleanups.pop()
            try:
                callback()
            except Exception as e:
                failed += 1
                logger.error("Cleanup action failed", error=str(e))
        return failed


class Provisioner(ABC):
    """Abstract base class for credential provisioners."""

    name: str = "base"

    def __init__(self):
        self.logger = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def provision(self, provision_input: ProvisionInput, launch: LaunchSpec) -> None:
        """
        Expose the credential to the child process described by ``launch``.

        Resources that outlive this call must be registered with
        ``launch.add_cleanup``.

        Args:
            provision_input: Resolved field values
            launch: Launch configuration to mutate

        Raises:
            ProvisionError: If the credential cannot be provisioned
        """
        pass

    def deprovision(self, launch: LaunchSpec) -> None:
        """Release everything provisioned for ``launch``."""
        count = len(launch.cleanups)
        failed = launch.run_cleanups()
        log_provision_cleanup(self.description(), count, failed, logger=self.logger)

    def description(self) -> str:
        return self.name


@contextmanager
def provisioned(provisioner: Provisioner, provision_input: ProvisionInput,
                launch: LaunchSpec) -> Iterator[LaunchSpec]:
    """
    Provision a credential for the duration of a ``with`` block.

    Deprovisioning runs on every exit path, including a failure inside
    ``provision`` itself.

    Args:
        provisioner: Provisioner to use
        provision_input: Resolved field values
        launch: Launch configuration to mutate

    Yields:
        The provisioned launch configuration
    """
    try:
        log_provision_start(provisioner.description(), provision_input.keys(),
                            logger=provisioner.logger)
        try:
            provisioner.provision(provision_input, launch)
        except ProvisionError:
            raise
        except Exception as e:
            raise ProvisionError(
                f"Provisioning failed: {e}",
                provisioner=provisioner.description()
            ) from e
        yield launch
    finally:
        provisioner.deprovision(launch)
