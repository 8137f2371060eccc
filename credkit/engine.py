"""
Credential Engine

Holds the known credential types and runs discovery and provisioned
launches against them.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Mapping, Optional

import structlog

from .errors import ConfigurationError
from .importer import ImportAttempt, ImportInput
from .launcher import LaunchResult, launch
from .loggingx import log_discovery_completion, log_discovery_start
from .plugins import builtin_credential_types
from .schema import CredentialSchema

logger = structlog.get_logger(__name__)


class Engine:
    """Discovery and provisioning over a set of credential types."""

    def __init__(self, credential_types: Optional[Iterable[CredentialSchema]] = None):
        self._types: Dict[str, CredentialSchema] = {}
        if credential_types is None:
            credential_types = builtin_credential_types()
        for credential_type in credential_types:
            self.register(credential_type)

    def register(self, credential_type: CredentialSchema) -> None:
        name = credential_type.qualified_name
        if name in self._types:
            raise ConfigurationError(f"Credential type already registered: {name}")
        self._types[name] = credential_type
        logger.debug("Registered credential type", credential_type=name)

    def get(self, name: str) -> CredentialSchema:
        """
        Look up a credential type by qualified name.

        A bare type name is accepted when it is unambiguous.

        Raises:
            ConfigurationError: If no single type matches
        """
        if name in self._types:
            return self._types[name]

        matches = [t for t in self._types.values() if t.name == name or t.plugin == name]
        if len(matches) == 1:
            return matches[0]
        if matches:
            raise ConfigurationError(
                f"Ambiguous credential type '{name}', use one of: "
                f"{', '.join(t.qualified_name for t in matches)}"
            )
        raise ConfigurationError(f"Unknown credential type: {name}")

    def names(self) -> List[str]:
        return list(self._types)

    def discover(self, name: str, import_input: Optional[ImportInput] = None) -> ImportAttempt:
        """
        Run discovery for one credential type.

        Each candidate is checked against the schema; composition failures
        are recorded on the candidate, which is then not trusted.

        Args:
            name: Credential type name
            import_input: Sources to consult, defaults to the current process

        Returns:
            ImportAttempt with every candidate found and every malformed source
        """
        credential_type = self.get(name)
        if import_input is None:
            import_input = ImportInput()

        if credential_type.importer is None:
            return ImportAttempt()

        start_time = time.time()
        importer_count = len(getattr(credential_type.importer, 'importers', ())) or 1
        log_discovery_start(credential_type.qualified_name, importer_count, logger=logger)

        attempt = credential_type.importer.discover(import_input)

        for candidate in attempt.candidates:
            candidate.mismatches = credential_type.check(candidate.values())
            if candidate.mismatches:
                logger.info("Candidate failed composition check",
                            credential_type=credential_type.qualified_name,
                            source=candidate.source,
                            fields=[m.field for m in candidate.mismatches])

        for error in attempt.errors:
            logger.warning("Malformed credential source",
                           credential_type=credential_type.qualified_name,
                           error=str(error))

        log_discovery_completion(credential_type.qualified_name,
                                 len(attempt.candidates),
                                 len(attempt.errors),
                                 time.time() - start_time,
                                 logger=logger)
        return attempt

    def discover_all(self, import_input: Optional[ImportInput] = None,
                     max_workers: Optional[int] = None) -> Dict[str, ImportAttempt]:
        """
        Run discovery for every credential type concurrently.

        Importers only read their own sources, so runs share no state.

        Args:
            import_input: Sources to consult, defaults to the current process
            max_workers: Thread pool size, defaults to one per type

        Returns:
            Mapping of credential type name to its ImportAttempt
        """
        if import_input is None:
            import_input = ImportInput()
        if not self._types:
            return {}

        results: Dict[str, ImportAttempt] = {}
        with ThreadPoolExecutor(max_workers=max_workers or len(self._types)) as executor:
            future_to_name = {
                executor.submit(self.discover, name, import_input): name
                for name in self._types
            }
            for future in as_completed(future_to_name):
                results[future_to_name[future]] = future.result()

        return {name: results[name] for name in self._types}

    def run(self, name: str, values: Mapping[str, str], command: List[str],
            timeout: Optional[float] = None, capture_output: bool = False) -> LaunchResult:
        """
        Launch a command with a confirmed credential provisioned.

        Args:
            name: Credential type name
            values: Field values chosen by the caller
            command: Executable and arguments
            timeout: Optional timeout in seconds
            capture_output: Capture the child's output

        Returns:
            LaunchResult

        Raises:
            ValidationError: If the values do not satisfy the schema
            ConfigurationError: If the type has no provisioner
            ProvisionError: If provisioning failed; nothing was launched
            LaunchError: If the command could not be run
        """
        credential_type = self.get(name)
        if credential_type.provisioner is None:
            raise ConfigurationError(
                f"Credential type '{credential_type.qualified_name}' has no provisioner"
            )

        provision_input = credential_type.resolve(values)
        return launch(command, credential_type.provisioner, provision_input,
                      timeout=timeout, capture_output=capture_output)
