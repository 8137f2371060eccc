"""
Structured Logging Setup

Configures structured logging and keeps secret values out of log events.
"""

import sys
import logging
import structlog
from typing import Dict, Iterable, Mapping, Optional
from pathlib import Path


MASK = "***MASKED***"


def setup_logging(level: str = "INFO", verbose: bool = False,
                 log_file: Optional[str] = None) -> None:
    """
    Setup structured logging for credkit.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        verbose: Enable verbose console output instead of JSON lines
        log_file: Optional file path for logging output
    """
    # Log to stderr so the child process owns stdout
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper())
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if verbose:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))

        logging.getLogger().addHandler(file_handler)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


def mask_values(values: Mapping[str, str],
                secret_fields: Iterable[str]) -> Dict[str, str]:
    """
    Create a copy of field values with secret fields masked.

    Args:
        values: Field name to value mapping
        secret_fields: Names of the fields whose values must not be shown

    Returns:
        Copy of values with secret fields replaced by a mask
    """
    secret = set(secret_fields)
    return {
        name: MASK if name in secret else value
        for name, value in values.items()
    }


def log_discovery_start(credential_type: str, importer_count: int,
                        logger: Optional[structlog.BoundLogger] = None) -> None:
    """
    Log the start of a discovery run.

    Args:
        credential_type: Name of the credential type being discovered
        importer_count: Number of discovery strategies that will run
        logger: Optional logger instance
    """
    if logger is None:
        logger = get_logger(__name__)

    logger.info("Discovery started",
               credential_type=credential_type,
               importer_count=importer_count)


def log_discovery_completion(credential_type: str, candidate_count: int,
                             error_count: int, duration: float,
                             logger: Optional[structlog.BoundLogger] = None) -> None:
    """
    Log the end of a discovery run.

    Args:
        credential_type: Name of the credential type
        candidate_count: Number of candidates found
        error_count: Number of malformed sources encountered
        duration: Discovery duration in seconds
        logger: Optional logger instance
    """
    if logger is None:
        logger = get_logger(__name__)

    logger.info("Discovery completed",
               credential_type=credential_type,
               candidate_count=candidate_count,
               error_count=error_count,
               duration=duration)


def log_provision_start(provisioner: str, fields: Iterable[str],
                        logger: Optional[structlog.BoundLogger] = None) -> None:
    """
    Log provisioning of a credential. Only field names are logged.

    Args:
        provisioner: Provisioner description
        fields: Names of the fields being provisioned
        logger: Optional logger instance
    """
    if logger is None:
        logger = get_logger(__name__)

    logger.info("Provisioning credential",
               provisioner=provisioner,
               fields=sorted(fields))


def log_provision_cleanup(provisioner: str, cleanup_count: int, failed: int = 0,
                          logger: Optional[structlog.BoundLogger] = None) -> None:
    """
    Log the cleanup step that follows a launch.

    Args:
        provisioner: Provisioner description
        cleanup_count: Number of cleanup actions run
        failed: Number of cleanup actions that raised
        logger: Optional logger instance
    """
    if logger is None:
        logger = get_logger(__name__)

    if failed:
        logger.warning("Provision cleanup incomplete",
                      provisioner=provisioner,
                      cleanup_count=cleanup_count,
                      failed=failed)
    else:
        logger.debug("Provision cleanup completed",
                    provisioner=provisioner,
                    cleanup_count=cleanup_count)
