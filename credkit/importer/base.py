"""
Base Importer

Candidate types produced by discovery and the abstract importer that
probes one external source for them.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional
import structlog

from ..errors import CompositionMismatch


@dataclass(frozen=True)
class ImportCandidateField:
    """One discovered field value, not yet bound to a schema."""

    field: str
    value: str = field(repr=False)


@dataclass
class ImportCandidate:
    """One coherent set of values found in a single source."""

    fields: List[ImportCandidateField] = field(default_factory=list)
    source: Optional[str] = None
    name_hint: Optional[str] = None
    mismatches: List[CompositionMismatch] = field(default_factory=list)

    def values(self) -> Dict[str, str]:
        return {f.field: f.value for f in self.fields}

    @property
    def trusted(self) -> bool:
        return not self.mismatches

    def __len__(self) -> int:
        return len(self.fields)


@dataclass
class ImportAttempt:
    """Candidates and non-fatal errors collected during one discovery run."""

    candidates: List[ImportCandidate] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)

    def add_candidate(self, candidate: ImportCandidate) -> None:
        self.candidates.append(candidate)

    def add_error(self, error: Exception) -> None:
        self.errors.append(error)

    def extend(self, other: "ImportAttempt") -> None:
        self.candidates.extend(other.candidates)
        self.errors.extend(other.errors)


class ImportInput:
    """Read-only view of the sources discovery may consult."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 home_dir: Optional[Path] = None):
        self.environ = dict(os.environ if environ is None else environ)
        self.home_dir = Path(home_dir) if home_dir is not None else Path.home()

    def getenv(self, name: str) -> Optional[str]:
        return self.environ.get(name)

    def expand_path(self, path: str) -> Path:
        """Expand a leading ``~`` against the home directory."""
        if path == "~":
            return self.home_dir
        if path.startswith("~/"):
            return self.home_dir / path[2:]
        return Path(path)


class Importer(ABC):
    """Abstract base class for discovery strategies.

    A missing source is a normal outcome and yields an empty attempt.
    Errors are recorded only for sources that exist but are malformed.
    """

    name: str = "base"

    def __init__(self):
        self.logger = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def discover(self, import_input: ImportInput) -> ImportAttempt:
        """
        Probe this importer's source for candidates.

        Args:
            import_input: Environment and home directory to consult

        Returns:
            ImportAttempt with zero or more candidates and errors
        """
        pass

    def description(self) -> str:
        return self.name

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.description()}>"
