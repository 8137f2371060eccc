"""
Environment Variable Importers

Discover credentials from environment variables, either as a group of
paired variables or as one field with several alternative variables.
"""

from typing import Mapping, Optional

from .base import ImportAttempt, ImportCandidate, ImportCandidateField, ImportInput, Importer
from ..schema import fieldname

_PRIMARY_FIELDS = (fieldname.TOKEN, fieldname.PASSWORD, fieldname.API_KEY)


class TryEnvVarPair(Importer):
    """Reads a group of variables that together form one candidate.

    Nothing is produced unless the primary variable is set and non-empty.
    The primary is the variable of the token, password or API key field
    when the mapping has one, otherwise its first entry.
    """

    name = "env_pair"

    def __init__(self, mapping: Mapping[str, str], primary: Optional[str] = None):
        super().__init__()
        if not mapping:
            raise ValueError("Environment variable mapping must not be empty")
        self.mapping = dict(mapping)
        self.primary = primary or self._default_primary()
        if self.primary not in self.mapping:
            raise ValueError(f"Primary field '{self.primary}' is not in the mapping")

    def _default_primary(self) -> str:
        for name in _PRIMARY_FIELDS:
            if name in self.mapping:
                return name
        return next(iter(self.mapping))

    def description(self) -> str:
        return f"env_pair({', '.join(self.mapping.values())})"

    def discover(self, import_input: ImportInput) -> ImportAttempt:
        attempt = ImportAttempt()

        if not import_input.getenv(self.mapping[self.primary]):
            return attempt

        fields = []
        for field_name, env_var in self.mapping.items():
            value = import_input.getenv(env_var)
            if value:
                fields.append(ImportCandidateField(field=field_name, value=value))

        attempt.add_candidate(ImportCandidate(
            fields=fields,
            source=f"env:{self.mapping[self.primary]}",
            name_hint=self.mapping[self.primary]
        ))
        return attempt


class TryAllEnvVars(Importer):
    """Tries alternative variables for one field; the first non-empty one wins."""

    name = "env_any"

    def __init__(self, field_name: str, *env_vars: str):
        super().__init__()
        if not env_vars:
            raise ValueError("At least one environment variable is required")
        self.field_name = field_name
        self.env_vars = list(env_vars)

    def description(self) -> str:
        return f"env_any({', '.join(self.env_vars)})"

    def discover(self, import_input: ImportInput) -> ImportAttempt:
        attempt = ImportAttempt()

        for env_var in self.env_vars:
            value = import_input.getenv(env_var)
            if value:
                attempt.add_candidate(ImportCandidate(
                    fields=[ImportCandidateField(field=self.field_name, value=value)],
                    source=f"env:{env_var}",
                    name_hint=env_var
                ))
                break

        return attempt
