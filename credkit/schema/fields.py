"""
Credential Schemas

Declarative description of credential types and their fields. New
credential types are new CredentialSchema values, never subclasses.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .composition import CompositionRule
from ..errors import CompositionMismatch, ConfigurationError, ValidationError
from ..provision.base import ProvisionInput


@dataclass(frozen=True)
class FieldSchema:
    """One named field of a credential type.

    ``default`` is the documented value a provisioner substitutes when an
    optional field is absent.
    """

    name: str
    description: str = ""
    secret: bool = False
    optional: bool = False
    composition: Optional[CompositionRule] = None
    default: Optional[str] = None

    def check(self, value: str) -> Optional[CompositionMismatch]:
        """Return a mismatch if the value fails this field's composition rule."""
        if self.composition is None:
            return None
        reason = self.composition.explain(value)
        if reason is None:
            return None
        return CompositionMismatch(field=self.name, reason=reason)


@dataclass(frozen=True)
class CredentialSchema:
    """An immutable credential type: ordered fields plus how to find and provide them."""

    name: str
    fields: Tuple[FieldSchema, ...]
    plugin: Optional[str] = None
    docs_url: Optional[str] = None
    management_url: Optional[str] = None
    importer: Any = None
    provisioner: Any = None

    def __post_init__(self):
        object.__setattr__(self, 'fields', tuple(self.fields))
        seen = set()
        for field_schema in self.fields:
            if field_schema.name in seen:
                raise ConfigurationError(
                    f"Duplicate field '{field_schema.name}' in credential type '{self.name}'",
                    credential_type=self.name
                )
            seen.add(field_schema.name)

    @property
    def qualified_name(self) -> str:
        if self.plugin:
            return f"{self.plugin}.{self.name}"
        return self.name

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def secret_fields(self) -> List[str]:
        return [f.name for f in self.fields if f.secret]

    @property
    def defaults(self) -> Dict[str, str]:
        return {f.name: f.default for f in self.fields if f.default is not None}

    def field(self, name: str) -> Optional[FieldSchema]:
        for field_schema in self.fields:
            if field_schema.name == name:
                return field_schema
        return None

    def check(self, values: Mapping[str, str]) -> List[CompositionMismatch]:
        """
        Check field values against their composition rules.

        Unknown fields are ignored. Nothing is raised: failures are returned
        as mismatch records that never carry the value.

        Args:
            values: Field name to value mapping

        Returns:
            List of composition mismatches, empty if every value fits
        """
        mismatches = []
        for name, value in values.items():
            field_schema = self.field(name)
            if field_schema is None:
                continue
            mismatch = field_schema.check(value)
            if mismatch is not None:
                mismatches.append(mismatch)
        return mismatches

    def resolve(self, values: Mapping[str, str]) -> ProvisionInput:
        """
        Build the provisioning input for a confirmed set of field values.

        Args:
            values: Field name to value mapping chosen by the caller

        Returns:
            ProvisionInput bound to this schema's secret fields

        Raises:
            ValidationError: If a field is unknown, a required field is
                missing, or a value fails its composition rule
        """
        for name in values:
            if self.field(name) is None:
                raise ValidationError(
                    f"Unknown field '{name}'",
                    field=name,
                    credential_type=self.qualified_name
                )

        for field_schema in self.fields:
            if not field_schema.optional and not values.get(field_schema.name):
                raise ValidationError(
                    f"Missing required field '{field_schema.name}'",
                    field=field_schema.name,
                    credential_type=self.qualified_name
                )

        mismatches = self.check(values)
        if mismatches:
            first = mismatches[0]
            raise ValidationError(
                f"Value for field '{first.field}' does not match its composition: {first.reason}",
                field=first.field,
                credential_type=self.qualified_name
            )

        return ProvisionInput(
            {name: value for name, value in values.items() if value},
            secret_fields=self.secret_fields
        )
