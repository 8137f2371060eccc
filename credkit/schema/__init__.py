"""
Schema Package

Credential types, their fields, and value composition rules.
"""

from . import credname, fieldname
from .composition import Charset, CompositionRule, validate
from .fields import CredentialSchema, FieldSchema

__all__ = [
    "Charset",
    "CompositionRule",
    "CredentialSchema",
    "FieldSchema",
    "credname",
    "fieldname",
    "validate",
]
