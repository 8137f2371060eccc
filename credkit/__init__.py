"""
credkit

Declares, discovers, validates and provisions secret credentials for
third-party command-line tools.
"""

__version__ = "1.0.0"

from .engine import Engine
from .schema import Charset, CompositionRule, CredentialSchema, FieldSchema, validate
from .cli import cli

__all__ = [
    "Charset",
    "CompositionRule",
    "CredentialSchema",
    "Engine",
    "FieldSchema",
    "cli",
    "validate",
]
