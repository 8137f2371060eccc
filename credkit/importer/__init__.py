"""
Importer Package

Discovery strategies that locate candidate credential values in the
environment and on the filesystem.
"""

from .aggregate import TryAll
from .base import ImportAttempt, ImportCandidate, ImportCandidateField, ImportInput, Importer
from .env import TryAllEnvVars, TryEnvVarPair
from .files import FileContents, IniSection, TryFile, TryIniFile, parse_ini

__all__ = [
    "FileContents",
    "ImportAttempt",
    "ImportCandidate",
    "ImportCandidateField",
    "ImportInput",
    "Importer",
    "IniSection",
    "TryAll",
    "TryAllEnvVars",
    "TryEnvVarPair",
    "TryFile",
    "TryIniFile",
    "parse_ini",
]
