"""
Provisioning Package

Strategies that expose a confirmed credential to a launched child process.
"""

from .base import LaunchSpec, ProvisionInput, Provisioner, provisioned
from .env_vars import EnvVarProvisioner, EnvVars
from .temp_file import TempFile, TempFileProvisioner, ini_config

__all__ = [
    "EnvVarProvisioner",
    "EnvVars",
    "LaunchSpec",
    "ProvisionInput",
    "Provisioner",
    "TempFile",
    "TempFileProvisioner",
    "ini_config",
    "provisioned",
]
