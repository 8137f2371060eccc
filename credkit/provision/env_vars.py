"""
Environment Variable Provisioner

Exposes credential fields to the child process as environment variables.
"""

from typing import Mapping

from .base import LaunchSpec, ProvisionInput, Provisioner


class EnvVarProvisioner(Provisioner):
    """Sets one child environment variable per provided field.

    Only the launch configuration is changed; the parent's ``os.environ``
    is never touched.
    """

    name = "env_vars"

    def __init__(self, mapping: Mapping[str, str]):
        super().__init__()
        self.mapping = dict(mapping)

    def provision(self, provision_input: ProvisionInput, launch: LaunchSpec) -> None:
        for field_name, env_var in self.mapping.items():
            value = provision_input.get(field_name)
            if value:
                launch.set_env(env_var, value)

    def description(self) -> str:
        return f"env_vars({', '.join(sorted(self.mapping.values()))})"


def EnvVars(mapping: Mapping[str, str]) -> EnvVarProvisioner:
    """Provision fields as the environment variables named in ``mapping``."""
    return EnvVarProvisioner(mapping)
