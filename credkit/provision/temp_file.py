"""
Temporary File Provisioner

Writes the credential to a private, short-lived config file and points
the child process at it with a command-line flag.
"""

import os
import tempfile
from typing import Callable, Iterable, Mapping, Optional

from .base import LaunchSpec, ProvisionInput, Provisioner
from ..errors import ProvisionError

ContentGenerator = Callable[[ProvisionInput], bytes]

FILE_MODE = 0o600


class TempFileProvisioner(Provisioner):
    """Provisions a credential as a file that exists only for one launch.

    Each provisioning call creates its own directory (mode 0700) holding
    ``filename`` (mode 0600), so concurrent launches never share a file.
    The directory is removed when the launch is deprovisioned.
    """

    name = "temp_file"

    def __init__(self, generator: ContentGenerator, filename: str,
                 flag: Optional[str] = None, env_var: Optional[str] = None):
        super().__init__()
        if os.path.basename(filename) != filename or filename in ("", ".", ".."):
            raise ValueError(f"Filename must not contain a directory: {filename}")
        self.generator = generator
        self.filename = filename
        self.flag = flag
        self.env_var = env_var

    def description(self) -> str:
        return f"temp_file({self.filename})"

    def provision(self, provision_input: ProvisionInput, launch: LaunchSpec) -> None:
        try:
            content = self.generator(provision_input)
        except Exception as e:
            raise ProvisionError(
                f"Failed to generate file content: {e}",
                provisioner=self.description()
            ) from e

        try:
            directory = tempfile.mkdtemp(prefix="credkit-")
        except OSError as e:
            raise ProvisionError(
                f"Failed to create temporary directory: {e}",
                provisioner=self.description()
            ) from e

        path = os.path.join(directory, self.filename)
        launch.add_cleanup(lambda: _remove(directory, path))

        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        except OSError as e:
            _remove(directory, path)
            raise ProvisionError(
                f"Failed to write temporary file: {e}",
                provisioner=self.description(),
                path=path
            ) from e

        self.logger.debug("Wrote temporary credential file", path=path)

        if self.flag:
            launch.add_arg(self.flag, path)
        if self.env_var:
            launch.set_env(self.env_var, path)


def _remove(directory: str, path: str) -> None:
    """Remove the credential file and its directory; missing paths are fine."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    try:
        os.rmdir(directory)
    except FileNotFoundError:
        pass


def TempFile(generator: ContentGenerator, filename: str,
             flag: Optional[str] = None, env_var: Optional[str] = None) -> TempFileProvisioner:
    """Provision the generated content as ``filename``, passed via ``flag`` and/or ``env_var``."""
    return TempFileProvisioner(generator, filename, flag=flag, env_var=env_var)


def ini_config(section: str, fields: Iterable, keys: Optional[Mapping[str, str]] = None) -> ContentGenerator:
    """
    Build a content generator that renders fields as a one-section INI file.

    Lines follow the order of ``fields``. Fields absent from the input
    fall back to their documented ``default``; fields with neither are
    left out.

    Args:
        section: Section header, e.g. ``client``
        fields: FieldSchema objects giving line order and defaults
        keys: Optional field name to INI key mapping

    Returns:
        Generator turning a ProvisionInput into file content
    """
    keys = dict(keys or {})
    fields = list(fields)
    names = [f.name for f in fields]
    defaults = {f.name: f.default for f in fields if f.default is not None}

    def generate(provision_input: ProvisionInput) -> bytes:
        lines = [f"[{section}]"]
        for name in names:
            value = provision_input.get(name) or defaults.get(name)
            if value is None:
                continue
            if "\n" in value or "\r" in value:
                raise ValueError(f"Value for field '{name}' contains a line break")
            lines.append(f"{keys.get(name, name)}={value}")
        return ("\n".join(lines) + "\n").encode("utf-8")

    return generate
