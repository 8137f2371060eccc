"""
Credential Type Loader

Builds credential types from a YAML document so new integrations can be
declared without writing Python.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml

from .errors import ConfigurationError
from .importer import Importer, TryAll, TryAllEnvVars, TryEnvVarPair, TryIniFile
from .provision import EnvVars, Provisioner, TempFile, ini_config
from .schema import Charset, CompositionRule, CredentialSchema, FieldSchema

logger = structlog.get_logger(__name__)

_CHARSET_CLASSES = ("uppercase", "lowercase", "digits", "symbols")


def _substitute_environment_variables(value: str) -> str:
    """
    Substitute environment variables in a string value.

    Args:
        value: String that may contain ${VAR_NAME} placeholders

    Returns:
        String with environment variables substituted
    """
    def replace_var(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return re.sub(r'\$\{([^}]+)\}', replace_var, value)


def _substitute_env_vars_in_config(config: Any) -> Any:
    if isinstance(config, dict):
        return {k: _substitute_env_vars_in_config(v) for k, v in config.items()}
    elif isinstance(config, list):
        return [_substitute_env_vars_in_config(item) for item in config]
    elif isinstance(config, str):
        return _substitute_environment_variables(config)
    else:
        return config


class _Context:
    """Tracks where in the document a value came from, for error messages."""

    def __init__(self, config_file: Optional[str], path: str):
        self.config_file = config_file
        self.path = path

    def child(self, key) -> "_Context":
        return _Context(self.config_file, f"{self.path}.{key}" if self.path else str(key))

    def error(self, message: str) -> ConfigurationError:
        return ConfigurationError(message, config_file=self.config_file, config_path=self.path)

    def require(self, data: Dict[str, Any], key: str, kind: type = str) -> Any:
        if key not in data:
            raise self.error(f"Missing required key '{key}'")
        return self.expect(data[key], kind, key)

    def expect(self, value: Any, kind: type, key: Optional[str] = None) -> Any:
        if not isinstance(value, kind):
            ctx = self.child(key) if key is not None else self
            raise ctx.error(f"Expected {kind.__name__}, got {type(value).__name__}")
        return value


def _parse_composition(data: Dict[str, Any], ctx: _Context) -> CompositionRule:
    ctx.expect(data, dict)
    length = data.get("length")
    if length is not None and (not isinstance(length, int) or length < 0):
        raise ctx.child("length").error("Length must be a non-negative integer")

    prefix = data.get("prefix")
    if prefix is not None:
        prefix = str(prefix)

    classes = data.get("charset", [])
    ctx.expect(classes, list, "charset")
    unknown = [c for c in classes if c not in _CHARSET_CLASSES]
    if unknown:
        raise ctx.child("charset").error(f"Unknown character classes: {', '.join(map(str, unknown))}")

    return CompositionRule(
        length=length,
        prefix=prefix,
        charset=Charset(**{c: True for c in classes}),
    )


def _parse_field(data: Dict[str, Any], ctx: _Context) -> FieldSchema:
    ctx.expect(data, dict)
    composition = None
    if data.get("composition") is not None:
        composition = _parse_composition(data["composition"], ctx.child("composition"))

    default = data.get("default")
    return FieldSchema(
        name=ctx.require(data, "name"),
        description=str(data.get("description", "")),
        secret=bool(data.get("secret", False)),
        optional=bool(data.get("optional", False)),
        composition=composition,
        default=str(default) if default is not None else None,
    )


def _parse_importer(data: Dict[str, Any], ctx: _Context) -> Importer:
    ctx.expect(data, dict)
    kind = ctx.require(data, "kind")

    if kind == "env_pair":
        mapping = ctx.require(data, "mapping", dict)
        try:
            return TryEnvVarPair(mapping, primary=data.get("primary"))
        except ValueError as e:
            raise ctx.error(str(e))
    if kind == "env_any":
        env_vars = ctx.require(data, "env_vars", list)
        if not env_vars:
            raise ctx.child("env_vars").error("At least one environment variable is required")
        return TryAllEnvVars(ctx.require(data, "field"), *env_vars)
    if kind == "ini_file":
        return TryIniFile(ctx.require(data, "path"), ctx.require(data, "keys", list))

    raise ctx.child("kind").error(f"Unknown importer kind: {kind}")


def _parse_provisioner(data: Dict[str, Any], fields: List[FieldSchema],
                       ctx: _Context) -> Provisioner:
    ctx.expect(data, dict)
    kind = ctx.require(data, "kind")

    if kind == "env_vars":
        return EnvVars(ctx.require(data, "mapping", dict))
    if kind == "temp_file":
        file_format = data.get("format", "ini")
        if file_format != "ini":
            raise ctx.child("format").error(f"Unsupported file format: {file_format}")
        generator = ini_config(
            data.get("section", "default"),
            fields,
            keys=data.get("keys"),
        )
        try:
            return TempFile(
                generator,
                filename=ctx.require(data, "filename"),
                flag=data.get("flag"),
                env_var=data.get("env_var"),
            )
        except ValueError as e:
            raise ctx.child("filename").error(str(e))

    raise ctx.child("kind").error(f"Unknown provisioner kind: {kind}")


def parse_credential_type(data: Dict[str, Any], config_file: Optional[str] = None,
                          path: str = "") -> CredentialSchema:
    """
    Build one credential type from its declaration.

    Args:
        data: Mapping holding the declaration
        config_file: Optional source file for error context
        path: Location of the declaration within the document

    Returns:
        CredentialSchema

    Raises:
        ConfigurationError: If the declaration is invalid
    """
    ctx = _Context(config_file, path)
    ctx.expect(data, dict)
    name = ctx.require(data, "name")

    raw_fields = ctx.require(data, "fields", list)
    fields = [_parse_field(f, ctx.child("fields").child(i)) for i, f in enumerate(raw_fields)]

    importer = None
    raw_importers = data.get("importers") or []
    ctx.expect(raw_importers, list, "importers")
    if raw_importers:
        importer = TryAll(*[
            _parse_importer(entry, ctx.child("importers").child(i))
            for i, entry in enumerate(raw_importers)
        ])

    provisioner = None
    if data.get("provisioner") is not None:
        provisioner = _parse_provisioner(data["provisioner"], fields, ctx.child("provisioner"))

    try:
        return CredentialSchema(
            name=name,
            plugin=data.get("plugin"),
            docs_url=data.get("docs_url"),
            management_url=data.get("management_url"),
            fields=fields,
            importer=importer,
            provisioner=provisioner,
        )
    except ConfigurationError as e:
        raise ctx.error(e.message)


def load_credential_types(path: str) -> List[CredentialSchema]:
    """
    Load credential types from a YAML file.

    The document holds a ``credential_types`` list. ``${VAR}`` placeholders
    in string values are replaced from the environment.

    Args:
        path: Path of the YAML file

    Returns:
        List of credential types in document order

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    file_path = Path(path).expanduser()
    try:
        with open(file_path, 'r') as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read credential types file: {e}", config_file=str(path))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", config_file=str(path))

    if not isinstance(document, dict) or not isinstance(document.get("credential_types"), list):
        raise ConfigurationError(
            "Document must contain a 'credential_types' list",
            config_file=str(path)
        )

    document = _substitute_env_vars_in_config(document)
    types = [
        parse_credential_type(entry, config_file=str(path), path=f"credential_types.{i}")
        for i, entry in enumerate(document["credential_types"])
    ]

    logger.info("Loaded credential types", config_file=str(path), count=len(types))
    return types
