"""
File Importers

Discover credentials from config files at known paths. A missing or
unreadable file is not an error; a file that cannot be parsed is.
"""

import configparser
import re
from typing import Callable, Dict, List, Optional, Sequence

from .base import ImportAttempt, ImportCandidate, ImportCandidateField, ImportInput, Importer
from ..errors import MalformedSourceError, ParseError

_INLINE_COMMENT = re.compile(r"\s+#.*$")


class IniSection:
    """One section of a parsed INI file."""

    def __init__(self, name: str, values: Dict[str, Optional[str]]):
        self.name = name
        self._values = values

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)


def _describe_parse_error(error: configparser.Error) -> str:
    # configparser quotes the offending line, which may hold a secret
    if isinstance(error, configparser.MissingSectionHeaderError):
        lines = [error.lineno]
    elif isinstance(error, configparser.ParsingError):
        lines = [lineno for lineno, _ in error.errors]
    else:
        lines = [getattr(error, "lineno", None)]

    lines = [str(lineno) for lineno in lines if lineno is not None]
    if not lines:
        return error.__class__.__name__
    return f"{error.__class__.__name__} at line {', '.join(lines)}"


def parse_ini(text: str, path: Optional[str] = None) -> List[IniSection]:
    """
    Parse INI text into sections.

    Interpolation is disabled, keys without values are allowed and repeated
    sections or keys are merged, matching MySQL option file conventions.
    Leading whitespace is ignored, so an indented line is an option of its
    own rather than a continuation. ``!include`` and ``!includedir``
    directives are skipped.

    Args:
        text: File content
        path: Optional path for error context

    Returns:
        Sections in file order

    Raises:
        ParseError: If the text is not valid INI. The message names the
            line numbers only, never the line content.
    """
    parser = configparser.ConfigParser(
        interpolation=None,
        allow_no_value=True,
        strict=False,
        default_section="\x00credkit-default",
    )
    lines = (line.lstrip() for line in text.splitlines())
    text = "\n".join("" if line.startswith("!include") else line for line in lines)
    try:
        parser.read_string(text, source=path or "<string>")
    except configparser.Error as e:
        raise ParseError(f"Invalid INI syntax: {_describe_parse_error(e)}", path=path) from None

    return [
        IniSection(name, dict(parser.items(name, raw=True)))
        for name in parser.sections()
    ]


class FileContents:
    """Raw bytes of a discovered file."""

    def __init__(self, data: bytes, path: Optional[str] = None):
        self.data = data
        self.path = path

    def to_string(self) -> str:
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"File is not valid UTF-8 text at byte {e.start}", path=self.path) from None

    def to_ini(self) -> List[IniSection]:
        return parse_ini(self.to_string(), path=self.path)


FileParser = Callable[[FileContents, ImportInput, ImportAttempt], None]


class TryFile(Importer):
    """Reads a file if present and hands its contents to a parse function.

    The parse function records candidates and errors on the attempt.
    """

    name = "file"

    def __init__(self, path: str, parse: FileParser):
        super().__init__()
        self.path = path
        self.parse = parse

    def description(self) -> str:
        return f"file({self.path})"

    def discover(self, import_input: ImportInput) -> ImportAttempt:
        attempt = ImportAttempt()
        path = import_input.expand_path(self.path)

        try:
            data = path.read_bytes()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return attempt
        except PermissionError:
            self.logger.debug("Skipping unreadable file", path=str(path))
            return attempt

        self.parse(FileContents(data, path=str(path)), import_input, attempt)
        return attempt


class TryIniFile(TryFile):
    """Walks every section of an INI file and emits one candidate per section.

    Only the listed keys are read, and only when present and non-empty.
    Sections holding none of them contribute nothing.
    """

    name = "ini_file"

    def __init__(self, path: str, keys: Sequence[str]):
        super().__init__(path, self._parse_sections)
        self.keys = list(keys)

    def description(self) -> str:
        return f"ini_file({self.path})"

    def _parse_sections(self, contents: FileContents, import_input: ImportInput,
                        attempt: ImportAttempt) -> None:
        try:
            sections = contents.to_ini()
        except ParseError as e:
            attempt.add_error(MalformedSourceError(
                f"Could not parse {contents.path}: {e.message}",
                source=contents.path,
                importer=self.description()
            ))
            return

        for section in sections:
            fields = []
            for key in self.keys:
                value = _option_value(section.get(key))
                if value:
                    fields.append(ImportCandidateField(field=key, value=value))

            if fields:
                attempt.add_candidate(ImportCandidate(
                    fields=fields,
                    source=contents.path,
                    name_hint=section.name
                ))


def _option_value(raw: Optional[str]) -> Optional[str]:
    """Strip quotes from a quoted value, or a trailing ``#`` comment from a bare one."""
    if raw is None:
        return None
    value = raw.strip()
    if value[:1] in ("'", '"'):
        end = value.find(value[0], 1)
        if end != -1:
            return value[1:end]
        return value
    return _INLINE_COMMENT.sub("", value)
