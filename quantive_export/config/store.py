"""Persisted key-value property stores.

ConfigManager reads and writes configuration through a PropertyStore:
- InMemoryPropertyStore: dict-backed store for tests and embedding callers
- FilePropertyStore: flat KEY=VALUE file with atomic writes

Values are always stored as strings.
"""

from __future__ import annotations

import os
import re
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

_KEY_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_LINE_PATTERN = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)=(.*)$")
_ESCAPE_PATTERN = re.compile(r"\\(.)")
_UNESCAPES = {"n": "\n", "r": "\r"}


def _validate_key(key: str) -> None:
    if not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid property key: {key}")


class PropertyStore(ABC):
    """String-keyed persisted property store."""

    @abstractmethod
    def get_property(self, key: str) -> str | None:
        """Return the stored value, or None if the key is not set."""
        pass

    @abstractmethod
    def get_properties(self) -> dict[str, str]:
        """Return a copy of all stored properties."""
        pass

    @abstractmethod
    def set_properties(self, properties: Mapping[str, object]) -> None:
        """Store several properties at once."""
        pass

    @abstractmethod
    def delete_property(self, key: str) -> None:
        """Remove a property; missing keys are ignored."""
        pass

    @abstractmethod
    def delete_all_properties(self) -> None:
        """Remove every property."""
        pass

    def set_property(self, key: str, value: object) -> None:
        """Store a single property."""
        self.set_properties({key: value})


class InMemoryPropertyStore(PropertyStore):
    """Property store held in a dictionary."""

    def __init__(self, properties: Mapping[str, object] | None = None) -> None:
        self._properties: dict[str, str] = {}
        if properties:
            self.set_properties(properties)

    def get_property(self, key: str) -> str | None:
        return self._properties.get(key)

    def get_properties(self) -> dict[str, str]:
        return dict(self._properties)

    def set_properties(self, properties: Mapping[str, object]) -> None:
        for key in properties:
            _validate_key(key)
        for key, value in properties.items():
            self._properties[key] = str(value)

    def delete_property(self, key: str) -> None:
        self._properties.pop(key, None)

    def delete_all_properties(self) -> None:
        self._properties.clear()


class FilePropertyStore(PropertyStore):
    """Property store persisted as a flat KEY=VALUE file.

    File format:
        - One KEY=VALUE pair per line; blank lines and # comments ignored
        - Double-quoted values support \\", \\\\, \\n and \\r escapes
        - Single-quoted values are literal

    Writes rewrite the file atomically (temp file + replace) with 0600
    permissions, preserving comments and unrelated keys.

    When ``environ`` is given, variables named like a stored key override
    the file value on read. Writes always go to the file.

    Attributes:
        path: Location of the properties file
    """

    def __init__(self, path: Path, environ: Mapping[str, str] | None = None) -> None:
        self.path = Path(path)
        self._environ = environ

    def get_property(self, key: str) -> str | None:
        if self._environ is not None and key in self._environ:
            return self._environ[key]
        return self._read_file_values().get(key)

    def get_properties(self) -> dict[str, str]:
        values = self._read_file_values()
        if self._environ is not None:
            for key in values:
                if key in self._environ:
                    values[key] = self._environ[key]
        return values

    def set_properties(self, properties: Mapping[str, object]) -> None:
        for key in properties:
            _validate_key(key)
        pending = {key: str(value) for key, value in properties.items()}

        new_lines: list[str] = []
        for line in self._read_lines():
            match = _LINE_PATTERN.match(line.strip())
            if match and match.group(1) in pending:
                key = match.group(1)
                new_lines.append(self._format_line(key, pending.pop(key)))
            else:
                # Comments, blank lines, other keys and malformed lines are kept
                new_lines.append(line)

        for key, value in pending.items():
            new_lines.append(self._format_line(key, value))

        self._atomic_write(new_lines)

    def delete_property(self, key: str) -> None:
        lines = self._read_lines()
        kept = [
            line
            for line in lines
            if not ((match := _LINE_PATTERN.match(line.strip())) and match.group(1) == key)
        ]
        if len(kept) != len(lines):
            self._atomic_write(kept)

    def delete_all_properties(self) -> None:
        lines = self._read_lines()
        kept = [line for line in lines if not _LINE_PATTERN.match(line.strip())]
        if len(kept) != len(lines):
            self._atomic_write(kept)

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        return self.path.read_text().splitlines()

    def _read_file_values(self) -> dict[str, str]:
        values: dict[str, str] = {}
        for line in self._read_lines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            match = _LINE_PATTERN.match(line)
            if match:
                key, value = match.groups()
                values[key] = self._parse_value(value)
        return values

    @classmethod
    def _parse_value(cls, value: str) -> str:
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            return cls._unescape_value(value[1:-1])
        if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
            return value[1:-1]
        return value

    @staticmethod
    def _format_line(key: str, value: str) -> str:
        # Escape backslashes first, then quotes and line breaks
        escaped = (
            value.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\r", "\\r")
        )
        return f'{key}="{escaped}"'

    @staticmethod
    def _unescape_value(value: str) -> str:
        return _ESCAPE_PATTERN.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), value)

    def _atomic_write(self, lines: list[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".quantive-export-")
        try:
            with os.fdopen(fd, "w") as f:
                f.write("\n".join(lines))
                if lines:
                    f.write("\n")
            os.chmod(temp_path, 0o600)
            Path(temp_path).replace(self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise


__all__ = [
    "PropertyStore",
    "InMemoryPropertyStore",
    "FilePropertyStore",
]
