"""
JSON record adapter for faction content.

Wraps one decoded JSON object and exposes the field accessors the faction
loader consumes:

- get_string(key): required string field, raises if missing
- get_string(key, default): optional string field
- get_tags(key): set of strings; accepts a single string or a list,
  missing yields an empty set
"""

from __future__ import annotations

from typing import Any, Optional


class MonfactionsError(Exception):
    """Base class for errors raised while reading faction content."""
    pass


class RecordFieldError(MonfactionsError, KeyError):
    """Raised when a required record field is missing."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class RecordTypeError(MonfactionsError, TypeError):
    """Raised when a record field has the wrong JSON type."""
    pass


class JsonFactionRecord:
    """
    A parsed faction record backed by a JSON dict.

    Usage:
        record = JsonFactionRecord({"name": "ZOMBIE", "friendly": ["zombie"]})
        record.get_string("name")               # "ZOMBIE"
        record.get_string("base_faction", "")   # ""
        record.get_tags("friendly")             # {"zombie"}
    """

    def __init__(self, data: dict[str, Any], source: Optional[str] = None):
        """
        Args:
            data: Decoded JSON object
            source: Where the record came from, for error messages
        """
        if not isinstance(data, dict):
            raise RecordTypeError(f"Faction record must be a JSON object, got {type(data).__name__}")
        self.data = data
        self.source = source

    def _where(self) -> str:
        name = self.data.get("name")
        label = f"faction {name!r}" if isinstance(name, str) else "faction record"
        return f"{label} in {self.source}" if self.source else label

    def get_string(self, key: str, default: Optional[str] = None) -> str:
        """
        Get a string field.

        Args:
            key: Field name
            default: Value for a missing field; None makes the field required

        Raises:
            RecordFieldError: If a required field is missing
            RecordTypeError: If the field is not a string
        """
        if key not in self.data:
            if default is None:
                raise RecordFieldError(f"{self._where()}: missing required field '{key}'")
            return default

        value = self.data[key]
        if not isinstance(value, str):
            raise RecordTypeError(
                f"{self._where()}: field '{key}' must be a string, got {type(value).__name__}"
            )
        return value

    def get_tags(self, key: str) -> set[str]:
        """
        Get a set of strings.

        Raises:
            RecordTypeError: If the field is neither a string nor a list of strings
        """
        value = self.data.get(key)
        if value is None:
            return set()
        if isinstance(value, str):
            return {value}
        if isinstance(value, list):
            tags = set()
            for tag in value:
                if not isinstance(tag, str):
                    raise RecordTypeError(
                        f"{self._where()}: field '{key}' must contain strings, "
                        f"got {type(tag).__name__}"
                    )
                tags.add(tag)
            return tags
        raise RecordTypeError(
            f"{self._where()}: field '{key}' must be a string or list, got {type(value).__name__}"
        )

    def __repr__(self) -> str:
        return f"JsonFactionRecord({self.data!r})"
