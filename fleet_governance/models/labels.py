"""Validated label map type and the label validator contract."""

from collections.abc import Iterator, Mapping
from typing import Any, Protocol


class LabelValidator(Protocol):
    """Checks label key/value syntax. Returns an error message or None."""

    def validate_key(self, key: str) -> str | None: ...

    def validate_value(self, value: str) -> str | None: ...


class LabelValidationError(Exception):
    """Raised when a label map fails validation."""

    def __init__(self, errors: dict[str, str]):
        """
        Initialize label validation error.

        Args:
            errors: Mapping of offending label key to a human-readable message
        """
        self.errors = errors
        details = "; ".join(f"{key!r}: {message}" for key, message in errors.items())
        super().__init__(f"Invalid labels: {details}")


class LabelMap(Mapping[str, str]):
    """
    Immutable mapping of label keys to label values.

    Construction checks that keys and values are strings. Use
    :meth:`validated` to additionally run a :class:`LabelValidator`
    over every pair.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None):
        items = dict(data or {})
        errors = {}
        for key, value in items.items():
            if not isinstance(key, str):
                errors[str(key)] = "label key must be a string"
            elif not isinstance(value, str):
                errors[key] = f"label value must be a string, got {type(value).__name__}"
        if errors:
            raise LabelValidationError(errors)
        self._data: dict[str, str] = items

    @classmethod
    def validated(cls, data: Mapping[str, Any], validator: LabelValidator) -> "LabelMap":
        """
        Build a LabelMap, rejecting any key or value the validator refuses.

        Raises:
            LabelValidationError: If any pair is not a valid label
        """
        label_map = cls(data)
        errors = {}
        for key, value in label_map.items():
            message = validator.validate_key(key) or validator.validate_value(value)
            if message:
                errors[key] = message
        if errors:
            raise LabelValidationError(errors)
        return label_map

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"LabelMap({self._data!r})"

    def to_dict(self) -> dict[str, str]:
        """Return a plain dict copy."""
        return dict(self._data)
