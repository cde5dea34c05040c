# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Label key/value syntax validation.

Implements the Google Cloud label rules:

- Keys: 1-63 characters, must start with a lowercase letter, and may
  contain only lowercase letters, digits, underscores and dashes.
- Values: 0-63 characters of lowercase letters, digits, underscores and
  dashes.
- International lowercase letters are accepted wherever ASCII lowercase
  letters are.
"""

import re

MAX_LABEL_LENGTH = 63

# \w covers unicode letters and digits; uppercase is rejected separately.
_KEY_PATTERN = re.compile(r"[^\W\d_][\w-]*")
_VALUE_PATTERN = re.compile(r"[\w-]*")


class GcpLabelValidator:
    """
    Validator for Google Cloud label keys and values.

    Each method returns a human-readable error message, or None when the
    input is valid.
    """

    def validate_key(self, key: str) -> str | None:
        if not key:
            return "Key is required"
        if len(key) > MAX_LABEL_LENGTH:
            return f"Key must be at most {MAX_LABEL_LENGTH} characters"
        if key != key.lower():
            return "Key must be lowercase"
        if not _KEY_PATTERN.fullmatch(key):
            if not key[0].isalpha():
                return "Key must start with a lowercase letter"
            return "Key may only contain lowercase letters, numbers, underscores and dashes"
        return None

    def validate_value(self, value: str) -> str | None:
        if len(value) > MAX_LABEL_LENGTH:
            return f"Value must be at most {MAX_LABEL_LENGTH} characters"
        if value != value.lower():
            return "Value must be lowercase"
        if not _VALUE_PATTERN.fullmatch(value):
            return "Value may only contain lowercase letters, numbers, underscores and dashes"
        return None


default_validator = GcpLabelValidator()


def validate_key(key: str) -> str | None:
    """Validate a label key with the default validator."""
    return default_validator.validate_key(key)


def validate_value(value: str) -> str | None:
    """Validate a label value with the default validator."""
    return default_validator.validate_value(value)
