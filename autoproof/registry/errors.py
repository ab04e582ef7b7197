"""
Registry Errors — Stable error taxonomy for the parts registry.

Every rejected operation maps to exactly one numeric code. Callers
(supply tracking, QA, recall services) match on these numbers, so
they must never be renumbered.

Error hierarchy:
    RegistryError (base)
    ├── NotAuthorizedError      (100)
    ├── AlreadyRegisteredError  (101)
    ├── NotFoundError           (102)
    ├── PausedError             (103)
    ├── ZeroAddressError        (104)
    ├── InvalidMetadataError    (105)
    ├── NotOwnerError           (106)
    └── AlreadyRecycledError    (107)
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes returned by registry operations."""
    NOT_AUTHORIZED = 100
    ALREADY_REGISTERED = 101
    NOT_FOUND = 102
    PAUSED = 103
    ZERO_ADDRESS = 104
    INVALID_METADATA = 105
    NOT_OWNER = 106
    ALREADY_RECYCLED = 107


class RegistryError(Exception):
    """Base error for all registry rejections."""

    code: ErrorCode

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.message}"


class NotAuthorizedError(RegistryError):
    """Caller is not the registry admin."""
    code = ErrorCode.NOT_AUTHORIZED

    def __init__(self, caller: str, details: dict[str, Any] | None = None):
        super().__init__(f"{caller} is not the registry admin", details)
        self.caller = caller


class AlreadyRegisteredError(RegistryError):
    """The allocated id already carries metadata."""
    code = ErrorCode.ALREADY_REGISTERED

    def __init__(self, part_id: int, details: dict[str, Any] | None = None):
        super().__init__(f"Part {part_id} is already registered", details)
        self.part_id = part_id


class NotFoundError(RegistryError):
    """No such part (or no such history entry)."""
    code = ErrorCode.NOT_FOUND

    def __init__(
        self,
        part_id: int,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        if index is None:
            message = f"Part {part_id} not found"
        else:
            message = f"History entry {index} of part {part_id} not found"
        super().__init__(message, details)
        self.part_id = part_id
        self.index = index


class PausedError(RegistryError):
    """Transfers are halted registry-wide."""
    code = ErrorCode.PAUSED

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("Registry is paused", details)


class ZeroAddressError(RegistryError):
    """The null identity was supplied where a real identity is required."""
    code = ErrorCode.ZERO_ADDRESS

    def __init__(self, identity: str, details: dict[str, Any] | None = None):
        if identity:
            message = f"{identity} is the reserved null identity"
        else:
            message = "An empty identity cannot stand in for a real one"
        super().__init__(message, details)
        self.identity = identity


class InvalidMetadataError(RegistryError):
    """A metadata field is empty or exceeds its storage bound."""
    code = ErrorCode.INVALID_METADATA

    def __init__(self, field_name: str, reason: str, details: dict[str, Any] | None = None):
        super().__init__(f"Invalid {field_name}: {reason}", details)
        self.field_name = field_name
        self.reason = reason


class NotOwnerError(RegistryError):
    """Caller does not currently hold the part."""
    code = ErrorCode.NOT_OWNER

    def __init__(
        self,
        part_id: int,
        caller: str,
        current_owner: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(f"{caller} does not own part {part_id}", details)
        self.part_id = part_id
        self.caller = caller
        self.current_owner = current_owner


class AlreadyRecycledError(RegistryError):
    """The part reached the terminal recycled status."""
    code = ErrorCode.ALREADY_RECYCLED

    def __init__(self, part_id: int, details: dict[str, Any] | None = None):
        super().__init__(f"Part {part_id} is already recycled", details)
        self.part_id = part_id


ERRORS_BY_CODE: dict[ErrorCode, type[RegistryError]] = {
    cls.code: cls
    for cls in (
        NotAuthorizedError,
        AlreadyRegisteredError,
        NotFoundError,
        PausedError,
        ZeroAddressError,
        InvalidMetadataError,
        NotOwnerError,
        AlreadyRecycledError,
    )
}


def error_class(code: ErrorCode | int) -> type[RegistryError]:
    """Look up the exception class for a numeric code."""
    return ERRORS_BY_CODE[ErrorCode(code)]
