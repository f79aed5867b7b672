"""
HealthLock Error Model

This module provides the error handling framework for the HealthLock client,
covering account decoding failures and reconciliation degrade events.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """HealthLock client error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Decoding errors (100-199)
    DECODE_ERROR = 100
    DISCRIMINATOR_MISMATCH = 101
    UNKNOWN_ACCOUNT_TYPE = 102
    OUT_OF_BOUNDS = 103
    FIELD_TOO_LARGE = 104
    INVALID_UTF8 = 105
    INVALID_VALUE = 106

    # Reconciliation errors (200-299)
    MISSING_ACCOUNT = 200


class HealthLockError(Exception):
    """
    Base class for all HealthLock client errors.

    Carries a code, a message and optional structured details.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a HealthLock error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HealthLockError':
        """
        Create error from dictionary representation.

        The concrete class is chosen by error code when it is a subclass of
        ``cls``, so ``HealthLockError.from_dict(e.to_dict())`` rebuilds ``e``'s
        type and structured attributes. The cause is not restored.
        """
        try:
            code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        except ValueError:
            code = ErrorCode.UNKNOWN
        message = data.get("message", "Unknown error")
        details = dict(data.get("details") or {})

        error_cls = _ERROR_CLASSES.get(code)
        if error_cls is None or not issubclass(error_cls, cls):
            error_cls = cls
        # subclass constructors take field values, not (message, code, details)
        error = error_cls.__new__(error_cls)
        HealthLockError.__init__(error, message, code, details)
        error._restore(details)
        return error

    def _restore(self, details: Dict[str, Any]) -> None:
        """Set subclass attributes from ``details`` after ``from_dict``."""


class DecodeError(HealthLockError):
    """
    Account decoding failure.

    Tagged with the account type being decoded, the buffer offset where the
    failing read started and the name of the field being read.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODE_ERROR,
                 account_type: Optional[str] = None, offset: Optional[int] = None,
                 field: Optional[str] = None, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        merged = dict(details or {})
        if account_type is not None:
            merged["account_type"] = account_type
        if offset is not None:
            merged["offset"] = offset
        if field is not None:
            merged["field"] = field
        super().__init__(message, code, merged, cause)
        self.account_type = account_type
        self.offset = offset
        self.field = field

    def with_account_type(self, account_type: str) -> 'DecodeError':
        """Attach the account type once the failing decoder is known."""
        self.account_type = account_type
        self.details["account_type"] = account_type
        return self

    def _restore(self, details: Dict[str, Any]) -> None:
        self.account_type = details.get("account_type")
        self.offset = details.get("offset")
        self.field = details.get("field")


class DiscriminatorMismatchError(DecodeError):
    """Leading 8 bytes do not carry the expected account tag."""

    def __init__(self, expected: str, actual: bytes, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Invalid account discriminator, not a {expected}",
            ErrorCode.DISCRIMINATOR_MISMATCH,
            account_type=expected,
            offset=0,
            field="discriminator",
            details={"actual": actual.hex(), **(details or {})},
        )
        self.expected = expected
        self.actual = actual

    def _restore(self, details: Dict[str, Any]) -> None:
        super()._restore(details)
        self.expected = self.account_type
        self.actual = bytes.fromhex(details.get("actual", ""))


class UnknownAccountTypeError(DecodeError):
    """Leading 8 bytes match no registered account tag."""

    def __init__(self, actual: bytes):
        super().__init__(
            f"Unknown account discriminator: {actual.hex()}",
            ErrorCode.UNKNOWN_ACCOUNT_TYPE,
            offset=0,
            field="discriminator",
            details={"actual": actual.hex()},
        )
        self.actual = actual

    def _restore(self, details: Dict[str, Any]) -> None:
        super()._restore(details)
        self.actual = bytes.fromhex(details.get("actual", ""))


class OutOfBoundsError(DecodeError):
    """A fixed-width read would run past the end of the buffer."""

    def __init__(self, field: Optional[str], offset: int, size: int, length: int):
        super().__init__(
            f"Buffer overflow: attempting to read {size} bytes at offset {offset} "
            f"of {length}",
            ErrorCode.OUT_OF_BOUNDS,
            offset=offset,
            field=field,
            details={"size": size, "length": length},
        )
        self.size = size
        self.length = length

    def _restore(self, details: Dict[str, Any]) -> None:
        super()._restore(details)
        self.size = details.get("size")
        self.length = details.get("length")


class FieldTooLargeError(DecodeError):
    """A length prefix declares more data than the buffer holds."""

    def __init__(self, field: Optional[str], offset: int, declared: int, remaining: int):
        super().__init__(
            f"Field {field or '<unnamed>'} declares {declared} bytes but only "
            f"{remaining} remain",
            ErrorCode.FIELD_TOO_LARGE,
            offset=offset,
            field=field,
            details={"declared": declared, "remaining": remaining},
        )
        self.declared = declared
        self.remaining = remaining

    def _restore(self, details: Dict[str, Any]) -> None:
        super()._restore(details)
        self.declared = details.get("declared")
        self.remaining = details.get("remaining")


class InvalidUtf8Error(DecodeError):
    """A string field is not valid UTF-8."""

    def __init__(self, field: Optional[str], offset: int, cause: Optional[Exception] = None):
        super().__init__(
            f"Field {field or '<unnamed>'} is not valid UTF-8",
            ErrorCode.INVALID_UTF8,
            offset=offset,
            field=field,
            cause=cause,
        )


class InvalidValueError(DecodeError):
    """A field decoded to a value outside its domain (bool byte, enum tag)."""

    def __init__(self, field: Optional[str], offset: int, value: Any, cause: Optional[Exception] = None):
        super().__init__(
            f"Field {field or '<unnamed>'} has invalid value {value!r}",
            ErrorCode.INVALID_VALUE,
            offset=offset,
            field=field,
            details={"value": value if isinstance(value, (int, str)) else repr(value)},
            cause=cause,
        )
        self.value = value

    def _restore(self, details: Dict[str, Any]) -> None:
        super()._restore(details)
        self.value = details.get("value")


class MissingAccountError(HealthLockError):
    """An account needed for reconciliation was not supplied."""

    def __init__(self, message: str = "Account not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MISSING_ACCOUNT, details, cause)


_ERROR_CLASSES = {
    ErrorCode.DECODE_ERROR: DecodeError,
    ErrorCode.DISCRIMINATOR_MISMATCH: DiscriminatorMismatchError,
    ErrorCode.UNKNOWN_ACCOUNT_TYPE: UnknownAccountTypeError,
    ErrorCode.OUT_OF_BOUNDS: OutOfBoundsError,
    ErrorCode.FIELD_TOO_LARGE: FieldTooLargeError,
    ErrorCode.INVALID_UTF8: InvalidUtf8Error,
    ErrorCode.INVALID_VALUE: InvalidValueError,
    ErrorCode.MISSING_ACCOUNT: MissingAccountError,
}


__all__ = [
    "ErrorCode",
    "HealthLockError",
    "DecodeError",
    "DiscriminatorMismatchError",
    "UnknownAccountTypeError",
    "OutOfBoundsError",
    "FieldTooLargeError",
    "InvalidUtf8Error",
    "InvalidValueError",
    "MissingAccountError",
]
