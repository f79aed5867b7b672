"""Runtime helpers for the HealthLock client"""

from .identifier import Identifier, IdentifierLike, as_identifier, IDENTIFIER_SIZE
from .errors import *

__all__ = [
    "Identifier",
    "IdentifierLike",
    "as_identifier",
    "IDENTIFIER_SIZE",
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
