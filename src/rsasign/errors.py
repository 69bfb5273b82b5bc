"""The closed set of errors raised by the signing facade.

Every error derives from `RSASignError`, and where a builtin exception family already covers the concern, from that
family as well. Callers can therefore tell a rejected signature (`VerificationError`) apart from malformed input
(`MalformedPEMError`, `KeyParseError`, `NotRSAKeyError`) and from internal faults.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSASignError(Exception):
    """Base class of all rsasign errors."""


class KeyGenerationError(RSASignError, RuntimeError):
    """The key generator rejected the request or could not produce a key."""


class SigningError(RSASignError, RuntimeError):
    """The private key is unusable or signing failed internally."""


class VerificationError(RSASignError):
    """The signature does not match the message under the given public key.

    Not a fault: this is the regular "reject" outcome of a verification.
    """


class SerializationError(RSASignError, ValueError):
    """A key could not be marshalled to DER/PEM."""


class MalformedPEMError(RSASignError, IOError):
    """No valid PEM block was found in the input."""


class KeyParseError(RSASignError, IOError):
    """The PEM body is not a structurally valid key of the expected format."""


class NotRSAKeyError(RSASignError, IOError):
    """The public key container holds a valid key of a different algorithm family."""


__all__ = [
    "RSASignError",
    "KeyGenerationError",
    "SigningError",
    "VerificationError",
    "SerializationError",
    "MalformedPEMError",
    "KeyParseError",
    "NotRSAKeyError",
]
