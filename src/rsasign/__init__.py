"""RSA Signing Helpers.

Provides RSA key-pair generation, PKCS#1 v1.5 SHA-256 signing and verification, and PEM export/import of keys
(PKCS#1 `RSA PRIVATE KEY` for private keys, SubjectPublicKeyInfo `PUBLIC KEY` for public keys). All cryptographic
primitives are delegated to `cryptography`.

Typical usage example:

    sk, pk = generate_key_pair(2048)
    sig = sign(b"hello world", sk)
    verify(b"hello world", sig, pk)
    text = export_private_key_pem(sk)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsasign.errors import KeyGenerationError
from rsasign.errors import KeyParseError
from rsasign.errors import MalformedPEMError
from rsasign.errors import NotRSAKeyError
from rsasign.errors import RSASignError
from rsasign.errors import SerializationError
from rsasign.errors import SigningError
from rsasign.errors import VerificationError
from rsasign.signing import check_signature
from rsasign.signing import export_private_key_pem
from rsasign.signing import export_public_key_pem
from rsasign.signing import generate_key_pair
from rsasign.signing import import_private_key_pem
from rsasign.signing import import_public_key_pem
from rsasign.signing import sign
from rsasign.signing import verify

__version__ = "0.1.0"
__all__ = [
    "generate_key_pair",
    "sign",
    "verify",
    "check_signature",
    "export_private_key_pem",
    "export_public_key_pem",
    "import_private_key_pem",
    "import_public_key_pem",
    "RSASignError",
    "KeyGenerationError",
    "SigningError",
    "VerificationError",
    "SerializationError",
    "MalformedPEMError",
    "KeyParseError",
    "NotRSAKeyError",
]
