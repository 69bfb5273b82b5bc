"""The signing facade: RSA key pairs, PKCS#1 v1.5 SHA-256 signatures and PEM import/export of keys.

Every cryptographic primitive (key generation, padding, modular arithmetic, key consistency checks) is delegated to
`cryptography`. The DER structures inside the PEM containers are handled with `pyasn1`, using the PKCS#1
`RSAPrivateKey` format for private keys and the X.509 `SubjectPublicKeyInfo` format for public keys.

Typical usage example:

    sk, pk = generate_key_pair(2048)
    signature = sign(b"hello world", sk)
    verify(b"hello world", signature, pk)
    pk = import_public_key_pem(export_public_key_pem(pk))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import warnings

from cryptography.exceptions import InternalError
from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.codec.native import encoder as localize
from pyasn1.type import univ
from pyasn1_modules import rfc5208
from pyasn1_modules import rfc5280
from pyasn1_modules import rfc8017

from rsasign.errors import KeyGenerationError
from rsasign.errors import KeyParseError
from rsasign.errors import NotRSAKeyError
from rsasign.errors import SerializationError
from rsasign.errors import SigningError
from rsasign.errors import VerificationError
from rsasign.pem import encode_pem
from rsasign.pem import PEM_TYPES
from rsasign.pem import read_pem

DEFAULT_KEY_SIZE = 2048
DEFAULT_PUBLIC_EXPONENT = 65537
MINIMUM_SAFE_KEY_SIZE = 2048

KNOWN_KEY_ALGORITHMS = {
    "1.2.840.10045.2.1": "elliptic-curve",
    "1.2.840.10040.4.1": "DSA",
    "1.3.101.110": "X25519",
    "1.3.101.111": "X448",
    "1.3.101.112": "Ed25519",
    "1.3.101.113": "Ed448",
}


def _as_bytes(message: bytes | str, what: str = "message") -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, (bytes, bytearray, memoryview)):
        return bytes(message)
    raise TypeError(f"Expected the {what} as str or bytes, got {type(message).__name__}.")


def _check_der(decoded, payload: bytes, what: str) -> None:
    """Rejects BER encodings (non-minimal lengths, indefinite forms) that the decoder lets through."""
    if encoder.encode(decoded) != payload:
        raise KeyParseError(f"The {what} is not DER encoded.")


def generate_key_pair(bits: int = DEFAULT_KEY_SIZE,
                      pub_exp: int = DEFAULT_PUBLIC_EXPONENT) -> tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """Generates an RSA key pair.

    No minimum size is enforced here, but sizes under `MINIMUM_SAFE_KEY_SIZE` issue a warning.

    Args:
        bits: The modulus size in bits.
        pub_exp: The public exponent. Defaults (and recommended) to 65537.

    Returns:
        Tuple of (private key, public key).

    Raises:
        KeyGenerationError: If the generator rejects the size or exponent, or fails internally.
    """
    if isinstance(bits, int) and bits < MINIMUM_SAFE_KEY_SIZE:
        warnings.warn(f"{bits} bit RSA keys are unsafe! Please use at least {MINIMUM_SAFE_KEY_SIZE} bits.",
                      RuntimeWarning)
    try:
        private_key = rsa.generate_private_key(public_exponent=pub_exp, key_size=bits)
    except (ValueError, TypeError, InternalError) as exc:
        raise KeyGenerationError(f"Could not generate a {bits} bit RSA key: {exc}") from exc
    return private_key, private_key.public_key()


def sign(message: bytes | str, private_key: rsa.RSAPrivateKey) -> bytes:
    """Signs the SHA-256 digest of the message with RSASSA-PKCS1-v1_5.

    Args:
        message: The payload to sign. Strings are encoded as UTF-8.
        private_key: The RSA private key.

    Returns:
        The raw signature, as long as the modulus in bytes.

    Raises:
        SigningError: If the key is not an RSA private key or signing fails.
        TypeError: If the message is neither str nor bytes.
    """
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise SigningError(f"Expected an RSA private key, got {type(private_key).__name__}.")
    payload = _as_bytes(message)
    try:
        return private_key.sign(payload, padding.PKCS1v15(), hashes.SHA256())
    except (ValueError, InternalError) as exc:
        raise SigningError(f"Signing failed: {exc}") from exc


def verify(message: bytes | str, signature: bytes, public_key: rsa.RSAPublicKey) -> None:
    """Verifies an RSASSA-PKCS1-v1_5 SHA-256 signature.

    Args:
        message: The payload the signature claims to cover. Strings are encoded as UTF-8.
        signature: The raw signature.
        public_key: The RSA public key of the signer.

    Raises:
        VerificationError: If the signature does not match the message and key.
        TypeError: If `public_key` is not an RSA public key, or the message or signature have the wrong type.
    """
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise TypeError(f"Expected an RSA public key, got {type(public_key).__name__}.")
    if not isinstance(signature, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected the signature as bytes, got {type(signature).__name__}.")
    payload = _as_bytes(message)
    try:
        public_key.verify(bytes(signature), payload, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature as exc:
        raise VerificationError("Signature verification failed.") from exc


def check_signature(message: bytes | str, signature: bytes, public_key: rsa.RSAPublicKey) -> bool:
    """Boolean form of `verify`.

    Returns:
        True if the signature is valid, False if it is rejected.
    """
    try:
        verify(message, signature, public_key)
    except VerificationError:
        return False
    return True


def export_private_key_pem(private_key: rsa.RSAPrivateKey) -> str:
    """Exports the private key as a PKCS#1 `RSA PRIVATE KEY` PEM block.

    Args:
        private_key: The RSA private key.

    Returns:
        The PEM text.

    Raises:
        SerializationError: If the key is not an RSA private key.
    """
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise SerializationError(f"Expected an RSA private key, got {type(private_key).__name__}.")
    privs = private_key.private_numbers()
    pubs = privs.public_numbers
    keydata = rfc8017.RSAPrivateKey()
    keydata["version"] = 0
    keydata["modulus"] = pubs.n
    keydata["publicExponent"] = pubs.e
    keydata["privateExponent"] = privs.d
    keydata["prime1"] = privs.p
    keydata["prime2"] = privs.q
    keydata["exponent1"] = privs.dmp1
    keydata["exponent2"] = privs.dmq1
    keydata["coefficient"] = privs.iqmp
    try:
        encoded = encoder.encode(keydata)
    except error.PyAsn1Error as exc:
        raise SerializationError(f"Could not encode the private key: {exc}") from exc
    return encode_pem(PEM_TYPES["PKCS1_PRIV"], encoded)


def export_public_key_pem(public_key: rsa.RSAPublicKey) -> str:
    """Exports the public key as a SubjectPublicKeyInfo `PUBLIC KEY` PEM block.

    Args:
        public_key: The RSA public key.

    Returns:
        The PEM text.

    Raises:
        SerializationError: If the key cannot be marshalled.
    """
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise SerializationError(f"Expected an RSA public key, got {type(public_key).__name__}.")
    try:
        encoded = public_key.public_bytes(serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    except (ValueError, TypeError) as exc:
        raise SerializationError(f"Could not marshal the public key: {exc}") from exc
    return encode_pem(PEM_TYPES["PUBLIC"], encoded)


def _private_key_mismatch(payload: bytes) -> str:
    """Describes why a DER payload is not a PKCS#1 private key."""
    try:
        decoder.decode(payload, asn1Spec=rfc5208.PrivateKeyInfo())
    except error.PyAsn1Error:
        return "PEM body is not a PKCS#1 RSA private key."
    return "PEM body is a PKCS#8 private key, only PKCS#1 RSA private keys are supported."


def import_private_key_pem(key_pem: str | bytes) -> rsa.RSAPrivateKey:
    """Imports a PKCS#1 RSA private key from PEM text.

    The first valid PEM block in the text is used, whatever its label.

    Args:
        key_pem: The PEM text.

    Returns:
        The RSA private key.

    Raises:
        MalformedPEMError: If the text contains no valid PEM block.
        KeyParseError: If the block is not a valid, unencrypted, two-prime PKCS#1 private key.
    """
    block = read_pem(key_pem)
    if "ENCRYPTED" in block.headers.get("Proc-Type", ""):
        raise KeyParseError("Encrypted PEM private keys are not supported.")
    try:
        keydata, rest = decoder.decode(block.data, asn1Spec=rfc8017.RSAPrivateKey())
    except error.PyAsn1Error as exc:
        raise KeyParseError(_private_key_mismatch(block.data)) from exc
    if rest:
        raise KeyParseError("Trailing data after the PKCS#1 private key.")
    _check_der(keydata, block.data, "PKCS#1 private key")
    version = int(keydata["version"])
    if version == 1:
        raise KeyParseError("Multi-prime keys are not supported.")
    if version != 0:
        raise KeyParseError(f"Unsupported private key version: {version}")
    pykeyd = localize.encode(keydata)
    numbers = rsa.RSAPrivateNumbers(pykeyd["prime1"], pykeyd["prime2"], pykeyd["privateExponent"],
                                    pykeyd["exponent1"], pykeyd["exponent2"], pykeyd["coefficient"],
                                    rsa.RSAPublicNumbers(pykeyd["publicExponent"], pykeyd["modulus"]))
    try:
        return numbers.private_key()
    except ValueError as exc:
        raise KeyParseError(f"Invalid RSA private key: {exc}") from exc


def import_public_key_pem(key_pem: str | bytes) -> rsa.RSAPublicKey:
    """Imports an RSA public key from a SubjectPublicKeyInfo PEM block.

    Args:
        key_pem: The PEM text.

    Returns:
        The RSA public key.

    Raises:
        MalformedPEMError: If the text contains no valid PEM block.
        KeyParseError: If the block is not a valid SubjectPublicKeyInfo key.
        NotRSAKeyError: If the block holds a valid key of another algorithm family.
    """
    block = read_pem(key_pem)
    try:
        spki, rest = decoder.decode(block.data, asn1Spec=rfc5280.SubjectPublicKeyInfo())
    except error.PyAsn1Error as exc:
        raise KeyParseError("PEM body is not a SubjectPublicKeyInfo public key.") from exc
    if rest:
        raise KeyParseError("Trailing data after the public key.")
    algorithm = spki["algorithm"]["algorithm"]
    if algorithm != rfc8017.rsaEncryption:
        try:
            serialization.load_der_public_key(block.data)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise KeyParseError(f"Unknown or invalid public key algorithm: {algorithm}") from exc
        name = KNOWN_KEY_ALGORITHMS.get(str(algorithm), str(algorithm))
        raise NotRSAKeyError(f"Not an RSA public key, found a {name} key.")
    _check_der(spki, block.data, "public key")
    params = spki["algorithm"]["parameters"]
    if not params.isValue or params.asOctets() != encoder.encode(univ.Null("")):
        raise KeyParseError("RSA public key is missing its NULL algorithm parameters.")
    inner = spki["subjectPublicKey"].asOctets()
    try:
        keydata, rest = decoder.decode(inner, asn1Spec=rfc8017.RSAPublicKey())
    except error.PyAsn1Error as exc:
        raise KeyParseError("Invalid RSA public key structure.") from exc
    if rest:
        raise KeyParseError("Trailing data after the RSA public key.")
    _check_der(keydata, inner, "RSA public key")
    pykeyd = localize.encode(keydata)
    try:
        return rsa.RSAPublicNumbers(pykeyd["publicExponent"], pykeyd["modulus"]).public_key()
    except ValueError as exc:
        raise KeyParseError(f"Invalid RSA public key: {exc}") from exc
