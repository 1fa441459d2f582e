"""
P-256 keys, point compression, the DER <-> raw signature codec and the
SEC1 PEM fixture builder.

Failures raise Secp256r1Error subclasses. Each carries `kind` (an ErrorKind),
so callers branch on `err.kind` rather than on exception types.
"""

from __future__ import annotations

import logging
from typing import Tuple

import structlog
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .errors import (
    InvalidPointFormat,
    InvalidScalarLength,
    InvalidSignatureLength,
    MalformedSignature,
    UnsupportedDerEncoding,
)
from .utils import concat_bytes, from_hex, pem_armor

# stdlib-backed: silent until the host application configures logging
logger = structlog.wrap_logger(logging.getLogger(__name__))

CURVE = ec.SECP256R1()
SCALAR_BYTES = 32
COMPRESSED_POINT_BYTES = 33
UNCOMPRESSED_POINT_BYTES = 65
RAW_SIGNATURE_BYTES = 64

UNCOMPRESSED_PREFIX = 0x04
EVEN_Y_PREFIX = 0x02
ODD_Y_PREFIX = 0x03

DER_SEQUENCE_TAG = 0x30
DER_INTEGER_TAG = 0x02
DER_LONG_FORM_BIT = 0x80

# 1.2.840.10045.3.1.7
SECP256R1_OID = bytes([0x2A, 0x86, 0x48, 0xCE, 0x3D, 0x03, 0x01, 0x07])

# SEC1 ECPrivateKey (RFC 5915) for a 32 byte scalar and a 65 byte point:
# SEQUENCE(119) { INTEGER 1, OCTET STRING(32) scalar, [0] { OID }, [1] { BIT STRING(66) 0x00 point } }
SEC1_HEADER = bytes([0x30, 0x77, 0x02, 0x01, 0x01, 0x04, 0x20])
SEC1_MIDDLE = concat_bytes([
    bytes([0xA0, 0x0A, 0x06, 0x08]),
    SECP256R1_OID,
    bytes([0xA1, 0x44, 0x03, 0x42, 0x00]),
])
PEM_LABEL = "EC PRIVATE KEY"


# ─────────────────────────────────────────────
# Keys
# ─────────────────────────────────────────────

def private_key_from_scalar(scalar: bytes) -> ec.EllipticCurvePrivateKey:
    if len(scalar) != SCALAR_BYTES:
        raise InvalidScalarLength(
            f"Private key scalar must be {SCALAR_BYTES} bytes but received {len(scalar)} bytes"
        )
    return ec.derive_private_key(int.from_bytes(scalar, byteorder="big"), CURVE)


def generate_keypair() -> Tuple[bytes, bytes]:
    """
    Returns (private_key_scalar_32_bytes, compressed_public_key_33_bytes)
    """
    private_key = ec.generate_private_key(CURVE)
    scalar = private_key.private_numbers().private_value.to_bytes(SCALAR_BYTES, byteorder="big")
    return scalar, get_compressed_public_key(private_key.public_key())


def compress_public_key(point: bytes) -> bytes:
    """
    SEC1 point compression: 0x04 ‖ X ‖ Y  ->  (0x02 | 0x03) ‖ X,
    the prefix carrying the parity of Y.
    """
    if len(point) != UNCOMPRESSED_POINT_BYTES:
        raise InvalidPointFormat(
            f"Uncompressed point must be {UNCOMPRESSED_POINT_BYTES} bytes but received {len(point)} bytes"
        )
    if point[0] != UNCOMPRESSED_PREFIX:
        raise InvalidPointFormat(
            f"Expected uncompressed public key format (0x04 prefix), got 0x{point[0]:02x}"
        )

    x = point[1:33]
    y = point[33:65]
    prefix = EVEN_Y_PREFIX if y[-1] % 2 == 0 else ODD_Y_PREFIX
    return bytes([prefix]) + x


def get_compressed_public_key(public_key: ec.EllipticCurvePublicKey) -> bytes:
    # the uncompressed point is the tail of the SubjectPublicKeyInfo BIT STRING
    spki = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return compress_public_key(spki[-UNCOMPRESSED_POINT_BYTES:])


def private_key_pem_from_scalar(scalar: bytes) -> str:
    """
    Wrap a raw 32 byte big-endian scalar into a SEC1 "EC PRIVATE KEY" PEM.

    The embedded public point is computed by the cryptography backend.
    Scalars outside 1..n-1 are rejected by the backend with ValueError.
    """
    private_key = private_key_from_scalar(scalar)
    public_point = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )

    der = concat_bytes([SEC1_HEADER, scalar, SEC1_MIDDLE, public_point])
    logger.debug("sec1_private_key_built", der_len=len(der))
    return pem_armor(der, PEM_LABEL)


def private_key_pem_from_hex(hex_key: str) -> str:
    return private_key_pem_from_scalar(from_hex(hex_key))


# ─────────────────────────────────────────────
# DER <-> raw signatures
# ─────────────────────────────────────────────

def _read_byte(der: bytes, offset: int, what: str) -> int:
    if offset >= len(der):
        raise MalformedSignature(f"Unexpected end of DER signature while reading {what}")
    return der[offset]


def _read_length(der: bytes, offset: int, what: str) -> int:
    length = _read_byte(der, offset, what)
    if length & DER_LONG_FORM_BIT:
        raise UnsupportedDerEncoding(
            f"Long-form DER length 0x{length:02x} for {what} is not supported"
        )
    return length


def _read_integer(der: bytes, offset: int, end: int, name: str) -> Tuple[bytes, int]:
    tag = _read_byte(der, offset, f"{name} tag")
    if tag != DER_INTEGER_TAG:
        raise MalformedSignature(f"Expected INTEGER for {name} component, got tag 0x{tag:02x}")
    length = _read_length(der, offset + 1, f"{name} length")
    start = offset + 2
    if length == 0:
        raise MalformedSignature(f"Empty INTEGER for {name} component")
    if start + length > end:
        raise MalformedSignature(f"{name} component runs past the end of the DER SEQUENCE")
    return der[start : start + length], start + length


def _to_fixed_scalar(value: bytes, name: str) -> bytes:
    # DER prepends 0x00 to keep a high-bit value positive
    if len(value) > SCALAR_BYTES and value[0] == 0x00:
        value = value[1:]
    if len(value) > SCALAR_BYTES:
        raise MalformedSignature(
            f"{name} component is {len(value)} bytes, longer than {SCALAR_BYTES}"
        )
    return value.rjust(SCALAR_BYTES, b"\x00")


def der_signature_to_raw(der: bytes) -> bytes:
    """
    Convert an ASN.1 DER ECDSA signature SEQUENCE { INTEGER r, INTEGER s }
    to the fixed 64 byte r ‖ s form.

    Only short-form lengths are handled. A P-256 signature never needs
    more, so a long-form length raises UnsupportedDerEncoding.
    """
    tag = _read_byte(der, 0, "SEQUENCE tag")
    if tag != DER_SEQUENCE_TAG:
        raise MalformedSignature(f"Invalid DER signature format: expected SEQUENCE, got tag 0x{tag:02x}")

    total_length = _read_length(der, 1, "SEQUENCE length")
    if 2 + total_length > len(der):
        raise MalformedSignature(
            f"DER signature declares {total_length} bytes but only {len(der) - 2} follow"
        )

    end = 2 + total_length
    r, offset = _read_integer(der, 2, end, "r")
    s, offset = _read_integer(der, offset, end, "s")
    if offset != end:
        raise MalformedSignature(
            f"DER SEQUENCE declares {total_length} bytes but r and s occupy {offset - 2}"
        )

    logger.debug("der_signature_decoded", der_len=len(der), r_len=len(r), s_len=len(s))
    return _to_fixed_scalar(r, "r") + _to_fixed_scalar(s, "s")


def _der_integer(component: bytes) -> bytes:
    # minimal encoding, 'highest bit set' padding included
    value = int.from_bytes(component, byteorder="big")
    size = value.bit_length() // 8 + 1
    return bytes([DER_INTEGER_TAG, size]) + value.to_bytes(size, byteorder="big")


def raw_signature_to_der(raw: bytes) -> bytes:
    if len(raw) != RAW_SIGNATURE_BYTES:
        raise InvalidSignatureLength(
            f"Signature must be {RAW_SIGNATURE_BYTES} bytes but received {len(raw)} bytes"
        )
    body = _der_integer(raw[:SCALAR_BYTES]) + _der_integer(raw[SCALAR_BYTES:])
    return bytes([DER_SEQUENCE_TAG, len(body)]) + body


# ─────────────────────────────────────────────
# Crypto primitives
# ─────────────────────────────────────────────

def sign_der(message: bytes, private_key_scalar: bytes) -> bytes:
    private_key = private_key_from_scalar(private_key_scalar)
    return private_key.sign(message, ec.ECDSA(hashes.SHA256()))


def generate_signature(message: bytes, private_key_scalar: bytes) -> Tuple[bytes, bytes]:
    """
    Returns (der_signature, raw_signature_64_bytes) over SHA-256(message)
    """
    der = sign_der(message, private_key_scalar)
    return der, der_signature_to_raw(der)


def sign(message: bytes, private_key_scalar: bytes) -> bytes:
    return generate_signature(message, private_key_scalar)[1]


def verify(message: bytes, signature: bytes, public_key: bytes) -> bool:
    try:
        public = ec.EllipticCurvePublicKey.from_encoded_point(CURVE, public_key)
        public.verify(raw_signature_to_der(signature), message, ec.ECDSA(hashes.SHA256()))
        return True
    except (InvalidSignature, ValueError):
        return False


def verify_der(message: bytes, der_signature: bytes, public_key_pem: bytes) -> bool:
    try:
        public = serialization.load_pem_public_key(public_key_pem)
        if not isinstance(public, ec.EllipticCurvePublicKey):
            return False
        public.verify(der_signature, message, ec.ECDSA(hashes.SHA256()))
        return True
    except (InvalidSignature, UnsupportedAlgorithm, ValueError):
        return False
