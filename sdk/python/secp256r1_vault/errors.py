from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INVALID_POINT_FORMAT = "invalid_point_format"
    INVALID_KEY_LENGTH = "invalid_key_length"
    INVALID_SIGNATURE_LENGTH = "invalid_signature_length"
    INVALID_SCALAR_LENGTH = "invalid_scalar_length"
    MALFORMED_SIGNATURE = "malformed_signature"
    UNSUPPORTED_DER_ENCODING = "unsupported_der_encoding"
    MESSAGE_TOO_LARGE = "message_too_large"
    MALFORMED_INSTRUCTION = "malformed_instruction"


class Secp256r1Error(ValueError):
    """
    Base class for every validation failure raised by this package.
    Branch on ``err.kind`` to tell failure modes apart.
    """

    kind: ErrorKind


class InvalidPointFormat(Secp256r1Error):
    kind = ErrorKind.INVALID_POINT_FORMAT


class InvalidKeyLength(Secp256r1Error):
    kind = ErrorKind.INVALID_KEY_LENGTH


class InvalidSignatureLength(Secp256r1Error):
    kind = ErrorKind.INVALID_SIGNATURE_LENGTH


class InvalidScalarLength(Secp256r1Error):
    kind = ErrorKind.INVALID_SCALAR_LENGTH


class MalformedSignature(Secp256r1Error):
    kind = ErrorKind.MALFORMED_SIGNATURE


class UnsupportedDerEncoding(Secp256r1Error):
    kind = ErrorKind.UNSUPPORTED_DER_ENCODING


class MessageTooLarge(Secp256r1Error):
    kind = ErrorKind.MESSAGE_TOO_LARGE


class MalformedInstruction(Secp256r1Error):
    kind = ErrorKind.MALFORMED_INSTRUCTION


ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (
        InvalidPointFormat,
        InvalidKeyLength,
        InvalidSignatureLength,
        InvalidScalarLength,
        MalformedSignature,
        UnsupportedDerEncoding,
        MessageTooLarge,
        MalformedInstruction,
    )
}
