"""
Secp256r1 signature-verification instruction data.

Layout (all multi-byte fields little-endian):

    [0]      num_signatures: u8 (always 1)
    [1]      padding: u8
    [2:16]   SignatureOffsets (seven u16)
    [16:49]  compressed public key
    [49:113] raw signature r ‖ s
    [113:]   message

Every instruction index is CURRENT_INSTRUCTION_INDEX: the key, signature
and message all live inside the same instruction.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

import structlog

from .errors import (
    ERRORS_BY_KIND,
    ErrorKind,
    MalformedInstruction,
)

# stdlib-backed: silent until the host application configures logging
logger = structlog.wrap_logger(logging.getLogger(__name__))

SECP256R1_PROGRAM_ID = "Secp256r1SigVerify1111111111111111111111111"

HEADER_BYTES = 2
PUBLIC_KEY_BYTES = 33
SIGNATURE_BYTES = 64
NUM_SIGNATURES = 1
CURRENT_INSTRUCTION_INDEX = 0xFFFF
MAX_MESSAGE_BYTES = 0xFFFF

_OFFSETS_FORMAT = struct.Struct("<7H")
_HEADER_FORMAT = struct.Struct("<BB")

SIGNATURE_OFFSETS_STRUCT_SIZE = _OFFSETS_FORMAT.size
DATA_START = HEADER_BYTES + NUM_SIGNATURES * SIGNATURE_OFFSETS_STRUCT_SIZE


@dataclass(frozen=True)
class SignatureOffsets:
    signature_offset: int
    signature_instruction_index: int
    public_key_offset: int
    public_key_instruction_index: int
    message_data_offset: int
    message_data_size: int
    message_instruction_index: int

    def pack(self) -> bytes:
        return _OFFSETS_FORMAT.pack(
            self.signature_offset,
            self.signature_instruction_index,
            self.public_key_offset,
            self.public_key_instruction_index,
            self.message_data_offset,
            self.message_data_size,
            self.message_instruction_index,
        )

    @classmethod
    def unpack(cls, data: bytes, offset: int = 0) -> "SignatureOffsets":
        if offset + SIGNATURE_OFFSETS_STRUCT_SIZE > len(data):
            raise MalformedInstruction("Not enough data for signature offsets")
        return cls(*_OFFSETS_FORMAT.unpack_from(data, offset))

    @classmethod
    def for_message(cls, message_size: int) -> "SignatureOffsets":
        """Offsets of a single inline key/signature/message triple."""
        public_key_offset = DATA_START
        signature_offset = public_key_offset + PUBLIC_KEY_BYTES
        message_data_offset = signature_offset + SIGNATURE_BYTES
        return cls(
            signature_offset=signature_offset,
            signature_instruction_index=CURRENT_INSTRUCTION_INDEX,
            public_key_offset=public_key_offset,
            public_key_instruction_index=CURRENT_INSTRUCTION_INDEX,
            message_data_offset=message_data_offset,
            message_data_size=message_size,
            message_instruction_index=CURRENT_INSTRUCTION_INDEX,
        )


# ─────────────────────────────────────────────
# Encoding
# ─────────────────────────────────────────────

def validate_instruction_inputs(
    public_key: bytes,
    signature: bytes,
    message: bytes,
) -> ErrorKind | None:
    """Return the first failing check as an ErrorKind, or None if all pass."""
    if len(public_key) != PUBLIC_KEY_BYTES:
        return ErrorKind.INVALID_KEY_LENGTH
    if len(signature) != SIGNATURE_BYTES:
        return ErrorKind.INVALID_SIGNATURE_LENGTH
    if len(message) > MAX_MESSAGE_BYTES:
        return ErrorKind.MESSAGE_TOO_LARGE
    return None


def _validation_message(kind: ErrorKind, public_key: bytes, signature: bytes, message: bytes) -> str:
    if kind is ErrorKind.INVALID_KEY_LENGTH:
        return f"Public Key must be {PUBLIC_KEY_BYTES} bytes but received {len(public_key)} bytes"
    if kind is ErrorKind.INVALID_SIGNATURE_LENGTH:
        return f"Signature must be {SIGNATURE_BYTES} bytes but received {len(signature)} bytes"
    return f"Message must be at most {MAX_MESSAGE_BYTES} bytes but received {len(message)} bytes"


def build_instruction_data(
    public_key: bytes,
    signature: bytes,
    message: bytes,
) -> bytes:
    """
    Build the verification instruction data for one compressed public key
    (33 bytes), one raw signature (64 bytes) and a message of up to
    65535 bytes. The result is DATA_START + 97 + len(message) bytes.
    """
    kind = validate_instruction_inputs(public_key, signature, message)
    if kind is not None:
        raise ERRORS_BY_KIND[kind](_validation_message(kind, public_key, signature, message))

    offsets = SignatureOffsets.for_message(len(message))
    total = offsets.message_data_offset + len(message)

    data = bytearray(total)
    _HEADER_FORMAT.pack_into(data, 0, NUM_SIGNATURES, 0)
    data[HEADER_BYTES:DATA_START] = offsets.pack()
    data[offsets.public_key_offset : offsets.signature_offset] = public_key
    data[offsets.signature_offset : offsets.message_data_offset] = signature
    data[offsets.message_data_offset : total] = message

    logger.debug(
        "secp256r1_instruction_built",
        total_len=total,
        message_len=len(message),
        signature_offset=offsets.signature_offset,
        message_data_offset=offsets.message_data_offset,
    )
    return bytes(data)


# ─────────────────────────────────────────────
# Introspection
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class Secp256r1Instruction:
    data: bytes
    num_signatures: int
    offsets: tuple[SignatureOffsets, ...]

    def _offsets_at(self, index: int) -> SignatureOffsets:
        if not 0 <= index < self.num_signatures:
            raise IndexError(f"Signature index {index} out of range")
        return self.offsets[index]

    def get_signer(self, index: int = 0) -> bytes:
        o = self._offsets_at(index)
        return self.data[o.public_key_offset : o.public_key_offset + PUBLIC_KEY_BYTES]

    def get_signature(self, index: int = 0) -> bytes:
        o = self._offsets_at(index)
        return self.data[o.signature_offset : o.signature_offset + SIGNATURE_BYTES]

    def get_message_data(self, index: int = 0) -> bytes:
        o = self._offsets_at(index)
        return self.data[o.message_data_offset : o.message_data_offset + o.message_data_size]


def _check_range(data: bytes, start: int, size: int, what: str) -> None:
    if start + size > len(data):
        raise MalformedInstruction(
            f"{what} at offset {start} (+{size}) extends beyond {len(data)} bytes of instruction data"
        )


def parse_instruction_data(data: bytes) -> Secp256r1Instruction:
    if len(data) < DATA_START:
        raise MalformedInstruction(
            f"Instruction data must be at least {DATA_START} bytes but received {len(data)} bytes"
        )

    num_signatures, _ = _HEADER_FORMAT.unpack_from(data, 0)
    if num_signatures != NUM_SIGNATURES:
        raise MalformedInstruction(
            f"Expected {NUM_SIGNATURES} signature but instruction declares {num_signatures}"
        )

    offsets = SignatureOffsets.unpack(data, HEADER_BYTES)
    for name in (
        "signature_instruction_index",
        "public_key_instruction_index",
        "message_instruction_index",
    ):
        if getattr(offsets, name) != CURRENT_INSTRUCTION_INDEX:
            raise MalformedInstruction(
                f"{name} must reference the current instruction (0x{CURRENT_INSTRUCTION_INDEX:04x})"
            )

    _check_range(data, offsets.public_key_offset, PUBLIC_KEY_BYTES, "Public key")
    _check_range(data, offsets.signature_offset, SIGNATURE_BYTES, "Signature")
    _check_range(data, offsets.message_data_offset, offsets.message_data_size, "Message")

    logger.debug(
        "secp256r1_instruction_parsed",
        total_len=len(data),
        message_len=offsets.message_data_size,
    )
    return Secp256r1Instruction(
        data=bytes(data),
        num_signatures=num_signatures,
        offsets=(offsets,),
    )
