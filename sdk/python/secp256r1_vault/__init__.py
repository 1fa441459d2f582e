"""
secp256r1 vault SDK (Python)

Builds the P-256 signature-verification instruction data used to authorize
vault withdrawals. All operations are local: no network, no telemetry.
"""

from .errors import (
    ErrorKind,
    Secp256r1Error,
    InvalidPointFormat,
    InvalidKeyLength,
    InvalidSignatureLength,
    InvalidScalarLength,
    MalformedSignature,
    UnsupportedDerEncoding,
    MessageTooLarge,
    MalformedInstruction,
)
from .core import (
    generate_keypair,
    private_key_from_scalar,
    compress_public_key,
    get_compressed_public_key,
    private_key_pem_from_scalar,
    private_key_pem_from_hex,
    der_signature_to_raw,
    raw_signature_to_der,
    sign_der,
    generate_signature,
    sign,
    verify,
    verify_der,
)
from .instruction import (
    SECP256R1_PROGRAM_ID,
    CURRENT_INSTRUCTION_INDEX,
    DATA_START,
    MAX_MESSAGE_BYTES,
    SignatureOffsets,
    Secp256r1Instruction,
    validate_instruction_inputs,
    build_instruction_data,
    parse_instruction_data,
)
from .vault import (
    VAULT_PROGRAM_ID,
    VaultAuthorizationError,
    vault_seeds,
    encode_deposit_data,
    decode_deposit_data,
    encode_withdraw_data,
    build_withdraw_message,
    parse_withdraw_message,
    check_withdraw_authorization,
)

__all__ = [
    "ErrorKind",
    "Secp256r1Error",
    "InvalidPointFormat",
    "InvalidKeyLength",
    "InvalidSignatureLength",
    "InvalidScalarLength",
    "MalformedSignature",
    "UnsupportedDerEncoding",
    "MessageTooLarge",
    "MalformedInstruction",
    "generate_keypair",
    "private_key_from_scalar",
    "compress_public_key",
    "get_compressed_public_key",
    "private_key_pem_from_scalar",
    "private_key_pem_from_hex",
    "der_signature_to_raw",
    "raw_signature_to_der",
    "sign_der",
    "generate_signature",
    "sign",
    "verify",
    "verify_der",
    "SECP256R1_PROGRAM_ID",
    "CURRENT_INSTRUCTION_INDEX",
    "DATA_START",
    "MAX_MESSAGE_BYTES",
    "SignatureOffsets",
    "Secp256r1Instruction",
    "validate_instruction_inputs",
    "build_instruction_data",
    "parse_instruction_data",
    "VAULT_PROGRAM_ID",
    "VaultAuthorizationError",
    "vault_seeds",
    "encode_deposit_data",
    "decode_deposit_data",
    "encode_withdraw_data",
    "build_withdraw_message",
    "parse_withdraw_message",
    "check_withdraw_authorization",
]
