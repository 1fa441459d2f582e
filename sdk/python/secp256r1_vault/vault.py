from __future__ import annotations

import logging
from typing import List, Tuple

import structlog

from .errors import InvalidKeyLength
from .instruction import PUBLIC_KEY_BYTES, parse_instruction_data
from .utils import (
    ADDRESS_BYTES,
    address_to_bytes,
    bytes_to_address,
    concat_bytes,
    i64_le,
    u8,
    u64_le,
)

# stdlib-backed: silent until the host application configures logging
logger = structlog.wrap_logger(logging.getLogger(__name__))

VAULT_PROGRAM_ID = "91tm9dq8Q3bb73eKQJZqKYr5BzftiMuybrdvKeBy1U6x"
VAULT_SEED = b"vault"

DEPOSIT_DISCRIMINATOR = 0
WITHDRAW_DISCRIMINATOR = 1

DEPOSIT_DATA_BYTES = 1 + PUBLIC_KEY_BYTES + 8
WITHDRAW_MESSAGE_BYTES = ADDRESS_BYTES + 8


class VaultAuthorizationError(ValueError):
    pass


def _check_public_key(public_key: bytes) -> None:
    if len(public_key) != PUBLIC_KEY_BYTES:
        raise InvalidKeyLength(
            f"Public Key must be {PUBLIC_KEY_BYTES} bytes but received {len(public_key)} bytes"
        )


def vault_seeds(public_key: bytes) -> List[bytes]:
    """
    PDA seeds of the vault owned by a compressed P-256 key. The key is
    split after its prefix byte since a single seed is capped at 32 bytes.
    """
    _check_public_key(public_key)
    return [VAULT_SEED, public_key[:1], public_key[1:PUBLIC_KEY_BYTES]]


# ─────────────────────────────────────────────
# Instruction data
# ─────────────────────────────────────────────

def encode_deposit_data(public_key: bytes, amount: int) -> bytes:
    _check_public_key(public_key)
    return concat_bytes([
        u8(DEPOSIT_DISCRIMINATOR),
        public_key,
        u64_le(amount),
    ])


def decode_deposit_data(data: bytes) -> Tuple[bytes, int]:
    if len(data) != DEPOSIT_DATA_BYTES:
        raise ValueError(
            f"Deposit data must be {DEPOSIT_DATA_BYTES} bytes but received {len(data)} bytes"
        )
    if data[0] != DEPOSIT_DISCRIMINATOR:
        raise ValueError(f"Invalid deposit discriminator: {data[0]}")

    public_key = data[1 : 1 + PUBLIC_KEY_BYTES]
    amount = int.from_bytes(data[1 + PUBLIC_KEY_BYTES :], byteorder="little", signed=False)
    return public_key, amount


def encode_withdraw_data(bump: int) -> bytes:
    return concat_bytes([u8(WITHDRAW_DISCRIMINATOR), u8(bump)])


# ─────────────────────────────────────────────
# Withdraw authorization
# ─────────────────────────────────────────────

def build_withdraw_message(payer: str | bytes, expiry: int) -> bytes:
    """
    The message the vault key signs to release funds: the fee payer's
    32 byte address followed by a unix-seconds expiry as i64 little-endian.
    """
    return concat_bytes([address_to_bytes(payer), i64_le(expiry)])


def parse_withdraw_message(message: bytes) -> Tuple[bytes, int]:
    if len(message) != WITHDRAW_MESSAGE_BYTES:
        raise VaultAuthorizationError(
            f"Withdraw message must be {WITHDRAW_MESSAGE_BYTES} bytes but received {len(message)} bytes"
        )
    payer = message[:ADDRESS_BYTES]
    expiry = int.from_bytes(message[ADDRESS_BYTES:], byteorder="little", signed=True)
    return payer, expiry


def check_withdraw_authorization(
    instruction_data: bytes,
    payer: str | bytes,
    now: int,
) -> bytes:
    """
    Apply the vault's withdraw checks to the signature instruction that
    accompanies a withdraw and return the signer's compressed public key.

    The signature itself is checked by the verification program, not here.
    """
    instruction = parse_instruction_data(instruction_data)
    signer = instruction.get_signer(0)

    message_payer, expiry = parse_withdraw_message(instruction.get_message_data(0))
    if message_payer != address_to_bytes(payer):
        raise VaultAuthorizationError(
            f"Signed payer {bytes_to_address(message_payer)} does not match the transaction payer"
        )
    if now > expiry:
        raise VaultAuthorizationError(f"Withdraw authorization expired at {expiry}, now {now}")

    logger.debug("withdraw_authorized", expiry=expiry, now=now)
    return signer
