from __future__ import annotations

import base64
from typing import Iterable

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
ADDRESS_BYTES = 32
PEM_LINE_WIDTH = 64


def u8(n: int) -> bytes:
    if not 0 <= n <= 0xFF:
        raise ValueError(f"u8: {n} out of range")
    return bytes([n])


def u64_le(n: int) -> bytes:
    if n < 0:
        raise ValueError("u64_le: n must be non-negative")
    if n > 0xFFFFFFFFFFFFFFFF:
        raise ValueError("u64_le: n exceeds uint64")
    return int(n).to_bytes(8, byteorder="little", signed=False)


def i64_le(n: int) -> bytes:
    if not -(1 << 63) <= n < (1 << 63):
        raise ValueError("i64_le: n exceeds int64")
    return int(n).to_bytes(8, byteorder="little", signed=True)


def concat_bytes(parts: Iterable[bytes]) -> bytes:
    return b"".join(parts)


def from_hex(h: str) -> bytes:
    if h.startswith(("0x", "0X")):
        h = h[2:]
    if len(h) % 2 != 0:
        raise ValueError("from_hex: hex string must have even length")
    return bytes.fromhex(h)


def pem_armor(der: bytes, label: str) -> str:
    """
    Base64 (RFC 4648 §4) body wrapped at 64 characters between
    BEGIN/END banners, lines joined with "\\n" and no trailing newline.
    """
    body = base64.b64encode(der).decode("ascii")
    lines = [f"-----BEGIN {label}-----"]
    lines.extend(body[i : i + PEM_LINE_WIDTH] for i in range(0, len(body), PEM_LINE_WIDTH))
    lines.append(f"-----END {label}-----")
    return "\n".join(lines)


def base58_encode(data: bytes) -> str:
    value = int.from_bytes(data, byteorder="big")
    digits = []
    while value:
        value, rem = divmod(value, 58)
        digits.append(BASE58_ALPHABET[rem])
    # each leading zero byte is a literal "1"
    zeros = len(data) - len(data.lstrip(b"\x00"))
    return "1" * zeros + "".join(reversed(digits))


def base58_decode(s: str, size: int = ADDRESS_BYTES) -> bytes:
    """
    Decode base58 text into exactly ``size`` bytes; any other decoded
    length is rejected.
    """
    value = 0
    for ch in s:
        digit = BASE58_ALPHABET.find(ch)
        if digit < 0:
            raise ValueError(f"Invalid base58 character: {ch}")
        value = value * 58 + digit

    zeros = len(s) - len(s.lstrip("1"))
    raw = bytes(zeros) + value.to_bytes((value.bit_length() + 7) // 8, byteorder="big")
    if len(raw) != size:
        raise ValueError(f"Base58 value decodes to {len(raw)} bytes, expected {size}")
    return raw


def address_to_bytes(address: str | bytes) -> bytes:
    """
    Decode a base58 account address into its 32 raw bytes. Raw bytes are
    passed through after a length check.
    """
    if isinstance(address, str):
        return base58_decode(address, ADDRESS_BYTES)
    if len(address) != ADDRESS_BYTES:
        raise ValueError(f"Address must be {ADDRESS_BYTES} bytes but received {len(address)} bytes")
    return bytes(address)


def bytes_to_address(raw: bytes) -> str:
    if len(raw) != ADDRESS_BYTES:
        raise ValueError(f"Address must be {ADDRESS_BYTES} bytes but received {len(raw)} bytes")
    return base58_encode(raw)
