"""Bech32 encoding and account addresses."""

from __future__ import annotations

from collections.abc import Iterable

from feeshare.errors import InvalidAddressError

BECH32_PREFIX = "cosmos"
MAX_ADDRESS_LENGTH = 255
MAX_BECH32_LENGTH = 1023

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_CHARSET_MAP = {char: index for index, char in enumerate(CHARSET)}
_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


def _polymod(values: Iterable[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATORS):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _create_checksum(hrp: str, data: list[int]) -> list[int]:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    result: list[int] = []
    max_value = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError(f"invalid data value {value}")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((acc >> bits) & max_value)
    if pad:
        if bits:
            result.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (acc << (to_bits - bits)) & max_value:
        raise ValueError("invalid padding")
    return result


def bech32_encode(hrp: str, data: bytes) -> str:
    """Encode bytes under a human readable part."""
    if not hrp:
        raise ValueError("human readable part cannot be empty")
    hrp = hrp.lower()
    five_bit = _convert_bits(data, 8, 5, pad=True)
    combined = five_bit + _create_checksum(hrp, five_bit)
    encoded = hrp + "1" + "".join(CHARSET[d] for d in combined)
    if len(encoded) > MAX_BECH32_LENGTH:
        raise ValueError(f"encoded string exceeds {MAX_BECH32_LENGTH} characters")
    return encoded


def bech32_decode(bech: str) -> tuple[str, bytes]:
    """Decode a bech32 string into its human readable part and bytes."""
    if len(bech) > MAX_BECH32_LENGTH:
        raise ValueError(f"string exceeds {MAX_BECH32_LENGTH} characters")
    if len(bech) < 8:
        raise ValueError(f"invalid bech32 string length {len(bech)}")
    if any(ord(c) < 33 or ord(c) > 126 for c in bech):
        raise ValueError("invalid character in string")
    if bech.lower() != bech and bech.upper() != bech:
        raise ValueError("string not all lowercase or all uppercase")
    bech = bech.lower()
    separator = bech.rfind("1")
    if separator < 1 or separator + 7 > len(bech):
        raise ValueError("invalid separator position")
    hrp, data_part = bech[:separator], bech[separator + 1 :]
    try:
        data = [_CHARSET_MAP[c] for c in data_part]
    except KeyError as exc:
        raise ValueError(f"invalid character not part of charset: {exc.args[0]!r}") from None
    if _polymod(_hrp_expand(hrp) + data) != 1:
        raise ValueError("invalid checksum")
    return hrp, bytes(_convert_bits(data[:-6], 5, 8, pad=False))


class AccAddress(bytes):
    """An account address: raw bytes shown in bech32 form."""

    @classmethod
    def from_bech32(cls, address: str, prefix: str = BECH32_PREFIX) -> AccAddress:
        """Parse a bech32 address carrying the given prefix."""
        if not address.strip():
            raise InvalidAddressError("empty address string is not allowed")
        try:
            hrp, data = bech32_decode(address)
        except ValueError as exc:
            raise InvalidAddressError(f"decoding bech32 failed: {exc}") from exc
        if hrp != prefix:
            raise InvalidAddressError(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
        if not data:
            raise InvalidAddressError("addresses cannot be empty")
        if len(data) > MAX_ADDRESS_LENGTH:
            raise InvalidAddressError(f"address max length is {MAX_ADDRESS_LENGTH}, got {len(data)}")
        return cls(data)

    def to_bech32(self, prefix: str = BECH32_PREFIX) -> str:
        """Return the bech32 form, or an empty string for an empty address."""
        if self.is_empty():
            return ""
        return bech32_encode(prefix, bytes(self))

    def is_empty(self) -> bool:
        return len(self) == 0

    def __str__(self) -> str:
        return self.to_bech32()

    def __repr__(self) -> str:
        return f"AccAddress({self.to_bech32()!r})"