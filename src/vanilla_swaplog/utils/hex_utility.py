"""
Hex helpers for raw log fields.

Log fields come in different shapes depending on the provider:
- As bytes objects (web3.py returns HexBytes): b'\x00\x00...\x0a'
- As hex strings from a raw JSON-RPC response: "0x000...0a"
"""

from typing import Any

WORD_HEX_LENGTH = 64


def to_hex_string(value: Any) -> str | None:
    """
    Normalize a bytes or hex string value to a "0x" prefixed hex string.

    :param value: bytes, str, or anything else
    :return: Hex string, or None if the value is neither bytes nor str
    """
    if isinstance(value, (bytes, bytearray)):
        return '0x' + bytes(value).hex()
    if isinstance(value, str):
        return value
    return None


def parse_hex_word(data: str, index: int) -> int:
    """
    Parse the 256-bit big-endian word at a position of "0x" prefixed data.

    Word 0 starts right after the two-character prefix.

    :param data: Hex string including its "0x" prefix
    :param index: Zero-based word index
    :return: Unsigned integer value of the word
    :raises ValueError: If the word is missing or not valid hex
    """
    start = 2 + index * WORD_HEX_LENGTH
    word = data[start:start + WORD_HEX_LENGTH]
    if not word:
        raise ValueError(f"Log data has no word at index {index}: {data!r}")
    return int(word, 16)


def parse_quantity(value: Any, default: int = -1) -> int:
    """
    Parse a JSON-RPC quantity (int or "0x" hex string).

    :param value: The quantity to parse
    :param default: Returned when the value is missing
    :return: Integer value
    """
    if value is None:
        return default
    if isinstance(value, str):
        return int(value, 16) if value.startswith('0x') else int(value)
    return int(value)
