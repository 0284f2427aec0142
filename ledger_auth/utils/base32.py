"""
Base32 codec for second factor secrets

Encodes with the RFC 4648 alphabet (A-Z, 2-7) without emitting padding.
Decoding is deliberately lenient: it is case-insensitive and skips any
character outside the alphabet, so secrets pasted with spaces, hyphens or
trailing '=' still decode. It never raises.
"""

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_DECODE_MAP = {char: index for index, char in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """
    Encode bytes to unpadded Base32 text

    Args:
        data: Bytes to encode

    Returns:
        Base32 text, most significant bits first; the final symbol is
        right-padded with zero bits
    """
    symbols = []
    buffer = 0
    bits = 0

    for byte in data:
        buffer = (buffer << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            symbols.append(ALPHABET[(buffer >> bits) & 0x1F])
        buffer &= (1 << bits) - 1

    if bits:
        symbols.append(ALPHABET[(buffer << (5 - bits)) & 0x1F])

    return "".join(symbols)


def decode(text: str) -> bytes:
    """
    Decode Base32 text to bytes

    Args:
        text: Base32 text in any case; unknown characters are ignored

    Returns:
        Decoded bytes; trailing bits that do not fill a byte are dropped
    """
    result = bytearray()
    buffer = 0
    bits = 0

    for char in text.upper():
        value = _DECODE_MAP.get(char)
        if value is None:
            continue
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            result.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1

    return bytes(result)
