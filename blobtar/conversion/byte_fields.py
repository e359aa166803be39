from typing import Union


def decode_string(data: bytes, offset: int = 0, length: Union[int, None] = None) -> str:
    """Decode a NUL-terminated text field.

    Everything up to the first NUL byte (or the whole field if there is none)
    is decoded as UTF-8. Bytes that are not valid UTF-8 on their own, such as
    half of a character split between the name and prefix fields, are kept as
    surrogate escapes so that write_string restores them exactly.
    """
    if length is None:
        length = len(data) - offset
    field = bytes(data[offset:offset + length])
    nul = field.find(b"\x00")
    if nul >= 0:
        field = field[:nul]
    return field.decode("utf-8", errors="surrogateescape")


def decode_octal(data: bytes, offset: int, length: int) -> int:
    """Parse a NUL-terminated octal field.

    Bytes that are not octal digits (spaces, garbage) are skipped rather than
    failing the whole field.
    """
    value = 0
    for byte in data[offset:offset + length]:
        if byte == 0:
            break
        if byte < 0x30 or byte > 0x37:
            continue
        value = (value << 3) | (byte - 0x30)
    return value


def write_string(value: str, output, offset: int = 0, length: Union[int, None] = None) -> None:
    """Write a NUL-terminated UTF-8 string into output[offset:offset + length].

    A value that does not fit is truncated to the field width.
    """
    if length is None:
        length = len(output) - offset
    encoded = value.encode("utf-8", errors="surrogateescape")[:length]
    output[offset:offset + len(encoded)] = encoded
    if len(encoded) < length:
        output[offset + len(encoded)] = 0


def write_octal(value: int, output, offset: int = 0, length: Union[int, None] = None) -> None:
    """Write a right-justified, zero-padded octal number.

    If the number needs fewer digits than the field holds, the last byte of the
    field is a NUL terminator. Otherwise the low-order digits fill the field.
    """
    if length is None:
        length = len(output) - offset
    if value < 0:
        raise ValueError(f"Cannot write negative value as octal: {value}")
    num_digits = len(format(value, "o"))
    if num_digits < length:
        length -= 1
        output[offset + length] = 0
    # the low-order digits, left-padded with zeros
    digits = format(value, "o").rjust(length, "0")[-length:]
    output[offset:offset + length] = digits.encode("ascii")
