import numpy as np
from ..constants import HEADER_SIZE
from .byte_fields import decode_octal


CHECKSUM_OFFSET = 148
CHECKSUM_LENGTH = 8

# Up to 7 octal digits, 3 bits per digit
CHECKSUM_PRECISION = 7 * 3


def generate_checksum(data: bytes, precision: int = CHECKSUM_PRECISION) -> int:
    # From https://en.wikipedia.org/wiki/Tar_(computing)
    # The checksum is calculated by taking the sum of the unsigned byte values
    # of the header record with the eight checksum bytes taken to be ASCII
    # spaces (decimal value 32).
    mask = (2 << precision) - 1
    values = np.frombuffer(bytes(data), dtype=np.uint8).astype(np.int64)
    values[CHECKSUM_OFFSET:CHECKSUM_OFFSET + CHECKSUM_LENGTH] = 0x20
    return int(values.sum()) & mask


def verify_checksum(block: bytes) -> bool:
    """Whether the checksum stored in a header block matches its contents."""
    stored = decode_octal(block, CHECKSUM_OFFSET, CHECKSUM_LENGTH)
    return stored == generate_checksum(block[:HEADER_SIZE])


def is_zeroed(data: bytes) -> bool:
    return not np.any(np.frombuffer(bytes(data), dtype=np.uint8))
