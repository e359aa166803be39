from typing import Tuple


MAX_NAME_LENGTH = 100
MAX_PREFIX_LENGTH = 155
MAX_PATH_LENGTH = MAX_NAME_LENGTH + MAX_PREFIX_LENGTH


class PathTooLongError(ValueError):
    def __init__(self, length: int):
        super().__init__(f"Path is too long: {length} > {MAX_PATH_LENGTH} bytes")
        self.length = length


def encode_path(path: str) -> bytes:
    return path.encode("utf-8", errors="surrogateescape")


def decode_path(data: bytes) -> str:
    return data.decode("utf-8", errors="surrogateescape")


def normalize_path(path: str) -> str:
    """
    Collapse empty, '.' and '..' segments of a '/'-separated path.

    A '..' with no preceding segment to cancel is kept. Leading and trailing
    slashes are dropped; callers add them back where they matter.
    """
    segments = []
    for segment in path.split("/"):
        if segment == "" or segment == ".":
            continue
        if segment == ".." and segments and segments[-1] != "..":
            segments.pop()
            continue
        segments.append(segment)
    return "/".join(segments)


def split_filename(path: str) -> Tuple[str, str]:
    """
    Split a path into the (name, prefix) header fields.

    Lengths are counted in UTF-8 bytes. The split is positional: name is the
    last 100 bytes and prefix the rest, which may leave prefix ending in the
    middle of a segment or even of a multi-byte character. A split character
    is carried as surrogate escapes in both halves and joins back in
    TarHeader.path.
    """
    encoded = encode_path(path)
    if len(encoded) > MAX_PATH_LENGTH:
        raise PathTooLongError(len(encoded))
    if len(encoded) <= MAX_NAME_LENGTH:
        return path, ""
    split_index = len(encoded) - MAX_NAME_LENGTH
    return decode_path(encoded[split_index:]), decode_path(encoded[:split_index])
