"""Binary codec for float32 embedding vectors.

Vectors are stored as a flat little-endian float32 buffer, four bytes per
element, with no header. The element count is ``len(data) // 4``.
"""

import struct
from collections.abc import Sequence

from vecbridge.exceptions import CodecError, ErrorCode

FLOAT32_SIZE = 4


def encode(values: Sequence[float]) -> bytes:
    """Encode a vector as little-endian float32 bytes.

    Args:
        values: Vector elements, in order.

    Returns:
        ``4 * len(values)`` bytes.

    Raises:
        CodecError: If an element is not a number or lies outside the
            float32 range.
    """
    try:
        return struct.pack(f"<{len(values)}f", *values)
    except (struct.error, OverflowError) as e:
        raise CodecError(
            f"Vector cannot be encoded as float32: {e}",
            code=ErrorCode.UNENCODABLE_VALUE,
            details={"length": len(values)},
        ) from e


def decode(data: bytes) -> list[float]:
    """Decode little-endian float32 bytes back into a vector.

    Args:
        data: Buffer produced by :func:`encode`.

    Returns:
        List of ``len(data) // 4`` floats.

    Raises:
        CodecError: If the buffer length is not a multiple of four.
    """
    if len(data) % FLOAT32_SIZE:
        raise CodecError(
            f"Embedding buffer of {len(data)} bytes is not a multiple of {FLOAT32_SIZE}",
            code=ErrorCode.TRUNCATED_INPUT,
            details={"length": len(data)},
        )
    return list(struct.unpack(f"<{len(data) // FLOAT32_SIZE}f", data))
