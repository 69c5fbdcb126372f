"""Bit-width arithmetic shared by validation, loading and statistics."""

from pirload.config.settings import MAX_BIT_WIDTH

UINT64_MAX = (1 << 64) - 1


def max_value_for(bit_width: int) -> int:
    """
    Largest entry representable with bit_width bits.

    Args:
        bit_width: Bits per entry, 1 to 64.

    Returns:
        2^bit_width - 1.

    Raises:
        ValueError: If bit_width is outside [1, 64].
    """
    if not 1 <= bit_width <= MAX_BIT_WIDTH:
        msg = f"bit_width must be in [1, {MAX_BIT_WIDTH}], got: {bit_width}"
        raise ValueError(msg)
    return (1 << bit_width) - 1


def calculate_bit_size(value: int) -> int:
    """
    Minimum number of bits needed to store value.

    Zero still needs one bit.

    Raises:
        ValueError: If value is negative.
    """
    if value < 0:
        msg = f"value must be non-negative, got: {value}"
        raise ValueError(msg)
    if value == 0:
        return 1
    return value.bit_length()


def storage_bytes(row_count: int, bit_width: int) -> int:
    """Packed database size in whole bytes, N * d / 8 rounded down."""
    return (row_count * bit_width) // 8
