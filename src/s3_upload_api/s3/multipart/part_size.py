MIN_PART_SIZE = 5 * 1024 * 1024  # 5MB, every part but the last must be at least this
MAX_PART_SIZE = 5 * 1025 * 1024 * 1024
# The hard cap is 10000 parts, 9999 keeps the part size from rounding too small
# to fit the whole object.
MAX_PART_COUNT = 9999
# Highest part number the server accepts.
MAX_PART_NUMBER = 10000


def calculate_part_size(total_size: int) -> int:
    """Part size used for every part of an upload of total_size bytes (the last may be shorter)."""
    if total_size < 0:
        raise ValueError(f"Invalid total size: {total_size}")
    part_size = total_size // MAX_PART_COUNT
    if part_size > MAX_PART_SIZE:
        return MAX_PART_SIZE
    return max(MIN_PART_SIZE, part_size)
