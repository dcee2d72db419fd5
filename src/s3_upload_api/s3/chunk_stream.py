from typing import BinaryIO, Iterable, Iterator

_READ_SIZE = 1024 * 1024


def _iter_source(source: BinaryIO | Iterable[bytes]) -> Iterator[bytes]:
    read = getattr(source, "read", None)
    if read is not None:
        while True:
            chunk = read(_READ_SIZE)
            if not chunk:
                return
            yield chunk
    else:
        yield from source  # type: ignore[misc]


def iter_blocks(source: BinaryIO | Iterable[bytes], block_size: int) -> Iterator[bytes]:
    """Regroup arbitrary chunks into blocks of exactly block_size bytes.

    The final block holds whatever remains and is never padded. An empty source
    yields nothing. Chunks are pulled from the source only when the next block
    is requested.
    """
    if block_size <= 0:
        raise ValueError(f"Invalid block size: {block_size}")
    buffer = bytearray()
    for chunk in _iter_source(source):
        if not chunk:
            continue
        buffer += chunk
        while len(buffer) >= block_size:
            block = bytes(buffer[:block_size])
            del buffer[:block_size]
            yield block
    if buffer:
        yield bytes(buffer)
