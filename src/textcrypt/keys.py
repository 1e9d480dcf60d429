"""
Key Files for textcrypt

Reads key material and inputs from files or stdin, and writes generated
key bundles out to a directory. Keys are never stored or rotated here.
"""

import io
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List, Union
import structlog

from .errors import StreamIOError
from .signer import KeyBundle

logger = structlog.get_logger()

STDIN = "-"


def get_reader(source: str) -> BinaryIO:
    """Open a file for binary reading, or stdin for "-"."""
    if source == STDIN:
        return sys.stdin.buffer
    try:
        return open(source, "rb")
    except OSError as e:
        raise StreamIOError(f"Failed to open {source}: {e}") from e


@contextmanager
def open_input(source: str) -> Iterator[BinaryIO]:
    """Open an input for the duration of a block; stdin is left open."""
    reader = get_reader(source)
    try:
        yield reader
    finally:
        if source != STDIN:
            reader.close()


def read_content(source: str) -> bytes:
    """Read a whole file (or stdin) into memory."""
    with open_input(source) as reader:
        try:
            return reader.read()
        except OSError as e:
            raise StreamIOError(f"Failed to read {source}: {e}") from e


def bytes_reader(data: Union[bytes, str]) -> BinaryIO:
    """Wrap in-memory data as a readable stream."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return io.BytesIO(data)


def write_key_bundle(bundle: KeyBundle, directory: Union[str, Path]) -> List[Path]:
    """
    Write each key of a bundle to <directory>/<logical name>.

    Returns the written paths, sorted by name.
    """
    output_dir = Path(directory)
    if not output_dir.is_dir():
        raise StreamIOError(f"Output path is not a directory: {output_dir}")

    written = []
    for name, material in sorted(bundle.items()):
        path = output_dir / name
        try:
            path.write_bytes(material)
        except OSError as e:
            raise StreamIOError(f"Failed to write {path}: {e}") from e
        written.append(path)

    logger.info("key_bundle_written",
                directory=str(output_dir),
                files=[p.name for p in written])
    return written
