"""
Filesystem operations for the playout input file and the RDS output files.

Outputs are written UTF-8 without a BOM, each through a temporary file
and an atomic rename so an encoder polling the files never sees a partial
write.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from rdstext.models.schemas import OutputBundle
from rdstext.utils.exceptions import FilesystemError, InputFileError

logger = logging.getLogger(__name__)

BOM = "\uFEFF"


@dataclass(frozen=True)
class OutputNames:
    """File names for the three output strings."""

    rt: str = "rt.txt"
    rt_plus: str = "rtplus.txt"
    prefix: str = "prefix.txt"


def decode_input(data: bytes) -> str:
    """Decode UTF-8 input, dropping a BOM and replacing undecodable bytes."""
    return data.decode("utf-8", errors="replace").lstrip(BOM)


def select_record(text: str, delimiter: str) -> str:
    """
    Pick the record line from a playout file.

    Returns the first line containing the delimiter, else the first
    non-blank line, else an empty string.
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    for line in lines:
        if delimiter in line:
            return line
    for line in lines:
        if line.strip():
            return line
    return ""


def read_raw_record(path: Path, delimiter: str) -> str:
    """
    Read the raw record from a playout tool's output file.

    Args:
        path: File written by the playout tool
        delimiter: Artist/title delimiter, used to find the record line

    Returns:
        The raw record line

    Raises:
        InputFileError: If the file does not exist or holds no text
        FilesystemError: If the file cannot be read
    """
    if not path.exists():
        raise InputFileError(str(path), "file does not exist")
    if not path.is_file():
        raise InputFileError(str(path), "path is not a file")

    try:
        data = path.read_bytes()
    except PermissionError as e:
        raise FilesystemError(str(path), "read", f"Permission denied: {e}")
    except OSError as e:
        raise FilesystemError(str(path), "read", f"OS error: {e}")

    record = select_record(decode_input(data), delimiter)
    if not record.strip():
        raise InputFileError(str(path), "file is empty")
    logger.debug(f"Read record from {path}: {record!r}")
    return record


def read_records(path: Path) -> List[str]:
    """Read every non-blank line of a batch input file."""
    if not path.is_file():
        raise InputFileError(str(path), "file does not exist")
    try:
        text = decode_input(path.read_bytes())
    except OSError as e:
        raise FilesystemError(str(path), "read", f"OS error: {e}")
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]


def write_text_atomic(path: Path, text: str) -> None:
    """Atomically write *text* as UTF-8 (no BOM)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def write_outputs(bundle: OutputBundle, output_dir: Path, names: OutputNames = OutputNames()) -> Dict[str, Path]:
    """
    Write RT, RT+ and prefix into three files.

    Args:
        bundle: Pipeline output
        output_dir: Directory for the output files
        names: File names to use

    Returns:
        Mapping of output kind to written path

    Raises:
        FilesystemError: If any file cannot be written
    """
    targets = {
        "rt": (output_dir / names.rt, bundle.rt),
        "rt_plus": (output_dir / names.rt_plus, bundle.rt_plus),
        "prefix": (output_dir / names.prefix, bundle.prefix),
    }
    written = {}
    for kind, (path, text) in targets.items():
        try:
            write_text_atomic(path, text)
        except OSError as e:
            raise FilesystemError(str(path), "write", str(e))
        written[kind] = path
        logger.debug(f"Wrote {kind} to {path}")
    return written
