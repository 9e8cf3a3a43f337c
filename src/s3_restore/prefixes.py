"""Loading restore prefixes from an audit export file."""

from pathlib import Path
from typing import Iterable, Optional, Union

from s3_restore.core import get_logger, settings
from s3_restore.core.exceptions import ConfigurationError

logger = get_logger(__name__)


def parse_prefixes(lines: Iterable[str], header: Optional[str] = None) -> list[str]:
    """Extract prefixes from CSV-like lines.

    Only the first comma-separated column is used and double quotes are
    removed. Blank values and the header sentinel are skipped. Order and
    duplicates are preserved.

    Args:
        lines: Raw lines of the prefix file
        header: Header sentinel to skip (settings.prefix_header if None)

    Returns:
        List of prefixes
    """
    header = settings.prefix_header if header is None else header
    prefixes = []

    for line in lines:
        value = line.rstrip("\r\n").split(",")[0].replace('"', "")
        if not value or value == header:
            continue
        prefixes.append(value)

    return prefixes


def load_prefixes(path: Union[str, Path], header: Optional[str] = None) -> list[str]:
    """Read and parse a prefix file.

    Args:
        path: Path to the prefix file
        header: Header sentinel to skip (settings.prefix_header if None)

    Returns:
        List of prefixes in file order

    Raises:
        ConfigurationError: If the file is missing or unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Prefixes file not found: {path}")

    try:
        with path.open(encoding="utf-8") as handle:
            prefixes = parse_prefixes(handle, header=header)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to read prefixes file '{path}': {e}") from e

    logger.info("Prefixes loaded", path=str(path), prefix_count=len(prefixes))
    return prefixes
