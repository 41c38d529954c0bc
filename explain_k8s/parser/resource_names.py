"""Resource name list loading."""
import logging
from pathlib import Path
from typing import Iterable, List, Union

from explain_k8s.errors import ConfigurationError

logger = logging.getLogger(__name__)


def clean_resource_names(names: Iterable[str]) -> List[str]:
    """Strip names, drop blanks and keep the first occurrence of duplicates."""
    cleaned: List[str] = []
    seen = set()
    for raw in names:
        name = raw.strip()
        if not name:
            continue
        if name in seen:
            logger.debug(f"Dropping duplicate resource name: {name}")
            continue
        seen.add(name)
        cleaned.append(name)
    return cleaned


def load_resource_names(path: Union[str, Path]) -> List[str]:
    """
    Load resource names from a file, one per line.

    Args:
        path: Path to the resource names file

    Returns:
        List[str]: Names in file order, blank lines and duplicates removed

    Raises:
        ConfigurationError: If the file cannot be read or holds no names
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Could not read resource names file {path}: {e}") from e

    names = clean_resource_names(content.splitlines())
    if not names:
        raise ConfigurationError(f"Resource names file {path} contains no resource names")

    logger.info(f"Loaded {len(names)} resource names from {path}")
    return names
