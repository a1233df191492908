"""Read the fetched dependency's own package manifest."""
import json
import logging
from pathlib import Path
from typing import Any, Dict

from pkgfetch.core.errors import ManifestReadError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"


def read_manifest(checkout: Path, filename: str = MANIFEST_FILENAME) -> Dict[str, Any]:
    """Load and parse the manifest at the root of a checkout.

    The content is returned as parsed; its schema is not checked beyond
    being a JSON object.

    Raises:
        ManifestReadError: If the file is missing, unreadable or not a JSON object
    """
    manifest_path = Path(checkout) / filename

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(f"Cannot read {manifest_path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestReadError(f"Cannot parse {manifest_path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestReadError(
            f"{manifest_path} must contain a JSON object; got {type(data).__name__}"
        )

    logger.debug(f"Read manifest {data.get('name')}@{data.get('version')}")
    return data
