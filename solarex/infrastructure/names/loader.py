"""Loader for the static creator display-name table."""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from solarex.domain.account.model.entity import CreatorDisplay
from solarex.domain.account.port.whitelist import NameOverrides
from solarex.domain.shared.error import ConfigurationError
from solarex.domain.shared.model.pubkey import PublicKeyString

logger = logging.getLogger(__name__)

_NAME_TABLE = TypeAdapter(dict[PublicKeyString, CreatorDisplay])


def parse_name_overrides(data: object) -> NameOverrides:
    """Validate a decoded JSON object mapping creator address to display fields."""
    return _NAME_TABLE.validate_python(data)


def load_name_overrides(path: str | Path | None) -> NameOverrides:
    """Load display overrides from a JSON file.

    Args:
        path: JSON file of {address: {name, image, description, twitter}}.
            None yields an empty table.

    Raises:
        ConfigurationError: If the file is missing or not a valid table.
    """
    if path is None:
        return {}

    file = Path(path).expanduser()
    try:
        overrides = parse_name_overrides(json.loads(file.read_text()))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot load name overrides from {file}: {e}") from e

    logger.info(f"Loaded {len(overrides)} creator name overrides from {file}")
    return overrides
