"""
Named dataset presets.

A dataset file is a JSON object mapping names to run records; see
``RunConfig.from_dict`` for the record layout. A default file ships with the
package.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Union

from iconscope.exceptions import ConfigurationError
from iconscope.runner import RunConfig

logger = logging.getLogger(__name__)


def _read_default() -> str:
    return resources.files("iconscope").joinpath("data", "datasets.json").read_text(encoding="utf-8")


def load_datasets(path: Optional[Union[str, Path]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load a dataset file.

    Args:
        path: JSON file to read. Defaults to the bundled presets.

    Returns:
        Mapping of dataset name to raw record.
    """
    if path is None:
        text = _read_default()
        source = "bundled presets"
    else:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read dataset file {path}: {exc}") from exc
        source = str(path)

    try:
        datasets = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {source}: {exc}") from exc

    if not isinstance(datasets, dict):
        raise ConfigurationError(f"Dataset file {source} must hold a JSON object")

    logger.debug("Loaded %d datasets from %s", len(datasets), source)
    return datasets


def get_dataset(name: str, path: Optional[Union[str, Path]] = None, **overrides) -> RunConfig:
    """Look up ``name`` and build its RunConfig."""
    datasets = load_datasets(path)
    if name not in datasets:
        known = ", ".join(sorted(datasets)) or "none"
        raise ConfigurationError(f"Unknown dataset '{name}' (known: {known})")
    return RunConfig.from_dict(datasets[name], **overrides)
