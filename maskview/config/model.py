from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from maskview.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoaderConfig:
    """
    Options for turning a delimited text source into a Table.

    Fields:

    - delimiter: single field separator, defaults to ','
    - encoding: text encoding used when opening paths
    - data_root: directory against which relative source paths are resolved
    """
    delimiter: str = ","
    encoding: str = "utf-8"
    data_root: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ConfigError("LoaderConfig.delimiter must not be empty")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LoaderConfig:
        data_root = data.get("data_root")
        return cls(
            delimiter=data.get("delimiter", ","),
            encoding=data.get("encoding", "utf-8"),
            data_root=Path(data_root) if data_root else None,
        )

    @classmethod
    def from_env(cls) -> LoaderConfig:
        """
        Build a config from MASKVIEW_DELIMITER, MASKVIEW_ENCODING and MASKVIEW_DATA_ROOT.
        Unset variables fall back to the defaults.
        """
        data_root = os.environ.get("MASKVIEW_DATA_ROOT")
        return cls(
            delimiter=os.environ.get("MASKVIEW_DELIMITER", ","),
            encoding=os.environ.get("MASKVIEW_ENCODING", "utf-8"),
            data_root=Path(data_root) if data_root else None,
        )

    def resolve(self, path: str | Path) -> Path:
        """Join relative paths with data_root, if one is configured."""
        path = Path(path)
        if path.is_absolute() or self.data_root is None:
            return path
        return self.data_root / path


def load_config(path: str | Path) -> LoaderConfig:
    """
    Read a LoaderConfig from a JSON file.

    A relative 'data_root' in the file is resolved relative to the file's directory.

    :param path: path to the JSON file
    :return: the parsed LoaderConfig
    :raises FileNotFoundError: if the file does not exist
    :raises ConfigError: if the file is not a JSON object
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found at {path}")

    with path.open() as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ConfigError(f"Config at {path} must contain a JSON object")

    data_root_raw = raw.get("data_root")
    if data_root_raw is not None and not Path(data_root_raw).is_absolute():
        raw = {**raw, "data_root": (path.parent / data_root_raw).resolve()}

    logger.info("Loader config read", extra={"config_path": str(path)})
    return LoaderConfig.from_dict(raw)
