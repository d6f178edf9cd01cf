"""
Locale config loading.

Each locale has one logic file (JSON or YAML). A ConfigLoader reads a
locale's file at most once and keeps the parsed config in its own cache;
`clear()` empties it. There is no module-level cache.
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import yaml

from eligibility.model import AssessmentConfig
from eligibility.serialization import config_from_dict

logger = logging.getLogger(__name__)

DEFAULT_LOGIC_FILES: Dict[str, str] = {
    "en_US": "logic_en_US.json",
    "es_AR": "logic_es_AR.json",
    "es_MX": "logic_es_MX.json",
    "pt_BR": "logic_pt_BR.json",
}

_LOGIC_FILE_RE = re.compile(r"^logic_(?P<locale>[A-Za-z]{2}_[A-Za-z]{2})\.(json|ya?ml)$")


class ConfigLoadError(Exception):
    """Raised when a locale's config cannot be located or parsed."""
    pass


def load_config_file(path: Union[str, Path], source: Optional[str] = None) -> AssessmentConfig:
    """
    Read one config document from disk.

    `.yaml` / `.yml` files are parsed with PyYAML, anything else as JSON.

    Raises:
        ConfigLoadError: missing file, parse error or non-mapping document
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Error parsing config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config file {path} does not contain a JSON object")

    try:
        return config_from_dict(data, source=source or path.name)
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigLoadError(f"Error reading config file {path}: {e}") from e


class ConfigLoader:
    """
    Loads and caches one AssessmentConfig per locale.

    Properties:
        base_dir: Directory containing the logic files
        logic_files: Locale -> file name (relative to base_dir)
    """

    def __init__(self, base_dir: Union[str, Path], logic_files: Optional[Mapping[str, str]] = None):
        self.base_dir = Path(base_dir)
        self.logic_files = dict(logic_files if logic_files is not None else DEFAULT_LOGIC_FILES)
        self._cache: Dict[str, AssessmentConfig] = {}

    @classmethod
    def discover(cls, base_dir: Union[str, Path]) -> "ConfigLoader":
        """Build a loader from the logic_<locale>.json|yaml files present in base_dir."""
        base_dir = Path(base_dir)
        files: Dict[str, str] = {}
        for path in sorted(base_dir.iterdir()):
            match = _LOGIC_FILE_RE.match(path.name)
            if match and match.group("locale") not in files:
                files[match.group("locale")] = path.name
        return cls(base_dir, files)

    def locales(self) -> List[str]:
        return list(self.logic_files.keys())

    def path_for(self, locale: str) -> Path:
        file_name = self.logic_files.get(locale)
        if not file_name:
            raise ConfigLoadError(f"No logic file configured for locale: {locale}")
        return self.base_dir / file_name

    def load(self, locale: str) -> AssessmentConfig:
        if locale in self._cache:
            return self._cache[locale]

        path = self.path_for(locale)
        logger.info("Loading %s config from %s", locale, path)
        config = load_config_file(path, source=path.name)
        self._cache[locale] = config
        return config

    def is_cached(self, locale: str) -> bool:
        return locale in self._cache

    def clear(self) -> None:
        self._cache.clear()
