# panelkit/config.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from .merge import merge
from .utils import deep_get

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "panelkit.yaml"

DEFAULTS: Dict[str, Any] = {
    "debug": False,
    "logging": {
        "level": "INFO",
    },
    "markup": {
        "raw_text": False,
    },
    "materializer": {
        "on_failure": "abort",
        "staging_id": "PanelkitStaging",
    },
    "remote": {
        "session_token": "",
    },
}


class Config:
    """
    Process-wide configuration, created once and shared.

    Layers, later ones winning key by key (deep merge, so a file only lists
    what it changes):

      1. ``DEFAULTS``
      2. the YAML file, if one is found
      3. ``overrides`` given to the first ``Config(...)`` call

    Usage:
        cfg = Config()                                  # panelkit.yaml from cwd, if any
        policy = cfg.get_nested("materializer.on_failure")
        cfg.reload()                                    # file edited on disk

    Tests and the CLI call ``Config.reset_instance()`` before building a
    differently configured instance.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: Optional[str] = CONFIG_FILENAME,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        # later calls hand back the instance built by the first one
        if getattr(self, "_initialized", False):
            return
        self._initialized = True

        self.config_file = config_file
        self.overrides: Dict[str, Any] = dict(overrides or {})
        self._values: Dict[str, Any] = {}
        self._loaded_from: Optional[Path] = None
        self._path: Optional[Path] = self._find(config_file) if config_file else None

        self.reload()

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the shared instance; the next ``Config()`` starts over."""
        cls._instance = None

    def reload(self) -> None:
        """Re-read the YAML file and rebuild every layer."""
        from_file = self._read_file()
        self._loaded_from = self._path if from_file is not None else None
        self._values = merge({}, DEFAULTS, from_file or {}, self.overrides)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """``get_nested("logging.level")``; ``default`` when any step is missing."""
        if not path:
            return default
        value = deep_get(self._values, *path.split(sep))
        return default if value is None else value

    @property
    def source(self) -> Optional[str]:
        """``"file"`` when a YAML file contributed, else None."""
        return "file" if self._loaded_from is not None else None

    @property
    def resolved_config_path(self) -> Optional[Path]:
        return self._path

    @staticmethod
    def search_paths(config_file: str) -> List[Path]:
        """Where a relative ``config_file`` is looked for: cwd first, then the project root."""
        candidate = Path(config_file)
        if candidate.is_absolute():
            return [candidate]
        project_root = Path(__file__).resolve().parent.parent
        return [Path.cwd() / candidate, project_root / candidate]

    def _find(self, config_file: str) -> Optional[Path]:
        for candidate in self.search_paths(config_file):
            if candidate.is_file():
                return candidate.resolve()
        logger.debug("No %s found, using defaults", config_file)
        return None

    def _read_file(self) -> Optional[Dict[str, Any]]:
        if self._path is None:
            return None
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("⚠️  Could not read config %s: %s", self._path, exc)
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("⚠️  Ignoring config %s: top level is not a mapping", self._path)
            return None
        logger.debug("Loaded config from %s", self._path)
        return data


def get_config(*args, **kwargs) -> Config:
    """
    The shared Config. Arguments only matter on the very first call.
    """
    return Config(*args, **kwargs)
