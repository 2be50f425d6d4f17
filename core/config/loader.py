import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "json", "sqlite")


@dataclass(frozen=True)
class StoreConfig:
    backend: str
    path: Optional[Path]
    log_level: str = "warning"


class ConfigLoader:
    def __init__(self, config_path: Optional[Path] = None):
        # project root (core/config/*)
        self.project_root = Path(__file__).resolve().parents[2]
        self.config_path = Path(config_path) if config_path else self.project_root / "conf" / "settings.ini"

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)
        else:
            logger.info("config file not found, using defaults: %s", self.config_path)

    def get(self, section, key, fallback=None):
        """Config value with user paths (~) expanded."""
        val = self.config.get(section, key, fallback=fallback)
        if val and "~" in val:
            return os.path.expanduser(val)
        return val

    def store_config(self, backend: Optional[str] = None, path: Optional[str] = None) -> StoreConfig:
        """Resolve store settings: explicit args > env > settings.ini > defaults."""
        backend = (
            backend
            or os.environ.get("CRAFTPRO_STORE")
            or self.get("STORE", "BACKEND")
            or "json"
        ).strip().lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"Unknown store backend: {backend!r} (expected one of {', '.join(STORE_BACKENDS)})")

        raw_path = path or os.environ.get("CRAFTPRO_STORE_PATH") or self.get("STORE", "PATH")
        if backend == "memory":
            store_path = None
        elif raw_path:
            store_path = Path(os.path.expanduser(raw_path))
            if not store_path.is_absolute():
                store_path = self.project_root / store_path
        else:
            suffix = ".sqlite" if backend == "sqlite" else ".json"
            store_path = self.project_root / "data" / f"crafting_data{suffix}"

        level = (self.get("LOGGING", "LEVEL") or "warning").strip().lower()
        return StoreConfig(backend=backend, path=store_path, log_level=level)


# module singleton
craft_config = ConfigLoader()
