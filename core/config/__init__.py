# -*- coding: utf-8 -*-
"""Project configuration (conf/settings.ini)."""

from core.config.loader import STORE_BACKENDS, ConfigLoader, StoreConfig, craft_config  # noqa: F401
