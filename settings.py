#!/usr/bin/env python3
"""
Configuration for the tweet library view engine.
Values come from keyword arguments or TWEET_LIBRARY_* environment variables
(a local .env file is loaded first).
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Union
from dotenv import load_dotenv
from errors import ValidationError
from models import ViewFlavor

DEFAULT_LIBRARY_PATH = os.path.join("library_data", "tweets.json")

logger = logging.getLogger(__name__)


def resolve_flavor(mode: Union[str, ViewFlavor, None]) -> ViewFlavor:
    """Map the ``mode`` option ("full" / "readonly") to a ViewFlavor."""
    if isinstance(mode, ViewFlavor):
        return mode
    if mode is None:
        return ViewFlavor.INTERACTIVE
    try:
        return ViewFlavor(mode)
    except ValueError:
        raise ValidationError(f"Unknown view mode: {mode!r} (expected 'full' or 'readonly')")


@dataclass
class ViewConfig:
    flavor: ViewFlavor = ViewFlavor.INTERACTIVE
    virtualization_threshold: int = 50
    item_height: int = 180
    buffer_size: int = 5
    viewport_height: int = 900
    search_debounce: float = 0.2  # seconds
    scroll_throttle: float = 0.016  # seconds
    empty_placeholder: str = "No saved tweets yet"
    no_results_placeholder: str = "No tweets match your filters"
    error_placeholder: str = "Failed to load tweets"

    def __post_init__(self):
        self.flavor = resolve_flavor(self.flavor)
        if self.virtualization_threshold < 0:
            raise ValidationError("virtualization_threshold must not be negative")
        if self.item_height <= 0:
            raise ValidationError("item_height must be positive")
        if self.buffer_size < 0:
            raise ValidationError("buffer_size must not be negative")
        if self.viewport_height <= 0:
            raise ValidationError("viewport_height must be positive")
        if self.search_debounce < 0 or self.scroll_throttle < 0:
            raise ValidationError("timer intervals must not be negative")


@dataclass
class LibrarySettings:
    library_path: str = DEFAULT_LIBRARY_PATH
    mirror_url: Optional[str] = None
    view: Optional[ViewConfig] = None

    def __post_init__(self):
        if self.view is None:
            self.view = ViewConfig()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {raw!r}")


def load_settings(env_file: Optional[str] = None) -> LibrarySettings:
    """Load settings from the environment (and .env, if present)."""
    load_dotenv(env_file)
    view = ViewConfig(
        flavor=resolve_flavor(os.getenv("TWEET_LIBRARY_MODE") or None),
        virtualization_threshold=_env_int("TWEET_LIBRARY_VIRTUAL_THRESHOLD", 50),
        item_height=_env_int("TWEET_LIBRARY_ITEM_HEIGHT", 180),
        buffer_size=_env_int("TWEET_LIBRARY_BUFFER_SIZE", 5),
        viewport_height=_env_int("TWEET_LIBRARY_VIEWPORT_HEIGHT", 900),
    )
    settings = LibrarySettings(
        library_path=os.getenv("TWEET_LIBRARY_PATH") or DEFAULT_LIBRARY_PATH,
        mirror_url=os.getenv("TWEET_LIBRARY_MIRROR_URL") or None,
        view=view,
    )
    logger.debug(f"Loaded settings: {settings}")
    return settings
