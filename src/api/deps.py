import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from src.adapters.delivery import DeliveryUrlBuilder, create_delivery_url_builder
from src.rules.loader import load_rules
from src.rules.models import VideoRules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(
            os.environ.get("VIDEO_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> VideoRules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> VideoRules:
    return _load_rules_cached(settings.rules_path)


# --- Adapters ---
def get_url_builder(rules: VideoRules = Depends(get_rules)) -> DeliveryUrlBuilder:
    """Delivery adapter configured from rules; serves both URL and tag attribute ports."""
    return create_delivery_url_builder(**rules.delivery.model_dump())
