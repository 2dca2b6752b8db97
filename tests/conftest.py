from pathlib import Path

import pytest

from src.adapters.delivery import DeliveryUrlBuilder, create_delivery_url_builder
from src.rules.loader import load_rules
from src.rules.models import VideoRules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules_path() -> Path:
    """The project's real rules file."""
    path = PROJECT_ROOT / "rules.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Rules not found at {path}")
    return path


@pytest.fixture
def rules(rules_path: Path) -> VideoRules:
    return load_rules(rules_path)


@pytest.fixture
def delivery(rules: VideoRules) -> DeliveryUrlBuilder:
    """Delivery adapter configured from the real rules file."""
    return create_delivery_url_builder(**rules.delivery.model_dump())
