"""
Video component port definitions.

The CDN delivery service and the player widget are external; the component
only ever talks to them through these protocols.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from .models import PlayerOptions


class UrlBuilderPort(Protocol):
    """Port for building delivery URLs."""

    def url(self, public_id: str, options: Mapping[str, Any]) -> str:
        """Build an absolute URL for an asset. Options use snake_case keys."""
        ...


class TagAttributesPort(Protocol):
    """Port for computing provider-side video tag attributes."""

    def video_tag_attributes(
        self, public_id: str, options: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Compute tag attributes (snake_case keys) for a video element."""
        ...


class PlayerHandle(Protocol):
    """Handle to an instantiated player widget."""

    def load(self) -> None:
        """Reload the current sources."""
        ...

    def dispose(self) -> None:
        """Release the player's resources."""
        ...


class PlayerFactoryPort(Protocol):
    """Port for creating player widgets bound to a host element."""

    def create(self, host: Any, options: PlayerOptions) -> PlayerHandle:
        """Instantiate a player on ``host``."""
        ...
