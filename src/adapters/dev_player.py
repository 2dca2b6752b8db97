"""
Dev Player Adapter.

In-memory stand-in for the browser player widget. Records every player it
creates so tests and local tooling can assert on lifecycle calls.
Implements PlayerFactoryPort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from src.components.video.models import PlayerOptions

logger = logging.getLogger(__name__)


@dataclass
class DevPlayer:
    """Player handle that counts lifecycle calls."""

    host: Any
    options: PlayerOptions
    load_count: int = 0
    dispose_count: int = 0

    @property
    def disposed(self) -> bool:
        return self.dispose_count > 0

    def load(self) -> None:
        self.load_count += 1
        logger.debug("Dev player reload #%d on %r", self.load_count, self.host)

    def dispose(self) -> None:
        self.dispose_count += 1
        if self.dispose_count > 1:
            logger.warning("Dev player on %r disposed %d times", self.host, self.dispose_count)
        else:
            logger.debug("Dev player on %r disposed", self.host)


@dataclass
class DevPlayerFactory:
    """Factory that creates DevPlayer handles and keeps them for assertions."""

    players: list[DevPlayer] = field(default_factory=list)
    log_level: int = logging.INFO

    def create(self, host: Any, options: PlayerOptions) -> DevPlayer:
        player = DevPlayer(host=host, options=options)
        self.players.append(player)
        logger.log(
            self.log_level,
            "[DEV PLAYER] created on %r (%d source(s), %dx%d)",
            host,
            len(options.sources),
            options.width,
            options.height,
        )
        return player

    # --- Test helpers ---

    @property
    def last_player(self) -> DevPlayer | None:
        return self.players[-1] if self.players else None

    def clear(self) -> None:
        self.players.clear()
