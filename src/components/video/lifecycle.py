"""
Player lifecycle binding.

Owns at most one player handle for a mounted video element. The host
framework calls ``mount`` once the element exists, ``update`` whenever its
configuration changes and ``unmount`` on teardown.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .component import run
from .models import (
    DEFAULT_SOURCE_TYPES,
    PlayerOptions,
    VideoTagInput,
    VideoTagOutput,
)
from .ports import PlayerFactoryPort, PlayerHandle, TagAttributesPort, UrlBuilderPort

logger = logging.getLogger(__name__)


class VideoPlayerBinding:
    """
    Acquire/release wrapper around a player widget.

    The player is created on the first ``mount`` and disposed exactly once on
    ``unmount``. Mounting again after ``unmount`` creates a fresh player.
    """

    def __init__(
        self,
        factory: PlayerFactoryPort,
        url_builder: UrlBuilderPort,
        tag_builder: TagAttributesPort | None = None,
        player_defaults: PlayerOptions | None = None,
        default_source_types: Iterable[str] = DEFAULT_SOURCE_TYPES,
    ) -> None:
        self._factory = factory
        self._url_builder = url_builder
        self._tag_builder = tag_builder
        self._player_defaults = player_defaults or PlayerOptions(sources=())
        self._default_source_types = tuple(default_source_types)
        self._player: PlayerHandle | None = None

    @property
    def player(self) -> PlayerHandle | None:
        return self._player

    @property
    def is_mounted(self) -> bool:
        return self._player is not None

    def derive(self, inp: VideoTagInput) -> VideoTagOutput:
        """Derive tag attributes and sources with this binding's ports."""
        return run(
            inp,
            url_builder=self._url_builder,
            tag_builder=self._tag_builder,
            default_source_types=self._default_source_types,
        )

    def player_options(self, inp: VideoTagInput) -> PlayerOptions:
        """Player options for ``inp``: the configured defaults plus derived sources."""
        defaults = self._player_defaults
        return PlayerOptions(
            sources=self.derive(inp).sources,
            autoplay=defaults.autoplay,
            controls=defaults.controls,
            playback_rates=defaults.playback_rates,
            width=defaults.width,
            height=defaults.height,
        )

    def mount(self, host: Any, inp: VideoTagInput) -> PlayerHandle:
        """Create the player on ``host``. A second call returns the existing player."""
        if self._player is not None:
            return self._player

        options = self.player_options(inp)
        self._player = self._factory.create(host, options)
        logger.info("Video player mounted with %d source(s)", len(options.sources))
        return self._player

    def update(self) -> None:
        """Reload the player's sources after a configuration change."""
        if self._player is None:
            return
        self._player.load()

    def unmount(self) -> None:
        """Dispose the player. Safe to call when nothing is mounted."""
        if self._player is None:
            return

        player, self._player = self._player, None
        player.dispose()
        logger.info("Video player disposed")
