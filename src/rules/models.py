from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.components.video import DEFAULT_SOURCE_TYPES, PlayerOptions, to_camel_case


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class DeliveryRules(BaseModel):
    cloud_name: str = Field(min_length=1)
    secure: bool = True
    private_cdn: bool = False
    cname: str | None = None
    secure_distribution: str | None = None

    model_config = ConfigDict(extra="forbid")


class VideoDefaultsRules(BaseModel):
    source_types: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_TYPES))
    # format token -> transformation applied to that format only
    source_transformation: dict[str, dict[str, Any]] = Field(default_factory=dict)


class PlayerRules(BaseModel):
    autoplay: bool = False
    controls: bool = True
    playback_rates: list[float] = Field(default_factory=lambda: [0.5, 1, 1.25, 1.5, 2])
    width: int = Field(default=720, gt=0)
    height: int = Field(default=300, gt=0)


class VideoRules(BaseModel):
    project: ProjectRules
    delivery: DeliveryRules
    video: VideoDefaultsRules = Field(default_factory=VideoDefaultsRules)
    player: PlayerRules = Field(default_factory=PlayerRules)

    def context_layer(self) -> dict[str, Any]:
        """Ambient configuration layer, in the caller's camelCase dialect."""
        layer = {
            to_camel_case(k): v
            for k, v in self.delivery.model_dump().items()
            if v is not None
        }
        if self.video.source_transformation:
            layer["sourceTransformation"] = self.video.source_transformation
        return layer

    def player_defaults(self) -> PlayerOptions:
        return PlayerOptions(
            sources=(),
            autoplay=self.player.autoplay,
            controls=self.player.controls,
            playback_rates=tuple(self.player.playback_rates),
            width=self.player.width,
            height=self.player.height,
        )
