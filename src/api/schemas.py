from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Video Tag ---
class VideoTagRequest(BaseModel):
    """Per-element props and per-call overrides; the ambient layer comes from rules."""

    options: dict[str, Any] = Field(default_factory=dict)
    overrides: dict[str, Any] = Field(default_factory=dict)
    children: list[dict[str, Any]] = Field(default_factory=list)


class SourceModel(BaseModel):
    src: str
    type: str


class VideoTagResponse(BaseModel):
    sources: list[SourceModel] = []
    tag_attributes: dict[str, Any] = Field(alias="tagAttributes")
    content: list[Any] = []

    model_config = ConfigDict(populate_by_name=True)


class PlayerOptionsResponse(BaseModel):
    autoplay: bool
    controls: bool
    playback_rates: list[float] = Field(alias="playbackRates")
    width: int
    height: int
    sources: list[SourceModel] = []

    model_config = ConfigDict(populate_by_name=True)
