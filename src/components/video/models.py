"""
Video component input/output models.

Configuration flows in as plain mappings; everything derived from it is
returned as frozen dataclasses so a result can be compared field by field
and handed to the rendering layer without its fields being reassigned.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Media family for every source descriptor produced by this component.
MEDIA_FAMILY = "video"

# Used when no source types are configured anywhere.
DEFAULT_SOURCE_TYPES: tuple[str, ...] = ("webm", "mp4", "ogv")


# --- Format selection ---


@dataclass(frozen=True)
class SingleFormat:
    """A single format token: the element gets a ``src`` attribute."""

    token: str


@dataclass(frozen=True)
class MultipleFormats:
    """A list of format tokens: the element gets one source per token."""

    tokens: tuple[str, ...] = ()


FormatSelection = SingleFormat | MultipleFormats


# --- Transformations ---


@dataclass(frozen=True)
class TransformationDeclaration:
    """
    A declared child transformation.

    ``params`` holds transformation parameters in either case dialect;
    ``children`` are applied before this declaration's own parameters.
    """

    params: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[TransformationDeclaration, ...] = ()

    @classmethod
    def from_value(cls, value: Any) -> TransformationDeclaration:
        """
        Build a declaration from a mapping, e.g. decoded JSON.

        A ``children`` entry holds nested declarations; every other key is a
        transformation parameter.
        """
        if isinstance(value, cls):
            return value
        params = dict(value)
        nested = params.pop("children", None) or ()
        if isinstance(nested, Mapping):
            nested = [nested]
        return cls(params=params, children=tuple(cls.from_value(v) for v in nested))


# --- Normalized options ---


@dataclass(frozen=True)
class NormalizedOptions:
    """Merged configuration split by who consumes each key."""

    public_id: str | None
    source_types: Any
    source_transformation: Mapping[str, Mapping[str, Any]]
    provider_options: dict[str, Any]
    element_options: dict[str, Any]
    pass_through: dict[str, Any]
    children: tuple[TransformationDeclaration, ...] = ()
    content: tuple[Any, ...] = ()
    fallback: Any = None


# --- Input Models ---


@dataclass(frozen=True)
class VideoTagInput:
    """
    Input for deriving a video element.

    Layers are merged lowest to highest: ``context``, ``options``,
    ``overrides``.
    """

    options: Mapping[str, Any] = field(default_factory=dict)
    context: Mapping[str, Any] = field(default_factory=dict)
    overrides: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[TransformationDeclaration, ...] = ()


# --- Output Models ---


@dataclass(frozen=True)
class SourceDescriptor:
    """One ``<source>`` entry of a multi-format video element."""

    url: str
    media_type: str

    def to_dict(self) -> dict[str, str]:
        return {"src": self.url, "type": self.media_type}


@dataclass(frozen=True)
class VideoTagOutput:
    """
    Derived video element: tag attributes plus zero or more sources.

    ``content`` holds child content that is not a transformation (text or
    nested elements), rendered inside the element after the sources.
    """

    tag_attributes: dict[str, Any]
    sources: tuple[SourceDescriptor, ...] = ()
    fallback: Any = None
    content: tuple[Any, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the caller-facing shape. ``content`` only appears when present."""
        data: dict[str, Any] = {
            "sources": [s.to_dict() for s in self.sources],
            "tagAttributes": dict(self.tag_attributes),
        }
        if self.content:
            data["content"] = list(self.content)
        return data


@dataclass(frozen=True)
class PlayerOptions:
    """Options handed to the player widget on creation."""

    sources: tuple[SourceDescriptor, ...]
    autoplay: bool = False
    controls: bool = True
    playback_rates: tuple[float, ...] = (0.5, 1, 1.25, 1.5, 2)
    width: int = 720
    height: int = 300

    def to_dict(self) -> dict[str, Any]:
        return {
            "autoplay": self.autoplay,
            "controls": self.controls,
            "playbackRates": list(self.playback_rates),
            "width": self.width,
            "height": self.height,
            "sources": [s.to_dict() for s in self.sources],
        }
