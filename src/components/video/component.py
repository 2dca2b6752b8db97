"""
Video component - video element derivation.

Derives the tag attributes and sources of a video element from layered
configuration. Either ``sources`` is populated (list of formats) or the
``src`` attribute is set (single format), never both.

Invariants:
- Configuration layers are merged into new mappings, inputs are never mutated
- Caller pass-through attributes win over provider-computed attributes
- One source descriptor per requested format, in request order
- Deriving twice from the same input gives equal results
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ._impl import build_sources, classify_formats, reconcile_attributes, resolve_video_url
from ._options import delivery_options, merge_layers, normalize_options
from ._transform import aggregate_transformations
from .models import (
    DEFAULT_SOURCE_TYPES,
    MultipleFormats,
    NormalizedOptions,
    VideoTagInput,
    VideoTagOutput,
)
from .ports import TagAttributesPort, UrlBuilderPort

logger = logging.getLogger(__name__)


def normalize(inp: VideoTagInput) -> NormalizedOptions:
    """Merge the input layers and split the result by consumer."""
    merged = merge_layers(inp.context, inp.options, inp.overrides)
    return normalize_options(merged, inp.children)


def _provider_attributes(
    tag_builder: TagAttributesPort | None,
    normalized: NormalizedOptions,
    transformation: list[dict],
) -> dict:
    if tag_builder is None:
        return {}
    options = merge_layers(
        delivery_options(normalized.provider_options),
        normalized.element_options,
        {"transformation": transformation},
    )
    return tag_builder.video_tag_attributes(normalized.public_id, options)


def run(
    inp: VideoTagInput,
    *,
    url_builder: UrlBuilderPort,
    tag_builder: TagAttributesPort | None = None,
    default_source_types: Iterable[str] = DEFAULT_SOURCE_TYPES,
) -> VideoTagOutput:
    """
    Main entry point for the video component.

    Args:
        inp: Configuration layers and declared child transformations.
        url_builder: Port resolving delivery URLs.
        tag_builder: Optional port computing provider tag attributes.
        default_source_types: Formats used when none are configured.

    Returns:
        VideoTagOutput with tag attributes and sources.

    Errors raised by the ports propagate unchanged.
    """
    normalized = normalize(inp)
    transformation = aggregate_transformations(
        normalized.provider_options, normalized.children
    )
    delivery = delivery_options(normalized.provider_options)

    tag_attributes = reconcile_attributes(
        _provider_attributes(tag_builder, normalized, transformation),
        normalized.pass_through,
    )

    selection = classify_formats(normalized.source_types, default_source_types)
    logger.debug(
        "Deriving video %r: %s, %d transformation step(s)",
        normalized.public_id,
        selection,
        len(transformation),
    )

    if isinstance(selection, MultipleFormats):
        sources = build_sources(
            url_builder,
            normalized.public_id,
            transformation,
            normalized.source_transformation,
            selection.tokens,
            delivery,
        )
        return VideoTagOutput(
            tag_attributes=tag_attributes,
            sources=sources,
            fallback=normalized.fallback,
            content=normalized.content,
        )

    tag_attributes["src"] = resolve_video_url(
        url_builder,
        normalized.public_id,
        transformation,
        selection.token,
        normalized.source_transformation,
        delivery,
    )
    return VideoTagOutput(
        tag_attributes=tag_attributes,
        sources=(),
        fallback=normalized.fallback,
        content=normalized.content,
    )
