"""
Video source derivation.

URL resolution per format, source set construction, attribute
reconciliation and format selection. Everything here is a pure function of
its arguments plus the injected URL builder.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ._options import camel_case_keys, merge_layers, snake_case_keys
from ._transform import explicit_chain
from .models import (
    MEDIA_FAMILY,
    FormatSelection,
    MultipleFormats,
    SingleFormat,
    SourceDescriptor,
)
from .ports import UrlBuilderPort

logger = logging.getLogger(__name__)

# Format tokens whose media subtype differs from the token.
MEDIA_SUBTYPE_OVERRIDES: Mapping[str, str] = {"ogv": "ogg"}


def media_type_for(token: str) -> str:
    """Media type for a format token, e.g. ``ogv`` -> ``video/ogg``."""
    return f"{MEDIA_FAMILY}/{MEDIA_SUBTYPE_OVERRIDES.get(token, token)}"


def resolve_video_url(
    url_builder: UrlBuilderPort,
    public_id: str | None,
    transformation: Sequence[Mapping[str, Any]],
    source_type: str,
    source_transformations: Mapping[str, Mapping[str, Any]] | None = None,
    delivery: Mapping[str, Any] | None = None,
) -> str:
    """
    Resolve the delivery URL of one format.

    Options are layered lowest to highest: delivery configuration, the
    per-format source transformation, the element-level transformation
    chain, and finally ``resource_type`` and ``format``, which are always
    forced. The public id is not validated here; the URL builder owns that.

    A ``transformation`` chain inside the per-format override is applied
    before the element chain rather than being replaced by it.
    """
    source_transformation = snake_case_keys(
        (source_transformations or {}).get(source_type) or {}
    )
    chain = explicit_chain(source_transformation.pop("transformation", None))
    chain.extend(dict(step) for step in transformation)

    options = merge_layers(
        delivery,
        source_transformation,
        {"transformation": chain},
        {"resource_type": "video", "format": source_type},
    )
    return url_builder.url(public_id, options)


def build_sources(
    url_builder: UrlBuilderPort,
    public_id: str | None,
    transformation: Sequence[Mapping[str, Any]],
    source_transformations: Mapping[str, Mapping[str, Any]] | None,
    source_types: Sequence[str],
    delivery: Mapping[str, Any] | None = None,
) -> tuple[SourceDescriptor, ...]:
    """
    Build one source descriptor per format token, in input order.

    Duplicate tokens are not removed; they produce descriptors sharing a
    media type.
    """
    duplicates = [t for t, n in Counter(source_types).items() if n > 1]
    if duplicates:
        logger.warning("Duplicate video source types requested: %s", ", ".join(duplicates))

    return tuple(
        SourceDescriptor(
            url=resolve_video_url(
                url_builder,
                public_id,
                transformation,
                source_type,
                source_transformations,
                delivery,
            ),
            media_type=media_type_for(source_type),
        )
        for source_type in source_types
    )


def reconcile_attributes(
    provider_attributes: Mapping[str, Any],
    pass_through: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Merge provider tag attributes with caller pass-through attributes.

    Provider keys are converted to camelCase first; pass-through entries win
    on collision. Values are never altered.
    """
    return {**camel_case_keys(provider_attributes), **pass_through}


def classify_formats(value: Any, default: Iterable[str]) -> FormatSelection:
    """
    Decide once whether the element gets sources or a single ``src``.

    A string is a single format. Any other iterable, including an empty
    list, is a list of formats. ``None`` falls back to ``default``.
    """
    if value is None:
        return MultipleFormats(tuple(default))
    if isinstance(value, str):
        return SingleFormat(value)
    if isinstance(value, Iterable):
        return MultipleFormats(tuple(value))
    return SingleFormat(str(value))
