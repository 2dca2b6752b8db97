"""
Option normalization for the video component.

Callers configure the element with camelCase keys; the delivery service
speaks snake_case. This module owns the crossing between the two dialects
and decides which keys belong to the provider and which are passed through
to the element untouched.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .models import NormalizedOptions, TransformationDeclaration

# --- Key catalogues (snake_case) ---

# Keys consumed by the component itself, never forwarded.
RESERVED_KEYS = frozenset(
    {
        "public_id",
        "fallback",
        "children",
        "source_types",
        "source_transformation",
        "inner_ref",
    }
)

TRANSFORMATION_PARAMS = frozenset(
    {
        "angle",
        "aspect_ratio",
        "audio_codec",
        "audio_frequency",
        "background",
        "bit_rate",
        "border",
        "color",
        "color_space",
        "crop",
        "default_image",
        "delay",
        "density",
        "dpr",
        "duration",
        "effect",
        "end_offset",
        "fetch_format",
        "flags",
        "fps",
        "gravity",
        "height",
        "keyframe_interval",
        "offset",
        "opacity",
        "overlay",
        "page",
        "quality",
        "radius",
        "raw_transformation",
        "start_offset",
        "streaming_profile",
        "transformation",
        "underlay",
        "variables",
        "video_codec",
        "video_sampling",
        "width",
        "x",
        "y",
        "zoom",
    }
)

DELIVERY_PARAMS = frozenset(
    {
        "cloud_name",
        "cname",
        "cdn_subdomain",
        "private_cdn",
        "resource_type",
        "secure",
        "secure_distribution",
        "shorten",
        "sign_url",
        "type",
        "url_suffix",
        "use_root_path",
        "version",
        "force_version",
    }
)

PROVIDER_KEYS = TRANSFORMATION_PARAMS | DELIVERY_PARAMS

# Provider-recognized options that only shape the element, not the URL.
ELEMENT_KEYS = frozenset({"poster", "html_width", "html_height"})

_UPPER = re.compile(r"(?<!^)(?=[A-Z])")


# --- Case conversion ---


def to_snake_case(key: str) -> str:
    """Convert a camelCase key to snake_case. snake_case keys are unchanged."""
    return _UPPER.sub("_", key).lower()


def to_camel_case(key: str) -> str:
    """Convert a snake_case key to camelCase. camelCase keys are unchanged."""
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def snake_case_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    return {to_snake_case(k): v for k, v in options.items()}


def camel_case_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    return {to_camel_case(k): v for k, v in options.items()}


# --- Layer merging ---


def merge_layers(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge configuration layers into a new dict.

    Later layers win. Keys are compared by their snake_case form so
    ``cloudName`` in one layer and ``cloud_name`` in another are the same
    option; the spelling of the winning layer is kept. ``None`` values are
    skipped and never shadow a lower layer.
    """
    merged: dict[str, Any] = {}
    spelling: dict[str, str] = {}

    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is None:
                continue
            canonical = to_snake_case(key)
            previous = spelling.get(canonical)
            if previous is not None and previous != key:
                del merged[previous]
            spelling[canonical] = key
            merged[key] = value

    return merged


# --- Normalization ---


def _split_children(
    value: Any,
) -> tuple[tuple[TransformationDeclaration, ...], tuple[Any, ...]]:
    """
    Separate declared transformations from element content.

    Mappings and declarations are transformations. Anything else, such as
    text or a nested element, is content and is kept as given.
    """
    if value is None:
        return (), ()
    if isinstance(value, (str, Mapping, TransformationDeclaration)) or not isinstance(
        value, Iterable
    ):
        value = [value]

    declarations: list[TransformationDeclaration] = []
    content: list[Any] = []
    for child in value:
        if isinstance(child, (TransformationDeclaration, Mapping)):
            declarations.append(TransformationDeclaration.from_value(child))
        elif child is not None and child != "":
            content.append(child)
    return tuple(declarations), tuple(content)


def normalize_options(
    merged: Mapping[str, Any],
    children: Iterable[TransformationDeclaration] = (),
) -> NormalizedOptions:
    """
    Split merged configuration into reserved, provider, element and
    pass-through keys.

    Provider and element options come back in snake_case. Pass-through keys
    keep the caller's spelling. Nothing is dropped.
    """
    reserved: dict[str, Any] = {}
    provider: dict[str, Any] = {}
    element: dict[str, Any] = {}
    pass_through: dict[str, Any] = {}

    for key, value in merged.items():
        snake = to_snake_case(key)
        if snake in RESERVED_KEYS:
            reserved[snake] = value
        elif snake in PROVIDER_KEYS:
            provider[snake] = value
        elif snake in ELEMENT_KEYS:
            element[snake] = value
        else:
            pass_through[key] = value

    source_transformation = {
        str(fmt): snake_case_keys(opts or {})
        for fmt, opts in (reserved.get("source_transformation") or {}).items()
    }

    declared, content = _split_children(reserved.get("children"))

    return NormalizedOptions(
        public_id=reserved.get("public_id"),
        source_types=reserved.get("source_types"),
        source_transformation=source_transformation,
        provider_options=provider,
        element_options=element,
        pass_through=pass_through,
        children=declared + tuple(children),
        content=content,
        fallback=reserved.get("fallback"),
    )


def delivery_options(provider_options: Mapping[str, Any]) -> dict[str, Any]:
    """Delivery (non-transformation) subset of provider options."""
    return {k: v for k, v in provider_options.items() if k in DELIVERY_PARAMS}
