"""
Video component - video element derivation and player binding.
"""

from ._impl import (
    build_sources,
    classify_formats,
    media_type_for,
    reconcile_attributes,
    resolve_video_url,
)
from ._options import (
    camel_case_keys,
    merge_layers,
    normalize_options,
    snake_case_keys,
    to_camel_case,
    to_snake_case,
)
from ._transform import aggregate_transformations
from .component import normalize, run
from .lifecycle import VideoPlayerBinding
from .models import (
    DEFAULT_SOURCE_TYPES,
    MEDIA_FAMILY,
    FormatSelection,
    MultipleFormats,
    NormalizedOptions,
    PlayerOptions,
    SingleFormat,
    SourceDescriptor,
    TransformationDeclaration,
    VideoTagInput,
    VideoTagOutput,
)
from .ports import PlayerFactoryPort, PlayerHandle, TagAttributesPort, UrlBuilderPort

__all__ = [
    # Entry points
    "run",
    "normalize",
    "VideoPlayerBinding",
    # Derivation steps
    "merge_layers",
    "normalize_options",
    "aggregate_transformations",
    "resolve_video_url",
    "build_sources",
    "reconcile_attributes",
    "classify_formats",
    "media_type_for",
    # Case conversion
    "to_snake_case",
    "to_camel_case",
    "snake_case_keys",
    "camel_case_keys",
    # Models
    "DEFAULT_SOURCE_TYPES",
    "MEDIA_FAMILY",
    "FormatSelection",
    "MultipleFormats",
    "NormalizedOptions",
    "PlayerOptions",
    "SingleFormat",
    "SourceDescriptor",
    "TransformationDeclaration",
    "VideoTagInput",
    "VideoTagOutput",
    # Ports
    "UrlBuilderPort",
    "TagAttributesPort",
    "PlayerFactoryPort",
    "PlayerHandle",
]
