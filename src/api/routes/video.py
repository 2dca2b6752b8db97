"""Video tag endpoints: derive sources and attributes for a video element."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.adapters.delivery import DeliveryError, DeliveryUrlBuilder
from src.api.deps import get_rules, get_url_builder
from src.api.schemas import (
    PlayerOptionsResponse,
    SourceModel,
    VideoTagRequest,
    VideoTagResponse,
)
from src.components.video import (
    PlayerOptions,
    TransformationDeclaration,
    VideoTagInput,
    VideoTagOutput,
    run,
)
from src.rules.models import VideoRules

logger = logging.getLogger(__name__)

router = APIRouter()


def _derive(
    request: VideoTagRequest,
    rules: VideoRules,
    builder: DeliveryUrlBuilder,
) -> VideoTagOutput:
    inp = VideoTagInput(
        options=request.options,
        context=rules.context_layer(),
        overrides=request.overrides,
        children=tuple(TransformationDeclaration.from_value(c) for c in request.children),
    )
    try:
        return run(
            inp,
            url_builder=builder,
            tag_builder=builder,
            default_source_types=rules.video.source_types,
        )
    except DeliveryError as e:
        logger.info("Video derivation rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e


@router.post("/tag", response_model=VideoTagResponse)
def derive_video_tag(
    request: VideoTagRequest,
    rules: VideoRules = Depends(get_rules),
    builder: DeliveryUrlBuilder = Depends(get_url_builder),
) -> VideoTagResponse:
    """
    Derive a video element.

    A list ``sourceTypes`` yields ``sources``; a single string yields a
    ``src`` tag attribute instead.
    """
    result = _derive(request, rules, builder)
    return VideoTagResponse(
        sources=[SourceModel(**s.to_dict()) for s in result.sources],
        tag_attributes=result.tag_attributes,
        content=list(result.content),
    )


@router.post("/player-options", response_model=PlayerOptionsResponse)
def derive_player_options(
    request: VideoTagRequest,
    rules: VideoRules = Depends(get_rules),
    builder: DeliveryUrlBuilder = Depends(get_url_builder),
) -> PlayerOptionsResponse:
    """Options the browser player is initialized with."""
    result = _derive(request, rules, builder)
    defaults: PlayerOptions = rules.player_defaults()
    return PlayerOptionsResponse(
        autoplay=defaults.autoplay,
        controls=defaults.controls,
        playback_rates=list(defaults.playback_rates),
        width=defaults.width,
        height=defaults.height,
        sources=[SourceModel(**s.to_dict()) for s in result.sources],
    )
