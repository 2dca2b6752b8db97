"""
Delivery URL Adapter.

Builds CDN delivery URLs and video tag attributes for the video component.
Implements UrlBuilderPort and TagAttributesPort.

URL layout:
    <scheme>://<host>[/<cloud_name>]/<resource_type>/<type>/<transformations>/v<version>/<public_id>.<format>

Key behaviors:
- Transformation steps render as comma-joined ``key_value`` pairs, chained with ``/``
- Top-level transformation parameters form the last step of the chain
- ``offset`` expands to start/end offsets; ``variables`` render as ``$name_value`` assignments
- Element ``width``/``height`` follow the outermost step unless layered, rotated or fit-cropped
- Empty public id or missing cloud name raise DeliveryError
- No signing; ``sign_url`` is accepted and ignored
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

logger = logging.getLogger(__name__)

SHARED_HOST = "res.cloudinary.com"

# Transformation parameter -> URL key.
PARAM_KEYS: Mapping[str, str] = {
    "angle": "a",
    "aspect_ratio": "ar",
    "audio_codec": "ac",
    "audio_frequency": "af",
    "background": "b",
    "bit_rate": "br",
    "border": "bo",
    "color": "co",
    "color_space": "cs",
    "crop": "c",
    "default_image": "d",
    "delay": "dl",
    "density": "dn",
    "dpr": "dpr",
    "duration": "du",
    "effect": "e",
    "end_offset": "eo",
    "fetch_format": "f",
    "flags": "fl",
    "fps": "fps",
    "gravity": "g",
    "height": "h",
    "keyframe_interval": "ki",
    "opacity": "o",
    "overlay": "l",
    "page": "pg",
    "quality": "q",
    "radius": "r",
    "start_offset": "so",
    "streaming_profile": "sp",
    "transformation": "t",
    "underlay": "u",
    "video_codec": "vc",
    "video_sampling": "vs",
    "width": "w",
    "x": "x",
    "y": "y",
    "zoom": "z",
}


# Parameters expanded by serialize_step instead of mapping to one URL key.
EXPANDED_KEYS = frozenset({"offset", "variables", "raw_transformation"})

# Crop modes that let the delivered size differ from the requested one.
NO_DIMENSION_CROPS = frozenset({"fit", "limit", "lfill"})


class DeliveryError(ValueError):
    """Raised when a delivery URL cannot be built."""


@dataclass(frozen=True)
class DeliveryConfig:
    """Delivery configuration used when an option is not given per call."""

    cloud_name: str | None = None
    secure: bool = True
    private_cdn: bool = False
    cname: str | None = None
    secure_distribution: str | None = None
    type: str = "upload"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ".".join(_format_value(v) for v in value)
    return str(value)


def _split_offset(value: Any) -> tuple[Any, Any]:
    """``offset`` as ``(start, end)``: ``"2.5..5"`` or ``[2.5, 5]``."""
    if isinstance(value, str) and ".." in value:
        start, _, end = value.partition("..")
        return start or None, end or None
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return value[0], value[1]
    logger.debug("Ignoring malformed offset %r", value)
    return None, None


def _variable_assignments(variables: Any) -> list[str]:
    pairs = variables.items() if isinstance(variables, Mapping) else variables
    assignments = []
    for name, value in pairs:
        name = str(name)
        if not name.startswith("$"):
            name = f"${name}"
        assignments.append(f"{name}_{_format_value(value)}")
    return assignments


def serialize_step(step: Mapping[str, Any]) -> str:
    """
    Render one transformation step, e.g. ``{"width": 300, "crop": "fill"}`` -> ``c_fill,w_300``.

    Variable assignments come first and ``raw_transformation`` last.
    ``offset`` fills ``start_offset``/``end_offset`` when those are unset.
    """
    params = dict(step)
    if params.get("offset") is not None:
        start, end = _split_offset(params["offset"])
        if params.get("start_offset") is None:
            params["start_offset"] = start
        if params.get("end_offset") is None:
            params["end_offset"] = end

    parts = []
    for name, value in params.items():
        if value is None or value == "" or name in EXPANDED_KEYS:
            continue
        key = PARAM_KEYS.get(name)
        if key is None:
            logger.debug("Ignoring unknown transformation parameter %r", name)
            continue
        parts.append(f"{key}_{_format_value(value)}")

    parts.sort()
    if params.get("variables"):
        parts = _variable_assignments(params["variables"]) + parts
    raw = params.get("raw_transformation")
    if raw:
        parts.append(str(raw))
    return ",".join(parts)


def serialize_transformation(options: Mapping[str, Any]) -> str:
    """Render the ``transformation`` chain plus any top-level parameters."""
    chain = options.get("transformation") or []
    if isinstance(chain, (str, Mapping)):
        chain = [chain]

    steps = [{"transformation": s} if isinstance(s, str) else s for s in chain]
    top_level = {
        k: v
        for k, v in options.items()
        if (k in PARAM_KEYS or k in EXPANDED_KEYS) and k != "transformation"
    }
    if top_level:
        steps.append(top_level)

    rendered = (serialize_step(step) for step in steps)
    return "/".join(r for r in rendered if r)


def _outer_step(options: Mapping[str, Any]) -> Mapping[str, Any]:
    """The step whose size the element is shown at: top-level params, else the last step."""
    if options.get("width") is not None or options.get("height") is not None:
        return options
    chain = options.get("transformation")
    if isinstance(chain, Mapping):
        return chain
    if isinstance(chain, (list, tuple)) and chain and isinstance(chain[-1], Mapping):
        return chain[-1]
    return {}


def _html_dimension(value: Any) -> Any:
    """A transformation size usable as an element attribute, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        absolute = float(value) >= 1
    except (TypeError, ValueError):
        # "auto", expressions and the like have no fixed size
        return None
    return value if absolute else None


class DeliveryUrlBuilder:
    """
    Delivery URL builder.

    Per-call options override the adapter's DeliveryConfig.
    """

    def __init__(self, config: DeliveryConfig | None = None) -> None:
        self.config = config or DeliveryConfig()

    def _prefix(self, options: Mapping[str, Any]) -> str:
        cloud_name = options.get("cloud_name") or self.config.cloud_name
        if not cloud_name:
            raise DeliveryError("Must supply cloud_name")

        secure = options.get("secure", self.config.secure)
        private_cdn = options.get("private_cdn", self.config.private_cdn)
        shared_host = SHARED_HOST if not private_cdn else f"{cloud_name}-{SHARED_HOST}"

        if secure:
            host = options.get("secure_distribution") or self.config.secure_distribution
            host = host or shared_host
            scheme = "https"
        else:
            host = options.get("cname") or self.config.cname or shared_host
            scheme = "http"

        prefix = f"{scheme}://{host}"
        if host == SHARED_HOST:
            prefix += f"/{cloud_name}"
        return prefix

    def url(self, public_id: str, options: Mapping[str, Any]) -> str:
        """Build the delivery URL of ``public_id``."""
        if not public_id:
            raise DeliveryError("Must supply public_id")

        resource_type = options.get("resource_type") or "image"
        delivery_type = options.get("type") or self.config.type
        version = options.get("version")
        if version is None and "/" in public_id and options.get("force_version", True):
            version = 1

        path = [self._prefix(options), resource_type, delivery_type]
        transformation = serialize_transformation(options)
        if transformation:
            path.append(transformation)
        if version is not None:
            path.append(f"v{version}")

        source = quote(public_id, safe="/:")
        fmt = options.get("format")
        if fmt:
            source = f"{source}.{fmt}"
        path.append(source)

        url = "/".join(path)
        logger.debug("Built delivery URL %s", url)
        return url

    def video_tag_attributes(
        self, public_id: str, options: Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Compute video tag attributes.

        ``poster`` is derived as a ``jpg`` frame of the video unless the
        options give a URL, a mapping of poster transformations, or False.
        ``width``/``height`` follow the outermost transformation step unless
        it has a layer, an angle or a fit/limit/lfill crop.
        ``html_width``/``html_height`` always win.
        """
        attributes: dict[str, Any] = {}
        url_options = {
            k: v for k, v in options.items() if k not in ("poster", "html_width", "html_height")
        }

        poster = options.get("poster")
        if isinstance(poster, str):
            attributes["poster"] = poster
        elif poster is not False:
            overrides = poster if isinstance(poster, Mapping) else {}
            poster_options = {**url_options, **overrides}
            poster_options.update(resource_type="video", format="jpg")
            attributes["poster"] = self.url(public_id, poster_options)

        step = _outer_step(url_options)
        resized = not (
            step.get("overlay")
            or step.get("underlay")
            or step.get("angle")
            or step.get("crop") in NO_DIMENSION_CROPS
        )
        for name in ("width", "height"):
            value = _html_dimension(step.get(name)) if resized else None
            if options.get(f"html_{name}") is not None:
                value = options[f"html_{name}"]
            if value is not None:
                attributes[name] = value
        return attributes


def create_delivery_url_builder(
    cloud_name: str | None = None,
    secure: bool = True,
    private_cdn: bool = False,
    cname: str | None = None,
    secure_distribution: str | None = None,
) -> DeliveryUrlBuilder:
    """Factory for DeliveryUrlBuilder."""
    return DeliveryUrlBuilder(
        DeliveryConfig(
            cloud_name=cloud_name,
            secure=secure,
            private_cdn=private_cdn,
            cname=cname,
            secure_distribution=secure_distribution,
        )
    )
