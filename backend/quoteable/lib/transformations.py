"""
So Quoteable Backend — Cloudinary Transformation URL Compiler
==============================================================

What:  Pure functions that compose Cloudinary transformation directives into
       a single delivery URL.
Why:   Cloudinary renders quote cards from the URL alone; getting the path
       grammar right is the whole job, so it lives in one tested place.
How:   Each directive is a small frozen dataclass that validates itself on
       construction and serializes to its wire token only when the URL is
       assembled. Directive order is preserved verbatim.
Who:   QuoteCardService, the /api/transformations route, and ad-hoc scripts.

URL Pattern:
    https://res.cloudinary.com/{cloud_name}/image/upload/{d1}/{d2}/.../{public_id}

    Directives are separated by "/" and applied in order (a background tint
    must come before the text drawn on top of it). Fragments inside one
    directive are separated by ",".

Directive grammar:
    Resize:             w_<int>,h_<int>,c_<crop>
    Optimize:           f_<format>,q_<quality|auto>
    Background overlay: l_<color>,e_colorize:<opacity>,fl_layer_apply
    Text overlay:       l_text:<family>_<size>[_bold]:<text>[,co_rgb:<color>]
                        [,g_<gravity>][,y_<y>][,x_<x>][,w_<max_width>,c_fit]

See https://cloudinary.com/documentation/image_transformations
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Type, Union
from urllib.parse import quote

from quoteable.exceptions import (
    InvalidCropModeError,
    InvalidDimensionError,
    InvalidGravityError,
    InvalidOpacityError,
    InvalidQualityError,
    MissingAccountNameError,
    MissingAssetIdError,
)

CLOUDINARY_HOST = "res.cloudinary.com"

# Characters left unescaped by URI-component encoding (besides ASCII alphanumerics).
# A literal "," would split the directive and a literal "/" would end it.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class CropMode(str, Enum):
    """Crop modes supported by the resize directive."""

    FILL = "fill"    # Fill the box, cropping excess
    SCALE = "scale"  # Scale to the box, may distort
    FIT = "fit"      # Fit inside the box, keep aspect ratio
    CROP = "crop"    # Cut out the box
    THUMB = "thumb"  # Thumbnail


class Gravity(str, Enum):
    """Anchor point used to position overlays."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    CENTER = "center"
    NORTH_EAST = "north_east"
    NORTH_WEST = "north_west"
    SOUTH_EAST = "south_east"
    SOUTH_WEST = "south_west"


def _coerce_enum(enum_cls: Type[Enum], value: Any, error_cls: Type[Exception]) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise error_cls(value, allowed=[member.value for member in enum_cls]) from None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: Union[int, float]) -> str:
    # 50.0 must render as "50", not "50.0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_text(text: str) -> str:
    """Percent-encode overlay text using URI-component rules (UTF-8)."""
    return quote(text, safe=_URI_COMPONENT_SAFE, encoding="utf-8")


# ══════════════════════════════════════════════════════════════════════════
# Directive Variants
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Resize:
    width: Union[int, float]
    height: Union[int, float]
    crop: CropMode = CropMode.FILL

    def __post_init__(self) -> None:
        if not _is_number(self.width) or self.width <= 0:
            raise InvalidDimensionError("width", self.width)
        if not _is_number(self.height) or self.height <= 0:
            raise InvalidDimensionError("height", self.height)
        object.__setattr__(self, "crop", _coerce_enum(CropMode, self.crop, InvalidCropModeError))

    def to_param(self) -> str:
        return (
            f"w_{_format_number(self.width)},"
            f"h_{_format_number(self.height)},"
            f"c_{self.crop.value}"
        )

    def __str__(self) -> str:
        return self.to_param()


@dataclass(frozen=True)
class Optimize:
    """
    Output format and quality.

    `format` is passed through untouched: Cloudinary falls back gracefully on
    formats it does not know, so there is no fixed list to check against.
    """

    format: str = "auto"
    quality: Union[int, float, str] = "auto"

    def __post_init__(self) -> None:
        if isinstance(self.quality, str):
            if self.quality != "auto":
                raise InvalidQualityError(self.quality)
        elif not _is_number(self.quality) or not 1 <= self.quality <= 100:
            raise InvalidQualityError(self.quality)

    def to_param(self) -> str:
        quality = self.quality if isinstance(self.quality, str) else _format_number(self.quality)
        return f"f_{self.format},q_{quality}"

    def __str__(self) -> str:
        return self.to_param()


@dataclass(frozen=True)
class BackgroundOverlay:
    """
    Full-bleed color layer flattened into the base image.

    `color` is a named color ("black") or a color-space literal
    ("rgb:1a1a1a") and is not validated.
    """

    opacity: Union[int, float]
    color: str = "black"

    def __post_init__(self) -> None:
        if not _is_number(self.opacity) or not 0 <= self.opacity <= 100:
            raise InvalidOpacityError(self.opacity)

    def to_param(self) -> str:
        return f"l_{self.color},e_colorize:{_format_number(self.opacity)},fl_layer_apply"

    def __str__(self) -> str:
        return self.to_param()


@dataclass(frozen=True)
class TextOverlayOptions:
    font_family: str = "Arial"
    font_size: int = 48
    font_weight: Optional[str] = None
    color: Optional[str] = None
    gravity: Optional[Gravity] = None
    y_offset: Optional[int] = None
    x_offset: Optional[int] = None
    max_width: Optional[int] = None

    def __post_init__(self) -> None:
        if self.gravity is not None:
            object.__setattr__(
                self, "gravity", _coerce_enum(Gravity, self.gravity, InvalidGravityError)
            )


@dataclass(frozen=True)
class TextOverlay:
    text: str
    options: TextOverlayOptions = field(default_factory=TextOverlayOptions)

    def font_spec(self) -> str:
        opts = self.options
        spec = f"{opts.font_family}_{_format_number(opts.font_size)}"
        if opts.font_weight == "bold":
            spec += "_bold"
        return spec

    def to_param(self) -> str:
        opts = self.options
        parts = [f"l_text:{self.font_spec()}:{encode_text(self.text.strip())}"]

        if opts.color:
            parts.append(f"co_rgb:{opts.color}")
        if opts.gravity is not None:
            parts.append(f"g_{opts.gravity.value}")
        if opts.y_offset is not None:
            parts.append(f"y_{_format_number(opts.y_offset)}")
        if opts.x_offset is not None:
            parts.append(f"x_{_format_number(opts.x_offset)}")
        if opts.max_width is not None:
            parts.append(f"w_{_format_number(opts.max_width)}")
            parts.append("c_fit")

        return ",".join(parts)

    def __str__(self) -> str:
        return self.to_param()


Directive = Union[Resize, Optimize, BackgroundOverlay, TextOverlay]

# Anything build_image_url accepts as one step of the chain
Transformation = Union[Directive, str]


# ══════════════════════════════════════════════════════════════════════════
# Directive Constructors
# ══════════════════════════════════════════════════════════════════════════


def resize_image(
    width: Union[int, float],
    height: Union[int, float],
    crop: Union[CropMode, str] = CropMode.FILL,
) -> Resize:
    """
    Create a resize directive.

    >>> str(resize_image(800, 600))
    'w_800,h_600,c_fill'
    >>> str(resize_image(800, 600, "scale"))
    'w_800,h_600,c_scale'

    Raises:
        InvalidDimensionError: width or height is not positive
        InvalidCropModeError: unknown crop mode
    """
    return Resize(width=width, height=height, crop=crop)


def optimize_image(
    format: str = "auto",
    quality: Union[int, float, str] = "auto",
) -> Optimize:
    """
    Create a format/quality directive.

    f_auto serves WebP to Chrome, JPEG to Safari, etc.; q_auto picks a
    quality level from the image content.

    >>> str(optimize_image())
    'f_auto,q_auto'
    >>> str(optimize_image("webp", 80))
    'f_webp,q_80'
    """
    return Optimize(format=format, quality=quality)


def add_background_overlay(
    opacity: Union[int, float],
    color: str = "black",
) -> BackgroundOverlay:
    """
    Create a semi-transparent backdrop that makes overlaid text readable.

    >>> str(add_background_overlay(50))
    'l_black,e_colorize:50,fl_layer_apply'
    >>> str(add_background_overlay(60, "rgb:333333"))
    'l_rgb:333333,e_colorize:60,fl_layer_apply'
    """
    return BackgroundOverlay(opacity=opacity, color=color)


def add_text_overlay(
    text: str,
    options: Optional[Union[TextOverlayOptions, Mapping[str, Any]]] = None,
    **overrides: Any,
) -> TextOverlay:
    """
    Create a text layer directive.

    Options come either as a TextOverlayOptions record, a mapping of its
    field names, or keyword arguments (which win over `options`).

    >>> str(add_text_overlay("Hello World"))
    'l_text:Arial_48:Hello%20World'
    >>> str(add_text_overlay("Quote", font_family="Times", font_size=64,
    ...                      font_weight="bold", color="ffffff",
    ...                      gravity="center", max_width=800))
    'l_text:Times_64_bold:Quote,co_rgb:ffffff,g_center,w_800,c_fit'
    """
    if options is None:
        opts = TextOverlayOptions(**overrides)
    elif isinstance(options, TextOverlayOptions):
        opts = dataclasses.replace(options, **overrides) if overrides else options
    else:
        opts = TextOverlayOptions(**{**dict(options), **overrides})
    return TextOverlay(text=text, options=opts)


# ══════════════════════════════════════════════════════════════════════════
# URL Assembly
# ══════════════════════════════════════════════════════════════════════════


def _serialize(transformation: Transformation) -> str:
    if isinstance(transformation, str):
        return transformation
    return transformation.to_param()


def serialize_transformations(transformations: Iterable[Transformation]) -> str:
    """Join a directive chain into its "/"-separated wire form."""
    return "/".join(_serialize(t) for t in transformations)


def build_image_url(
    cloudinary_id: str,
    transformations: Iterable[Transformation],
    cloud_name: str,
    host: str = CLOUDINARY_HOST,
) -> str:
    """
    Build a Cloudinary delivery URL.

    Args:
        cloudinary_id: Public ID of the source asset, e.g. "so-quotable/people/einstein"
        transformations: Ordered directives (objects or pre-serialized tokens)
        cloud_name: Cloudinary cloud name
        host: Delivery host

    Returns:
        https://<host>/<cloud_name>/image/upload[/<directive>]*/<cloudinary_id>

    Raises:
        MissingAssetIdError: cloudinary_id is empty after trimming
        MissingAccountNameError: cloud_name is empty after trimming
    """
    trimmed_id = (cloudinary_id or "").strip()
    trimmed_cloud = (cloud_name or "").strip()

    if not trimmed_id:
        raise MissingAssetIdError()
    if not trimmed_cloud:
        raise MissingAccountNameError()

    base_url = f"https://{host}/{trimmed_cloud}/image/upload"
    chain = serialize_transformations(transformations)

    if not chain:
        return f"{base_url}/{trimmed_id}"
    return f"{base_url}/{chain}/{trimmed_id}"
