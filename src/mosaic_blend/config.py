"""
Mosaic configuration.
"""
import logging
from typing import Any, Optional

from attrs import define, field
from attrs.validators import and_, deep_iterable, ge, gt, instance_of, optional

from mosaic_blend.constants import IMAGE_FORMATS, BlendMode, ReturnType
from mosaic_blend.exceptions import ConfigError
from mosaic_blend.validators import checked, in_, range_

logger = logging.getLogger(__name__)


def _enum_converter(enum_type):
    def convert(value: Any):
        try:
            return enum_type(value)
        except ValueError:
            raise ConfigError(
                "Unknown %s: %r (expected one of %s)"
                % (
                    enum_type.__name__,
                    value,
                    ", ".join(member.value for member in enum_type),
                )
            ) from None

    return convert


def _to_size_range(value: Any) -> tuple[int, int]:
    try:
        minimum, maximum = value
    except (TypeError, ValueError):
        raise ConfigError(
            "overlay_size_range must be a (min, max) pair, got %r" % (value,)
        ) from None
    return minimum, maximum


def _to_format(value: Any) -> str:
    name = str(value).lower()
    return "jpeg" if name == "jpg" else name


@define(frozen=True, repr=True)
class MosaicConfig(object):
    """
    Immutable options of one mosaic invocation.

    Example::

        from mosaic_blend import MosaicConfig

        config = MosaicConfig(size=512, block=64, seed=42)

    .. py:attribute:: size

        Side length of the square output, in pixels.

    .. py:attribute:: block

        Side length of one tile. Must evenly divide ``size``.

    .. py:attribute:: seed

        Optional integer seed. Same seed, sources and options give
        byte-identical output.

    .. py:attribute:: overlay_patches_per_image

        Number of soft-overlay patches drawn from each source.

    .. py:attribute:: overlay_size_range

        ``(min_side, max_side)`` of overlay patches. Patch heights may reach
        ``floor(max_side * 1.25)``.

    .. py:attribute:: overlay_blend_mode

        :py:class:`~mosaic_blend.constants.BlendMode` of overlay patches.

    .. py:attribute:: overlay_alpha

        Opacity of overlay patches in ``[0, 1]``.

    .. py:attribute:: return_type

        :py:class:`~mosaic_blend.constants.ReturnType` of the result.

    .. py:attribute:: image_format

        Encoded format for ``data_url`` and ``blob`` results.

    .. py:attribute:: fetch_timeout

        Seconds allowed for each remote fetch.
    """

    size: int = field(default=1024, validator=checked(instance_of(int), gt(0)))
    block: int = field(default=64, validator=checked(instance_of(int), gt(0)))
    seed: Optional[int] = field(
        default=None, validator=checked(optional(instance_of(int)))
    )
    overlay_patches_per_image: int = field(
        default=5, validator=checked(instance_of(int), ge(0))
    )
    overlay_size_range: tuple[int, int] = field(
        default=(96, 320),
        converter=_to_size_range,
        validator=checked(deep_iterable(and_(instance_of(int), ge(1)))),
    )
    overlay_blend_mode: BlendMode = field(
        default=BlendMode.OVERLAY, converter=_enum_converter(BlendMode)
    )
    overlay_alpha: float = field(default=0.6, validator=range_(0.0, 1.0))
    return_type: ReturnType = field(
        default=ReturnType.SURFACE, converter=_enum_converter(ReturnType)
    )
    image_format: str = field(
        default="png",
        converter=_to_format,
        validator=checked(in_(tuple(IMAGE_FORMATS))),
    )
    fetch_timeout: float = field(
        default=10.0, validator=checked(instance_of((int, float)), gt(0))
    )

    @overlay_size_range.validator
    def _validate_size_range(self, attribute: Any, value: tuple[int, int]) -> None:
        minimum, maximum = value
        if minimum > maximum:
            raise ConfigError(
                "overlay_size_range must satisfy min <= max, got %r" % (value,)
            )

    def __attrs_post_init__(self) -> None:
        if self.size % self.block != 0:
            raise ConfigError(
                "size must be divisible by block (size=%d, block=%d)"
                % (self.size, self.block)
            )

    @property
    def tiles(self) -> int:
        """Number of tiles along one side of the grid."""
        return self.size // self.block
