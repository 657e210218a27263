"""
Validation functions for attrs.

Validators raise :py:class:`~mosaic_blend.exceptions.ConfigError`, which is
also a :py:class:`ValueError`.
"""
import attr
from attr.validators import and_, in_

from mosaic_blend.exceptions import ConfigError

__all__ = ["in_", "range_", "checked"]


@attr.s(repr=False, slots=True, hash=True)
class _RangeValidator(object):
    minimum = attr.ib()
    maximum = attr.ib()

    def __call__(self, inst, attr, value):
        try:
            in_range = self.minimum <= value and value <= self.maximum
        except TypeError:
            in_range = False

        if not in_range:
            raise ConfigError(
                "'{name}' must be in range [{minimum!r}, {maximum!r}], got {value!r}".format(
                    name=attr.name,
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self):
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


@attr.s(repr=False, slots=True, hash=True)
class _CheckedValidator(object):
    validator = attr.ib()

    def __call__(self, inst, attr, value):
        try:
            self.validator(inst, attr, value)
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            # attrs passes (message, attribute, ...) as the exception args.
            raise ConfigError(e.args[0] if e.args else str(e)) from e

    def __repr__(self):
        return "<checked validator for {validator!r}>".format(validator=self.validator)


def range_(minimum, maximum):
    """
    A validator that raises a :exc:`ConfigError` if the initializer is called
    with a value that does not belong in the [minimum, maximum] range. The
    check is performed using ``minimum <= value and value <= maximum``
    """
    return _RangeValidator(minimum, maximum)


def checked(*validators):
    """
    Compose attrs validators and report their failures as :exc:`ConfigError`.

    Example::

        size = field(validator=checked(instance_of(int), gt(0)))
    """
    return _CheckedValidator(and_(*validators))
