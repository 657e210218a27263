"""
Blend mode implementations.

Blend functions take the backdrop ``Cb`` and the source ``Cs`` as float
arrays of shape ``(height, width, 3)`` in ``[0, 1]`` and return the mixed
color ``B(Cb, Cs)``. Formulas follow W3C Compositing and Blending Level 1,
the same ones an HTML canvas applies for these operation names.
"""
import logging

import numpy as np

from mosaic_blend.constants import BlendMode

logger = logging.getLogger(__name__)


# Separable blend functions
def normal(Cb, Cs):
    return Cs


def multiply(Cb, Cs):
    return Cb * Cs


def screen(Cb, Cs):
    return Cb + Cs - (Cb * Cs)


def overlay(Cb, Cs):
    return hard_light(Cs, Cb)


def darken(Cb, Cs):
    return np.minimum(Cb, Cs)


def lighten(Cb, Cs):
    return np.maximum(Cb, Cs)


def color_dodge(Cb, Cs):
    B = np.ones_like(Cb, dtype=np.float32)
    B[Cb == 0] = 0
    index = (Cb != 0) & (Cs < 1)
    B[index] = np.minimum(1, Cb[index] / (1 - Cs[index]))
    return B


def color_burn(Cb, Cs):
    B = np.zeros_like(Cb, dtype=np.float32)
    B[Cb == 1] = 1
    index = (Cb != 1) & (Cs > 0)
    B[index] = 1 - np.minimum(1, (1 - Cb[index]) / Cs[index])
    return B


def hard_light(Cb, Cs):
    index = Cs > 0.5
    B = multiply(Cb, 2 * Cs)
    B[index] = screen(Cb, 2 * Cs - 1)[index]
    return B


def soft_light(Cb, Cs):
    D = np.where(Cb <= 0.25, ((16 * Cb - 12) * Cb + 4) * Cb, np.sqrt(Cb))
    return np.where(
        Cs <= 0.5,
        Cb - (1 - 2 * Cs) * Cb * (1 - Cb),
        Cb + (2 * Cs - 1) * (D - Cb),
    )


def difference(Cb, Cs):
    return np.abs(Cb - Cs)


def exclusion(Cb, Cs):
    return Cb + Cs - 2 * Cb * Cs


# Non-separable blend functions operate on the RGB triplet as a whole.
def hue(Cb, Cs):
    return _set_lum(_set_sat(Cs, _sat(Cb)), _lum(Cb))


def saturation(Cb, Cs):
    return _set_lum(_set_sat(Cb, _sat(Cs)), _lum(Cb))


def color(Cb, Cs):
    return _set_lum(Cs, _lum(Cb))


def luminosity(Cb, Cs):
    return _set_lum(Cb, _lum(Cs))


# Helper functions from PDF reference.
def _lum(C):
    return 0.3 * C[:, :, 0:1] + 0.59 * C[:, :, 1:2] + 0.11 * C[:, :, 2:3]


def _set_lum(C, l):
    d = l - _lum(C)
    return _clip_color(C + d)


def _clip_color(C):
    L = _lum(C)
    C_min = np.min(C, axis=2, keepdims=True)
    C_max = np.max(C, axis=2, keepdims=True)

    with np.errstate(divide="ignore", invalid="ignore"):
        C = np.where(C_min < 0.0, L + (C - L) * L / (L - C_min), C)
        C = np.where(C_max > 1.0, L + (C - L) * (1 - L) / (C_max - L), C)

    # For numerical stability.
    return np.clip(np.nan_to_num(C), 0.0, 1.0)


def _sat(C):
    return np.max(C, axis=2, keepdims=True) - np.min(C, axis=2, keepdims=True)


def _set_sat(C, s):
    # Maximum channel goes to s, minimum to 0, the middle one in proportion.
    C_min = np.min(C, axis=2, keepdims=True)
    spread = _sat(C)
    with np.errstate(divide="ignore", invalid="ignore"):
        B = np.where(spread > 0, (C - C_min) * s / spread, 0.0)
    return B


"""Blend function table."""
BLEND_FUNC = {
    BlendMode.NORMAL: normal,
    BlendMode.MULTIPLY: multiply,
    BlendMode.SCREEN: screen,
    BlendMode.OVERLAY: overlay,
    BlendMode.DARKEN: darken,
    BlendMode.LIGHTEN: lighten,
    BlendMode.COLOR_DODGE: color_dodge,
    BlendMode.COLOR_BURN: color_burn,
    BlendMode.HARD_LIGHT: hard_light,
    BlendMode.SOFT_LIGHT: soft_light,
    BlendMode.DIFFERENCE: difference,
    BlendMode.EXCLUSION: exclusion,
    BlendMode.HUE: hue,
    BlendMode.SATURATION: saturation,
    BlendMode.COLOR: color,
    BlendMode.LUMINOSITY: luminosity,
}
