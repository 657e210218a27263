"""
High-level API.

- :py:mod:`mosaic_blend.api.mosaic`: The mosaic pipeline
- :py:mod:`mosaic_blend.api.loader`: Source loading and cover-fit
- :py:mod:`mosaic_blend.api.pil_io`: Output encoding
"""
