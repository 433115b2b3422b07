"""Line-shape kernels used to bake opacity tables."""

from opacity_tables.physics.line_shapes import (
    LINE_SHAPES,
    doppler,
    get_line_shape,
    lorentz,
    voigt,
)

__all__ = ["LINE_SHAPES", "voigt", "lorentz", "doppler", "get_line_shape"]
