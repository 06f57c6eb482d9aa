# ============================================================================
# svg_config.py - Configuration and Constants
# ============================================================================

import math


class Config:
    """Global configuration for SVG to wire conversion"""

    # Tolerance Settings
    CLOSE_PATH_TOLERANCE = 1e-3  # closing segment is skipped below this gap

    # Approximation Settings
    CIRCLE_KAPPA = 0.5522847498  # 4/3 * tan(pi/8), cubic circle quadrant
    ARC_APPROXIMATION = 'chord'  # 'chord' (single line) or 'bezier'
    ARC_MAX_SEGMENT_ANGLE = math.pi / 2  # radians per cubic in 'bezier' mode

    # Element Handling
    SUPPORTED_ELEMENTS = ('path', 'rect', 'circle', 'ellipse', 'line', 'polyline', 'polygon')
    ELEMENT_ORDER = 'by_type'  # 'by_type' or 'document'

    # Output
    GROUP_NAME = 'SVG Import'
    DEFAULT_STEP_OUTPUT = 'output.step'
    DXF_VERSION = 'R2010'

    # Diagnostics
    VERBOSE = False  # print log lines and append the debug log to errors
    LOG_PREVIEW_LENGTH = 50  # characters of path data shown in the log
