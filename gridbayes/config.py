"""Package-wide defaults.

These are plain module constants; functions take them as keyword defaults so
callers override per call rather than by mutating this module.
"""

# Default credible mass for intervals (the 89% convention).
DEFAULT_WIDTH = 0.89

# Allowed deviation from one when validating a supplied posterior mass.
MASS_TOLERANCE = 1e-9

# Grids with more cells than this log a warning when built.
LARGE_GRID_WARNING = 5_000_000

# Evaluation points for the KDE used by the continuous mode estimate.
KDE_POINTS = 512

# Draws count as discrete for the mode when distinct values are at most this
# fraction of the draws.
DISCRETE_MODE_FRACTION = 0.2

# Slack subtracted before ceil() when turning a width into a window size.
HDI_ROUNDING = 1e-9
