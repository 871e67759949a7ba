from .intervals import (
    Interval,
    PointEstimate,
    point_estimate,
    interval,
    quantile_interval,
    hdi,
)
from .report import probability, summarize
