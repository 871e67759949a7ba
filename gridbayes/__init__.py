"""Grid approximation of Bayesian posteriors, sampling, and interval summaries."""

from .exceptions import (
    GridBayesError,
    InvalidGridSpec,
    DegeneratePosterior,
    InvalidSampleCount,
    InsufficientSamples,
    UnsupportedDistribution,
)
from .distributions import (
    Family,
    get_family,
    available_families,
    density,
    log_density,
    Prior,
    FlatPrior,
    IndependentPrior,
    Likelihood,
)
from .grid import ParameterAxis, Grid, build, product
from .posterior import (
    PosteriorMass,
    compute_posterior,
    SampleSet,
    sample,
    spawn_streams,
    posterior_predictive,
)
from .summary import (
    Interval,
    PointEstimate,
    point_estimate,
    interval,
    quantile_interval,
    hdi,
    probability,
    summarize,
)
from .bridge import SampleSource, from_draws, from_mapping, from_posterior_group, collect
from .core import GridApproximation

__version__ = "0.1.0"
