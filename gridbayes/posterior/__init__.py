from .grid_posterior import PosteriorMass, compute_posterior, validate_observed
from .sampler import SampleSet, sample, spawn_streams, posterior_predictive
