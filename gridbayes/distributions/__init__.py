from .families import (
    Family,
    Binomial,
    Normal,
    Uniform,
    Cauchy,
    register,
    get_family,
    available_families,
    density,
    log_density,
)
from .density_functions import (
    PriorFunction,
    Prior,
    FlatPrior,
    IndependentPrior,
    Likelihood,
)
