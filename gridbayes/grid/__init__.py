from .axis import ParameterAxis, Grid, build, product, as_grid
