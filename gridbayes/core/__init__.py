from .workflow import GridApproximation
