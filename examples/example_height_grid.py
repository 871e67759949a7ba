"""
Example: Two-parameter grid for a Normal model of heights
---------------------------------------------------------

Model:
    h_i   ~ Normal(mu, sigma)
    mu    ~ Normal(178, 20)
    sigma ~ Uniform(0, 50)

The joint posterior lives on a 150 x 150 grid; the likelihood sums log
densities over all observations so the product of hundreds of densities does
not underflow.
"""

import numpy as np
import gridbayes as gb


heights = np.random.default_rng(1).normal(154.6, 7.7, size=352)

model = gb.GridApproximation(
    [gb.build(150, 160, 150, name="mu"), gb.build(4, 9, 150, name="sigma")],
    prior=gb.IndependentPrior(
        gb.Prior("normal", "mu", mu=178.0, sigma=20.0),
        gb.Prior("uniform", "sigma", low=0.0, high=50.0),
    ),
    likelihood=gb.Likelihood("normal", observed="height", mu="mu", sigma="sigma"),
    rng=2,
)
post = model.fit({"height": heights})
print("MAP:", post.mode())
print("Posterior means:", post.mean())
print(model.summarize(n=10_000, widths=(0.89,)))
