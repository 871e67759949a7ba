"""
Example: Grid approximation for the globe-tossing model
-------------------------------------------------------

Model:
    w ~ Binomial(n, p)
    p ~ Uniform(0, 1)

We observe w = 6 water in n = 9 tosses, approximate the posterior of p on a
1000-point grid, sample from it and summarize the samples.
"""

import numpy as np
import gridbayes as gb


p_axis = gb.build(0.0, 1.0, 1000, name="p")
likelihood = gb.Likelihood("binomial", observed="w", n="n", p="p")

posterior = gb.compute_posterior(p_axis, gb.FlatPrior(), likelihood, {"w": 6, "n": 9})
print("MAP:", posterior.mode())
print("P(p < 0.5):", posterior.probability(lambda prm: prm["p"] < 0.5))
print("Median via absolute loss:", posterior.loss_minimizer("p", "absolute"))

samples = posterior.sample(10_000, rng=np.random.default_rng(100))
print("Mean:", gb.point_estimate(samples, "mean").value)
print("89% quantile interval:", tuple(gb.interval(samples, 0.89)))
print("50% / 89% HDI:", [tuple(iv) for iv in gb.interval(samples, [0.5, 0.89], "hdi")])

# simulate new data sets from the posterior
w_sim = gb.posterior_predictive(samples, "binomial", rng=1, n=9, p="p")
print("Posterior predictive counts:", np.bincount(w_sim.astype(int), minlength=10))
