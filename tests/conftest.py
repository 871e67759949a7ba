import pytest
import numpy as np

import gridbayes as gb


@pytest.fixture
def rng():
    return np.random.default_rng(42)

@pytest.fixture
def p_axis():
    return gb.build(0.0, 1.0, 1000, name="p")

@pytest.fixture
def globe_data():
    return {"w": 6, "n": 9}

@pytest.fixture
def binomial_likelihood():
    return gb.Likelihood("binomial", observed="w", n="n", p="p")

@pytest.fixture
def globe_posterior(p_axis, binomial_likelihood, globe_data):
    return gb.compute_posterior(p_axis, gb.FlatPrior(), binomial_likelihood, globe_data)

@pytest.fixture
def globe_samples(globe_posterior):
    return globe_posterior.sample(10_000, rng=np.random.default_rng(100))

@pytest.fixture
def normal_draws():
    return np.random.default_rng(7).normal(0.0, 1.0, size=5000)
