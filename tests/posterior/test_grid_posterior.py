import logging

import numpy as np
import pytest
import scipy.stats as sp

import gridbayes as gb


# ------------------------------ Normalization -----------------------------

def test_mass_sums_to_one(globe_posterior):
    assert globe_posterior.flat.sum() == pytest.approx(1.0, abs=1e-9)
    assert np.all(globe_posterior.flat >= 0)
    assert globe_posterior.mass.shape == (1000,)


def test_two_dimensional_mass_sums_to_one():
    grid = gb.product(gb.build(-2, 2, 41, name="mu"), gb.build(0.5, 3, 30, name="sigma"))
    data = np.array([-0.3, 0.1, 0.8, 1.2, -0.5])
    post = gb.compute_posterior(grid, gb.FlatPrior(), gb.Likelihood("normal", mu="mu", sigma="sigma"), data)
    assert post.mass.shape == (41, 30)
    assert post.flat.sum() == pytest.approx(1.0, abs=1e-9)


def test_mode_at_grid_point_nearest_observed_proportion(globe_posterior, p_axis):
    expected = p_axis.values[p_axis.nearest_index(6 / 9)]
    assert globe_posterior.mode()["p"] == pytest.approx(expected)


def test_probability_below_half(globe_posterior):
    # exact Beta(7, 4) value is 176 / 1024
    assert globe_posterior.probability(lambda prm: prm["p"] < 0.5) == pytest.approx(0.172, abs=0.002)


def test_matches_beta_posterior(globe_posterior, p_axis):
    exact = sp.beta.pdf(p_axis.values, 7, 4)
    exact /= exact.sum()
    np.testing.assert_allclose(globe_posterior.flat, exact, atol=1e-9)


def test_plain_callables_are_accepted(p_axis):
    post = gb.compute_posterior(
        p_axis,
        lambda prm: np.ones_like(prm["p"]),
        lambda prm, data: sp.binom.pmf(data["w"], data["n"], prm["p"]),
        {"w": 6, "n": 9},
    )
    ref = gb.compute_posterior(p_axis, gb.FlatPrior(), gb.Likelihood("binomial", observed="w", n="n", p="p"),
                               {"w": 6, "n": 9})
    np.testing.assert_allclose(post.flat, ref.flat, atol=1e-12)


def test_scalar_prior_broadcasts(p_axis, binomial_likelihood, globe_data):
    post = gb.compute_posterior(p_axis, lambda prm: 1.0, binomial_likelihood, globe_data)
    assert post.flat.sum() == pytest.approx(1.0)


def test_step_prior_truncates_mass(p_axis, binomial_likelihood, globe_data):
    post = gb.compute_posterior(p_axis, lambda prm: (prm["p"] >= 0.5).astype(float), binomial_likelihood, globe_data)
    assert post.probability(lambda prm: prm["p"] < 0.5) == 0.0
    assert post.flat.sum() == pytest.approx(1.0)


def test_log_space_avoids_underflow():
    data = np.random.default_rng(3).normal(150.0, 7.0, size=2000)
    mu = gb.build(140.0, 160.0, 401, name="mu")

    # a product of 2000 densities underflows to zero in every cell
    def naive(prm, x):
        return np.prod(sp.norm.pdf(x[np.newaxis, :], prm["mu"][:, np.newaxis], 7.0), axis=1)

    with pytest.raises(gb.DegeneratePosterior):
        gb.compute_posterior(mu, gb.FlatPrior(), naive, data)

    post = gb.compute_posterior(mu, gb.FlatPrior(), gb.Likelihood("normal", mu="mu", sigma=7.0), data)
    assert post.mean()["mu"] == pytest.approx(data.mean(), abs=0.05)
    assert np.isfinite(post.log_normalizer)
    # far below any absolute floor on the normalizing constant
    assert post.log_normalizer < np.log(1e-300)


# --------------------------------- Failures --------------------------------

def test_zero_prior_is_degenerate(p_axis, binomial_likelihood, globe_data):
    with pytest.raises(gb.DegeneratePosterior):
        gb.compute_posterior(p_axis, lambda prm: np.zeros_like(prm["p"]), binomial_likelihood, globe_data)


def test_disjoint_prior_and_likelihood_is_degenerate(binomial_likelihood):
    # all-water data is impossible at p = 0, the only cell the prior allows
    p = gb.build(0.0, 1.0, 11, name="p")
    prior = lambda prm: (prm["p"] == 0.0).astype(float)
    with pytest.raises(gb.DegeneratePosterior):
        gb.compute_posterior(p, prior, binomial_likelihood, {"w": 9, "n": 9})


def test_degenerate_posterior_is_arithmetic_error(p_axis, binomial_likelihood, globe_data):
    with pytest.raises(ArithmeticError):
        gb.compute_posterior(p_axis, lambda prm: 0.0, binomial_likelihood, globe_data)


def test_negative_weights_rejected(p_axis, binomial_likelihood, globe_data):
    with pytest.raises(ValueError):
        gb.compute_posterior(p_axis, lambda prm: prm["p"] - 0.5, binomial_likelihood, globe_data)


def test_non_finite_weights_become_zero_with_warning(p_axis, binomial_likelihood, globe_data, caplog):
    prior = lambda prm: np.where(prm["p"] < 0.1, np.nan, 1.0)
    with caplog.at_level(logging.WARNING, logger="gridbayes.posterior.grid_posterior"):
        post = gb.compute_posterior(p_axis, prior, binomial_likelihood, globe_data)
    assert post.probability(lambda prm: prm["p"] < 0.1) == 0.0
    assert any("non-finite" in rec.getMessage() for rec in caplog.records)


@pytest.mark.parametrize("data", [
    {"w": np.nan, "n": 9},
    {"w": 6, "n": None},
    {"w": [1.0, np.inf], "n": 9},
])
def test_invalid_observed_data(p_axis, binomial_likelihood, data):
    with pytest.raises(ValueError):
        gb.compute_posterior(p_axis, gb.FlatPrior(), binomial_likelihood, data)


def test_posterior_mass_validation(p_axis):
    with pytest.raises(ValueError):
        gb.PosteriorMass(p_axis, np.full(1000, 0.002))
    with pytest.raises(ValueError):
        gb.PosteriorMass(p_axis, np.full(10, 0.1))
    bad = np.full(1000, 0.001)
    bad[0], bad[1] = -0.001, 0.003
    with pytest.raises(ValueError):
        gb.PosteriorMass(p_axis, bad)


def test_posterior_mass_is_read_only(globe_posterior):
    with pytest.raises(ValueError):
        globe_posterior.flat[0] = 1.0


# ------------------------------ Summaries ---------------------------------

def test_marginals_of_two_dimensional_grid():
    grid = gb.product(gb.build(0, 1, 3, name="a"), gb.build(0, 1, 2, name="b"))
    mass = np.array([[0.1, 0.2], [0.3, 0.1], [0.2, 0.1]])
    post = gb.PosteriorMass(grid, mass)
    vals, marg_a = post.marginal("a")
    np.testing.assert_allclose(vals, [0.0, 0.5, 1.0])
    np.testing.assert_allclose(marg_a, [0.3, 0.4, 0.3])
    _, marg_b = post.marginal("b")
    np.testing.assert_allclose(marg_b, [0.6, 0.4])
    assert post.mode() == {"a": 0.5, "b": 0.0}
    assert post.mean()["a"] == pytest.approx(0.5)
    assert post.mean()["b"] == pytest.approx(0.4)
    assert post.std()["b"] == pytest.approx(np.sqrt(0.24))


def test_mode_ties_take_first_cell():
    ax = gb.build(0, 1, 4, name="t")
    post = gb.PosteriorMass(ax, [0.1, 0.4, 0.4, 0.1])
    assert post.mode() == {"t": pytest.approx(1 / 3)}


def test_loss_minimizers(globe_posterior, p_axis):
    values, marg = globe_posterior.marginal("p")
    median = values[np.searchsorted(np.cumsum(marg), 0.5)]
    assert globe_posterior.loss_minimizer("p", "absolute") == pytest.approx(median, abs=2 * p_axis.step)
    assert globe_posterior.loss_minimizer("p", "quadratic") == pytest.approx(globe_posterior.mean()["p"], abs=p_axis.step)


def test_expected_loss_shapes_and_custom_loss(globe_posterior):
    decisions = [0.2, 0.5, 0.7]
    absolute = globe_posterior.expected_loss("p", decisions)
    assert absolute.shape == (3,)
    custom = globe_posterior.expected_loss("p", decisions, loss=lambda d, t: np.abs(d - t))
    np.testing.assert_allclose(absolute, custom)
    with pytest.raises(ValueError):
        globe_posterior.expected_loss("p", decisions, loss="hinge")


def test_normal_approximation(globe_posterior):
    approx = globe_posterior.normal_approximation("p")
    assert approx.mean() == pytest.approx(7 / 11, abs=1e-3)
    assert approx.std() == pytest.approx(globe_posterior.std()["p"])


def test_normal_approximation_needs_spread():
    post = gb.PosteriorMass(gb.build(0, 1, 3, name="t"), [0.0, 1.0, 0.0])
    with pytest.raises(ValueError):
        post.normal_approximation("t")
