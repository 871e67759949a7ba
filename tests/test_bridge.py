from types import SimpleNamespace

import numpy as np
import pytest

import gridbayes as gb


def _variable(values):
    return SimpleNamespace(values=np.asarray(values))


class DictSource(gb.SampleSource):
    def __init__(self, draws):
        self._draws = draws

    def draws(self, name):
        return self._draws[name]


def test_from_draws_pools_chains_in_order():
    chains = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    s = gb.from_draws(chains, name="mu")
    assert s.names == ("mu",)
    np.testing.assert_array_equal(s["mu"], [1, 2, 3, 4, 5, 6])


def test_external_draws_summarize_like_grid_draws():
    x = np.random.default_rng(1).normal(size=4000)
    assert gb.summarize(gb.from_draws(x))["theta"] == gb.summarize(x)["theta"]


def test_from_mapping():
    s = gb.from_mapping({"a": [1.0, 2.0], "b": [[3.0], [4.0]]})
    assert s.names == ("a", "b")
    np.testing.assert_array_equal(s.array, [[1.0, 3.0], [2.0, 4.0]])


def test_from_mapping_rejects_ragged_and_empty():
    with pytest.raises(ValueError):
        gb.from_mapping({"a": [1.0, 2.0], "b": [1.0]})
    with pytest.raises(ValueError):
        gb.from_mapping({})


def test_from_mapping_rejects_non_finite():
    with pytest.raises(ValueError):
        gb.from_mapping({"a": [1.0, np.nan]})


def test_from_posterior_group_reads_every_variable():
    rng = np.random.default_rng(2)
    trace = SimpleNamespace(posterior={
        "mu": _variable(rng.normal(size=(4, 250))),
        "sigma": _variable(rng.gamma(2.0, size=(4, 250))),
    })
    s = gb.from_posterior_group(trace)
    assert s.names == ("mu", "sigma")
    assert s.n == 1000
    np.testing.assert_array_equal(s["mu"][:250], trace.posterior["mu"].values[0])


def test_from_posterior_group_selected_names():
    trace = SimpleNamespace(posterior={"mu": _variable(np.zeros((2, 5))), "tau": _variable(np.ones((2, 5)))})
    s = gb.from_posterior_group(trace, names=["tau"])
    assert s.names == ("tau",)


def test_from_posterior_group_errors():
    with pytest.raises(TypeError):
        gb.from_posterior_group(object())
    trace = SimpleNamespace(posterior={"beta": _variable(np.zeros((2, 5, 3)))})
    with pytest.raises(ValueError):
        gb.from_posterior_group(trace)
    with pytest.raises(KeyError):
        gb.from_posterior_group(SimpleNamespace(posterior={}), names=["mu"])


def test_collect_from_source():
    source = DictSource({"mu": np.arange(6.0).reshape(2, 3), "sigma": np.ones(6)})
    s = gb.collect(source, ["mu", "sigma"])
    assert s.n == 6
    assert gb.point_estimate(s["mu"], "mean").value == 2.5


def test_sample_source_is_abstract():
    with pytest.raises(TypeError):
        gb.SampleSource()
