import math

import pytest

from reliasim.params import SystemParams
from reliasim.simulator import Simulator
from reliasim.system import System


@pytest.fixture
def params():
    return SystemParams(lambda_a=3.0, lambda_b=1.0, na=3, nb=1, ra=2, rb=1)


def test_same_seed_same_results(params):
    first = Simulator(params, seed=42)
    second = Simulator(params, seed=42)
    assert [first.simulate_single_run() for _ in range(5)] == [
        second.simulate_single_run() for _ in range(5)
    ]


def test_single_run_positive(params):
    sim = Simulator(params, seed=1)
    assert all(sim.simulate_single_run() > 0 for _ in range(20))


def test_trajectory_steps_down_one_device(params):
    sim = Simulator(params, seed=7)
    system = System(params)
    trajectory = sim.simulate_trajectory()
    assert trajectory[0] == (0.0, 0)
    times = [t for t, _ in trajectory]
    assert times == sorted(times)
    states = [system.index_to_state(index) for _, index in trajectory]
    for (a0, b0), (a1, b1) in zip(states, states[1:]):
        assert (a0 + b0) - (a1 + b1) == 1
    a_last, b_last = states[-1]
    assert a_last < 1 or b_last < params.nb
    for a, b in states[:-1]:
        assert a >= 1 and b >= params.nb


def test_single_exponential_device_mean():
    p = SystemParams(lambda_a=2.0, lambda_b=1.0, na=1, nb=0, ra=0, rb=0)
    mean, std = Simulator(p, seed=123).simulate_multiple_runs(20000)
    assert mean == pytest.approx(1.0 / p.lambda_a, rel=0.05)
    assert std == pytest.approx(1.0 / p.lambda_a, rel=0.05)


def test_multiple_runs_requires_positive_count(params):
    with pytest.raises(ValueError):
        Simulator(params, seed=0).simulate_multiple_runs(0)


def test_zero_rates_never_fail():
    p = SystemParams(lambda_a=0.0, lambda_b=0.0, na=1, nb=1, ra=0, rb=0)
    result = Simulator(p, seed=0).simulate_single_run()
    assert result == math.inf