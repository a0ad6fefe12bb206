import pytest

from reliasim.params import RepairableSystemParams
from reliasim.repairable_simulator import (
    TRAJECTORY_HEADER,
    Event,
    EventType,
    RepairableSimulator,
    write_trajectory,
)


@pytest.fixture
def params():
    return RepairableSystemParams.from_variant(260, 1)


def _totals(params):
    return params.na + params.ra, params.nb + params.rb


@pytest.mark.parametrize("method", ["simulate_markov_chain", "simulate_discrete_events"])
def test_trajectory_starts_fully_working(params, method):
    sim = RepairableSimulator(params, seed=1)
    trajectory = getattr(sim, method)(2.0)
    total_a, total_b = _totals(params)
    assert trajectory[0] == (0.0, total_a, total_b, 0)


@pytest.mark.parametrize("method", ["simulate_markov_chain", "simulate_discrete_events"])
def test_trajectory_invariants(params, method):
    sim = RepairableSimulator(params, seed=7)
    horizon = 5.0
    trajectory = getattr(sim, method)(horizon)
    total_a, total_b = _totals(params)
    assert len(trajectory) > 1
    for (t0, a0, b0, _), (t1, a1, b1, r1) in zip(trajectory, trajectory[1:]):
        assert t0 <= t1 <= horizon
        assert 0 <= a1 <= total_a
        assert 0 <= b1 <= total_b
        assert r1 in (0, 1, 2)
        assert abs(a1 - a0) + abs(b1 - b0) <= 1


def test_markov_chain_each_step_changes_one_device(params):
    trajectory = RepairableSimulator(params, seed=3).simulate_markov_chain(5.0)
    for (_, a0, b0, _), (_, a1, b1, _) in zip(trajectory, trajectory[1:]):
        assert abs(a1 - a0) + abs(b1 - b0) == 1


@pytest.mark.parametrize("method", ["simulate_markov_chain", "simulate_discrete_events"])
def test_same_seed_same_trajectory(params, method):
    first = getattr(RepairableSimulator(params, seed=42), method)(3.0)
    second = getattr(RepairableSimulator(params, seed=42), method)(3.0)
    assert first == second


@pytest.mark.parametrize("method", ["simulate_markov_chain", "simulate_discrete_events"])
def test_zero_time_gives_only_initial_point(params, method):
    trajectory = getattr(RepairableSimulator(params, seed=0), method)(0.0)
    assert len(trajectory) == 1


def test_event_ordering_by_time():
    early = Event(1.0, EventType.DEVICE_REPAIR)
    late = Event(2.0, EventType.DEVICE_FAILURE_A)
    assert early < late
    assert sorted([late, early]) == [early, late]


def test_statistics_single_state(params):
    total_a, total_b = _totals(params)
    sim = RepairableSimulator(params, seed=0)
    stats = sim.calculate_statistics([(0.0, total_a, total_b, 0), (2.0, total_a, total_b, 0)])
    assert stats.failure_probability == 0.0
    assert stats.average_working_a == pytest.approx(total_a)
    assert stats.average_working_b == pytest.approx(total_b)
    assert stats.repair_utilization == 0.0


def test_statistics_failed_state(params):
    sim = RepairableSimulator(params, seed=0)
    stats = sim.calculate_statistics([(0.0, 0, 2, 1), (4.0, 0, 2, 1)])
    assert stats.failure_probability == pytest.approx(1.0)
    assert stats.repair_utilization == pytest.approx(1.0)
    assert stats.average_working_a == 0.0


def test_statistics_of_simulation_are_probabilities(params):
    sim = RepairableSimulator(params, seed=11)
    stats = sim.calculate_statistics(sim.simulate_markov_chain(10.0))
    total_a, total_b = _totals(params)
    assert 0.0 <= stats.failure_probability <= 1.0 + 1e-12
    assert 0.0 <= stats.repair_utilization <= 1.0 + 1e-12
    assert 0.0 <= stats.average_working_a <= total_a
    assert 0.0 <= stats.average_working_b <= total_b


def test_statistics_of_empty_trajectory_raises(params):
    with pytest.raises(ValueError):
        RepairableSimulator(params).calculate_statistics([])


def test_write_trajectory_round_trip(tmp_path):
    trajectory = [(0.0, 5, 2, 0), (0.25, 4, 2, 1), (1.5, 5, 2, 0)]
    path = write_trajectory(trajectory, tmp_path / "traj.dat")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == TRAJECTORY_HEADER
    parsed = []
    for line in lines[1:]:
        t, a, b, r = line.split()
        parsed.append((float(t), int(a), int(b), int(r)))
    assert parsed == trajectory


@pytest.mark.parametrize(
    "method", ["run_markov_chain_simulation", "run_discrete_event_simulation"]
)
def test_run_writes_file(params, tmp_path, capsys, method):
    path = tmp_path / "out.dat"
    trajectory = getattr(RepairableSimulator(params, seed=5), method)(3.0, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == len(trajectory) + 1
    assert lines[0] == TRAJECTORY_HEADER
    assert str(path) in capsys.readouterr().out