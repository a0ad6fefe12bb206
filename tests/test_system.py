import pytest

from reliasim.params import RepairableSystemParams, SystemParams
from reliasim.system import Device, RepairableSystem, System


@pytest.fixture
def params():
    return SystemParams(lambda_a=3.0, lambda_b=1.0, na=3, nb=1, ra=2, rb=1)


@pytest.fixture
def rparams():
    return RepairableSystemParams(
        lambda_a=3.0, lambda_b=1.0, na=3, nb=1, ra=2, rb=1, lambda_s=3.0
    )


def _all_states(p):
    return [(a, b) for a in range(p.na + p.ra + 1) for b in range(p.nb + p.rb + 1)]


def test_initial_state_is_full(params):
    system = System(params)
    assert system.current_state() == (params.na + params.ra, params.nb + params.rb)
    assert system.is_operational()
    assert system.state_to_index(*system.current_state()) == 0


def test_index_round_trip_and_coverage(params):
    system = System(params)
    indices = []
    for a, b in _all_states(params):
        index = system.state_to_index(a, b)
        assert system.index_to_state(index) == (a, b)
        indices.append(index)
    assert sorted(indices) == list(range(system.total_states()))


def test_failures_of_a_stop_at_zero(params):
    system = System(params)
    for _ in range(params.na + params.ra + 2):
        system.device_failure(Device.A)
    assert system.current_state() == (0, params.nb + params.rb)
    assert not system.is_operational()


def test_losing_spare_b_then_required_b(params):
    system = System(params)
    for _ in range(params.rb):
        system.device_failure(Device.B)
    assert system.is_operational()
    system.device_failure(Device.B)
    assert not system.is_operational()


def test_repairable_starts_idle(rparams):
    system = RepairableSystem(rparams)
    assert system.current_state() == (rparams.na + rparams.ra, rparams.nb + rparams.rb, 0)
    assert system.device_to_repair() is None
    assert not system.has_devices_to_repair()


def test_repair_priority_and_status(rparams):
    system = RepairableSystem(rparams)
    full_a, full_b = system.max_devices()
    system.device_failure(Device.A)
    assert system.device_to_repair() is Device.A
    assert system.current_state()[2] == 1
    system.device_failure(Device.B)
    assert system.device_to_repair() is Device.A
    system.device_repair()
    assert system.current_state() == (full_a, full_b - 1, 2)
    system.device_repair()
    assert system.current_state() == (full_a, full_b, 0)


def test_tie_goes_to_b_when_b_fails_faster():
    rp = RepairableSystemParams(lambda_a=1.0, lambda_b=2.0, na=2, nb=1, ra=1, rb=1, lambda_s=1.0)
    system = RepairableSystem(rp)
    system.device_failure(Device.A)
    system.device_failure(Device.B)
    assert system.device_to_repair() is Device.B


def test_repair_with_empty_queue_changes_nothing(rparams):
    system = RepairableSystem(rparams)
    before = system.current_state()
    system.device_repair()
    assert system.current_state() == before


def test_repairable_operational(rparams):
    system = RepairableSystem(rparams)
    for _ in range(rparams.nb + rparams.rb):
        system.device_failure(Device.B)
    assert not system.is_operational()
    assert system.device_to_repair() is Device.B


def test_repairable_index_round_trip(rparams):
    system = RepairableSystem(rparams)
    indices = set()
    for r in range(3):
        for a, b in _all_states(rparams):
            index = system.state_to_index(a, b, r)
            assert system.index_to_state(index) == (a, b, r)
            indices.add(index)
    assert indices == set(range(system.total_states()))
    assert system.total_states() == 3 * system.aggregated_states()


def test_graph_index_matches_plain_system(rparams):
    rep = RepairableSystem(rparams)
    plain = System(rparams)
    for a, b in _all_states(rparams):
        assert rep.state_to_graph_index(a, b) == plain.state_to_index(a, b)
    assert rep.max_devices() == (rparams.na + rparams.ra, rparams.nb + rparams.rb)