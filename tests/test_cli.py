import io
import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest

from reliasim import cli
from reliasim.markov_model import MarkovModel
from reliasim.params import RepairableSystemParams, SystemParams
from reliasim.repairable_markov_model import RepairableMarkovModel
from reliasim.repairable_simulator import write_trajectory


class _Done:
    returncode = 0


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    calls = []

    def fake_run(args, **kwargs):
        calls.append(list(args))
        return _Done()

    monkeypatch.setattr(subprocess, "run", fake_run)
    return tmp_path, calls


def test_mean_of_empty_is_zero():
    assert cli.mean([]) == 0.0


def test_mean_of_values():
    assert cli.mean([1.0, 2.0, 3.0]) == pytest.approx(2.0)


def test_standard_deviation_worked_example():
    values = [2, 4, 4, 4, 5, 5, 7, 9]
    assert cli.standard_deviation(values, cli.mean(values)) == pytest.approx(2.0)


@pytest.mark.parametrize("values", [[], [7.5]])
def test_standard_deviation_of_short_sequences_is_zero(values):
    assert cli.standard_deviation(values, cli.mean(values)) == 0.0


def test_standard_deviation_of_constant_values_is_zero():
    assert cli.standard_deviation([3.0] * 5, 3.0) == pytest.approx(0.0)


def test_read_trajectory_round_trip(tmp_path):
    trajectory = [(0.0, 5, 2, 0), (0.5, 4, 2, 1), (1.25, 4, 1, 2)]
    path = write_trajectory(trajectory, tmp_path / "traj.dat")
    assert cli.read_trajectory(path) == trajectory


def test_read_trajectory_stops_at_bad_row(tmp_path):
    path = tmp_path / "traj.dat"
    path.write_text("# header\n0 5 2 0\n1.5 4 x 1\n2 3 2 1\n", encoding="utf-8")
    assert cli.read_trajectory(path) == [(0.0, 5, 2, 0)]


def test_read_trajectory_with_header_only(tmp_path):
    path = tmp_path / "traj.dat"
    path.write_text("# Time WorkingA WorkingB RepairStatus\n", encoding="utf-8")
    assert cli.read_trajectory(path) == []


def test_run_task1_writes_matrix_and_returns_mttf(workdir, capsys):
    tmp_path, calls = workdir
    mttf = cli.run_task1(260, 1)

    params = SystemParams.from_variant(260, 1)
    model = MarkovModel(params)
    saved = np.loadtxt(tmp_path / "transition_matrix_task1.dat")
    np.testing.assert_allclose(saved, model.transition_matrix)

    times, probabilities = model.solve_kolmogorov_equations(2.0, 100)
    expected = model.calculate_mttf(times, model.reliability_function(probabilities))
    assert mttf == pytest.approx(expected)

    out = capsys.readouterr().out
    assert "Параметры системы (Задача 1):" in out
    assert "MTTF (аналитический)" in out
    assert (tmp_path / "state_graph_task1.dot").exists()
    assert (tmp_path / "failure_times_histogram_task1.dat").exists()
    assert any(args[0] == "gnuplot" for args in calls)
    assert any(args[0] == "dot" for args in calls)


def test_run_task2_returns_steady_state_and_writes_trajectories(workdir, capsys):
    tmp_path, _ = workdir
    steady = cli.run_task2(260, 1)

    assert steady.sum() == pytest.approx(1.0)
    model = RepairableMarkovModel(RepairableSystemParams.from_variant(260, 1))
    np.testing.assert_allclose(steady, model.solve_steady_state_equations())

    saved = np.loadtxt(tmp_path / "transition_matrix_task2.dat")
    np.testing.assert_allclose(saved, model.build_graph_transition_matrix())

    trajectory = cli.read_trajectory(tmp_path / "repairable_markov_chain_trajectory.dat")
    assert trajectory[0][0] == 0.0
    assert all(t1 <= t2 for (t1, *_), (t2, *_) in zip(trajectory, trajectory[1:]))
    assert (tmp_path / "repairable_discrete_event_trajectory.dat").exists()

    out = capsys.readouterr().out
    assert "Параметры системы (Задача 2):" in out
    assert "Вероятность отказа системы" in out


def test_main_with_argument_runs_only_task1(workdir, capsys):
    assert cli.main(["1"]) == 0
    out = capsys.readouterr().out
    assert "Задача 1" in out
    assert "Задача 2" not in out


def test_main_reads_choice_from_stdin(workdir, capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("2\n"))
    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "Задача 2" in out
    assert "Задача 1" not in out
    assert Path("state_graph_task2.dot").exists()