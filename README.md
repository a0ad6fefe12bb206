# reliasim

Reliability models for a system built from two kinds of devices, A and B. Each kind has required units (`na`, `nb`) and spares (`ra`, `rb`). The system works while at least one A device and at least `nb` B devices are working.

- **Without repair (task 1).** `reliasim.markov_model.MarkovModel` builds the transition-rate matrix. It integrates the Kolmogorov equations `dp/dt = Q^T p` with fourth-order Runge–Kutta, clipping negative values and renormalising after every step. From the result it computes the reliability function and the MTTF, using the trapezoidal rule. `reliasim.simulator.Simulator` gives Monte Carlo failure times and state trajectories to check these against.
- **With repair (task 2).** A single repair unit restores devices at rate `lambda_s`. It works on the kind with more failed devices; on a tie it picks the kind with the higher failure rate. `reliasim.repairable_markov_model.RepairableMarkovModel` computes:
  - the steady-state probabilities;
  - the probability of system failure;
  - the mean numbers of ready A and B devices;
  - the load on the repair unit;
  - an estimate of the transient time.

  `reliasim.repairable_simulator.RepairableSimulator` simulates the same process in two ways: as a continuous-time Markov chain and as a discrete-event simulation.

## Installation

```
pip install .
```

numpy is the only runtime dependency.

Pictures are rendered only if the `gnuplot` and Graphviz `dot` programs are on your `PATH`. Without them you still get the `.gp`, `.dat` and `.dot` files, and the error from starting the missing program is printed to standard error.

## Command line

```
reliasim 1      # task 1: system without repair
reliasim 2      # task 2: system with repair
reliasim all    # both tasks
```

The first argument picks the task. Any value other than `1` or `2` runs both tasks. With no argument, the choice is read from the first word on standard input.

The command prints the parameters and results to standard output. It writes these files to the current directory:

- the transition matrices (`transition_matrix_task1.dat`, `transition_matrix_task2.dat`);
- the simulated trajectories;
- the gnuplot data files and scripts;
- the state graphs (`.dot`).

The system parameters always come from variant 260 of group 1 (`SystemParams.from_variant(260, 1)`). The command has no option to change them. Use the library for other parameters.

## Library use

```python
from reliasim.params import SystemParams, RepairableSystemParams
from reliasim.markov_model import MarkovModel
from reliasim.simulator import Simulator
from reliasim.repairable_markov_model import RepairableMarkovModel
from reliasim.repairable_simulator import RepairableSimulator

params = SystemParams.from_variant(260, 1)
model = MarkovModel(params)
times, probs = model.solve_kolmogorov_equations(2.0, 100)
reliability = model.reliability_function(probs)
print("MTTF:", model.calculate_mttf(times, reliability))

sim = Simulator(params, seed=42)
print("mean / std:", sim.simulate_multiple_runs(1000))

rparams = RepairableSystemParams.from_variant(260, 1)
rmodel = RepairableMarkovModel(rparams)
steady = rmodel.solve_steady_state_equations()
print("P(failure):", rmodel.calculate_failure_probability(steady))
print("ready A, B:", rmodel.calculate_ready_devices(steady))
print("repair load:", rmodel.calculate_repair_utilization(steady))

rsim = RepairableSimulator(rparams, seed=42)
trajectory = rsim.simulate_discrete_events(10.0)
print(rsim.calculate_statistics(trajectory))
```

You can also build parameters directly, for example `SystemParams(lambda_a, lambda_b, na, nb, ra, rb)`, or use `RepairableMarkovModel.from_rates(...)`.

The other modules are:

- `reliasim.dot_graph`: DOT text of the state graphs (`state_graph_dot`, `repairable_state_graph_dot`) and functions that write and render them.
- `reliasim.plotting`: writes gnuplot scripts and data files for probabilities, reliability, histograms and trajectories.
- `reliasim.runge_kutta`: a plain RK4 solver for `dy/dt = A^T y` and a trapezoidal integral.

## Tests

```
pip install .[test]
pytest
```