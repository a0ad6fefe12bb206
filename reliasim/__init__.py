"""Markov-chain models, simulators and plots for redundant systems with and without repair."""

__version__ = "0.1.0"