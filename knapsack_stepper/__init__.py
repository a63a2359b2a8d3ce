"""Stepwise 0/1 and fractional knapsack engines."""

__version__ = "0.1.0"
