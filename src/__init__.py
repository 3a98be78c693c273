"""
Toll Plaza Cellular Automaton Simulation

A stochastic lane x position cellular automaton for traffic fanning out from
highway lanes into toll booth lanes and merging back, used to study
throughput and congestion under different plaza layouts and service policies.
"""

__version__ = "0.1.0"
__author__ = "Traffic Simulation Team"
