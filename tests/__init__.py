"""
Test Suite for the Toll Plaza Cellular Automaton Simulation

Comprehensive tests for:
- Configuration, vehicle records and grid queries
- Booth assignment, movement, service, lane-change and routing rules
- Simulation engine orchestration and invariants
- Batch throughput harness
"""
