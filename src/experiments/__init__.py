"""
Experiments Module

Batch drivers that run the toll plaza engine many times:
- Monte-Carlo throughput evaluation against a measured arrival series
"""

from .throughput import (
    ThroughputExperiment,
    ThroughputExperimentConfig,
    summarize_runs,
)

__all__ = [
    'ThroughputExperiment',
    'ThroughputExperimentConfig',
    'summarize_runs',
]
