"""tempo: time workloads and catch performance regressions between runs."""

__version__ = "0.3.0"
