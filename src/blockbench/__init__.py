"""blockbench: benchmark instrumented test variants of an external test suite."""

__version__ = "0.1.0"
