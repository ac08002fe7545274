"""Benchmarking pipeline for blockbench.

Discovers instrumented test variants in a target project, runs them
repeatedly, extracts the block/instruction counters they print and
averages everything into one summary report.
"""
