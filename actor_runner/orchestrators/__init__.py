"""Run lifecycle orchestration.

- run_lifecycle: start a run, poll it to a terminal state, collect the dataset
"""
