"""Single-step platform operations.

Each activity wraps one adapter call with input validation, context on
failure, and logging:

- list_actors: actors owned by the credential
- fetch_schema: an actor's input schema
- start_run: launch a run
- get_run: read a run's current state
- fetch_dataset: output records of a run (never fails)
"""
