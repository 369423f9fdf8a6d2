"""Actor Runner.

Lists the actors available to an Apify credential, fetches an actor's
input schema, launches a run, and polls it to completion before
returning the run's dataset records.
"""

__version__ = "0.1.0"
