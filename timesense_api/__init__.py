"""HTTP service for the Timesense complexity analyzer."""

__version__ = "1.0.0"
