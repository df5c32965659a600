"""Console client for the taskflow task-management REST API."""

__version__ = "0.1.0"
