"""CPA dashboard: ClickDealer click and lead analytics."""

__version__ = "0.1.0"
