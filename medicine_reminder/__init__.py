"""Medicine reminder with inventory tracking and low-stock alerts."""

__version__ = "0.1.0"
