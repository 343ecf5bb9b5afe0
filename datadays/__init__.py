"""Five independent data-cleaning exercises, one per day."""

__version__ = "0.1.0"
