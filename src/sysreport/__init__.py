"""sysreport - privacy-gated system information page."""

__version__ = "1.0.0"
