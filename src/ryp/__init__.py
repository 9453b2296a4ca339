"""rotate-your-phone: rotate, brand and re-encode clips for portrait viewing."""

__version__ = "0.1.0"
