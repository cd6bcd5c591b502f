"""Download Gate: signed, time-boxed access to a download catalog."""

__version__ = "1.0.0"
