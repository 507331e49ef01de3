"""Hardware store storefront backend and cart synchronization client."""

__version__ = "0.1.0"
