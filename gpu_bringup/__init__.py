"""GPU node bring-up — driver, toolkit, and verification for compute hosts."""

__version__ = "0.1.0"
