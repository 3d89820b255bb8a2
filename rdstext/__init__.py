"""RDS RadioText normalization and adaptive truncation."""

__version__ = "1.0.0"
