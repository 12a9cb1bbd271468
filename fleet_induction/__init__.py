"""Induction planning engine for metro trainsets."""

__version__ = "1.0.0"
