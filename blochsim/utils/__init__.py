"""Utility functions for blochsim."""

from blochsim.utils.validation import validate_against_qiskit

__all__ = ["validate_against_qiskit"]
