"""Exception types raised by blochsim."""

from __future__ import annotations

from typing import Iterable, List


class BlochSimError(ValueError):
    """Base class for all blochsim errors."""


class MatrixError(BlochSimError):
    """A malformed or non-conformant matrix reached the linear-algebra kernel."""


class UnknownGateError(BlochSimError):
    """A gate name is not in the registry and no explicit matrix was given."""

    def __init__(self, name: str):
        super().__init__(f"Unknown gate: {name}")
        self.name = name


class CircuitValidationError(BlochSimError):
    """
    A circuit description is invalid and cannot be simulated.

    Attributes:
        errors: One message per problem found, in circuit order
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        if len(self.errors) == 1:
            message = self.errors[0]
        else:
            message = f"{len(self.errors)} problems in circuit: " + "; ".join(self.errors)
        super().__init__(message)
