"""Runtime components for circuit execution."""

from blochsim.runtime.engine import SimulationResult, Simulator, apply_gate, initial_state, simulate

__all__ = ["Simulator", "SimulationResult", "apply_gate", "initial_state", "simulate"]
