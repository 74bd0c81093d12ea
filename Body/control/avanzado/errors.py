"""Exceptions raised by the singular-arc optimal control modules."""

from enum import Enum


class CompetitionControlError(Exception):
    """Base class for every error raised by the optimal control workflow."""


class ConfigurationError(CompetitionControlError, ValueError):
    """Invalid model parameters or solver options, detected before any numeric work."""


class FailureReason(Enum):
    ITERATION_LIMIT = "iteration_limit"
    INFEASIBLE = "infeasible"
    NUMERICAL_ERROR = "numerical_error"


class SolverConvergenceError(CompetitionControlError, RuntimeError):
    """IPOPT did not return a converged point; the trajectory must not be used."""

    def __init__(self, message, status, reason, iterations=None):
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.iterations = iterations


class DegenerateReconstructionError(CompetitionControlError, ArithmeticError):
    """Total biomass vanishes, so the singular feedback law is undefined."""

    def __init__(self, message, indices):
        super().__init__(message)
        self.indices = tuple(indices)
