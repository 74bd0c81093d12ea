"""
Configuration values for the two-species competition optimal control problem.

Parameters and SolverOptions are frozen pydantic models: they are built once (in
code, from a mapping, or from the Streamlit sidebar) and passed explicitly to
every component. Validation happens at construction, so a ConfigurationError is
raised before any numeric work starts.
"""

from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from Utils.kinetics import GrowthModel
from .errors import ConfigurationError


def _configuration_error(exc):
    """Turn a pydantic ValidationError into a single ConfigurationError."""
    errors = exc.errors()
    unknown = sorted(str(err["loc"][0]) for err in errors if err["type"] == "extra_forbidden")
    if unknown:
        return ConfigurationError(f"Unknown parameter(s): {', '.join(unknown)}")
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'configuration'}: {err['msg']}"
        for err in errors
    )
    return ConfigurationError(details)


class _Configuration(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _configuration_error(e) from e

    @classmethod
    def from_dict(cls, data):
        return cls(**data)

    def to_dict(self):
        return self.model_dump()

    def with_changes(self, **changes):
        """Copy with some values replaced; the result is validated again."""
        return type(self)(**{**self.model_dump(), **changes})


class Parameters(_Configuration):
    """
    Model, horizon and initial-condition values.

    Attributes
    ----------
    s_in : float
        Substrate concentration in the inflow [g/L]
    mu1_max, mu2_max : float
        Maximum specific growth rates of species 1 and 2 [1/h]
    K1, K2 : float
        Half-saturation constants of species 1 and 2 [g/L]
    D_max : float
        Maximum allowed dilution rate [1/h]
    t0, tf : float
        Start and end of the horizon [h]
    N : int
        Number of time intervals of the uniform grid
    s0, x10, x20 : float
        Initial substrate and biomass concentrations [g/L]
    epsilon : float
        Regularization added to x2(tf) in the objective denominator
    """
    s_in: float = Field(6.0, gt=0)
    mu1_max: float = Field(1.7, gt=0)
    mu2_max: float = Field(1.8, gt=0)
    K1: float = Field(0.3, gt=0)
    K2: float = Field(0.6, gt=0)
    D_max: float = Field(1.5, ge=0)
    t0: float = 0.0
    tf: float = 6.0
    N: int = Field(10000, gt=0, strict=True)
    s0: float = Field(2.0, ge=0)
    x10: float = Field(2.0, ge=0)
    x20: float = Field(2.0, ge=0)
    epsilon: float = Field(1e-6, gt=0)

    @model_validator(mode="after")
    def _check_horizon_and_initial_state(self):
        if self.tf <= self.t0:
            raise ValueError(f"tf ({self.tf}) must be greater than t0 ({self.t0})")
        if self.s0 > self.s_in:
            raise ValueError(f"Initial substrate s0={self.s0} is outside the bounds [0, {self.s_in}]")
        return self

    @property
    def dt(self):
        return (self.tf - self.t0) / self.N

    def time_grid(self):
        return np.linspace(self.t0, self.tf, self.N + 1)

    def growth_model(self):
        return GrowthModel.from_parameters(self)


class SolverOptions(_Configuration):
    """IPOPT settings: convergence tolerance, constraint violation tolerance,
    iteration cap and verbosity."""
    tol: float = Field(1e-8, gt=0)
    constr_viol_tol: float = Field(1e-6, gt=0)
    max_iter: int = Field(1000, ge=1, strict=True)
    print_level: int = Field(0, ge=0, le=12, strict=True)
    mu_strategy: Literal["monotone", "adaptive"] = "monotone"

    def to_casadi(self):
        """Options dictionary for ``ca.nlpsol(..., 'ipopt', nlp, opts)``."""
        return {
            "ipopt.tol": float(self.tol),
            "ipopt.constr_viol_tol": float(self.constr_viol_tol),
            "ipopt.max_iter": int(self.max_iter),
            "ipopt.print_level": int(self.print_level),
            "ipopt.mu_strategy": self.mu_strategy,
            "ipopt.sb": "yes",
            "print_time": False,
            # The return status is inspected after the call
            "error_on_fail": False,
        }
