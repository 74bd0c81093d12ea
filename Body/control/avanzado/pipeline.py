"""
End-to-end singular-arc study: s̄ → NLP solve → singular control reconstruction.

Every stage runs sequentially in the caller's thread. A configuration error stops
the flow before any numeric work, a solver failure stops it before the
reconstruction.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .ocp import CompetitionOCP
from .parameters import Parameters, SolverOptions
from .singular_control import reconstruct_singular_control
from .singular_surface import DEFAULT_RESOLUTION, locate_singular_substrate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SingularArcStudy:
    parameters: Parameters
    options: SolverOptions
    surface: object
    solution: object
    D_s: np.ndarray

    @property
    def trajectory(self):
        return self.solution.trajectory

    @property
    def terminal_ratio(self):
        return self.solution.objective

    def to_frame(self):
        df = self.trajectory.to_frame()
        df["Singular Control (D_s) [1/h]"] = self.D_s
        return df


def run_singular_arc_study(params=None, options=None, resolution=DEFAULT_RESOLUTION, method="grid"):
    """
    Run the complete computation for one parameter set.

    Raises:
        ConfigurationError: invalid locator settings (Parameters and
            SolverOptions validate themselves on construction).
        SolverConvergenceError: IPOPT did not converge.
        DegenerateReconstructionError: total biomass vanished on the grid.
    """
    params = params if params is not None else Parameters()
    options = options if options is not None else SolverOptions()

    model = params.growth_model()
    surface = locate_singular_substrate(model, params.s_in, resolution=resolution, method=method)

    ocp = CompetitionOCP(params, options)
    solution = ocp.solve()

    D_s = reconstruct_singular_control(solution.trajectory, surface)
    D_s.setflags(write=False)
    logger.info("Singular control reconstructed on %d grid points (mean D_s = %.4f 1/h)",
                D_s.size, float(np.mean(D_s)))

    return SingularArcStudy(
        parameters=params,
        options=options,
        surface=surface,
        solution=solution,
        D_s=D_s,
    )
