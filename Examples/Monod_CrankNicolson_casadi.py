import logging

import matplotlib.pyplot as plt

from Body.control.avanzado.errors import SolverConvergenceError
from Body.control.avanzado.parameters import Parameters, SolverOptions
from Body.control.avanzado.pipeline import run_singular_arc_study
from Body.control.avanzado.singular_arc import plot_singular_arc_study
from Body.modeling.competition import discretization_error

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ----------------------------
# Parámetros del modelo de Monod
# ----------------------------
params = Parameters(
    s_in=6.0,
    mu1_max=1.7,
    mu2_max=1.8,
    K1=0.3,
    K2=0.6,
    D_max=1.5,
    t0=0.0,
    tf=6.0,
    N=10000,
    s0=2.0, x10=2.0, x20=2.0,
    epsilon=1e-6,
)

# ----------------------------
# Solver
# ----------------------------
options = SolverOptions(tol=1e-8, constr_viol_tol=1e-6, max_iter=1000, print_level=5)

print("[INFO] Solving the Monod competition model...")
try:
    study = run_singular_arc_study(params, options, resolution=1000)
except SolverConvergenceError as e:
    print(f"[ERROR] IPOPT did not converge: {e.status} ({e.reason.value})")
    raise

print(f"[INFO] s_bar = {study.surface.s_bar:.4f} g/L, Δ(s_bar) = {study.surface.delta_bar:.4f} 1/h")
print(f"[INFO] x1/x2 at tf = {study.terminal_ratio:.4f} ({study.solution.iterations} iterations)")
print(f"[INFO] Max dynamics residual: {study.solution.max_residual:.2e}")

errors = discretization_error(study.trajectory, params)
print("[INFO] Deviation from the continuous model: "
      + ", ".join(f"{k}={v:.2e}" for k, v in errors.items()))

# ----------------------------
# Gráficas
# ----------------------------
fig = plot_singular_arc_study(study)
fig.savefig("monod_model_optimized.pdf")
print("[INFO] Figure saved to monod_model_optimized.pdf")
plt.show()
