"""
Advanced control module.

Optimal open-loop dilution-rate profile that maximizes the final ratio of two
species competing for one substrate.

**Workflow:**
1. Singular substrate s̄: maximizer of the growth-rate differential μ1 - μ2
   (singular_surface)
2. Crank-Nicolson discretization of the chemostat equations (discretization)
3. Full-trajectory NLP with bounds, fixed initial state and terminal-ratio
   objective, solved with IPOPT (ocp)
4. Singular feedback control reconstructed from the optimal states
   (singular_control)

Implementation:
- CasADi framework for symbolic differentiation and optimization (Andersson et al., 2019)
- IPOPT solver for large-scale nonlinear programming (Wächter & Biegler, 2006)

Available modules:
- parameters: Model parameters and solver options
- errors: Configuration, convergence and reconstruction errors
- pipeline: run_singular_arc_study, the end-to-end computation
- singular_arc: Streamlit page, figures and downloads

References:
- Biegler, L. T. (2010). Nonlinear Programming: Concepts, Algorithms, and Applications to Chemical Processes. SIAM.
- Wächter, A., & Biegler, L. T. (2006). "On the implementation of an interior-point filter line-search algorithm
  for large-scale nonlinear programming." Mathematical Programming, 106(1), 25-57.
- Andersson, J. A. E., et al. (2019). "CasADi: a software framework for nonlinear optimization and optimal control."
  Mathematical Programming Computation, 11(1), 1-36.
"""
