"""
Control module for chemostat competition.

Sub-packages:
- avanzado: Model-based optimal control of the dilution rate, solved as a
  nonlinear program with CasADi and IPOPT

References:
- Biegler, L. T. (2010). Nonlinear Programming: Concepts, Algorithms, and Applications to Chemical Processes. SIAM.
- Andersson, J. A. E., et al. (2019). "CasADi: a software framework for nonlinear optimization and optimal control."
  Mathematical Programming Computation, 11(1), 1-36.
"""
