"""
Modeling module for chemostat competition.

Implements the mass balances of a chemostat in which two species, each with
Monod kinetics, compete for a single limiting substrate (Smith & Waltman, 1995).

The ODEs are solved numerically using scipy.integrate.solve_ivp (LSODA by
default), either at a constant dilution rate or under a dilution profile coming
from the optimal control module.

Available modules:
- competition: Two-species competition simulation and page

References:
- Smith, H. L., & Waltman, P. (1995). The Theory of the Chemostat. Cambridge University Press.
- Monod, J. (1949). "The growth of bacterial cultures." Annual Review of Microbiology, 3(1), 371-394.
"""
