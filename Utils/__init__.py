"""
Utils package for bioprocess modeling utilities.

Provides the kinetic model definitions shared by the simulation and optimal
control modules.

Kinetic Models Available:
- Monod model: Simple substrate-limited growth (Monod, 1949)
- GrowthModel: Two species competing for one substrate, each with Monod kinetics,
  and their growth-rate differential

The functions use only arithmetic operators, so they work on floats, NumPy
arrays and CasADi symbols (for constraint construction with IPOPT).

References:
- Monod, J. (1949). "The growth of bacterial cultures." Annual Review of Microbiology, 3(1), 371-394.
- Smith, H. L., & Waltman, P. (1995). The Theory of the Chemostat. Cambridge University Press.
"""

from .kinetics import mu_monod, GrowthModel
