"""
Body package for the chemostat competition simulator and optimal controller.

This package contains the simulation, optimal control and reporting modules,
implementing theoretical concepts from:

**Chemostat Theory:**
- Smith, H. L., & Waltman, P. (1995). The Theory of the Chemostat.
- Monod, J. (1949). The growth of bacterial cultures.

**Dynamic Optimization:**
- Biegler, L. T. (2010). Nonlinear Programming: Concepts, Algorithms, and Applications to Chemical Processes.
- Betts, J. T. (2010). Practical Methods for Optimal Control and Estimation Using Nonlinear Programming.

Modules:
- modeling: Open-loop simulation of two species competing in a chemostat
- control: Optimal dilution-rate control (singular arc, Crank-Nicolson NLP)
- home: Landing page
"""

__version__ = "1.0.0"
