from dataclasses import dataclass


def mu_monod(S, mumax, Ks):
    """
    Monod model for substrate-limited microbial growth.

    The Monod equation describes a hyperbolic relationship between the specific
    growth rate and the concentration of a single limiting substrate, analogous
    to Michaelis-Menten enzyme kinetics.

    Only arithmetic operators are used, so the same function evaluates Python
    floats, NumPy arrays (element-wise) and CasADi symbols (for building NLP
    constraints).

    Parameters
    ----------
    S : float or numpy.ndarray or casadi.MX
        Substrate concentration [g/L]
    mumax : float
        Maximum specific growth rate [1/h]
    Ks : float
        Half-saturation constant [g/L]
        Represents the substrate concentration at which μ = μmax/2

    Returns
    -------
    float or numpy.ndarray or casadi.MX
        Specific growth rate μ [1/h]

    Reference
    ---------
    Monod, J. (1949). "The growth of bacterial cultures."
    Annual Review of Microbiology, 3(1), 371-394.
    """
    return mumax * S / (Ks + S)


@dataclass(frozen=True)
class GrowthModel:
    """
    Growth rates of two species competing for the same limiting substrate.

    Both species follow Monod kinetics. The growth-rate differential
    Δ(s) = μ1(s) - μ2(s) measures the instantaneous advantage of species 1.

    Reference
    ---------
    Smith, H. L., & Waltman, P. (1995). The Theory of the Chemostat.
    Cambridge University Press.
    """
    mu1_max: float
    K1: float
    mu2_max: float
    K2: float

    @classmethod
    def from_parameters(cls, params):
        return cls(mu1_max=params.mu1_max, K1=params.K1,
                   mu2_max=params.mu2_max, K2=params.K2)

    def mu1(self, s):
        return mu_monod(s, self.mu1_max, self.K1)

    def mu2(self, s):
        return mu_monod(s, self.mu2_max, self.K2)

    def delta(self, s):
        """Growth-rate differential μ1(s) - μ2(s)."""
        return self.mu1(s) - self.mu2(s)
