# home_page.py
import streamlit as st


def home_page():
    st.title("Optimal Control of Microbial Competition in a Chemostat")

    st.markdown("""
        Two microbial species compete for a single limiting substrate in a continuously
        fed reactor. The dilution rate $D(t)$ is the only manipulated input, and the goal
        is to end the batch with the largest possible ratio of species 1 to species 2.

        The theory of competition in the chemostat is summarized by **Smith & Waltman (1995)**.
        The optimal control of this selection problem contains singular arcs on which the
        substrate is held at the level that maximizes the growth-rate advantage.
        """)

    st.markdown("---")

    st.header("🔬 Model")
    st.latex(r"""
    \begin{aligned}
    \dot{s} &= D(s_{in} - s) - \mu_1(s)x_1 - \mu_2(s)x_2 \\
    \dot{x}_1 &= (\mu_1(s) - D)x_1 \\
    \dot{x}_2 &= (\mu_2(s) - D)x_2
    \end{aligned}
    """)

    with st.expander("Monod kinetics"):
        st.markdown("Each species follows the model proposed by **Monod (1949)**:")
        st.latex(r"\mu_i(s) = \mu_{i,max} \frac{s}{K_i + s}")
        st.markdown(r"""
            * $\mu_{i,max}$: Maximum specific growth rate ($h^{-1}$).
            * $K_i$: Half-saturation constant ($g/L$).

            **Reference:** Monod, J. (1949). "The growth of bacterial cultures." *Annual Review of Microbiology*, 3(1), 371-394.
            """)

    with st.expander("Singular substrate and singular control"):
        st.markdown(r"""
            The growth-rate differential $\Delta(s) = \mu_1(s) - \mu_2(s)$ is maximal at $\bar{s}$.
            Holding $s = \bar{s}$ requires the feedback dilution rate
            """)
        st.latex(r"D_s = \frac{\mu_1(\bar{s})x_1 + \mu_2(\bar{s})x_2}{x_1 + x_2}")

    with st.expander("Numerical method"):
        st.markdown(r"""
            The horizon is split into $N$ uniform intervals and the dynamics are imposed with the
            implicit trapezoidal (Crank-Nicolson) rule:
            """)
        st.latex(r"z_{i+1} = z_i + \frac{\Delta t}{2}\left(f(z_i, D_i) + f(z_{i+1}, D_{i+1})\right)")
        st.markdown("""
            States and controls on every grid point are decision variables of a single NLP,
            solved with IPOPT through CasADi.

            **References:**
            - Biegler, L. T. (2010). *Nonlinear Programming: Concepts, Algorithms, and Applications to Chemical Processes*. SIAM.
            - Andersson, J. A. E., et al. (2019). "CasADi: a software framework for nonlinear optimization and optimal control." *Mathematical Programming Computation*, 11(1), 1-36.
            """)

    st.markdown("---")
    st.markdown("""
        **References**
        - Smith, H. L., & Waltman, P. (1995). *The Theory of the Chemostat*. Cambridge University Press.
        - Monod, J. (1949). "The growth of bacterial cultures." *Annual Review of Microbiology*, 3(1), 371-394.
        """)
