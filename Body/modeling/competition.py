import streamlit as st
import numpy as np
import matplotlib.pyplot as plt
from scipy.integrate import solve_ivp

from Body.control.avanzado.discretization import STATE_NAMES, competition_rhs
from Body.control.avanzado.errors import ConfigurationError
from Body.control.avanzado.parameters import Parameters


def competition_odes(t, y, model, s_in, D_func):
    s, x1, x2 = y
    return list(competition_rhs(model, s_in, s, x1, x2, D_func(t)))


def simulate_competition(params, t_control, D_control, t_eval=None, method="LSODA", rtol=1e-8, atol=1e-10):
    """
    Integrate the continuous competition model under a dilution profile.

    The profile is the piecewise-linear interpolation of the node values
    (t_control, D_control), the same interpretation the trapezoidal scheme
    gives to the control.

    Returns
    -------
    t : numpy.ndarray
    y : numpy.ndarray
        States with shape (len(t), 3), columns s, x1, x2.
    """
    t_control = np.asarray(t_control, dtype=float)
    D_control = np.asarray(D_control, dtype=float)
    if t_control.shape != D_control.shape:
        raise ValueError("t_control and D_control must have the same shape")
    if t_eval is None:
        t_eval = params.time_grid()

    model = params.growth_model()

    def D_func(t):
        return float(np.interp(t, t_control, D_control))

    y0 = [params.s0, params.x10, params.x20]
    # Control kinks sit on the grid nodes; keep steps from jumping over them
    max_step = float(np.min(np.diff(t_control))) if t_control.size > 1 else np.inf
    sol = solve_ivp(competition_odes, [params.t0, params.tf], y0, args=(model, params.s_in, D_func),
                    t_eval=t_eval, method=method, rtol=rtol, atol=atol, max_step=max_step)
    if not sol.success:
        raise RuntimeError(f"Re-simulation failed: {sol.message}")
    return sol.t, sol.y.T


def discretization_error(trajectory, params, **simulate_kwargs):
    """
    Maximum deviation, per state, between the NLP grid values and the
    continuous model driven by the same control.
    """
    _, y = simulate_competition(params, trajectory.t, trajectory.D, t_eval=trajectory.t, **simulate_kwargs)
    nlp_states = np.column_stack([trajectory.s, trajectory.x1, trajectory.x2])
    err = np.max(np.abs(y - nlp_states), axis=0)
    return dict(zip(STATE_NAMES, (float(e) for e in err)))


def competition_page():
    st.header("Operation mode: Continuous competition (two species, one substrate)")
    st.sidebar.subheader("Model Parameters")

    mu1_max = st.sidebar.slider("μ1max (species 1) [1/h]", 0.1, 3.0, 1.7)
    K1 = st.sidebar.slider("K1 (species 1) [g/L]", 0.01, 2.0, 0.3)
    mu2_max = st.sidebar.slider("μ2max (species 2) [1/h]", 0.1, 3.0, 1.8)
    K2 = st.sidebar.slider("K2 (species 2) [g/L]", 0.01, 2.0, 0.6)
    s_in = st.sidebar.slider("Substrate in Feed (s_in) [g/L]", 0.5, 20.0, 6.0)
    D = st.sidebar.slider("Dilution Rate D (1/h)", 0.0, 3.0, 0.5)

    s0 = st.sidebar.number_input("Initial Substrate (g/L)", 0.0, 20.0, 2.0)
    x10 = st.sidebar.number_input("Initial Species 1 (g/L)", 0.0, 20.0, 2.0)
    x20 = st.sidebar.number_input("Initial Species 2 (g/L)", 0.0, 20.0, 2.0)

    t_final = st.sidebar.slider("Final time (h)", 1, 100, 30)
    atol = st.sidebar.number_input("Absolute tolerance (atol)", min_value=1e-12, max_value=1e-2, value=1e-8, format="%e")
    rtol = st.sidebar.number_input("Relative tolerance (rtol)", min_value=1e-12, max_value=1e-2, value=1e-6, format="%e")

    try:
        params = Parameters(s_in=s_in, mu1_max=mu1_max, mu2_max=mu2_max, K1=K1, K2=K2,
                            D_max=max(D, 0.0), t0=0.0, tf=float(t_final), N=300,
                            s0=s0, x10=x10, x20=x20)
    except ConfigurationError as e:
        st.error(f"Invalid configuration: {e}")
        st.stop()

    t_eval = np.linspace(0, t_final, 300)
    try:
        t, y = simulate_competition(params, [0.0, float(t_final)], [D, D], t_eval=t_eval, rtol=rtol, atol=atol)
    except RuntimeError as e:
        st.error(f"[ERROR] {e}")
        st.stop()

    st.subheader("Simulation Results")
    fig, ax = plt.subplots()
    ax.plot(t, y[:, 0], label='Substrate (s)')
    ax.plot(t, y[:, 1], label='Species 1 (x1)')
    ax.plot(t, y[:, 2], label='Species 2 (x2)')
    ax.set_xlabel("Time (h)")
    ax.set_ylabel("Concentration (g/L)")
    ax.legend()
    ax.grid(True)
    st.pyplot(fig)

    model = params.growth_model()
    col1, col2 = st.columns(2)
    with col1:
        st.metric("μ1 - μ2 at final substrate", f"{float(model.delta(y[-1, 0])):.4f} 1/h")
    with col2:
        ratio = y[-1, 1] / y[-1, 2] if y[-1, 2] > 1e-12 else np.inf
        st.metric("Final ratio x1/x2", f"{ratio:.3f}")


if __name__ == '__main__':
    competition_page()
