import streamlit as st
import pandas as pd
import matplotlib.pyplot as plt
import traceback
from io import BytesIO

from Body.control.avanzado.errors import (
    ConfigurationError,
    DegenerateReconstructionError,
    SolverConvergenceError,
)
from Body.control.avanzado.parameters import Parameters, SolverOptions
from Body.control.avanzado.pipeline import run_singular_arc_study
from Body.modeling.competition import discretization_error


def plot_singular_arc_study(study):
    """Biomass, substrate (with s̄) and controls (D and D_s) in three stacked panels."""
    traj = study.trajectory
    s_bar = study.surface.s_bar

    fig, axs = plt.subplots(3, 1, figsize=(9, 10), constrained_layout=True)

    axs[0].plot(traj.t, traj.x1, label="Species $x_1(t)$", linewidth=2.5, color="blue")
    axs[0].plot(traj.t, traj.x2, label="Species $x_2(t)$", linewidth=2.5, color="red")
    axs[0].set_title("Biomass evolution")
    axs[0].set_ylabel("Concentration (g/L)")

    axs[1].plot(traj.t, traj.s, label="Substrate $s(t)$", linewidth=2.5, color="purple")
    axs[1].axhline(s_bar, color="red", linestyle=":", linewidth=2,
                   label=rf"$\bar{{s}}$ = {s_bar:.3f}")
    axs[1].set_title("Substrate evolution")
    axs[1].set_ylabel("Concentration (g/L)")

    axs[2].plot(traj.t, traj.D, label="Control $D(t)$", linewidth=2.5, color="green")
    axs[2].plot(traj.t, study.D_s, label="Singular control $D_s(t)$", linewidth=2.5,
                linestyle="--", color="orange")
    axs[2].set_title("Control evolution")
    axs[2].set_ylabel("Dilution rate (1/h)")

    for ax in axs:
        ax.set_xlabel("Time (h)")
        ax.legend(loc="center right")
        ax.grid(True)

    return fig


def figure_to_pdf(fig):
    buffer = BytesIO()
    fig.savefig(buffer, format="pdf")
    buffer.seek(0)
    return buffer


def study_to_excel(study, fig=None):
    """Workbook with the trajectory table, a summary sheet and, optionally, the figure."""
    df = study.to_frame()
    summary = pd.DataFrame({
        "Quantity": ["s_bar [g/L]", "mu1(s_bar) [1/h]", "mu2(s_bar) [1/h]",
                     "x1/x2 at tf", "IPOPT status", "IPOPT iterations", "Max dynamics residual"],
        "Value": [study.surface.s_bar, study.surface.mu1_bar, study.surface.mu2_bar,
                  study.terminal_ratio, study.solution.return_status,
                  study.solution.iterations, study.solution.max_residual],
    })

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine='xlsxwriter') as writer:
        df.to_excel(writer, index=False, sheet_name='Trajectory')
        summary.to_excel(writer, index=False, sheet_name='Summary')

        if fig is not None:
            worksheet = writer.sheets['Summary']
            img_stream = BytesIO()
            fig.savefig(img_stream, format='png')
            img_stream.seek(0)
            worksheet.insert_image('D2', 'singular_arc.png', {'image_data': img_stream})

    buffer.seek(0)
    return buffer


def singular_arc_page():
    st.header("Optimal Control - Two-species competition (singular arc)")
    st.markdown(r"""
    Computes the dilution-rate profile $D(t)$ that maximizes the final ratio
    $x_1(t_f)/x_2(t_f)$ of two species competing for one substrate in a chemostat.
    The dynamics are discretized with the Crank-Nicolson (trapezoidal) rule and the
    resulting NLP is solved with IPOPT. The singular control
    $D_s = (\mu_1(\bar{s})x_1 + \mu_2(\bar{s})x_2)/(x_1+x_2)$ is reconstructed from the
    optimal states for comparison.
    """)

    with st.sidebar:
        st.subheader("📌 Model parameters")
        s_in = st.number_input("Inlet substrate s_in [g/L]", value=6.0, min_value=0.01)
        mu1_max = st.number_input("μ1max [1/h]", value=1.7, min_value=0.01)
        K1 = st.number_input("K1 [g/L]", value=0.3, min_value=0.001, format="%.3f")
        mu2_max = st.number_input("μ2max [1/h]", value=1.8, min_value=0.01)
        K2 = st.number_input("K2 [g/L]", value=0.6, min_value=0.001, format="%.3f")
        D_max = st.number_input("Maximum dilution rate D_max [1/h]", value=1.5, min_value=0.0)

        st.subheader("🎚 Initial conditions")
        s0 = st.number_input("s0 (Substrate) [g/L]", value=2.0, min_value=0.0)
        x10 = st.number_input("x1,0 (Species 1) [g/L]", value=2.0, min_value=0.0)
        x20 = st.number_input("x2,0 (Species 2) [g/L]", value=2.0, min_value=0.0)

        st.subheader("⏳ Time discretization")
        t0 = st.number_input("Initial time t0 [h]", value=0.0)
        tf = st.number_input("Final time tf [h]", value=6.0)
        N = st.number_input("Number of intervals N", value=1000, min_value=1, step=100)
        resolution = st.number_input("Grid points for s̄ search", value=1000, min_value=2, step=100)
        refine = st.checkbox("Refine s̄ with bounded scalar search", value=False)

        st.subheader("🔧 IPOPT")
        tol = st.number_input("tol", value=1e-8, format="%e")
        constr_viol_tol = st.number_input("constr_viol_tol", value=1e-6, format="%e")
        max_iter = st.number_input("max_iter", value=1000, min_value=1, step=100)
        print_level = st.slider("print_level", 0, 12, 0)
        mu_strategy = st.selectbox("mu_strategy", ["monotone", "adaptive"])
        epsilon = st.number_input("Objective regularization ε", value=1e-6, format="%e")

    if st.button("🚀 Run Optimization"):
        try:
            params = Parameters(s_in=s_in, mu1_max=mu1_max, mu2_max=mu2_max, K1=K1, K2=K2,
                                D_max=D_max, t0=t0, tf=tf, N=int(N),
                                s0=s0, x10=x10, x20=x20, epsilon=epsilon)
            options = SolverOptions(tol=tol, constr_viol_tol=constr_viol_tol, max_iter=int(max_iter),
                                    print_level=int(print_level), mu_strategy=mu_strategy)
        except ConfigurationError as e:
            st.error(f"[ERROR] Invalid configuration: {e}")
            st.stop()

        st.info("Optimizing dilution profile...")
        try:
            study = run_singular_arc_study(params, options, resolution=int(resolution),
                                           method="bounded" if refine else "grid")
        except ConfigurationError as e:
            st.error(f"[ERROR] Invalid configuration: {e}")
            st.stop()
        except SolverConvergenceError as e:
            st.error(f"[ERROR] No solution found: {e.status} ({e.reason.value}, iterations: {e.iterations})")
            st.stop()
        except DegenerateReconstructionError as e:
            st.error(f"[ERROR] Singular control could not be reconstructed: {e}")
            st.stop()

        st.success(f"[INFO] Solution found! IPOPT status: {study.solution.return_status}")

        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Singular substrate s̄", f"{study.surface.s_bar:.4f} g/L")
            st.metric("Δ(s̄) = μ1 - μ2", f"{study.surface.delta_bar:.4f} 1/h")
        with col2:
            st.metric("Final ratio x1/x2", f"{study.terminal_ratio:.4f}")
            st.metric("IPOPT iterations", f"{study.solution.iterations}")
        with col3:
            st.metric("Max dynamics residual", f"{study.solution.max_residual:.2e}")

        fig = plot_singular_arc_study(study)
        st.pyplot(fig)

        try:
            errors = discretization_error(study.trajectory, params)
            st.info("Deviation from the continuous model under the same control: "
                    + ", ".join(f"{k}: {v:.2e}" for k, v in errors.items()))
        except RuntimeError as e:
            st.warning(f"Re-simulation of the optimal profile failed: {e}")

        st.dataframe(study.to_frame())

        col_a, col_b = st.columns(2)
        with col_a:
            st.download_button(
                label="Download Figure as PDF",
                data=figure_to_pdf(fig),
                file_name="monod_model_optimized.pdf",
                mime="application/pdf"
            )
        with col_b:
            st.download_button(
                label="Download Trajectory as Excel",
                data=study_to_excel(study, fig),
                file_name="monod_model_optimized.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
            )


if __name__ == '__main__':
    st.set_page_config(layout="wide", page_title="Singular Arc Optimal Control")
    try:
        singular_arc_page()
    except Exception as main_e:
        st.error(f"Unexpected application error: {main_e}")
        st.error(traceback.format_exc())
