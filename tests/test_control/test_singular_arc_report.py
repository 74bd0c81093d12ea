"""Figure and file exports of the singular-arc page."""

import matplotlib.pyplot as plt
import pandas as pd

from Body.control.avanzado.singular_arc import (
    figure_to_pdf,
    plot_singular_arc_study,
    study_to_excel,
)


def test_figure_has_three_panels(solved_study):
    fig = plot_singular_arc_study(solved_study)
    try:
        assert len(fig.axes) == 3
        labels = [line.get_label() for line in fig.axes[2].get_lines()]
        assert "Singular control $D_s(t)$" in labels
    finally:
        plt.close(fig)


def test_pdf_export(solved_study):
    fig = plot_singular_arc_study(solved_study)
    try:
        data = figure_to_pdf(fig).getvalue()
    finally:
        plt.close(fig)
    assert data.startswith(b"%PDF")


def test_excel_export(solved_study):
    fig = plot_singular_arc_study(solved_study)
    try:
        buffer = study_to_excel(solved_study, fig)
    finally:
        plt.close(fig)
    assert buffer.getvalue().startswith(b"PK")


def test_excel_without_figure(solved_study):
    buffer = study_to_excel(solved_study)
    assert buffer.getvalue()[:2] == b"PK"
    assert len(solved_study.to_frame()) == 61
    assert isinstance(solved_study.to_frame(), pd.DataFrame)
