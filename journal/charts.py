from __future__ import annotations
from typing import Optional, Sequence

import plotly.graph_objects as go

from .aggregate import class_average_series, grade_distribution_series, overall_performance_series
from .schema import FIELD_LABELS, SUBJECTS, StudentRecord

SUBJECT_COLORS = ["rgb(255, 99, 132)", "rgb(54, 162, 235)", "rgb(255, 205, 86)", "rgb(75, 192, 192)"]
GRADE_COLORS = ["#ff6384", "#36a2eb", "#ffce56", "#4bc0c0", "#9966ff"]

_SUBJECT_LABELS = [FIELD_LABELS[s] for s in SUBJECTS]


def _layout(fig: go.Figure, x_title: str, y_title: str, y_max: Optional[float] = None) -> go.Figure:
    fig.update_layout(template="plotly_white", height=420, margin=dict(l=24, r=24, t=24, b=24))
    fig.update_xaxes(title_text=x_title)
    fig.update_yaxes(title_text=y_title, rangemode="tozero")
    if y_max is not None:
        fig.update_yaxes(range=[0, y_max])
    return fig


def class_average_chart(records: Sequence[StudentRecord]) -> Optional[go.Figure]:
    """Линии средних оценок по классам, по одной на предмет. None, если данных нет."""
    classes, series = class_average_series(records)
    if not classes or not records:
        return None

    fig = go.Figure()
    for i, subject in enumerate(SUBJECTS):
        fig.add_trace(
            go.Scatter(
                x=classes,
                y=series[subject],
                mode="lines+markers",
                name=FIELD_LABELS[subject],
                line=dict(color=SUBJECT_COLORS[i], shape="spline"),
            )
        )
    return _layout(fig, "Классы", "Средняя оценка", y_max=5)


def grade_distribution_chart(records: Sequence[StudentRecord]) -> Optional[go.Figure]:
    if not records:
        return None

    fig = go.Figure()
    for grade, counts in grade_distribution_series(records).items():
        fig.add_trace(
            go.Bar(
                x=_SUBJECT_LABELS,
                y=counts,
                name=f"Оценка {grade}",
                marker_color=GRADE_COLORS[grade - 1],
            )
        )
    fig.update_layout(barmode="group")
    fig = _layout(fig, "Предметы", "Количество оценок")
    fig.update_yaxes(dtick=1)
    return fig


def overall_performance_chart(records: Sequence[StudentRecord]) -> Optional[go.Figure]:
    if not records:
        return None

    fig = go.Figure(
        go.Bar(
            x=_SUBJECT_LABELS,
            y=overall_performance_series(records),
            name="Средняя оценка",
            marker_color="rgba(54, 162, 235, 0.8)",
        )
    )
    return _layout(fig, "Предметы", "Средняя оценка", y_max=5)
