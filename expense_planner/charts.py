"""Tables and figures for the dashboard, built from plain aggregation results."""

from typing import Iterable, Sequence, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from expense_planner.domain import Expense
from expense_planner.months import month_label
from expense_planner.reports import WindowPoint

COLORS = ['#4f46e5', '#7c3aed', '#0ea5e9', '#10b981', '#f97316', '#ef4444', '#ec4899', '#8b5cf6', '#d946ef']
BUDGET_COLOR = '#10b981'
PLANNED_COLOR = '#7c3aed'

EXPENSE_COLUMNS = ["Nome", "Categoria", "Valor", "Vencimento", "Pago"]


def format_brl(amount: float) -> str:
    """Format as Brazilian reais, e.g. ``R$ 1.234,56``."""
    text = f"{abs(amount):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {text}"


def expenses_frame(expenses: Iterable[Expense], month: str) -> pd.DataFrame:
    rows = [
        {
            "Nome": e.name,
            "Categoria": e.category,
            "Valor": e.amount,
            "Vencimento": e.due_day,
            "Pago": e.is_paid(month),
        }
        for e in expenses
    ]
    return pd.DataFrame(rows, columns=EXPENSE_COLUMNS)


def trend_figure(window: Sequence[WindowPoint]) -> go.Figure:
    labels = [month_label(p.month) for p in window]
    fig = go.Figure()
    fig.add_trace(go.Bar(name="Orçamento", x=labels, y=[p.budget for p in window], marker_color=BUDGET_COLOR))
    fig.add_trace(go.Bar(name="Gasto Previsto", x=labels, y=[p.planned for p in window], marker_color=PLANNED_COLOR))
    fig.update_layout(barmode="group", template="plotly_dark", margin=dict(t=10, b=10, l=0, r=0))
    return fig


def category_figure(paid: Sequence[Tuple[str, float]]) -> go.Figure:
    df = pd.DataFrame(list(paid), columns=["Categoria", "Valor"])
    fig = px.pie(
        df,
        names="Categoria",
        values="Valor",
        color_discrete_sequence=COLORS,
        template="plotly_dark",
    )
    return fig
