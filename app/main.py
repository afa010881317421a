import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from dataclasses import asdict, replace
from datetime import date

import streamlit as st

from expense_planner.categories import custom_categories
from expense_planner.charts import category_figure, expenses_frame, format_brl, trend_figure
from expense_planner.config import Config
from expense_planner.domain import ExpenseDraft
from expense_planner.errors import AuthError, InvalidExpense, RemoteWriteFailed, StoreError
from expense_planner.identity import LocalIdentity, auth_error_message
from expense_planner.logger import setup_logger
from expense_planner.months import MONTH_LABELS, month_key, month_key_of
from expense_planner.reports import (
    MonthStatus,
    by_paid_status,
    month_status,
    month_totals,
    paid_by_category,
    trailing_window,
    upcoming_expenses,
    year_summary,
)
from expense_planner.session import ExpenseStore, sign_out
from expense_planner.store import LocalDocumentStore
from expense_planner.transforms import active_in

STATUS_ICONS = {
    MonthStatus.SELECTED: "🔵",
    MonthStatus.EMPTY: "⚪",
    MonthStatus.OVER_BUDGET: "🟠",
    MonthStatus.WITHIN_BUDGET: "🟢",
}
FILTER_LABELS = {"all": "Todas", "unpaid": "Não pagas", "paid": "Pagas"}

st.set_page_config(page_title="Gerenciador de Despesas", layout="wide")

Config.validate()
logger = setup_logger(level=Config.LOG_LEVEL)


@st.cache_resource
def get_document_store() -> LocalDocumentStore:
    return LocalDocumentStore(Config.DATA_PATH)


def run(coro):
    return asyncio.run(coro)


if "identity" not in st.session_state:
    identity = LocalIdentity(Config.USERS_PATH)
    planner = ExpenseStore(get_document_store())
    run(planner.bind(identity))
    st.session_state.identity = identity
    st.session_state.planner = planner
    st.session_state.current_date = date.today().replace(day=1)

identity: LocalIdentity = st.session_state.identity
planner: ExpenseStore = st.session_state.planner


def write(coro) -> None:
    try:
        run(coro)
    except InvalidExpense as exc:
        st.session_state.flash = ("error", str(exc))
    except RemoteWriteFailed:
        st.session_state.flash = ("error", "Não foi possível salvar. Tente novamente.")


def render_login() -> None:
    st.title("Gerenciador de Despesas Inteligente")
    sign_in_tab, sign_up_tab = st.tabs(["Entrar", "Criar conta"])
    for tab, registering in ((sign_in_tab, False), (sign_up_tab, True)):
        with tab:
            with st.form(f"auth-{registering}"):
                email = st.text_input("E-mail")
                password = st.text_input("Senha", type="password")
                submitted = st.form_submit_button("Criar conta" if registering else "Entrar")
            if submitted:
                action = identity.sign_up if registering else identity.sign_in
                try:
                    run(action(email, password))
                except AuthError as exc:
                    logger.info("Authentication failed: %s", exc.code)
                    st.error(auth_error_message(exc))
                except (RemoteWriteFailed, StoreError):
                    logger.exception("Could not open the session")
                    st.error("Não foi possível carregar seus dados. Tente novamente.")
                else:
                    st.rerun()


def expense_form(key: str, categories, expense=None):
    current = month_key_of(date.today())
    with st.form(key, clear_on_submit=expense is None):
        name = st.text_input("Nome da Despesa", value=expense.name if expense else "")
        amount = st.number_input("Valor", min_value=0.0, step=10.0, value=float(expense.amount) if expense else 0.0)
        options = list(categories)
        index = options.index(expense.category) if expense and expense.category in options else 0
        category = st.selectbox("Categoria", options, index=index)
        due_day = st.number_input("Dia do Vencimento", min_value=1, max_value=31, value=expense.due_day if expense else 10)
        start_month = st.text_input("Mês de Início (AAAA-MM)", value=expense.start_month if expense else current)
        end_month = st.text_input("Mês de Fim (AAAA-MM)", value=expense.end_month if expense else current)
        submitted = st.form_submit_button("Salvar")
    if not submitted:
        return None
    return ExpenseDraft(
        name=name.strip(),
        amount=float(amount),
        category=category,
        due_day=int(due_day),
        start_month=start_month.strip(),
        end_month=end_month.strip(),
    )


def render_header(current: date, selected: str, summaries, totals) -> None:
    left, middle, right = st.columns([1, 2, 1])
    with left:
        if st.button("◀", key="prev-year"):
            st.session_state.current_date = current.replace(year=current.year - 1)
            st.rerun()
    with middle:
        st.markdown(f"## {current.year}")
    with right:
        if st.button("▶", key="next-year"):
            st.session_state.current_date = current.replace(year=current.year + 1)
            st.rerun()

    for i, col in enumerate(st.columns(12)):
        key = month_key(current.year, i + 1)
        status = month_status(summaries.get(key), selected=key == selected)
        if col.button(f"{STATUS_ICONS[status]} {MONTH_LABELS[i].upper()}", key=f"month-{i}"):
            st.session_state.current_date = current.replace(month=i + 1)
            st.rerun()

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        new_budget = st.number_input("Orçamento Total", min_value=0.0, step=100.0, value=float(totals.budget), key=f"budget-{selected}")
        if new_budget != totals.budget:
            write(planner.set_budget(selected, new_budget))
            st.rerun()
    c2.metric("Gasto Previsto", format_brl(totals.planned))
    c3.metric("Total Pago", format_brl(totals.paid))
    c4.metric("Saldo (vs. Pago)", format_brl(totals.remaining))


def render_expenses(selected: str, active) -> None:
    st.subheader("Despesas do Mês")
    status = st.radio("Mostrar", list(FILTER_LABELS), format_func=FILTER_LABELS.get, horizontal=True)
    for e in by_paid_status(active, selected, status):
        row = st.columns([4, 1, 1])
        with row[0]:
            st.checkbox(
                f"{e.name} · {e.category} · {format_brl(e.amount)} · dia {e.due_day}",
                value=e.is_paid(selected),
                key=f"paid-{e.id}-{selected}",
                on_change=lambda expense_id=e.id: write(planner.toggle_paid(expense_id, selected)),
            )
        with row[1]:
            with st.popover("Editar"):
                draft = expense_form(f"edit-{e.id}", planner.categories, e)
                if draft is not None:
                    write(planner.update_expense(replace(e, **asdict(draft))))
                    st.rerun()
        with row[2]:
            if st.button("Excluir", key=f"delete-{e.id}"):
                write(planner.delete_expense(e.id))
                st.rerun()

    with st.expander("Nova despesa"):
        draft = expense_form("add-expense", planner.categories)
        if draft is not None:
            write(planner.add_expense(draft))
            st.rerun()

    with st.expander("Categorias"):
        new_category = st.text_input("Nova categoria")
        if st.button("Adicionar categoria"):
            if run(planner.add_category(new_category)):
                st.success("Categoria adicionada.")
                st.rerun()
            else:
                st.warning("Categoria vazia ou já existente.")
        for category in custom_categories(planner.categories):
            if st.button(f"Excluir {category}", key=f"delete-category-{category}"):
                result = run(planner.delete_category(category))
                if result is not None:
                    (st.success if result.success else st.error)(result.message)


def render_dashboard(current: date, selected: str, active) -> None:
    st.subheader("Gastos Pagos por Categoria")
    paid = paid_by_category(active, selected)
    if paid:
        st.plotly_chart(category_figure(paid), use_container_width=True)
    else:
        st.info("Nenhuma despesa paga para este mês.")

    st.subheader("Histórico Mensal (Últimos 6 Meses)")
    window = trailing_window(planner.expenses, planner.budgets, current)
    st.plotly_chart(trend_figure(window), use_container_width=True)

    st.subheader("Próximos Vencimentos")
    upcoming = upcoming_expenses(active, selected, date.today())
    if upcoming:
        st.dataframe(expenses_frame(upcoming, selected), hide_index=True)
    elif selected == month_key_of(date.today()):
        st.info("Nenhuma despesa futura este mês.")
    else:
        st.info("A visualização é para meses futuros.")


if planner.user is None:
    render_login()
    st.stop()

flash = st.session_state.pop("flash", None)
if flash:
    getattr(st, flash[0])(flash[1])

current: date = st.session_state.current_date
selected = month_key_of(current)
active = active_in(planner.expenses, selected)

with st.sidebar:
    st.caption(planner.user.email or "")
    if st.button("Sair"):
        if not run(sign_out(identity)):
            st.error("Erro ao sair.")
        st.rerun()

st.title("Gerenciador de Despesas Inteligente")
render_header(current, selected, year_summary(planner.expenses, planner.budgets, current.year), month_totals(planner.expenses, planner.budgets, selected))

left, right = st.columns([3, 2])
with left:
    render_expenses(selected, active)
with right:
    render_dashboard(current, selected, active)
