import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import random
from datetime import date

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
import plotly.express as px

from spendwise.chart import PeriodChart, series_frame
from spendwise.config import get_settings
from spendwise.domain import Kind, KindFilter, Period, SortKey
from spendwise.events import EventBus, ENTRY_ADDED, ENTRY_EDITED, ENTRY_DELETED
from spendwise.log import configure_logging
from spendwise.services import DashboardService, TableService
from spendwise.sorting import SortState
from spendwise.sources import EntryPeriodSource, HttpPeriodSource
from spendwise.store import EntryStore
from spendwise.suggest import default_icon, suggest_for

settings = get_settings()
configure_logging(settings.log_level, settings.log_json)

st.set_page_config(page_title="SpendWise", layout="wide")

if "store" not in st.session_state:
    store = EntryStore.from_seed(settings.seed_path)
    bus = EventBus()
    store.attach(bus)
    st.session_state.store = store
    st.session_state.bus = bus

store: EntryStore = st.session_state.store
bus: EventBus = st.session_state.bus

tables = TableService(page_size=settings.page_size, window=settings.page_window)
dashboard = DashboardService(recent_limit=settings.recent_limit)


def fmt_money(value) -> str:
    return f"Rp.{float(value):,.0f}"


def entries_to_df(entries):
    rows = [e.to_dict() for e in entries]
    df = pd.DataFrame(rows, columns=["id", "kind", "label", "amount", "occurred_on", "icon"])
    if not df.empty:
        df["amount"] = df["amount"].astype(float)
        df["occurred_on"] = pd.to_datetime(df["occurred_on"])
    return df


def apply_suggestion(kind, suggestion):
    st.session_state[f"{kind.value}_label"] = suggestion.label
    st.session_state[f"{kind.value}_icon"] = suggestion.icon


def chart_source():
    if settings.api_token:
        return HttpPeriodSource(settings.api_url, settings.api_token, settings.request_timeout)
    return EntryPeriodSource(store.snapshot)


menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "💰 Income", "💸 Expense"])


if menu == "🏠 Dashboard":
    entries = store.snapshot()
    totals = dashboard.summary(entries)

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Balance", fmt_money(totals.balance))
    with k2:
        st.metric("Total Income", fmt_money(totals.income))
    with k3:
        st.metric("Total Expenses", fmt_money(totals.expenses))

    pie = px.pie(
        names=["Balance", "Expenses", "Income"],
        values=[abs(float(totals.balance)), float(totals.expenses), float(totals.income)],
        title="Overview",
        hole=0.5,
        template="plotly_dark",
    )
    st.plotly_chart(pie, use_container_width=True)

    st.subheader("📊 Balance Chart")
    c1, c2 = st.columns(2)
    with c1:
        period = st.selectbox("Period", [p.value for p in Period], index=2)
    with c2:
        data_type = st.selectbox("Data", ["all", "income", "expenses", "balance"])

    if "chart" not in st.session_state:
        # no pinned date: chart and source both read the calendar on each load
        st.session_state.chart = PeriodChart(chart_source(), rng=random.Random(settings.fallback_seed))
    chart_loader: PeriodChart = st.session_state.chart

    chart = asyncio.run(chart_loader.select(period)) or chart_loader.current
    if chart is not None:
        if chart.is_fallback:
            st.caption("⚠️ Live data unavailable, showing placeholder values.")
        frame = series_frame(chart, data_type)
        fig = go.Figure()
        for col, color in (("income", "#10B981"), ("expenses", "#EF4444")):
            if col in frame.columns:
                fig.add_bar(x=frame["name"], y=frame[col], name=col.title(), marker_color=color)
        if "balance" in frame.columns:
            fig.add_scatter(
                x=frame["name"], y=frame["balance"], name="Balance",
                mode="lines+markers", line=dict(color="#3B82F6"),
            )
        fig.update_layout(template="plotly_dark", barmode="group")
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("🧾 Recent Transactions")
    feed_filter = st.selectbox("Show", [f.value for f in KindFilter], key="feed_filter")
    show_all = st.toggle("Show all", value=False)
    feed = dashboard.recent(entries, feed_filter, show_all)
    for e in feed.items:
        sign = "+" if e.kind is Kind.INCOME else "-"
        st.write(f"{e.display_icon} **{e.label}** · {e.occurred_on:%d %b %Y} · {sign}{fmt_money(e.amount)}")
    if feed.hidden:
        st.caption(f"{feed.hidden} more transactions hidden")


elif menu in ("💰 Income", "💸 Expense"):
    kind = Kind.INCOME if menu == "💰 Income" else Kind.EXPENSE
    noun = "Income" if kind is Kind.INCOME else "Expense"
    state_key = f"{kind.value}_table"

    if state_key not in st.session_state:
        st.session_state[state_key] = {"sort": SortState(), "page": 1}
    table_state = st.session_state[state_key]

    st.header(f"{noun} Entries")

    with st.expander(f"➕ Add {noun}", expanded=False):
        label = st.text_input("Source" if kind is Kind.INCOME else "Category", key=f"{kind.value}_label")
        icon = st.session_state.get(f"{kind.value}_icon", default_icon(kind))

        suggestions = suggest_for(store.snapshot(), kind, label, settings.suggestion_limit)
        if suggestions:
            st.caption("From history")
            cols = st.columns(len(suggestions))
            for col, s in zip(cols, suggestions):
                col.button(
                    f"{s.icon} {s.label}",
                    key=f"sugg_{kind.value}_{s.label}",
                    on_click=apply_suggestion,
                    args=(kind, s),
                )

        with st.form(f"{kind.value}_form", clear_on_submit=True):
            amount = st.number_input("Amount", min_value=0.0, step=1000.0, format="%.2f")
            occurred_on = st.date_input("Date", value=date.today())
            icon = st.text_input("Icon", value=icon)
            submitted = st.form_submit_button(f"Add {noun}")

        if submitted and label.strip():
            bus.publish(ENTRY_ADDED, {
                "kind": kind,
                "label": label,
                "amount": str(amount),
                "occurred_on": occurred_on,
                "icon": icon,
            })
            st.success(f"{noun} added")
            st.rerun()

    c1, c2 = st.columns([3, 1])
    with c1:
        query = st.text_input("Search", key=f"{kind.value}_query")
    with c2:
        sort_col = st.selectbox("Sort by", [k.value for k in SortKey], key=f"{kind.value}_sort_col")
        if st.button("Toggle direction" if sort_col == table_state["sort"].key.value else "Apply sort"):
            table_state["sort"] = table_state["sort"].toggle(sort_col)

    view = tables.view(store.snapshot(), kind, query, table_state["sort"], table_state["page"])
    page = view.page
    table_state["page"] = page.current_page

    st.caption(
        f"Sorted by {view.sort.key.value} ({view.sort.direction.value}) · "
        f"total {fmt_money(view.total_amount)}"
    )

    df = entries_to_df(page.items)
    if df.empty:
        st.info(f"No {noun.lower()} entries yet.")
    else:
        st.dataframe(df[["icon", "label", "amount", "occurred_on"]], use_container_width=True, hide_index=True)
        st.caption(f"Showing {page.first_index_shown}-{page.last_index_shown} of {page.total_items}")

    nav = st.columns(len(page.page_numbers) + 2)
    if nav[0].button("‹", disabled=not page.has_previous, key=f"{kind.value}_prev"):
        table_state["page"] = page.current_page - 1
        st.rerun()
    for col, n in zip(nav[1:-1], page.page_numbers):
        if col.button(str(n), type="primary" if n == page.current_page else "secondary", key=f"{kind.value}_p{n}"):
            table_state["page"] = n
            st.rerun()
    if nav[-1].button("›", disabled=not page.has_next, key=f"{kind.value}_next"):
        table_state["page"] = page.current_page + 1
        st.rerun()
    st.caption(f"Page {page.current_page} of {page.total_pages}")

    if page.items:
        st.subheader("✏️ Edit / Delete")
        choices = {f"{e.label} · {e.occurred_on} · {fmt_money(e.amount)}": e for e in page.items}
        picked = choices[st.selectbox("Entry", list(choices.keys()), key=f"{kind.value}_pick")]
        with st.form(f"{kind.value}_edit"):
            new_label = st.text_input("Label", value=picked.label)
            new_amount = st.number_input("Amount", min_value=0.0, value=float(picked.amount), step=1000.0)
            new_date = st.date_input("Date", value=picked.occurred_on)
            new_icon = st.text_input("Icon", value=picked.display_icon)
            save = st.form_submit_button("Save")
            delete = st.form_submit_button("Delete")
        if save and not new_label.strip():
            st.error("Label must not be blank")
        elif save:
            bus.publish(ENTRY_EDITED, {
                "id": picked.id,
                "label": new_label,
                "amount": str(new_amount),
                "occurred_on": new_date,
                "icon": new_icon,
            })
            st.rerun()
        if delete:
            bus.publish(ENTRY_DELETED, {"id": picked.id})
            st.rerun()
