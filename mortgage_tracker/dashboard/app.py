"""Plotly Dash application: schedule table and early payoff simulator."""

from datetime import date
from decimal import Decimal, InvalidOperation

import plotly.graph_objects as go
from dash import Dash, Input, Output, dash_table, dcc, html

from mortgage_tracker.config import settings
from mortgage_tracker.engine.amortization import build_schedule, schedule_summary
from mortgage_tracker.engine.early_payoff import simulate_early_payoff
from mortgage_tracker.models.mortgage import Mortgage, MortgageBonification, MortgageCondition
from mortgage_tracker.models.results import AmortizationPayment, EarlyPayoffSimulation, PayoffStrategy
from mortgage_tracker.presentation.formatting import format_currency, format_month, format_percent

SCHEDULE_COLUMNS = [
    {"name": "#", "id": "payment_number"},
    {"name": "Mes", "id": "date"},
    {"name": "Cuota", "id": "total_payment"},
    {"name": "Capital", "id": "principal"},
    {"name": "Intereses", "id": "interest"},
    {"name": "Pendiente", "id": "remaining_balance"},
    {"name": "Tipo", "id": "interest_rate"},
]


def _decimal(value) -> Decimal | None:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _date(value) -> date | None:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def schedule_rows(schedule: list[AmortizationPayment], currency: str = settings.currency) -> list[dict]:
    return [
        {
            "payment_number": p.payment_number,
            "date": format_month(p.date),
            "total_payment": format_currency(p.total_payment, currency),
            "principal": format_currency(p.principal, currency),
            "interest": format_currency(p.interest, currency),
            "remaining_balance": format_currency(p.remaining_balance, currency),
            "interest_rate": format_percent(p.interest_rate),
        }
        for p in schedule
    ]


def balance_figure(
    baseline: list[AmortizationPayment],
    simulation: EarlyPayoffSimulation | None = None,
) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[p.payment_number for p in baseline],
        y=[float(p.remaining_balance) for p in baseline],
        name="Sin amortización",
        mode="lines",
    ))
    if simulation is not None:
        fig.add_trace(go.Scatter(
            x=[p.payment_number for p in simulation.new_schedule],
            y=[float(p.remaining_balance) for p in simulation.new_schedule],
            name="Con amortización",
            mode="lines",
        ))
    fig.update_layout(
        xaxis_title="Pago nº",
        yaxis_title="Saldo pendiente",
        margin={"l": 40, "r": 20, "t": 20, "b": 40},
    )
    return fig


def comparison_panel(sim: EarlyPayoffSimulation, currency: str = settings.currency) -> html.Div:
    def row(label, before, after):
        return html.Tr([html.Td(label), html.Td(before), html.Td(after)])

    return html.Div([
        html.H4(f"Ahorro en intereses: {format_currency(sim.interest_saved, currency)}"),
        html.P(f"Meses que te ahorras: {sim.months_saved}"),
        html.Table([
            html.Thead(html.Tr([html.Th(""), html.Th("Sin amortización"), html.Th("Con amortización")])),
            html.Tbody([
                row("Cuotas restantes", sim.original_remaining_payments, sim.new_remaining_payments),
                row(
                    "Cuota mensual",
                    format_currency(sim.original_monthly_payment, currency),
                    format_currency(sim.new_monthly_payment, currency),
                ),
                row(
                    "Intereses totales",
                    format_currency(sim.original_total_interest, currency),
                    format_currency(sim.new_total_interest, currency),
                ),
            ]),
        ]),
    ])


def compute_view(
    amount, rate, term, start, grace_months, bonification, extra, after, strategy,
    currency: str = settings.currency,
) -> tuple[list[dict], str, go.Figure, html.Div | str]:
    """Everything the page shows for one set of inputs."""
    amount = _decimal(amount)
    rate = _decimal(rate)
    if amount is None or amount <= 0 or rate is None or rate < 0 or not term or int(term) <= 0:
        return [], "Introduce importe, tipo y plazo", go.Figure(), ""
    start_date = _date(start) if start else date.today()
    if start_date is None:
        return [], "Fecha de primer pago no válida (AAAA-MM-DD)", go.Figure(), ""

    mortgage = Mortgage(
        total_amount=amount,
        interest_rate=rate,
        start_date=start_date,
        term_months=int(term),
    )
    conditions = []
    if grace_months and int(grace_months) > 0:
        conditions.append(MortgageCondition(start_month=1, end_month=int(grace_months), interest_rate=Decimal("0")))
    bonifications = []
    reduction = _decimal(bonification)
    if reduction:
        bonifications.append(MortgageBonification(rate_reduction=reduction))

    schedule = build_schedule(mortgage, conditions, bonifications)
    summary = schedule_summary(schedule)
    summary_text = (
        f"{summary.number_of_payments} cuotas · intereses {format_currency(summary.total_interest, currency)}"
        f" · total {format_currency(summary.total_payments, currency)}"
    )

    extra_amount = _decimal(extra)
    if extra_amount is None or extra_amount <= 0:
        return schedule_rows(schedule, currency), summary_text, balance_figure(schedule), ""

    try:
        sim = simulate_early_payoff(
            mortgage, conditions, bonifications, extra_amount, int(after or 0), PayoffStrategy(strategy),
        )
    except ValueError as e:
        return schedule_rows(schedule, currency), summary_text, balance_figure(schedule), str(e)
    return schedule_rows(schedule, currency), summary_text, balance_figure(schedule, sim), comparison_panel(sim, currency)


def _field(label: str, component) -> html.Div:
    return html.Div([html.Label(label), component], style={"marginBottom": "0.5rem"})


def create_dashboard() -> Dash:
    app = Dash(__name__, title="Mortgage Tracker")

    app.layout = html.Div([
        html.H1("Hipoteca", style={"fontSize": "1.5rem"}),
        html.Div([
            _field("Importe", dcc.Input(id="amount", type="number", value=150000)),
            _field("Tipo nominal (%)", dcc.Input(id="rate", type="number", value=3.5, step=0.01)),
            _field("Plazo (meses)", dcc.Input(id="term", type="number", value=360)),
            _field("Primer pago", dcc.Input(id="start", type="text", value=date.today().isoformat())),
            _field("Carencia (meses al 0%)", dcc.Input(id="grace", type="number", value=0)),
            _field("Bonificación (puntos)", dcc.Input(id="bonification", type="number", value=0, step=0.01)),
        ], style={"display": "grid", "gridTemplateColumns": "repeat(3, 1fr)", "gap": "1rem"}),
        html.P(id="summary"),
        html.H2("Simulador de amortización anticipada", style={"fontSize": "1.2rem"}),
        html.Div([
            _field("Cantidad a amortizar", dcc.Input(id="extra", type="number", step=100)),
            _field("Después del pago nº", dcc.Input(id="after", type="number", value=0, min=0)),
            _field("Estrategia", dcc.Dropdown(
                id="strategy",
                options=[
                    {"label": "Reducir plazo", "value": PayoffStrategy.REDUCE_TERM.value},
                    {"label": "Reducir cuota", "value": PayoffStrategy.REDUCE_PAYMENT.value},
                ],
                value=PayoffStrategy.REDUCE_TERM.value,
                clearable=False,
            )),
        ], style={"display": "grid", "gridTemplateColumns": "repeat(3, 1fr)", "gap": "1rem"}),
        html.Div(id="comparison"),
        dcc.Graph(id="balance-chart"),
        dash_table.DataTable(id="schedule-table", columns=SCHEDULE_COLUMNS, page_size=24),
    ], style={"maxWidth": "1200px", "margin": "0 auto", "padding": "0 1rem"})

    @app.callback(
        Output("schedule-table", "data"),
        Output("summary", "children"),
        Output("balance-chart", "figure"),
        Output("comparison", "children"),
        Input("amount", "value"),
        Input("rate", "value"),
        Input("term", "value"),
        Input("start", "value"),
        Input("grace", "value"),
        Input("bonification", "value"),
        Input("extra", "value"),
        Input("after", "value"),
        Input("strategy", "value"),
    )
    def update(*values):
        return compute_view(*values)

    return app


if __name__ == "__main__":
    create_dashboard().run(debug=settings.debug, port=8050)
