"""CLI for ad-hoc schedules and early payoff simulations.

Usage:
    python -m mortgage_tracker.cli schedule --amount 150000 --rate 3.5 --term 360 --start 2025-01-01
    python -m mortgage_tracker.cli schedule ... --condition 1:12:0 --bonification 0.5
    python -m mortgage_tracker.cli simulate ... --extra 10000 --after 24 --strategy reduce_payment
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation

from mortgage_tracker.config import settings
from mortgage_tracker.engine.amortization import build_schedule, schedule_summary, yearly_summary
from mortgage_tracker.engine.early_payoff import simulate_early_payoff
from mortgage_tracker.models.mortgage import Mortgage, MortgageBonification, MortgageCondition
from mortgage_tracker.models.results import PayoffStrategy
from mortgage_tracker.presentation.formatting import format_currency, format_month, format_percent


def parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.replace(",", "."))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value}")


def parse_condition(value: str) -> MortgageCondition:
    """START:END:RATE, e.g. 1:12:0 for a one-year interest-free period."""
    try:
        start, end, rate = value.split(":")
        return MortgageCondition(
            start_month=int(start),
            end_month=int(end),
            interest_rate=parse_decimal(rate),
        )
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected START:END:RATE, got {value}")


def print_schedule(schedule, yearly: bool = False) -> None:
    summary = schedule_summary(schedule)
    print(f"\n{'=' * 72}")
    print(f"  Amortization Schedule ({summary.number_of_payments} payments)")
    print(f"{'=' * 72}")

    if yearly:
        print(f"  {'Year':>4}  {'Principal':>14}  {'Interest':>14}  {'Paid':>14}  {'Balance':>14}")
        for y in yearly_summary(schedule):
            print(
                f"  {y['year']:>4}  {format_currency(y['principal']):>14}  "
                f"{format_currency(y['interest']):>14}  {format_currency(y['total_payment']):>14}  "
                f"{format_currency(y['ending_balance']):>14}"
            )
    else:
        print(f"  {'#':>4}  {'Month':>9}  {'Payment':>12}  {'Principal':>12}  {'Interest':>12}  {'Balance':>14}  {'Rate':>6}")
        for p in schedule:
            print(
                f"  {p.payment_number:>4}  {format_month(p.date):>9}  {format_currency(p.total_payment):>12}  "
                f"{format_currency(p.principal):>12}  {format_currency(p.interest):>12}  "
                f"{format_currency(p.remaining_balance):>14}  {format_percent(p.interest_rate):>6}"
            )

    print()
    print(f"  Total principal:  {format_currency(summary.total_principal)}")
    print(f"  Total interest:   {format_currency(summary.total_interest)}")
    print(f"  Total paid:       {format_currency(summary.total_payments)}")
    print()


def print_simulation(sim) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Early payoff of {format_currency(sim.extra_payment_amount)} after payment {sim.after_payment_number}")
    print(f"  Strategy: {sim.strategy.value}")
    print(f"{'=' * 60}")
    print(f"  {'':<22}{'Without':>16}{'With':>16}")
    print(f"  {'Remaining payments':<22}{sim.original_remaining_payments:>16}{sim.new_remaining_payments:>16}")
    print(
        f"  {'Monthly payment':<22}{format_currency(sim.original_monthly_payment):>16}"
        f"{format_currency(sim.new_monthly_payment):>16}"
    )
    print(
        f"  {'Total interest':<22}{format_currency(sim.original_total_interest):>16}"
        f"{format_currency(sim.new_total_interest):>16}"
    )
    print()
    print(f"  Interest saved:   {format_currency(sim.interest_saved)}")
    print(f"  Months saved:     {sim.months_saved}")
    if sim.interest_saved > 0:
        print(f"  Return:           {sim.interest_saved_per_unit:.1%} of the amount paid early")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mortgage schedule and early payoff calculator")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--amount", type=parse_decimal, required=True, help="Principal")
    common.add_argument("--rate", type=parse_decimal, required=True, help="Annual nominal rate, percent")
    common.add_argument("--term", type=int, required=True, help="Term in months")
    common.add_argument("--start", type=date.fromisoformat, default=date.today(), help="First payment date (YYYY-MM-DD)")
    common.add_argument("--condition", type=parse_condition, action="append", default=[],
                        help="Rate override START:END:RATE (repeatable)")
    common.add_argument("--bonification", type=parse_decimal, action="append", default=[],
                        help="Active rate reduction in points (repeatable)")

    schedule = sub.add_parser("schedule", parents=[common], help="Print the amortization schedule")
    schedule.add_argument("--yearly", action="store_true", help="Aggregate by loan year")

    simulate = sub.add_parser("simulate", parents=[common], help="Simulate an extra principal payment")
    simulate.add_argument("--extra", type=parse_decimal, required=True, help="Extra amount")
    simulate.add_argument("--after", type=int, default=0, help="Apply after this payment number (default: 0)")
    simulate.add_argument("--strategy", choices=[s.value for s in PayoffStrategy],
                          default=PayoffStrategy.REDUCE_TERM.value, help="Re-amortization strategy")
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level)
    parser = build_parser()
    args = parser.parse_args(argv)

    mortgage = Mortgage(
        total_amount=args.amount,
        interest_rate=args.rate,
        start_date=args.start,
        term_months=args.term,
    )
    bonifications = [MortgageBonification(rate_reduction=b) for b in args.bonification]

    if args.command == "schedule":
        print_schedule(build_schedule(mortgage, args.condition, bonifications), yearly=args.yearly)
        return 0

    if args.extra <= 0:
        parser.error("--extra must be positive")
    try:
        sim = simulate_early_payoff(
            mortgage, args.condition, bonifications, args.extra, args.after, PayoffStrategy(args.strategy),
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print_simulation(sim)
    return 0


if __name__ == "__main__":
    sys.exit(main())
