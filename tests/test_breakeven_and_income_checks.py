import pytest
from pydantic import ValidationError

from washhouse.analysis.breakeven import calculate_breakeven
from washhouse.analysis.formatting import format_currency, format_percentage
from washhouse.analysis.utility_income import collection_based_income, water_based_income
from washhouse.domain.deal import Deal, ExpenseItem, MachineInventory, UtilityAnalysis


def test_breakeven_covers_expenses_and_loan_payment():
    deal = Deal(asking_price=100_000, gross_income_annual=120_000, down_payment_percent=20,
                loan_interest_rate_percent=6, loan_term_years=10)
    expenses = [ExpenseItem(expense_name="Utilities", amount_annual=60_000.0)]

    b = calculate_breakeven(deal, expenses)

    assert b.monthly_breakeven_revenue == pytest.approx(5_000.0 + 888.16, abs=0.01)
    assert b.breakeven_occupancy == pytest.approx(58.8816, abs=0.001)
    assert b.months_to_breakeven == pytest.approx(20_000.0 / (10_000.0 - 5_888.16), rel=1e-4)


def test_breakeven_for_losing_store_never_pays_back():
    deal = Deal(asking_price=100_000, gross_income_annual=12_000)
    expenses = [ExpenseItem(expense_name="Rent", amount_annual=24_000.0)]

    b = calculate_breakeven(deal, expenses)

    assert b.breakeven_occupancy > 100
    assert b.months_to_breakeven == 0.0


def test_breakeven_without_deal_is_zero():
    b = calculate_breakeven(None)
    assert b.to_dict() == {
        "monthly_breakeven_revenue": 0.0,
        "breakeven_occupancy": 0.0,
        "months_to_breakeven": 0.0,
    }


def test_water_based_income(sample_utility, sample_machines):
    # 120k gal/month over a 25.7 gal weighted cycle, at an average $4 vend
    assert water_based_income(sample_utility, sample_machines) == pytest.approx(224_000.0)


def test_water_based_income_needs_washer_water_data(sample_utility):
    dryers = [MachineInventory(machine_type="Single Dryer", quantity=10, vend_price_per_use=2.0)]
    washers_no_water = [MachineInventory(machine_type="Top-Load Washer", vend_price_per_use=3.0)]

    assert water_based_income(sample_utility, dryers) == 0.0
    assert water_based_income(sample_utility, washers_no_water) == 0.0
    assert water_based_income(None, dryers) == 0.0
    assert water_based_income(UtilityAnalysis(water_bill_total_gallons=1_000.0), washers_no_water) == 0.0


def test_collection_based_income(sample_utility):
    assert collection_based_income(sample_utility) == pytest.approx(260_000.0)
    assert collection_based_income(UtilityAnalysis()) == 0.0
    assert collection_based_income(None) == 0.0


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "$0.00"),
        (1234.5, "$1,234.50"),
        (-1234.5, "-$1,234.50"),
        (2_500_000, "$2,500,000.00"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_percentage():
    assert format_percentage(12.345) == "12.3%"
    assert format_percentage(7.5, decimals=2) == "7.50%"
    assert format_percentage(-3) == "-3.0%"


def test_negative_water_figure_is_rejected():
    with pytest.raises(ValidationError):
        MachineInventory(machine_type="Front-Load Washer", water_consumption_gal_per_cycle=-20.0)


def test_zero_water_figure_is_left_out_of_the_average(sample_utility):
    washers = [
        MachineInventory(machine_type="Front-Load Washer", vend_price_per_use=4.0,
                         water_consumption_gal_per_cycle=20.0),
        MachineInventory(machine_type="Top-Load Washer", vend_price_per_use=2.0,
                         water_consumption_gal_per_cycle=0.0),
    ]

    # 120k gal/month / 20 gal * $4 * 12
    assert water_based_income(sample_utility, washers) == pytest.approx(288_000.0)
