# tests/test_metrics.py
import pytest

from washhouse.analysis.metrics import calculate_metrics, valuation_multiplier
from washhouse.domain.deal import (
    Deal,
    ExpenseItem,
    LeaseDetails,
    MachineInventory,
    ValueAddedService,
)
from washhouse.domain.finance import annual_debt_service
from washhouse.domain.results import CalculatedMetrics


def _simple_deal(**overrides):
    # NOI 8,000 on 100k -> 8% cap rate, no signal from the cap-rate band
    params = dict(asking_price=100_000.0, gross_income_annual=8_000.0, down_payment_percent=25.0)
    params.update(overrides)
    return Deal(**params)


def test_no_deal_returns_empty_scorecard():
    m = calculate_metrics(None, None, [], [], None, None)

    assert m == CalculatedMetrics.empty()
    assert m.noi == 0.0
    assert m.valuation_multiplier == 4.0


def test_full_bundle_scorecard(sample_deal, sample_lease, sample_expenses, sample_machines,
                               sample_ancillary, sample_utility):
    m = calculate_metrics(sample_deal, sample_lease, sample_expenses, sample_machines,
                          sample_ancillary, sample_utility)

    assert m.total_gross_income == pytest.approx(292_000.0)  # 250k + 39k WDF + 3k vending/other
    assert m.total_operating_expenses == pytest.approx(90_000.0)
    assert m.noi == pytest.approx(202_000.0)
    assert m.loan_amount == pytest.approx(400_000.0)

    debt = annual_debt_service(400_000.0, 6.0, 7)
    assert m.annual_debt_service == pytest.approx(debt)
    assert m.annual_cash_flow == pytest.approx(202_000.0 - debt)
    assert m.coc_roi == pytest.approx((202_000.0 - debt) / 100_000.0 * 100)
    assert m.cap_rate == pytest.approx(40.4)
    assert m.dscr == pytest.approx(202_000.0 / debt)

    # age 6 (+0.25), 20y lease (+0.5), rent 12% of gross (+0.25), cap >= 10 (+0.25)
    assert m.valuation_multiplier == pytest.approx(5.25)
    assert m.suggested_valuation_low == pytest.approx(202_000.0 * 5.10)
    assert m.suggested_valuation_high == pytest.approx(202_000.0 * 5.40)


def test_value_added_services_count_toward_gross_income():
    deal = _simple_deal(value_added_services=[
        ValueAddedService(description="Dry cleaning drop-off", potential_revenue=5_000.0),
        ValueAddedService(description="Vending", potential_revenue=1_000.0),
    ])

    m = calculate_metrics(deal)

    assert m.total_gross_income == pytest.approx(14_000.0)


def test_division_guards_zero_price_and_all_cash():
    m = calculate_metrics(Deal(asking_price=0.0, gross_income_annual=50_000.0))
    assert m.cap_rate == 0.0
    assert m.coc_roi == 0.0
    assert m.dscr == 0.0
    assert m.annual_debt_service == 0.0

    all_cash = calculate_metrics(_simple_deal(down_payment_percent=100.0))
    assert all_cash.loan_amount == 0.0
    assert all_cash.dscr == 0.0
    assert all_cash.coc_roi == pytest.approx(8.0)


def test_zero_income_keeps_valuation_range_ordered():
    deal = _simple_deal(gross_income_annual=0.0)
    m = calculate_metrics(deal, expense_items=[ExpenseItem(expense_name="Utilities", amount_annual=10_000.0)])

    assert m.noi == pytest.approx(-10_000.0)
    assert m.cap_rate == pytest.approx(-10.0)
    assert m.valuation_multiplier == pytest.approx(3.5)
    assert m.suggested_valuation_low <= m.suggested_valuation_high
    assert m.suggested_valuation_low == pytest.approx(-10_000.0 * 3.65)
    assert m.suggested_valuation_high == pytest.approx(-10_000.0 * 3.35)


def test_base_multiplier_without_signals():
    m = calculate_metrics(_simple_deal())
    assert m.valuation_multiplier == pytest.approx(4.0)


def test_young_average_condition_equipment_adds_three_quarters():
    machines = [MachineInventory(machine_type="Front-Load Washer", age_years=3, condition_rating=3)]
    m = calculate_metrics(_simple_deal(), machine_inventory=machines)
    assert m.valuation_multiplier == pytest.approx(4.75)


def test_long_lease_with_light_rent_burden():
    lease = LeaseDetails(monthly_rent=50.0, remaining_lease_term_years=20)  # 600 / 8,000 = 7.5%
    m = calculate_metrics(_simple_deal(), lease_details=lease)
    assert m.valuation_multiplier == pytest.approx(4.75)


def test_short_lease_with_heavy_rent_burden():
    lease = LeaseDetails(monthly_rent=300.0, remaining_lease_term_years=3)  # 3,600 / 8,000 = 45%
    m = calculate_metrics(_simple_deal(), lease_details=lease)
    assert m.valuation_multiplier == pytest.approx(2.75)


def test_multiplier_reaches_upper_clamp():
    machines = [MachineInventory(machine_type="Front-Load Washer", age_years=2, condition_rating=5)]
    lease = LeaseDetails(monthly_rent=10.0, remaining_lease_term_years=5,
                         renewal_options_count=2, renewal_option_length_years=5)
    assert valuation_multiplier(machines, lease, total_gross_income=100_000.0, cap_rate=12.0) == 6.0


def test_multiplier_clamped_at_lower_bound():
    machines = [MachineInventory(machine_type="Top-Load Washer", age_years=20, condition_rating=1)]
    lease = LeaseDetails(monthly_rent=5_000.0, remaining_lease_term_years=2)
    # 4.0 - 0.5 - 0.75 - 0.5 - 0.5 - 0.5 = 1.25 -> 2.5
    assert valuation_multiplier(machines, lease, total_gross_income=100_000.0, cap_rate=3.0) == 2.5


def test_lease_with_zero_gross_income_counts_as_no_rent_burden():
    # ratio is taken as 0 rather than dividing by zero
    lease = LeaseDetails(monthly_rent=1_000.0, remaining_lease_term_years=10)
    assert valuation_multiplier([], lease, total_gross_income=0.0, cap_rate=8.0) == pytest.approx(4.25)


_BUNDLE_FIXTURES = ("sample_lease", "sample_expenses", "sample_machines", "sample_ancillary", "sample_utility")


@pytest.mark.parametrize(
    "missing",
    [
        _BUNDLE_FIXTURES,                        # deal only
        ("sample_expenses", "sample_machines"),  # lists explicitly None
        ("sample_lease", "sample_ancillary", "sample_utility"),
        (),
    ],
)
def test_metrics_with_missing_optional_sections(request, sample_deal, missing):
    args = [None if name in missing else request.getfixturevalue(name) for name in _BUNDLE_FIXTURES]

    m = calculate_metrics(sample_deal, *args)

    assert m.total_gross_income >= sample_deal.gross_income_annual
    assert 2.5 <= m.valuation_multiplier <= 6.0
    if "sample_expenses" in missing:
        assert m.total_operating_expenses == 0.0


def test_metrics_deal_only_with_every_section_none(sample_deal):
    m = calculate_metrics(sample_deal, None, None, None, None, None)

    assert m.total_gross_income == pytest.approx(250_000.0)
    assert m.noi == pytest.approx(250_000.0)


def test_no_deal_ignores_populated_sections(sample_lease, sample_expenses, sample_machines,
                                            sample_ancillary, sample_utility):
    m = calculate_metrics(None, sample_lease, sample_expenses, sample_machines,
                          sample_ancillary, sample_utility)

    assert m == CalculatedMetrics.empty()
