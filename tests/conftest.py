# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from washhouse.api.http import app  # ensures imports resolve; run tests from repo root
from washhouse.domain.deal import (
    AncillaryIncome,
    Deal,
    ExpenseItem,
    LeaseDetails,
    MachineInventory,
    UtilityAnalysis,
)


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def sample_deal():
    # 500k store, 20% down, 6% over 7 years
    return Deal(
        deal_id="deal-001",
        deal_name="Maple Ave Laundry",
        property_address="12 Maple Ave",
        asking_price=500_000.0,
        facility_size_sqft=3_000.0,
        gross_income_annual=250_000.0,
        annual_net=90_000.0,
        down_payment_percent=20.0,
        loan_interest_rate_percent=6.0,
        loan_term_years=7,
    )


@pytest.fixture
def sample_lease():
    return LeaseDetails(
        monthly_rent=3_000.0,
        annual_rent_increase_percent=2.5,
        remaining_lease_term_years=10,
        renewal_options_count=2,
        renewal_option_length_years=5,
        lease_type="Triple Net (NNN)",
    )


@pytest.fixture
def sample_expenses():
    return (
        ExpenseItem(expense_name="Rent", amount_annual=36_000.0),
        ExpenseItem(expense_name="Utilities", amount_annual=40_000.0, expense_type="Variable"),
        ExpenseItem(expense_name="Insurance", amount_annual=6_000.0),
        ExpenseItem(expense_name="Maintenance", amount_annual=8_000.0, expense_type="Variable"),
    )


@pytest.fixture
def sample_machines():
    return (
        # replaced in year 5
        MachineInventory(machine_type="Front-Load Washer", quantity=10, age_years=10,
                         condition_rating=4, vend_price_per_use=5.0,
                         water_consumption_gal_per_cycle=20.0),
        # replaced in year 7
        MachineInventory(machine_type="Top-Load Washer", quantity=4, age_years=5,
                         condition_rating=3, vend_price_per_use=3.0,
                         water_consumption_gal_per_cycle=40.0),
        # outside the horizon
        MachineInventory(machine_type="Single Dryer", quantity=8, age_years=3, condition_rating=4),
    )


@pytest.fixture
def sample_ancillary():
    # 1.50/lb * 500 lb/wk * 52 = 39,000 WDF + 2,000 vending + 1,000 other
    return AncillaryIncome(
        is_wdf_active=True,
        wdf_price_per_lb=1.5,
        wdf_volume_lbs_per_week=500.0,
        vending_income_annual=2_000.0,
        other_income_annual=1_000.0,
    )


@pytest.fixture
def sample_utility():
    return UtilityAnalysis(
        collection_period_weeks=4,
        total_collected_amount=20_000.0,
        water_bill_total_gallons=240_000.0,
        water_bill_period_months=2,
    )


@pytest.fixture
def sample_payload():
    """Raw bundle the way the deal wizard sends it: camelCase keys, money strings."""
    return {
        "deal": {
            "dealId": "deal-001",
            "dealName": "Maple Ave Laundry",
            "askingPrice": "$500,000",
            "facilitySizeSqft": 3000,
            "grossIncomeAnnual": "250,000",
            "annualNet": 90000,
            "downPaymentPercent": "20%",
            "loanInterestRatePercent": "6%",
            "loanTermYears": 7,
        },
        "leaseDetails": {
            "monthlyRent": 3000,
            "annualRentIncreasePercent": 2.5,
            "remainingLeaseTermYears": 10,
            "renewalOptionsCount": 2,
            "renewalOptionLengthYears": 5,
            "leaseType": "Triple Net (NNN)",
        },
        "expenseItems": [
            {"expenseName": "Rent", "amountAnnual": "$36,000", "expenseType": "Fixed"},
            {"expenseName": "Utilities", "amountAnnual": 40000, "expenseType": "Variable"},
            {"expenseName": "Insurance", "amountAnnual": 6000, "expenseType": "Fixed"},
            {"expenseName": "Maintenance", "amountAnnual": 8000, "expenseType": "Variable"},
        ],
        "machineInventory": [
            {"machineType": "Front-Load Washer", "quantity": 10, "ageYears": 10, "conditionRating": 4},
            {"machineType": "Top-Load Washer", "quantity": 4, "ageYears": 5, "conditionRating": 3},
            {"machineType": "Single Dryer", "quantity": 8, "ageYears": 3, "conditionRating": 4},
        ],
        "ancillaryIncome": {
            "isWDFActive": True,
            "wdfPricePerLb": 1.5,
            "wdfVolumeLbsPerWeek": 500,
            "vendingIncomeAnnual": 2000,
            "otherIncomeAnnual": 1000,
        },
    }
