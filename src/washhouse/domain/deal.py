# src/washhouse/domain/deal.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Machine types we carry replacement data for. Anything else is still accepted
# (e.g. "Other" or a raw description) and simply has no CapEx profile.
MachineType = Literal[
    "Top-Load Washer",
    "Front-Load Washer",
    "Stacked Washer/Dryer",
    "Single Dryer",
    "Stacked Dryer",
    "Other",
]

ExpenseType = Literal["Fixed", "Variable"]

LeaseType = Literal["Triple Net (NNN)", "Modified Gross", "Gross Lease", "Other"]


class DealRecord(BaseModel):
    """
    Base for every input record.

    Upstream deal-state providers hand us camelCase keys (askingPrice); the
    API and tests use snake_case. Both populate the same field.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class ValueAddedService(DealRecord):
    description: str = ""
    potential_revenue: float = 0.0


class ExpansionPotential(DealRecord):
    additional_machines: int = 0
    expansion_cost: float = 0.0
    potential_additional_income: float = 0.0


class Deal(DealRecord):
    deal_id: str = ""
    deal_name: str = ""
    property_address: str = ""

    asking_price: float = Field(..., ge=0, description="Asking or assumed purchase price")
    facility_size_sqft: float = 0.0
    is_real_estate_included: bool = False

    gross_income_annual: float = 0.0
    annual_net: float = Field(default=0.0, description="Seller-reported net, used only for sanity checks")

    full_time_staff_count: int = 0
    part_time_staff_count: int = 0
    payroll_cost: float = 0.0

    # percentages are whole numbers: 20 means 20%
    down_payment_percent: float = Field(default=25.0, description="20 means 20% down")
    loan_interest_rate_percent: float = Field(default=7.5, ge=0, description="e.g. 6.5 for 6.5% APR")
    loan_term_years: int = Field(default=10, ge=0)
    loan_type: str = ""

    target_cap_rate_percent: float = 10.0
    target_coc_roi_percent: float = 15.0
    owner_weekly_hours: float = 0.0

    income_growth_rate_percent: float = 2.0
    expense_growth_rate_percent: float = 3.0

    expansion_potential: ExpansionPotential | None = None
    value_added_services: tuple[ValueAddedService, ...] = ()

    @field_validator("down_payment_percent")
    @classmethod
    def _pct_range(cls, v: float) -> float:
        if not (0.0 <= v <= 100.0):
            raise ValueError("down_payment_percent must be between 0 and 100")
        return v


class LeaseDetails(DealRecord):
    monthly_rent: float = 0.0
    # None means "not stated"; projections fall back to a default escalation
    annual_rent_increase_percent: float | None = None
    cam_cost_annual: float = 0.0
    remaining_lease_term_years: float = 0.0
    renewal_options_count: int = 0
    renewal_option_length_years: float = 0.0
    lease_type: LeaseType = "Other"

    @property
    def annual_rent(self) -> float:
        return self.monthly_rent * 12.0

    @property
    def total_term_years(self) -> float:
        return self.remaining_lease_term_years + self.renewal_options_count * self.renewal_option_length_years


class ExpenseItem(DealRecord):
    expense_name: str
    amount_annual: float = 0.0
    expense_type: ExpenseType = "Fixed"


class MachineInventory(DealRecord):
    machine_type: str
    brand: str = ""
    model: str | None = None
    quantity: int = Field(default=1, ge=1)
    age_years: float = Field(default=0.0, ge=0)
    capacity_lbs: float = 0.0
    vend_price_per_use: float = 0.0
    condition_rating: float = Field(default=3.0, ge=1, le=5)
    # 0 or None: not measured; such washers are left out of the water cross-check
    water_consumption_gal_per_cycle: float | None = Field(default=None, ge=0)

    @property
    def is_washer(self) -> bool:
        return "Washer" in self.machine_type


class AncillaryIncome(DealRecord):
    is_wdf_active: bool = Field(default=False, alias="isWDFActive")
    wdf_price_per_lb: float = 0.0
    wdf_volume_lbs_per_week: float = 0.0
    vending_income_annual: float = 0.0
    other_income_annual: float = 0.0

    @property
    def wdf_income_annual(self) -> float:
        if not self.is_wdf_active:
            return 0.0
        return self.wdf_price_per_lb * self.wdf_volume_lbs_per_week * 52

    @property
    def total_annual(self) -> float:
        return self.wdf_income_annual + self.vending_income_annual + self.other_income_annual


class UtilityAnalysis(DealRecord):
    collection_period_weeks: float = 0.0
    total_collected_amount: float = 0.0
    water_bill_total_gallons: float = 0.0
    water_bill_period_months: float = 0.0
    water_sewer_cost_per_gallon: float = 0.0
    notes: str = ""


class DealInputs(DealRecord):
    """Everything a calculation call needs, as handed over by the deal-state provider."""
    deal: Deal | None = None
    lease_details: LeaseDetails | None = None
    expense_items: tuple[ExpenseItem, ...] = ()
    machine_inventory: tuple[MachineInventory, ...] = ()
    ancillary_income: AncillaryIncome | None = None
    utility_analysis: UtilityAnalysis | None = None
