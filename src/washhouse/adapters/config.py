# src/washhouse/adapters/config.py
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # Projection defaults
    # -----------------------------
    PROJECTION_YEARS: int = Field(default=10)
    INCOME_GROWTH_RATE: float = Field(default=0.02)
    EXPENSE_GROWTH_RATE: float = Field(default=0.03)
    DEFAULT_RENT_GROWTH_RATE: float = Field(default=0.03)

    # If true, projections use the deal's own income/expense growth fields
    USE_DEAL_GROWTH_RATES: bool = Field(default=False)

    # -----------------------------
    # IRR solver
    # -----------------------------
    IRR_SEED: float = Field(default=0.10)
    IRR_TOLERANCE: float = Field(default=1e-4)
    IRR_MAX_ITERATIONS: int = Field(default=100)
    IRR_BRACKET_LOW: float = Field(default=-0.99)
    IRR_BRACKET_HIGH: float = Field(default=10.0)

    # pipeline output
    REPORTS_DIR: str = Field(default="data/reports")

    model_config = SettingsConfigDict(
        env_prefix="WASHHOUSE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "INCOME_GROWTH_RATE",
        "EXPENSE_GROWTH_RATE",
        "DEFAULT_RENT_GROWTH_RATE",
        mode="before",
    )
    @classmethod
    def _to_non_negative_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("PROJECTION_YEARS", "IRR_MAX_ITERATIONS", mode="before")
    @classmethod
    def _positive_int(cls, v: Any) -> Any:
        i = int(v)
        if i <= 0:
            raise ValueError("must be > 0")
        return i

    @model_validator(mode="after")
    def _bracket_ordered(self) -> "AppConfig":
        if not (-1.0 < self.IRR_BRACKET_LOW < self.IRR_BRACKET_HIGH):
            raise ValueError("IRR bracket must satisfy -1 < low < high")
        return self

    @property
    def irr_bracket(self) -> tuple[float, float]:
        return (self.IRR_BRACKET_LOW, self.IRR_BRACKET_HIGH)


config = AppConfig()
