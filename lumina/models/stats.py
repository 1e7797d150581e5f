"""
Derived statistics models.

FinancialStats is recomputed on every read and never persisted.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class FinancialStats(BaseModel):
    """
    Aggregate figures for a slice of the ledger.

    Sums use plain float addition. This is not cent-exact accounting.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    total_income: float = Field(
        default=0.0,
        description="Sum of income amounts"
    )
    total_expense: float = Field(
        default=0.0,
        description="Sum of expense amounts"
    )
    category_breakdown: dict[str, float] = Field(
        default_factory=dict,
        description="Expense total per category; categories without expense are absent"
    )

    @computed_field
    @property
    def balance(self) -> float:
        """Income minus expense. May be negative."""
        return self.total_income - self.total_expense

    def chart_data(self) -> list[dict]:
        """Pie chart input: one {name, value} point per expense category."""
        return [
            {"name": category, "value": value}
            for category, value in self.category_breakdown.items()
        ]

    def cash_flow(self) -> list[dict]:
        """Bar chart input: income next to expense."""
        return [
            {"name": "income", "amount": self.total_income},
            {"name": "expense", "amount": self.total_expense},
        ]
