"""
Salary Range Value Object
Immutable salary range with validation
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SalaryRange:
    """Offered salary range for a job posting"""

    min_salary: int
    max_salary: Optional[int] = None
    currency: str = "USD"

    def __post_init__(self):
        """Validate salary range"""
        if self.min_salary < 0:
            raise ValueError("Minimum salary cannot be negative")

        if self.max_salary is not None:
            if self.max_salary < 0:
                raise ValueError("Maximum salary cannot be negative")
            if self.max_salary < self.min_salary:
                raise ValueError("Maximum salary cannot be less than minimum salary")

        if not self.currency or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter code")

    def to_dict(self) -> dict:
        return {"min": self.min_salary, "max": self.max_salary, "currency": self.currency}

    def __str__(self) -> str:
        if self.max_salary:
            return f"{self.currency} {self.min_salary:,} - {self.max_salary:,}"
        return f"{self.currency} {self.min_salary:,}+"
