from dataclasses import dataclass, field
from datetime import date


@dataclass
class DateRange:
    start: date
    end: date       # inclusive

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


@dataclass
class MonthSummary:
    month: int      # 0-based, 0 = January
    year: int
    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0
    category_summary: dict[str, float] = field(default_factory=dict)


@dataclass
class YearSummary:
    year: int
    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0
    monthly_summaries: list[MonthSummary] = field(default_factory=list)
    category_summary: dict[str, float] = field(default_factory=dict)


@dataclass
class Anomaly:
    category_id: str
    amount: float
    percentage_change: float
