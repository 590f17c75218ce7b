from __future__ import annotations

import math
import random
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping


MIN_SALARY = 30_000
MAX_SALARY = 1_000_000

# Spread between the two reported figures, as a fraction of the base salary.
MODEL_VARIANCE = 0.05

DEFAULT_JOB_RANGE = (50_000, 8_000)

# (base salary, raise per year of experience)
SALARY_BASE_RANGES: dict[str, tuple[int, int]] = {
    "Software Engineer": (60_000, 12_000),
    "Senior Software Engineer": (85_000, 13_000),
    "Staff Software Engineer": (110_000, 14_000),
    "Engineering Manager": (105_000, 15_000),
    "Product Manager": (90_000, 18_000),
    "Senior Product Manager": (110_000, 17_000),
    "Data Scientist": (80_000, 15_000),
    "Senior Data Scientist": (100_000, 15_000),
    "DevOps Engineer": (70_000, 12_000),
    "QA Engineer": (50_000, 9_000),
    "UX Designer": (60_000, 10_000),
    "UI Designer": (55_000, 9_000),
    "Marketing Manager": (55_000, 10_000),
    "Digital Marketing Specialist": (45_000, 7_000),
    "Content Marketing Manager": (50_000, 8_000),
    "Sales Representative": (40_000, 6_000),
    "Account Manager": (50_000, 8_000),
    "Sales Manager": (50_000, 8_000),
    "Business Development Manager": (60_000, 10_000),
    "Business Analyst": (50_000, 8_000),
    "HR Generalist": (40_000, 6_000),
    "HR Manager": (45_000, 7_000),
    "Recruiter": (40_000, 6_000),
    "Financial Analyst": (55_000, 9_000),
    "Accountant": (45_000, 7_000),
    "Finance Manager": (65_000, 11_000),
    "Operations Manager": (55_000, 9_000),
    "Project Manager": (70_000, 12_000),
    "Scrum Master": (65_000, 10_000),
    "Customer Success Manager": (50_000, 8_000),
    "Technical Writer": (45_000, 7_000),
}

DEPARTMENT_MULTIPLIERS: dict[str, float] = {
    "Data Science": 1.45,
    "IT": 1.35,
    "Engineering": 1.35,
    "Finance": 1.25,
    "Marketing": 1.15,
    "Sales": 1.08,
    "HR": 1.02,
    "Operations": 0.98,
}

LOCATION_MULTIPLIERS: dict[str, float] = {
    "San Francisco": 1.30,
    "New York": 1.25,
    "Mumbai": 1.25,
    "Bangalore": 1.18,
    "Los Angeles": 1.15,
    "Delhi": 1.15,
    "Pune": 1.08,
    "Chicago": 1.05,
    "Chennai": 1.05,
    "Hyderabad": 1.03,
    "Remote": 0.92,
}

EDUCATION_MULTIPLIERS: dict[str, float] = {
    "PhD": 1.35,
    "Master": 1.22,
    "Bachelor": 1.12,
    "Associate": 1.05,
    "High School": 1.0,
}

COMPANY_SIZE_MULTIPLIERS: dict[str, float] = {
    "Enterprise (5000+)": 1.20,
    "Large (1000+)": 1.15,
    "Large (501-5000)": 1.15,
    "Medium (100-999)": 1.05,
    "Medium (51-500)": 1.05,
    "Small (10-99)": 0.95,
    "Startup (1-50)": 0.85,
    "Startup (<10)": 0.85,
}

DEFAULT_FEATURE_IMPORTANCE: dict[str, float] = {
    "experience": 0.35,
    "department": 0.25,
    "location": 0.20,
    "education": 0.15,
    "companySize": 0.05,
}

_EDUCATION_ALIASES = {
    "bachelor": "Bachelor",
    "bachelor's": "Bachelor",
    "bachelors": "Bachelor",
    "master": "Master",
    "master's": "Master",
    "masters": "Master",
    "phd": "PhD",
    "ph.d.": "PhD",
    "associate": "Associate",
    "associate's": "Associate",
    "high school": "High School",
}


def normalize_education(value: str) -> str:
    key = (value or "").strip()
    return _EDUCATION_ALIASES.get(key.lower().replace("’", "'"), key)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class SalaryInput:
    job_title: str
    experience: int
    department: str
    location: str
    education_level: str
    company_size: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SalaryInput":
        return cls(
            job_title=str(data["job_title"]).strip(),
            experience=int(data["experience"]),
            department=str(data["department"]).strip(),
            location=str(data["location"]).strip(),
            education_level=str(data["education_level"]).strip(),
            company_size=str(data["company_size"]).strip(),
        )

    def normalized(self) -> "SalaryInput":
        return SalaryInput(
            job_title=self.job_title.strip(),
            experience=int(self.experience),
            department=self.department.strip(),
            location=self.location.strip(),
            education_level=normalize_education(self.education_level),
            company_size=self.company_size.strip(),
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PredictionResult:
    linear_regression_prediction: float
    random_forest_prediction: float
    confidence: float
    feature_importance: dict[str, float] = field(default_factory=dict)


class RuleBasedPredictor:
    """Market-table salary estimate: a base per job title, a per-year raise and
    a product of categorical multipliers."""

    name = "rule-based"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def base_salary(self, data: SalaryInput) -> float:
        base, per_year = SALARY_BASE_RANGES.get(data.job_title, DEFAULT_JOB_RANGE)
        salary = float(base + data.experience * per_year)
        salary *= DEPARTMENT_MULTIPLIERS.get(data.department, 1.0)
        salary *= LOCATION_MULTIPLIERS.get(data.location, 1.0)
        salary *= EDUCATION_MULTIPLIERS.get(normalize_education(data.education_level), 1.0)
        salary *= COMPANY_SIZE_MULTIPLIERS.get(data.company_size, 1.0)
        return salary

    def confidence(self, data: SalaryInput) -> float:
        confidence = 85
        if data.experience > 20:
            confidence -= 5
        if data.experience < 1:
            confidence -= 10
        if data.job_title not in SALARY_BASE_RANGES:
            confidence -= 8
        if data.department not in DEPARTMENT_MULTIPLIERS:
            confidence -= 5
        return clamp(confidence, 70, 95)

    def predict(self, data: SalaryInput) -> PredictionResult:
        salary = self.base_salary(data)
        jitter = (self._rng.random() - 0.5) * MODEL_VARIANCE

        linear = clamp(round_half_up(salary), MIN_SALARY, MAX_SALARY)
        forest = clamp(round_half_up(salary * (1 + jitter)), MIN_SALARY, MAX_SALARY)

        return PredictionResult(
            linear_regression_prediction=float(linear),
            random_forest_prediction=float(forest),
            confidence=float(self.confidence(data)),
            feature_importance=dict(DEFAULT_FEATURE_IMPORTANCE),
        )


def emergency_prediction(experience: int | float | None) -> PredictionResult:
    """Last-resort figures when the prediction path itself fails."""
    try:
        years = max(0.0, float(experience or 0))
    except (TypeError, ValueError):
        years = 0.0
    return PredictionResult(
        linear_regression_prediction=float(round_half_up(50_000 + years * 8_000)),
        random_forest_prediction=float(round_half_up(52_000 + years * 8_200)),
        confidence=70.0,
        feature_importance=dict(DEFAULT_FEATURE_IMPORTANCE),
    )
