"""
Fixed business-insight taxonomy.

Every category is always present; a category with nothing found is an empty
list, never ``None``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from pitchwright.schemas.common import CamelModel


class InsightCategory(str, Enum):
    market_size = "market_size"
    competitive_advantage = "competitive_advantage"
    problem_statement = "problem_statement"
    solution = "solution"
    business_model = "business_model"
    target_market = "target_market"
    financial_projections = "financial_projections"
    team_credentials = "team_credentials"
    traction = "traction"
    risks = "risks"
    key_metrics = "key_metrics"
    industry_trends = "industry_trends"


class InsightSet(CamelModel):
    market_size: list[str] = Field(default_factory=list)
    competitive_advantage: list[str] = Field(default_factory=list)
    problem_statement: list[str] = Field(default_factory=list)
    solution: list[str] = Field(default_factory=list)
    business_model: list[str] = Field(default_factory=list)
    target_market: list[str] = Field(default_factory=list)
    financial_projections: list[str] = Field(default_factory=list)
    team_credentials: list[str] = Field(default_factory=list)
    traction: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    key_metrics: list[str] = Field(default_factory=list)
    industry_trends: list[str] = Field(default_factory=list)

    def get(self, category: InsightCategory) -> list[str]:
        return getattr(self, category.value)

    def as_mapping(self) -> dict[InsightCategory, list[str]]:
        return {category: self.get(category) for category in InsightCategory}

    def summary(self) -> dict[str, int]:
        return {category.value: len(self.get(category)) for category in InsightCategory}

    def is_empty(self) -> bool:
        return not any(self.get(category) for category in InsightCategory)
