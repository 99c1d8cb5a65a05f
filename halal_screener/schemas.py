"""
Pydantic response schemas for the screening endpoints.
"""

from pydantic import BaseModel, Field


class CompanyInfo(BaseModel):
    name: str
    ticker: str
    sector: str
    industry: str
    is_halal_business: bool


class PriceData(BaseModel):
    current_price: float | None = None
    pe_ratio: float | None = None
    dividend_yield: float | None = None


class FinancialRatios(BaseModel):
    debt_ratio: float = Field(..., description="Total debt as % of market cap.")
    cash_ratio: float = Field(..., description="Cash and equivalents as % of market cap.")
    non_halal_revenue: float = Field(..., description="Non-halal revenue as % of total revenue.")


class Thresholds(BaseModel):
    debt: float
    cash: float
    revenue: float


class ComplianceDetails(BaseModel):
    debt_compliant: bool
    cash_compliant: bool
    revenue_compliant: bool
    business_halal: bool


class ShariahVerdict(BaseModel):
    status: str  # "halal" | "haram" | "mixed"
    text: str
    thresholds: Thresholds
    compliance_details: ComplianceDetails


class BoycottDetails(BaseModel):
    is_boycotted: bool
    reasons: list[str]
    sources: list[str]


class BoycottVerdict(BaseModel):
    status: str  # "boycott" | "clear"
    text: str
    details: BoycottDetails | None = None


class Recommendation(BaseModel):
    ticker: str
    name: str
    reason: str


class ScreeningResponse(BaseModel):
    company: CompanyInfo
    price_data: PriceData
    financial_ratios: FinancialRatios
    shariah_verdict: ShariahVerdict
    boycott_verdict: BoycottVerdict
    purification_percentage: float
    screening_mode: str
    screening_date: str
    data_source: str
    recommendations: list[Recommendation]


class StandardVerdict(BaseModel):
    standard: str
    name: str
    financial_ratios: FinancialRatios
    shariah_verdict: ShariahVerdict
    purification_percentage: float


class MultiStandardResponse(BaseModel):
    company: CompanyInfo
    boycott_verdict: BoycottVerdict
    verdicts: list[StandardVerdict]
    screening_date: str
    data_source: str


class StandardInfo(BaseModel):
    key: str
    name: str
    description: str
    thresholds: Thresholds


class StandardsResponse(BaseModel):
    default: str
    standards: list[StandardInfo]


class RecommendationsResponse(BaseModel):
    recommendations: list[Recommendation]
    mode: str
    description: str
