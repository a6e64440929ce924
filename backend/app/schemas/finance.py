"""
Finance Schemas: maintenance charges and assessments.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional
from backend.app.models.enums import ChargeStatus


class MaintenanceChargeCreate(BaseModel):
    """Schema for entering a single charge by hand."""
    unit_id: str
    period_month: int = Field(..., ge=1, le=12)
    period_year: int = Field(..., ge=1900, le=9999)
    amount: float = Field(..., ge=0)
    status: ChargeStatus = ChargeStatus.PENDING
    due_date: Optional[date] = Field(None, description="Defaults to the first of the period month")


class ChargeUpdate(BaseModel):
    """Status change for a maintenance or assessment charge."""
    status: ChargeStatus
    paid_date: Optional[date] = None


class GenerateChargesRequest(BaseModel):
    """Billing period for recurring charge generation."""
    period_month: int = Field(..., ge=1, le=12)
    period_year: int = Field(..., ge=1900, le=9999)


class MaintenanceChargeResponse(BaseModel):
    id: str
    unit_id: str
    period_month: int
    period_year: int
    amount: float
    status: str
    due_date: date
    paid_date: Optional[date]
    created_at: datetime

    class Config:
        from_attributes = True


class GenerateChargesResponse(BaseModel):
    """
    Result of recurring generation.

    ``skipped`` counts rated units that already held a charge for the period.
    """
    period_month: int
    period_year: int
    generated: int
    skipped: int
    charges: List[MaintenanceChargeResponse]


class AssessmentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    total_amount: float = Field(..., gt=0)
    per_share_amount: Optional[float] = Field(None, ge=0)
    effective_date: Optional[date] = None


class AssessmentResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    total_amount: float
    per_share_amount: Optional[float]
    effective_date: Optional[date]
    created_at: datetime

    class Config:
        from_attributes = True


class AssessmentChargeResponse(BaseModel):
    id: str
    assessment_id: str
    unit_id: str
    amount: float
    status: str
    paid_date: Optional[date]
    created_at: datetime

    class Config:
        from_attributes = True


class GenerateAssessmentChargesResponse(BaseModel):
    """Result of proportional assessment distribution."""
    assessment_id: str
    generated: int
    skipped: int
    charges: List[AssessmentChargeResponse]
