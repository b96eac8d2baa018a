"""
Request and response models for the HTTP API.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.utils.constants import DIRECTOR_PENDING

class SignalResponse(BaseModel):
    id: str
    beacon_event_id: Optional[str]
    source_url: str
    disease: str
    country: str
    location: Optional[str]
    date_reported: date
    cases: Optional[int]
    deaths: Optional[int]
    case_fatality_rate: Optional[Decimal]
    description: Optional[str]
    triage_status: str
    triaged_by: Optional[str]
    triaged_at: Optional[datetime]
    triage_notes: Optional[str]
    rejection_reason: Optional[str]
    priority_score: Optional[Decimal]
    gcc_relevant: Optional[bool]
    current_status: str
    created_at: datetime

    class Config:
        from_attributes = True

class AssessmentResponse(BaseModel):
    id: str
    signal_id: str
    assessment_type: str
    ihr_question_1: Optional[bool]
    ihr_question_2: Optional[bool]
    ihr_question_3: Optional[bool]
    ihr_question_4: Optional[bool]
    ihr_decision: Optional[str]
    rra_overall_risk: Optional[str]
    rra_confidence_level: Optional[str]
    rra_hazard_assessment: Optional[Any]
    rra_exposure_assessment: Optional[Any]
    rra_context_assessment: Optional[Any]
    rra_recommendations: Optional[Any]
    status: str
    assigned_to: str
    reviewed_by: Optional[str]
    outcome_decision: Optional[str]
    outcome_justification: Optional[str]
    created_at: datetime
    started_at: Optional[datetime]
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True

class EscalationResponse(BaseModel):
    id: str
    signal_id: str
    assessment_id: str
    escalation_level: Optional[str]
    priority: str
    escalation_reason: str
    recommended_actions: Optional[Any]
    director_status: str
    director_decision: Optional[str]
    director_notes: Optional[str]
    actions_taken: Optional[Any]
    reviewed_by: Optional[str]
    reviewed_at: Optional[datetime]
    escalated_by: str
    escalated_at: Optional[datetime]
    resolved_at: Optional[datetime]

    class Config:
        from_attributes = True

class SocialSignalResponse(BaseModel):
    id: str
    platform: str
    post_id: str
    author: str
    author_handle: str
    content: str
    language: Optional[str]
    location: Optional[str]
    hashtags: Optional[List[str]]
    urls: Optional[List[str]]
    engagement: Optional[Dict[str, int]]
    detected_keywords: Optional[List[str]]
    relevance_score: Optional[Decimal]
    verification_status: str
    related_signal_id: Optional[str]
    promoted_at: Optional[datetime]
    promoted_by: Optional[str]
    is_dismissed: bool
    posted_at: datetime

    class Config:
        from_attributes = True

class MonitoredAccountResponse(BaseModel):
    account_handle: str
    account_name: str
    account_type: str
    region: Optional[str]
    priority: int
    platform: str

    class Config:
        from_attributes = True

class ListenerKeywordResponse(BaseModel):
    keyword: str
    category: str
    language: Optional[str]
    priority: int

    class Config:
        from_attributes = True

# ========== REQUEST BODIES ==========

class AcceptRequest(BaseModel):
    notes: Optional[str] = None
    assigned_to: Optional[str] = None

class RejectRequest(BaseModel):
    reason: Optional[str] = None

class CreateAssessmentRequest(BaseModel):
    signal_id: str
    assigned_to: Optional[str] = None

class AnswersRequest(BaseModel):
    q1: Optional[bool] = None
    q2: Optional[bool] = None
    q3: Optional[bool] = None
    q4: Optional[bool] = None
    q1_notes: Optional[str] = None
    q2_notes: Optional[str] = None
    q3_notes: Optional[str] = None
    q4_notes: Optional[str] = None
    risk_level: Optional[str] = None
    confidence_level: Optional[str] = None
    hazard: Optional[Any] = None
    exposure: Optional[Any] = None
    context: Optional[Any] = None
    key_uncertainties: Optional[Any] = None
    recommendations: Optional[Any] = None

class EscalateRequest(BaseModel):
    reason: Optional[str] = None
    priority: Optional[str] = None

class CompleteRequest(BaseModel):
    outcome_decision: str
    justification: Optional[str] = None

class ResolveRequest(BaseModel):
    decision: str = Field(DIRECTOR_PENDING, description="Approved, Rejected, or Pending Review to only add notes")
    notes: Optional[str] = None
    actions_taken: Optional[List[Any]] = None

class PromoteRequest(BaseModel):
    disease: Optional[str] = None
    country: Optional[str] = None
