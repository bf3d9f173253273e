"""
Pydantic schemas for the scoring admin API
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScoreRequestSchema(BaseModel):
    """Answers to score, in snake_case or camelCase"""

    answers: Dict[str, Any] = Field(..., description="Assessment answers")
    normalize: bool = Field(False, description="Fill absent answers with documented defaults")
    persist: bool = Field(False, description="Store the assessment and its score")
    user_id: Optional[str] = Field(None, max_length=36)


class CategoryScoreSchema(BaseModel):
    score: int = Field(..., ge=0, le=100)
    explanation: str


class ScoreResponseSchema(BaseModel):
    assessment_id: Optional[str] = None
    business_idea: CategoryScoreSchema
    financials: CategoryScoreSchema
    team: CategoryScoreSchema
    traction: CategoryScoreSchema
    total_score: int = Field(..., ge=0, le=999)
    readiness: str
    sector: str
    stage: str
    weights: Dict[str, float]
    config_version: int


class CreateVersionSchema(BaseModel):
    """New weights document with the reason for the change"""

    config_data: Dict[str, Any] = Field(..., description="Document with 'weights' and optional 'sectorOverrides'")
    change_reason: str = Field(..., min_length=1, max_length=1000)
    created_by: Optional[str] = Field(None, max_length=100)


class RevertVersionSchema(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)
    created_by: Optional[str] = Field(None, max_length=100)


class ConfigurationResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    version: int
    config_name: str
    config_data: Dict[str, Any]
    change_reason: Optional[str] = None
    created_by: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class HistoryResponseSchema(BaseModel):
    versions: List[ConfigurationResponseSchema]
    total: int


class RescoreResultSchema(BaseModel):
    assessment_id: str
    success: bool
    old_score: Optional[int] = None
    new_score: Optional[int] = None
    score_difference: Optional[int] = None
    old_readiness: Optional[str] = None
    new_readiness: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class RescoreSummarySchema(BaseModel):
    total: int
    successful: int
    failed: int
    changed: int
    cancelled: bool
    duration_seconds: float
    config_version: Optional[int] = None
    started_at: datetime
    results: List[RescoreResultSchema]
