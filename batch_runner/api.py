"""
FastAPI endpoints for readiness scoring

Scoring, configuration version management and rescoring. Mounted under
``/api/v1/scoring`` by ``main.py``.
"""

from functools import wraps
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import ReadinessError
from core.logging import get_logger
from core.metrics import metrics

from .schemas import (
    ConfigurationResponseSchema,
    CreateVersionSchema,
    HistoryResponseSchema,
    RescoreResultSchema,
    RescoreSummarySchema,
    RevertVersionSchema,
    ScoreRequestSchema,
    ScoreResponseSchema,
)
from .service import ReadinessService, get_service

logger = get_logger("scoring_api", domain="batch_runner")

router = APIRouter()


def handle_api_errors(func):
    """Decorator translating domain errors into HTTP responses"""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except ReadinessError as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(f"{e.error_code} in {func.__name__}: {e.message}")
            metrics.track_error(e.error_code, "api")
            raise HTTPException(status_code=e.status_code, detail=e.to_dict())
        except SQLAlchemyError as e:
            logger.error(f"Database error in {func.__name__}: {str(e)}")
            metrics.track_error("SQLAlchemyError", "api")
            raise HTTPException(status_code=503, detail="Database operation failed")
        except Exception as e:
            logger.exception(f"Unexpected error in {func.__name__}: {str(e)}")
            metrics.track_error(e.__class__.__name__, "api")
            raise HTTPException(status_code=500, detail="Internal server error")

    return wrapper


def _configuration_response(configuration) -> ConfigurationResponseSchema:
    return ConfigurationResponseSchema(**configuration.to_dict())


@router.post("/score", response_model=ScoreResponseSchema)
@handle_api_errors
async def score_answers(request: ScoreRequestSchema, service: ReadinessService = Depends(get_service)):
    """Score an answer set with the active configuration"""
    assessment_id = None
    if request.persist:
        assessment_id, result = service.submit_assessment(
            request.answers, user_id=request.user_id, normalize=request.normalize
        )
    else:
        result = service.compute_score(request.answers, normalize=request.normalize)

    data = result.to_dict()
    return ScoreResponseSchema(
        assessment_id=assessment_id,
        **{
            category: {"score": data[category], "explanation": data[f"{category}_explanation"]}
            for category in ("business_idea", "financials", "team", "traction")
        },
        total_score=result.total_score,
        readiness=result.readiness,
        sector=result.sector,
        stage=result.stage,
        weights=data["weights"],
        config_version=result.config_version,
    )


@router.get("/config/active", response_model=ConfigurationResponseSchema)
@handle_api_errors
async def get_active_configuration(service: ReadinessService = Depends(get_service)):
    """Configuration new scores are computed with"""
    return _configuration_response(service.get_active_configuration())


@router.post("/config/versions", response_model=ConfigurationResponseSchema, status_code=201)
@handle_api_errors
async def create_scoring_version(request: CreateVersionSchema, service: ReadinessService = Depends(get_service)):
    """Store and activate a new weights configuration"""
    logger.info(f"Creating scoring configuration version: {request.change_reason}")
    created = service.create_scoring_version(request.config_data, request.change_reason, actor=request.created_by)
    return _configuration_response(created)


@router.post("/config/versions/{version}/revert", response_model=ConfigurationResponseSchema, status_code=201)
@handle_api_errors
async def revert_to_version(
    version: int, request: RevertVersionSchema, service: ReadinessService = Depends(get_service)
):
    """Publish an earlier version's weights as a new active version"""
    created = service.revert_to_version(version, request.reason, actor=request.created_by)
    return _configuration_response(created)


@router.get("/config/history", response_model=HistoryResponseSchema)
@handle_api_errors
async def get_scoring_history(
    limit: Optional[int] = Query(None, ge=1, le=500), service: ReadinessService = Depends(get_service)
):
    """All configuration versions, newest first"""
    versions = [_configuration_response(configuration) for configuration in service.get_scoring_history(limit)]
    return HistoryResponseSchema(versions=versions, total=len(versions))


@router.post("/rescore/{assessment_id}", response_model=RescoreResultSchema)
@handle_api_errors
async def rescore_assessment(assessment_id: str, service: ReadinessService = Depends(get_service)):
    """Rescore one stored assessment"""
    result = await run_in_threadpool(service.rescore_one, assessment_id)
    return RescoreResultSchema(**result.to_dict())


@router.post("/rescore", response_model=RescoreSummarySchema)
@handle_api_errors
async def rescore_all(service: ReadinessService = Depends(get_service)):
    """Rescore every stored assessment under the active configuration"""
    summary = await run_in_threadpool(service.run_rescore)
    return RescoreSummarySchema(**summary.to_dict())
