"""
Batch Runner Module

Rescoring of stored assessments under the active configuration, the service
facade shared by the CLI and HTTP layers, and the scoring admin router.
"""

from .processor import RescoreProcessor, RescoreResult, RescoreSummary
from .service import ReadinessService, get_service

__all__ = [
    "ReadinessService",
    "RescoreProcessor",
    "RescoreResult",
    "RescoreSummary",
    "get_service",
]
