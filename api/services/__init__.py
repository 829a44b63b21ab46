"""
API Services Layer.

Workflow orchestration for API endpoints. Services receive the repository
and external collaborators explicitly; routes obtain them from
api.dependencies.
"""

from api.services.intake import IntakePipeline, build_answers
from api.services.interviews import CandidateReviewService
from api.services.status import StatusWorkflow, parse_status

__all__ = [
    "CandidateReviewService",
    "IntakePipeline",
    "StatusWorkflow",
    "build_answers",
    "parse_status",
]
