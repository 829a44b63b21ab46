"""Screening agent for scoring a CV against a job description."""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from agents.base import BaseAgent
from agents.common.utils import clip_text, parse_json_response
from agents.screening.prompts import CV_MATCH_PROMPT, SCREENING_SYSTEM_PROMPT
from agents.screening.schemas import MatchAssessment
from core.exceptions import ScoringFailure

logger = logging.getLogger(__name__)


class ScreeningAgent(BaseAgent):
    """Scoring engine: rates how well a candidate's CV fits a job."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        client: Any = None,
    ):
        super().__init__(
            name="screening",
            instructions=SCREENING_SYSTEM_PROMPT,
            model=model,
            api_key=api_key,
            client=client,
            temperature=0.3,
            max_output_tokens=1000,
        )

    async def score(self, job_description: str, candidate_text: str) -> MatchAssessment:
        """Assess candidate text against a job description.

        Args:
            job_description: Posting text
            candidate_text: Extracted CV text; callers skip scoring when empty

        Returns:
            Validated assessment

        Raises:
            ScoringFailure: If the model output is not a valid assessment
        """
        prompt = CV_MATCH_PROMPT.format(
            job_description=clip_text(job_description),
            cv_text=clip_text(candidate_text),
        )
        response = await self.run(prompt, json_response=True)
        return parse_assessment(response)


def parse_assessment(response: str) -> MatchAssessment:
    """Validate raw model output into a MatchAssessment.

    Raises:
        ScoringFailure: On unparseable JSON or values outside the contract
    """
    data = parse_json_response(response)
    if data is None:
        raise ScoringFailure("Model returned malformed JSON")

    try:
        return MatchAssessment(
            score=data.get("match_score", data.get("score")),
            recommendation=data.get("recommendation"),
            strengths=data.get("strengths") or [],
            gaps=data.get("gaps") or [],
            highlights=(data.get("key_highlights", data.get("highlights")) or [])[:5],
        )
    except ValidationError as e:
        logger.debug(f"Rejected assessment payload: {e}")
        raise ScoringFailure(f"Model returned an invalid assessment: {e.error_count()} error(s)") from e
