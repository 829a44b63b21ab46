"""
Agents package for the Gemini-backed AI capabilities.

The screening agent is the scoring engine used during intake; the interview
agent transcribes recorded feedback and drafts the reply email. Each agent
keeps its prompts next to it in prompts.py.
"""

from agents.base import BaseAgent
from agents.interview.agent import InterviewAgent
from agents.screening.agent import ScreeningAgent
from agents.screening.schemas import MatchAssessment, Recommendation

__all__ = [
    "BaseAgent",
    "InterviewAgent",
    "MatchAssessment",
    "Recommendation",
    "ScreeningAgent",
]
