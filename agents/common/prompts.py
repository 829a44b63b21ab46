"""Shared prompt templates for agents."""

# System prompts
PROFESSIONAL_TONE = """You are a professional, courteous, and helpful assistant.
Always maintain a professional tone and provide accurate, well-structured responses."""

ANALYTICAL_TONE = """You are an analytical expert who provides detailed, data-driven insights.
Focus on objectivity, fairness, and evidence-based reasoning."""

JSON_OUTPUT = """Your response must be valid JSON that can be parsed directly.
Do not include any markdown formatting or code blocks.
Ensure all strings are properly escaped."""

# Scoring guidelines
SCORING_GUIDELINES = """Scoring scale (0-100):
- 75-100: Strong Match, meets nearly every requirement
- 50-74: Moderate Match, has potential but gaps exist
- Below 50: Weak Match, significant gaps

Provide specific reasoning for your score."""
