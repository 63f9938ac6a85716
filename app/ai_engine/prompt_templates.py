"""
app/ai_engine/prompt_templates.py — LangChain prompt template for intent scoring.

One prompt chain:
  LEAD_INTENT — offer + lead profile → JSON with an intent label and reasoning
"""

from langchain_core.prompts import ChatPromptTemplate


# ── Lead Intent ───────────────────────────────────────────────────────────────

LEAD_INTENT_PROMPT = ChatPromptTemplate.from_messages([
    (
        "system",
        (
            "You are an expert B2B sales analyst. You read a product offer and a "
            "prospect's profile and judge how likely the prospect is to buy. "
            "Be realistic and concise."
        ),
    ),
    (
        "human",
        """Classify the buying intent of this prospect for our offer.

OFFER:
Name: {offer_name}
Value propositions:
{value_props}
Ideal use cases:
{ideal_use_cases}

PROSPECT:
Name: {name}
Role: {role}
Company: {company}
Industry: {industry}
Location: {location}
LinkedIn bio: {linkedin_bio}

INSTRUCTIONS:
Consider the prospect's seniority, whether their industry matches the ideal use cases,
and whether the value propositions address problems they are likely to have.

Return ONLY a valid JSON object with exactly these fields:
{{
  "name": "<prospect name>",
  "role": "<prospect role>",
  "company": "<prospect company>",
  "intent": "High" | "Medium" | "Low",
  "score": <integer 0-100>,
  "reasoning": "<1-2 sentence explanation of the intent label>"
}}
""",
    ),
])
