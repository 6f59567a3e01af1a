"""
Intent classification.

The oracle is asked for a single JSON object. Its reply is untrusted text:
the outermost ``{...}`` span is extracted, parsed, and every field is then
decoded individually with its own default.
"""

import json
import logging
from typing import Any, Dict, Mapping

from ..errors import MalformedJsonError
from .models import (
    ClaimTokens,
    CreateProject,
    GetProjectInfo,
    GetProjectStatistics,
    GetUserBalance,
    Intent,
    IntentKind,
    Invest,
    ListProjects,
    Unknown,
)
from .oracle import Oracle


logger = logging.getLogger(__name__)

CLASSIFICATION_PROMPT = """Analyze the user's intent from their message. Classify it into one of these categories:
1. CreateProject - When user wants to create a new token/project
2. Invest - When user wants to invest in a project
3. ClaimTokens - When user wants to claim tokens from a project
4. GetProjectInfo - When user wants information about a project
5. ListProjects - When user wants to see available projects
6. GetUserBalance - When user wants to check their wallet balance
7. GetProjectStatistics - When user wants statistics about projects
8. Unknown - If none of the above match

User message: "{user_input}"

Respond with ONLY the category name and any extracted parameters in JSON format.
Example responses:
- {{"intent": "CreateProject", "name": "MyToken", "symbol": "MTK"}}
- {{"intent": "Invest", "project_id": "0x123...", "amount": 0.5}}
- {{"intent": "GetUserBalance"}}

If parameters can't be extracted, use null or best guess.
"""


def build_classification_prompt(user_input: str) -> str:
    return CLASSIFICATION_PROMPT.format(user_input=user_input)


def extract_json_object(reply: str) -> Dict[str, Any]:
    """Parse the span from the first ``{`` to the last ``}`` of ``reply``."""
    start = reply.find("{")
    end = reply.rfind("}")
    if start == -1 or end < start:
        raise MalformedJsonError("No JSON object found in oracle reply", raw_reply=reply)

    try:
        parsed = json.loads(reply[start:end + 1])
    except json.JSONDecodeError as e:
        raise MalformedJsonError(f"Failed to parse LLM response as JSON: {e}", raw_reply=reply) from e

    if not isinstance(parsed, dict):
        raise MalformedJsonError("Oracle reply is not a JSON object", raw_reply=reply)
    return parsed


def _text(fields: Mapping[str, Any], key: str) -> str:
    value = fields.get(key)
    return value if isinstance(value, str) else ""


def _number(fields: Mapping[str, Any], key: str) -> float:
    value = fields.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def decode_intent(fields: Mapping[str, Any]) -> Intent:
    """Map a parsed reply onto an Intent; unrecognized kinds become Unknown."""
    raw_kind = fields.get("intent")
    try:
        kind = IntentKind(raw_kind) if isinstance(raw_kind, str) else IntentKind.UNKNOWN
    except ValueError:
        kind = IntentKind.UNKNOWN

    if kind is IntentKind.CREATE_PROJECT:
        return CreateProject(name=_text(fields, "name"), symbol=_text(fields, "symbol"))
    if kind is IntentKind.INVEST:
        return Invest(project_id=_text(fields, "project_id"), amount=_number(fields, "amount"))
    if kind is IntentKind.CLAIM_TOKENS:
        return ClaimTokens(project_id=_text(fields, "project_id"))
    if kind is IntentKind.GET_PROJECT_INFO:
        return GetProjectInfo(project_id=_text(fields, "project_id"))
    if kind is IntentKind.LIST_PROJECTS:
        return ListProjects()
    if kind is IntentKind.GET_USER_BALANCE:
        return GetUserBalance()
    if kind is IntentKind.GET_PROJECT_STATISTICS:
        return GetProjectStatistics()
    return Unknown()


class IntentClassifier:
    def __init__(self, oracle: Oracle):
        self.oracle = oracle

    async def classify(self, user_input: str) -> Intent:
        reply = await self.oracle.ask(build_classification_prompt(user_input))
        intent = decode_intent(extract_json_object(reply))
        logger.info(f"Classified intent: {intent.kind.value}")
        return intent
