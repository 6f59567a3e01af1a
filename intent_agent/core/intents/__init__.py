"""
Natural-language intent pipeline.

Usage:
    from intent_agent.core.intents import IntentAgent

    agent = IntentAgent.create(name="TeemahAgent", gateway=gateway, provider=provider)
    result = await agent.process("show me the launchpad statistics")
"""

from .agent import IntentAgent
from .classifier import IntentClassifier, decode_intent, extract_json_object
from .executor import IntentExecutor, build_project_parameters
from .ledger import IntentLedger
from .models import (
    ClaimTokens,
    CreateProject,
    ExecutionResult,
    GetProjectInfo,
    GetProjectStatistics,
    GetUserBalance,
    Intent,
    IntentKind,
    IntentResult,
    Invest,
    ListProjects,
    TransactionDescriptor,
    Unknown,
)
from .oracle import Oracle
from .synthesizer import FALLBACK_MESSAGE, ResponseSynthesizer, build_synthesis_prompt

__all__ = [
    "IntentAgent",
    "IntentClassifier",
    "IntentExecutor",
    "IntentLedger",
    "Oracle",
    "ResponseSynthesizer",
    "decode_intent",
    "extract_json_object",
    "build_project_parameters",
    "build_synthesis_prompt",
    "FALLBACK_MESSAGE",
    "ClaimTokens",
    "CreateProject",
    "ExecutionResult",
    "GetProjectInfo",
    "GetProjectStatistics",
    "GetUserBalance",
    "Intent",
    "IntentKind",
    "IntentResult",
    "Invest",
    "ListProjects",
    "TransactionDescriptor",
    "Unknown",
]
