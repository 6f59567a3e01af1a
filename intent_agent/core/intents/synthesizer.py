"""Turns an execution result into a user-facing markdown reply."""

import json
import logging

from .models import ExecutionResult
from .oracle import Oracle


logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "I processed your request, but I couldn't generate a detailed explanation right now. "
    "Please check the result details below."
)


def build_synthesis_context(result: ExecutionResult) -> str:
    """Deterministic context block for one execution result."""
    context = (
        "User intent result:\n"
        f"Success: {str(result.success).lower()}\n"
        f"Message: {result.message}\n"
    )

    if result.data is not None:
        context += f"Data: {json.dumps(result.data, indent=2, sort_keys=True, default=str)}\n"

    tx = result.transaction_descriptor
    if tx is not None:
        context += (
            "\nTransaction prepared:\n"
            f"Description: {tx.description}\n"
            f"To: {tx.to}\n"
            f"Chain ID: {tx.chain_id}\n"
            f"Value: {tx.value} wei\n"
            "\nPlease provide a helpful response to the user explaining:\n"
            "1. What action will be performed\n"
            "2. That they need to sign the transaction in their wallet\n"
            "3. Any important details about the transaction\n"
            "4. Be friendly and encouraging!\n"
        )
    else:
        context += (
            "\nNo transaction required for this action. Please provide a helpful "
            "response to the user about the information they requested.\n"
        )

    if not result.success:
        context += (
            "\nThe operation failed. Please provide a helpful error message and "
            "suggest what the user can do next.\n"
        )
    return context


def build_synthesis_prompt(result: ExecutionResult, assistant_name: str = "Teemah AI") -> str:
    return (
        f"You are {assistant_name}, a helpful Web3 assistant. Generate a friendly, "
        f"informative response based on this context:\n\n{build_synthesis_context(result)}\n\n"
        "Response should be in markdown format, be concise, and helpful."
    )


class ResponseSynthesizer:
    """Exactly one oracle call per result; failures propagate to the caller."""

    def __init__(self, oracle: Oracle):
        self.oracle = oracle

    async def synthesize(self, result: ExecutionResult) -> str:
        prompt = build_synthesis_prompt(result, self.oracle.assistant_name)
        return await self.oracle.ask(prompt)
