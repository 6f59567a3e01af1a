"""
Intent agent: Classifier -> Executor -> Synthesizer for one request.

Every failure inside the pipeline is converted into a failed IntentResult;
``process`` never raises for pipeline errors.
"""

import asyncio
import logging
import uuid
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional

from ..chain import ChainGateway
from ..errors import AgentError
from ..wallet import WalletSessionManager
from ...providers.llm import LLMProvider
from .classifier import IntentClassifier
from .executor import DEFAULT_CHAIN_ID, IntentExecutor
from .ledger import IntentLedger
from .models import ExecutionResult, IntentKind, IntentResult
from .oracle import Oracle
from .synthesizer import FALLBACK_MESSAGE, ResponseSynthesizer


logger = logging.getLogger(__name__)


def failure_ai_message(error: Exception) -> str:
    return f"Sorry! There was an error processing your request: {error}"


class IntentAgent:
    """Orchestrates one natural-language request end to end."""

    def __init__(
        self,
        name: str,
        gateway: ChainGateway,
        classifier: IntentClassifier,
        executor: IntentExecutor,
        synthesizer: ResponseSynthesizer,
        ledger: Optional[IntentLedger] = None,
    ):
        self.name = name
        self.gateway = gateway
        self.classifier = classifier
        self.executor = executor
        self.synthesizer = synthesizer
        self.ledger = ledger or IntentLedger()
        self._pending: Dict[str, "asyncio.Future[IntentResult]"] = {}
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @classmethod
    def create(
        cls,
        *,
        name: str,
        gateway: ChainGateway,
        provider: LLMProvider,
        wallet_manager: Optional[WalletSessionManager] = None,
        assistant_name: str = "Teemah AI",
        fallback_chain_id: int = DEFAULT_CHAIN_ID,
        ledger_size: int = 500,
    ) -> "IntentAgent":
        oracle = Oracle(provider, assistant_name=assistant_name)
        return cls(
            name=name,
            gateway=gateway,
            classifier=IntentClassifier(oracle),
            executor=IntentExecutor(gateway, wallet_manager, fallback_chain_id),
            synthesizer=ResponseSynthesizer(oracle),
            ledger=IntentLedger(ledger_size),
        )

    @property
    def read_only(self) -> bool:
        return self.gateway.is_read_only

    async def process(self, user_input: str, idempotency_key: Optional[str] = None) -> IntentResult:
        """
        Resolve one request.

        With an ``idempotency_key``, the first result recorded under that key
        is returned for every resubmission, including ones that arrive while
        the first is still running.
        """
        with self._track():
            return await self._process(user_input, idempotency_key)

    async def _process(self, user_input: str, idempotency_key: Optional[str]) -> IntentResult:
        if not idempotency_key:
            result = await self._run(user_input)
            self.ledger.record(result)
            return result

        existing = self.ledger.get_by_key(idempotency_key)
        if existing is not None:
            logger.info(f"Idempotent replay of intent {existing.id}")
            return existing

        pending = self._pending.get(idempotency_key)
        if pending is not None:
            return await asyncio.shield(pending)

        future: "asyncio.Future[IntentResult]" = asyncio.get_running_loop().create_future()
        self._pending[idempotency_key] = future
        try:
            result = await self._run(user_input)
            self.ledger.record(result, idempotency_key=idempotency_key)
            future.set_result(result)
            return result
        finally:
            self._pending.pop(idempotency_key, None)
            if not future.done():
                future.cancel()

    async def process_signed(
        self,
        user_input: str,
        address: str,
        chain_id: int,
        signature: str,
        idempotency_key: Optional[str] = None,
    ) -> IntentResult:
        """
        Same as ``process``, with the caller's wallet context attached.

        The signature is recorded but not verified.
        """
        result = await self.process(user_input, idempotency_key=idempotency_key)
        data: Dict[str, Any] = dict(result.data or {})
        data.update({
            "wallet_address": address,
            "chain_id": chain_id,
            "signed": True,
            "signature_verified": False,
        })
        return replace(result, data=data)

    def get_intent(self, intent_id: str) -> Optional[IntentResult]:
        return self.ledger.get(intent_id)

    def recent_intents(self, limit: int = 20) -> List[IntentResult]:
        return self.ledger.recent(limit)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @contextmanager
    def _track(self) -> Iterator[None]:
        self._in_flight += 1
        self._idle.clear()
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    async def close(self) -> None:
        """Wait for in-flight requests to finish, then release the oracle client."""
        if self._in_flight:
            logger.info(f"Waiting for {self._in_flight} in-flight intents before closing {self.name}")
        await self._idle.wait()
        await self.synthesizer.oracle.close()

    async def _run(self, user_input: str) -> IntentResult:
        intent_id = str(uuid.uuid4())
        kind = IntentKind.UNKNOWN
        logger.info(f"Processing intent {intent_id}")

        try:
            intent = await self.classifier.classify(user_input)
            kind = intent.kind
            execution = await self.executor.execute(intent, user_input)
        except AgentError as e:
            logger.warning(f"Intent {intent_id} failed: {e}")
            return self._failed(intent_id, kind, e)
        except Exception as e:
            logger.exception(f"Unexpected error processing intent {intent_id}")
            return self._failed(intent_id, kind, e)

        ai_message = await self._synthesize(intent_id, execution)
        return IntentResult(
            id=intent_id,
            success=execution.success,
            message=execution.message,
            ai_message=ai_message,
            intent=kind,
            transaction_descriptor=execution.transaction_descriptor,
            transaction_hash=execution.transaction_hash,
            data=execution.data,
        )

    async def _synthesize(self, intent_id: str, execution: ExecutionResult) -> str:
        try:
            return await self.synthesizer.synthesize(execution)
        except Exception as e:
            logger.warning(f"Response synthesis failed for {intent_id}, using fallback: {e}")
            return FALLBACK_MESSAGE

    @staticmethod
    def _failed(intent_id: str, kind: IntentKind, error: Exception) -> IntentResult:
        return IntentResult(
            id=intent_id,
            success=False,
            message=f"Intent processing failed: {error}",
            ai_message=failure_ai_message(error),
            intent=kind,
        )
