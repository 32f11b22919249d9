"""Dispatch executor.

Validates an action invocation issued by the agent against the action's
declared parameters and runs the registered handler exactly once.

The caller is an LLM tool-call loop, so ``invoke`` never raises for
agent-caused problems. Unknown actions, missing or malformed parameters and
handler failures all come back as a failed ``InvocationResult`` whose text the
agent can read and react to.
"""

import time
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from agentic_ui.core.logging_config import get_logger
from agentic_ui.core.monitoring import log_action_invocation

from .capabilities import CapabilityKind, CapabilityRegistry

logger = get_logger(__name__)


class InvocationResult(BaseModel):
    """Outcome of a single action invocation.

    Attributes:
        action_name: The action the agent asked for
        raw_parameters: Parameters exactly as the agent sent them
        result_text: Text handed back to the agent, also on failure
        succeeded: Whether the handler ran and completed
        stale: The owning component went away while the handler was running
    """

    action_name: str = Field(..., description="Invoked action name")
    raw_parameters: Dict[str, Any] = Field(default_factory=dict, description="Parameters as received")
    result_text: str = Field(default="", description="Result or failure description for the agent")
    succeeded: bool = Field(default=True, description="Whether the invocation succeeded")
    stale: bool = Field(default=False, description="Whether the capability vanished during execution")

    @classmethod
    def success(cls, action_name: str, raw_parameters: Dict[str, Any], result_text: str) -> "InvocationResult":
        return cls(action_name=action_name, raw_parameters=raw_parameters, result_text=result_text, succeeded=True)

    @classmethod
    def failure(cls, action_name: str, raw_parameters: Dict[str, Any], message: str) -> "InvocationResult":
        return cls(action_name=action_name, raw_parameters=raw_parameters, result_text=message, succeeded=False)


def describe_validation_error(action_name: str, exc: ValidationError) -> str:
    """Turn a pydantic validation error into one line the agent can act on."""
    problems: List[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "parameters"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return f"Invalid parameter(s) for {action_name}: " + "; ".join(problems)


class DispatchExecutor:
    """
    Executes agent-issued action invocations against a capability registry.

    Invocation steps:
        1. Look the action up by name.
        2. Reject the call if any required parameter is missing.
        3. Validate and coerce parameter types.
        4. Run the handler once and capture its text or its failure.
    """

    def __init__(self, registry: CapabilityRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    async def invoke(self, action_name: str, raw_parameters: Optional[Mapping[str, Any]] = None) -> InvocationResult:
        """
        Invoke an action by name.

        Args:
            action_name: Name of the registered action.
            raw_parameters: Parameter mapping as issued by the agent.

        Returns:
            InvocationResult: Never raises for unknown actions, validation
            problems or handler errors.
        """
        raw = dict(raw_parameters or {})

        descriptor = self._registry.get_action(action_name)
        if descriptor is None:
            logger.info(f"Agent requested unknown action: {action_name}")
            return InvocationResult.failure(action_name, raw, f"Unknown action: {action_name}")

        missing = [name for name in descriptor.required_parameters() if raw.get(name) is None]
        if missing:
            logger.info(f"Action {action_name} called without required parameter(s): {missing}")
            return InvocationResult.failure(
                action_name,
                raw,
                f"Missing required parameter(s) for {action_name}: {', '.join(missing)}",
            )

        try:
            validated = descriptor.input_model().model_validate(raw)
        except ValidationError as exc:
            message = describe_validation_error(action_name, exc)
            logger.info(message)
            return InvocationResult.failure(action_name, raw, message)

        parameters = validated.model_dump(by_alias=True, exclude_unset=True)

        started = time.perf_counter()
        try:
            text = await descriptor.invoke(parameters)
        except Exception as exc:
            logger.warning(f"Action {action_name} handler raised: {exc}", exc_info=True)
            result = InvocationResult.failure(
                action_name,
                raw,
                f"Action {action_name} failed: {str(exc) or type(exc).__name__}",
            )
        else:
            result = InvocationResult.success(action_name, raw, text)
        duration_ms = (time.perf_counter() - started) * 1000

        if not self._registry.is_current(CapabilityKind.ACTION, action_name, descriptor):
            logger.debug(f"Action {action_name} finished after its component unmounted or was replaced")
            result = result.model_copy(update={"stale": True})

        log_action_invocation(action_name=action_name, succeeded=result.succeeded, duration_ms=duration_ms)
        return result
