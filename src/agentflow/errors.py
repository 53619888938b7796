"""Error kinds raised by the engine, the agents and the HTTP helper."""

from typing import Any


class AgentFlowError(Exception):
    """Base class for all agentflow errors."""


class ConfigurationError(AgentFlowError):
    """Malformed graph or unit configuration. Raised before a run starts."""


class UnitFailure(AgentFlowError):
    """Raised by an agent's ``attempt`` to fail with a clean message.

    The runner converts it (like any other exception) into a failure result.
    """


class TransportFailure(UnitFailure):
    """A networked agent exhausted its retry budget."""


class ExecutionError(AgentFlowError):
    """The run as a whole could not proceed."""


class StallError(ExecutionError):
    """No unexecuted node became ready, yet some remain."""

    def __init__(self, pending: list[str], report: Any = None) -> None:
        super().__init__(f"Workflow stalled with unexecuted nodes: {pending}")
        self.pending = pending
        self.report = report
