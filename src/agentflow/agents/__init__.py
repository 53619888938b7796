"""Built-in agents."""

from agentflow.agents.api_call import ApiCallAgent
from agentflow.agents.data_processor import DataProcessorAgent
from agentflow.agents.report import ReportGeneratorAgent
from agentflow.agents.summary import ClaudeSummarizer
from agentflow.agents.validation import ValidationAgent

__all__ = [
    "ApiCallAgent",
    "ClaudeSummarizer",
    "DataProcessorAgent",
    "ReportGeneratorAgent",
    "ValidationAgent",
]
