"""Request engine."""

from .committer import CommandCommitter, SessionCommandCommitter
from .gateway import GenerationGateway
from .guards import has_runtime_input_prompt, normalize_question_text
from .orchestrator import RequestEngine
from .prompt_context import PromptStaticContext
from .state import RuntimeState
from .types import EnginePhase, HandleResult

__all__ = [
    "CommandCommitter",
    "EnginePhase",
    "GenerationGateway",
    "HandleResult",
    "PromptStaticContext",
    "RequestEngine",
    "RuntimeState",
    "SessionCommandCommitter",
    "has_runtime_input_prompt",
    "normalize_question_text",
]
