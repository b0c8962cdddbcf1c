"""Prompt rendering for command generation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .llm.types import COMMAND_TOOL_NAME, QUESTION_TOOL_NAME, TEXT_QUESTION_TOOL_NAME

SYSTEM_PROMPT_TEMPLATE = """You translate a natural language request into exactly one shell command.

# Tools

- `{command_tool}`: deliver the final command with a short reason.
- `{question_tool}`: ask one yes/no question when a decision is genuinely ambiguous.
- `{text_question_tool}`: ask for one concrete value (a path, a name, a number) that you cannot infer.

Always answer through exactly one tool call.

# Rules

1. Produce one command line for the user's shell. Chain steps with `&&`, `||`, `;` or pipes when needed.
2. Never leave placeholders such as `<file>`, `your_file`, `path/to` or `example` in the command.
   Ask a text question instead of guessing a value.
3. Never use runtime input prompts (`read`, `vared`) in the command. Ask with `{text_question_tool}` first.
4. Prefer commands and flags that exist on the user's OS and shell.
5. Use the shell history and previous commands as hints about the user's environment and habits.
6. Do not ask the same question twice. Ask only what changes the command.
7. When feedback from a failed validation is present, fix exactly the reported problems.
{explanation_rule}"""

EXPLANATION_RULE = (
    "8. Fill `explanations` in `{command_tool}` with one item per command, option and argument: "
    '`type` (command, option, argument, operator), `value` (exact text) and `explanation` (short).'
)
NO_EXPLANATION_RULE = "8. Leave `explanations` empty."


@dataclass(frozen=True)
class PromptTurn:
    user_input: str
    command: str


@dataclass(frozen=True)
class PromptClarification:
    question: str
    answer: str


@dataclass(frozen=True)
class PromptInput:
    os: str
    shell: str
    session_uuid: str
    model: str
    user_input: str
    shell_history: list[str] = field(default_factory=list)
    generated_history: list[str] = field(default_factory=list)
    turns: list[PromptTurn] = field(default_factory=list)
    clarifications: list[PromptClarification] = field(default_factory=list)
    feedback: str | None = None
    explanation_mode: bool = False


@dataclass(frozen=True)
class RenderedPrompt:
    system: str
    user: str


def render_prompt(prompt: PromptInput) -> RenderedPrompt:
    rule = EXPLANATION_RULE if prompt.explanation_mode else NO_EXPLANATION_RULE
    system = SYSTEM_PROMPT_TEMPLATE.format(
        command_tool=COMMAND_TOOL_NAME,
        question_tool=QUESTION_TOOL_NAME,
        text_question_tool=TEXT_QUESTION_TOOL_NAME,
        explanation_rule=rule.format(command_tool=COMMAND_TOOL_NAME),
    )
    return RenderedPrompt(system=system.strip(), user=_render_user(prompt))


def _render_user(prompt: PromptInput) -> str:
    sections = [
        "\n".join([
            "# Environment",
            f"- os: {prompt.os}",
            f"- shell: {prompt.shell}",
            f"- session: {prompt.session_uuid}",
            f"- model: {prompt.model}",
        ])
    ]
    if prompt.shell_history:
        sections.append(_bullets("# Shell history (newest first)", prompt.shell_history))
    if prompt.generated_history:
        sections.append(_bullets("# Previously generated commands (newest first)", prompt.generated_history))
    if prompt.turns:
        lines = ["# Earlier in this session"]
        for turn in prompt.turns:
            lines.append(f"- request: {turn.user_input}")
            lines.append(f"  command: {turn.command}")
        sections.append("\n".join(lines))
    if prompt.clarifications:
        lines = ["# Clarifications"]
        for item in prompt.clarifications:
            lines.append(f"- Q: {item.question}")
            lines.append(f"  A: {item.answer}")
        sections.append("\n".join(lines))
    if prompt.feedback:
        sections.append(f"# Feedback on the previous attempt\n{prompt.feedback}")
    sections.append(f"# Request\n{prompt.user_input}")
    return "\n\n".join(sections)


def _bullets(title: str, items: list[str]) -> str:
    return "\n".join([title, *(f"- {item}" for item in items)])
