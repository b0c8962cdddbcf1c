import pytest

from cmdgen.engine.guards import has_runtime_input_prompt, normalize_question_text
from cmdgen.engine.state import GENERIC_FAILURE, RuntimeState
from cmdgen.errors import AttemptsExhaustedError, DuplicateQuestionError, QuestionBudgetExceededError


def test_normalize_question_text() -> None:
    assert normalize_question_text("  Use recursive  search? ") == "use recursive search?"
    once = normalize_question_text("\tDelete  FILES?\n")
    assert normalize_question_text(once) == once


def test_detects_runtime_input_prompt() -> None:
    assert has_runtime_input_prompt("read -r x")
    assert has_runtime_input_prompt("READ\tx")
    assert has_runtime_input_prompt("vared target")
    assert not has_runtime_input_prompt("echo hello")
    assert not has_runtime_input_prompt("cat readme.md")


def test_read_prompt_must_be_a_command_word() -> None:
    assert has_runtime_input_prompt("while IFS= read -r line; do echo $line; done")
    assert has_runtime_input_prompt("ls && (read x)")
    assert has_runtime_input_prompt("builtin read -r answer")
    assert not has_runtime_input_prompt('grep "thread " app.log')
    assert not has_runtime_input_prompt("echo read me")


def test_attempt_budget_has_floor_of_one() -> None:
    state = RuntimeState(max_attempts=0)
    assert state.max_attempts == 1
    assert state.can_attempt_command()
    state.mark_command_attempt()
    assert not state.can_attempt_command()


def test_question_ceiling() -> None:
    state = RuntimeState(max_attempts=3, max_questions=2)
    state.ensure_question_capacity()
    state.ensure_question_capacity()
    with pytest.raises(QuestionBudgetExceededError, match="too many clarification questions from model"):
        state.ensure_question_capacity()


def test_duplicate_question_names_original_text() -> None:
    state = RuntimeState(max_attempts=3)
    state.register_question("use recursive search?", "Use recursive search?")
    with pytest.raises(DuplicateQuestionError, match="duplicate clarification question: Use  RECURSIVE search"):
        state.register_question("use recursive search?", "Use  RECURSIVE search?")


def test_feedback_and_finish_error() -> None:
    state = RuntimeState(max_attempts=1)
    assert str(state.finish_error()) == GENERIC_FAILURE

    state.set_feedback_reason("unresolved commands: foo")
    state.clear_feedback()
    assert state.feedback is None
    error = state.finish_error()
    assert isinstance(error, AttemptsExhaustedError)
    assert str(error) == "unresolved commands: foo"


def test_input_prompt_rejections_are_capped() -> None:
    state = RuntimeState(max_attempts=1, max_input_prompt_rejections=1)
    state.mark_input_prompt_rejection("no read")
    assert state.feedback == "no read"
    assert state.command_attempt_count == 0
    with pytest.raises(AttemptsExhaustedError, match="no read"):
        state.mark_input_prompt_rejection("no read")


def test_clarifications_are_recorded() -> None:
    state = RuntimeState(max_attempts=1)
    state.push_clarification("Recursive?", "yes")
    assert [(item.question, item.answer) for item in state.clarifications] == [("Recursive?", "yes")]
