import io

import pytest

from cmdgen.errors import ClarificationAbortedError
from cmdgen.llm.types import ClarificationKind
from cmdgen.prompter import StdioPrompter, format_question, normalize_yes_no_answer


def test_normalizes_yes_no_answer() -> None:
    assert normalize_yes_no_answer("Y") == "yes"
    assert normalize_yes_no_answer(" true ") == "yes"
    assert normalize_yes_no_answer("1") == "yes"
    assert normalize_yes_no_answer(" no ") == "no"
    assert normalize_yes_no_answer("0") == "no"
    assert normalize_yes_no_answer("maybe") is None


def test_question_format() -> None:
    assert format_question(ClarificationKind.YES_NO, " Recursive? ") == "? Recursive? [y/n]: "
    assert format_question(ClarificationKind.TEXT, "Which dir?") == "? Which dir?: "


def test_stdio_yes_no_reprompts_until_valid() -> None:
    stdout, stderr = io.StringIO(), io.StringIO()
    prompter = StdioPrompter(stdin=io.StringIO("maybe\ny\n"), stdout=stdout, stderr=stderr)

    assert prompter.ask(ClarificationKind.YES_NO, "Recursive?") == "yes"
    assert stdout.getvalue().count("? Recursive? [y/n]: ") == 2
    assert "please answer with y or n" in stderr.getvalue()


def test_stdio_text_requires_value() -> None:
    stderr = io.StringIO()
    prompter = StdioPrompter(stdin=io.StringIO("\n  ./src  \n"), stdout=io.StringIO(), stderr=stderr)

    assert prompter.ask(ClarificationKind.TEXT, "Which dir?") == "./src"
    assert "please input a non-empty value" in stderr.getvalue()


def test_stdio_eof_aborts() -> None:
    prompter = StdioPrompter(stdin=io.StringIO(""), stdout=io.StringIO(), stderr=io.StringIO())
    with pytest.raises(ClarificationAbortedError, match="clarification aborted"):
        prompter.ask(ClarificationKind.TEXT, "Which dir?")
