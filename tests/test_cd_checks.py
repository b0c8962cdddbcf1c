from pathlib import Path

from cmdgen.validation.cd_checks import find_invalid_cd_directories


def test_missing_relative_directory_is_reported(tmp_path: Path) -> None:
    invalid = find_invalid_cd_directories("cd ./this_should_not_exist_12345 && pwd", cwd=tmp_path)
    assert invalid == ["./this_should_not_exist_12345"]


def test_existing_directory_passes(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    assert find_invalid_cd_directories("cd src && ls", cwd=tmp_path) == []
    assert find_invalid_cd_directories(f"cd {tmp_path}", cwd=Path("/")) == []


def test_regular_file_is_not_a_directory(tmp_path: Path) -> None:
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    assert find_invalid_cd_directories("cd notes.txt", cwd=tmp_path) == ["notes.txt"]


def test_tilde_expands_against_home(tmp_path: Path) -> None:
    (tmp_path / "projects").mkdir()
    assert find_invalid_cd_directories("cd ~", cwd=tmp_path, home=tmp_path) == []
    assert find_invalid_cd_directories("cd ~/projects", cwd=tmp_path, home=tmp_path) == []
    assert find_invalid_cd_directories("cd ~/missing", cwd=tmp_path, home=tmp_path) == ["~/missing"]


def test_dynamic_and_special_arguments_are_skipped(tmp_path: Path) -> None:
    for command in ("cd $HOME/x", "cd build*", "cd -", "cd", "cd {a,b}", "cd `pwd`"):
        assert find_invalid_cd_directories(command, cwd=tmp_path) == [], command


def test_double_dash_separator(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    assert find_invalid_cd_directories("cd -- docs", cwd=tmp_path) == []
    assert find_invalid_cd_directories("cd -- nope", cwd=tmp_path) == ["nope"]


def test_every_cd_segment_is_checked_and_results_are_distinct(tmp_path: Path) -> None:
    command = "cd nope; builtin cd nope; cd other && pwd"
    assert find_invalid_cd_directories(command, cwd=tmp_path) == ["nope", "other"]


def test_quoted_argument_is_dequoted(tmp_path: Path) -> None:
    (tmp_path / "my dir").mkdir()
    assert find_invalid_cd_directories("cd 'my dir'", cwd=tmp_path) == []


def test_option_flags_are_not_targets(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    assert find_invalid_cd_directories("cd -P docs && pwd", cwd=tmp_path) == []
    assert find_invalid_cd_directories("cd -L -- docs", cwd=tmp_path) == []
    assert find_invalid_cd_directories("cd -P missing", cwd=tmp_path) == ["missing"]
    assert find_invalid_cd_directories("cd -L -P", cwd=tmp_path) == []


def test_quoted_argument_is_reported_as_written(tmp_path: Path) -> None:
    assert find_invalid_cd_directories("cd 'no dir' && pwd", cwd=tmp_path) == ["'no dir'"]
