import pytest

from env_deploy.exceptions import ConfigNotFound
from env_deploy.sources import Layer, load_environment


def _write(path, content):
    path.write_text(content, encoding="utf-8")
    return path


def test_precedence(temp_dir) -> None:
    default = _write(temp_dir / "default.env", "A=1\n")
    target = _write(temp_dir / "staging.env", "A=2\nB=3\n")
    functions = _write(temp_dir / "functions.env", "C=4\n")

    environment = load_environment(target, default, functions, base={"A": "0", "HOME": "/root"})

    assert dict(environment) == {"A": "2", "B": "3", "C": "4", "HOME": "/root"}
    assert environment.origin("A") == Layer.ENV_FILE
    assert environment.origin("C") == Layer.FUNCTIONS
    assert environment.origin("HOME") == Layer.PROCESS


def test_functions_win(temp_dir) -> None:
    target = _write(temp_dir / "staging.env", "A=2\n")
    functions = _write(temp_dir / "functions.env", "A=${A}-suffix\n")

    environment = load_environment(target, temp_dir / "default.env", functions, base={})

    assert dict(environment) == {"A": "2-suffix"}


def test_optional_files_missing(temp_dir) -> None:
    environment = load_environment("", temp_dir / "default.env", temp_dir / "functions.env", base={"A": "1"})
    assert dict(environment) == {"A": "1"}


def test_missing_env_file(temp_dir) -> None:
    with pytest.raises(ConfigNotFound):
        load_environment(temp_dir / "missing.env", temp_dir / "default.env", temp_dir / "functions.env")


def test_process_environment(temp_dir, monkeypatch) -> None:
    monkeypatch.setenv("ENV_DEPLOY_TEST", "yes")
    environment = load_environment(None, temp_dir / "default.env", temp_dir / "functions.env")
    assert environment["ENV_DEPLOY_TEST"] == "yes"
