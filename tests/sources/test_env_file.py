import logging

from env_deploy.sources import env_file


def test_assignments() -> None:
    content = """\
# A comment
A=1

export REGION=us-east
B = not an assignment
C=value # with a comment
"""
    assert env_file.parse(content) == {"A": "1", "REGION": "us-east", "C": "value"}


def test_quotes() -> None:
    content = """\
DOUBLE="hello world"
SINGLE='hello world'
INNER="say "hi""
EMPTY=""
COMMENTED="value" # comment
"""
    assert env_file.parse(content) == {
        "DOUBLE": "hello world",
        "SINGLE": "hello world",
        "INNER": 'say "hi"',
        "EMPTY": "",
        "COMMENTED": "value",
    }


def test_multi_line() -> None:
    content = """\
CERT="-----BEGIN-----
abc
-----END-----"
AFTER=1
"""
    assert env_file.parse(content) == {"CERT": "-----BEGIN-----\nabc\n-----END-----", "AFTER": "1"}


def test_references() -> None:
    content = """\
NAME=app
FULL=${NAME}-${STAGE}
QUOTED="${NAME} ${UNKNOWN}!"
LITERAL='${NAME}'
"""
    assert env_file.parse(content, {"STAGE": "prod"}) == {
        "NAME": "app",
        "FULL": "app-prod",
        "QUOTED": "app !",
        "LITERAL": "${NAME}",
    }


def test_functions_are_skipped(caplog) -> None:
    content = """\
to_upper() {
  echo "$1" | tr a-z A-Z
}
function inline() { echo 1; }
A=1
"""
    with caplog.at_level(logging.WARNING):
        assert env_file.parse(content, source="functions.env") == {"A": "1"}
    assert "skipping the shell function to_upper" in caplog.text
    assert "skipping the shell function inline" in caplog.text
