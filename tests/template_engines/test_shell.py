import gzip
import shutil

import pytest

from env_deploy import template_engines
from env_deploy.template_engines.base import escape

needs_envsubst = pytest.mark.skipif(shutil.which("envsubst") is None, reason="envsubst is not installed")


def test_escape() -> None:
    assert escape(b"price: $5, total: ${A}") == b"price: ${DOLLAR}5, total: ${A}"
    assert escape(b"$${A}$") == b"${DOLLAR}${A}${DOLLAR}"
    assert escape(b"no dollar") == b"no dollar"


@needs_envsubst
def test_substitute() -> None:
    engine = template_engines.create_engine({"A": "10"})
    assert engine.substitute("price: $5, total: ${A}") == "price: $5, total: 10"


@needs_envsubst
def test_bare_variable_is_literal() -> None:
    engine = template_engines.create_engine({"HOME": "/root", "A": "1"})
    assert engine.substitute("echo $HOME ${A} $") == "echo $HOME 1 $"


@needs_envsubst
def test_undefined_is_empty() -> None:
    engine = template_engines.create_engine({})
    assert engine.substitute("[${UNDEFINED}]") == "[]"


@needs_envsubst
def test_dollar() -> None:
    engine = template_engines.create_engine({})
    assert engine.substitute("cost: ${DOLLAR}{A}") == "cost: ${A}"


@needs_envsubst
def test_multi_line_value() -> None:
    engine = template_engines.create_engine({"CERT": "a\nb"})
    assert engine.substitute("cert: |\n  ${CERT}\n") == "cert: |\n  a\nb\n"


@needs_envsubst
def test_file(temp_dir) -> None:
    engine = template_engines.create_engine({"param": "world"})
    src_path = temp_dir / "file1.tmpl"
    dest_path = temp_dir / "file1"
    src_path.write_text("Hello ${param} $USER\n", encoding="utf-8")

    assert engine.substitute_file(src_path, dest_path) == b"Hello world $USER\n"

    with dest_path.open() as input_:
        assert input_.read() == "Hello world $USER\n"


@needs_envsubst
def test_binary_file(temp_dir) -> None:
    engine = template_engines.create_engine({"NAME": "app"})
    src_path = temp_dir / ".app-1.0.tgz.backup"
    dest_path = temp_dir / "app-1.0.tgz"
    data = gzip.compress(b"name: ${NAME}\nprice: $5\n" * 20, mtime=0) + b"\x8b$\xff\x00$"
    src_path.write_bytes(data)

    assert engine.substitute_file(src_path, dest_path) == data
    assert dest_path.read_bytes() == data
