"""Shared pytest fixtures for apidocgen tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable, Union

import pytest
import structlog

SAMPLE_PAYLOAD = {
    "overview": "demo",
    "functions": [
        {
            "name": "add",
            "description": "Adds two numbers.",
            "parameters": [
                {"name": "a", "type": "number", "description": "First operand", "optional": False},
                {"name": "b", "type": "number", "description": "Second operand", "optional": False},
            ],
            "returnType": "number",
            "returnDescription": "The sum of a and b",
            "examples": ["add(1, 2)"],
            "complexity": "O(1)",
        }
    ],
    "classes": [],
    "interfaces": [],
    "constants": [],
    "types": [],
}

Reply = Union[str, Exception, Callable[[str], str]]


class FakeProvider:
    """In-memory provider that records prompts and returns canned replies.

    ``reply`` may be a string, an exception to raise, or a callable that
    maps the prompt to a reply.
    """

    def __init__(self, reply: Reply) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def send(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(prompt)
        return self.reply


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Isolate every test from the developer's environment and config files."""
    home = tmp_path_factory.mktemp("home")
    workdir = tmp_path_factory.mktemp("cwd")

    for key in list(os.environ):
        if key.upper().startswith("APIDOCGEN_"):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("OPENAI_API_KEY", "test-key-12345")
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def sample_payload() -> dict:
    """Provide a well-formed documentation payload."""
    return json.loads(json.dumps(SAMPLE_PAYLOAD))


@pytest.fixture
def sample_reply(sample_payload: dict) -> str:
    """Provide a reply with prose around the JSON payload."""
    return f"Sure! {json.dumps(sample_payload)} Thanks!"


@pytest.fixture
def fake_provider() -> type[FakeProvider]:
    """Provide the fake provider class."""
    return FakeProvider


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a small multi-language project tree."""
    project = tmp_path / "project"
    (project / "src" / "utils").mkdir(parents=True)
    (project / "node_modules" / "lib").mkdir(parents=True)
    (project / ".git").mkdir()

    (project / "src" / "math.ts").write_text(
        "export function add(a: number, b: number): number {\n  return a + b;\n}\n"
    )
    (project / "src" / "utils" / "strings.py").write_text(
        "def shout(text: str) -> str:\n    return text.upper()\n"
    )
    (project / "src" / "README.md").write_text("# Not source\n")
    (project / "node_modules" / "lib" / "index.js").write_text("module.exports = {};\n")
    (project / ".git" / "hook.js").write_text("// not project code\n")

    return project
