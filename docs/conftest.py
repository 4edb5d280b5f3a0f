"""Sybil configuration for testing the examples in the documentation."""

import subprocess
from pathlib import Path

from sybil import Sybil
from sybil.parsers.markdown import CodeBlockParser, PythonCodeBlockParser, SkipParser


def find_fixtures_dir(doc_path: Path) -> Path:
    """Locate the fixtures directory for a document.

    A ``fixtures`` directory next to the document wins; otherwise the shared
    ``docs/examples/fixtures`` directory is used.
    """
    current_path = doc_path.parent
    if (current_path / "fixtures").exists():
        return current_path / "fixtures"

    while current_path.name != "docs" and current_path.parent != current_path:
        current_path = current_path.parent

    shared_fixtures = current_path / "examples" / "fixtures"
    if current_path.name == "docs" and shared_fixtures.exists():
        return shared_fixtures

    raise FileNotFoundError(f"Fixtures directory not found starting from {doc_path.parent}")


def evaluate_console_block(example):
    """
    Evaluate console code blocks with $ prompts.

    Format:
        $ command
        expected stdout line 1
        expected stdout line 2

    Commands run from the fixtures directory. Blank lines in the expected
    output are ignored, so examples must not rely on them.
    """
    fixtures_dir = find_fixtures_dir(Path(example.path))

    lines = example.parsed.strip().split("\n")
    i = 0

    while i < len(lines):
        line = lines[i]

        if not line.strip():
            i += 1
            continue

        if not line.startswith("$ "):
            raise ValueError(f"Expected line to start with '$ ', got: {line}")

        command = line[2:].strip()

        expected_lines = []
        i += 1
        while i < len(lines) and not lines[i].startswith("$ "):
            if lines[i].strip():
                expected_lines.append(lines[i])
            i += 1

        expected_output = "\n".join(expected_lines)

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=fixtures_dir,
                capture_output=True,
                text=True,
                timeout=10,
            )
        except subprocess.TimeoutExpired as e:
            raise AssertionError(f"Command timed out: {command}") from e

        assert result.returncode == 0, (
            f"\nCommand: {command}\nExit code: {result.returncode}\nStderr:\n{result.stderr}"
        )

        if expected_output:
            actual_output = result.stdout.strip()
            assert actual_output == expected_output, (
                f"\nCommand: {command}\nExpected:\n{expected_output}\nActual:\n{actual_output}"
            )


pytest_collect_file = Sybil(
    parsers=[
        PythonCodeBlockParser(),
        CodeBlockParser(language="console", evaluator=evaluate_console_block),
        SkipParser(),
    ],
    patterns=["*.md"],
    fixtures=["tmp_path"],
).pytest()
