import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def make_heading():
    """Builds a hast heading element from text or child nodes."""

    def _make(content="", tag="h1", **properties):
        if isinstance(content, str):
            children = [{"type": "text", "value": content}]
        else:
            children = list(content)
        return {"type": "element", "tagName": tag, "properties": properties, "children": children}

    return _make
