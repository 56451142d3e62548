"""Report-specific test fixtures."""

import io

import pytest


@pytest.fixture
def render_lines():
    """Run a section renderer and return its output lines."""

    def _render(renderer, ctx):
        buf = io.StringIO()
        renderer(buf, ctx)
        return buf.getvalue().splitlines()

    return _render
