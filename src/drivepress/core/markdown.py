"""Markdown -> HTML conversion via markdown-it"""

from functools import lru_cache

from markdown_it import MarkdownIt


@lru_cache(maxsize=None)
def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def render_markdown(body: str, preset: str = 'gfm-like') -> str:
    """Render a markdown body to an HTML fragment."""
    return _make_parser(preset).render(body)
