"""Recommendation rules definition."""

from dataclasses import dataclass
from typing import Callable


@dataclass
class Rule:
    """A single recommendation rule, evaluated against the capability flags."""

    id: str
    message: str
    condition: Callable[[dict[str, bool]], bool]


def _missing(*flag_names: str) -> Callable[[dict[str, bool]], bool]:
    """Condition that holds when every named flag is absent."""
    return lambda flags: not any(flags.get(name, False) for name in flag_names)


CONGRATULATIONS = "Excellent! Your website is well-prepared for LLM interactions"

# Listed in priority order; the engine preserves it.
ALL_RULES = [
    Rule(
        id="missing-llms-txt",
        message="Add an llms.txt file at the root of your site to provide a compact overview for LLMs",
        condition=_missing("has_llms_txt"),
    ),
    Rule(
        id="missing-api",
        message="Expose API endpoints (JSON, text, or markdown) to allow programmatic access to your content",
        condition=_missing("has_json_api", "has_text_api", "has_markdown_api"),
    ),
    Rule(
        id="missing-feeds",
        message="Add RSS, Atom, or JSON feeds to make your content easily discoverable and consumable",
        condition=_missing("has_rss_feed", "has_atom_feed", "has_json_feed"),
    ),
    Rule(
        id="missing-json-ld",
        message="Implement JSON-LD structured data to provide machine-readable summaries of your content",
        condition=_missing("has_json_ld"),
    ),
    Rule(
        id="missing-semantic-html",
        message="Use semantic HTML5 tags (header, nav, main, article, section, footer) to improve content structure",
        condition=_missing("has_semantic_html"),
    ),
    Rule(
        id="missing-ssr",
        message="Implement server-side rendering to ensure content is immediately accessible without JavaScript",
        condition=_missing("has_server_side_rendering"),
    ),
    Rule(
        id="missing-meta-tags",
        message="Add proper meta tags (title, description, Open Graph) for better discoverability",
        condition=_missing("has_meta_tags"),
    ),
    Rule(
        id="missing-sitemap",
        message="Create a sitemap.xml file to help LLMs and search engines discover all your pages",
        condition=_missing("has_sitemap"),
    ),
    Rule(
        id="missing-mcp-server",
        message="Expose an MCP server at /.well-known/mcp.json to let AI agents interact with your site via the Model Context Protocol",
        condition=_missing("has_mcp_server"),
    ),
]
