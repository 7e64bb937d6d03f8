"""Base analyzer interface and result types."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields
from typing import Any

# Capability flags, in the order they are stored and reported
FLAG_NAMES = (
    "has_json_api",
    "has_text_api",
    "has_markdown_api",
    "has_rss_feed",
    "has_atom_feed",
    "has_json_feed",
    "has_llms_txt",
    "has_json_ld",
    "has_semantic_html",
    "has_server_side_rendering",
    "has_meta_tags",
    "has_sitemap",
    "has_mcp_server",
)


class AnalysisError(Exception):
    """Raised when a website cannot be analyzed at all."""


@dataclass
class McpServerInfo:
    """Discovered Model Context Protocol manifest."""

    endpoint: str
    name: str | None = None


@dataclass
class ReadinessDetails:
    """Supporting evidence collected by the detectors."""

    api_endpoints: list[str] = field(default_factory=list)
    feeds: list[str] = field(default_factory=list)
    llms_txt_content: str | None = None
    json_ld_data: list[Any] = field(default_factory=list)
    semantic_tags: list[str] = field(default_factory=list)
    meta_tags: dict[str, str] = field(default_factory=dict)
    sitemap_url: str | None = None
    mcp_server_info: McpServerInfo | None = None
    recommendations: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict | None) -> "ReadinessDetails":
        data = dict(data or {})
        mcp = data.pop("mcp_server_info", None)
        known = {f.name for f in fields(cls)}
        details = cls(**{k: v for k, v in data.items() if k in known})
        if mcp:
            details.mcp_server_info = McpServerInfo(
                endpoint=mcp["endpoint"],
                name=mcp.get("name"),
            )
        return details


@dataclass
class ReadinessResult:
    """
    Output of a readiness analysis.

    The score is derived from the thirteen flags only; each flag is owned by
    exactly one detector.
    """

    score: int = 0
    has_json_api: bool = False
    has_text_api: bool = False
    has_markdown_api: bool = False
    has_rss_feed: bool = False
    has_atom_feed: bool = False
    has_json_feed: bool = False
    has_llms_txt: bool = False
    has_json_ld: bool = False
    has_semantic_html: bool = False
    has_server_side_rendering: bool = False
    has_meta_tags: bool = False
    has_sitemap: bool = False
    has_mcp_server: bool = False
    details: ReadinessDetails = field(default_factory=ReadinessDetails)

    def flags(self) -> dict[str, bool]:
        """Return the capability flags keyed by name."""
        return {name: getattr(self, name) for name in FLAG_NAMES}

    def to_dict(self) -> dict:
        """JSON-compatible representation."""
        return asdict(self)


class BaseAnalyzer(ABC):
    """Abstract base class for all analyzers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return analyzer name."""
        pass

    @abstractmethod
    async def analyze(self, url: str) -> ReadinessResult:
        """
        Run analysis on the given URL.

        Args:
            url: The website URL to analyze

        Returns:
            ReadinessResult with score, flags and details

        Raises:
            AnalysisError: If the site cannot be analyzed
        """
        pass
