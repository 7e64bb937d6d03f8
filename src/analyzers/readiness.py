"""LLM readiness analysis engine."""

import json
import logging
import re
from urllib.parse import urljoin, urlparse

import httpx

from analyzers.base import (
    AnalysisError,
    BaseAnalyzer,
    McpServerInfo,
    ReadinessResult,
)
from config import settings
from recommendations.engine import generate_recommendations

logger = logging.getLogger(__name__)

# Server-side rendering heuristic thresholds (empirical, tunable)
SSR_MIN_CONTENT_LENGTH = 5000
SPA_SHELL_MAX_LENGTH = 3000

SEMANTIC_TAGS = ["header", "nav", "main", "article", "section", "aside", "footer"]
SEMANTIC_TAG_THRESHOLD = 4

LLMS_TXT_PREVIEW_LENGTH = 500

# Well-known paths, resolved against the target URL
LLMS_TXT_PATH = "/llms.txt"
SITEMAP_PATHS = ["/sitemap.xml", "/sitemap_index.xml"]
API_PATHS = ["/api", "/api/v1", "/graphql"]
MCP_MANIFEST_PATH = "/.well-known/mcp.json"

# Feed link type -> result flag
FEED_TYPES = {
    "application/rss+xml": "has_rss_feed",
    "application/atom+xml": "has_atom_feed",
    "application/feed+json": "has_json_feed",
}

# Response content type -> (result flag, endpoint label)
API_CONTENT_TYPES = [
    ("application/json", "has_json_api", "JSON"),
    ("text/plain", "has_text_api", "Text"),
    ("text/markdown", "has_markdown_api", "Markdown"),
]

HREF_RE = re.compile(r"""href=["']([^"']+)["']""")
JSON_LD_RE = re.compile(
    r"""<script[^>]*type=["']application/ld\+json["'][^>]*>([\s\S]*?)</script>""",
    re.IGNORECASE,
)
TEXT_BLOCK_RES = [
    re.compile(r"<p[^>]*>[\s\S]*?</p>", re.IGNORECASE),
    re.compile(r"<h[1-6][^>]*>[\s\S]*?</h[1-6]>", re.IGNORECASE),
]
SPA_ROOT_RE = re.compile(r"""<div id=["']root["'][^>]*></div>""", re.IGNORECASE)
META_TAG_RES = {
    "title": re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE),
    "description": re.compile(
        r"""<meta[^>]*name=["']description["'][^>]*content=["']([^"']+)["']""",
        re.IGNORECASE,
    ),
    "ogTitle": re.compile(
        r"""<meta[^>]*property=["']og:title["'][^>]*content=["']([^"']+)["']""",
        re.IGNORECASE,
    ),
    "ogDescription": re.compile(
        r"""<meta[^>]*property=["']og:description["'][^>]*content=["']([^"']+)["']""",
        re.IGNORECASE,
    ),
}


def normalize_url(url: str) -> str:
    """Prefix https:// when no scheme is given and check the URL has a host."""
    url = (url or "").strip()
    if not url:
        raise AnalysisError("Failed to analyze website: URL is empty")

    if not re.match(r"https?://", url, re.IGNORECASE):
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError as e:
        raise AnalysisError(f"Failed to analyze website: invalid URL {url!r}") from e
    if not host:
        raise AnalysisError(f"Failed to analyze website: invalid URL {url!r}")

    return url


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text: str):
    """
    Strict JSON parse: NaN and Infinity are rejected.

    Raises:
        ValueError: If the text is not JSON or nests too deeply to decode
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e


def _is_truthy_json(value) -> bool:
    # Objects and arrays count even when empty; scalars follow Python truthiness
    return isinstance(value, (dict, list)) or bool(value)


def calculate_score(result: ReadinessResult) -> int:
    """Weighted sum of the capability flags, capped at 100."""
    flags = result.flags()
    score = sum(
        weight
        for flag, weight in ReadinessAnalyzer.WEIGHTS.items()
        if flags[flag]
    )
    return min(score, 100)


class ReadinessAnalyzer(BaseAnalyzer):
    """
    Probes a website for signals that make it easy for LLMs to consume.

    Checks:
    - llms.txt at the site root
    - RSS / Atom / JSON feeds advertised in the page
    - JSON-LD structured data
    - Semantic HTML5 landmarks
    - Server-side rendered content
    - Title, description and Open Graph meta tags
    - sitemap.xml
    - Common API endpoints (JSON, text, markdown)
    - MCP manifest at /.well-known/mcp.json

    HTML is inspected with regular expressions rather than parsed, so
    unusual markup (unquoted attribute values, `content` before `name`,
    a <title> spanning several lines) can be missed.
    """

    # Readiness scoring weights (total = 135, score is capped at 100)
    WEIGHTS = {
        "has_json_api": 10,
        "has_text_api": 8,
        "has_markdown_api": 8,
        "has_rss_feed": 10,
        "has_atom_feed": 8,
        "has_json_feed": 10,
        "has_llms_txt": 15,
        "has_json_ld": 12,
        "has_semantic_html": 10,
        "has_server_side_rendering": 12,
        "has_meta_tags": 9,
        "has_sitemap": 8,
        "has_mcp_server": 15,
    }

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    @property
    def name(self) -> str:
        return "readiness"

    async def analyze(self, url: str) -> ReadinessResult:
        """
        Run readiness analysis on the given URL.

        Args:
            url: Website URL to analyze; https:// is assumed without a scheme

        Returns:
            ReadinessResult with score, flags, details and recommendations

        Raises:
            AnalysisError: If the URL is invalid or the page cannot be fetched
        """
        normalized_url = normalize_url(url)
        result = ReadinessResult()

        async with self._client() as client:
            html = await self._fetch_page(client, normalized_url)

            await self._check_llms_txt(client, normalized_url, result)
            self._check_feeds(html, normalized_url, result)
            self._check_json_ld(html, result)
            self._check_semantic_html(html, result)
            self._check_server_side_rendering(html, result)
            self._check_meta_tags(html, result)
            await self._check_sitemap(client, normalized_url, result)
            await self._check_api_endpoints(client, normalized_url, result)
            await self._check_mcp_server(client, normalized_url, result)

        result.score = calculate_score(result)
        result.details.recommendations = generate_recommendations(result)

        logger.info(f"{self.name} analysis for {normalized_url} scored {result.score}")
        return result

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.probe_timeout,
            follow_redirects=True,
            max_redirects=settings.max_redirects,
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        )

    async def _fetch_page(self, client: httpx.AsyncClient, url: str) -> str:
        """Fetch the primary page HTML; any failure aborts the analysis."""
        try:
            response = await client.get(url, timeout=settings.http_timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Timeout fetching {url}")
            raise AnalysisError(f"Failed to analyze website: timeout fetching {url}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Fetching {url} returned {e.response.status_code}")
            raise AnalysisError(
                f"Failed to analyze website: {url} returned status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error fetching {url}: {e}")
            raise AnalysisError(f"Failed to analyze website: {e}") from e

        return response.text

    async def _check_llms_txt(
        self, client: httpx.AsyncClient, base_url: str, result: ReadinessResult
    ) -> None:
        """Check for /llms.txt and keep a preview of its content."""
        llms_txt_url = urljoin(base_url, LLMS_TXT_PATH)
        try:
            response = await client.get(llms_txt_url)
        except httpx.HTTPError as e:
            logger.debug(f"llms.txt probe failed for {llms_txt_url}: {e}")
            return

        if response.status_code == 200 and response.text:
            result.has_llms_txt = True
            result.details.llms_txt_content = response.text[:LLMS_TXT_PREVIEW_LENGTH]

    def _check_feeds(self, html: str, base_url: str, result: ReadinessResult) -> None:
        """Check for feed <link> tags; each feed type is detected independently."""
        for feed_type, flag in FEED_TYPES.items():
            pattern = re.compile(
                rf"""<link[^>]*type=["']{re.escape(feed_type)}["'][^>]*>""",
                re.IGNORECASE,
            )
            match = pattern.search(html)
            if not match:
                continue

            setattr(result, flag, True)
            href_match = HREF_RE.search(match.group(0))
            if href_match:
                result.details.feeds.append(urljoin(base_url, href_match.group(1)))

    def _check_json_ld(self, html: str, result: ReadinessResult) -> None:
        """Collect every JSON-LD block that parses; skip the rest."""
        for match in JSON_LD_RE.finditer(html):
            try:
                data = parse_json(match.group(1))
            except ValueError:
                logger.debug("Skipping unparsable JSON-LD block")
                continue
            result.has_json_ld = True
            result.details.json_ld_data.append(data)

    def _check_semantic_html(self, html: str, result: ReadinessResult) -> None:
        """Check how many distinct HTML5 landmark tags the page uses."""
        found_tags = [
            tag
            for tag in SEMANTIC_TAGS
            if re.search(rf"<{tag}[^>]*>", html, re.IGNORECASE)
        ]
        result.details.semantic_tags = found_tags
        result.has_semantic_html = len(found_tags) >= SEMANTIC_TAG_THRESHOLD

    def _check_server_side_rendering(self, html: str, result: ReadinessResult) -> None:
        """Guess whether the page ships real content or an empty SPA shell."""
        has_content = len(html) > SSR_MIN_CONTENT_LENGTH
        has_text_content = any(pattern.search(html) for pattern in TEXT_BLOCK_RES)
        is_spa_shell = bool(SPA_ROOT_RE.search(html)) and len(html) < SPA_SHELL_MAX_LENGTH

        result.has_server_side_rendering = has_content and has_text_content and not is_spa_shell

    def _check_meta_tags(self, html: str, result: ReadinessResult) -> None:
        """Extract title, description and Open Graph tags (first occurrence)."""
        meta_tags = {}
        for key, pattern in META_TAG_RES.items():
            match = pattern.search(html)
            if match:
                meta_tags[key] = match.group(1)

        result.details.meta_tags = meta_tags
        result.has_meta_tags = bool(meta_tags.get("title")) and bool(
            meta_tags.get("description")
        )

    async def _check_sitemap(
        self, client: httpx.AsyncClient, base_url: str, result: ReadinessResult
    ) -> None:
        """HEAD the sitemap candidates and stop at the first 200."""
        for path in SITEMAP_PATHS:
            sitemap_url = urljoin(base_url, path)
            try:
                response = await client.head(sitemap_url)
            except httpx.HTTPError as e:
                logger.debug(f"Sitemap probe failed for {sitemap_url}: {e}")
                continue

            if response.status_code == 200:
                result.has_sitemap = True
                result.details.sitemap_url = sitemap_url
                break

    async def _check_api_endpoints(
        self, client: httpx.AsyncClient, base_url: str, result: ReadinessResult
    ) -> None:
        """Probe common API paths and classify them by response content type."""
        for path in API_PATHS:
            api_url = urljoin(base_url, path)
            try:
                response = await client.get(api_url)
            except httpx.HTTPError as e:
                logger.debug(f"API probe failed for {api_url}: {e}")
                continue

            # Error pages below 500 still count if they carry a usable content type
            if response.status_code >= 500:
                continue

            content_type = response.headers.get("content-type", "")
            for media_type, flag, label in API_CONTENT_TYPES:
                if media_type in content_type:
                    setattr(result, flag, True)
                    result.details.api_endpoints.append(f"{api_url} ({label})")
                    break

    async def _check_mcp_server(
        self, client: httpx.AsyncClient, base_url: str, result: ReadinessResult
    ) -> None:
        """Check for an MCP manifest at /.well-known/mcp.json."""
        mcp_url = urljoin(base_url, MCP_MANIFEST_PATH)
        try:
            response = await client.get(mcp_url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.debug(f"MCP probe failed for {mcp_url}: {e}")
            return

        if response.status_code != 200:
            return

        try:
            data = parse_json(response.text)
        except ValueError:
            logger.debug(f"MCP manifest at {mcp_url} is not valid JSON")
            return

        if not _is_truthy_json(data):
            return

        manifest = data if isinstance(data, dict) else {}
        endpoint = manifest.get("endpoint") or mcp_url
        name = manifest.get("name") or None

        result.has_mcp_server = True
        result.details.mcp_server_info = McpServerInfo(
            endpoint=str(endpoint),
            name=str(name) if name is not None else None,
        )
