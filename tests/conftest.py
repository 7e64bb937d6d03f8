"""
Pytest Configuration and Shared Fixtures

Outbound HTTP is served by httpx.MockTransport; the database is an
in-memory SQLite instance shared across one test.
"""

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from analyzers.readiness import ReadinessAnalyzer
from db.models import Base


# ============================================================================
# Fake websites
# ============================================================================


def build_transport(routes: dict) -> httpx.MockTransport:
    """
    Serve canned responses keyed by (method, path).

    A value may be an httpx.Response or an exception to raise. Unknown
    routes get an empty 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = routes.get((request.method, request.url.path))
        if outcome is None:
            return httpx.Response(404)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return httpx.MockTransport(handler)


@pytest.fixture
def make_analyzer():
    """Build a ReadinessAnalyzer talking to a fake website."""

    def _make(routes: dict) -> ReadinessAnalyzer:
        return ReadinessAnalyzer(transport=build_transport(routes))

    return _make


@pytest.fixture
def page_html() -> str:
    """A content-rich page that passes every HTML check."""
    body = "<p>" + "Readable server-rendered content. " * 200 + "</p>"
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Example Site</title>
  <meta name="description" content="An example website">
  <meta property="og:title" content="Example OG Title">
  <meta property="og:description" content="Example OG Description">
  <link rel="alternate" type="application/rss+xml" href="/feed.xml">
  <link rel="alternate" type="application/atom+xml" href="https://example.com/atom.xml">
  <link rel="alternate" type="application/feed+json" href="feed.json">
  <script type="application/ld+json">{{"@context": "https://schema.org", "@type": "Organization", "name": "Example"}}</script>
</head>
<body>
  <header><nav><a href="/">Home</a></nav></header>
  <main>
    <article><h1>Welcome</h1>{body}</article>
    <section><h2>More</h2></section>
  </main>
  <aside>Side</aside>
  <footer>Footer</footer>
</body>
</html>"""


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
