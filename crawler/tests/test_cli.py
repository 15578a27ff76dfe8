import json
from datetime import datetime, timezone

from click.testing import CliRunner

from crawler import cli as cli_module
from crawler.schemas.models import FeedEntry
from curation.models import Article, CurationResult, SourceError


def test_discover_prints_feed(monkeypatch):
    async def fake_discover(self, url):
        return "https://example.com/feed"

    monkeypatch.setattr(cli_module.FeedDiscovery, "discover", fake_discover)
    result = CliRunner().invoke(cli_module.cli, ["discover", "example.com"])
    assert result.exit_code == 0
    assert result.output.strip() == "https://example.com/feed"


def test_discover_reports_missing_feed(monkeypatch):
    async def fake_discover(self, url):
        return None

    monkeypatch.setattr(cli_module.FeedDiscovery, "discover", fake_discover)
    result = CliRunner().invoke(cli_module.cli, ["discover", "example.com"])
    assert result.output.strip() == "no feed"


def test_scrape_prints_json_lines(monkeypatch):
    async def fake_scrape(fetcher, url, timeout=None):
        assert url == "https://example.com"
        return [FeedEntry(source="example.com", title="Headline", url="https://example.com/a")]

    monkeypatch.setattr(cli_module, "scrape_site", fake_scrape)
    result = CliRunner().invoke(cli_module.cli, ["scrape", "example.com"])
    assert result.exit_code == 0
    assert json.loads(result.output.strip())["title"] == "Headline"


def test_inspect_prints_page_metadata(monkeypatch):
    async def fake_metadata(fetcher, url):
        return {"url": url, "title": "Roth conversions", "summary": None, "published_at": None, "image_url": None}

    monkeypatch.setattr(cli_module, "fetch_page_metadata", fake_metadata)
    result = CliRunner().invoke(cli_module.cli, ["inspect", "https://example.com/roth"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["title"] == "Roth conversions"
    assert payload["url"] == "https://example.com/roth"


def test_curate_prints_result_with_suggestions(monkeypatch):
    import curation

    captured = {}

    def fake_curate(sources, audience, topics, options, use_backup_sources=False):
        captured.update(sources=sources, audience=audience, topics=topics, options=options)
        article = Article(
            title="Tax tips",
            url="https://example.com/tax",
            source="Example",
            matched_topics=["tax optimization"],
            relevance_score=15,
        )
        return CurationResult(
            articles=[article],
            errors=[SourceError(source="down.example.com", error="boom")],
            fetched_at=datetime(2024, 11, 25, tzinfo=timezone.utc),
        )

    monkeypatch.setattr(curation, "curate_articles_sync", fake_curate)
    result = CliRunner().invoke(
        cli_module.cli,
        ["curate", "example.com", "down.example.com", "--audience", "custom", "--topic", "tax optimization", "--max-total", "5", "--no-images"],
    )

    assert result.exit_code == 0, result.output
    assert captured["sources"] == ["example.com", "down.example.com"]
    assert captured["topics"] == ["tax optimization"]
    assert captured["options"].max_total_articles == 5
    assert captured["options"].enrich_images is False
    payload = json.loads(result.output[result.output.index("{"):])
    assert payload["suggestedTopics"] == ["tax optimization"]
    assert payload["errors"] == [{"source": "down.example.com", "error": "boom"}]
