import unittest

import httpx

from crawler.infra.http import FetchError, HttpFetcher
from crawler.ingesters.rss_base import FeedParseError, fetch_feed, parse_feed_entries

SAMPLE_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Retirement Weekly</title>
    <link>https://retire.example.com</link>
    <item>
      <title>Social Security timing explained</title>
      <link>https://retire.example.com/ss-timing</link>
      <pubDate>Mon, 25 Nov 2024 12:00:00 GMT</pubDate>
      <description>&lt;p&gt;When to &lt;b&gt;claim&lt;/b&gt; benefits.&lt;/p&gt;</description>
      <enclosure url="https://retire.example.com/ss.jpg" type="image/jpeg" length="1000"/>
    </item>
    <item>
      <title>Annuities 101</title>
      <link>https://retire.example.com/annuities</link>
      <description>Guaranteed income basics.</description>
      <media:thumbnail url="https://retire.example.com/thumb.jpg"/>
    </item>
    <item>
      <description>An entry without title or link.</description>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Money</title>
  <entry>
    <title>Budgeting for new parents</title>
    <link href="https://atom.example.com/budget"/>
    <updated>2024-11-20T08:00:00Z</updated>
    <content type="html">&lt;p&gt;Plan childcare costs early.&lt;/p&gt;</content>
  </entry>
</feed>
"""


class ParseFeedEntriesTests(unittest.TestCase):
    def test_rss_entries_are_normalized(self):
        entries = parse_feed_entries(SAMPLE_FEED, "https://retire.example.com/feed")

        self.assertEqual(len(entries), 3)
        first = entries[0]
        self.assertEqual(first.source, "Retirement Weekly")
        self.assertEqual(first.title, "Social Security timing explained")
        self.assertEqual(first.url, "https://retire.example.com/ss-timing")
        self.assertEqual(first.summary, "When to claim benefits.")
        self.assertEqual(first.image_url, "https://retire.example.com/ss.jpg")
        self.assertEqual(first.published_at, "Mon, 25 Nov 2024 12:00:00 GMT")

        second = entries[1]
        self.assertEqual(second.image_url, "https://retire.example.com/thumb.jpg")
        self.assertIsNone(second.published_at)

        untitled = entries[2]
        self.assertEqual(untitled.title, "Untitled")
        self.assertEqual(untitled.url, "")

    def test_atom_entries_use_content_and_updated(self):
        entries = parse_feed_entries(ATOM_FEED, "https://atom.example.com/atom.xml")

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].source, "Atom Money")
        self.assertEqual(entries[0].url, "https://atom.example.com/budget")
        self.assertEqual(entries[0].summary, "Plan childcare costs early.")
        self.assertEqual(entries[0].published_at, "2024-11-20T08:00:00Z")

    def test_long_summary_is_clipped(self):
        body = "word " * 200
        feed = (
            "<rss><channel><title>Long</title><item><title>Long read</title>"
            f"<link>https://long.example.com/a</link><description>{body}</description>"
            "</item></channel></rss>"
        ).encode()
        entries = parse_feed_entries(feed, "https://long.example.com/rss")
        self.assertEqual(len(entries[0].summary), 300)
        self.assertTrue(entries[0].summary.endswith("..."))

    def test_relative_links_resolve_against_feed_url(self):
        feed = (
            b'<?xml version="1.0"?><rss version="2.0"><channel><title>Relative</title>'
            b"<item><title>First post</title><link>/posts/1</link>"
            b'<enclosure url="/img/1.jpg" type="image/jpeg"/></item>'
            b"</channel></rss>"
        )
        entry = parse_feed_entries(feed, "https://a.example.com/feed")[0]
        self.assertEqual(entry.url, "https://a.example.com/posts/1")
        self.assertEqual(entry.image_url, "https://a.example.com/img/1.jpg")

    def test_html_page_is_rejected(self):
        html = b"<html><head><title>Not a feed</title></head><body><p>Hello</p></body></html>"
        with self.assertRaises(FeedParseError):
            parse_feed_entries(html, "https://example.com/feed")


class FetchFeedTests(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_feed_parses_response(self):
        def handler(request):
            return httpx.Response(200, content=SAMPLE_FEED, headers={"content-type": "application/rss+xml"})

        async with HttpFetcher(transport=httpx.MockTransport(handler)) as fetcher:
            entries = await fetch_feed(fetcher, "https://retire.example.com/feed")

        self.assertEqual(len(entries), 3)

    async def test_fetch_feed_propagates_http_errors(self):
        def handler(request):
            return httpx.Response(503)

        async with HttpFetcher(transport=httpx.MockTransport(handler)) as fetcher:
            with self.assertRaises(FetchError):
                await fetch_feed(fetcher, "https://retire.example.com/feed")


if __name__ == "__main__":
    unittest.main()
