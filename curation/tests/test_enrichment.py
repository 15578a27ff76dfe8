import unittest

import httpx

from crawler.infra.http import HttpFetcher
from curation.enrichment import enrich_with_images
from curation.models import Article

OG_PAGE = '<html><head><meta property="og:image" content="https://cdn.example.com/{slug}.jpg"></head></html>'


def _article(slug: str, image_url=None) -> Article:
    return Article(title=slug, url=f"https://example.com/{slug}", source="Example", image_url=image_url)


class EnrichWithImagesTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.requested = []

        def handler(request):
            slug = request.url.path.strip("/")
            self.requested.append(slug)
            if slug == "broken":
                raise httpx.ReadTimeout("too slow", request=request)
            if slug == "bare":
                return httpx.Response(200, text="<html><head></head></html>")
            return httpx.Response(200, text=OG_PAGE.format(slug=slug))

        self.fetcher = HttpFetcher(transport=httpx.MockTransport(handler))

    async def asyncTearDown(self):
        await self.fetcher.aclose()

    async def test_only_leading_articles_without_images_are_fetched(self):
        articles = [
            _article("one"),
            _article("two", image_url="https://example.com/existing.png"),
            _article("three"),
            _article("four"),
        ]

        enriched = await enrich_with_images(self.fetcher, articles, max_to_enrich=3)

        self.assertEqual(sorted(self.requested), ["one", "three"])
        self.assertEqual(enriched[0].image_url, "https://cdn.example.com/one.jpg")
        self.assertEqual(enriched[1].image_url, "https://example.com/existing.png")
        self.assertEqual(enriched[2].image_url, "https://cdn.example.com/three.jpg")
        self.assertIsNone(enriched[3].image_url)
        self.assertIsNone(articles[0].image_url)

    async def test_failures_leave_image_empty_without_affecting_siblings(self):
        articles = [_article("broken"), _article("bare"), _article("good")]

        enriched = await enrich_with_images(self.fetcher, articles, max_to_enrich=10)

        self.assertIsNone(enriched[0].image_url)
        self.assertIsNone(enriched[1].image_url)
        self.assertEqual(enriched[2].image_url, "https://cdn.example.com/good.jpg")

    async def test_nothing_to_do(self):
        articles = [_article("has", image_url="https://example.com/a.png")]
        self.assertEqual(await enrich_with_images(self.fetcher, articles), articles)
        self.assertEqual(self.requested, [])


if __name__ == "__main__":
    unittest.main()
