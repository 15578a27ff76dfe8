import unittest

import httpx

from crawler.infra.http import FetchError, HttpFetcher


class HttpFetcherTests(unittest.IsolatedAsyncioTestCase):
    async def test_sends_user_agent_and_returns_text(self):
        seen = {}

        def handler(request):
            seen["ua"] = request.headers.get("user-agent")
            return httpx.Response(200, text="hello")

        async with HttpFetcher(user_agent="AdvisorBot/9", transport=httpx.MockTransport(handler)) as fetcher:
            self.assertEqual(await fetcher.get_text("https://example.com/"), "hello")
        self.assertEqual(seen["ua"], "AdvisorBot/9")

    async def test_http_error_status_raises_fetch_error(self):
        async with HttpFetcher(transport=httpx.MockTransport(lambda request: httpx.Response(404))) as fetcher:
            with self.assertRaises(FetchError) as ctx:
                await fetcher.get("https://example.com/missing")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.url, "https://example.com/missing")

    async def test_timeout_raises_fetch_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with HttpFetcher(transport=httpx.MockTransport(handler)) as fetcher:
            with self.assertRaises(FetchError):
                await fetcher.get_text("https://example.com/slow")

    async def test_head_returns_none_on_failure(self):
        def handler(request):
            if request.url.path == "/ok":
                return httpx.Response(200, headers={"content-type": "application/xml"})
            if request.url.path == "/down":
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(405)

        async with HttpFetcher(transport=httpx.MockTransport(handler)) as fetcher:
            ok = await fetcher.head("https://example.com/ok")
            self.assertEqual(ok.headers["content-type"], "application/xml")
            self.assertIsNone(await fetcher.head("https://example.com/down"))
            self.assertIsNone(await fetcher.head("https://example.com/other"))


if __name__ == "__main__":
    unittest.main()
