"""Tests for the multi-URL scraping pipeline."""
import logging
import pytest

from conftest import FakeExtractor, FakeRenderer, make_event
from gigscraper.core.errors import FatalError, ValidationError
from gigscraper.core.schemas import Event, ScrapedContent, ScrapeRequest
from gigscraper.scraper.orchestrator import ScrapingOrchestrator, sort_events_by_date


def _content(url: str, text: str = "PAGE CONTENT:\n", screenshot=None) -> ScrapedContent:
    return ScrapedContent(url=url, text=f"URL: {url}\n\n{text}", screenshot=screenshot)


def _orchestrator(pages, events_by_url):
    renderer = FakeRenderer(pages)
    extractor = FakeExtractor(events_by_url)
    keys = []

    def factory(api_key):
        keys.append(api_key)
        return extractor

    orchestrator = ScrapingOrchestrator(renderer=renderer, extractor_factory=factory)
    return orchestrator, renderer, extractor, keys


class TestValidation:
    @pytest.mark.asyncio
    async def test_empty_urls_rejected_before_rendering(self):
        orchestrator, renderer, extractor, keys = _orchestrator({}, {})

        with pytest.raises(ValidationError):
            await orchestrator.run(ScrapeRequest(urls=[], apiKey="k"))
        assert renderer.calls == []
        assert keys == []

    @pytest.mark.asyncio
    async def test_missing_key_rejected_before_rendering(self):
        url = "https://venue.test/"
        orchestrator, renderer, extractor, keys = _orchestrator({url: _content(url)}, {})

        with pytest.raises(ValidationError):
            await orchestrator.run(ScrapeRequest(urls=[url]))
        assert renderer.calls == []


class TestRun:
    @pytest.mark.asyncio
    async def test_single_url_end_to_end(self):
        url = "https://example-venue.test/"
        band_x = Event(
            venue="Example Venue",
            event_name="Band X",
            date="March 15",
            time="8:00 PM",
            price="$20",
            description="Live",
            url=url,
        )
        orchestrator, renderer, extractor, keys = _orchestrator(
            {url: _content(url, "PAGE CONTENT:\nBand X — March 15 — $20", screenshot="c2hvdA==")},
            {url: [band_x]},
        )

        events = await orchestrator.run(ScrapeRequest(urls=[url], apiKey="k"))
        assert len(events) == 1
        assert events[0].event_name == "Band X"
        assert "March 15" in events[0].date
        assert events[0].price == "$20"
        assert keys == ["k"]

        called_url, content, screenshot = extractor.calls[0]
        assert called_url == url
        assert "Band X — March 15 — $20" in content
        assert screenshot == "c2hvdA=="

    @pytest.mark.asyncio
    async def test_failed_render_does_not_abort_batch(self, timeout_error, caplog):
        slow, good = "https://slow.test/", "https://good.test/"
        good_events = [make_event("First", url=good), make_event("Second", url=good)]
        orchestrator, renderer, extractor, keys = _orchestrator(
            {slow: timeout_error, good: _content(good)},
            {good: good_events},
        )

        with caplog.at_level(logging.ERROR):
            events = await orchestrator.run(ScrapeRequest(urls=[slow, good], apiKey="k"))

        assert [e.event_name for e in events] == ["First", "Second"]
        assert all(e.url == good for e in events)
        assert renderer.calls == [slow, good]
        assert any(slow in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_unexpected_error_is_isolated(self):
        bad, good = "https://bad.test/", "https://good.test/"
        orchestrator, renderer, extractor, keys = _orchestrator(
            {bad: _content(bad), good: _content(good)},
            {bad: RuntimeError("boom"), good: [make_event("Survivor")]},
        )

        events = await orchestrator.run(ScrapeRequest(urls=[bad, good], apiKey="k"))
        assert [e.event_name for e in events] == ["Survivor"]

    @pytest.mark.asyncio
    async def test_fatal_error_aborts_batch(self):
        first, second = "https://one.test/", "https://two.test/"
        orchestrator, renderer, extractor, keys = _orchestrator(
            {first: _content(first), second: _content(second)},
            {first: FatalError("key rejected")},
        )

        with pytest.raises(FatalError):
            await orchestrator.run(ScrapeRequest(urls=[first, second], apiKey="k"))
        assert renderer.calls == [first]

    @pytest.mark.asyncio
    async def test_total_equals_sum_per_url(self, timeout_error):
        urls = ["https://a.test/", "https://b.test/", "https://slow.test/", "https://d.test/"]
        pages = {url: _content(url) for url in urls}
        pages["https://slow.test/"] = timeout_error
        per_url = {
            "https://a.test/": [make_event("A1"), make_event("A2")],
            "https://b.test/": [],
            "https://d.test/": [make_event("D1"), make_event("D2"), make_event("D3")],
        }
        orchestrator, *_ = _orchestrator(pages, per_url)

        events = await orchestrator.run(ScrapeRequest(urls=urls, apiKey="k"))
        assert len(events) == 5

    @pytest.mark.asyncio
    async def test_urls_processed_sequentially_in_order(self):
        urls = ["https://c.test/", "https://a.test/", "https://b.test/"]
        orchestrator, renderer, extractor, keys = _orchestrator(
            {url: _content(url) for url in urls}, {}
        )

        await orchestrator.run(ScrapeRequest(urls=urls, apiKey="k"))
        assert renderer.calls == urls
        assert [call[0] for call in extractor.calls] == urls

    @pytest.mark.asyncio
    async def test_scrape_all_reports_per_url_outcome(self, timeout_error):
        slow, good = "https://slow.test/", "https://good.test/"
        orchestrator, *_ = _orchestrator(
            {slow: timeout_error, good: _content(good)},
            {good: [make_event("Only")]},
        )

        results = await orchestrator.scrape_all(ScrapeRequest(urls=[slow, good], apiKey="k"))
        assert [r.ok for r in results] == [False, True]
        assert "Timeout" in results[0].error
        assert results[0].events == []
        assert len(results[1].events) == 1


class TestSortEventsByDate:
    def test_sorts_parseable_dates(self):
        events = [
            make_event("Late", "April 2, 2027"),
            make_event("Early", "March 15, 2027"),
            make_event("Middle", "3/20/2027"),
        ]
        assert [e.event_name for e in sort_events_by_date(events)] == ["Early", "Middle", "Late"]

    def test_unparseable_dates_keep_insertion_order(self):
        events = [make_event(name, "TBA") for name in ("One", "Two", "Three", "Four")]
        assert [e.event_name for e in sort_events_by_date(events)] == ["One", "Two", "Three", "Four"]

    def test_unparseable_dates_never_raise(self):
        events = [
            make_event("A", "Every Friday"),
            make_event("B", "March 15, 2027"),
            make_event("C", "TBA"),
            make_event("D", "2027-03-10T20:00:00-05:00"),
        ]
        result = sort_events_by_date(events)
        assert sorted(e.event_name for e in result) == ["A", "B", "C", "D"]

    def test_empty_list(self):
        assert sort_events_by_date([]) == []
