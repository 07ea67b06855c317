"""
Unit tests for recipient selection and the newsletter fan-out.

Covers:
- Category matching, including the ``all`` wildcard
- Rendering once and personalising per recipient
- Per-recipient failure isolation with structured logging
- Zero matching subscribers
- Sends overlapping rather than running one after another
- send_newsletter loading only subscribed rows in its own session
- A failed subscriber load surfacing as a failed background task
"""

import asyncio
import logging

import pytest
from sqlalchemy.exc import OperationalError

from adapters.email import MailTransport
from core.domain import ContentItem, ContentKind, Subscriber
from services import newsletter as newsletter_module
from services.newsletter import NewsletterDispatcher, select_recipients, send_newsletter

FRONTEND = "https://www.autointelli.com"


def _sub(email: str, *categories: str, subscribed: bool = True) -> Subscriber:
    return Subscriber(
        email=email,
        name=email.split("@")[0],
        unsubscribe_token=f"tok-{email.split('@')[0]}",
        categories=tuple(categories),
        subscribed=subscribed,
    )


ITEM = ContentItem(id="blog-1", title="Observability 101", excerpt="A primer.")


class _GatedTransport(MailTransport):
    """Holds every send until all expected sends have started."""

    def __init__(self, expected: int):
        self.expected = expected
        self.started = 0
        self.all_started = asyncio.Event()
        self.delivered: list[str] = []

    async def send(self, message):
        self.started += 1
        if self.started == self.expected:
            self.all_started.set()
        await self.all_started.wait()
        self.delivered.append(message.to)


class _UnreachableDatabase:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT newsletter_subscriptions", {}, Exception("connection refused"))


# ---------------------------------------------------------------------------
# select_recipients
# ---------------------------------------------------------------------------

class TestSelectRecipients:
    def test_matches_exact_tag_and_all(self):
        subs = [
            _sub("blog@x.io", "blog"),
            _sub("all@x.io", "all"),
            _sub("events@x.io", "event"),
            _sub("mixed@x.io", "webinar", "blog"),
        ]
        picked = [s.email for s in select_recipients(ContentKind.BLOG, subs)]
        assert picked == ["blog@x.io", "all@x.io", "mixed@x.io"]

    def test_matching_is_case_sensitive(self):
        assert select_recipients(ContentKind.BLOG, [_sub("a@x.io", "Blog")]) == []

    def test_empty_categories_match_nothing(self):
        assert select_recipients(ContentKind.EVENT, [_sub("a@x.io")]) == []

    def test_unsubscribed_are_skipped(self):
        assert select_recipients(ContentKind.BLOG, [_sub("a@x.io", "all", subscribed=False)]) == []

    def test_careers_tag(self):
        subs = [_sub("jobs@x.io", "careers"), _sub("blog@x.io", "blog")]
        assert [s.email for s in select_recipients(ContentKind.CAREERS, subs)] == ["jobs@x.io"]

    def test_non_list_categories_from_row_are_empty(self):
        class Row:
            id = "r1"
            email = "odd@x.io"
            name = "Odd"
            unsubscribe_token = "tok"
            categories = "blog"
            subscribed = True

        subscriber = Subscriber.from_model(Row())
        assert subscriber.categories == ()
        assert select_recipients(ContentKind.BLOG, [subscriber]) == []


# ---------------------------------------------------------------------------
# NewsletterDispatcher.fan_out
# ---------------------------------------------------------------------------

class TestFanOut:
    @pytest.mark.asyncio
    async def test_each_recipient_gets_own_token(self, mail_transport):
        transport = mail_transport
        dispatcher = NewsletterDispatcher(transport, from_email="news@x.io", frontend_url=FRONTEND)

        report = await dispatcher.fan_out(
            ContentKind.BLOG, ITEM, [_sub("a@x.io", "blog"), _sub("b@x.io", "all")]
        )

        assert report.matched == 2
        assert report.sent == 2
        assert report.failed == 0
        a_msg = transport.sent_to("a@x.io")[0]
        b_msg = transport.sent_to("b@x.io")[0]
        assert f"{FRONTEND}/unsubscribe/tok-a" in a_msg.html
        assert f"{FRONTEND}/unsubscribe/tok-b" in b_msg.html
        assert "tok-b" not in a_msg.html
        assert a_msg.subject == "New Blog Available - Observability 101"
        assert a_msg.from_email == "news@x.io"

    @pytest.mark.asyncio
    async def test_renders_once_per_fan_out(self, monkeypatch, mail_transport):
        calls = []
        real_render = newsletter_module.render_newsletter

        def counting_render(*args, **kwargs):
            calls.append(args)
            return real_render(*args, **kwargs)

        monkeypatch.setattr(newsletter_module, "render_newsletter", counting_render)
        dispatcher = NewsletterDispatcher(mail_transport, frontend_url=FRONTEND)

        await dispatcher.fan_out(ContentKind.BLOG, ITEM, [_sub(f"r{i}@x.io", "blog") for i in range(4)])

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failed_recipient_does_not_stop_others(self, caplog, mail_transport):
        transport = mail_transport
        transport.fail_for = {"bounce@x.io"}
        dispatcher = NewsletterDispatcher(transport, frontend_url=FRONTEND)
        subs = [_sub("ok1@x.io", "blog"), _sub("bounce@x.io", "blog"), _sub("ok2@x.io", "blog")]

        with caplog.at_level(logging.ERROR, logger="services.newsletter"):
            report = await dispatcher.fan_out(ContentKind.BLOG, ITEM, subs)

        assert sorted(transport.attempts) == ["bounce@x.io", "ok1@x.io", "ok2@x.io"]
        assert report.sent == 2
        assert report.failed == 1
        failed = [o for o in report.outcomes if not o.delivered]
        assert failed[0].recipient == "bounce@x.io"
        assert failed[0].reason == "mailbox unavailable"

        error_records = [r for r in caplog.records if getattr(r, "recipient", None) == "bounce@x.io"]
        assert len(error_records) == 1
        assert error_records[0].content_kind == "blog"
        assert error_records[0].outcome == "failed"

    @pytest.mark.asyncio
    async def test_sends_overlap(self):
        transport = _GatedTransport(expected=3)
        dispatcher = NewsletterDispatcher(transport, frontend_url=FRONTEND)
        subs = [_sub(f"r{i}@x.io", "blog") for i in range(3)]

        report = await asyncio.wait_for(dispatcher.fan_out(ContentKind.BLOG, ITEM, subs), timeout=2)

        assert report.sent == 3
        assert sorted(transport.delivered) == ["r0@x.io", "r1@x.io", "r2@x.io"]

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, mail_transport):
        transport = mail_transport
        transport.fail_for = {"bounce@x.io"}
        dispatcher = NewsletterDispatcher(transport, frontend_url=FRONTEND)

        await dispatcher.fan_out(ContentKind.BLOG, ITEM, [_sub("bounce@x.io", "blog")])

        assert transport.attempts == ["bounce@x.io"]

    @pytest.mark.asyncio
    async def test_zero_matches_sends_nothing(self, mail_transport):
        transport = mail_transport
        dispatcher = NewsletterDispatcher(transport, frontend_url=FRONTEND)

        report = await dispatcher.fan_out(ContentKind.EVENT, ITEM, [_sub("a@x.io", "blog")])

        assert report.matched == 0
        assert report.outcomes == []
        assert transport.attempts == []

    @pytest.mark.asyncio
    async def test_injected_logger_is_used(self, mail_transport):
        records = []

        class _Collect(logging.Handler):
            def emit(self, record):
                records.append(record)

        log = logging.getLogger("tests.dispatch.injected")
        log.setLevel(logging.INFO)
        handler = _Collect()
        log.addHandler(handler)
        try:
            dispatcher = NewsletterDispatcher(mail_transport, frontend_url=FRONTEND, log=log)
            await dispatcher.fan_out(ContentKind.BLOG, ITEM, [_sub("a@x.io", "blog")])
        finally:
            log.removeHandler(handler)

        summary = [r for r in records if getattr(r, "sent", None) is not None]
        assert summary and summary[0].sent == 1


# ---------------------------------------------------------------------------
# send_newsletter
# ---------------------------------------------------------------------------

class TestSendNewsletter:
    @pytest.mark.asyncio
    async def test_loads_only_subscribed_rows(self, make_subscriber, session_factory, mail_transport):
        await make_subscriber("active@x.io", ["webinar"])
        await make_subscriber("gone@x.io", ["all"], subscribed=False)
        await make_subscriber("other@x.io", ["event"])

        transport = mail_transport
        dispatcher = NewsletterDispatcher(transport, frontend_url=FRONTEND)
        item = ContentItem(id="w-1", title="Live demo", short_description="Join us")

        report = await send_newsletter(
            ContentKind.WEBINAR, item, dispatcher=dispatcher, session_factory=session_factory
        )

        assert report.matched == 1
        assert [m.to for m in transport.sent] == ["active@x.io"]
        assert "Join us" in transport.sent[0].text

    @pytest.mark.asyncio
    async def test_subscriber_load_failure_fails_the_task(self, task_queue, mail_transport, caplog):
        dispatcher = NewsletterDispatcher(mail_transport, frontend_url=FRONTEND)
        task_id = "newsletter-blog-blog-1"

        with caplog.at_level(logging.ERROR, logger="services.task_queue"):
            await task_queue.enqueue(
                task_id,
                send_newsletter(
                    ContentKind.BLOG, ITEM, dispatcher=dispatcher, session_factory=_UnreachableDatabase
                ),
            )
            await task_queue.drain()

        status = task_queue.get_status(task_id)
        assert status["status"] == "failed"
        assert "connection refused" in status["error"]
        assert mail_transport.attempts == []
        record = next(r for r in caplog.records if getattr(r, "task_id", None) == task_id)
        assert record.outcome == "failed"
