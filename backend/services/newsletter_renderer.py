"""
Newsletter message rendering.

A fan-out renders the message once; each recipient only gets their
unsubscribe token substituted into the finished template.
"""

from dataclasses import dataclass
from html import escape

from core.domain import ContentItem, ContentKind

TOKEN_PLACEHOLDER = "{{token}}"
NO_SUMMARY = "No summary available."

LISTING_PATHS: dict[str, str] = {
    ContentKind.BLOG.value: "/blog",
    ContentKind.WEBINAR.value: "/webinars",
    ContentKind.EVENT.value: "/events",
    ContentKind.RESOURCE.value: "/resources",
    ContentKind.CAREERS.value: "/careers",
}

SUMMARY_FIELDS: dict[str, str] = {
    ContentKind.BLOG.value: "excerpt",
    ContentKind.WEBINAR.value: "short_description",
    ContentKind.EVENT.value: "short_description",
    ContentKind.RESOURCE.value: "description",
    ContentKind.CAREERS.value: "description",
}

_FALLBACK_FIELDS = ("excerpt", "short_description", "description")


@dataclass(frozen=True)
class RenderedMessage:
    """A message ready for one recipient."""

    subject: str
    text: str
    html: str


@dataclass(frozen=True)
class NewsletterTemplate:
    """
    Rendered newsletter split at the unsubscribe token.

    Each body is kept as the text before and after the token slot, so
    content that happens to contain the placeholder text is never touched.
    """

    subject: str
    text_head: str
    text_tail: str
    html_head: str
    html_tail: str

    @property
    def text(self) -> str:
        return f"{self.text_head}{TOKEN_PLACEHOLDER}{self.text_tail}"

    @property
    def html(self) -> str:
        return f"{self.html_head}{TOKEN_PLACEHOLDER}{self.html_tail}"

    def personalize(self, token: str) -> RenderedMessage:
        return RenderedMessage(
            subject=self.subject,
            text=f"{self.text_head}{token}{self.text_tail}",
            html=f"{self.html_head}{token}{self.html_tail}",
        )


def _tag(kind: ContentKind | str) -> str:
    return kind.value if isinstance(kind, ContentKind) else str(kind)


def kind_label(kind: ContentKind | str) -> str:
    tag = _tag(kind)
    if tag == ContentKind.RESOURCE.value:
        return "Resource"
    return tag[:1].upper() + tag[1:]


def listing_path(kind: ContentKind | str) -> str:
    tag = _tag(kind)
    return LISTING_PATHS.get(tag, f"/{tag}s")


def pick_summary(kind: ContentKind | str, item: ContentItem) -> str:
    """Kind-specific summary field first, then the generic fallbacks."""
    preferred = SUMMARY_FIELDS.get(_tag(kind))
    candidates = ((preferred,) if preferred else ()) + _FALLBACK_FIELDS
    for field_name in candidates:
        value = getattr(item, field_name, None)
        if value:
            return value
    return NO_SUMMARY


def render_newsletter(
    kind: ContentKind | str,
    item: ContentItem,
    frontend_url: str,
) -> NewsletterTemplate:
    """
    Build the newsletter announcing *item*.

    Args:
        kind: Content kind of the published entity
        item: Fields of the entity the message shows
        frontend_url: Public site base URL, used for links

    Returns:
        Template whose text and HTML contain a single ``{{token}}``
        placeholder inside the unsubscribe link
    """
    base = frontend_url.rstrip("/")
    label = kind_label(kind)
    summary = pick_summary(kind, item)
    listing_url = f"{base}{listing_path(kind)}"

    subject = f"New {label} Available - {item.title}"

    text_head = (
        f"New {label} Available\n\n"
        f"{item.title}\n\n"
        f"{summary}\n\n"
        f"Read more: {listing_url}\n\n"
        f"You are receiving this email because you subscribed to updates.\n"
        f"Unsubscribe: {base}/unsubscribe/"
    )
    text_tail = "\n"

    html_head = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #0b5cab;">New {escape(label)} Available</h2>
            <h3>{escape(item.title)}</h3>
            <p>{escape(summary)}</p>
            <p>
                <a href="{escape(listing_url)}"
                   style="background: #0b5cab; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">
                    View {escape(label)}
                </a>
            </p>
            <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
            <p style="font-size: 12px; color: #999;">
                You are receiving this email because you subscribed to updates.
                <a href="{escape(base)}/unsubscribe/"""
    html_tail = """">Unsubscribe</a>
            </p>
        </div>
    </body>
    </html>
    """

    return NewsletterTemplate(
        subject=subject,
        text_head=text_head,
        text_tail=text_tail,
        html_head=html_head,
        html_tail=html_tail,
    )
