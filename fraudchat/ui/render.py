"""HTML rendering for claims and chat messages.

Pure functions of their inputs; the page decides where the markup goes.
"""

import re
from datetime import datetime
from html import escape, unescape

from fraudchat.models.schemas import Claim, ClaimStatus

EMPTY_CLAIMS_HTML = '<p class="text-gray-400 text-center">No claims submitted yet.</p>'

_STATUS_BADGE = {
    ClaimStatus.PENDING: "bg-amber-100 text-amber-800",
    ClaimStatus.APPROVED: "bg-green-100 text-green-800",
    ClaimStatus.FLAGGED: "bg-red-100 text-red-800",
}


def format_amount(amount: float) -> str:
    return f"${amount:,.2f}"


def format_date(timestamp: datetime) -> str:
    return timestamp.strftime("%m/%d/%Y")


def render_claim_card(claim: Claim) -> str:
    """Render one claim as a card."""
    card = "claim-card flagged" if claim.status is ClaimStatus.FLAGGED else "claim-card"
    badge = _STATUS_BADGE[claim.status]
    return (
        f'<div class="{card}">'
        '<div class="claim-header">'
        f'<span class="claim-id">Claim #{claim.id}</span>'
        f'<span class="claim-status rounded-full px-2 text-xs font-semibold {badge}">'
        f"{claim.status.value.upper()}</span>"
        "</div>"
        '<div class="claim-details">'
        f"<div><strong>Patient:</strong> {escape(claim.patient_name)}</div>"
        f"<div><strong>Amount:</strong> {format_amount(claim.amount)}</div>"
        f"<div><strong>Service:</strong> {escape(claim.service_type)}</div>"
        f"<div><strong>Diagnosis:</strong> {escape(claim.diagnosis)}</div>"
        f"<div><strong>Date:</strong> {format_date(claim.timestamp)}</div>"
        "</div>"
        "</div>"
    )


def render_claims(claims: list[Claim]) -> str:
    """Render claims in the order given, or an empty-state note."""
    if not claims:
        return EMPTY_CLAIMS_HTML
    return "".join(render_claim_card(claim) for claim in claims)


_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_LINK_SCHEMES = ("http://", "https://")


def _render_link(match: re.Match[str]) -> str:
    """Render a markdown link; only http(s) targets become anchors."""
    label, url = match.group(1), unescape(match.group(2))
    if not url.lower().startswith(_LINK_SCHEMES):
        return label
    return f'<a href="{escape(url)}" class="text-blue-600 underline" target="_blank">{label}</a>'


def _wrap_lists(text: str, item_pattern: str, tag: str, classes: str) -> str:
    item_re = re.compile(item_pattern)
    result: list[str] = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if item_re.match(stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            result.append(f"<li>{item_re.sub('', stripped, count=1)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert assistant markdown to HTML for chat display.

    Supports: bold, italic, inline code, links, bullet and numbered lists.
    """
    text = escape(text, quote=False)

    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"(?<![\w*])\*([^*\n]+)\*(?!\w)", r"<em>\1</em>", text)
    text = _LINK_PATTERN.sub(_render_link, text)

    text = _wrap_lists(text, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1")
    text = _wrap_lists(text, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1")

    return text.replace("\n", "<br>")


def render_message_content(role: str, content: str) -> str:
    """Render transcript content: markdown for the assistant, plain text for the user."""
    if role == "user":
        return escape(content).replace("\n", "<br>")
    return markdown_to_html(content)
