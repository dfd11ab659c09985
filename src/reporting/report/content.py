"""Report content generation.

Pulls aggregate counts for the report's merchant over the trailing period
implied by its kind and renders them twice: HTML for email, plain text for
the messaging channel. Only the sections the report includes are fetched.
"""

from dataclasses import dataclass, field
from datetime import datetime
from html import escape

from reporting.metrics import get_metrics_source
from reporting.report.recurrence import ReportKind, trailing_period_start

_PERIOD_LABELS = {
    ReportKind.DAILY: "Daily",
    ReportKind.WEEKLY: "Weekly",
    ReportKind.MONTHLY: "Monthly",
    ReportKind.CUSTOM: "Periodic",
}


@dataclass(frozen=True)
class ReportSection:
    heading: str
    rows: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class ReportContent:
    subject: str
    html: str
    text: str
    sections: list[ReportSection] = field(default_factory=list)


def _format_money(amount: float) -> str:
    return f"{amount:,.2f}"


def collect_sections(report, since: datetime, until: datetime) -> list[ReportSection]:
    source = get_metrics_source()
    merchant_id = str(report.merchant_id)
    sections = []

    if report.include_conversations:
        stats = source.conversation_stats(merchant_id, since, until)
        sections.append(
            ReportSection(
                "Conversations",
                [("Total", str(stats.total)), ("New today", str(stats.new_today)), ("Resolved", str(stats.resolved))],
            )
        )
    if report.include_orders:
        stats = source.order_stats(merchant_id, since, until)
        sections.append(
            ReportSection(
                "Orders",
                [("Total", str(stats.total)), ("New today", str(stats.new_today)), ("Revenue", _format_money(stats.revenue))],
            )
        )
    if report.include_customers:
        stats = source.customer_stats(merchant_id, since, until)
        sections.append(ReportSection("Customers", [("Total", str(stats.total)), ("New today", str(stats.new_today))]))

    return sections


def _render_html(title: str, period: str, sections: list[ReportSection]) -> str:
    parts = [
        '<div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;padding:20px;">',
        f'<h2 style="color:#2563eb;">{escape(title)}</h2>',
        f'<p style="color:#666;">{escape(period)}</p>',
    ]
    for section in sections:
        parts.append(f"<h3>{escape(section.heading)}</h3>")
        parts.append('<table style="width:100%;border-collapse:collapse;">')
        for label, value in section.rows:
            parts.append(
                f'<tr><td style="padding:4px 0;">{escape(label)}</td>'
                f'<td style="padding:4px 0;text-align:right;font-weight:bold;">{escape(value)}</td></tr>'
            )
        parts.append("</table>")
    if not sections:
        parts.append("<p>No sections are enabled for this report.</p>")
    parts.append("</div>")
    return "".join(parts)


def _render_text(title: str, period: str, sections: list[ReportSection]) -> str:
    lines = [f"*{title}*", period]
    for section in sections:
        lines.append("")
        lines.append(f"*{section.heading}*")
        lines.extend(f"- {label}: {value}" for label, value in section.rows)
    return "\n".join(lines)


def generate_report_content(report, now: datetime) -> ReportContent:
    """Build the email and messaging renditions for one run of ``report``.

    Errors from the metrics source propagate to the caller.
    """
    kind = ReportKind(report.kind)
    since = trailing_period_start(kind, now, report.interval_days)
    store_name = get_metrics_source().store_name(str(report.merchant_id))

    title = f"{_PERIOD_LABELS[kind]} report: {report.name}"
    if store_name:
        title = f"{title} ({store_name})"
    period = f"{since:%Y-%m-%d} to {now:%Y-%m-%d}"

    sections = collect_sections(report, since, now)
    return ReportContent(
        subject=title,
        html=_render_html(title, period, sections),
        text=_render_text(title, period, sections),
        sections=sections,
    )
