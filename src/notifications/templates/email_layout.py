"""HTML wrapper used for the email rendition of a notification."""

from html import escape

BRAND_COLOR = "#2563eb"


def render_email_html(title: str, body: str, url: str | None = None, base_url: str = "") -> str:
    link = ""
    if url:
        href = escape(f"{base_url}{url}" if url.startswith("/") else url, quote=True)
        link = (
            f'<a href="{href}" style="display:inline-block;margin-top:20px;padding:10px 20px;'
            f'background:{BRAND_COLOR};color:#fff;text-decoration:none;border-radius:5px;">View details</a>'
        )

    return (
        '<div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;padding:20px;">'
        f'<h2 style="color:{BRAND_COLOR};">{escape(title)}</h2>'
        f'<p style="font-size:16px;line-height:1.6;">{escape(body)}</p>'
        f"{link}"
        '<hr style="margin-top:30px;border:none;border-top:1px solid #eee;">'
        '<p style="font-size:12px;color:#999;">You are receiving this because alerts are enabled '
        "in your notification settings.</p>"
        "</div>"
    )
