"""Static page for the aggregated listings."""

from datetime import date
from html import escape
from urllib.parse import urlparse

from bayevents import config

STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6; color: #333; background-color: #f5f5f5; padding: 20px;
        }
        .container {
            max-width: 1200px; margin: 0 auto; background: white; padding: 30px;
            border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        h1 { color: #2c3e50; margin-bottom: 10px; border-bottom: 3px solid #3498db; padding-bottom: 10px; }
        .filters { margin-bottom: 30px; }
        .filters button { margin-right: 6px; padding: 4px 10px; border: 1px solid #ccc; background: #fff; cursor: pointer; }
        .date-section { margin-bottom: 40px; }
        .date-header {
            font-size: 1.5em; font-weight: bold; color: #2c3e50; margin-bottom: 15px;
            padding: 10px; background: #ecf0f1; border-left: 4px solid #3498db;
        }
        .event { margin-bottom: 15px; padding: 15px; background: #fafafa; border-left: 3px solid #95a5a6; }
        .event-header { display: flex; justify-content: space-between; align-items: flex-start; margin-bottom: 8px; }
        .event-title { font-weight: bold; font-size: 1.1em; color: #2c3e50; }
        .event-title a { color: inherit; }
        .event-venue { color: #7f8c8d; margin-top: 4px; }
        .event-time { color: #3498db; font-weight: 500; white-space: nowrap; margin-left: 15px; }
        .event-details { color: #555; font-size: 0.95em; margin-top: 8px; }
        .event-bands { color: #7f8c8d; font-size: 0.9em; margin-top: 5px; font-style: italic; }
        .event-source {
            display: inline-block; padding: 2px 8px; border-radius: 3px; font-size: 0.75em;
            font-weight: bold; margin-top: 8px; text-transform: uppercase; background: #eee;
        }
        .source-nineteenhz { background: #e8f5e9; color: #2e7d32; }
        .source-foopee { background: #fff3e0; color: #e65100; }
        .source-partiful { background: #f3e5f5; color: #6a1b9a; }
        .source-dice { background: #e3f2fd; color: #1565c0; }
        .source-poshvip { background: #fce4ec; color: #ad1457; }
        .no-events { text-align: center; color: #95a5a6; padding: 40px; font-style: italic; }
        .footer { color: #95a5a6; font-size: 0.85em; margin-top: 30px; }
        @media (max-width: 768px) {
            .event-header { flex-direction: column; }
            .event-time { margin-left: 0; margin-top: 5px; }
        }
"""

FILTER_SCRIPT = """
    <script>
      document.querySelectorAll('.filters button').forEach(function (btn) {
        btn.addEventListener('click', function () {
          var cat = btn.dataset.filter;
          document.querySelectorAll('.event').forEach(function (el) {
            el.style.display = (cat === 'all' || el.dataset.category === cat) ? '' : 'none';
          });
        });
      });
    </script>
"""


def _esc(text):
    return escape(text or "", quote=True)


def format_date_heading(iso_date):
    """"2026-01-20" -> "Tuesday, January 20, 2026"."""
    d = date.fromisoformat(iso_date)
    return f"{d.strftime('%A, %B')} {d.day}, {d.year}"


def _safe_link(link):
    """Only http(s) links make it onto the page."""
    if link and urlparse(link).scheme.lower() in ("http", "https"):
        return link
    return None


def render_event(event):
    title = _esc(event.title)
    link = _safe_link(event.link)
    if link:
        title = f'<a href="{_esc(link)}" target="_blank" rel="noopener">{title}</a>'

    lines = [
        f'            <div class="event" data-category="{_esc(event.category or "other")}">',
        '                <div class="event-header">',
        "                    <div>",
        f'                        <div class="event-title">{title}</div>',
    ]
    if event.venue:
        venue = f"{event.venue}, {event.city}" if event.city else event.venue
        lines.append(f'                        <div class="event-venue">@ {_esc(venue)}</div>')
    lines.append("                    </div>")
    if event.time:
        lines.append(f'                    <div class="event-time">{_esc(event.time)}</div>')
    lines.append("                </div>")

    if len(event.bands) > 1:
        lines.append(f'                <div class="event-bands">{_esc(", ".join(event.bands))}</div>')
    if event.details:
        lines.append(f'                <div class="event-details">{_esc(event.details)}</div>')

    lines.append(
        f'                <span class="event-source source-{_esc(event.source)}">{_esc(event.source)}</span>'
    )
    lines.append("            </div>")
    return "\n".join(lines)


def render_html(sorted_dates, events_by_date, generated_at="", title="SF Event Aggregator"):
    """Render the grouped listings as a complete HTML document."""
    sections = []
    for d in sorted_dates:
        events_html = "\n".join(render_event(e) for e in events_by_date[d])
        sections.append(
            '        <div class="date-section">\n'
            f'            <div class="date-header">{_esc(format_date_heading(d))}</div>\n'
            f"{events_html}\n"
            "        </div>"
        )

    if not sections:
        body = '        <div class="no-events">No events found.</div>'
    else:
        body = "\n".join(sections)

    category_buttons = "\n".join(
        f'            <button data-filter="{_esc(c)}">{_esc(c.title())}</button>'
        for c in config.CATEGORIES
    )

    total = sum(len(events_by_date[d]) for d in sorted_dates)
    footer = f"{total} events across {len(sorted_dates)} dates"
    if generated_at:
        footer += f" &middot; updated {_esc(generated_at)}"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{_esc(title)}</title>
    <style>{STYLE}    </style>
</head>
<body>
    <div class="container">
        <h1>{_esc(title)}</h1>
        <div class="filters">
            <button data-filter="all">All</button>
{category_buttons}
            <button data-filter="other">Other</button>
        </div>
{body}
        <div class="footer">{footer}</div>
    </div>
{FILTER_SCRIPT}</body>
</html>
"""
