"""
Scan dashboard — lightweight aiohttp app served alongside the bot.
Access: GET /stats?token=SECRET, GET /history?token=SECRET
"""

import logging
from datetime import datetime, timezone
from html import escape
from typing import Optional
from aiohttp import web

from core.domain.constants import TICKET_SCANS_TABLE
from core.domain.models import ChangeEvent
from core.services.change_feed import ChangeFeed
from core.services.scan_log import ScanLogService

logger = logging.getLogger(__name__)

PAGE_STYLE = """
  body { font-family: -apple-system, BlinkMacSystemFont, sans-serif; max-width: 720px; margin: 0 auto; padding: 16px; background: #0d1117; color: #e6edf3; }
  h1 { font-size: 1.4em; border-bottom: 1px solid #30363d; padding-bottom: 8px; }
  .card { background: #161b22; border: 1px solid #30363d; border-radius: 8px; padding: 16px; margin-bottom: 12px; }
  .big { font-size: 2em; font-weight: bold; color: #58a6ff; }
  .row { display: flex; justify-content: space-between; margin: 4px 0; }
  .label { color: #8b949e; }
  table { width: 100%; border-collapse: collapse; margin-top: 8px; }
  th, td { text-align: left; padding: 6px 8px; border-bottom: 1px solid #21262d; }
  th { color: #8b949e; font-weight: normal; }
  .muted { color: #8b949e; font-size: 0.85em; }
"""


def _page(title: str, body: str) -> str:
    now = datetime.now(timezone.utc)
    return f"""<!DOCTYPE html>
<html><head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta http-equiv="refresh" content="30">
<title>{title}</title>
<style>{PAGE_STYLE}</style>
</head><body>
<h1>{title}</h1>
{body}
<p class="muted">Auto-refreshes every 30s &middot; {now.strftime('%Y-%m-%d %H:%M UTC')}</p>
</body></html>"""


def create_dashboard_app(
    scan_log: ScanLogService,
    dashboard_token: str,
    change_feed: Optional[ChangeFeed] = None,
) -> web.Application:
    """Create aiohttp app with /stats, /history and /health routes."""

    def _authorized(request: web.Request) -> bool:
        return bool(dashboard_token) and request.query.get("token", "") == dashboard_token

    async def handle_stats(request: web.Request) -> web.Response:
        if not _authorized(request):
            return web.Response(text="Unauthorized", status=401)

        if scan_log.stats.refreshed_at is None or request.query.get("refresh"):
            await scan_log.fetch_stats()
        stats = scan_log.stats

        body = f"""
<div class="card">
  <div class="big">{stats.total_scans}</div>
  <div class="label">Total Scans</div>
  <div class="row"><span>Successful</span><span>{stats.successful_scans}</span></div>
  <div class="row"><span>Today</span><span>{stats.today_scans}</span></div>
  <div class="row"><span>Unique customers</span><span>{stats.unique_customers}</span></div>
</div>"""
        return web.Response(text=_page("Gate Scan Stats", body), content_type="text/html")

    async def handle_history(request: web.Request) -> web.Response:
        if not _authorized(request):
            return web.Response(text="Unauthorized", status=401)

        if scan_log.history_refreshed_at is None or request.query.get("refresh"):
            await scan_log.fetch_history()

        rows = ""
        for entry in scan_log.history:
            rows += (
                f'<tr><td>{entry.scanned_at.strftime("%Y-%m-%d %H:%M:%S")}</td>'
                f'<td>{escape(entry.customer_name)}</td>'
                f'<td>{escape(entry.match_label)}</td>'
                f'<td>{escape(entry.ticket_type)}</td>'
                f'<td>{entry.quantity}x</td></tr>\n'
            )
        if not rows:
            rows = '<tr><td colspan="5" class="muted">No scans yet</td></tr>'

        body = f"""
<div class="card">
  <table>
    <tr><th>Scanned</th><th>Customer</th><th>Match</th><th>Ticket</th><th>Qty</th></tr>
    {rows}
  </table>
</div>"""
        return web.Response(text=_page("Gate Scan History", body), content_type="text/html")

    async def handle_health(request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    if change_feed is not None:
        async def on_scan_logged(event: ChangeEvent):
            # Scans from this station already refreshed the log; the next page view re-fetches
            logger.debug(f"[DASHBOARD] {event.type.value} on {event.table}, snapshot marked stale")
            scan_log.mark_stale()

        change_feed.subscribe(TICKET_SCANS_TABLE, on_scan_logged)

    app = web.Application()
    app.router.add_get("/stats", handle_stats)
    app.router.add_get("/history", handle_history)
    app.router.add_get("/health", handle_health)
    return app
