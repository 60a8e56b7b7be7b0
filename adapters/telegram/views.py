"""
Text renderings of scan results, history and stats for Telegram (HTML parse mode).
"""

from html import escape
from typing import List

from core.domain.errors import ScannerError, RemoteCallError
from core.domain.models import ScanResult, ScanHistoryEntry, ScanStats, ScanStatus
from locales import t

TIME_FORMAT = "%d/%m/%Y %H:%M:%S"


def status_icon(success: bool) -> str:
    return "✅" if success else "❌"


def format_error(error: ScannerError, lang: str = "en") -> str:
    if isinstance(error, RemoteCallError):
        return t("error_remote", lang, detail=escape(str(error)) or t("error_generic", lang))
    return t(error.message_key, lang)


def format_scan_result(result: ScanResult, lang: str = "en") -> str:
    """Badge, validator message and ticket details"""
    lines = [
        f"{status_icon(result.success)} <b>{result.badge}</b>",
        escape(result.message),
    ]

    info = result.ticket_info
    if info:
        lines += [
            "",
            f"<b>{t('label_name', lang)}:</b> {escape(info.customer_name)}",
            f"<b>{t('label_ticket_type', lang)}:</b> {escape(info.ticket_type)}",
            f"<b>{t('label_match', lang)}:</b> {escape(info.match_label)}",
            f"<b>{t('label_quantity', lang)}:</b> {info.quantity}",
        ]
        if info.scanned_at:
            lines.append(f"<b>{t('label_scanned_at', lang)}:</b> {info.scanned_at.strftime(TIME_FORMAT)}")

    return "\n".join(lines)


def format_history(entries: List[ScanHistoryEntry], lang: str = "en", limit: int = 15) -> str:
    """Newest first; Telegram messages are short so only the head is shown"""
    if not entries:
        return f"{t('history_title', lang)}\n\n{t('history_empty', lang)}"

    lines = [t("history_title", lang), ""]
    for entry in entries[:limit]:
        lines.append(
            f"{status_icon(entry.status == ScanStatus.SUCCESS)} <b>{escape(entry.customer_name)}</b> "
            f"{entry.quantity}x\n"
            f"    {escape(entry.match_label)} • {escape(entry.ticket_type)}\n"
            f"    <i>{entry.scanned_at.strftime(TIME_FORMAT)}</i>"
        )
    if len(entries) > limit:
        lines.append(f"… +{len(entries) - limit}")
    return "\n".join(lines)


def format_stats(stats: ScanStats, lang: str = "en") -> str:
    return "\n".join([
        t("stats_title", lang),
        "",
        f"📊 {t('stats_total', lang)}: <b>{stats.total_scans}</b>",
        f"✅ {t('stats_successful', lang)}: <b>{stats.successful_scans}</b>",
        f"🕒 {t('stats_today', lang)}: <b>{stats.today_scans}</b>",
        f"👥 {t('stats_unique', lang)}: <b>{stats.unique_customers}</b>",
    ])
