# -*- coding: utf-8 -*-
"""Event-based notification styler with emoji separators (Telegram-style HTML)."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from html import escape
from typing import Any, cast

from collection_sale_tracker.notifications.types import NotificationMessage, NotificationStyler


class SaleNotificationStyler(NotificationStyler):
    """Render notifications by event_type with emojis, separators and formatted sections."""

    def __init__(self, *, currency_symbol: str = "MON", marketplace_url: str | None = None) -> None:
        self._currency = currency_symbol
        self._marketplace_url = marketplace_url.rstrip("/") if marketplace_url else None

    def render(self, message: NotificationMessage) -> str:
        """Dispatch to the appropriate renderer based on event_type."""
        if message.event_type == "sale_detected":
            return self._render_sale(message)
        if message.event_type == "fetch_failed":
            return self._render_fetch_failed(message)
        if message.event_type == "system_started":
            return self._render_system_started(message)
        if message.event_type == "system_stopped":
            return self._render_system_stopped(message)
        return self._render_generic(message)

    def _render_sale(self, message: NotificationMessage) -> str:
        """Render an inferred sale."""
        payload: dict[str, Any] = message.payload.copy() if message.payload else {}
        address = str(payload.get("collection_address") or "")
        name = payload.get("collection_name") or address or "Unknown Collection"
        emoji, _ = self._title(message.event_type)

        link = ""
        if self._marketplace_url and address:
            link = f'<a href="{escape(self._collection_url(address), quote=True)}">View collection</a>'

        lines = [
            f"{emoji} <b>New Sale: {escape(str(name))}</b>\n",
            self._section(
                "💰 Sale Details",
                [
                    ("💵 Estimated Price", self._format_price(payload.get("estimated_price"))),
                    ("📦 Sales", self._format_count(payload.get("sales_count_delta"))),
                    ("📈 Volume Change", self._format_number(payload.get("volume_delta"))),
                    ("🕒 Detected", self._format_timestamp(payload.get("inferred_at"))),
                ],
            ),
            self._section(
                "🖼️ Collection",
                [
                    ("🔗 Address", escape(address)),
                    ("", link),
                ],
            ),
        ]
        image = payload.get("collection_image")
        if isinstance(image, str) and image:
            lines.append(self._section("🎨 Image", [("", escape(image))]))
        lines.append("<i>Inferred from collection stats. Source: Magic Eden</i>")
        return "\n".join([line for line in lines if line]).strip()

    def _render_fetch_failed(self, message: NotificationMessage) -> str:
        """Render a collection that could not be polled."""
        payload = message.payload or {}
        emoji, title = self._title(message.event_type)
        lines = [
            f"{emoji} <b>{title}</b>\n",
            self._section(
                "🛠️ Details",
                [
                    ("🔗 Collection", escape(str(payload.get("collection_address") or ""))),
                    ("🔁 Attempts", payload.get("attempts")),
                    ("❗ Error", escape(str(payload.get("error_message") or ""))),
                ],
            ),
            escape(message.message),
        ]
        return "\n".join([line for line in lines if line]).strip()

    def _render_system_started(self, message: NotificationMessage) -> str:
        """Render system started notification."""
        emoji, title = self._title(message.event_type)
        payload = message.payload or {}
        raw = payload.get("collections")
        collections: list[str] = []
        if isinstance(raw, list):
            collections = [escape(str(c)) for c in cast(list[Any], raw)]
        lines = [f"{emoji} <b>{title}</b>\n", self._section("🚀 Status", [("", escape(message.message))])]
        if collections:
            lines.append(self._section("🖼️ Collections", [("", ", ".join(collections))]))
        return "\n".join([line for line in lines if line]).strip()

    def _render_system_stopped(self, message: NotificationMessage) -> str:
        """Render system stopped notification."""
        emoji, title = self._title(message.event_type)
        lines = [f"{emoji} <b>{title}</b>\n", self._section("🛑 Status", [("", escape(message.message))])]
        return "\n".join([line for line in lines if line]).strip()

    def _render_generic(self, message: NotificationMessage) -> str:
        """Render unknown event types using message and payload."""
        emoji, title = self._title(message.event_type)
        lines = [f"{emoji} <b>{title}</b>", escape(message.message)]
        if message.payload:
            for key in sorted(message.payload.keys()):
                value = message.payload.get(key)
                if value is not None:
                    lines.append(f"<b>{escape(key)}:</b> {escape(str(value))}")
        return "\n".join(lines).strip()

    def _collection_url(self, address: str) -> str:
        return f"{self._marketplace_url}/{address}"

    @staticmethod
    def _title(event_type: str) -> tuple[str, str]:
        """Get the emoji and title for the given event type."""
        mapping = {
            "sale_detected": ("🔔", "New Sale"),
            "fetch_failed": ("⚠️", "Collection Fetch Failed"),
            "system_started": ("▶️", "System Started"),
            "system_stopped": ("⏹️", "System Stopped"),
        }
        return mapping.get(event_type, ("ℹ️", event_type.replace("_", " ").title()))

    def _section(self, header: str, rows: list[tuple[str, Any]]) -> str:
        """Format a section with a header and rows."""
        lines: list[str] = []
        content_lines: list[str] = []
        for label, value in rows:
            if value is None or value == "":
                continue
            if label:
                content_lines.append(f"{self._format_label(label)} {value}")
            else:
                content_lines.append(str(value))
        if not content_lines:
            return ""
        lines.append(f"{self._format_heading(header)}\n{'─'*12}")
        lines.extend(content_lines)
        return "\n".join(lines) + "\n"

    def _format_price(self, value: Any) -> str:
        """Price with 4 decimals and the currency symbol, or Unknown."""
        if value is None:
            return "Unknown"
        return f"{self._format_number(value)} {self._currency}"

    @staticmethod
    def _format_count(value: Any) -> str:
        if value is None:
            return ""
        try:
            count = int(value)
        except (TypeError, ValueError):
            return str(value)
        return str(count) if count > 0 else ""

    @staticmethod
    def _format_number(value: Any) -> str:
        """Format a number with thousands separator and 4 decimal places."""
        if value is None:
            return "N/A"
        try:
            number = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return str(value)
        return f"{number:,.4f}"

    @staticmethod
    def _format_timestamp(value: Any) -> str:
        """Format an ISO-8601 string or datetime as UTC 'YYYY-MM-DD HH:MM:SS UTC'."""
        if value is None:
            return "N/A"
        if isinstance(value, datetime):
            dt = value
        else:
            try:
                dt = datetime.fromisoformat(str(value))
            except ValueError:
                return str(value)
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return dt.strftime("%Y-%m-%d %H:%M:%S UTC")

    @staticmethod
    def _format_heading(text: str) -> str:
        """Format a section heading with bold text."""
        if not text:
            return ""
        emoji, _, remainder = text.partition(" ")
        if remainder:
            return f"{emoji} <b>{remainder}</b>"
        return f"<b>{text}</b>"

    @staticmethod
    def _format_label(label: str) -> str:
        """Format row labels with bold text."""
        if not label:
            return ""
        emoji, _, remainder = label.partition(" ")
        if remainder:
            return f"{emoji} <b>{remainder}:</b>"
        return f"<b>{label}:</b>"
