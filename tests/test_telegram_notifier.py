"""
Tests for Telegram progress notifications (no network access).
"""

import httpx
import pytest

from atlas_packer.monitoring.telegram_notifier import (
    format_benchmark_start,
    format_dataset_milestone,
    format_error,
    format_final_summary,
    send_telegram,
)


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSendTelegram:
    @pytest.mark.asyncio
    async def test_missing_token_returns_false(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        assert await send_telegram("hello", chat_id="123") is False

    @pytest.mark.asyncio
    async def test_missing_chat_id_returns_false(self, monkeypatch):
        monkeypatch.setattr(
            "atlas_packer.monitoring.telegram_notifier.DEFAULT_CHAT_ID", ""
        )
        assert await send_telegram("hello", token="abc") is False

    @pytest.mark.asyncio
    async def test_successful_send(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        async with _client(handler) as client:
            ok = await send_telegram("hello", chat_id="42", token="abc", client=client)

        assert ok is True
        assert seen[0].url.path == "/botabc/sendMessage"

    @pytest.mark.asyncio
    async def test_api_refusal(self):
        async with _client(lambda r: httpx.Response(400, json={"ok": False})) as client:
            assert await send_telegram("hi", chat_id="42", token="abc", client=client) is False

    @pytest.mark.asyncio
    async def test_transport_error_is_swallowed(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        async with _client(handler) as client:
            assert await send_telegram("hi", chat_id="42", token="abc", client=client) is False

    @pytest.mark.asyncio
    async def test_json_that_is_not_an_object(self):
        async with _client(lambda r: httpx.Response(200, json=["ok"])) as client:
            assert await send_telegram("hi", chat_id="42", token="abc", client=client) is False

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        async with _client(lambda r: httpx.Response(502, text="bad gateway")) as client:
            assert await send_telegram("hi", chat_id="42", token="abc", client=client) is False


class TestFormatting:
    def test_start(self):
        msg = format_benchmark_start(20, 100, ["bottom_left", "contact_point"], (512, 256))
        assert "bottom_left, contact_point" in msg
        assert "Bin: 512 x 256" in msg

    def test_milestone(self):
        assert "3/10 datasets (30%)" in format_dataset_milestone(3, 10, 0.5)
        assert "Avg Occupancy: 78.5%" in format_dataset_milestone(3, 10, 0.785)

    def test_error_with_context(self):
        msg = format_error("OverlapError", "Placements overlap", {"run": "d0"})
        assert msg.splitlines() == ["Error: OverlapError", "Placements overlap", "Context: run=d0"]

    def test_final_summary_without_best(self):
        msg = format_final_summary(4, 40, 0.8, None, 12.0, 0)
        assert "Best heuristic: n/a" in msg
        assert "Avg Occupancy: 80.0%" in msg
