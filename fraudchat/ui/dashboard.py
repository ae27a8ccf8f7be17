"""NiceGUI dashboard: claim form, claim list and fraud assistant chat."""

import asyncio
import logging
import os

import httpx
from nicegui import ui

from fraudchat.models.schemas import ChatMessage, Claim, ClaimAnalysis, Verdict
from fraudchat.ui.render import render_claims, render_message_content

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Polling can take up to POLL_MAX_ATTEMPTS seconds on top of the uploads
REQUEST_TIMEOUT = 120.0

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #f5f5f5; min-height: 100vh; }

    .panel {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .claim-card {
        border: 1px solid #e5e7eb;
        border-left: 4px solid #667eea;
        border-radius: 8px;
        padding: 12px 14px;
        margin-bottom: 10px;
        font-size: 0.85rem;
    }
    .claim-card.flagged { border-left-color: #ff5252; background: #fff5f5; }
    .claim-header { display: flex; justify-content: space-between; margin-bottom: 6px; }
    .claim-id { font-weight: 600; }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


class FraudChatApi:
    """Async client for the Fraud Chat HTTP API."""

    def __init__(self, base_url: str = API_BASE_URL) -> None:
        self._base_url = base_url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, timeout=REQUEST_TIMEOUT)

    async def list_claims(self) -> list[Claim]:
        async with self._client() as client:
            response = await client.get("/claims")
            response.raise_for_status()
            return [Claim.model_validate(item) for item in response.json()]

    async def submit_claim(self, payload: dict) -> Claim:
        async with self._client() as client:
            response = await client.post("/claims", json=payload)
            response.raise_for_status()
            return Claim.model_validate(response.json())

    async def analyze_claim(self, claim_id: int) -> ClaimAnalysis:
        async with self._client() as client:
            response = await client.post(f"/claims/{claim_id}/analysis")
            response.raise_for_status()
            return ClaimAnalysis.model_validate(response.json())

    async def send_chat(self, message: str) -> None:
        async with self._client() as client:
            response = await client.post("/chat", json={"message": message})
            response.raise_for_status()

    async def transcript(self) -> list[ChatMessage]:
        async with self._client() as client:
            response = await client.get("/chat/transcript")
            response.raise_for_status()
            return [ChatMessage.model_validate(item) for item in response.json()]

    async def assistant_status(self) -> dict:
        async with self._client() as client:
            response = await client.get("/assistant/status")
            response.raise_for_status()
            return response.json()


@ui.page("/")
async def dashboard_page() -> None:
    """Main dashboard page."""
    ui.add_head_html(CUSTOM_CSS)
    api = FraudChatApi()
    pending: set[asyncio.Task] = set()

    claims_html: ui.html
    messages_container: ui.column
    input_field: ui.input
    send_btn: ui.button

    def track(coro) -> asyncio.Task:
        """Run a request as a task that is cancelled when the tab closes."""
        task = asyncio.create_task(coro)
        pending.add(task)
        task.add_done_callback(pending.discard)
        return task

    def cancel_pending() -> None:
        for task in list(pending):
            task.cancel()

    ui.context.client.on_disconnect(cancel_pending)

    async def refresh_claims() -> None:
        claims_html.set_content(render_claims(await api.list_claims()))

    def render_message(msg: ChatMessage) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[85%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.html(render_message_content(msg.role, msg.content), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                ui.label(msg.time).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )

    async def refresh_messages() -> None:
        messages = await api.transcript()
        messages_container.clear()
        with messages_container:
            if not messages:
                with ui.column().classes("w-full h-48 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Ask about any claim").classes("text-lg text-gray-400")
            for msg in messages:
                render_message(msg)

    def render_typing(text: str) -> ui.row:
        with messages_container, ui.row().classes("w-full justify-start") as row:
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label(text).classes("text-sm text-gray-500 italic")
        return row

    async def run_analysis(claim: Claim) -> None:
        typing = render_typing(f"Analyzing claim #{claim.id}...")
        try:
            analysis = await track(api.analyze_claim(claim.id))
        except asyncio.CancelledError:
            return
        except httpx.HTTPError as e:
            logger.error(f"Analysis request failed: {e}")
            ui.notify(
                f"Claim #{claim.id} submitted, but fraud analysis failed.", type="negative"
            )
            typing.delete()
            return

        typing.delete()
        if analysis.alert:
            ui.notify(
                f"Fraud Alert: {analysis.alert}",
                type="negative",
                position="top",
                close_button=True,
            )
        elif analysis.verdict in (Verdict.UNAVAILABLE, Verdict.ERROR):
            ui.notify(analysis.message, type="warning")
        await refresh_claims()
        await refresh_messages()

    async def submit_claim() -> None:
        payload = {
            "patient_name": patient_field.value or "",
            "amount": amount_field.value,
            "service_type": service_field.value or "",
            "diagnosis": diagnosis_field.value or "",
        }
        try:
            claim = await api.submit_claim(payload)
        except httpx.HTTPStatusError as e:
            ui.notify(f"Claim rejected: {e.response.text}", type="negative")
            return
        except httpx.RequestError as e:
            ui.notify(f"Connection failed: {e}", type="negative")
            return

        for field in (patient_field, amount_field, service_field, diagnosis_field):
            field.value = None
        await refresh_claims()
        await run_analysis(claim)

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text:
            return
        input_field.value = ""
        send_btn.disable()
        typing = render_typing("Analyzing...")
        try:
            await track(api.send_chat(text))
        except asyncio.CancelledError:
            return
        except httpx.HTTPError as e:
            logger.error(f"Chat request failed: {e}")
            ui.notify(f"Chat failed: {e}", type="negative")
        finally:
            send_btn.enable()
        typing.delete()
        await refresh_messages()

    status = await api.assistant_status()

    # === UI Layout ===
    with ui.element("div").classes("w-full min-h-screen p-4 md:p-8"):
        with ui.row().classes("w-full header rounded-xl px-5 py-4 items-center gap-3 mb-4"):
            ui.icon("health_and_safety").classes("text-white text-3xl")
            ui.label("Health Insurance Claims · Fraud Assistant").classes(
                "text-lg font-semibold text-white"
            )
            if not status["available"]:
                ui.badge("AI disabled", color="orange").classes("ml-auto")

        with ui.row().classes("w-full gap-4 items-start no-wrap"):
            # Claims
            with ui.column().classes("w-1/2 panel p-5 gap-3"):
                ui.label("Submit a Claim").classes("text-base font-semibold")
                patient_field = ui.input("Patient name").classes("w-full")
                amount_field = ui.number("Amount ($)", min=0, format="%.2f").classes("w-full")
                service_field = ui.select(
                    ["Consultation", "Surgery", "Lab Test", "Imaging", "Therapy", "Emergency"],
                    label="Service type",
                    with_input=True,
                    new_value_mode="add-unique",
                ).classes("w-full")
                diagnosis_field = ui.input("Diagnosis").classes("w-full")
                ui.button("Submit Claim", on_click=submit_claim).props("unelevated")

                ui.separator()
                ui.label("Claims").classes("text-base font-semibold")
                claims_html = ui.html("", sanitize=False).classes("w-full")

            # Chat
            with ui.column().classes("w-1/2 panel gap-0").style("height: calc(100vh - 10rem)"):
                with (
                    ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                    ui.column().classes("w-full p-5"),
                ):
                    messages_container = ui.column().classes("w-full gap-4")
                with ui.row().classes("w-full p-4 gap-3 items-center bg-white border-t"):
                    input_field = (
                        ui.input(placeholder="Ask about claims...")
                        .props("borderless dense")
                        .classes("flex-grow")
                        .on("keydown.enter", send_message)
                    )
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "round unelevated"
                    )

    await refresh_claims()
    await refresh_messages()


def main() -> None:
    ui.run(title="Fraud Chat", port=8080, reload=False)


if __name__ == "__main__":
    main()
