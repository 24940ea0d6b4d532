"""
WebSocket endpoint for streaming note generation.
"""
import asyncio
import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from notegen.services.connection_manager import manager
from notegen.services.generation import (
    FragmentSource,
    GenerationSession,
    StreamNotifier,
    create_agent_source,
)
from notegen.services.templates import (
    TemplateNotFoundError,
    build_input,
    template_registry,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_fragment_source() -> FragmentSource:
    """Fragment source for a new connection. Overridden in tests."""
    return create_agent_source()


@router.websocket("/generate")
async def websocket_generate(
    websocket: WebSocket,
    source: FragmentSource = Depends(get_fragment_source),
):
    """
    WebSocket endpoint for note generation.

    Each connection owns one GenerationSession. A new "generate" message
    replaces the generation in flight.

    Incoming messages:
    - {"type": "generate", "content": "...", "template": "meeting"} - template optional
    - {"type": "cancel"} - stop the current generation, keep partial notes

    Outgoing messages:
    - {"type": "stream.start", "generation": 1}
    - {"type": "stream.chunk", "generation": 1, "delta": "...", "accumulated": "..."}
    - {"type": "stream.end", "generation": 1, "content": "..."}
    - {"type": "stream.error", "generation": 1, "error": "...", "content": "..."}
    - {"type": "stream.cancelled", "generation": 1, "content": "..."}
    - {"type": "error", "message": "..."} - Invalid client message
    """
    await manager.connect(websocket)

    session = GenerationSession(source)
    notifier = StreamNotifier(websocket)
    unsubscribe = session.sink.subscribe(notifier)
    sender = asyncio.create_task(notifier.run(), name="generate-notifier")

    try:
        while True:
            # Receive raw text message
            raw_data = await websocket.receive_text()

            # Try to parse JSON
            try:
                data = json.loads(raw_data)
            except json.JSONDecodeError:
                notifier.notify_protocol_error("Invalid JSON format")
                continue

            if not isinstance(data, dict):
                notifier.notify_protocol_error("Message must be a JSON object")
                continue

            msg_type = data.get("type")

            if msg_type == "generate":
                content = data.get("content", "")
                if not isinstance(content, str):
                    notifier.notify_protocol_error("Message content must be a string")
                    continue

                template = None
                template_name = data.get("template")
                if template_name is not None and not isinstance(template_name, str):
                    notifier.notify_protocol_error("Template must be a string")
                    continue
                if template_name:
                    try:
                        template = template_registry.get(template_name)
                    except TemplateNotFoundError as e:
                        notifier.notify_protocol_error(e.message)
                        continue

                text = build_input(content, template)
                if not text:
                    notifier.notify_protocol_error("Message content cannot be empty")
                    continue

                session.start(text)

            elif msg_type == "cancel":
                session.cancel()

            else:
                notifier.notify_protocol_error(f"Unknown message type: {msg_type}")

    except WebSocketDisconnect:
        logger.info("Generation client disconnected")

    finally:
        unsubscribe()
        await session.aclose()
        sender.cancel()
        await asyncio.wait({sender})
        manager.disconnect(websocket)
