"""AI endpoints: productivity insights, topic suggestions and streaming mentor chat"""
import logging
from contextlib import aclosing
from typing import AsyncGenerator, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from pydantic import Field

from chronos.models.base import CamelModel
from chronos.models.chat import ChatMessage
from chronos.services.insights import (
    AIServiceNotConfigured,
    ChatRejected,
    ChatSession,
    ChatStreamFailed,
    NOT_CONFIGURED_MESSAGE,
)
from chronos.services.timer.timer_manager import TimerManager, get_timer_manager
from chronos.services.workspace import FocusWorkspace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])

AI_DISABLED_DETAIL = "AI features are disabled"


class InsightsRequest(CamelModel):
    user_id: str = Field(min_length=1)
    topic: Optional[str] = None


class InsightsResponse(CamelModel):
    insights: str


class TopicsRequest(CamelModel):
    user_id: str = Field(min_length=1)
    seed_topic: Optional[str] = None  # None: the user's current topic


class TopicsResponse(CamelModel):
    topics: List[str]


class ChatStreamRequest(CamelModel):
    user_id: str = Field(min_length=1)
    message: str = Field(min_length=1)


class ChatTranscript(CamelModel):
    topic: str
    is_streaming: bool
    messages: List[ChatMessage]


def sse_event(data: str, event: Optional[str] = None) -> str:
    """Frame `data` as one server-sent event; multi-line data spans several data fields"""
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return "\n".join(lines) + "\n\n"


async def chat_event_stream(chat: ChatSession, message: str) -> AsyncGenerator[str, None]:
    """
    SSE frames of the mentor's reply, always ending with `data: [DONE]`.

    A failure mid-stream emits a single `error` event carrying the apology.
    """
    try:
        async with aclosing(chat.stream(message)) as chunks:
            async for chunk in chunks:
                yield sse_event(chunk)
    except (ChatStreamFailed, ChatRejected, AIServiceNotConfigured) as e:
        yield sse_event(str(e), event="error")
    yield "data: [DONE]\n\n"


async def ai_workspace(manager: TimerManager, user_id: str) -> FocusWorkspace:
    workspace = await manager.get_workspace(user_id)
    if not workspace.ai_enabled:
        raise HTTPException(status_code=403, detail=AI_DISABLED_DETAIL)
    return workspace


def transcript(chat: ChatSession) -> ChatTranscript:
    return ChatTranscript(topic=chat.topic, is_streaming=chat.is_streaming, messages=chat.messages)


@router.post("/insights", response_model=InsightsResponse, response_model_by_alias=True)
async def generate_insights(
    request: InsightsRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Coaching advice on the user's recent sessions.

    Raises:
        403: AI features are disabled for the user
    """
    workspace = await manager.get_workspace(request.user_id)
    if request.topic is not None:
        workspace.set_topic(request.topic)

    insights = await workspace.request_insights()
    if insights is None:
        raise HTTPException(status_code=403, detail=AI_DISABLED_DETAIL)
    return InsightsResponse(insights=insights)


@router.post("/topics", response_model=TopicsResponse, response_model_by_alias=True)
async def suggest_topics(
    request: TopicsRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Five sub-topics of a seed topic; empty when the model is unavailable.

    Raises:
        403: AI features are disabled for the user
    """
    workspace = await manager.get_workspace(request.user_id)
    topics = await workspace.request_topic_suggestions(request.seed_topic)
    if topics is None:
        raise HTTPException(status_code=403, detail=AI_DISABLED_DETAIL)
    return TopicsResponse(topics=topics)


@router.post("/chat/stream")
async def stream_chat(
    request: ChatStreamRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Send a message to the user's mentor chat and stream the reply as
    server-sent events. Completed exchanges stay in the conversation context.

    Raises:
        400: Blank message
        403: AI features are disabled for the user
        409: A reply is still streaming
        503: No API key configured
    """
    workspace = await ai_workspace(manager, request.user_id)
    if not workspace.insight_service.configured:
        raise HTTPException(status_code=503, detail=NOT_CONFIGURED_MESSAGE)
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message is empty")

    chat = workspace.open_chat()
    if chat.is_streaming:
        raise HTTPException(status_code=409, detail="A reply is still streaming")

    return StreamingResponse(
        chat_event_stream(chat, request.message),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        }
    )


@router.get("/chat", response_model=ChatTranscript, response_model_by_alias=True)
async def get_chat(
    user_id: str = Query(..., alias="userId", min_length=1),
    manager: TimerManager = Depends(get_timer_manager),
):
    """Visible transcript of the user's mentor chat"""
    workspace = await ai_workspace(manager, user_id)
    return transcript(workspace.open_chat())


@router.delete("/chat", response_model=ChatTranscript, response_model_by_alias=True)
async def clear_chat(
    user_id: str = Query(..., alias="userId", min_length=1),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Drop the conversation and start over.

    Raises:
        409: A reply is still streaming
    """
    workspace = await ai_workspace(manager, user_id)
    chat = workspace.open_chat()
    try:
        chat.clear()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return transcript(chat)
