"""Streaming endpoints for the article agent."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.agent_controller import stream_agent, stream_markdown_article, stream_single_shot

router = APIRouter(prefix="/api")


class ChatMessage(BaseModel):
    content: str = ""
    role: str = "user"


class GenerateRequest(BaseModel):
    topic: str = ""


class AgentRequest(BaseModel):
    message: Optional[str] = None
    messages: List[ChatMessage] = []

    def utterance(self) -> str:
        """Return `message`, else the last message's content, else an empty string."""
        if self.message:
            return self.message
        if self.messages:
            return self.messages[-1].content or ""
        return ""


@router.post("/agent")
async def post_agent(request: Request, payload: AgentRequest):
    """Run the multi-step tool agent and stream its events."""
    try:
        return await stream_agent(request, payload.utterance())
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Failed to process request") from exc


@router.post("/chat")
async def post_chat(request: Request, payload: AgentRequest):
    """Route the message once (article or chat) and stream the result."""
    try:
        return await stream_single_shot(request, payload.utterance())
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Failed to process request") from exc


@router.post("/generate")
async def post_generate(request: Request, payload: GenerateRequest):
    """Stream a free-form markdown article about a topic, with illustrations."""
    try:
        return await stream_markdown_article(request, payload.topic)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Failed to generate article") from exc
