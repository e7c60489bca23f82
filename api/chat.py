"""
Chat API Router
Endpoints for the caregiver chat assistant
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field

from api.deps import get_db, services


router = APIRouter(prefix="/chat", tags=["chat"])


# ==================== REQUEST/RESPONSE SCHEMAS ====================

class ChatRequest(BaseModel):
    """Request for chat interaction"""
    message: str = Field(..., min_length=1, max_length=4000)
    context: Optional[str] = Field(None, max_length=4000, description="Extra context for the assistant")


class ChatAction(BaseModel):
    """Structured action proposed by the assistant"""
    type: str = Field(..., description="add_medication or schedule_reminder")
    data: Dict[str, Any] = Field(default_factory=dict)


class ChatResponse(BaseModel):
    """Response from chat"""
    response: str
    actions: List[ChatAction] = []
    timestamp: str


class ActionResult(BaseModel):
    """Outcome of an executed action"""
    type: str
    message: str
    medication_id: Optional[str] = None


# ==================== ENDPOINTS ====================

@router.post("/", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    db: Session = Depends(get_db)
):
    """
    Send a command or question to the assistant

    The reply is free text, or a confirmation message with an action the
    caregiver can confirm through `/chat/actions`.
    """
    assistant_service = services.get_assistant_service()

    reply = await assistant_service.chat(request.message, context=request.context, db=db)
    return ChatResponse(
        response=reply.response,
        actions=[ChatAction(**a.to_dict()) for a in reply.actions],
        timestamp=datetime.utcnow().isoformat()
    )


@router.post("/actions", response_model=ActionResult)
async def execute_action(
    action: ChatAction,
    db: Session = Depends(get_db)
):
    """
    Execute an action proposed by the assistant and confirmed by the caregiver
    """
    assistant_service = services.get_assistant_service()

    try:
        result = await assistant_service.execute_action(action.model_dump(), db=db)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return ActionResult(**result)
