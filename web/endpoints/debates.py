"""Debate management and WebSocket endpoints."""

import logging

from fastapi import HTTPException, WebSocket, WebSocketDisconnect, APIRouter

from debate_engine.exceptions import DurationLockedError, InvalidStartError
from web.debate_manager import DebateManager
from web.debate_response import DebateResponse
from web.debate_setup_request import DebateSetupRequest, DurationRequest, StartDebateRequest
from web.message_response import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
ws_router = APIRouter()


def setup_debate_manager() -> DebateManager:
    """Get the global debate manager."""
    # Import here to avoid circular imports
    from web import api
    return api.debate_manager


def build_debate_response(debate_manager: DebateManager, debate_id: str) -> DebateResponse:
    debate_info = debate_manager.get_debate(debate_id)
    engine = debate_info["engine"]
    config = debate_info["config"]
    session = engine.session

    return DebateResponse(
        id=debate_id,
        status=debate_manager.get_status(debate_id),
        topic=session.topic if session else None,
        participants=list(engine.participants),
        display_names={
            pid: model.display_name or pid for pid, model in config.models.items()
        },
        stances={pid: stance.value for pid, stance in session.stances.items()} if session else {},
        scores=dict(session.scores) if session else {},
        winner=session.winner if session else None,
        duration_minutes=engine.duration_minutes,
        time_remaining_seconds=engine.time_remaining_seconds,
        round_number=session.round_number if session else 0,
        message_count=len(session.messages) if session else 0,
        transcript_id=debate_info["transcript_id"],
    )


@router.post("/debates", response_model=DebateResponse)
async def create_debate(setup: DebateSetupRequest):
    """Create a new debate arena."""
    debate_manager = setup_debate_manager()
    try:
        debate_id = await debate_manager.create_debate(setup)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create debate: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return build_debate_response(debate_manager, debate_id)


@router.get("/debates/{debate_id}", response_model=DebateResponse)
async def get_debate(debate_id: str):
    """Get debate status and info."""
    return build_debate_response(setup_debate_manager(), debate_id)


@router.get("/debates/{debate_id}/messages", response_model=list[MessageResponse])
async def get_debate_messages(debate_id: str):
    """Get the conversation of the current (or last) debate in an arena."""
    session = setup_debate_manager().get_engine(debate_id).session
    if session is None:
        return []
    return [
        MessageResponse(**msg.to_dict(), word_count=len(msg.content.split()))
        for msg in list(session.messages)
    ]


@router.post("/debates/{debate_id}/start")
async def start_debate(debate_id: str, request: StartDebateRequest):
    """Start a debate."""
    debate_manager = setup_debate_manager()
    try:
        await debate_manager.start_debate(debate_id, request.topic, request.duration_minutes)
    except InvalidStartError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"status": "started", "debate_id": debate_id}


@router.put("/debates/{debate_id}/duration")
async def change_duration(debate_id: str, request: DurationRequest):
    """Change the duration used by the arena's next debate."""
    debate_manager = setup_debate_manager()
    try:
        seconds = debate_manager.change_duration(debate_id, request.minutes)
    except DurationLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"debate_id": debate_id, "duration_minutes": request.minutes, "time_remaining_seconds": seconds}


@router.post("/debates/{debate_id}/stop")
async def stop_debate(debate_id: str):
    """Stop a running debate; the winner is decided from current scores."""
    debate_manager = setup_debate_manager()
    await debate_manager.stop_debate(debate_id)
    return {"status": "stopped", "debate_id": debate_id}


@ws_router.websocket("/ws/debate/{debate_id}")
async def websocket_endpoint(websocket: WebSocket, debate_id: str):
    """WebSocket endpoint for real-time debate updates."""
    await websocket.accept()
    debate_manager = setup_debate_manager()
    debate_manager.add_connection(debate_id, websocket)

    try:
        if debate_id in debate_manager.active_debates:
            engine = debate_manager.get_engine(debate_id)
            await websocket.send_json(
                {
                    "type": "connected",
                    "debate_id": debate_id,
                    "status": debate_manager.get_status(debate_id),
                    "time_remaining_seconds": engine.time_remaining_seconds,
                }
            )

        # Keep connection alive
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        debate_manager.remove_connection(debate_id, websocket)
