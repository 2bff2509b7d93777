"""Transcript management endpoints."""

import logging

from fastapi import HTTPException, APIRouter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_transcript_manager():
    from web import api
    return api.debate_manager.transcript_manager


@router.get("/transcripts")
async def get_transcripts(page: int = 1, limit: int = 20):
    """Get paginated list of saved transcripts from SQLite database."""
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = 20
    offset = (page - 1) * limit

    try:
        transcript_manager = get_transcript_manager()
        transcripts = transcript_manager.list_transcripts(limit=limit, offset=offset)
        total_count = transcript_manager.get_debate_count()
    except Exception as e:
        logger.error(f"Failed to get transcripts: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "transcripts": transcripts,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total_count,
            "total_pages": (total_count + limit - 1) // limit,
            "has_next": offset + limit < total_count,
            "has_prev": page > 1,
        },
    }


@router.get("/transcripts/{transcript_id}")
async def get_transcript(transcript_id: int):
    """Get a specific transcript by ID with full message content."""
    transcript_data = get_transcript_manager().load_transcript(transcript_id)
    if not transcript_data:
        raise HTTPException(status_code=404, detail="Transcript not found")
    return transcript_data
