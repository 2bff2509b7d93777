"""System health and configuration endpoints."""

import logging

from fastapi import APIRouter

from models.providers import ProviderFactory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"isAlive": True}


@router.get("/durations")
async def get_durations():
    """Get the debate durations (minutes) an arena can be set to."""
    from web import api

    debate_config = api.debate_manager.config.debate
    return {
        "durations": debate_config.duration_choices,
        "default": debate_config.duration_minutes,
    }


@router.get("/providers")
async def get_providers():
    """Report which model providers have an API key and answer requests."""
    from web import api

    system_config = api.debate_manager.config.system
    providers = []
    for name in ProviderFactory.get_available_providers():
        provider_info = {"name": name, "configured": False, "status": "unconfigured"}
        try:
            provider = ProviderFactory.create_provider(name, system_config)
            provider_info["configured"] = provider.is_configured
            if provider.is_configured:
                provider_info["status"] = "available" if await provider.is_running() else "offline"
        except Exception as e:
            logger.debug(f"{name} provider check failed: {e}")
            provider_info["status"] = "offline"
        providers.append(provider_info)

    return {"providers": providers}
