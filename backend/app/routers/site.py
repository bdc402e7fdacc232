# app/routers/site.py
from fastapi import APIRouter

from app.core.settings import settings
from app.lib.site_content import CARRIERS, REVIEWS

router = APIRouter(prefix="/api", tags=["site"])


@router.get("/config")
async def site_config():
    links = {
        "calendlyUrl": settings.calendly_url,
        "medicareSurveyUrl": settings.medicare_survey_url,
        "healthSherpaAgentId": settings.healthsherpa_agent_id,
        "ameritasLink": settings.ameritas_link,
        "geoBlueLink": settings.geoblue_link,
    }
    # unset links are left out of the body
    return {k: v for k, v in links.items() if v is not None}


@router.get("/reviews")
async def reviews():
    return REVIEWS


@router.get("/carriers")
async def carriers():
    return CARRIERS
