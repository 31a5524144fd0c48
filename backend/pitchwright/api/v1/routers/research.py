from fastapi import APIRouter, Depends, Query

from pitchwright.api.deps import get_pipeline
from pitchwright.controllers import pitch_deck_controller
from pitchwright.core.pipeline import PitchDeckPipeline
from pitchwright.schemas.pitch_deck import ResearchInsightsRead

router = APIRouter(prefix="/research", tags=["research"])


@router.get("/insights", response_model=ResearchInsightsRead)
async def get_research_insights(
    company_name: str = Query(..., alias="companyName"),
    industry: str | None = Query(None),
    research_depth: str = Query("basic", alias="researchDepth"),
    specific_topics: list[str] = Query([], alias="specificTopics"),
    pipeline: PitchDeckPipeline = Depends(get_pipeline),
):
    """Run research and insight extraction for a company without building a deck."""
    payload = {
        "companyName": company_name,
        "industry": industry,
        "researchDepth": research_depth,
        "specificTopics": specific_topics,
    }
    return await pitch_deck_controller.research_insights(payload, pipeline)
