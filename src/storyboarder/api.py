"""HTTP surface for storyboard generation."""

import logging
from typing import Callable, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import Field

from . import __version__
from .agents import ScenarioAgent, ScenarioInput, StoryboardAgent, StoryboardInput
from .config import config
from .models import Language, Scenario, VideoResponse, VideoScene
from .models.scenario import CamelModel
from .videos import VideoAssembler

logger = logging.getLogger(__name__)


class ScenarioRequest(CamelModel):
    pitch: str
    num_scenes: int = Field(..., ge=0)
    style: str
    language: Language


class StoryboardRequest(CamelModel):
    scenario: Scenario
    num_scenes: int = Field(..., ge=0)
    style: str
    language: Language


class ScenarioResponse(CamelModel):
    success: bool
    scenario: Optional[Scenario] = None
    error: Optional[str] = None


def scenario_agent_factory() -> Callable[[], ScenarioAgent]:
    return ScenarioAgent


def storyboard_agent_factory() -> Callable[[], StoryboardAgent]:
    return StoryboardAgent


def video_assembler_factory() -> Callable[[], VideoAssembler]:
    return VideoAssembler


app = FastAPI(title="Storyboarder API", version=__version__)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": f"Invalid request: {exc.errors()}"},
    )


@app.post("/api/scenario", response_model=ScenarioResponse, response_model_exclude_none=True)
async def generate_scenario(
    payload: ScenarioRequest,
    make_agent: Callable[[], ScenarioAgent] = Depends(scenario_agent_factory),
) -> ScenarioResponse:
    """Generate a scenario with character images from a story pitch."""
    try:
        agent = make_agent()
        scenario = await agent.run(ScenarioInput(
            pitch=payload.pitch,
            num_scenes=payload.num_scenes,
            style=payload.style,
            language=payload.language,
        ))
        return ScenarioResponse(success=True, scenario=scenario)
    except Exception as e:
        logger.error(f"Error in generateScenario: {e}")
        return ScenarioResponse(success=False, error=str(e) or "Failed to generate scenario")


@app.post("/api/storyboard", response_model=ScenarioResponse, response_model_exclude_none=True)
async def generate_storyboard(
    payload: StoryboardRequest,
    make_agent: Callable[[], StoryboardAgent] = Depends(storyboard_agent_factory),
) -> ScenarioResponse:
    """Generate illustrated scenes for an existing scenario."""
    try:
        agent = make_agent()
        scenario = await agent.run(StoryboardInput(
            scenario=payload.scenario,
            num_scenes=payload.num_scenes,
            style=payload.style,
            language=payload.language,
        ))
        return ScenarioResponse(success=True, scenario=scenario)
    except Exception as e:
        logger.error(f"Error in generateStoryboard: {e}")
        return ScenarioResponse(success=False, error=str(e) or "Failed to generate storyboard")


@app.post("/api/videos", response_model=VideoResponse, response_model_exclude_none=True)
async def generate_videos(
    scenes: List[VideoScene],
    make_assembler: Callable[[], VideoAssembler] = Depends(video_assembler_factory),
) -> VideoResponse:
    """Generate one video per scene that carries ``imageBase64``."""
    try:
        assembler = make_assembler()
        video_urls = await assembler.generate_videos(scenes)
        return VideoResponse(success=True, video_urls=video_urls)
    except Exception as e:
        logger.error(f"Error in generateVideo: {e}")
        return VideoResponse(success=False, error=str(e) or "Failed to generate video(s)")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__, "public_dir": str(config.public_dir)}
