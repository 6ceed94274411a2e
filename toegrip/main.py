# main.py
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from toegrip.config import config
from toegrip.utils.logging_utils import logger
from toegrip.services.game_service import game_service
from toegrip.models.schemas import GameSnapshot, SessionRecord, TickRequest, TickResponse

logger.info(f"Starting in: {config.mode_description}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the game instance and log the session settings"""
    game_service.initialize()
    logger.info(f"Session length: {config.session_duration_s:.0f}s, curl threshold: {config.curl_threshold_deg}°")
    yield

# Initialize FastAPI application with dynamic title based on mode
app = FastAPI(title=f"Toe Grip Game Backend - {config.mode_description}", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

@app.post("/marker/found")
def marker_found():
    """Tracking collaborator reports the marker came into view"""
    game_service.marker_found()
    return {"status": "queued"}

@app.post("/marker/lost")
def marker_lost():
    game_service.marker_lost()
    return {"status": "queued"}

@app.post("/restart")
def restart():
    """Restart request from the game-over screen; applied on the next tick"""
    game_service.restart()
    return {"status": "queued"}

@app.post("/tick", response_model=TickResponse)
def tick(sample: TickRequest):
    """
    Core endpoint, called once per display frame.
    Applies buffered signals, advances the game by one tick and returns
    display values, emitted events and pending scene commands.
    """
    try:
        return game_service.tick(sample)
    except Exception as e:
        logger.error(f"Error processing tick: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/state", response_model=GameSnapshot)
def state():
    try:
        return game_service.snapshot()
    except Exception as e:
        logger.error(f"Error building snapshot: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/history", response_model=List[SessionRecord])
def history():
    """Most recent finished sessions, oldest first"""
    return game_service.load_history()

@app.get("/health")
def health_check():
    """Simple health check endpoint for service monitoring"""
    return {"status": "healthy", "state": game_service.controller.state.value if game_service.controller else None}
