from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from functools import partial
import logging

from database import Base, engine, SessionLocal, Settings, get_settings
from api import game, winners
from core.round_scheduler import RoundScheduler
from core.series_controller import SeriesController
from services.directory_service import ParticipantDirectory
from services.history_service import WinnerHistoryLedger
from services.participant_client import ParticipantClient
from services.reward_service import RewardDistributor
from services.signing_service import MessageSigner
from services.word_service import select_random_word, words_of_length

logger = logging.getLogger(__name__)


def build_controller(settings: Settings) -> SeriesController:
    """依設定組出遊戲主控（外部服務 client、排程器、冠軍紀錄）"""
    signer = (
        MessageSigner(settings.signing_secret)
        if settings.signing_secret else MessageSigner.generate()
    )
    scheduler = RoundScheduler(
        directory=ParticipantDirectory(settings.directory_url),
        participant_client=ParticipantClient(settings.participant_timeout_sec, signer=signer),
        round_duration=settings.round_duration_sec,
        guess_interval=settings.guess_interval_sec,
        word_length=settings.word_length,
        participant_timeout=settings.participant_timeout_sec,
    )
    return SeriesController(
        scheduler=scheduler,
        ledger=WinnerHistoryLedger(SessionLocal),
        distributor=RewardDistributor(settings.reward_service_url),
        wins_needed=settings.wins_needed,
        reward_amount=settings.reward_amount,
        max_guesses=settings.max_guesses,
        word_picker=partial(select_random_word, words_of_length(settings.word_length)),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 建立資料表並啟動遊戲迴圈
    Base.metadata.create_all(bind=engine)
    settings = get_settings()
    controller = build_controller(settings)
    app.state.controller = controller
    if settings.autostart_game:
        await controller.start()
        logger.info("Game master started")
    yield
    # Shutdown: 取消計時器並關閉 HTTP client
    await controller.aclose()


app = FastAPI(
    title="WordAIle Game Master API",
    description="Round-based multiplayer word-guessing orchestrator",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(game.router)
app.include_router(winners.router)


@app.get("/")
def root():
    return {"message": "WordAIle Game Master API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
