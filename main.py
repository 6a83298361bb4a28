from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import socket

from store import settings
from schemas import StatusResponse
from api import players, flag, match
from services.network_service import get_local_ips

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 顯示區網網址，方便其他裝置連線
    logger.info(f"Server listening on http://{settings.host}:{settings.port}")
    ips = get_local_ips()
    if ips:
        logger.info("You can open the site from another device on the same network at:")
        for ip in ips:
            logger.info(f"  http://{ip}:{settings.port}")
    else:
        logger.info(
            "No non-local IP found. If you want to access from other devices, "
            "ensure this machine is on the network."
        )
    yield


app = FastAPI(
    title="Capture The Flag API",
    description="In-memory match state server for LAN capture-the-flag games",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """請求格式錯誤一律回 400（而不是 FastAPI 預設的 422）"""
    logger.warning(f"Invalid request body: {request.method} {request.url.path} - {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(players.router)
app.include_router(flag.router)
app.include_router(match.router)


@app.get("/status", response_model=StatusResponse)
def status_check():
    return StatusResponse(ok=True, hostname=socket.gethostname())


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)
