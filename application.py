import asyncio
import logging
from datetime import datetime

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from partidas.config import Settings, get_settings
from partidas.models import AblDataRequest, Coordinate, VerificationRequest, dump_abl_data
from partidas.notifications import compose
from partidas.resolver import RecordResolver
from partidas.scrapers import BrowserSession, PageFetcher
from partidas.utils.send_email import send_email

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("abl-partidas-api")

# Initialize FastAPI app
app = FastAPI(
    title="ABL Partidas API",
    description="API for looking up ABL tax records (partidas) by coordinate",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Set by run.py before serving, or by the startup hook when launched directly by uvicorn
app.state.session = None
app.state.owns_session = False
app.state.resolver = None


def attach_session(target: FastAPI, session: BrowserSession, settings: Settings) -> None:
    """Wire a started browser session into the app."""
    fetcher = PageFetcher(session, timeout_ms=settings.navigation_timeout_ms)
    target.state.session = session
    target.state.resolver = RecordResolver(fetcher, base_url=settings.cadastral_url)


def get_resolver(request: Request) -> RecordResolver:
    return request.app.state.resolver


@app.post("/fetch-abl-data")
async def fetch_abl_data(
    body: AblDataRequest,
    resolver: RecordResolver = Depends(get_resolver),
    settings: Settings = Depends(get_settings),
):
    """Resolve the partida(s) at a coordinate and email them to the caller."""
    coord = Coordinate(lat=body.lat, lng=body.lng)

    async def resolve_and_notify():
        result = await resolver.fetch_data(coord)
        if not result:
            return None
        message = compose(result, settings.logo_url, settings.reference_url)
        await send_email(body.email, message, settings)
        return result

    try:
        result = await asyncio.wait_for(resolve_and_notify(), timeout=settings.request_timeout)
    except Exception as e:
        logger.error(f"Error processing ABL request for {body.email}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error procesando la solicitud"},
        )

    if result is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "No se pudo obtener la información de la partida."},
        )

    return {"message": "Email enviado con éxito", "result": dump_abl_data(result)}


@app.post("/verification")
async def verification(
    body: VerificationRequest,
    resolver: RecordResolver = Depends(get_resolver),
    settings: Settings = Depends(get_settings),
):
    """Tell whether a partida exists at a coordinate."""
    coord = Coordinate(lat=body.lat, lng=body.lng)
    try:
        outcome = await asyncio.wait_for(resolver.verify(coord), timeout=settings.request_timeout)
    except Exception as e:
        logger.error(f"Error verifying partida at lat: {coord.lat}, lng: {coord.lng}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": "Error verificando la existencia de la partida"},
        )
    return outcome.as_response()


@app.get("/api/health")
async def health_check(request: Request):
    """Health check endpoint."""
    session = request.app.state.session
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "browser_connected": session is not None and session.is_connected,
    }


@app.on_event("startup")
async def startup_event():
    logger.info("Starting ABL Partidas API")
    if app.state.session is None:
        settings = get_settings()
        session = BrowserSession(
            headless=settings.headless, max_pages=settings.max_concurrent_pages
        )
        await session.start()
        attach_session(app, session, settings)
        app.state.owns_session = True


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down ABL Partidas API")
    if app.state.owns_session and app.state.session is not None:
        await app.state.session.stop()
        app.state.session = None
        app.state.owns_session = False


if __name__ == "__main__":
    uvicorn.run("application:app", host="0.0.0.0", port=get_settings().port)
