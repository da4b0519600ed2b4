import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from settings import settings

# -------------------- Logging -------------------- #
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("crowdsolve")

# -------------------- FastAPI app -------------------- #
app = FastAPI(
    title="CrowdSolve API",
    debug=settings.DEBUG,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# -------------------- Local imports -------------------- #
from middleware import SessionGateMiddleware
from routers import auth, problems, solutions, users, admin
from utils.errors import register_error_handlers

register_error_handlers(app)

# -------------------- Middleware -------------------- #
_allowed = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
}
if settings.FRONTEND_URL:
    _allowed.add(settings.FRONTEND_URL)

app.add_middleware(SessionGateMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_allowed),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------- Health / Introspection -------------------- #
@app.get("/")
def root():
    return {"name": "CrowdSolve API", "docs": "/api/docs"}


@app.get("/health")
def health():
    return {
        "status": "healthy",
        "env": settings.ENV,
        "debug": settings.DEBUG,
    }

# -------------------- Routers -------------------- #
app.include_router(auth.router)
app.include_router(problems.router)
app.include_router(solutions.router)
app.include_router(users.router)
app.include_router(admin.router)

logger.info("CrowdSolve API ready (env=%s)", settings.ENV)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
