from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import logs, settings
from seed import router as seed_router

logs.configure_logging()

app = FastAPI(title="Dashboard Seed API")

# Allow the dashboard frontend to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(seed_router.router, tags=["seed"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
