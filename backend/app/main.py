# backend/app/main.py
from fastapi import FastAPI

from backend.app.api.session import router as session_router

app = FastAPI(title="inbox-autolabel API")
app.include_router(session_router, prefix="/api")


@app.get("/api/health", include_in_schema=False)
def health() -> dict:
    return {"ok": True}
