# -*- coding: utf-8 -*-
"""
NutriPlan API

AI meal suggestions (meals, day/week plans, recipes, advice) with rate-limited
calls to the remote generator and static fallbacks.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .meals.api import router as meals_router

app = FastAPI(
    title="NutriPlan",
    description="AI meal suggestions with rate limiting and local fallbacks",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(meals_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}
