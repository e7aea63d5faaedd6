"""Liveness endpoint"""
from fastapi import APIRouter

from pricereports.api.responses import envelope

router = APIRouter()


@router.get("/ping")
async def ping():
    return envelope(200, "Pong!")
