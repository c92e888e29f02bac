from fastapi import APIRouter

from app.api.v1 import auth, availability, health, players, teams, time_slots


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(availability.router, prefix="/availability", tags=["availability"])
api_router.include_router(teams.router, prefix="/teams", tags=["teams"])
api_router.include_router(time_slots.router, prefix="/time-slots", tags=["time-slots"])
api_router.include_router(players.router, prefix="/players", tags=["players"])
