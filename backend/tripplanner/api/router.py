"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from tripplanner.api.routes import (
    auth, users, trips, itineraries, locations,
    photos, expenses, budget, places
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(trips.router)
api_router.include_router(itineraries.router)
api_router.include_router(locations.router)
api_router.include_router(photos.router)
api_router.include_router(expenses.router)
api_router.include_router(budget.router)
api_router.include_router(places.router)
