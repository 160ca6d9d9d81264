"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, bookings, cars, health, oauth2, rentals, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(oauth2.router, prefix="/oauth2", tags=["oauth2"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(cars.router, prefix="/cars", tags=["cars"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(rentals.router, prefix="/rentals", tags=["rentals"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
