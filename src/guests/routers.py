from fastapi import APIRouter

from .features.get_rsvp_page.router import router as get_rsvp_page_router
from .features.manage_guests.router import router as manage_guests_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(get_rsvp_page_router)
router.include_router(submit_rsvp_router)
router.include_router(manage_guests_router)
