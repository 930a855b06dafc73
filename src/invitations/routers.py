from fastapi import APIRouter

from .features.manage_invitation.router import router as manage_invitation_router
from .features.public_invitation.router import router as public_invitation_router

router = APIRouter()

router.include_router(public_invitation_router)
router.include_router(manage_invitation_router)
