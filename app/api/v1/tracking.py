"""
Truck tracking and EcoHelper chat API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account, require_household, require_staff
from app.application.accounts import UpdateLocationUseCase, AccountValidationError
from app.application.assistant import get_chatbot_response, get_eta, GREETING
from app.domain.account import ROLE_DRIVER
from app.domain.clock import utcnow
from app.domain.tracking import find_active_driver
from app.infrastructure.db.repositories import AccountRepository


router = APIRouter(prefix="/api/v1/tracking", tags=["tracking"])


class LocationRequest(BaseModel):
    lat: float
    lng: float


class ChatRequest(BaseModel):
    prompt: str = Field(min_length=1)


@router.post("/location")
def update_location(request: Request, req: LocationRequest, db: Session = Depends(get_db)):
    """Staff device reports its position."""
    account = require_staff(request, db)
    try:
        account = UpdateLocationUseCase(db).execute(account.household_id, req.lat, req.lng)
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"lat": account.last_location_lat, "lng": account.last_location_lng, "at": account.last_location_at}


@router.get("/driver")
def active_driver(
    request: Request,
    db: Session = Depends(get_db),
    lat: float | None = None,
    lng: float | None = None,
):
    """
    Driver that reported a location in the last 15 minutes.

    ETA is included when the household position (lat/lng) is given.
    """
    require_household(request, db)
    driver = find_active_driver(AccountRepository(db).list_by_role(ROLE_DRIVER), utcnow())
    if not driver:
        return {"active": False, "driver": None, "eta": None}

    eta = None
    if lat is not None and lng is not None:
        eta = get_eta((driver.last_location_lat, driver.last_location_lng), (lat, lng))

    return {
        "active": True,
        "driver": {
            "name": driver.name,
            "lat": driver.last_location_lat,
            "lng": driver.last_location_lng,
            "at": driver.last_location_at,
        },
        "eta": eta,
    }


@router.get("/chat")
def chat_greeting():
    return {"reply": GREETING}


@router.post("/chat")
def chat(request: Request, req: ChatRequest, db: Session = Depends(get_db)):
    get_current_account(request, db)
    return {"reply": get_chatbot_response(req.prompt)}
