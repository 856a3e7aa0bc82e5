"""
Journey tracking API.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.core.deps import get_billing, get_store
from app.journey import machine
from app.journey.stats import compute_stats, days_active, journey_progress
from app.journey.steps import STEP_NAMES, step_guidance
from app.users.aggregate import complete_resource, count_journeys, list_journeys, require_journey
from app.users.domain import JOURNEY_ACTIVE, JOURNEY_COMPLETED, Journey
from app.users.store import UserStore

router = APIRouter(prefix="/api/journeys", tags=["journeys"])


class StartJourneyIn(BaseModel):
    userId: Optional[int] = None
    resentmentDescription: Optional[str] = None


class StepUpdateIn(BaseModel):
    userId: Optional[int] = None
    stepNumber: Optional[int] = None
    completed: bool = False


class UserRefIn(BaseModel):
    userId: Optional[int] = None


class CompleteResourceIn(BaseModel):
    userId: Optional[int] = None
    resourceId: Optional[str] = None
    resourceName: Optional[str] = None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _journey_summary(journey: Journey) -> dict:
    return {
        "journeyNumber": journey.journey_number,
        "resentmentDescription": journey.resentment_description,
        "currentStep": journey.current_step,
        "completedSteps": list(journey.completed_steps),
        "status": journey.status,
        "startDate": _iso(journey.start_date),
        "completedDate": _iso(journey.completed_date),
        "progress": journey_progress(journey),
    }


# =========================
# START / UPDATE
# =========================
@router.post("/start")
def start_journey(
    body: StartJourneyIn,
    store: UserStore = Depends(get_store),
    billing=Depends(get_billing),
):
    user = store.require(body.userId)
    journey = machine.start(user, body.resentmentDescription, billing.has_premium_access(user))
    store.save(user)

    return {
        "success": True,
        "message": "Journey started successfully",
        "journey": {
            "journeyNumber": journey.journey_number,
            "resentmentDescription": journey.resentment_description,
            "currentStep": journey.current_step,
            "completedSteps": list(journey.completed_steps),
            "status": journey.status,
            "startDate": _iso(journey.start_date),
        },
    }


@router.put("/{journey_number}/step")
def update_journey_step(
    journey_number: int,
    body: StepUpdateIn,
    store: UserStore = Depends(get_store),
):
    user = store.require(body.userId)
    journey = require_journey(user, journey_number)
    machine.advance_step(user, journey, body.stepNumber, body.completed)
    store.save(user)

    return {
        "success": True,
        "journey": {
            "journeyNumber": journey.journey_number,
            "currentStep": journey.current_step,
            "completedSteps": list(journey.completed_steps),
            "status": journey.status,
            "isComplete": journey.status == JOURNEY_COMPLETED,
            "completedDate": _iso(journey.completed_date),
        },
    }


@router.put("/{journey_number}/pause")
def pause_journey(
    journey_number: int,
    body: UserRefIn,
    store: UserStore = Depends(get_store),
):
    user = store.require(body.userId)
    journey = require_journey(user, journey_number)
    machine.pause(user, journey)
    store.save(user)

    return {
        "success": True,
        "message": "Journey paused",
        "journey": {"journeyNumber": journey.journey_number, "status": journey.status},
    }


@router.put("/{journey_number}/resume")
def resume_journey(
    journey_number: int,
    body: UserRefIn,
    store: UserStore = Depends(get_store),
):
    user = store.require(body.userId)
    journey = require_journey(user, journey_number)
    machine.resume(user, journey)
    store.save(user)

    return {
        "success": True,
        "message": "Journey resumed",
        "journey": {
            "journeyNumber": journey.journey_number,
            "status": journey.status,
            "currentStep": journey.current_step,
        },
    }


@router.post("/complete-resource")
def complete_resource_route(
    body: CompleteResourceIn,
    store: UserStore = Depends(get_store),
):
    user = store.require(body.userId)
    resource = complete_resource(user, body.resourceId, body.resourceName or "")
    store.save(user)

    return {
        "success": True,
        "message": "Resource marked as completed",
        "resource": {
            "resourceId": resource.resource_id,
            "resourceName": resource.resource_name,
            "timesCompleted": resource.times_completed,
        },
        "totalCompleted": user.stats.total_resources_completed,
    }


# =========================
# READ
# =========================
@router.get("/steps/{step_number}")
def get_step_guidance(step_number: int):
    """Static guidance text for one RELEASE step."""
    return {"success": True, "guidance": step_guidance(step_number)}


@router.get("/{user_id}")
def get_journeys(
    user_id: int,
    status: Optional[str] = Query(None, description="active, paused, completed, or all"),
    store: UserStore = Depends(get_store),
):
    user = store.require(user_id)
    journeys = list_journeys(user, status)

    return {
        "success": True,
        "journeys": [_journey_summary(j) for j in journeys],
        "stats": {
            "total": len(user.journeys),
            "active": count_journeys(user, JOURNEY_ACTIVE),
            "completed": count_journeys(user, JOURNEY_COMPLETED),
        },
    }


@router.get("/{user_id}/stats")
def get_journey_stats(user_id: int, store: UserStore = Depends(get_store)):
    user = store.require(user_id)
    return {"success": True, "stats": compute_stats(user)}


@router.get("/{user_id}/{journey_number}")
def get_journey(user_id: int, journey_number: int, store: UserStore = Depends(get_store)):
    user = store.require(user_id)
    journey = require_journey(user, journey_number)

    return {
        "success": True,
        "journey": {
            "journeyNumber": journey.journey_number,
            "resentmentDescription": journey.resentment_description,
            "currentStep": {
                "number": journey.current_step,
                "name": STEP_NAMES[journey.current_step - 1],
            },
            "completedSteps": [
                {"number": n, "name": STEP_NAMES[n - 1]} for n in journey.completed_steps
            ],
            "status": journey.status,
            "startDate": _iso(journey.start_date),
            "completedDate": _iso(journey.completed_date),
            "progress": journey_progress(journey),
            "daysActive": days_active(journey),
        },
    }
