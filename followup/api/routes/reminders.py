"""
Follow-up reminder endpoints.

Static paths (``/due``, ``/process``, ``/poller``) are declared before ``/{reminder_id}``
so they are not captured as IDs.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from followup.api.dependencies import (
    get_locator,
    get_poller,
    get_process_use_case,
    get_rem_store,
    get_schedule_use_case,
    get_state_machine,
)
from followup.application.dto.requests import (
    CreateReminderRequest,
    PollerStartRequest,
    TransitionRequest,
)
from followup.application.dto.responses import (
    DispatchCycleResponse,
    ErrorResponse,
    PollerStatusResponse,
    ReminderListResponse,
    ReminderResponse,
    TransitionResponse,
)
from followup.application.poller import DuePoller
from followup.application.use_cases import (
    ProcessDueRemindersUseCase,
    ScheduleReminderUseCase,
)
from followup.core.entities.reminder import Reminder, ReminderStatus, utc_now
from followup.core.interfaces import IReminderStore, ReminderQuery
from followup.core.services import DispatchStateMachine, DueSetLocator

router = APIRouter(prefix="/api/follow-up-reminders", tags=["follow-up-reminders"])


def _entity_to_response(reminder: Reminder) -> ReminderResponse:
    """Convert entity to response DTO."""
    return ReminderResponse(
        id=reminder.id,
        subject_ref=reminder.subject_ref,
        title=reminder.title,
        description=reminder.description,
        priority=reminder.priority,
        owner_ref=reminder.owner_ref,
        due_at=reminder.due_at,
        status=reminder.status,
        notified_at=reminder.notified_at,
        cancelled_at=reminder.cancelled_at,
        created_at=reminder.created_at,
    )


@router.post(
    "",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_reminder(
    request: CreateReminderRequest,
    use_case: ScheduleReminderUseCase = Depends(get_schedule_use_case),
) -> ReminderResponse:
    """Schedule a new pending follow-up reminder."""
    created = await use_case.execute(
        subject_ref=request.subject_ref,
        due_at=request.due_at,
        title=request.title,
        description=request.description,
        priority=request.priority,
        owner_ref=request.owner_ref,
        reminder_id=request.id,
    )
    return _entity_to_response(created)


@router.get("", response_model=ReminderListResponse)
async def list_reminders(
    status_filter: ReminderStatus | None = Query(default=None, alias="status"),
    subject_ref: str | None = None,
    owner_ref: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: IReminderStore = Depends(get_rem_store),
) -> ReminderListResponse:
    """List reminders in due order with optional filters."""
    criteria = ReminderQuery(
        status=status_filter,
        subject_ref=subject_ref,
        owner_ref=owner_ref,
        limit=limit,
        offset=offset,
    )
    reminders = await store.query(criteria)
    return ReminderListResponse(
        reminders=[_entity_to_response(r) for r in reminders],
        total=await store.count(criteria),
    )


@router.get("/due", response_model=ReminderListResponse)
async def list_due(
    now: datetime | None = None,
    subject_ref: str | None = None,
    limit: int | None = Query(default=None, ge=1),
    locator: DueSetLocator = Depends(get_locator),
) -> ReminderListResponse:
    """
    Get the due set: pending reminders with ``due_at <= now``.

    ``now`` defaults to the server clock.
    """
    due = await locator.find_due(now or utc_now(), subject_ref=subject_ref, limit=limit)
    return ReminderListResponse(
        reminders=[_entity_to_response(r) for r in due],
        total=len(due),
    )


@router.post(
    "/process",
    response_model=DispatchCycleResponse,
    responses={503: {"model": ErrorResponse}},
)
async def process_due(
    now: datetime | None = None,
    use_case: ProcessDueRemindersUseCase = Depends(get_process_use_case),
) -> DispatchCycleResponse:
    """Run one dispatch cycle immediately."""
    result = await use_case.execute(now)
    return DispatchCycleResponse(
        due=result.due,
        notified=result.notified,
        already_notified=result.already_notified,
        skipped=result.skipped,
        delivery_failed=result.delivery_failed,
        record_failed=result.record_failed,
        notified_ids=result.notified_ids,
        failed_ids=result.failed_ids,
    )


def _poller_status(poller: DuePoller) -> PollerStatusResponse:
    return PollerStatusResponse(running=poller.running, interval_seconds=poller.interval_seconds)


@router.get("/poller", response_model=PollerStatusResponse)
async def poller_status(poller: DuePoller = Depends(get_poller)) -> PollerStatusResponse:
    """Report whether the background poller is running."""
    return _poller_status(poller)


@router.post("/poller/start", response_model=PollerStatusResponse)
async def start_poller(
    request: PollerStartRequest | None = None,
    poller: DuePoller = Depends(get_poller),
) -> PollerStatusResponse:
    """
    Start the background poller.

    Starting a running poller only applies the new interval, which takes
    effect after the current wait.
    """
    poller.start(interval_seconds=request.interval_seconds if request else None)
    return _poller_status(poller)


@router.post("/poller/stop", response_model=PollerStatusResponse)
async def stop_poller(poller: DuePoller = Depends(get_poller)) -> PollerStatusResponse:
    """Stop the background poller. Stopping a stopped poller is a no-op."""
    await poller.stop()
    return _poller_status(poller)


@router.get(
    "/{reminder_id}",
    response_model=ReminderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_reminder(
    reminder_id: str,
    store: IReminderStore = Depends(get_rem_store),
) -> ReminderResponse:
    """Get reminder by ID."""
    reminder = await store.get(reminder_id)
    if reminder is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reminder not found: {reminder_id}",
        )
    return _entity_to_response(reminder)


@router.post(
    "/{reminder_id}/mark-sent",
    response_model=TransitionResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def mark_sent(
    reminder_id: str,
    request: TransitionRequest | None = None,
    machine: DispatchStateMachine = Depends(get_state_machine),
) -> TransitionResponse:
    """
    Record that the follow-up notification was delivered.

    Repeating the call for an already-notified reminder succeeds with
    outcome ``already_notified``.
    """
    at = request.at if request and request.at else utc_now()
    outcome = await machine.mark_notified(reminder_id, at)
    return TransitionResponse(id=reminder_id, outcome=outcome, status=ReminderStatus.NOTIFIED)


@router.post(
    "/{reminder_id}/cancel",
    response_model=TransitionResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def cancel_reminder(
    reminder_id: str,
    request: TransitionRequest | None = None,
    machine: DispatchStateMachine = Depends(get_state_machine),
) -> TransitionResponse:
    """Cancel a pending reminder so it is never dispatched."""
    at = request.at if request and request.at else utc_now()
    outcome = await machine.cancel(reminder_id, at)
    return TransitionResponse(id=reminder_id, outcome=outcome, status=ReminderStatus.CANCELLED)
