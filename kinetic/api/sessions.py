"""Exercise session API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from kinetic.engine import Exercise, FrameProcessor, SessionFinishedError, UnsupportedExerciseError
from kinetic.schemas.session import (
    ExerciseInfo,
    ExerciseSelect,
    FrameIn,
    FrameResultResponse,
    SessionStatusResponse,
    SessionSummaryResponse,
)
from kinetic.services.session_registry import (
    RegistryFullError,
    SessionNotFoundError,
    SessionRegistry,
    get_session_registry,
)


router = APIRouter()


def _status(session_id: str, processor: FrameProcessor) -> SessionStatusResponse:
    return SessionStatusResponse(session_id=session_id, **processor.snapshot())


def _run(registry: SessionRegistry, session_id: str, operation):
    """Run an operation on a live session, mapping engine errors to HTTP errors."""
    try:
        return registry.run(session_id, operation)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
    except SessionFinishedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Session already finished"
        )
    except UnsupportedExerciseError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )


@router.get("/exercises", response_model=List[ExerciseInfo])
def list_exercises():
    """List selectable exercises and how each is scored."""
    return [ExerciseInfo(name=e.display_name, family=e.family.value) for e in Exercise]


@router.post("", response_model=SessionStatusResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    body: ExerciseSelect,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Start a new exercise session."""
    try:
        session = registry.create(body.exercise)
    except UnsupportedExerciseError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except RegistryFullError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )

    return _run(registry, session.session_id, lambda p: _status(session.session_id, p))


@router.get("/{session_id}", response_model=SessionStatusResponse)
def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Get live session state."""
    return _run(registry, session_id, lambda p: _status(session_id, p))


@router.put("/{session_id}/exercise", response_model=SessionStatusResponse)
def select_exercise(
    session_id: str,
    body: ExerciseSelect,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Switch exercise. Phase and all session counters are reset."""
    def operation(processor: FrameProcessor) -> SessionStatusResponse:
        processor.select_exercise(body.exercise)
        return _status(session_id, processor)

    return _run(registry, session_id, operation)


@router.post("/{session_id}/frames", response_model=FrameResultResponse)
def submit_frame(
    session_id: str,
    body: FrameIn,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Process one landmark frame."""
    frame = body.to_frame()

    def operation(processor: FrameProcessor) -> FrameResultResponse:
        result = processor.process(frame)
        if result is None:
            stats = processor.stats
            return FrameResultResponse(
                skipped=True,
                exercise=processor.exercise.display_name,
                phase=processor.phase.value,
                rep_count=stats.rep_count,
                hold_seconds=stats.hold_seconds,
            )
        return FrameResultResponse(**result.to_dict())

    return _run(registry, session_id, operation)


@router.post("/{session_id}/finish", response_model=SessionSummaryResponse)
def finish_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """End the session and return its summary. The session is then discarded."""
    summary = _run(registry, session_id, lambda p: p.finish())
    registry.remove(session_id)
    return SessionSummaryResponse(session_id=session_id, **summary.to_dict())
