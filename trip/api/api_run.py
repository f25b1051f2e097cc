from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from trip.domain.errors import BackendUnavailable, NotFound, ValidationRejected
from trip.events.web_observers import (
    start as start_event_observers, stop as stop_event_observers, get_events as get_web_events,
)
from trip.infra.Hybrid_Repository import HybridRepository
from trip.infra.Local_Store import LocalStore, LocalTransport
from trip.infra.Remote_Store import RemoteStore
from trip.infra.paths import LOCAL_STORE_PATH
from trip.infra.retention import RetentionSweeper
from trip.infra.session import SessionState
from trip.utilities.config import (
    SUPABASE_URL, SUPABASE_ANON_KEY, SUPABASE_ACCESS_TOKEN, SUPABASE_USER_ID, REMOTE_TIMEOUT_SECONDS,
    SAVE_DEBOUNCE_MS, CLEANUP_INTERVAL_MINUTES, TEMP_RETENTION_MINUTES, VERIFY_GROUP_ASSIGNMENTS,
)
from trip.api.registry import TripRegistry

# Routers
from trip.api.routes import meals, packing, shopping, todos

# Logging
logger = logging.getLogger("trip_app")


def build_repository() -> HybridRepository:
    """Wire the hybrid repository from configuration (.env / environment)."""
    store = LocalStore(LOCAL_STORE_PATH)
    session = SessionState(SUPABASE_USER_ID, SUPABASE_ACCESS_TOKEN)
    remote = None
    if SUPABASE_URL and SUPABASE_ANON_KEY:
        remote = RemoteStore(SUPABASE_URL, SUPABASE_ANON_KEY, session, timeout=REMOTE_TIMEOUT_SECONDS)
    else:
        logger.info("No remote store configured, running on the local store only")
    sweeper = RetentionSweeper(store, interval=CLEANUP_INTERVAL_MINUTES * 60,
                               retention=TEMP_RETENTION_MINUTES * 60)
    return HybridRepository(LocalTransport(store), remote, session, sweeper=sweeper,
                            verify_group_assignments=VERIFY_GROUP_ASSIGNMENTS)


def create_app(repository: Optional[HybridRepository] = None, scheduler=None) -> FastAPI:
    app = FastAPI(title="Trip Planner Data API")
    app.state.repository = repository or build_repository()
    app.state.trips = TripRegistry(app.state.repository, scheduler=scheduler, delay=SAVE_DEBOUNCE_MS / 1000)

    start_event_observers()

    app.include_router(packing.router)
    app.include_router(meals.router)
    app.include_router(shopping.router)
    app.include_router(todos.router)

    @app.exception_handler(ValidationRejected)
    def _validation_rejected(request: Request, exc: ValidationRejected):
        return JSONResponse(status_code=422, content={'detail': str(exc), 'errors': exc.details})

    @app.exception_handler(NotFound)
    def _not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={'detail': str(exc)})

    @app.exception_handler(BackendUnavailable)
    def _backend_unavailable(request: Request, exc: BackendUnavailable):
        # The data is in the local store; report success with a warning
        return JSONResponse(status_code=202, content={'saved_locally': True, 'warning': str(exc)})

    @app.on_event("shutdown")
    def _flush_pending_writes():
        """Write out debounced changes before the process exits."""
        app.state.trips.close_all()
        app.state.repository.close()
        stop_event_observers()

    @app.get('/api/sync/events')
    def api_sync_events(
        since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
    ):
        """
        Return recent sync events (fallbacks, failed saves, integrity mismatches, rollbacks).

        Client polling strategy:
            1. First call without 'since' to load the current backlog.
            2. Store 'next_cursor' from the response.
            3. Subsequent polls: /api/sync/events?since=<next_cursor>
        """
        return get_web_events(since)

    return app
