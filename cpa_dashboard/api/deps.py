"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from cpa_dashboard.services.dashboard_state import DashboardState
from cpa_dashboard.services.sync_worker import SyncWorker


def get_dashboard(request: Request) -> DashboardState:
    return request.app.state.dashboard  # type: ignore[no-any-return]


def get_sync_worker(request: Request) -> SyncWorker:
    return request.app.state.sync_worker  # type: ignore[no-any-return]


Dashboard = Annotated[DashboardState, Depends(get_dashboard)]
Worker = Annotated[SyncWorker, Depends(get_sync_worker)]
