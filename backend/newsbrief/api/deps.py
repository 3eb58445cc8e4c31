"""Shared request dependencies for the API routers."""

from fastapi import Request

from newsbrief.services import FetchRunner, SchedulerService


def get_fetch_runner(request: Request) -> FetchRunner:
    return request.app.state.fetch_runner


def get_scheduler(request: Request) -> SchedulerService:
    return request.app.state.scheduler
