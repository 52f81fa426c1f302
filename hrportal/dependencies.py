"""Shared FastAPI dependencies."""

from typing import AsyncGenerator

from fastapi import Request

from hrportal.common.clock import Clock
from hrportal.storage import Store


async def get_store(request: Request) -> AsyncGenerator[Store, None]:
    """One Store per request from the provider chosen at startup."""
    async with request.app.state.store_provider.open() as store:
        yield store


def get_clock(request: Request) -> Clock:
    return request.app.state.clock
