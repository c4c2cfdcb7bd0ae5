from typing import Generator

from fastapi import Request

from app.storage.base import RentalStore


def get_store(request: Request) -> Generator[RentalStore, None, None]:
    store = request.app.state.store_factory()
    try:
        yield store
    finally:
        store.close()
