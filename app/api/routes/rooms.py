from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.deps import get_store
from app.services.occupancy import room_is_taken
from app.storage.base import RentalStore
from app.schemas.room import (
    RoomCreate,
    RoomUpdate,
    RoomOut,
    RoomAvailabilityOut,
    OccupancySyncOut,
)

router = APIRouter(prefix="/rooms", tags=["rooms"])


def apply_room_filters(rooms: List[RoomOut], search: Optional[str]) -> List[RoomOut]:
    # basic search: room number / type / description
    if search:
        needle = search.strip().lower()
        rooms = [
            r for r in rooms
            if needle in r.room_number.lower()
            or needle in r.room_type.lower()
            or needle in (r.description or "").lower()
        ]
    return rooms


@router.get("", response_model=List[RoomOut])
def list_rooms(
    store: RentalStore = Depends(get_store),
    status: Optional[str] = Query(None, pattern="^(occupied|vacant)$", description="occupied|vacant"),
    floor: Optional[int] = Query(None, ge=0),
    search: Optional[str] = Query(None, description="search by number/type/description"),
):
    occupied = None if status is None else status == "occupied"
    rooms = store.list_rooms(occupied=occupied, floor=floor)
    return apply_room_filters(rooms, search)


@router.get("/availability", response_model=RoomAvailabilityOut)
def room_availability(store: RentalStore = Depends(get_store)):
    """Vacant rooms are the ones offered when a tenant is added."""
    rooms = store.list_rooms()
    available = [r for r in rooms if not r.is_occupied]
    occupied = [r for r in rooms if r.is_occupied]
    return RoomAvailabilityOut(
        total=len(rooms),
        available=len(available),
        occupied=len(occupied),
        available_rooms=available,
        occupied_rooms=occupied,
    )


@router.post("/sync-occupancy", response_model=OccupancySyncOut)
def sync_occupancy(store: RentalStore = Depends(get_store)):
    """Recompute every room's occupied flag from the active tenants."""
    return store.sync_room_occupancy()


@router.post("", response_model=RoomOut, status_code=201)
def create_room(payload: RoomCreate, store: RentalStore = Depends(get_store)):
    if store.get_room_by_number(payload.room_number) is not None:
        raise HTTPException(status_code=409, detail=f"Room {payload.room_number} already exists")
    return store.create_room(payload.model_dump())


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: int, store: RentalStore = Depends(get_store)):
    room = store.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@router.patch("/{room_id}", response_model=RoomOut)
def update_room(room_id: int, payload: RoomUpdate, store: RentalStore = Depends(get_store)):
    room = store.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    data = payload.model_dump(exclude_unset=True)
    new_number = data.get("room_number")
    if new_number and new_number != room.room_number:
        other = store.get_room_by_number(new_number)
        if other is not None and other.id != room_id:
            raise HTTPException(status_code=409, detail=f"Room {new_number} already exists")

    return store.update_room(room_id, data)


@router.delete("/{room_id}", status_code=204)
def delete_room(room_id: int, store: RentalStore = Depends(get_store)):
    room = store.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    # The stored flag can lag in demo mode, so active tenants are checked too
    if room.is_occupied or room_is_taken(store.list_tenants(active=True), room_id):
        raise HTTPException(
            status_code=409,
            detail=f"Room {room.room_number} is occupied; move the tenant out before deleting it",
        )

    store.delete_room(room_id)
    return None
