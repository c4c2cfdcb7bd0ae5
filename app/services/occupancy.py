"""
Room occupancy reconciliation.

A room is occupied exactly when at least one active tenant references it.
Reconciliation is a full sweep (reset every room, then mark the referenced
ones) so it also repairs drift left by earlier partial writes.
"""
from typing import Dict, Hashable, Iterable, Set


def occupied_room_ids(tenants: Iterable) -> Set[Hashable]:
    """room_id of every active tenant; tenants without a room are ignored."""
    return {
        t.room_id
        for t in tenants
        if getattr(t, "is_active", False) and getattr(t, "room_id", None) is not None
    }


def reconcile_rooms(rooms: Iterable, tenants: Iterable) -> Dict[Hashable, bool]:
    """
    Compute the is_occupied flag for every room from the current tenants.
    Prior room state is ignored on purpose: the result depends on tenants only.
    """
    occupied = occupied_room_ids(tenants)
    return {room.id: room.id in occupied for room in rooms}


def room_is_taken(tenants: Iterable, room_id, exclude_tenant_id=None) -> bool:
    """True when an active tenant other than exclude_tenant_id already references room_id."""
    return any(
        t.is_active and t.room_id == room_id and t.id != exclude_tenant_id
        for t in tenants
    )
