"""
Store layer abstracting the guest tables (Supabase vs local SQLAlchemy fallback).

Rows cross this boundary as plain dicts keyed by the remote column names, so the
repository never needs to know which backend it is talking to.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from supabase import AsyncClient

from app.core.db import utc_now
from app.core.exceptions import StoreQueryError
from app.models import MasterGuest, WeddingGuest

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

COMPANIONS_COLUMN = "cantidad_acompañante"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only matches literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def postgrest_pattern(name: str, partial: bool) -> str:
    """ilike pattern for PostgREST, which also reads `*` as `%`"""
    value = escape_like(name.replace("*", ""))
    return f"%{value}%" if partial else value


class GuestStore(ABC):
    """CRUD surface over the RSVP table plus read access to the master list"""

    @abstractmethod
    async def insert_guest(self, fields: Row) -> Row: ...

    @abstractmethod
    async def list_guests(self, attendance: Optional[str] = None) -> List[Row]: ...

    @abstractmethod
    async def get_guest(self, guest_id: Any) -> Optional[Row]: ...

    @abstractmethod
    async def update_guest(self, guest_id: Any, fields: Row) -> Optional[Row]: ...

    @abstractmethod
    async def delete_guest(self, guest_id: Any) -> None: ...

    @abstractmethod
    async def count_guests(self, attendance: str) -> int: ...

    @abstractmethod
    async def find_guest(self, name: str, partial: bool = False) -> Optional[Row]: ...

    @abstractmethod
    async def find_master(self, name: str, partial: bool = False) -> Optional[Row]: ...

    @abstractmethod
    async def list_master(self) -> List[Row]: ...


# -------- Supabase store --------

class SupabaseGuestStore(GuestStore):
    """Remote tables reached through the Supabase PostgREST client"""

    def __init__(
        self,
        client: AsyncClient,
        guests_table: str = "wedding_guests",
        master_table: str = "invitados_maestro",
    ):
        self.client = client
        self.guests_table = guests_table
        self.master_table = master_table

    def _guests(self):
        return self.client.table(self.guests_table)

    def _master(self):
        return self.client.table(self.master_table)

    @staticmethod
    async def _execute(operation: str, query):
        try:
            return await query.execute()
        except (APIError, httpx.HTTPError) as e:
            raise StoreQueryError(operation, e) from e

    @staticmethod
    def _first(response) -> Optional[Row]:
        data = response.data or []
        return data[0] if data else None

    async def insert_guest(self, fields: Row) -> Row:
        response = await self._execute("insert guest", self._guests().insert(fields))
        row = self._first(response)
        if row is None:
            # insert allowed but the row is not readable back (RLS without select)
            raise StoreQueryError("insert guest", LookupError("no row returned"))
        return row

    async def list_guests(self, attendance: Optional[str] = None) -> List[Row]:
        query = self._guests().select("*")
        if attendance is not None:
            query = query.eq("attendance", attendance)
        response = await self._execute("list guests", query.order("created_at", desc=True))
        return response.data or []

    async def get_guest(self, guest_id: Any) -> Optional[Row]:
        query = self._guests().select("*").eq("id", guest_id).limit(1)
        return self._first(await self._execute("get guest", query))

    async def update_guest(self, guest_id: Any, fields: Row) -> Optional[Row]:
        query = self._guests().update(fields).eq("id", guest_id)
        return self._first(await self._execute("update guest", query))

    async def delete_guest(self, guest_id: Any) -> None:
        await self._execute("delete guest", self._guests().delete().eq("id", guest_id))

    async def count_guests(self, attendance: str) -> int:
        query = self._guests().select("*", count="exact", head=True).eq("attendance", attendance)
        response = await self._execute("count guests", query)
        return response.count or 0

    async def find_guest(self, name: str, partial: bool = False) -> Optional[Row]:
        pattern = postgrest_pattern(name, partial)
        query = self._guests().select("*").ilike("name", pattern).limit(1)
        return self._first(await self._execute("find guest", query))

    async def find_master(self, name: str, partial: bool = False) -> Optional[Row]:
        pattern = postgrest_pattern(name, partial)
        query = self._master().select("*").ilike("name", pattern).limit(1)
        return self._first(await self._execute("find master guest", query))

    async def list_master(self) -> List[Row]:
        response = await self._execute("list master guests", self._master().select("*"))
        return response.data or []


# -------- SQLAlchemy fallback store --------

class SqlGuestStore(GuestStore):
    """Local fallback used when the remote client cannot be initialized"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, operation: str):
        db: Session = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreQueryError(operation, e) from e
        finally:
            db.close()

    @staticmethod
    def _name_filter(column, name: str, partial: bool):
        if partial:
            return func.lower(column).like(f"%{escape_like(name.lower())}%", escape="\\")
        return func.lower(column) == name.lower()

    async def insert_guest(self, fields: Row) -> Row:
        with self._session("insert guest") as db:
            guest = WeddingGuest(
                name=fields["name"],
                attendance=fields["attendance"],
                cantidad_acompanante=fields.get(COMPANIONS_COLUMN),
            )
            db.add(guest)
            db.flush()
            db.refresh(guest)
            return guest.to_row()

    async def list_guests(self, attendance: Optional[str] = None) -> List[Row]:
        with self._session("list guests") as db:
            query = db.query(WeddingGuest)
            if attendance is not None:
                query = query.filter(WeddingGuest.attendance == attendance)
            guests = query.order_by(WeddingGuest.created_at.desc(), WeddingGuest.id.desc()).all()
            return [guest.to_row() for guest in guests]

    async def get_guest(self, guest_id: Any) -> Optional[Row]:
        with self._session("get guest") as db:
            guest = db.query(WeddingGuest).filter(WeddingGuest.id == guest_id).first()
            return guest.to_row() if guest else None

    async def update_guest(self, guest_id: Any, fields: Row) -> Optional[Row]:
        with self._session("update guest") as db:
            guest = db.query(WeddingGuest).filter(WeddingGuest.id == guest_id).first()
            if not guest:
                return None
            if "name" in fields:
                guest.name = fields["name"]
            if "attendance" in fields:
                guest.attendance = fields["attendance"]
            if COMPANIONS_COLUMN in fields:
                guest.cantidad_acompanante = fields[COMPANIONS_COLUMN]
            guest.updated_at = utc_now()
            db.flush()
            return guest.to_row()

    async def delete_guest(self, guest_id: Any) -> None:
        with self._session("delete guest") as db:
            db.query(WeddingGuest).filter(WeddingGuest.id == guest_id).delete()

    async def count_guests(self, attendance: str) -> int:
        with self._session("count guests") as db:
            return db.query(WeddingGuest).filter(WeddingGuest.attendance == attendance).count()

    async def find_guest(self, name: str, partial: bool = False) -> Optional[Row]:
        with self._session("find guest") as db:
            guest = db.query(WeddingGuest).filter(
                self._name_filter(WeddingGuest.name, name, partial)
            ).order_by(WeddingGuest.id).first()
            return guest.to_row() if guest else None

    async def find_master(self, name: str, partial: bool = False) -> Optional[Row]:
        with self._session("find master guest") as db:
            entry = db.query(MasterGuest).filter(
                self._name_filter(MasterGuest.name, name, partial)
            ).order_by(MasterGuest.id).first()
            return entry.to_row() if entry else None

    async def list_master(self) -> List[Row]:
        with self._session("list master guests") as db:
            return [entry.to_row() for entry in db.query(MasterGuest).order_by(MasterGuest.id).all()]
