"""
Guest repository: RSVP CRUD, master list lookups and derived aggregates
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, settings as default_settings
from app.core.db import init_db, make_engine
from app.core.exceptions import CompanionCountError, GuestNotFoundError, StoreNotInitializedError, StoreQueryError
from app.schemas.guest import Attendance
from app.services.matching import MasterLookupResult, MatchPipeline
from app.services.messages import generar_mensaje_confirmacion
from app.services.stores import COMPANIONS_COLUMN, GuestStore, Row, SqlGuestStore, SupabaseGuestStore
from app.services.supabase_client import create_supabase_client
from app.utils.formatting import format_timestamp

logger = logging.getLogger(__name__)


class GuestRepository:
    """Façade over a GuestStore.

    The store is injected; ``None`` stands for a client that could not be
    initialized, in which case every operation fails before touching the
    network.
    """

    def __init__(
        self,
        store: Optional[GuestStore],
        settings: Settings = default_settings,
        matcher: Optional[MatchPipeline] = None,
    ):
        self.store = store
        self.settings = settings
        self.matcher = matcher or MatchPipeline()

    def _require_store(self) -> GuestStore:
        if self.store is None:
            raise StoreNotInitializedError()
        return self.store

    def _to_display(self, row: Row, timestamp_field: str = "created_at") -> Dict[str, Any]:
        companions = row.get(COMPANIONS_COLUMN)
        return {
            "id": row["id"],
            "name": row["name"],
            "attendance": row["attendance"],
            COMPANIONS_COLUMN: self.settings.DEFAULT_COMPANIONS if companions is None else companions,
            "timestamp": format_timestamp(
                row.get(timestamp_field) or row.get("created_at"), self.settings.DISPLAY_TIMEZONE
            ),
        }

    def _companions_for(self, attendance: str) -> Optional[int]:
        """Companion allowance to write, or None to leave it to the database trigger"""
        if attendance == Attendance.NO.value:
            return 0
        if attendance == Attendance.YES.value and self.settings.COMPANIONS_FROM_TRIGGER:
            return None
        return self.settings.DEFAULT_COMPANIONS

    async def _confirmation_message(self, name: str, attendance: str) -> Optional[str]:
        if attendance != Attendance.YES.value:
            return None
        result = await self.lookup_invitado_maestro(name)
        if not result.found:
            return None
        entry = result.entry
        return generar_mensaje_confirmacion(entry["name"], entry.get("pases") or 0)

    async def add_guest(self, name: str, attendance) -> Dict[str, Any]:
        """Insert a new RSVP and attach a confirmation message when attending"""
        store = self._require_store()
        attendance = Attendance(attendance).value
        name = name.strip()

        fields: Row = {"name": name, "attendance": attendance}
        companions = self._companions_for(attendance)
        if companions is not None:
            fields[COMPANIONS_COLUMN] = companions

        try:
            row = await store.insert_guest(fields)
        except StoreQueryError as e:
            logger.error("Error adding guest %r: %s", name, e)
            raise

        guest = self._to_display(row)
        guest["mensaje_confirmacion"] = await self._confirmation_message(name, attendance)
        logger.info("Guest %s recorded with attendance %s", guest["id"], attendance)
        return guest

    async def get_all_guests(self) -> List[Dict[str, Any]]:
        store = self._require_store()
        try:
            rows = await store.list_guests()
        except StoreQueryError as e:
            logger.error("Error fetching guests: %s", e)
            raise
        return [self._to_display(row) for row in rows]

    async def get_confirmed_guests(self) -> List[Dict[str, Any]]:
        store = self._require_store()
        try:
            rows = await store.list_guests(attendance=Attendance.YES.value)
        except StoreQueryError as e:
            logger.error("Error fetching confirmed guests: %s", e)
            raise
        return [self._to_display(row) for row in rows]

    async def update_guest(self, guest_id: Any, name: str, attendance) -> Dict[str, Any]:
        """Replace name and attendance of an existing RSVP.

        Declining zeroes the companion allowance. Accepting again keeps the
        stored allowance, so a ratcheted-down value is not restored here.
        """
        store = self._require_store()
        attendance = Attendance(attendance).value
        name = name.strip()

        fields: Row = {"name": name, "attendance": attendance}
        if attendance == Attendance.NO.value:
            fields[COMPANIONS_COLUMN] = 0

        try:
            row = await store.update_guest(guest_id, fields)
        except StoreQueryError as e:
            logger.error("Error updating guest %s: %s", guest_id, e)
            raise
        if row is None:
            raise GuestNotFoundError(guest_id)

        guest = self._to_display(row, timestamp_field="updated_at")
        guest["mensaje_confirmacion"] = await self._confirmation_message(name, attendance)
        return guest

    async def find_guest_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Exact case-insensitive match first, then a substring match"""
        store = self._require_store()
        search_name = (name or "").strip()
        if not search_name:
            return None

        try:
            row = await store.find_guest(search_name, partial=False)
            if row is None:
                row = await store.find_guest(search_name, partial=True)
        except StoreQueryError as e:
            logger.error("Error searching guest %r: %s", search_name, e)
            raise

        return self._to_display(row) if row else None

    async def lookup_invitado_maestro(self, name: str) -> MasterLookupResult:
        """Search the master list, reporting not-found and backend errors separately"""
        store = self._require_store()
        return await self.matcher.run(store, name)

    async def find_invitado_maestro(self, name: str) -> Optional[Row]:
        """Master list entry for ``name``; None when missing or when the lookup failed"""
        result = await self.lookup_invitado_maestro(name)
        if result.error is not None:
            logger.warning("Master guest lookup for %r treated as not found", name)
        return result.entry if result.found else None

    async def update_cantidad_acompanantes(self, guest_id: Any, cantidad: int) -> Dict[str, Any]:
        """Lower the companion allowance. Raising it is rejected."""
        store = self._require_store()

        if isinstance(cantidad, bool) or not isinstance(cantidad, int):
            raise CompanionCountError("La cantidad de acompañantes debe ser un número entero")
        if cantidad < 0 or cantidad > self.settings.MAX_COMPANIONS:
            raise CompanionCountError(
                f"La cantidad de acompañantes debe estar entre 0 y {self.settings.MAX_COMPANIONS}"
            )

        try:
            current = await store.get_guest(guest_id)
            if current is None:
                raise GuestNotFoundError(guest_id)

            current_count = current.get(COMPANIONS_COLUMN)
            if current_count is None:
                current_count = self.settings.DEFAULT_COMPANIONS
            if cantidad > current_count:
                raise CompanionCountError(
                    "No se puede aumentar la cantidad de acompañantes. Solo se permite disminuir."
                )

            row = await store.update_guest(guest_id, {COMPANIONS_COLUMN: cantidad})
        except StoreQueryError as e:
            logger.error("Error updating companions of guest %s: %s", guest_id, e)
            raise
        if row is None:
            raise GuestNotFoundError(guest_id)

        return self._to_display(row, timestamp_field="updated_at")

    async def delete_guest(self, guest_id: Any) -> bool:
        store = self._require_store()
        try:
            await store.delete_guest(guest_id)
        except StoreQueryError as e:
            logger.error("Error deleting guest %s: %s", guest_id, e)
            raise
        return True

    async def get_confirmed_count(self) -> int:
        store = self._require_store()
        try:
            count = await store.count_guests(Attendance.YES.value)
        except StoreQueryError as e:
            logger.error("Error counting confirmed guests: %s", e)
            raise
        return count or 0

    @staticmethod
    def generar_mensaje_confirmacion(name: str, pases: int) -> str:
        return generar_mensaje_confirmacion(name, pases)


def get_guest_repository(request: Request) -> GuestRepository:
    """FastAPI dependency: repository built during the application lifespan"""
    repository = getattr(request.app.state, "guest_repository", None)
    if repository is None:
        return GuestRepository(None)
    return repository


async def build_guest_repository(settings: Settings = default_settings) -> GuestRepository:
    """Pick the backing store: Supabase when configured, else the local fallback"""
    client = await create_supabase_client(settings)
    if client is not None:
        store: Optional[GuestStore] = SupabaseGuestStore(
            client,
            guests_table=settings.GUESTS_TABLE,
            master_table=settings.MASTER_TABLE,
        )
    elif settings.USE_LOCAL_FALLBACK:
        logger.warning("Supabase not available. Using local database %s as fallback", settings.DATABASE_URL)
        engine = make_engine(settings.DATABASE_URL)
        init_db(bind=engine)
        store = SqlGuestStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    else:
        logger.warning("No guest store available; RSVP operations will fail until Supabase is configured")
        store = None
    return GuestRepository(store, settings)
