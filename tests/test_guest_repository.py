"""
Tests for the guest repository against the SQLite fallback store
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import Settings
from app.core.exceptions import CompanionCountError, GuestNotFoundError, StoreNotInitializedError, StoreQueryError
from app.services.guest_repository import GuestRepository
from app.services.stores import COMPANIONS_COLUMN, SqlGuestStore
from app.utils.formatting import parse_timestamp

pytestmark = pytest.mark.anyio


class BrokenStore(SqlGuestStore):
    """Store whose reads fail like an unreachable backend"""

    async def list_guests(self, attendance=None):
        raise StoreQueryError("list guests", RuntimeError("connection reset"))

    async def count_guests(self, attendance):
        raise StoreQueryError("count guests", RuntimeError("connection reset"))


async def test_add_guest_attending(repository, master_list):
    """Attending guest gets the default allowance and a confirmation message"""
    guest = await repository.add_guest("Juan Pérez", "yes")

    assert guest["id"] is not None
    assert guest["name"] == "Juan Pérez"
    assert guest["attendance"] == "yes"
    assert guest[COMPANIONS_COLUMN] == 2
    assert guest["timestamp"]
    assert "2 lugares" in guest["mensaje_confirmacion"]
    assert "ustedes" in guest["mensaje_confirmacion"]

async def test_add_guest_not_attending(repository, master_list):
    """Declining guest has no companions and no message"""
    guest = await repository.add_guest("Ana López", "no")

    assert guest[COMPANIONS_COLUMN] == 0
    assert guest["mensaje_confirmacion"] is None

async def test_add_guest_not_in_master_list(repository, master_list):
    """Missing master entry does not block the RSVP"""
    guest = await repository.add_guest("Persona Desconocida", "yes")

    assert guest[COMPANIONS_COLUMN] == 2
    assert guest["mensaje_confirmacion"] is None

async def test_add_guest_strips_name(repository):
    guest = await repository.add_guest("  Ana López  ", "pending")

    assert guest["name"] == "Ana López"
    assert guest[COMPANIONS_COLUMN] == 2

async def test_add_guest_invalid_attendance(repository):
    with pytest.raises(ValueError):
        await repository.add_guest("Ana López", "maybe")

async def test_add_guest_leaves_companions_to_trigger(store):
    """With the trigger enabled the column is left empty for the database"""
    settings = Settings(SUPABASE_URL=None, SUPABASE_ANON_KEY=None, COMPANIONS_FROM_TRIGGER=True, DISPLAY_TIMEZONE="UTC")
    repository = GuestRepository(store, settings)

    guest = await repository.add_guest("Juan Pérez", "yes")

    row = await store.get_guest(guest["id"])
    assert row[COMPANIONS_COLUMN] is None
    assert guest[COMPANIONS_COLUMN] == settings.DEFAULT_COMPANIONS

async def test_lookup_failure_does_not_block_add(session_factory, test_settings):
    """A failing master lookup is treated as not found"""

    class NoMasterStore(SqlGuestStore):
        async def find_master(self, name, partial=False):
            raise StoreQueryError("find master guest", RuntimeError("timeout"))

    repository = GuestRepository(NoMasterStore(session_factory), test_settings)

    guest = await repository.add_guest("Juan Pérez", "yes")

    assert guest["mensaje_confirmacion"] is None
    assert len(await repository.get_all_guests()) == 1

async def test_get_all_guests_contains_inserted(repository):
    inserted = await repository.add_guest("Luis Martínez", "yes")

    guests = await repository.get_all_guests()

    assert len(guests) == 1
    stored = guests[0]
    assert stored["id"] == inserted["id"]
    assert stored["name"] == inserted["name"]
    assert stored["attendance"] == inserted["attendance"]
    assert stored[COMPANIONS_COLUMN] == inserted[COMPANIONS_COLUMN]
    assert stored["timestamp"] == inserted["timestamp"]

async def test_timestamps_are_utc(store):
    """Stored timestamps read back as the current UTC time, not local time"""
    before = datetime.now(timezone.utc) - timedelta(minutes=1)
    row = await store.insert_guest({"name": "Ana", "attendance": "yes", COMPANIONS_COLUMN: 2})
    updated = await store.update_guest(row["id"], {"attendance": "no"})
    after = datetime.now(timezone.utc) + timedelta(minutes=1)

    assert before <= parse_timestamp(row["created_at"]) <= after
    assert before <= parse_timestamp(updated["updated_at"]) <= after

async def test_get_all_guests_newest_first(repository):
    for name in ["Primero", "Segundo", "Tercero"]:
        await repository.add_guest(name, "yes")

    names = [guest["name"] for guest in await repository.get_all_guests()]

    assert names == ["Tercero", "Segundo", "Primero"]

async def test_confirmed_guests_are_affirmative_subset(repository):
    await repository.add_guest("Uno", "yes")
    await repository.add_guest("Dos", "no")
    await repository.add_guest("Tres", "pending")
    await repository.add_guest("Cuatro", "yes")

    all_guests = await repository.get_all_guests()
    confirmed = await repository.get_confirmed_guests()

    expected = [guest for guest in all_guests if guest["attendance"] == "yes"]
    assert confirmed == expected
    assert await repository.get_confirmed_count() == len(confirmed) == 2

async def test_confirmed_count_empty_table(repository):
    assert await repository.get_confirmed_count() == 0

async def test_update_guest(repository, master_list):
    guest = await repository.add_guest("Ana", "pending")

    updated = await repository.update_guest(guest["id"], "Ana López", "yes")

    assert updated["id"] == guest["id"]
    assert updated["name"] == "Ana López"
    assert updated["attendance"] == "yes"
    assert "1 lugar " in updated["mensaje_confirmacion"]
    assert "ti" in updated["mensaje_confirmacion"]

async def test_update_guest_declining_zeroes_companions(repository):
    guest = await repository.add_guest("Luis", "yes")

    updated = await repository.update_guest(guest["id"], "Luis", "no")

    assert updated[COMPANIONS_COLUMN] == 0
    assert updated["mensaje_confirmacion"] is None

async def test_update_guest_accepting_keeps_reduced_companions(repository):
    guest = await repository.add_guest("Luis", "yes")
    await repository.update_cantidad_acompanantes(guest["id"], 1)

    updated = await repository.update_guest(guest["id"], "Luis", "yes")

    assert updated[COMPANIONS_COLUMN] == 1

async def test_update_unknown_guest(repository):
    with pytest.raises(GuestNotFoundError):
        await repository.update_guest(9999, "Nadie", "yes")

async def test_find_guest_by_name_empty_table(repository):
    assert await repository.find_guest_by_name("Juan Pérez") is None

async def test_find_guest_by_name_exact_case_insensitive(repository):
    await repository.add_guest("Juan Pérez Morales", "yes")
    target = await repository.add_guest("Juan Pérez", "yes")

    found = await repository.find_guest_by_name("  JUAN pérez ")

    assert found is not None
    assert found["id"] == target["id"]

async def test_find_guest_by_name_partial(repository):
    target = await repository.add_guest("María Fernanda Ruiz", "no")

    found = await repository.find_guest_by_name("fernanda")

    assert found["id"] == target["id"]

async def test_find_guest_by_name_accented_capitals(repository):
    """Case folding covers non-ASCII letters on the local store too"""
    target = await repository.add_guest("ÁNGEL ÑÚÑEZ", "yes")

    assert (await repository.find_guest_by_name("ángel ñúñez"))["id"] == target["id"]
    assert (await repository.find_guest_by_name("ñúñez"))["id"] == target["id"]

async def test_find_guest_by_name_no_containment_scan(repository):
    """Unlike the master lookup, a longer query does not match a shorter name"""
    await repository.add_guest("Ana", "yes")

    assert await repository.find_guest_by_name("Ana López") is None

async def test_find_guest_by_name_literal_wildcards(repository):
    await repository.add_guest("Ana López", "yes")

    assert await repository.find_guest_by_name("%") is None
    assert await repository.find_guest_by_name("An_") is None

async def test_companion_ratchet_decreases(repository):
    guest = await repository.add_guest("Luis", "yes")

    updated = await repository.update_cantidad_acompanantes(guest["id"], 1)
    assert updated[COMPANIONS_COLUMN] == 1

    updated = await repository.update_cantidad_acompanantes(guest["id"], 1)
    assert updated[COMPANIONS_COLUMN] == 1

    updated = await repository.update_cantidad_acompanantes(guest["id"], 0)
    assert updated[COMPANIONS_COLUMN] == 0

async def test_companion_ratchet_rejects_increase(repository, store):
    guest = await repository.add_guest("Luis", "yes")
    await repository.update_cantidad_acompanantes(guest["id"], 1)

    with pytest.raises(CompanionCountError):
        await repository.update_cantidad_acompanantes(guest["id"], 2)

    row = await store.get_guest(guest["id"])
    assert row[COMPANIONS_COLUMN] == 1

async def test_companion_ratchet_sequence_non_increasing(repository, store):
    guest = await repository.add_guest("Luis", "yes")
    observed = [2]

    for requested in [2, 1, 2, 0, 1, 0]:
        try:
            await repository.update_cantidad_acompanantes(guest["id"], requested)
        except CompanionCountError:
            pass
        row = await store.get_guest(guest["id"])
        observed.append(row[COMPANIONS_COLUMN])

    assert observed == sorted(observed, reverse=True)
    assert observed[-1] == 0

@pytest.mark.parametrize("cantidad", [-1, 3, 10])
async def test_companion_ratchet_out_of_range(repository, store, cantidad):
    guest = await repository.add_guest("Luis", "yes")

    with pytest.raises(CompanionCountError):
        await repository.update_cantidad_acompanantes(guest["id"], cantidad)

    row = await store.get_guest(guest["id"])
    assert row[COMPANIONS_COLUMN] == 2

async def test_companion_ratchet_null_counts_as_default(store):
    settings = Settings(SUPABASE_URL=None, SUPABASE_ANON_KEY=None, COMPANIONS_FROM_TRIGGER=True, DISPLAY_TIMEZONE="UTC")
    repository = GuestRepository(store, settings)
    guest = await repository.add_guest("Luis", "yes")

    updated = await repository.update_cantidad_acompanantes(guest["id"], 2)

    assert updated[COMPANIONS_COLUMN] == 2

async def test_companion_ratchet_unknown_guest(repository):
    with pytest.raises(GuestNotFoundError):
        await repository.update_cantidad_acompanantes(9999, 1)

async def test_delete_guest(repository):
    keep = await repository.add_guest("Se Queda", "yes")
    gone = await repository.add_guest("Se Va", "yes")

    assert await repository.delete_guest(gone["id"]) is True

    ids = [guest["id"] for guest in await repository.get_all_guests()]
    assert ids == [keep["id"]]

    assert await repository.delete_guest(gone["id"]) is True
    assert len(await repository.get_all_guests()) == 1

async def test_store_errors_are_rethrown(session_factory, test_settings):
    repository = GuestRepository(BrokenStore(session_factory), test_settings)

    with pytest.raises(StoreQueryError):
        await repository.get_all_guests()
    with pytest.raises(StoreQueryError):
        await repository.get_confirmed_count()

@pytest.mark.parametrize("call", [
    lambda repo: repo.add_guest("Ana", "yes"),
    lambda repo: repo.get_all_guests(),
    lambda repo: repo.get_confirmed_guests(),
    lambda repo: repo.update_guest(1, "Ana", "yes"),
    lambda repo: repo.find_guest_by_name("Ana"),
    lambda repo: repo.find_invitado_maestro("Ana"),
    lambda repo: repo.update_cantidad_acompanantes(1, 0),
    lambda repo: repo.delete_guest(1),
    lambda repo: repo.get_confirmed_count(),
])
async def test_uninitialized_store_fails_fast(test_settings, call):
    repository = GuestRepository(None, test_settings)

    with pytest.raises(StoreNotInitializedError):
        await call(repository)
