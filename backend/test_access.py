"""Ownership scoping of lookups for clients and administrators."""

import asyncio

import pytest

from services.access import AccessScope
from services.errors import ValidationError
from conftest import ADMIN, CLIENT, OTHER_CLIENT, make_project, make_room, new_store


async def seeded_store():
    store = await new_store()
    await store.append(make_project("PRJ-1001", client_id=CLIENT.id))
    await store.append(make_project("PRJ-1002", client_id=OTHER_CLIENT.id))
    await store.append(make_room("ROOM-2001", client_id=CLIENT.id))
    await store.append(make_room("ROOM-2002", client_id=OTHER_CLIENT.id))
    await store.append(make_project("PRJ-1003", client_id=CLIENT.id))
    return store


def lookup(requester, target=None):
    async def scenario():
        store = await seeded_store()
        try:
            return await AccessScope(store).query(requester, target)
        finally:
            await store.close()

    return asyncio.run(scenario())


@pytest.mark.parametrize("target", [None, CLIENT.id, OTHER_CLIENT.id, "CLIENT-NOBODY"])
def test_client_only_sees_own_records(target):
    result = lookup(CLIENT, target)
    assert [p.id for p in result.projects] == ["PRJ-1003", "PRJ-1001"]
    assert [r.id for r in result.rooms] == ["ROOM-2001"]
    assert all(p.client_id == CLIENT.id for p in result.projects)
    assert all(r.client_id == CLIENT.id for r in result.rooms)


def test_admin_looks_up_any_client_across_both_collections():
    result = lookup(ADMIN, OTHER_CLIENT.id)
    assert [p.id for p in result.projects] == ["PRJ-1002"]
    assert [r.id for r in result.rooms] == ["ROOM-2002"]


def test_admin_lookup_of_unknown_id_is_empty_not_error():
    result = lookup(ADMIN, "CLIENT-0000")
    assert result.projects == [] and result.rooms == []


@pytest.mark.parametrize("target", [None, "", "   "])
def test_admin_lookup_requires_a_client_id(target):
    with pytest.raises(ValidationError):
        lookup(ADMIN, target)


def test_anonymous_lookup_is_rejected():
    with pytest.raises(ValidationError):
        lookup(None, CLIENT.id)
