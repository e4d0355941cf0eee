"""Help Request Service — lifecycle rules end to end over a real database.

Tests cover:
    - create: initial status, requester from the principal, article order kept
    - create/update refuse empty article lists
    - get_all: "me" resolution, zip/status filters, includeRequester batch lookup
    - update: transition legality first, then ownership, then closed-request rule
    - idempotent and no-op updates write nothing; no-op status requests need a participant
    - concurrent updates of disjoint fields
"""

import asyncio
from uuid import uuid4

import pytest

from mutual_aid.core.domain_types import HelpRequestStatus
from mutual_aid.core.errors import (
    HelpRequestClosedError, InvalidTransitionError, OwnershipError,
    ResourceNotFoundError, ValidationError,
)
from mutual_aid.schemas.help_request import (
    HelpRequestCreate, HelpRequestFilters, HelpRequestUpdate,
)


def _create_payload(zip_code="10001", *descriptions) -> HelpRequestCreate:
    articles = [{"description": d} for d in (descriptions or ("milk",))]
    return HelpRequestCreate.model_validate({"zipCode": zip_code, "articles": articles})


def _stamp(record):
    # SQLite hands timestamps back without tzinfo
    return record.version, record.updated_at.replace(tzinfo=None)


async def _advance(service, record_id, principal, *statuses):
    for s in statuses:
        await service.update(record_id, HelpRequestUpdate(status=s), principal)


# ─── Create / Get ────────────────────────────────────────────────

async def test_create_starts_pending_for_caller(service, users, principals):
    record = await service.create(
        _create_payload("10001", "milk", "bread"), principals["alice"].user_id,
    )
    assert record.status == HelpRequestStatus.PENDING.value
    assert record.requester_id == principals["alice"].user_id
    assert record.helper_id is None
    assert [a.description for a in record.articles] == ["milk", "bread"]
    assert [a.position for a in record.articles] == [0, 1]


async def test_create_ignores_payload_requester(service, users, principals):
    payload = HelpRequestCreate.model_validate({
        "zipCode": "10001",
        "articles": [{"description": "milk"}],
        "requesterId": str(principals["bob"].user_id),
    })
    record = await service.create(payload, principals["alice"].user_id)
    assert record.requester_id == principals["alice"].user_id


async def test_create_without_articles_is_validation_error(service, users, principals):
    payload = HelpRequestCreate.model_validate({"zipCode": "10001", "articles": []})
    with pytest.raises(ValidationError) as exc_info:
        await service.create(payload, principals["alice"].user_id)
    assert exc_info.value.field == "articles"
    assert await service.get_all(HelpRequestFilters(), principals["alice"]) == []


async def test_get_unknown_returns_none(service):
    assert await service.get(uuid4()) is None


async def test_attach_requester_resolves_profile(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    await service.attach_requester(record)
    assert record.requester.first_name == "Alice"
    assert record.requester.phone == "+1 555 0100"


# ─── Listing ─────────────────────────────────────────────────────

async def test_me_filter_resolves_to_caller(service, users, principals):
    mine = await service.create(_create_payload(), principals["alice"].user_id)
    await service.create(_create_payload(), principals["bob"].user_id)

    found = await service.get_all(HelpRequestFilters(user_id="me"), principals["alice"])
    assert [r.id for r in found] == [mine.id]


async def test_explicit_user_filter(service, users, principals):
    await service.create(_create_payload(), principals["alice"].user_id)
    bobs = await service.create(_create_payload(), principals["bob"].user_id)

    found = await service.get_all(
        HelpRequestFilters(user_id=str(principals["bob"].user_id)), principals["alice"],
    )
    assert [r.id for r in found] == [bobs.id]


async def test_malformed_user_filter_is_validation_error(service, principals):
    with pytest.raises(ValidationError) as exc_info:
        await service.get_all(HelpRequestFilters(user_id="nobody"), principals["alice"])
    assert exc_info.value.field == "userId"


async def test_zip_code_filter(service, users, principals):
    alice = principals["alice"].user_id
    a = await service.create(_create_payload("10001"), alice)
    await service.create(_create_payload("55555"), alice)
    c = await service.create(_create_payload("90210"), alice)

    found = await service.get_all(
        HelpRequestFilters(zip_codes=["10001", "90210"]), principals["alice"],
    )
    assert [r.id for r in found] == [a.id, c.id]


async def test_status_filter_is_case_insensitive(service, users, principals):
    pending = await service.create(_create_payload(), principals["alice"].user_id)
    accepted = await service.create(_create_payload(), principals["alice"].user_id)
    await _advance(service, accepted.id, principals["bob"], "accepted")

    found = await service.get_all(
        HelpRequestFilters(statuses=["Pending"]), principals["carol"],
    )
    assert [r.id for r in found] == [pending.id]


async def test_unknown_status_filter_is_validation_error(service, principals):
    with pytest.raises(ValidationError) as exc_info:
        await service.get_all(HelpRequestFilters(statuses=["lost"]), principals["alice"])
    assert exc_info.value.field == "status"


async def test_include_requester_attaches_profiles(service, users, principals):
    await service.create(_create_payload(), principals["alice"].user_id)
    await service.create(_create_payload(), principals["bob"].user_id)

    found = await service.get_all(
        HelpRequestFilters(include_requester=True), principals["carol"],
    )
    assert [r.requester.first_name for r in found] == ["Alice", "Bob"]


async def test_listing_without_include_requester_has_no_profiles(service, users, principals):
    await service.create(_create_payload(), principals["alice"].user_id)
    found = await service.get_all(HelpRequestFilters(), principals["alice"])
    assert found[0].requester is None


# ─── Update: transitions ─────────────────────────────────────────

async def test_skipping_a_step_is_invalid_transition(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id

    with pytest.raises(InvalidTransitionError) as exc_info:
        await service.update(record_id, HelpRequestUpdate(status="done"), principals["alice"])
    assert exc_info.value.from_status == "pending"
    assert exc_info.value.to_status == "done"

    updated = await service.update(
        record_id, HelpRequestUpdate(status="accepted"), principals["bob"],
    )
    assert updated.status == "accepted"
    assert updated.helper_id == principals["bob"].user_id


async def test_full_lifecycle(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    await _advance(service, record_id, principals["bob"], "accepted", "shopping", "delivered")
    done = await service.update(record_id, HelpRequestUpdate(status="done"), principals["alice"])
    assert done.status == "done"


async def test_terminal_request_accepts_no_transition(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    await _advance(service, record_id, principals["alice"], "cancelled")

    for target in ("pending", "accepted", "done"):
        with pytest.raises(InvalidTransitionError):
            await service.update(record_id, HelpRequestUpdate(status=target), principals["alice"])


async def test_same_status_is_noop(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    updated = await service.update(
        record_id, HelpRequestUpdate(status="pending"), principals["alice"],
    )
    assert updated.status == "pending"


# ─── Update: ownership ───────────────────────────────────────────

async def test_requester_cannot_accept_own_request(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(status="accepted"), principals["alice"])


async def test_only_helper_moves_to_shopping(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    await _advance(service, record_id, principals["bob"], "accepted")

    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(status="shopping"), principals["carol"])
    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(status="shopping"), principals["alice"])


async def test_stranger_cannot_cancel(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(status="cancelled"), principals["carol"])


async def test_helper_can_cancel(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    await _advance(service, record_id, principals["bob"], "accepted")
    updated = await service.update(
        record_id, HelpRequestUpdate(status="cancelled"), principals["bob"],
    )
    assert updated.status == "cancelled"


async def test_stranger_cannot_edit_zip_code(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(zip_code="90210"), principals["bob"])

    reloaded = await service.get(record_id)
    assert reloaded.zip_code == "10001"


async def test_closed_request_content_is_frozen(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    await _advance(service, record_id, principals["alice"], "cancelled")
    with pytest.raises(HelpRequestClosedError):
        await service.update(record_id, HelpRequestUpdate(zip_code="90210"), principals["alice"])


# ─── Update: no-op requests ─────────────────────────────────────

async def test_empty_update_writes_nothing(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    before = _stamp(record)

    unchanged = await service.update(record_id, HelpRequestUpdate(), principals["carol"])
    assert _stamp(unchanged) == before


async def test_stranger_cannot_repeat_current_status(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id

    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(status="pending"), principals["carol"])

    reloaded = await service.get(record_id)
    assert reloaded.version == 1


async def test_second_helper_cannot_accept(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    await _advance(service, record_id, principals["bob"], "accepted")

    with pytest.raises(OwnershipError):
        await service.update(record_id, HelpRequestUpdate(status="accepted"), principals["carol"])

    reloaded = await service.get(record_id)
    assert reloaded.helper_id == principals["bob"].user_id
    assert reloaded.version == 2


async def test_helper_repeating_status_is_noop(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    accepted = await service.update(
        record_id, HelpRequestUpdate(status="accepted"), principals["bob"],
    )
    before = _stamp(accepted)

    again = await service.update(
        record_id, HelpRequestUpdate(status="accepted"), principals["bob"],
    )
    assert again.status == "accepted"
    assert _stamp(again) == before


# ─── Update: content ─────────────────────────────────────────────

async def test_zip_code_update_is_idempotent(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    payload = HelpRequestUpdate(zip_code="90210")

    first = await service.update(record_id, payload, principals["alice"])
    first_state = (first.zip_code, first.status, *_stamp(first))
    second = await service.update(record_id, payload, principals["alice"])
    assert (second.zip_code, second.status, *_stamp(second)) == first_state
    assert first_state[:3] == ("90210", "pending", 2)


async def test_articles_update_replaces_list(service, users, principals):
    record = await service.create(_create_payload("10001", "milk"), principals["alice"].user_id)
    record_id = record.id
    payload = HelpRequestUpdate.model_validate(
        {"articles": [{"description": "eggs", "quantity": 12}]},
    )
    updated = await service.update(record_id, payload, principals["alice"])
    assert [(a.description, a.quantity) for a in updated.articles] == [("eggs", 12)]


async def test_empty_articles_update_is_validation_error(service, users, principals):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id
    with pytest.raises(ValidationError):
        await service.update(record_id, HelpRequestUpdate(articles=[]), principals["alice"])


async def test_update_unknown_id_is_not_found(service, principals):
    with pytest.raises(ResourceNotFoundError):
        await service.update(uuid4(), HelpRequestUpdate(zip_code="90210"), principals["alice"])


async def test_concurrent_disjoint_updates_both_apply(
    service, users, principals, test_session_factory, service_factory,
):
    record = await service.create(_create_payload(), principals["alice"].user_id)
    record_id = record.id

    async with test_session_factory() as s1, test_session_factory() as s2:
        requester_side = service_factory(s1)
        helper_side = service_factory(s2)
        await asyncio.gather(
            requester_side.update(
                record_id, HelpRequestUpdate(zip_code="90210"), principals["alice"],
            ),
            helper_side.update(
                record_id, HelpRequestUpdate(status="accepted"), principals["bob"],
            ),
        )

    async with test_session_factory() as fresh:
        final = await service_factory(fresh).get(record_id)
        assert final.zip_code == "90210"
        assert final.status == "accepted"
        assert final.helper_id == principals["bob"].user_id
