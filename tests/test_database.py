import httpx
import pytest

from drkleen.crud.admin_users import AdminUserStore
from drkleen.database import RowStore, StoreConflict, StoreError, StoreUnavailable, eq
from drkleen.errors import ErrorCode


def test_eq_lowercases_booleans():
    assert eq(True) == "eq.true"
    assert eq(False) == "eq.false"
    assert eq(5) == "eq.5"


@pytest.mark.asyncio
async def test_count_reads_content_range(row_store, fake_store):
    fake_store.seed("bookings", status="pending")
    fake_store.seed("bookings", status="done")
    assert await row_store.count("bookings") == 2
    assert await row_store.count("bookings", {"status": eq("pending")}) == 1
    assert await row_store.count("products") == 0
    await row_store.close()


@pytest.mark.asyncio
async def test_sends_service_key(row_store, fake_store):
    await row_store.select("services")
    request = fake_store.requests[-1]
    assert request.headers["apikey"] == "service-key"
    assert request.headers["authorization"] == "Bearer service-key"
    await row_store.close()


@pytest.mark.asyncio
async def test_conflict_maps_to_store_conflict(row_store, fake_store):
    await row_store.insert("admin_users", {"email": "a@example.com"})
    with pytest.raises(StoreConflict) as exc:
        await row_store.insert("admin_users", {"email": "a@example.com"})
    assert exc.value.status_code == 409
    await row_store.close()


@pytest.mark.asyncio
async def test_server_error_maps_to_store_error(row_store, fake_store):
    fake_store.failing.add("bookings")
    with pytest.raises(StoreError) as exc:
        await row_store.select("bookings")
    assert exc.value.code is ErrorCode.DATABASE_ERROR
    assert exc.value.upstream_status == 500
    await row_store.close()


@pytest.mark.asyncio
async def test_unreachable_store():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = RowStore("http://store.test", "key", transport=httpx.MockTransport(refuse))
    with pytest.raises(StoreUnavailable):
        await store.select("bookings")
    assert await store.ping() is False
    await store.close()


@pytest.mark.asyncio
async def test_delete_needs_a_filter(row_store):
    with pytest.raises(ValueError):
        await row_store.delete("bookings", {})
    await row_store.close()


@pytest.mark.asyncio
async def test_capped_insert_respects_cap(row_store, fake_store):
    accounts = AdminUserStore(row_store)
    first = await accounts.create_capped({"email": "one@example.com", "password_hash": "x", "full_name": "One"}, 2)
    second = await accounts.create_capped({"email": "two@example.com", "password_hash": "x", "full_name": "Two"}, 2)
    third = await accounts.create_capped({"email": "three@example.com", "password_hash": "x", "full_name": "Three"}, 2)

    assert first.id != second.id
    assert third is None
    assert len(fake_store.rows("admin_users")) == 2
    await row_store.close()


@pytest.mark.asyncio
async def test_capped_insert_duplicate_email(row_store):
    accounts = AdminUserStore(row_store)
    await accounts.create_capped({"email": "one@example.com", "password_hash": "x", "full_name": "One"}, 2)
    with pytest.raises(StoreConflict):
        await accounts.create_capped({"email": "one@example.com", "password_hash": "x", "full_name": "Again"}, 2)
    await row_store.close()


@pytest.mark.asyncio
async def test_account_accessor_round_trip(row_store, fake_store):
    accounts = AdminUserStore(row_store)
    created = await accounts.create({
        "email": "acc@example.com",
        "password_hash": "x",
        "full_name": "Acc",
        "is_active": False,
        "is_email_verified": False,
        "email_verification_token": "tok",
    })

    assert (await accounts.find_by_email("acc@example.com")).id == created.id
    assert (await accounts.find_by_email("ACC@example.com")) is None
    assert (await accounts.find_by_verification_token("tok")).id == created.id
    assert await accounts.count() == 1

    patched = await accounts.patch(created.id, {"is_email_verified": True})
    assert patched.is_email_verified is True
    assert patched.updated_at is not None
    # verified accounts no longer match their old token
    assert await accounts.find_by_verification_token("tok") is None

    await accounts.delete(created.id)
    assert await accounts.find_by_id(created.id) is None
    assert await accounts.patch(created.id, {"full_name": "Gone"}) is None
    await row_store.close()


@pytest.mark.asyncio
async def test_count_without_content_range_is_an_error():
    def handler(request):
        return httpx.Response(200)

    store = RowStore("http://store.test", "service-key", transport=httpx.MockTransport(handler))
    with pytest.raises(StoreError) as caught:
        await store.count("bookings")
    assert caught.value.code is ErrorCode.DATABASE_ERROR
    await store.close()
