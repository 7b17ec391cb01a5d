from concurrent.futures import ThreadPoolExecutor

import pytest

from storefront.models import Product
from storefront.schemas import ProductUpdate
from storefront.services import ProductRepository, ProductService
from storefront.services import exceptions as service_exceptions
from storefront.services.product_service import merge_fields


def _create(session, image_store=None, **data):
    service = ProductService(session, image_store)
    return service.create_product(data=data)


@pytest.mark.parametrize(
    "incoming,expected",
    [
        ({}, {}),
        ({"name": "New"}, {"name": "New"}),
        ({"name": "", "price": 0, "images": []}, {}),
        ({"price": 12.5, "code": None}, {"price": 12.5}),
        ({"images": ["a.png"], "id": "ignored"}, {"images": ["a.png"]}),
    ],
)
def test_merge_fields_keeps_only_truthy_mutable_values(incoming, expected):
    assert merge_fields(incoming) == expected


def test_update_follows_fallback_merge_law(db_session):
    product = _create(db_session, name="Mug", code="M-1", price=9.99, categories="Kitchen")
    update = {"name": "Cup", "code": "", "price": 0, "categories": None, "reviews": "Nice"}
    before = {field: getattr(product, field) for field in update}

    service = ProductService(db_session)
    result = service.update_product(product_id=product.id, data=update)

    for field in update:
        expected = update[field] if update[field] else before[field]
        assert getattr(result, field) == expected
    assert result.id == product.id


def test_update_missing_product_writes_nothing(db_session):
    _create(db_session, name="Only")
    service = ProductService(db_session)
    with pytest.raises(service_exceptions.NotFoundError):
        service.update_product(product_id="f" * 32, data={"name": "Ghost"})
    names = [product.name for product in service.list_products()]
    assert names == ["Only"]


def test_update_with_empty_payload_is_noop(db_session):
    product = _create(db_session, name="Bowl", price=3.0)
    service = ProductService(db_session)
    result = service.update_product(product_id=product.id, data={})
    assert (result.name, result.price, result.images) == ("Bowl", 3.0, [])


def test_update_replaces_images_instead_of_appending(db_session, image_store):
    service = ProductService(db_session, image_store)
    product = service.create_product(data={"name": "Lamp"}, uploads=[("a.png", b"a"), ("b.png", b"b")])
    assert len(product.images) == 2

    payload = ProductUpdate(images="c.png").model_dump()
    result = service.update_product(product_id=product.id, data=payload)
    assert result.images == ["c.png"]


def test_updates_of_different_fields_from_stale_readers_both_survive(session_factory):
    setup = session_factory()
    product = _create(setup, name="Mug", price=9.99)
    setup.close()

    first, second = session_factory(), session_factory()
    try:
        # Both callers read the same starting record before either writes.
        ProductService(first).get_product(product.id)
        ProductService(second).get_product(product.id)

        ProductService(first).update_product(product_id=product.id, data={"price": 10})
        ProductService(second).update_product(product_id=product.id, data={"name": "X"})
    finally:
        first.close()
        second.close()

    check = session_factory()
    stored = ProductRepository(check).find_by_id(product.id)
    check.close()
    assert stored.price == 10
    assert stored.name == "X"


def test_concurrent_updates_do_not_drop_fields(session_factory):
    setup = session_factory()
    product = _create(setup, name="Mug", price=9.99)
    setup.close()

    def _update(data):
        session = session_factory()
        try:
            ProductService(session).update_product(product_id=product.id, data=data)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=2) as pool:
        list(pool.map(_update, [{"price": 10}, {"name": "X"}]))

    check = session_factory()
    stored = check.get(Product, product.id)
    check.close()
    assert (stored.name, stored.price) == ("X", 10)


def test_create_with_uploads_requires_image_store(db_session):
    service = ProductService(db_session)
    with pytest.raises(service_exceptions.StorageUnavailable):
        service.create_product(data={"name": "Cam"}, uploads=[("cam.png", b"c")])
    assert service.list_products() == []


def test_create_honours_configured_image_limit(db_session, image_store):
    service = ProductService(db_session, image_store, max_images=1)
    with pytest.raises(service_exceptions.ValidationFailure):
        service.create_product(data={}, uploads=[("a.png", b"a"), ("b.png", b"b")])


def test_patch_clears_only_sent_fields(db_session):
    product = _create(db_session, name="Chair", code="C-1", url="http://chair")
    service = ProductService(db_session)
    result = service.patch_product(product_id=product.id, data={"code": None})
    assert result.code is None
    assert result.name == "Chair"
    assert result.url == "http://chair"


def test_delete_then_get_raises_not_found(db_session):
    product = _create(db_session, name="Table")
    service = ProductService(db_session)
    deleted = service.delete_product(product_id=product.id)
    assert deleted.name == "Table"
    with pytest.raises(service_exceptions.NotFoundError):
        service.get_product(product.id)


def test_repository_rejects_malformed_ids(db_session):
    repository = ProductRepository(db_session)
    for operation in (repository.find_by_id, repository.delete_by_id):
        with pytest.raises(service_exceptions.PersistenceError):
            operation("123")
    with pytest.raises(service_exceptions.PersistenceError):
        repository.update_in_place("ZZZ", {"name": "x"})


def test_list_sees_update_committed_while_it_was_reading(session_factory):
    setup = session_factory()
    product = _create(setup, name="Fork")
    setup.close()

    reader, writer = session_factory(), session_factory()
    try:
        service = ProductService(reader)
        read_rows = service.repository.find_all

        def _read_then_update():
            rows = read_rows()
            ProductService(writer).update_product(product_id=product.id, data={"name": "Silver Fork"})
            return rows

        service.repository.find_all = _read_then_update
        assert [item.name for item in service.list_products()] == ["Fork"]

        service.repository.find_all = read_rows
        assert [item.name for item in service.list_products()] == ["Silver Fork"]
    finally:
        reader.close()
        writer.close()


def test_failed_insert_discards_stored_uploads(unreachable_session_factory, image_store):
    session = unreachable_session_factory()
    try:
        service = ProductService(session, image_store)
        with pytest.raises(service_exceptions.PersistenceError):
            service.create_product(data={"name": "Cam"}, uploads=[("a.png", b"a"), ("b.png", b"b")])
    finally:
        session.close()
    assert list(image_store.root.iterdir()) == []


def test_failed_upload_discards_earlier_uploads(db_session, image_store, monkeypatch):
    store = image_store.store

    def _store_once(contents, original_name):
        if original_name == "b.png":
            raise service_exceptions.StorageUnavailable("disk full")
        return store(contents, original_name)

    monkeypatch.setattr(image_store, "store", _store_once)
    service = ProductService(db_session, image_store)
    with pytest.raises(service_exceptions.StorageUnavailable):
        service.create_product(data={"name": "Cam"}, uploads=[("a.png", b"a"), ("b.png", b"b")])

    assert list(image_store.root.iterdir()) == []
    assert service.list_products() == []
