"""Unit tests for listing creation, queries and deactivation."""

from __future__ import annotations

from pathlib import Path

import pytest

from neighborswap.application.services.listing_service import ListingService
from neighborswap.domain.errors import (
    Forbidden,
    NotFound,
    StoreError,
    UploadRejected,
    ValidationError,
)
from neighborswap.domain.filters import ListingFilter
from neighborswap.domain.models import ImageUpload


def _stored_files(upload_dir: Path) -> list:
    return sorted(upload_dir.iterdir()) if upload_dir.exists() else []


class TestCreate:
    def test_attaches_owner_projection(self, listing_service: ListingService, make_user, draft):
        owner = make_user("Alice")

        listing = listing_service.create(owner.id, draft())

        assert listing.owner_id == owner.id
        assert listing.is_active is True
        assert listing.price == 100.0
        assert listing.images == []
        assert listing.owner.name == "Alice"
        assert listing.owner.email == owner.email
        assert not hasattr(listing.owner, "password_hash")

    def test_stores_images_in_order(self, listing_service, make_user, draft, png, upload_dir):
        owner = make_user()

        listing = listing_service.create(owner.id, draft(), [png("a.png"), png("b.PNG")])

        assert len(listing.images) == 2
        assert all(ref.startswith("/uploads/") for ref in listing.images)
        assert listing.images[0] != listing.images[1]
        assert [path.name for path in _stored_files(upload_dir)] == sorted(
            ref.rsplit("/", 1)[1] for ref in listing.images
        )

    @pytest.mark.parametrize("price", ["0", "-5", 0, -1.5, "abc", "nan", "inf", None, ""])
    def test_rejects_non_positive_or_non_numeric_price(
        self, listing_service, persistence, make_user, draft, price
    ):
        owner = make_user()

        with pytest.raises(ValidationError) as exc_info:
            listing_service.create(owner.id, draft(price=price))

        assert exc_info.value.fields == ["price"]
        assert persistence.count_listings() == 0

    def test_lists_every_invalid_field(self, listing_service, make_user, draft):
        owner = make_user()

        with pytest.raises(ValidationError) as exc_info:
            listing_service.create(
                owner.id,
                draft(name="", description="x" * 2001, category="Cars", condition="Broken"),
            )

        assert exc_info.value.fields == ["name", "description", "category", "condition"]

    def test_parses_location(self, listing_service, make_user, draft):
        owner = make_user()

        listing = listing_service.create(
            owner.id, draft(location='{"address": "1 Main St", "lat": 40.7, "lng": -74}')
        )

        assert listing.location.address == "1 Main St"
        assert listing.location.lat == 40.7
        assert listing.location.lng == -74.0

    @pytest.mark.parametrize(
        "location",
        [
            "{not json",
            "[1, 2]",
            '{"lat": "north"}',
            '{"lng": 1e400}',
            '{"lat": -1e400}',
            '{"lat": 1' + "0" * 400 + "}",
            '{"lng": NaN}',
        ],
    )
    def test_rejects_malformed_location(self, listing_service, make_user, draft, location):
        owner = make_user()

        with pytest.raises(ValidationError) as exc_info:
            listing_service.create(owner.id, draft(location=location))

        assert exc_info.value.fields == ["location"]

    def test_six_images_rejected_before_any_write(
        self, listing_service, persistence, make_user, draft, png, upload_dir
    ):
        owner = make_user()
        images = [png(f"{index}.png") for index in range(6)]

        with pytest.raises(UploadRejected):
            listing_service.create(owner.id, draft(), images)

        assert persistence.count_listings() == 0
        assert _stored_files(upload_dir) == []

    def test_one_bad_file_rejects_the_batch(
        self, listing_service, persistence, make_user, draft, png, upload_dir
    ):
        owner = make_user()
        bad = ImageUpload(filename="notes.pdf", content_type="application/pdf", data=b"%PDF")

        with pytest.raises(UploadRejected):
            listing_service.create(owner.id, draft(), [png(), bad])

        assert persistence.count_listings() == 0
        assert _stored_files(upload_dir) == []

    def test_unknown_owner(self, listing_service, persistence, draft, png, upload_dir):
        with pytest.raises(NotFound):
            listing_service.create(12345, draft(), [png()])

        assert persistence.count_listings() == 0
        assert _stored_files(upload_dir) == []

    def test_removes_images_when_listing_cannot_be_saved(
        self, listing_service, persistence, make_user, draft, png, upload_dir, monkeypatch
    ):
        owner = make_user()

        def fail(**kwargs):
            raise StoreError("Unable to create listing.")

        monkeypatch.setattr(persistence, "create_listing", fail)

        with pytest.raises(StoreError):
            listing_service.create(owner.id, draft(), [png("a.png"), png("b.png")])

        assert _stored_files(upload_dir) == []


class TestList:
    def test_category_and_price_range(self, listing_service, make_user, draft):
        owner = make_user()
        for name, category, price in [
            ("cheap", "Electronics", "50"),
            ("low", "Electronics", "100"),
            ("mid", "Electronics", "300"),
            ("sofa", "Furniture", "300"),
            ("high", "Electronics", "500"),
            ("pricey", "Electronics", "600"),
        ]:
            listing_service.create(owner.id, draft(name=name, category=category, price=price))
        hidden = listing_service.create(owner.id, draft(name="hidden", category="Electronics", price="200"))
        listing_service.deactivate(hidden.id, owner.id)

        results = listing_service.list(
            ListingFilter.from_params(category="Electronics", min_price="100", max_price="500")
        )

        assert [item.name for item in results] == ["high", "mid", "low"]
        assert all(item.is_active and item.category == "Electronics" for item in results)
        assert all(100 <= item.price <= 500 for item in results)

    def test_no_filter_caps_at_fifty_newest_first(self, listing_service, make_user, draft):
        owner = make_user()
        for index in range(55):
            listing_service.create(owner.id, draft(name=f"Item {index}"))

        results = listing_service.list(ListingFilter())

        assert len(results) == 50
        assert results[0].name == "Item 54"
        assert results[-1].name == "Item 5"
        created = [item.created_at for item in results]
        assert created == sorted(created, reverse=True)

    def test_all_category_is_unfiltered(self, listing_service, make_user, draft):
        owner = make_user()
        listing_service.create(owner.id, draft(category="Books"))
        listing_service.create(owner.id, draft(category="Toys"))

        assert len(listing_service.list(ListingFilter.from_params(category="All"))) == 2

    def test_search_matches_name_or_description_ignoring_case(
        self, listing_service, make_user, draft
    ):
        owner = make_user()
        listing_service.create(owner.id, draft(name="Guitar", description="Acoustic, six strings"))
        listing_service.create(owner.id, draft(name="Amp", description="Works with any GUITAR"))
        listing_service.create(owner.id, draft(name="Drum", description="Snare"))
        listing_service.create(owner.id, draft(name="Élan skis", description="Barely used"))

        names = {item.name for item in listing_service.list(ListingFilter(search="guitar"))}
        accented = [item.name for item in listing_service.list(ListingFilter(search="élan"))]

        assert names == {"Guitar", "Amp"}
        assert accented == ["Élan skis"]

    def test_search_treats_wildcards_literally(self, listing_service, make_user, draft):
        owner = make_user()
        listing_service.create(owner.id, draft(name="100% cotton shirt"))
        listing_service.create(owner.id, draft(name="Plain shirt"))

        results = listing_service.list(ListingFilter(search="%"))

        assert [item.name for item in results] == ["100% cotton shirt"]

    def test_condition_and_single_bound(self, listing_service, make_user, draft):
        owner = make_user()
        listing_service.create(owner.id, draft(name="a", condition="New", price="10"))
        listing_service.create(owner.id, draft(name="b", condition="New", price="90"))
        listing_service.create(owner.id, draft(name="c", condition="Poor", price="90"))

        results = listing_service.list(ListingFilter(condition="New", min_price=50))

        assert [item.name for item in results] == ["b"]

    def test_no_match_is_empty(self, listing_service, make_user, draft):
        owner = make_user()
        listing_service.create(owner.id, draft())

        assert listing_service.list(ListingFilter(category="Books")) == []


class TestListByOwner:
    def test_scoped_to_owner_and_active(self, listing_service, make_user, draft):
        alice = make_user("Alice")
        bob = make_user("Bob")
        first = listing_service.create(alice.id, draft(name="first"))
        listing_service.create(alice.id, draft(name="second"))
        listing_service.create(bob.id, draft(name="bob's"))
        listing_service.deactivate(first.id, alice.id)

        results = listing_service.list_by_owner(alice.id)

        assert [item.name for item in results] == ["second"]
        assert results[0].owner.name == "Alice"

    def test_unknown_owner_is_empty(self, listing_service):
        assert listing_service.list_by_owner(404) == []


class TestDeactivate:
    def test_only_owner_may_deactivate(self, listing_service, make_user, draft):
        alice = make_user("Alice")
        mallory = make_user("Mallory")
        listing = listing_service.create(alice.id, draft())

        with pytest.raises(Forbidden):
            listing_service.deactivate(listing.id, mallory.id)
        assert len(listing_service.list()) == 1

        listing_service.deactivate(listing.id, alice.id)
        assert listing_service.list() == []

    def test_is_one_way(self, listing_service, make_user, draft):
        owner = make_user()
        listing = listing_service.create(owner.id, draft())
        listing_service.deactivate(listing.id, owner.id)

        with pytest.raises(NotFound):
            listing_service.deactivate(listing.id, owner.id)

    def test_missing_listing(self, listing_service, make_user):
        owner = make_user()

        with pytest.raises(NotFound):
            listing_service.deactivate(999, owner.id)
