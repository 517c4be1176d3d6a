from datetime import timedelta

import pytest

from models.base_model import utcnow


@pytest.fixture
def alice(make_user):
    return make_user("Alice")


@pytest.fixture
def bob(make_user):
    return make_user("Bob")


def post_json(client, url, headers, **payload):
    resp = client.post(url, json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


class TestWishlists:
    def test_default_priority_and_ordering(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(client, "/api/wishlists", h, title="Middlemarch")
        post_json(client, "/api/wishlists", h, title="Ulysses", priority=1)

        data = client.get("/api/wishlists", headers=h).get_json()["data"]

        assert [item["title"] for item in data["items"]] == ["Ulysses", "Middlemarch"]
        assert data["items"][1]["priority"] == 3

    def test_filters(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(client, "/api/wishlists", h, title="Middlemarch", author="George Eliot", priority=2)
        post_json(client, "/api/wishlists", h, title="Ulysses", author="James Joyce", priority=1)

        by_priority = client.get("/api/wishlists?priority=2", headers=h).get_json()["data"]
        by_search = client.get("/api/wishlists?search=joyce", headers=h).get_json()["data"]

        assert [item["title"] for item in by_priority["items"]] == ["Middlemarch"]
        assert [item["title"] for item in by_search["items"]] == ["Ulysses"]

    def test_priority_out_of_range(self, client, alice, auth_headers):
        resp = client.post("/api/wishlists", json={"title": "x", "priority": 6}, headers=auth_headers(alice))

        assert resp.status_code == 422

    def test_partial_update_keeps_priority(self, client, alice, auth_headers):
        h = auth_headers(alice)
        item = post_json(client, "/api/wishlists", h, title="Ulysses", priority=1)

        resp = client.put(f"/api/wishlists/{item['id']}", json={"memo": "After exams"}, headers=h)

        assert resp.status_code == 200
        assert resp.get_json()["data"]["priority"] == 1
        assert resp.get_json()["data"]["memo"] == "After exams"

    def test_other_users_item(self, client, alice, bob, auth_headers):
        item = post_json(client, "/api/wishlists", auth_headers(alice), title="Ulysses")
        url = f"/api/wishlists/{item['id']}"

        assert client.get(url, headers=auth_headers(bob)).status_code == 403
        assert client.put(url, json={"priority": 5}, headers=auth_headers(bob)).status_code == 403
        assert client.delete(url, headers=auth_headers(bob)).status_code == 403
        assert client.get("/api/wishlists/missing", headers=auth_headers(bob)).status_code == 404
        assert client.delete(url, headers=auth_headers(alice)).status_code == 200

    def test_check_duplicate_and_priority_statistics(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(client, "/api/wishlists", h, title="The Magic Mountain", author="Thomas Mann", priority=2)
        post_json(client, "/api/wishlists", h, title="Buddenbrooks", author="Thomas Mann", priority=2)
        post_json(client, "/api/wishlists", h, title="Ulysses", priority=1)

        dup = client.get("/api/wishlists/check-duplicate?title=magic&author=mann", headers=h).get_json()["data"]
        none = client.get("/api/wishlists/check-duplicate?title=Dubliners", headers=h).get_json()["data"]
        stats = client.get("/api/wishlists/statistics/priority", headers=h).get_json()["data"]

        assert dup["duplicate"] is True
        assert [w["title"] for w in dup["duplicate_wishlists"]] == ["The Magic Mountain"]
        assert none == {"duplicate": False, "duplicate_wishlists": []}
        assert stats == [{"priority": 1, "count": 1}, {"priority": 2, "count": 2}]


class TestCurrentlyReading:
    def test_same_book_twice(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(client, "/api/currently-reading", h, title="Demian", author="Hermann Hesse", reading_type="PAPER_BOOK")

        again = client.post(
            "/api/currently-reading",
            json={"title": "demian", "author": "hermann hesse", "reading_type": "E_BOOK"},
            headers=h,
        )
        check = client.get(
            "/api/currently-reading/check-duplicate", query_string={"title": "Demian", "author": "Hermann Hesse"}, headers=h
        )

        assert again.status_code == 409
        assert check.get_json()["data"]["duplicate"] is True

    def test_progress(self, client, alice, auth_headers):
        h = auth_headers(alice)
        entry = post_json(client, "/api/currently-reading", h, title="Demian", reading_type="MILLIE")
        url = f"/api/currently-reading/{entry['id']}/progress"

        assert entry["progress_percentage"] == 0
        resp = client.put(url, json={"progress_percentage": 40, "memo": "Chapter 3"}, headers=h)
        assert resp.get_json()["data"]["progress_percentage"] == 40
        assert resp.get_json()["data"]["memo"] == "Chapter 3"
        assert client.put(url, json={"progress_percentage": 150}, headers=h).status_code == 422
        assert client.put(url, json={}, headers=h).status_code == 422

    def test_overdue_rentals(self, client, alice, auth_headers):
        h = auth_headers(alice)
        yesterday = (utcnow().date() - timedelta(days=1)).isoformat()
        late = post_json(
            client, "/api/currently-reading", h, title="Late", reading_type="LIBRARY_RENTAL", due_date=yesterday
        )
        post_json(client, "/api/currently-reading", h, title="Owned", reading_type="PAPER_BOOK", due_date=yesterday)

        overdue = client.get("/api/currently-reading/overdue", headers=h).get_json()["data"]

        assert late["is_overdue"] is True
        assert late["reading_type_label"] == "Library rental"
        assert [entry["title"] for entry in overdue] == ["Late"]

    def test_rename_onto_existing_entry(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(client, "/api/currently-reading", h, title="Demian", reading_type="PAPER_BOOK")
        other = post_json(client, "/api/currently-reading", h, title="Siddhartha", reading_type="PAPER_BOOK")

        resp = client.put(f"/api/currently-reading/{other['id']}", json={"title": "Demian"}, headers=h)

        assert resp.status_code == 409

    def test_other_users_entry(self, client, alice, bob, auth_headers):
        entry = post_json(client, "/api/currently-reading", auth_headers(alice), title="Demian", reading_type="E_BOOK")

        assert client.get(f"/api/currently-reading/{entry['id']}", headers=auth_headers(bob)).status_code == 403
        assert client.put(
            f"/api/currently-reading/{entry['id']}/progress", json={"progress_percentage": 10}, headers=auth_headers(bob)
        ).status_code == 403
        listing = client.get("/api/currently-reading", headers=auth_headers(bob)).get_json()["data"]
        assert listing["total"] == 0


class TestDroppedBooks:
    def test_dropped_date_defaults_to_today(self, client, alice, auth_headers):
        book = post_json(
            client, "/api/dropped-books", auth_headers(alice),
            title="Ulysses", reading_type="PAPER_BOOK", drop_reason="Too dense", progress_percentage=12,
        )

        assert book["dropped_date"] == utcnow().date().isoformat()
        assert book["reading_type_label"] == "Owned paper book"

    def test_drop_reason_required(self, client, alice, auth_headers):
        resp = client.post(
            "/api/dropped-books", json={"title": "Ulysses", "reading_type": "PAPER_BOOK"}, headers=auth_headers(alice)
        )

        assert resp.status_code == 422
        assert "drop_reason" in resp.get_json()["data"]["details"]

    def test_duplicates_by_title_and_isbn(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(
            client, "/api/dropped-books", h,
            title="Ulysses", isbn="978-0-306-40615-7", reading_type="PAPER_BOOK", drop_reason="Too dense",
        )

        same_title = client.post(
            "/api/dropped-books", json={"title": "ulysses", "reading_type": "E_BOOK", "drop_reason": "x"}, headers=h
        )
        same_isbn = client.post(
            "/api/dropped-books",
            json={"title": "Other", "isbn": "9780306406157", "reading_type": "E_BOOK", "drop_reason": "x"},
            headers=h,
        )
        check = client.get("/api/dropped-books/check-duplicate?title=Ulysses", headers=h).get_json()["data"]

        assert same_title.status_code == 409
        assert same_isbn.status_code == 409
        assert check["duplicate"] is True
        assert check["existing_book"]["isbn"] == "9780306406157"

    def test_started_after_dropped(self, client, alice, auth_headers):
        h = auth_headers(alice)
        book = post_json(
            client, "/api/dropped-books", h,
            title="Ulysses", reading_type="PAPER_BOOK", drop_reason="Too dense", dropped_date="2024-02-01",
        )

        resp = client.put(f"/api/dropped-books/{book['id']}", json={"started_date": "2024-03-01"}, headers=h)

        assert resp.status_code == 422

    def test_update_and_ownership(self, client, alice, bob, auth_headers):
        book = post_json(
            client, "/api/dropped-books", auth_headers(alice),
            title="Ulysses", reading_type="PAPER_BOOK", drop_reason="Too dense",
        )
        url = f"/api/dropped-books/{book['id']}"

        assert client.put(url, json={"memo": "Maybe later"}, headers=auth_headers(bob)).status_code == 403
        resp = client.put(url, json={"title": "Ulysses", "memo": "Maybe later"}, headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["memo"] == "Maybe later"
        assert client.delete(url, headers=auth_headers(alice)).status_code == 200
        assert client.get(url, headers=auth_headers(alice)).status_code == 404


class TestStatistics:
    def test_list_counts(self, client, alice, auth_headers):
        h = auth_headers(alice)
        post_json(client, "/api/wishlists", h, title="Ulysses")
        post_json(client, "/api/currently-reading", h, title="Demian", reading_type="PAPER_BOOK")
        post_json(client, "/api/dropped-books", h, title="Moby-Dick", reading_type="E_BOOK", drop_reason="Whales")

        stats = client.get("/api/users/me/statistics", headers=h).get_json()["data"]

        assert stats["wishlist_count"] == 1
        assert stats["currently_reading_count"] == 1
        assert stats["dropped_books_count"] == 1
        assert stats["dropped_books_this_month"] == 1
