from datetime import date

import pytest


@pytest.fixture
def alice(make_user):
    return make_user("Alice")


@pytest.fixture
def bob(make_user):
    return make_user("Bob")


def record_book(client, headers, **overrides):
    payload = {
        "title": "Norwegian Wood",
        "author": "Haruki Murakami",
        "rating": 4,
        "review": "Quiet and sad.",
        "finished_date": "2024-03-10",
        **overrides,
    }
    resp = client.post("/api/books", json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


class TestBooks:
    def test_create_and_list_own_books(self, client, alice, bob, auth_headers):
        record_book(client, auth_headers(alice))
        record_book(client, auth_headers(bob), title="Demian", author="Hermann Hesse")

        data = client.get("/api/books", headers=auth_headers(alice)).get_json()["data"]

        assert data["total"] == 1
        assert data["items"][0]["title"] == "Norwegian Wood"

    def test_rating_out_of_range(self, client, alice, auth_headers):
        resp = client.post(
            "/api/books",
            json={"title": "x", "author": "y", "rating": 6, "finished_date": "2024-01-01"},
            headers=auth_headers(alice),
        )

        assert resp.status_code == 422
        assert "rating" in resp.get_json()["data"]["details"]

    def test_finished_date_cannot_be_in_future(self, client, alice, auth_headers):
        resp = client.post(
            "/api/books",
            json={"title": "x", "author": "y", "rating": 3, "finished_date": date(date.today().year + 1, 1, 1).isoformat()},
            headers=auth_headers(alice),
        )

        assert resp.status_code == 422

    def test_other_users_book_is_forbidden(self, client, alice, bob, auth_headers):
        book = record_book(client, auth_headers(alice))

        assert client.get(f"/api/books/{book['id']}", headers=auth_headers(bob)).status_code == 403
        assert client.put(f"/api/books/{book['id']}", json={"rating": 1}, headers=auth_headers(bob)).status_code == 403
        assert client.delete(f"/api/books/{book['id']}", headers=auth_headers(bob)).status_code == 403
        assert client.get(f"/api/books/{book['id']}", headers=auth_headers(alice)).get_json()["data"]["rating"] == 4

    def test_missing_book(self, client, alice, auth_headers):
        assert client.get("/api/books/does-not-exist", headers=auth_headers(alice)).status_code == 404

    def test_update_and_delete(self, client, alice, auth_headers):
        book = record_book(client, auth_headers(alice))

        resp = client.put(f"/api/books/{book['id']}", json={"rating": 5}, headers=auth_headers(alice))
        assert resp.get_json()["data"]["rating"] == 5

        assert client.delete(f"/api/books/{book['id']}", headers=auth_headers(alice)).status_code == 200
        assert client.get(f"/api/books/{book['id']}", headers=auth_headers(alice)).status_code == 404

    def test_filters(self, client, alice, auth_headers):
        record_book(client, auth_headers(alice), finished_date="2024-03-10", rating=4)
        record_book(client, auth_headers(alice), title="Demian", author="Hesse", finished_date="2024-04-02", rating=5)

        by_month = client.get("/api/books?year=2024&month=4", headers=auth_headers(alice)).get_json()["data"]
        by_query = client.get("/api/books?q=murakami", headers=auth_headers(alice)).get_json()["data"]

        assert [b["title"] for b in by_month["items"]] == ["Demian"]
        assert [b["title"] for b in by_query["items"]] == ["Norwegian Wood"]

    def test_check_duplicate(self, client, alice, auth_headers):
        record_book(client, auth_headers(alice))

        dup = client.get(
            "/api/books/check-duplicate?title=norwegian wood&author=Haruki Murakami", headers=auth_headers(alice)
        )
        other = client.get("/api/books/check-duplicate?title=Demian&author=Hesse", headers=auth_headers(alice))

        assert dup.get_json()["data"]["duplicate"] is True
        assert other.get_json()["data"]["duplicate"] is False

    def test_monthly_statistics(self, client, alice, auth_headers):
        record_book(client, auth_headers(alice), finished_date="2024-03-01", rating=4)
        record_book(client, auth_headers(alice), finished_date="2024-03-20", rating=2)
        record_book(client, auth_headers(alice), finished_date="2024-05-05", rating=5)

        stats = client.get("/api/books/statistics/monthly", headers=auth_headers(alice)).get_json()["data"]

        assert stats == [
            {"year": 2024, "month": 5, "count": 1, "average_rating": 5.0},
            {"year": 2024, "month": 3, "count": 2, "average_rating": 3.0},
        ]


class TestUsers:
    def test_update_nickname(self, client, alice, auth_headers):
        resp = client.put("/api/users/me", json={"nickname": "  Alicia "}, headers=auth_headers(alice))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["nickname"] == "Alicia"

    def test_nickname_must_be_unique(self, client, alice, bob, auth_headers):
        resp = client.put("/api/users/me", json={"nickname": "Bob"}, headers=auth_headers(alice))

        assert resp.status_code == 409

    def test_public_profile(self, client, alice, bob, auth_headers):
        record_book(client, auth_headers(alice))

        resp = client.get(f"/api/users/{alice.id}", headers=auth_headers(bob))

        data = resp.get_json()["data"]
        assert data["user"]["nickname"] == "Alice"
        assert data["statistics"]["total_books"] == 1
        assert data["recent_posts"] == []

    def test_unknown_user(self, client, alice, auth_headers):
        assert client.get("/api/users/nobody", headers=auth_headers(alice)).status_code == 404
