import pytest

from models.base_model import utcnow


@pytest.fixture
def alice(make_user):
    return make_user("Alice")


@pytest.fixture
def bob(make_user):
    return make_user("Bob")


@pytest.fixture
def carol(make_user):
    return make_user("Carol")


@pytest.fixture
def monthly_book(client, alice, bob, auth_headers):
    """A public group run by Alice with Bob as member, and this month's book."""
    resp = client.post(
        "/api/reading-groups", json={"name": "Sunday Readers", "book_title": "Demian"}, headers=auth_headers(alice)
    )
    group = resp.get_json()["data"]
    client.post(f"/api/reading-groups/{group['id']}/members/join", json={}, headers=auth_headers(bob))
    today = utcnow().date()
    resp = client.post(
        f"/api/reading-groups/{group['id']}/monthly-books",
        json={"year": today.year, "month": today.month, "book_title": "Demian"},
        headers=auth_headers(alice),
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def review(client, headers, monthly_book_id, **overrides):
    payload = {"monthly_book_id": monthly_book_id, "title": "Worth it", "content": "Loved the ending.", **overrides}
    return client.post("/api/book-reviews", json=payload, headers=headers)


class TestBookReviews:
    def test_one_review_per_member(self, client, bob, auth_headers, monthly_book):
        first = review(client, auth_headers(bob), monthly_book["id"], rating=4)

        assert first.status_code == 201
        assert first.get_json()["data"]["status"] == "PUBLISHED"
        assert first.get_json()["data"]["user"]["nickname"] == "Bob"
        assert review(client, auth_headers(bob), monthly_book["id"]).status_code == 409

    def test_outsider_cannot_review(self, client, carol, auth_headers, monthly_book):
        assert review(client, auth_headers(carol), monthly_book["id"]).status_code == 403
        assert client.get(
            f"/api/book-reviews/monthly-book/{monthly_book['id']}", headers=auth_headers(carol)
        ).status_code == 403

    def test_unknown_monthly_book(self, client, bob, auth_headers, monthly_book):
        assert review(client, auth_headers(bob), "missing").status_code == 404

    def test_public_listing_and_statistics(self, client, alice, bob, auth_headers, monthly_book):
        mb = monthly_book["id"]
        review(client, auth_headers(alice), mb, rating=5, title="Public")
        review(client, auth_headers(bob), mb, rating=3, title="Private", is_public=False)

        listing = client.get(f"/api/book-reviews/monthly-book/{mb}", headers=auth_headers(bob)).get_json()["data"]
        stats = client.get(f"/api/book-reviews/monthly-book/{mb}/statistics", headers=auth_headers(bob)).get_json()["data"]

        assert [r["title"] for r in listing] == ["Public"]
        assert stats == {"average_rating": 4.0, "total_reviews": 2, "rating_distribution": [0, 0, 1, 0, 1]}

    def test_drafts_stay_out_of_listing_and_statistics(self, client, bob, auth_headers, monthly_book):
        mb = monthly_book["id"]
        review(client, auth_headers(bob), mb, status="DRAFT")

        listing = client.get(f"/api/book-reviews/monthly-book/{mb}", headers=auth_headers(bob)).get_json()["data"]
        stats = client.get(f"/api/book-reviews/monthly-book/{mb}/statistics", headers=auth_headers(bob)).get_json()["data"]
        mine = client.get(f"/api/book-reviews/monthly-book/{mb}/my", headers=auth_headers(bob)).get_json()["data"]

        assert listing == []
        assert stats["total_reviews"] == 0
        assert stats["average_rating"] == 0.0
        assert mine["status"] == "DRAFT"

    def test_my_review_is_null_before_writing(self, client, alice, auth_headers, monthly_book):
        resp = client.get(f"/api/book-reviews/monthly-book/{monthly_book['id']}/my", headers=auth_headers(alice))

        assert resp.status_code == 200
        assert resp.get_json()["data"] is None

    def test_only_author_edits(self, client, alice, bob, auth_headers, monthly_book):
        created = review(client, auth_headers(bob), monthly_book["id"]).get_json()["data"]
        url = f"/api/book-reviews/{created['id']}"

        assert client.put(url, json={"rating": 1}, headers=auth_headers(alice)).status_code == 403
        assert client.delete(url, headers=auth_headers(alice)).status_code == 403
        resp = client.put(url, json={"rating": 2, "status": "HIDDEN"}, headers=auth_headers(bob))
        assert resp.get_json()["data"]["rating"] == 2
        assert resp.get_json()["data"]["title"] == "Worth it"
        assert client.put(url, json={"rating": 6}, headers=auth_headers(bob)).status_code == 422
        assert client.delete(url, headers=auth_headers(bob)).status_code == 200
        assert client.delete(url, headers=auth_headers(bob)).status_code == 404

    def test_archived_group_hides_reviews(self, client, alice, bob, auth_headers, monthly_book):
        mb = monthly_book["id"]
        review(client, auth_headers(bob), mb)

        assert client.delete(
            f"/api/reading-groups/{monthly_book['group_id']}", headers=auth_headers(alice)
        ).status_code == 200
        assert client.get(f"/api/book-reviews/monthly-book/{mb}", headers=auth_headers(bob)).status_code == 404
        assert review(client, auth_headers(alice), mb).status_code == 404
