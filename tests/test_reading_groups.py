from datetime import timedelta

import pytest

from models import storage
from models.base_model import utcnow
from models.group_member import GroupMember, MemberRole
from models.reading_group import ReadingGroup, GroupStatus
from services.group_service import INVITE_CODE_ALPHABET


@pytest.fixture
def alice(make_user):
    return make_user("Alice")


@pytest.fixture
def bob(make_user):
    return make_user("Bob")


@pytest.fixture
def carol(make_user):
    return make_user("Carol")


def create_group(client, headers, **overrides):
    payload = {"name": "Sunday Readers", "book_title": "Demian", **overrides}
    resp = client.post("/api/reading-groups", json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def join(client, headers, group_id):
    return client.post(f"/api/reading-groups/{group_id}/members/join", json={"introduction": "hi"}, headers=headers)


class TestGroups:
    def test_creator_becomes_creator_member(self, client, alice, auth_headers):
        group = create_group(client, auth_headers(alice))

        membership = storage.get_session().query(GroupMember).filter_by(group_id=group["id"]).one()
        assert membership.user_id == alice.id
        assert membership.role == MemberRole.CREATOR
        assert len(group["invite_code"]) == 8
        assert set(group["invite_code"]) <= set(INVITE_CODE_ALPHABET)
        assert group["member_count"] == 1

    def test_duplicate_names_get_suffix(self, client, alice, bob, auth_headers):
        first = create_group(client, auth_headers(alice))
        second = create_group(client, auth_headers(bob))
        third = create_group(client, auth_headers(bob))

        assert [first["name"], second["name"], third["name"]] == [
            "Sunday Readers", "Sunday Readers 1", "Sunday Readers 2"
        ]

    def test_suffixed_name_fits_the_column(self, client, alice, bob, auth_headers):
        long_name = "Readers " * 12 + "Club"
        create_group(client, auth_headers(alice), name=long_name)

        second = create_group(client, auth_headers(bob), name=long_name)

        assert len(second["name"]) <= 100
        assert second["name"].endswith(" 1")
        assert second["name"] != long_name

    def test_private_group_hidden_from_non_members(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice), is_public=False)

        assert client.get(f"/api/reading-groups/{group['id']}", headers=auth_headers(bob)).status_code == 403
        public = client.get("/api/reading-groups/public", headers=auth_headers(bob)).get_json()["data"]
        assert public["total"] == 0

    def test_non_member_does_not_see_invite_code(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))

        data = client.get(f"/api/reading-groups/{group['id']}", headers=auth_headers(bob)).get_json()["data"]

        assert "invite_code" not in data

    def test_only_admins_update(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])

        denied = client.put(f"/api/reading-groups/{group['id']}", json={"description": "x"}, headers=auth_headers(bob))
        allowed = client.put(
            f"/api/reading-groups/{group['id']}", json={"description": "Weekly"}, headers=auth_headers(alice)
        )

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.get_json()["data"]["description"] == "Weekly"

    def test_only_creator_archives(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])

        assert client.delete(f"/api/reading-groups/{group['id']}", headers=auth_headers(bob)).status_code == 403
        assert client.delete(f"/api/reading-groups/{group['id']}", headers=auth_headers(alice)).status_code == 200
        assert storage.get(ReadingGroup, group["id"]).status == GroupStatus.ARCHIVED
        assert client.get(f"/api/reading-groups/{group['id']}", headers=auth_headers(alice)).status_code == 404

    def test_archived_group_is_gone_everywhere(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        base = f"/api/reading-groups/{group['id']}"
        client.delete(base, headers=auth_headers(alice))
        meeting = {"title": "Chapter 1", "meeting_date_time": (utcnow() + timedelta(days=1)).isoformat()}
        today = utcnow().date()

        assert client.get(f"{base}/members", headers=auth_headers(alice)).status_code == 404
        assert client.get(f"{base}/meetings", headers=auth_headers(alice)).status_code == 404
        assert client.post(f"{base}/meetings", json=meeting, headers=auth_headers(alice)).status_code == 404
        assert client.get(f"{base}/monthly-books", headers=auth_headers(alice)).status_code == 404
        assert client.post(
            f"{base}/monthly-books",
            json={"year": today.year, "month": today.month, "book_title": "Demian"},
            headers=auth_headers(alice),
        ).status_code == 404
        assert client.put(base, json={"description": "x"}, headers=auth_headers(alice)).status_code == 404
        assert client.post(f"{base}/regenerate-invite-code", headers=auth_headers(alice)).status_code == 404
        assert join(client, auth_headers(bob), group["id"]).status_code == 404
        assert client.delete(base, headers=auth_headers(alice)).status_code == 404

    def test_regenerate_invite_code(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])
        url = f"/api/reading-groups/{group['id']}/regenerate-invite-code"

        assert client.post(url, headers=auth_headers(bob)).status_code == 403
        resp = client.post(url, headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["invite_code"] != group["invite_code"]

    def test_my_groups(self, client, alice, bob, auth_headers):
        create_group(client, auth_headers(alice), name="Mine")
        create_group(client, auth_headers(bob), name="Theirs")

        data = client.get("/api/reading-groups/my", headers=auth_headers(alice)).get_json()["data"]

        assert [g["name"] for g in data] == ["Mine"]


class TestMembership:
    def test_join_public_group(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))

        resp = join(client, auth_headers(bob), group["id"])

        assert resp.status_code == 201
        assert resp.get_json()["data"]["role"] == "MEMBER"
        assert join(client, auth_headers(bob), group["id"]).status_code == 409

    def test_full_group(self, client, alice, bob, carol, auth_headers):
        group = create_group(client, auth_headers(alice), max_members=2)
        join(client, auth_headers(bob), group["id"])

        resp = join(client, auth_headers(carol), group["id"])

        assert resp.status_code == 409

    def test_private_group_needs_invite_code(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice), is_public=False)

        assert join(client, auth_headers(bob), group["id"]).status_code == 403

        preview = client.get(f"/api/reading-groups/invite/{group['invite_code']}", headers=auth_headers(bob))
        assert preview.get_json()["data"]["name"] == "Sunday Readers"

        resp = client.post(
            "/api/reading-groups/join",
            json={"invite_code": group["invite_code"].lower()},
            headers=auth_headers(bob),
        )
        assert resp.status_code == 201
        assert client.get(f"/api/reading-groups/{group['id']}", headers=auth_headers(bob)).status_code == 200

    def test_invite_code_for_other_group(self, client, alice, bob, auth_headers):
        first = create_group(client, auth_headers(alice))
        second = create_group(client, auth_headers(alice))

        resp = client.post(
            f"/api/reading-groups/{second['id']}/members/join-by-code",
            json={"invite_code": first["invite_code"]},
            headers=auth_headers(bob),
        )

        assert resp.status_code == 404

    def test_creator_cannot_be_removed(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        storage.new(GroupMember(group_id=group["id"], user_id=bob.id, role=MemberRole.ADMIN))
        storage.save()

        resp = client.delete(f"/api/reading-groups/{group['id']}/members/{alice.id}", headers=auth_headers(bob))

        assert resp.status_code == 403

    def test_members_cannot_remove_members(self, client, alice, bob, carol, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])
        join(client, auth_headers(carol), group["id"])

        denied = client.delete(f"/api/reading-groups/{group['id']}/members/{carol.id}", headers=auth_headers(bob))
        allowed = client.delete(f"/api/reading-groups/{group['id']}/members/{carol.id}", headers=auth_headers(alice))

        assert denied.status_code == 403
        assert allowed.status_code == 200
        members = client.get(f"/api/reading-groups/{group['id']}/members", headers=auth_headers(alice))
        assert [m["user"]["nickname"] for m in members.get_json()["data"]] == ["Alice", "Bob"]

    def test_leave(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])

        assert client.delete(f"/api/reading-groups/{group['id']}/members/leave", headers=auth_headers(alice)).status_code == 409
        assert client.delete(f"/api/reading-groups/{group['id']}/members/leave", headers=auth_headers(bob)).status_code == 200
        assert join(client, auth_headers(bob), group["id"]).status_code == 201


class TestMeetingsAndMonthlyBooks:
    def test_meetings_are_admin_managed_and_member_visible(self, client, alice, bob, carol, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])
        url = f"/api/reading-groups/{group['id']}/meetings"
        payload = {"title": "Chapter 1-3", "meeting_date_time": (utcnow() + timedelta(days=3)).isoformat()}

        assert client.post(url, json=payload, headers=auth_headers(bob)).status_code == 403
        created = client.post(url, json=payload, headers=auth_headers(alice))
        assert created.status_code == 201

        assert client.get(url, headers=auth_headers(carol)).status_code == 403
        assert len(client.get(url, headers=auth_headers(bob)).get_json()["data"]) == 1
        next_meeting = client.get(f"{url}/next", headers=auth_headers(bob)).get_json()["data"]
        assert next_meeting["title"] == "Chapter 1-3"

        meeting_id = created.get_json()["data"]["id"]
        assert client.delete(f"{url}/{meeting_id}", headers=auth_headers(bob)).status_code == 403
        assert client.delete(f"{url}/{meeting_id}", headers=auth_headers(alice)).status_code == 200
        assert client.get(f"{url}/next", headers=auth_headers(bob)).status_code == 404

    def test_one_monthly_book_per_month(self, client, alice, bob, auth_headers):
        group = create_group(client, auth_headers(alice))
        join(client, auth_headers(bob), group["id"])
        url = f"/api/reading-groups/{group['id']}/monthly-books"
        today = utcnow().date()
        payload = {"year": today.year, "month": today.month, "book_title": "Demian"}

        assert client.post(url, json=payload, headers=auth_headers(bob)).status_code == 403
        created = client.post(url, json=payload, headers=auth_headers(alice))
        assert created.status_code == 201
        assert client.post(url, json={**payload, "book_title": "Other"}, headers=auth_headers(alice)).status_code == 409

        current = client.get(f"{url}/current", headers=auth_headers(bob)).get_json()["data"]
        assert current["book_title"] == "Demian"

        monthly_book_id = created.get_json()["data"]["id"]
        resp = client.put(f"{url}/{monthly_book_id}/status", json={"status": "READING"}, headers=auth_headers(alice))
        assert resp.get_json()["data"]["status"] == "READING"
