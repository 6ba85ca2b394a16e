"""
HTTP layer: status codes, access checks and request wiring.
"""

from __future__ import annotations

from tests.conftest import make_user, seed_group

ALICE = make_user("u-alice", name="Alice", photo_url="https://cdn.test/alice.jpg")
BOB = make_user("u-bob", name="Bob")
CARA = make_user("u-cara", email="cara@example.com")


def test_health_and_security_headers(api):
    response = api.client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert api.client.get("/ready").json() == {"status": "ready"}


def test_requests_without_identity_are_rejected(api):
    assert api.client.get("/api/v1/groups").status_code == 401


def test_create_group_adds_caller_as_first_member(api, supabase):
    client = api.as_user(ALICE)

    response = client.post("/api/v1/groups", json={
        "name": "Sunset Crew",
        "bio": "Dusk volleyball",
        "members": [{"user_id": "u-bob", "name": "Bob"}],
    })

    assert response.status_code == 201
    group = client.get(f"/api/v1/groups/{response.json()['id']}").json()
    assert group["created_by"] == "u-alice"
    assert group["members"][0] == {
        "user_id": "u-alice", "name": "Alice", "bio": None, "photo_url": "https://cdn.test/alice.jpg"
    }
    assert [m["user_id"] for m in group["members"]] == ["u-alice", "u-bob"]


def test_create_group_validates_body(api):
    response = api.as_user(ALICE).post("/api/v1/groups", json={"name": "Crew", "bio": ""})

    assert response.status_code == 422


def test_only_creator_can_edit(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice", "u-bob"])

    denied = api.as_user(BOB).put(f"/api/v1/groups/{group_id}", json={"name": "Hijacked"})
    allowed = api.as_user(ALICE).put(f"/api/v1/groups/{group_id}", json={"name": "Crew 2"})

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json()["name"] == "Crew 2"


def test_missing_group_is_404(api):
    assert api.as_user(ALICE).get("/api/v1/groups/nope").status_code == 404


def test_add_existing_member_is_400(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice", "u-bob"])

    response = api.as_user(ALICE).post(
        f"/api/v1/groups/{group_id}/members", json={"user_id": "u-bob", "name": "Bob"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User is already a member of this group"


def test_member_can_leave_but_creator_cannot_be_removed(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice", "u-bob"])

    assert api.as_user(BOB).delete(f"/api/v1/groups/{group_id}/members/u-alice").status_code == 403
    assert api.as_user(ALICE).delete(f"/api/v1/groups/{group_id}/members/u-alice").status_code == 400
    assert api.as_user(BOB).delete(f"/api/v1/groups/{group_id}/members/u-bob").status_code == 204
    assert api.as_user(ALICE).delete(f"/api/v1/groups/{group_id}/members/u-bob").status_code == 404


def test_deactivated_group_disappears_from_browse(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice"])
    client = api.as_user(ALICE)

    assert client.delete(f"/api/v1/groups/{group_id}").status_code == 204
    assert client.get("/api/v1/groups").json() == []


def test_my_groups_with_repair_re_adds_creator(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-bob"])

    groups = api.as_user(ALICE).get("/api/v1/groups/mine", params={"repair": "true"}).json()

    assert [g["id"] for g in groups] == [group_id]
    assert [m["user_id"] for m in groups[0]["members"]] == ["u-bob", "u-alice"]


def test_join_link_then_direct_join(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice"])
    client = api.as_user(CARA)

    link = client.get(f"/api/v1/groups/join/{group_id}").json()
    assert link["is_member"] is False
    assert link["has_pending_request"] is False

    joined = client.post(f"/api/v1/groups/join/{group_id}")
    assert joined.status_code == 200
    assert joined.json()["members"][-1]["name"] == "cara"
    assert client.post(f"/api/v1/groups/join/{group_id}").status_code == 400


def test_join_request_flow(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice"])

    created = api.as_user(BOB).post(f"/api/v1/groups/{group_id}/join-requests")
    assert created.status_code == 201
    request_id = created.json()["id"]
    assert api.as_user(BOB).post(f"/api/v1/groups/{group_id}/join-requests").status_code == 400

    assert api.as_user(BOB).get(f"/api/v1/groups/{group_id}/join-requests").status_code == 403
    assert api.as_user(BOB).post(f"/api/v1/join-requests/{request_id}/approve").status_code == 403

    pending = api.as_user(ALICE).get(f"/api/v1/groups/{group_id}/join-requests", params={"status": "pending"})
    assert [r["id"] for r in pending.json()] == [request_id]

    assert api.as_user(ALICE).post(f"/api/v1/join-requests/{request_id}/approve").status_code == 200
    again = api.as_user(ALICE).post(f"/api/v1/join-requests/{request_id}/approve")
    assert again.status_code == 400
    assert again.json()["detail"] == "Request has already been processed"

    group = api.as_user(ALICE).get(f"/api/v1/groups/{group_id}").json()
    assert [m["user_id"] for m in group["members"]] == ["u-alice", "u-bob"]
    mine = api.as_user(BOB).get("/api/v1/join-requests/mine").json()
    assert [r["status"] for r in mine] == ["approved"]


def test_members_cannot_request_to_join(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice"])

    response = api.as_user(ALICE).post(f"/api/v1/groups/{group_id}/join-requests")

    assert response.status_code == 400


def test_only_requester_can_cancel(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice"])
    request_id = api.as_user(BOB).post(f"/api/v1/groups/{group_id}/join-requests").json()["id"]

    assert api.as_user(CARA).post(f"/api/v1/join-requests/{request_id}/cancel").status_code == 403
    assert api.as_user(BOB).post(f"/api/v1/join-requests/{request_id}/cancel").status_code == 200
    mine = api.as_user(BOB).get("/api/v1/join-requests/mine", params={"status": "rejected"}).json()
    assert [r["id"] for r in mine] == [request_id]


def test_like_requires_membership_in_liking_group(api, supabase):
    mine = seed_group(supabase, "Mine", "u-alice", ["u-alice"])
    theirs = seed_group(supabase, "Theirs", "u-bob", ["u-bob"])

    denied = api.as_user(CARA).post("/api/v1/likes", json={"from_group_id": mine, "to_group_id": theirs})
    missing = api.as_user(ALICE).post("/api/v1/likes", json={"from_group_id": mine, "to_group_id": "gone"})

    assert denied.status_code == 403
    assert missing.status_code == 404
    assert supabase.rows("likes") == []


def test_like_lists_and_candidates(api, supabase):
    mine = seed_group(supabase, "Mine", "u-alice", ["u-alice"])
    theirs = seed_group(supabase, "Theirs", "u-bob", ["u-bob"])
    other = seed_group(supabase, "Other", "u-cara", ["u-cara"])
    api.as_user(BOB).post("/api/v1/likes", json={"from_group_id": theirs, "to_group_id": mine})
    client = api.as_user(ALICE)
    client.post("/api/v1/likes", json={"from_group_id": mine, "to_group_id": other})

    assert client.get(f"/api/v1/likes/{mine}/outgoing").json() == [other]
    assert client.get(f"/api/v1/likes/{mine}/incoming").json() == [theirs]
    assert [g["id"] for g in client.get(f"/api/v1/likes/{mine}/admirers").json()] == [theirs]
    assert [g["id"] for g in client.get(f"/api/v1/likes/{mine}/candidates").json()] == [theirs]


def test_matches_endpoints(api, supabase):
    mine = seed_group(supabase, "Mine", "u-alice", ["u-alice"])
    theirs = seed_group(supabase, "Theirs", "u-bob", ["u-bob"])
    api.as_user(ALICE).post("/api/v1/likes", json={"from_group_id": mine, "to_group_id": theirs})
    api.as_user(BOB).post("/api/v1/likes", json={"from_group_id": theirs, "to_group_id": mine})
    client = api.as_user(ALICE)

    details = client.get(f"/api/v1/matches/group/{mine}").json()
    assert details[0]["matched_group"]["name"] == "Theirs"
    assert details[0]["chat_room_id"] is not None
    assert len(client.get("/api/v1/matches").json()) == 1
    assert client.get("/api/v1/matches", params={"since": "2999-01-01T00:00:00Z"}).json() == []


def test_chat_is_limited_to_room_members(api, supabase):
    mine = seed_group(supabase, "Mine", "u-alice", ["u-alice"])
    theirs = seed_group(supabase, "Theirs", "u-bob", ["u-bob"])
    api.as_user(ALICE).post("/api/v1/likes", json={"from_group_id": mine, "to_group_id": theirs})
    api.as_user(BOB).post("/api/v1/likes", json={"from_group_id": theirs, "to_group_id": mine})
    room_id = supabase.rows("chat_rooms")[0]["id"]

    outsider = api.as_user(CARA)
    assert outsider.get(f"/api/v1/chat/rooms/{room_id}").status_code == 403
    assert outsider.post(f"/api/v1/chat/rooms/{room_id}/messages", json={"message": "hi"}).status_code == 403
    assert api.as_user(ALICE).post(f"/api/v1/chat/rooms/{room_id}/messages", json={"message": " "}).status_code == 400
    assert api.as_user(ALICE).get("/api/v1/chat/rooms/missing").status_code == 404


def test_profile_update_fans_out(api, supabase):
    first = seed_group(supabase, "First", "u-alice", ["u-alice"])
    seed_group(supabase, "Other", "u-bob", ["u-bob"])

    response = api.as_user(ALICE).put("/api/v1/profile", json={"display_name": "Ally", "photo_url": ""})

    assert response.status_code == 200
    assert response.json() == {
        "user_id": "u-alice", "display_name": "Ally", "photo_url": None, "groups_updated": 1
    }
    supabase.auth.admin.update_user_by_id.assert_called_once_with(
        "u-alice", {"user_metadata": {"full_name": "Ally", "avatar_url": None}}
    )
    row = next(r for r in supabase.rows("groups") if r["id"] == first)
    assert row["members"] == [{"user_id": "u-alice", "name": "Ally"}]


def test_profile_photo_upload_updates_memberships(api, supabase):
    group_id = seed_group(supabase, "First", "u-alice", ["u-alice"])

    response = api.as_user(ALICE).post(
        "/api/v1/profile/photo", files={"file": ("me.png", b"png-bytes", "image/png")}
    )

    assert response.status_code == 200
    url = response.json()["photo_url"]
    assert url.startswith("https://storage.test/group-photos/members/u-alice/photo_")
    row = next(r for r in supabase.rows("groups") if r["id"] == group_id)
    assert row["members"][0]["photo_url"] == url


def test_profile_photo_upload_does_not_store_fallback_name(api, supabase):
    response = api.as_user(CARA).post(
        "/api/v1/profile/photo", files={"file": ("me.jpg", b"jpeg-bytes", "image/jpeg")}
    )

    assert response.status_code == 200
    supabase.auth.admin.update_user_by_id.assert_called_once_with(
        "u-cara", {"user_metadata": {"avatar_url": response.json()["photo_url"]}}
    )


def test_group_photo_upload_is_creator_only(api, supabase):
    group_id = seed_group(supabase, "Crew", "u-alice", ["u-alice", "u-bob"])
    files = {"file": ("crew.jpg", b"jpeg-bytes", "image/jpeg")}

    assert api.as_user(BOB).post(f"/api/v1/groups/{group_id}/photo", files=files).status_code == 403
    response = api.as_user(ALICE).post(f"/api/v1/groups/{group_id}/photo", files=files)

    assert response.status_code == 200
    assert response.json()["photo_url"].startswith(f"https://storage.test/group-photos/groups/{group_id}/photo_")


def test_me_reports_the_name_other_users_see(api):
    assert api.as_user(CARA).get("/api/v1/auth/me").json() == {
        "id": "u-cara", "email": "cara@example.com", "display_name": "cara", "photo_url": None
    }
