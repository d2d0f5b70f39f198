import pytest

from conftest import ATHLETE, COACH, OTHER_PARENT, PARENT, auth_headers

NEED_PAYLOAD = {
    "event_name": "Midwest Open Championship",
    "event_date": "2026-03-14",
    "weight_class": "64",
    "age_group": "12 & Under",
    "city": "Des Moines",
    "state": "IA",
}


@pytest.fixture
async def need_and_interest(client):
    resp = await client.post("/needs", json=NEED_PAYLOAD, headers=auth_headers(COACH))
    assert resp.status_code == 201, resp.text
    need = resp.json()

    resp = await client.post(
        "/wrestlers",
        json={"first_name": "Sam", "last_name": "Carter"},
        headers=auth_headers(PARENT),
    )
    assert resp.status_code == 201, resp.text
    wrestler = resp.json()

    resp = await client.post(
        f"/wrestlers/{wrestler['id']}/interests",
        json={"event_name": "midwest open", "weight_class": "64", "age_group": "12U"},
        headers=auth_headers(PARENT),
    )
    assert resp.status_code == 201, resp.text
    interest = resp.json()
    return need, wrestler, interest


async def test_health(client):
    resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_requests_without_token_are_rejected(client):
    resp = await client.get("/needs")

    assert resp.status_code == 401


async def test_need_age_group_is_normalized(client):
    resp = await client.post("/needs", json=NEED_PAYLOAD, headers=auth_headers(COACH))

    body = resp.json()
    assert body["age_group"] == "12 & Under"
    assert body["age_group_normalized"] == "12U"
    assert body["is_open"] is True


async def test_parents_cannot_post_needs(client):
    resp = await client.post("/needs", json=NEED_PAYLOAD, headers=auth_headers(PARENT))

    assert resp.status_code == 403
    assert resp.json() == {"ok": False, "message": "Only coaches can post needs"}


async def test_coach_proposes_parent_confirms_then_they_talk(client, need_and_interest):
    need, wrestler, interest = need_and_interest
    coach, parent = auth_headers(COACH), auth_headers(PARENT)

    resp = await client.get(f"/needs/{need['id']}/candidates", headers=coach)
    assert resp.status_code == 200
    candidates = resp.json()["candidates"]
    assert [c["interestId"] for c in candidates] == [interest["id"]]
    assert candidates[0]["matchId"] is None

    resp = await client.post(
        "/matches", json={"interestId": interest["id"], "needId": need["id"]}, headers=coach
    )
    assert resp.status_code == 201, resp.text
    match = resp.json()["match"]
    assert resp.json()["alreadyExists"] is False
    assert (match["status"], match["coach_ok"], match["parent_ok"]) == ("pending", True, False)

    resp = await client.post(f"/messages/{match['id']}", json={"text": "Hi"}, headers=coach)
    assert resp.status_code == 403
    assert resp.json()["ok"] is False

    resp = await client.post(
        "/matches", json={"interestId": interest["id"], "needId": need["id"]}, headers=parent
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["alreadyExists"] is True
    confirmed = resp.json()["match"]
    assert confirmed["id"] == match["id"]
    assert confirmed["status"] == "confirmed"
    assert confirmed["confirmed_at"] is not None

    resp = await client.post(
        f"/messages/{match['id']}", json={"text": "Weigh-ins at 7am"}, headers=coach
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["message"]["receiver_id"] == PARENT.user_id

    resp = await client.get(f"/messages/{match['id']}?markRead=true", headers=parent)
    assert resp.status_code == 200
    body = resp.json()
    assert body["matchStatus"] == "confirmed"
    assert [m["text"] for m in body["messages"]] == ["Weigh-ins at 7am"]
    assert body["messages"][0]["read_at"] is not None

    resp = await client.get(f"/wrestlers/{wrestler['id']}/dashboard/summary", headers=parent)
    assert resp.status_code == 200
    assert "s-maxage=15" in resp.headers["cache-control"]
    summary = resp.json()
    assert summary["matches"] == {"total": 1, "pending": 0, "confirmed": 1}
    assert summary["messages"] == {"total": 1, "unread": 0}


async def test_match_listing_and_detail(client, need_and_interest):
    need, wrestler, interest = need_and_interest
    resp = await client.post(
        "/matches",
        json={"interestId": interest["id"], "needId": need["id"], "side": "parent"},
        headers=auth_headers(PARENT),
    )
    match_id = resp.json()["match"]["id"]

    resp = await client.get("/matches", headers=auth_headers(COACH))
    assert [m["id"] for m in resp.json()["matches"]] == [match_id]

    resp = await client.get(f"/matches?wrestlerId={wrestler['id']}", headers=auth_headers(PARENT))
    assert resp.json()["total"] == 1

    resp = await client.get("/matches?status=confirmed", headers=auth_headers(COACH))
    assert resp.json()["total"] == 0

    resp = await client.get("/matches?status=maybe", headers=auth_headers(COACH))
    assert resp.status_code == 400

    resp = await client.get(f"/matches/{match_id}", headers=auth_headers(COACH))
    assert resp.status_code == 200
    assert resp.json()["match"]["wrestler_first_name"] == "Sam"

    resp = await client.get(f"/matches/{match_id}", headers=auth_headers(OTHER_PARENT))
    assert resp.status_code == 403

    resp = await client.get("/matches", headers=auth_headers(ATHLETE))
    assert resp.status_code == 403


async def test_side_is_validated(client, need_and_interest):
    need, _, interest = need_and_interest
    payload = {"interestId": interest["id"], "needId": need["id"]}

    resp = await client.post("/matches", json={**payload, "side": "Coach"}, headers=auth_headers(COACH))
    assert resp.status_code == 400

    resp = await client.post("/matches", json={**payload, "side": "coach"}, headers=auth_headers(PARENT))
    assert resp.status_code == 403


async def test_confirm_endpoint(client, need_and_interest):
    need, _, interest = need_and_interest
    resp = await client.post(
        "/matches",
        json={"interestId": interest["id"], "needId": need["id"]},
        headers=auth_headers(COACH),
    )
    match_id = resp.json()["match"]["id"]

    resp = await client.post(f"/matches/{match_id}/confirm", headers=auth_headers(PARENT))
    assert resp.status_code == 200, resp.text
    assert resp.json()["match"]["status"] == "confirmed"

    resp = await client.post(
        f"/matches/{match_id}/confirm", json={"side": "parent"}, headers=auth_headers(PARENT)
    )
    assert resp.status_code == 200

    resp = await client.post("/matches/9999/confirm", headers=auth_headers(PARENT))
    assert resp.status_code == 404


async def test_decline_then_propose_again(client, need_and_interest):
    need, _, interest = need_and_interest
    payload = {"interestId": interest["id"], "needId": need["id"]}

    resp = await client.post("/matches", json=payload, headers=auth_headers(COACH))
    first_id = resp.json()["match"]["id"]

    resp = await client.post(f"/matches/{first_id}/decline", headers=auth_headers(PARENT))
    assert resp.status_code == 200
    assert resp.json()["match"]["status"] == "declined"

    resp = await client.post(f"/matches/{first_id}/confirm", headers=auth_headers(PARENT))
    assert resp.status_code == 409

    resp = await client.post("/matches", json=payload, headers=auth_headers(COACH))
    assert resp.status_code == 201
    second = resp.json()["match"]
    assert second["id"] != first_id
    assert second["status"] == "pending"


async def test_delete_guards(client, need_and_interest):
    need, _, interest = need_and_interest
    resp = await client.post(
        "/matches",
        json={"interestId": interest["id"], "needId": need["id"]},
        headers=auth_headers(COACH),
    )
    match_id = resp.json()["match"]["id"]
    await client.post(f"/matches/{match_id}/confirm", headers=auth_headers(PARENT))

    resp = await client.delete(f"/needs/{need['id']}", headers=auth_headers(COACH))
    assert resp.status_code == 409
    resp = await client.delete(f"/interests/{interest['id']}", headers=auth_headers(PARENT))
    assert resp.status_code == 409

    resp = await client.post(f"/matches/{match_id}/cancel", headers=auth_headers(COACH))
    assert resp.json()["match"]["status"] == "cancelled"

    resp = await client.delete(f"/needs/{need['id']}", headers=auth_headers(COACH))
    assert resp.status_code == 204
    resp = await client.get(f"/needs/{need['id']}", headers=auth_headers(COACH))
    assert resp.status_code == 404

    resp = await client.delete(f"/interests/{interest['id']}", headers=auth_headers(PARENT))
    assert resp.status_code == 204


async def test_closing_a_need_hides_it_from_candidates(client, need_and_interest):
    need, _, interest = need_and_interest

    resp = await client.patch(
        f"/needs/{need['id']}", json={"is_open": False}, headers=auth_headers(COACH)
    )
    assert resp.status_code == 200
    assert resp.json()["is_open"] is False

    resp = await client.get(f"/interests/{interest['id']}/candidates", headers=auth_headers(PARENT))
    assert resp.status_code == 200
    assert resp.json()["candidates"] == []


async def test_interest_patch_renormalizes(client, need_and_interest):
    _, _, interest = need_and_interest

    resp = await client.patch(
        f"/interests/{interest['id']}",
        json={"age_group": "girls 10 and under", "event_name": "  "},
        headers=auth_headers(PARENT),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["age_group_normalized"] == "Girls 10U"
    assert body["event_name"] is None

    resp = await client.get(f"/interests/{interest['id']}", headers=auth_headers(OTHER_PARENT))
    assert resp.status_code == 403


async def test_coach_dashboard(client, need_and_interest):
    resp = await client.get("/coach/dashboard/summary", headers=auth_headers(COACH))

    assert resp.status_code == 200
    assert resp.headers["cache-control"] == (
        "public, max-age=0, s-maxage=15, stale-while-revalidate=60"
    )
    assert resp.json()["ok"] is True

    resp = await client.get("/coach/dashboard/summary", headers=auth_headers(PARENT))
    assert resp.status_code == 403


async def test_blank_required_strings_are_rejected(client):
    resp = await client.post(
        "/needs", json={**NEED_PAYLOAD, "age_group": "   "}, headers=auth_headers(COACH)
    )
    assert resp.status_code == 422

    resp = await client.post("/wrestlers", json={"first_name": " "}, headers=auth_headers(PARENT))
    assert resp.status_code == 422


async def test_router_errors_share_the_error_body(client, need_and_interest):
    need, _, interest = need_and_interest

    resp = await client.patch(f"/needs/{need['id']}", json={}, headers=auth_headers(COACH))
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "message": "No fields to update"}

    resp = await client.patch(
        f"/interests/{interest['id']}", json={"weight_class": None}, headers=auth_headers(PARENT)
    )
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "message": "weight_class cannot be null"}

    resp = await client.post("/wrestlers", json={"first_name": "Lee"}, headers=auth_headers(COACH))
    assert resp.status_code == 403
    assert resp.json()["ok"] is False


async def test_message_to_missing_match_is_not_found_even_when_blank(client, need_and_interest):
    need, _, interest = need_and_interest

    resp = await client.post("/messages/999", json={"text": "  "}, headers=auth_headers(COACH))
    assert resp.status_code == 404

    resp = await client.post(
        "/matches",
        json={"needId": need["id"], "interestId": interest["id"]},
        headers=auth_headers(COACH),
    )
    match_id = resp.json()["match"]["id"]

    resp = await client.post(f"/messages/{match_id}", json={"text": "  "}, headers=auth_headers(COACH))
    assert resp.status_code == 403


async def test_thread_inboxes(client, need_and_interest):
    need, wrestler, interest = need_and_interest
    coach, parent = auth_headers(COACH), auth_headers(PARENT)

    resp = await client.post(
        "/matches", json={"needId": need["id"], "interestId": interest["id"]}, headers=coach
    )
    match_id = resp.json()["match"]["id"]

    resp = await client.get(f"/wrestlers/{wrestler['id']}/messages", headers=parent)
    assert resp.status_code == 200
    assert resp.json()["threads"] == []

    await client.post(f"/matches/{match_id}/confirm", headers=parent)
    await client.post(f"/messages/{match_id}", json={"text": "Weigh-ins at 7am"}, headers=coach)

    resp = await client.get(f"/wrestlers/{wrestler['id']}/messages", headers=parent)
    body = resp.json()
    assert (body["limit"], body["offset"]) == (50, 0)
    thread = body["threads"][0]
    assert thread["matchId"] == match_id
    assert thread["wrestlerName"] == "Sam Carter"
    assert thread["lastText"] == "Weigh-ins at 7am"
    assert thread["unread"] == 1

    resp = await client.get("/coach/messages?limit=10", headers=coach)
    assert resp.status_code == 200
    assert [t["unread"] for t in resp.json()["threads"]] == [0]

    resp = await client.get("/coach/messages", headers=parent)
    assert resp.status_code == 403
    resp = await client.get(f"/wrestlers/{wrestler['id']}/messages", headers=auth_headers(OTHER_PARENT))
    assert resp.status_code == 403


async def test_team_profile_roundtrip(client, need_and_interest):
    need, _, interest = need_and_interest
    coach = auth_headers(COACH)

    resp = await client.get("/coach/team-profile", headers=coach)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "team": None}

    resp = await client.post(
        "/coach/team-profile",
        json={"teamName": " Iron Mat Club ", "coachName": "Coach Lee", "contactEmail": "lee@ironmat.example"},
        headers=coach,
    )
    assert resp.status_code == 200, resp.text
    team = resp.json()["team"]
    assert team["teamName"] == "Iron Mat Club"
    assert team["logoPath"] is None

    resp = await client.get(f"/interests/{interest['id']}/candidates", headers=auth_headers(PARENT))
    assert resp.json()["candidates"][0]["teamName"] == "Iron Mat Club"

    resp = await client.post(
        "/coach/team-profile",
        json={"teamName": "Iron Mat Club", "coachName": "", "contactEmail": "lee@ironmat.example"},
        headers=coach,
    )
    assert resp.status_code == 422

    resp = await client.get("/coach/team-profile", headers=auth_headers(PARENT))
    assert resp.status_code == 403
    assert resp.json()["ok"] is False
