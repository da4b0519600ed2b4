from conftest import post_problem, post_solution


def test_create_solution(alice, bob, anon):
    problem = post_problem(alice)
    url = f"/api/problems/{problem['id']}/solutions"

    assert anon.post(url, json={"content": "x" * 30}).status_code == 401

    resp = bob.post(url, json={"content": "too short"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Solution must be at least 20 characters"}

    resp = bob.post("/api/problems/9999/solutions", json={"content": "x" * 30})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Problem not found"}

    solution = post_solution(bob, problem["id"])
    assert solution["problem_id"] == problem["id"]
    assert solution["author"]["username"] == "bob"
    assert solution["upvotes"] == 0
    assert solution["downvotes"] == 0
    assert solution["is_accepted"] is False


def test_problem_solutions_order(alice, bob, carol):
    problem = post_problem(alice)
    older = post_solution(bob, problem["id"], content="Older suggestion with enough words.")
    liked = post_solution(carol, problem["id"], content="Liked suggestion with enough words.")
    newest = post_solution(bob, problem["id"], content="Newest suggestion with enough words.")

    alice.post(f"/api/solutions/{liked['id']}/vote", json={"vote_type": "upvote"})
    ids = [s["id"] for s in alice.get(f"/api/problems/{problem['id']}/solutions").json()["solutions"]]
    assert ids == [liked["id"], newest["id"], older["id"]]

    alice.post(f"/api/solutions/{older['id']}/accept")
    ids = [s["id"] for s in alice.get(f"/api/problems/{problem['id']}/solutions").json()["solutions"]]
    assert ids == [older["id"], liked["id"], newest["id"]]


def test_update_and_delete_are_author_only(alice, bob):
    problem = post_problem(alice)
    solution = post_solution(bob, problem["id"])
    url = f"/api/solutions/{solution['id']}"

    assert alice.patch(url, json={"content": "Hijacked content that is long enough"}).status_code == 403
    assert alice.delete(url).status_code == 403

    resp = bob.patch(url, json={"upvotes": 50})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid updates"}

    resp = bob.patch(url, json={"content": "Updated suggestion with enough words."})
    assert resp.status_code == 200
    assert resp.json()["solution"]["content"] == "Updated suggestion with enough words."

    resp = bob.delete(url)
    assert resp.json() == {"message": "Solution deleted successfully"}
    assert bob.get(url).status_code == 404


def test_global_listing(alice, bob, carol):
    problem = post_problem(alice)
    first = post_solution(bob, problem["id"])
    second = post_solution(carol, problem["id"], content="A second suggestion that is long enough.")
    alice.post(f"/api/solutions/{second['id']}/vote", json={"vote_type": "upvote"})
    bob.post(f"/api/solutions/{second['id']}/vote", json={"vote_type": "upvote"})
    carol.post(f"/api/solutions/{first['id']}/vote", json={"vote_type": "downvote"})
    alice.post(f"/api/solutions/{first['id']}/accept")

    data = alice.get("/api/solutions").json()
    assert [s["id"] for s in data["solutions"]] == [second["id"], first["id"]]
    assert data["solutions"][0]["problem"]["title"] == problem["title"]
    assert data["pagination"]["total"] == 2

    asc = alice.get("/api/solutions", params={"sort_by": "created_at", "order": "asc"}).json()
    assert [s["id"] for s in asc["solutions"]] == [first["id"], second["id"]]

    accepted = alice.get("/api/solutions", params={"status": "accepted"}).json()
    assert [s["id"] for s in accepted["solutions"]] == [first["id"]]
    pending = alice.get("/api/solutions", params={"status": "pending"}).json()
    assert [s["id"] for s in pending["solutions"]] == [second["id"]]

    assert alice.get("/api/solutions", params={"sort_by": "views"}).status_code == 400


def test_create_rejects_unknown_fields(alice, bob):
    problem = post_problem(alice)
    resp = bob.post(f"/api/problems/{problem['id']}/solutions", json={
        "content": "Fill it with cold patch asphalt as a stopgap.",
        "is_accepted": True,
    })
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid input"}
    assert alice.get(f"/api/problems/{problem['id']}/solutions").json()["solutions"] == []
