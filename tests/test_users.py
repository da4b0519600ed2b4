from conftest import post_problem, post_solution


def test_public_profile(alice, bob, anon):
    problem = post_problem(alice)
    solution = post_solution(bob, problem["id"])
    alice.post(f"/api/solutions/{solution['id']}/accept")

    data = anon.get("/api/users/bob").json()
    assert data["user"]["username"] == "bob"
    assert data["user"]["reputation"] == 20
    assert "email" not in data["user"]
    assert data["stats"] == {"problem_count": 0, "solution_count": 1, "accepted_solution_count": 1}
    assert data["solutions"][0]["problem"]["id"] == problem["id"]

    alice_profile = anon.get("/api/users/alice").json()
    assert [p["id"] for p in alice_profile["problems"]] == [problem["id"]]
    assert alice_profile["stats"]["problem_count"] == 1

    resp = anon.get("/api/users/nobody")
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_update_profile(alice, anon):
    assert anon.patch("/api/users/profile", json={"bio": "hi"}).status_code == 401

    resp = alice.patch("/api/users/profile", json={"bio": "Neighbourhood fixer", "avatar": "/img/a.png"})
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["bio"] == "Neighbourhood fixer"
    assert user["avatar"] == "/img/a.png"

    resp = alice.patch("/api/users/profile", json={"reputation": 9000})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid updates"}

    resp = alice.patch("/api/users/profile", json={"bio": "x" * 501})
    assert resp.status_code == 400


def test_remove_avatar(alice):
    alice.patch("/api/users/profile", json={"avatar": "/img/a.png"})
    resp = alice.delete("/api/users/avatar")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Avatar removed successfully"
    assert resp.json()["user"]["avatar"] is None


def test_admin_stats(alice, bob, anon):
    assert anon.get("/api/admin/stats").status_code == 401

    solved = post_problem(alice)
    post_problem(alice, title="Another unsolved problem")
    solution = post_solution(bob, solved["id"])
    alice.post(f"/api/solutions/{solution['id']}/accept")

    data = alice.get("/api/admin/stats").json()
    assert data["stats"] == {
        "total_users": 2,
        "total_problems": 2,
        "total_solutions": 1,
        "solved_problems": 1,
        "open_problems": 1,
    }
    assert len(data["recent_problems"]) == 2
    assert [u["username"] for u in data["top_users"]] == ["bob", "alice"]
