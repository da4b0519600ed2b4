from conftest import post_problem, post_solution, reputation_of


def _solutions(client, problem_id):
    return client.get(f"/api/problems/{problem_id}/solutions").json()["solutions"]


def test_only_problem_author_can_accept(alice, bob, anon):
    problem = post_problem(alice)
    solution = post_solution(bob, problem["id"])

    resp = bob.post(f"/api/solutions/{solution['id']}/accept")
    assert resp.status_code == 403
    assert resp.json() == {"error": "Only the problem author can accept solutions"}

    assert anon.post(f"/api/solutions/{solution['id']}/accept").status_code == 401
    assert alice.post("/api/solutions/9999/accept").status_code == 404


def test_accept_marks_problem_solved(alice, bob):
    problem = post_problem(alice)
    solution = post_solution(bob, problem["id"])

    resp = alice.post(f"/api/solutions/{solution['id']}/accept")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Solution accepted successfully"}

    updated = alice.get(f"/api/problems/{problem['id']}").json()["problem"]
    assert updated["status"] == "solved"
    assert updated["accepted_solution_id"] == solution["id"]
    assert _solutions(alice, problem["id"])[0]["is_accepted"] is True


def test_switching_acceptance_keeps_one_accepted(alice, bob, carol):
    problem = post_problem(alice)
    first = post_solution(bob, problem["id"])
    second = post_solution(carol, problem["id"], content="Ask the neighbourhood association to escalate it.")

    alice.post(f"/api/solutions/{first['id']}/accept")
    alice.post(f"/api/solutions/{second['id']}/accept")

    solutions = {s["id"]: s for s in _solutions(alice, problem["id"])}
    assert solutions[first["id"]]["is_accepted"] is False
    assert solutions[second["id"]]["is_accepted"] is True
    assert [s["id"] for s in _solutions(alice, problem["id"])][0] == second["id"]

    problem = alice.get(f"/api/problems/{problem['id']}").json()["problem"]
    assert problem["accepted_solution_id"] == second["id"]

    # the earlier bonus stays with bob
    assert reputation_of(alice, "bob") == 5 + 15
    assert reputation_of(alice, "carol") == 5 + 15


def test_deleting_accepted_solution_reopens_problem(alice, bob):
    problem = post_problem(alice)
    solution = post_solution(bob, problem["id"])
    alice.post(f"/api/solutions/{solution['id']}/accept")

    resp = bob.delete(f"/api/solutions/{solution['id']}")
    assert resp.status_code == 200

    problem = alice.get(f"/api/problems/{problem['id']}").json()["problem"]
    assert problem["status"] == "open"
    assert problem["accepted_solution_id"] is None
    assert reputation_of(alice, "bob") == 5 + 15
