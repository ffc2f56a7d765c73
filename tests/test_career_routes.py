"""
Tests for saved careers, goals, skills and the dashboard.

Run: pytest tests/test_career_routes.py -v
"""

from datetime import datetime, timezone

from tests.conftest import auth_headers, create_user


def test_save_list_and_remove_career(client):
    user_id = create_user()
    headers = auth_headers(user_id)

    created = client.post("/api/careers/saved", json={
        "title": "Data Analyst",
        "content": {"description": "Turns data into decisions.", "fitScore": 88},
    }, headers=headers)
    assert created.status_code == 201
    career_id = created.json()["id"]

    saved = client.get("/api/careers/saved", headers=headers).json()
    assert len(saved) == 1
    assert saved[0]["title"] == "Data Analyst"
    assert saved[0]["content"]["fitScore"] == 88

    assert client.delete(f"/api/careers/saved/{career_id}", headers=headers).status_code == 200
    assert client.get("/api/careers/saved", headers=headers).json() == []


def test_cannot_remove_someone_elses_career(client):
    owner = create_user()
    other = create_user()
    career_id = client.post(
        "/api/careers/saved", json={"title": "Nurse"}, headers=auth_headers(owner)
    ).json()["id"]

    response = client.delete(f"/api/careers/saved/{career_id}", headers=auth_headers(other))

    assert response.status_code == 404
    assert len(client.get("/api/careers/saved", headers=auth_headers(owner)).json()) == 1


def test_goals_lifecycle(client):
    user_id = create_user()
    headers = auth_headers(user_id)

    goal = client.post("/api/goals", json={"goal": "  Finish SQL course  "}, headers=headers)
    assert goal.status_code == 201
    assert goal.json()["goal"] == "Finish SQL course"
    assert goal.json()["completed"] is False

    goal_id = goal.json()["id"]
    assert client.patch(f"/api/goals/{goal_id}/complete", headers=headers).status_code == 200
    assert client.get("/api/goals", headers=headers).json() == []
    assert client.patch("/api/goals/missing/complete", headers=headers).status_code == 404


def test_blank_goal_is_400(client):
    user_id = create_user()

    response = client.post("/api/goals", json={"goal": "   "}, headers=auth_headers(user_id))

    assert response.status_code == 400


def test_skills_are_replaced_as_a_whole(client):
    user_id = create_user()
    headers = auth_headers(user_id)

    first = client.put("/api/skills", json={"skills": [
        {"category": "Technical", "skill_name": "Python", "rating": 7},
        {"category": "Soft", "skill_name": "Communication", "rating": 9},
    ]}, headers=headers)
    assert first.status_code == 200
    assert [s["skill_name"] for s in first.json()] == ["Communication", "Python"]

    second = client.put("/api/skills", json={"skills": [
        {"category": "Technical", "skill_name": "SQL", "rating": 5},
    ]}, headers=headers)
    assert [s["skill_name"] for s in second.json()] == ["SQL"]
    assert [s["skill_name"] for s in client.get("/api/skills", headers=headers).json()] == ["SQL"]


def test_duplicate_skill_is_rejected(client):
    user_id = create_user()
    headers = auth_headers(user_id)

    response = client.put("/api/skills", json={"skills": [
        {"category": "Technical", "skill_name": "Python", "rating": 7},
        {"category": "technical", "skill_name": "python ", "rating": 3},
    ]}, headers=headers)

    assert response.status_code == 400


def test_skill_rating_out_of_range_is_400(client):
    user_id = create_user()

    response = client.put("/api/skills", json={"skills": [
        {"category": "Technical", "skill_name": "Python", "rating": 11},
    ]}, headers=auth_headers(user_id))

    assert response.status_code == 400


def test_dashboard_summarizes_activity(client, use_llm):
    now = datetime.now(timezone.utc)
    user_id = create_user(plan="premium", queries_today=0, last_query_reset=now)
    headers = auth_headers(user_id)

    client.post("/api/guidance/query", json={"query_type": "basic", "profile_text": "CS student"}, headers=headers)
    client.post("/api/careers/saved", json={"title": "Data Analyst"}, headers=headers)
    client.post("/api/goals", json={"goal": "Build a portfolio"}, headers=headers)
    client.post("/api/achievements", json={"title": "First portfolio project"}, headers=headers)
    client.put("/api/skills", json={"skills": [
        {"category": "Technical", "skill_name": "Python", "rating": 7},
    ]}, headers=headers)

    response = client.get("/api/dashboard", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["full_name"] == "Test User"
    assert data["metrics"] == {"career_queries": 1, "saved_careers": 1, "achievements": 1, "skills_assessed": 1, "open_goals": 1}
    assert data["quota"]["used"] == 1
    assert data["quota"]["remaining"] == 49
    assert data["quota"]["plan"] == "premium"
    assert [s["skill_name"] for s in data["top_skills"]] == ["Python"]
    assert [g["goal"] for g in data["goals"]] == ["Build a portfolio"]
    assert [a["action"] for a in data["recent_activity"]] == [
        "Saved 'Data Analyst' career",
        "Used basic career guidance",
    ]


def test_achievements_are_listed_newest_first(client):
    user_id = create_user()
    headers = auth_headers(user_id)

    first = client.post("/api/achievements", json={
        "title": "  Finished SQL course ", "description": "Completed all modules", "icon": "trophy"
    }, headers=headers)
    assert first.status_code == 201
    assert first.json()["title"] == "Finished SQL course"
    client.post("/api/achievements", json={"title": "Got first interview"}, headers=headers)

    listed = client.get("/api/achievements", headers=headers).json()
    assert [a["title"] for a in listed] == ["Got first interview", "Finished SQL course"]
    assert listed[1]["icon"] == "trophy"
    assert listed[1]["description"] == "Completed all modules"


def test_achievements_are_per_user(client):
    owner = create_user()
    other = create_user()
    client.post("/api/achievements", json={"title": "Promotion"}, headers=auth_headers(owner))

    assert client.get("/api/achievements", headers=auth_headers(other)).json() == []


def test_blank_achievement_title_is_400(client):
    user_id = create_user()

    response = client.post("/api/achievements", json={"title": "  "}, headers=auth_headers(user_id))

    assert response.status_code == 400


def test_dashboard_requires_auth(client):
    assert client.get("/api/dashboard").status_code == 401
