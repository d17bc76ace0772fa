from sqlalchemy.pool import StaticPool

from cualprofe.database import build_engine
from cualprofe.models import Professor

COMMENT = "Clases muy ordenadas, explica con ejemplos y siempre responde las dudas."


def _rating_body(**overrides) -> dict:
    body = {
        "quality": 5,
        "difficulty": 2,
        "would_take_again": True,
        "subject_name": "Cálculo I",
        "modality": "Presencial",
        "comment": COMMENT,
        "tags": ["Exigente"],
    }
    body.update(overrides)
    return body


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_submit_and_read_stats(client, professor):
    created = client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body())
    assert created.status_code == 201
    assert created.json()["tags"] == ["Exigente"]

    client.post(
        f"/api/professors/{professor.id}/ratings",
        json=_rating_body(quality=3, difficulty=4, would_take_again=False, tags=["Exigente", "Divertido"]),
    )

    response = client.get(f"/api/professors/{professor.id}/stats")

    assert response.status_code == 200
    assert response.json() == {
        "averageQuality": 4.0,
        "averageDifficulty": 3.0,
        "wouldTakeAgainPercent": 50,
        "distribution": [1, 0, 1, 0, 0],
        "topTags": ["Exigente", "Divertido"],
    }


def test_professor_detail_counts_views(client, professor):
    first = client.get(f"/api/professors/{professor.id}")
    second = client.get(f"/api/professors/{professor.id}")

    assert first.json()["view_count"] == 1
    assert second.json()["view_count"] == 2
    assert second.json()["total_ratings"] == 0
    assert second.json()["stats"]["distribution"] == [0, 0, 0, 0, 0]
    assert second.json()["course_list"] == ["Cálculo I", "Física II"]


def test_view_count_is_incremented_in_the_database(client, db, professor):
    # Another session bumps the counter behind the API's back
    db.query(Professor).filter(Professor.id == professor.id).update(
        {Professor.view_count: 5}, synchronize_session=False
    )
    db.commit()

    response = client.get(f"/api/professors/{professor.id}")
    db.refresh(professor)

    assert response.json()["view_count"] == 6
    assert professor.view_count == 6


def test_ratings_listing(client, professor):
    client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body(subject_name="Física I"))
    client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body(subject_name="Física II"))

    response = client.get(f"/api/professors/{professor.id}/ratings")

    assert [r["subject_name"] for r in response.json()] == ["Física II", "Física I"]


def test_unknown_professor_returns_404(client):
    assert client.get("/api/professors/404").status_code == 404
    assert client.get("/api/professors/404/stats").status_code == 404
    assert client.get("/api/professors/404/ratings").status_code == 404
    assert client.post("/api/professors/404/ratings", json=_rating_body()).status_code == 404


def test_out_of_range_score_is_rejected(client, professor):
    response = client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body(quality=6))

    assert response.status_code == 422


def test_short_comment_is_rejected(client, professor):
    response = client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body(comment="Corto"))

    assert response.status_code == 400
    assert "at least" in response.json()["detail"]


def test_search_endpoint(client, db, professor):
    db.add(Professor(name="Luis Mora", university="Universidad Simón Bolívar", department="Física"))
    db.commit()

    by_abbreviation = client.get("/api/professors", params={"q": "ucab"}).json()
    by_typo = client.get("/api/professors", params={"q": "luis morra"}).json()
    everyone = client.get("/api/professors").json()
    by_university = client.get(
        "/api/professors", params={"university": "Universidad Simón Bolívar"}
    ).json()

    assert [p["name"] for p in by_abbreviation] == ["María Pérez"]
    assert [p["name"] for p in by_typo] == ["Luis Mora"]
    assert [p["name"] for p in everyone] == ["Luis Mora", "María Pérez"]
    assert [p["name"] for p in by_university] == ["Luis Mora"]


def test_suggestions_endpoint(client, professor):
    response = client.get("/api/professors/suggestions", params={"q": "maria"})

    assert response.json() == ["María Pérez"]


def test_tags_endpoint_lists_active_vocabulary(client, tag_vocabulary):
    names = [tag["name"] for tag in client.get("/api/tags").json()]

    assert names == ["Divertido", "Exigente"]


def test_analytics_endpoints(client, professor, tag_vocabulary):
    client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body(tags=["Exigente", "Divertido"]))
    client.post(f"/api/professors/{professor.id}/ratings", json=_rating_body(quality=4, tags=["Divertido"]))
    client.get(f"/api/professors/{professor.id}")

    summary = client.get("/api/analytics/summary").json()
    assert summary == {"total_professors": 1, "total_ratings": 2, "total_tags": 3, "active_tags": 2}

    top = client.get("/api/analytics/top-tags", params={"limit": 1}).json()
    assert top == [{"name": "Divertido", "count": 2}]

    universities = client.get("/api/analytics/universities").json()
    assert universities == [
        {
            "name": "Universidad Católica Andrés Bello",
            "professor_count": 1,
            "total_ratings": 2,
            "average_rating": 4.5,
        }
    ]

    daily = client.get("/api/analytics/ratings-by-day", params={"days": 7}).json()
    assert sum(day["count"] for day in daily) == 2

    professors = client.get("/api/analytics/top-professors").json()
    assert professors[0]["view_count"] == 1
    assert professors[0]["average_rating"] == 4.5


def test_in_memory_database_uses_a_single_shared_connection():
    memory = build_engine("sqlite://")
    on_disk = build_engine("sqlite:///./ratings-test.db")

    assert isinstance(memory.pool, StaticPool)
    assert not isinstance(on_disk.pool, StaticPool)
    memory.dispose()
    on_disk.dispose()
