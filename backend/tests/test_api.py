import asyncio
import json

ANSWERS = {"p1": 4, "p2": 3, "pr1": 2, "a1": 1, "h1": 5}
COMMENTS = {"p1": "Most staff completed the AI literacy course", "a1": None}

REMOTE_ANALYSIS = {
    "overallScore": 3.0,
    "categoryScores": {"people-skills": 3.5, "processes": 2.0, "ai-adoption": 1.0, "hybrid-work": 5.0},
    "strengths": ["Hybrid work"],
    "areasForImprovement": ["AI adoption"],
    "recommendations": [],
    "maturityLevel": "Developing",
    "nextSteps": ["Pilot an HR chatbot"],
}


def _submit(client, **overrides):
    body = {"organizationName": "Acme Corp", "answers": ANSWERS, "comments": COMMENTS}
    body.update(overrides)
    return client.post("/api/submit-assessment", json=body)


def test_health_reports_version_and_completion_config(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert isinstance(data["lab45Configured"], bool)
    assert data["timestamp"].endswith("Z")


def test_questions_returns_full_catalog(client):
    r = client.get("/api/questions")
    assert r.status_code == 200
    ids = [c["id"] for c in r.json()["categories"]]
    assert ids == ["people-skills", "processes", "ai-adoption", "data-readiness", "hybrid-work"]


def test_single_category(client):
    r = client.get("/api/questions/ai-adoption")
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "AI Adoption"
    assert [q["id"] for q in body["questions"]] == ["a1", "a2"]
    assert [o["value"] for o in body["questions"][0]["options"]] == [1, 2, 3, 4, 5]


def test_unknown_category_is_404(client):
    r = client.get("/api/questions/finance")
    assert r.status_code == 404
    assert r.json() == {"error": "Category not found"}


def test_corrupt_catalog_is_500(client, catalog):
    catalog.path.write_text("{not json", encoding="utf-8")
    r = client.get("/api/questions")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch questions"}


def test_submit_with_remote_analysis(client, lab45):
    lab45.reply_content(json.dumps(REMOTE_ANALYSIS))
    r = _submit(client)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    result = body["result"]
    assert result["organizationName"] == "Acme Corp"
    assert result["answers"] == ANSWERS
    assert result["comments"] == COMMENTS
    assert result["analysis"] == REMOTE_ANALYSIS
    assert result["id"].isdigit()
    assert len(lab45.requests) == 1


def test_submit_falls_back_when_lab45_unreachable(client, lab45, store):
    lab45.unreachable()
    r = _submit(client)
    assert r.status_code == 200
    analysis = r.json()["result"]["analysis"]
    assert analysis["overallScore"] == 3.2
    assert analysis["maturityLevel"] == "Transitioning - Moving from traditional to modern HR practices"
    assert len(store.list_results()) == 1


def test_submit_without_comments_stores_empty_map(client, lab45):
    lab45.reply_content(json.dumps(REMOTE_ANALYSIS))
    r = client.post("/api/submit-assessment", json={"organizationName": "Acme", "answers": {"p1": 2}})
    assert r.status_code == 200
    assert r.json()["result"]["comments"] == {}


def test_submit_missing_answers_is_400_and_not_stored(client, store, lab45):
    r = client.post("/api/submit-assessment", json={"organizationName": "Acme Corp"})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing required fields"}
    assert store.list_results() == []
    assert lab45.requests == []


def test_submit_missing_organization_is_400_and_not_stored(client, store):
    for body in ({"answers": ANSWERS}, {"answers": ANSWERS, "organizationName": ""}):
        r = client.post("/api/submit-assessment", json=body)
        assert r.status_code == 400
    assert store.list_results() == []


def test_submit_with_malformed_body_is_400(client, store):
    r = client.post("/api/submit-assessment", json={"organizationName": "Acme", "answers": [1, 2]})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body"}
    assert store.list_results() == []


def test_submit_store_failure_is_500(client, store, lab45):
    store.path.write_text("corrupt", encoding="utf-8")
    r = _submit(client)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to submit assessment"}
    assert store.path.read_text(encoding="utf-8") == "corrupt"


def test_result_round_trip(client, lab45):
    lab45.reply_content(json.dumps(REMOTE_ANALYSIS))
    submitted = _submit(client).json()["result"]
    r = client.get(f"/api/results/{submitted['id']}")
    assert r.status_code == 200
    assert r.json() == submitted


def test_unknown_result_is_404(client):
    r = client.get("/api/results/123")
    assert r.status_code == 404
    assert r.json() == {"error": "Result not found"}


def test_results_listing_is_a_projection(client, lab45):
    lab45.reply_content(json.dumps(REMOTE_ANALYSIS))
    first = _submit(client).json()["result"]
    lab45.unreachable()
    second = _submit(client, organizationName="Globex").json()["result"]

    r = client.get("/api/results")
    assert r.status_code == 200
    listing = r.json()
    assert [row["id"] for row in listing] == [first["id"], second["id"]]
    for row in listing:
        assert set(row) == {"id", "organizationName", "submittedAt", "overallScore", "maturityLevel"}
        assert "answers" not in row
    assert listing[0]["maturityLevel"] == "Developing"
    assert listing[1]["overallScore"] == 3.2


def test_results_listing_defaults_for_missing_analysis_fields(client, store):
    store.append({"organizationName": "Legacy", "submittedAt": "2024-01-01T00:00:00.000Z",
                  "answers": {}, "comments": {}, "analysis": {}})
    row = client.get("/api/results").json()[0]
    assert row["overallScore"] == 0
    assert row["maturityLevel"] == "Unknown"


def test_corrupt_results_file_is_500(client, store):
    store.path.write_text("[{", encoding="utf-8")
    assert client.get("/api/results").status_code == 500
    r = client.get("/api/results/1")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch result"}


def test_generate_recommendations_fallback_filters_existing(client, lab45):
    lab45.unreachable()
    r = client.post("/api/generate-recommendations", json={
        "currentRecommendations": ["Implement predictive analytics for talent retention"],
        "organizationContext": {"maturityLevel": "Transitioning", "focusAreas": ["AI Adoption"], "industry": "Technology"},
    })
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["generatedAt"].endswith("Z")
    titles = [rec["title"] for rec in body["recommendations"]]
    assert "Implement predictive analytics for talent retention" not in titles
    assert 0 < len(titles) <= 3


def test_generate_recommendations_from_lab45(client, lab45):
    recs = [{
        "title": "Launch internal talent marketplace",
        "description": "Match employees to gigs by skills",
        "impact": "High",
        "timeframe": "Long-term",
        "category": "People & Skills",
        "steps": ["Map skills", "Pick platform"],
    }]
    lab45.reply_content(json.dumps({"recommendations": recs}))
    r = client.post("/api/generate-recommendations", json={"currentRecommendations": [], "organizationContext": {}})
    assert r.status_code == 200
    assert r.json()["recommendations"] == recs


def test_generate_recommendations_accepts_empty_body(client, lab45):
    r = client.post("/api/generate-recommendations")
    assert r.status_code == 200
    assert len(r.json()["recommendations"]) == 3


def test_nan_in_remote_analysis_falls_back_and_round_trips(client, lab45):
    lab45.reply_content('{"overallScore": NaN, "categoryScores": {}, "maturityLevel": "x"}')
    r = _submit(client)
    assert r.status_code == 200
    submitted = r.json()["result"]
    assert submitted["analysis"]["overallScore"] == 3.2
    fetched = client.get(f"/api/results/{submitted['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == submitted


def test_non_object_result_entry_is_500(client, store):
    store.path.write_text('[{"id": "1", "organizationName": "Acme"}, "junk"]', encoding="utf-8")
    r = client.get("/api/results")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch results"}
    r = client.get("/api/results/1")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch result"}


def test_catalog_is_served_as_written(client, catalog):
    doc = json.loads(catalog.path.read_text(encoding="utf-8"))
    doc["owner"] = "HR Operations"
    question = doc["categories"][0]["questions"][0]
    question["helpText"] = "Think about the last 12 months"
    question["options"].append({"value": 6, "text": "Industry leading"})
    catalog.path.write_text(json.dumps(doc), encoding="utf-8")

    r = client.get("/api/questions")
    assert r.status_code == 200
    body = r.json()
    assert body["owner"] == "HR Operations"
    served = body["categories"][0]["questions"][0]
    assert served["helpText"] == "Think about the last 12 months"
    assert served["options"][-1] == {"value": 6, "text": "Industry leading"}


def test_submit_appends_off_the_event_loop(client, store, lab45, monkeypatch):
    seen = []
    append = store.append

    def recording_append(fields):
        try:
            asyncio.get_running_loop()
            seen.append("event loop")
        except RuntimeError:
            seen.append("worker thread")
        return append(fields)

    monkeypatch.setattr(store, "append", recording_append)
    lab45.reply_content(json.dumps(REMOTE_ANALYSIS))
    assert _submit(client).status_code == 200
    assert seen == ["worker thread"]
