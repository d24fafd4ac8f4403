"""
HTTP tests: sprints, daily audits, completions and metrics end to end.

Scenario (owner-scoped, March 2026):
  sprint Mon 2026-03-02 .. Sun 2026-03-29 (4 full weeks)
    goal "Thesis": daily Mon/Wed/Fri writing, weekly advisor meeting x2
    priorities deep-work (10/week), admin (5/week)
  audits Mon 2, Tue 3, Wed 4 ; completions writing Mon+Wed, meeting Tue
"""
import pytest

SPRINT_PAYLOAD = {
    "name": "March thesis sprint",
    "start_date": "2026-03-02",
    "end_date": "2026-03-29",
    "goals": [
        {
            "text": "Thesis",
            "commitments": [
                {"text": "Write 300 words", "kind": "daily", "schedule_days": [1, 3, 5]},
                {"text": "Meet advisor", "kind": "weekly", "weekly_target": 2},
            ],
        }
    ],
    "priorities": [
        {"key": "deep-work", "label": "Deep work", "weekly_target_units": 10},
        {"key": "admin", "label": "Admin", "type": "habit", "weekly_target_units": 5},
    ],
}


def _h(owner_id: str) -> dict:
    return {"X-Owner-Id": owner_id}


@pytest.fixture()
def seeded(client, owner_id):
    headers = _h(owner_id)
    sprint = client.post("/sprints", json=SPRINT_PAYLOAD, headers=headers).json()
    writing, meeting = sprint["goals"][0]["commitments"]

    audits = {
        "2026-03-02": {
            "energy": 4,
            "priority_units": {"deep-work": 3, "admin": 1},
            "proof_of_work": [{"type": "commit", "value": "shipped parser module"}],
        },
        "2026-03-03": {"energy": 4, "priority_units": {"deep-work": 2}},
        "2026-03-04": {"energy": 4, "priority_units": {"admin": 1}},
    }
    for day, body in audits.items():
        assert client.put(f"/daily-audits/{day}", json=body, headers=headers).status_code == 200

    for cid, day in [
        (writing["id"], "2026-03-02"),
        (writing["id"], "2026-03-04"),
        (meeting["id"], "2026-03-03"),
    ]:
        r = client.put(f"/commitments/{cid}/logs/{day}", json={"completed": True}, headers=headers)
        assert r.status_code == 200

    return {"sprint": sprint, "writing": writing, "meeting": meeting, "headers": headers}


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------

class TestSprints:
    def test_create_sprint(self, client, owner_id):
        r = client.post("/sprints", json=SPRINT_PAYLOAD, headers=_h(owner_id))
        assert r.status_code == 201
        data = r.json()
        assert data["active"] is True
        assert data["start_date"] == "2026-03-02"
        writing, meeting = data["goals"][0]["commitments"]
        assert writing["schedule_days"] == [1, 3, 5]
        assert writing["weekly_target"] is None
        assert meeting["weekly_target"] == 2
        assert [p["key"] for p in data["priorities"]] == ["deep-work", "admin"]
        assert data["priorities"][1]["type"] == "habit"

    def test_list_and_get(self, client, owner_id):
        created = client.post("/sprints", json=SPRINT_PAYLOAD, headers=_h(owner_id)).json()
        listed = client.get("/sprints", headers=_h(owner_id)).json()
        assert [s["id"] for s in listed] == [created["id"]]
        r = client.get(f"/sprints/{created['id']}", headers=_h(owner_id))
        assert r.status_code == 200
        assert r.json()["name"] == SPRINT_PAYLOAD["name"]

    def test_other_owner_cannot_read(self, client, owner_id):
        created = client.post("/sprints", json=SPRINT_PAYLOAD, headers=_h(owner_id)).json()
        r = client.get(f"/sprints/{created['id']}", headers=_h(f"{owner_id}-other"))
        assert r.status_code == 404
        assert r.json()["code"] == "SPRINT_NOT_FOUND"

    def test_end_before_start_rejected(self, client, owner_id):
        payload = {**SPRINT_PAYLOAD, "end_date": "2026-03-01"}
        r = client.post("/sprints", json=payload, headers=_h(owner_id))
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_daily_commitment_needs_schedule(self, client, owner_id):
        payload = {
            **SPRINT_PAYLOAD,
            "goals": [{"text": "G", "commitments": [{"text": "x", "kind": "daily"}]}],
        }
        r = client.post("/sprints", json=payload, headers=_h(owner_id))
        assert r.status_code == 422

    def test_schedule_day_out_of_range(self, client, owner_id):
        payload = {
            **SPRINT_PAYLOAD,
            "goals": [{"text": "G", "commitments": [
                {"text": "x", "kind": "daily", "schedule_days": [7]},
            ]}],
        }
        r = client.post("/sprints", json=payload, headers=_h(owner_id))
        assert r.status_code == 422

    def test_duplicate_priority_keys(self, client, owner_id):
        payload = {
            **SPRINT_PAYLOAD,
            "priorities": [{"key": "a", "label": "A"}, {"key": "a", "label": "A again"}],
        }
        r = client.post("/sprints", json=payload, headers=_h(owner_id))
        assert r.status_code == 422


# ---------------------------------------------------------------------------
# Daily audits
# ---------------------------------------------------------------------------

class TestDailyAudits:
    def test_list_in_range(self, client, seeded):
        r = client.get(
            "/daily-audits",
            params={"start": "2026-03-01", "end": "2026-03-31"},
            headers=seeded["headers"],
        )
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 3
        assert [a["day"] for a in data["items"]] == ["2026-03-02", "2026-03-03", "2026-03-04"]

    def test_proof_of_work_flag(self, client, seeded):
        items = client.get(
            "/daily-audits",
            params={"start": "2026-03-02", "end": "2026-03-03"},
            headers=seeded["headers"],
        ).json()["items"]
        assert items[0]["proof_of_work_valid"] is True
        assert items[1]["proof_of_work_valid"] is False

    def test_put_twice_replaces(self, client, seeded):
        headers = seeded["headers"]
        r = client.put("/daily-audits/2026-03-02", json={"energy": 1}, headers=headers)
        assert r.status_code == 200
        assert r.json()["energy"] == 1
        assert r.json()["priority_units"] == {}
        data = client.get(
            "/daily-audits", params={"start": "2026-03-02", "end": "2026-03-02"}, headers=headers,
        ).json()
        assert data["total"] == 1

    def test_audit_attached_to_active_sprint(self, client, seeded):
        r = client.put("/daily-audits/2026-03-05", json={"energy": 3}, headers=seeded["headers"])
        assert r.json()["sprint_id"] == seeded["sprint"]["id"]

    def test_unknown_priority_key(self, client, seeded):
        r = client.put(
            "/daily-audits/2026-03-05",
            json={"energy": 3, "priority_units": {"gaming": 2}},
            headers=seeded["headers"],
        )
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "UNKNOWN_PRIORITY_KEY"
        assert body["details"]["allowed"] == ["admin", "deep-work"]

    @pytest.mark.parametrize("body", [
        {"energy": 0},
        {"energy": 6},
        {"energy": 3, "priority_units": {"deep-work": -1}},
        {},
    ])
    def test_invalid_body(self, client, owner_id, body):
        r = client.put("/daily-audits/2026-03-05", json=body, headers=_h(owner_id))
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_inverted_range(self, client, owner_id):
        r = client.get(
            "/daily-audits",
            params={"start": "2026-03-10", "end": "2026-03-01"},
            headers=_h(owner_id),
        )
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_WINDOW"


# ---------------------------------------------------------------------------
# Completions / day status
# ---------------------------------------------------------------------------

class TestCompletions:
    def test_overwrite(self, client, seeded):
        cid = seeded["writing"]["id"]
        r = client.put(
            f"/commitments/{cid}/logs/2026-03-02", json={"completed": False},
            headers=seeded["headers"],
        )
        assert r.status_code == 200
        assert r.json()["completed"] is False
        status = client.get(f"/commitments/{cid}/status/2026-03-02", headers=seeded["headers"])
        assert status.json()["status"] == "not_done"

    @pytest.mark.parametrize("day,expected", [
        ("2026-03-02", "done"),      # Monday, kept
        ("2026-03-03", "na"),        # Tuesday, not scheduled
        ("2026-03-06", "not_done"),  # Friday, no event
    ])
    def test_day_status(self, client, seeded, day, expected):
        cid = seeded["writing"]["id"]
        r = client.get(f"/commitments/{cid}/status/{day}", headers=seeded["headers"])
        assert r.status_code == 200
        assert r.json()["status"] == expected

    def test_days_left_in_week(self, client, seeded):
        cid = seeded["meeting"]["id"]
        monday = client.get(f"/commitments/{cid}/status/2026-03-02", headers=seeded["headers"])
        sunday = client.get(f"/commitments/{cid}/status/2026-03-08", headers=seeded["headers"])
        assert monday.json()["days_left_in_week"] == 6
        assert sunday.json()["days_left_in_week"] == 0

    def test_unknown_commitment(self, client, owner_id):
        r = client.put(
            "/commitments/999999/logs/2026-03-02", json={"completed": True}, headers=_h(owner_id),
        )
        assert r.status_code == 404
        assert r.json()["code"] == "COMMITMENT_NOT_FOUND"


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class TestWeeklyMetrics:
    def _get(self, client, seeded):
        r = client.get(
            "/metrics/weekly", params={"reference_date": "2026-03-04"}, headers=seeded["headers"],
        )
        assert r.status_code == 200
        return r.json()

    def test_summary(self, client, seeded):
        s = self._get(client, seeded)["summary"]
        assert s["window"] == {"start": "2026-03-02", "end": "2026-03-08"}
        assert s["logs_count"] == 3
        assert s["avg_energy"] == 4
        assert s["total_promises_kept"] == 3
        assert s["total_promises_target"] == 5
        assert s["promises_at_risk"] == 2
        assert (s["total_actual_units"], s["motion_units"], s["action_units"]) == (7, 2, 5)
        priorities = {p["key"]: p for p in s["priority_summary"]}
        assert priorities["deep-work"]["ratio"] == pytest.approx(0.5)
        assert priorities["admin"]["ratio"] == pytest.approx(0.4)

    def test_alerts_insight_and_score(self, client, seeded):
        data = self._get(client, seeded)
        assert len(data["alerts"]) == 1
        assert data["alerts"][0].startswith("VISIBILITY_GAP:")
        assert data["primary_insight"]["id"] == "visibility-gap"
        assert [p["label"] for p in data["at_risk_promises"]] == ["Meet advisor", "Write 300 words"]
        # action ratio 5/7
        assert data["integrity_score"] == 81

    def test_empty_week_without_sprint(self, client, owner_id):
        r = client.get(
            "/metrics/weekly", params={"reference_date": "2026-03-04"}, headers=_h(owner_id),
        )
        data = r.json()
        assert data["summary"]["goal_summaries"] == []
        assert data["summary"]["avg_energy"] == 0
        assert data["integrity_score"] == 100
        assert [a.split(":")[0] for a in data["alerts"]] == ["VISIBILITY_GAP"]


class TestMonthlyMetrics:
    def test_monthly(self, client, seeded):
        r = client.get(
            "/metrics/monthly", params={"reference_date": "2026-03-15"}, headers=seeded["headers"],
        )
        assert r.status_code == 200
        m = r.json()
        assert m["window"] == {"start": "2026-03-01", "end": "2026-03-31"}
        assert m["days_logged"] == 3
        assert m["longest_streak"] == 3
        assert m["total_days_in_month"] == 31
        assert len(m["calendar"]) == 31
        assert len(m["weekly_summaries"]) == 6
        assert m["goal_summaries"][0]["trend"] == "down"
        assert m["total_promises_kept"] == 3


class TestSprintMetrics:
    def test_active_sprint(self, client, seeded):
        r = client.get("/metrics/sprint", params={"today": "2026-03-04"}, headers=seeded["headers"])
        assert r.status_code == 200
        s = r.json()
        assert s["sprint_id"] == seeded["sprint"]["id"]
        assert s["sprint_duration_days"] == 28
        assert s["elapsed_days"] == 3
        assert s["total_promises_kept"] == 3
        # 12 writing sessions + 8 advisor meetings over four weeks
        assert s["total_promises_target"] == 20
        assert s["velocity"] == pytest.approx(1.0)
        assert len(s["weekly_breakdown"]) == 4
        assert s["logs_count"] == 3

    def test_by_id(self, client, seeded):
        r = client.get(
            "/metrics/sprint",
            params={"sprint_id": seeded["sprint"]["id"], "today": "2026-03-29"},
            headers=seeded["headers"],
        )
        assert r.json()["elapsed_days"] == 28

    def test_no_active_sprint(self, client, owner_id):
        r = client.get("/metrics/sprint", headers=_h(owner_id))
        assert r.status_code == 404
        assert r.json()["code"] == "NO_ACTIVE_SPRINT"

    def test_unknown_sprint_id(self, client, owner_id):
        r = client.get("/metrics/sprint", params={"sprint_id": 999999}, headers=_h(owner_id))
        assert r.status_code == 404
        assert r.json()["code"] == "SPRINT_NOT_FOUND"


class TestCalculators:
    @pytest.mark.parametrize("motion,action,score", [(0, 0, 100), (2, 8, 90), (5, 5, 60), (10, 0, 0)])
    def test_integrity(self, client, motion, action, score):
        r = client.post("/metrics/integrity", json={"motion_units": motion, "action_units": action})
        assert r.status_code == 200
        assert r.json()["score"] == score

    def test_integrity_rejects_negative(self, client):
        r = client.post("/metrics/integrity", json={"motion_units": -1, "action_units": 0})
        assert r.status_code == 422

    @pytest.mark.parametrize("units,proof,valid", [
        (0, None, True),
        (3, "short", False),
        (3, "wrote the migration", True),
    ])
    def test_proof_of_work(self, client, units, proof, valid):
        r = client.post("/metrics/proof-of-work", json={"units": units, "proof": proof})
        assert r.status_code == 200
        assert r.json()["valid"] is valid


def test_missing_owner_header(client):
    r = client.get("/sprints")
    assert r.status_code == 422
    assert r.json()["code"] == "VALIDATION_ERROR"
