"""
End-to-end API tests through the FastAPI app.
"""

from samudra.handlers.payments import calculate_payout

SATELLITE_DATA = "Sentinel-2 NDVI composite shows canopy cover up 14% across restored plots since baseline."
COMMUNITY_REPORT = "Village monitors report seedling survival above 80% in the 2024 planting blocks near Gosaba."

PROJECT = {
    "name": "Sundarbans Mangrove Restoration",
    "description": "Community-led mangrove restoration and conservation with biodiversity monitoring.",
    "location": "Sundarbans, West Bengal",
    "ecosystemType": "mangrove",
    "area": 1500,
}


def create_project(client, headers, **overrides):
    response = client.post("/projects", json={**PROJECT, **overrides}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["projectId"]


def submit_mrv(client, headers, project_id):
    response = client.post("/mrv", json={
        "projectId": project_id,
        "rawData": {"satelliteData": SATELLITE_DATA, "communityReports": COMMUNITY_REPORT},
    }, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] and body["version"]
    assert client.get("/health/live").status_code == 404


def test_credit_lifecycle(client, manager_headers, verifier_headers, buyer_headers):
    project_id = create_project(client, manager_headers)

    submitted = submit_mrv(client, manager_headers, project_id)
    mrv_id = submitted["mrvId"]
    estimate = submitted["mrvData"]["mlResults"]["carbon_estimate"]
    assert 50 <= estimate < 150
    assert submitted["mrvData"]["status"] == "pending_ml_processing"
    assert 0 <= submitted["qualityScore"] <= 100

    pending = client.get("/mrv/pending", headers=verifier_headers).json()["pendingMrv"]
    assert [m["id"] for m in pending] == [mrv_id]

    response = client.post(f"/mrv/{mrv_id}/approve", json={"approved": True, "notes": "ok"}, headers=verifier_headers)
    assert response.status_code == 200
    assert response.json()["mrvData"]["status"] == "approved"

    stats = client.get("/public/stats").json()
    assert stats["totalCreditsIssued"] == estimate
    assert stats["totalCreditsRetired"] == 0
    assert stats["totalProjects"] == 1
    assert stats["projects"][0]["status"] == "approved"

    available = client.get("/credits/available", headers=buyer_headers).json()["availableCredits"]
    assert len(available) == 1
    credit = available[0]
    assert credit["amount"] == estimate

    purchase = {
        "creditId": credit["id"],
        "amount": credit["amount"],
        "paymentData": {"paymentId": "pay_001", "status": "succeeded"},
    }
    response = client.post("/credits/purchase", json=purchase, headers=buyer_headers)
    assert response.status_code == 200, response.text
    assert response.json()["success"] is True

    response = client.post("/credits/purchase", json=purchase, headers=buyer_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Credit has already been purchased"}

    owned = client.get("/credits/owned", headers=buyer_headers).json()["ownedCredits"]
    assert [c["id"] for c in owned] == [credit["id"]]

    retire = {"creditId": credit["id"], "reason": "FY24 scope 1 offset"}
    response = client.post("/credits/retire", json=retire, headers=buyer_headers)
    assert response.status_code == 200
    assert response.json()["retirement"]["amount"] == estimate

    response = client.post("/credits/retire", json=retire, headers=buyer_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Credit has already been retired"}

    stats = client.get("/public/stats").json()
    assert stats["totalCreditsRetired"] == estimate

    retirements = client.get("/credits/retirements", headers=buyer_headers).json()["retirements"]
    assert len(retirements) == 1

    payouts = client.get("/payouts/manager", headers=manager_headers).json()
    _, _, seller_payout = calculate_payout(estimate, 15, 83, 0.10)
    assert payouts["totalPayout"] == seller_payout


def test_rejected_mrv_issues_no_credit(client, manager_headers, verifier_headers, buyer_headers):
    project_id = create_project(client, manager_headers)
    mrv_id = submit_mrv(client, manager_headers, project_id)["mrvId"]

    response = client.post(f"/mrv/{mrv_id}/approve", json={"approved": False}, headers=verifier_headers)
    assert response.json()["mrvData"]["status"] == "rejected"

    response = client.post(f"/mrv/{mrv_id}/approve", json={"approved": True}, headers=verifier_headers)
    assert response.status_code == 409

    assert client.get("/credits/available", headers=buyer_headers).json()["availableCredits"] == []
    assert client.get("/public/stats").json()["totalCreditsIssued"] == 0


def test_role_guard_message(client, buyer_headers, manager_headers):
    response = client.post("/projects", json=PROJECT, headers=buyer_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. project manager role required."}

    response = client.get("/mrv/pending", headers=manager_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. nccr verifier role required."}


def test_missing_or_invalid_token(client):
    response = client.get("/projects/manager")
    assert response.status_code == 401
    assert response.json() == {"error": "No access token provided"}

    response = client.get("/projects/manager", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid access token"}


def test_project_validation_errors(client, manager_headers):
    response = client.post("/projects", json={**PROJECT, "ecosystemType": "kelp"}, headers=manager_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid ecosystem type"}

    response = client.post("/projects", json={"name": "Only a name"}, headers=manager_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required field: description"}


def test_manager_projects_and_delete(client, manager_headers):
    keep = create_project(client, manager_headers)
    drop = create_project(client, manager_headers, ecosystemType="seagrass", area=200)
    submit_mrv(client, manager_headers, keep)

    body = client.get("/projects/manager", headers=manager_headers).json()
    assert {p["id"] for p in body["projects"]} == {keep, drop}
    assert body["stats"]["total"] == 2

    response = client.delete(f"/projects/{keep}", headers=manager_headers)
    assert response.status_code == 409

    response = client.delete(f"/projects/{drop}", headers=manager_headers)
    assert response.json() == {"success": True, "message": "Project deleted successfully"}

    response = client.delete(f"/projects/{drop}", headers=manager_headers)
    assert response.status_code == 404


def test_all_projects_enriched_with_manager(client, manager_headers, verifier_headers):
    create_project(client, manager_headers)

    projects = client.get("/projects/all", headers=verifier_headers).json()["projects"]
    assert projects[0]["managerName"] == "Sundarbans Field Team"
    assert projects[0]["managerEmail"] == "manager@example.com"


def test_verifier_signup_restricted(client):
    response = client.post("/signup", json={
        "email": "someone@example.com",
        "password": "secret-pass",
        "name": "Not NCCR",
        "role": "nccr_verifier",
    })
    assert response.status_code == 403
    assert "NCCR Verifier registration is restricted" in response.json()["error"]

    eligibility = client.post("/check-nccr-eligibility", json={"email": "Verifier1@NCCR.gov.in"}).json()
    assert eligibility["isAllowed"] is True


def test_bad_login(client, buyer_headers):
    response = client.post("/login", json={"email": "buyer@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid login credentials"}


def test_ml_verification_round_trip(client, verifier_headers):
    response = client.post("/ml/verify-project", json={
        "projectId": "project_42",
        "projectData": {**PROJECT, "name": "X", "description": "", "area": 30, "location": "Delhi"},
    }, headers=verifier_headers)
    assert response.status_code == 200
    verification = response.json()["verification"]
    assert verification["recommendation"].startswith("REJECT")
    assert len(verification["riskFactors"]) == 3

    stored = client.get("/ml/verification/project_42", headers=verifier_headers).json()["verification"]
    assert stored["mlScore"] == verification["mlScore"]

    response = client.get("/ml/verification/project_43", headers=verifier_headers)
    assert response.status_code == 404


def test_upload_evidence(client, manager_headers):
    project_id = create_project(client, manager_headers)

    response = client.post(
        "/mrv/upload",
        data={"projectId": project_id},
        files=[
            ("files", ("canopy.jpg", b"\xff\xd8jpeg", "image/jpeg")),
            ("files", ("salinity.csv", b"ts,ppt\n1,32\n", "text/csv")),
        ],
        headers=manager_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "Successfully uploaded 2 files"
    assert [f["category"] for f in body["files"]] == ["photo", "iot_data"]
    assert body["files"][1]["type"] == "text/csv"


def test_chain_transaction_lookup(client, manager_headers):
    create_project(client, manager_headers)
    tx_hash = client.get("/projects/manager", headers=manager_headers).json()["projects"][0]["onChainTxHash"]

    response = client.get(f"/chain/transactions/{tx_hash}")
    assert response.status_code == 200
    assert response.json()["transaction"]["status"] == "confirmed"

    assert client.get("/chain/transactions/0xdeadbeef").status_code == 404
