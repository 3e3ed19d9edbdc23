"""End-to-end tests for the complete workflow."""


class TestCompleteWorkflow:
    """End-to-end tests for the account management and sync workflow."""

    def test_complete_workflow(self, client, warehouse, db_session):
        """
        Test the complete workflow:
        1. Create an account with warehouse ids
        2. Add a task and a note
        3. Sync the account from the warehouse
        4. Edit manual fields and confirm a resync keeps them
        5. Check the dashboard and the run history
        """
        # Step 1: Create an account
        response = client.post("/api/v1/accounts", json={
            "accountName": "E2E Test Company",
            "priority": "TIER_1",
            "services": ["SEO"],
            "pointsPurchased": 500,
            "pointsDelivered": 0,
            "recurringPointsAllotment": 100,
            "mrr": "$4,000",
            "growthInMrr": "$1,000",
            "clientFolderId": "folder-e2e",
            "clientListTaskId": "list-e2e",
        })
        assert response.status_code == 201
        account = response.json()
        account_id = account["accountId"]
        assert account["pointsStrikingDistance"] == 350
        assert account["delivery"] == "OFF_TRACK"
        assert account["potentialMrr"] == 5000

        # Step 2: Add a task and a note
        task = client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": "Kickoff"})
        assert task.status_code == 201
        note = client.post(f"/api/v1/accounts/{account_id}/notes", json={"description": "Signed"})
        assert note.status_code == 201

        # Step 3: Sync from the warehouse
        warehouse.records["folder-e2e"] = {
            "account_name": "E2E Test Company Ltd",
            "account_manager": "Priya Patel",
            "points_delivered": "400",
            "mrr": "6,000",
            "goals": [
                {"external_id": "g-1", "description": "Launch ABM pilot", "progress": "50%"},
                {"external_id": "g-2", "description": "Grow organic traffic", "progress": "20%"},
            ],
        }
        response = client.post("/api/v1/accounts/sync")
        assert response.status_code == 200
        assert response.json()["counters"]["merged"] == 1

        account = client.get(f"/api/v1/accounts/{account_id}").json()
        assert account["accountName"] == "E2E Test Company Ltd"
        assert account["accountManager"] == "Priya Patel"
        assert account["pointsStrikingDistance"] == -50
        assert account["delivery"] == "ON_TRACK"
        assert account["potentialMrr"] == 7000
        assert account["goalProgress"] == 35
        assert account["lastSyncState"] == "MERGED"
        assert account["priority"] == "TIER_1"
        assert account["services"] == ["SEO"]

        # Step 4: Manual edits survive a resync
        response = client.put(f"/api/v1/accounts/{account_id}", json={
            "priority": "TIER_2",
            "growthInMrr": 2000,
            "industry": "Manufacturing",
        })
        assert response.status_code == 200

        response = client.post(f"/api/v1/accounts/{account_id}/sync")
        assert response.status_code == 200
        account = response.json()["account"]
        assert account["priority"] == "TIER_2"
        assert account["industry"] == "Manufacturing"
        assert account["potentialMrr"] == 8000

        # Tasks and notes are untouched by sync
        assert len(client.get(f"/api/v1/accounts/{account_id}/tasks").json()) == 1
        assert len(client.get(f"/api/v1/accounts/{account_id}/notes").json()) == 1

        # Step 5: Dashboard and run history
        summary = client.get("/api/v1/dashboard/summary").json()
        assert summary["totalAccounts"] == 1
        assert summary["offTrackAccounts"] == 0
        assert summary["averageGoalProgress"] == 35

        runs = client.get("/api/v1/pipelines/runs").json()
        assert len(runs) == 1
        assert runs[0]["status"] == "completed"
