"""Integration tests for the admin client API — admin key required."""


class TestAdminAuth:
    async def test_missing_header(self, client, client_payload):
        resp = await client.post("/admin/clients", json=client_payload())
        assert resp.status_code == 422  # missing header

    async def test_wrong_key(self, client, client_payload):
        resp = await client.post(
            "/admin/clients",
            json=client_payload(),
            headers={"X-TenantGate-Api-Key": "wrong-key"},
        )
        assert resp.status_code == 403

    async def test_list_requires_auth(self, client):
        resp = await client.get("/admin/clients")
        assert resp.status_code == 422


class TestCreateClient:
    async def test_create(self, client, admin_headers, client_payload):
        resp = await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["company_name"] == "Acme Corp"
        assert data["license_key"].startswith("LIC-")
        assert data["status"] == "active"
        assert data["api_status"] == "active"
        assert data["auth_type"] == "HMAC"
        assert data["api_base_url"] == "https://acmecorp.io"
        assert data["subscription_end_date"] is not None

    async def test_setup_instructions_carry_plaintext_key_once(
        self, client, admin_headers, client_payload
    ):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        api_key = created["setup_instructions"]["api_key"]
        assert len(api_key) == 64
        assert created["setup_instructions"]["license_key"] == created["license_key"]
        assert "api_key" not in created
        assert created["api_key_preview"] == api_key[:8] + "..."

        fetched = (await client.get(
            f"/admin/clients/{created['id']}", headers=admin_headers
        )).json()
        assert api_key not in str(fetched)

    async def test_lifetime(self, client, admin_headers, client_payload):
        resp = await client.post(
            "/admin/clients",
            json=client_payload(subscription_type="lifetime"),
            headers=admin_headers,
        )
        assert resp.json()["subscription_end_date"] is None

    async def test_duplicate_email(self, client, admin_headers, client_payload):
        await client.post("/admin/clients", json=client_payload(), headers=admin_headers)
        resp = await client.post(
            "/admin/clients",
            json=client_payload(company_name="Other"),
            headers=admin_headers,
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "Client with this email already exists"
        assert resp.json()["code"] == "CONFLICT"

    async def test_invalid_email(self, client, admin_headers, client_payload):
        resp = await client.post(
            "/admin/clients",
            json=client_payload(contact_email="not-an-email"),
            headers=admin_headers,
        )
        assert resp.status_code == 422


class TestClientCrud:
    async def test_list_and_filter(self, client, admin_headers, client_payload):
        a = (await client.post(
            "/admin/clients", json=client_payload(contact_email="a@acmecorp.io"),
            headers=admin_headers,
        )).json()
        await client.post(
            "/admin/clients", json=client_payload(contact_email="b@acmecorp.io"),
            headers=admin_headers,
        )
        await client.post(
            f"/admin/clients/{a['id']}/toggle-status",
            json={"action": "suspend"}, headers=admin_headers,
        )
        all_clients = (await client.get("/admin/clients", headers=admin_headers)).json()
        assert len(all_clients) == 2
        suspended = (await client.get(
            "/admin/clients", params={"status": "suspended"}, headers=admin_headers
        )).json()
        assert [c["id"] for c in suspended] == [a["id"]]

    async def test_get_missing(self, client, admin_headers):
        resp = await client.get("/admin/clients/nope", headers=admin_headers)
        assert resp.status_code == 404
        assert resp.json()["error"] == "Client not found"

    async def test_patch(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.patch(
            f"/admin/clients/{created['id']}",
            json={"company_name": "Acme Inc", "api_status": "paused"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["company_name"] == "Acme Inc"
        assert data["api_status"] == "paused"
        assert data["contact_name"] == "Jane Doe"

    async def test_patch_clearing_end_date_rejected(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.patch(
            f"/admin/clients/{created['id']}",
            json={"subscription_end_date": None},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    async def test_delete(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.delete(f"/admin/clients/{created['id']}", headers=admin_headers)
        assert resp.status_code == 204
        resp = await client.get(f"/admin/clients/{created['id']}", headers=admin_headers)
        assert resp.status_code == 404


class TestLifecycle:
    async def test_toggle_with_reason(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.post(
            f"/admin/clients/{created['id']}/toggle-status",
            json={"action": "disable", "reason": "chargeback"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "suspended"
        assert data["subscription_status"] == "active"
        assert data["notes"].endswith("DISABLE: chargeback")

    async def test_invalid_action(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.post(
            f"/admin/clients/{created['id']}/toggle-status",
            json={"action": "explode"},
            headers=admin_headers,
        )
        assert resp.status_code == 422

    async def test_regenerate_license(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.post(
            f"/admin/clients/{created['id']}/regenerate-license", headers=admin_headers
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["old_license_key"] == created["license_key"]
        assert data["license_key"] != created["license_key"]

        old = await client.post("/verify-license", json={
            "licenseKey": created["license_key"], "domain": "acmecorp.io",
        })
        assert old.status_code == 401
        new = await client.post("/verify-license", json={
            "licenseKey": data["license_key"], "domain": "acmecorp.io",
        })
        assert new.status_code == 200

    async def test_regenerate_api_key(self, client, admin_headers, client_payload):
        created = (await client.post(
            "/admin/clients", json=client_payload(), headers=admin_headers
        )).json()
        resp = await client.post(
            f"/admin/clients/{created['id']}/regenerate-api-key", headers=admin_headers
        )
        assert resp.status_code == 200
        data = resp.json()
        new_key = data["setup_instructions"]["api_key"]
        assert new_key != created["setup_instructions"]["api_key"]
        assert data["api_status"] == "active"
        assert any(new_key in line for line in data["setup_instructions"]["instructions"])

    async def test_verification_logs_unknown_client(self, client, admin_headers):
        resp = await client.get("/admin/clients/nope/verification-logs", headers=admin_headers)
        assert resp.status_code == 404
