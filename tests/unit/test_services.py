"""
Unit tests for the resource services against a fake backend: query strings,
request bodies, response envelopes and what gets stored locally.
"""

import asyncio
import base64

import pytest

from clinic_console.core.credential_store import AUTH_TOKEN_KEY, AUTH_USER_KEY, TENANT_KEY
from clinic_console.core.exceptions import ApiError, ConfirmationMismatchError, ValidationError
from clinic_console.models.clinic import OnboardingStatus, StaffUser
from clinic_console.models.enums import OnboardingStep, UserRole
from clinic_console.services.onboarding import file_to_base64, next_step

from conftest import API_URL, GATEWAY_URL, body_of, ok

LOGIN_DATA = {
    "token": "tenant-token",
    "user": {"id": "u1", "email": "owner@sunrise.example", "name": "Dr. Rao", "role": "owner"},
    "tenant": {
        "tenantId": "CLN-0001",
        "name": "Sunrise Clinic",
        "onboarding": {"completed": False, "steps": {"clinicDetails": True}},
    },
}


class TestAuthService:
    def test_login_stores_session(self, console, server, store):
        server.api("POST", "/auth/login", json=ok(LOGIN_DATA))

        result = asyncio.run(console.auth.login("owner@sunrise.example", "secret"))

        assert result.tenant.needs_onboarding
        assert store.get(AUTH_TOKEN_KEY) == "tenant-token"
        assert store.get_json(AUTH_USER_KEY)["email"] == "owner@sunrise.example"
        assert store.get_json(TENANT_KEY)["tenantId"] == "CLN-0001"
        assert console.auth.is_authenticated()
        assert console.auth.get_tenant().name == "Sunrise Clinic"

    def test_activate_stores_session(self, console, server, store):
        server.api("POST", "/auth/activate", json=ok(LOGIN_DATA))

        asyncio.run(console.auth.activate("act-token", "new-secret"))

        assert body_of(server.calls[0]) == {"token": "act-token", "password": "new-secret"}
        assert store.get(AUTH_TOKEN_KEY) == "tenant-token"

    def test_signup_payload(self, console, server):
        server.api("POST", "/auth/signup", json=ok({"email": "new@clinic.example"}))

        asyncio.run(console.auth.signup("new@clinic.example", "Dr. New"))

        assert body_of(server.calls[0]) == {"email": "new@clinic.example", "ownerName": "Dr. New"}

    @pytest.mark.parametrize("body", [
        {"success": True},
        {"success": True, "data": {"user": LOGIN_DATA["user"]}},
        {"success": True, "data": {"token": "tenant-token"}},
    ])
    def test_login_without_session_raises_api_error(self, console, server, store, body):
        server.api("POST", "/auth/login", json=body)

        with pytest.raises(ApiError, match="Unexpected response"):
            asyncio.run(console.auth.login("owner@sunrise.example", "secret"))

        assert store.get(AUTH_TOKEN_KEY) is None

    def test_logout_clears_session(self, console, server, store):
        server.api("POST", "/auth/login", json=ok(LOGIN_DATA))
        asyncio.run(console.auth.login("owner@sunrise.example", "secret"))

        console.auth.logout()

        assert not console.auth.is_authenticated()
        assert console.auth.get_user() is None


class TestPatientService:
    def test_list_query_string(self, console, server):
        server.api("GET", "/patients", json=ok({"patients": [{"_id": "p1", "name": "Asha", "phone": "999"}]}))

        page = asyncio.run(console.patients.list(search="", page=2, is_active=False, sort_by="name"))

        assert page.patients[0].name == "Asha"
        assert dict(server.calls[0].url.params) == {"page": "2", "sortBy": "name", "isActive": "false"}

    def test_delete_is_soft(self, console, server):
        server.api("DELETE", "/patients/p1", json={"success": True, "message": "Patient deactivated"})

        assert asyncio.run(console.patients.delete("p1")) == "Patient deactivated"


class TestDoctorService:
    def test_list_sends_search(self, console, server):
        server.api("GET", "/doctors", json=ok({"doctors": [{"_id": "d1", "name": "Meera Iyer", "specialization": "ENT"}]}))

        doctors = asyncio.run(console.doctors.list(search="meera"))

        assert doctors[0].display_name == "Dr. Meera Iyer"
        assert dict(server.calls[0].url.params) == {"search": "meera"}

    def test_create_sends_camel_case(self, console, server):
        server.api("POST", "/doctors", json=ok({"doctor": {"_id": "d2", "name": "Dr. Sen", "consultationFee": 400}}))

        doctor = asyncio.run(console.doctors.create({"name": "Dr. Sen", "consultationFee": 400}))

        assert doctor.consultation_fee == 400
        assert body_of(server.calls[0]) == {"name": "Dr. Sen", "consultationFee": 400}


class TestRateCard:
    def test_list_by_category(self, console, server):
        server.api("GET", "/services", json=ok({"services": [{"_id": "sv1", "name": "CBC", "category": "laboratory", "rate": 250}]}))

        items = asyncio.run(console.services.list(category="laboratory"))

        assert items[0].rate == 250
        assert server.calls[0].url.params["category"] == "laboratory"

    def test_delete_returns_message(self, console, server):
        server.api("DELETE", "/services/sv1", json={"success": True, "message": "Service deleted"})

        assert asyncio.run(console.services.delete("sv1")) == "Service deleted"


class TestInventoryService:
    def test_expiring_defaults_to_90_days(self, console, server):
        server.api("GET", "/medicines/expiring", json=ok({"medicines": [{"_id": "m1", "name": "Amoxicillin"}]}))

        medicines = asyncio.run(console.medicines.expiring())

        assert [m.name for m in medicines] == ["Amoxicillin"]
        assert server.calls[0].url.params["days"] == "90"

    def test_add_stock_rejects_non_positive_quantity(self, console, server):
        with pytest.raises(ValidationError, match="Quantity must be positive"):
            asyncio.run(console.medicines.add_stock("m1", "B1", 0, "2026-01-31"))
        assert server.calls == []

    def test_add_stock_payload(self, console, server):
        server.api("POST", "/medicines/stock", json=ok({"batch": {
            "_id": "sb1", "medicineId": "m1", "batchNo": "B1", "quantity": 100, "expiryDate": "2026-01-31"
        }}))

        batch = asyncio.run(console.medicines.add_stock("m1", "B1", 100, "2026-01-31", selling_price=2.5))

        assert batch.batch_no == "B1"
        assert body_of(server.calls[0]) == {
            "medicineId": "m1",
            "batchNo": "B1",
            "quantity": 100,
            "expiryDate": "2026-01-31",
            "sellingPrice": 2.5,
        }

    def test_medicine_detail_with_batches(self, console, server):
        server.api("GET", "/medicines/m1", json=ok({
            "medicine": {"_id": "m1", "name": "Amoxicillin"},
            "batches": [{"medicineId": "m1", "batchNo": "B1", "quantity": 10, "expiryDate": "2026-01-31"}],
        }))

        detail = asyncio.run(console.medicines.get("m1"))

        assert detail["medicine"].name == "Amoxicillin"
        assert detail["batches"][0].quantity == 10


class TestUserService:
    def test_create_requires_password(self, console, server):
        with pytest.raises(ValidationError, match="Password is required"):
            asyncio.run(console.users.create("Desk", "desk@clinic.example", ""))
        assert server.calls == []

    def test_create_rejects_unknown_role(self, console, server):
        with pytest.raises(ValueError):
            asyncio.run(console.users.create("Desk", "desk@clinic.example", "pw", role="janitor"))
        assert server.calls == []

    def test_update_without_password_omits_it(self, console, server):
        server.api("PUT", "/users/u2", json=ok({"user": {"_id": "u2", "name": "Desk", "email": "desk@clinic.example", "role": "pharmacist"}}))

        user = asyncio.run(console.users.update("u2", "Desk", "desk@clinic.example", UserRole.PHARMACIST))

        assert user.role == UserRole.PHARMACIST
        assert "password" not in body_of(server.calls[0])

    def test_delete_requires_exact_email(self, console, server):
        user = StaffUser(_id="u2", name="Desk", email="desk@clinic.example", role="receptionist")

        with pytest.raises(ConfirmationMismatchError):
            asyncio.run(console.users.delete(user, "Desk@clinic.example"))
        assert server.calls == []

        server.api("DELETE", "/users/u2", json={"success": True, "message": "User deleted"})
        assert asyncio.run(console.users.delete(user, "desk@clinic.example")) == "User deleted"


class TestOnboarding:
    def test_next_step_order(self):
        status = OnboardingStatus(**{"onboarding": {"steps": {"clinicDetails": True, "branding": False, "doctor": False}}})
        assert next_step(status) == OnboardingStep.BRANDING
        assert status.pending_steps() == [OnboardingStep.BRANDING, OnboardingStep.DOCTOR]

    def test_next_step_none_when_completed(self):
        status = OnboardingStatus(**{"onboarding": {"completed": True}})
        assert next_step(status) is None

    def test_status_from_backend(self, console, server):
        server.api("GET", "/onboarding/status", json=ok({
            "onboarding": {"completed": False, "steps": {"clinicDetails": True, "branding": True}},
            "tenant": {"name": "Sunrise Clinic"},
            "doctorCount": 0,
        }))

        status = asyncio.run(console.onboarding.status())

        assert status.next_step() == OnboardingStep.DOCTOR
        assert status.tenant.name == "Sunrise Clinic"

    def test_file_to_base64(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"\x89PNG fake")

        url = file_to_base64(str(path))

        assert url == "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode("ascii")

    def test_file_to_base64_rejects_non_images(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValidationError):
            file_to_base64(str(path))

    def test_clinic_details_payload(self, console, server):
        server.api("PUT", "/onboarding/clinic-details", json={"success": True, "message": "Saved"})

        asyncio.run(console.onboarding.save_clinic_details("Sunrise Clinic", phone="080-1234"))

        assert body_of(server.calls[0]) == {"clinicName": "Sunrise Clinic", "phone": "080-1234"}


class TestWhatsAppIntegrationService:
    def test_active_is_none_on_error(self, console, server):
        server.api("GET", "/whatsapp/active", status=404, json={"error": "No active integration"})

        assert asyncio.run(console.whatsapp.active()) is None

    def test_status(self, console, server):
        server.api("GET", "/whatsapp/status", json=ok({"hasIntegration": True, "hasActiveIntegration": False, "totalIntegrations": 2}))

        status = asyncio.run(console.whatsapp.status())

        assert status.has_integration
        assert status.total_integrations == 2

    def test_sync_omits_unset_fields(self, console, server):
        server.api("PATCH", "/whatsapp/i1/sync", json=ok({"integration": {"id": "i1", "sessionId": "s1"}}))

        asyncio.run(console.whatsapp.sync_status("i1", "logged_in", phone_number="+91999"))
        asyncio.run(console.whatsapp.sync_status("i1", "error", error_message="Phone disconnected"))

        assert [body_of(call) for call in server.calls] == [
            {"status": "logged_in", "phoneNumber": "+91999"},
            {"status": "error", "errorMessage": "Phone disconnected"},
        ]

    def test_create_omits_missing_email(self, console, server):
        server.api("POST", "/whatsapp", json=ok({"integration": {"id": "i1", "sessionId": "s1"}}))

        asyncio.run(console.whatsapp.create_integration("s1", "Desk", "initializing"))

        assert "whatsappApiEmail" not in body_of(server.calls[0])

    def test_set_default(self, console, server):
        server.api("PATCH", "/whatsapp/i1/default", json=ok({"integration": {"id": "i1", "sessionId": "s1", "isDefault": True}}))

        integration = asyncio.run(console.whatsapp.set_default("i1"))

        assert integration.is_default


class TestWhatsAppGateway:
    def test_gateway_uses_its_own_token(self, console, server, store):
        store.set(AUTH_TOKEN_KEY, "tenant-token")
        store.set("whatsappToken", "wa-token")
        server.gateway("POST", "/api/whatsapp/send", json={"success": True, "message": "sent"})

        asyncio.run(console.gateway.send_message("s1", "+91999", "Your appointment is at 10:00"))

        request = server.calls_to("POST", f"{GATEWAY_URL}/api/whatsapp/send")[0]
        assert request.headers["Authorization"] == "Bearer wa-token"
        assert body_of(request) == {"session_id": "s1", "phone_number": "+91999", "message": "Your appointment is at 10:00"}

    def test_send_with_file_is_multipart(self, console, server, store, tmp_path):
        store.set("whatsappToken", "wa-token")
        server.gateway("POST", "/api/whatsapp/send-with-file", json={"success": True})
        pdf = tmp_path / "bill.pdf"
        pdf.write_bytes(b"%PDF-1.4")

        asyncio.run(console.gateway.send_with_file("s1", "+91999", str(pdf), caption="Your bill"))

        request = server.calls[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="caption"' in request.content
        assert b"%PDF-1.4" in request.content

    def test_gateway_401_does_not_touch_tenant_session(self, console, server, store, navigator):
        store.set(AUTH_TOKEN_KEY, "tenant-token")
        server.gateway("GET", "/api/whatsapp/sessions", status=401, json={"detail": "Not authenticated"})

        with pytest.raises(ApiError, match="Not authenticated"):
            asyncio.run(console.gateway.list_sessions())

        assert store.get(AUTH_TOKEN_KEY) == "tenant-token"
        assert navigator.pathname == "/dashboard"


class TestDashboardService:
    def test_stats(self, console, server):
        server.api("GET", "/dashboard/stats", json=ok({"totalPatients": 120, "todayAppointments": 8, "todayRevenue": 5400.5}))

        stats = asyncio.run(console.dashboard.stats())

        assert stats.total_patients == 120
        assert stats.today_revenue == 5400.5
        assert server.calls_to("GET", f"{API_URL}/dashboard/stats")
