import unittest
from datetime import datetime

from tests.route_helpers import RouteTestCase, ts


class DoctorRouteTestCase(RouteTestCase):
    def setUp(self):
        super().setUp()
        self.add_doctor("d1", "u-doc", "Dr. Grey")
        self.add_doctor("d2", "u-doc2", "Dr. Yang", specialization="Surgery")
        self.add_patient("p1", "u-p1", "Charlie Brown", "charlie@example.com", blood_group="B+", date_of_birth=ts(20))
        self.add_patient("p2", "u-p2", "alice Smith", "alice@example.com", blood_group="O-")
        self.add_patient("p3", "u-p3", "Bob Stone", "bob@mail.example.com")
        self.login_as("u-doc", "doctor")


class TestMyPatients(DoctorRouteTestCase):
    def test_aggregates_visits_per_patient(self):
        self.add_record("r1", "p1", "d1", "Flu", ts(2))
        self.add_record("r2", "p2", "d1", "Migraine", ts(4))
        self.add_record("r3", "p1", "d1", "Flu follow-up", ts(6))
        self.add_record("r4", "p3", "d2", "Fracture", ts(8))

        resp = self.client.get("/api/doctor/patients")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        rows = body["patients"]
        self.assertEqual([r["id"] for r in rows], ["p1", "p2"])
        self.assertEqual(rows[0]["total_visits"], 2)
        self.assertEqual(rows[0]["last_visit"][:10], "2024-01-06")
        self.assertEqual(rows[1]["total_visits"], 1)
        self.assertEqual(body["pagination"]["total_items"], 2)

    def test_pagination(self):
        for i, pid in enumerate(("p1", "p2", "p3"), start=1):
            self.add_record(f"r{i}", pid, "d1", "Checkup", ts(i))

        resp = self.client.get("/api/doctor/patients", params={"page": 2, "limit": 2})

        body = resp.json()
        self.assertEqual([r["id"] for r in body["patients"]], ["p1"])
        self.assertEqual(body["pagination"], {
            "current_page": 2,
            "page_size": 2,
            "total_items": 3,
            "total_pages": 2,
            "has_next_page": False,
            "has_previous_page": True,
        })

    def test_no_doctor_profile(self):
        self.login_as("u-ghost", "doctor")
        resp = self.client.get("/api/doctor/patients")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Doctor not found")

    def test_patients_are_forbidden(self):
        self.login_as("u-p1", "patient")
        resp = self.client.get("/api/doctor/patients")
        self.assertEqual(resp.status_code, 403)


class TestSearchPatients(DoctorRouteTestCase):
    def test_matches_name_or_email_case_insensitively(self):
        resp = self.client.get("/api/doctor/search-patients", params={"query": "ALICE"})
        self.assertEqual([r["id"] for r in resp.json()["patients"]], ["p2"])

        resp = self.client.get("/api/doctor/search-patients", params={"query": "mail.example"})
        self.assertEqual([r["id"] for r in resp.json()["patients"]], ["p3"])

    def test_default_sort_is_name_ascending(self):
        resp = self.client.get("/api/doctor/search-patients")
        names = [r["name"] for r in resp.json()["patients"]]
        self.assertEqual(names, ["alice Smith", "Bob Stone", "Charlie Brown"])

    def test_sort_desc_keeps_missing_values_last(self):
        resp = self.client.get(
            "/api/doctor/search-patients", params={"sort_by": "blood_group", "order": "desc"}
        )
        self.assertEqual([r["id"] for r in resp.json()["patients"]], ["p2", "p1", "p3"])

    def test_sort_tolerates_mixed_field_types(self):
        self.add_patient("p4", "u-p4", "Dana Legacy", "dana@example.com", date_of_birth="1985-03-02")
        self.add_patient("p5", "u-p5", "Eve Naive", "eve@example.com", date_of_birth=datetime(1970, 1, 1))

        resp = self.client.get("/api/doctor/search-patients", params={"sort_by": "date_of_birth"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual([r["id"] for r in resp.json()["patients"]], ["p5", "p1", "p4", "p2", "p3"])

    def test_rows_carry_last_visit(self):
        self.add_record("r1", "p1", "d2", "Flu", ts(3))
        self.add_record("r2", "p1", "d1", "Flu", ts(9))

        resp = self.client.get("/api/doctor/search-patients", params={"query": "charlie"})

        row = resp.json()["patients"][0]
        self.assertEqual(row["last_visit"][:10], "2024-01-09")

    def test_limit_is_clamped(self):
        resp = self.client.get("/api/doctor/search-patients", params={"limit": 500, "page": -3})
        pagination = resp.json()["pagination"]
        self.assertEqual(pagination["page_size"], 50)
        self.assertEqual(pagination["current_page"], 1)

    def test_unknown_sort_field(self):
        resp = self.client.get("/api/doctor/search-patients", params={"sort_by": "password"})
        self.assertEqual(resp.status_code, 422)


class TestPatientDetails(DoctorRouteTestCase):
    def test_details_with_records_and_doctors(self):
        self.add_record("r1", "p1", "d2", "Fracture", ts(2))
        self.add_record("r2", "p1", "d1", "Flu", ts(5))

        resp = self.client.get("/api/doctor/patient/p1")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["name"], "Charlie Brown")
        self.assertEqual([r["id"] for r in body["health_records"]], ["r2", "r1"])
        self.assertEqual(body["health_records"][1]["doctor"], {
            "id": "d2", "name": "Dr. Yang", "specialization": "Surgery",
        })

    def test_unknown_patient(self):
        resp = self.client.get("/api/doctor/patient/nope")
        self.assertEqual(resp.status_code, 404)


class TestCreateHealthRecord(DoctorRouteTestCase):
    def test_create(self):
        resp = self.client.post("/api/doctor/health-record", json={
            "patient_id": "p2",
            "diagnosis": "  Hypertension ",
            "visit_date": "2024-02-01T10:00:00Z",
            "prescriptions": [{"medication": "Lisinopril", "dosage": "10mg"}],
            "test_results": [{"test_name": "BP", "result": "150/95", "normal_range": "120/80"}],
        })

        self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        self.assertEqual(body["doctor_id"], "d1")
        self.assertEqual(body["diagnosis"], "Hypertension")
        self.assertEqual(body["patient"], {"name": "alice Smith", "email": "alice@example.com"})

        stored = self.db.collections["health_records"][body["id"]]
        self.assertEqual(stored["patient_id"], "p2")
        self.assertEqual(stored["prescriptions"][0]["medication"], "Lisinopril")

    def test_visit_date_defaults_to_now(self):
        resp = self.client.post("/api/doctor/health-record", json={"patient_id": "p2", "diagnosis": "Flu"})
        self.assertEqual(resp.status_code, 201)
        self.assertIsNotNone(resp.json()["visit_date"])

    def test_unknown_patient_has_hint(self):
        resp = self.client.post("/api/doctor/health-record", json={"patient_id": "nope", "diagnosis": "Flu"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"]["error"], "Patient not found")
        self.assertIn("search-patients", resp.json()["detail"]["hint"])

    def test_no_doctor_profile(self):
        self.login_as("u-ghost", "doctor")
        resp = self.client.post("/api/doctor/health-record", json={"patient_id": "p2", "diagnosis": "Flu"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Doctor not found")

    def test_blank_diagnosis(self):
        resp = self.client.post("/api/doctor/health-record", json={"patient_id": "p2", "diagnosis": "   "})
        self.assertEqual(resp.status_code, 422)
        self.assertNotIn("health_records", self.db.collections)


if __name__ == '__main__':
    unittest.main()
