"""
Integration tests for the clinic backend API.

These tests exercise the salary ledger endpoints, payments, advances and
payee management together with role based access control.  The tests use
Django REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q crm/tests
```
"""
from datetime import date
from decimal import Decimal

from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import (
    AuditEvent,
    Doctor,
    DoctorAdvance,
    DoctorMonthlySalary,
    DoctorSalarySettlement,
    Patient,
    PatientMonthlyFee,
    Staff,
    User,
)

D = Decimal


class LedgerAPITests(APITestCase):
    def setUp(self) -> None:
        """Create one operator per role and a doctor owed 15000 a month."""
        cache.clear()
        self.super_user = User.objects.create_user(username="super1", password="P@ssw0rd1", role="super")
        self.admin_user = User.objects.create_user(username="admin1", password="P@ssw0rd1", role="admin")
        self.accountant = User.objects.create_user(username="acct1", password="P@ssw0rd1", role="accountant")
        self.staff_user = User.objects.create_user(username="staff1", password="P@ssw0rd1", role="staff")

        self.doctor = Doctor.objects.create(
            name="Dr. Mehta", salary=D("15000"), join_date=date(2024, 1, 1), phone="9800000001",
        )
        self.patient = Patient.objects.create(
            name="Asha", monthly_fees=D("8000"), admission_date=date(2024, 1, 15),
        )

    def authenticate(self, user: User) -> APIClient:
        """Return an authenticated APIClient for the given user."""
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def save_month(self, month=3, year=2024, prefix="doctor-salaries", user=None):
        client = self.authenticate(user or self.accountant)
        return client.post(f"/api/{prefix}/save-monthly-records", {"month": month, "year": year}, format="json")

    # -- monthly batch --------------------------------------------------

    def test_save_monthly_records_returns_counts(self):
        DoctorSalarySettlement.objects.create(payee=self.doctor, amount=D("5000"), payment_date=date(2024, 3, 10))
        response = self.save_month()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["recordsProcessed"], 1)
        self.assertEqual(response.data["carryForwardUpdates"], 1)
        self.assertEqual((response.data["month"], response.data["year"]), (3, 2024))

        record = DoctorMonthlySalary.objects.get(payee=self.doctor, month=3, year=2024)
        self.assertEqual(record.net_balance, D("10000"))
        self.assertTrue(AuditEvent.objects.filter(action="ledger_save", object_type="doctor").exists())

    def test_save_monthly_records_requires_month_and_year(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctor-salaries/save-monthly-records", {"year": 2024}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertTrue(response.data["message"].startswith("month"))
        self.assertIn("error", response.data)
        self.assertFalse(DoctorMonthlySalary.objects.exists())

    def test_save_monthly_records_rejects_out_of_range_month(self):
        response = self.save_month(month=13)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_save_monthly_records_rejects_fractional_and_boolean_periods(self):
        for month, year in [(3.9, 2024), (3, 2024.5), (True, 2024), (3, False)]:
            with self.subTest(month=month, year=year):
                response = self.save_month(month=month, year=year)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertFalse(response.data["success"])
        self.assertFalse(DoctorMonthlySalary.objects.exists())

    def test_save_monthly_records_rejects_non_object_body(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctor-salaries/save-monthly-records", [3, 2024], format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertFalse(DoctorMonthlySalary.objects.exists())

    def test_read_only_staff_cannot_save(self):
        response = self.save_month(user=self.staff_user)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data["success"])
        self.assertFalse(DoctorMonthlySalary.objects.exists())

    def test_unauthenticated_requests_are_rejected(self):
        response = APIClient().get("/api/doctor-salaries?month=3&year=2024")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data["success"])

    def test_patient_fees_alias_writes_patient_ledger(self):
        response = self.save_month(month=2, prefix="patient-fees")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(PatientMonthlyFee.objects.filter(payee=self.patient, month=2, year=2024).exists())
        self.assertFalse(DoctorMonthlySalary.objects.exists())

    # -- read model and reports -----------------------------------------

    def test_salary_list_falls_back_to_live_values(self):
        client = self.authenticate(self.staff_user)
        response = client.get("/api/doctor-salaries?month=3&year=2024")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        [entry] = response.data["data"]
        self.assertEqual(entry["source"], "live")
        self.assertEqual(entry["net_balance"], D("15000"))

        self.save_month()
        response = client.get("/api/doctor-salaries?month=3&year=2024")
        [entry] = response.data["data"]
        self.assertEqual(entry["source"], "ledger")
        self.assertEqual(response.data["summary"]["saved_records"], 1)

    def test_carry_forward_and_summary_endpoints(self):
        Staff.objects.create(name="Ravi", salary=D("9000"))
        self.save_month()
        self.save_month(prefix="staff-salaries")
        client = self.authenticate(self.staff_user)

        response = client.get("/api/doctor-salaries/carry-forward/3/2024")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d["id"] for d in response.data["data"]], [self.doctor.id])
        self.assertEqual(response.data["totalCarryForward"], D("15000"))

        response = client.get("/api/staff-salaries/monthly-summary/3/2024")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["summary"]["total_payees"], 1)
        self.assertEqual(response.data["summary"]["total_base"], D("9000"))

    def test_carry_forward_report_drops_payee_marked_inactive(self):
        self.save_month()
        client = self.authenticate(self.accountant)
        response = client.get("/api/doctor-salaries/carry-forward/3/2024")
        self.assertEqual([d["id"] for d in response.data["data"]], [self.doctor.id])

        response = client.delete(f"/api/doctors/{self.doctor.id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = client.get("/api/doctor-salaries/carry-forward/3/2024")
        self.assertEqual(response.data["data"], [])
        self.assertEqual(response.data["totalCarryForward"], D("0"))

    def test_report_rejects_invalid_year(self):
        client = self.authenticate(self.staff_user)
        response = client.get("/api/doctor-salaries/carry-forward/3/1999")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ledger_correction_is_admin_only(self):
        self.save_month()
        record = DoctorMonthlySalary.objects.get()
        response = self.authenticate(self.accountant).delete(f"/api/doctor-salaries/ledger/{record.id}")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.authenticate(self.admin_user).delete(f"/api/doctor-salaries/ledger/{record.id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(DoctorMonthlySalary.objects.exists())

        response = self.authenticate(self.admin_user).delete(f"/api/doctor-salaries/ledger/{record.id}")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # -- payments -------------------------------------------------------

    def test_record_list_and_delete_payment(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctor-salaries/payment", {
            "payeeId": self.doctor.id,
            "amount": "5000",
            "paymentDate": "2024-03-10",
            "paymentMode": "Cash",
            "notes": "<b>March</b> part",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        payment = DoctorSalarySettlement.objects.get()
        self.assertEqual(payment.amount, D("5000"))
        self.assertEqual(payment.type, "salary")
        self.assertEqual(payment.notes, "March part")

        response = client.get(f"/api/doctor-salaries/{self.doctor.id}/history")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]), 1)

        response = client.delete(f"/api/doctor-salaries/payment/{payment.id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(DoctorSalarySettlement.objects.exists())

        response = client.delete(f"/api/doctor-salaries/payment/{payment.id}")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_payment_for_unknown_payee_is_404(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctor-salaries/payment", {
            "payeeId": 999999, "amount": "10", "paymentDate": "2024-03-10",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data["success"])

    def test_payment_amount_must_be_positive(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctor-salaries/payment", {
            "payeeId": self.doctor.id, "amount": "-5", "paymentDate": "2024-03-10",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data["message"].startswith("amount"))

    def test_payment_does_not_touch_saved_ledger(self):
        self.save_month()
        client = self.authenticate(self.accountant)
        client.post("/api/doctor-salaries/payment", {
            "payeeId": self.doctor.id, "amount": "15000", "paymentDate": "2024-03-20",
        }, format="json")
        self.assertEqual(DoctorMonthlySalary.objects.get().net_balance, D("15000"))

    def test_update_payment_keeps_saved_ledger(self):
        payment = DoctorSalarySettlement.objects.create(
            payee=self.doctor, amount=D("5000"), payment_date=date(2024, 3, 10), notes="first",
        )
        self.save_month()
        client = self.authenticate(self.accountant)
        response = client.put(f"/api/doctor-salaries/payment/{payment.id}", {
            "amount": "15000", "notes": "<b>full</b> month",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["amount"], D("15000"))

        payment.refresh_from_db()
        self.assertEqual(payment.amount, D("15000"))
        self.assertEqual(payment.notes, "full month")
        self.assertEqual(payment.payment_mode, "Bank Transfer")
        self.assertEqual(payment.payment_date, date(2024, 3, 10))
        self.assertEqual(DoctorMonthlySalary.objects.get().net_balance, D("10000"))
        self.assertTrue(AuditEvent.objects.filter(action="payment_update", object_id=payment.id).exists())

        self.save_month()
        self.assertEqual(DoctorMonthlySalary.objects.get().net_balance, D("0"))

    def test_update_payment_errors(self):
        payment = DoctorSalarySettlement.objects.create(payee=self.doctor, amount=D("5000"), payment_date=date(2024, 3, 10))
        client = self.authenticate(self.accountant)
        response = client.put("/api/doctor-salaries/payment/999999", {"amount": "10"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data["success"])

        response = client.put(f"/api/doctor-salaries/payment/{payment.id}", {"amount": "-1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = client.put(f"/api/doctor-salaries/payment/{payment.id}", {"payeeId": 999999}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.authenticate(self.staff_user).put(
            f"/api/doctor-salaries/payment/{payment.id}", {"amount": "10"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        payment.refresh_from_db()
        self.assertEqual(payment.amount, D("5000"))

    # -- advances -------------------------------------------------------

    def test_advance_lifecycle(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctor-advances", {
            "payeeId": self.doctor.id, "date": "2024-03-05", "amount": "2000", "reason": "<i>Travel</i>",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["data"]["reason"], "Travel")
        advance_id = response.data["data"]["id"]

        response = client.put(f"/api/doctor-advances/{advance_id}", {"amount": "2500"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(DoctorAdvance.objects.get().amount, D("2500"))

        response = client.get(f"/api/doctor-advances/payee/{self.doctor.id}")
        self.assertEqual(len(response.data["data"]), 1)

        self.save_month()
        self.assertEqual(DoctorMonthlySalary.objects.get().net_balance, D("12500"))

        response = client.delete(f"/api/doctor-advances/{advance_id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(DoctorAdvance.objects.exists())

    def test_staff_can_read_but_not_create_advances(self):
        client = self.authenticate(self.staff_user)
        self.assertEqual(client.get("/api/doctor-advances").status_code, status.HTTP_200_OK)
        response = client.post("/api/doctor-advances", {
            "payeeId": self.doctor.id, "date": "2024-03-05", "amount": "2000",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_advance_for_unknown_payee_is_404(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/staff-advances", {
            "payeeId": self.doctor.id + 1000, "date": "2024-03-05", "amount": "2000",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # -- payees ---------------------------------------------------------

    def test_create_search_and_soft_delete_doctor(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/doctors", {
            "name": "Dr. Kapoor", "specialization": "Cardiology", "salary": "22000", "join_date": "2024-02-01",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        new_id = response.data["data"]["id"]

        response = client.get("/api/doctors?q=kapoor")
        self.assertEqual([d["id"] for d in response.data["data"]], [new_id])
        self.assertEqual(response.data["pagination"]["total"], 1)

        response = client.delete(f"/api/doctors/{new_id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Doctor.objects.get(pk=new_id).status, "Inactive")

        response = client.get("/api/doctors?status=Active")
        self.assertNotIn(new_id, [d["id"] for d in response.data["data"]])

    def test_negative_salary_is_rejected(self):
        client = self.authenticate(self.accountant)
        response = client.post("/api/staff", {"name": "Nurse Joy", "salary": "-1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_hard_delete_needs_admin(self):
        response = self.authenticate(self.accountant).delete(f"/api/patients/{self.patient.id}?hard=true")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Patient.objects.filter(pk=self.patient.id).exists())

        response = self.authenticate(self.admin_user).delete(f"/api/patients/{self.patient.id}?hard=true")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Patient.objects.filter(pk=self.patient.id).exists())

    def test_update_patient_fees(self):
        client = self.authenticate(self.accountant)
        response = client.put(f"/api/patients/{self.patient.id}", {"monthly_fees": "9500"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.patient.refresh_from_db()
        self.assertEqual(self.patient.monthly_fees, D("9500"))

    # -- dashboard, audit and health ------------------------------------

    def test_dashboard_is_admin_only(self):
        response = self.authenticate(self.accountant).get("/api/admin/dashboard?month=3&year=2024")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.authenticate(self.admin_user).get("/api/admin/dashboard?month=3&year=2024")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["categories"]["doctor"]["activePayees"], 1)
        self.assertEqual(response.data["categories"]["doctor"]["totalPending"], D("15000"))
        self.assertEqual(response.data["categories"]["staff"]["activePayees"], 0)

    def test_audit_log_lists_ledger_runs(self):
        self.save_month()
        response = self.authenticate(self.admin_user).get("/api/admin/audit-log?action=ledger_save")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]), 1)
        self.assertEqual(response.data["data"][0]["user"], "acct1")

    def test_healthz(self):
        response = self.client.get("/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])

    def test_metrics_endpoint(self):
        response = self.client.get("/metrics")
        self.assertEqual(response.status_code, 200)
