import random
import unittest
from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from attendhub.app import create_app
from attendhub.db import InMemoryDbClient


def _seeded_db() -> InMemoryDbClient:
    return InMemoryDbClient(
        seed_demo_data=True, today=date(2024, 11, 10), rng=random.Random(7)
    )


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.db = _seeded_db()
        self.client = TestClient(create_app(db=self.db))

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["ok"])

    def test_companies_list_and_create(self):
        response = self.client.post(
            "/companies", json={"name": "Acme", "email": "hello@acme.test"}
        )
        self.assertEqual(response.status_code, 201)
        created = response.json()
        self.assertEqual(created["name"], "Acme")
        self.assertEqual(created["phone"], "")
        self.assertIn("createdAt", created)

        listed = self.client.get("/companies").json()
        self.assertEqual(listed[0]["id"], created["id"])
        self.assertEqual(len(listed), 2)

    def test_company_requires_name_and_email(self):
        response = self.client.post("/companies", json={"name": "Acme"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "invalid_payload"})

        response = self.client.post("/companies", json={"name": "", "email": "a@b.c"})
        self.assertEqual(response.status_code, 400)


class LoginTests(unittest.TestCase):
    def setUp(self):
        self.db = _seeded_db()
        self.client = TestClient(create_app(db=self.db))

    def test_missing_email(self):
        response = self.client.post("/login", json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "email_required"})

    def test_missing_body(self):
        response = self.client.post("/login")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "email_required"})

    def test_unknown_user(self):
        response = self.client.post("/login", json={"email": "nobody@techhub.com"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "user_not_found"})

    def test_user_without_password_accepts_any_password(self):
        response = self.client.post(
            "/login",
            json={"email": "member@techhub.com", "password": "literally-anything"},
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(
            payload["user"],
            {
                "id": "4",
                "companyId": "1",
                "name": "Mark Member",
                "email": "member@techhub.com",
                "role": "member",
                "suspended": False,
            },
        )
        self.assertTrue(payload["token"])

    def test_password_checked_when_stored(self):
        self.client.post(
            "/users",
            json={
                "companyId": "1",
                "name": "Pat",
                "email": "pat@techhub.com",
                "role": "committee",
                "password": "s3cret",
            },
        )
        wrong = self.client.post(
            "/login", json={"email": "pat@techhub.com", "password": "nope"}
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.json(), {"error": "invalid_credentials"})

        right = self.client.post(
            "/login", json={"email": "pat@techhub.com", "password": "s3cret"}
        )
        self.assertEqual(right.status_code, 200)
        self.assertNotIn("password", right.json()["user"])

        # No password supplied is still let through.
        bare = self.client.post("/login", json={"email": "pat@techhub.com"})
        self.assertEqual(bare.status_code, 200)

    def test_tokens_are_fresh(self):
        first = self.client.post("/login", json={"email": "ceo@techhub.com"}).json()
        second = self.client.post("/login", json={"email": "ceo@techhub.com"}).json()
        self.assertNotEqual(first["token"], second["token"])


class UserAndMemberTests(unittest.TestCase):
    def setUp(self):
        self.db = _seeded_db()
        self.client = TestClient(create_app(db=self.db))

    def test_users_filtered_by_company_without_passwords(self):
        self.client.post(
            "/users",
            json={
                "companyId": "2",
                "name": "Other",
                "email": "other@else.test",
                "role": "ceo",
                "password": "x",
            },
        )
        users = self.client.get("/users", params={"companyId": "1"}).json()
        self.assertEqual(len(users), 4)
        self.assertTrue(all(u["companyId"] == "1" for u in users))
        self.assertEqual([u["name"] for u in users], sorted(u["name"] for u in users))
        for user in self.client.get("/users").json():
            self.assertNotIn("password", user)

    def test_duplicate_user_email_conflicts(self):
        body = {
            "companyId": "1",
            "name": "Again",
            "email": "ceo@techhub.com",
            "role": "ceo",
        }
        response = self.client.post("/users", json=body)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"error": "conflict"})

    def test_user_role_must_be_known(self):
        response = self.client.post(
            "/users",
            json={"companyId": "1", "name": "X", "email": "x@y.z", "role": "admin"},
        )
        self.assertEqual(response.status_code, 400)

    def test_members_filter_by_company(self):
        self.client.post(
            "/members",
            json={"companyId": "2", "name": "Zed", "registrationNumber": "X-1"},
        )
        members = self.client.get("/members", params={"companyId": "1"}).json()
        self.assertEqual(len(members), 10)
        self.assertTrue(all(m["companyId"] == "1" for m in members))
        self.assertEqual(len(self.client.get("/members").json()), 11)

    def test_create_member_and_duplicate_registration(self):
        body = {
            "companyId": 1,
            "name": "Nina",
            "registrationNumber": "REG011",
            "department": "Design",
        }
        created = self.client.post("/members", json=body)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["companyId"], "1")
        self.assertEqual(created.json()["joinedYear"], "")

        again = self.client.post("/members", json={**body, "name": "Other Nina"})
        self.assertEqual(again.status_code, 409)
        names = [m["name"] for m in self.client.get("/members").json()]
        self.assertNotIn("Other Nina", names)

    def test_member_suspension(self):
        response = self.client.patch(
            "/members/2", json={"suspended": True, "suspensionReason": "late fees"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["suspended"])
        self.assertEqual(response.json()["suspensionReason"], "late fees")

        lifted = self.client.patch("/members/2", json={}).json()
        self.assertFalse(lifted["suspended"])
        self.assertIsNone(lifted["suspensionReason"])

    def test_bodyless_patch_lifts_suspension(self):
        self.client.patch("/members/2", json={"suspended": True, "suspensionReason": "x"})
        response = self.client.patch("/members/2")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["suspended"])
        self.assertIsNone(response.json()["suspensionReason"])

    def test_empty_filters_return_everything(self):
        self.assertEqual(len(self.client.get("/members?companyId=").json()), 10)
        self.assertEqual(len(self.client.get("/users?companyId=").json()), 4)

    def test_member_suspension_unknown(self):
        response = self.client.patch("/members/nope", json={"suspended": True})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "not_found"})


class AttendanceApiTests(unittest.TestCase):
    def setUp(self):
        self.db = _seeded_db()
        self.client = TestClient(create_app(db=self.db))

    def test_filter_by_date(self):
        records = self.client.get("/attendance", params={"date": "2024-11-10"}).json()
        self.assertEqual(len(records), 10)
        self.assertTrue(all(r["date"] == "2024-11-10" for r in records))
        first = records[0]
        self.assertEqual(first["memberId"], "1")
        self.assertEqual(first["memberName"], "Alice Johnson")
        self.assertEqual(first["registrationNumber"], "REG001")

    def test_filter_by_member(self):
        records = self.client.get("/attendance", params={"memberId": "3"}).json()
        self.assertEqual(len(records), 14)
        self.assertTrue(all(r["memberId"] == "3" for r in records))
        dates = [r["date"] for r in records]
        self.assertEqual(dates, sorted(dates, reverse=True))

    def test_day_replace(self):
        payload = {
            "records": [
                {"memberId": "1", "status": "present"},
                {"memberId": 2, "status": "PRESENT"},
                {"memberId": "ghost", "status": "late"},
            ],
            "date": "2024-11-10",
            "markedBy": "John Discipline",
        }
        response = self.client.post("/attendance", json=payload)
        self.assertEqual(response.status_code, 201)
        created = response.json()
        self.assertEqual([r["id"] for r in created], ["1-2024-11-10", "2-2024-11-10", "ghost-2024-11-10"])
        self.assertEqual([r["status"] for r in created], ["present", "absent", "absent"])
        self.assertEqual(len({r["timestamp"] for r in created}), 1)

        day = self.client.get("/attendance", params={"date": "2024-11-10"}).json()
        self.assertEqual(
            sorted(r["memberId"] for r in day), ["1", "2", "ghost"]
        )
        ghost = [r for r in day if r["memberId"] == "ghost"][0]
        self.assertEqual(ghost["memberName"], "Member ghost")
        self.assertEqual(ghost["registrationNumber"], "")
        self.assertEqual(ghost["department"], "")

        # Other days are untouched.
        other = self.client.get("/attendance", params={"date": "2024-11-09"}).json()
        self.assertEqual(len(other), 10)

    def test_day_replace_is_idempotent(self):
        payload = {
            "records": [
                {"memberId": "1", "status": "present"},
                {"memberId": "2", "status": "absent"},
            ],
            "date": "2024-11-10",
            "markedBy": "Jane",
        }
        snapshots = []
        for _ in range(3):
            self.client.post("/attendance", json=payload)
            day = self.client.get("/attendance", params={"date": "2024-11-10"}).json()
            snapshots.append(sorted((r["id"], r["status"]) for r in day))
        self.assertEqual(snapshots[0], snapshots[1])
        self.assertEqual(snapshots[1], snapshots[2])

    def test_empty_day_clears_records(self):
        response = self.client.post(
            "/attendance", json={"records": [], "date": "2024-11-10"}
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), [])
        day = self.client.get("/attendance", params={"date": "2024-11-10"}).json()
        self.assertEqual(day, [])

    def test_invalid_payload(self):
        for body in (
            {"records": "nope", "date": "2024-11-10"},
            {"records": []},
            {"records": [], "date": ""},
        ):
            response = self.client.post("/attendance", json=body)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json(), {"error": "invalid_payload"})

    def test_empty_filters_return_everything(self):
        self.assertEqual(len(self.client.get("/attendance?date=").json()), 140)
        self.assertEqual(
            len(self.client.get("/attendance?date=&memberId=").json()), 140
        )

    def test_id_shared_with_another_day_conflicts(self):
        # "1-2024" on "11-10" builds the id of member 1 on 2024-11-10.
        response = self.client.post(
            "/attendance",
            json={"records": [{"memberId": "1-2024", "status": "present"}], "date": "11-10"},
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"error": "conflict"})
        day = self.client.get("/attendance", params={"date": "2024-11-10"}).json()
        self.assertEqual(len(day), 10)
        self.assertEqual(self.client.get("/attendance", params={"date": "11-10"}).json(), [])


class AnnouncementAndIdeaTests(unittest.TestCase):
    def setUp(self):
        self.db = _seeded_db()
        self.client = TestClient(create_app(db=self.db))

    def test_announcements_newest_first_with_comments(self):
        created = self.client.post(
            "/announcements",
            json={"committeeId": "2", "title": "Party", "content": "Friday"},
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["category"], "general")
        self.assertEqual(created.json()["comments"], [])

        listed = self.client.get("/announcements").json()
        self.assertEqual(listed[0]["title"], "Party")
        self.assertEqual(listed[1]["title"], "Welcome to New Semester")

        ann_id = created.json()["id"]
        first = self.client.post(
            f"/announcements/{ann_id}/comments",
            json={"userId": 4, "userName": "Mark Member", "content": "See you"},
        )
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["userId"], "4")
        self.client.post(f"/announcements/{ann_id}/comments", json={"content": "+1"})

        comments = self.client.get(f"/announcements/{ann_id}/comments").json()
        self.assertEqual([c["content"] for c in comments], ["See you", "+1"])
        listed = self.client.get("/announcements").json()
        self.assertEqual(len(listed[0]["comments"]), 2)

    def test_announcement_validation(self):
        response = self.client.post(
            "/announcements", json={"committeeId": "2", "title": "No content"}
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/announcements",
            json={"committeeId": "2", "title": "t", "content": "c", "category": "gossip"},
        )
        self.assertEqual(response.status_code, 400)

    def test_comment_on_unknown_announcement(self):
        response = self.client.post("/announcements/missing/comments", json={})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "not_found"})

    def test_ideas(self):
        created = self.client.post(
            "/ideas",
            json={"userId": "4", "title": "Snacks", "description": "More fruit"},
        )
        self.assertEqual(created.status_code, 201)
        idea = created.json()
        self.assertEqual(idea["category"], "suggestion")
        self.assertEqual(idea["status"], "pending")

        resolved = self.client.patch(f"/ideas/{idea['id']}", json={"status": "resolved"})
        self.assertEqual(resolved.status_code, 200)
        self.assertEqual(resolved.json()["status"], "resolved")
        # No transition rule: going back is allowed.
        back = self.client.patch(f"/ideas/{idea['id']}", json={"status": "pending"})
        self.assertEqual(back.json()["status"], "pending")

        bogus = self.client.patch(f"/ideas/{idea['id']}", json={"status": "done"})
        self.assertEqual(bogus.status_code, 400)
        missing = self.client.patch("/ideas/missing", json={"status": "reviewed"})
        self.assertEqual(missing.status_code, 404)

        self.assertEqual(len(self.client.get("/ideas", params={"userId": "4"}).json()), 1)
        self.assertEqual(self.client.get("/ideas", params={"userId": "1"}).json(), [])


class PermissionWorkflowTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(db=InMemoryDbClient()))

    def _create(self):
        response = self.client.post(
            "/permissions",
            json={"userId": "4", "userName": "Mark Member", "reason": "Doctor", "date": "2024-11-12"},
        )
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_approve_then_reset(self):
        created = self._create()
        self.assertEqual(created["status"], "pending")

        approved = self.client.patch(
            f"/permissions/{created['id']}", json={"status": "approved"}
        ).json()
        self.assertEqual(approved["status"], "approved")

        reset = self.client.patch(
            f"/permissions/{created['id']}", json={"status": "pending"}
        ).json()
        self.assertEqual(reset["status"], "pending")
        for key in ("userId", "userName", "reason", "date", "timestamp"):
            self.assertEqual(reset[key], created[key])

    def test_unknown_status_resets_to_pending(self):
        created = self._create()
        self.client.patch(f"/permissions/{created['id']}", json={"status": "rejected"})
        response = self.client.patch(
            f"/permissions/{created['id']}", json={"status": "maybe"}
        )
        self.assertEqual(response.json()["status"], "pending")

    def test_bodyless_patch_resets_to_pending(self):
        created = self._create()
        self.client.patch(f"/permissions/{created['id']}", json={"status": "approved"})
        response = self.client.patch(f"/permissions/{created['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "pending")

    def test_empty_user_filter_returns_everything(self):
        self._create()
        self.assertEqual(len(self.client.get("/permissions?userId=").json()), 1)

    def test_unknown_permission(self):
        response = self.client.patch("/permissions/missing", json={"status": "approved"})
        self.assertEqual(response.status_code, 404)

    def test_missing_fields(self):
        response = self.client.post("/permissions", json={"userId": "4"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "invalid_payload"})


class CaseWorkflowTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(db=InMemoryDbClient()))

    def _create(self, **overrides):
        body = {
            "companyId": "1",
            "reportedBy": "3",
            "reporterName": "John Discipline",
            "memberId": "2",
            "memberName": "Bob Smith",
            "title": "Repeated absence",
            "description": "Missed five sessions",
            "date": "2024-11-10",
        }
        body.update(overrides)
        return self.client.post("/cases", json=body)

    def test_create_and_decide(self):
        response = self._create()
        self.assertEqual(response.status_code, 201)
        case = response.json()
        self.assertEqual(case["status"], "pending")
        self.assertEqual(case["reporterRole"], "discipline")
        self.assertEqual(case["comments"], [])

        decided = self.client.patch(
            f"/cases/{case['id']}/decision",
            json={
                "decision": "suspended",
                "decisionText": "policy breach",
                "decidedBy": "Ellen CEO",
            },
        )
        self.assertEqual(decided.status_code, 200)

        listed = self.client.get("/cases").json()
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0]["status"], "suspended")
        self.assertEqual(listed[0]["decision"], "policy breach")
        self.assertEqual(listed[0]["decidedBy"], "Ellen CEO")
        self.assertTrue(listed[0]["decidedAt"])

    def test_unrecognized_decision_keeps_pending(self):
        case = self._create().json()
        response = self.client.patch(
            f"/cases/{case['id']}/decision", json={"decision": "expelled"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "pending")
        self.assertIsNone(response.json()["decidedAt"])

    def test_bodyless_decision_keeps_pending(self):
        case = self._create().json()
        response = self.client.patch(f"/cases/{case['id']}/decision")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "pending")

    def test_decided_case_is_terminal(self):
        case = self._create().json()
        url = f"/cases/{case['id']}/decision"
        self.client.patch(url, json={"decision": "forgiven", "decidedBy": "Ellen CEO"})

        again = self.client.patch(url, json={"decision": "suspended"})
        self.assertEqual(again.status_code, 409)
        self.assertEqual(again.json(), {"error": "conflict"})

        noop = self.client.patch(url, json={"decision": "pending"})
        self.assertEqual(noop.status_code, 200)
        self.assertEqual(noop.json()["status"], "forgiven")

        comment = self.client.post(
            f"/cases/{case['id']}/comments", json={"userId": "1", "content": "Noted"}
        )
        self.assertEqual(comment.status_code, 201)
        comments = self.client.get(f"/cases/{case['id']}/comments").json()
        self.assertEqual([c["content"] for c in comments], ["Noted"])
        self.assertEqual(self.client.get("/cases").json()[0]["status"], "forgiven")

    def test_unknown_case(self):
        response = self.client.patch("/cases/missing/decision", json={"decision": "forgiven"})
        self.assertEqual(response.status_code, 404)
        response = self.client.post("/cases/missing/comments", json={"content": "x"})
        self.assertEqual(response.status_code, 404)

    def test_filters(self):
        self._create()
        self._create(companyId="2", memberId="9")
        self.assertEqual(len(self.client.get("/cases", params={"companyId": "2"}).json()), 1)
        by_member = self.client.get("/cases", params={"memberId": "2"}).json()
        self.assertEqual([c["memberId"] for c in by_member], ["2"])

    def test_missing_fields(self):
        response = self._create(title="")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "invalid_payload"})


class _BrokenStore(InMemoryDbClient):
    def list_companies(self):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def get_user_by_email(self, email):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class StoreFailureTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(db=_BrokenStore()))

    def test_store_errors_become_server_error(self):
        response = self.client.get("/companies")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "server_error"})

        response = self.client.post("/login", json={"email": "ceo@techhub.com"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "server_error"})


if __name__ == "__main__":
    unittest.main()
