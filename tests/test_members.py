"""Tests for the members module: writes, approval flow, deletion and children."""

import pytest

from fakes import add_person, add_woman
from family_tree.modules.members.mapping import Tables, PERSON_FIELDS, WOMAN_LINK_FIELDS, WIFE_LINK, EVENT_FIELDS


@pytest.fixture
def family(backend):
    add_person(backend, 1, "Saleh", generation=1, national_id="1000")
    add_person(backend, 2, "Ahmad", father_id=1, generation=2, birth_date="1960-03-01")
    add_person(backend, 3, "Khalid", father_id=1, generation=2, birth_date="1955-07-10",
               death_date="2001-07-09", position="Judge", branch_name="North")
    add_person(backend, 4, "Omar", father_id=2, generation=3)
    return backend


def stored(backend, person_id):
    return next(row for row in backend.rows(Tables.PERSONS) if row["id"] == person_id)


class TestReadMembers:

    def test_list_members(self, client, family):
        response = client.get("/api/v1/members")
        assert response.status_code == 200
        assert [m["id"] for m in response.json()] == [1, 2, 3, 4]
        assert response.json()[1]["father_id"] == 1

    def test_get_member_details(self, client, family):
        data = client.get("/api/v1/members/3").json()
        assert data["first_name"] == "Khalid"
        assert data["generation"] == 2
        assert data["branch_name"] == "North"

    def test_get_missing_member(self, client, family):
        assert client.get("/api/v1/members/99").status_code == 404

    def test_viewer_can_read(self, client_as, viewer, family):
        assert client_as(viewer).get("/api/v1/members").status_code == 200


class TestNationalId:

    def test_taken_national_id(self, client, family):
        data = client.get("/api/v1/members/national-id/availability", params={"national_id": "1000"}).json()
        assert data["available"] is False

    def test_own_national_id_is_available_when_excluded(self, client, family):
        data = client.get(
            "/api/v1/members/national-id/availability",
            params={"national_id": "1000", "exclude_id": 1},
        ).json()
        assert data["available"] is True

    def test_blank_national_id_is_always_available(self, family):
        from family_tree.modules.members.service import MemberService
        assert MemberService(family).is_national_id_unique("   ")
        assert MemberService(family).is_national_id_unique(None)


class TestCreateMember:

    def test_secretary_inserts_directly(self, client, family):
        response = client.post("/api/v1/members", json={
            "first_name": "Ali", "father_id": 4, "gender": "male", "marital_status": "single",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "applied"
        assert data["member"]["first_name"] == "Ali"
        row = stored(family, data["member"]["id"])
        assert row[PERSON_FIELDS.column("gender")] == "ذكر"
        assert row[PERSON_FIELDS.column("marital_status")] == "أعزب"
        assert family.procedure_calls == []

    def test_writer_submits_for_approval(self, client_as, writer, family):
        family.procedures["submit_person_change"] = 17
        response = client_as(writer).post("/api/v1/members", json={"first_name": "Ali", "father_id": 4})
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["change_id"] == 17

        name, args = family.procedure_calls[0]
        assert name == "submit_person_change"
        assert args["p_change_type"] == "insert"
        assert args["p_original_person_id"] is None
        assert args["p_person_data"][PERSON_FIELDS.column("first_name")] == "Ali"
        assert len(family.rows(Tables.PERSONS)) == 4

    def test_submitted_change_applied_immediately(self, client_as, writer, family):
        family.procedures["submit_person_change"] = [-1]
        data = client_as(writer).post("/api/v1/members", json={"first_name": "Ali"}).json()
        assert data["status"] == "applied"

    def test_creation_pushes_notification(self, client, family):
        client.post("/api/v1/members", json={"first_name": "Ali"})
        notifications = client.get("/api/v1/notifications").json()
        assert [n["message"] for n in notifications] == ["Member added"]

    def test_duplicate_national_id_is_refused(self, client, family):
        response = client.post("/api/v1/members", json={"first_name": "Ali", "national_id": " 1000 "})
        assert response.status_code == 400

    def test_unknown_father_is_refused(self, client, family):
        response = client.post("/api/v1/members", json={"first_name": "Ali", "father_id": 99})
        assert response.status_code == 400

    def test_viewer_cannot_write(self, client_as, viewer, family):
        response = client_as(viewer).post("/api/v1/members", json={"first_name": "Ali"})
        assert response.status_code == 403

    def test_first_name_required(self, client, family):
        assert client.post("/api/v1/members", json={"first_name": ""}).status_code == 422


class TestUpdateMember:

    def test_update_applies_only_sent_fields(self, client, family):
        response = client.put("/api/v1/members/4", json={"position": "Engineer"})
        assert response.status_code == 200
        row = stored(family, 4)
        assert row[PERSON_FIELDS.column("position")] == "Engineer"
        assert row["father_id"] == 2

    def test_member_cannot_be_own_father(self, client, family):
        assert client.put("/api/v1/members/2", json={"father_id": 2}).status_code == 400

    def test_descendant_cannot_become_father(self, client, family):
        response = client.put("/api/v1/members/1", json={"father_id": 4})
        assert response.status_code == 400
        assert "descendant" in response.json()["detail"]

    def test_writer_update_is_submitted(self, client_as, writer, family):
        family.procedures["submit_person_change"] = 5
        data = client_as(writer).put("/api/v1/members/4", json={"position": "Engineer"}).json()
        assert data["status"] == "pending"
        assert family.procedure_calls[0][1]["p_original_person_id"] == 4
        assert PERSON_FIELDS.column("position") not in stored(family, 4)

    def test_update_missing_member(self, client, family):
        assert client.put("/api/v1/members/99", json={"position": "x"}).status_code == 404


class TestDeleteMember:

    def test_father_cannot_be_deleted(self, client, family):
        response = client.delete("/api/v1/members/1")
        assert response.status_code == 409
        data = response.json()
        assert data["children"] == ["Ahmad", "Khalid"]
        assert "father" in data["detail"]

    def test_leaf_is_deleted(self, client, family):
        assert client.delete("/api/v1/members/4").status_code == 204
        assert [row["id"] for row in family.rows(Tables.PERSONS)] == [1, 2, 3]

    def test_writer_cannot_delete(self, client_as, writer, family):
        assert client_as(writer).delete("/api/v1/members/4").status_code == 403


class TestChildren:

    def test_children_cards(self, client, family):
        add_woman(family, 50, "Fatimah", father_name="Ali", family_name="Harbi")
        family.seed(Tables.WOMEN_LINKS, {
            WOMAN_LINK_FIELDS.column("person_id"): 2,
            WOMAN_LINK_FIELDS.column("link_type"): WIFE_LINK,
            Tables.WOMEN: {"الاسم_الأول": "Fatimah", "اسم_الأب": "Ali", "اسم_العائلة": "Harbi"},
        })
        family.seed(Tables.EVENTS, {EVENT_FIELDS.column("id"): 1, EVENT_FIELDS.column("person_id"): 3})

        cards = client.get("/api/v1/members/1/children").json()

        assert [card["id"] for card in cards] == [3, 2]
        khalid, ahmad = cards
        assert khalid["display_data"]["status"] == "deceased"
        assert khalid["display_data"]["current_age"] == 45
        assert khalid["display_data"]["primary_title"] == "Judge"
        assert khalid["quick_stats"]["achievements_count"] == 1
        assert khalid["quick_stats"]["has_children"] is False
        assert khalid["visual_theme"]["inherited_color"] == "#10b981"
        assert ahmad["quick_stats"]["children_count"] == 1
        assert ahmad["quick_stats"]["spouse"] == "Fatimah Ali Harbi"
        assert ahmad["quick_stats"]["is_married"] is True

    def test_no_children(self, client, family):
        assert client.get("/api/v1/members/4/children").json() == []

    def test_children_count(self, client, family):
        assert client.get("/api/v1/members/1/children/count").json()["children_count"] == 2


class TestRelatives:

    def test_relatives_use_procedure(self, client, family):
        family.procedures["get_ancestors"] = [
            {"id": 2, "الاسم_الأول": "Ahmad"}, {"id": 1, "الاسم_الأول": "Saleh"},
        ]
        data = client.get("/api/v1/members/4/ancestors").json()
        assert data["relation"] == "ancestors"
        assert [m["id"] for m in data["members"]] == [2, 1]
        assert family.procedure_calls == [("get_ancestors", {"person_id": 4})]

    def test_unknown_relation(self, client, family):
        assert client.get("/api/v1/members/4/cousins").status_code == 422

    def test_descendants_tree(self, client, family):
        family.procedures["get_descendants_tree"] = [
            {"id": 1, "الاسم_الأول": "Saleh", "father_id": None},
            {"id": 2, "الاسم_الأول": "Ahmad", "father_id": 1},
            {"id": 4, "الاسم_الأول": "Omar", "father_id": 2},
        ]
        data = client.get("/api/v1/members/1/descendants/tree", params={"max_depth": 2}).json()
        assert [root["member"]["id"] for root in data] == [1]
        assert data[0]["children"][0]["children"][0]["member"]["id"] == 4
        assert family.procedure_calls[0] == (
            "get_descendants_tree", {"root_person_id": 1, "max_depth": 2}
        )

    def test_descendants_depth_is_bounded(self, client, family):
        response = client.get("/api/v1/members/1/descendants/tree", params={"max_depth": 50})
        assert response.status_code == 422
