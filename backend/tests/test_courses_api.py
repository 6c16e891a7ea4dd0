def test_create_and_list_courses(client, make_course):
    make_course("Physics")
    created = make_course("Art", status="inactive")
    assert created["id"]
    assert created["status"] == "inactive"
    assert "createdAt" in created and "updatedAt" in created

    r = client.get("/api/courses")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()] == ["Art", "Physics"]


def test_create_course_missing_field_is_400(client):
    r = client.post("/api/courses", json={"name": "Incomplete", "duration": 4})
    assert r.status_code == 400
    assert "description" in r.json()["message"]


def test_create_course_duplicate_name_is_400(client, make_course):
    make_course("Maths")
    r = client.post("/api/courses", json={"name": "Maths", "description": "again", "duration": 3})
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]


def test_create_course_rejects_unknown_status(client):
    r = client.post("/api/courses", json={"name": "X", "description": "y", "duration": 1, "status": "archived"})
    assert r.status_code == 400
    assert "message" in r.json()


def test_get_course_by_id(client, make_course):
    course = make_course("Biology")
    r = client.get(f"/api/courses/{course['id']}")
    assert r.status_code == 200
    assert r.json()["name"] == "Biology"


def test_get_unknown_course_reports_400(client):
    r = client.get("/api/courses/unknown-id")
    assert r.status_code == 400
    assert r.json() == {"message": "Course not found"}


def test_update_course_partial(client, make_course):
    course = make_course("Geography")
    r = client.put(f"/api/courses/{course['id']}", json={"duration": 20, "status": "inactive"})
    assert r.status_code == 200
    body = r.json()
    assert body["duration"] == 20
    assert body["status"] == "inactive"
    assert body["name"] == "Geography"
    assert body["description"] == course["description"]


def test_update_unknown_course_is_404(client):
    r = client.put("/api/courses/unknown-id", json={"name": "Nope"})
    assert r.status_code == 404
    assert r.json() == {"message": "Course not found"}


def test_delete_course_without_students(client, make_course):
    course = make_course("Drama")
    r = client.delete(f"/api/courses/{course['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Course deleted successfully"}
    assert client.get("/api/courses").json() == []


def test_delete_course_with_students_is_refused(client, make_course, make_student):
    course = make_course("Chemistry")
    make_student("lab@example.edu", course["id"])
    r = client.delete(f"/api/courses/{course['id']}")
    assert r.status_code == 400
    assert r.json() == {"message": "Cannot delete course with enrolled students"}
    still_there = client.get(f"/api/courses/{course['id']}")
    assert still_there.status_code == 200


def test_delete_course_after_last_student_leaves(client, make_course, make_student):
    course = make_course("Music")
    student = make_student("solo@example.edu", course["id"])
    assert client.delete(f"/api/courses/{course['id']}").status_code == 400
    assert client.delete(f"/api/students/{student['id']}").status_code == 200
    assert client.delete(f"/api/courses/{course['id']}").status_code == 200


def test_delete_unknown_course_is_404(client):
    r = client.delete("/api/courses/unknown-id")
    assert r.status_code == 404
    assert r.json() == {"message": "Course not found"}


def test_rename_course_to_taken_name_is_400(client, make_course):
    make_course("Biology")
    other = make_course("Geology")
    r = client.put(f"/api/courses/{other['id']}", json={"name": "Biology"})
    assert r.status_code == 400
    assert r.json() == {"message": "A course named Biology already exists"}
    assert client.get(f"/api/courses/{other['id']}").json()["name"] == "Geology"


def test_update_course_rejects_unknown_status(client, make_course):
    course = make_course("Economics")
    r = client.put(f"/api/courses/{course['id']}", json={"status": "archived"})
    assert r.status_code == 400
    assert "status" in r.json()["message"]
    assert client.get(f"/api/courses/{course['id']}").json()["status"] == "active"


def test_update_course_rejects_null_status(client, make_course):
    course = make_course("Philosophy")
    r = client.put(f"/api/courses/{course['id']}", json={"status": None})
    assert r.status_code == 400
    assert "status is required" in r.json()["message"]


def test_update_course_rejects_blank_name(client, make_course):
    course = make_course("Latin")
    r = client.put(f"/api/courses/{course['id']}", json={"name": "  "})
    assert r.status_code == 400
    assert "name is required" in r.json()["message"]
    assert client.get(f"/api/courses/{course['id']}").json()["name"] == "Latin"


def test_duration_keeps_number_form(client):
    whole = client.post("/api/courses", json={"name": "Whole", "description": "d", "duration": 12}).json()
    assert whole["duration"] == 12
    assert isinstance(whole["duration"], int)
    half = client.post("/api/courses", json={"name": "Half", "description": "d", "duration": 1.5}).json()
    assert half["duration"] == 1.5
