def test_create_student_defaults(client, make_course):
    course = make_course()
    r = client.post("/api/students", json={
        "name": "Ava Thompson",
        "email": "ava@example.edu",
        "course": course["id"],
        "enrollmentDate": "2024-02-01",
    })
    assert r.status_code == 201
    body = r.json()
    assert body["id"]
    assert body["status"] == "active"
    assert body["enrollmentDate"] == "2024-02-01"
    assert body["course"] == course["id"]


def test_create_student_accepts_snake_case(client):
    r = client.post("/api/students", json={
        "name": "Noah",
        "email": "noah@example.edu",
        "course": "c1",
        "enrollment_date": "2024-02-01",
    })
    assert r.status_code == 201


def test_create_student_missing_fields_is_400(client):
    r = client.post("/api/students", json={"name": "Nobody", "email": "nobody@example.edu"})
    assert r.status_code == 400
    message = r.json()["message"]
    assert "course" in message
    assert "enrollmentDate" in message


def test_create_student_blank_name_is_400(client):
    r = client.post("/api/students", json={
        "name": "",
        "email": "blank@example.edu",
        "course": "c1",
        "enrollmentDate": "2024-02-01",
    })
    assert r.status_code == 400
    assert "name" in r.json()["message"]


def test_duplicate_email_is_400(client, make_student):
    make_student("twin@example.edu", "c1")
    r = client.post("/api/students", json={
        "name": "Twin",
        "email": "twin@example.edu",
        "course": "c2",
        "enrollmentDate": "2024-02-01",
    })
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]
    assert len(client.get("/api/students").json()) == 1


def test_list_students_newest_first(client, make_student):
    make_student("one@example.edu", "c1")
    make_student("two@example.edu", "c1")
    r = client.get("/api/students")
    assert r.status_code == 200
    assert [s["email"] for s in r.json()] == ["two@example.edu", "one@example.edu"]


def test_update_student(client, make_student):
    student = make_student("move@example.edu", "c1")
    r = client.put(f"/api/students/{student['id']}", json={"course": "c2", "status": "inactive"})
    assert r.status_code == 200
    body = r.json()
    assert body["course"] == "c2"
    assert body["status"] == "inactive"
    assert body["email"] == "move@example.edu"


def test_update_student_to_taken_email_is_400(client, make_student):
    make_student("taken@example.edu", "c1")
    other = make_student("free@example.edu", "c1")
    r = client.put(f"/api/students/{other['id']}", json={"email": "taken@example.edu"})
    assert r.status_code == 400
    assert r.json() == {"message": "A student with email taken@example.edu already exists"}
    emails = sorted(s["email"] for s in client.get("/api/students").json())
    assert emails == ["free@example.edu", "taken@example.edu"]


def test_update_unknown_student_is_404_and_creates_nothing(client):
    r = client.put("/api/students/unknown-id", json={
        "name": "Ghost",
        "email": "ghost@example.edu",
        "course": "c1",
        "enrollmentDate": "2024-02-01",
    })
    assert r.status_code == 404
    assert r.json() == {"message": "Student not found"}
    assert client.get("/api/students").json() == []


def test_delete_student(client, make_student):
    student = make_student("gone@example.edu", "c1")
    r = client.delete(f"/api/students/{student['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Student deleted successfully"}
    assert client.get("/api/students").json() == []


def test_delete_unknown_student_is_404(client):
    r = client.delete("/api/students/unknown-id")
    assert r.status_code == 404
    assert r.json() == {"message": "Student not found"}


def test_update_student_rejects_unknown_status(client, make_student):
    student = make_student("enum@example.edu", "c1")
    r = client.put(f"/api/students/{student['id']}", json={"status": "archived"})
    assert r.status_code == 400
    assert "status" in r.json()["message"]


def test_update_student_rejects_null_status(client, make_student):
    student = make_student("nullstatus@example.edu", "c1")
    r = client.put(f"/api/students/{student['id']}", json={"status": None})
    assert r.status_code == 400
    assert "status is required" in r.json()["message"]
    assert client.get("/api/students").json()[0]["status"] == "active"
