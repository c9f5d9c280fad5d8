from fastapi.testclient import TestClient

from adventure.logic.scene_tree import SceneTree
from adventure.main import app, get_scene_tree


def _client(tree: SceneTree) -> TestClient:
    app.dependency_overrides[get_scene_tree] = lambda: tree
    return TestClient(app)


def _seed(client: TestClient) -> None:
    for title, description in [
        ("Start", "desc0"),
        ("Left", "d1"),
        ("Mid", "d2"),
        ("Right", "d3"),
    ]:
        response = client.post(
            "/api/v1/scenes", json={"title": title, "description": description}
        )
        assert response.status_code == 200


def test_add_scenes_and_read_tree():
    client = _client(SceneTree())
    _seed(client)

    response = client.get("/api/v1/tree")
    assert response.status_code == 200
    data = response.json()
    assert data["scene_count"] == 4
    assert data["root_id"] == 1
    assert data["cursor_id"] == 1
    assert data["outline"].splitlines()[1].strip() == "A) Left (#2)"

    cursor = client.get("/api/v1/cursor").json()
    assert [child["option"] for child in cursor["children"]] == ["A", "B", "C"]
    assert cursor["is_ending"] is False

    app.dependency_overrides.clear()


def test_add_scene_to_full_cursor_returns_conflict():
    client = _client(SceneTree())
    _seed(client)

    response = client.post("/api/v1/scenes", json={"title": "X", "description": "x"})
    assert response.status_code == 409

    app.dependency_overrides.clear()


def test_empty_tree_cursor_is_missing():
    client = _client(SceneTree())

    assert client.get("/api/v1/cursor").status_code == 404
    assert client.post("/api/v1/cursor/back").status_code == 404
    assert client.post("/api/v1/play", json={"choices": []}).status_code == 404
    assert client.get("/api/v1/tree").json()["root_id"] is None

    app.dependency_overrides.clear()


def test_navigation_and_path_endpoints():
    client = _client(SceneTree())
    _seed(client)

    response = client.post("/api/v1/cursor/forward/a")
    assert response.status_code == 200
    assert response.json()["title"] == "Left"

    path = client.get("/api/v1/cursor/path").json()
    assert path == {"titles": ["Start", "Left"], "path": "Start, Left"}

    assert client.post("/api/v1/cursor/back").json()["title"] == "Start"
    response = client.post("/api/v1/cursor/back")
    assert response.status_code == 404
    assert "root" in response.json()["detail"]

    response = client.post("/api/v1/cursor/forward/D")
    assert response.status_code == 404
    assert response.json()["detail"] == "That option does not exist."

    app.dependency_overrides.clear()


def test_remove_child_endpoint():
    tree = SceneTree()
    client = _client(tree)
    _seed(client)

    response = client.delete("/api/v1/cursor/children/B")
    assert response.status_code == 200
    assert [child["title"] for child in response.json()["children"]] == ["Left", "Right"]

    response = client.delete("/api/v1/cursor/children/B")
    assert response.status_code == 404
    assert client.delete("/api/v1/cursor/children/Z").status_code == 404
    assert tree.scene_count == 4

    app.dependency_overrides.clear()


def test_move_scene_endpoint():
    tree = SceneTree()
    client = _client(tree)
    _seed(client)
    client.post("/api/v1/cursor/forward/A")

    response = client.post("/api/v1/cursor/move", json={"target_id": 4})
    assert response.status_code == 200
    assert response.json()["id"] == 2
    assert tree.path_from_root() == "Start, Right, Left"

    assert client.post("/api/v1/cursor/move", json={"target_id": 99}).status_code == 404

    app.dependency_overrides.clear()


def test_move_scene_to_full_target_returns_conflict():
    tree = SceneTree()
    client = _client(tree)
    _seed(client)
    client.post("/api/v1/cursor/forward/C")
    for title in ("R1", "R2", "R3"):
        client.post("/api/v1/scenes", json={"title": title, "description": title})
    client.post("/api/v1/cursor/back")
    client.post("/api/v1/cursor/forward/A")

    response = client.post("/api/v1/cursor/move", json={"target_id": 4})
    assert response.status_code == 409
    assert tree.path_from_root() == "Start, Left"

    app.dependency_overrides.clear()


def test_edit_cursor_and_get_scene():
    client = _client(SceneTree())
    _seed(client)

    response = client.patch("/api/v1/cursor", json={"title": "Opening"})
    assert response.status_code == 200
    assert response.json()["description"] == "desc0"

    scene = client.get("/api/v1/scenes/1").json()
    assert scene["title"] == "Opening"
    assert scene["summary"].startswith("Scene ID #1\nTitle: Opening")
    assert client.get("/api/v1/scenes/42").status_code == 404

    outline = client.get("/api/v1/outline").json()["outline"]
    assert outline.startswith("Opening (#1)")

    app.dependency_overrides.clear()


def test_play_endpoint():
    tree = SceneTree()
    client = _client(tree)
    _seed(client)

    response = client.post("/api/v1/play", json={"choices": []})
    data = response.json()
    assert data["is_ending"] is False
    assert [option["title"] for option in data["options"]] == ["Left", "Mid", "Right"]

    response = client.post("/api/v1/play", json={"choices": ["B"]})
    data = response.json()
    assert data["scene"]["title"] == "Mid"
    assert data["is_ending"] is True
    assert data["path"] == ["Start", "Mid"]
    assert tree.cursor is tree.root

    response = client.post("/api/v1/play", json={"choices": ["B", "A"]})
    assert response.status_code == 404

    app.dependency_overrides.clear()
