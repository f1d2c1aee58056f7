import pytest
from fastapi.testclient import TestClient

from main import create_app
from studywise.apis.deps import assistant_dep, store_dep
from studywise.core.errors import ModelInvocationError, ModelTimeout
from studywise.modules.flows.main import StudyAssistant
from studywise.modules.workspaces.store import WorkspaceStore

from conftest import StubAdapter, notes_json


@pytest.fixture
def store() -> WorkspaceStore:
    return WorkspaceStore()


@pytest.fixture
def client(assistant, store):
    app = create_app()
    app.dependency_overrides[assistant_dep] = lambda: assistant
    app.dependency_overrides[store_dep] = lambda: store
    with TestClient(app) as c:
        yield c


def _client_with(adapter, store):
    app = create_app()
    app.dependency_overrides[assistant_dep] = lambda: StudyAssistant(adapter)
    app.dependency_overrides[store_dep] = lambda: store
    return TestClient(app)


def test_health(client):
    assert client.get("/").json()["status"] == "ok"


def test_list_flows(client):
    flows = {f["name"]: f for f in client.get("/v1/flows").json()}
    assert set(flows) == {
        "study_schedule",
        "explain_concept",
        "analyze_weaknesses",
        "process_notes",
        "generate_motivation",
        "text_to_speech",
    }
    assert flows["text_to_speech"]["path"] == "/v1/flows/speech"


def test_schedule_endpoint_returns_camel_case(client):
    res = client.post(
        "/v1/flows/schedule",
        json={"subjects": ["Math", "Physics"], "examDate": "2024-12-25", "dailyFreeTime": 4},
    )
    assert res.status_code == 200
    body = res.json()
    assert len(body["studySchedule"]) == 2
    assert body["focusAreas"] == ["Kinematics"]


def test_schema_violation_is_422_with_paths(client, stub_adapter):
    res = client.post("/v1/flows/schedule", json={"subjects": ["Math"], "dailyFreeTime": 4})
    assert res.status_code == 422
    body = res.json()
    assert body["error"] == "SchemaViolation"
    assert body["flow"] == "study_schedule"
    assert [v["path"] for v in body["violations"]] == ["examDate"]
    assert stub_adapter.calls == []


def test_notes_endpoint_awards_xp(client, store):
    res = client.post("/v1/flows/notes", json={"notesContent": "Photosynthesis."})
    assert res.status_code == 200
    assert len(res.json()["quizQuestions"]) == 5
    assert client.get("/v1/xp").json() == {"xp": 50}


def test_speech_endpoint_awards_xp(client, store):
    res = client.post("/v1/flows/speech", json={"text": "Read this"})
    assert res.status_code == 200
    assert res.json()["audioDataUri"].startswith("data:audio/wav;base64,")
    assert store.get().xp == 10


def test_output_violation_is_502_and_awards_nothing(store):
    adapter = StubAdapter(texts={"process_notes": notes_json(correctAnswer="Nope")})
    res = _client_with(adapter, store).post("/v1/flows/notes", json={"notesContent": "x"})
    assert res.status_code == 502
    assert res.json()["error"] == "OutputSchemaViolation"
    assert store.get().xp == 0


def test_no_media_is_502(store):
    res = _client_with(StubAdapter(media=None), store).post(
        "/v1/flows/speech", json={"text": "x"}
    )
    assert res.status_code == 502
    assert res.json()["error"] == "NoMediaReturned"


@pytest.mark.parametrize(
    "error, code",
    [
        (ModelInvocationError("explain_concept", "quota exceeded"), 502),
        (ModelTimeout("explain_concept", 30), 504),
    ],
)
def test_model_errors_map_to_gateway_codes(store, error, code):
    res = _client_with(StubAdapter(error=error), store).post(
        "/v1/flows/explain", json={"concept": "Entropy"}
    )
    assert res.status_code == code
    assert res.json()["error"] == type(error).__name__


def test_workspace_endpoints(client):
    ws = client.post("/v1/workspaces", json={"name": "Chemistry"}).json()
    note = client.post(
        f"/v1/workspaces/{ws['id']}/notes",
        json={"title": "Moles", "content": "Avogadro constant"},
    )
    assert note.status_code == 201

    listed = client.get("/v1/workspaces").json()
    assert listed[0]["notes"][0]["title"] == "Moles"

    hits = client.get("/v1/notes/search", params={"q": "avogadro"}).json()
    assert hits[0]["workspaceName"] == "Chemistry"

    missing = client.post("/v1/workspaces/nope/notes", json={"title": "a", "content": "b"})
    assert missing.status_code == 404

    note_id = note.json()["id"]
    assert client.delete(f"/v1/workspaces/{ws['id']}/notes/{note_id}").status_code == 204
    assert client.delete(f"/v1/workspaces/{ws['id']}").status_code == 204
    assert client.get("/v1/workspaces").json() == []


def test_reminders_and_xp_endpoints(client):
    created = client.post(
        "/v1/reminders", json={"title": "Final", "date": "2024-12-25", "type": "exam"}
    )
    assert created.status_code == 201
    assert client.get("/v1/reminders").json()[0]["type"] == "exam"
    assert client.delete(f"/v1/reminders/{created.json()['id']}").status_code == 204

    assert client.post("/v1/xp", json={"amount": 25}).json() == {"xp": 25}
    assert client.post("/v1/xp", json={"amount": -1}).status_code == 422


def test_blank_names_are_422(client):
    assert client.post("/v1/workspaces", json={"name": "   "}).status_code == 422
    res = client.post("/v1/reminders", json={"title": " ", "date": "2024-12-25"})
    assert res.status_code == 422
    assert client.get("/v1/workspaces").json() == []
