"""
FastHTML adapter tests

Drive the demo application through Starlette's TestClient: the JSON branch for
plain requests and the SSE branch for Datastar requests. The client runs the
app's lifespan, so the store is loaded before the first request.
"""

import asyncio
import re

import pytest
from fastcore.xml import to_xml
from starlette.testclient import TestClient

from starform import FormConfig, MemoryRecordsApi, Record, RecordStore, SubmissionController
from starform import demo
from starform.adapters.fasthtml import RecordFormView, RecordListView
from starform.config import ApplicationConfig, Environment
from starform.demo import create_app

SUBMIT = "/recordform/submit"


def button_disabled(html):
    return re.search(r"<button[^>]*\sdisabled(?=[\s>=])", html) is not None


@pytest.fixture
def memory_api():
    return MemoryRecordsApi([Record(id=1, name="Pizza Place")])


@pytest.fixture
def app_and_dispatcher(memory_api):
    return create_app(ApplicationConfig.for_environment(Environment.TESTING), api=memory_api)


@pytest.fixture
def client(app_and_dispatcher):
    app, _ = app_and_dispatcher
    with TestClient(app) as client:
        yield client


def submit(client, draft, **kwargs):
    return client.post(SUBMIT, json={"RecordForm": {"draft": draft}}, **kwargs)


class TestIndexPage:

    def test_renders_form_and_records(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "Pizza Place" in response.text
        assert "data-on-submit" in response.text
        assert "/recordform/submit" in response.text
        assert "data-on-load" in response.text
        assert "/records/updates" in response.text

    def test_index_does_not_reload_loaded_store(self, client, memory_api):
        memory_api.fail_next()

        assert client.get("/").status_code == 200

        # the queued failure was not spent on a reload, so the save meets it
        assert submit(client, "Sushi Place").status_code == 502

    def test_index_retries_failed_startup_load(self, app_and_dispatcher, memory_api):
        app, dispatcher = app_and_dispatcher
        memory_api.fail_next()

        with TestClient(app) as client:
            assert dispatcher.store.records == ()
            response = client.get("/")

        assert "Pizza Place" in response.text
        assert dispatcher.store.loaded is True


class TestStartup:

    def test_store_is_loaded_before_first_submit(self, client):
        response = submit(client, "Sushi Place")
        assert response.json()["records"] == [{"id": 1, "name": "Pizza Place"}, {"id": 2, "name": "Sushi Place"}]


class TestSubmitJson:

    def test_created(self, client, memory_api):
        response = submit(client, "Sushi Place")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["form"]["draft"] == ""
        assert body["form"]["phase"] == "idle"
        assert body["records"] == [{"id": 1, "name": "Pizza Place"}, {"id": 2, "name": "Sushi Place"}]
        assert memory_api.calls == ["Sushi Place"]

    def test_empty_draft(self, client, memory_api):
        response = submit(client, "")

        assert response.status_code == 422
        assert response.json()["form"]["validation_error"] is True
        assert memory_api.calls == []

    def test_server_failure_keeps_draft(self, client, memory_api):
        memory_api.fail_next()

        response = submit(client, "Sushi Place")

        assert response.status_code == 502
        form = response.json()["form"]
        assert form["save_error"] is True
        assert form["draft"] == "Sushi Place"

    def test_retry_after_failure(self, client, memory_api):
        memory_api.fail_next()
        submit(client, "Sushi Place")

        response = submit(client, "Sushi Place")

        assert response.status_code == 201
        assert response.json()["form"]["save_error"] is False

    def test_plain_form_post(self, client):
        response = client.post(SUBMIT, data={"name": "Sushi Place"})
        assert response.status_code == 201

    def test_malformed_body(self, client, memory_api):
        response = client.post(SUBMIT, content=b"{not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Malformed request body"}
        assert memory_api.calls == []

    def test_malformed_datastar_body(self, client):
        response = client.post(
            SUBMIT,
            content=b"{not json",
            headers={"content-type": "application/json", "Datastar-Request": "true"},
        )
        assert response.status_code == 400


class TestSubmitDatastar:

    def test_streams_signals_and_list(self, client):
        response = submit(client, "Sushi Place", headers={"Datastar-Request": "true"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "datastar-merge-signals" in response.text
        assert "datastar-merge-fragments" in response.text
        assert "record-2" in response.text

    def test_failure_streams_signals_only(self, client, memory_api):
        memory_api.fail_next()

        response = submit(client, "Sushi Place", headers={"Datastar-Request": "true"})

        assert "datastar-merge-signals" in response.text
        assert "datastar-merge-fragments" not in response.text
        assert "Sushi Place" in response.text


class TestListUpdates:

    @pytest.mark.asyncio
    async def test_other_sessions_receive_new_records(self, app_and_dispatcher):
        _, dispatcher = app_and_dispatcher
        stream = dispatcher._create_feed_stream()
        first_update = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0)
        assert dispatcher.feed.listener_count == 1

        await dispatcher.store.create("Sushi Place")

        chunk = await first_update
        assert "datastar-merge-fragments" in chunk
        assert "record-2" in chunk

        await stream.aclose()
        assert dispatcher.feed.listener_count == 0

    @pytest.mark.asyncio
    async def test_submission_reaches_open_streams(self, app_and_dispatcher):
        _, dispatcher = app_and_dispatcher
        stream = dispatcher._create_feed_stream()
        update = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0)

        controller = dispatcher.sessions.for_session({})
        controller.set_draft("Sushi Place")
        assert await controller.submit() is True

        assert "Sushi Place" in await update
        await stream.aclose()


class TestViews:

    @pytest.fixture
    def controller(self, memory_api):
        return SubmissionController(RecordStore(memory_api, records=[Record(id=1, name="Pizza Place")]))

    def test_signal_paths(self, controller):
        assert RecordFormView.Sdraft == "$RecordForm.draft"
        assert RecordFormView.Bdraft == "RecordForm.draft"
        view = RecordFormView(controller, FormConfig(namespace="Admin.NewPlace"))
        assert view.Ssave_error == "$Admin.NewPlace.save_error"
        assert view.submit_path == "/admin.newplace/submit"

    def test_submit_marks_pending_before_posting(self, controller):
        html = to_xml(RecordFormView(controller).render())
        assert "$RecordForm.pending = true; @post(" in html
        assert "data-attr-disabled" in html

    @pytest.mark.asyncio
    async def test_button_disabled_while_saving(self, controller):
        reply = asyncio.get_running_loop().create_future()

        async def held(name):
            return await reply

        controller.store.api.create_record = held
        controller.set_draft("Sushi Place")
        task = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)

        assert button_disabled(to_xml(RecordFormView(controller).render()))

        reply.set_result(Record(id=2, name="Sushi Place"))
        await task
        assert not button_disabled(to_xml(RecordFormView(controller).render()))

    def test_messages_hidden_until_flagged(self, controller):
        view = RecordFormView(controller)
        assert to_xml(view.render()).count("display: none") == 2

    @pytest.mark.asyncio
    async def test_validation_message_shown_after_empty_submit(self, controller):
        await controller.submit()
        html = to_xml(RecordFormView(controller).render())
        assert html.count("display: none") == 1
        assert "Name is required." in html

    def test_list_view(self, controller):
        html = to_xml(RecordListView(controller.store).render())
        assert 'id="records"' in html
        assert "Pizza Place" in html


class TestMain:

    @pytest.mark.parametrize("environment, reload", [("development", True), ("production", False)])
    def test_auto_reload_reaches_uvicorn(self, monkeypatch, reset_starform_logger, environment, reload):
        calls = []
        monkeypatch.setenv("STARFORM_ENV", environment)
        monkeypatch.setattr(demo.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        demo.main()

        app, kwargs = calls[0]
        assert app == "starform.demo:asgi_app"
        assert kwargs["factory"] is True
        assert kwargs["reload"] is reload
