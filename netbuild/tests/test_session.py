"""Tests for the editing session: pipelines, busy flag, error reporting."""

import asyncio
import json

import httpx
import pytest

from netbuild.editor.graph_editor import EditorState
from netbuild.editor.session import EditingSession
from netbuild.errors import BusyError
from netbuild.models.snippet import Snippet
from netbuild.models.topology import Topology
from netbuild.persistence import PersistenceManager
from netbuild.sdk.compiler import CompilerBridge
from netbuild.sdk.decoder import DecodeAdapter
from netbuild.sdk.store import SnippetStoreClient


class Services:
    """Routes every request of a session to a per-service handler."""

    def __init__(self, graph: dict, decode_body: str) -> None:
        self.graph = graph
        self.decode = lambda request: httpx.Response(200, text=decode_body)
        self.convert = lambda request: httpx.Response(
            200, json={"dsl": "router R1\nswitch SW1\npc PC1", "react_flow": graph}
        )
        self.compile = lambda request: httpx.Response(200, json={"react_flow": graph})
        self.saved: list[dict] = []
        self.calls: list[str] = []
        self.fail_delete = False

    def store(self, request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            if self.fail_delete:
                return httpx.Response(500, json={"msg": "Could not delete the topology."})
            return httpx.Response(200, json={"deleted": request.url.path.rsplit("/", 1)[-1]})
        if request.method == "POST":
            row = {**json.loads(request.content), "id": len(self.saved) + 1,
                   "created_at": "2026-10-17T10:00:00+00:00"}
            self.saved.append(row)
            return httpx.Response(201, json=row)
        return httpx.Response(200, json=self.saved)

    def compiler_handler(self, request: httpx.Request):
        self.calls.append(request.url.path)
        if request.url.path == "/api/convert":
            return self.convert(request)
        return self.compile(request)

    def decode_handler(self, request: httpx.Request):
        self.calls.append("decode")
        return self.decode(request)

    def session(self) -> EditingSession:
        compiler = CompilerBridge("http://compiler.test", transport=httpx.MockTransport(self.compiler_handler))
        decoder = DecodeAdapter(compiler, "http://decode.test", transport=httpx.MockTransport(self.decode_handler))
        store = SnippetStoreClient("http://store.test", transport=httpx.MockTransport(self.store))
        return EditingSession(compiler, decoder, PersistenceManager(store))


@pytest.fixture
def services(graph, decode_body) -> Services:
    return Services(graph, decode_body)


@pytest.fixture
def session(services) -> EditingSession:
    return services.session()


class TestDecodePipeline:
    def test_success(self, session):
        session.select_file("lab.pkt", b"pkt")
        assert asyncio.run(session.decode())

        assert session.dsl_text.startswith("router R1")
        assert session.topology.device_ids() == [1, 3, 5]
        assert session.state == EditorState.loaded
        assert session.error is None
        assert not session.busy

    def test_no_file_selected(self, session, services):
        assert not asyncio.run(session.decode())
        assert services.calls == []

    def test_failure_clears_previous_state(self, session, services):
        """Decode 500 "bad file" -> message shown, DSL and graph cleared."""
        session.select_file("lab.pkt", b"pkt")
        asyncio.run(session.decode())
        assert session.topology is not None

        services.decode = lambda request: httpx.Response(500, text="bad file")
        assert not asyncio.run(session.decode())

        assert session.error == "Decode failed: 500 bad file"
        assert session.dsl_text == ""
        assert session.topology is None
        assert session.editor.nodes == []
        assert session.state == EditorState.empty
        assert not session.busy

    def test_conversion_missing_fields_clears(self, session, services):
        session.edit_dsl("old text")
        services.convert = lambda request: httpx.Response(200, json={"dsl": "x"})
        session.select_file("lab.pkt", b"pkt")

        assert not asyncio.run(session.decode())
        assert "missing expected data" in session.error
        assert session.dsl_text == ""

    def test_select_file_resets_error(self, session):
        session.error = "old"
        session.select_file("lab.pkt", b"pkt")
        assert session.error is None
        assert session.file_name == "lab.pkt"


class TestCompilePipeline:
    def test_success_replaces_graph(self, session, services):
        session.edit_dsl("router R1")
        assert asyncio.run(session.compile())
        assert session.topology.device_ids() == [1, 3, 5]

        services.compile = lambda request: httpx.Response(
            200, json={"react_flow": {"nodes": [{"id": "9"}], "edges": []}}
        )
        session.select_device(1)
        assert asyncio.run(session.compile())

        assert session.topology.device_ids() == [9]
        assert session.state == EditorState.loaded

    def test_empty_dsl_is_a_no_op(self, session, services):
        """Blank DSL never reaches the compile service."""
        session.edit_dsl("  ")
        assert not asyncio.run(session.compile())
        assert services.calls == []
        assert session.error is None

    def test_failure_clears_graph_keeps_text(self, session, services):
        session.edit_dsl("router R1")
        asyncio.run(session.compile())

        services.compile = lambda request: httpx.Response(400, text="syntax error at line 1")
        session.edit_dsl("rooter R1")
        assert not asyncio.run(session.compile())

        assert session.error == "syntax error at line 1"
        assert session.topology is None
        assert session.compiled is None
        assert session.dsl_text == "rooter R1"

    def test_unreachable_compiler(self, session, services):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        services.compile = refuse
        session.edit_dsl("router R1")
        assert not asyncio.run(session.compile())
        assert "Failed to connect" in session.error


class TestGraphEdits:
    def test_delete_does_not_touch_dsl(self, session):
        session.edit_dsl("router R1")
        asyncio.run(session.compile())

        assert session.delete_device(3, confirm=lambda device: True)

        assert session.dsl_text == "router R1"
        assert session.topology.device_ids() == [1, 5]
        assert session.compiled.device_ids() == [1, 3, 5]

    def test_move_and_inspect(self, session):
        session.edit_dsl("router R1")
        asyncio.run(session.compile())

        session.move_device(5, 1, 2)
        device = session.select_device(5)
        assert (device.position.x, device.position.y) == (1, 2)
        session.dismiss_device()
        assert session.state == EditorState.loaded


class TestSaveAndLoad:
    def test_save_persists_last_compiled_topology(self, session, services, graph):
        """Graph edits after the last compile are not what gets saved."""
        session.edit_dsl("router R1")
        asyncio.run(session.compile())
        session.delete_device(3)

        snippet = asyncio.run(session.save("Campus"))

        assert snippet is not None
        stored = json.loads(services.saved[0]["content"])
        assert stored["dsl"] == "router R1"
        assert [node["id"] for node in stored["reactFlow"]["nodes"]] == ["1", "3", "5"]

    def test_save_without_title(self, session, services):
        session.edit_dsl("router R1")
        assert asyncio.run(session.save("")) is None
        assert session.error == "Please enter a title before saving."
        assert services.saved == []

    def test_save_without_dsl(self, session, services):
        assert asyncio.run(session.save("Campus")) is None
        assert "DSL text is empty" in session.error
        assert services.saved == []

    def test_uncompiled_dsl_saves_empty_graph(self, session, services):
        session.edit_dsl("router R1")
        snippet = asyncio.run(session.save("Draft"))

        stored = json.loads(services.saved[0]["content"])
        assert stored == {"dsl": "router R1", "reactFlow": {"nodes": [], "edges": []}}

        fresh = services.session()
        assert asyncio.run(fresh.open_snippet(snippet))
        assert fresh.dsl_text == "router R1"
        assert fresh.topology.is_empty

    def test_open_snippet_restores_both_views(self, session, services):
        session.edit_dsl("router R1")
        asyncio.run(session.compile())
        snippet = asyncio.run(session.save("Campus"))

        fresh = services.session()
        calls_before = len(services.calls)
        assert asyncio.run(fresh.open_snippet(snippet))

        assert fresh.dsl_text == "router R1"
        assert fresh.topology == session.compiled
        assert fresh.title == "Campus"
        assert len(services.calls) == calls_before  # no recompile

    def test_corrupt_snippet_leaves_state(self, session):
        session.edit_dsl("router R1")
        asyncio.run(session.compile())
        corrupt = Snippet(id=7, title="bad", content="{not json", created_at="2026-10-17T00:00:00Z")

        assert not asyncio.run(session.open_snippet(corrupt))

        assert session.error == "Failed to parse topology data."
        assert session.dsl_text == "router R1"
        assert session.topology.device_ids() == [1, 3, 5]

    def test_refresh_lists_saved_snippets(self, session):
        session.edit_dsl("router R1")
        asyncio.run(session.save("A"))
        snippets = asyncio.run(session.refresh_snippets())
        assert [s.title for s in snippets] == ["A"]


class TestBusyFlag:
    def test_second_action_is_rejected_while_busy(self, session, services, graph):
        async def scenario():
            release = asyncio.Event()

            async def slow_compile(request):
                await release.wait()
                return httpx.Response(200, json={"react_flow": graph})

            services.compile = slow_compile
            session.edit_dsl("router R1")
            task = asyncio.create_task(session.compile())
            while not session.busy:
                await asyncio.sleep(0)

            with pytest.raises(BusyError):
                await session.compile()
            with pytest.raises(BusyError):
                await session.save("Campus")
            with pytest.raises(BusyError):
                session.select_file("lab.pkt", b"pkt")

            release.set()
            return await task

        assert asyncio.run(scenario())
        assert not session.busy
        assert session.topology.device_ids() == [1, 3, 5]

    def test_flag_released_after_failure(self, session, services):
        services.compile = lambda request: httpx.Response(500)
        session.edit_dsl("router R1")
        asyncio.run(session.compile())
        assert not session.busy
        assert session.error == "Compile failed: 500"


class TestSnippetListing:
    def test_delete_failure_is_reported(self, session, services):
        session.edit_dsl("router R1")
        asyncio.run(session.save("A"))
        asyncio.run(session.refresh_snippets())
        services.fail_delete = True

        assert not asyncio.run(session.delete_snippet(1))

        assert session.error == "Could not delete the topology."
        assert [s.id for s in session.snippets] == [1]
        assert not session.busy

    def test_delete_success(self, session):
        session.edit_dsl("router R1")
        asyncio.run(session.save("A"))
        asyncio.run(session.refresh_snippets())

        assert asyncio.run(session.delete_snippet(1))
        assert session.snippets == []
