"""The editing session: the one state container a user's screen works on.

It owns the DSL text, the live graph (through ``GraphEditor``), the topology
as last compiled/decoded/loaded, the busy flag, the current error message
and the saved-snippet listing. Every mutation goes through a method here.

DSL -> graph is the only sync direction: compiling replaces the graph, but
graph edits never rewrite the DSL text. Saving stores the DSL text with the
topology as last compiled, not the edited graph.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from netbuild import config
from netbuild.editor.graph_editor import EditorState, GraphEditor
from netbuild.errors import BusyError, NetBuildError
from netbuild.models.snippet import Snippet
from netbuild.models.topology import Device, Topology
from netbuild.persistence import PersistenceManager
from netbuild.sdk.compiler import CompilerBridge
from netbuild.sdk.decoder import DecodeAdapter
from netbuild.sdk.store import SnippetStoreClient

log = logging.getLogger("netbuild.editor.session")


class EditingSession:
    """Single-user, single-threaded editing state.

    Long-running work (decode, compile, save, load, listing, delete) runs
    under one busy flag; starting another such action while it is set
    raises ``BusyError``. Each pipeline catches its own errors and leaves
    one message in ``error``.
    """

    def __init__(
        self,
        compiler: CompilerBridge,
        decoder: DecodeAdapter,
        persistence: PersistenceManager,
    ) -> None:
        self.compiler = compiler
        self.decoder = decoder
        self.persistence = persistence

        self.editor = GraphEditor()
        self.dsl_text = ""
        self.compiled: Topology | None = None  # as last compiled/decoded/loaded
        self.title = ""
        self.file_name = ""
        self._file: bytes | None = None

        self.busy = False
        self.error: str | None = None

    # --- read-only views ---

    @property
    def topology(self) -> Topology | None:
        """the live topology, including graph edits."""
        return self.editor.topology

    @property
    def state(self) -> EditorState:
        return self.editor.state

    @property
    def snippets(self) -> list[Snippet]:
        return self.persistence.snippets

    # --- internals ---

    @asynccontextmanager
    async def _busy(self, action: str):
        if self.busy:
            raise BusyError(f"Cannot {action} while another operation is in progress.")
        self.busy = True
        self.error = None
        try:
            yield
        finally:
            self.busy = False

    def _fail(self, action: str, exc: NetBuildError) -> None:
        log.warning("%s failed: %s", action, exc, exc_info=exc)
        self.error = str(exc)

    def _install(self, dsl: str, topology: Topology) -> None:
        self.dsl_text = dsl
        self.compiled = topology
        self.editor.replace(topology)

    def _clear(self) -> None:
        self.dsl_text = ""
        self.compiled = None
        self.editor.clear()

    # --- text and file input ---

    def edit_dsl(self, text: str) -> None:
        """replace the DSL text; the graph is untouched until ``compile``."""
        self.dsl_text = text

    def set_title(self, title: str) -> None:
        self.title = title

    def select_file(self, name: str, payload: bytes) -> None:
        if self.busy:
            raise BusyError("Cannot select a file while another operation is in progress.")
        self.file_name = name
        self._file = payload
        self.error = None

    def dismiss_error(self) -> None:
        self.error = None

    # --- pipelines ---

    async def decode(self) -> bool:
        """Decode the selected file into DSL text and a graph.

        The previous DSL text and graph are cleared up front and stay
        cleared if any step fails.
        """
        if self._file is None:
            return False
        async with self._busy("decode"):
            self._clear()
            try:
                conversion = await self.decoder.decode(self._file)
            except NetBuildError as e:
                self._fail("decode", e)
                self._clear()
                return False
            self._install(conversion.dsl, conversion.topology)
            log.info("decoded %s", self.file_name or "file")
            return True

    async def compile(self) -> bool:
        """Compile the DSL text and replace the graph with the result.

        Blank DSL text is ignored without calling the compiler. On failure
        the graph is cleared; the DSL text the user wrote is kept.
        """
        if not self.dsl_text.strip():
            return False
        async with self._busy("compile"):
            try:
                topology = await self.compiler.compile(self.dsl_text)
            except NetBuildError as e:
                self._fail("compile", e)
                self.compiled = None
                self.editor.clear()
                return False
            self.compiled = topology
            self.editor.replace(topology)
            return True

    async def save(self, title: str | None = None) -> Snippet | None:
        """Save the DSL text and the last compiled topology as a snippet.

        DSL that was never compiled, or whose last compile failed, is saved
        with an empty graph; opening that snippet shows the text with no
        devices until it is compiled again.
        """
        if title is not None:
            self.title = title
        async with self._busy("save"):
            try:
                return await self.persistence.save(
                    self.title, self.dsl_text, self.compiled or Topology()
                )
            except NetBuildError as e:
                self._fail("save", e)
                return None

    async def refresh_snippets(self) -> list[Snippet]:
        async with self._busy("list saved topologies"):
            try:
                return await self.persistence.list()
            except NetBuildError as e:
                self._fail("list", e)
                return self.persistence.snippets

    async def delete_snippet(self, snippet_id: int) -> bool:
        """Delete a saved snippet; a failure is reported, the listing stays."""
        async with self._busy("delete"):
            try:
                await self.persistence.delete(snippet_id)
            except NetBuildError as e:
                self._fail("delete", e)
                return False
            return True

    async def open_snippet(self, snippet: Snippet) -> bool:
        """Restore a snippet's DSL text and topology without recompiling.

        A corrupt snippet leaves the current state as it was.
        """
        async with self._busy("load"):
            try:
                dsl, topology = self.persistence.load(snippet)
            except NetBuildError as e:
                self._fail("load", e)
                return False
            self._install(dsl, topology)
            self.title = snippet.title
            return True

    # --- graph edits ---

    def select_device(self, device_id: int) -> Device:
        return self.editor.select_device(device_id)

    def dismiss_device(self) -> None:
        self.editor.dismiss()

    def delete_device(
        self,
        device_id: int,
        confirm: Callable[[Device], bool] | None = None,
    ) -> bool:
        """cascade-delete from the live graph; the DSL text is not regenerated."""
        return self.editor.delete_device(device_id, confirm=confirm)

    def move_device(self, device_id: int, x: float, y: float) -> Device:
        return self.editor.move_device(device_id, x, y)


def create_session(token: str | None = config.API_TOKEN) -> EditingSession:
    """Build a session wired to the services named in the environment."""
    compiler = CompilerBridge(config.COMPILER_URL, token=token)
    decoder = DecodeAdapter(compiler, config.DECODE_URL)
    store = SnippetStoreClient(config.STORE_URL, token=token)
    return EditingSession(compiler, decoder, PersistenceManager(store))
