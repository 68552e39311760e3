"""
SnapShelf client controller.
Drives the add / list / detail / suggestions flows against the gateway and
records every outcome through views.dispatch.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, Optional

from snapshelf.app.domain.models import ItemKind
from snapshelf.client.api_client import ApiError, SnapShelfApiClient
from snapshelf.client.session import SessionStore
from snapshelf.client.views import (
    Action,
    AddView,
    AnalysisStarted,
    AnalysisSucceeded,
    AnalysisTimedOut,
    AppState,
    ChatReplied,
    ChatSent,
    FieldsEdited,
    FileRemoved,
    FilesAdded,
    FilesCleared,
    Item,
    ItemOpened,
    ItemSaved,
    ItemsLoaded,
    ItemsRequested,
    ListView,
    LoggedIn,
    LoggedOut,
    RequestFailed,
    SearchChanged,
    ShowAdd,
    SuggestionsLoaded,
    SuggestionsRequested,
    SuggestionsView,
    dispatch,
    filter_items,
)
from snapshelf.services.errors import ExtractionError, ServiceError
from snapshelf.services.extraction import build_extraction_content, parse_extraction
from snapshelf.services.image_prep import SelectedFile, load_files, prepare_files

logger = logging.getLogger(__name__)

ANALYZE_TIMEOUT_SECONDS = 90.0
UNREADABLE_MESSAGE = "Could not read that clearly. Please try again with clearer images."
NO_FILES_MESSAGE = "Please upload at least one photo"
NO_NAME_MESSAGE = "Please enter your name"


def _editable_fields(kind: ItemKind, extracted: Any) -> Item:
    fields = asdict(extracted)
    if kind is ItemKind.RECIPE:
        fields["notes"] = ""
    else:
        fields.update({"price": "", "where_bought": "", "rating": None})
    return fields


class AppController:
    def __init__(
        self,
        api: SnapShelfApiClient,
        kind: ItemKind | str,
        session: SessionStore,
        analyze_timeout: float = ANALYZE_TIMEOUT_SECONDS,
    ) -> None:
        self.api = api
        self.kind = ItemKind(kind)
        self.session = session
        self.analyze_timeout = analyze_timeout
        self.state = AppState()
        self._pending: set[asyncio.Task] = set()

    def _dispatch(self, action: Action) -> AppState:
        self.state = dispatch(self.state, action)
        return self.state

    def _fail(self, message: str) -> AppState:
        return self._dispatch(RequestFailed(message))

    # --- session ---------------------------------------------------------

    def restore_session(self) -> AppState:
        user_name = self.session.load()
        if user_name:
            self._dispatch(LoggedIn(user_name))
        return self.state

    def login(self, user_name: str) -> AppState:
        name = user_name.strip()
        if not name:
            return self._fail(NO_NAME_MESSAGE)
        self.session.save(name)
        return self._dispatch(LoggedIn(name))

    def logout(self) -> AppState:
        self.session.clear()
        return self._dispatch(LoggedOut())

    # --- add flow --------------------------------------------------------

    def show_add(self) -> AppState:
        return self._dispatch(ShowAdd())

    async def add_files(self, sources: Iterable[str | Path | SelectedFile]) -> AppState:
        sources = list(sources)
        paths = [source for source in sources if not isinstance(source, SelectedFile)]
        try:
            loaded = [source for source in sources if isinstance(source, SelectedFile)]
            loaded.extend(await load_files(paths))
            prepared = await prepare_files(loaded)
        except ServiceError as error:
            return self._fail(str(error))
        except OSError as error:
            return self._fail(f"Error processing images: {error}")
        return self._dispatch(FilesAdded(tuple(prepared)))

    def remove_file(self, index: int) -> AppState:
        return self._dispatch(FileRemoved(index))

    def clear_files(self) -> AppState:
        return self._dispatch(FilesCleared())

    async def _extract(self, files: tuple[SelectedFile, ...]) -> Item:
        content = await build_extraction_content(files, self.kind)
        text = await self.api.analyze(content)
        return _editable_fields(self.kind, parse_extraction(text, self.kind))

    def _finish_analysis(self, task: asyncio.Task) -> None:
        try:
            fields = task.result()
        except ExtractionError as error:
            logger.info("Extraction unreadable: %s", error)
            self._fail(UNREADABLE_MESSAGE)
        except (ApiError, ServiceError) as error:
            self._fail(str(error))
        else:
            self._dispatch(AnalysisSucceeded(fields))

    def _finish_late_analysis(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Late analysis failed after timeout: %s", error)
            return
        # Only lands if the add view is still showing
        self._dispatch(AnalysisSucceeded(task.result()))

    async def analyze(self) -> AppState:
        view = self.state.view
        if not isinstance(view, AddView) or not view.files:
            return self._fail(NO_FILES_MESSAGE)

        self._dispatch(AnalysisStarted())
        task = asyncio.ensure_future(self._extract(view.files))
        done, _ = await asyncio.wait({task}, timeout=self.analyze_timeout)
        if not done:
            # The request keeps running; only the spinner gives up
            self._dispatch(AnalysisTimedOut())
            self._pending.add(task)
            task.add_done_callback(self._finish_late_analysis)
            return self.state

        self._finish_analysis(task)
        return self.state

    def edit_fields(self, **changes: Any) -> AppState:
        return self._dispatch(FieldsEdited(changes))

    async def save(self) -> AppState:
        view = self.state.view
        if not isinstance(view, AddView) or view.extracted is None or not self.state.user_name:
            return self.state

        fields = {**view.extracted, "user_name": self.state.user_name}
        try:
            await self.api.save_item(self.kind, fields)
        except ApiError as error:
            return self._fail(error.message or f"Failed to save {self.kind.value}. Please try again.")
        return self._dispatch(ItemSaved())

    # --- list / detail ---------------------------------------------------

    async def show_list(self) -> AppState:
        if not self.state.user_name:
            return self.state
        self._dispatch(ItemsRequested())
        try:
            items = await self.api.list_items(self.kind, self.state.user_name)
        except ApiError as error:
            return self._fail(error.message or f"Failed to load {self.kind.table}")
        return self._dispatch(ItemsLoaded(tuple(items)))

    def search(self, query: str) -> AppState:
        return self._dispatch(SearchChanged(query))

    def visible_items(self) -> list[Item]:
        view = self.state.view
        if not isinstance(view, ListView):
            return []
        return filter_items(view.items, view.query)

    def open_item(self, item: Item) -> AppState:
        return self._dispatch(ItemOpened(item))

    async def delete(self, item_id: Any) -> AppState:
        if not self.state.user_name:
            return self.state
        try:
            await self.api.delete_item(self.kind, item_id, self.state.user_name)
        except ApiError as error:
            return self._fail(error.message or f"Failed to delete {self.kind.value}. Please try again.")
        return await self.show_list()

    # --- suggestions -----------------------------------------------------

    async def show_suggestions(self, wine_type: Optional[str] = None) -> AppState:
        if not self.state.user_name:
            return self.state
        self._dispatch(SuggestionsRequested(wine_type))
        try:
            bundle = await self.api.get_suggestions(self.state.user_name, wine_type)
        except ApiError as error:
            return self._fail(error.message)
        return self._dispatch(SuggestionsLoaded(bundle))

    async def send_chat(self, message: str) -> AppState:
        view = self.state.view
        text = message.strip()
        if not text or not isinstance(view, SuggestionsView) or not self.state.user_name:
            return self.state

        history = view.chat
        self._dispatch(ChatSent(text))
        try:
            reply = await self.api.chat(self.state.user_name, text, history)
        except ApiError as error:
            return self._fail(error.message)
        return self._dispatch(ChatReplied(reply))
