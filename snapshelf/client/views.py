"""
SnapShelf view state.

The client is always in exactly one view. Each view carries only the data it
needs, and every transition goes through dispatch(state, action).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

from snapshelf.app.domain.models import ChatRole, ChatTurn
from snapshelf.services.image_prep import SelectedFile

TIMEOUT_MESSAGE = "Request is taking too long. Please try with fewer or smaller files."

Item = dict[str, Any]


# =============================================================================
# Views
# =============================================================================

@dataclass(frozen=True)
class LoginView:
    error: Optional[str] = None


@dataclass(frozen=True)
class AddView:
    files: tuple[SelectedFile, ...] = ()
    loading: bool = False
    extracted: Optional[Item] = None
    error: Optional[str] = None
    saved: bool = False


@dataclass(frozen=True)
class ListView:
    items: tuple[Item, ...] = ()
    loading: bool = False
    query: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class DetailView:
    item: Item
    error: Optional[str] = None


@dataclass(frozen=True)
class SuggestionsView:
    bundle: Optional[dict[str, list[Item]]] = None
    chat: tuple[ChatTurn, ...] = ()
    loading: bool = False
    wine_type: Optional[str] = None
    error: Optional[str] = None


View = Union[LoginView, AddView, ListView, DetailView, SuggestionsView]


@dataclass(frozen=True)
class AppState:
    user_name: Optional[str] = None
    view: View = field(default_factory=LoginView)

    @property
    def logged_in(self) -> bool:
        return self.user_name is not None


# =============================================================================
# Actions
# =============================================================================

@dataclass(frozen=True)
class LoggedIn:
    user_name: str


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class ShowAdd:
    pass


@dataclass(frozen=True)
class FilesAdded:
    files: tuple[SelectedFile, ...]


@dataclass(frozen=True)
class FileRemoved:
    index: int


@dataclass(frozen=True)
class FilesCleared:
    pass


@dataclass(frozen=True)
class AnalysisStarted:
    pass


@dataclass(frozen=True)
class AnalysisSucceeded:
    fields: Item


@dataclass(frozen=True)
class AnalysisTimedOut:
    pass


@dataclass(frozen=True)
class FieldsEdited:
    changes: Item


@dataclass(frozen=True)
class ItemSaved:
    pass


@dataclass(frozen=True)
class ItemsRequested:
    pass


@dataclass(frozen=True)
class ItemsLoaded:
    items: tuple[Item, ...]


@dataclass(frozen=True)
class SearchChanged:
    query: str


@dataclass(frozen=True)
class ItemOpened:
    item: Item


@dataclass(frozen=True)
class SuggestionsRequested:
    wine_type: Optional[str] = None


@dataclass(frozen=True)
class SuggestionsLoaded:
    bundle: dict[str, list[Item]]


@dataclass(frozen=True)
class ChatSent:
    message: str


@dataclass(frozen=True)
class ChatReplied:
    text: str


@dataclass(frozen=True)
class RequestFailed:
    message: str


Action = Union[
    LoggedIn, LoggedOut, ShowAdd, FilesAdded, FileRemoved, FilesCleared,
    AnalysisStarted, AnalysisSucceeded, AnalysisTimedOut, FieldsEdited, ItemSaved,
    ItemsRequested, ItemsLoaded, SearchChanged, ItemOpened,
    SuggestionsRequested, SuggestionsLoaded, ChatSent, ChatReplied, RequestFailed,
]


# =============================================================================
# Transitions
# =============================================================================

def _on_view(view_type: type, update: Callable[[Any, Any], View]) -> Callable[[AppState, Any], AppState]:
    """Apply update only while the given view is showing; otherwise keep the state."""
    def handler(state: AppState, action: Any) -> AppState:
        if not isinstance(state.view, view_type):
            return state
        return replace(state, view=update(state.view, action))
    return handler


def _goto(make_view: Callable[[Any], View]) -> Callable[[AppState, Any], AppState]:
    def handler(state: AppState, action: Any) -> AppState:
        return replace(state, view=make_view(action))
    return handler


def _logged_in(state: AppState, action: LoggedIn) -> AppState:
    return AppState(user_name=action.user_name, view=AddView())


def _logged_out(state: AppState, action: LoggedOut) -> AppState:
    return AppState()


def _remove_file(view: AddView, action: FileRemoved) -> AddView:
    files = tuple(f for index, f in enumerate(view.files) if index != action.index)
    return replace(view, files=files)


def _request_failed(state: AppState, action: RequestFailed) -> AppState:
    view = state.view
    changes: dict[str, Any] = {"error": action.message}
    if hasattr(view, "loading"):
        changes["loading"] = False
    return replace(state, view=replace(view, **changes))


def _item_saved(view: AddView, action: ItemSaved) -> AddView:
    return replace(view, saved=True, error=None)


def _chat_sent(view: SuggestionsView, action: ChatSent) -> SuggestionsView:
    turn = ChatTurn(ChatRole.USER, action.message)
    return replace(view, chat=view.chat + (turn,), loading=True, error=None)


def _chat_replied(view: SuggestionsView, action: ChatReplied) -> SuggestionsView:
    turn = ChatTurn(ChatRole.ASSISTANT, action.text)
    return replace(view, chat=view.chat + (turn,), loading=False)


_HANDLERS: dict[type, Callable[[AppState, Any], AppState]] = {
    LoggedIn: _logged_in,
    LoggedOut: _logged_out,
    ShowAdd: _goto(lambda action: AddView()),
    FilesAdded: _on_view(AddView, lambda view, action: replace(view, files=view.files + tuple(action.files), error=None)),
    FileRemoved: _on_view(AddView, _remove_file),
    FilesCleared: _on_view(AddView, lambda view, action: replace(view, files=(), error=None)),
    AnalysisStarted: _on_view(AddView, lambda view, action: replace(view, loading=True, error=None, extracted=None, saved=False)),
    AnalysisSucceeded: _on_view(AddView, lambda view, action: replace(view, loading=False, error=None, extracted=dict(action.fields))),
    AnalysisTimedOut: _on_view(AddView, lambda view, action: replace(view, loading=False, error=TIMEOUT_MESSAGE)),
    FieldsEdited: _on_view(AddView, lambda view, action: replace(view, extracted={**(view.extracted or {}), **action.changes})),
    ItemSaved: _on_view(AddView, _item_saved),
    ItemsRequested: _goto(lambda action: ListView(loading=True)),
    ItemsLoaded: _on_view(ListView, lambda view, action: replace(view, items=tuple(action.items), loading=False, error=None)),
    SearchChanged: _on_view(ListView, lambda view, action: replace(view, query=action.query)),
    ItemOpened: _goto(lambda action: DetailView(item=action.item)),
    SuggestionsRequested: _goto(lambda action: SuggestionsView(loading=True, wine_type=action.wine_type)),
    SuggestionsLoaded: _on_view(SuggestionsView, lambda view, action: replace(view, bundle=action.bundle, loading=False, error=None)),
    ChatSent: _on_view(SuggestionsView, _chat_sent),
    ChatReplied: _on_view(SuggestionsView, _chat_replied),
    RequestFailed: _request_failed,
}


def dispatch(state: AppState, action: Action) -> AppState:
    """Return the state that results from applying action to state."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action)


# =============================================================================
# Selectors
# =============================================================================

SEARCH_FIELDS = ("title", "name", "ingredients", "grape")


def _searchable_text(item: Item) -> str:
    parts: list[str] = []
    for key in SEARCH_FIELDS:
        value = item.get(key)
        if isinstance(value, list):
            parts.extend(str(entry) for entry in value)
        elif value:
            parts.append(str(value))
    return " ".join(parts).lower()


def filter_items(items: tuple[Item, ...] | list[Item], query: str) -> list[Item]:
    needle = query.strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in _searchable_text(item)]
