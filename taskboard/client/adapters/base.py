"""
The persistence contract shared by the remote and local adapters.

Payloads on both sides of the contract are plain JSON-style dicts with the
same camelCase keys the REST API uses, so callers never need to know which
adapter they hold.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Payload = Dict[str, Any]


class PersistenceAdapter(ABC):
    """Board/column/card persistence.

    Implementations raise :class:`~taskboard.errors.ValidationError` for
    invalid input, :class:`~taskboard.errors.NotFoundError` for unknown ids
    and :class:`~taskboard.errors.PersistenceFailure` for transport or
    storage problems.
    """

    # Preferences

    @abstractmethod
    def get_preferences(self) -> Payload: ...

    @abstractmethod
    def update_preferences(self, patch: Payload) -> Payload: ...

    # Boards

    @abstractmethod
    def list_boards(self) -> List[Payload]:
        """Board summaries (``id``, ``title``, ``order``) sorted by position."""

    @abstractmethod
    def get_board_details(self, board_id: str) -> Payload:
        """The board with ordered ``columns`` and a flat ordered ``cards`` list."""

    @abstractmethod
    def create_board(self, data: Payload) -> Payload:
        """Create a board from ``{title, columns?}``; returns it populated."""

    @abstractmethod
    def update_board(self, board_id: str, patch: Payload) -> Payload: ...

    @abstractmethod
    def delete_board(self, board_id: str) -> Optional[Payload]:
        """Delete a board with its columns and cards."""

    @abstractmethod
    def reorder_boards(self, ordered_ids: List[str]) -> Optional[Payload]: ...

    # Columns

    @abstractmethod
    def create_column(self, board_id: str, data: Payload) -> Payload: ...

    @abstractmethod
    def update_column(self, column_id: str, patch: Payload) -> Payload: ...

    @abstractmethod
    def delete_column(self, column_id: str) -> Optional[Payload]: ...

    @abstractmethod
    def reorder_columns(self, board_id: str, ordered_ids: List[str]) -> Optional[Payload]: ...

    # Cards

    @abstractmethod
    def create_card(self, column_id: str, data: Payload) -> Payload: ...

    @abstractmethod
    def update_card(self, card_id: str, patch: Payload) -> Payload: ...

    @abstractmethod
    def delete_card(self, card_id: str) -> Optional[Payload]: ...

    @abstractmethod
    def reorder_cards(self, board_id: str, card_patches: List[Payload]) -> Optional[Payload]:
        """Persist ``[{id, order, columnId}]`` for cards of one board."""
