"""Editable notebook: ordered cells, a selection cursor, structural edits."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from enum import StrEnum
from pathlib import Path

from notebook_model.errors import CellIndexError
from notebook_model.models import (
    Cell,
    CodeCell,
    MarkdownCell,
    NotebookDocument,
    RawCell,
)

logger = logging.getLogger(__name__)

_CELL_CLASSES = (CodeCell, MarkdownCell, RawCell)

RunAllHandler = Callable[["Notebook"], None]


class NotebookAction(StrEnum):
    """Actions a host can dispatch to a notebook."""

    RUN_ALL = "run_all"
    CLEAR_OUTPUTS = "clear_outputs"
    MOVE_CELL_UP = "move_cell_up"
    MOVE_CELL_DOWN = "move_cell_down"
    ADD_MARKDOWN_BLOCK = "add_markdown_block"
    ADD_CODE_BLOCK = "add_code_block"


class Notebook:
    """A notebook document together with its selected cell.

    The selection is ``None`` exactly when there are no cells; otherwise it
    is a valid index. Every mutating operation keeps it pointing at the same
    logical cell where possible. Operations that fail leave both the cells
    and the selection unchanged.
    """

    def __init__(
        self,
        document: NotebookDocument,
        path: str | Path | None = None,
    ) -> None:
        self._document = document
        self._path = Path(path) if path is not None else None
        self._selected: int | None = 0 if document.cells else None
        self._run_all_handlers: list[RunAllHandler] = []

    @classmethod
    def new(cls) -> Notebook:
        """Create an empty notebook with default metadata."""
        return cls(NotebookDocument(cells=[]))

    # -- state -------------------------------------------------------------

    @property
    def document(self) -> NotebookDocument:
        return self._document

    @property
    def cells(self) -> list[Cell]:
        return self._document.cells

    @property
    def path(self) -> Path | None:
        return self._path

    @path.setter
    def path(self, value: str | Path | None) -> None:
        self._path = Path(value) if value is not None else None

    @property
    def title(self) -> str:
        """Display name: the file stem, or ``"Untitled"`` when unsaved."""
        if self._path is None:
            return "Untitled"
        return self._path.stem

    @property
    def selected_index(self) -> int | None:
        return self._selected

    @property
    def selected_cell(self) -> Cell | None:
        if self._selected is None:
            return None
        return self.cells[self._selected]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    # -- structural edits --------------------------------------------------

    def select(self, index: int) -> None:
        """Select the cell at *index*.

        Raises:
            CellIndexError: If *index* does not name a cell, which is always
                the case for an empty notebook.
        """
        self._check_index(index)
        self._selected = index

    def insert_cell(self, position: int, cell: Cell) -> None:
        """Insert *cell* before *position*; ``len(self)`` appends.

        Raises:
            CellIndexError: If *position* is outside ``0..len(self)``.
            TypeError: If *cell* is not a code, markdown or raw cell model.
        """
        if not isinstance(cell, _CELL_CLASSES):
            msg = f"Expected a cell model, got {type(cell).__name__}"
            raise TypeError(msg)
        if not 0 <= position <= len(self.cells):
            raise CellIndexError(position, len(self.cells))

        self.cells.insert(position, cell)
        if self._selected is None:
            self._selected = position
        elif position <= self._selected:
            self._selected += 1
        logger.debug("Inserted %s cell at %d", cell.cell_type, position)

    def move_cell(self, from_index: int, to_index: int) -> None:
        """Move a cell so that it ends up at *to_index*.

        Raises:
            CellIndexError: If either index does not name a cell.
        """
        self._check_index(from_index)
        self._check_index(to_index)
        if from_index == to_index:
            return

        cell = self.cells.pop(from_index)
        self.cells.insert(to_index, cell)

        selected = self._selected
        if selected == from_index:
            self._selected = to_index
        elif selected is not None:
            if from_index < selected <= to_index:
                self._selected = selected - 1
            elif to_index <= selected < from_index:
                self._selected = selected + 1
        logger.debug("Moved cell %d to %d", from_index, to_index)

    def delete_cell(self, index: int) -> Cell:
        """Remove and return the cell at *index*.

        A deleted selection moves to the following cell, else the preceding
        one, else to ``None`` once the notebook is empty.

        Raises:
            CellIndexError: If *index* does not name a cell.
        """
        self._check_index(index)
        cell = self.cells.pop(index)

        selected = self._selected
        if not self.cells:
            self._selected = None
        elif selected is not None and (
            selected > index or selected == len(self.cells)
        ):
            self._selected = selected - 1
        logger.debug("Deleted cell %d", index)
        return cell

    def clear_outputs(self) -> None:
        """Drop the outputs of every code cell, keeping execution counts."""
        cleared = 0
        for cell in self._document.code_cells():
            if cell.outputs:
                cell.outputs = []
                cleared += 1
        logger.debug("Cleared outputs of %d cell(s)", cleared)

    def run_all(self) -> None:
        """Ask the host to run every cell.

        The notebook only stores outputs; running code is left to handlers
        registered with ``add_run_all_handler``.
        """
        if not self._run_all_handlers:
            logger.debug("run_all requested but no handler is registered")
        for handler in list(self._run_all_handlers):
            handler(self)

    def add_run_all_handler(self, handler: RunAllHandler) -> None:
        self._run_all_handlers.append(handler)

    def remove_run_all_handler(self, handler: RunAllHandler) -> None:
        self._run_all_handlers.remove(handler)

    # -- selection-relative edits -----------------------------------------

    def move_selected_up(self) -> None:
        """Swap the selected cell with its predecessor, if any."""
        if self._selected is not None and self._selected > 0:
            self.move_cell(self._selected, self._selected - 1)

    def move_selected_down(self) -> None:
        """Swap the selected cell with its successor, if any."""
        if self._selected is not None and self._selected < len(self.cells) - 1:
            self.move_cell(self._selected, self._selected + 1)

    def add_markdown_cell(self, source: str = "") -> MarkdownCell:
        """Insert a markdown cell after the selection and select it."""
        cell = MarkdownCell(source=source)
        self._insert_after_selection(cell)
        return cell

    def add_code_cell(self, source: str = "") -> CodeCell:
        """Insert an unexecuted code cell after the selection and select it."""
        cell = CodeCell(source=source)
        self._insert_after_selection(cell)
        return cell

    def dispatch(self, action: NotebookAction | str) -> None:
        """Route a host action to the matching operation.

        Raises:
            ValueError: If *action* is not a known ``NotebookAction``.
        """
        action = NotebookAction(action)
        if action == NotebookAction.RUN_ALL:
            self.run_all()
        elif action == NotebookAction.CLEAR_OUTPUTS:
            self.clear_outputs()
        elif action == NotebookAction.MOVE_CELL_UP:
            self.move_selected_up()
        elif action == NotebookAction.MOVE_CELL_DOWN:
            self.move_selected_down()
        elif action == NotebookAction.ADD_MARKDOWN_BLOCK:
            self.add_markdown_cell()
        else:
            self.add_code_cell()

    # -- helpers -----------------------------------------------------------

    def _insert_after_selection(self, cell: Cell) -> None:
        position = len(self.cells) if self._selected is None else self._selected + 1
        self.insert_cell(position, cell)
        self._selected = position

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.cells):
            raise CellIndexError(index, len(self.cells))
