"""Tests for SelectionCoordinator: bulk selection and header state."""

import pytest

from paged_selection.core.errors import FetchError, InvalidArgument
from paged_selection.core.key_registry import KeyRegistry
from paged_selection.core.page import key_getter
from paged_selection.core.selection_set import SelectionSet
from paged_selection.pagination.controller import PaginationController
from paged_selection.selection.coordinator import (
    HeaderSelectionState,
    SelectionCoordinator,
    derive_header_state,
)


def make_coordinator(source, **params):
    registry = KeyRegistry()
    controller = PaginationController(source, registry, key_getter("title"))
    return SelectionCoordinator(controller, registry, **params)


class TestHeaderDerivation:
    def _state(self, known, selected, total):
        registry = KeyRegistry()
        registry.register_keys(known, total_count=total)
        selection = SelectionSet()
        selection.update(selected)
        return derive_header_state(registry, selection)

    def test_empty(self):
        assert self._state([], [], None) == HeaderSelectionState.UNCHECKED

    def test_nothing_selected(self):
        assert self._state(["a", "b"], [], 2) == HeaderSelectionState.UNCHECKED

    def test_partial(self):
        assert self._state(["a", "b"], ["a"], 2) == HeaderSelectionState.INDETERMINATE

    def test_all_of_complete_registry(self):
        assert self._state(["a", "b"], ["a", "b"], 2) == HeaderSelectionState.CHECKED

    def test_all_known_but_incomplete(self):
        assert self._state(["a", "b"], ["a", "b"], 5) == HeaderSelectionState.INDETERMINATE

    def test_string_values(self):
        assert HeaderSelectionState.CHECKED == "checked"


class TestToggleRow:
    def test_select_and_deselect(self, source, run):
        coord = make_coordinator(source)
        key = source.title(3)

        async def scenario():
            await coord.go_to_page(1)
            await coord.toggle_row(key, True)
            assert coord.is_selected(key)
            await coord.toggle_row(key, False)

        run(scenario())
        assert not coord.is_selected(key)
        assert source.calls == [1]

    def test_unknown_key_rejected(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            with pytest.raises(InvalidArgument, match="Unknown key"):
                await coord.toggle_row(source.title(15), True)

        run(scenario())
        assert len(coord.selection) == 0

    def test_selection_survives_page_change(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.toggle_row(source.title(2), True)
            await coord.go_to_page(2)

        run(scenario())
        assert coord.is_selected(source.title(2))
        assert coord.header_state == HeaderSelectionState.INDETERMINATE


class TestToggleSelectAll:
    def test_selects_known_keys_only(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.toggle_select_all(True)

        run(scenario())
        assert coord.selection.keys == coord.registry.known_keys()
        assert coord.derive_header_state() == HeaderSelectionState.INDETERMINATE

    def test_checked_once_every_page_seen(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            for page in (1, 2, 3):
                await coord.go_to_page(page)
            await coord.toggle_select_all(True)

        run(scenario())
        assert len(coord.selection) == 23
        assert coord.derive_header_state() == HeaderSelectionState.CHECKED

    def test_deselect_clears_everything(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.select_first_n(15)
            await coord.toggle_select_all(False)

        run(scenario())
        assert len(coord.selection) == 0
        assert coord.derive_header_state() == HeaderSelectionState.UNCHECKED


class TestSelectFirstN:
    def test_fetches_only_needed_pages(self, source_25, run):
        coord = make_coordinator(source_25)
        chosen = run(coord.select_first_n(15))

        assert len(coord.selection) == 15
        assert chosen == tuple(source_25.title(i) for i in range(1, 16))
        assert source_25.calls == [1, 2]
        assert len(coord.registry) >= 20

    def test_clamps_to_total(self, source_25, run):
        coord = make_coordinator(source_25)
        run(coord.select_first_n(1000))

        assert len(coord.selection) == 25
        assert source_25.calls == [1, 2, 3]
        assert coord.derive_header_state() == HeaderSelectionState.CHECKED

    @pytest.mark.parametrize("n", [0, -5, "0", "abc", 2.5])
    def test_invalid_n(self, source, run, n):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.toggle_row(source.title(1), True)
            with pytest.raises(InvalidArgument):
                await coord.select_first_n(n)

        run(scenario())
        assert coord.selection.keys == {source.title(1)}
        assert source.calls == [1]

    def test_accepts_numeric_string(self, source, run):
        coord = make_coordinator(source)
        run(coord.select_first_n("12"))
        assert len(coord.selection) == 12

    def test_uses_known_keys_without_fetching(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.select_first_n(4)

        run(scenario())
        assert source.calls == [1]
        assert coord.selection.keys == {source.title(i) for i in range(1, 5)}

    def test_prefers_registry_order(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(3)
            return await coord.select_first_n(15)

        chosen = run(scenario())
        assert source.calls == [3, 1, 2]
        assert chosen[:3] == tuple(source.title(i) for i in (21, 22, 23))
        assert chosen[3:] == tuple(source.title(i) for i in range(1, 13))

    def test_additive(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(3)
            await coord.toggle_row(source.title(23), True)
            await coord.go_to_page(1)
            await coord.select_first_n(2)

        run(scenario())
        assert coord.selection.keys == {
            source.title(23), source.title(21), source.title(22),
        }

    def test_does_not_move_displayed_page(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.select_first_n(20)

        run(scenario())
        assert coord.controller.state.current_page == 1
        assert coord.controller.current_page.number == 1
        assert coord.controller.visited_pages == {1, 2}

    def test_fills_empty_view_with_first_page(self, source, run):
        coord = make_coordinator(source)
        run(coord.select_first_n(20))
        assert coord.controller.current_page.number == 1

    def test_empty_collection(self, make_source, run):
        source = make_source(total=0)
        coord = make_coordinator(source)
        assert run(coord.select_first_n(5)) == ()
        assert source.calls == [1]
        assert coord.derive_header_state() == HeaderSelectionState.UNCHECKED

    def test_all_pages_visited_no_fetch(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            for page in (1, 2, 3):
                await coord.go_to_page(page)
            await coord.select_first_n(100)

        run(scenario())
        assert source.calls == [1, 2, 3]
        assert len(coord.selection) == 23


class TestSelectFirstNAtomicity:
    def test_failure_on_second_page_rolls_back(self, make_source, run):
        source = make_source(total=25, fail_on={2})
        coord = make_coordinator(source)

        with pytest.raises(FetchError):
            run(coord.select_first_n(25))

        assert source.calls == [1, 2]
        assert len(coord.selection) == 0
        assert len(coord.registry) == 0
        assert coord.controller.visited_pages == frozenset()
        assert coord.controller.current_page is None

    def test_failure_preserves_prior_state(self, make_source, run):
        source = make_source(total=25, fail_on={2})
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            await coord.toggle_row(source.title(3), True)
            before = (coord.selection.keys, coord.registry.known_keys())
            with pytest.raises(FetchError):
                await coord.select_first_n(25)
            return before

        selected_before, known_before = run(scenario())
        assert coord.selection.keys == selected_before
        assert coord.registry.known_keys() == known_before
        assert coord.status_text.startswith("Error:")

    def test_short_page_fails_instead_of_underselecting(self, run):
        sizes = {1: 7, 2: 10, 3: 5}

        async def short_pages(page):
            return {
                "items": [{"title": f"p{page}-{i}"} for i in range(sizes[page])],
                "total_count": 25,
            }

        coord = make_coordinator(short_pages)
        with pytest.raises(FetchError, match="expected 10"):
            run(coord.select_first_n(1000))

        assert len(coord.selection) == 0
        assert len(coord.registry) == 0


class TestErrorStatus:
    def test_unknown_row_sets_status(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            await coord.go_to_page(1)
            with pytest.raises(InvalidArgument):
                await coord.toggle_row("missing", True)

        run(scenario())
        assert coord.status_text.startswith("Error: Unknown key")

    def test_invalid_n_sets_status(self, source, run):
        coord = make_coordinator(source)
        with pytest.raises(InvalidArgument):
            run(coord.select_first_n("abc"))
        assert coord.status_text.startswith("Error: n must be a positive integer")

    def test_invalid_page_sets_status(self, source, run):
        coord = make_coordinator(source)
        with pytest.raises(InvalidArgument):
            run(coord.go_to_page(0))
        assert coord.status_text.startswith("Error: Page numbers start at 1")


class TestReactiveParams:
    def test_header_state_watch(self, source, run):
        coord = make_coordinator(source)
        seen = []
        coord.param.watch(lambda event: seen.append(event.new), ["header_state"])

        async def scenario():
            await coord.go_to_page(1)
            await coord.toggle_row(source.title(1), True)
            await coord.toggle_select_all(False)

        run(scenario())
        assert seen == [
            HeaderSelectionState.INDETERMINATE,
            HeaderSelectionState.UNCHECKED,
        ]

    def test_counts_follow_changes(self, source, run):
        coord = make_coordinator(source)
        run(coord.select_first_n(12))
        assert coord.selected_count == 12
        assert coord.known_count == 20
        assert not coord.is_complete

    def test_fetching_state(self, source, run):
        coord = make_coordinator(source)
        states = []
        coord.param.watch(lambda event: states.append(event.new), ["state"])
        run(coord.go_to_page(1))
        assert states == ["fetching", "idle"]
        assert coord.status_text == ""


class TestEndToEnd:
    def test_select_all_after_two_pages(self, source, run):
        coord = make_coordinator(source)

        async def scenario():
            page = await coord.go_to_page(1)
            assert len(page) == 10
            assert page.total_count == 23
            await coord.toggle_row(source.title(3), True)
            await coord.go_to_page(2)
            await coord.toggle_select_all(True)

        run(scenario())
        assert coord.selection.keys == {source.title(i) for i in range(1, 21)}
        assert coord.derive_header_state() == HeaderSelectionState.INDETERMINATE
        assert coord.header_state == HeaderSelectionState.INDETERMINATE
