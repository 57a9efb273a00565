"""
Integration tests for StampCardController.

Uses FakeStampSource for the data source and the recording fakes from
conftest for clipboard and notifications.
"""

import asyncio

import pytest

from core.exceptions import FetchError
from models.card_state import LoadStatus, Orientation
from models.render_plan import PreviewKind
from services.stamp_card import StampCardController
from services.view_state import BUY_BUTTON

from conftest import HTML_BASE64, make_offer, make_record


class RecordingModal:
    def __init__(self):
        self.opened = []

    def open(self, record, offer):
        self.opened.append((record, offer))


# Fixtures

@pytest.fixture
def modal():
    return RecordingModal()


@pytest.fixture
def controller(source, catalog, clipboard_notifier, modal):
    return StampCardController(source.fetch, catalog, clipboard_notifier, purchase_modal=modal)


class TestLoading:
    """Test record lifecycle through the controller."""

    def test_loaded_card(self, controller, source, three_offer_record):
        source.records["A111"] = three_offer_record

        state = asyncio.run(controller.set_stamp_id("A111"))
        view = controller.view()

        assert state.status is LoadStatus.LOADED
        assert view.heading == "Chapter 1 - Page 4"
        assert view.artist == "Rare Scrilla"
        assert view.preview.kind is PreviewKind.IMAGE
        assert view.show_purchase is True
        assert view.dispenser_count == 3
        assert view.selected.rate == "0.0015"
        assert view.selected.label == "bc1qch...000000 - 0.0015 BTC"
        assert view.selected.stock_text == "1/5 left"

    def test_uncatalogued_stamp_has_blank_fields(self, controller, source):
        source.records["Z999"] = make_record("Z999")

        asyncio.run(controller.set_stamp_id("Z999"))
        view = controller.view()

        assert view.heading == "Chapter  - Page "
        assert view.artist == ""
        assert view.show_purchase is True

    def test_loading_view_before_fetch_completes(self, controller, source):
        source.records["A111"] = make_record("A111")

        async def scenario():
            source.hold("A111")
            task = controller.request_stamp("A111")
            await asyncio.sleep(0)
            view = controller.view()
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            return view

        view = asyncio.run(scenario())

        assert view.is_loading
        assert view.preview.kind is PreviewKind.PLACEHOLDER
        assert view.show_purchase is False

    def test_failed_card_shows_only_error(self, controller, source):
        source.errors["A111"] = FetchError("A111", "HTTP 500")

        asyncio.run(controller.set_stamp_id("A111"))
        view = controller.view()

        assert view.is_failed
        assert view.error == "Failed to fetch stamp information."
        assert view.preview.kind is PreviewKind.ERROR
        assert view.show_purchase is False
        assert view.dispensers == []
        assert controller.buy() is False
        assert controller.tap() is False
        assert controller.open_purchase() is False

    def test_zero_offers_distinct_from_loading(self, controller, source):
        source.records["A111"] = make_record("A111", offers=[])

        asyncio.run(controller.set_stamp_id("A111"))
        view = controller.view()

        assert view.has_no_dispensers is True
        assert view.selected is None
        assert view.is_loading is False

    def test_markup_preview_sandboxed(self, controller, source):
        source.records["A111"] = make_record(
            "A111", content_type="text/html", payload_base64=HTML_BASE64
        )

        asyncio.run(controller.set_stamp_id("A111"))
        preview = controller.view().preview

        assert preview.kind is PreviewKind.MARKUP
        assert "allow-same-origin" not in preview.sandbox.to_attribute()

    def test_reload_after_failure(self, controller, source):
        source.errors["A111"] = FetchError("A111", "timeout")

        async def scenario():
            await controller.set_stamp_id("A111")
            del source.errors["A111"]
            source.records["A111"] = make_record("A111")
            return await controller.reload()

        state = asyncio.run(scenario())

        assert state.is_loaded
        assert source.calls == ["A111", "A111"]


class TestIdentifierChange:
    """Test the A -> B race and per-identifier resets."""

    def test_late_response_for_old_identifier_is_ignored(self, controller, source):
        """Test A resolving after B never replaces B's record or offers."""
        source.records["A"] = make_record("A", offers=[make_offer("bc1qa", "0.001")])
        source.records["B"] = make_record("B", offers=[make_offer("bc1qb", "0.002")])

        async def scenario():
            gate = source.hold("A")
            load_a = asyncio.create_task(controller.set_stamp_id("A"))
            await asyncio.sleep(0)
            await controller.set_stamp_id("B")
            gate.set()
            await load_a

        asyncio.run(scenario())

        assert controller.stamp_id == "B"
        assert controller.record.stamp_id == "B"
        assert [o.source for o in controller.selector.offers] == ["bc1qb"]
        assert controller.view().selected.source == "bc1qb"

    def test_request_stamp_cancels_previous_task(self, controller, source):
        source.records["A"] = make_record("A")
        source.records["B"] = make_record("B")

        async def scenario():
            source.hold("A")
            task_a = controller.request_stamp("A")
            await asyncio.sleep(0)
            task_b = controller.request_stamp("B")
            await asyncio.gather(task_a, task_b, return_exceptions=True)
            return task_a

        task_a = asyncio.run(scenario())

        assert task_a.cancelled()
        assert controller.record.stamp_id == "B"

    def test_change_discards_old_record_immediately(self, controller, source):
        source.records["A"] = make_record("A")
        source.records["B"] = make_record("B")

        async def scenario():
            await controller.set_stamp_id("A")
            source.hold("B")
            task_b = controller.request_stamp("B")
            await asyncio.sleep(0)
            record_during = controller.record
            view_during = controller.view()
            task_b.cancel()
            await asyncio.gather(task_b, return_exceptions=True)
            return record_during, view_during

        record_during, view_during = asyncio.run(scenario())

        assert record_during is None
        assert view_during.stamp_id == "B"
        assert view_during.is_loading

    def test_change_resets_view_and_selection(self, controller, source, three_offer_record):
        source.records["A111"] = three_offer_record
        source.records["B222"] = make_record(
            "B222", offers=[make_offer("bc1qonly", "0.01")]
        )

        async def scenario():
            await controller.set_stamp_id("A111")
            controller.buy()
            controller.select_dispenser(controller.selector.offers[-1].source)
            controller.open_purchase()
            await controller.set_stamp_id("B222")

        asyncio.run(scenario())

        assert controller.view_state.orientation is Orientation.FRONT
        assert controller.view_state.modal_open is False
        assert controller.selector.selected.source == "bc1qonly"
        assert controller.view().heading == "Chapter 2 - Page 9"

    def test_unmount_drops_inflight_result(self, controller, source):
        source.records["A"] = make_record("A")

        async def scenario():
            gate = source.hold("A")
            load_a = asyncio.create_task(controller.set_stamp_id("A"))
            await asyncio.sleep(0)
            controller.unmount()
            gate.set()
            await load_a

        asyncio.run(scenario())

        assert controller.stamp_id is None
        assert controller.record is None
        assert controller.state.status is LoadStatus.IDLE


class TestInteractions:
    """Test flip, purchase, selection and copy actions."""

    @pytest.fixture
    def loaded(self, controller, source, three_offer_record):
        source.records["A111"] = three_offer_record
        asyncio.run(controller.set_stamp_id("A111"))
        return controller

    def test_tap_flips_but_controls_do_not(self, loaded):
        assert loaded.tap() is True
        assert loaded.view().orientation is Orientation.BACK
        assert loaded.tap(BUY_BUTTON) is False
        assert loaded.view().orientation is Orientation.BACK

    def test_buy_and_back(self, loaded):
        assert loaded.buy() is True
        assert loaded.view().orientation is Orientation.BACK
        loaded.back()
        assert loaded.view().orientation is Orientation.FRONT

    def test_open_purchase_passes_record_and_selection(self, loaded, modal):
        pricey = loaded.select_dispenser("bc1qpricey000000000000000000000000000000")

        assert loaded.open_purchase() is True
        assert loaded.view().modal_open is True
        record, offer = modal.opened[0]
        assert record.stamp_id == "A111"
        assert offer == pricey

        loaded.close_purchase()
        assert loaded.view().modal_open is False

    def test_select_unknown_dispenser_keeps_selection(self, loaded):
        before = loaded.selector.selected

        assert loaded.select_dispenser("bc1qnobody") is None
        assert loaded.selector.selected == before

    def test_view_marks_selected(self, loaded):
        loaded.select_dispenser("bc1qmiddle000000000000000000000000000000")
        view = loaded.view()

    def test_qr_code_for_selected_dispenser_only(self, loaded):
        loaded.select_dispenser("bc1qpricey000000000000000000000000000000")
        view = loaded.view()

        assert view.selected.qr_code.startswith("data:image/svg+xml")
        assert [bool(d.qr_code) for d in view.dispensers] == [False, False, True]

        assert [d.selected for d in view.dispensers] == [False, True, False]
        assert view.selected.rate == "0.002"

    def test_copy_selected_address(self, loaded, clipboard, notifier):
        assert loaded.copy_selected_address() is True
        assert clipboard.texts == ["bc1qcheap0000000000000000000000000000000"]
        assert len(notifier.shown) == 1

    def test_copy_stamp_id_twice(self, loaded, clipboard, notifier):
        loaded.copy_stamp_id()
        loaded.copy_stamp_id()

        assert clipboard.texts == ["A111", "A111"]
        assert len(notifier.shown) == 2

    def test_copy_address(self, loaded, clipboard, notifier):
        loaded.copy_address("bc1qpricey000000000000000000000000000000")

        assert clipboard.texts == ["bc1qpricey000000000000000000000000000000"]
        assert notifier.shown[0].text == "bc1qpricey000000000000000000000000000000"

    def test_copy_without_selection(self, controller):
        assert controller.copy_selected_address() is False
        assert controller.copy_stamp_id() is False

    def test_visibility_only_defers_preview(self, loaded):
        loaded.set_visible(False)
        view = loaded.view()

        assert view.defer_preview is True
        assert view.preview.kind is PreviewKind.IMAGE
