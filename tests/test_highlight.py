"""Tests for the highlight lifecycle and its revert timers."""
from autoapply.highlight import HIGHLIGHT_DURATION_MS, TRANSITION_RESET_MS


def _field(make_document, make_session, html='<input id="f" style="outline: 1px dotted red">'):
    doc = make_document(html)
    return doc.get_element_by_id("f"), make_session(doc)


class TestHighlight:
    def test_applies_outline_and_glow(self, make_document, make_session):
        element, session = _field(make_document, make_session)
        session.highlight(element)

        assert element.get_style("outline") == "2px solid #FFEB3B"
        assert element.get_style("outline-offset") == "2px"
        assert element.get_style("box-shadow") == "0 0 8px rgba(255, 235, 59, 0.5)"
        assert "outline 0.3s" in element.get_style("transition")

    def test_border_only_replaced_when_one_was_set(self, make_document, make_session):
        element, session = _field(make_document, make_session, '<input id="f">')
        session.highlight(element)
        assert element.get_style("border") == ""

        bordered, session2 = _field(make_document, make_session, '<input id="f" style="border: 1px solid #ccc">')
        session2.highlight(bordered)
        assert bordered.get_style("border") == "1px solid #FFEB3B"

    def test_reverts_after_timeout(self, make_document, make_session, clock):
        element, session = _field(make_document, make_session)
        session.highlight(element)

        clock.advance(HIGHLIGHT_DURATION_MS - 1)
        session.pump()
        assert element.get_style("outline") == "2px solid #FFEB3B"

        clock.advance(1)
        session.pump()
        assert element.get_style("outline") == "1px dotted red"
        assert element.get_style("box-shadow") == ""
        assert element.get_style("transition") != ""

        clock.advance(TRANSITION_RESET_MS)
        session.pump()
        assert element.get_style("transition") == ""
        assert len(session.highlights) == 0

    def test_second_highlight_gets_a_new_id(self, make_document, make_session):
        element, session = _field(make_document, make_session)
        first = session.highlight(element)
        second = session.highlight(element)
        assert first != second
        assert session.highlights.current_id(element) == second
        assert len(session.highlights) == 1

    def test_stale_revert_is_ignored(self, make_document, make_session, clock):
        element, session = _field(make_document, make_session)
        session.highlight(element)
        clock.advance(500)
        session.highlight(element)

        # the first timer fires but its id is no longer current
        clock.advance(500)
        session.pump()
        assert element.get_style("outline") == "2px solid #FFEB3B"
        assert session.highlights.is_highlighted(element)

    def test_rehighlight_race_keeps_the_outline(self, make_document, make_session, clock):
        element, session = _field(make_document, make_session)
        session.highlight(element)
        clock.advance(500)
        session.highlight(element)

        clock.advance(2000)
        session.pump()
        # the second snapshot was taken while highlighted
        assert element.get_style("outline") == "2px solid #FFEB3B"
        assert len(session.highlights) == 0

    def test_restore_all_cancels_timers(self, make_document, make_session):
        element, session = _field(make_document, make_session)
        session.highlight(element)

        assert session.highlights.restore_all() == 1
        assert element.get_style("outline") == "1px dotted red"
        assert element.get_style("transition") == ""
        assert len(session.timers) == 0

    def test_detached_element_is_dropped_on_revert(self, make_document, make_session, clock):
        element, session = _field(make_document, make_session)
        session.highlight(element)
        element.remove()

        clock.advance(HIGHLIGHT_DURATION_MS)
        session.pump()
        assert len(session.highlights) == 0
