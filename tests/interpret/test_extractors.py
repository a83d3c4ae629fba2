"""Tests for the structured and marker extractors."""

from adventure.interpret import (
    extract_markers,
    extract_structured,
    scan_items,
    scan_location,
)
from adventure.models import MarkerFacts, StructuredFacts


# ── extract_structured ───────────────────────────────────────


def test_structured_all_fields():
    facts = extract_structured({
        "narrative": "You step into the woods.",
        "location": "  Dark Forest ",
        "inventory": ["Sword", " Rope "],
        "recentEvents": ["Entered the forest"],
    })
    assert isinstance(facts, StructuredFacts)
    assert facts.narrative == "You step into the woods."
    assert facts.location == "dark forest"
    assert facts.inventory == ["sword", "rope"]
    assert facts.events == ["Entered the forest"]


def test_structured_partial_payload():
    facts = extract_structured({"location": "Forest"})
    assert facts.location == "forest"
    assert facts.narrative is None
    assert facts.inventory is None
    assert facts.events == []


def test_structured_no_known_fields_is_empty():
    facts = extract_structured({"mood": "grim"})
    assert facts == StructuredFacts()


def test_structured_wrong_types_ignored():
    facts = extract_structured({
        "narrative": 12,
        "location": ["forest"],
        "inventory": "sword",
        "recentEvents": {"a": 1},
    })
    assert facts == StructuredFacts()


def test_structured_empty_arrays_ignored():
    facts = extract_structured({"inventory": [], "recentEvents": []})
    assert facts.inventory is None
    assert facts.events == []


def test_structured_blank_location_ignored():
    assert extract_structured({"location": "   "}).location is None


def test_structured_inventory_drops_non_strings_and_duplicates():
    facts = extract_structured({"inventory": ["Sword", 3, "", "sword ", None, "Shield"]})
    assert facts.inventory == ["sword", "shield"]


def test_structured_inventory_of_only_junk_ignored():
    assert extract_structured({"inventory": [1, None, "  "]}).inventory is None


def test_structured_events_keep_order():
    facts = extract_structured({"recentEvents": ["first", "second", "third"]})
    assert facts.events == ["first", "second", "third"]


def test_structured_narrative_becomes_event_when_none_given():
    facts = extract_structured({"narrative": "A wolf howls."})
    assert facts.events == ["A wolf howls."]


def test_structured_explicit_events_win_over_narrative():
    facts = extract_structured({"narrative": "A wolf howls.", "recentEvents": ["Heard a wolf"]})
    assert facts.events == ["Heard a wolf"]


# ── scans ────────────────────────────────────────────────────


def test_scan_location_first_match_only():
    assert scan_location("You move to *Forest Path*, then to *Cave*.") == "forest path"


def test_scan_location_none():
    assert scan_location("Nothing happens.") is None


def test_scan_location_ignores_double_asterisk_emphasis():
    assert scan_location("This is **very** important.") is None
    assert scan_location("**Loud** noises. You move to *old mill*.") == "old mill"


def test_scan_location_does_not_span_lines():
    assert scan_location("a *broken\nmarker* here") is None


def test_scan_items_in_order():
    assert scan_items("You find {Rusty Key} and { Gold Coins }.") == ["rusty key", "gold coins"]


def test_scan_items_rejects_overlong_marker():
    assert scan_items("{" + "x" * 200 + "}") == []


def test_scan_items_empty_braces_ignored():
    assert scan_items("You find {  }.") == []


# ── extract_markers ──────────────────────────────────────────


def test_markers_item_only():
    facts = extract_markers("Some text {iron key} more text", [])
    assert isinstance(facts, MarkerFacts)
    assert facts.location is None
    assert facts.inventory_adds == ["iron key"]
    assert facts.events == ["Some text {iron key} more text"]


def test_markers_skip_items_already_held():
    facts = extract_markers("You find {rope} and {lantern}.", ["rope"])
    assert facts.inventory_adds == ["lantern"]


def test_markers_repeated_item_in_one_reply_added_once():
    facts = extract_markers("You find {coin}. Another {Coin}!", [])
    assert facts.inventory_adds == ["coin"]


def test_markers_event_is_trimmed_reply():
    facts = extract_markers("  You rest by the fire.\n", [])
    assert facts.events == ["You rest by the fire."]
    assert facts.location is None
    assert facts.inventory_adds == []


def test_scan_location_overlong_first_marker_means_no_location():
    text = "*" + "a" * 100 + "* and then you move to *cave*."
    assert scan_location(text) is None
