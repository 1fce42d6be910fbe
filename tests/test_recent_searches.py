import json

from logic.logic_meals import RecentSearches, load_recent_searches_action, search_recipe_action
from storage import RECENT_SEARCHES_KEY, KeyValueStorage

from conftest import FakeGenerator


def test_push_dedupes_most_recent_first(local_storage):
    searches = RecentSearches(local_storage)
    searches.push("A")
    searches.push("B")
    assert searches.push("A") == ["A", "B"]
    assert searches.load() == ["A", "B"]


def test_capped_at_five(local_storage):
    searches = RecentSearches(local_storage)
    for q in ["1", "2", "3", "4", "5", "6", "7"]:
        searches.push(q)
    assert searches.load() == ["7", "6", "5", "4", "3"]
    assert len(json.loads(local_storage.get_item(RECENT_SEARCHES_KEY))) == 5


def test_corrupt_value_is_discarded(local_storage):
    local_storage.set_item(RECENT_SEARCHES_KEY, "[1, 2")
    searches = RecentSearches(local_storage)
    assert searches.load() == []
    assert local_storage.get_item(RECENT_SEARCHES_KEY) is None
    assert searches.push("Poha") == ["Poha"]


def test_non_string_entries_are_discarded(local_storage):
    local_storage.set_item(RECENT_SEARCHES_KEY, json.dumps(["Poha", 3]))
    assert RecentSearches(local_storage).load() == []


def test_survives_reload(local_storage):
    RecentSearches(local_storage).push("Upma")
    assert RecentSearches(KeyValueStorage(local_storage.data)).load() == ["Upma"]


def test_search_action_records_query():
    recipe_md, instructions, status, dropdown, saved = search_recipe_action(
        " Upma ", {}, FakeGenerator()
    )
    assert "### Upma" in recipe_md
    assert instructions.startswith("1. ")
    assert status == ""
    assert dropdown["choices"] == ["Upma"]
    assert json.loads(saved[RECENT_SEARCHES_KEY]) == ["Upma"]


def test_search_action_blank_query_is_not_recorded():
    _, _, status, _, saved = search_recipe_action("", {}, FakeGenerator())
    assert status == "Please enter a dish name."
    assert saved == {}


def test_each_browser_keeps_its_own_searches():
    _, _, _, _, first = search_recipe_action("Upma", {}, FakeGenerator())
    _, _, _, _, second = search_recipe_action("Poha", {}, FakeGenerator())
    assert load_recent_searches_action(first)[0]["choices"] == ["Upma"]
    assert load_recent_searches_action(second)[0]["choices"] == ["Poha"]


def test_load_action_drops_corrupt_value():
    dropdown, saved = load_recent_searches_action({RECENT_SEARCHES_KEY: "[1, 2"})
    assert dropdown["choices"] == []
    assert saved == {}
