import json
from datetime import datetime, timezone

import pytest

from padel_counter.config import STORAGE_KEY
from padel_counter.exceptions import InvalidFormatError, ParseFailureError
from padel_counter.models import MatchState, StatKind
from padel_counter.score_engine import ScoreEngine
from padel_counter import storage
from padel_counter.storage import DirectoryStore, MemoryStore


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

def played_state():
    state = MatchState()
    counter = iter(range(1700000000000, 1700000010000))
    engine = ScoreEngine(state, clock=lambda: next(counter))
    engine.start(["Ana", "Bea", "Cris", "Dani"])
    engine.record(0, StatKind.WINNERS)
    engine.record(2, StatKind.UNFORCED_ERRORS)
    engine.record(3, StatKind.WINNERS)
    return state


def export_doc(match_state):
    return json.dumps({"matchState": match_state, "timestamp": "x", "version": "1.0"}).encode()


# ---------------------------------------------------------
# Stores
# ---------------------------------------------------------

@pytest.mark.parametrize("make_store", [
    lambda tmp_path: MemoryStore(),
    lambda tmp_path: DirectoryStore(tmp_path / "data"),
])
def test_store_contract(tmp_path, make_store):
    store = make_store(tmp_path)

    assert store.load("k") is None

    store.save("k", b"payload")
    assert store.load("k") == b"payload"
    assert "k" in store

    store.clear("k")
    assert store.load("k") is None
    assert "k" not in store

    # clearing a missing key is fine
    store.clear("k")


# ---------------------------------------------------------
# Mirror
# ---------------------------------------------------------

def test_save_load_roundtrip():
    store = MemoryStore()
    state = played_state()

    storage.save(store, state)

    assert storage.load(store) == state


def test_load_missing_key_is_empty_state():
    assert storage.load(MemoryStore()) == MatchState()


def test_saving_unstarted_state_deletes_key():
    store = MemoryStore()
    storage.save(store, played_state())

    storage.save(store, MatchState())

    assert STORAGE_KEY not in store


def test_wire_field_names():
    data = json.loads(storage.dump_state(played_state()))

    assert data["isGameStarted"] is True
    assert data["players"][2] == {"name": "Cris", "winners": 0, "unforced_errors": 1, "score": -1}
    assert data["statHistory"][0] == {
        "point": 1, "playerIndex": 0, "stat": "winners", "timestamp": 1700000000000,
    }


# ---------------------------------------------------------
# Export
# ---------------------------------------------------------

def test_export_document_shape():
    now = datetime(2024, 5, 17, 18, 30, tzinfo=timezone.utc)

    data = json.loads(storage.export_match(played_state(), now=now))

    assert set(data) == {"matchState", "timestamp", "version"}
    assert data["version"] == "1.0"
    assert data["timestamp"] == "2024-05-17T18:30:00+00:00"
    assert len(data["matchState"]["statHistory"]) == 3


def test_export_filename():
    now = datetime(2024, 5, 17, 23, 59, tzinfo=timezone.utc)

    assert storage.export_filename(now) == "padel-match-2024-05-17.json"


def test_export_import_roundtrip():
    state = played_state()

    assert storage.import_match(storage.export_match(state)) == state


def test_export_import_roundtrip_unstarted():
    assert storage.import_match(storage.export_match(MatchState())) == MatchState()


# ---------------------------------------------------------
# Import validation
# ---------------------------------------------------------

@pytest.mark.parametrize("payload", [
    b"not json at all",
    b"{\"matchState\": ",
    b"\xff\xfe\x00garbage",
])
def test_import_parse_failure(payload):
    with pytest.raises(ParseFailureError):
        storage.import_match(payload)


@pytest.mark.parametrize("doc", [
    b"[]",
    b"{}",
    json.dumps({"matchState": {"statHistory": []}}).encode(),
    json.dumps({"matchState": {"players": [], "statHistory": {}}}).encode(),
    json.dumps({"matchState": {"players": []}}).encode(),
])
def test_import_invalid_format(doc):
    with pytest.raises(InvalidFormatError):
        storage.import_match(doc)


def test_import_bad_entry_is_invalid_format():
    match_state = storage.state_to_dict(played_state())
    match_state["statHistory"][1]["stat"] = "aces"

    with pytest.raises(InvalidFormatError):
        storage.import_match(export_doc(match_state))


def test_import_wrong_roster_size():
    match_state = storage.state_to_dict(played_state())
    match_state["players"] = match_state["players"][:3]

    with pytest.raises(InvalidFormatError):
        storage.import_match(export_doc(match_state))


def test_import_accepts_event_log_key():
    match_state = storage.state_to_dict(played_state())
    match_state["eventLog"] = match_state.pop("statHistory")

    assert storage.import_match(export_doc(match_state)) == played_state()


# ---------------------------------------------------------
# Files
# ---------------------------------------------------------

def test_write_and_read_file(tmp_path):
    path = storage.write_file(tmp_path / "out", "m.json", b"{}")

    assert path == tmp_path / "out" / "m.json"
    assert storage.read_file(path) == b"{}"


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        storage.read_file(tmp_path / "missing.json")


@pytest.mark.parametrize("player_index", [-1, 4, 7])
def test_import_player_index_out_of_range(player_index):
    match_state = storage.state_to_dict(played_state())
    match_state["statHistory"][0]["playerIndex"] = player_index

    with pytest.raises(InvalidFormatError):
        storage.import_match(export_doc(match_state))


@pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
def test_import_started_flag_must_be_bool(flag):
    match_state = storage.state_to_dict(played_state())
    match_state["isGameStarted"] = flag

    with pytest.raises(InvalidFormatError):
        storage.import_match(export_doc(match_state))


@pytest.mark.parametrize("keep_players, keep_history", [
    (True, True),
    (True, False),
    (False, True),
])
def test_import_unstarted_match_must_be_empty(keep_players, keep_history):
    match_state = storage.state_to_dict(played_state())
    match_state["isGameStarted"] = False
    if not keep_players:
        match_state["players"] = []
    if not keep_history:
        match_state["statHistory"] = []

    with pytest.raises(InvalidFormatError):
        storage.import_match(export_doc(match_state))


def test_save_reports_whether_written():
    store = MemoryStore()

    assert storage.save(store, played_state()) is True
    assert storage.save(store, MatchState()) is False
    assert STORAGE_KEY not in store
