import json

from empathy_bot.models import Turn
from empathy_bot.store import JsonFileMirror, MemoryMirror, TRANSCRIPT_KEY, TranscriptStore


def test_append_keeps_order_and_mirrors_every_write(mirror):
    store = TranscriptStore(mirror)
    store.append(Turn("trainee", "Hi"))
    assert mirror.read(TRANSCRIPT_KEY) == [{"role": "user", "content": "Hi"}]

    store.append(Turn("persona", "Hey"))
    store.append(Turn("trainee", "Hi"))
    assert [t.text for t in store.turns] == ["Hi", "Hey", "Hi"]
    assert mirror.read(TRANSCRIPT_KEY) == store.snapshot()


def test_round_trip_through_file_mirror(tmp_path):
    store = TranscriptStore(JsonFileMirror(tmp_path))
    turns = [Turn("trainee", "How's school going?"), Turn("persona", "Fine, just busy. [shrugs]")]
    for turn in turns:
        store.append(turn)

    fresh = TranscriptStore(JsonFileMirror(tmp_path))
    assert fresh.load() == tuple(turns)


def test_reset_clears_mirror_and_is_idempotent(mirror):
    store = TranscriptStore(mirror)
    store.append(Turn("trainee", "Hi"))

    store.reset()
    once = (store.turns, dict(mirror.data))
    store.reset()
    assert (store.turns, dict(mirror.data)) == once
    assert store.turns == ()
    assert TranscriptStore(mirror).load() == ()


def test_load_absent_mirror_starts_empty(tmp_path):
    assert TranscriptStore(JsonFileMirror(tmp_path / "missing")).load() == ()


def test_load_unparsable_mirror_starts_empty(tmp_path):
    (tmp_path / f"{TRANSCRIPT_KEY}.json").write_text("{not json", encoding="utf-8")
    assert TranscriptStore(JsonFileMirror(tmp_path)).load() == ()


def test_load_wrong_shape_starts_empty():
    mirror = MemoryMirror()
    mirror.data[TRANSCRIPT_KEY] = json.dumps([{"role": "narrator", "content": "?"}])
    assert TranscriptStore(mirror).load() == ()

    mirror.data[TRANSCRIPT_KEY] = json.dumps({"role": "user"})
    assert TranscriptStore(mirror).load() == ()


def test_mirror_failure_does_not_fail_append():
    class BrokenMirror(MemoryMirror):
        def write(self, key, value):
            raise OSError("disk full")

    store = TranscriptStore(BrokenMirror())
    store.append(Turn("trainee", "Still here?"))
    assert store.turns == (Turn("trainee", "Still here?"),)
