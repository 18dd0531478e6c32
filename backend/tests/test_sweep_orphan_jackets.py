from scripts.sweep_orphan_jackets import find_orphan_stems, stem_created_ns, sweep

SECOND = 1_000_000_000


def _touch(storage, stem):
    storage.ensure_layout()
    for path in storage.stem_paths(stem).values():
        path.write_bytes(b"x")


def test_stem_created_ns():
    assert stem_created_ns("jacket_b1_1700000000000000000") == 1700000000000000000
    assert stem_created_ns("handmade") is None


def test_finds_unreferenced_stems(jacket_storage):
    _touch(jacket_storage, "jacket_b1_100")
    _touch(jacket_storage, "jacket_b1_200")
    _touch(jacket_storage, "jacket_b2_300")

    orphans = find_orphan_stems(jacket_storage, ["jacket_b1_200", "jacket_b2_300"])
    assert orphans == ["jacket_b1_100"]


def test_recent_stems_are_spared(jacket_storage):
    now = 10_000 * SECOND
    _touch(jacket_storage, f"jacket_b1_{now - 7200 * SECOND}")
    _touch(jacket_storage, f"jacket_b1_{now - 10 * SECOND}")

    orphans = find_orphan_stems(jacket_storage, [], min_age_seconds=3600, now_ns=now)
    assert orphans == [f"jacket_b1_{now - 7200 * SECOND}"]


def test_sweep_only_deletes_when_asked(jacket_storage):
    _touch(jacket_storage, "jacket_b1_1")
    _touch(jacket_storage, "jacket_b1_2")

    assert sweep(jacket_storage, ["jacket_b1_2"]) == ["jacket_b1_1"]
    assert jacket_storage.list_stems() == {"jacket_b1_1", "jacket_b1_2"}

    assert sweep(jacket_storage, ["jacket_b1_2"], delete=True) == ["jacket_b1_1"]
    assert jacket_storage.list_stems() == {"jacket_b1_2"}
