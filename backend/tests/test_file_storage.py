from pathlib import Path

from domain.models import JACKET_SIZES
from storage.file_storage import JacketStorage


def test_ensure_layout_creates_every_variant_dir(jacket_storage):
    jacket_storage.ensure_layout()
    dirs = sorted(p.name for p in jacket_storage.root.iterdir() if p.is_dir())
    assert dirs == ["large", "medium", "original", "small"]


def test_ensure_layout_is_idempotent(jacket_storage):
    jacket_storage.ensure_layout()
    first = sorted(jacket_storage.root.rglob("*"))
    jacket_storage.ensure_layout()
    assert sorted(jacket_storage.root.rglob("*")) == first


def test_paths_follow_variant_layout(tmp_path):
    storage = JacketStorage(tmp_path)
    assert storage.original_path("jacket_b1_1") == tmp_path / "original" / "jacket_b1_1.jpg"
    assert storage.variant_path("jacket_b1_1", JACKET_SIZES["small"]) == tmp_path / "small" / "jacket_b1_1.webp"
    assert storage.path_for("jacket_b1_1", "large") == tmp_path / "large" / "jacket_b1_1.webp"
    assert storage.path_for("jacket_b1_1", "huge") is None


def test_stem_paths_cover_sizes_and_original(jacket_storage):
    paths = jacket_storage.stem_paths("s")
    assert set(paths) == {"small", "medium", "large", "original"}
    assert len(set(paths.values())) == 4


def _touch_stem(storage: JacketStorage, stem: str, variants=None):
    storage.ensure_layout()
    for name, path in storage.stem_paths(stem).items():
        if variants is None or name in variants:
            path.write_bytes(b"x")


def test_delete_stem_removes_all_files(jacket_storage):
    _touch_stem(jacket_storage, "keep")
    _touch_stem(jacket_storage, "gone")
    assert jacket_storage.delete_stem("gone") == 4
    assert all(not p.exists() for p in jacket_storage.stem_paths("gone").values())
    assert all(p.exists() for p in jacket_storage.stem_paths("keep").values())


def test_delete_stem_tolerates_missing_files(jacket_storage):
    _touch_stem(jacket_storage, "partial", variants={"original", "small"})
    assert jacket_storage.delete_stem("partial") == 2
    assert jacket_storage.delete_stem("partial") == 0
    assert jacket_storage.delete_stem("never-existed") == 0


def test_delete_stem_logs_and_continues_on_os_error(jacket_storage, caplog, monkeypatch):
    _touch_stem(jacket_storage, "locked")
    real_unlink = Path.unlink

    def unlink(self, *args, **kwargs):
        if self.parent.name == "small":
            raise PermissionError(13, "Permission denied", str(self))
        return real_unlink(self, *args, **kwargs)

    monkeypatch.setattr(Path, "unlink", unlink)
    removed = jacket_storage.delete_stem("locked")

    assert removed == 3
    assert jacket_storage.variant_path("locked", JACKET_SIZES["small"]).exists()
    assert "Could not delete small jacket file" in caplog.text


def test_list_stems(jacket_storage):
    assert jacket_storage.list_stems() == set()
    _touch_stem(jacket_storage, "a")
    _touch_stem(jacket_storage, "b", variants={"medium"})
    (jacket_storage.root / "small" / "ignored.txt").write_text("x")
    assert jacket_storage.list_stems() == {"a", "b"}
