import os
from pathlib import Path

import pytest

from app.models import OutputFormat
from app.services.errors import ImageNotFound


def test_new_id_is_128_bit_hex(store):
    image_id = store.new_id()
    assert len(image_id) == 32
    assert store.is_valid_id(image_id)
    assert store.new_id() != image_id


def test_save_and_resolve(store):
    image_id = store.new_id()
    path = store.save(image_id, OutputFormat.PNG, b"payload")
    assert path.name == f"{image_id}.png"
    assert path.read_bytes() == b"payload"
    assert store.resolve(image_id) == path


def test_save_leaves_no_temp_files(store):
    image_id = store.new_id()
    store.save(image_id, OutputFormat.GIF, b"gif")
    assert [p.name for p in store.root.iterdir()] == [f"{image_id}.gif"]
    assert list(store.staging.iterdir()) == []


def test_staging_is_outside_served_root(store, monkeypatch):
    seen = []
    real_replace = os.replace

    def spy_replace(src, dst):
        seen.append(Path(src))
        # The in-progress file must not be visible in the served directory.
        assert list(store.root.iterdir()) == []
        real_replace(src, dst)

    monkeypatch.setattr("app.services.storage.os.replace", spy_replace)
    store.save(store.new_id(), OutputFormat.PNG, b"png")
    assert seen and seen[0].parent == store.staging
    assert store.root not in seen[0].parents


def test_resolve_unknown_id(store):
    with pytest.raises(ImageNotFound):
        store.resolve(store.new_id())


@pytest.mark.parametrize("image_id", ["", "abc", "../../etc/passwd", "A" * 32, "g" * 32])
def test_resolve_rejects_malformed_ids(store, image_id):
    with pytest.raises(ImageNotFound):
        store.resolve(image_id)


def test_resolve_does_not_match_on_prefix(store):
    image_id = store.new_id()
    store.save(image_id, OutputFormat.JPEG, b"x")
    (store.root / f"{image_id}extra.jpeg").write_bytes(b"y")
    assert store.resolve(image_id).name == f"{image_id}.jpeg"
