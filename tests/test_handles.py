from pathlib import Path

import pytest

from image_reencoder.errors import HandleError
from image_reencoder.handles import URL_PREFIX, ArtifactStore
from image_reencoder.models import ConvertedArtifact


def _artifact(name: str = "out.png") -> ConvertedArtifact:
    return ConvertedArtifact(b"\x89PNG fake", "image/png", name, 1, 1)


def test_create_and_resolve():
    store = ArtifactStore()
    artifact = _artifact()

    url = store.create_url(artifact)

    assert url.startswith(URL_PREFIX)
    assert url in store
    assert len(store) == 1
    assert store.resolve(url) is artifact


def test_each_handle_is_unique():
    store = ArtifactStore()
    artifact = _artifact()
    assert store.create_url(artifact) != store.create_url(artifact)
    assert len(store) == 2


def test_revoke_is_idempotent():
    store = ArtifactStore()
    url = store.create_url(_artifact())

    store.revoke(url)
    store.revoke(url)

    assert url not in store
    with pytest.raises(HandleError):
        store.resolve(url)


def test_handle_error_is_a_key_error():
    with pytest.raises(KeyError):
        ArtifactStore().resolve("blob:image-reencoder/missing")


def test_consume_releases_even_on_error():
    store = ArtifactStore()
    url = store.create_url(_artifact())

    with pytest.raises(RuntimeError), store.consume(url) as artifact:
        assert artifact.filename == "out.png"
        raise RuntimeError("boom")

    assert len(store) == 0


def test_download_writes_and_revokes(tmp_path: Path):
    store = ArtifactStore()
    url = store.create_url(_artifact("pic.webp"))

    path = store.download(url, tmp_path / "nested")

    assert path == tmp_path / "nested" / "pic.webp"
    assert path.read_bytes() == b"\x89PNG fake"
    assert url not in store


def test_download_with_explicit_name(tmp_path: Path):
    store = ArtifactStore()
    url = store.create_url(_artifact())

    path = store.download(url, tmp_path, filename="renamed.png")

    assert path.name == "renamed.png"
