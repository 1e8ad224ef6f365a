import pytest

from filestore_api.errors import InvalidInputError, InvalidNameError
from filestore_api.storage.paths import PathResolver, shard_key, strip_extension
from tests.consts import SHARD_KEYS


@pytest.fixture
def resolver(storage_root):
    return PathResolver(storage_root)


@pytest.mark.parametrize("name", sorted(SHARD_KEYS))
def test__shard_key__is_first_two_hex_chars_of_sha256(name):
    assert shard_key(name) == SHARD_KEYS[name]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("report.pdf", "report"),
        ("archive.tar.gz", "archive.tar"),
        ("README", "README"),
        (".env", ""),
        ("trailing.", "trailing"),
    ],
)
def test__strip_extension(name, expected):
    assert strip_extension(name) == expected


@pytest.mark.parametrize(
    "name",
    [
        "report.pdf",
        "README",
        "data-set_2024.csv",
        "x" * 64 + ".txt",
        "file.exe",
        "notes.any thing goes here",
    ],
)
def test__validate_name__accepts_valid_base_names(resolver, name):
    resolver.validate_name(name)


@pytest.mark.parametrize(
    "name",
    [
        "",
        ".hidden",
        "x" * 65 + ".txt",
        "my file.txt",
        "file.sh.exe",
        "../escape.txt",
        "naïve.txt",
    ],
)
def test__validate_name__rejects_invalid_base_names(resolver, name):
    with pytest.raises(InvalidNameError):
        resolver.validate_name(name)


def test__resolve__places_file_in_its_shard(resolver, storage_root):
    assert resolver.resolve("a1.txt") == storage_root / "0c" / "a1.txt"


def test__resolve__is_deterministic(resolver):
    assert resolver.resolve("report.pdf") == resolver.resolve("report.pdf")
    assert PathResolver(resolver.storage_root).resolve("report.pdf") == resolver.resolve("report.pdf")


@pytest.mark.parametrize("name", ["", "   ", "\t"])
def test__resolve__rejects_blank_names(resolver, name):
    with pytest.raises(InvalidInputError):
        resolver.resolve(name)


@pytest.mark.parametrize("name", ["..", ".", "abc./x", "../../etc/passwd", "dir\\file.txt"])
def test__resolve__rejects_names_with_path_segments(resolver, name):
    with pytest.raises(InvalidInputError):
        resolver.resolve(name)


def test__relative_path__uses_forward_slashes(resolver, storage_root):
    path = resolver.resolve("b2.txt")
    assert resolver.relative_path(path) == f"{storage_root.as_posix()}/7b/b2.txt"


def test__relative_path__keeps_relative_root(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    resolver = PathResolver("data-storage")
    assert resolver.relative_path(resolver.resolve("a1.txt")) == "data-storage/0c/a1.txt"
