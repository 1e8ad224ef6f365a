from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import (
    SHARD_KEYS,
    TEST_FILE_CONTENT,
    TEST_FILE_CONTENT_TYPE,
    TEST_FILE_NAME,
    UPDATED_FILE_CONTENT,
)


def upload(client: TestClient, name: str, content: bytes = TEST_FILE_CONTENT):
    return client.post(
        "/v1/files/upload",
        files={"file": (name, content, TEST_FILE_CONTENT_TYPE)},
    )


def test__upload_file__happy_path(client: TestClient, storage_root):
    response = upload(client, TEST_FILE_NAME)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "data": f"{storage_root.as_posix()}/0c/{TEST_FILE_NAME}",
        "exceptions": None,
    }
    assert (storage_root / "0c" / TEST_FILE_NAME).read_bytes() == TEST_FILE_CONTENT


def test__upload_file__existing_name_keeps_content(client: TestClient):
    first = upload(client, TEST_FILE_NAME, b"X")
    second = upload(client, TEST_FILE_NAME, b"Y")

    assert second.status_code == status.HTTP_200_OK
    assert second.json()["data"] == first.json()["data"]

    response = client.get(f"/v1/files/download/{TEST_FILE_NAME}")
    assert response.content == b"X"


def test__update_file__happy_path(client: TestClient, storage_root):
    upload(client, TEST_FILE_NAME)

    response = client.put(
        f"/v1/files/update/{TEST_FILE_NAME}",
        files={"file": (TEST_FILE_NAME, UPDATED_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == f"{storage_root.as_posix()}/0c/{TEST_FILE_NAME}"
    assert client.get(f"/v1/files/download/{TEST_FILE_NAME}").content == UPDATED_FILE_CONTENT
    assert not (storage_root / f"{TEST_FILE_NAME}.tmp").exists()


def test__download_file__happy_path(client: TestClient):
    upload(client, TEST_FILE_NAME)

    response = client.get(f"/v1/files/download/{TEST_FILE_NAME}")

    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_FILE_CONTENT
    assert response.headers["content-disposition"] == f'attachment; filename="{TEST_FILE_NAME}"'


def test__delete_file__happy_path(client: TestClient):
    upload(client, TEST_FILE_NAME)

    response = client.delete(f"/v1/files/delete/{TEST_FILE_NAME}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"data": f"File deleted: {TEST_FILE_NAME}", "exceptions": None}
    assert client.get(f"/v1/files/download/{TEST_FILE_NAME}").status_code == status.HTTP_404_NOT_FOUND


def test__search_files__happy_path(client: TestClient):
    upload(client, "b2.txt")
    upload(client, "a1.txt")

    response = client.get("/v1/files/search", params={"regex": ".*"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "data": {"files": [{"name": "a1.txt"}, {"name": "b2.txt"}]},
        "metadata": {"pagination": {"total_matching": 2, "page": 0, "size": 10}},
        "exceptions": None,
    }


def test__search_files__with_pagination(client: TestClient):
    for name in SHARD_KEYS:
        upload(client, name)
    ordered = sorted(SHARD_KEYS, key=SHARD_KEYS.get)

    response = client.get("/v1/files/search", params={"regex": ".*", "page": 1, "size": 5})

    body = response.json()
    assert [f["name"] for f in body["data"]["files"]] == ordered[5:]
    assert body["metadata"]["pagination"] == {"total_matching": 8, "page": 1, "size": 5}


def test__search_files__no_match(client: TestClient):
    upload(client, TEST_FILE_NAME)

    response = client.get("/v1/files/search", params={"regex": "nomatch"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"files": []}
    assert response.json()["metadata"]["pagination"]["total_matching"] == 0


def test__count_files__happy_path(client: TestClient):
    assert client.get("/v1/files/count").json() == {"data": 0, "exceptions": None}

    upload(client, "a1.txt")
    upload(client, "b2.txt")

    assert client.get("/v1/files/count").json()["data"] == 2


def test__health_check(client: TestClient, storage_root):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["ready"] is True
    assert body["storage_dir"] == storage_root.as_posix()
    assert body["components"] == {"api": "ready", "storage": "ready"}
