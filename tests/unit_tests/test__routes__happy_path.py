import re

from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import TEST_BUCKET_NAME

# Constants for testing
TEST_FILE_NAME = "photo.png"
TEST_FILE_CONTENT = b"\x89PNG\r\n\x1a\n" + b"\x00" * (512000 - 8)
TEST_FILE_CONTENT_TYPE = "image/png"
TEST_JPEG_CONTENT = b"\xff\xd8\xff\xe0" + b"\x00" * 1020


def upload(client: TestClient, name: str, content: bytes, content_type: str):
    return client.post("/upload", files={"file": (name, content, content_type)})


def test__upload_file__happy_path(client: TestClient):
    response = upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["message"] == "File uploaded successfully"
    assert re.fullmatch(r"\d+-photo\.png", data["file"]["key"])
    assert data["file"]["size"] == 512000
    assert data["file"]["mimetype"] == TEST_FILE_CONTENT_TYPE
    assert data["file"]["location"] == (
        f"https://{TEST_BUCKET_NAME}.s3.amazonaws.com/{data['file']['key']}"
    )


def test__upload_file__stores_bytes_unmodified(client: TestClient, mocked_aws):
    response = upload(client, "cat.jpg", TEST_JPEG_CONTENT, "image/jpeg")
    key = response.json()["file"]["key"]

    stored = mocked_aws.get_object(Bucket=TEST_BUCKET_NAME, Key=key)
    assert stored["Body"].read() == TEST_JPEG_CONTENT
    assert stored["ContentType"] == "image/jpeg"


def test__upload_file__whitespace_in_name_becomes_hyphens(client: TestClient):
    response = upload(client, "my  holiday   photo.png", TEST_JPEG_CONTENT, TEST_FILE_CONTENT_TYPE)

    assert response.status_code == status.HTTP_200_OK
    assert re.fullmatch(r"\d+-my-holiday-photo\.png", response.json()["file"]["key"])


def test__upload_file__is_public_read_by_default(client: TestClient, mocked_aws):
    response = upload(client, TEST_FILE_NAME, TEST_JPEG_CONTENT, TEST_FILE_CONTENT_TYPE)
    key = response.json()["file"]["key"]

    acl = mocked_aws.get_object_acl(Bucket=TEST_BUCKET_NAME, Key=key)
    public_grants = [
        grant
        for grant in acl["Grants"]
        if grant["Grantee"].get("URI") == "http://acs.amazonaws.com/groups/global/AllUsers"
    ]
    assert [grant["Permission"] for grant in public_grants] == ["READ"]


def test__list_files__contains_uploaded_file(client: TestClient):
    response = upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)
    key = response.json()["file"]["key"]

    response = client.get("/files")

    assert response.status_code == status.HTTP_200_OK
    files = response.json()
    assert [f["key"] for f in files] == [key]
    assert files[0]["size"] == len(TEST_FILE_CONTENT)
    assert files[0]["url"] == f"https://{TEST_BUCKET_NAME}.s3.amazonaws.com/{key}"
    assert "lastModified" in files[0]


def test__list_files__empty_bucket(client: TestClient):
    response = client.get("/files")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test__delete_file__removes_it_from_listing(client: TestClient):
    key = upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE).json()["file"]["key"]

    response = client.delete(f"/files/{key}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "File deleted successfully"}

    response = client.get("/files")
    assert key not in [f["key"] for f in response.json()]


def test__delete_file__twice_succeeds_both_times(client: TestClient):
    key = upload(client, TEST_FILE_NAME, TEST_JPEG_CONTENT, TEST_FILE_CONTENT_TYPE).json()["file"]["key"]

    first = client.delete(f"/files/{key}")
    second = client.delete(f"/files/{key}")

    assert first.status_code == second.status_code == status.HTTP_200_OK
    assert first.json() == second.json() == {"message": "File deleted successfully"}


def test__delete_file__unknown_key_succeeds(client: TestClient):
    response = client.delete("/files/1700000000000-never-uploaded.png")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "File deleted successfully"}


def test__health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "status": "ok",
        "bucket": TEST_BUCKET_NAME,
        "components": {"api": "ready", "storage": "ready"},
        "ready": True,
    }


def test__delete_file__key_with_slashes(client: TestClient, mocked_aws):
    mocked_aws.put_object(Bucket=TEST_BUCKET_NAME, Key="albums/2024/1700000000000-a.png", Body=b"a")
    mocked_aws.put_object(Bucket=TEST_BUCKET_NAME, Key="1700000000000-dir/b.png", Body=b"b")

    plain = client.delete("/files/albums/2024/1700000000000-a.png")
    encoded = client.delete("/files/1700000000000-dir%2Fb.png")

    assert plain.status_code == encoded.status_code == status.HTTP_200_OK
    assert client.get("/files").json() == []


def test__upload_then_delete__filename_with_directory(client: TestClient):
    key = upload(client, "dir/a b.png", TEST_JPEG_CONTENT, TEST_FILE_CONTENT_TYPE).json()["file"]["key"]

    response = client.delete(f"/files/{key}")

    assert response.status_code == status.HTTP_200_OK
    assert key not in [f["key"] for f in client.get("/files").json()]


def test__cors__preflight(client: TestClient):
    response = client.options(
        "/files/1700000000000-photo.png",
        headers={
            "Origin": "http://frontend.example.com",
            "Access-Control-Request-Method": "DELETE",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == "*"
    assert "DELETE" in response.headers["access-control-allow-methods"]
    assert "content-type" in response.headers["access-control-allow-headers"].lower()


def test__cors__simple_request(client: TestClient):
    response = client.get("/files", headers={"Origin": "http://frontend.example.com"})

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == "*"
