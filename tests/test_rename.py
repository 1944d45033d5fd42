import pytest
import tempfile
from pathlib import Path
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


@pytest.fixture
def user_files_dir():
    """Root directory holding a folder and a nested file"""
    # user-files/
    #   Notes/
    #   Documents/
    #     report.txt
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "user-files"
        (root / "Notes").mkdir(parents=True)
        (root / "Documents").mkdir()
        (root / "Documents" / "report.txt").write_text("quarterly")
        yield root


@pytest.fixture
def client(user_files_dir):
    return TestClient(create_app(Settings(user_files_dir=str(user_files_dir))))


def test_rename_folder(client, user_files_dir):
    """Test renaming a top-level folder"""
    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": "Work"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Item renamed successfully",
        "data": {"oldPath": "Notes", "newPath": "Work", "newName": "Work"},
    }
    assert not (user_files_dir / "Notes").exists()
    assert (user_files_dir / "Work").is_dir()


def test_renamed_folder_appears_in_tree(client):
    """Test the next read shows the new name only"""
    client.patch("/api/rename", json={"oldPath": "Notes", "newName": "Work"})

    response = client.get("/api/filesystem")

    names = [c["name"] for c in response.json()["data"]["children"]]
    assert "Work" in names
    assert "Notes" not in names


def test_rename_nested_file(client, user_files_dir):
    """Test renaming keeps the entry in its folder"""
    response = client.patch(
        "/api/rename",
        json={"oldPath": "Documents/report.txt", "newName": "  summary.txt  "},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["newPath"] == "Documents/summary.txt"
    assert data["newName"] == "summary.txt"
    assert (user_files_dir / "Documents" / "summary.txt").read_text() == "quarterly"
    assert not (user_files_dir / "Documents" / "report.txt").exists()


def test_rename_new_path_replaces_first_occurrence(client, user_files_dir):
    """Test newPath swaps the first matching segment text"""
    (user_files_dir / "Notes" / "Notes").mkdir()

    response = client.patch("/api/rename", json={"oldPath": "Notes/Notes", "newName": "Inner"})

    assert response.status_code == 200
    assert (user_files_dir / "Notes" / "Inner").is_dir()
    assert response.json()["data"]["newPath"] == "Inner/Notes"


@pytest.mark.parametrize("body", [
    {},
    {"oldPath": "Notes"},
    {"newName": "Work"},
    {"oldPath": "", "newName": "Work"},
    {"oldPath": "Notes", "newName": ""},
])
def test_rename_requires_both_fields(client, user_files_dir, body):
    """Test missing values are rejected"""
    response = client.patch("/api/rename", json=body)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Old path and new name are required"}
    assert (user_files_dir / "Notes").is_dir()


def test_rename_rejects_non_string_fields(client, user_files_dir):
    """Test non-string values are a 400"""
    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": 42})

    assert response.status_code == 400
    assert (user_files_dir / "Notes").is_dir()


def test_rename_blank_name(client, user_files_dir):
    """Test a whitespace-only name is rejected"""
    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": "   "})

    assert response.status_code == 400
    assert response.json()["error"] == "New name cannot be empty"
    assert (user_files_dir / "Notes").is_dir()


@pytest.mark.parametrize("char", ["<", ">", ":", '"', "/", "\\", "|", "?", "*"])
def test_rename_invalid_characters(client, user_files_dir, char):
    """Test every forbidden character is rejected"""
    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": f"Wo{char}rk"})

    assert response.status_code == 400
    assert response.json()["error"] == "Name contains invalid characters"
    assert (user_files_dir / "Notes").is_dir()


@pytest.mark.parametrize("name", [".", ".."])
def test_rename_to_dot_names(client, user_files_dir, name):
    """Test relative directory names cannot be used"""
    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": name})

    assert response.status_code == 400
    assert (user_files_dir / "Notes").is_dir()


def test_rename_missing_source(client):
    """Test renaming something that does not exist returns 404"""
    response = client.patch("/api/rename", json={"oldPath": "Missing", "newName": "Work"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "File or folder not found"}


def test_rename_onto_existing_sibling(client, user_files_dir):
    """Test a name already used in the folder returns 409 and changes nothing"""
    (user_files_dir / "Notes" / "idea.txt").write_text("idea")

    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": "Documents"})

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "error": "A file or folder with this name already exists",
    }
    assert (user_files_dir / "Notes" / "idea.txt").read_text() == "idea"
    assert (user_files_dir / "Documents" / "report.txt").read_text() == "quarterly"


def test_rename_outside_root(client, user_files_dir):
    """Test oldPath cannot climb above the root"""
    (user_files_dir.parent / "outside").mkdir()

    response = client.patch("/api/rename", json={"oldPath": "../outside", "newName": "moved"})

    assert response.status_code == 400
    assert (user_files_dir.parent / "outside").is_dir()
    assert not (user_files_dir.parent / "moved").exists()


@pytest.mark.parametrize("old_path", [".", "/", "Notes/.."])
def test_rename_root_directory(client, user_files_dir, old_path):
    """Test the root directory itself cannot be renamed"""
    response = client.patch("/api/rename", json={"oldPath": old_path, "newName": "moved"})

    assert response.status_code == 400
    assert user_files_dir.is_dir()


def test_rename_unexpected_error(client, user_files_dir, monkeypatch):
    """Test failures of the rename itself are hidden behind a generic 500"""
    def denied(src, dst):
        raise PermissionError("denied")

    monkeypatch.setattr("app.services.user_files.os.rename", denied)

    response = client.patch("/api/rename", json={"oldPath": "Notes", "newName": "Work"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to rename item"}
    assert (user_files_dir / "Notes").is_dir()
