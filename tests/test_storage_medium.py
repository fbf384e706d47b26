import os

from conftest import make_document
from legitmind.models.schemas import ChatMessage
from legitmind.services.document_store import DocumentStore
from legitmind.services.storage_medium import FileMedium


def test_file_medium_get_set_remove(tmp_path):
    medium = FileMedium(str(tmp_path))

    assert medium.get("files") is None
    medium.set("files", "[]")
    assert medium.get("files") == "[]"

    medium.remove("files")
    assert medium.get("files") is None
    # removing twice is fine
    medium.remove("files")


def test_file_medium_keys_survive_unsafe_characters(tmp_path):
    medium = FileMedium(str(tmp_path))
    key = "file-content-2024-05-01T10:00:00.000000Z-lease/v2"

    medium.set(key, "text")

    assert medium.get(key) == "text"
    assert len(os.listdir(tmp_path)) == 1
    assert all(name.endswith(".json") for name in os.listdir(tmp_path))


def test_file_medium_leaves_no_temp_files(tmp_path):
    medium = FileMedium(str(tmp_path))
    medium.set("a", "1")
    medium.set("a", "2")

    assert medium.get("a") == "2"
    assert [name for name in os.listdir(tmp_path) if name.endswith(".tmp")] == []


def test_store_survives_restart_on_disk(tmp_path):
    store = DocumentStore(FileMedium(str(tmp_path))).open()
    store.add_document(make_document(content="Hello World"))
    store.append_chat_message("doc-1", "lease.txt", ChatMessage(role="user", content="first"))
    store.append_chat_message("doc-1", "lease.txt", ChatMessage(role="assistant", content="second"))
    store.close()

    reopened = DocumentStore(FileMedium(str(tmp_path))).open()

    assert reopened.get_content("doc-1") == "Hello World"
    assert [m.content for m in reopened.get_chat_session("doc-1").messages] == ["first", "second"]
