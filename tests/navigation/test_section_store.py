from mes_backend.navigation import MemoryStorage, SectionStore
from mes_shared import ErrorCode


def test_load_without_value_is_not_found():
    result = SectionStore(MemoryStorage()).load()

    assert not result.ok
    assert result.code == ErrorCode.NOT_FOUND.value


def test_save_then_load_uses_fixed_key():
    storage = MemoryStorage()
    store = SectionStore(storage)

    assert store.save("privacy").ok
    assert storage.data == {"currentSection": "privacy"}
    assert store.load().unwrap() == "privacy"


def test_disabled_storage_reports_errors_instead_of_raising():
    store = SectionStore(MemoryStorage(available=False))

    loaded = store.load()
    saved = store.save("tos")

    assert loaded.code == ErrorCode.STORAGE_UNAVAILABLE.value
    assert saved.code == ErrorCode.STORAGE_UNAVAILABLE.value
    assert store.load().unwrap_or("home") == "home"


def test_quota_exceeded_is_reported():
    storage = MemoryStorage(quota=16)
    result = SectionStore(storage).save("a-very-long-section-id")

    assert not result.ok
    assert result.code == ErrorCode.QUOTA_EXCEEDED.value
    assert storage.data == {}


def test_missing_storage_backend():
    store = SectionStore(None)

    assert store.load().code == ErrorCode.STORAGE_UNAVAILABLE.value
    assert store.save("home").code == ErrorCode.STORAGE_UNAVAILABLE.value


def test_unexpected_backend_exception_is_contained():
    class _Broken:
        def get_item(self, key):
            raise RuntimeError("SecurityError")

        def set_item(self, key, value):
            raise RuntimeError("SecurityError")

    store = SectionStore(_Broken())

    assert store.load().code == ErrorCode.STORAGE_UNAVAILABLE.value
    assert not store.save("tos").ok
