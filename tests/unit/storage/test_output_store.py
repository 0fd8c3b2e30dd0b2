"""OutputStoreのユニットテスト。"""

from collections.abc import Callable

import pytest

from rigging.models.configuration import ConfigurationRecord
from rigging.models.errors import ExportNameConflictError, StorageError
from rigging.models.outputs import OutputEntry, OutputMap
from rigging.services.resolver import TopologyResolver
from rigging.storage.service import OutputStore


class TestOutputStore:
    async def test_save_and_load(
        self, store: OutputStore, resolver: TopologyResolver, make_record: Callable[..., ConfigurationRecord]
    ) -> None:
        outputs = resolver.resolve(make_record(), "dev").outputs
        await store.save_outputs(outputs)

        loaded = await store.load_outputs("dev")
        assert loaded.environment == "dev"
        assert loaded.values() == outputs.values()
        assert loaded.exports() == outputs.exports()

    async def test_load_missing(self, store: OutputStore) -> None:
        with pytest.raises(StorageError):
            await store.load_outputs("dev")

    async def test_overwrite_same_environment(
        self, store: OutputStore, resolver: TopologyResolver, make_record: Callable[..., ConfigurationRecord]
    ) -> None:
        await store.save_outputs(resolver.resolve(make_record(), "dev").outputs)
        await store.save_outputs(resolver.resolve(make_record(database_engine="mysql"), "dev").outputs)
        assert await store.list_environments() == ["dev"]

    async def test_multiple_environments(
        self, store: OutputStore, resolver: TopologyResolver, make_record: Callable[..., ConfigurationRecord]
    ) -> None:
        for env in ("prod", "dev"):
            await store.save_outputs(resolver.resolve(make_record(), env).outputs)
        assert await store.list_environments() == ["dev", "prod"]

    async def test_export_conflict(
        self, store: OutputStore, resolver: TopologyResolver, make_record: Callable[..., ConfigurationRecord]
    ) -> None:
        await store.save_outputs(resolver.resolve(make_record(), "dev").outputs)
        hijack = OutputMap(
            environment="qa",
            entries=(OutputEntry(name="NetworkId", value="vpc-1", export_name="genai-dev-NetworkId"),),
        )
        with pytest.raises(ExportNameConflictError) as exc_info:
            await store.save_outputs(hijack)
        assert exc_info.value.owner == "dev"
        assert await store.list_environments() == ["dev"]

    async def test_delete(
        self, store: OutputStore, resolver: TopologyResolver, make_record: Callable[..., ConfigurationRecord]
    ) -> None:
        await store.save_outputs(resolver.resolve(make_record(), "dev").outputs)
        await store.delete_outputs("dev")
        assert await store.list_environments() == []
        await store.delete_outputs("dev")

    async def test_list_empty(self, store: OutputStore) -> None:
        assert await store.list_environments() == []

    @pytest.mark.parametrize("environment", ["../etc", "a/b", "..", ""])
    async def test_rejects_traversal(self, store: OutputStore, environment: str) -> None:
        with pytest.raises(StorageError):
            await store.load_outputs(environment)
