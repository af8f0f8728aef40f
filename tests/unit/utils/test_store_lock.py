"""Tests unitarios para el lock por tienda."""

import os
import time

import pytest

from marketplace_sync.utils.store_lock import StoreSyncLock, store_lock


class TestStoreSyncLock:
    """Tests para StoreSyncLock."""

    @pytest.mark.asyncio
    async def test_second_acquire_fails_while_held(self, tmp_path):
        """Debe impedir que otra ejecución tome el lock de la misma tienda."""
        first = StoreSyncLock(1, timeout_seconds=60, lock_dir=str(tmp_path))
        second = StoreSyncLock(1, timeout_seconds=60, lock_dir=str(tmp_path))

        assert await first.acquire()
        assert not await second.acquire()

        await first.release()
        assert await second.acquire()
        await second.release()

    @pytest.mark.asyncio
    async def test_stores_are_locked_independently(self, tmp_path):
        """Debe permitir procesar tiendas distintas a la vez."""
        async with store_lock(1, 60, str(tmp_path)) as first:
            async with store_lock(2, 60, str(tmp_path)) as second:
                assert first and second

    @pytest.mark.asyncio
    async def test_stale_lock_is_taken_over(self, tmp_path):
        """Debe reemplazar un lock expirado."""
        lock = StoreSyncLock(1, timeout_seconds=60, lock_dir=str(tmp_path))
        with open(lock.lock_file, "w") as f:
            f.write(str(time.time() - 120))

        assert await lock.acquire()
        await lock.release()

    @pytest.mark.asyncio
    async def test_context_manager_releases_lock(self, tmp_path):
        """Debe eliminar el archivo de lock al salir del contexto."""
        async with store_lock(1, 60, str(tmp_path)) as acquired:
            assert acquired

        assert not os.listdir(tmp_path)

    @pytest.mark.asyncio
    async def test_lock_not_acquired_is_not_released(self, tmp_path):
        """Debe conservar el lock de otra ejecución al salir sin haberlo tomado."""
        holder = StoreSyncLock(1, timeout_seconds=60, lock_dir=str(tmp_path))
        await holder.acquire()

        async with store_lock(1, 60, str(tmp_path)) as acquired:
            assert not acquired

        assert os.path.exists(holder.lock_file)
        await holder.release()
