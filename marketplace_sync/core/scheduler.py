"""
Motor de scheduling para las notificaciones de pedidos al marketplace.

Este módulo ejecuta periódicamente las notificaciones (importación,
cancelación, envío) de cada tienda configurada, con un lock por tienda
para que dos ejecuciones nunca procesen la misma tienda a la vez.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from marketplace_sync.core.config import get_settings
from marketplace_sync.domain.models import Store
from marketplace_sync.services.orders.notifier import OrderNotifier
from marketplace_sync.utils.error_handler import SyncException, log_error
from marketplace_sync.utils.store_lock import store_lock

logger = logging.getLogger(__name__)

StoresProvider = Callable[[], Awaitable[List[Store]]]


class NotificationScheduler:
    """
    Scheduler de notificaciones de pedidos por tienda.

    Un error en una tienda se loggea y no impide procesar las siguientes.
    Una tienda cuyo lock está tomado se omite en esa pasada.
    """

    def __init__(
        self,
        notifier: OrderNotifier,
        stores_provider: StoresProvider,
        interval_minutes: Optional[int] = None,
        lock_factory=store_lock,
    ):
        """
        Inicializa el scheduler.

        Args:
            notifier: Orquestador de notificaciones
            stores_provider: Corrutina que devuelve las tiendas a procesar
            interval_minutes: Intervalo entre pasadas (SYNC_INTERVAL_MINUTES por defecto)
            lock_factory: Context manager asíncrono de lock por tienda
        """
        self.notifier = notifier
        self.stores_provider = stores_provider
        self.interval_minutes = interval_minutes or get_settings().SYNC_INTERVAL_MINUTES
        self.lock_factory = lock_factory
        self._stop_event = asyncio.Event()
        self._running = False
        self.last_run_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def run_store(self, store: Store) -> Optional[Dict[str, Any]]:
        """
        Ejecuta las notificaciones de una tienda bajo su lock.

        Returns:
            Dict con el resumen de la tienda, o None si se omitió o falló
        """
        async with self.lock_factory(store.id) as acquired:
            if not acquired:
                logger.info(f"⏳ Tienda {store} en proceso por otra ejecución, se omite")
                return None

            try:
                return await self.notifier.notify_all_updates(store)
            except Exception as e:
                sync_error = SyncException(
                    f"Order notifications failed for store {store.id}: {str(e)}",
                    store_id=store.id,
                    operation="notify_all_updates",
                )
                sync_error.__cause__ = e
                log_error(sync_error, {"store_id": store.id, "operation": "notify_all_updates"})
                return None

    async def run_once(self) -> List[Dict[str, Any]]:
        """
        Ejecuta una pasada sobre todas las tiendas, una tras otra.

        Returns:
            List: Resúmenes de las tiendas procesadas con éxito
        """
        stores = await self.stores_provider()
        logger.info(f"🔄 Iniciando notificaciones de pedidos para {len(stores)} tienda(s)")

        summaries = []
        for store in stores:
            summary = await self.run_store(store)
            if summary is not None:
                summaries.append(summary)

        self.last_run_at = datetime.now(timezone.utc)
        logger.info(f"✅ Notificaciones completadas: {len(summaries)}/{len(stores)} tienda(s) sin errores")
        return summaries

    async def run_forever(self) -> None:
        """Ejecuta pasadas cada interval_minutes hasta que se llame a stop()."""
        if self._running:
            logger.warning("Scheduler ya está ejecutándose")
            return

        self._running = True
        self._stop_event.clear()
        logger.info(f"🕒 Scheduler iniciado, notificaciones cada {self.interval_minutes} minutos")

        try:
            while not self._stop_event.is_set():
                try:
                    await self.run_once()
                except Exception as e:
                    # Fallo al cargar las tiendas: se reintenta en la siguiente pasada
                    log_error(e, {"operation": "run_once"})

                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_minutes * 60)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._running = False
            logger.info("🛑 Scheduler detenido")

    def stop(self) -> None:
        """Detiene el scheduler al final de la pasada en curso."""
        self._stop_event.set()

    def get_status(self) -> Dict[str, Any]:
        """Obtiene el estado actual del scheduler."""
        return {
            "running": self._running,
            "interval_minutes": self.interval_minutes,
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
        }
