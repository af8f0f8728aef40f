"""Tests unitarios para la configuración de logging."""

import json
import logging
from unittest.mock import patch

from marketplace_sync.core.config import Settings
from marketplace_sync.core.logging_config import StructuredFormatter, SyncOperationFilter, get_logging_configuration


def _record(name="marketplace_sync.services.orders.notifier", **extra):
    record = logging.LogRecord(name, logging.INFO, __file__, 10, "Notified %s", ("order 1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSyncOperationFilter:
    """Tests para el filtro de operaciones de sincronización."""

    def test_sync_modules_are_tagged(self):
        """Debe marcar los registros de los módulos de sincronización."""
        record = _record()

        assert SyncOperationFilter().filter(record)
        assert record.operation_type == "sync"

    def test_other_modules_are_untouched(self):
        """Debe dejar pasar los demás registros sin marcarlos."""
        record = _record(name="marketplace_sync.db.connection")

        assert SyncOperationFilter().filter(record)
        assert not hasattr(record, "operation_type")


class TestStructuredFormatter:
    """Tests para el formato JSON."""

    def test_formats_message_and_extra_fields(self):
        """Debe producir JSON con el mensaje y los campos extra."""
        output = json.loads(StructuredFormatter().format(_record(store_id=3)))

        assert output["message"] == "Notified order 1"
        assert output["level"] == "INFO"
        assert output["extra"] == {"store_id": 3}


class TestLoggingConfiguration:
    """Tests para la configuración de handlers."""

    def test_file_handlers_only_with_log_file(self):
        """Debe añadir handlers de archivo solo si hay LOG_FILE_PATH."""
        with patch("marketplace_sync.core.logging_config.get_settings", return_value=Settings(LOG_FILE_PATH=None)):
            config = get_logging_configuration()

        assert config["root"]["handlers"] == ["console"]

    def test_rotating_files_with_log_file(self):
        """Debe configurar archivo general y archivo de errores con rotación."""
        settings = Settings(LOG_FILE_PATH="logs/sync.log", LOG_MAX_SIZE_MB=1, LOG_JSON=True)

        with patch("marketplace_sync.core.logging_config.get_settings", return_value=settings):
            config = get_logging_configuration()

        assert config["root"]["handlers"] == ["console", "file", "error_file"]
        assert config["handlers"]["error_file"]["filename"] == "logs/sync_errors.log"
        assert config["handlers"]["file"]["maxBytes"] == 1024 * 1024
        assert config["handlers"]["console"]["formatter"] == "json"
