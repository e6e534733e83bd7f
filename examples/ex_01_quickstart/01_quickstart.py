"""Quickstart: keyed bindings, singletons and contextual wiring.

Bind an abstract logger once, give one consumer a different storage backend,
and let keywire build everything else from constructor type hints.
"""

from __future__ import annotations

from typing import Annotated, Protocol

from keywire import Container, Key


class Storage(Protocol):
    def name(self) -> str: ...


class LocalStorage:
    def name(self) -> str:
        return "local"


class S3Storage:
    def name(self) -> str:
        return "s3"


class Logger:
    def __init__(self, channel: Annotated[str, Key("log.channel")]) -> None:
        self.channel = channel


class ReportService:
    def __init__(self, storage: Storage, logger: Logger) -> None:
        self.storage = storage
        self.logger = logger


class ArchiveService:
    def __init__(self, storage: Storage, logger: Logger) -> None:
        self.storage = storage
        self.logger = logger


def main() -> None:
    container = Container()
    container.bind("log.channel", "stderr")
    container.singleton(Logger)
    container.bind(Storage, LocalStorage)
    container.when(ReportService).needs(Storage, S3Storage)

    report = container.make(ReportService)
    archive = container.make(ArchiveService)

    print(f"report_storage={report.storage.name()}")  # => report_storage=s3
    print(f"archive_storage={archive.storage.name()}")  # => archive_storage=local
    print(f"shared_logger={report.logger is archive.logger}")  # => shared_logger=True
    print(f"channel={report.logger.channel}")  # => channel=stderr


if __name__ == "__main__":
    main()
