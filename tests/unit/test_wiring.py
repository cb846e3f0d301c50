from pathlib import Path

import pytest

from intake.config.settings import Settings
from intake.export.example_channel_adapters import ExampleEmailChannel, ExampleFaxChannel
from intake.export.manager import ExportManager, build_export_manager
from intake.ingest.gateway import IngestGateway, build_ingest_gateway
from intake.processor.processor import Processor, build_processor
from intake.processor.steps import AnalyzeStep, ComplianceCheckStep, ExtractStep, ScanStep


@pytest.fixture()
def offline_settings(tmp_path: Path) -> Settings:
    return Settings(
        staging_dir=str(tmp_path / "staging"),
        retained_dir=str(tmp_path / "retained"),
        analysis_provider="example",
        ocr_provider="example",
        email_provider="example",
        fax_provider="example",
    )


class TestWiring:
    def test_build_processor_orders_steps(self, offline_settings: Settings) -> None:
        processor = build_processor(offline_settings)

        assert isinstance(processor, Processor)
        assert [type(step) for step in processor._steps] == [
            ScanStep,
            ExtractStep,
            AnalyzeStep,
            ComplianceCheckStep,
        ]

    def test_build_ingest_gateway(self, offline_settings: Settings) -> None:
        gateway = build_ingest_gateway(offline_settings)

        assert isinstance(gateway, IngestGateway)
        assert gateway._max_upload_bytes == 100 * 1024 * 1024

    def test_build_export_manager_uses_configured_channels(
        self, offline_settings: Settings
    ) -> None:
        manager = build_export_manager(offline_settings)

        assert isinstance(manager, ExportManager)
        assert isinstance(manager._email_channel, ExampleEmailChannel)
        assert isinstance(manager._fax_channel, ExampleFaxChannel)
