from __future__ import annotations

import json

from pagecrop import logger as package_logger
from pagecrop.logging import configure_logging, get_logger, operation_context
from pagecrop.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_json_logs_merge_extra_and_operation_context(capsys) -> None:
    configure_logging(settings=Settings(log_json=True, log_level="INFO"), force=True)
    logger = get_logger("tests.json")

    with operation_context("crop", document_name="a.pdf"):
        logger.info("Cropping pages", extra={"pages": [1, 2]})

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Cropping pages"
    assert payload["operation"] == "crop"
    assert payload["document_name"] == "a.pdf"
    assert payload["pages"] == [1, 2]
    assert "extra" not in payload


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))
