"""Tests for the sample data command line script."""

import json
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from scripts.generate_sample_data import main


@pytest.fixture
def env_without_numbering() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k != "NUMBERING_SETTINGS"}


class TestMain:
    """Tests for the generate_sample_data entry point."""

    def test_writes_json(self, env_without_numbering: dict[str, str]) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, env_without_numbering, clear=True):
                code = main(
                    [
                        "--agreements", "4",
                        "--plan-coverage", "1.0",
                        "--invoice-prefix", "P-INV-",
                        "--agreement-prefix", "P-AGR-",
                        "--output", tmpdir,
                        "--seed", "42",
                    ]
                )

            agreements = json.loads((Path(tmpdir) / "project_agreements.json").read_text(encoding="utf-8"))

        assert code == 0
        assert len(agreements) == 4

    def test_numbering_from_env(self, env_without_numbering: dict[str, str]) -> None:
        settings = {
            "project_invoice": {"prefix": "INV-", "nextNumber": 100},
            "project_agreement": {"prefix": "AGR-", "padding": 3},
        }
        env = {**env_without_numbering, "NUMBERING_SETTINGS": json.dumps(settings)}

        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, env, clear=True):
                code = main(["--agreements", "2", "--plan-coverage", "1.0", "--output", tmpdir])

            invoices = json.loads((Path(tmpdir) / "invoices.json").read_text(encoding="utf-8"))

        assert code == 0
        assert min(row["invoice_number"] for row in invoices) == "INV-00100"

    def test_missing_numbering_fails(self, env_without_numbering: dict[str, str]) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, env_without_numbering, clear=True):
                code = main(["--agreements", "2", "--output", tmpdir])

        assert code == 1

    def test_console_output(
        self, env_without_numbering: dict[str, str], capsys: pytest.CaptureFixture
    ) -> None:
        with patch.dict(os.environ, env_without_numbering, clear=True):
            code = main(
                [
                    "--agreements", "1",
                    "--invoice-prefix", "P-INV-",
                    "--agreement-prefix", "P-AGR-",
                    "--console",
                ]
            )

        assert code == 0
        assert "Entity: project_agreements (1 records)" in capsys.readouterr().out
