from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import download_model
from download_model import fetch_model, main


def test_existing_model_is_not_downloaded_again(tmp_path: Path) -> None:
    target = tmp_path / "large-v3-turbo"
    target.mkdir()
    (target / "model.bin").write_bytes(b"\x00")

    with patch("download_model.faster_whisper") as fw:
        assert fetch_model(model_dir=tmp_path) == target

    fw.download_model.assert_not_called()


def test_missing_model_is_downloaded_into_model_dir(tmp_path: Path) -> None:
    with patch("download_model.faster_whisper") as fw:
        target = fetch_model("small", model_dir=tmp_path)

    assert target == tmp_path / "small"
    fw.download_model.assert_called_once_with("small", output_dir=str(tmp_path / "small"))


def test_main_reports_failure(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(download_model, "faster_whisper", None)

    assert main(["small", "--model-dir", str(tmp_path)]) == 1


def test_main_succeeds(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(download_model, "faster_whisper", MagicMock())

    assert main(["--model-dir", str(tmp_path)]) == 0
