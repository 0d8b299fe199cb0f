"""Tests for the batch verification run (classification, moving, report, summary)."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from qrverify.errors import ConfigurationError
from qrverify.io.report_io import read_report
from qrverify.models.config import Mode, VerifyConfig
from qrverify.models.verification import (
    Destination,
    FileResult,
    FileStatus,
    PreprocessSpec,
    VerificationRequest,
)
from qrverify.pipeline.runner import (
    format_result_line,
    make_verifier,
    relative_path,
    run_verification,
)


def _names(directory: Path) -> list[str]:
    return sorted(os.listdir(directory)) if directory.exists() else []


class TestMakeVerifier:
    def test_seeded_order_is_reproducible(self, fake_primitives) -> None:
        from qrverify.core.profiles import BUILTIN_PROFILES

        candidates = BUILTIN_PROFILES["high"].candidates()
        request = VerificationRequest("/a.png", b"x", 300, candidates)
        orders = []
        for _ in range(2):
            fake = fake_primitives()
            make_verifier(11, fake.transform, fake.decode)(request)
            orders.append(fake.attempted)
        assert orders[0] == orders[1]

    def test_seed_differs_per_path(self, fake_primitives) -> None:
        from qrverify.core.profiles import BUILTIN_PROFILES

        candidates = BUILTIN_PROFILES["high"].candidates()
        orders = []
        for path in ("/a.png", "/b.png"):
            fake = fake_primitives()
            make_verifier(11, fake.transform, fake.decode)(
                VerificationRequest(path, b"x", 300, candidates)
            )
            orders.append(fake.attempted)
        assert orders[0] != orders[1]


class TestFormatting:
    def test_relative_path(self, tmp_path: Path) -> None:
        assert relative_path(str(tmp_path / "a.png"), str(tmp_path)) == "a.png"
        assert relative_path("/elsewhere/a.png", str(tmp_path)) == "/elsewhere/a.png"

    def test_lines(self, tmp_path: Path) -> None:
        base = str(tmp_path)
        ok = FileResult(
            path=str(tmp_path / "a.png"), status=FileStatus.SCANNABLE, decoded_text="[x]"
        )
        assert "SCAN" in format_result_line(ok, base)
        assert "\\[x]" in format_result_line(ok, base)
        fail = FileResult(path=str(tmp_path / "b.png"), status=FileStatus.NOT_SCANNABLE)
        assert "FAIL" in format_result_line(fail, base)
        err = FileResult.read_error(str(tmp_path / "c.png"), "truncated")
        assert "ERROR" in format_result_line(err, base)


class TestRunVerification:
    def test_config_error_before_any_work(self, qr_image_dir: Path) -> None:
        config = VerifyConfig(source_dir=str(qr_image_dir), tolerance="extreme")
        with pytest.raises(ConfigurationError):
            run_verification(config)
        assert not (qr_image_dir / "scannable").exists()

    def test_no_images(self, tmp_path: Path) -> None:
        run = run_verification(VerifyConfig(source_dir=str(tmp_path)))
        assert run.results == []
        assert not (tmp_path / "scannable").exists()

    @pytest.mark.timeout(60)
    def test_fake_primitives_classification(self, qr_image_dir: Path, fake_primitives) -> None:
        """Every readable file fails to decode: all go to the invalid bucket."""
        fake = fake_primitives()
        config = VerifyConfig(source_dir=str(qr_image_dir), mode=Mode.MOVE, tolerance="medium")
        run = run_verification(config, transform=fake.transform, decode=fake.decode)

        assert run.counters.valid == 0
        assert run.counters.invalid == 6
        assert run.counters.read_errors == 1
        assert len(fake.attempted) == 6 * 5
        assert _names(qr_image_dir / "scannable") == []
        assert len(_names(qr_image_dir / "non-scannable")) == 6
        assert (qr_image_dir / "corrupt.png").exists()

    @pytest.mark.timeout(60)
    def test_move_valid_only(self, qr_image_dir: Path, fake_primitives) -> None:
        fake = fake_primitives(decodes=[PreprocessSpec()])
        config = VerifyConfig(source_dir=str(qr_image_dir), mode=Mode.MOVE_VALID, tolerance="high")
        run = run_verification(config, transform=fake.transform, decode=fake.decode)

        assert run.counters.valid == 6
        assert len(_names(qr_image_dir / "scannable")) == 6
        assert not (qr_image_dir / "non-scannable").exists()
        destinations = {r.destination for r in run.results}
        assert destinations == {Destination.VALID, Destination.KEEP}

    @pytest.mark.timeout(60)
    def test_move_failure_is_reported_not_fatal(
        self, qr_image_dir: Path, fake_primitives, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import qrverify.pipeline.runner as runner_mod

        def broken(path: str, destination: Destination, config: VerifyConfig) -> str:
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr(runner_mod, "apply_destination", broken)
        fake = fake_primitives()
        config = VerifyConfig(source_dir=str(qr_image_dir), mode=Mode.MOVE, tolerance="none")
        run = run_verification(config, transform=fake.transform, decode=fake.decode)
        assert len(run.results) == 7
        failed_moves = [r for r in run.results if r.error and "move failed" in r.error]
        assert len(failed_moves) == 6

    @pytest.mark.timeout(60)
    def test_report_written(self, qr_image_dir: Path, tmp_path: Path, fake_primitives) -> None:
        fake = fake_primitives(decodes=[PreprocessSpec()])
        report = tmp_path / "report.jsonl"
        config = VerifyConfig(
            source_dir=str(qr_image_dir), mode=Mode.NONE, tolerance="none", seed=3
        )
        run_verification(
            config, report_path=str(report), transform=fake.transform, decode=fake.decode
        )
        meta, results = read_report(report)
        assert meta is not None
        assert meta.settings["tolerance"] == "none"
        assert meta.settings["seed"] == 3
        assert len(results) == 7
        assert all(r.destination == Destination.KEEP for r in results)

    @pytest.mark.timeout(60)
    def test_explicit_paths(self, qr_image_dir: Path, fake_primitives) -> None:
        fake = fake_primitives()
        paths = [str(qr_image_dir / "qr_0.png"), str(qr_image_dir / "corrupt.png")]
        config = VerifyConfig(source_dir=str(qr_image_dir), mode=Mode.NONE, tolerance="none")
        run = run_verification(config, paths=paths, transform=fake.transform, decode=fake.decode)
        assert [r.path for r in run.results] == paths
        assert run.counters.invalid == 1
        assert run.counters.read_errors == 1


    @pytest.mark.timeout(60)
    def test_move_never_overwrites_existing_file(
        self, qr_image_dir: Path, fake_primitives
    ) -> None:
        bucket = qr_image_dir / "scannable"
        bucket.mkdir()
        (bucket / "qr_0.png").write_bytes(b"precious earlier file")

        fake = fake_primitives(decodes=[PreprocessSpec()])
        config = VerifyConfig(source_dir=str(qr_image_dir), mode=Mode.MOVE, tolerance="none")
        run = run_verification(config, transform=fake.transform, decode=fake.decode)

        assert (bucket / "qr_0.png").read_bytes() == b"precious earlier file"
        assert (qr_image_dir / "qr_0.png").exists()
        clash = next(r for r in run.results if r.path.endswith("qr_0.png"))
        assert clash.error is not None and "move failed" in clash.error
        assert clash.status == FileStatus.SCANNABLE
        assert len(_names(bucket)) == 6

    @pytest.mark.timeout(60)
    def test_truncated_image_is_not_sorted(self, qr_image_dir: Path, fake_primitives) -> None:
        data = (qr_image_dir / "qr_jpeg.jpg").read_bytes()
        (qr_image_dir / "trunc.jpg").write_bytes(data[: len(data) // 3])

        fake = fake_primitives()
        config = VerifyConfig(source_dir=str(qr_image_dir), mode=Mode.MOVE, tolerance="none")
        run = run_verification(config, transform=fake.transform, decode=fake.decode)

        assert run.counters.read_errors == 2
        assert run.counters.invalid == 6
        assert (qr_image_dir / "trunc.jpg").exists()
        assert "trunc.jpg" not in _names(qr_image_dir / "non-scannable")

    @pytest.mark.timeout(60)
    def test_recursive_rerun_skips_bucket_dirs(self, qr_image_dir: Path, fake_primitives) -> None:
        fake = fake_primitives(decodes=[PreprocessSpec()])
        config = VerifyConfig(
            source_dir=str(qr_image_dir), mode=Mode.COPY, tolerance="none", recursive=True
        )
        first = run_verification(config, transform=fake.transform, decode=fake.decode)
        second = run_verification(config, transform=fake.transform, decode=fake.decode)

        assert len(first.results) == len(second.results) == 7
        assert not any(r.error and "copy failed" in r.error for r in second.results)
        assert len(_names(qr_image_dir / "scannable")) == 6
