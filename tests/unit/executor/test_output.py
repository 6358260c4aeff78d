"""Tests for transcode output finalization."""

from pathlib import Path

import pytest

from handbrake.errors import (
    OutputMissingError,
    ProcessFailedError,
    TargetExistsError,
)
from handbrake.executor.interface import RunnerResult
from handbrake.executor.output import (
    AtomicMode,
    AtomicPolicy,
    OutputOutcome,
    OverwritePolicy,
    finalize_output,
    temp_filename,
    working_path_for,
)


class RecordingInvoke:
    """Invoke callback that records its path and writes a file there."""

    def __init__(self, exit_code: int = 0, content: bytes = b"new", race=None):
        self.exit_code = exit_code
        self.content = content
        self.race = race
        self.paths: list[Path] = []

    def __call__(self, path: Path) -> RunnerResult:
        self.paths.append(path)
        if self.exit_code == 0:
            path.write_bytes(self.content)
        if self.race is not None:
            self.race()
        return RunnerResult(output="encoding done", exit_code=self.exit_code)

    @property
    def called(self) -> bool:
        return bool(self.paths)


class TestTempFilename:
    """Tests for temp_filename function."""

    def test_infix_before_extension(self):
        """The infix goes before the extension so the container is kept."""
        assert temp_filename("movie.m4v") == "movie.handbrake.m4v"

    def test_only_last_extension(self):
        """Only the last suffix is treated as the extension."""
        assert temp_filename("movie.2010.mkv") == "movie.2010.handbrake.mkv"

    def test_no_extension(self):
        """Files without an extension get the infix appended."""
        assert temp_filename("movie") == "movie.handbrake"


class TestAtomicPolicy:
    """Tests for AtomicPolicy construction."""

    def test_constructors(self, tmp_path):
        """Each constructor sets the matching mode."""
        assert AtomicPolicy.direct().mode == AtomicMode.DIRECT
        assert AtomicPolicy.same_dir().mode == AtomicMode.TEMP_SAME_DIR
        policy = AtomicPolicy.temp_at(tmp_path)
        assert policy.mode == AtomicMode.TEMP_AT
        assert policy.temp_dir == tmp_path

    def test_is_atomic(self, tmp_path):
        """Only DIRECT is non-atomic."""
        assert not AtomicPolicy.direct().is_atomic
        assert AtomicPolicy.same_dir().is_atomic
        assert AtomicPolicy.temp_at(tmp_path).is_atomic

    def test_temp_at_requires_directory(self):
        """TEMP_AT without a directory is rejected."""
        with pytest.raises(ValueError):
            AtomicPolicy(AtomicMode.TEMP_AT)

    def test_directory_only_with_temp_at(self, tmp_path):
        """A directory given with another mode is rejected."""
        with pytest.raises(ValueError):
            AtomicPolicy(AtomicMode.TEMP_SAME_DIR, tmp_path)


class TestWorkingPathFor:
    """Tests for working_path_for function."""

    def test_direct(self, tmp_path):
        """DIRECT writes to the final path."""
        final = tmp_path / "movie.m4v"
        assert working_path_for(final, AtomicPolicy.direct()) == final

    def test_same_dir(self, tmp_path):
        """TEMP_SAME_DIR writes beside the final path."""
        final = tmp_path / "movie.m4v"
        assert (
            working_path_for(final, AtomicPolicy.same_dir())
            == tmp_path / "movie.handbrake.m4v"
        )

    def test_temp_at(self, tmp_path):
        """TEMP_AT writes into the given directory."""
        final = tmp_path / "out" / "movie.m4v"
        temp_dir = tmp_path / "scratch"
        assert (
            working_path_for(final, AtomicPolicy.temp_at(temp_dir))
            == temp_dir / "movie.handbrake.m4v"
        )


class TestPreCheck:
    """Existing final path before the run."""

    def test_reject_raises_without_invoking(self, tmp_path):
        """REJECT raises TargetExistsError and never runs HandBrakeCLI."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")
        invoke = RecordingInvoke()

        with pytest.raises(TargetExistsError) as exc_info:
            finalize_output(
                final, OverwritePolicy.REJECT, AtomicPolicy.direct(), invoke
            )

        assert exc_info.value.path == final
        assert not invoke.called
        assert final.read_bytes() == b"old"

    def test_target_exists_is_file_exists_error(self, tmp_path):
        """TargetExistsError can be caught as FileExistsError."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")

        with pytest.raises(FileExistsError):
            finalize_output(
                final, OverwritePolicy.REJECT, AtomicPolicy.direct(), RecordingInvoke()
            )

    @pytest.mark.parametrize(
        "atomic", [AtomicPolicy.direct(), AtomicPolicy.same_dir()]
    )
    def test_skip_does_not_invoke(self, tmp_path, atomic):
        """SKIP returns SKIPPED without running HandBrakeCLI."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")
        invoke = RecordingInvoke()

        result = finalize_output(final, OverwritePolicy.SKIP, atomic, invoke)

        assert result.outcome == OutputOutcome.SKIPPED
        assert result.working_path is None
        assert not invoke.called
        assert final.read_bytes() == b"old"

    def test_skip_logs_decision(self, tmp_path, caplog):
        """The skip decision is logged at INFO."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")

        with caplog.at_level("INFO"):
            finalize_output(
                final, OverwritePolicy.SKIP, AtomicPolicy.direct(), RecordingInvoke()
            )

        assert "already exists" in caplog.text

    def test_replace_direct_overwrites(self, tmp_path):
        """REPLACE with DIRECT lets HandBrakeCLI overwrite the file."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")
        invoke = RecordingInvoke()

        result = finalize_output(
            final, OverwritePolicy.REPLACE, AtomicPolicy.direct(), invoke
        )

        assert result.outcome == OutputOutcome.WRITTEN
        assert invoke.paths == [final]
        assert final.read_bytes() == b"new"


class TestAtomicWrites:
    """Working file handling."""

    def test_same_dir_moves_into_place(self, tmp_path):
        """The working file is moved onto the final path."""
        final = tmp_path / "movie.m4v"
        invoke = RecordingInvoke()

        result = finalize_output(
            final, OverwritePolicy.REPLACE, AtomicPolicy.same_dir(), invoke
        )

        working = tmp_path / "movie.handbrake.m4v"
        assert invoke.paths == [working]
        assert result.outcome == OutputOutcome.WRITTEN
        assert result.working_path == working
        assert final.read_bytes() == b"new"
        assert not working.exists()

    def test_temp_at_creates_directory(self, tmp_path):
        """A missing TEMP_AT directory is created before the run."""
        final = tmp_path / "movie.m4v"
        temp_dir = tmp_path / "scratch" / "nested"
        invoke = RecordingInvoke()

        finalize_output(
            final, OverwritePolicy.REPLACE, AtomicPolicy.temp_at(temp_dir), invoke
        )

        assert invoke.paths == [temp_dir / "movie.handbrake.m4v"]
        assert temp_dir.is_dir()
        assert final.read_bytes() == b"new"

    def test_direct_creates_parent_directory(self, tmp_path):
        """The output directory is created for direct writes too."""
        final = tmp_path / "new" / "movie.m4v"

        finalize_output(
            final, OverwritePolicy.REPLACE, AtomicPolicy.direct(), RecordingInvoke()
        )

        assert final.exists()

    def test_replace_overwrites_existing(self, tmp_path):
        """REPLACE with a working file replaces a pre-existing final file."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")

        finalize_output(
            final, OverwritePolicy.REPLACE, AtomicPolicy.same_dir(), RecordingInvoke()
        )

        assert final.read_bytes() == b"new"


class TestPostCheck:
    """Final path created by someone else while HandBrakeCLI ran."""

    def _racing(self, final: Path):
        return RecordingInvoke(race=lambda: final.write_bytes(b"other"))

    def test_reject_keeps_both_files(self, tmp_path):
        """REJECT raises after the run and keeps the working file."""
        final = tmp_path / "movie.m4v"

        with pytest.raises(TargetExistsError):
            finalize_output(
                final,
                OverwritePolicy.REJECT,
                AtomicPolicy.same_dir(),
                self._racing(final),
            )

        assert final.read_bytes() == b"other"
        assert (tmp_path / "movie.handbrake.m4v").read_bytes() == b"new"

    def test_skip_leaves_working_file_in_place(self, tmp_path, caplog):
        """SKIP returns LEFT_IN_PLACE and logs where the transcode is."""
        final = tmp_path / "movie.m4v"
        working = tmp_path / "movie.handbrake.m4v"

        with caplog.at_level("INFO"):
            result = finalize_output(
                final,
                OverwritePolicy.SKIP,
                AtomicPolicy.same_dir(),
                self._racing(final),
            )

        assert result.outcome == OutputOutcome.LEFT_IN_PLACE
        assert result.working_path == working
        assert final.read_bytes() == b"other"
        assert working.read_bytes() == b"new"
        assert "showed up during transcode" in caplog.text

    def test_replace_overwrites_racing_file(self, tmp_path):
        """REPLACE moves the working file over the racing file."""
        final = tmp_path / "movie.m4v"

        result = finalize_output(
            final, OverwritePolicy.REPLACE, AtomicPolicy.same_dir(), self._racing(final)
        )

        assert result.outcome == OutputOutcome.WRITTEN
        assert final.read_bytes() == b"new"
        assert not (tmp_path / "movie.handbrake.m4v").exists()


class TestFailedRun:
    """Nonzero exit from HandBrakeCLI."""

    def test_raises_process_failed(self, tmp_path):
        """A failed run raises ProcessFailedError with the output."""
        final = tmp_path / "movie.m4v"

        with pytest.raises(ProcessFailedError) as exc_info:
            finalize_output(
                final,
                OverwritePolicy.REPLACE,
                AtomicPolicy.same_dir(),
                RecordingInvoke(exit_code=2),
            )

        assert exc_info.value.exit_code == 2
        assert exc_info.value.output == "encoding done"
        assert not final.exists()

    def test_existing_final_untouched_on_failure(self, tmp_path):
        """A failed atomic run never touches the existing final file."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")

        with pytest.raises(ProcessFailedError):
            finalize_output(
                final,
                OverwritePolicy.REPLACE,
                AtomicPolicy.same_dir(),
                RecordingInvoke(exit_code=1),
            )

        assert final.read_bytes() == b"old"


class TestMissingOutput:
    """HandBrakeCLI exits 0 without writing anything."""

    @staticmethod
    def _silent(path: Path) -> RunnerResult:
        return RunnerResult(output="No title found.\n", exit_code=0)

    def test_atomic_raises_output_missing(self, tmp_path):
        """A missing working file is reported with the captured output."""
        final = tmp_path / "movie.m4v"

        with pytest.raises(OutputMissingError) as exc_info:
            finalize_output(
                final, OverwritePolicy.REPLACE, AtomicPolicy.same_dir(), self._silent
            )

        assert exc_info.value.path == tmp_path / "movie.handbrake.m4v"
        assert exc_info.value.output == "No title found.\n"
        assert not final.exists()

    def test_direct_raises_output_missing(self, tmp_path):
        """Direct writes are checked too."""
        with pytest.raises(OutputMissingError):
            finalize_output(
                tmp_path / "movie.m4v",
                OverwritePolicy.REPLACE,
                AtomicPolicy.direct(),
                self._silent,
            )

    def test_existing_final_untouched(self, tmp_path):
        """The old final file survives a run that wrote nothing."""
        final = tmp_path / "movie.m4v"
        final.write_bytes(b"old")

        with pytest.raises(OutputMissingError):
            finalize_output(
                final, OverwritePolicy.REPLACE, AtomicPolicy.same_dir(), self._silent
            )

        assert final.read_bytes() == b"old"
