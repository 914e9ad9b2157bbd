#
# tests/unit/test_process_stream.py
#
"""
Tests for ProcessStream: line delivery, merging, exit status and reaping.

Most tests spawn real POSIX processes; the reap-count tests use a mocked
Popen.
"""

import gc
import io
import os
import signal
import sys
from unittest.mock import MagicMock, patch

import pytest

from tapstream.exceptions import NoCommandError, SpawnError
from tapstream.sources import Source, SourceRegistry
from tapstream.streams import ExitStatus, ProcessStream, Stream, StreamState

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="Requires POSIX process tools")

INTERLEAVED = "echo out1; echo err1 >&2; echo out2; echo err2 >&2"


def assert_reaped(pid: int) -> None:
    """The child must no longer be waitable: it was already reaped."""
    with pytest.raises(ChildProcessError):
        os.waitpid(pid, os.WNOHANG)


class TestLineDelivery:
    """Lines arrive in order, without newlines, followed by the exit status."""

    def test_printf_two_lines(self) -> None:
        stream = ProcessStream(["printf", "a\\nb\\n"], merge=False)

        assert list(stream) == ["a", "b"]
        assert stream.exit_status == ExitStatus(code=0)
        assert stream.exit_status.success
        assert stream.state is StreamState.EXITED

    def test_next_line_and_has_more(self) -> None:
        stream = ProcessStream(["printf", "one\\ntwo"])

        assert stream.has_more()
        assert stream.has_more()  # lookahead does not consume
        assert stream.next_line() == "one"
        assert stream.next_line() == "two"  # final line without newline
        assert not stream.has_more()
        assert stream.next_line() is None
        assert stream.next_line() is None

    def test_exit_status_unknown_while_running(self) -> None:
        stream = ProcessStream(["printf", "x\\n"])
        assert stream.state is StreamState.RUNNING
        assert stream.exit_status is None
        stream.next_line()
        stream.next_line()
        assert stream.exit_status is not None

    def test_blank_lines_are_preserved(self) -> None:
        stream = ProcessStream(["printf", "a\\n\\nb\\n"])
        assert list(stream) == ["a", "", "b"]

    def test_satisfies_stream_protocol(self) -> None:
        stream = ProcessStream(["true"])
        assert isinstance(stream, Stream)
        stream.close()


class TestExitStatus:
    """Exit codes and signals are data, not errors."""

    def test_false_has_no_lines_and_fails(self, registry: SourceRegistry) -> None:
        stream = registry.make_stream({"exec": ["false"]})

        assert list(stream) == []
        assert stream.exit_status is not None
        assert not stream.exit_status.success
        assert stream.exit_status.code != 0
        assert stream.exit_status.exited_normally

    def test_specific_exit_code(self) -> None:
        stream = ProcessStream(["sh", "-c", "echo done; exit 3"])
        assert list(stream) == ["done"]
        assert stream.exit_status == ExitStatus(code=3)
        assert stream.exit_status.shell_code == 3

    def test_from_returncode(self) -> None:
        assert ExitStatus.from_returncode(0) == ExitStatus(code=0)
        assert ExitStatus.from_returncode(-15) == ExitStatus(signal=15)
        assert ExitStatus(signal=15).shell_code == 143
        assert not ExitStatus(signal=15).exited_normally
        assert not ExitStatus(signal=15).success


class TestMerge:
    """merge decides whether stderr joins the stream."""

    def test_merge_includes_both_channels(self) -> None:
        stream = ProcessStream(["sh", "-c", INTERLEAVED], merge=True)
        lines = list(stream)

        # Cross-channel order is whatever the OS delivered.
        assert sorted(lines) == ["err1", "err2", "out1", "out2"]
        assert lines.index("out1") < lines.index("out2")
        assert lines.index("err1") < lines.index("err2")

    def test_no_merge_only_stdout(self, capfd: pytest.CaptureFixture[str]) -> None:
        stream = ProcessStream(["sh", "-c", INTERLEAVED], merge=False)

        assert list(stream) == ["out1", "out2"]
        # stderr is inherited, not swallowed
        assert "err1" in capfd.readouterr().err


class TestReaping:
    """The child is reaped exactly once whatever the consumer does."""

    def test_drained_stream_is_reaped(self) -> None:
        stream = ProcessStream(["printf", "a\\n"])
        pid = stream.pid
        list(stream)

        assert stream.is_reaped
        assert_reaped(pid)

    def test_close_after_drain_is_harmless(self) -> None:
        stream = ProcessStream(["true"])
        list(stream)
        stream.close()
        stream.close()
        assert stream.state is StreamState.CLOSED
        assert stream.exit_status == ExitStatus(code=0)

    def test_early_close_reaps_writer(self) -> None:
        stream = ProcessStream(["sh", "-c", "while :; do echo y; done"])
        pid = stream.pid
        assert stream.next_line() == "y"

        stream.close()

        assert stream.state is StreamState.CLOSED
        assert stream.exit_status is not None
        assert not stream.exit_status.success
        assert stream.next_line() is None
        assert_reaped(pid)

    def test_close_with_terminate(self) -> None:
        stream = ProcessStream(["sleep", "30"], terminate_timeout=5.0)
        pid = stream.pid

        stream.close(terminate=True)

        assert stream.exit_status == ExitStatus(signal=signal.SIGTERM)
        assert_reaped(pid)

    def test_explicit_terminate_then_drain(self) -> None:
        stream = ProcessStream(["sleep", "30"])
        stream.terminate()
        assert list(stream) == []
        assert stream.exit_status.signal == signal.SIGTERM

    def test_kill_escalation_when_terminate_is_ignored(self) -> None:
        stream = ProcessStream(
            ["sh", "-c", "trap '' TERM; echo ready; while :; do sleep 1; done"],
            terminate_timeout=0.5,
        )
        pid = stream.pid
        assert stream.next_line() == "ready"

        stream.close(terminate=True)

        assert stream.exit_status == ExitStatus(signal=signal.SIGKILL)
        assert_reaped(pid)

    def test_context_manager_closes(self) -> None:
        with ProcessStream(["printf", "a\\nb\\n"]) as stream:
            assert stream.next_line() == "a"
        assert stream.state is StreamState.CLOSED
        assert stream.is_reaped

    def test_context_manager_terminates_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with ProcessStream(["sleep", "30"]) as stream:
                raise RuntimeError("consumer failed")
        assert stream.exit_status == ExitStatus(signal=signal.SIGTERM)

    def test_abandoned_stream_is_reaped(self) -> None:
        stream = ProcessStream(["sleep", "30"])
        pid = stream.pid
        del stream
        gc.collect()

        assert_reaped(pid)

    @patch("tapstream.streams.process.subprocess.Popen")
    def test_wait_called_once(self, mock_popen: MagicMock) -> None:
        proc = mock_popen.return_value
        proc.stdout = io.StringIO("a\nb\n")
        proc.pid = 4242
        proc.wait.return_value = 0
        proc.poll.return_value = 0

        stream = ProcessStream(["anything"])
        assert list(stream) == ["a", "b"]
        stream.close()
        stream.close(terminate=True)
        del stream
        gc.collect()

        proc.wait.assert_called_once()

    @patch("tapstream.streams.process.subprocess.Popen")
    def test_wait_called_once_on_early_close(self, mock_popen: MagicMock) -> None:
        proc = mock_popen.return_value
        proc.stdout = io.StringIO("a\nb\nc\n")
        proc.wait.return_value = -13

        stream = ProcessStream(["anything"])
        assert stream.next_line() == "a"
        stream.close()

        proc.wait.assert_called_once()
        assert stream.exit_status == ExitStatus(signal=13)
        assert proc.stdout.closed


class TestCreation:
    """Creation either returns a running stream or fails outright."""

    @patch("tapstream.streams.process.subprocess.Popen")
    def test_empty_command(self, mock_popen: MagicMock) -> None:
        mock_popen.return_value.wait.return_value = 0
        with pytest.raises(NoCommandError, match="no command found"):
            ProcessStream([])
        mock_popen.assert_not_called()

    def test_missing_binary(self) -> None:
        with pytest.raises(SpawnError) as exc_info:
            ProcessStream(["/nonexistent/tapstream-test-binary"])
        assert isinstance(exc_info.value, OSError)
        assert exc_info.value.command == ("/nonexistent/tapstream-test-binary",)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_non_executable_script(self, make_script, registry: SourceRegistry) -> None:
        script = make_script("plain.sh", executable=False)
        with pytest.raises(SpawnError):
            registry.make_stream(str(script))

    def test_popen_arguments(self) -> None:
        with patch("tapstream.streams.process.subprocess.Popen") as mock_popen:
            mock_popen.return_value.stdout = io.StringIO("")
            mock_popen.return_value.wait.return_value = 0
            stream = ProcessStream(("a b", "c;d"), merge=True, encoding="latin-1")
            list(stream)

        args, kwargs = mock_popen.call_args
        assert args == (["a b", "c;d"],)
        assert "shell" not in kwargs
        assert kwargs["stderr"] is not None
        assert kwargs["encoding"] == "latin-1"

    def test_setup_and_teardown_hooks(self) -> None:
        events: list[tuple[str, object]] = []
        stream = ProcessStream(
            ["printf", "x\\n"],
            setup=lambda s: events.append(("setup", s.pid)),
            teardown=lambda s: events.append(("teardown", s.exit_status)),
        )
        list(stream)
        stream.close()

        assert events == [("setup", None), ("teardown", ExitStatus(code=0))]


class TestEndToEnd:
    """Full path from raw source through the registry to output lines."""

    def test_executable_script(self, make_script, registry: SourceRegistry) -> None:
        script = make_script("basic.sh", body='echo "1..2"\necho "ok 1"\necho "ok 2"\n')
        with registry.make_stream(str(script)) as stream:
            lines = list(stream)
        assert lines == ["1..2", "ok 1", "ok 2"]
        assert stream.exit_status.success

    def test_exec_spec_with_merge(self, registry: SourceRegistry) -> None:
        stream = registry.make_stream({"exec": ["sh", "-c", "echo ok 1; echo '# diag' >&2"]}, merge=True)
        assert sorted(stream) == ["# diag", "ok 1"]

    def test_merge_requested_for_prebuilt_source(self, registry: SourceRegistry) -> None:
        source = Source.coerce({"exec": ["sh", "-c", "echo out; echo err >&2"]})
        with registry.make_stream(source, merge=True) as stream:
            assert sorted(stream) == ["err", "out"]
