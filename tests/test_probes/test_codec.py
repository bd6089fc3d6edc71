"""Tests for probe script encoding and output decoding."""

import asyncio

import pytest

from flotilla.models import Probe, ProbeFrame
from flotilla.probes.codec import (
    PROBE_CODE,
    PROBE_NAME_END,
    PROBE_START,
    decode_frames,
    encode_frames,
    encode_script,
)
from flotilla.probes.parsers import parse_text


@pytest.fixture
def probes() -> list[Probe]:
    return [
        Probe(name="first", command="echo one", parser=parse_text),
        Probe(name="second", command="echo two", parser=parse_text),
    ]


class TestEncodeScript:
    """encode_script builds one framed script for all probes."""

    def test_each_probe_is_framed_in_order(self, probes: list[Probe]) -> None:
        script = encode_script(probes)

        first = script.index(f'echo "{PROBE_START}first{PROBE_NAME_END}"')
        second = script.index(f'echo "{PROBE_START}second{PROBE_NAME_END}"')
        assert first < script.index("echo one") < second < script.index("echo two")

    def test_merges_stderr_and_reports_status(self, probes: list[Probe]) -> None:
        script = encode_script(probes)

        assert script.count("2>&1") == 2
        assert script.count(f'echo "{PROBE_CODE}"') == 2

    def test_status_is_captured_before_code_marker(self) -> None:
        script = encode_script([Probe(name="p", command="false", parser=parse_text)])

        capture = script.index("=$?")
        marker = script.index(f'echo "{PROBE_CODE}"')
        assert capture < marker

    def test_empty_probe_list(self) -> None:
        assert encode_script([]) == ""


class TestDecodeFrames:
    """decode_frames splits combined output into per-probe frames."""

    def test_round_trip(self) -> None:
        frames = [
            ProbeFrame(name="swarm", output='{"LocalNodeState":"active"}', exit_code=0),
            ProbeFrame(name="images", output="", exit_code=0),
            ProbeFrame(name="token", output="Error response from daemon", exit_code=1),
        ]

        assert decode_frames(encode_frames(frames)) == frames

    def test_drops_preamble(self) -> None:
        frames = [ProbeFrame(name="a", output="x", exit_code=0)]
        output = "Welcome to Ubuntu\nLast login: today\n" + encode_frames(frames)

        assert decode_frames(output) == frames

    def test_trims_output_and_tolerates_trailing_newlines(self) -> None:
        output = (
            f"{PROBE_START}a{PROBE_NAME_END}\n\n  value  \n\n"
            f"{PROBE_CODE}\n0\n\n\n"
        )

        assert decode_frames(output) == [ProbeFrame(name="a", output="value", exit_code=0)]

    def test_output_with_marker_fragments(self) -> None:
        noisy = "<============ ==========> mup-var-code done"
        frames = [
            ProbeFrame(name="a", output=noisy, exit_code=0),
            ProbeFrame(name="b", output="ok", exit_code=2),
        ]

        assert decode_frames(encode_frames(frames)) == frames

    def test_multiline_output(self) -> None:
        frames = [ProbeFrame(name="lines", output='{"a":1}\n{"b":2}', exit_code=0)]

        assert decode_frames(encode_frames(frames)) == frames

    def test_missing_code_marker_only_affects_that_probe(self) -> None:
        output = (
            f"{PROBE_START}broken{PROBE_NAME_END}\npartial output\n"
            f"{PROBE_START}fine{PROBE_NAME_END}\nok\n{PROBE_CODE}\n0\n"
        )

        frames = decode_frames(output)

        assert frames == [
            ProbeFrame(name="broken", output="partial output", exit_code=None),
            ProbeFrame(name="fine", output="ok", exit_code=0),
        ]

    def test_non_numeric_code(self) -> None:
        output = f"{PROBE_START}a{PROBE_NAME_END}\nout\n{PROBE_CODE}\nnope\n"

        assert decode_frames(output) == [ProbeFrame(name="a", output="out", exit_code=None)]

    def test_frame_without_name_terminator_is_dropped(self) -> None:
        output = (
            f"{PROBE_START}garbled output\n"
            f"{PROBE_START}a{PROBE_NAME_END}\nout\n{PROBE_CODE}\n0\n"
        )

        assert decode_frames(output) == [ProbeFrame(name="a", output="out", exit_code=0)]

    def test_empty_output(self) -> None:
        assert decode_frames("") == []

    def test_frame_count_matches_probe_count(self) -> None:
        frames = [ProbeFrame(name=f"p{i}", output=str(i), exit_code=0) for i in range(7)]

        decoded = decode_frames(encode_frames(frames))

        assert [f.name for f in decoded] == [f"p{i}" for i in range(7)]


@pytest.mark.asyncio
async def test_encoded_script_runs_in_posix_shell() -> None:
    """The generated script decodes correctly when run by a real shell."""
    probes = [
        Probe(name="greeting", command="echo hello", parser=parse_text),
        Probe(name="failing", command="sh -c 'echo oops >&2; exit 3'", parser=parse_text),
        Probe(name="silent", command="true", parser=parse_text),
    ]

    proc = await asyncio.create_subprocess_shell(
        encode_script(probes),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    stdout, _ = await proc.communicate()

    assert decode_frames(stdout.decode()) == [
        ProbeFrame(name="greeting", output="hello", exit_code=0),
        ProbeFrame(name="failing", output="oops", exit_code=3),
        ProbeFrame(name="silent", output="", exit_code=0),
    ]
