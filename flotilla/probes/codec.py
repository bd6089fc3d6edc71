"""Multi-probe script encoding and combined-output decoding.

Many probes run in a single remote shell invocation. Each probe's output is
framed by sentinels so one combined stdout/stderr stream can be split back
into per-probe frames:

    <PROBE_START><name><PROBE_NAME_END>
    <merged stdout+stderr of the probe command>
    <PROBE_CODE>
    <exit status>

The sentinel literals are the wire format shared with already deployed
tooling and must not change.
"""

import logging
from collections.abc import Iterable

from flotilla.errors import ProbeDecodeError
from flotilla.models import Probe, ProbeFrame

logger = logging.getLogger(__name__)

PROBE_START = "<============mup-var-start========"
PROBE_NAME_END = "================mup-var-stop=====>"
PROBE_CODE = "mup-var-code======="

_STATUS_VAR = "FLOTILLA_PROBE_STATUS"


def encode_probe(name: str, command: str) -> str:
    """Render the script fragment for one probe."""
    return (
        f'\necho "{PROBE_START}{name}{PROBE_NAME_END}"\n'
        f"{{ {command}\n}} 2>&1\n"
        f"{_STATUS_VAR}=$?\n"
        f'echo "{PROBE_CODE}"\n'
        f"echo ${_STATUS_VAR}\n"
    )


def encode_script(probes: Iterable[Probe]) -> str:
    """Build one shell script that runs every probe in order.

    Args:
        probes: Probes to embed, in execution order

    Returns:
        Script text suitable for a single remote shell invocation
    """
    return "".join(encode_probe(probe.name, probe.command) for probe in probes)


def encode_frames(frames: Iterable[ProbeFrame]) -> str:
    """Render the combined output a probe script would print for frames.

    Frames with no exit code are rendered without their code marker, the
    way a truncated remote run looks.
    """
    parts = []
    for frame in frames:
        part = f"{PROBE_START}{frame.name}{PROBE_NAME_END}\n{frame.output}\n"
        if frame.exit_code is not None:
            part += f"{PROBE_CODE}\n{frame.exit_code}\n"
        parts.append(part)
    return "".join(parts)


def _decode_chunk(chunk: str) -> ProbeFrame:
    """Decode the text following one start sentinel.

    Raises:
        ProbeDecodeError: If the name suffix, code marker or status is missing.
    """
    name, sep, body = chunk.partition(PROBE_NAME_END)
    if not sep:
        raise ProbeDecodeError("probe frame has no name terminator")
    name = name.strip()

    # The code marker is always the last one in a frame
    output, sep, code_text = body.rpartition(PROBE_CODE)
    if not sep:
        raise ProbeDecodeError(
            f"probe {name!r} has no exit code marker",
            name=name,
            output=body.strip(),
        )

    try:
        exit_code = int(code_text.strip())
    except ValueError:
        raise ProbeDecodeError(
            f"probe {name!r} has a non-numeric exit code",
            name=name,
            output=output.strip(),
        ) from None

    return ProbeFrame(name=name, output=output.strip(), exit_code=exit_code)


def decode_frames(output: str) -> list[ProbeFrame]:
    """Split combined probe script output into frames.

    Never raises for malformed content. A frame whose name cannot be read is
    dropped; a frame whose status cannot be read is returned with
    ``exit_code=None``.

    Args:
        output: Combined stdout/stderr of an encoded probe script

    Returns:
        Frames in the order they appear in the output
    """
    chunks = output.split(PROBE_START)
    # Anything before the first start sentinel is shell preamble (motd etc.)
    chunks.pop(0)

    frames: list[ProbeFrame] = []
    for chunk in chunks:
        try:
            frames.append(_decode_chunk(chunk))
        except ProbeDecodeError as e:
            if e.name is None:
                logger.warning("Dropping unreadable probe frame: %s", e)
                continue
            logger.warning("Malformed probe frame: %s", e)
            frames.append(ProbeFrame(name=e.name, output=e.output, exit_code=None))
    return frames
