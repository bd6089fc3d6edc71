"""Multi-probe remote inspection."""

from flotilla.probes.codec import (
    PROBE_CODE,
    PROBE_NAME_END,
    PROBE_START,
    decode_frames,
    encode_frames,
    encode_script,
)
from flotilla.probes.fleet import DEFAULT_PROBE_CONCURRENCY, FleetResult, get_server_info
from flotilla.probes.parsers import make_text_parser, parse_json, parse_json_lines, parse_text
from flotilla.probes.prober import HOST_KEY, HostResult, create_host_result, probe_host
from flotilla.probes.registry import ProbeRegistry, default_registry

__all__ = [
    "DEFAULT_PROBE_CONCURRENCY",
    "FleetResult",
    "HOST_KEY",
    "HostResult",
    "PROBE_CODE",
    "PROBE_NAME_END",
    "PROBE_START",
    "ProbeRegistry",
    "create_host_result",
    "decode_frames",
    "default_registry",
    "encode_frames",
    "encode_script",
    "get_server_info",
    "make_text_parser",
    "parse_json",
    "parse_json_lines",
    "parse_text",
    "probe_host",
]
