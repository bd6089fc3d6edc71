"""Probe registry.

Maps probe names to their command and parser. Names double as keys in
HostResult dicts and are embedded in the probe script, so they are limited
to identifier characters.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any

from flotilla.errors import ProbeParseError
from flotilla.models import Probe, ProbeFrame
from flotilla.probes.parsers import parse_json, parse_json_lines, parse_text

logger = logging.getLogger(__name__)

PROBE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class ProbeRegistry:
    """Ordered, name-unique collection of probes."""

    def __init__(self, probes: Iterable[Probe] = ()) -> None:
        self._probes: dict[str, Probe] = {}
        for probe in probes:
            self.register(probe)

    def register(self, probe: Probe) -> None:
        """Add a probe.

        Raises:
            ValueError: If the name is taken or not a plain identifier
        """
        if not PROBE_NAME_PATTERN.match(probe.name):
            raise ValueError(f"Invalid probe name: {probe.name!r}")
        if probe.name in self._probes:
            raise ValueError(f"Probe already registered: {probe.name}")
        self._probes[probe.name] = probe
        logger.debug("Registered probe: %s", probe.name)

    def get(self, name: str) -> Probe | None:
        return self._probes.get(name)

    def names(self) -> list[str]:
        return list(self._probes)

    def select(self, names: Iterable[str]) -> "ProbeRegistry":
        """Return a registry holding only the named probes, in given order.

        Raises:
            KeyError: If a name is not registered
        """
        selected = []
        for name in names:
            if name not in self._probes:
                raise KeyError(f"Unknown probe: {name}")
            selected.append(self._probes[name])
        return ProbeRegistry(selected)

    def parse(self, frame: ProbeFrame) -> Any:
        """Run the frame's probe parser, absorbing every failure into None."""
        probe = self._probes.get(frame.name)
        if probe is None:
            logger.debug("No probe registered for frame %s", frame.name)
            return None
        if frame.exit_code is None:
            return None

        try:
            return probe.parser(frame.output, frame.exit_code)
        except ProbeParseError as e:
            logger.debug("Probe %s output not parseable: %s", frame.name, e)
        except Exception:
            logger.exception("Parser for probe %s raised", frame.name)
        return None

    def __iter__(self) -> Iterator[Probe]:
        return iter(self._probes.values())

    def __len__(self) -> int:
        return len(self._probes)

    def __contains__(self, name: object) -> bool:
        return name in self._probes


def default_registry() -> ProbeRegistry:
    """Docker and Swarm state probes used by deploy commands."""
    return ProbeRegistry(
        [
            Probe(
                name="swarm",
                command="docker info --format '{{json .Swarm}}'",
                parser=parse_json,
            ),
            Probe(
                name="swarm_nodes",
                command="docker node inspect $(docker node ls -q) --format '{{json .}}'",
                parser=parse_json_lines,
            ),
            Probe(
                name="swarm_token",
                command="docker swarm join-token worker -q",
                parser=parse_text,
            ),
            Probe(
                name="swarm_services",
                command="docker service ls --format '{{json .}}'",
                parser=parse_json_lines,
            ),
            Probe(
                name="images",
                command="docker images --format '{{json .}}'",
                parser=parse_json_lines,
            ),
        ]
    )
