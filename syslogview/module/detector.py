"""
Module Type Detection

The dashboard can be attached to either variant of the forwarding module.
They expose the same endpoints but different counters and configuration
fields; the variant is recognised once, from the shape of the first stats
payload, and fixed for the rest of the session.

Classes:
    ModuleKind: The recognised module variants
    ModuleProfile: Config fields and chart datasets for one variant
    ModuleTypeDetector: One-shot classification against the live module
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Tuple

from syslogview.constants import COLLECTOR_MARKER
from syslogview.stats.rates import DatasetSpec, make_dataset

logger = logging.getLogger(__name__)


class ModuleKind(Enum):
    UNKNOWN = "unknown"
    DISPATCHER = "dispatcher"
    COLLECTOR = "collector"


@dataclass(frozen=True)
class ModuleProfile:
    """
    Field set used by the dashboard for one module variant.

    Attributes:
        kind (ModuleKind): The variant this profile describes
        config_fields (Tuple[str, ...]): Configuration fields shown in the editor, in order
        datasets (Tuple[DatasetSpec, ...]): Lines drawn on the statistics chart
    """

    kind: ModuleKind
    config_fields: Tuple[str, ...]
    datasets: Tuple[DatasetSpec, ...]


DISPATCHER_PROFILE = ModuleProfile(
    kind=ModuleKind.DISPATCHER,
    config_fields=(
        "DestinationHost",
        "DestinationPort",
        "Verbose",
    ),
    datasets=(
        make_dataset("Incoming bytes/s", "rgba(75,192,192,1)", "CompressedNetBytes"),
        make_dataset("Outgoing bytes/s", "rgba(192,75,75,1)", "RawNetBytes"),
    ),
)

COLLECTOR_PROFILE = ModuleProfile(
    kind=ModuleKind.COLLECTOR,
    config_fields=(
        "Destination",
        "ForwardPriorityThreshold",
        "DumpPriorityThreshold",
        "SyslogPort",
        "BufferSizeThreshold",
        "BufferTimeoutMS",
        "Verbose",
    ),
    datasets=(
        make_dataset("Outgoing bytes/s", "rgba(75,192,192,1)", "CompressedNetBytes"),
        make_dataset("Incoming bytes/s", "rgba(192,75,75,1)", "RawDiskBytes"),
    ),
)

_PROFILES = {
    ModuleKind.DISPATCHER: DISPATCHER_PROFILE,
    ModuleKind.COLLECTOR: COLLECTOR_PROFILE,
}


def classify(sample: Mapping[str, Any]) -> ModuleKind:
    """Collectors report disk reads; anything else is a Dispatcher."""
    return ModuleKind.COLLECTOR if COLLECTOR_MARKER in sample else ModuleKind.DISPATCHER


def profile_for(kind: ModuleKind) -> ModuleProfile:
    """
    Raises:
        ValueError: For ``ModuleKind.UNKNOWN``
    """
    try:
        return _PROFILES[kind]
    except KeyError:
        raise ValueError(f"No profile for module kind {kind.value!r}") from None


class ModuleTypeDetector:
    """
    Classifies the attached module from a single stats fetch.

    Once a fetch succeeds the kind is fixed; later calls to :meth:`detect`
    return it without contacting the module again.
    """

    def __init__(self, client: Any):
        self.client = client
        self.kind = ModuleKind.UNKNOWN

    @property
    def detected(self) -> bool:
        return self.kind is not ModuleKind.UNKNOWN

    async def detect(self) -> ModuleKind:
        if self.detected:
            return self.kind

        sample = await self.client.stats()
        if sample is None:
            logger.debug("Module type still unknown: stats unavailable")
            return self.kind

        self.kind = classify(sample)
        logger.info(f"Attached module identified as {self.kind.value}")
        return self.kind
