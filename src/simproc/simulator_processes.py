"""
Classify processes that belong to simulators.

Three categories matter to callers:

* the application process, stamped at launch with the simulator's UDID and
  optionally identified by the binary it runs (the Simulator app itself is
  listed alongside tagged processes);
* the platform-service process, one per installed toolchain;
* the session-launcher process, which this toolchain does not start and which
  is recognised by the per-UDID directory in its launch path.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .config import CorrelatorSettings
from .predicates import (
    Predicate,
    binary_matches,
    has_identity_tag,
    identity_tag_in,
    process_name_equals,
    udid_in_launch_path,
    under_toolchain,
)
from .process_correlator import ProcessCorrelator
from .process_models import (
    BinaryDescriptor,
    LookupOutcome,
    ProcessDescriptor,
    SimulatorIdentity,
    ToolchainConfiguration,
    WaitOutcome,
)

logger = logging.getLogger(__name__)

SIMULATOR_APPLICATION_NAME = "Simulator"
SERVICE_PROCESS_NAME = "com.apple.CoreSimulator.CoreSimulatorService"
SESSION_LAUNCHER_NAME = "launchd_sim"


def application_process_predicate(
    udids: Iterable[str],
    *,
    binary: Optional[BinaryDescriptor] = None,
    data_directory: Optional[str] = None,
    configuration: Optional[ToolchainConfiguration] = None,
) -> Predicate:
    udids = tuple(udids)
    predicate = identity_tag_in(udids)
    if binary is not None:
        predicate = binary_matches(binary, data_directory, udids) | predicate
    if configuration is not None:
        predicate = predicate & under_toolchain(configuration)
    return predicate


def service_process_predicate(configuration: ToolchainConfiguration) -> Predicate:
    return process_name_equals(SERVICE_PROCESS_NAME) & under_toolchain(configuration)


def session_launcher_predicate(udids: Iterable[str]) -> Predicate:
    return udid_in_launch_path(udids)


class SimulatorProcessFetcher:
    """Looks up the processes of simulators, optionally scoped to one toolchain."""

    def __init__(
        self,
        correlator: Optional[ProcessCorrelator] = None,
        *,
        configuration: Optional[ToolchainConfiguration] = None,
    ):
        self.correlator = correlator if correlator is not None else ProcessCorrelator()
        self.configuration = configuration

    @classmethod
    def from_settings(cls, settings: Optional[CorrelatorSettings] = None) -> "SimulatorProcessFetcher":
        """Build a fetcher from environment-backed settings."""
        if settings is None:
            settings = CorrelatorSettings.from_env()
        correlator = ProcessCorrelator(
            poll_interval_seconds=settings.poll_interval_seconds,
            default_timeout_seconds=settings.wait_timeout_seconds,
        )
        return cls(correlator, configuration=settings.toolchain())

    def _scoped(self, predicate: Predicate) -> Predicate:
        if self.configuration is None:
            return predicate
        return predicate & under_toolchain(self.configuration)

    def application_processes(self) -> List[ProcessDescriptor]:
        """Every Simulator.app instance and every process launched for any simulator."""
        predicate = process_name_equals(SIMULATOR_APPLICATION_NAME) | has_identity_tag()
        return self.correlator.matching(self._scoped(predicate))

    def service_processes(self) -> List[ProcessDescriptor]:
        """Platform-service processes of every installed toolchain."""
        return self.correlator.matching(process_name_equals(SERVICE_PROCESS_NAME))

    def session_launcher_processes(self) -> List[ProcessDescriptor]:
        return self.correlator.matching(process_name_equals(SESSION_LAUNCHER_NAME))

    def application_predicate_for(
        self, simulator: SimulatorIdentity, *, binary: Optional[BinaryDescriptor] = None
    ) -> Predicate:
        return application_process_predicate(
            [simulator.udid],
            binary=binary,
            data_directory=simulator.data_directory,
            configuration=self.configuration,
        )

    def application_process_for(
        self, simulator: SimulatorIdentity, *, binary: Optional[BinaryDescriptor] = None
    ) -> LookupOutcome:
        return self.correlator.lookup(self.application_predicate_for(simulator, binary=binary))

    async def wait_for_application_process(
        self,
        simulator: SimulatorIdentity,
        timeout_seconds: Optional[float] = None,
        *,
        binary: Optional[BinaryDescriptor] = None,
    ) -> WaitOutcome:
        """Wait for the application process that a launch request just started."""
        logger.debug("Waiting for application process of simulator %s", simulator.udid)
        return await self.correlator.wait_for(
            self.application_predicate_for(simulator, binary=binary),
            timeout_seconds,
        )

    def service_process(self) -> LookupOutcome:
        """The service process for the configured toolchain.

        Raises:
            ValueError: If the fetcher has no toolchain configuration.
        """
        if self.configuration is None:
            raise ValueError("service_process requires a toolchain configuration")
        return self.correlator.lookup(service_process_predicate(self.configuration))

    def session_launcher_process_for(self, simulator: SimulatorIdentity) -> LookupOutcome:
        return self.correlator.lookup(session_launcher_predicate([simulator.udid]))


__all__ = [
    "SERVICE_PROCESS_NAME",
    "SIMULATOR_APPLICATION_NAME",
    "SESSION_LAUNCHER_NAME",
    "SimulatorProcessFetcher",
    "application_process_predicate",
    "service_process_predicate",
    "session_launcher_predicate",
]
