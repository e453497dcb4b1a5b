# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Converter projecting a container spec into the Engine API "HostConfig" structure.

Restart and logging defaults are resolved by the standalone functions
resolve_restart_policy and resolve_log_config.
"""
import logging
from typing import Dict, List, Optional

from ..MODELS.api_config import HostConfig, HostPortBinding, LogConfig, RestartPolicyConfig, UlimitConfig
from ..MODELS.container_spec import ContainerSpec, ContainerState, RestartPolicy, RestartPolicyCondition
from .to_run_config import is_bind_mount

logger = logging.getLogger(__name__)

DEFAULT_LOG_DRIVER = "json-file"

# Rotate logs of the default driver: 5 files of 100 MB each
DEFAULT_LOG_OPTIONS = {
    "max-file": "5",
    "max-size": "100m",
}


def resolve_restart_policy(state: Optional[ContainerState],
                           restart: Optional[RestartPolicy]) -> Optional[RestartPolicyConfig]:
    """
    Picks the effective restart policy.

    An explicit policy is used as given. A container meant to be running
    with no policy restarts always, with unlimited retries (0). Otherwise
    no policy is set.

    :param state: The desired state of the container.
    :param restart: The explicitly set restart policy, if any.
    :return: The restart policy, or None to leave it to the daemon.
    """
    if restart is not None:
        return RestartPolicyConfig(name=restart.name.value,
                                   maximum_retry_count=restart.maximum_retry_count)
    if state == ContainerState.RUNNING:
        logger.debug("No restart policy for a running container, defaulting to 'always'")
        return RestartPolicyConfig(name=RestartPolicyCondition.ALWAYS.value, maximum_retry_count=0)
    return None


def resolve_log_config(log_driver: Optional[str],
                       log_opt: Optional[Dict[str, str]]) -> LogConfig:
    """
    Picks the effective logging configuration.

    With neither a driver nor options, the json-file driver with rotation is
    used. Options given without a driver apply to the json-file driver. An
    explicit driver is used as given, with options only if they were set.

    :param log_driver: The explicitly set log driver, if any.
    :param log_opt: The explicitly set log options, if any.
    :return: The logging configuration.
    """
    if log_driver is None and log_opt is None:
        return LogConfig(type=DEFAULT_LOG_DRIVER, config=dict(DEFAULT_LOG_OPTIONS))
    return LogConfig(type=log_driver if log_driver is not None else DEFAULT_LOG_DRIVER,
                     config=dict(log_opt) if log_opt is not None else None)


class HostConfigConverter:
    """
    Builds the host resource configuration of a container.
    """

    def __init__(self, spec: ContainerSpec):
        """
        Initializes the converter.

        :param spec: The container spec to project.
        """
        self.spec = spec

    def convert(self) -> HostConfig:
        """
        Projects the spec, filling in the restart and logging defaults.

        :return: The host configuration.
        """
        spec = self.spec
        return HostConfig(
            dns=spec.dns,
            extra_hosts=spec.add_host,
            restart_policy=resolve_restart_policy(spec.state, spec.restart),
            memory=spec.memory,
            memory_swap=spec.memory_swap,
            network_mode=spec.net,
            pid_mode=spec.pid,
            uts_mode=spec.uts,
            cpuset_cpus=spec.cpuset,
            binds=self._binds(),
            privileged=spec.privileged,
            publish_all_ports=spec.publish_all_ports,
            port_bindings=self._port_bindings(),
            log_config=resolve_log_config(spec.log_driver, spec.log_opt),
            links=[str(link) for link in spec.links] if spec.links else None,
            volumes_from=[str(name) for name in spec.volumes_from] if spec.volumes_from else None,
            ulimits=self._ulimits(),
        )

    def _binds(self) -> Optional[List[str]]:
        binds = [v for v in self.spec.volumes or [] if is_bind_mount(v)]
        return binds or None

    def _port_bindings(self) -> Optional[Dict[str, List[HostPortBinding]]]:
        if not self.spec.ports:
            return None
        # One container port may be published on several host ports
        bindings: Dict[str, List[HostPortBinding]] = {}
        for port in self.spec.ports:
            bindings.setdefault(port.port, []).append(
                HostPortBinding(host_ip=port.host_ip, host_port=port.host_port))
        return bindings

    def _ulimits(self) -> Optional[List[UlimitConfig]]:
        if not self.spec.ulimits:
            return None
        return [UlimitConfig(name=u.name, soft=u.soft, hard=u.hard) for u in self.spec.ulimits]
