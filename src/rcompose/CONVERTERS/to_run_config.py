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
Converter projecting a container spec into the Engine API "Config" structure.
"""
import logging
from typing import List, Optional, Set

from ..MODELS.api_config import RunConfig
from ..MODELS.container_spec import ContainerSpec
from ..PARSERS.label_recovery import embed_spec

logger = logging.getLogger(__name__)


def is_bind_mount(volume: str) -> bool:
    """
    Whether a volume entry maps a host path ("source:target[:mode]") rather
    than declaring an anonymous volume.
    """
    return ":" in volume


class RunConfigConverter:
    """
    Builds the process launch configuration of a container.
    """

    def __init__(self, spec: ContainerSpec, embed: bool = False):
        """
        Initializes the converter.

        :param spec: The container spec to project.
        :param embed: Whether to add the serialized spec to the labels.
        """
        self.spec = spec
        self.embed = embed

    def convert(self) -> RunConfig:
        """
        Projects the spec. Fields the spec leaves unset stay unset.

        :return: The run configuration.
        """
        spec = self.spec
        return RunConfig(
            image=spec.image,
            cmd=spec.cmd,
            entrypoint=spec.entrypoint,
            working_dir=spec.workdir,
            user=spec.user,
            hostname=spec.hostname,
            domainname=spec.domainname,
            memory=spec.memory,
            memory_swap=spec.memory_swap,
            cpuset=spec.cpuset,
            cpu_shares=spec.cpu_shares,
            network_disabled=spec.network_disabled,
            exposed_ports=self._exposed_ports(),
            env=self._env(),
            volumes=self._volumes(),
            labels=self._labels(),
        )

    def _exposed_ports(self) -> Optional[Set[str]]:
        # Published ports are exposed as well
        ports = set(self.spec.expose or [])
        ports.update(binding.port for binding in self.spec.ports or [])
        return ports or None

    def _env(self) -> Optional[List[str]]:
        if self.spec.env is None:
            return None
        return [f"{key}={self.spec.env[key]}" for key in sorted(self.spec.env)]

    def _volumes(self) -> Optional[Set[str]]:
        volumes = {v for v in self.spec.volumes or [] if not is_bind_mount(v)}
        return volumes or None

    def _labels(self):
        if not self.embed:
            return self.spec.labels
        logger.debug("Embedding spec into container labels")
        return {**(self.spec.labels or {}), **embed_spec(self.spec)}
