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
Models for the Docker Engine API structures a container spec is projected into.

Attributes use Python names; the aliases are the wire names of the Engine
API "Config" and "HostConfig" objects. A field left as None is not emitted
by to_api(), so the daemon applies its own default.
"""
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ApiModel(BaseModel):
    """
    Base for all Engine API structures.
    """
    model_config = ConfigDict(populate_by_name=True)

    def to_api(self) -> Dict[str, Any]:
        """
        Returns the wire representation, leaving out every unset field.
        """
        return self.model_dump(by_alias=True, exclude_none=True)


class RestartPolicyConfig(ApiModel):
    name: str = Field(alias="Name")
    maximum_retry_count: int = Field(0, alias="MaximumRetryCount")


class HostPortBinding(ApiModel):
    host_ip: Optional[str] = Field(None, alias="HostIp")
    host_port: Optional[str] = Field(None, alias="HostPort")


class LogConfig(ApiModel):
    type: str = Field(alias="Type")
    config: Optional[Dict[str, str]] = Field(None, alias="Config")


class UlimitConfig(ApiModel):
    name: str = Field(alias="Name")
    soft: int = Field(alias="Soft")
    hard: int = Field(alias="Hard")


class RunConfig(ApiModel):
    """
    Process launch configuration, the "Config" object of a container create call.
    """
    image: Optional[str] = Field(None, alias="Image")
    cmd: Optional[List[str]] = Field(None, alias="Cmd")
    entrypoint: Optional[List[str]] = Field(None, alias="Entrypoint")
    working_dir: Optional[str] = Field(None, alias="WorkingDir")
    user: Optional[str] = Field(None, alias="User")
    hostname: Optional[str] = Field(None, alias="Hostname")
    domainname: Optional[str] = Field(None, alias="Domainname")

    memory: Optional[int] = Field(None, alias="Memory")
    memory_swap: Optional[int] = Field(None, alias="MemorySwap")
    cpuset: Optional[str] = Field(None, alias="Cpuset")
    cpu_shares: Optional[int] = Field(None, alias="CpuShares")
    network_disabled: Optional[bool] = Field(None, alias="NetworkDisabled")

    exposed_ports: Optional[Set[str]] = Field(None, alias="ExposedPorts")
    env: Optional[List[str]] = Field(None, alias="Env")
    volumes: Optional[Set[str]] = Field(None, alias="Volumes")
    labels: Optional[Dict[str, str]] = Field(None, alias="Labels")

    @field_serializer("exposed_ports", "volumes")
    def _serialize_set(self, value: Optional[Set[str]]) -> Optional[Dict[str, Dict]]:
        # The Engine API encodes sets as objects with empty values
        if value is None:
            return None
        return {item: {} for item in sorted(value)}


class HostConfig(ApiModel):
    """
    Host resource configuration, the "HostConfig" object of a container create call.
    """
    dns: Optional[List[str]] = Field(None, alias="Dns")
    extra_hosts: Optional[List[str]] = Field(None, alias="ExtraHosts")
    restart_policy: Optional[RestartPolicyConfig] = Field(None, alias="RestartPolicy")
    memory: Optional[int] = Field(None, alias="Memory")
    memory_swap: Optional[int] = Field(None, alias="MemorySwap")
    network_mode: Optional[str] = Field(None, alias="NetworkMode")
    pid_mode: Optional[str] = Field(None, alias="PidMode")
    uts_mode: Optional[str] = Field(None, alias="UTSMode")
    cpuset_cpus: Optional[str] = Field(None, alias="CpusetCpus")
    binds: Optional[List[str]] = Field(None, alias="Binds")
    privileged: Optional[bool] = Field(None, alias="Privileged")
    publish_all_ports: Optional[bool] = Field(None, alias="PublishAllPorts")
    port_bindings: Optional[Dict[str, List[HostPortBinding]]] = Field(None, alias="PortBindings")
    log_config: Optional[LogConfig] = Field(None, alias="LogConfig")
    links: Optional[List[str]] = Field(None, alias="Links")
    volumes_from: Optional[List[str]] = Field(None, alias="VolumesFrom")
    ulimits: Optional[List[UlimitConfig]] = Field(None, alias="Ulimits")
