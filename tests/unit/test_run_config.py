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
Unit tests for the run configuration converter.
"""
import yaml
from rcompose.CONVERTERS.to_run_config import RunConfigConverter, is_bind_mount
from rcompose.MODELS.container_spec import ContainerSpec
from rcompose.PARSERS.label_recovery import CONFIG_LABEL


def convert(**fields):
    return RunConfigConverter(ContainerSpec.model_validate(fields)).convert()


class TestRunConfigConverter:
    """Tests for RunConfigConverter."""

    def test_empty_spec(self):
        """Test that nothing is emitted for an empty spec."""
        assert convert().to_api() == {}

    def test_scalars_copied(self):
        """Test that scalar fields are copied under their API names."""
        config = convert(
            image="nginx:1.25",
            cmd=["nginx", "-g", "daemon off;"],
            entrypoint=["/docker-entrypoint.sh"],
            workdir="/usr/share/nginx",
            user="www-data",
            hostname="web",
            domainname="example.com",
            memory="64m",
            memory_swap="128m",
            cpuset="0",
            cpu_shares=512,
            network_disabled=False,
        )
        assert config.to_api() == {
            "Image": "nginx:1.25",
            "Cmd": ["nginx", "-g", "daemon off;"],
            "Entrypoint": ["/docker-entrypoint.sh"],
            "WorkingDir": "/usr/share/nginx",
            "User": "www-data",
            "Hostname": "web",
            "Domainname": "example.com",
            "Memory": 64 * 1024 * 1024,
            "MemorySwap": 128 * 1024 * 1024,
            "Cpuset": "0",
            "CpuShares": 512,
            "NetworkDisabled": False,
        }

    def test_exposed_ports_union(self):
        """Test that published ports are exposed and duplicates collapse."""
        config = convert(expose=["80", "9000/udp"], ports=["8080:80", "8081:80", "443"])
        assert config.exposed_ports == {"80/tcp", "443/tcp", "9000/udp"}
        assert config.to_api()["ExposedPorts"] == {"443/tcp": {}, "80/tcp": {}, "9000/udp": {}}

    def test_exposed_ports_absent(self):
        assert convert(expose=[], ports=[]).exposed_ports is None

    def test_env_sorted(self):
        """Test that the environment is rendered as sorted KEY=VALUE strings."""
        config = convert(env={"PATH": "/bin", "DEBUG": "1", "A": "x=y"})
        assert config.env == ["A=x=y", "DEBUG=1", "PATH=/bin"]

    def test_empty_env_is_kept(self):
        assert convert(env={}).env == []

    def test_anonymous_volumes(self):
        """Test that only volumes without a colon are anonymous volumes."""
        config = convert(volumes=["/data", "/host/path:/container/path:ro", "/cache", "/data"])
        assert config.volumes == {"/data", "/cache"}
        assert config.to_api()["Volumes"] == {"/cache": {}, "/data": {}}

    def test_only_bind_mounts(self):
        assert convert(volumes=["/a:/b"]).volumes is None

    def test_labels(self):
        assert convert(labels={"team": "web"}).labels == {"team": "web"}

    def test_embed(self):
        """Test that the serialized spec is added to the labels."""
        spec = ContainerSpec(image="redis", labels={"team": "cache"})
        config = RunConfigConverter(spec, embed=True).convert()
        assert config.labels["team"] == "cache"
        assert yaml.safe_load(config.labels[CONFIG_LABEL])["image"] == "redis"
        # The spec itself is untouched
        assert CONFIG_LABEL not in spec.labels


def test_is_bind_mount():
    assert is_bind_mount("/host:/container")
    assert is_bind_mount("data:/var/lib/data:rw")
    assert not is_bind_mount("/var/lib/data")
