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
Exceptions raised while loading, embedding and recovering container specs.
"""


class RcomposeError(Exception):
    """Base exception for all rcompose errors."""

    pass


class NotManagedError(RcomposeError):
    """
    Raised when a container carries no embedded spec.

    The container was not created by rcompose and should be treated as
    foreign by whoever reconciles it.
    """

    def __init__(self, container_id: str, label: str):
        self.container_id = container_id
        self.label = label
        super().__init__(
            f"Expecting container {container_id[:12]} to have label '{label}' to parse it"
        )


class MalformedConfigError(RcomposeError):
    """Raised when the embedded spec payload of a container cannot be parsed."""

    def __init__(self, container_name: str, reason: str):
        self.container_name = container_name
        self.reason = reason
        super().__init__(
            f"Failed to parse YAML config for container {container_name}, error: {reason}"
        )


class SpecParseError(RcomposeError):
    """Raised when a compose document cannot be rendered or parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to parse {source}: {reason}")
