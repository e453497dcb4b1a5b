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
Embedding of container specs into container labels, and their recovery.

rcompose stores the whole spec of a container it creates in a single label.
Reading that label back gives the spec the container was created from,
which is what a running container gets compared against.
"""
import logging
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import MalformedConfigError, NotManagedError
from ..MODELS.container_spec import ContainerSpec

logger = logging.getLogger(__name__)

# Label holding the serialized spec
CONFIG_LABEL = "rcompose-config"

# Labels starting with this prefix are internal bookkeeping
INTERNAL_LABEL_PREFIX = "rcompose-"

# safe_load raises more than YAMLError: bad !!int/!!float scalars give
# ValueError, a bad !!timestamp AttributeError, deep nesting RecursionError
YAML_ERRORS = (yaml.YAMLError, ValueError, AttributeError, RecursionError)


def embed_spec(spec: ContainerSpec) -> Dict[str, str]:
    """
    Serializes a spec into the labels that carry it on a container.

    :param spec: The spec to embed.
    :return: A label map holding the serialized spec under CONFIG_LABEL.
    """
    data = spec.model_dump(mode="json", exclude_none=True)
    payload = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
    return {CONFIG_LABEL: payload}


def strip_internal_labels(spec: ContainerSpec) -> ContainerSpec:
    """
    Returns a copy of the spec without labels that use the internal prefix.
    """
    if not spec.labels:
        return spec

    labels = {k: v for k, v in spec.labels.items() if not k.startswith(INTERNAL_LABEL_PREFIX)}
    if len(labels) == len(spec.labels):
        return spec

    logger.debug("Dropping %d internal label(s) from recovered spec",
                 len(spec.labels) - len(labels))
    return spec.model_copy(update={"labels": labels})


def spec_from_labels(labels: Optional[Mapping[str, str]],
                     container_id: str,
                     container_name: Optional[str] = None) -> ContainerSpec:
    """
    Recovers the spec a container was created from out of its labels.

    :param labels: The labels of the container.
    :param container_id: The container ID, reported when the spec label is missing.
    :param container_name: The container name, reported when the spec is malformed.
    :return: The recovered spec, without internal labels.
    :raises NotManagedError: If the container carries no spec label.
    :raises MalformedConfigError: If the spec label cannot be parsed.
    """
    if not labels or CONFIG_LABEL not in labels:
        raise NotManagedError(container_id, CONFIG_LABEL)

    name = container_name or container_id
    try:
        data = yaml.safe_load(labels[CONFIG_LABEL])
    except YAML_ERRORS as e:
        raise MalformedConfigError(name, str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedConfigError(name, f"expected a mapping, got {type(data).__name__}")

    try:
        spec = ContainerSpec.model_validate(data)
    except ValidationError as e:
        raise MalformedConfigError(name, str(e)) from e

    return strip_internal_labels(spec)


def spec_from_container(container: Mapping[str, Any]) -> ContainerSpec:
    """
    Recovers the spec of a container from its inspect record.

    :param container: A container as returned by the Engine API inspect call.
    :return: The recovered spec.
    """
    config = container.get("Config") or {}
    name = (container.get("Name") or "").lstrip("/") or None
    return spec_from_labels(config.get("Labels"), container.get("Id", ""), name)
