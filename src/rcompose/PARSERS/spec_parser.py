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
Parser for rcompose documents.

A document is rendered as a Jinja2 template before it is read as YAML:

    namespace: shop
    containers:
      web:
        image: "nginx:{{ nginx_version }}"
        links: ["db:database"]
        ports: ["8080:80"]
      db:
        image: postgres:13
"""
import logging
import os
from typing import Any, Dict, Optional

import jinja2
import yaml
from dotenv import dotenv_values
from pydantic import ValidationError

from ..exceptions import SpecParseError
from ..MODELS.compose_config import ComposeConfig
from ..MODELS.container_spec import ContainerName, ContainerSpec, ContainerState
from .label_recovery import YAML_ERRORS

logger = logging.getLogger(__name__)

_NET_CONTAINER_PREFIX = "container:"


class SpecParser:
    """
    Parser for rcompose documents.
    """
    def __init__(self, variables: Optional[Dict[str, str]] = None, env_file: Optional[str] = None):
        """
        Initializes the parser with the variables available to templates.

        :param variables: Template variables. They override those from env_file.
        :param env_file: Optional .env file to read template variables from.
        """
        self.variables: Dict[str, Any] = {}
        if env_file:
            self.variables.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        self.variables.update(variables or {})
        self._jinja = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)

    def parse(self, path: str) -> ComposeConfig:
        """
        Parses a document from a path.

        :param path: Path to the document.
        :return: Parsed configuration.
        """
        with open(path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content, source=path)

    def parse_from_string(self, content: str, source: str = "<string>") -> ComposeConfig:
        """
        Parses a document from a string.

        :param content: Template content of the document.
        :param source: Name of the document, used in error messages.
        :return: Parsed configuration.
        :raises SpecParseError: If the document cannot be rendered, read or validated.
        """
        try:
            context = {"env": dict(os.environ)}
            context.update(self.variables)
            rendered = self._jinja.from_string(content).render(context)
        except jinja2.TemplateError as e:
            raise SpecParseError(source, f"template error: {e}") from e
        except Exception as e:
            # Expressions can fail at render time, "{{ 1 / 0 }}"
            raise SpecParseError(source, f"template error: {type(e).__name__}: {e}") from e

        try:
            data = yaml.safe_load(rendered)
        except YAML_ERRORS as e:
            raise SpecParseError(source, f"invalid YAML: {e}") from e

        if not data:
            data = {}
        if not isinstance(data, dict):
            raise SpecParseError(source, "expected a mapping at the top level")

        namespace = data.get('namespace')
        if namespace is not None and not isinstance(namespace, str):
            raise SpecParseError(source, "'namespace' must be a string")
        containers_data = data.get('containers') or {}
        if not isinstance(containers_data, dict):
            raise SpecParseError(source, "'containers' must be a mapping")

        containers = {}
        for name, spec_data in containers_data.items():
            try:
                spec = ContainerSpec.model_validate(spec_data or {})
            except ValidationError as e:
                raise SpecParseError(source, f"container {name}: {e}") from e
            containers[str(name)] = self._apply_defaults(spec, namespace)

        logger.debug("Loaded %d container(s) from %s", len(containers), source)
        return ComposeConfig(namespace=namespace, containers=containers)

    def _apply_defaults(self, spec: ContainerSpec, namespace: Optional[str]) -> ContainerSpec:
        """
        Fills in the desired state and qualifies container references with the namespace.

        :param spec: The container spec as written.
        :param namespace: The namespace of the document.
        :return: The completed spec.
        """
        update: Dict[str, Any] = {}
        if spec.state is None:
            update['state'] = ContainerState.RUNNING

        if namespace:
            if spec.links:
                update['links'] = [link.with_namespace(namespace) for link in spec.links]
            if spec.volumes_from:
                update['volumes_from'] = [name.with_namespace(namespace) for name in spec.volumes_from]
            if spec.net and spec.net.startswith(_NET_CONTAINER_PREFIX):
                target = ContainerName.model_validate(spec.net[len(_NET_CONTAINER_PREFIX):])
                update['net'] = f"{_NET_CONTAINER_PREFIX}{target.with_namespace(namespace)}"

        return spec.model_copy(update=update)
